import pytest

from uniswap_v4_kit.core.constants.chains import CHAIN_ID_ETHEREUM
from uniswap_v4_kit.core.registry import InstanceRegistry
from uniswap_v4_kit.testing.fakes import USDC, WETH, FakeWeb3, register_erc20


def pytest_configure(config):
    config.addinivalue_line("markers", "smoke: mark test as a smoke test")
    config.addinivalue_line("markers", "integration: mark test as integration")


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "smoke" in item.nodeid:
            item.add_marker(pytest.mark.smoke)


@pytest.fixture
def fake_web3() -> FakeWeb3:
    web3 = FakeWeb3()
    register_erc20(web3, USDC, symbol="USDC", name="USD Coin", decimals=6)
    register_erc20(web3, WETH, symbol="WETH", name="Wrapped Ether", decimals=18)
    return web3


@pytest.fixture
def registry() -> InstanceRegistry:
    return InstanceRegistry()


@pytest.fixture
def instance(registry, fake_web3):
    return registry.configure(CHAIN_ID_ETHEREUM, web3=fake_web3)
