from __future__ import annotations

import pytest
from eth_abi import encode as abi_encode
from eth_abi.exceptions import InsufficientDataBytes

from uniswap_v4_kit.adapters.uniswap_v4_adapter.pools import (
    get_pool_key_from_pool_id,
    resolve_pool,
)
from uniswap_v4_kit.adapters.uniswap_v4_adapter.positions import resolve_position
from uniswap_v4_kit.adapters.uniswap_v4_adapter.quotes import get_quote
from uniswap_v4_kit.adapters.uniswap_v4_adapter.tokens import (
    decode_string_or_bytes32,
    resolve_tokens,
)
from uniswap_v4_kit.core.constants import ZERO_ADDRESS
from uniswap_v4_kit.core.constants.contracts import ContractName
from uniswap_v4_kit.core.errors import (
    ConfigurationError,
    PoolNotFoundError,
    PositionNotFoundError,
    QuoteError,
    TokenResolutionError,
    ValidationError,
)
from uniswap_v4_kit.core.utils.uniswap_v4 import PoolKey
from uniswap_v4_kit.testing.fakes import (
    USDC,
    WETH,
    make_pool,
    register_erc20,
    register_pool,
    register_position,
)

SQRT_PRICE = 1 << 96
KEY = PoolKey.build(currency_a=USDC, currency_b=WETH, fee=3000, tick_spacing=60)


@pytest.fixture
def live_pool(fake_web3, instance):
    register_pool(
        fake_web3, instance, KEY, sqrt_price_x96=SQRT_PRICE, tick=0, liquidity=10**20
    )
    return KEY


class TestResolveTokens:
    @pytest.mark.asyncio
    async def test_preserves_order_and_fills_native(self, fake_web3, instance):
        tokens = await resolve_tokens([WETH, ZERO_ADDRESS, USDC], instance)

        assert [t.symbol for t in tokens] == ["WETH", "ETH", "USDC"]
        assert tokens[1].is_native
        assert tokens[1].decimals == 18
        assert tokens[2].decimals == 6
        assert all(t.chain_id == 1 for t in tokens)
        assert fake_web3.batches_executed == 1

    @pytest.mark.asyncio
    async def test_native_only_makes_no_calls(self, fake_web3, instance):
        tokens = await resolve_tokens([ZERO_ADDRESS], instance)
        assert tokens[0].name == "Ether"
        assert fake_web3.calls == []

    @pytest.mark.asyncio
    async def test_bytes32_metadata(self, fake_web3, instance):
        mkr = "0x9f8F72aA9304c8B593d555F12eF6589cC3A579A2"
        register_erc20(
            fake_web3,
            mkr,
            symbol=b"MKR".ljust(32, b"\x00"),
            name=b"Maker".ljust(32, b"\x00"),
            decimals=18,
        )
        token, usdc = await resolve_tokens([mkr, USDC], instance)
        assert (token.symbol, token.name) == ("MKR", "Maker")
        assert (usdc.symbol, usdc.name) == ("USDC", "USD Coin")
        assert fake_web3.batches_executed == 1

    @pytest.mark.asyncio
    async def test_failure_is_wrapped(self, fake_web3, instance):
        fake_web3.register(USDC, "decimals", RuntimeError("boom"))
        with pytest.raises(TokenResolutionError, match="Failed to fetch token data: boom"):
            await resolve_tokens([USDC, WETH], instance)

    @pytest.mark.asyncio
    async def test_failed_read_is_not_resent(self, fake_web3, instance):
        fake_web3.register(WETH, "name", RuntimeError("execution reverted"))
        with pytest.raises(TokenResolutionError, match="execution reverted"):
            await resolve_tokens([USDC, WETH], instance)

        assert fake_web3.batches_executed == 1
        assert fake_web3.call_count("symbol") == 2
        assert fake_web3.call_count("name") == 2


class TestDecodeStringOrBytes32:
    def test_abi_string(self):
        assert decode_string_or_bytes32(abi_encode(["string"], ["Wrapped Ether"])) == (
            "Wrapped Ether"
        )

    def test_bytes32(self):
        assert decode_string_or_bytes32(b"MKR".ljust(32, b"\x00")) == "MKR"

    def test_short_return_data_raises(self):
        with pytest.raises(InsufficientDataBytes):
            decode_string_or_bytes32(b"")


class TestResolvePool:
    @pytest.mark.asyncio
    async def test_token_order_does_not_matter(self, live_pool, instance):
        a = await resolve_pool(USDC, WETH, instance)
        b = await resolve_pool(WETH, USDC, instance)

        assert a.pool_id == b.pool_id == KEY.pool_id
        assert (a.token0.symbol, a.token1.symbol) == ("USDC", "WETH")
        assert a.sqrt_price_x96 == SQRT_PRICE
        assert a.tick == 0
        assert a.liquidity == 10**20

    @pytest.mark.asyncio
    async def test_missing_pool(self, live_pool, instance):
        with pytest.raises(PoolNotFoundError, match="Pool does not exist"):
            await resolve_pool(USDC, WETH, instance, fee=500)

    @pytest.mark.asyncio
    async def test_initialized_pool_with_zero_liquidity(self, fake_web3, instance):
        register_pool(fake_web3, instance, KEY, sqrt_price_x96=SQRT_PRICE, tick=0, liquidity=0)
        pool = await resolve_pool(USDC, WETH, instance)
        assert pool.liquidity == 0

    @pytest.mark.asyncio
    async def test_requires_instance(self):
        with pytest.raises(ConfigurationError):
            await resolve_pool(USDC, WETH, None)

    @pytest.mark.asyncio
    async def test_unknown_fee_needs_tick_spacing(self, live_pool, instance):
        with pytest.raises(ValidationError):
            await resolve_pool(USDC, WETH, instance, fee=1234)


class TestPoolKeyFromPoolId:
    @pytest.mark.asyncio
    async def test_reads_stored_key(self, live_pool, instance):
        key = await get_pool_key_from_pool_id("0x" + KEY.pool_id.hex(), instance)
        assert key == KEY

    @pytest.mark.asyncio
    async def test_unknown_pool_id(self, live_pool, instance):
        with pytest.raises(PoolNotFoundError):
            await get_pool_key_from_pool_id(b"\x22" * 32, instance)

    @pytest.mark.asyncio
    async def test_rejects_short_id(self, instance):
        with pytest.raises(ValidationError):
            await get_pool_key_from_pool_id("0xabcd", instance)


class TestResolvePosition:
    @pytest.mark.asyncio
    async def test_resolves_pool_and_ticks(self, fake_web3, instance, live_pool):
        register_position(
            fake_web3,
            instance,
            KEY,
            token_id=1,
            tick_lower=-60,
            tick_upper=60,
            liquidity=10**18,
        )
        position = await resolve_position("1", instance)

        assert position.token_id == 1
        assert (position.tick_lower, position.tick_upper) == (-60, 60)
        assert position.liquidity == 10**18
        assert position.pool.fee == 3000
        assert position.pool.tick_spacing == 60
        assert (position.token0.symbol, position.token1.symbol) == ("USDC", "WETH")
        assert position.pool_id == KEY.pool_id
        assert position.amount0 > 0 and position.amount1 > 0

    @pytest.mark.asyncio
    async def test_zero_liquidity_is_not_found(self, fake_web3, instance, live_pool):
        register_position(
            fake_web3, instance, KEY, token_id=1, tick_lower=-60, tick_upper=60, liquidity=10
        )
        with pytest.raises(PositionNotFoundError, match="Position 2 not found") as exc_info:
            await resolve_position(2, instance)
        assert exc_info.value.token_id == 2


class TestGetQuote:
    @pytest.mark.asyncio
    async def test_quote(self, fake_web3, instance):
        seen = []

        def quote(params):
            seen.append(params)
            return params[2] * 2, 120_000

        fake_web3.register(
            instance.get_contract_address(ContractName.QUOTER),
            "quoteExactInputSingle",
            quote,
        )
        response = await get_quote(make_pool(KEY), 1_000, True, instance)

        assert response.amount_out == 2_000
        assert response.estimated_gas_used == 120_000
        assert response.timestamp > 10**12
        assert seen == [(KEY.as_tuple(), True, 1_000, b"")]

    @pytest.mark.asyncio
    async def test_revert_is_wrapped(self, fake_web3, instance):
        fake_web3.register(
            instance.get_contract_address(ContractName.QUOTER),
            "quoteExactInputSingle",
            RuntimeError("execution reverted"),
        )
        with pytest.raises(QuoteError, match="Failed to fetch quote: execution reverted"):
            await get_quote(make_pool(KEY), 1_000, False, instance)
