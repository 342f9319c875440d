from __future__ import annotations

from dataclasses import dataclass, fields
from enum import StrEnum
from typing import Any

from eth_utils import to_checksum_address

from uniswap_v4_kit.core.constants.chains import (
    CHAIN_ID_ARBITRUM,
    CHAIN_ID_BASE,
    CHAIN_ID_ETHEREUM,
    CHAIN_ID_UNICHAIN,
)

PERMIT2_ADDRESS = "0x000000000022D473030F116dDEE9F6B43aC78BA3"


class ContractName(StrEnum):
    POOL_MANAGER = "pool_manager"
    POSITION_MANAGER = "position_manager"
    POSITION_DESCRIPTOR = "position_descriptor"
    QUOTER = "quoter"
    STATE_VIEW = "state_view"
    UNIVERSAL_ROUTER = "universal_router"
    PERMIT2 = "permit2"


# camelCase keys accepted from config files
_CAMEL_CASE_NAMES = {
    "poolManager": ContractName.POOL_MANAGER,
    "positionManager": ContractName.POSITION_MANAGER,
    "positionDescriptor": ContractName.POSITION_DESCRIPTOR,
    "quoter": ContractName.QUOTER,
    "stateView": ContractName.STATE_VIEW,
    "universalRouter": ContractName.UNIVERSAL_ROUTER,
    "permit2": ContractName.PERMIT2,
}


@dataclass(frozen=True)
class ChainContracts:
    pool_manager: str
    position_manager: str
    position_descriptor: str
    quoter: str
    state_view: str
    universal_router: str
    permit2: str = PERMIT2_ADDRESS

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value:
                object.__setattr__(self, f.name, to_checksum_address(value))

    def address_of(self, name: ContractName | str) -> str:
        return getattr(self, ContractName(name).value)

    @classmethod
    def from_mapping(cls, mapping: dict[str, Any]) -> ChainContracts:
        kwargs: dict[str, str] = {}
        for key, value in mapping.items():
            name = _CAMEL_CASE_NAMES.get(key) or ContractName(key)
            kwargs[name.value] = str(value)
        return cls(**kwargs)


UNISWAP_V4_DEPLOYMENTS: dict[int, ChainContracts] = {
    CHAIN_ID_ETHEREUM: ChainContracts(
        pool_manager="0x000000000004444c5dc75cb358380d2e3de08a90",
        position_manager="0xbd216513d74c8cf14cf4747e6aaa6420ff64ee9e",
        position_descriptor="0xd1428ba554f4c8450b763a0b2040a4935c63f06c",
        quoter="0x52f0e24d1c21c8a0cb1e5a5dd6198556bd9e1203",
        state_view="0x7ffe42c4a5deea5b0fec41c94c136cf115597227",
        universal_router="0x66a9893cc07d91d95644aedd05d03f95e1dba8af",
    ),
    CHAIN_ID_BASE: ChainContracts(
        pool_manager="0x498581ff718922c3f8e6a244956af099b2652b2b",
        position_manager="0x7c5f5a4bbd8fd63184577525326123b519429bdc",
        position_descriptor="0x25d093633990dc94bedeed76c8f3cdaa75f3e7d5",
        quoter="0x0d5e0f971ed27fbff6c2837bf31316121532048d",
        state_view="0xa3c0c9b65bad0b08107aa264b0f3db444b867a71",
        universal_router="0x6ff5693b99212da76ad316178a184ab56d299b43",
    ),
    CHAIN_ID_ARBITRUM: ChainContracts(
        pool_manager="0x360e68faccca8ca495c1b759fd9eee466db9fb32",
        position_manager="0xd88f38f930b7952f2db2432cb002e7abbf3dd869",
        position_descriptor="0xe2023f3fa515cf070e07fd9d51c1d236e07843f4",
        quoter="0x3972c00f7ed4885e145823eb7c655375d275a1c5",
        state_view="0x76fd297e2d437cd7f76d50f01afe6160f86e9990",
        universal_router="0xa51afafe0263b40edaef0df8781ea9aa03e381a3",
    ),
    CHAIN_ID_UNICHAIN: ChainContracts(
        pool_manager="0x1f98400000000000000000000000000000000004",
        position_manager="0x4529a01c7a0410167c5740c487a8de60232617bf",
        position_descriptor="0x9fb28449a191cd8c03a1b7abfb0f5996ecf7f722",
        quoter="0x333e3c607b141b18ff6de9f258db6e77fe7491e0",
        state_view="0x86e8631a016f9068c3f085faf484ee3f5fdee8f2",
        universal_router="0xef740bf23acae26f6492b10de645d6b98dc8eaf3",
    ),
}
