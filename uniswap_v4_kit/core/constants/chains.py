from __future__ import annotations

from dataclasses import dataclass

CHAIN_ID_ETHEREUM = 1
CHAIN_ID_OPTIMISM = 10
CHAIN_ID_BSC = 56
CHAIN_ID_UNICHAIN = 130
CHAIN_ID_POLYGON = 137
CHAIN_ID_ZKSYNC = 324
CHAIN_ID_WORLDCHAIN = 480
CHAIN_ID_BASE = 8453
CHAIN_ID_ARBITRUM = 42161
CHAIN_ID_CELO = 42220
CHAIN_ID_AVALANCHE = 43114
CHAIN_ID_BLAST = 81457
CHAIN_ID_ZORA = 7777777


@dataclass(frozen=True)
class NativeCurrency:
    name: str
    symbol: str
    decimals: int = 18


@dataclass(frozen=True)
class ChainInfo:
    chain_id: int
    name: str
    native_currency: NativeCurrency
    rpc_url: str


_ETHER = NativeCurrency(name="Ether", symbol="ETH")

CHAINS: dict[int, ChainInfo] = {
    CHAIN_ID_ETHEREUM: ChainInfo(
        CHAIN_ID_ETHEREUM, "ethereum", _ETHER, "https://eth.merkle.io"
    ),
    CHAIN_ID_OPTIMISM: ChainInfo(
        CHAIN_ID_OPTIMISM, "optimism", _ETHER, "https://mainnet.optimism.io"
    ),
    CHAIN_ID_BSC: ChainInfo(
        CHAIN_ID_BSC,
        "bsc",
        NativeCurrency(name="BNB", symbol="BNB"),
        "https://56.rpc.thirdweb.com",
    ),
    CHAIN_ID_UNICHAIN: ChainInfo(
        CHAIN_ID_UNICHAIN, "unichain", _ETHER, "https://mainnet.unichain.org"
    ),
    CHAIN_ID_POLYGON: ChainInfo(
        CHAIN_ID_POLYGON,
        "polygon",
        NativeCurrency(name="POL", symbol="POL"),
        "https://polygon-rpc.com",
    ),
    CHAIN_ID_ZKSYNC: ChainInfo(
        CHAIN_ID_ZKSYNC, "zksync", _ETHER, "https://mainnet.era.zksync.io"
    ),
    CHAIN_ID_WORLDCHAIN: ChainInfo(
        CHAIN_ID_WORLDCHAIN,
        "worldchain",
        _ETHER,
        "https://worldchain-mainnet.g.alchemy.com/public",
    ),
    CHAIN_ID_BASE: ChainInfo(CHAIN_ID_BASE, "base", _ETHER, "https://mainnet.base.org"),
    CHAIN_ID_ARBITRUM: ChainInfo(
        CHAIN_ID_ARBITRUM, "arbitrum", _ETHER, "https://arb1.arbitrum.io/rpc"
    ),
    CHAIN_ID_CELO: ChainInfo(
        CHAIN_ID_CELO,
        "celo",
        NativeCurrency(name="CELO", symbol="CELO"),
        "https://forno.celo.org",
    ),
    CHAIN_ID_AVALANCHE: ChainInfo(
        CHAIN_ID_AVALANCHE,
        "avalanche",
        NativeCurrency(name="Avalanche", symbol="AVAX"),
        "https://api.avax.network/ext/bc/C/rpc",
    ),
    CHAIN_ID_BLAST: ChainInfo(CHAIN_ID_BLAST, "blast", _ETHER, "https://rpc.blast.io"),
    CHAIN_ID_ZORA: ChainInfo(CHAIN_ID_ZORA, "zora", _ETHER, "https://rpc.zora.energy"),
}

CHAIN_CODE_TO_ID: dict[str, int] = {info.name: cid for cid, info in CHAINS.items()}
CHAIN_CODE_TO_ID["mainnet"] = CHAIN_ID_ETHEREUM
CHAIN_CODE_TO_ID["arbitrum-one"] = CHAIN_ID_ARBITRUM

SUPPORTED_CHAINS = sorted(CHAINS)

POA_MIDDLEWARE_CHAIN_IDS: set[int] = {
    CHAIN_ID_BSC,
    CHAIN_ID_POLYGON,
    CHAIN_ID_AVALANCHE,
}
