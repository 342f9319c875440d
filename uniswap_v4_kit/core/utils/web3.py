from contextlib import asynccontextmanager

from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.middleware import ExtraDataToPOAMiddleware

from uniswap_v4_kit.core.config import get_rpc_url
from uniswap_v4_kit.core.constants.chains import CHAINS, POA_MIDDLEWARE_CHAIN_IDS


def _default_rpc_headers() -> dict[str, str]:
    return AsyncHTTPProvider.get_request_headers()


def resolve_rpc_url(chain_id: int, rpc_url: str | None = None) -> str:
    """Explicit url, then CONFIG["rpc_urls"], then the chain's public default."""
    if rpc_url:
        return rpc_url
    configured = get_rpc_url(chain_id)
    if configured:
        return configured
    chain = CHAINS.get(int(chain_id))
    if chain is None:
        raise ValueError(f"No RPCs configured for chain ID {chain_id}")
    return chain.rpc_url


def get_web3(rpc: str, chain_id: int) -> AsyncWeb3:
    provider = AsyncHTTPProvider(
        rpc, request_kwargs={"headers": _default_rpc_headers()}
    )
    web3 = AsyncWeb3(provider)
    if chain_id in POA_MIDDLEWARE_CHAIN_IDS:
        web3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
    return web3


@asynccontextmanager
async def web3_from_chain_id(chain_id: int, rpc_url: str | None = None):
    web3 = get_web3(resolve_rpc_url(chain_id, rpc_url), chain_id)
    try:
        yield web3
    finally:
        await web3.provider.disconnect()
