from __future__ import annotations

from hexbytes import HexBytes
from loguru import logger

from uniswap_v4_kit.adapters.uniswap_v4_adapter.tokens import resolve_tokens
from uniswap_v4_kit.adapters.uniswap_v4_adapter.types import Pool
from uniswap_v4_kit.core.constants import ZERO_ADDRESS
from uniswap_v4_kit.core.constants.contracts import ContractName
from uniswap_v4_kit.core.errors import ConfigurationError, PoolNotFoundError
from uniswap_v4_kit.core.registry import Instance
from uniswap_v4_kit.core.utils.uniswap_v4 import (
    FEE_MEDIUM,
    PoolKey,
    default_tick_spacing,
    pool_id_prefix,
)
from uniswap_v4_kit.core.utils.web3_batch import batch_contract_reads


async def resolve_pool(
    token_a: str,
    token_b: str,
    instance: Instance,
    *,
    fee: int = FEE_MEDIUM,
    tick_spacing: int | None = None,
    hooks: str = ZERO_ADDRESS,
) -> Pool:
    """Resolve a pool's key and live state from two token addresses.

    Token order does not matter. A stored key with tick spacing 0 means the
    pool was never initialized and raises PoolNotFoundError; an initialized
    pool with zero liquidity is returned as-is.
    """
    if instance is None:
        raise ConfigurationError("Instance not found. Configure an instance first.")

    spacing = default_tick_spacing(fee) if tick_spacing is None else int(tick_spacing)
    key = PoolKey.build(
        currency_a=token_a,
        currency_b=token_b,
        fee=fee,
        tick_spacing=spacing,
        hooks=hooks,
    )
    token0, token1 = await resolve_tokens([key.currency0, key.currency1], instance)

    pid = key.pool_id
    posm = instance.contract(ContractName.POSITION_MANAGER)
    state_view = instance.contract(ContractName.STATE_VIEW)
    stored_key, slot0, liquidity = await batch_contract_reads(
        instance.web3,
        posm.functions.poolKeys(key.pool_id_prefix),
        state_view.functions.getSlot0(pid),
        state_view.functions.getLiquidity(pid),
    )

    if int(stored_key[3]) == 0:
        raise PoolNotFoundError("Pool does not exist")

    pool = Pool(
        pool_key=key,
        token0=token0,
        token1=token1,
        sqrt_price_x96=int(slot0[0]),
        liquidity=int(liquidity),
        tick=int(slot0[1]),
    )
    logger.debug(
        f"Resolved pool 0x{pid.hex()} {token0.symbol}/{token1.symbol} "
        f"fee={key.fee} liquidity={pool.liquidity}"
    )
    return pool


async def get_pool_key_from_pool_id(pool_id: str | bytes, instance: Instance) -> PoolKey:
    """Read the PoolKey stored by the PositionManager for a 32-byte pool id."""
    prefix = pool_id_prefix(pool_id)
    posm = instance.contract(ContractName.POSITION_MANAGER)
    raw = await posm.functions.poolKeys(prefix).call(block_identifier="latest")
    if int(raw[3]) == 0:
        raise PoolNotFoundError(f"Pool 0x{bytes(HexBytes(pool_id)).hex()} does not exist")
    return PoolKey.from_tuple(raw)
