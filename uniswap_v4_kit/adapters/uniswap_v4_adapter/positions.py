from __future__ import annotations

from loguru import logger

from uniswap_v4_kit.adapters.uniswap_v4_adapter.pools import resolve_pool
from uniswap_v4_kit.adapters.uniswap_v4_adapter.types import Position
from uniswap_v4_kit.core.constants.contracts import ContractName
from uniswap_v4_kit.core.errors import PositionNotFoundError
from uniswap_v4_kit.core.registry import Instance
from uniswap_v4_kit.core.utils.position_info import decode_position_info
from uniswap_v4_kit.core.utils.uniswap_v4 import PoolKey
from uniswap_v4_kit.core.utils.web3_batch import batch_contract_reads


async def resolve_position(token_id: int | str, instance: Instance) -> Position:
    """Resolve a PositionManager NFT into its pool, tick range and liquidity.

    Two round trips: the position reads, then the pool at the exact key
    recorded for the position.
    """
    token_id = int(token_id)
    posm = instance.contract(ContractName.POSITION_MANAGER)
    pool_and_info, liquidity = await batch_contract_reads(
        instance.web3,
        posm.functions.getPoolAndPositionInfo(token_id),
        posm.functions.getPositionLiquidity(token_id),
    )

    if int(liquidity) == 0:
        raise PositionNotFoundError(
            token_id, f"Position {token_id} not found: liquidity is 0"
        )

    raw_key, raw_info = pool_and_info
    key = PoolKey.from_tuple(raw_key)
    info = decode_position_info(raw_info)

    pool = await resolve_pool(
        key.currency0,
        key.currency1,
        instance,
        fee=key.fee,
        tick_spacing=key.tick_spacing,
        hooks=key.hooks,
    )
    logger.debug(
        f"Resolved position {token_id}: ticks [{info.tick_lower}, {info.tick_upper}] "
        f"liquidity={int(liquidity)}"
    )
    return Position(
        token_id=token_id,
        pool=pool,
        tick_lower=info.tick_lower,
        tick_upper=info.tick_upper,
        liquidity=int(liquidity),
    )
