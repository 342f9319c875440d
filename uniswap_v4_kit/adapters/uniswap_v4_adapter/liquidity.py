"""PositionManager calldata for minting, decreasing and collecting positions.

Each builder resolves what it needs, sizes the position off-chain and returns
`MethodParameters` ready to send to the PositionManager. Nothing is signed or
broadcast here.
"""

from __future__ import annotations

from loguru import logger

from uniswap_v4_kit.adapters.uniswap_v4_adapter.deadline import get_default_deadline
from uniswap_v4_kit.adapters.uniswap_v4_adapter.models import (
    BatchPermit2Signature,
    MethodParameters,
)
from uniswap_v4_kit.adapters.uniswap_v4_adapter.positions import resolve_position
from uniswap_v4_kit.adapters.uniswap_v4_adapter.types import Pool, Position
from uniswap_v4_kit.core.constants import (
    BPS_DENOMINATOR,
    DEFAULT_SLIPPAGE_TOLERANCE_BPS,
    MSG_SENDER,
)
from uniswap_v4_kit.core.errors import (
    EncodingError,
    PoolNotFoundError,
    PositionNotFoundError,
    ValidationError,
)
from uniswap_v4_kit.core.registry import Instance
from uniswap_v4_kit.core.utils.liquidity_math import (
    PositionAmounts,
    encode_sqrt_ratio_x96,
    validate_bps,
)
from uniswap_v4_kit.core.utils.planner import PERMIT_BATCH_ABI_TYPE, V4Planner
from uniswap_v4_kit.core.utils.tick_math import (
    MAX_TICK,
    MIN_TICK,
    get_tick_at_sqrt_price,
    nearest_usable_tick,
)
from uniswap_v4_kit.core.utils.uniswap_v4 import (
    POOL_KEY_ABI_TYPE,
    encode_function_call,
    is_native_currency,
    to_hex,
)

MODIFY_LIQUIDITIES_SIGNATURE = "modifyLiquidities(bytes,uint256)"
MULTICALL_SIGNATURE = "multicall(bytes[])"
INITIALIZE_POOL_SIGNATURE = "initializePool((address,address,uint24,int24,address),uint160)"
PERMIT_BATCH_SIGNATURE = (
    "permitBatch(address,((address,uint160,uint48,uint48)[],address,uint256),bytes)"
)

ZERO_VALUE = "0x00"


def _provided(amount: int | None) -> bool:
    return amount is not None and int(amount) > 0


def encode_modify_liquidities(planner: V4Planner, deadline: int) -> bytes:
    return encode_function_call(
        MODIFY_LIQUIDITIES_SIGNATURE,
        ["bytes", "uint256"],
        [planner.finalize(), int(deadline)],
    )


def encode_initialize_pool(pool: Pool, sqrt_price_x96: int) -> bytes:
    return encode_function_call(
        INITIALIZE_POOL_SIGNATURE,
        [POOL_KEY_ABI_TYPE, "uint160"],
        [pool.pool_key.as_tuple(), int(sqrt_price_x96)],
    )


def encode_permit_batch(signature: BatchPermit2Signature) -> bytes:
    return encode_function_call(
        PERMIT_BATCH_SIGNATURE,
        ["address", PERMIT_BATCH_ABI_TYPE, "bytes"],
        [
            signature.owner,
            signature.permit_batch.as_tuple(),
            signature.signature_bytes,
        ],
    )


def encode_multicall(calls: list[bytes]) -> bytes:
    """A single call is returned as-is; several are wrapped in `multicall`."""
    if len(calls) == 1:
        return calls[0]
    return encode_function_call(MULTICALL_SIGNATURE, ["bytes[]"], [calls])


def _size_position(
    *,
    sqrt_price_x96: int,
    tick_current: int,
    tick_lower: int,
    tick_upper: int,
    amount0: int | None,
    amount1: int | None,
) -> PositionAmounts:
    base = {
        "sqrt_price_x96": sqrt_price_x96,
        "tick_current": tick_current,
        "tick_lower": tick_lower,
        "tick_upper": tick_upper,
    }
    if _provided(amount0) and _provided(amount1):
        return PositionAmounts.from_amounts(
            amount0=int(amount0),
            amount1=int(amount1),
            use_full_precision=True,
            **base,
        )
    if _provided(amount0):
        return PositionAmounts.from_amount0(
            amount0=int(amount0), use_full_precision=True, **base
        )
    return PositionAmounts.from_amount1(amount1=int(amount1), **base)


async def build_add_liquidity_call_data(
    pool: Pool,
    recipient: str,
    instance: Instance,
    *,
    amount0: int | None = None,
    amount1: int | None = None,
    tick_lower: int | None = None,
    tick_upper: int | None = None,
    slippage_tolerance: int = DEFAULT_SLIPPAGE_TOLERANCE_BPS,
    deadline: int | None = None,
    permit2_batch_signature: BatchPermit2Signature | None = None,
    hook_data: bytes = b"",
) -> MethodParameters:
    """Mint a new position in `pool`, initializing the pool first when it is empty.

    An empty pool (liquidity 0) is treated as not yet created: both amounts
    are then required and set its starting price. Tick bounds default to the
    widest usable range for the pool's tick spacing.
    """
    try:
        if not _provided(amount0) and not _provided(amount1):
            raise ValidationError("At least one of amount0 or amount1 must be provided.")

        create_pool = int(pool.liquidity) == 0
        if create_pool and not (_provided(amount0) and _provided(amount1)):
            raise ValidationError(
                "Both amount0 and amount1 are required when creating a new pool."
            )
        slippage = validate_bps(slippage_tolerance, "slippage_tolerance")

        if tick_lower is None:
            tick_lower = nearest_usable_tick(MIN_TICK, pool.tick_spacing)
        if tick_upper is None:
            tick_upper = nearest_usable_tick(MAX_TICK, pool.tick_spacing)

        if create_pool:
            sqrt_price_x96 = encode_sqrt_ratio_x96(int(amount1), int(amount0))
            tick_current = get_tick_at_sqrt_price(sqrt_price_x96)
        else:
            sqrt_price_x96 = int(pool.sqrt_price_x96)
            tick_current = int(pool.tick)

        position = _size_position(
            sqrt_price_x96=sqrt_price_x96,
            tick_current=tick_current,
            tick_lower=int(tick_lower),
            tick_upper=int(tick_upper),
            amount0=amount0,
            amount1=amount1,
        )
        if position.liquidity <= 0:
            raise EncodingError("Computed position liquidity is zero")
        amount0_max, amount1_max = position.mint_amounts_with_slippage(slippage)

        if deadline is None:
            deadline = await get_default_deadline(instance)

        planner = V4Planner().add_mint(
            pool_key=pool.pool_key,
            tick_lower=position.tick_lower,
            tick_upper=position.tick_upper,
            liquidity=position.liquidity,
            amount0_max=amount0_max,
            amount1_max=amount1_max,
            owner=recipient,
            hook_data=hook_data,
        )
        planner.add_settle_pair(pool.currency0, pool.currency1)

        # the native currency (zero address) always sorts to currency0
        value = ZERO_VALUE
        if is_native_currency(pool.currency0):
            planner.add_sweep(pool.currency0, MSG_SENDER)
            value = to_hex(amount0_max)

        calls: list[bytes] = []
        if create_pool:
            calls.append(encode_initialize_pool(pool, sqrt_price_x96))
        if permit2_batch_signature is not None:
            calls.append(encode_permit_batch(permit2_batch_signature))
        calls.append(encode_modify_liquidities(planner, deadline))
        calldata = encode_multicall(calls)
    except Exception as exc:
        logger.error(f"Error building add liquidity calldata: {exc}")
        raise

    logger.debug(
        f"Built add liquidity calldata: liquidity={position.liquidity} "
        f"ticks=[{position.tick_lower}, {position.tick_upper}] "
        f"create_pool={create_pool} calls={len(calls)}"
    )
    return MethodParameters(calldata="0x" + calldata.hex(), value=value)


async def _load_position(token_id: int | str, instance: Instance) -> Position:
    # only a missing position or pool key is "not found"; transport errors pass through
    try:
        return await resolve_position(token_id, instance)
    except PoolNotFoundError as exc:
        raise PositionNotFoundError(
            token_id, f"Position {token_id} not found: {exc}"
        ) from exc


async def build_remove_liquidity_call_data(
    token_id: int | str,
    liquidity_percentage: int,
    instance: Instance,
    *,
    slippage_tolerance: int = DEFAULT_SLIPPAGE_TOLERANCE_BPS,
    deadline: int | None = None,
    hook_data: bytes = b"",
) -> MethodParameters:
    """Decrease `liquidity_percentage` bps of a position and take both currencies.

    Proceeds go to the caller (MSG_SENDER).
    """
    try:
        liquidity_percentage = int(liquidity_percentage)
        if liquidity_percentage <= 0 or liquidity_percentage > BPS_DENOMINATOR:
            raise ValidationError(
                f"liquidity_percentage must be within (0, {BPS_DENOMINATOR}] bps, "
                f"got {liquidity_percentage}"
            )
        slippage = validate_bps(slippage_tolerance, "slippage_tolerance")

        position = await _load_position(token_id, instance)
        liquidity = position.liquidity * liquidity_percentage // BPS_DENOMINATOR
        if liquidity <= 0:
            raise EncodingError(
                f"Liquidity to remove from position {position.token_id} is zero"
            )
        amount0_min, amount1_min = (
            position.amounts()
            .with_liquidity(liquidity)
            .burn_amounts_with_slippage(slippage)
        )

        if deadline is None:
            deadline = await get_default_deadline(instance)

        planner = (
            V4Planner()
            .add_decrease(
                token_id=position.token_id,
                liquidity=liquidity,
                amount0_min=amount0_min,
                amount1_min=amount1_min,
                hook_data=hook_data,
            )
            .add_take_pair(position.pool.currency0, position.pool.currency1, MSG_SENDER)
        )
        calldata = encode_modify_liquidities(planner, deadline)
    except Exception as exc:
        logger.error(f"Error building remove liquidity calldata: {exc}")
        raise

    return MethodParameters(calldata="0x" + calldata.hex(), value=ZERO_VALUE)


async def build_collect_fees_call_data(
    token_id: int | str,
    recipient: str,
    instance: Instance,
    *,
    deadline: int | None = None,
    hook_data: bytes = b"",
) -> MethodParameters:
    """A zero-liquidity decrease, which settles accrued fees, then TAKE_PAIR to `recipient`."""
    try:
        position = await _load_position(token_id, instance)

        if deadline is None:
            deadline = await get_default_deadline(instance)

        planner = (
            V4Planner()
            .add_decrease(
                token_id=position.token_id,
                liquidity=0,
                amount0_min=0,
                amount1_min=0,
                hook_data=hook_data,
            )
            .add_take_pair(position.pool.currency0, position.pool.currency1, recipient)
        )
        calldata = encode_modify_liquidities(planner, deadline)
    except Exception as exc:
        logger.error(f"Error building collect fees calldata: {exc}")
        raise

    return MethodParameters(calldata="0x" + calldata.hex(), value=ZERO_VALUE)
