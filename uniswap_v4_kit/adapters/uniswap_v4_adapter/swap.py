from __future__ import annotations

import time

from eth_utils import to_checksum_address
from loguru import logger

from uniswap_v4_kit.adapters.uniswap_v4_adapter.models import Permit2Signature
from uniswap_v4_kit.adapters.uniswap_v4_adapter.quotes import get_quote
from uniswap_v4_kit.adapters.uniswap_v4_adapter.types import Pool
from uniswap_v4_kit.core.constants import (
    DEFAULT_SLIPPAGE_TOLERANCE_BPS,
    OPEN_DELTA,
    SWAP_DEADLINE_SECONDS,
)
from uniswap_v4_kit.core.errors import ValidationError
from uniswap_v4_kit.core.registry import Instance
from uniswap_v4_kit.core.utils.liquidity_math import apply_slippage_min, validate_bps
from uniswap_v4_kit.core.utils.planner import RoutePlanner, V4Planner


def swap_direction(token_in: str, pool: Pool) -> bool:
    """True when `token_in` is the pool's currency0 (zeroForOne)."""
    token_in = token_in.lower()
    if token_in == pool.currency0.lower():
        return True
    if token_in == pool.currency1.lower():
        return False
    raise ValidationError(f"Token {token_in} is not part of the pool")


async def build_swap_call_data(
    token_in: str,
    amount_in: int,
    pool: Pool,
    recipient: str,
    instance: Instance,
    *,
    slippage_tolerance: int = DEFAULT_SLIPPAGE_TOLERANCE_BPS,
    permit2_signature: Permit2Signature | None = None,
    hook_data: bytes = b"",
) -> str:
    """UniversalRouter `execute` calldata for an exact-input single-hop swap.

    The quote is the only I/O. The minimum output is the quoted amount less
    `slippage_tolerance` bps (floored), and the deadline is five minutes from
    now. A Permit2 signature adds a PERMIT2_PERMIT command ahead of V4_SWAP.
    """
    try:
        slippage = validate_bps(slippage_tolerance, "slippage_tolerance")
        amount_in = int(amount_in)
        if amount_in <= 0:
            raise ValidationError("amount_in must be positive")
        zero_for_one = swap_direction(token_in, pool)

        quote = await get_quote(
            pool, amount_in, zero_for_one, instance, hook_data=hook_data
        )
        amount_out_minimum = apply_slippage_min(quote.amount_out, slippage)

        if zero_for_one:
            currency_in, currency_out = pool.currency0, pool.currency1
        else:
            currency_in, currency_out = pool.currency1, pool.currency0

        v4_planner = (
            V4Planner()
            .add_swap_exact_in_single(
                pool_key=pool.pool_key,
                zero_for_one=zero_for_one,
                amount_in=amount_in,
                amount_out_minimum=amount_out_minimum,
                hook_data=hook_data,
            )
            .add_settle_all(currency_in, amount_in)
            .add_take(currency_out, to_checksum_address(recipient), OPEN_DELTA)
        )

        route_planner = RoutePlanner()
        if permit2_signature is not None:
            route_planner.add_permit2_permit(
                permit2_signature.permit.as_tuple(),
                permit2_signature.signature_bytes,
            )
        route_planner.add_v4_swap(v4_planner)

        deadline = int(time.time()) + SWAP_DEADLINE_SECONDS
        calldata = route_planner.encode_execute(deadline)
    except Exception as exc:
        logger.error(f"Error building swap calldata: {exc}")
        raise

    logger.debug(
        f"Built swap calldata: zeroForOne={zero_for_one} amountIn={amount_in} "
        f"amountOutMinimum={amount_out_minimum} commands={len(route_planner)}"
    )
    return "0x" + calldata.hex()
