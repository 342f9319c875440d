from __future__ import annotations

import time

from loguru import logger

from uniswap_v4_kit.adapters.uniswap_v4_adapter.types import Pool, QuoteResponse
from uniswap_v4_kit.core.constants.contracts import ContractName
from uniswap_v4_kit.core.errors import QuoteError
from uniswap_v4_kit.core.registry import Instance


async def get_quote(
    pool: Pool,
    amount_in: int,
    zero_for_one: bool,
    instance: Instance,
    *,
    hook_data: bytes = b"",
) -> QuoteResponse:
    """Simulate an exact-input single-hop swap against the V4 Quoter.

    Read-only `eth_call`; a revert surfaces as QuoteError and is never retried.
    """
    quoter = instance.contract(ContractName.QUOTER)
    params = (
        pool.pool_key.as_tuple(),
        bool(zero_for_one),
        int(amount_in),
        bytes(hook_data),
    )
    try:
        amount_out, gas_estimate = await quoter.functions.quoteExactInputSingle(
            params
        ).call(block_identifier="latest")
    except Exception as exc:
        logger.error(f"Error simulating quote: {exc}")
        raise QuoteError(f"Failed to fetch quote: {exc}") from exc

    return QuoteResponse(
        amount_out=int(amount_out),
        estimated_gas_used=int(gas_estimate),
        timestamp=int(time.time() * 1000),
    )
