from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger
from web3 import AsyncWeb3

Web3CallFactory = Callable[[], Awaitable[Any]]

# raised by web3 providers that cannot send JSON-RPC batches
BATCH_UNSUPPORTED_ERRORS: tuple[type[BaseException], ...] = (NotImplementedError,)


def _discard_batch(batch: Any) -> None:
    try:
        batch.cancel()
    except Exception as exc:
        logger.debug(f"Ignoring error while cancelling JSON-RPC batch: {exc}")


async def _execute_batch(web3: AsyncWeb3, factories: tuple[Web3CallFactory, ...]):
    batch = web3.batch_requests()
    try:
        for factory in factories:
            batch.add(factory())
        return tuple(await batch.async_execute())
    except Exception:
        _discard_batch(batch)
        raise


async def batch_web3_calls(
    web3: AsyncWeb3,
    *call_factories: Web3CallFactory,
    fallback_to_gather: bool = True,
) -> tuple[Any, ...]:
    """
    Execute several reads as one JSON-RPC batch.

    Usage:
        slot0, liquidity = await batch_web3_calls(
            web3,
            lambda: state_view.functions.getSlot0(pid).call(block_identifier="latest"),
            lambda: state_view.functions.getLiquidity(pid).call(block_identifier="latest"),
        )

    Results come back in factory order. Either every read succeeds or the call
    raises. A failed read inside the batch is never re-sent. Only a transport
    that rejects batching outright (`BATCH_UNSUPPORTED_ERRORS`) is served by
    `asyncio.gather` over fresh coroutines; the gather error is chained to the
    batch error.
    """

    if not call_factories:
        return ()

    try:
        return await _execute_batch(web3, call_factories)
    except BATCH_UNSUPPORTED_ERRORS as batch_exc:
        if not fallback_to_gather:
            raise
        logger.debug(
            f"Transport cannot batch {len(call_factories)} calls ({batch_exc}); "
            "sending them individually"
        )
        try:
            return tuple(await asyncio.gather(*(f() for f in call_factories)))
        except Exception as gather_exc:
            raise gather_exc from batch_exc


async def batch_contract_reads(
    web3: AsyncWeb3,
    *functions: Any,
    block_identifier: str | int = "latest",
) -> tuple[Any, ...]:
    """`batch_web3_calls` over bound contract functions, all read at one block tag."""

    def _factory(fn: Any) -> Web3CallFactory:
        return lambda: fn.call(block_identifier=block_identifier)

    return await batch_web3_calls(web3, *(_factory(fn) for fn in functions))
