from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from uniswap_v4_kit.core.utils.web3_batch import batch_contract_reads, batch_web3_calls
from uniswap_v4_kit.testing.fakes import FakeWeb3

STATE_VIEW = "0x7fFE42C4a5DEeA5b0feC41C94C136Cf115597227"
POOL_ID = b"\x11" * 32


def _state_view_web3(*, batch_supported: bool = True) -> FakeWeb3:
    web3 = FakeWeb3(batch_supported=batch_supported)
    web3.register(STATE_VIEW, "getSlot0", (2**96, 0, 0, 3000))
    web3.register(STATE_VIEW, "getLiquidity", 10**18)
    return web3


def _reads(web3: FakeWeb3):
    state_view = web3.eth.contract(address=STATE_VIEW, abi=[])
    return (
        lambda: state_view.functions.getSlot0(POOL_ID).call(block_identifier="latest"),
        lambda: state_view.functions.getLiquidity(POOL_ID).call(block_identifier="latest"),
    )


@pytest.mark.asyncio
class TestBatchWeb3Calls:
    async def test_no_factories(self):
        web3 = FakeWeb3()
        assert await batch_web3_calls(web3) == ()
        assert web3.batches_executed == 0

    async def test_results_in_factory_order(self):
        web3 = _state_view_web3()
        slot0, liquidity = await batch_web3_calls(web3, *_reads(web3))
        assert slot0 == (2**96, 0, 0, 3000)
        assert liquidity == 10**18
        assert web3.batches_executed == 1

    async def test_falls_back_to_gather(self):
        web3 = _state_view_web3(batch_supported=False)
        result = await batch_web3_calls(web3, *_reads(web3))
        assert result == ((2**96, 0, 0, 3000), 10**18)
        assert web3.call_count("getLiquidity") == 1

    async def test_no_fallback_raises_batch_error(self):
        web3 = _state_view_web3(batch_supported=False)
        with pytest.raises(NotImplementedError, match="batch requests not supported"):
            await batch_web3_calls(web3, *_reads(web3), fallback_to_gather=False)

    async def test_gather_error_chains_batch_error(self):
        web3 = FakeWeb3(batch_supported=False)
        web3.register(STATE_VIEW, "getLiquidity", ValueError("rpc down"))
        state_view = web3.eth.contract(address=STATE_VIEW)

        with pytest.raises(ValueError, match="rpc down") as exc_info:
            await batch_web3_calls(
                web3,
                lambda: state_view.functions.getLiquidity(POOL_ID).call(),
            )
        assert "not supported" in str(exc_info.value.__cause__)

    async def test_any_failed_read_fails_the_batch(self):
        web3 = _state_view_web3()
        web3.register(STATE_VIEW, "getLiquidity", RuntimeError("execution reverted"))
        with pytest.raises(RuntimeError, match="execution reverted"):
            await batch_web3_calls(web3, *_reads(web3))

        assert web3.batches_executed == 1
        assert web3.call_count("getSlot0") == 1
        assert web3.call_count("getLiquidity") == 1

    async def test_other_batch_errors_are_not_resent(self):
        batch = MagicMock()
        batch.async_execute = AsyncMock(side_effect=ConnectionError("rpc down"))
        web3 = MagicMock()
        web3.batch_requests.return_value = batch
        factory = AsyncMock(return_value=7)

        with pytest.raises(ConnectionError, match="rpc down"):
            await batch_web3_calls(web3, lambda: factory())
        factory.assert_called_once()
        batch.cancel.assert_called_once()

    async def test_cancel_error_does_not_mask_fallback(self):
        batch = MagicMock()
        batch.async_execute = AsyncMock(side_effect=NotImplementedError("batch fail"))
        batch.cancel = MagicMock(side_effect=Exception("cancel broke"))
        web3 = MagicMock()
        web3.batch_requests.return_value = batch

        factory = AsyncMock(return_value=7)
        result = await batch_web3_calls(web3, lambda: factory())
        assert result == (7,)
        batch.cancel.assert_called_once()


@pytest.mark.asyncio
class TestBatchContractReads:
    async def test_reads_bound_functions_in_order(self):
        web3 = _state_view_web3()
        state_view = web3.eth.contract(address=STATE_VIEW, abi=[])

        liquidity, slot0 = await batch_contract_reads(
            web3,
            state_view.functions.getLiquidity(POOL_ID),
            state_view.functions.getSlot0(POOL_ID),
        )

        assert liquidity == 10**18
        assert slot0 == (2**96, 0, 0, 3000)
        assert [(a.lower(), fn, args) for a, fn, args in web3.calls] == [
            (STATE_VIEW.lower(), "getLiquidity", (POOL_ID,)),
            (STATE_VIEW.lower(), "getSlot0", (POOL_ID,)),
        ]

    async def test_block_identifier_forwarded(self):
        fn = MagicMock()
        fn.call = AsyncMock(return_value=5)
        web3 = MagicMock()
        web3.batch_requests.side_effect = NotImplementedError("no batch")

        assert await batch_contract_reads(web3, fn, block_identifier=123) == (5,)
        fn.call.assert_awaited_once_with(block_identifier=123)
