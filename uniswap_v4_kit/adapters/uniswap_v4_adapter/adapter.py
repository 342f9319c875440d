from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from uniswap_v4_kit.adapters.uniswap_v4_adapter.liquidity import (
    build_add_liquidity_call_data,
    build_collect_fees_call_data,
    build_remove_liquidity_call_data,
)
from uniswap_v4_kit.adapters.uniswap_v4_adapter.models import (
    BatchPermit2Signature,
    MethodParameters,
    Permit2BatchData,
    Permit2Data,
    Permit2Signature,
)
from uniswap_v4_kit.adapters.uniswap_v4_adapter.permit2 import (
    prepare_permit2_batch_data,
    prepare_permit2_data,
)
from uniswap_v4_kit.adapters.uniswap_v4_adapter.pools import (
    get_pool_key_from_pool_id,
    resolve_pool,
)
from uniswap_v4_kit.adapters.uniswap_v4_adapter.positions import resolve_position
from uniswap_v4_kit.adapters.uniswap_v4_adapter.quotes import get_quote
from uniswap_v4_kit.adapters.uniswap_v4_adapter.swap import build_swap_call_data
from uniswap_v4_kit.adapters.uniswap_v4_adapter.tokens import resolve_tokens
from uniswap_v4_kit.adapters.uniswap_v4_adapter.types import (
    Pool,
    Position,
    QuoteResponse,
    Token,
)
from uniswap_v4_kit.core.adapters.BaseAdapter import BaseAdapter
from uniswap_v4_kit.core.adapters.decorators import status_tuple
from uniswap_v4_kit.core.constants import DEFAULT_SLIPPAGE_TOLERANCE_BPS, ZERO_ADDRESS
from uniswap_v4_kit.core.registry import Instance, InstanceRegistry
from uniswap_v4_kit.core.utils.uniswap_v4 import FEE_MEDIUM, PoolKey


class UniswapV4Adapter(BaseAdapter):
    """Uniswap v4 reads and calldata builders bound to one chain instance.

    Every async method returns ``(ok, payload)``: the result on success, the
    error message on failure.
    """

    adapter_type: str = "UNISWAP_V4"

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        registry: InstanceRegistry | None = None,
        instance: Instance | None = None,
    ) -> None:
        super().__init__(
            "uniswap_v4_adapter", config, registry=registry, instance=instance
        )

    @status_tuple
    async def get_tokens(self, addresses: Sequence[str]) -> list[Token]:
        return await resolve_tokens(addresses, self.instance)

    @status_tuple
    async def get_pool(
        self,
        token_a: str,
        token_b: str,
        *,
        fee: int = FEE_MEDIUM,
        tick_spacing: int | None = None,
        hooks: str = ZERO_ADDRESS,
    ) -> Pool:
        return await resolve_pool(
            token_a,
            token_b,
            self.instance,
            fee=fee,
            tick_spacing=tick_spacing,
            hooks=hooks,
        )

    @status_tuple
    async def get_pool_key_from_pool_id(self, pool_id: str | bytes) -> PoolKey:
        return await get_pool_key_from_pool_id(pool_id, self.instance)

    @status_tuple
    async def get_position(self, token_id: int | str) -> Position:
        return await resolve_position(token_id, self.instance)

    @status_tuple
    async def get_quote(
        self,
        pool: Pool,
        amount_in: int,
        zero_for_one: bool,
        *,
        hook_data: bytes = b"",
    ) -> QuoteResponse:
        return await get_quote(
            pool, amount_in, zero_for_one, self.instance, hook_data=hook_data
        )

    @status_tuple
    async def prepare_permit2_data(
        self,
        token: str,
        spender: str,
        owner: str,
        *,
        sig_deadline: int | None = None,
    ) -> Permit2Data:
        return await prepare_permit2_data(
            token, spender, owner, self.instance, sig_deadline=sig_deadline
        )

    @status_tuple
    async def prepare_permit2_batch_data(
        self,
        tokens: Sequence[str],
        spender: str,
        owner: str,
        *,
        sig_deadline: int | None = None,
    ) -> Permit2BatchData:
        return await prepare_permit2_batch_data(
            tokens, spender, owner, self.instance, sig_deadline=sig_deadline
        )

    @status_tuple
    async def build_swap_call_data(
        self,
        token_in: str,
        amount_in: int,
        pool: Pool,
        recipient: str,
        *,
        slippage_tolerance: int = DEFAULT_SLIPPAGE_TOLERANCE_BPS,
        permit2_signature: Permit2Signature | None = None,
        hook_data: bytes = b"",
    ) -> str:
        return await build_swap_call_data(
            token_in,
            amount_in,
            pool,
            recipient,
            self.instance,
            slippage_tolerance=slippage_tolerance,
            permit2_signature=permit2_signature,
            hook_data=hook_data,
        )

    @status_tuple
    async def build_add_liquidity_call_data(
        self,
        pool: Pool,
        recipient: str,
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
        return await build_add_liquidity_call_data(
            pool,
            recipient,
            self.instance,
            amount0=amount0,
            amount1=amount1,
            tick_lower=tick_lower,
            tick_upper=tick_upper,
            slippage_tolerance=slippage_tolerance,
            deadline=deadline,
            permit2_batch_signature=permit2_batch_signature,
            hook_data=hook_data,
        )

    @status_tuple
    async def build_remove_liquidity_call_data(
        self,
        token_id: int | str,
        liquidity_percentage: int,
        *,
        slippage_tolerance: int = DEFAULT_SLIPPAGE_TOLERANCE_BPS,
        deadline: int | None = None,
        hook_data: bytes = b"",
    ) -> MethodParameters:
        return await build_remove_liquidity_call_data(
            token_id,
            liquidity_percentage,
            self.instance,
            slippage_tolerance=slippage_tolerance,
            deadline=deadline,
            hook_data=hook_data,
        )

    @status_tuple
    async def build_collect_fees_call_data(
        self,
        token_id: int | str,
        recipient: str,
        *,
        deadline: int | None = None,
        hook_data: bytes = b"",
    ) -> MethodParameters:
        return await build_collect_fees_call_data(
            token_id,
            recipient,
            self.instance,
            deadline=deadline,
            hook_data=hook_data,
        )
