"""Value objects returned by the Uniswap v4 resolvers (frozen dataclasses)."""

from __future__ import annotations

from dataclasses import dataclass

from uniswap_v4_kit.core.utils.liquidity_math import PositionAmounts
from uniswap_v4_kit.core.utils.uniswap_v4 import PoolKey, is_native_currency


@dataclass(frozen=True)
class Token:
    chain_id: int
    address: str
    decimals: int
    symbol: str
    name: str

    @property
    def is_native(self) -> bool:
        return is_native_currency(self.address)


@dataclass(frozen=True)
class Pool:
    """Pool key plus live state read at resolution time."""

    pool_key: PoolKey
    token0: Token
    token1: Token
    sqrt_price_x96: int
    liquidity: int
    tick: int

    @property
    def currency0(self) -> str:
        return self.pool_key.currency0

    @property
    def currency1(self) -> str:
        return self.pool_key.currency1

    @property
    def fee(self) -> int:
        return self.pool_key.fee

    @property
    def tick_spacing(self) -> int:
        return self.pool_key.tick_spacing

    @property
    def hooks(self) -> str:
        return self.pool_key.hooks

    @property
    def pool_id(self) -> bytes:
        return self.pool_key.pool_id

    @property
    def native_token(self) -> Token | None:
        if self.token0.is_native:
            return self.token0
        if self.token1.is_native:
            return self.token1
        return None


@dataclass(frozen=True)
class Position:
    token_id: int
    pool: Pool
    tick_lower: int
    tick_upper: int
    liquidity: int

    @property
    def pool_id(self) -> bytes:
        return self.pool.pool_id

    @property
    def token0(self) -> Token:
        return self.pool.token0

    @property
    def token1(self) -> Token:
        return self.pool.token1

    def amounts(self) -> PositionAmounts:
        return PositionAmounts(
            sqrt_price_x96=self.pool.sqrt_price_x96,
            tick_current=self.pool.tick,
            tick_lower=self.tick_lower,
            tick_upper=self.tick_upper,
            liquidity=self.liquidity,
        )

    @property
    def amount0(self) -> int:
        """Token0 owed to the holder at the current price, rounded down."""
        return self.amounts().amount0

    @property
    def amount1(self) -> int:
        return self.amounts().amount1


@dataclass(frozen=True)
class QuoteResponse:
    amount_out: int
    estimated_gas_used: int
    timestamp: int  # wall clock, milliseconds
