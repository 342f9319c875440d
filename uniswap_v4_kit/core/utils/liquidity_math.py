"""Position sizing and slippage math for concentrated-liquidity positions.

Integer-only ports of v4-core `SqrtPriceMath` plus the periphery sizing
helpers (`maxLiquidityForAmounts`, mint/burn amounts with slippage). Inputs
and outputs are raw token units and Q64.96 square-root prices.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from uniswap_v4_kit.core.constants import BPS_DENOMINATOR, MAX_UINT256
from uniswap_v4_kit.core.errors import EncodingError, ValidationError
from uniswap_v4_kit.core.utils.tick_math import (
    MAX_SQRT_PRICE,
    MIN_SQRT_PRICE,
    get_sqrt_price_at_tick,
    get_tick_at_sqrt_price,
)

Q96 = 1 << 96
Q192 = 1 << 192


def mul_div(a: int, b: int, denominator: int) -> int:
    if denominator <= 0:
        raise EncodingError("mul_div: denominator must be positive")
    return (a * b) // denominator


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    if denominator <= 0:
        raise EncodingError("mul_div_rounding_up: denominator must be positive")
    return -((-a * b) // denominator)


def encode_sqrt_ratio_x96(amount1: int, amount0: int) -> int:
    """sqrt(amount1 / amount0) as a Q64.96 number."""
    amount1 = int(amount1)
    amount0 = int(amount0)
    if amount0 <= 0:
        raise ValidationError("amount0 must be positive to derive a price")
    return math.isqrt((amount1 << 192) // amount0)


def _sorted(sqrt_a: int, sqrt_b: int) -> tuple[int, int]:
    return (sqrt_a, sqrt_b) if sqrt_a <= sqrt_b else (sqrt_b, sqrt_a)


def get_amount0_delta(
    sqrt_price_a_x96: int, sqrt_price_b_x96: int, liquidity: int, round_up: bool
) -> int:
    a, b = _sorted(int(sqrt_price_a_x96), int(sqrt_price_b_x96))
    if a <= 0:
        raise EncodingError("sqrt price must be positive")
    numerator1 = int(liquidity) << 96
    numerator2 = b - a
    if round_up:
        return mul_div_rounding_up(mul_div_rounding_up(numerator1, numerator2, b), 1, a)
    return mul_div(numerator1, numerator2, b) // a


def get_amount1_delta(
    sqrt_price_a_x96: int, sqrt_price_b_x96: int, liquidity: int, round_up: bool
) -> int:
    a, b = _sorted(int(sqrt_price_a_x96), int(sqrt_price_b_x96))
    if round_up:
        return mul_div_rounding_up(int(liquidity), b - a, Q96)
    return mul_div(int(liquidity), b - a, Q96)


def _max_liquidity_for_amount0_precise(a: int, b: int, amount0: int) -> int:
    return (amount0 * a * b) // (Q96 * (b - a))


def _max_liquidity_for_amount0_imprecise(a: int, b: int, amount0: int) -> int:
    intermediate = (a * b) // Q96
    return (amount0 * intermediate) // (b - a)


def _max_liquidity_for_amount1(a: int, b: int, amount1: int) -> int:
    return (amount1 * Q96) // (b - a)


def max_liquidity_for_amounts(
    sqrt_price_current_x96: int,
    sqrt_price_a_x96: int,
    sqrt_price_b_x96: int,
    amount0: int,
    amount1: int,
    *,
    use_full_precision: bool = True,
) -> int:
    """Largest liquidity mintable for the given amounts at the current price."""
    a, b = _sorted(int(sqrt_price_a_x96), int(sqrt_price_b_x96))
    if a == b:
        raise EncodingError("tick range is empty")
    current = int(sqrt_price_current_x96)
    amount0 = int(amount0)
    amount1 = int(amount1)
    liquidity_for_amount0 = (
        _max_liquidity_for_amount0_precise
        if use_full_precision
        else _max_liquidity_for_amount0_imprecise
    )

    if current <= a:
        return liquidity_for_amount0(a, b, amount0)
    if current < b:
        liquidity0 = liquidity_for_amount0(current, b, amount0)
        liquidity1 = _max_liquidity_for_amount1(a, current, amount1)
        return min(liquidity0, liquidity1)
    return _max_liquidity_for_amount1(a, b, amount1)


@dataclass(frozen=True)
class PositionAmounts:
    """Liquidity over [tick_lower, tick_upper) evaluated at one pool price."""

    sqrt_price_x96: int
    tick_current: int
    tick_lower: int
    tick_upper: int
    liquidity: int

    def __post_init__(self) -> None:
        if self.tick_lower >= self.tick_upper:
            raise EncodingError(
                f"tick_lower {self.tick_lower} must be below tick_upper {self.tick_upper}"
            )

    @classmethod
    def from_amounts(
        cls,
        *,
        sqrt_price_x96: int,
        tick_current: int,
        tick_lower: int,
        tick_upper: int,
        amount0: int,
        amount1: int,
        use_full_precision: bool = True,
    ) -> PositionAmounts:
        liquidity = max_liquidity_for_amounts(
            sqrt_price_x96,
            get_sqrt_price_at_tick(tick_lower),
            get_sqrt_price_at_tick(tick_upper),
            amount0,
            amount1,
            use_full_precision=use_full_precision,
        )
        return cls(sqrt_price_x96, tick_current, tick_lower, tick_upper, liquidity)

    @classmethod
    def from_amount0(cls, *, amount0: int, **kwargs) -> PositionAmounts:
        return cls.from_amounts(amount0=amount0, amount1=MAX_UINT256, **kwargs)

    @classmethod
    def from_amount1(cls, *, amount1: int, **kwargs) -> PositionAmounts:
        kwargs["use_full_precision"] = True
        return cls.from_amounts(amount0=MAX_UINT256, amount1=amount1, **kwargs)

    def _amount0(self, round_up: bool) -> int:
        sqrt_upper = get_sqrt_price_at_tick(self.tick_upper)
        if self.tick_current < self.tick_lower:
            return get_amount0_delta(
                get_sqrt_price_at_tick(self.tick_lower),
                sqrt_upper,
                self.liquidity,
                round_up,
            )
        if self.tick_current < self.tick_upper:
            return get_amount0_delta(
                self.sqrt_price_x96, sqrt_upper, self.liquidity, round_up
            )
        return 0

    def _amount1(self, round_up: bool) -> int:
        sqrt_lower = get_sqrt_price_at_tick(self.tick_lower)
        if self.tick_current < self.tick_lower:
            return 0
        if self.tick_current < self.tick_upper:
            return get_amount1_delta(
                sqrt_lower, self.sqrt_price_x96, self.liquidity, round_up
            )
        return get_amount1_delta(
            sqrt_lower,
            get_sqrt_price_at_tick(self.tick_upper),
            self.liquidity,
            round_up,
        )

    @property
    def amount0(self) -> int:
        return self._amount0(round_up=False)

    @property
    def amount1(self) -> int:
        return self._amount1(round_up=False)

    def mint_amounts(self) -> tuple[int, int]:
        return self._amount0(round_up=True), self._amount1(round_up=True)

    def at_sqrt_price(self, sqrt_price_x96: int) -> PositionAmounts:
        return PositionAmounts(
            sqrt_price_x96,
            get_tick_at_sqrt_price(sqrt_price_x96),
            self.tick_lower,
            self.tick_upper,
            self.liquidity,
        )

    def with_liquidity(self, liquidity: int) -> PositionAmounts:
        return PositionAmounts(
            self.sqrt_price_x96,
            self.tick_current,
            self.tick_lower,
            self.tick_upper,
            int(liquidity),
        )

    def ratios_after_slippage(self, slippage_bps: int) -> tuple[int, int]:
        """Lowest and highest sqrt prices the pool may slip to."""
        slippage_bps = validate_bps(slippage_bps, "slippage_tolerance")
        price_numerator = self.sqrt_price_x96 * self.sqrt_price_x96
        lower = encode_sqrt_ratio_x96(
            price_numerator * (BPS_DENOMINATOR - slippage_bps),
            Q192 * BPS_DENOMINATOR,
        )
        upper = encode_sqrt_ratio_x96(
            price_numerator * (BPS_DENOMINATOR + slippage_bps),
            Q192 * BPS_DENOMINATOR,
        )
        if lower <= MIN_SQRT_PRICE:
            lower = MIN_SQRT_PRICE + 1
        if upper >= MAX_SQRT_PRICE:
            upper = MAX_SQRT_PRICE - 1
        return lower, upper

    def mint_amounts_with_slippage(self, slippage_bps: int) -> tuple[int, int]:
        """Maximum amounts to authorize: amount0 peaks at the lower price, amount1 at the upper."""
        lower, upper = self.ratios_after_slippage(slippage_bps)
        amount0, _ = self.at_sqrt_price(lower).mint_amounts()
        _, amount1 = self.at_sqrt_price(upper).mint_amounts()
        return amount0, amount1

    def burn_amounts_with_slippage(self, slippage_bps: int) -> tuple[int, int]:
        """Minimum amounts to accept: amount0 bottoms at the upper price, amount1 at the lower."""
        lower, upper = self.ratios_after_slippage(slippage_bps)
        amount0 = self.at_sqrt_price(upper).amount0
        amount1 = self.at_sqrt_price(lower).amount1
        return amount0, amount1


def validate_bps(value: int, name: str) -> int:
    value = int(value)
    if value < 0 or value > BPS_DENOMINATOR:
        raise ValidationError(f"{name} must be within [0, {BPS_DENOMINATOR}] bps, got {value}")
    return value


def apply_slippage_min(amount: int, slippage_bps: int) -> int:
    """amount minus its slippage share, floored."""
    slippage_bps = validate_bps(slippage_bps, "slippage_tolerance")
    amount = int(amount)
    return amount - (amount * slippage_bps) // BPS_DENOMINATOR
