"""Integer TickMath matching v4-core `TickMath.sol`.

Prices are Q64.96 square roots; every function is exact integer arithmetic
so results match the on-chain library bit for bit.
"""

from __future__ import annotations

from uniswap_v4_kit.core.constants import MAX_UINT256
from uniswap_v4_kit.core.errors import EncodingError

MIN_TICK = -887272
MAX_TICK = 887272
MIN_SQRT_PRICE = 4295128739
MAX_SQRT_PRICE = 1461446703485210103287273052203988822378723970342

Q32 = 1 << 32

# Error bounds of the log_sqrt10001 approximation in get_tick_at_sqrt_price
_TICK_HIGH_ERROR = 291339464771989622907027621153398088495
_TICK_LOW_ERROR = 3402992956809132418596140100660247210


def get_sqrt_price_at_tick(tick: int) -> int:
    tick = int(tick)
    if tick < MIN_TICK or tick > MAX_TICK:
        raise EncodingError(f"tick {tick} out of range [{MIN_TICK}, {MAX_TICK}]")

    abs_tick = tick if tick >= 0 else -tick
    ratio = 0x100000000000000000000000000000000

    if abs_tick & 0x1:
        ratio = 0xFFFCB933BD6FAD37AA2D162D1A594001
    if abs_tick & 0x2:
        ratio = (ratio * 0xFFF97272373D413259A46990580E213A) >> 128
    if abs_tick & 0x4:
        ratio = (ratio * 0xFFF2E50F5F656932EF12357CF3C7FDCC) >> 128
    if abs_tick & 0x8:
        ratio = (ratio * 0xFFE5CACA7E10E4E61C3624EAA0941CD0) >> 128
    if abs_tick & 0x10:
        ratio = (ratio * 0xFFCB9843D60F6159C9DB58835C926644) >> 128
    if abs_tick & 0x20:
        ratio = (ratio * 0xFF973B41FA98C081472E6896DFB254C0) >> 128
    if abs_tick & 0x40:
        ratio = (ratio * 0xFF2EA16466C96A3843EC78B326B52861) >> 128
    if abs_tick & 0x80:
        ratio = (ratio * 0xFE5DEE046A99A2A811C461F1969C3053) >> 128
    if abs_tick & 0x100:
        ratio = (ratio * 0xFCBE86C7900A88AEDCFFC83B479AA3A4) >> 128
    if abs_tick & 0x200:
        ratio = (ratio * 0xF987A7253AC413176F2B074CF7815E54) >> 128
    if abs_tick & 0x400:
        ratio = (ratio * 0xF3392B0822B70005940C7A398E4B70F3) >> 128
    if abs_tick & 0x800:
        ratio = (ratio * 0xE7159475A2C29B7443B29C7FA6E889D9) >> 128
    if abs_tick & 0x1000:
        ratio = (ratio * 0xD097F3BDFD2022B8845AD8F792AA5825) >> 128
    if abs_tick & 0x2000:
        ratio = (ratio * 0xA9F746462D870FDF8A65DC1F90E061E5) >> 128
    if abs_tick & 0x4000:
        ratio = (ratio * 0x70D869A156D2A1B890BB3DF62BAF32F7) >> 128
    if abs_tick & 0x8000:
        ratio = (ratio * 0x31BE135F97D08FD981231505542FCFA6) >> 128
    if abs_tick & 0x10000:
        ratio = (ratio * 0x9AA508B5B7A84E1C677DE54F3E99BC9) >> 128
    if abs_tick & 0x20000:
        ratio = (ratio * 0x5D6AF8DEDB81196699C329225EE604) >> 128
    if abs_tick & 0x40000:
        ratio = (ratio * 0x2216E584F5FA1EA926041BEDFE98) >> 128
    if abs_tick & 0x80000:
        ratio = (ratio * 0x48A170391F7DC42444E8FA2) >> 128

    if tick > 0:
        ratio = MAX_UINT256 // ratio

    # Q128.128 -> Q64.96, rounding up
    sqrt_price_x96 = ratio >> 32
    if ratio & (Q32 - 1):
        sqrt_price_x96 += 1
    return sqrt_price_x96


def get_tick_at_sqrt_price(sqrt_price_x96: int) -> int:
    """Greatest tick such that get_sqrt_price_at_tick(tick) <= sqrt_price_x96."""
    sqrt_price_x96 = int(sqrt_price_x96)
    if sqrt_price_x96 < MIN_SQRT_PRICE or sqrt_price_x96 >= MAX_SQRT_PRICE:
        raise EncodingError(f"sqrt price {sqrt_price_x96} out of range")

    price = sqrt_price_x96 << 32
    msb = price.bit_length() - 1
    r = price >> (msb - 127) if msb >= 128 else price << (127 - msb)
    log_2 = (msb - 128) << 64

    for shift in range(63, 49, -1):
        r = (r * r) >> 127
        f = r >> 128
        log_2 |= f << shift
        r >>= f

    log_sqrt10001 = log_2 * 255738958999603826347141  # Q22.128

    tick_low = (log_sqrt10001 - _TICK_LOW_ERROR) >> 128
    tick_high = (log_sqrt10001 + _TICK_HIGH_ERROR) >> 128

    if tick_low == tick_high:
        return tick_low
    return tick_high if get_sqrt_price_at_tick(tick_high) <= sqrt_price_x96 else tick_low


def nearest_usable_tick(tick: int, tick_spacing: int) -> int:
    """Round `tick` to the closest multiple of `tick_spacing` inside [MIN_TICK, MAX_TICK]."""
    tick = int(tick)
    tick_spacing = int(tick_spacing)
    if tick_spacing <= 0:
        raise EncodingError(f"tick spacing must be positive, got {tick_spacing}")
    if tick < MIN_TICK or tick > MAX_TICK:
        raise EncodingError(f"tick {tick} out of range [{MIN_TICK}, {MAX_TICK}]")

    # round half up, like Math.round
    rounded = ((2 * tick + tick_spacing) // (2 * tick_spacing)) * tick_spacing
    if rounded < MIN_TICK:
        return rounded + tick_spacing
    if rounded > MAX_TICK:
        return rounded - tick_spacing
    return rounded


def min_usable_tick(tick_spacing: int) -> int:
    return nearest_usable_tick(MIN_TICK, tick_spacing)


def max_usable_tick(tick_spacing: int) -> int:
    return nearest_usable_tick(MAX_TICK, tick_spacing)
