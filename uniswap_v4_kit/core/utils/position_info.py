"""Decoding of the PositionManager's packed `PositionInfo` word.

Layout (least significant bit first):

    bits   0..7    hasSubscriber flag
    bits   8..31   tickLower  (int24, two's complement)
    bits  32..55   tickUpper  (int24, two's complement)
    bits  56..255  poolId     (first 25 bytes of the pool id)
"""

from __future__ import annotations

from dataclasses import dataclass

_SUBSCRIBER_MASK = 0xFF
_TICK_MASK = 0xFFFFFF
_TICK_LOWER_OFFSET = 8
_TICK_UPPER_OFFSET = 32
_POOL_ID_OFFSET = 56
_POOL_ID_BYTES = 25


@dataclass(frozen=True)
class PositionInfo:
    has_subscriber: bool
    tick_lower: int
    tick_upper: int
    pool_id_prefix: bytes


def _to_int24(raw: int) -> int:
    return raw - (1 << 24) if raw & 0x800000 else raw


def decode_position_info(info: int) -> PositionInfo:
    info = int(info)
    if info < 0 or info >= 1 << 256:
        raise ValueError("position info must fit in uint256")
    return PositionInfo(
        has_subscriber=bool(info & _SUBSCRIBER_MASK),
        tick_lower=_to_int24((info >> _TICK_LOWER_OFFSET) & _TICK_MASK),
        tick_upper=_to_int24((info >> _TICK_UPPER_OFFSET) & _TICK_MASK),
        pool_id_prefix=(info >> _POOL_ID_OFFSET).to_bytes(_POOL_ID_BYTES, "big"),
    )


def encode_position_info(
    *,
    pool_id_prefix: bytes,
    tick_lower: int,
    tick_upper: int,
    has_subscriber: bool = False,
) -> int:
    """Inverse of decode_position_info; used to build fixtures."""
    prefix = bytes(pool_id_prefix)[:_POOL_ID_BYTES].rjust(_POOL_ID_BYTES, b"\x00")
    return (
        (int.from_bytes(prefix, "big") << _POOL_ID_OFFSET)
        | ((int(tick_upper) & _TICK_MASK) << _TICK_UPPER_OFFSET)
        | ((int(tick_lower) & _TICK_MASK) << _TICK_LOWER_OFFSET)
        | (1 if has_subscriber else 0)
    )
