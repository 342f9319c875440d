from __future__ import annotations

from dataclasses import dataclass

from eth_abi import encode as abi_encode
from eth_utils import keccak, to_checksum_address
from hexbytes import HexBytes

from uniswap_v4_kit.core.constants import ZERO_ADDRESS
from uniswap_v4_kit.core.errors import ValidationError

PoolKeyTuple = tuple[str, str, int, int, str]
POOL_KEY_ABI_TYPE = "(address,address,uint24,int24,address)"

FEE_LOWEST = 100
FEE_LOW = 500
FEE_MEDIUM = 3000
FEE_HIGH = 10_000

TICK_SPACING_BY_FEE: dict[int, int] = {
    FEE_LOWEST: 1,
    FEE_LOW: 10,
    FEE_MEDIUM: 60,
    FEE_HIGH: 200,
}

POOL_ID_PREFIX_BYTES = 25


def is_native_currency(address: str | None) -> bool:
    return str(address or "").lower() == ZERO_ADDRESS


def sort_currencies(currency_a: str, currency_b: str) -> tuple[str, str]:
    a = to_checksum_address(currency_a)
    b = to_checksum_address(currency_b)
    return (a, b) if int(a, 16) < int(b, 16) else (b, a)


def default_tick_spacing(fee: int) -> int:
    try:
        return TICK_SPACING_BY_FEE[int(fee)]
    except KeyError:
        raise ValidationError(
            f"No default tick spacing for fee {fee}; pass tick_spacing explicitly"
        ) from None


@dataclass(frozen=True)
class PoolKey:
    currency0: str
    currency1: str
    fee: int
    tick_spacing: int
    hooks: str = ZERO_ADDRESS

    @classmethod
    def build(
        cls,
        *,
        currency_a: str,
        currency_b: str,
        fee: int,
        tick_spacing: int,
        hooks: str = ZERO_ADDRESS,
    ) -> PoolKey:
        c0, c1 = sort_currencies(currency_a, currency_b)
        return cls(c0, c1, int(fee), int(tick_spacing), to_checksum_address(hooks))

    @classmethod
    def from_tuple(cls, raw: tuple | list) -> PoolKey:
        c0, c1, fee, tick_spacing, hooks = raw
        return cls(
            to_checksum_address(c0),
            to_checksum_address(c1),
            int(fee),
            int(tick_spacing),
            to_checksum_address(hooks),
        )

    def as_tuple(self) -> PoolKeyTuple:
        return (
            to_checksum_address(self.currency0),
            to_checksum_address(self.currency1),
            int(self.fee),
            int(self.tick_spacing),
            to_checksum_address(self.hooks),
        )

    @property
    def pool_id(self) -> bytes:
        return pool_id(self)

    @property
    def pool_id_prefix(self) -> bytes:
        return self.pool_id[:POOL_ID_PREFIX_BYTES]


def pool_id(key: PoolKey) -> bytes:
    """keccak256(abi.encode(PoolKey)), the id used by PoolManager and StateView."""
    encoded = abi_encode(
        ["address", "address", "uint24", "int24", "address"],
        list(key.as_tuple()),
    )
    return keccak(encoded)


def pool_id_hex(key: PoolKey) -> str:
    return "0x" + pool_id(key).hex()


def pool_id_prefix(pool_id_: bytes | str) -> bytes:
    """First 25 bytes of a pool id; the PositionManager `poolKeys` storage key."""
    raw = bytes(HexBytes(pool_id_))
    if len(raw) != 32:
        raise ValidationError(f"pool id must be 32 bytes, got {len(raw)}")
    return raw[:POOL_ID_PREFIX_BYTES]


def to_hex(value: int) -> str:
    """Even-length 0x-prefixed hex, `0x00` for zero."""
    value = int(value)
    if value < 0:
        raise ValueError("to_hex expects a non-negative integer")
    digits = format(value, "x")
    if len(digits) % 2:
        digits = "0" + digits
    return "0x" + digits


def encode_function_call(signature: str, types: list[str], args: list) -> bytes:
    """4-byte selector of `signature` followed by the ABI-encoded args."""
    return keccak(text=signature)[:4] + abi_encode(types, args)
