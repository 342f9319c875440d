"""Accumulate-then-serialize planners for v4-periphery action sequences and
UniversalRouter command lists.

Each planner stores `(opcode, encoded params)` pairs and only produces bytes
in `finalize`, so the opcode string and the params array always have the
same length.
"""

from __future__ import annotations

from enum import IntEnum

from eth_abi import encode as abi_encode
from eth_utils import to_checksum_address

from uniswap_v4_kit.core.utils.uniswap_v4 import (
    POOL_KEY_ABI_TYPE,
    PoolKey,
    encode_function_call,
)


# v4-periphery/src/libraries/Actions.sol
class Actions(IntEnum):
    INCREASE_LIQUIDITY = 0x00
    DECREASE_LIQUIDITY = 0x01
    MINT_POSITION = 0x02
    BURN_POSITION = 0x03
    SWAP_EXACT_IN_SINGLE = 0x06
    SWAP_EXACT_IN = 0x07
    SWAP_EXACT_OUT_SINGLE = 0x08
    SWAP_EXACT_OUT = 0x09
    SETTLE = 0x0B
    SETTLE_ALL = 0x0C
    SETTLE_PAIR = 0x0D
    TAKE = 0x0E
    TAKE_ALL = 0x0F
    TAKE_PORTION = 0x10
    TAKE_PAIR = 0x11
    CLOSE_CURRENCY = 0x12
    SWEEP = 0x14


# universal-router/contracts/libraries/Commands.sol
class Commands(IntEnum):
    PERMIT2_PERMIT = 0x0A
    V4_SWAP = 0x10


PERMIT_DETAILS_ABI_TYPE = "(address,uint160,uint48,uint48)"
PERMIT_SINGLE_ABI_TYPE = f"({PERMIT_DETAILS_ABI_TYPE},address,uint256)"
PERMIT_BATCH_ABI_TYPE = f"({PERMIT_DETAILS_ABI_TYPE}[],address,uint256)"

UNIVERSAL_ROUTER_EXECUTE_SIGNATURE = "execute(bytes,bytes[],uint256)"


class _Planner:
    def __init__(self) -> None:
        self._steps: list[tuple[int, bytes]] = []

    def _add(self, opcode: int, encoded: bytes) -> None:
        self._steps.append((int(opcode), bytes(encoded)))

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def opcodes(self) -> bytes:
        return bytes(opcode for opcode, _ in self._steps)

    @property
    def params(self) -> list[bytes]:
        return [encoded for _, encoded in self._steps]


class V4Planner(_Planner):
    """Action sequence consumed by `modifyLiquidities` and the router's V4_SWAP."""

    def add_swap_exact_in_single(
        self,
        *,
        pool_key: PoolKey,
        zero_for_one: bool,
        amount_in: int,
        amount_out_minimum: int,
        hook_data: bytes = b"",
    ) -> V4Planner:
        encoded = abi_encode(
            [f"({POOL_KEY_ABI_TYPE},bool,uint128,uint128,bytes)"],
            [
                (
                    pool_key.as_tuple(),
                    bool(zero_for_one),
                    int(amount_in),
                    int(amount_out_minimum),
                    bytes(hook_data),
                )
            ],
        )
        self._add(Actions.SWAP_EXACT_IN_SINGLE, encoded)
        return self

    def add_settle_all(self, currency: str, max_amount: int) -> V4Planner:
        encoded = abi_encode(
            ["address", "uint256"], [to_checksum_address(currency), int(max_amount)]
        )
        self._add(Actions.SETTLE_ALL, encoded)
        return self

    def add_take(self, currency: str, recipient: str, amount: int) -> V4Planner:
        encoded = abi_encode(
            ["address", "address", "uint256"],
            [to_checksum_address(currency), to_checksum_address(recipient), int(amount)],
        )
        self._add(Actions.TAKE, encoded)
        return self

    def add_mint(
        self,
        *,
        pool_key: PoolKey,
        tick_lower: int,
        tick_upper: int,
        liquidity: int,
        amount0_max: int,
        amount1_max: int,
        owner: str,
        hook_data: bytes = b"",
    ) -> V4Planner:
        encoded = abi_encode(
            [
                POOL_KEY_ABI_TYPE,
                "int24",
                "int24",
                "uint256",
                "uint128",
                "uint128",
                "address",
                "bytes",
            ],
            [
                pool_key.as_tuple(),
                int(tick_lower),
                int(tick_upper),
                int(liquidity),
                int(amount0_max),
                int(amount1_max),
                to_checksum_address(owner),
                bytes(hook_data),
            ],
        )
        self._add(Actions.MINT_POSITION, encoded)
        return self

    def add_decrease(
        self,
        *,
        token_id: int,
        liquidity: int,
        amount0_min: int,
        amount1_min: int,
        hook_data: bytes = b"",
    ) -> V4Planner:
        encoded = abi_encode(
            ["uint256", "uint256", "uint128", "uint128", "bytes"],
            [
                int(token_id),
                int(liquidity),
                int(amount0_min),
                int(amount1_min),
                bytes(hook_data),
            ],
        )
        self._add(Actions.DECREASE_LIQUIDITY, encoded)
        return self

    def add_settle_pair(self, currency0: str, currency1: str) -> V4Planner:
        encoded = abi_encode(
            ["address", "address"],
            [to_checksum_address(currency0), to_checksum_address(currency1)],
        )
        self._add(Actions.SETTLE_PAIR, encoded)
        return self

    def add_take_pair(self, currency0: str, currency1: str, recipient: str) -> V4Planner:
        encoded = abi_encode(
            ["address", "address", "address"],
            [
                to_checksum_address(currency0),
                to_checksum_address(currency1),
                to_checksum_address(recipient),
            ],
        )
        self._add(Actions.TAKE_PAIR, encoded)
        return self

    def add_sweep(self, currency: str, recipient: str) -> V4Planner:
        encoded = abi_encode(
            ["address", "address"],
            [to_checksum_address(currency), to_checksum_address(recipient)],
        )
        self._add(Actions.SWEEP, encoded)
        return self

    def finalize(self) -> bytes:
        """Equivalent to Solidity: `abi.encode(actions, params)`."""
        return abi_encode(["bytes", "bytes[]"], [self.opcodes, self.params])


class RoutePlanner(_Planner):
    """UniversalRouter command list for `execute(bytes,bytes[],uint256)`."""

    def add_permit2_permit(self, permit_single: tuple, signature: bytes) -> RoutePlanner:
        encoded = abi_encode(
            [PERMIT_SINGLE_ABI_TYPE, "bytes"], [permit_single, bytes(signature)]
        )
        self._add(Commands.PERMIT2_PERMIT, encoded)
        return self

    def add_v4_swap(self, v4_planner: V4Planner) -> RoutePlanner:
        self._add(Commands.V4_SWAP, v4_planner.finalize())
        return self

    def encode_execute(self, deadline: int) -> bytes:
        return encode_function_call(
            UNIVERSAL_ROUTER_EXECUTE_SIGNATURE,
            ["bytes", "bytes[]", "uint256"],
            [self.opcodes, self.params, int(deadline)],
        )
