"""In-memory stand-in for the slice of AsyncWeb3 the kit talks to.

Contract reads are answered by handlers registered per (address, function
name). A handler is either a plain value, an exception instance to raise, or
a callable receiving the call arguments. Raw `eth.call` reads of zero-argument
functions are answered from the same handlers: `bytes` come back as a bytes32
word, `str` as an ABI string.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import Any

from eth_abi import encode as abi_encode
from eth_utils import keccak, to_checksum_address
from hexbytes import HexBytes

from uniswap_v4_kit.adapters.uniswap_v4_adapter.types import Pool, Token
from uniswap_v4_kit.core.constants import ZERO_ADDRESS
from uniswap_v4_kit.core.constants.contracts import ContractName
from uniswap_v4_kit.core.registry import Instance
from uniswap_v4_kit.core.utils.position_info import encode_position_info
from uniswap_v4_kit.core.utils.uniswap_v4 import PoolKey

DEFAULT_BLOCK_TIMESTAMP = 1_700_000_000

# Mainnet addresses used across tests
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
OWNER = "0xaAaAaAaaAaAaAaaAaAAAAAAAAaaaAaAaAaaAaaAa"

KNOWN_TOKENS: dict[str, tuple[str, str, int]] = {
    ZERO_ADDRESS: ("ETH", "Ether", 18),
    USDC: ("USDC", "USD Coin", 6),
    WETH: ("WETH", "Wrapped Ether", 18),
}


def _encode_return(value: Any) -> bytes:
    # bytes are returned as a bytes32 word, str as an ABI string
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).ljust(32, b"\x00")
    if isinstance(value, str):
        return abi_encode(["string"], [value])
    return abi_encode(["uint256"], [int(value)])


class _FakeCall:
    def __init__(self, web3: FakeWeb3, address: str, fn_name: str, args: tuple):
        self._web3 = web3
        self._address = address
        self._fn_name = fn_name
        self._args = args

    async def call(self, *args: Any, **kwargs: Any) -> Any:
        return self._web3.dispatch(self._address, self._fn_name, self._args)


class _FakeFunctions:
    def __init__(self, web3: FakeWeb3, address: str):
        self._web3 = web3
        self._address = address

    def __getattr__(self, fn_name: str):
        if fn_name.startswith("_"):
            raise AttributeError(fn_name)

        def _bind(*args: Any) -> _FakeCall:
            return _FakeCall(self._web3, self._address, fn_name, args)

        return _bind


class FakeContract:
    def __init__(self, web3: FakeWeb3, address: str, abi: list[dict] | None):
        self.address = address
        self.abi = abi or []
        self.functions = _FakeFunctions(web3, address)


class FakeBatch:
    def __init__(self, web3: FakeWeb3):
        self._web3 = web3
        self._pending: list[Awaitable[Any]] = []

    def add(self, request: Awaitable[Any]) -> None:
        self._pending.append(request)

    async def async_execute(self) -> list[Any]:
        self._web3.batches_executed += 1
        if not self._web3.batch_supported:
            raise NotImplementedError("batch requests not supported")
        return list(await asyncio.gather(*self._pending))

    def cancel(self) -> None:
        for request in self._pending:
            close = getattr(request, "close", None)
            if close is not None:
                close()
        self._pending.clear()


class _FakeEth:
    def __init__(self, web3: FakeWeb3):
        self._web3 = web3

    def contract(self, address: str, abi: list[dict] | None = None) -> FakeContract:
        return FakeContract(self._web3, to_checksum_address(address), abi)

    async def get_block(self, block_identifier: Any = "latest") -> dict[str, int]:
        return {"number": self._web3.block_number, "timestamp": self._web3.timestamp}

    async def call(
        self, transaction: dict[str, Any], block_identifier: Any = "latest"
    ) -> HexBytes:
        """Raw eth_call for zero-argument reads, answered with node-style return data."""
        address = to_checksum_address(transaction["to"])
        selector = bytes.fromhex(transaction["data"][2:10])
        fn_name = self._web3.function_for_selector(address, selector)
        return HexBytes(_encode_return(self._web3.dispatch(address, fn_name, ())))


class FakeWeb3:
    def __init__(
        self,
        *,
        timestamp: int = DEFAULT_BLOCK_TIMESTAMP,
        batch_supported: bool = True,
    ):
        self.timestamp = timestamp
        self.block_number = 1
        self.batch_supported = batch_supported
        self.batches_executed = 0
        self.calls: list[tuple[str, str, tuple]] = []
        self._handlers: dict[tuple[str, str], Any] = {}
        self.eth = _FakeEth(self)

    def batch_requests(self) -> FakeBatch:
        return FakeBatch(self)

    def register(self, address: str, fn_name: str, handler: Any) -> None:
        self._handlers[(to_checksum_address(address), fn_name)] = handler

    def dispatch(self, address: str, fn_name: str, args: tuple) -> Any:
        self.calls.append((address, fn_name, args))
        try:
            handler = self._handlers[(address, fn_name)]
        except KeyError:
            raise RuntimeError(
                f"execution reverted: no handler for {fn_name} at {address}"
            ) from None
        if isinstance(handler, BaseException):
            raise handler
        if callable(handler):
            return handler(*args)
        return handler

    def function_for_selector(self, address: str, selector: bytes) -> str:
        for registered_address, fn_name in self._handlers:
            if registered_address != address:
                continue
            if keccak(text=f"{fn_name}()")[:4] == selector:
                return fn_name
        self.calls.append((address, "0x" + selector.hex(), ()))
        raise RuntimeError(
            f"execution reverted: no handler for 0x{selector.hex()} at {address}"
        )

    def call_count(self, fn_name: str) -> int:
        return sum(1 for _, name, _ in self.calls if name == fn_name)


def register_erc20(
    web3: FakeWeb3,
    address: str,
    *,
    symbol: str | bytes,
    name: str | bytes,
    decimals: int,
) -> None:
    web3.register(address, "symbol", symbol)
    web3.register(address, "name", name)
    web3.register(address, "decimals", decimals)


def register_pool(
    web3: FakeWeb3,
    instance: Instance,
    key: PoolKey,
    *,
    sqrt_price_x96: int,
    tick: int,
    liquidity: int,
) -> None:
    """Answer poolKeys/getSlot0/getLiquidity for `key` only; other ids read as empty."""
    target_id = key.pool_id
    target_prefix = key.pool_id_prefix
    empty_key = (
        ZERO_ADDRESS,
        ZERO_ADDRESS,
        0,
        0,
        ZERO_ADDRESS,
    )
    posm = instance.get_contract_address(ContractName.POSITION_MANAGER)
    state_view = instance.get_contract_address(ContractName.STATE_VIEW)

    web3.register(
        posm,
        "poolKeys",
        lambda prefix: key.as_tuple() if bytes(prefix) == target_prefix else empty_key,
    )
    web3.register(
        state_view,
        "getSlot0",
        lambda pid: (sqrt_price_x96, tick, 0, key.fee)
        if bytes(pid) == target_id
        else (0, 0, 0, 0),
    )
    web3.register(
        state_view,
        "getLiquidity",
        lambda pid: liquidity if bytes(pid) == target_id else 0,
    )


def register_position(
    web3: FakeWeb3,
    instance: Instance,
    key: PoolKey,
    *,
    token_id: int,
    tick_lower: int,
    tick_upper: int,
    liquidity: int,
) -> None:
    posm = instance.get_contract_address(ContractName.POSITION_MANAGER)
    info = encode_position_info(
        pool_id_prefix=key.pool_id_prefix,
        tick_lower=tick_lower,
        tick_upper=tick_upper,
    )
    web3.register(
        posm,
        "getPoolAndPositionInfo",
        lambda tid: (key.as_tuple(), info) if int(tid) == token_id else (None, 0),
    )
    web3.register(
        posm,
        "getPositionLiquidity",
        lambda tid: liquidity if int(tid) == token_id else 0,
    )


def make_pool(
    key: PoolKey,
    *,
    chain_id: int = 1,
    sqrt_price_x96: int = 1 << 96,
    tick: int = 0,
    liquidity: int = 10**20,
) -> Pool:
    """Pool value object built without RPC; metadata comes from KNOWN_TOKENS."""
    token0, token1 = (_known_token(chain_id, c) for c in (key.currency0, key.currency1))
    return Pool(
        pool_key=key,
        token0=token0,
        token1=token1,
        sqrt_price_x96=sqrt_price_x96,
        liquidity=liquidity,
        tick=tick,
    )


def _known_token(chain_id: int, address: str) -> Token:
    symbol, name, decimals = KNOWN_TOKENS[to_checksum_address(address)]
    return Token(
        chain_id=chain_id,
        address=to_checksum_address(address),
        decimals=decimals,
        symbol=symbol,
        name=name,
    )
