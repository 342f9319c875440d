from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from eth_abi import decode as abi_decode
from eth_utils import to_checksum_address
from loguru import logger

from uniswap_v4_kit.adapters.uniswap_v4_adapter.types import Token
from uniswap_v4_kit.core.constants import ZERO_ADDRESS
from uniswap_v4_kit.core.constants.erc20_abi import ERC20_ABI
from uniswap_v4_kit.core.errors import TokenResolutionError
from uniswap_v4_kit.core.registry import Instance
from uniswap_v4_kit.core.utils.uniswap_v4 import encode_function_call, is_native_currency
from uniswap_v4_kit.core.utils.web3_batch import Web3CallFactory, batch_web3_calls

_SYMBOL_CALLDATA = "0x" + encode_function_call("symbol()", [], []).hex()
_NAME_CALLDATA = "0x" + encode_function_call("name()", [], []).hex()
_READS_PER_TOKEN = 3


def decode_string_or_bytes32(data: Any) -> str:
    """Decode a `symbol()`/`name()` return that may be `string` or `bytes32`.

    A 32-byte return is a bytes32 value (a dynamic string needs at least an
    offset and a length word).
    """
    raw = bytes(data)
    if len(raw) == 32:
        return raw.rstrip(b"\x00").decode("utf-8", errors="ignore")
    (value,) = abi_decode(["string"], raw)
    return value


def native_token(instance: Instance) -> Token:
    native = instance.chain.native_currency
    return Token(
        chain_id=instance.chain_id,
        address=ZERO_ADDRESS,
        decimals=native.decimals,
        symbol=native.symbol,
        name=native.name,
    )


def _metadata_reads(instance: Instance, address: str) -> list[Web3CallFactory]:
    web3 = instance.web3
    decimals = web3.eth.contract(address=address, abi=ERC20_ABI).functions.decimals()

    def _raw(data: str) -> Web3CallFactory:
        return lambda: web3.eth.call({"to": address, "data": data}, "latest")

    return [
        _raw(_SYMBOL_CALLDATA),
        _raw(_NAME_CALLDATA),
        lambda: decimals.call(block_identifier="latest"),
    ]


async def resolve_tokens(addresses: Sequence[str], instance: Instance) -> list[Token]:
    """Resolve ERC20 metadata for `addresses`, preserving input order.

    The zero address is filled from the chain's native currency without a
    contract call. All ERC20 reads go out as one batch; any failure fails
    the whole call.
    """
    erc20_addresses = [
        to_checksum_address(a) for a in addresses if not is_native_currency(a)
    ]

    factories: list[Web3CallFactory] = []
    for address in erc20_addresses:
        factories.extend(_metadata_reads(instance, address))

    try:
        results = await batch_web3_calls(instance.web3, *factories)
    except Exception as exc:
        raise TokenResolutionError(f"Failed to fetch token data: {exc}") from exc

    metadata: dict[str, tuple[str, str, int]] = {}
    for index, address in enumerate(erc20_addresses):
        start = index * _READS_PER_TOKEN
        raw_symbol, raw_name, decimals = results[start : start + _READS_PER_TOKEN]
        try:
            metadata[address] = (
                decode_string_or_bytes32(raw_symbol),
                decode_string_or_bytes32(raw_name),
                int(decimals),
            )
        except Exception as exc:
            raise TokenResolutionError(
                f"Failed to decode token data for {address}: {exc}"
            ) from exc

    tokens: list[Token] = []
    for address in addresses:
        if is_native_currency(address):
            tokens.append(native_token(instance))
            continue
        checksum = to_checksum_address(address)
        symbol, name, decimals = metadata[checksum]
        tokens.append(
            Token(
                chain_id=instance.chain_id,
                address=checksum,
                decimals=decimals,
                symbol=symbol,
                name=name,
            )
        )

    logger.debug(
        f"Resolved {len(tokens)} tokens on chain {instance.chain_id} "
        f"({len(erc20_addresses)} via RPC)"
    )
    return tokens
