"""Decoders for the calldata the builders emit, for assertions in tests."""

from __future__ import annotations

from typing import Any

from eth_abi import decode as abi_decode
from eth_utils import keccak
from hexbytes import HexBytes


def selector(signature: str) -> bytes:
    return keccak(text=signature)[:4]


def decode_call(calldata: str | bytes, signature: str, types: list[str]) -> tuple[Any, ...]:
    raw = bytes(HexBytes(calldata))
    if raw[:4] != selector(signature):
        raise ValueError(f"calldata does not start with the selector of {signature}")
    return abi_decode(types, raw[4:])


def decode_actions(unlock_data: bytes) -> tuple[bytes, list[bytes]]:
    """Split `abi.encode(actions, params)` back into its two parts."""
    actions, params = abi_decode(["bytes", "bytes[]"], bytes(unlock_data))
    return bytes(actions), [bytes(p) for p in params]
