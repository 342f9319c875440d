from __future__ import annotations

from typing import Any

from eth_utils import to_checksum_address
from hexbytes import HexBytes
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _hex_signature(value: Any) -> str:
    return "0x" + bytes(HexBytes(value)).hex()


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PermitDetails(_Frozen):
    token: str
    amount: int
    expiration: int
    nonce: int

    @field_validator("token")
    @classmethod
    def _checksum_token(cls, v: str) -> str:
        return to_checksum_address(v)

    def as_tuple(self) -> tuple[str, int, int, int]:
        return (self.token, self.amount, self.expiration, self.nonce)

    def to_message(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "amount": self.amount,
            "expiration": self.expiration,
            "nonce": self.nonce,
        }


class PermitSingle(_Frozen):
    details: PermitDetails
    spender: str
    sig_deadline: int = Field(alias="sigDeadline")

    @field_validator("spender")
    @classmethod
    def _checksum_spender(cls, v: str) -> str:
        return to_checksum_address(v)

    def as_tuple(self) -> tuple:
        return (self.details.as_tuple(), self.spender, self.sig_deadline)

    def to_message(self) -> dict[str, Any]:
        return {
            "details": self.details.to_message(),
            "spender": self.spender,
            "sigDeadline": self.sig_deadline,
        }


class PermitBatch(_Frozen):
    details: tuple[PermitDetails, ...]
    spender: str
    sig_deadline: int = Field(alias="sigDeadline")

    @field_validator("spender")
    @classmethod
    def _checksum_spender(cls, v: str) -> str:
        return to_checksum_address(v)

    def as_tuple(self) -> tuple:
        return (
            [d.as_tuple() for d in self.details],
            self.spender,
            self.sig_deadline,
        )

    def to_message(self) -> dict[str, Any]:
        return {
            "details": [d.to_message() for d in self.details],
            "spender": self.spender,
            "sigDeadline": self.sig_deadline,
        }


class Permit2Signature(_Frozen):
    owner: str
    permit: PermitSingle
    signature: str

    @field_validator("owner")
    @classmethod
    def _checksum_owner(cls, v: str) -> str:
        return to_checksum_address(v)

    @field_validator("signature", mode="before")
    @classmethod
    def _normalize_signature(cls, v: Any) -> str:
        return _hex_signature(v)

    @property
    def signature_bytes(self) -> bytes:
        return bytes(HexBytes(self.signature))


class BatchPermit2Signature(_Frozen):
    owner: str
    permit_batch: PermitBatch
    signature: str

    @field_validator("owner")
    @classmethod
    def _checksum_owner(cls, v: str) -> str:
        return to_checksum_address(v)

    @field_validator("signature", mode="before")
    @classmethod
    def _normalize_signature(cls, v: Any) -> str:
        return _hex_signature(v)

    @property
    def signature_bytes(self) -> bytes:
        return bytes(HexBytes(self.signature))


class TypedData(_Frozen):
    """EIP-712 payload; `types` omits EIP712Domain, as wallets derive it."""

    domain: dict[str, Any]
    types: dict[str, list[dict[str, str]]]
    primary_type: str = Field(alias="primaryType")
    message: dict[str, Any]

    def to_eip712(self) -> dict[str, Any]:
        return {
            "domain": dict(self.domain),
            "types": {k: list(v) for k, v in self.types.items()},
            "primaryType": self.primary_type,
            "message": self.message,
        }


class Permit2Data(_Frozen):
    owner: str
    permit: PermitSingle
    to_sign: TypedData

    def with_signature(self, signature: str | bytes) -> Permit2Signature:
        return Permit2Signature(
            owner=self.owner, permit=self.permit, signature=signature
        )


class Permit2BatchData(_Frozen):
    owner: str
    permit_batch: PermitBatch
    to_sign: TypedData

    def with_signature(self, signature: str | bytes) -> BatchPermit2Signature:
        return BatchPermit2Signature(
            owner=self.owner, permit_batch=self.permit_batch, signature=signature
        )


class MethodParameters(_Frozen):
    calldata: str
    value: str
