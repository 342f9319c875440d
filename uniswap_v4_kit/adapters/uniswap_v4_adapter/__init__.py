"""Uniswap V4 Adapter - pool/position reads, quotes, Permit2 and calldata builders."""

from .adapter import UniswapV4Adapter
from .models import (
    BatchPermit2Signature,
    MethodParameters,
    Permit2BatchData,
    Permit2Data,
    Permit2Signature,
    PermitBatch,
    PermitDetails,
    PermitSingle,
    TypedData,
)
from .types import Pool, Position, QuoteResponse, Token

__all__ = [
    "UniswapV4Adapter",
    "Token",
    "Pool",
    "Position",
    "QuoteResponse",
    "PermitDetails",
    "PermitSingle",
    "PermitBatch",
    "Permit2Signature",
    "BatchPermit2Signature",
    "Permit2Data",
    "Permit2BatchData",
    "TypedData",
    "MethodParameters",
]
