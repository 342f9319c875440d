from __future__ import annotations


class UniswapV4KitError(Exception):
    """Base class for every error raised by the kit."""


class ConfigurationError(UniswapV4KitError):
    """Missing chain instance, unsupported chain or missing contract address."""


class ResolutionError(UniswapV4KitError):
    pass


class TokenResolutionError(ResolutionError):
    pass


class PoolNotFoundError(ResolutionError):
    pass


class PositionNotFoundError(ResolutionError):
    def __init__(self, token_id: int | str, message: str | None = None):
        self.token_id = token_id
        super().__init__(message or f"Position {token_id} not found")


class ValidationError(UniswapV4KitError, ValueError):
    """Caller input violates a precondition."""


class QuoteError(UniswapV4KitError):
    pass


class EncodingError(UniswapV4KitError, ValueError):
    """Protocol values that cannot be encoded (ticks out of range, zero liquidity)."""
