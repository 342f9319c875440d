from uniswap_v4_kit.core.adapters.BaseAdapter import BaseAdapter
from uniswap_v4_kit.core.errors import (
    ConfigurationError,
    EncodingError,
    PoolNotFoundError,
    PositionNotFoundError,
    QuoteError,
    ResolutionError,
    TokenResolutionError,
    UniswapV4KitError,
    ValidationError,
)
from uniswap_v4_kit.core.registry import Instance, InstanceRegistry, default_registry

__all__ = [
    "BaseAdapter",
    "Instance",
    "InstanceRegistry",
    "default_registry",
    "UniswapV4KitError",
    "ConfigurationError",
    "ResolutionError",
    "TokenResolutionError",
    "PoolNotFoundError",
    "PositionNotFoundError",
    "ValidationError",
    "QuoteError",
    "EncodingError",
]
