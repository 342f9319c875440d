__version__ = "0.1.0"

from uniswap_v4_kit.core import (
    BaseAdapter,
    Instance,
    InstanceRegistry,
    UniswapV4KitError,
    default_registry,
)

__all__ = [
    "__version__",
    "BaseAdapter",
    "Instance",
    "InstanceRegistry",
    "UniswapV4KitError",
    "default_registry",
]
