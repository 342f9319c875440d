from __future__ import annotations

from collections.abc import Callable, Coroutine
from functools import wraps
from typing import Any, TypeVar

from uniswap_v4_kit.core.errors import UniswapV4KitError

T = TypeVar("T")


def status_tuple(
    fn: Callable[..., Coroutine[Any, Any, T]],
) -> Callable[..., Coroutine[Any, Any, tuple[bool, T | str]]]:
    """Wrap an async adapter method to return ``(True, result)`` or ``(False, error_str)``.

    Kit errors (bad input, missing pool, reverted quote) are logged as warnings
    with their class name; anything else is logged with its traceback.
    """

    @wraps(fn)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> tuple[bool, T | str]:
        try:
            result = await fn(self, *args, **kwargs)
            return (True, result)
        except UniswapV4KitError as exc:
            self.logger.warning(f"{fn.__name__} failed ({type(exc).__name__}): {exc}")
            return (False, str(exc))
        except Exception as exc:
            self.logger.opt(exception=exc).error(f"Error in {fn.__name__}: {exc}")
            return (False, str(exc))

    return wrapper  # type: ignore[return-value]
