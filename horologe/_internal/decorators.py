"""Custom decorators for Horologe.

This module provides decorator utilities for the library:
    - @deprecated(message): Warn when an old API name is used

This module is not part of the public API.
"""

from __future__ import annotations

import functools
import warnings
from typing import Callable, ParamSpec, TypeVar

P = ParamSpec("P")
T = TypeVar("T")


def deprecated(message: str) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Mark a function or method as a deprecated alias.

    Each call emits a DeprecationWarning naming the qualified function,
    then delegates unchanged.

    Args:
        message: What to use instead.

    Examples:
        >>> class Example:
        ...     @classmethod
        ...     @deprecated("use Example.build instead")
        ...     def make(cls): ...
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            warnings.warn(
                f"{func.__qualname__} is deprecated; {message}",
                DeprecationWarning,
                stacklevel=2,
            )
            return func(*args, **kwargs)

        return wrapper

    return decorator


__all__ = [
    "deprecated",
]
