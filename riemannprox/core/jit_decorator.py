"""JIT optimization decorator for separating JIT concerns from manifold logic.

Manifold operations are written as plain ``jax.numpy`` code and decorated with
:func:`jit_optimized`. Compilation is cached per function and can be switched
off globally, which is convenient when debugging a geometry provider.
"""

import functools
from collections.abc import Callable
from typing import Any

import jax


class JITOptimizer:
    """JIT optimizer caching the compiled version of each decorated function."""

    def __init__(self) -> None:
        """Initialize an enabled optimizer with an empty cache."""
        self.enabled = True
        self._cache: dict[tuple[str, tuple[int, ...]], Callable[..., Any]] = {}

    def compile(self, func: Callable[..., Any], static_args: tuple[int, ...] = ()) -> Callable[..., Any]:
        """Compile function with JIT and cache the result.

        Args:
            func: Function to compile.
            static_args: Tuple of argument positions to treat as static.

        Returns:
            JIT-compiled function.
        """
        # Qualified names keep methods of different manifolds apart
        cache_key = (func.__qualname__, static_args)
        if cache_key not in self._cache:
            self._cache[cache_key] = jax.jit(func, static_argnums=static_args) if static_args else jax.jit(func)
        return self._cache[cache_key]

    def clear_cache(self) -> None:
        """Clear the JIT compilation cache."""
        self._cache.clear()


# Global optimizer instance for decorator usage
_global_optimizer = JITOptimizer()


def jit_optimized(static_args: tuple[int, ...] = ()) -> Callable[..., Any]:
    """Decorator for JIT optimization with caching support.

    Methods pass ``static_args=(0,)`` so that the manifold instance itself is a
    static argument; manifolds hash by identity.

    Args:
        static_args: Tuple of argument positions to treat as static during compilation.

    Returns:
        Decorator function that applies JIT optimization.

    Examples:
        >>> @jit_optimized()
        ... def exp_map(x, v):
        ...     return x + v
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not _global_optimizer.enabled:
                return func(*args, **kwargs)
            return _global_optimizer.compile(func, static_args)(*args, **kwargs)

        wrapper._original_func = func  # type: ignore[attr-defined]
        return wrapper

    return decorator


def set_jit_enabled(enabled: bool) -> None:
    """Switch JIT compilation of decorated functions on or off."""
    _global_optimizer.enabled = enabled


def is_jit_enabled() -> bool:
    """Whether decorated functions are currently JIT compiled."""
    return _global_optimizer.enabled


def clear_jit_cache() -> None:
    """Drop every cached compiled function."""
    _global_optimizer.clear_cache()
