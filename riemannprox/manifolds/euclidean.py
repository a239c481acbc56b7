"""Implementation of Euclidean space R^(n1 x n2 x ...) as a flat Riemannian manifold.

Geodesics are straight lines, so every operation has a closed form. Points may
have any shape, including the empty shape of a real number.
"""

import math
from collections.abc import Sequence

import jax.numpy as jnp
import jax.random as jr
from jaxtyping import Array

from ..core.jit_decorator import jit_optimized
from .base import Manifold


class Euclidean(Manifold):
    """Euclidean space of arrays of a fixed shape with the standard inner product."""

    def __init__(self, *shape: int):
        """Initialize Euclidean space.

        Args:
            *shape: Shape of the points; no arguments means the real line with
                scalar (0-dimensional) points.

        Raises:
            ValueError: If any extent is not positive.
        """
        if any(n < 1 for n in shape):
            raise ValueError(f"Euclidean extents must be positive, got {shape}")
        self._shape = tuple(shape)

    @jit_optimized(static_args=(0,))
    def proj(self, x: Array, v: Array) -> Array:
        """Every ambient vector is tangent, so the projection is the identity."""
        return jnp.asarray(v)

    @jit_optimized(static_args=(0,))
    def exp(self, x: Array, v: Array, t: float = 1.0) -> Array:
        """Move along the straight line x + t*v."""
        return x + t * v

    @jit_optimized(static_args=(0,))
    def log(self, x: Array, y: Array) -> Array:
        """Return the difference vector y - x."""
        return y - x

    @jit_optimized(static_args=(0,))
    def inner(self, x: Array, u: Array, v: Array) -> Array:
        """Standard inner product of the flattened arrays."""
        return jnp.sum(u * v)

    @jit_optimized(static_args=(0,))
    def dist(self, x: Array, y: Array) -> Array:
        """Euclidean (Frobenius) distance."""
        return jnp.sqrt(jnp.sum((y - x) ** 2))

    def mid_point(self, p: Array, q: Array, reference: Array | None = None) -> Array:
        """The mid point is unique, the reference is ignored."""
        return (p + q) / 2

    def mean(self, points: Sequence[Array], reference: Array | None = None, **kwargs) -> Array:
        """Arithmetic mean of the points."""
        points = list(points)
        if not points:
            raise ValueError("The mean of an empty set of points is not defined")
        return jnp.mean(jnp.stack(points), axis=0)

    def random_point(self, key: Array, *shape: int) -> Array:
        """Sample point(s) from the standard normal distribution."""
        return jr.normal(key, (*shape, *self._shape))

    def validate_point(self, x: Array, atol: float = 1e-6) -> bool:
        """Any finite array of the right shape is a point."""
        return bool(jnp.shape(x) == self._shape and jnp.all(jnp.isfinite(x)))

    @property
    def shape(self) -> tuple[int, ...]:
        """Shape of the points."""
        return self._shape

    @property
    def dimension(self) -> int:
        """Number of real coordinates."""
        return math.prod(self._shape)

    def __repr__(self) -> str:
        """String representation of the Euclidean space."""
        return f"Euclidean({', '.join(str(n) for n in self._shape)})"
