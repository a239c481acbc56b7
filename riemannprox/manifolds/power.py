"""Implementation of power manifolds M^k = M x M x ... x M.

The power manifold is the data layout of the parallel Douglas-Rachford
algorithm: k copies of the same point are driven by k proximal maps at once,
and the coordinates are consolidated into one point of M by their mean.
"""

from collections.abc import Sequence

import jax.numpy as jnp
import jax.random as jr
from jaxtyping import Array, PRNGKeyArray

from .base import Manifold


class PowerManifold(Manifold):
    """Power manifold M^k of a base manifold M.

    Points are arrays with a leading axis of size k whose slices are points of
    the base manifold. Operations are performed coordinate-wise:

    - exp_x(v) = (exp_x₁(v₁), ..., exp_xₖ(vₖ))
    - <u, v>_x = Σᵢ <uᵢ, vᵢ>_xᵢ
    - d(x, y) = √(Σᵢ d(xᵢ, yᵢ)²)
    """

    def __init__(self, base: Manifold, k: int):
        """Initialize power manifold.

        Args:
            base: The base manifold.
            k: Number of copies.

        Raises:
            ValueError: If k < 1.
            TypeError: If base is not a Manifold instance.
        """
        if not isinstance(base, Manifold):
            raise TypeError(f"Base is not a Manifold instance: {type(base)}")
        if k < 1:
            raise ValueError(f"Power manifold requires at least one copy, got {k}")
        self.base = base
        self.k = k

    def _combine_points(self, components: Sequence[Array]) -> Array:
        """Stack component points into a power manifold point."""
        if len(components) != self.k:
            raise ValueError(f"Expected {self.k} components, got {len(components)}")
        return jnp.stack(list(components))

    def components(self, x: Array) -> list[Array]:
        """Split a power manifold point (or tangent vector) into its coordinates."""
        return [x[i] for i in range(self.k)]

    def diagonal(self, p: Array) -> Array:
        """Embed a base point as the constant point (p, ..., p)."""
        return self._combine_points([p] * self.k)

    def coordinate_mean(self, x: Array, reference: Array | None = None) -> Array:
        """Riemannian mean of the coordinates of x, a point of the base manifold.

        Args:
            x: Point on the power manifold.
            reference: Base point breaking ties between several means.

        Returns:
            The mean of x₁, ..., xₖ on the base manifold.
        """
        return self.base.mean(self.components(x), reference=reference)

    @property
    def dimension(self) -> int:
        """Intrinsic dimension, k times the dimension of the base."""
        return self.k * self.base.dimension

    def exp(self, x: Array, v: Array, t: float = 1.0) -> Array:
        """Apply the exponential map coordinate-wise."""
        return self._combine_points([self.base.exp(x[i], v[i], t) for i in range(self.k)])

    def log(self, x: Array, y: Array) -> Array:
        """Apply the logarithmic map coordinate-wise."""
        return self._combine_points([self.base.log(x[i], y[i]) for i in range(self.k)])

    def proj(self, x: Array, v: Array) -> Array:
        """Apply the tangent space projection coordinate-wise."""
        return self._combine_points([self.base.proj(x[i], v[i]) for i in range(self.k)])

    def inner(self, x: Array, u: Array, v: Array) -> Array:
        """Compute inner product as sum of component inner products."""
        total_inner = jnp.array(0.0)
        for i in range(self.k):
            total_inner = total_inner + self.base.inner(x[i], u[i], v[i])
        return total_inner

    def dist(self, x: Array, y: Array) -> Array:
        """Compute distance as Euclidean composition of component distances."""
        total_dist_sq = jnp.array(0.0)
        for i in range(self.k):
            total_dist_sq = total_dist_sq + self.base.dist(x[i], y[i]) ** 2
        return jnp.sqrt(total_dist_sq)

    def mid_point(self, p: Array, q: Array, reference: Array | None = None) -> Array:
        """Mid point computed coordinate-wise, each coordinate with its own reference."""
        return self._combine_points(
            [self.base.mid_point(p[i], q[i], None if reference is None else reference[i]) for i in range(self.k)]
        )

    def random_point(self, key: PRNGKeyArray, *shape: int) -> Array:
        """Generate a random point by sampling every coordinate independently."""
        if shape:
            raise NotImplementedError("Batched sampling is not supported on power manifolds")
        subkeys = jr.split(key, self.k)
        return self._combine_points([self.base.random_point(subkey) for subkey in subkeys])

    def validate_point(self, x: Array, atol: float = 1e-6) -> bool:
        """Every coordinate has to be a valid base point."""
        if jnp.shape(x)[:1] != (self.k,):
            return False
        return all(self.base.validate_point(x[i], atol) for i in range(self.k))

    def __repr__(self) -> str:
        """String representation of the power manifold."""
        return f"PowerManifold({self.base!r}, {self.k})"
