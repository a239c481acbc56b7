"""The unit sphere S^n with the metric inherited from R^(n+1).

The sphere is the standard example of a manifold on which shortest geodesics
are not unique: antipodal points are joined by infinitely many great circles.
:meth:`Sphere.mid_point` resolves that case with a reference point, which the
parallel Douglas-Rachford algorithm relies on.
"""

import jax.numpy as jnp
import jax.random as jr
from jaxtyping import Array

from ..core.constants import NumericalConstants
from ..core.jit_decorator import jit_optimized
from ..core.type_system import ManifoldPoint
from .base import Manifold


class Sphere(Manifold):
    """Unit sphere S^n = {x ∈ R^(n+1) : ||x|| = 1}.

    Geodesics are great circles and the distance of two points is the angle
    between them, so it never exceeds π.
    """

    def __init__(self, n: int = 2):
        """Create S^n.

        Args:
            n: Intrinsic dimension, 2 gives the sphere in R^3.

        Raises:
            ValueError: If n < 1.
        """
        if n < 1:
            raise ValueError(f"Sphere dimension must be positive, got {n}")
        self._n = n
        self._ambient_dim = n + 1

    @jit_optimized(static_args=(0,))
    def proj(self, x: Array, v: Array) -> Array:
        """Remove the normal component of v, leaving a vector orthogonal to x."""
        return v - jnp.sum(x * v, axis=-1, keepdims=True) * x

    @jit_optimized(static_args=(0,))
    def exp(self, x: Array, v: Array, t: float = 1.0) -> Array:
        """Walk along the great circle through x in direction v.

        Args:
            x: Unit vector.
            v: Tangent vector at x.
            t: Scaling of v; the point reached has distance t * ||v|| from x.

        Returns:
            cos(||tv||) x + sin(||tv||) tv / ||tv||.
        """
        tv = t * v
        v_norm = jnp.linalg.norm(tv)
        # The sin(s)/s factor tends to 1 for vanishing tv
        safe_norm = jnp.maximum(v_norm, NumericalConstants.EPSILON)
        y = jnp.cos(v_norm) * x + jnp.sin(safe_norm) * tv / safe_norm
        # Renormalize to stay on the sphere despite rounding
        return y / jnp.linalg.norm(y)

    @jit_optimized(static_args=(0,))
    def log(self, x: Array, y: Array) -> Array:
        """Return the tangent vector at x pointing to y with length d(x, y).

        For antipodal points the direction is not unique and the result
        degenerates to a vector of length π in an arbitrary direction.
        """
        v = self.proj(x, y)
        v_norm = jnp.linalg.norm(v)
        theta = jnp.arctan2(v_norm, jnp.sum(x * y))
        return jnp.asarray(theta * v / jnp.maximum(v_norm, NumericalConstants.EPSILON))

    @jit_optimized(static_args=(0,))
    def inner(self, x: Array, u: Array, v: Array) -> Array:
        """Euclidean inner product of the ambient space restricted to the tangent space."""
        return jnp.sum(u * v)

    @jit_optimized(static_args=(0,))
    def dist(self, x: Array, y: Array) -> Array:
        """Compute the geodesic distance, the angle between x and y.

        Computed as atan2(||proj_x(y)||, <x, y>), which stays accurate for
        nearby points in single precision.
        """
        return jnp.arctan2(jnp.linalg.norm(self.proj(x, y)), jnp.sum(x * y))

    def mid_point(self, p: Array, q: Array, reference: Array | None = None) -> Array:
        """Compute the mid point of p and q, nearest to reference for antipodal points.

        For antipodal p and q every point of the great sphere orthogonal to p is
        a mid point. Among those the one closest to ``reference`` is returned,
        i.e. the normalized component of the reference orthogonal to p. Without
        a (usable) reference the first unit vector not parallel to p is used.

        Args:
            p: First point.
            q: Second point.
            reference: Tie breaker for antipodal points.

        Returns:
            A mid point of p and q.
        """
        if float(jnp.sum(p * q)) > -1.0 + NumericalConstants.ANTIPODAL_TOLERANCE:
            return self.exp(p, self.log(p, q), 0.5)

        direction = None if reference is None else self.proj(p, reference)
        if direction is None or float(jnp.linalg.norm(direction)) < NumericalConstants.ANTIPODAL_TOLERANCE:
            # The basis vector along the smallest coordinate of p is never parallel to p
            direction = self.proj(p, jnp.zeros_like(p).at[jnp.argmin(jnp.abs(p))].set(1.0))
        return direction / jnp.linalg.norm(direction)

    def random_point(self, key: Array, *shape: int) -> Array:
        """Draw uniformly distributed point(s) by normalizing Gaussian samples."""
        samples = jr.normal(key, (*shape, self._ambient_dim))
        return jnp.asarray(samples / jnp.linalg.norm(samples, axis=-1, keepdims=True))

    def validate_point(self, x: ManifoldPoint, atol: float = 1e-6) -> bool:
        """Validate that x is a unit vector of the right size."""
        if jnp.shape(x) != (self._ambient_dim,):
            return False
        return bool(jnp.allclose(jnp.linalg.norm(x), 1.0, atol=atol))

    @property
    def dimension(self) -> int:
        """Intrinsic dimension n."""
        return self._n

    @property
    def ambient_dimension(self) -> int:
        """Size n + 1 of the embedding space."""
        return self._ambient_dim

    def __repr__(self) -> str:
        """String representation of the sphere."""
        return f"Sphere({self._n})"
