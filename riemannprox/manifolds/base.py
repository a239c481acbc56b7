"""Abstract base class for the geometry providers.

This module defines the interface the solvers and the Bézier evaluator rely on.
Besides the primitive maps (exponential and logarithmic map, inner product),
it derives the composite operations used by proximal splitting methods:
shortest geodesics, reflections, mid points and Riemannian means.
"""

import logging
from collections.abc import Sequence

import jax.numpy as jnp
from jaxtyping import Array, Float, PRNGKeyArray

from ..core.constants import NumericalConstants
from ..core.type_system import ManifoldPoint, TangentVector

logger = logging.getLogger(__name__)


class Manifold:
    """Interface of a Riemannian manifold as seen by the solvers.

    Subclasses implement :meth:`exp`, :meth:`log`, :meth:`inner`, :meth:`proj`
    and :meth:`random_point`; everything else has a generic default in terms of
    these, which subclasses may override with closed forms.
    """

    def proj(self, x: ManifoldPoint, v: Float[Array, "..."]) -> TangentVector:
        """Map an ambient vector v to the tangent space at x."""
        raise NotImplementedError("Subclasses must implement projection operation")

    def exp(self, x: ManifoldPoint, v: TangentVector, t: float = 1.0) -> ManifoldPoint:
        """Apply the exponential map to move from point x along tangent vector t*v.

        Args:
            x: Point on the manifold.
            v: Tangent vector at x.
            t: Scaling of the tangent vector, i.e. the time along the geodesic.

        Returns:
            The point reached by following the geodesic from x in direction v for time t.
        """
        raise NotImplementedError("Subclasses must implement exponential map")

    def log(self, x: ManifoldPoint, y: ManifoldPoint) -> TangentVector:
        """Inverse of :meth:`exp`: the tangent vector v at x with exp(x, v) = y.

        Where y is beyond the cut locus of x, implementations return one of
        the minimizing directions.
        """
        raise NotImplementedError("Subclasses must implement logarithmic map")

    def inner(self, x: ManifoldPoint, u: TangentVector, v: TangentVector) -> Array:
        """Metric <u, v>_x of two tangent vectors at x."""
        raise NotImplementedError("Subclasses must implement Riemannian inner product")

    def dist(self, x: ManifoldPoint, y: ManifoldPoint) -> Array:
        """Length of the shortest geodesic from x to y, i.e. ||log_x(y)||_x."""
        v = self.log(x, y)
        return self.norm(x, v)

    def norm(self, x: ManifoldPoint, v: TangentVector) -> Array:
        """Compute the norm of tangent vector v at point x."""
        return jnp.sqrt(self.inner(x, v, v))

    def zero_tangent(self, x: ManifoldPoint) -> TangentVector:
        """Return the zero vector of the tangent space at x."""
        return jnp.zeros_like(x)

    def random_point(self, key: PRNGKeyArray, *shape: int) -> ManifoldPoint:
        """Sample point(s) on the manifold.

        Args:
            key: JAX PRNG key.
            *shape: Leading batch shape; empty for a single point.
        """
        raise NotImplementedError("Subclasses must implement random point generation")

    def shortest_geodesic(self, x: ManifoldPoint, y: ManifoldPoint, t: float) -> ManifoldPoint:
        """Evaluate the shortest geodesic from x (t=0) to y (t=1) at time t.

        Args:
            x: Start point of the geodesic.
            y: End point of the geodesic.
            t: Time along the geodesic; values outside [0, 1] extrapolate.

        Returns:
            The point gamma_{x,y}(t).
        """
        return self.exp(x, self.log(x, y), t)

    def reflect(self, pivot: ManifoldPoint, x: ManifoldPoint) -> ManifoldPoint:
        """Reflect x at the pivot point, i.e. compute exp_pivot(-log_pivot(x)).

        The result lies on the geodesic through x and the pivot, at the same
        distance from the pivot as x but on the opposite side.
        """
        return self.exp(pivot, -self.log(pivot, x))

    def mid_point(self, p: ManifoldPoint, q: ManifoldPoint, reference: ManifoldPoint | None = None) -> ManifoldPoint:
        """Compute the geodesic mid point of p and q.

        Manifolds on which the shortest geodesic is not always unique override
        this and return the mid point closest to ``reference``.
        """
        return self.exp(p, self.log(p, q), 0.5)

    def mean(
        self,
        points: Sequence[ManifoldPoint],
        reference: ManifoldPoint | None = None,
        max_iterations: int = NumericalConstants.MEAN_MAX_ITERATIONS,
        tolerance: float = NumericalConstants.MEAN_TOLERANCE,
    ) -> ManifoldPoint:
        """Compute the Riemannian (Karcher) mean of a set of points.

        Two points reduce to :meth:`mid_point`. Otherwise the mean is computed by
        the fixed point iteration ``m <- exp_m(1/n sum_i log_m(p_i))`` started at
        ``reference`` (or the first point), which makes the result deterministic
        when the mean is not unique.

        Args:
            points: Points on the manifold.
            reference: Start point and tie breaker.
            max_iterations: Maximal number of fixed point iterations.
            tolerance: Stop once the norm of the update falls below this value.

        Returns:
            The mean of the points.
        """
        points = list(points)
        if not points:
            raise ValueError("The mean of an empty set of points is not defined")
        if len(points) == 1:
            return points[0]
        if len(points) == 2:
            return self.mid_point(points[0], points[1], reference)

        mean = points[0] if reference is None else reference
        for iteration in range(max_iterations):
            update = sum(self.log(mean, p) for p in points) / len(points)
            step = self.norm(mean, update)
            mean = self.exp(mean, update)
            if step < tolerance:
                logger.debug(f"Karcher mean converged after {iteration + 1} iterations")
                break
        return mean

    def validate_point(self, x: ManifoldPoint, atol: float = NumericalConstants.VALIDATION_TOLERANCE) -> bool:
        """Validate that x is a valid point on the manifold."""
        raise NotImplementedError("Point validation not implemented")

    @property
    def dimension(self) -> int:
        """Intrinsic dimension of the manifold."""
        raise NotImplementedError("Subclasses must define manifold dimension")

    def __repr__(self) -> str:
        """String representation of the manifold."""
        return f"{self.__class__.__name__}()"
