"""Base class for optimization problems on Riemannian manifolds.

A problem bundles the manifold with the cost function and, optionally, a way to
obtain the Riemannian gradient. Problems are built once and not modified by
the solvers.
"""

from collections.abc import Callable

import jax
from jaxtyping import Array

from ..core.type_system import ManifoldPoint, TangentVector
from ..manifolds.base import Manifold


class RiemannianProblem:
    """A cost function on a Riemannian manifold.

    The Riemannian gradient is obtained, in this order of preference, from
    ``grad_fn``, from projecting ``euclidean_grad_fn`` onto the tangent space,
    or from projecting the automatic derivative of ``cost_fn``.

    Attributes:
        manifold: The manifold the cost is defined on.
        cost_fn: Function mapping a point to a real number.
        grad_fn: Optional Riemannian gradient.
        euclidean_grad_fn: Optional Euclidean gradient.
    """

    def __init__(
        self,
        manifold: Manifold,
        cost_fn: Callable[[ManifoldPoint], Array | float],
        grad_fn: Callable[[ManifoldPoint], TangentVector] | None = None,
        euclidean_grad_fn: Callable[[ManifoldPoint], Array] | None = None,
    ):
        """Initialize the problem.

        Args:
            manifold: The manifold the cost is defined on.
            cost_fn: Cost function to minimize.
            grad_fn: Riemannian gradient of the cost, if known.
            euclidean_grad_fn: Euclidean gradient of the cost, if known.
        """
        self.manifold = manifold
        self.cost_fn = cost_fn
        self.grad_fn = grad_fn
        self.euclidean_grad_fn = euclidean_grad_fn

    def cost(self, x: ManifoldPoint) -> Array | float:
        """Evaluate the cost function at x."""
        return self.cost_fn(x)

    def grad(self, x: ManifoldPoint) -> TangentVector:
        """Compute the Riemannian gradient of the cost at x."""
        if self.grad_fn is not None:
            return self.grad_fn(x)
        if self.euclidean_grad_fn is not None:
            return self.manifold.proj(x, self.euclidean_grad_fn(x))
        return self.manifold.proj(x, jax.grad(self.cost_fn)(x))

    def __repr__(self) -> str:
        """String representation of the problem."""
        return f"{self.__class__.__name__}({self.manifold!r})"
