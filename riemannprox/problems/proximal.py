"""Problems for solvers based on the evaluation of proximal maps.

A proximal map of a function f with parameter λ > 0 is

    prox_{λf}(x) = argmin_y f(y) + 1/(2λ) d(x, y)²,

with d the geodesic distance. Proximal maps are passed as functions
``(lam, x) -> y``, i.e. the parameter is part of their signature.
"""

from collections.abc import Callable, Sequence

from jaxtyping import Array

from ..core.type_system import ManifoldPoint, ProximalMap
from ..errors import ConstructionError, ProximalMapIndexError
from ..manifolds.base import Manifold
from .base import RiemannianProblem


class ProximalProblem(RiemannianProblem):
    """A cost function together with an ordered sequence of proximal maps.

    Attributes:
        manifold: The manifold the cost is defined on.
        cost_fn: The cost F, typically the sum of the functions whose proximal
            maps are given.
        proxes: The proximal maps, in order.
        output_counts: Declared number of outputs of each proximal map, e.g.
            larger than one for a combined map. Kept for the caller; the
            solvers visit every map once per cycle regardless of its count.
    """

    def __init__(
        self,
        manifold: Manifold,
        cost_fn: Callable[[ManifoldPoint], Array | float],
        proxes: Sequence[ProximalMap],
        output_counts: Sequence[int] | None = None,
        **kwargs,
    ):
        """Initialize the proximal problem.

        Args:
            manifold: The manifold the cost is defined on.
            cost_fn: Cost function to minimize.
            proxes: Proximal maps ``(lam, x) -> y``.
            output_counts: Number of outputs per proximal map, defaults to one each.
            **kwargs: Gradient information passed on to :class:`RiemannianProblem`.

        Raises:
            ConstructionError: If ``output_counts`` and ``proxes`` differ in length.
        """
        super().__init__(manifold, cost_fn, **kwargs)
        proxes = tuple(proxes)
        output_counts = (1,) * len(proxes) if output_counts is None else tuple(int(n) for n in output_counts)
        if len(output_counts) != len(proxes):
            raise ConstructionError(
                f"The output counts {list(output_counts)} have to be of the same length "
                f"as the number of proximal maps ({len(proxes)}).",
                expected=len(proxes),
                actual=len(output_counts),
            )
        self.proxes = proxes
        self.output_counts = output_counts

    @property
    def number_of_proxes(self) -> int:
        """Number of proximal maps of the problem."""
        return len(self.proxes)

    def prox(self, lam: float, x: ManifoldPoint, i: int) -> ManifoldPoint:
        """Evaluate the i-th (0-based) proximal map at x with parameter lam.

        Raises:
            ProximalMapIndexError: If there is no i-th proximal map.
        """
        if not 0 <= i < len(self.proxes):
            raise ProximalMapIndexError(i, len(self.proxes))
        return self.proxes[i](lam, x)


def get_cost(problem: RiemannianProblem, x: ManifoldPoint) -> Array | float:
    """Evaluate the cost function of a problem at x."""
    return problem.cost(x)


def get_proximal_map(problem: ProximalProblem, lam: float, x: ManifoldPoint, i: int) -> ManifoldPoint:
    """Evaluate the i-th (0-based) proximal map of a problem at x with parameter lam.

    Args:
        problem: The proximal problem.
        lam: The proximal parameter, positive.
        x: Point on the problem's manifold.
        i: Index of the proximal map.

    Returns:
        ``problem.proxes[i](lam, x)``.

    Raises:
        ProximalMapIndexError: If i is not an index of the problem's proximal maps.
    """
    return problem.prox(lam, x, i)
