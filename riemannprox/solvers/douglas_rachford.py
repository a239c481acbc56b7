"""Douglas-Rachford splitting on Riemannian manifolds.

Minimizes F = f + g for two functions with known proximal maps. The iteration
is driven by a point t; with reflections R at the proximal points,

    t ← γ(α(i); t, R_{λ g}(R_{λ f}(t))),

where γ(α; a, b) is the point at time α on the shortest geodesic from a to b
and R_{λ f}(t) reflects t at prox_{λ f}(t). The reported iterate is the
second proximal point.

For a sum of m > 2 functions the parallel variant runs on the power manifold
M^m: f is the sum of the m functions acting on one coordinate each, g is the
indicator function of the diagonal, and the reported iterate is the mean of
the coordinates.

References:
    Bergmann, R., Persch, J., & Steidl, G. (2016). A parallel Douglas-Rachford
    algorithm for minimizing ROF-like functionals on images with values in
    symmetric Hadamard manifolds. SIAM Journal on Imaging Sciences, 9(3), 901-937.
"""

from collections.abc import Callable, Sequence
from typing import Any

from jaxtyping import Array

from ..core.constants import SolverDefaults
from ..core.type_system import ManifoldPoint, ParameterSchedule, ProximalMap
from ..manifolds.base import Manifold
from ..manifolds.power import PowerManifold
from ..optimizers.state import OptState, as_schedule
from ..problems.proximal import ProximalProblem, get_proximal_map
from ..problems.proximal_maps import prox_diagonal, prox_parallel
from .base import Solver, decorate_state, register_solver, solve
from .stopping import StopAfterIteration, StoppingCriterion

ReflectionFunction = Callable[[ManifoldPoint, ManifoldPoint], ManifoldPoint]


class DouglasRachfordState(OptState):
    """State of the Douglas-Rachford algorithm.

    Attributes:
        x: The reported iterate. In parallel mode a point of the base manifold,
            the mean of the coordinates of the last proximal point.
        t: The point driving the iteration, on the problem's manifold.
        lambda_fn: Proximal parameter per iteration, λ(i).
        alpha_fn: Relaxation per iteration, α(i); 0 keeps t, 1 moves to the
            double reflection.
        reflect_fn: Reflection ``(pivot, x) -> y``; ``None`` uses the
            manifold's reflection.
        stopping_criterion: Criterion checked after every step.
        parallel: Whether this is the parallel variant on a power manifold.
    """

    def __init__(
        self,
        x: ManifoldPoint,
        lambda_fn: ParameterSchedule | float = SolverDefaults.DOUGLAS_RACHFORD_LAMBDA,
        alpha_fn: ParameterSchedule | float = SolverDefaults.DOUGLAS_RACHFORD_ALPHA,
        reflect_fn: ReflectionFunction | None = None,
        stopping_criterion: StoppingCriterion | None = None,
        parallel: bool = False,
    ):
        """Initialize the state.

        Args:
            x: Initial point of the problem's manifold. In parallel mode this is
                a point of the power manifold, which starts the driver t; the
                reported iterate becomes the mean of its coordinates.
            lambda_fn: Constant or schedule, defaults to 1.0.
            alpha_fn: Constant or schedule, defaults to 0.9.
            reflect_fn: Replacement for the manifold's reflection.
            stopping_criterion: Defaults to stopping after 300 iterations.
            parallel: Run the parallel variant.
        """
        if stopping_criterion is None:
            stopping_criterion = StopAfterIteration(SolverDefaults.DOUGLAS_RACHFORD_MAX_ITERATIONS)
        super().__init__(x, stopping_criterion)
        self.t = x
        self.lambda_fn = as_schedule(lambda_fn)
        self.alpha_fn = as_schedule(alpha_fn)
        self.reflect_fn = reflect_fn
        self.parallel = parallel

    def get_manifold(self, problem: ProximalProblem) -> Manifold:
        """Return the base manifold in parallel mode, the problem's manifold otherwise."""
        if self.parallel:
            return problem.manifold.base
        return problem.manifold


@register_solver(DouglasRachfordState)
class DouglasRachfordSolver(Solver):
    """Solver hooks of the Douglas-Rachford algorithm."""

    def initialize(self, problem: ProximalProblem, state: Any) -> None:
        """Check the problem and, in parallel mode, report the mean of the driver.

        Raises:
            ValueError: If the problem does not have exactly two proximal maps.
            TypeError: If parallel mode is requested on a manifold that is not a
                power manifold.
        """
        if problem.number_of_proxes != 2:
            raise ValueError(f"Douglas-Rachford needs exactly two proximal maps, got {problem.number_of_proxes}")
        if state.parallel:
            if not isinstance(problem.manifold, PowerManifold):
                raise TypeError(f"Parallel Douglas-Rachford needs a PowerManifold, got {problem.manifold!r}")
            state.x = problem.manifold.coordinate_mean(state.t)

    def step(self, problem: ProximalProblem, state: Any, iteration: int) -> None:
        """Perform one relaxed double reflection."""
        manifold = problem.manifold
        reflect = state.reflect_fn if state.reflect_fn is not None else manifold.reflect
        lam = state.lambda_fn(iteration)

        t = state.t
        p = get_proximal_map(problem, lam, t, 0)
        r = reflect(p, t)
        q = get_proximal_map(problem, lam, r, 1)
        r2 = reflect(q, r)
        state.t = manifold.shortest_geodesic(t, r2, state.alpha_fn(iteration))

        if state.parallel:
            state.x = manifold.coordinate_mean(q, reference=state.x)
        else:
            state.x = q


def douglas_rachford(
    manifold: Manifold,
    cost: Callable[[ManifoldPoint], Array | float],
    proxes: Sequence[ProximalMap],
    x0: ManifoldPoint,
    *,
    lambda_fn: ParameterSchedule | float = SolverDefaults.DOUGLAS_RACHFORD_LAMBDA,
    alpha_fn: ParameterSchedule | float = SolverDefaults.DOUGLAS_RACHFORD_ALPHA,
    reflect_fn: ReflectionFunction | None = None,
    stopping_criterion: StoppingCriterion | None = None,
    debug: Sequence[Any] | None = None,
    record: Sequence[Any] | None = None,
    return_state: bool = False,
):
    """Minimize a sum of functions with known proximal maps by Douglas-Rachford splitting.

    With two proximal maps the classical algorithm runs on ``manifold``. With
    more, the parallel variant runs on the power manifold with one copy per
    map, starting from the constant point (x0, ..., x0).

    Args:
        manifold: The manifold to optimize on.
        cost: The cost F on ``manifold``.
        proxes: At least two proximal maps ``(lam, x) -> y`` on ``manifold``.
        x0: Initial point.
        lambda_fn: See :class:`DouglasRachfordState`.
        alpha_fn: See :class:`DouglasRachfordState`.
        reflect_fn: See :class:`DouglasRachfordState`. In the parallel variant it
            acts on power manifold points.
        stopping_criterion: See :class:`DouglasRachfordState`.
        debug: Configuration list for :class:`~riemannprox.solvers.debug.DebugOptions`.
        record: Configuration list for :class:`~riemannprox.solvers.record.RecordOptions`.
        return_state: Also return the (decorated) state, e.g. to read records.

    Returns:
        The minimizer found, or ``(x, state)`` if ``return_state`` is set.

    Raises:
        ValueError: If fewer than two proximal maps are given.
    """
    proxes = list(proxes)
    if len(proxes) < 2:
        raise ValueError(f"Douglas-Rachford needs at least two proximal maps, got {len(proxes)}")

    parallel = len(proxes) > 2
    if parallel:
        power = PowerManifold(manifold, len(proxes))
        problem = ProximalProblem(power, cost, [prox_parallel(power, proxes), prox_diagonal(power)])
        x0 = power.diagonal(x0)
    else:
        problem = ProximalProblem(manifold, cost, proxes)

    state = DouglasRachfordState(
        x0,
        lambda_fn=lambda_fn,
        alpha_fn=alpha_fn,
        reflect_fn=reflect_fn,
        stopping_criterion=stopping_criterion,
        parallel=parallel,
    )
    state = decorate_state(state, debug=debug, record=record)
    x = solve(problem, state)
    return (x, state) if return_state else x
