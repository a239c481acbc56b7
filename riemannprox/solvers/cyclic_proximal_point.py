"""Cyclic Proximal Point algorithm.

Minimizes a sum F = f₁ + ... + fₘ of functions with known proximal maps by
applying the maps one after the other with a decreasing parameter λ(i):

    x ← prox_{λ(i) f_j}(x)    for j in the visiting order of iteration i.

The stopping criterion is checked once per full cycle.

References:
    Bačák, M. (2014). Computing medians and means in Hadamard spaces.
    SIAM Journal on Optimization, 24(3), 1542-1566.
"""

import numbers
from collections.abc import Callable, Sequence
from typing import Any

import jax.random as jr
import numpy as np
from jaxtyping import Array, PRNGKeyArray

from ..core.constants import SolverDefaults
from ..core.type_system import ManifoldPoint, ParameterSchedule, ProximalMap
from ..manifolds.base import Manifold
from ..optimizers.state import EvalOrder, OptState, as_schedule
from ..problems.proximal import ProximalProblem, get_proximal_map
from .base import Solver, decorate_state, register_solver, solve
from .stopping import StopAfterIteration, StoppingCriterion, StopWhenChangeLess


def _as_key(key: PRNGKeyArray | int | None) -> PRNGKeyArray:
    """Turn a seed into a PRNG key, drawing fresh entropy when no seed is given."""
    if key is None:
        return jr.key(int(np.random.SeedSequence().generate_state(1)[0] >> 1))
    if isinstance(key, numbers.Integral):
        return jr.key(int(key))
    return key


class CyclicProximalPointState(OptState):
    """State of the Cyclic Proximal Point algorithm.

    Attributes:
        x: Current iterate.
        stopping_criterion: Criterion checked after every cycle.
        lambda_fn: Proximal parameter per iteration, λ(i).
        evaluation_order: How the proximal maps are visited.
        order: The visiting order of the latest cycle; for
            ``EvalOrder.FIXED_RANDOM`` the cached order reused by every cycle.
        key: PRNG key for random visiting orders, split on every draw.
    """

    def __init__(
        self,
        x: ManifoldPoint,
        stopping_criterion: StoppingCriterion | None = None,
        lambda_fn: ParameterSchedule | float | None = None,
        evaluation_order: EvalOrder | str = EvalOrder.LINEAR,
        key: PRNGKeyArray | int | None = None,
    ):
        """Initialize the state.

        Args:
            x: Initial point.
            stopping_criterion: Defaults to stopping after 5000 cycles or when
                a cycle changes the iterate by less than 1e-12.
            lambda_fn: Defaults to ``lambda i: 1.0 / i``.
            evaluation_order: An :class:`EvalOrder` or its value, e.g. ``"random"``.
            key: PRNG key or integer seed for random orders. Without one, fresh
                entropy is used.
        """
        if stopping_criterion is None:
            stopping_criterion = StopAfterIteration(SolverDefaults.CYCLIC_PROXIMAL_POINT_MAX_ITERATIONS) | StopWhenChangeLess(
                SolverDefaults.CYCLIC_PROXIMAL_POINT_MIN_CHANGE
            )
        super().__init__(x, stopping_criterion)
        self.lambda_fn = as_schedule(lambda_fn) if lambda_fn is not None else (lambda iteration: 1.0 / iteration)
        self.evaluation_order = EvalOrder(evaluation_order)
        self.order: list[int] | None = None
        self.key = _as_key(key)


def _draw_order(state: Any, m: int) -> list[int]:
    state.key, subkey = jr.split(state.key)
    return [int(j) for j in jr.permutation(subkey, m)]


@register_solver(CyclicProximalPointState)
class CyclicProximalPointSolver(Solver):
    """Solver hooks of the Cyclic Proximal Point algorithm."""

    def initialize(self, problem: ProximalProblem, state: Any) -> None:
        """Forget the visiting order of a previous run."""
        state.order = None

    def visiting_order(self, problem: ProximalProblem, state: Any) -> list[int]:
        """Return the order of the proximal maps for the next cycle."""
        m = problem.number_of_proxes
        if state.evaluation_order is EvalOrder.LINEAR:
            return list(range(m))
        if state.evaluation_order is EvalOrder.FIXED_RANDOM and state.order is not None:
            return state.order
        return _draw_order(state, m)

    def step(self, problem: ProximalProblem, state: Any, iteration: int) -> None:
        """Apply all proximal maps once, each to the result of the previous one."""
        lam = state.lambda_fn(iteration)
        state.order = self.visiting_order(problem, state)
        x = state.get_iterate()
        for j in state.order:
            x = get_proximal_map(problem, lam, x, j)
        state.set_iterate(x)


def cyclic_proximal_point(
    manifold: Manifold,
    cost: Callable[[ManifoldPoint], Array | float],
    proxes: Sequence[ProximalMap],
    x0: ManifoldPoint,
    *,
    output_counts: Sequence[int] | None = None,
    stopping_criterion: StoppingCriterion | None = None,
    lambda_fn: ParameterSchedule | float | None = None,
    evaluation_order: EvalOrder | str = EvalOrder.LINEAR,
    key: PRNGKeyArray | int | None = None,
    debug: Sequence[Any] | None = None,
    record: Sequence[Any] | None = None,
    return_state: bool = False,
):
    """Minimize a sum of functions with known proximal maps on a manifold.

    Args:
        manifold: The manifold to optimize on.
        cost: The cost F, used by debug output, records and stopping criteria.
        proxes: Proximal maps ``(lam, x) -> y`` of the summands of F.
        x0: Initial point.
        output_counts: Number of outputs per proximal map, see
            :class:`~riemannprox.problems.proximal.ProximalProblem`.
        stopping_criterion: See :class:`CyclicProximalPointState`.
        lambda_fn: See :class:`CyclicProximalPointState`.
        evaluation_order: See :class:`CyclicProximalPointState`.
        key: See :class:`CyclicProximalPointState`.
        debug: Configuration list for :class:`~riemannprox.solvers.debug.DebugOptions`.
        record: Configuration list for :class:`~riemannprox.solvers.record.RecordOptions`.
        return_state: Also return the (decorated) state, e.g. to read records.

    Returns:
        The minimizer found, or ``(x, state)`` if ``return_state`` is set.

    Examples:
        >>> line = create_euclidean()
        >>> soft_threshold = lambda lam, x: jnp.sign(x) * jnp.maximum(jnp.abs(x) - lam, 0.0)
        >>> x = cyclic_proximal_point(line, jnp.abs, [soft_threshold], jnp.array(5.0))
    """
    problem = ProximalProblem(manifold, cost, proxes, output_counts=output_counts)
    state = CyclicProximalPointState(
        x0,
        stopping_criterion=stopping_criterion,
        lambda_fn=lambda_fn,
        evaluation_order=evaluation_order,
        key=key,
    )
    state = decorate_state(state, debug=debug, record=record)
    x = solve(problem, state)
    return (x, state) if return_state else x
