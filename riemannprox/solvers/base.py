"""The generic solve loop shared by all algorithms.

An algorithm is a :class:`Solver` with three hooks, registered for the state
class it works on::

    @register_solver(MyState)
    class MySolver(Solver):
        def initialize(self, problem, state): ...
        def step(self, problem, state, iteration): ...

:func:`solve` then runs: initialize, reset the stopping criterion and the
decorators, and repeat step / observe / check until the stopping criterion
fires. Decorators are notified once more with iteration ``-1`` at the end.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from ..core.type_system import ManifoldPoint
from ..optimizers.state import OptionsDecorator, OptState, get_options, is_options_decorator
from ..problems.base import RiemannianProblem
from .debug import DebugOptions
from .record import RecordOptions

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=type)


class Solver:
    """Hooks of one algorithm for the generic solve loop."""

    def initialize(self, problem: RiemannianProblem, state: OptState | OptionsDecorator) -> None:
        """Prepare the state before the first step."""

    def step(self, problem: RiemannianProblem, state: OptState | OptionsDecorator, iteration: int) -> None:
        """Perform one iteration, updating the state in place."""
        raise NotImplementedError("Subclasses must implement step")

    def get_result(self, state: OptState | OptionsDecorator) -> ManifoldPoint:
        """Return the result of the algorithm after it stopped."""
        return state.get_iterate()


_SOLVERS: dict[type, Solver] = {}


def register_solver(state_class: type) -> Callable[[S], S]:
    """Class decorator registering a :class:`Solver` for a state class."""

    def decorator(solver_class: S) -> S:
        _SOLVERS[state_class] = solver_class()
        return solver_class

    return decorator


def get_solver(state: OptState | OptionsDecorator) -> Solver:
    """Return the solver registered for the (undecorated) state.

    Raises:
        TypeError: If no solver is registered for the state's class or its bases.
    """
    options = get_options(state)
    for cls in type(options).__mro__:
        if cls in _SOLVERS:
            return _SOLVERS[cls]
    raise TypeError(f"No solver registered for states of type {type(options).__name__}")


def fire_decorators(problem: RiemannianProblem, state: OptState | OptionsDecorator, iteration: int) -> None:
    """Notify every decorator around ``state``, outermost first."""
    while is_options_decorator(state):
        state.observe(problem, iteration)
        state = state.options


def decorate_state(
    state: OptState,
    debug: Sequence[Any] | None = None,
    record: Sequence[Any] | None = None,
) -> OptState | OptionsDecorator:
    """Wrap a state with record and debug decorators, as the convenience solvers do.

    The record decorator is the inner one, so debug output sees the same state.
    """
    if record:
        state = RecordOptions(state, record)
    if debug:
        state = DebugOptions(state, debug)
    return state


def solve(problem: RiemannianProblem, state: OptState | OptionsDecorator) -> ManifoldPoint:
    """Run the algorithm registered for ``state`` on ``problem``.

    The state is modified in place; afterwards it holds the final iterate, the
    number of iterations in ``state.iterations`` and the reason for stopping in
    its stopping criterion (see :func:`~riemannprox.solvers.stopping.get_reason`).

    Args:
        problem: The problem to solve.
        state: The algorithm's state, possibly decorated with debug or record output.

    Returns:
        The result of the algorithm.
    """
    solver = get_solver(state)
    stopping_criterion = state.get_stopping_criterion()
    logger.debug(f"Starting {type(solver).__name__} on {problem!r} with {stopping_criterion!r}")

    solver.initialize(problem, state)
    stopping_criterion(problem, state, 0)
    fire_decorators(problem, state, 0)

    iteration = 0
    while True:
        iteration += 1
        solver.step(problem, state, iteration)
        fire_decorators(problem, state, iteration)
        if stopping_criterion(problem, state, iteration):
            break

    state.iterations = iteration
    fire_decorators(problem, state, -1)
    logger.info(f"{type(solver).__name__} stopped after {iteration} iterations: {stopping_criterion.reason.strip()}")
    return solver.get_result(state)
