"""Stopping criteria for iterative solvers.

A stopping criterion is a callable ``criterion(problem, state, iteration)``
returning whether the solver should stop after ``iteration``. When it fires it
stores a human readable explanation in :attr:`StoppingCriterion.reason`.

Calling a criterion with ``iteration == 0`` resets it, so the same instance
can be reused for several solve calls. Criteria compose with ``&``
(:class:`StopWhenAll`) and ``|`` (:class:`StopWhenAny`).
"""

import time
from typing import Any

from ..core.type_system import ManifoldPoint
from ..optimizers.state import get_options


class StoppingCriterion:
    """Base class of stopping criteria.

    Attributes:
        reason: Why the criterion fired, empty while it has not.
    """

    def __init__(self) -> None:
        """Initialize with an empty reason."""
        self.reason = ""

    def __call__(self, problem: Any, state: Any, iteration: int) -> bool:
        """Decide whether to stop after ``iteration``."""
        raise NotImplementedError("Subclasses must implement __call__")

    def __and__(self, other: "StoppingCriterion") -> "StopWhenAll":
        """Stop once both criteria fire."""
        return StopWhenAll(self, other)

    def __or__(self, other: "StoppingCriterion") -> "StopWhenAny":
        """Stop as soon as one of the criteria fires."""
        return StopWhenAny(self, other)


class StopAfterIteration(StoppingCriterion):
    """Stop once a maximal number of iterations is reached."""

    def __init__(self, max_iterations: int):
        """Initialize the criterion.

        Args:
            max_iterations: The iteration after which to stop.

        Raises:
            ValueError: If max_iterations is not positive.
        """
        super().__init__()
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")
        self.max_iterations = max_iterations

    def __call__(self, problem: Any, state: Any, iteration: int) -> bool:
        if iteration == 0:
            self.reason = ""
            return False
        if iteration >= self.max_iterations:
            self.reason = f"The algorithm reached its maximal number of iterations ({self.max_iterations}).\n"
            return True
        return False

    def __repr__(self) -> str:
        return f"StopAfterIteration({self.max_iterations})"


class StopWhenChangeLess(StoppingCriterion):
    """Stop when the distance between two consecutive iterates is small.

    The iterate is remembered on every call, starting with the initial point at
    ``iteration == 0``.
    """

    def __init__(self, tolerance: float):
        """Initialize the criterion.

        Args:
            tolerance: Stop when the change is strictly less than this value.
        """
        super().__init__()
        if tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {tolerance}")
        self.tolerance = tolerance
        self._last_iterate: ManifoldPoint | None = None

    def __call__(self, problem: Any, state: Any, iteration: int) -> bool:
        x = state.get_iterate()
        if iteration == 0:
            self.reason = ""
            self._last_iterate = x
            return False
        fired = False
        if self._last_iterate is not None:
            change = float(state.get_manifold(problem).dist(self._last_iterate, x))
            if change < self.tolerance:
                self.reason = (
                    f"The algorithm performed a step with a change ({change}) less than {self.tolerance}.\n"
                )
                fired = True
        self._last_iterate = x
        return fired

    def __repr__(self) -> str:
        return f"StopWhenChangeLess({self.tolerance})"


class StopWhenGradientNormLess(StoppingCriterion):
    """Stop when the norm of the (sub)gradient at the iterate is small.

    The gradient is read from ``state.gradient`` when the state keeps one and
    computed with ``problem.grad`` otherwise.
    """

    def __init__(self, tolerance: float):
        """Initialize the criterion.

        Args:
            tolerance: Stop when the gradient norm is strictly less than this value.
        """
        super().__init__()
        if tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {tolerance}")
        self.tolerance = tolerance

    def __call__(self, problem: Any, state: Any, iteration: int) -> bool:
        if iteration == 0:
            self.reason = ""
            return False
        x = state.get_iterate()
        gradient = getattr(get_options(state), "gradient", None)
        if gradient is None:
            gradient = problem.grad(x)
        gradient_norm = float(state.get_manifold(problem).norm(x, gradient))
        if gradient_norm < self.tolerance:
            self.reason = f"The algorithm reached approximately critical point; the gradient norm ({gradient_norm}) is less than {self.tolerance}.\n"
            return True
        return False

    def __repr__(self) -> str:
        return f"StopWhenGradientNormLess({self.tolerance})"


class StopWhenCostLess(StoppingCriterion):
    """Stop when the cost at the iterate drops below a threshold."""

    def __init__(self, threshold: float):
        super().__init__()
        self.threshold = threshold

    def __call__(self, problem: Any, state: Any, iteration: int) -> bool:
        if iteration == 0:
            self.reason = ""
            return False
        cost = float(problem.cost(state.get_iterate()))
        if cost < self.threshold:
            self.reason = f"The algorithm reached a cost function value ({cost}) less than the threshold ({self.threshold}).\n"
            return True
        return False

    def __repr__(self) -> str:
        return f"StopWhenCostLess({self.threshold})"


class StopAfter(StoppingCriterion):
    """Stop once a wall clock time budget is used up.

    The clock starts when the criterion is reset at ``iteration == 0``.
    """

    def __init__(self, seconds: float):
        super().__init__()
        if seconds <= 0:
            raise ValueError(f"seconds must be positive, got {seconds}")
        self.seconds = seconds
        self._start = time.perf_counter()

    def __call__(self, problem: Any, state: Any, iteration: int) -> bool:
        if iteration == 0:
            self.reason = ""
            self._start = time.perf_counter()
            return False
        elapsed = time.perf_counter() - self._start
        if elapsed > self.seconds:
            self.reason = f"The algorithm ran for {elapsed:.3f} seconds, longer than the budget of {self.seconds} seconds.\n"
            return True
        return False

    def __repr__(self) -> str:
        return f"StopAfter({self.seconds})"


class StoppingCriterionSet(StoppingCriterion):
    """Base class of criteria combining several criteria.

    Every sub-criterion is evaluated on every call, so their bookkeeping (e.g.
    the remembered iterate of :class:`StopWhenChangeLess`) stays current.
    """

    def __init__(self, *criteria: StoppingCriterion):
        super().__init__()
        if not criteria:
            raise ValueError(f"{self.__class__.__name__} needs at least one criterion")
        self.criteria = tuple(criteria)

    def _evaluate(self, problem: Any, state: Any, iteration: int) -> list[bool]:
        return [criterion(problem, state, iteration) for criterion in self.criteria]

    def _collect_reason(self, fired: list[bool]) -> None:
        self.reason = "".join(c.reason for c, f in zip(self.criteria, fired, strict=True) if f)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({', '.join(repr(c) for c in self.criteria)})"


class StopWhenAll(StoppingCriterionSet):
    """Stop when all sub-criteria fire."""

    def __call__(self, problem: Any, state: Any, iteration: int) -> bool:
        fired = self._evaluate(problem, state, iteration)
        if iteration > 0 and all(fired):
            self._collect_reason(fired)
            return True
        self.reason = ""
        return False


class StopWhenAny(StoppingCriterionSet):
    """Stop as soon as one of the sub-criteria fires."""

    def __call__(self, problem: Any, state: Any, iteration: int) -> bool:
        fired = self._evaluate(problem, state, iteration)
        if iteration > 0 and any(fired):
            self._collect_reason(fired)
            return True
        self.reason = ""
        return False


def get_active_stopping_criteria(criterion: StoppingCriterion) -> list[StoppingCriterion]:
    """Return the non-composite criteria inside ``criterion`` that have fired."""
    if isinstance(criterion, StoppingCriterionSet):
        return [active for c in criterion.criteria for active in get_active_stopping_criteria(c)]
    return [criterion] if criterion.reason else []


def get_reason(state: Any) -> str:
    """Return why the solver working on ``state`` stopped, empty if it has not."""
    return get_options(state).get_stopping_criterion().reason
