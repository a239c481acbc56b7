"""Solver state shared by all algorithms.

Every algorithm keeps its iterate and parameters in a subclass of
:class:`OptState`. Instrumentation wraps a state in an
:class:`OptionsDecorator`, which forwards attribute access to the wrapped
state, so algorithms never need to know whether they are being observed.
"""

from enum import Enum
from typing import Any, ClassVar

from ..core.type_system import ManifoldPoint, ParameterSchedule


class EvalOrder(Enum):
    """Order in which cyclic algorithms visit their proximal maps."""

    LINEAR = "linear"
    """Always visit the maps in their given order."""

    RANDOM = "random"
    """Draw a new random order for every cycle."""

    FIXED_RANDOM = "fixed_random"
    """Draw one random order on first use and keep it."""


class OptState:
    """Base class of solver states.

    Attributes:
        x: Current iterate.
        stopping_criterion: Criterion deciding when the solver stops.
        iterations: Number of iterations of the last solve call.
    """

    def __init__(self, x: ManifoldPoint, stopping_criterion: Any):
        """Initialize the state.

        Args:
            x: Initial point on the manifold.
            stopping_criterion: A stopping criterion, see :mod:`riemannprox.solvers.stopping`.
        """
        self.x = x
        self.stopping_criterion = stopping_criterion
        self.iterations = 0

    def get_iterate(self) -> ManifoldPoint:
        """Return the current iterate."""
        return self.x

    def set_iterate(self, x: ManifoldPoint) -> None:
        """Replace the current iterate."""
        self.x = x

    def get_stopping_criterion(self) -> Any:
        """Return the stopping criterion."""
        return self.stopping_criterion

    def get_manifold(self, problem: Any) -> Any:
        """Return the manifold the iterate lives on, usually the problem's."""
        return problem.manifold

    def __repr__(self) -> str:
        """String representation of the state."""
        return f"{self.__class__.__name__}(iterations={self.iterations})"


class OptionsDecorator:
    """Base class of state wrappers that observe a solver.

    Attributes that the decorator does not own itself are read from and
    written to the wrapped state ``options``.
    """

    _own_attributes: ClassVar[frozenset[str]] = frozenset({"options"})

    def __init__(self, options: "OptState | OptionsDecorator"):
        """Wrap a state.

        Args:
            options: The state (or decorated state) to observe.
        """
        object.__setattr__(self, "options", options)

    def __getattr__(self, name: str) -> Any:
        """Forward attribute reads to the wrapped state."""
        if name in type(self)._own_attributes:
            raise AttributeError(name)
        return getattr(self.options, name)

    def __setattr__(self, name: str, value: Any) -> None:
        """Forward attribute writes to the wrapped state."""
        if name in type(self)._own_attributes:
            object.__setattr__(self, name, value)
        else:
            setattr(self.options, name, value)

    def observe(self, problem: Any, iteration: int) -> None:
        """React to the solver at ``iteration``.

        ``iteration == 0`` is called once before the first step, positive values
        after every step and ``-1`` once after the solver stopped.
        """
        raise NotImplementedError("Subclasses must implement observe")

    def __repr__(self) -> str:
        """String representation of the decorated state."""
        return f"{self.__class__.__name__}({self.options!r})"


def as_schedule(value: "ParameterSchedule | float") -> ParameterSchedule:
    """Turn a constant into a per-iteration schedule; callables are returned unchanged."""
    if callable(value):
        return value
    constant = float(value)
    return lambda iteration: constant


def is_options_decorator(state: Any) -> bool:
    """Whether ``state`` is a decorator around another state."""
    return isinstance(state, OptionsDecorator)


def get_options(state: "OptState | OptionsDecorator") -> OptState:
    """Return the undecorated state inside any number of decorators."""
    while is_options_decorator(state):
        state = state.options
    return state
