"""Debug output for solvers.

:class:`DebugOptions` wraps a solver state and prints information while the
solver runs. What is printed is composed from :class:`DebugAction` instances,
or built by the factory from a short configuration list::

    state = DebugOptions(state, ["iteration", " | ", "cost", "\\n", 10, "stop"])

prints the iteration number and the cost every 10th iteration and the reason
for stopping at the end. The output goes to a print sink owned by the actions,
``print`` without trailing newline unless another function is given.
"""

from collections.abc import Callable, Sequence
from typing import Any, ClassVar

from ..core.type_system import ManifoldPoint
from ..optimizers.state import OptionsDecorator, OptState, get_options

PrintFunction = Callable[[str], None]


def _print(text: str) -> None:
    print(text, end="")


class DebugAction:
    """Base class of debug actions.

    An action is called as ``action(problem, state, iteration)`` with the
    undecorated state. Iteration ``0`` is the pass before the first step,
    negative iterations signal that the solver stopped.
    """

    def __init__(self, print_fn: PrintFunction | None = None):
        self.print_fn = print_fn or _print

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        raise NotImplementedError("Subclasses must implement __call__")


class DebugDivider(DebugAction):
    """Print a fixed string, e.g. a separator or a line break."""

    def __init__(self, divider: str = " | ", print_fn: PrintFunction | None = None):
        super().__init__(print_fn)
        self.divider = divider

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        if iteration >= 0:
            self.print_fn(self.divider)


class DebugIteration(DebugAction):
    """Print the iteration number, ``"Initial "`` before the first step."""

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        if iteration > 0:
            self.print_fn(f"# {iteration}")
        elif iteration == 0:
            self.print_fn("Initial ")


class DebugIterate(DebugAction):
    """Print the current iterate."""

    def __init__(self, long: bool = False, print_fn: PrintFunction | None = None):
        super().__init__(print_fn)
        self.prefix = "current iterate: " if long else "x: "

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        if iteration >= 0:
            self.print_fn(f"{self.prefix}{state.get_iterate()}")


class DebugCost(DebugAction):
    """Print the cost at the current iterate."""

    def __init__(self, long: bool = False, print_fn: PrintFunction | None = None):
        super().__init__(print_fn)
        self.prefix = "Cost function value: " if long else "F(x): "

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        if iteration >= 0:
            self.print_fn(f"{self.prefix}{float(problem.cost(state.get_iterate()))}")


class DebugChange(DebugAction):
    """Print the distance between the current and the previous iterate.

    Before the first step only the initial iterate is remembered. Negative
    iterations update the remembered iterate without printing.
    """

    def __init__(self, long: bool = False, print_fn: PrintFunction | None = None):
        super().__init__(print_fn)
        self.prefix = "Last Change: " if long else "Δx: "
        self._last_iterate: ManifoldPoint | None = None

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        x = state.get_iterate()
        if iteration > 0 and self._last_iterate is not None:
            self.print_fn(f"{self.prefix}{float(state.get_manifold(problem).dist(self._last_iterate, x))}")
        self._last_iterate = x


class DebugEntry(DebugAction):
    """Print a field of the state."""

    def __init__(self, field: str, prefix: str | None = None, print_fn: PrintFunction | None = None):
        super().__init__(print_fn)
        self.field = field
        self.prefix = f"{field}: " if prefix is None else prefix

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        if iteration >= 0:
            self.print_fn(f"{self.prefix}{getattr(state, self.field)}")


class DebugProximalParameter(DebugAction):
    """Print the proximal parameter λ(i) of a proximal solver."""

    def __init__(self, long: bool = False, print_fn: PrintFunction | None = None):
        super().__init__(print_fn)
        self.prefix = "Proximal Map Parameter λ(i): " if long else "λ: "

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        if iteration > 0:
            self.print_fn(f"{self.prefix}{state.lambda_fn(iteration)}")


class DebugStoppingCriterion(DebugAction):
    """Print the reason the solver stopped, if any."""

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        reason = state.get_stopping_criterion().reason
        if reason:
            self.print_fn(reason)


class DebugGroup(DebugAction):
    """Call several actions in order."""

    def __init__(self, actions: Sequence[DebugAction]):
        super().__init__()
        self.actions = list(actions)

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        for action in self.actions:
            action(problem, state, iteration)


class DebugEvery(DebugAction):
    """Call an action only every ``every``-th iteration.

    The initial and the final pass are always forwarded. With ``always_update``
    the skipped iterations are forwarded as negative iterations, so that actions
    like :class:`DebugChange` keep their remembered iterate current.
    """

    def __init__(self, action: DebugAction, every: int = 1, always_update: bool = True):
        super().__init__()
        if every < 1:
            raise ValueError(f"every must be positive, got {every}")
        self.action = action
        self.every = every
        self.always_update = always_update

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        if iteration <= 0 or iteration % self.every == 0:
            self.action(problem, state, iteration)
        elif self.always_update:
            self.action(problem, state, -1)


_PRESETS: dict[str, Callable[[PrintFunction | None], DebugAction]] = {
    "change": lambda print_fn: DebugChange(print_fn=print_fn),
    "cost": lambda print_fn: DebugCost(print_fn=print_fn),
    "iterate": lambda print_fn: DebugIterate(print_fn=print_fn),
    "iteration": lambda print_fn: DebugIteration(print_fn=print_fn),
    "lambda": lambda print_fn: DebugProximalParameter(print_fn=print_fn),
}


def debug_action_factory(entry: str | DebugAction, print_fn: PrintFunction | None = None) -> DebugAction:
    """Turn one configuration entry into an action.

    Preset names (``"change"``, ``"cost"``, ``"iterate"``, ``"iteration"``,
    ``"lambda"``) create the corresponding action, any other string a
    :class:`DebugDivider`; actions are returned unchanged.
    """
    if isinstance(entry, DebugAction):
        return entry
    if isinstance(entry, str):
        if entry in _PRESETS:
            return _PRESETS[entry](print_fn)
        return DebugDivider(entry, print_fn=print_fn)
    raise TypeError(f"Cannot create a debug action from {entry!r}")


def debug_factory(config: Sequence[str | int | DebugAction], print_fn: PrintFunction | None = None) -> dict[str, DebugAction]:
    """Build the debug dictionary from a configuration list.

    Returns a dictionary with the per-iteration group under ``"all"`` and,
    if ``"stop"`` is configured, a :class:`DebugStoppingCriterion` under
    ``"stop"``. An integer entry k makes the per-iteration group run every k-th
    iteration only.
    """
    actions: list[DebugAction] = []
    every = 1
    dictionary: dict[str, DebugAction] = {}
    for entry in config:
        if isinstance(entry, bool):
            raise TypeError(f"Cannot create a debug action from {entry!r}")
        if isinstance(entry, int):
            every = entry
        elif entry == "stop":
            dictionary["stop"] = DebugStoppingCriterion(print_fn=print_fn)
        else:
            actions.append(debug_action_factory(entry, print_fn))
    if actions:
        group: DebugAction = DebugGroup(actions)
        dictionary["all"] = DebugEvery(group, every) if every > 1 else group
    return dictionary


class DebugOptions(OptionsDecorator):
    """A solver state decorated with debug output.

    Attributes:
        options: The wrapped state.
        debug_dictionary: Actions keyed by when they run: ``"all"`` before the
            first step and after every step, ``"stop"`` once after the solver
            stopped.
    """

    _own_attributes: ClassVar[frozenset[str]] = frozenset({"options", "debug_dictionary"})

    def __init__(
        self,
        options: Any,
        debug: Sequence[str | int | DebugAction] | DebugAction | dict[str, DebugAction],
        print_fn: PrintFunction | None = None,
    ):
        """Wrap a state with debug output.

        Args:
            options: The state to observe.
            debug: A configuration list for :func:`debug_factory`, a single
                action (run on every iteration) or a ready debug dictionary.
            print_fn: Print sink for actions created from the configuration list.
        """
        super().__init__(options)
        if isinstance(debug, dict):
            dictionary = dict(debug)
        elif isinstance(debug, DebugAction):
            dictionary = {"all": debug}
        else:
            dictionary = debug_factory(debug, print_fn)
        object.__setattr__(self, "debug_dictionary", dictionary)

    def observe(self, problem: Any, iteration: int) -> None:
        """Print the header, the per-iteration line or the final summary."""
        state = get_options(self)
        if iteration >= 0:
            if "all" in self.debug_dictionary:
                self.debug_dictionary["all"](problem, state, iteration)
        else:
            if "stop" in self.debug_dictionary:
                self.debug_dictionary["stop"](problem, state, iteration)
