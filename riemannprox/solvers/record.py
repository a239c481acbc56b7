"""Recording of values while a solver runs.

:class:`RecordOptions` wraps a solver state and appends values to private
lists after every iteration. The lists are cleared before the first step, so
a decorated state can be solved repeatedly. After the solver returned,
:func:`get_record` returns what was recorded::

    state = RecordOptions(state, ["iteration", "cost"])
    solve(problem, state)
    get_record(state)          # {"iteration": [1, 2, ...], "cost": [...]}
    get_record(state, "cost")  # [...]
"""

from collections.abc import Callable, Sequence
from typing import Any, ClassVar

from ..core.type_system import ManifoldPoint
from ..optimizers.state import OptionsDecorator, OptState, get_options, is_options_decorator


class RecordAction:
    """Base class of record actions.

    Attributes:
        name: Key of the action in a record group.
        recorded_values: The values recorded since the last reset.
    """

    name: str = "record"

    def __init__(self) -> None:
        self.recorded_values: list[Any] = []

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        raise NotImplementedError("Subclasses must implement __call__")

    def record_or_reset(self, value: Any, iteration: int) -> None:
        """Append value for positive iterations, clear the record at iteration 0."""
        if iteration > 0:
            self.recorded_values.append(value)
        elif iteration == 0:
            self.recorded_values = []

    def get_record(self) -> Any:
        """Return a copy of the recorded values."""
        return list(self.recorded_values)

    def __getitem__(self, key: str) -> "RecordAction":
        """Return this action if it is recorded under key."""
        if key != self.name:
            raise KeyError(f"No record named {key!r}, only {self.name!r} is recorded")
        return self


class RecordIteration(RecordAction):
    """Record the iteration number."""

    name = "iteration"

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        self.record_or_reset(iteration, iteration)


class RecordIterate(RecordAction):
    """Record the iterate."""

    name = "iterate"

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        self.record_or_reset(state.get_iterate(), iteration)


class RecordCost(RecordAction):
    """Record the cost at the iterate."""

    name = "cost"

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        if iteration > 0:
            self.record_or_reset(float(problem.cost(state.get_iterate())), iteration)
        else:
            self.record_or_reset(None, iteration)


class RecordChange(RecordAction):
    """Record the distance between consecutive iterates.

    Negative iterations only update the remembered iterate.
    """

    name = "change"

    def __init__(self) -> None:
        super().__init__()
        self._last_iterate: ManifoldPoint | None = None

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        x = state.get_iterate()
        if iteration > 0 and self._last_iterate is not None:
            self.record_or_reset(float(state.get_manifold(problem).dist(self._last_iterate, x)), iteration)
        else:
            self.record_or_reset(None, iteration)
        self._last_iterate = x


class RecordEntry(RecordAction):
    """Record a field of the state."""

    def __init__(self, field: str):
        super().__init__()
        self.field = field
        self.name = field

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        self.record_or_reset(getattr(state, self.field), iteration)


class RecordProximalParameter(RecordAction):
    """Record the proximal parameter λ(i) of a proximal solver."""

    name = "lambda"

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        value = state.lambda_fn(iteration) if iteration > 0 else None
        self.record_or_reset(value, iteration)


class RecordGroup(RecordAction):
    """Several named record actions recorded together."""

    name = "group"

    def __init__(self, actions: dict[str, RecordAction]):
        """Initialize the group.

        Args:
            actions: Record actions by name, recorded in insertion order.
        """
        super().__init__()
        self.actions = dict(actions)

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        for action in self.actions.values():
            action(problem, state, iteration)

    def __getitem__(self, key: str) -> RecordAction:
        return self.actions[key]

    def get_record(self) -> dict[str, Any]:
        """Return the records of all members by name."""
        return {name: action.get_record() for name, action in self.actions.items()}


class RecordEvery(RecordAction):
    """Record only every ``every``-th iteration.

    With ``always_update`` the skipped iterations are forwarded as negative
    iterations, so that :class:`RecordChange` measures the change since the
    previous iteration rather than since the previous record.
    """

    def __init__(self, record: RecordAction, every: int = 1, always_update: bool = True):
        super().__init__()
        if every < 1:
            raise ValueError(f"every must be positive, got {every}")
        self.record = record
        self.every = every
        self.always_update = always_update
        self.name = record.name

    def __call__(self, problem: Any, state: OptState, iteration: int) -> None:
        if iteration <= 0 or iteration % self.every == 0:
            self.record(problem, state, iteration)
        elif self.always_update:
            self.record(problem, state, -1)

    def get_record(self) -> Any:
        return self.record.get_record()

    def __getitem__(self, key: str) -> RecordAction:
        if key == self.name:
            return self
        return self.record[key]


_PRESETS: dict[str, Callable[[], RecordAction]] = {
    "change": RecordChange,
    "cost": RecordCost,
    "iterate": RecordIterate,
    "iteration": RecordIteration,
    "lambda": RecordProximalParameter,
}


def record_action_factory(entry: str | RecordAction) -> RecordAction:
    """Turn a preset name or an action into an action."""
    if isinstance(entry, RecordAction):
        return entry
    if isinstance(entry, str) and entry in _PRESETS:
        return _PRESETS[entry]()
    raise ValueError(f"Unknown record action {entry!r}, expected one of {sorted(_PRESETS)} or a RecordAction")


def record_factory(config: Sequence[str | int | RecordAction | tuple[str, RecordAction]]) -> RecordAction:
    """Build one record action from a configuration list.

    Entries are preset names, actions, ``(name, action)`` pairs or an integer k
    to record every k-th iteration only. A single entry yields that action,
    several yield a :class:`RecordGroup`.
    """
    actions: dict[str, RecordAction] = {}
    every = 1
    for entry in config:
        if isinstance(entry, bool):
            raise TypeError(f"Cannot create a record action from {entry!r}")
        if isinstance(entry, int):
            every = entry
            continue
        if isinstance(entry, tuple):
            name, action = entry
            action.name = name
        else:
            action = record_action_factory(entry)
            name = action.name
        if name in actions:
            raise ValueError(f"Duplicate record name {name!r}")
        actions[name] = action
    if not actions:
        raise ValueError("At least one record action is required")
    record = next(iter(actions.values())) if len(actions) == 1 else RecordGroup(actions)
    return RecordEvery(record, every) if every > 1 else record


class RecordOptions(OptionsDecorator):
    """A solver state decorated with recording.

    Attributes:
        options: The wrapped state.
        record: The record action run before the first step (reset) and after
            every step.
    """

    _own_attributes: ClassVar[frozenset[str]] = frozenset({"options", "record"})

    def __init__(self, options: Any, record: Sequence[str | int | RecordAction | tuple[str, RecordAction]] | RecordAction):
        """Wrap a state with recording.

        Args:
            options: The state to observe.
            record: A single record action or a configuration list for
                :func:`record_factory`.
        """
        super().__init__(options)
        action = record if isinstance(record, RecordAction) else record_factory(record)
        object.__setattr__(self, "record", action)

    def observe(self, problem: Any, iteration: int) -> None:
        """Reset the records at iteration 0 and record afterwards."""
        if iteration >= 0:
            self.record(problem, get_options(self), iteration)

    def get_record(self, key: str | None = None) -> Any:
        """Return the recorded values, or those recorded under ``key``."""
        if key is None:
            return self.record.get_record()
        return self.record[key].get_record()


def get_record(state: Any, key: str | None = None) -> Any:
    """Return what the outermost record decorator around ``state`` recorded.

    Args:
        state: A decorated state containing a :class:`RecordOptions`.
        key: Name of one member of a record group.

    Returns:
        A list of values for a single record, or a dictionary of lists by name
        for a group (unless ``key`` selects one member).

    Raises:
        ValueError: If ``state`` is not decorated with :class:`RecordOptions`.
    """
    while is_options_decorator(state):
        if isinstance(state, RecordOptions):
            return state.get_record(key)
        state = state.options
    raise ValueError("The state is not decorated with RecordOptions")
