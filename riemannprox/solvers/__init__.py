"""Solver framework: the generic solve loop, stopping criteria and instrumentation.

Components:
- The solve loop (solve, Solver, register_solver)
- Composable stopping criteria
- Debug and record decorators observing a running solver
- The Cyclic Proximal Point and Douglas-Rachford algorithms
"""

from .base import Solver, decorate_state, fire_decorators, get_solver, register_solver, solve
from .cyclic_proximal_point import CyclicProximalPointSolver, CyclicProximalPointState, cyclic_proximal_point
from .debug import (
    DebugAction,
    DebugChange,
    DebugCost,
    DebugDivider,
    DebugEntry,
    DebugEvery,
    DebugGroup,
    DebugIterate,
    DebugIteration,
    DebugOptions,
    DebugProximalParameter,
    DebugStoppingCriterion,
    debug_action_factory,
    debug_factory,
)
from .douglas_rachford import DouglasRachfordSolver, DouglasRachfordState, douglas_rachford
from .record import (
    RecordAction,
    RecordChange,
    RecordCost,
    RecordEntry,
    RecordEvery,
    RecordGroup,
    RecordIterate,
    RecordIteration,
    RecordOptions,
    RecordProximalParameter,
    get_record,
    record_action_factory,
    record_factory,
)
from .stopping import (
    StopAfter,
    StopAfterIteration,
    StoppingCriterion,
    StoppingCriterionSet,
    StopWhenAll,
    StopWhenAny,
    StopWhenChangeLess,
    StopWhenCostLess,
    StopWhenGradientNormLess,
    get_active_stopping_criteria,
    get_reason,
)

__all__ = [
    "CyclicProximalPointSolver",
    "CyclicProximalPointState",
    "DebugAction",
    "DebugChange",
    "DebugCost",
    "DebugDivider",
    "DebugEntry",
    "DebugEvery",
    "DebugGroup",
    "DebugIterate",
    "DebugIteration",
    "DebugOptions",
    "DebugProximalParameter",
    "DebugStoppingCriterion",
    "DouglasRachfordSolver",
    "DouglasRachfordState",
    "RecordAction",
    "RecordChange",
    "RecordCost",
    "RecordEntry",
    "RecordEvery",
    "RecordGroup",
    "RecordIterate",
    "RecordIteration",
    "RecordOptions",
    "RecordProximalParameter",
    "Solver",
    "StopAfter",
    "StopAfterIteration",
    "StopWhenAll",
    "StopWhenAny",
    "StopWhenChangeLess",
    "StopWhenCostLess",
    "StopWhenGradientNormLess",
    "StoppingCriterion",
    "StoppingCriterionSet",
    "debug_action_factory",
    "cyclic_proximal_point",
    "debug_factory",
    "decorate_state",
    "douglas_rachford",
    "fire_decorators",
    "get_active_stopping_criteria",
    "get_reason",
    "get_record",
    "get_solver",
    "record_action_factory",
    "record_factory",
    "register_solver",
    "solve",
]
