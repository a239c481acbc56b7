"""Solver state shared by the optimization algorithms."""

from .state import EvalOrder, OptionsDecorator, OptState, as_schedule, get_options, is_options_decorator

__all__ = [
    "EvalOrder",
    "OptState",
    "OptionsDecorator",
    "as_schedule",
    "get_options",
    "is_options_decorator",
]
