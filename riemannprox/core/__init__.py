"""Core utilities for RiemannProx: constants, type aliases and JIT helpers."""

from .constants import NumericalConstants, SolverDefaults
from .jit_decorator import JITOptimizer, clear_jit_cache, is_jit_enabled, jit_optimized, set_jit_enabled
from .type_system import ManifoldPoint, ParameterSchedule, ProximalMap, TangentVector

__all__ = [
    "JITOptimizer",
    "ManifoldPoint",
    "NumericalConstants",
    "ParameterSchedule",
    "ProximalMap",
    "SolverDefaults",
    "TangentVector",
    "clear_jit_cache",
    "is_jit_enabled",
    "jit_optimized",
    "set_jit_enabled",
]
