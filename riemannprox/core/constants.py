"""Configuration constants for RiemannProx.

This module defines numerical constants shared by the geometry providers and the
solvers so that tolerances are not scattered through the code as magic numbers.
"""


class NumericalConstants:
    """Numerical constants for stability and tolerance in manifold operations."""

    EPSILON: float = 1e-10
    """Numerical stability threshold for small value detection."""

    ANTIPODAL_TOLERANCE: float = 1e-6
    """Distance of the inner product from -1 below which sphere points count as antipodal."""

    MEAN_TOLERANCE: float = 1e-7
    """Gradient norm at which the Karcher mean iteration stops."""

    MEAN_MAX_ITERATIONS: int = 50
    """Iteration cap of the Karcher mean iteration."""

    VALIDATION_TOLERANCE: float = 1e-6
    """Tolerance for validating points on manifolds."""


class SolverDefaults:
    """Default parameters of the proximal solvers."""

    DOUGLAS_RACHFORD_ALPHA: float = 0.9
    """Relaxation of the Douglas-Rachford iteration."""

    DOUGLAS_RACHFORD_LAMBDA: float = 1.0
    """Proximal parameter of the Douglas-Rachford iteration."""

    DOUGLAS_RACHFORD_MAX_ITERATIONS: int = 300
    """Iteration cap of the default Douglas-Rachford stopping criterion."""

    CYCLIC_PROXIMAL_POINT_MAX_ITERATIONS: int = 5000
    """Iteration cap of the default cyclic proximal point stopping criterion."""

    CYCLIC_PROXIMAL_POINT_MIN_CHANGE: float = 1e-12
    """Change tolerance of the default cyclic proximal point stopping criterion."""
