"""Geometry providers consumed by the RiemannProx solvers."""

from .base import Manifold
from .euclidean import Euclidean
from .power import PowerManifold
from .sphere import Sphere


def create_sphere(n: int = 2) -> Sphere:
    """Create a sphere manifold S^n with dimension validation.

    Args:
        n: The dimension of the sphere (default: 2 for S^2)

    Returns:
        Sphere: A sphere manifold instance

    Raises:
        ValueError: If dimension is not a positive integer
        TypeError: If n is not an integer

    Examples:
        >>> sphere = create_sphere(3)  # Creates S^3
        >>> sphere = create_sphere()   # Creates S^2 (default)
    """
    if not isinstance(n, int):
        raise TypeError(f"Sphere dimension must be an integer, got {type(n)}")
    if n <= 0:
        raise ValueError(f"Sphere dimension must be positive, got {n}")
    return Sphere(n=n)


def create_euclidean(*shape: int) -> Euclidean:
    """Create Euclidean space with points of the given shape.

    Examples:
        >>> line = create_euclidean()      # points are real numbers
        >>> plane = create_euclidean(2)    # R^2
    """
    if not all(isinstance(n, int) for n in shape):
        raise TypeError(f"Euclidean extents must be integers, got {shape}")
    return Euclidean(*shape)


def create_power(base: Manifold, k: int) -> PowerManifold:
    """Create the power manifold base^k.

    Examples:
        >>> power = create_power(create_sphere(2), 3)  # (S^2)^3
    """
    if not isinstance(k, int):
        raise TypeError(f"Number of copies must be an integer, got {type(k)}")
    return PowerManifold(base, k)


__all__ = [
    "Euclidean",
    "Manifold",
    "PowerManifold",
    "Sphere",
    "create_euclidean",
    "create_power",
    "create_sphere",
]
