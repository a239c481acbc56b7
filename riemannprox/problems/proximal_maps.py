"""Proximal maps of frequently used functions.

All maps take the manifold as first argument; bind it (and the data) with
``functools.partial`` or a lambda to obtain the ``(lam, x) -> y`` signature
expected by :class:`~riemannprox.problems.proximal.ProximalProblem`.
"""

from collections.abc import Sequence

import jax.numpy as jnp

from ..core.constants import NumericalConstants
from ..core.type_system import ManifoldPoint, ProximalMap
from ..manifolds.base import Manifold
from ..manifolds.power import PowerManifold


def prox_distance(manifold: Manifold, lam: float, target: ManifoldPoint, x: ManifoldPoint, power: int = 2) -> ManifoldPoint:
    r"""Proximal map of the distance to a fixed point.

    Computes the proximal map of :math:`\varphi(y) = \frac{1}{q} d(f, y)^q` for
    :math:`q \in \{1, 2\}`. The result lies on the shortest geodesic from x to
    the target f:

    * :math:`q = 2`: at time :math:`\frac{\lambda}{1+\lambda}`,
    * :math:`q = 1`: at time :math:`\min(\frac{\lambda}{d(f,x)}, 1)`.

    Args:
        manifold: The manifold.
        lam: The proximal parameter λ.
        target: The point f.
        x: The point to evaluate the proximal map at.
        power: Exponent q of the distance, 1 or 2.

    Returns:
        The proximal point.
    """
    if power == 2:
        t = lam / (1.0 + lam)
    elif power == 1:
        d = manifold.dist(target, x)
        t = jnp.minimum(lam / jnp.maximum(d, NumericalConstants.EPSILON), 1.0)
    else:
        raise ValueError(f"Proximal map of the distance is only available for power 1 or 2, got {power}")
    return manifold.shortest_geodesic(x, target, t)


def prox_parallel(manifold: PowerManifold, proxes: Sequence[ProximalMap]) -> ProximalMap:
    """Combine proximal maps on the base manifold into one on the power manifold.

    The i-th map acts on the i-th coordinate, so the combined map is the
    proximal map of the sum of the functions, each in its own coordinate.

    Args:
        manifold: Power manifold with as many copies as there are maps.
        proxes: One proximal map per coordinate.

    Returns:
        The coordinate-wise proximal map.
    """
    proxes = tuple(proxes)
    if len(proxes) != manifold.k:
        raise ValueError(f"Expected {manifold.k} proximal maps for {manifold!r}, got {len(proxes)}")

    def prox(lam: float, x: ManifoldPoint) -> ManifoldPoint:
        return jnp.stack([p(lam, xi) for p, xi in zip(proxes, manifold.components(x), strict=True)])

    return prox


def prox_diagonal(manifold: PowerManifold) -> ProximalMap:
    """Proximal map of the indicator function of the diagonal of a power manifold.

    This is the projection onto the diagonal: every coordinate is replaced by
    the mean of all coordinates. It does not depend on the parameter.
    """

    def prox(lam: float, x: ManifoldPoint) -> ManifoldPoint:
        return manifold.diagonal(manifold.coordinate_mean(x))

    return prox
