"""Type aliases shared across RiemannProx.

Points and tangent vectors are plain JAX arrays; the aliases document intent in
signatures the same way for every geometry provider.
"""

from collections.abc import Callable

from jaxtyping import Array, Float

ManifoldPoint = Float[Array, "..."]
"""Type alias for points on a Riemannian manifold."""

TangentVector = Float[Array, "..."]
"""Type alias for tangent vectors on a Riemannian manifold."""

ProximalMap = Callable[[float, ManifoldPoint], ManifoldPoint]
"""A proximal map ``(lam, x) -> prox_{lam f}(x)``."""

ParameterSchedule = Callable[[int], float]
"""A per-iteration parameter, e.g. ``lambda i: 1.0 / i``."""
