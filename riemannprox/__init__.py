"""RiemannProx: proximal splitting methods on Riemannian manifolds with JAX.

RiemannProx minimizes functions of manifold-valued data by algorithms that
only need proximal maps, written with manifold operations (geodesics,
exponential and logarithmic maps) in place of vector space arithmetic.

**Key Features:**
- **Cyclic Proximal Point** with linear, random or fixed random order
- **Douglas-Rachford** splitting, including the parallel variant on power manifolds
- **Composable stopping criteria** (``a | b``, ``a & b``)
- **Debug and record decorators** observing a solver without changing it
- **Bézier curves** on manifolds via the de Casteljau algorithm

**Quick Start:**
    >>> import jax.numpy as jnp
    >>> import riemannprox as rp
    >>> from functools import partial
    >>>
    >>> sphere = rp.create_sphere(2)
    >>> target = jnp.array([0.0, 0.0, 1.0])
    >>> cost = lambda x: 0.5 * sphere.dist(target, x) ** 2
    >>> prox = partial(rp.prox_distance, sphere, target=target)
    >>>
    >>> problem = rp.ProximalProblem(sphere, cost, [lambda lam, x: prox(lam, x=x)])
    >>> state = rp.CyclicProximalPointState(jnp.array([1.0, 0.0, 0.0]))
    >>> state = rp.RecordOptions(rp.DebugOptions(state, ["iteration", " | ", "cost", "\\n", 100]), ["cost"])
    >>> x = rp.solve(problem, state)
    >>> costs = rp.get_record(state)
"""

__version__ = "0.1.0"
__author__ = "RiemannProx Contributors"

import logging

from .core.jit_decorator import clear_jit_cache as _clear_jit_cache
from .core.jit_decorator import is_jit_enabled, set_jit_enabled
from .errors import ConstructionError, DomainError, ProximalMapIndexError, RiemannProxError
from .functions import (
    de_casteljau,
    get_bezier_inner_points,
    get_bezier_junction_points,
    get_bezier_points,
    get_bezier_segments,
    get_bezier_tangent_vectors,
)
from .manifolds import Euclidean, Manifold, PowerManifold, Sphere, create_euclidean, create_power, create_sphere
from .optimizers import EvalOrder, OptionsDecorator, OptState, get_options, is_options_decorator
from .problems import (
    ProximalProblem,
    RiemannianProblem,
    get_cost,
    get_proximal_map,
    prox_diagonal,
    prox_distance,
    prox_parallel,
)
from .solvers import (
    CyclicProximalPointState,
    DebugOptions,
    DouglasRachfordState,
    RecordOptions,
    StopAfter,
    StopAfterIteration,
    StopWhenAll,
    StopWhenAny,
    StopWhenChangeLess,
    StopWhenCostLess,
    StopWhenGradientNormLess,
    cyclic_proximal_point,
    douglas_rachford,
    get_reason,
    get_record,
    solve,
)

logger = logging.getLogger(__name__)


def enable_jit() -> None:
    """Enable JIT compilation of manifold operations.

    Example:
        >>> import riemannprox as rp
        >>> rp.enable_jit()
    """
    set_jit_enabled(True)
    logger.info("RiemannProx JIT optimization enabled")


def disable_jit() -> None:
    """Disable JIT compilation of manifold operations, e.g. for debugging.

    Example:
        >>> import riemannprox as rp
        >>> rp.disable_jit()
    """
    set_jit_enabled(False)
    logger.info("RiemannProx JIT optimization disabled")


def clear_jit_cache() -> None:
    """Clear all JIT compilation caches."""
    _clear_jit_cache()
    logger.info("RiemannProx JIT cache cleared")


__all__ = [
    "ConstructionError",
    "CyclicProximalPointState",
    "DebugOptions",
    "DomainError",
    "DouglasRachfordState",
    "Euclidean",
    "EvalOrder",
    "Manifold",
    "OptState",
    "OptionsDecorator",
    "PowerManifold",
    "ProximalMapIndexError",
    "ProximalProblem",
    "RecordOptions",
    "RiemannProxError",
    "RiemannianProblem",
    "Sphere",
    "StopAfter",
    "StopAfterIteration",
    "StopWhenAll",
    "StopWhenAny",
    "StopWhenChangeLess",
    "StopWhenCostLess",
    "StopWhenGradientNormLess",
    "__author__",
    "__version__",
    "clear_jit_cache",
    "create_euclidean",
    "create_power",
    "create_sphere",
    "cyclic_proximal_point",
    "de_casteljau",
    "disable_jit",
    "douglas_rachford",
    "enable_jit",
    "get_bezier_inner_points",
    "get_bezier_junction_points",
    "get_bezier_points",
    "get_bezier_segments",
    "get_bezier_tangent_vectors",
    "get_cost",
    "get_options",
    "get_proximal_map",
    "get_reason",
    "get_record",
    "is_jit_enabled",
    "is_options_decorator",
    "prox_diagonal",
    "prox_distance",
    "prox_parallel",
    "solve",
]
