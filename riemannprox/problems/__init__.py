"""Problem definitions for Riemannian optimization."""

from .base import RiemannianProblem
from .proximal import ProximalProblem, get_cost, get_proximal_map
from .proximal_maps import prox_diagonal, prox_distance, prox_parallel

__all__ = [
    "ProximalProblem",
    "RiemannianProblem",
    "get_cost",
    "get_proximal_map",
    "prox_diagonal",
    "prox_distance",
    "prox_parallel",
]
