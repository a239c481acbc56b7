"""Geometric utility functions built on the manifold operations."""

from .bezier import (
    de_casteljau,
    get_bezier_inner_points,
    get_bezier_junction_points,
    get_bezier_points,
    get_bezier_segments,
    get_bezier_tangent_vectors,
)

__all__ = [
    "de_casteljau",
    "get_bezier_inner_points",
    "get_bezier_junction_points",
    "get_bezier_points",
    "get_bezier_segments",
    "get_bezier_tangent_vectors",
]
