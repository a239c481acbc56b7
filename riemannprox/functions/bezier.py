"""Bézier curves on Riemannian manifolds.

The de Casteljau algorithm carries over to manifolds by replacing linear
interpolation with the shortest geodesic γ. For control points b₀, ..., bₙ

    β(t; b₀, b₁) = γ_{b₀,b₁}(t),
    β(t; b₀, ..., bₙ) = γ_{β(t; b₀, ..., bₙ₋₁), β(t; b₁, ..., bₙ)}(t).

A composite Bézier curve is a list of m segments, each a list of control
points. It is defined on [0, m]: on [0, 1] it is the first segment and on
(i - 1, i] the i-th segment evaluated at t - i + 1. Consecutive segments share
their junction point for the curve to be continuous.

References:
    Popiel, T., & Noakes, L. (2007). Bézier curves and C² interpolation in
    Riemannian manifolds. Journal of Approximation Theory, 148(2), 111-127.
"""

import math
from collections.abc import Callable, Sequence

import jax.numpy as jnp

from ..core.type_system import ManifoldPoint, TangentVector
from ..errors import DomainError
from ..manifolds.base import Manifold

Segment = Sequence[ManifoldPoint]
"""Control points b₀, ..., bₙ of one Bézier segment."""


def _is_composite(control_points: Sequence) -> bool:
    return len(control_points) > 0 and isinstance(control_points[0], list | tuple)


def _check_segment(segment: Segment) -> list[ManifoldPoint]:
    points = list(segment)
    if len(points) < 2:
        raise ValueError(f"A Bézier segment needs at least two control points, got {len(points)}")
    return points


def _evaluate_segment(manifold: Manifold, points: list[ManifoldPoint], t: float) -> ManifoldPoint:
    # Level k of the table holds β(t; bᵢ, ..., bᵢ₊ₖ).
    level = points
    while len(level) > 1:
        level = [manifold.shortest_geodesic(a, b, t) for a, b in zip(level[:-1], level[1:], strict=True)]
    return level[0]


def _evaluate_composite(manifold: Manifold, segments: list[list[ManifoldPoint]], u: float) -> ManifoldPoint:
    m = len(segments)
    if not 0 <= u <= m:
        raise DomainError(u, 0, m)
    index = math.ceil(u)
    local = 0.0 if index == 0 else u - index + 1
    return _evaluate_segment(manifold, segments[max(index, 1) - 1], local)


def de_casteljau(
    manifold: Manifold,
    control_points: Segment | Sequence[Segment],
    t: float | Sequence[float] | None = None,
) -> ManifoldPoint | list[ManifoldPoint] | Callable[[float], ManifoldPoint]:
    """Evaluate a (composite) Bézier curve with the de Casteljau algorithm.

    Args:
        manifold: The manifold the control points live on.
        control_points: Either the control points of one segment, or a list of
            segments (lists or tuples of control points) of a composite curve.
        t: A parameter, a sequence of parameters, or ``None``.

    Returns:
        The point at ``t``, the list of points at the parameters in ``t``, or, if
        ``t`` is ``None``, the curve as a function of its parameter.

    Raises:
        ValueError: If a segment has fewer than two control points.
        DomainError: If a parameter lies outside [0, 1] for a single segment or
            [0, m] for a composite curve of m segments.

    Examples:
        >>> sphere = create_sphere(2)
        >>> curve = de_casteljau(sphere, [b0, b1, b2])
        >>> curve(0.5)
    """
    if _is_composite(control_points):
        segments = [_check_segment(segment) for segment in control_points]

        def evaluate(u: float) -> ManifoldPoint:
            return _evaluate_composite(manifold, segments, float(u))

    else:
        points = _check_segment(control_points)

        def evaluate(u: float) -> ManifoldPoint:
            u = float(u)
            if not 0 <= u <= 1:
                raise DomainError(u, 0, 1)
            return _evaluate_segment(manifold, points, u)

    if t is None:
        return evaluate
    if jnp.ndim(t) == 0:
        return evaluate(t)
    return [evaluate(u) for u in t]


def get_bezier_junction_points(manifold: Manifold, segments: Sequence[Segment]) -> list[ManifoldPoint]:
    """Return the start point of every segment and the end point of the last one.

    For m segments these are the m + 1 points where the curve passes through
    integer parameters.
    """
    return [segment[0] for segment in segments] + [segments[-1][-1]]


def get_bezier_inner_points(manifold: Manifold, segments: Sequence[Segment]) -> list[ManifoldPoint]:
    """Return the control points of all segments except their start and end points."""
    return [point for segment in segments for point in list(segment)[1:-1]]


def get_bezier_points(manifold: Manifold, segments: Sequence[Segment]) -> list[ManifoldPoint]:
    """Return all control points of a composite curve, each junction point once.

    The end point of every segment is dropped, since it is the start point of
    the next; the end point of the last segment closes the list.
    """
    return [point for segment in segments for point in list(segment)[:-1]] + [segments[-1][-1]]


def get_bezier_segments(points: Sequence[ManifoldPoint], degrees: Sequence[int]) -> list[list[ManifoldPoint]]:
    """Split a list of control points with merged junctions into segments.

    This inverts :func:`get_bezier_points`.

    Args:
        points: Control points as returned by :func:`get_bezier_points`.
        degrees: Degree of every segment, i.e. its number of control points minus one.

    Returns:
        The segments, consecutive ones sharing their junction point.

    Raises:
        ValueError: If a degree is smaller than one or the number of points does
            not match the degrees.
    """
    points = list(points)
    if any(n < 1 for n in degrees):
        raise ValueError(f"Segment degrees have to be positive, got {list(degrees)}")
    if len(points) != sum(degrees) + 1:
        raise ValueError(f"Expected {sum(degrees) + 1} control points for degrees {list(degrees)}, got {len(points)}")
    segments = []
    start = 0
    for n in degrees:
        segments.append(points[start : start + n + 1])
        start += n
    return segments


def get_bezier_tangent_vectors(manifold: Manifold, segments: Sequence[Segment]) -> list[TangentVector]:
    """Return the tangent vectors at the end points of every segment.

    For each segment b₀, ..., bₙ these are log_{b₀}(b₁) and log_{bₙ}(bₙ₋₁), the
    directions from the end points towards their neighbouring control points.
    The curve is C¹ at a junction if the two vectors meeting there, each
    scaled by the degree of its segment, are opposite.
    """
    vectors = []
    for segment in segments:
        points = _check_segment(segment)
        vectors.append(manifold.log(points[0], points[1]))
        vectors.append(manifold.log(points[-1], points[-2]))
    return vectors
