"""Small geometric primitives shared by the visibility engine.

  * ``rect_corners``: corners of a rectangle rotated about its center,
    used for rectangle obstacles.
  * ``segment_intersection``: two-line parametric intersection with a
    fixed parallel tolerance. ``visibility.cast_rays`` applies the same
    formula to every ray/segment pair at once with numpy; this scalar form
    backs single-ray queries.
  * ``normalize_angle``: wrap radians into (-pi, pi]. Accepts floats or
    numpy arrays.
"""

from __future__ import annotations

import math

import numpy as np

Corners = list[tuple[float, float]]

PARALLEL_EPSILON = 1e-4


def rect_corners(
    cx: float,
    cy: float,
    half_w: float,
    half_h: float,
    rot_rad: float,
) -> Corners:
    """World corners of a ``2*half_w`` x ``2*half_h`` box turned ``rot_rad``.

    Screen frame: y grows downward, so a positive angle turns +x toward +y
    (clockwise as drawn), the same convention as camera facing angles.
    Unrotated, the corners come out top-left, top-right, bottom-right,
    bottom-left, and consecutive corners share an edge.
    """
    # Columns of the rotation matrix: where local +x and +y end up
    ux, uy = math.cos(rot_rad), math.sin(rot_rad)
    vx, vy = -uy, ux
    offsets = (
        (-half_w, -half_h),
        (half_w, -half_h),
        (half_w, half_h),
        (-half_w, half_h),
    )
    return [(cx + a * ux + b * vx, cy + a * uy + b * vy) for a, b in offsets]


def segment_intersection(
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    x3: float,
    y3: float,
    x4: float,
    y4: float,
    parallel_epsilon: float = PARALLEL_EPSILON,
) -> tuple[float, float] | None:
    """Intersection point of segments (x1,y1)-(x2,y2) and (x3,y3)-(x4,y4).

    Both parameters t (first segment) and u (second) must lie in [0, 1].
    Returns None when the segments miss or are parallel, i.e. when the
    cross-product denominator is below ``parallel_epsilon`` in magnitude.
    The tolerance is absolute, not scaled by segment length.
    """
    denominator = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denominator) < parallel_epsilon:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denominator
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / denominator

    if 0 <= t <= 1 and 0 <= u <= 1:
        return (x1 + t * (x2 - x1), y1 + t * (y2 - y1))
    return None


def normalize_angle(theta):
    """Wrap radians into (-pi, pi]. Works elementwise on numpy arrays."""
    wrapped = np.pi - np.mod(np.pi - theta, 2 * np.pi)
    if isinstance(wrapped, np.ndarray):
        return wrapped
    return float(wrapped)
