"""Line-of-sight visibility for a single camera.

This module answers: which part of the floor plan can this camera see? The
answer is a fan-shaped polygon around the camera, clipped by obstacles and
by the camera's field of view and maximum range.

The algorithm is an angular sweep:

  1. Segment extraction. Every obstacle is broken into straight segments
     (freehand paths per consecutive point pair, lines as-is, rectangles
     as their 4 rotated edges). Four segments of an inflated boundary
     rectangle around the scene are added so rays always have something
     to stop at.
  2. Angle sampling. Rays go toward every segment endpoint, plus a pair of
     epsilon-offset rays either side of it so the sweep sees just past a
     blocking corner (the silhouette point), plus ``ray_count`` uniformly
     spaced rays for smooth arcs. Anything outside the cone is dropped and
     the two exact cone edges are always added back.
  3. Ray casting. Each ray runs from the camera out to
     ``ray_length_factor * max_distance``; the nearest segment intersection
     wins. All rays are tested against all segments in one (R x S) numpy
     matrix operation.
  4. Distance capping. Hits past ``max_distance`` (or rays that hit nothing
     within their length) are pulled back to exactly ``max_distance``.
  5. Polygon assembly. Hits are ordered by their signed offset from the
     facing direction and the camera position closes the fan.

Angles are stored relative to the facing direction while sweeping. That
keeps the fan in order even when the cone straddles the +/-180 degree wrap
of atan2.

Nothing here mutates its inputs and nothing here logs: for a fixed input
the output is identical call to call.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np

from .geometry import normalize_angle, segment_intersection
from .types import (
    Camera,
    Obstacle,
    Point,
    RayHit,
    SceneBounds,
    VisibilityParams,
    VisibilityResult,
)

SegmentCoords = tuple[float, float, float, float]  # (x1, y1, x2, y2)


def boundary_segments(
    bounds: SceneBounds, margin: float
) -> list[SegmentCoords]:
    """Edges of the scene rectangle inflated by ``margin`` on every side."""
    lo_x, lo_y = -margin, -margin
    hi_x, hi_y = bounds.width + margin, bounds.height + margin
    return [
        (lo_x, lo_y, hi_x, lo_y),  # top
        (hi_x, lo_y, hi_x, hi_y),  # right
        (hi_x, hi_y, lo_x, hi_y),  # bottom
        (lo_x, hi_y, lo_x, lo_y),  # left
    ]


def extract_segments(
    obstacles: Iterable[Obstacle],
    bounds: SceneBounds,
    margin: float = 10000.0,
) -> list[SegmentCoords]:
    """Boundary segments followed by every obstacle's segments, in order."""
    segments = boundary_segments(bounds, margin)
    for obstacle in obstacles:
        segments.extend(seg.as_tuple() for seg in obstacle.segments())
    return segments


def candidate_angles(
    camera: Camera,
    segments: list[SegmentCoords],
    params: VisibilityParams | None = None,
) -> np.ndarray:
    """Sorted ray offsets (radians) from the camera's facing direction.

    Every returned offset lies in [-fov/2, fov/2]; both ends are always
    present.
    """
    if params is None:
        params = VisibilityParams()
    facing = math.radians(camera.angle_deg)
    half_fov = math.radians(camera.fov_deg) / 2

    segs = np.asarray(segments, dtype=np.float64).reshape(-1, 4)
    end_x = np.concatenate([segs[:, 0], segs[:, 2]])
    end_y = np.concatenate([segs[:, 1], segs[:, 3]])
    to_endpoint = np.arctan2(end_y - camera.y, end_x - camera.x)

    eps = params.endpoint_epsilon
    uniform = np.arange(params.ray_count, dtype=np.float64) * (
        2 * np.pi / max(params.ray_count, 1)
    )
    angles = np.concatenate(
        [to_endpoint - eps, to_endpoint, to_endpoint + eps, uniform]
    )

    offsets = normalize_angle(angles - facing)
    offsets = offsets[np.abs(offsets) <= half_fov]
    offsets = np.concatenate([offsets, [-half_fov, half_fov]])
    return np.unique(offsets)


def cast_rays(
    camera: Camera,
    offsets: np.ndarray,
    segments: list[SegmentCoords],
    params: VisibilityParams | None = None,
) -> list[RayHit]:
    """Nearest hit along each ray, capped at the camera's max distance.

    ``offsets`` are radians relative to the facing direction; hits come
    back in the same order.
    """
    if params is None:
        params = VisibilityParams()
    facing = math.radians(camera.angle_deg)
    thetas = facing + np.asarray(offsets, dtype=np.float64)
    max_d = camera.max_distance
    ray_len = max_d * params.ray_length_factor
    cos_t = np.cos(thetas)
    sin_t = np.sin(thetas)

    # Ray r runs (x1, y1) -> (x2[r], y2[r]); segment s is (x3, y3) -> (x4, y4)
    x1, y1 = camera.x, camera.y
    ray_dx = cos_t * ray_len  # x2 - x1
    ray_dy = sin_t * ray_len

    segs = np.asarray(segments, dtype=np.float64).reshape(-1, 4)
    x3, y3, x4, y4 = segs[:, 0], segs[:, 1], segs[:, 2], segs[:, 3]
    seg_dx = x3 - x4
    seg_dy = y3 - y4
    d_x = x1 - x3
    d_y = y1 - y3

    # denom[r, s] = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    denom = (
        -ray_dx[:, None] * seg_dy[None, :] + ray_dy[:, None] * seg_dx[None, :]
    )
    valid_denom = np.abs(denom) >= params.parallel_epsilon
    safe_denom = np.where(valid_denom, denom, 1.0)

    # t numerator does not depend on the ray
    num_t = d_x * seg_dy - d_y * seg_dx  # (S,)
    t = num_t[None, :] / safe_denom
    num_u = -(
        -ray_dx[:, None] * d_y[None, :] + ray_dy[:, None] * d_x[None, :]
    )
    u = num_u / safe_denom

    valid = valid_denom & (t >= 0) & (t <= 1) & (u >= 0) & (u <= 1)
    t_valid = np.where(valid, t, np.inf)
    if t_valid.shape[1]:
        min_t = np.min(t_valid, axis=1)
    else:
        min_t = np.full(len(thetas), np.inf)

    dist = min_t * ray_len
    capped = dist > max_d  # includes rays that hit nothing
    t_hit = np.where(capped, max_d / ray_len, min_t)
    dist = np.where(capped, max_d, dist)
    hit_x = x1 + t_hit * ray_dx
    hit_y = y1 + t_hit * ray_dy

    return [
        RayHit(angle_deg=math.degrees(theta), point=Point(px, py), distance=d)
        for theta, px, py, d in zip(
            thetas.tolist(), hit_x.tolist(), hit_y.tolist(), dist.tolist()
        )
    ]


def cast_ray(
    camera: Camera,
    angle_deg: float,
    obstacles: Iterable[Obstacle],
    bounds: SceneBounds,
    params: VisibilityParams | None = None,
) -> RayHit:
    """Cast one ray at an absolute angle, ignoring the field of view.

    Scalar counterpart of ``cast_rays`` for point queries (e.g. "how far
    can this camera see straight ahead?").
    """
    if params is None:
        params = VisibilityParams()
    theta = math.radians(angle_deg)
    ray_len = camera.max_distance * params.ray_length_factor
    end_x = camera.x + math.cos(theta) * ray_len
    end_y = camera.y + math.sin(theta) * ray_len

    best: tuple[float, float] | None = None
    best_dist = math.inf
    for x3, y3, x4, y4 in extract_segments(
        obstacles, bounds, params.boundary_margin
    ):
        hit = segment_intersection(
            camera.x,
            camera.y,
            end_x,
            end_y,
            x3,
            y3,
            x4,
            y4,
            params.parallel_epsilon,
        )
        if hit is None:
            continue
        d = math.hypot(hit[0] - camera.x, hit[1] - camera.y)
        if d < best_dist:
            best, best_dist = hit, d

    if best is None or best_dist > camera.max_distance:
        best_dist = camera.max_distance
        best = (
            camera.x + math.cos(theta) * best_dist,
            camera.y + math.sin(theta) * best_dist,
        )
    return RayHit(angle_deg=angle_deg, point=Point(*best), distance=best_dist)


def compute_visibility(
    camera: Camera,
    obstacles: Iterable[Obstacle],
    bounds: SceneBounds,
    params: VisibilityParams | None = None,
) -> VisibilityResult:
    """Compute the visibility polygon for ``camera``.

    Total for any well-formed camera: with no obstacles the result is the
    plain field-of-view sector at max distance.
    """
    if params is None:
        params = VisibilityParams()
    segments = extract_segments(obstacles, bounds, params.boundary_margin)
    offsets = candidate_angles(camera, segments, params)
    hits = cast_rays(camera, offsets, segments, params)
    return VisibilityResult(
        camera_id=camera.id, origin=camera.position, ray_hits=hits
    )


def angle_in_fov(
    camera: Camera, angle_deg: float, epsilon_deg: float = 1e-6
) -> bool:
    """True if an absolute angle lies inside the camera's cone (+/- epsilon)."""
    offset = normalize_angle(math.radians(angle_deg - camera.angle_deg))
    return abs(math.degrees(offset)) <= camera.fov_deg / 2 + epsilon_deg
