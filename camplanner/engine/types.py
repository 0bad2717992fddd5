"""Data types for the camera layout planner.

Obstacles are a closed union over three variants (freehand path, line,
rotated rectangle); each knows how to break itself into the segments the
visibility engine occludes against. Cameras carry the sensing parameters
plus the small editing helpers the editor needs (clone, hit test, clamped
property updates).
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from typing import Union

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon

from .geometry import rect_corners


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    @staticmethod
    def from_dict(d: dict) -> Point:
        return Point(x=float(d["x"]), y=float(d["y"]))

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Segment:
    p1: Point
    p2: Point

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.p1.x, self.p1.y, self.p2.x, self.p2.y)


# -- Obstacles --


@dataclass
class FreehandObstacle:
    points: list[Point] = field(default_factory=list)
    id: str = field(default_factory=lambda: _new_id("obj"))

    def segments(self) -> list[Segment]:
        return [
            Segment(self.points[i], self.points[i + 1])
            for i in range(len(self.points) - 1)
        ]

    def to_dict(self) -> dict:
        return {
            "type": "freehand",
            "id": self.id,
            "points": [p.to_dict() for p in self.points],
        }


@dataclass
class LineObstacle:
    p1: Point
    p2: Point
    id: str = field(default_factory=lambda: _new_id("obj"))

    def segments(self) -> list[Segment]:
        return [Segment(self.p1, self.p2)]

    def to_dict(self) -> dict:
        return {
            "type": "line",
            "id": self.id,
            "points": [self.p1.to_dict(), self.p2.to_dict()],
        }


@dataclass
class RectangleObstacle:
    """Axis-aligned box spanned by two corners, rotated about its center."""

    corner_a: Point
    corner_b: Point
    angle_deg: float = 0.0
    id: str = field(default_factory=lambda: _new_id("obj"))

    @property
    def width(self) -> float:
        return abs(self.corner_b.x - self.corner_a.x)

    @property
    def height(self) -> float:
        return abs(self.corner_b.y - self.corner_a.y)

    @property
    def center(self) -> Point:
        return Point(
            min(self.corner_a.x, self.corner_b.x) + self.width / 2,
            min(self.corner_a.y, self.corner_b.y) + self.height / 2,
        )

    def corners(self) -> list[Point]:
        c = self.center
        return [
            Point(x, y)
            for x, y in rect_corners(
                c.x,
                c.y,
                self.width / 2,
                self.height / 2,
                math.radians(self.angle_deg),
            )
        ]

    def segments(self) -> list[Segment]:
        corners = self.corners()
        return [Segment(corners[i], corners[(i + 1) % 4]) for i in range(4)]

    def to_dict(self) -> dict:
        return {
            "type": "rectangle",
            "id": self.id,
            "points": [self.corner_a.to_dict(), self.corner_b.to_dict()],
            "angle": self.angle_deg,
        }


Obstacle = Union[FreehandObstacle, LineObstacle, RectangleObstacle]


def obstacle_from_dict(d: dict) -> Obstacle:
    """Build an obstacle from its dict form, dispatching on ``"type"``.

    Raises ValueError for an unknown obstacle type.
    """
    kind = d["type"]
    points = [Point.from_dict(p) for p in d.get("points", [])]
    extra = {"id": d["id"]} if "id" in d else {}
    if kind == "freehand":
        return FreehandObstacle(points=points, **extra)
    if kind == "line":
        if len(points) < 2:
            raise ValueError("Line obstacle needs two points")
        return LineObstacle(p1=points[0], p2=points[1], **extra)
    if kind == "rectangle":
        if len(points) < 2:
            raise ValueError("Rectangle obstacle needs two corner points")
        return RectangleObstacle(
            corner_a=points[0],
            corner_b=points[1],
            angle_deg=float(d.get("angle", 0.0)),
            **extra,
        )
    raise ValueError(f"Unknown obstacle type: {kind!r}")


# -- Cameras --

MIN_FOV_DEG = 1.0
MIN_DISTANCE = 1.0


@dataclass
class Camera:
    x: float
    y: float
    angle_deg: float = 0.0  # 0 = +x, 90 = +y (clockwise on screen)
    fov_deg: float = 90.0
    max_distance: float = 300.0
    clear_distance: float = 150.0
    name: str = ""
    id: str = field(default_factory=lambda: _new_id("camera"))

    def __post_init__(self) -> None:
        if not self.name:
            self.name = f"Camera {self.id[-4:]}"

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    def fov_points(self, distance: float | None = None) -> dict[str, Point]:
        """Cone edge points at ``distance`` (defaults to max_distance)."""
        if distance is None:
            distance = self.max_distance
        facing = math.radians(self.angle_deg)
        half = math.radians(self.fov_deg) / 2

        def at(theta: float) -> Point:
            return Point(
                self.x + math.cos(theta) * distance,
                self.y + math.sin(theta) * distance,
            )

        return {
            "start": at(facing - half),
            "end": at(facing + half),
            "center": at(facing),
        }

    def contains_point(self, point: Point, radius: float = 15.0) -> bool:
        return self.position.distance_to(point) <= radius

    def clone(self) -> Camera:
        return Camera(
            x=self.x + 30,
            y=self.y + 30,
            angle_deg=self.angle_deg,
            fov_deg=self.fov_deg,
            max_distance=self.max_distance,
            clear_distance=self.clear_distance,
            name=f"{self.name} (copy)",
        )

    def update_properties(
        self,
        angle_deg: float | None = None,
        fov_deg: float | None = None,
        max_distance: float | None = None,
        clear_distance: float | None = None,
    ) -> None:
        """Apply edits, clamping into the ranges the engine assumes.

        fov in (0, 360], max_distance > 0, 0 < clear_distance <= max_distance.
        """
        if angle_deg is not None:
            self.angle_deg = angle_deg % 360.0
        if fov_deg is not None:
            self.fov_deg = min(max(fov_deg, MIN_FOV_DEG), 360.0)
        if max_distance is not None:
            self.max_distance = max(max_distance, MIN_DISTANCE)
        if clear_distance is not None:
            self.clear_distance = clear_distance
        self.clear_distance = min(
            max(self.clear_distance, MIN_DISTANCE), self.max_distance
        )

    @staticmethod
    def from_dict(d: dict) -> Camera:
        extra = {"id": d["id"]} if "id" in d else {}
        return Camera(
            x=float(d["x"]),
            y=float(d["y"]),
            angle_deg=float(d.get("angle", 0.0)),
            fov_deg=float(d.get("fov", 90.0)),
            max_distance=float(d.get("max_distance", 300.0)),
            clear_distance=float(d.get("clear_distance", 150.0)),
            name=d.get("name", ""),
            **extra,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "angle": self.angle_deg,
            "fov": self.fov_deg,
            "max_distance": self.max_distance,
            "clear_distance": self.clear_distance,
        }


@dataclass
class SceneBounds:
    width: float
    height: float

    @staticmethod
    def from_dict(d: dict) -> SceneBounds:
        return SceneBounds(width=float(d["width"]), height=float(d["height"]))

    def to_dict(self) -> dict:
        return {"width": self.width, "height": self.height}


# -- Results --


@dataclass(frozen=True)
class RayHit:
    angle_deg: float
    point: Point
    distance: float


@dataclass
class VisibilityResult:
    """Fan-shaped visibility polygon for one camera.

    ``ray_hits`` are sorted by angle from the start edge of the cone to the
    end edge. The polygon is closed at the camera's own position.
    """

    camera_id: str
    origin: Point
    ray_hits: list[RayHit] = field(default_factory=list)

    @property
    def polygon(self) -> list[Point]:
        return [self.origin, *(h.point for h in self.ray_hits), self.origin]

    @property
    def vertices(self) -> list[tuple[Point, float]]:
        """Polygon vertices paired with their distance from the camera."""
        return [
            (self.origin, 0.0),
            *((h.point, h.distance) for h in self.ray_hits),
            (self.origin, 0.0),
        ]

    def to_shapely(self) -> ShapelyPolygon:
        return ShapelyPolygon([(p.x, p.y) for p in self.polygon])

    @property
    def area(self) -> float:
        if len(self.ray_hits) < 2:
            return 0.0
        return self.to_shapely().area

    def contains(self, point: Point) -> bool:
        """True if ``point`` is inside (or on the edge of) the visible region."""
        if len(self.ray_hits) < 2:
            return False
        return self.to_shapely().covers(ShapelyPoint(point.x, point.y))


# -- Configuration --


@dataclass
class VisibilityParams:
    ray_count: int = 360
    endpoint_epsilon: float = 1e-4  # radians either side of each endpoint
    parallel_epsilon: float = 1e-4
    boundary_margin: float = 10000.0
    ray_length_factor: float = 2.0  # ray length as a multiple of max_distance

    @staticmethod
    def from_dict(d: dict | None) -> VisibilityParams:
        if not d:
            return VisibilityParams()
        defaults = VisibilityParams()
        return VisibilityParams(
            ray_count=int(d.get("ray_count", defaults.ray_count)),
            endpoint_epsilon=d.get(
                "endpoint_epsilon", defaults.endpoint_epsilon
            ),
            parallel_epsilon=d.get(
                "parallel_epsilon", defaults.parallel_epsilon
            ),
            boundary_margin=d.get("boundary_margin", defaults.boundary_margin),
            ray_length_factor=d.get(
                "ray_length_factor", defaults.ray_length_factor
            ),
        )

    def to_dict(self) -> dict:
        return {
            "ray_count": self.ray_count,
            "endpoint_epsilon": self.endpoint_epsilon,
            "parallel_epsilon": self.parallel_epsilon,
            "boundary_margin": self.boundary_margin,
            "ray_length_factor": self.ray_length_factor,
        }
