"""The editable floor plan: bounds, obstacles and cameras.

The editor owns a ``Scene`` and mutates it through the methods below; the
visibility scheduler only reads it. Each mutation calls ``listener`` (if
set), which is how edits reach ``VisionScheduler.request_recalculation``:

    scene = Scene(SceneBounds(1200, 800))
    scheduler = VisionScheduler(scene, root)
    scene.listener = scheduler.request_recalculation

Edits made directly on a camera or obstacle object (outside these methods)
must be followed by ``scene.touch()``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .types import (
    Camera,
    Obstacle,
    Point,
    RectangleObstacle,
    SceneBounds,
    obstacle_from_dict,
)

logger = logging.getLogger(__name__)


@dataclass
class Scene:
    bounds: SceneBounds
    obstacles: list[Obstacle] = field(default_factory=list)
    cameras: list[Camera] = field(default_factory=list)
    listener: Callable[[], None] | None = field(
        default=None, repr=False, compare=False
    )

    def touch(self) -> None:
        """Report a change to the listener."""
        if self.listener is not None:
            self.listener()

    # -- obstacles --

    def add_obstacle(self, obstacle: Obstacle) -> Obstacle:
        self.obstacles.append(obstacle)
        self.touch()
        return obstacle

    def remove_obstacle(self, obstacle_id: str) -> None:
        """Raises KeyError if no obstacle has this id."""
        idx = self._index_of(self.obstacles, obstacle_id)
        del self.obstacles[idx]
        self.touch()

    def get_obstacle(self, obstacle_id: str) -> Obstacle:
        return self.obstacles[self._index_of(self.obstacles, obstacle_id)]

    def rotate_obstacle(self, obstacle_id: str, angle_deg: float) -> None:
        """Set a rectangle's rotation. Other obstacle kinds cannot rotate."""
        obstacle = self.get_obstacle(obstacle_id)
        if not isinstance(obstacle, RectangleObstacle):
            raise ValueError(f"Obstacle {obstacle_id} cannot be rotated")
        obstacle.angle_deg = angle_deg
        self.touch()

    # -- cameras --

    def add_camera(self, camera: Camera) -> Camera:
        self.cameras.append(camera)
        self.touch()
        return camera

    def remove_camera(self, camera_id: str) -> None:
        """Raises KeyError if no camera has this id."""
        idx = self._index_of(self.cameras, camera_id)
        del self.cameras[idx]
        self.touch()

    def get_camera(self, camera_id: str) -> Camera:
        return self.cameras[self._index_of(self.cameras, camera_id)]

    def duplicate_camera(self, camera_id: str) -> Camera:
        return self.add_camera(self.get_camera(camera_id).clone())

    def move_camera(self, camera_id: str, x: float, y: float) -> None:
        camera = self.get_camera(camera_id)
        camera.x = x
        camera.y = y
        self.touch()

    def update_camera(self, camera_id: str, **props: float) -> None:
        """Clamped property edit; see ``Camera.update_properties``."""
        self.get_camera(camera_id).update_properties(**props)
        self.touch()

    def find_camera_at_point(
        self, point: Point, radius: float = 15.0
    ) -> Camera | None:
        """Topmost (most recently added) camera under ``point``."""
        for camera in reversed(self.cameras):
            if camera.contains_point(point, radius):
                return camera
        return None

    # -- whole scene --

    def resize(self, width: float, height: float) -> None:
        self.bounds = SceneBounds(width=width, height=height)
        self.touch()

    def clear_all(self) -> None:
        self.obstacles = []
        self.cameras = []
        logger.info("Scene cleared")
        self.touch()

    @staticmethod
    def _index_of(items: list, item_id: str) -> int:
        for i, item in enumerate(items):
            if item.id == item_id:
                return i
        raise KeyError(item_id)

    @staticmethod
    def from_dict(d: dict) -> Scene:
        return Scene(
            bounds=SceneBounds.from_dict(d["bounds"]),
            obstacles=[obstacle_from_dict(o) for o in d.get("obstacles", [])],
            cameras=[Camera.from_dict(c) for c in d.get("cameras", [])],
        )

    def to_dict(self) -> dict:
        return {
            "bounds": self.bounds.to_dict(),
            "obstacles": [o.to_dict() for o in self.obstacles],
            "cameras": [c.to_dict() for c in self.cameras],
        }
