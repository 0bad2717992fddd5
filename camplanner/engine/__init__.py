from .scene import Scene
from .scheduler import AsyncioTimerHost, VisionScheduler
from .types import (
    Camera,
    FreehandObstacle,
    LineObstacle,
    Point,
    RectangleObstacle,
    SceneBounds,
    VisibilityParams,
    VisibilityResult,
)
from .visibility import compute_visibility

__all__ = [
    "AsyncioTimerHost",
    "Camera",
    "FreehandObstacle",
    "LineObstacle",
    "Point",
    "RectangleObstacle",
    "Scene",
    "SceneBounds",
    "VisibilityParams",
    "VisibilityResult",
    "VisionScheduler",
    "compute_visibility",
]
