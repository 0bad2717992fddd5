"""Tests for the editable scene and its change notifications."""

import pytest

from camplanner.engine.scene import Scene
from camplanner.engine.types import (
    Camera,
    FreehandObstacle,
    LineObstacle,
    Point,
    RectangleObstacle,
    SceneBounds,
)


class _Counter:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


def _scene():
    counter = _Counter()
    scene = Scene(SceneBounds(800, 600), listener=counter)
    return scene, counter


class TestObstacles:
    def test_add_and_get(self):
        scene, counter = _scene()
        line = scene.add_obstacle(LineObstacle(Point(0, 0), Point(10, 0)))
        assert scene.get_obstacle(line.id) is line
        assert counter.calls == 1

    def test_remove(self):
        scene, counter = _scene()
        line = scene.add_obstacle(LineObstacle(Point(0, 0), Point(10, 0)))
        scene.remove_obstacle(line.id)
        assert scene.obstacles == []
        assert counter.calls == 2

    def test_remove_unknown_id(self):
        scene, counter = _scene()
        with pytest.raises(KeyError):
            scene.remove_obstacle("nope")
        assert counter.calls == 0

    def test_rotate_rectangle(self):
        scene, counter = _scene()
        rect = scene.add_obstacle(
            RectangleObstacle(Point(0, 0), Point(20, 10))
        )
        scene.rotate_obstacle(rect.id, 30)
        assert rect.angle_deg == 30
        assert counter.calls == 2

    def test_rotate_line_rejected(self):
        scene, _ = _scene()
        line = scene.add_obstacle(LineObstacle(Point(0, 0), Point(10, 0)))
        with pytest.raises(ValueError):
            scene.rotate_obstacle(line.id, 30)


class TestCameras:
    def test_add_remove(self):
        scene, counter = _scene()
        cam = scene.add_camera(Camera(100, 100))
        assert scene.get_camera(cam.id) is cam
        scene.remove_camera(cam.id)
        assert scene.cameras == []
        assert counter.calls == 2

    def test_unknown_camera(self):
        scene, _ = _scene()
        with pytest.raises(KeyError):
            scene.get_camera("missing")
        with pytest.raises(KeyError):
            scene.update_camera("missing", fov_deg=45)

    def test_duplicate(self):
        scene, counter = _scene()
        cam = scene.add_camera(Camera(100, 100, angle_deg=45, name="Gate"))
        copy = scene.duplicate_camera(cam.id)
        assert scene.cameras == [cam, copy]
        assert copy.id != cam.id
        assert copy.position == Point(130, 130)
        assert copy.name == "Gate (copy)"
        assert counter.calls == 2

    def test_move(self):
        scene, counter = _scene()
        cam = scene.add_camera(Camera(100, 100))
        scene.move_camera(cam.id, 250, 40)
        assert cam.position == Point(250, 40)
        assert counter.calls == 2

    def test_update_clamps(self):
        scene, counter = _scene()
        cam = scene.add_camera(Camera(100, 100))
        scene.update_camera(cam.id, fov_deg=500, max_distance=80)
        assert cam.fov_deg == 360
        assert cam.max_distance == 80
        assert cam.clear_distance == 80
        assert counter.calls == 2

    def test_find_topmost(self):
        scene, _ = _scene()
        below = scene.add_camera(Camera(100, 100))
        above = scene.add_camera(Camera(105, 100))
        assert scene.find_camera_at_point(Point(103, 100)) is above
        assert scene.find_camera_at_point(Point(88, 100)) is below
        assert scene.find_camera_at_point(Point(300, 300)) is None

    def test_find_with_radius(self):
        scene, _ = _scene()
        cam = scene.add_camera(Camera(100, 100))
        assert scene.find_camera_at_point(Point(130, 100)) is None
        assert scene.find_camera_at_point(Point(130, 100), radius=30) is cam


class TestWholeScene:
    def test_resize(self):
        scene, counter = _scene()
        scene.resize(1200, 900)
        assert scene.bounds == SceneBounds(1200, 900)
        assert counter.calls == 1

    def test_clear_all(self, caplog):
        scene, counter = _scene()
        scene.add_camera(Camera(0, 0))
        scene.add_obstacle(LineObstacle(Point(0, 0), Point(1, 1)))
        with caplog.at_level("INFO", logger="camplanner.engine.scene"):
            scene.clear_all()
        assert scene.cameras == []
        assert scene.obstacles == []
        assert counter.calls == 3
        assert "Scene cleared" in caplog.text

    def test_touch_without_listener(self):
        scene = Scene(SceneBounds(10, 10))
        scene.touch()
        scene.add_camera(Camera(1, 1))
        assert len(scene.cameras) == 1

    def test_dict_round_trip(self):
        scene = Scene(SceneBounds(800, 600))
        scene.add_obstacle(
            FreehandObstacle(points=[Point(0, 0), Point(5, 5), Point(9, 2)])
        )
        scene.add_obstacle(LineObstacle(Point(1, 1), Point(4, 1)))
        scene.add_obstacle(
            RectangleObstacle(Point(10, 10), Point(40, 30), angle_deg=15)
        )
        scene.add_camera(Camera(50, 60, angle_deg=90, name="Hall"))

        again = Scene.from_dict(scene.to_dict())
        assert again == scene
        assert [o.id for o in again.obstacles] == [
            o.id for o in scene.obstacles
        ]
        assert again.listener is None

    def test_from_dict_defaults_to_empty(self):
        scene = Scene.from_dict({"bounds": {"width": 100, "height": 50}})
        assert scene.bounds == SceneBounds(100, 50)
        assert scene.obstacles == []
        assert scene.cameras == []
