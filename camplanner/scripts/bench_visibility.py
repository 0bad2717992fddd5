#!/usr/bin/env python3
"""Benchmark the visibility engine.

Usage (from the repository root):
    python camplanner/scripts/bench_visibility.py              # 5 iterations, 8 cameras
    python camplanner/scripts/bench_visibility.py -n 10        # 10 iterations
    python camplanner/scripts/bench_visibility.py -c 20 -o 60  # 20 cameras, 60 obstacles
"""

import argparse
import random
import statistics
import sys
import time
from pathlib import Path

# Add the repository root to path
SCRIPT_DIR = Path(__file__).resolve().parent
REPO_DIR = SCRIPT_DIR.parent.parent
sys.path.insert(0, str(REPO_DIR))

from camplanner.engine.types import (  # noqa: E402
    Camera,
    FreehandObstacle,
    LineObstacle,
    Point,
    RectangleObstacle,
    SceneBounds,
    VisibilityParams,
)
from camplanner.engine.visibility import compute_visibility  # noqa: E402


def make_scene(rng, bounds, num_cameras, num_obstacles):
    """Random mix of obstacle kinds and cameras inside ``bounds``."""

    def rand_point():
        return Point(
            rng.uniform(0, bounds.width), rng.uniform(0, bounds.height)
        )

    obstacles = []
    for i in range(num_obstacles):
        kind = i % 3
        if kind == 0:
            p = rand_point()
            q = Point(p.x + rng.uniform(-80, 80), p.y + rng.uniform(-80, 80))
            obstacles.append(LineObstacle(p, q))
        elif kind == 1:
            p = rand_point()
            q = Point(p.x + rng.uniform(10, 60), p.y + rng.uniform(10, 60))
            obstacles.append(
                RectangleObstacle(p, q, angle_deg=rng.uniform(0, 90))
            )
        else:
            start = rand_point()
            points = [start]
            for _ in range(rng.randint(3, 12)):
                last = points[-1]
                points.append(
                    Point(
                        last.x + rng.uniform(-15, 15),
                        last.y + rng.uniform(-15, 15),
                    )
                )
            obstacles.append(FreehandObstacle(points=points))

    cameras = [
        Camera(
            rng.uniform(0, bounds.width),
            rng.uniform(0, bounds.height),
            angle_deg=rng.uniform(0, 360),
            fov_deg=rng.choice([60, 90, 120, 360]),
        )
        for _ in range(num_cameras)
    ]
    return cameras, obstacles


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark the visibility engine"
    )
    parser.add_argument(
        "-n",
        "--iterations",
        type=int,
        default=5,
        help="Number of iterations (default: 5)",
    )
    parser.add_argument(
        "-c",
        "--cameras",
        type=int,
        default=8,
        help="Number of cameras (default: 8)",
    )
    parser.add_argument(
        "-o",
        "--obstacles",
        type=int,
        default=30,
        help="Number of obstacles (default: 30)",
    )
    parser.add_argument(
        "-r",
        "--rays",
        type=int,
        default=360,
        help="Uniform rays per full circle (default: 360)",
    )
    parser.add_argument(
        "--seed", type=int, default=42, help="Scene seed (default: 42)"
    )
    args = parser.parse_args()

    bounds = SceneBounds(1200, 800)
    params = VisibilityParams(ray_count=args.rays)
    cameras, obstacles = make_scene(
        random.Random(args.seed), bounds, args.cameras, args.obstacles
    )
    num_segments = sum(len(o.segments()) for o in obstacles)

    print(
        f"Benchmark: {len(cameras)} cameras, {len(obstacles)} obstacles "
        f"({num_segments} segments), seed={args.seed}"
    )
    print(f"Iterations: {args.iterations}")
    print()

    def run_pass():
        return [
            compute_visibility(cam, obstacles, bounds, params)
            for cam in cameras
        ]

    # Warmup
    print("Warmup...", end=" ", flush=True)
    results = run_pass()
    print("done")
    total_rays = sum(len(r.ray_hits) for r in results)
    print(f"Rays per pass: {total_rays}")

    # Timed runs
    times_ms = []
    for i in range(args.iterations):
        start = time.perf_counter()
        run_pass()
        elapsed_ms = (time.perf_counter() - start) * 1000
        times_ms.append(elapsed_ms)
        print(f"  Run {i + 1}: {elapsed_ms:.1f} ms")

    median = statistics.median(times_ms)
    mean = statistics.mean(times_ms)
    print()
    print(f"Median: {median:.1f} ms")
    print(f"Mean:   {mean:.1f} ms")
    if len(times_ms) > 1:
        stdev = statistics.stdev(times_ms)
        print(f"Stdev:  {stdev:.1f} ms")


if __name__ == "__main__":
    main()
