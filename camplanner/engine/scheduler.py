"""Debounced recomputation of camera visibility.

The editor calls ``request_recalculation()`` after every edit (drag, rotate,
property change, obstacle add/remove). Drags fire dozens of edits a second,
so requests are coalesced: each one cancels the pending timer and arms a new
one, and only when the scene has been quiet for ``delay_ms`` does a single
``recalculate_all()`` run. There is never more than one pending timer.

Timers come from a ``TimerHost``: anything with Tk's ``after`` /
``after_cancel`` pair. A ``tkinter`` root works as-is; ``AsyncioTimerHost``
adapts an asyncio event loop. Both fire callbacks on the thread that owns
the loop, so the scheduler needs no locking.

The result cache maps camera id to its latest ``VisibilityResult``. A pass
builds a fresh dict and swaps it in when every camera is done, so readers
never see a mix of old and new results.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, Protocol

from .scene import Scene
from .types import VisibilityParams, VisibilityResult
from .visibility import compute_visibility

logger = logging.getLogger(__name__)

DEFAULT_DELAY_MS = 400


class TimerHost(Protocol):
    def after(self, ms: int, func: Callable[[], Any]) -> Any:
        """Run ``func`` once after ``ms`` milliseconds. Returns a handle."""
        ...

    def after_cancel(self, handle: Any) -> None:
        """Cancel a callback previously scheduled with ``after``."""
        ...


class AsyncioTimerHost:
    """TimerHost backed by ``loop.call_later``.

    With no explicit loop, the running loop is looked up on each ``after``
    call, so the host must be used from inside that loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def after(self, ms: int, func: Callable[[], Any]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(ms / 1000.0, func)

    def after_cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


class VisionScheduler:
    """Owns the per-camera result cache and the debounce timer."""

    def __init__(
        self,
        scene: Scene,
        timer: TimerHost,
        delay_ms: int = DEFAULT_DELAY_MS,
        params: VisibilityParams | None = None,
        on_recalculated: Callable[[], None] | None = None,
    ) -> None:
        self.scene = scene
        self.timer = timer
        self.delay_ms = delay_ms
        self.params = params or VisibilityParams()
        self.on_recalculated = on_recalculated

        self._results: dict[str, VisibilityResult] = {}
        self._after_id: Any = None
        self._enabled = True

    # -- debounce --

    def request_recalculation(self) -> None:
        """Debounced: recompute once the scene has been quiet for delay_ms."""
        if not self._enabled:
            return
        self._cancel_pending()
        self._after_id = self.timer.after(self.delay_ms, self._on_timer)
        logger.debug("Visibility recompute armed (%d ms)", self.delay_ms)

    def _cancel_pending(self) -> None:
        if self._after_id is not None:
            self.timer.after_cancel(self._after_id)
            self._after_id = None
            logger.debug("Pending visibility recompute cancelled")

    def _on_timer(self) -> None:
        self._after_id = None
        self.recalculate_all()

    @property
    def has_pending(self) -> bool:
        return self._after_id is not None

    # -- computation --

    def recalculate_all(self) -> None:
        """Recompute every camera now, replacing the whole cache."""
        if not self._enabled:
            return
        self._cancel_pending()

        cameras = list(self.scene.cameras)
        obstacles = list(self.scene.obstacles)
        bounds = self.scene.bounds
        logger.info("Recalculating vision for %d camera(s)", len(cameras))

        self._results = {}
        fresh: dict[str, VisibilityResult] = {}
        for camera in cameras:
            fresh[camera.id] = compute_visibility(
                camera, obstacles, bounds, self.params
            )
        self._results = fresh

        logger.info("Vision calculated for %d camera(s)", len(fresh))
        self._notify()

    def get_result(self, camera_id: str) -> VisibilityResult | None:
        return self._results.get(camera_id)

    @property
    def results(self) -> Mapping[str, VisibilityResult]:
        """Read-only view of the current cache."""
        return MappingProxyType(self._results)

    # -- enable / disable --

    def set_enabled(self, enabled: bool) -> None:
        """Disabling cancels any pending pass and clears the cache;
        enabling schedules a fresh pass."""
        self._enabled = enabled
        if not enabled:
            self._cancel_pending()
            self._results = {}
            logger.info("Vision calculation disabled")
            self._notify()
        else:
            logger.info("Vision calculation enabled")
            self.request_recalculation()

    def is_enabled(self) -> bool:
        return self._enabled

    def _notify(self) -> None:
        if self.on_recalculated is not None:
            self.on_recalculated()
