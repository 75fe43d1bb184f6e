# Overview: Top-of-page loading bar driven by navigation; purely presentational state.

"""
Navigation progress.

Progress is simulated, not measured:
- start(): 15%, then at least 35/55/75/90% after 50/150/300/500 ms
- route_changed(): completes 100 ms after the new route was reported
- stop(): completes immediately
- 2.5 s after start the bar completes on its own
- a completed bar (100%) hides 300 ms later and resets to 0

State is derived from timestamps on an injected monotonic clock, so nothing
needs a timer thread and a test can move time forward explicitly.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol


logger = logging.getLogger(__name__)


INITIAL_PROGRESS = 15
PROGRESS_STEPS = ((0.050, 35), (0.150, 55), (0.300, 75), (0.500, 90))
AUTO_COMPLETE_AFTER = 2.5
ROUTE_CHANGE_DELAY = 0.100
HIDE_AFTER_COMPLETE = 0.300


@dataclass(frozen=True)
class ProgressSnapshot:
    is_loading: bool
    progress: int
    href: Optional[str] = None

    def to_dict(self) -> dict:
        return {"is_loading": self.is_loading, "progress": self.progress, "href": self.href}


class NavigationProgress:
    def __init__(self, *, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._started_at: Optional[float] = None
        self._completes_at: Optional[float] = None
        self._href: Optional[str] = None
        self._start_path: Optional[str] = None

    def start(self, href: Optional[str] = None, *, from_path: Optional[str] = None) -> None:
        """Begin (or restart) the bar; any pending completion is discarded."""
        self._started_at = self._clock()
        self._completes_at = None
        self._href = href
        self._start_path = from_path
        logger.debug("Navigation started towards %s", href)

    def stop(self) -> None:
        if self._started_at is None:
            return
        self._complete_at(self._clock())

    def route_changed(self, path: Optional[str] = None) -> None:
        if not self.snapshot().is_loading:
            return
        if path is not None and self._start_path is not None and path == self._start_path:
            return
        self._complete_at(self._clock() + ROUTE_CHANGE_DELAY)

    def _complete_at(self, moment: float) -> None:
        if self._completes_at is None or moment < self._completes_at:
            self._completes_at = moment

    def snapshot(self) -> ProgressSnapshot:
        if self._started_at is None:
            return ProgressSnapshot(is_loading=False, progress=0)

        now = self._clock()
        completes_at = self._started_at + AUTO_COMPLETE_AFTER
        if self._completes_at is not None:
            completes_at = min(completes_at, self._completes_at)

        if now >= completes_at + HIDE_AFTER_COMPLETE:
            self._started_at = None
            self._completes_at = None
            self._href = None
            self._start_path = None
            return ProgressSnapshot(is_loading=False, progress=0)

        if now >= completes_at:
            return ProgressSnapshot(is_loading=True, progress=100, href=self._href)

        elapsed = now - self._started_at
        progress = INITIAL_PROGRESS
        for delay, target in PROGRESS_STEPS:
            if elapsed >= delay:
                progress = max(progress, target)
        return ProgressSnapshot(is_loading=True, progress=progress, href=self._href)

    @property
    def is_loading(self) -> bool:
        return self.snapshot().is_loading

    @property
    def progress(self) -> int:
        return self.snapshot().progress


class LinkClickHandler(Protocol):
    def __call__(self, href: str, event: Any = None) -> None:
        ...


class NavigationLink:
    """A link that starts the progress bar before its own click handler runs."""

    def __init__(
        self,
        href: str,
        progress: NavigationProgress,
        *,
        on_click: Optional[LinkClickHandler] = None,
    ):
        self.href = href
        self.progress = progress
        self.on_click = on_click

    def click(self, event: Any = None, *, from_path: Optional[str] = None) -> None:
        self.progress.start(self.href, from_path=from_path)
        if self.on_click is not None:
            self.on_click(self.href, event)
