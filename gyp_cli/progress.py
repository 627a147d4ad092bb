"""Phase progress for manifest operations (package read, scan, write)."""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable

import structlog

log = structlog.get_logger("gyp_cli.progress")


@dataclass
class PhaseProgress:
    phase: str
    label: str = ""
    status: str = "pending"  # "running" | "succeeded" | "failed"
    start_time: float | None = None
    end_time: float | None = None
    detail: str = ""

    @property
    def duration(self) -> float | None:
        if self.start_time is not None and self.end_time is not None:
            return round(self.end_time - self.start_time, 3)
        return None

    @property
    def finished(self) -> bool:
        return self.status in ("succeeded", "failed")


class ProgressTracker:
    """Record phase transitions and forward them to registered callbacks.

    A phase that fails is not necessarily an error: a missing package.json
    or include directory is reported as a failed phase and the operation
    continues with defaults.
    """

    def __init__(self) -> None:
        self.phases: list[PhaseProgress] = []
        self._by_name: dict[str, PhaseProgress] = {}
        self.callbacks: list[Callable[[PhaseProgress], None]] = []

    def start(self, phase: str, label: str = "") -> None:
        p = PhaseProgress(phase=phase, label=label or phase, status="running",
                          start_time=time.monotonic())
        self.phases.append(p)
        self._by_name[phase] = p
        self._notify(p)

    def succeed(self, phase: str, detail: str = "") -> None:
        self._finish(phase, "succeeded", detail)

    def fail(self, phase: str, detail: str = "") -> None:
        self._finish(phase, "failed", detail)

    @contextmanager
    def track(self, phase: str, label: str = "") -> Iterator[PhaseProgress]:
        """Run a block as a phase; an exception marks it failed and propagates."""
        self.start(phase, label)
        p = self._by_name[phase]
        try:
            yield p
        except BaseException as e:
            self.fail(phase, detail=str(e))
            raise
        if not p.finished:
            self.succeed(phase, p.detail)

    def status_of(self, phase: str) -> str | None:
        p = self._by_name.get(phase)
        return p.status if p else None

    def _finish(self, phase: str, status: str, detail: str) -> None:
        p = self._by_name.get(phase)
        if p is None or p.finished:
            return
        p.status = status
        p.end_time = time.monotonic()
        p.detail = detail or p.detail
        self._notify(p)

    def _notify(self, p: PhaseProgress) -> None:
        log.debug("progress.phase", phase=p.phase, status=p.status, detail=p.detail)
        for cb in self.callbacks:
            cb(p)
