# src/lotocomb/memory.py
from __future__ import annotations

import gc
import os
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import psutil

_MB = 1024 * 1024

_PROC: psutil.Process | None = None


def memory_used_mb() -> int:
    """Resident set size of this process, in whole MB."""
    global _PROC
    if _PROC is None:
        _PROC = psutil.Process(os.getpid())
    rss = _PROC.memory_info().rss or 0
    return int(rss // _MB)


@dataclass(frozen=True)
class GcEvent:
    time_s: float            # perf_counter() at the end of the collection
    action: str              # e.g. "end of minor GC (gen 0)"
    cause: str               # collected / uncollectable counts
    duration_ms: float
    used_before_mb: int
    used_after_mb: int


def _action_for(generation: int) -> str:
    kind = "major" if generation >= 2 else "minor"
    return f"end of {kind} GC (gen {generation})"


@dataclass
class GcMonitor:
    """
    Record garbage collections while active, via gc.callbacks.

    Usage:
        with GcMonitor() as mon:
            ...
        mon.events  # list[GcEvent]
    """
    memory: Callable[[], int] = memory_used_mb
    clock: Callable[[], float] = time.perf_counter
    events: list[GcEvent] = field(default_factory=list)
    _pending: tuple[float, int] | None = field(default=None, repr=False)
    _active: bool = field(default=False, repr=False)

    def _callback(self, phase: str, info: dict) -> None:
        if phase == "start":
            self._pending = (self.clock(), self.memory())
            return
        if phase != "stop" or self._pending is None:
            return
        started, before = self._pending
        self._pending = None
        now = self.clock()
        self.events.append(GcEvent(
            time_s=now,
            action=_action_for(int(info.get("generation", 0))),
            cause=f"collected {info.get('collected', 0)}, uncollectable {info.get('uncollectable', 0)}",
            duration_ms=(now - started) * 1000.0,
            used_before_mb=before,
            used_after_mb=self.memory(),
        ))

    def start(self) -> GcMonitor:
        if not self._active:
            gc.callbacks.append(self._callback)
            self._active = True
        return self

    def stop(self) -> None:
        if self._active:
            gc.callbacks.remove(self._callback)
            self._active = False
            self._pending = None

    def __enter__(self) -> GcMonitor:
        return self.start()

    def __exit__(self, *exc) -> None:
        self.stop()

    @property
    def total_ms(self) -> float:
        return sum(e.duration_ms for e in self.events)
