# src/lotocomb/sampler.py
from __future__ import annotations

import time
from collections.abc import Callable

from lotocomb.memory import memory_used_mb
from lotocomb.utility import InvalidArgument

DEFAULT_STEP_INTERVAL = 10_000

SampleCallback = Callable[[int, float, int], None]


class Sampler:
    """
    Step callback that records (elapsed seconds, memory MB) every `interval` steps.

    Pass an instance as `on_step` to the generator. The two series
    `times` and `memory` stay index-aligned; call finish() when generation
    ends so that short runs still carry one sample.
    """

    def __init__(
        self,
        interval: int = DEFAULT_STEP_INTERVAL,
        *,
        memory: Callable[[], int] = memory_used_mb,
        clock: Callable[[], float] = time.perf_counter,
        on_sample: SampleCallback | None = None,
    ):
        if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
            raise InvalidArgument(f"Invalid input: step interval must be a positive integer (got {interval!r}).")
        self.interval = interval
        self._memory = memory
        self._clock = clock
        self.on_sample = on_sample
        self.start = clock()
        self.times: list[float] = []
        self.memory: list[int] = []
        self.steps = 0
        self._last_sampled: int | None = None

    def __call__(self, step: int) -> None:
        if step > self.steps:
            self.steps = step
        if step % self.interval == 0 and step != self._last_sampled:
            self._last_sampled = step
            self._record(step)

    def _record(self, step: int) -> None:
        elapsed = self._clock() - self.start
        used = max(0, int(self._memory()))
        self.times.append(elapsed)
        self.memory.append(used)
        if self.on_sample is not None:
            self.on_sample(step, elapsed, used)

    @property
    def elapsed(self) -> float:
        return self._clock() - self.start

    @property
    def samples(self) -> list[tuple[float, int]]:
        return list(zip(self.times, self.memory))

    def finish(self) -> list[tuple[float, int]]:
        """Guarantee at least one sample, taken now, then return all samples."""
        if not self.times:
            self._record(self.steps)
        return self.samples
