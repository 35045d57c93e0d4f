# src/lotocomb/run.py
from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from contextlib import nullcontext
from dataclasses import dataclass, field

from lotocomb.binomial import binomial
from lotocomb.generator import (
    PICK_SIZE,
    UNIVERSE_SIZE,
    RankWindow,
    combinations_with_required,
    rank_window,
    validate_required,
    walk_with_required,
)
from lotocomb.memory import GcEvent, GcMonitor, memory_used_mb
from lotocomb.sampler import DEFAULT_STEP_INTERVAL, SampleCallback, Sampler
from lotocomb.utility import ArithmeticPrecondition, InvalidArgument

DEFAULT_REQUIRED: tuple[int, ...] = (1, 2)

CombinationCallback = Callable[[int, tuple[int, ...]], None]


# ---------- Data models -------------------------------------------------------

@dataclass(frozen=True)
class RunConfig:
    required: Iterable[int] = DEFAULT_REQUIRED
    step_interval: int = DEFAULT_STEP_INTERVAL
    window: RankWindow | None = None
    turbo: bool = False      # callback walk over one buffer, no window
    track_gc: bool = False


@dataclass
class RunReport:
    required: tuple[int, ...]
    window: RankWindow | None
    printed: int             # games handed to the consumer
    generated: int           # steps counted by the generator
    scanned: int             # positions pulled, including a skipped prefix
    expected: int | None     # binomial(25 - r, 15 - r); None if not computable
    elapsed_s: float
    times: list[float]
    memory: list[int]
    started: float           # perf_counter() origin of `times`
    gc_events: list[GcEvent] = field(default_factory=list)

    @property
    def expected_printed(self) -> int | None:
        if self.expected is None:
            return None
        if self.window is None:
            return self.expected
        return self.window.expected_printed(self.expected)

    @property
    def consistent(self) -> bool:
        """Printed count agrees with the independently computed total."""
        return self.expected_printed is not None and self.printed == self.expected_printed

    @property
    def gc_total_ms(self) -> float:
        return sum(e.duration_ms for e in self.gc_events)


# ---------- Orchestration -----------------------------------------------------

def expected_total(required_count: int) -> int:
    return binomial(UNIVERSE_SIZE - required_count, PICK_SIZE - required_count)


def run(
    config: RunConfig,
    *,
    on_combination: CombinationCallback | None = None,
    on_sample: SampleCallback | None = None,
    memory: Callable[[], int] = memory_used_mb,
) -> RunReport:
    """
    Generate every game for `config`, sampling time/memory along the way.

    All validation happens before generation starts. `on_combination`
    receives (1-based position, game) for each game inside the rank window
    (every game when there is none); in turbo mode the game is a snapshot
    of the shared buffer.
    """
    required = validate_required(config.required)
    if config.window is not None and not isinstance(config.window, RankWindow):
        raise InvalidArgument(f"Invalid input: window must be a RankWindow (got {config.window!r}).")
    if config.turbo and config.window is not None:
        raise InvalidArgument("Invalid input: a rank window cannot be combined with turbo mode.")

    sampler = Sampler(config.step_interval, memory=memory, on_sample=on_sample)
    monitor = GcMonitor(memory=memory) if config.track_gc else None

    printed = 0
    last_pos = 0
    with monitor if monitor is not None else nullcontext():
        if config.turbo:
            def visit(buf: list[int]) -> None:
                nonlocal printed
                printed += 1
                if on_combination is not None:
                    on_combination(printed, tuple(buf))

            last_pos = walk_with_required(required, sampler, visit)
        else:
            games = combinations_with_required(required, sampler)
            for pos, game in rank_window(games, config.window):
                last_pos = pos
                printed += 1
                if on_combination is not None:
                    on_combination(pos, game)
            # a closed window leaves the generator suspended on its last game
            games.close()

    sampler.finish()
    elapsed = sampler.elapsed

    try:
        expected = expected_total(len(required))
    except ArithmeticPrecondition:
        expected = None

    return RunReport(
        required=required,
        window=config.window,
        printed=printed,
        generated=sampler.steps,
        scanned=max(last_pos, sampler.steps),
        expected=expected,
        elapsed_s=elapsed,
        times=list(sampler.times),
        memory=list(sampler.memory),
        started=sampler.start,
        gc_events=list(monitor.events) if monitor is not None else [],
    )
