# src/lotocomb/chart.py
from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import matplotlib.pyplot as plt

from lotocomb.memory import GcEvent

TITLE = "Memory usage over time"


def plot_memory(
    times: Sequence[float],
    memory: Sequence[int],
    gc_events: Sequence[GcEvent] | None = None,
    *,
    started: float = 0.0,
    output: str | Path | None = None,
    show: bool = True,
):
    """
    Draw memory (MB) against elapsed time (s), with optional GC markers.

    GC events carry absolute perf_counter() stamps; `started` is the run's
    origin so they line up with the sample times. Saves to `output` when
    given and opens a window when `show` is true. Returns the figure.
    """
    if not times or not memory:
        raise ValueError("nothing to plot: sample series are empty")
    if len(times) != len(memory):
        raise ValueError(f"sample series are not aligned ({len(times)} times, {len(memory)} memory values)")

    fig, ax = plt.subplots(figsize=(8, 6))
    ax.plot(list(times), list(memory), label="Memory usage")

    if gc_events:
        gc_t = [e.time_s - started for e in gc_events]
        gc_m = [e.used_after_mb for e in gc_events]
        ax.plot(gc_t, gc_m, linestyle="none", marker="D", label="GC")

    ax.set_title(TITLE)
    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Memory (MB)")
    ax.legend(loc="best")
    fig.tight_layout()

    if output:
        path = Path(output).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(path)
    if show:
        plt.show()
    else:
        plt.close(fig)
    return fig
