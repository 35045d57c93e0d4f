# src/lotocomb/fmt.py
from __future__ import annotations

import re
from collections.abc import Iterable

from colorama import Fore, Style

# Single source of truth for ANSI stripping
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(s: str | None) -> str:
    """Return s with ANSI escape sequences removed."""
    return "" if s is None else ANSI_RE.sub("", s)


def format_count(n: int | None) -> str:
    return "n/a" if n is None else f"{n:,}"


def format_numbers(nums: Iterable[int]) -> str:
    """Two-digit, space separated: '01 02 05 ...'."""
    return " ".join(f"{v:02d}" for v in nums)


def format_combination(nums: Iterable[int], required: Iterable[int] = ()) -> str:
    """Like format_numbers, with the required numbers highlighted."""
    req = set(required)
    parts = []
    for v in nums:
        tok = f"{v:02d}"
        parts.append(f"{Fore.CYAN}{tok}{Style.RESET_ALL}" if v in req else tok)
    return " ".join(parts)


def format_duration(seconds: float) -> str:
    """ms if <1s; s with millis if <60s; else mm:ss.mmm (and hh:mm:ss.mmm if ≥1h)."""
    MAX_SECONDS = 60
    if seconds < 1:
        ms = round(seconds * 1000)
        return f"{ms} ms"
    if seconds < MAX_SECONDS:
        return f"{seconds:.3f} s"
    m, s = divmod(seconds, MAX_SECONDS)
    if m < MAX_SECONDS:
        return f"{int(m)}:{s:06.3f}"               # mm:ss.mmm
    h, m = divmod(int(m), MAX_SECONDS)
    return f"{h}:{m:02d}:{s:06.3f}"                # hh:mm:ss.mmm
