# src/lotocomb/generator.py
from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from itertools import islice
from typing import TypeVar

from lotocomb.utility import InvalidArgument

T = TypeVar("T")

UNIVERSE_SIZE = 25
PICK_SIZE = 15
UNIVERSE: tuple[int, ...] = tuple(range(1, UNIVERSE_SIZE + 1))

StepCallback = Callable[[int], None]


# ---------- Data models -------------------------------------------------------

@dataclass(frozen=True)
class RankWindow:
    """1-based positions [start, start + count - 1] of the generation order."""
    start: int
    count: int

    def __post_init__(self) -> None:
        if isinstance(self.start, bool) or not isinstance(self.start, int) or self.start < 1:
            raise InvalidArgument(f"Invalid input: window start must be >= 1 (got {self.start!r}).")
        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count <= 0:
            raise InvalidArgument(f"Invalid input: window count must be > 0 (got {self.count!r}).")

    @property
    def end(self) -> int:
        return self.start + self.count - 1

    def expected_printed(self, total: int) -> int:
        """How many positions of a sequence of `total` items fall in the window."""
        return min(self.count, max(0, total - self.start + 1))


# ---------- Required set ------------------------------------------------------

def validate_required(values: Iterable[int]) -> tuple[int, ...]:
    """
    Check a required subset against the universe and return it sorted.

    Raises InvalidArgument for numbers outside 1..25, repeated numbers,
    or more than 15 numbers.
    """
    nums = list(values)
    bad = [v for v in nums if isinstance(v, bool) or not isinstance(v, int) or not 1 <= v <= UNIVERSE_SIZE]
    if bad:
        shown = ", ".join(repr(v) for v in dict.fromkeys(bad))
        raise InvalidArgument(f"Invalid input: numbers out of range 1..{UNIVERSE_SIZE}: {shown}.")

    seen: set[int] = set()
    dupes: list[int] = []
    for v in nums:
        if v in seen and v not in dupes:
            dupes.append(v)
        seen.add(v)
    if dupes:
        raise InvalidArgument(f"Invalid input: repeated required numbers: {', '.join(map(str, sorted(dupes)))}.")

    if len(nums) > PICK_SIZE:
        raise InvalidArgument(f"Invalid input: at most {PICK_SIZE} required numbers (got {len(nums)}).")
    return tuple(sorted(nums))


def free_pool(required: Iterable[int]) -> tuple[int, ...]:
    req = set(required)
    return tuple(v for v in UNIVERSE if v not in req)


# ---------- Generation --------------------------------------------------------

def combinations(pool: Sequence[T], k: int, on_step: StepCallback | None = None) -> Iterator[tuple[T, ...]]:
    """
    Lazily yield every k-subset of `pool` in ascending lexicographic order of
    pool indices, by depth-first backtracking over a single path buffer.

    After each subset has been handed out (i.e. when the consumer asks for the
    next one), an internal counter is bumped and `on_step(count)` is called.
    A k outside 0..len(pool) yields nothing; k == 0 yields one empty tuple.
    """
    items = list(pool)
    n = len(items)
    if not 0 <= k <= n:
        return

    path: list[T] = []
    count = 0

    def backtrack(start: int) -> Iterator[tuple[T, ...]]:
        nonlocal count
        if len(path) == k:
            yield tuple(path)
            count += 1
            if on_step is not None:
                on_step(count)
            return
        # stop while the remaining slots can still be filled
        for i in range(start, n - (k - len(path)) + 1):
            path.append(items[i])
            yield from backtrack(i + 1)
            path.pop()

    yield from backtrack(0)


def combinations_with_required(
    required: Iterable[int],
    on_step: StepCallback | None = None,
) -> Iterator[tuple[int, ...]]:
    """
    Every 15-number game of 1..25 containing `required`, as sorted tuples.

    The required set is validated here, before the first item is requested.
    """
    req = validate_required(required)
    pool = free_pool(req)
    k_free = PICK_SIZE - len(req)
    return (tuple(sorted(req + free)) for free in combinations(pool, k_free, on_step))


def walk_with_required(
    required: Iterable[int],
    on_step: StepCallback | None = None,
    on_combination: Callable[[list[int]], None] | None = None,
) -> int:
    """
    Callback-driven variant: visit every game without building tuples.

    The game is written into one 15-slot buffer (required numbers first,
    free picks after) that is reused for every call of `on_combination`;
    copy it to keep it. Returns the number of games visited.
    """
    req = validate_required(required)
    pool = free_pool(req)
    k_free = PICK_SIZE - len(req)
    n = len(pool)

    combo = list(req) + [0] * k_free
    count = 0

    def backtrack(start: int, depth: int, write_pos: int) -> None:
        nonlocal count
        if depth == k_free:
            count += 1
            if on_step is not None:
                on_step(count)
            if on_combination is not None:
                on_combination(combo)
            return
        for i in range(start, n - (k_free - depth) + 1):
            combo[write_pos] = pool[i]
            backtrack(i + 1, depth + 1, write_pos + 1)

    backtrack(0, 0, len(req))
    return count


def rank_window(items: Iterable[T], window: RankWindow | None = None) -> Iterator[tuple[int, T]]:
    """
    Pair items with their 1-based position and keep only the window.

    Positions before `window.start` are still pulled from `items` (and thus
    generated); iteration stops right after `window.end`.
    """
    numbered = enumerate(items, 1)
    if window is None:
        return numbered
    return islice(numbered, window.start - 1, window.end)
