# tests/test_generator.py
"""
Tests for the backtracking generator, the required-set helpers and the rank window.

Run: pytest -v
"""

from __future__ import annotations

from itertools import combinations as it_combinations
from itertools import islice

import pytest

from lotocomb.binomial import binomial
from lotocomb.generator import (
    PICK_SIZE,
    UNIVERSE,
    UNIVERSE_SIZE,
    RankWindow,
    combinations,
    combinations_with_required,
    free_pool,
    rank_window,
    validate_required,
    walk_with_required,
)
from lotocomb.utility import InvalidArgument

# ---------- helpers -----------------------------------------------------------


def _required(r: int) -> tuple[int, ...]:
    """The first r numbers of the universe, a handy pinned set."""
    return tuple(range(1, r + 1))


def _free_part(game: tuple[int, ...], required: tuple[int, ...]) -> tuple[int, ...]:
    req = set(required)
    return tuple(v for v in game if v not in req)


# ---------- combinations() ----------------------------------------------------


def test_small_pool_in_lexicographic_order():
    assert list(combinations([1, 2, 3, 4], 2)) == [
        (1, 2), (1, 3), (1, 4), (2, 3), (2, 4), (3, 4),
    ]


def test_order_follows_pool_positions_not_values():
    assert list(combinations(["c", "a", "b"], 2)) == [("c", "a"), ("c", "b"), ("a", "b")]


@pytest.mark.parametrize("n,k", [(6, 3), (7, 0), (7, 7), (9, 4), (1, 1)])
def test_agrees_with_itertools(n, k):
    pool = list(range(n))
    assert list(combinations(pool, k)) == list(it_combinations(pool, k))


def test_k_zero_yields_one_empty_subset():
    assert list(combinations([1, 2, 3], 0)) == [()]
    assert list(combinations([], 0)) == [()]


@pytest.mark.parametrize("k", [-1, 4, 10])
def test_k_out_of_range_is_empty(k):
    assert list(combinations([1, 2, 3], k)) == []


def test_on_step_counts_each_subset_in_order():
    steps: list[int] = []
    out = list(combinations(range(6), 3, steps.append))
    assert steps == list(range(1, len(out) + 1))
    assert len(out) == binomial(6, 3)


def test_is_lazy_and_stops_with_the_consumer():
    steps: list[int] = []
    gen = combinations(range(23), 13, steps.append)
    first = list(islice(gen, 3))
    assert first[0] == tuple(range(13))
    assert first[2] == tuple(range(12)) + (14,)
    # the step for the third subset fires only when a fourth is requested
    assert steps == [1, 2]
    gen.close()
    assert steps == [1, 2]


def test_yielded_tuples_are_independent_of_the_path_buffer():
    out = list(combinations([1, 2, 3], 2))
    assert out[0] == (1, 2)
    assert all(isinstance(c, tuple) for c in out)


def test_deterministic():
    a = list(combinations(range(10), 4))
    b = list(combinations(range(10), 4))
    assert a == b


# ---------- required set ------------------------------------------------------


def test_validate_required_sorts():
    assert validate_required([5, 1, 3]) == (1, 3, 5)
    assert validate_required(()) == ()


@pytest.mark.parametrize("values,fragment", [
    ([0, 1], "out of range"),
    ([26], "out of range"),
    ([1, 1, 2], "repeated"),
    (list(range(1, 17)), "at most 15"),
    (["3"], "out of range"),
    ([True], "out of range"),
], ids=["zero", "26", "duplicates", "sixteen", "string", "bool"])
def test_validate_required_rejects(values, fragment):
    with pytest.raises(InvalidArgument, match=fragment):
        validate_required(values)


def test_free_pool():
    pool = free_pool((1, 2))
    assert pool == tuple(range(3, 26))
    assert len(free_pool(())) == UNIVERSE_SIZE
    assert free_pool(UNIVERSE) == ()


def test_required_validation_is_eager():
    with pytest.raises(InvalidArgument):
        combinations_with_required(range(1, 17))


@pytest.mark.parametrize("r", [10, 11, 12, 13, 14])
def test_games_are_valid_and_counted(r):
    required = _required(r)
    games = list(combinations_with_required(required))
    assert len(games) == binomial(UNIVERSE_SIZE - r, PICK_SIZE - r)
    for g in games:
        assert len(g) == PICK_SIZE
        assert len(set(g)) == PICK_SIZE
        assert all(1 <= v <= UNIVERSE_SIZE for v in g)
        assert set(required) <= set(g)
        assert list(g) == sorted(g)


@pytest.mark.parametrize("required", [(1, 2, 3, 4, 5, 6, 7, 8, 9, 10), (25, 3, 17, 9, 11, 12, 1, 2, 4, 20, 21)])
def test_free_parts_strictly_increase(required):
    req = validate_required(required)
    frees = [_free_part(g, req) for g in combinations_with_required(required)]
    assert all(a < b for a, b in zip(frees, frees[1:]))


def test_fifteen_required_gives_exactly_that_game():
    required = (2, 4, 6, 8, 10, 12, 14, 16, 18, 20, 22, 24, 1, 3, 5)
    assert list(combinations_with_required(required)) == [tuple(sorted(required))]


def test_fourteen_required_gives_eleven_games():
    games = list(combinations_with_required(_required(14)))
    assert len(games) == 11
    assert [g[-1] for g in games] == list(range(15, 26))


def test_first_games_with_one_and_two():
    gen = combinations_with_required((1, 2))
    first = next(gen)
    second = next(gen)
    assert first == tuple(range(1, 16))
    assert second == tuple(range(1, 15)) + (16,)


@pytest.mark.slow
@pytest.mark.parametrize("required,expected", [((1, 2), 1_144_066), ((), 3_268_760)], ids=["1,2", "none"])
def test_full_lazy_count(required, expected):
    assert sum(1 for _ in combinations_with_required(required)) == expected


# ---------- walk_with_required() ----------------------------------------------


def test_walk_matches_lazy_sequence():
    required = (3, 7, 1, 9, 11, 20, 25, 14, 2, 5, 6)
    seen: list[tuple[int, ...]] = []
    total = walk_with_required(required, on_combination=lambda buf: seen.append(tuple(sorted(buf))))
    assert total == len(seen) == binomial(14, 4)
    assert seen == list(combinations_with_required(required))


def test_walk_reuses_one_buffer():
    buffers = set()
    walk_with_required(_required(13), on_combination=lambda buf: buffers.add(id(buf)))
    assert len(buffers) == 1


def test_walk_step_callback():
    steps: list[int] = []
    total = walk_with_required(_required(12), steps.append)
    assert steps == list(range(1, total + 1))


def test_walk_with_fifteen_required():
    games: list[list[int]] = []
    assert walk_with_required(UNIVERSE[:15], on_combination=lambda b: games.append(list(b))) == 1
    assert games == [list(UNIVERSE[:15])]


@pytest.mark.slow
@pytest.mark.parametrize("required,expected", [((1, 2), 1_144_066), ((), 3_268_760)], ids=["1,2", "none"])
def test_walk_full_count(required, expected):
    assert walk_with_required(required) == expected


def test_walk_rejects_bad_required():
    with pytest.raises(InvalidArgument):
        walk_with_required([1, 2, 2])


# ---------- rank window -------------------------------------------------------


@pytest.mark.parametrize("start,count", [(0, 1), (1, 0), (-2, 3), (1, -1)])
def test_rank_window_rejects_bad_bounds(start, count):
    with pytest.raises(InvalidArgument):
        RankWindow(start, count)


def test_rank_window_end_and_expected():
    w = RankWindow(start=3, count=4)
    assert w.end == 6
    assert w.expected_printed(100) == 4
    assert w.expected_printed(5) == 3
    assert w.expected_printed(2) == 0


def test_no_window_numbers_everything():
    assert list(rank_window("abc")) == [(1, "a"), (2, "b"), (3, "c")]


def test_first_five_equal_unfiltered_prefix():
    required = _required(10)
    unfiltered = list(islice(combinations_with_required(required), 5))
    windowed = list(rank_window(combinations_with_required(required), RankWindow(1, 5)))
    assert [pos for pos, _ in windowed] == [1, 2, 3, 4, 5]
    assert [g for _, g in windowed] == unfiltered


def test_window_in_the_middle():
    items = list(range(100, 120))
    out = list(rank_window(iter(items), RankWindow(start=5, count=3)))
    assert out == [(5, 104), (6, 105), (7, 106)]


def test_window_past_the_end_is_empty():
    assert list(rank_window(combinations_with_required(_required(14)), RankWindow(12, 5))) == []


def test_window_overlapping_the_end_is_truncated():
    out = list(rank_window(combinations_with_required(_required(14)), RankWindow(9, 10)))
    assert [pos for pos, _ in out] == [9, 10, 11]


def test_window_still_generates_prefix_and_stops_after_end():
    steps: list[int] = []
    games = combinations_with_required(_required(10), steps.append)
    out = list(rank_window(games, RankWindow(start=100, count=2)))
    assert [pos for pos, _ in out] == [100, 101]
    # the prefix 1..99 was generated, and nothing past 101 was requested
    assert steps == list(range(1, 101))
