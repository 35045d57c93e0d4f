# src/lotocomb/utility.py
from __future__ import annotations

import re


class UserInputError(Exception):
    pass


class InvalidArgument(UserInputError, ValueError):
    """Bad required set, rank window, step interval or CLI/env value."""


class ArithmeticPrecondition(ValueError):
    """Binomial arguments outside 0 <= k <= n."""


_SPLIT_RE = re.compile(r"[,;\s]+")


def split_ints(raw: str | None, *, what: str = "value") -> list[int]:
    """
    Parse integers separated by commas, semicolons and/or whitespace.
    Blank input gives an empty list; anything non-numeric raises InvalidArgument.
    """
    if raw is None:
        return []
    out: list[int] = []
    for tok in _SPLIT_RE.split(raw.strip()):
        if not tok:
            continue
        try:
            out.append(int(tok))
        except ValueError:
            raise InvalidArgument(f"Invalid input: {what} {tok!r} is not an integer.") from None
    return out


def parse_positive_int(raw: str | int | None, *, what: str, allow_none: bool = True) -> int | None:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        if allow_none:
            return None
        raise InvalidArgument(f"Invalid input: {what} is required.")
    try:
        val = int(raw)
    except (TypeError, ValueError):
        raise InvalidArgument(f"Invalid input: {what} {raw!r} is not an integer.") from None
    if val <= 0:
        raise InvalidArgument(f"Invalid input: {what} must be positive (got {val}).")
    return val


def typename(v: object) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    out: dict[str, object] = {}
    for k, v in (d or {}).items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out
