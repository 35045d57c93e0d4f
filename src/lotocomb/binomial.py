# src/lotocomb/binomial.py
from __future__ import annotations

from lotocomb.utility import ArithmeticPrecondition


def binomial(n: int, k: int) -> int:
    """
    Exact C(n, k) by the multiplicative formula.

    Each partial product res * (n - k + i) is divisible by i, since after step i
    res equals C(n - k + i, i); integer division therefore never truncates.
    """
    if n < 0 or k < 0 or k > n:
        raise ArithmeticPrecondition(f"binomial({n}, {k}) needs 0 <= k <= n")
    k = min(k, n - k)
    res = 1
    for i in range(1, k + 1):
        res = res * (n - k + i) // i
    return res
