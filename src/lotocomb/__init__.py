from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("lotocomb")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .binomial import binomial
from .generator import (
    PICK_SIZE,
    UNIVERSE_SIZE,
    RankWindow,
    combinations,
    combinations_with_required,
    free_pool,
    rank_window,
    validate_required,
    walk_with_required,
)
from .run import RunConfig, RunReport, run
from .sampler import Sampler
from .utility import ArithmeticPrecondition, InvalidArgument, UserInputError

__all__ = [
    "PICK_SIZE",
    "UNIVERSE_SIZE",
    "ArithmeticPrecondition",
    "InvalidArgument",
    "RankWindow",
    "RunConfig",
    "RunReport",
    "Sampler",
    "UserInputError",
    "__version__",
    "binomial",
    "combinations",
    "combinations_with_required",
    "free_pool",
    "rank_window",
    "run",
    "validate_required",
    "walk_with_required"
]
