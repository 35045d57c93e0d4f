# tests/conftest.py
from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from lotocomb.runtime import reset as reset_runtime  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path, monkeypatch):
    """Every test gets its own workspace and a fresh runtime."""
    ws = tmp_path / "workspace"
    monkeypatch.setenv("LOTOCOMB_HOME", str(ws))
    for var in ("LOTOCOMB_REQUIRED", "LOTOCOMB_STEP_INTERVAL", "LOTOCOMB_START", "LOTOCOMB_COUNT"):
        monkeypatch.delenv(var, raising=False)
    reset_runtime()
    yield ws
    reset_runtime()


class FakeClock:
    """Deterministic perf_counter replacement: each call advances by `tick`."""

    def __init__(self, start: float = 100.0, tick: float = 0.5):
        self.now = start
        self.tick = tick

    def __call__(self) -> float:
        value = self.now
        self.now += self.tick
        return value


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_memory():
    readings = iter(range(10, 10_000))
    return lambda: next(readings)
