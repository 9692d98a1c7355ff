"""Shared pytest fixtures for Abacus tests."""

from __future__ import annotations

import pytest

from abacus.core.config import Settings


@pytest.fixture(autouse=True)
def _clear_abacus_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ABACUS_* variables from the outer shell out of the tests."""
    for name in ("ABACUS_DIVISION", "ABACUS_MAX_DEPTH", "ABACUS_MAX_STEPS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def strict_settings() -> Settings:
    """Settings that fail on division by zero and cap evaluation work."""
    return Settings(division="error", max_depth=16, max_steps=1000)
