"""Tests for the variable Environment."""

from __future__ import annotations

import pytest

from abacus.core.environment import Environment
from abacus.core.errors import UndefinedVariableError
from abacus.runner import run


class TestEnvironment:
    def test_starts_empty(self) -> None:
        env = Environment()
        assert len(env) == 0
        assert "x" not in env

    def test_assign_and_lookup(self) -> None:
        env = Environment()
        env.assign("x", 1.0)
        env.assign("x", 2.0)
        assert env.lookup("x") == 2.0
        assert list(env) == ["x"]

    def test_missing_name(self) -> None:
        with pytest.raises(UndefinedVariableError) as exc_info:
            Environment().lookup("ghost")
        assert exc_info.value.name == "ghost"

    def test_snapshot_is_a_copy(self) -> None:
        env = Environment()
        env.assign("a", 1.0)
        snap = env.snapshot()
        snap["a"] = 99.0
        assert env.lookup("a") == 1.0


class TestStrictSettings:
    def test_strict_run(self, strict_settings) -> None:
        assert run("a = 6; a / 3", strict_settings).result == 2.0
        assert run("a = 6; a / 0", strict_settings).error == "Runtime error: division by zero"
        assert run("(" * 17 + "1" + ")" * 17, strict_settings).error_kind == "syntax"
