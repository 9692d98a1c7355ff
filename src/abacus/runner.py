"""
Single entry point for running Abacus source text.

``run()`` drives tokenizer, parser and evaluator and folds every language
error into a structured ``RunResult`` instead of raising.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from abacus.core.config import Settings
from abacus.core.errors import AbacusError
from abacus.core.evaluator import Evaluator
from abacus.core.parser import parse

logger = logging.getLogger(__name__)

ErrorKind = Literal["lex", "syntax", "runtime"]


class RunResult(BaseModel):
    """Outcome of running a program: a value or a descriptive error."""

    success: bool
    result: float | None = Field(default=None, description="Value of the last statement")
    error: str | None = Field(default=None, description="Human-readable failure message")
    error_kind: ErrorKind | None = Field(default=None, description="Stage that failed")
    variables: dict[str, float] = Field(
        default_factory=dict, description="Bindings left after a successful run"
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def ok(cls, value: float, variables: dict[str, float] | None = None) -> RunResult:
        return cls(success=True, result=value, variables=variables or {})

    @classmethod
    def failed(cls, error: AbacusError) -> RunResult:
        return cls(success=False, error=error.describe(), error_kind=error.kind)

    def to_dict(self) -> dict[str, Any]:
        """The wire shape: ``{success, result}`` or ``{success, error}``."""
        if self.success:
            return {"success": True, "result": self.result}
        return {"success": False, "error": self.error}


def run(source: str, settings: Settings | None = None) -> RunResult:
    """Tokenize, parse and evaluate ``source``.

    Each call evaluates against its own fresh environment, so repeated runs
    of the same source give identical results.

    Args:
        source: One or more statements separated by ';'.
        settings: Division policy and limits (default: ``Settings()``).

    Returns:
        RunResult holding the value of the last statement, or the error.
    """
    settings = settings or Settings()
    try:
        program = parse(source, settings)
        evaluator = Evaluator(settings)
        value = evaluator.evaluate(program)
    except AbacusError as e:
        logger.debug("Run failed (%s): %s", e.kind, e.describe())
        return RunResult.failed(e)
    return RunResult.ok(value, evaluator.environment.snapshot())
