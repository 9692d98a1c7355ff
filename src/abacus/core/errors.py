"""
Error types for Abacus tokenizing, parsing, and evaluation.
"""

from __future__ import annotations


class AbacusError(Exception):
    """Base exception for all Abacus errors."""

    kind = "error"

    def __init__(self, message: str, pos: int | None = None):
        self.message = message
        self.pos = pos
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with position if available."""
        if self.pos is not None:
            return f"{self.message} (at position {self.pos})"
        return self.message

    def describe(self) -> str:
        """Human-readable one-line description naming the failing stage."""
        label = self.kind.capitalize()
        if self.pos is not None:
            return f"{label} error at position {self.pos}: {self.message}"
        return f"{label} error: {self.message}"


class LexError(AbacusError):
    """
    Raised when a source character does not start any valid token.

    Examples:
    - ``2 $ 3``
    - ``x = 1.5`` (fractional literals are not part of the language)
    - a digit run too long to hold as a finite number
    """

    kind = "lex"

    def __init__(self, char: str, pos: int, message: str | None = None):
        self.char = char
        super().__init__(message or f"unexpected character {char!r}", pos)


class ParseError(AbacusError):
    """
    Raised when a token sequence does not match the grammar.

    Carries the expected and actual token kinds and the source position of
    the offending token.
    """

    kind = "syntax"

    def __init__(self, expected: str, actual: str, pos: int, message: str | None = None):
        self.expected = expected
        self.actual = actual
        super().__init__(message or f"expected {expected}, got {actual}", pos)


class EvalError(AbacusError):
    """Base class for evaluation-time faults."""

    kind = "runtime"


class UndefinedVariableError(EvalError):
    """Raised when a variable is read before it was ever assigned."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"undefined variable {name!r}")


class DivisionByZeroError(EvalError):
    """Raised on ``x / 0`` when the division policy is ``"error"``."""

    def __init__(self) -> None:
        super().__init__("division by zero")


class EmptyProgramError(EvalError):
    """Raised when a program without statements is evaluated."""

    def __init__(self) -> None:
        super().__init__("program has no statements")


class StepLimitExceededError(EvalError):
    """Raised when evaluation visits more nodes than the configured budget."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"step limit of {limit} exceeded")


class ConfigError(AbacusError):
    """
    Raised when settings cannot be loaded or hold invalid values.

    Examples:
    - Unknown key in ``[tool.abacus]``
    - ``division = "round"``
    - ``max_depth = 0``
    """

    kind = "config"
