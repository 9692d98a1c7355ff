"""
Abacus - a small arithmetic scripting language.

Tokenizer, recursive-descent parser, and tree-walking evaluator with
mutable variable bindings.
"""

from __future__ import annotations

from ._version import get_version
from .core import nodes
from .core.errors import AbacusError, ConfigError, EvalError, LexError, ParseError
from .runner import RunResult, run

__version__ = get_version()

__all__ = [
    "__version__",
    "nodes",
    "run",
    "RunResult",
    "AbacusError",
    "ConfigError",
    "EvalError",
    "LexError",
    "ParseError",
]
