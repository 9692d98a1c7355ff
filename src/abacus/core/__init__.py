"""
Abacus language core.

Tokenizer, parser, and evaluator for the Abacus arithmetic language.

Usage:
    from abacus.core import parse, evaluate

    program = parse("x = 5; y = 10; x + y * 2;")
    result = evaluate(program)
    # result == 25.0
"""

from abacus.core.config import Settings, load_settings
from abacus.core.environment import Environment
from abacus.core.evaluator import Evaluator, evaluate
from abacus.core.parser import Parser, parse
from abacus.core.tokenizer import Token, TokenKind, Tokenizer, render_tokens, tokenize

__all__ = [
    "Environment",
    "Evaluator",
    "Parser",
    "Settings",
    "Token",
    "TokenKind",
    "Tokenizer",
    "evaluate",
    "load_settings",
    "parse",
    "render_tokens",
    "tokenize",
]
