"""
Recursive descent parser for the Abacus language.

Grammar (precedence low to high):
    program     → statement (";" statement)* ";"? EOF
    statement   → assignment | expr
    assignment  → IDENTIFIER "=" expr
    expr        → term (("+"|"-") term)*
    term        → factor (("*"|"/") factor)*
    factor      → NUMBER | IDENTIFIER | "(" expr ")"

An IDENTIFIER starts an assignment only when the token after it is "=";
the parser keeps a two-token lookahead buffer to decide this without
backtracking.
"""

from __future__ import annotations

import logging

from abacus.core.config import Settings
from abacus.core.errors import ParseError
from abacus.core.nodes import (
    Assignment,
    BinaryOp,
    Expr,
    Node,
    NumberLiteral,
    Operator,
    Program,
    VariableRef,
)
from abacus.core.tokenizer import Token, TokenKind, Tokenizer

logger = logging.getLogger(__name__)

_ADDITIVE: dict[TokenKind, Operator] = {
    TokenKind.PLUS: Operator.ADD,
    TokenKind.MINUS: Operator.SUB,
}

_MULTIPLICATIVE: dict[TokenKind, Operator] = {
    TokenKind.STAR: Operator.MUL,
    TokenKind.SLASH: Operator.DIV,
}

_FACTOR_START = "NUMBER, IDENTIFIER or LPAREN"


class Parser:
    """LL parser pulling tokens on demand from a Tokenizer."""

    def __init__(self, tokenizer: Tokenizer, max_depth: int = Settings.max_depth) -> None:
        self.tokenizer = tokenizer
        self.max_depth = max_depth
        self._depth = 0
        self._buffer: list[Token] = [tokenizer.next_token()]

    @property
    def current(self) -> Token:
        return self._buffer[0]

    def peek(self) -> Token:
        """Token after the current one, fetched lazily."""
        if len(self._buffer) < 2:
            self._buffer.append(self.tokenizer.next_token())
        return self._buffer[1]

    def advance(self) -> Token:
        tok = self._buffer.pop(0)
        if not self._buffer:
            self._buffer.append(self.tokenizer.next_token())
        return tok

    def advance_if(self, kind: TokenKind) -> Token:
        """Consume the current token if it has ``kind``, else fail."""
        tok = self.current
        if tok.kind != kind:
            raise ParseError(str(kind), str(tok.kind), tok.pos)
        return self.advance()

    # -- Grammar rules --

    def parse_program(self) -> Program:
        """statement (';' statement)* ';'? EOF"""
        statements: list[Node] = []
        if self.current.kind != TokenKind.END_OF_INPUT:
            statements.append(self.parse_statement())
            while self.current.kind == TokenKind.SEMICOLON:
                self.advance()
                if self.current.kind == TokenKind.END_OF_INPUT:
                    break
                statements.append(self.parse_statement())

        tok = self.current
        if tok.kind != TokenKind.END_OF_INPUT:
            raise ParseError("SEMICOLON or END_OF_INPUT", str(tok.kind), tok.pos)

        logger.debug("Parsed program with %d statement(s)", len(statements))
        return Program(statements=statements)

    def parse_statement(self) -> Node:
        """assignment | expr"""
        if self.current.kind == TokenKind.IDENTIFIER and self.peek().kind == TokenKind.ASSIGN:
            return self.parse_assignment()
        return self.parse_expr()

    def parse_assignment(self) -> Assignment:
        """IDENTIFIER '=' expr"""
        name_tok = self.advance_if(TokenKind.IDENTIFIER)
        self.advance_if(TokenKind.ASSIGN)
        value = self.parse_expr()
        return Assignment(name=name_tok.text, value=value)

    def parse_expr(self) -> Expr:
        """term (('+' | '-') term)*"""
        left = self.parse_term()
        while self.current.kind in _ADDITIVE:
            op = _ADDITIVE[self.advance().kind]
            right = self.parse_term()
            left = BinaryOp(op=op, left=left, right=right)
        return left

    def parse_term(self) -> Expr:
        """factor (('*' | '/') factor)*"""
        left = self.parse_factor()
        while self.current.kind in _MULTIPLICATIVE:
            op = _MULTIPLICATIVE[self.advance().kind]
            right = self.parse_factor()
            left = BinaryOp(op=op, left=left, right=right)
        return left

    def parse_factor(self) -> Expr:
        """NUMBER | IDENTIFIER | '(' expr ')'"""
        tok = self.current

        if tok.kind == TokenKind.NUMBER:
            self.advance()
            return NumberLiteral(value=tok.number)

        if tok.kind == TokenKind.IDENTIFIER:
            self.advance()
            return VariableRef(name=tok.text)

        if tok.kind == TokenKind.LPAREN:
            if self._depth >= self.max_depth:
                raise ParseError(
                    _FACTOR_START,
                    str(tok.kind),
                    tok.pos,
                    message=f"nesting too deep (limit {self.max_depth})",
                )
            self.advance()
            self._depth += 1
            try:
                expr = self.parse_expr()
            finally:
                self._depth -= 1
            self.advance_if(TokenKind.RPAREN)
            return expr

        raise ParseError(_FACTOR_START, str(tok.kind), tok.pos)


def parse(source: str, settings: Settings | None = None) -> Program:
    """Parse source text into a Program.

    Args:
        source: Source text (e.g., "x = 5; y = x * 2; y + 1;")
        settings: Parsing limits (default: ``Settings()``).

    Returns:
        Parsed program AST.

    Raises:
        LexError: If tokenization fails.
        ParseError: If the token sequence does not match the grammar.
    """
    settings = settings or Settings()
    parser = Parser(Tokenizer(source), max_depth=settings.max_depth)
    return parser.parse_program()
