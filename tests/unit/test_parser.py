"""Tests for the Abacus parser: precedence, statements, errors."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from abacus.core.config import Settings
from abacus.core.errors import LexError, ParseError
from abacus.core.nodes import (
    Assignment,
    BinaryOp,
    NumberLiteral,
    Operator,
    Program,
    VariableRef,
    render,
)
from abacus.core.parser import Parser, parse
from abacus.core.tokenizer import TokenKind, Tokenizer


def _single(source: str):
    program = parse(source)
    assert len(program.statements) == 1
    return program.statements[0]


class TestParserPrimaries:
    def test_number(self) -> None:
        node = _single("42")
        assert node == NumberLiteral(value=42.0)

    def test_variable(self) -> None:
        node = _single("total")
        assert node == VariableRef(name="total")

    def test_parenthesised(self) -> None:
        node = _single("((7))")
        assert node == NumberLiteral(value=7.0)


class TestParserArithmetic:
    """Parser handles arithmetic with correct precedence."""

    def test_mul_before_add(self) -> None:
        # 2 + 3 * 4 should be 2 + (3 * 4)
        node = _single("2 + 3 * 4")
        assert isinstance(node, BinaryOp)
        assert node.op == Operator.ADD
        assert isinstance(node.right, BinaryOp)
        assert node.right.op == Operator.MUL

    def test_parentheses_override_precedence(self) -> None:
        node = _single("(2 + 3) * 4")
        assert isinstance(node, BinaryOp)
        assert node.op == Operator.MUL
        assert isinstance(node.left, BinaryOp)
        assert node.left.op == Operator.ADD

    def test_subtraction_is_left_associative(self) -> None:
        # a - b - c is (a - b) - c
        node = _single("a - b - c")
        assert str(node) == "((a - b) - c)"

    def test_division_is_left_associative(self) -> None:
        node = _single("8 / 4 / 2")
        assert isinstance(node, BinaryOp)
        assert node.op == Operator.DIV
        assert node.left == BinaryOp(
            op=Operator.DIV, left=NumberLiteral(value=8.0), right=NumberLiteral(value=4.0)
        )

    def test_mixed_chain(self) -> None:
        assert str(_single("1 + 2 * 3 - 4 / 5")) == "((1 + (2 * 3)) - (4 / 5))"


class TestParserStatements:
    def test_assignment(self) -> None:
        node = _single("x = 5")
        assert isinstance(node, Assignment)
        assert node.name == "x"
        assert node.value == NumberLiteral(value=5.0)

    def test_identifier_expression_is_not_assignment(self) -> None:
        node = _single("x + 1")
        assert isinstance(node, BinaryOp)
        assert node.left == VariableRef(name="x")

    def test_assignment_with_expression(self) -> None:
        node = _single("a = a + 1")
        assert isinstance(node, Assignment)
        assert str(node.value) == "(a + 1)"

    def test_statements_in_source_order(self) -> None:
        program = parse("x = 5; y = 10; x + y * 2;")
        assert [type(s) for s in program.statements] == [Assignment, Assignment, BinaryOp]
        assert str(program) == "x = 5; y = 10; (x + (y * 2));"

    def test_trailing_semicolon_optional(self) -> None:
        assert parse("1; 2") == parse("1; 2;")

    def test_empty_source(self) -> None:
        assert parse("") == Program(statements=[])
        assert parse("   \n ") == Program(statements=[])

    def test_whitespace_between_identifier_and_assign(self) -> None:
        node = _single("x    =\n 3")
        assert isinstance(node, Assignment)


class TestParserErrors:
    def test_missing_operand(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("2 + ;")
        err = exc_info.value
        assert err.actual == "SEMICOLON"
        assert err.expected == "NUMBER, IDENTIFIER or LPAREN"
        assert err.pos == 4

    def test_unclosed_paren(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("(1 + 2")
        assert exc_info.value.expected == "RPAREN"
        assert exc_info.value.actual == "END_OF_INPUT"

    def test_missing_separator(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("1 2")
        assert exc_info.value.actual == "NUMBER"
        assert exc_info.value.pos == 2

    def test_lone_semicolon(self) -> None:
        with pytest.raises(ParseError):
            parse(";")

    def test_double_semicolon(self) -> None:
        with pytest.raises(ParseError):
            parse("1;;")

    def test_assign_to_number(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("5 = x")
        assert exc_info.value.actual == "ASSIGN"

    def test_chained_assignment_rejected(self) -> None:
        with pytest.raises(ParseError):
            parse("a = b = 1")

    def test_lex_error_propagates(self) -> None:
        with pytest.raises(LexError):
            parse("2 $ 3;")

    def test_describe(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("2 + ;")
        assert exc_info.value.describe() == (
            "Syntax error at position 4: expected NUMBER, IDENTIFIER or LPAREN, got SEMICOLON"
        )


class TestNestingLimit:
    def test_within_limit(self) -> None:
        source = "(" * 10 + "1" + ")" * 10
        assert parse(source, Settings(max_depth=10)) == Program(
            statements=[NumberLiteral(value=1.0)]
        )

    def test_too_deep(self) -> None:
        source = "(" * 11 + "1" + ")" * 11
        with pytest.raises(ParseError, match="nesting too deep"):
            parse(source, Settings(max_depth=10))

    def test_default_limit_guards_recursion(self) -> None:
        source = "(" * 100_000 + "1" + ")" * 100_000
        with pytest.raises(ParseError, match="nesting too deep"):
            parse(source)

    def test_long_flat_chain(self) -> None:
        program = parse(" + ".join(["1"] * 5000))
        assert len(program.statements) == 1


class TestParserLookahead:
    def test_advance_if_mismatch(self) -> None:
        parser = Parser(Tokenizer("x"))
        with pytest.raises(ParseError) as exc_info:
            parser.advance_if(TokenKind.NUMBER)
        assert exc_info.value.expected == "NUMBER"
        assert exc_info.value.actual == "IDENTIFIER"

    def test_peek_does_not_consume(self) -> None:
        parser = Parser(Tokenizer("x = 1"))
        assert parser.peek().kind == TokenKind.ASSIGN
        assert parser.current.kind == TokenKind.IDENTIFIER
        parser.advance()
        assert parser.current.kind == TokenKind.ASSIGN


class TestNodes:
    def test_nodes_are_frozen(self) -> None:
        node = NumberLiteral(value=1.0)
        with pytest.raises(ValidationError):
            node.value = 2.0  # type: ignore[misc]

    def test_program_json_round_trip(self) -> None:
        program = parse("x = 1; x * (2 + 3);")
        assert Program.model_validate_json(program.model_dump_json()) == program

    def test_canonical_text(self) -> None:
        assert str(parse("x=1+2*y;z=x/(3-1)")) == "x = (1 + (2 * y)); z = (x / (3 - 1));"

    def test_canonical_text_reparses(self) -> None:
        program = parse("a = 7; b = a - 2 - 1; (a + b) * 3")
        assert parse(str(program)) == program

    def test_render_long_chain(self) -> None:
        program = parse(" + ".join(["1"] * 5000))
        text = render(program.statements[0])
        assert text.startswith("(" * 4999 + "1 + 1)")
        assert text.endswith(" + 1)")
        assert text.count("+") == 4999
