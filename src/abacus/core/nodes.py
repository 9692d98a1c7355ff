"""
AST node types for the Abacus language.

A closed set of immutable node models. Every node owns its children
exclusively; the tree has no back-references.

Supports:
- Number literals: 42
- Variable references: total
- Binary arithmetic: +, -, *, /
- Assignments: x = 1 + 2
- Programs: a sequence of statements separated by ';'
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class Operator(StrEnum):
    """Binary arithmetic operators."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


class NumberLiteral(BaseModel):
    """A numeric literal."""

    value: float = Field(description="The literal value")

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __str__(self) -> str:
        return _format_number(self.value)


class VariableRef(BaseModel):
    """Read of a variable by name."""

    name: str = Field(description="Variable name")

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __str__(self) -> str:
        return self.name


class BinaryOp(BaseModel):
    """Binary operation: left op right."""

    op: Operator
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __str__(self) -> str:
        return render(self)


class Assignment(BaseModel):
    """Assignment: name = value. Evaluates to the assigned value."""

    name: str = Field(description="Target variable name")
    value: Expr = Field(description="Right-hand expression")

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __str__(self) -> str:
        return render(self)


class Program(BaseModel):
    """
    Root of a parsed source text.

    Statements run left to right against one shared environment; the value
    of the program is the value of its last statement.
    """

    statements: list[Node] = Field(default_factory=list, description="Statements in source order")

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __str__(self) -> str:
        if not self.statements:
            return ""
        return "; ".join(render(stmt) for stmt in self.statements) + ";"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = NumberLiteral | VariableRef | BinaryOp
Node = NumberLiteral | VariableRef | BinaryOp | Assignment

# Rebuild models for recursive forward references
BinaryOp.model_rebuild()
Assignment.model_rebuild()
Program.model_rebuild()


def render(node: Node) -> str:
    """Canonical source text for a node, fully parenthesized.

    Walks the tree with an explicit work stack, so operator chains of any
    length render without recursion.
    """
    parts: list[str] = []
    work: list[Node | str] = [node]

    while work:
        item = work.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, NumberLiteral):
            parts.append(_format_number(item.value))
        elif isinstance(item, VariableRef):
            parts.append(item.name)
        elif isinstance(item, BinaryOp):
            work.extend((")", item.right, f" {item.op.value} ", item.left, "("))
        elif isinstance(item, Assignment):
            work.extend((item.value, f"{item.name} = "))
        else:
            raise TypeError(f"Unknown node type: {type(item).__name__}")

    return "".join(parts)
