"""
Tree-walking evaluator for the Abacus language.

Evaluates a parsed Program against a fresh Environment. Pure evaluation: no
I/O and no use of Python's eval(). Node visits are driven by an explicit
work stack, so arbitrarily long operator chains never hit the interpreter's
recursion limit.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from abacus.core.config import Settings
from abacus.core.environment import Environment
from abacus.core.errors import (
    DivisionByZeroError,
    EmptyProgramError,
    EvalError,
    StepLimitExceededError,
)
from abacus.core.nodes import (
    Assignment,
    BinaryOp,
    Node,
    NumberLiteral,
    Operator,
    Program,
    VariableRef,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Apply:
    """Pending operator application; operands are on the value stack."""

    op: Operator


@dataclass(frozen=True, slots=True)
class _Store:
    """Pending assignment; the value is on the value stack."""

    name: str


class Evaluator:
    """Evaluates programs and nodes against an Environment."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self.environment = Environment()
        self._steps = 0

    def evaluate(self, program: Program) -> float:
        """Evaluate a program with a fresh environment.

        Returns:
            The value of the last statement.

        Raises:
            EmptyProgramError: If the program has no statements.
            EvalError: If any statement fails.
        """
        self.environment = Environment()
        result = self.evaluate_node(program, self.environment)
        logger.debug(
            "Evaluated %d statement(s) in %d step(s); %d variable(s) bound",
            len(program.statements),
            self._steps,
            len(self.environment),
        )
        return result

    def evaluate_node(self, node: Node | Program, env: Environment) -> float:
        if isinstance(node, Program):
            if not node.statements:
                raise EmptyProgramError()
            self._steps = 0
            result = 0.0
            for stmt in node.statements:
                result = self._interpret(stmt, env)
            return result
        return self._interpret(node, env)

    def _interpret(self, root: Node, env: Environment) -> float:
        """Evaluate one statement, left operand before right."""
        values: list[float] = []
        work: list[Node | _Apply | _Store] = [root]

        while work:
            item = work.pop()

            if isinstance(item, _Apply):
                right = values.pop()
                left = values.pop()
                values.append(self._apply(item.op, left, right))
                continue

            if isinstance(item, _Store):
                env.assign(item.name, values[-1])
                continue

            self._step()

            if isinstance(item, NumberLiteral):
                values.append(item.value)
            elif isinstance(item, VariableRef):
                values.append(env.lookup(item.name))
            elif isinstance(item, BinaryOp):
                work.append(_Apply(item.op))
                work.append(item.right)
                work.append(item.left)
            elif isinstance(item, Assignment):
                work.append(_Store(item.name))
                work.append(item.value)
            else:
                raise EvalError(f"Unknown node type: {type(item).__name__}")

        return values.pop()

    def _step(self) -> None:
        self._steps += 1
        limit = self.settings.max_steps
        if limit is not None and self._steps > limit:
            raise StepLimitExceededError(limit)

    def _apply(self, op: Operator, left: float, right: float) -> float:
        if op == Operator.ADD:
            return left + right
        if op == Operator.SUB:
            return left - right
        if op == Operator.MUL:
            return left * right
        if op == Operator.DIV:
            return self._divide(left, right)
        raise EvalError(f"Unknown operator: {op}")

    def _divide(self, left: float, right: float) -> float:
        if right != 0:
            return left / right
        if self.settings.division == "error":
            raise DivisionByZeroError()
        # IEEE-754: 0/0 and nan/0 are nan, otherwise infinity signed by both operands
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


def evaluate(program: Program, settings: Settings | None = None) -> float:
    """Evaluate a program with a fresh evaluator and environment."""
    return Evaluator(settings).evaluate(program)
