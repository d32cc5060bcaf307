"""Evaluator for calculator expressions.

Walks the AST and computes a finite float. Every failure is raised as an
EvalError; partial results are never returned.
"""

import logging
import math
from enum import Enum

from calcforge.config import EngineConfig, PERCENT_MODE_CALCULATOR
from calcforge.engine.errors import EngineError
from calcforge.engine.lexer import tokenize
from calcforge.engine.parser import (
    ASTNode,
    BinaryOp,
    Factorial,
    Negate,
    Number,
    Percent,
    parse,
)

logger = logging.getLogger(__name__)

# Largest n for which n! is representable as a float
MAX_FACTORIAL = 170


class EvalErrorKind(Enum):
    DIVISION_BY_ZERO = "division_by_zero"
    FACTORIAL_DOMAIN = "factorial_domain"
    OVERFLOW = "overflow"


class EvalError(EngineError):
    """Error during expression evaluation."""

    def __init__(self, kind: EvalErrorKind, message: str):
        self.kind = kind
        super().__init__(message)


class Evaluator:
    """Evaluates an expression AST.

    The tree is walked with an explicit stack rather than recursion, so
    long flat chains such as 1+1+...+1 or 3!!!...! evaluate at any length.

    Usage:
        evaluator = Evaluator(EngineConfig(percent_mode="plain"))
        result = evaluator.evaluate(ast)
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()

    def evaluate(self, node: ASTNode) -> float:
        """Evaluate an AST and return the result."""
        values: list[float] = []
        # (node, top_level, operand count); a count of None means "not yet visited"
        pending: list[tuple[ASTNode, bool, int | None]] = [(node, True, None)]

        while pending:
            current, top_level, arity = pending.pop()

            if arity is None:
                children = self._children(current, top_level)
                pending.append((current, top_level, len(children)))
                for child, child_top_level in reversed(children):
                    pending.append((child, child_top_level, None))
                continue

            operands = values[len(values) - arity:]
            del values[len(values) - arity:]
            method = getattr(self, f"_eval_{type(current).__name__.lower()}")
            values.append(method(current, top_level, *operands))

        return values.pop()

    def _children(self, node: ASTNode, top_level: bool) -> list[tuple[ASTNode, bool]]:
        """Return the nodes whose values `node` needs, each with its top-level flag.

        Only the root and the operands of top-level + and - are top-level.
        """
        if isinstance(node, Number):
            return []
        if isinstance(node, BinaryOp):
            if node.operator not in ("+", "-"):
                return [(node.left, False), (node.right, False)]
            if self._is_percent_of_left(node, top_level):
                return [(node.left, top_level), (node.right.operand, False)]
            return [(node.left, top_level), (node.right, top_level)]
        if isinstance(node, (Negate, Percent, Factorial)):
            return [(node.operand, False)]

        raise TypeError(f"Unknown node type: {type(node).__name__}")

    def _is_percent_of_left(self, node: BinaryOp, top_level: bool) -> bool:
        """True when 200+10% should mean 200 plus 10% of 200."""
        return (
            top_level
            and node.operator in ("+", "-")
            and isinstance(node.right, Percent)
            and self.config.percent_mode == PERCENT_MODE_CALCULATOR
        )

    # -------------------------------------------------------------------------
    # Node type evaluators, called with the values of their children
    # -------------------------------------------------------------------------

    def _eval_number(self, node: Number, top_level: bool) -> float:
        return node.value

    def _eval_negate(self, node: Negate, top_level: bool, operand: float) -> float:
        return -operand

    def _eval_binaryop(self, node: BinaryOp, top_level: bool, left: float, right: float) -> float:
        """Evaluate a binary operation.

        For a top-level 200+10% in calculator percent mode, `right` is the
        rate (10) and is turned into that percentage of the left operand.
        """
        op = node.operator

        if self._is_percent_of_left(node, top_level):
            right = left * right / 100

        if op == "+":
            result = left + right
        elif op == "-":
            result = left - right
        elif op == "*":
            result = left * right
        elif op == "/":
            if right == 0:
                raise EvalError(EvalErrorKind.DIVISION_BY_ZERO, "Division by zero")
            result = left / right
        else:
            raise ValueError(f"Unknown operator: {op}")

        return self._check_finite(result)

    def _eval_percent(self, node: Percent, top_level: bool, operand: float) -> float:
        return operand / 100

    def _eval_factorial(self, node: Factorial, top_level: bool, x: float) -> float:
        """Evaluate factorial, extended to non-integers as gamma(x + 1)."""
        if x.is_integer():
            if x < 0:
                raise EvalError(
                    EvalErrorKind.FACTORIAL_DOMAIN,
                    f"Factorial is undefined for negative integer {int(x)}",
                )
            if x > MAX_FACTORIAL:
                raise EvalError(EvalErrorKind.OVERFLOW, f"Factorial of {int(x)} is too large")
            return float(math.factorial(int(x)))

        try:
            result = math.gamma(x + 1)
        except OverflowError:
            raise EvalError(EvalErrorKind.OVERFLOW, f"Factorial of {x} is too large") from None
        except ValueError:
            raise EvalError(
                EvalErrorKind.FACTORIAL_DOMAIN, f"Factorial is undefined for {x}"
            ) from None

        return self._check_finite(result)

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _check_finite(self, value: float) -> float:
        if math.isinf(value) or math.isnan(value):
            raise EvalError(EvalErrorKind.OVERFLOW, "Result is too large")
        return value


# -----------------------------------------------------------------------------
# Convenience functions
# -----------------------------------------------------------------------------


def evaluate(node: ASTNode, config: EngineConfig | None = None) -> float:
    """Evaluate a parsed expression."""
    return Evaluator(config).evaluate(node)


def compute(expression: str, config: EngineConfig | None = None) -> float:
    """Evaluate an expression string.

    This is the main entry point: tokenize, parse and evaluate in one call.

    Args:
        expression: The expression string to evaluate
        config: Engine options; defaults to EngineConfig()

    Returns:
        The finite result

    Raises:
        LexError, ParseError or EvalError (all EngineError subclasses)

    Example:
        compute("200 + 10%")
        # 220.0
    """
    tokens = tokenize(expression)
    logger.debug("Tokenized %r into %d token(s)", expression, len(tokens))

    ast = parse(tokens)
    logger.debug("Parsed %r into a %s tree", expression, type(ast).__name__)

    result = Evaluator(config).evaluate(ast)
    logger.debug("Evaluated %r = %r", expression, result)
    return result
