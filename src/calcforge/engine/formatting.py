"""Display helpers for results, errors and trees.

These turn engine output into the text a calculator display or terminal
shows: results without a spurious ".0", errors with a caret under the
offending character, and indented AST dumps.
"""

import unicodedata

from calcforge.config import DEFAULT_PRECISION
from calcforge.engine.errors import EngineError
from calcforge.engine.parser import ASTNode, BinaryOp, Factorial, Negate, Number, Percent

# Integral values below this are shown with every digit
_MAX_PLAIN_INTEGER = 1e15


def format_result(value: float, precision: int = DEFAULT_PRECISION) -> str:
    """Format a result for display.

    Examples:
        format_result(120.0)      # "120"
        format_result(0.1 + 0.2)  # "0.3"
        format_result(-0.0)       # "0"
    """
    if value == 0:
        return "0"
    if value.is_integer() and abs(value) < _MAX_PLAIN_INTEGER:
        return str(int(value))
    return f"{value:.{precision}g}"


def _display_width(text: str) -> int:
    """Terminal columns taken by text, counting East Asian wide glyphs as two."""
    return sum(2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1 for ch in text)


def render_error(source: str, error: EngineError) -> str:
    """Render an error message, with a caret line when it has a position.

    Tabs are expanded and wide glyphs count as two columns, so the caret
    lines up under the offending character in a terminal.

    Example:
        Unexpected character '#'
        2#3
         ^
    """
    if error.position is None:
        return error.message
    column = _display_width(source[:error.position].expandtabs())
    return f"{error.message}\n{source.expandtabs()}\n{' ' * column}^"


def format_ast(node: ASTNode) -> str:
    """Render an AST as an indented tree, one node per line."""
    lines: list[str] = []
    pending: list[tuple[ASTNode, int]] = [(node, 0)]

    while pending:
        current, depth = pending.pop()
        pad = "  " * depth

        if isinstance(current, Number):
            lines.append(f"{pad}Number {format_result(current.value)}")
        elif isinstance(current, BinaryOp):
            lines.append(f"{pad}BinaryOp {current.operator}")
            pending.append((current.right, depth + 1))
            pending.append((current.left, depth + 1))
        elif isinstance(current, (Negate, Percent, Factorial)):
            lines.append(f"{pad}{type(current).__name__}")
            pending.append((current.operand, depth + 1))
        else:
            raise TypeError(f"Unknown node type: {type(current).__name__}")

    return "\n".join(lines)
