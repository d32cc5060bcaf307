"""Arithmetic expression engine.

This module provides:
- Lexer: Tokenizes expression strings
- Parser: Produces AST from tokens
- Evaluator: Evaluates AST to a float
- compute: tokenize, parse and evaluate in one call
"""

from calcforge.engine.errors import EngineError
from calcforge.engine.evaluator import (
    EvalError,
    EvalErrorKind,
    Evaluator,
    compute,
    evaluate,
)
from calcforge.engine.formatting import format_ast, format_result, render_error
from calcforge.engine.lexer import (
    Lexer,
    LexError,
    LexErrorKind,
    Token,
    TokenType,
    is_valid_input_char,
    tokenize,
)
from calcforge.engine.parser import (
    ASTNode,
    BinaryOp,
    Factorial,
    Negate,
    Number,
    ParseError,
    ParseErrorKind,
    Parser,
    Percent,
    parse,
)

__all__ = [
    "EngineError",
    "compute",
    # Lexer
    "Lexer",
    "LexError",
    "LexErrorKind",
    "Token",
    "TokenType",
    "is_valid_input_char",
    "tokenize",
    # Parser
    "ASTNode",
    "BinaryOp",
    "Factorial",
    "Negate",
    "Number",
    "ParseError",
    "ParseErrorKind",
    "Parser",
    "Percent",
    "parse",
    # Evaluator
    "EvalError",
    "EvalErrorKind",
    "Evaluator",
    "evaluate",
    # Formatting
    "format_ast",
    "format_result",
    "render_error",
]
