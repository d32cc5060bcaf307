"""Parser for calculator expressions.

Converts a list of tokens into an Abstract Syntax Tree (AST).
Uses recursive descent parsing with one method per precedence level.

Operator Precedence (lowest to highest):
1. + -
2. * /
3. - (unary)
4. ! % (postfix)
5. () grouping
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from calcforge.engine.errors import EngineError
from calcforge.engine.lexer import Token, TokenType, tokenize


# -----------------------------------------------------------------------------
# AST Node Types
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ASTNode:
    """Base class for AST nodes."""
    pass


@dataclass(frozen=True)
class Number(ASTNode):
    """A numeric literal."""
    value: float


@dataclass(frozen=True)
class Negate(ASTNode):
    """Prefix negation (e.g., -x)."""
    operand: ASTNode


@dataclass(frozen=True)
class BinaryOp(ASTNode):
    """Binary arithmetic operation (e.g., a + b, x / y)."""
    operator: str
    left: ASTNode
    right: ASTNode


@dataclass(frozen=True)
class Percent(ASTNode):
    """Postfix percent (e.g., 50%)."""
    operand: ASTNode


@dataclass(frozen=True)
class Factorial(ASTNode):
    """Postfix factorial (e.g., 5!)."""
    operand: ASTNode


# -----------------------------------------------------------------------------
# Parser
# -----------------------------------------------------------------------------


class ParseErrorKind(Enum):
    EMPTY_EXPRESSION = "empty_expression"
    UNEXPECTED_TOKEN = "unexpected_token"
    UNMATCHED_PARENTHESIS = "unmatched_parenthesis"
    TRAILING_TOKENS = "trailing_tokens"


class ParseError(EngineError):
    """Error during parsing.

    Attributes:
        kind: What went wrong
        token: The offending token
        token_index: Index of the offending token in the token list
    """

    def __init__(self, kind: ParseErrorKind, message: str, token: Token, token_index: int):
        self.kind = kind
        self.token = token
        self.token_index = token_index
        super().__init__(message, token.position)


_BINARY_OPERATORS = {
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.MULTIPLY: "*",
    TokenType.DIVIDE: "/",
}


class Parser:
    """Recursive descent parser for calculator expressions.

    Usage:
        parser = Parser(tokenize("2 + 3 * 4"))
        ast = parser.parse()
    """

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        self.position = 0

    def parse(self) -> ASTNode:
        """Parse the whole token list and return the AST root."""
        if self._is_at_end():
            raise ParseError(
                ParseErrorKind.EMPTY_EXPRESSION, "Empty expression", self._current(), 0
            )

        try:
            ast = self._parse_additive()
        except RecursionError:
            raise ParseError(
                ParseErrorKind.UNEXPECTED_TOKEN,
                "Expression is nested too deeply",
                self._current(),
                self.position,
            ) from None

        if not self._is_at_end():
            token = self._current()
            if token.type == TokenType.RPAREN:
                raise ParseError(
                    ParseErrorKind.UNMATCHED_PARENTHESIS,
                    "Unmatched ')'",
                    token,
                    self.position,
                )
            raise ParseError(
                ParseErrorKind.TRAILING_TOKENS,
                f"Unexpected token '{token.value}' after expression",
                token,
                self.position,
            )

        return ast

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _current(self) -> Token:
        """Get current token, synthesizing EOF past the end of the list."""
        if self.position >= len(self.tokens):
            end = self.tokens[-1].position + 1 if self.tokens else 0
            return Token(TokenType.EOF, None, end)
        return self.tokens[self.position]

    def _is_at_end(self) -> bool:
        """Check if we've consumed all tokens."""
        return self._current().type == TokenType.EOF

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        self.position += 1
        return token

    def _match(self, *types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self._current().type in types

    # -------------------------------------------------------------------------
    # Parsing methods (in order of precedence, lowest to highest)
    # -------------------------------------------------------------------------

    def _parse_additive(self) -> ASTNode:
        """Parse additive expression (+, -)."""
        left = self._parse_multiplicative()

        while self._match(TokenType.PLUS, TokenType.MINUS):
            op = _BINARY_OPERATORS[self._advance().type]
            right = self._parse_multiplicative()
            left = BinaryOp(op, left, right)

        return left

    def _parse_multiplicative(self) -> ASTNode:
        """Parse multiplicative expression (*, /)."""
        left = self._parse_unary()

        while self._match(TokenType.MULTIPLY, TokenType.DIVIDE):
            op = _BINARY_OPERATORS[self._advance().type]
            right = self._parse_unary()
            left = BinaryOp(op, left, right)

        return left

    def _parse_unary(self) -> ASTNode:
        """Parse unary minus. Postfix operators bind tighter: -5! is -(5!)."""
        if self._match(TokenType.MINUS):
            self._advance()
            return Negate(self._parse_unary())

        return self._parse_postfix()

    def _parse_postfix(self) -> ASTNode:
        """Parse postfix expressions (factorial, percent)."""
        expr = self._parse_primary()

        while True:
            if self._match(TokenType.FACTORIAL):
                self._advance()
                expr = Factorial(expr)
            elif self._match(TokenType.PERCENT):
                self._advance()
                expr = Percent(expr)
            else:
                break

        return expr

    def _parse_primary(self) -> ASTNode:
        """Parse primary expression (number literal or grouped expression)."""
        token = self._current()

        if token.type == TokenType.NUMBER:
            self._advance()
            return Number(token.value)

        if token.type == TokenType.LPAREN:
            open_index = self.position
            self._advance()
            expr = self._parse_additive()

            if self._match(TokenType.RPAREN):
                self._advance()
                return expr
            if self._is_at_end():
                raise ParseError(
                    ParseErrorKind.UNMATCHED_PARENTHESIS,
                    "Unmatched '('",
                    token,
                    open_index,
                )
            raise ParseError(
                ParseErrorKind.UNEXPECTED_TOKEN,
                f"Expected ')' but found '{self._current().value}'",
                self._current(),
                self.position,
            )

        if token.type == TokenType.EOF:
            raise ParseError(
                ParseErrorKind.UNEXPECTED_TOKEN,
                "Unexpected end of expression",
                token,
                self.position,
            )

        raise ParseError(
            ParseErrorKind.UNEXPECTED_TOKEN,
            f"Unexpected token '{token.value}'",
            token,
            self.position,
        )


def parse(tokens: Sequence[Token] | str) -> ASTNode:
    """Convenience function to parse tokens into an AST.

    Args:
        tokens: Tokens produced by tokenize(), or an expression string
            which is tokenized first

    Returns:
        The AST root node
    """
    if isinstance(tokens, str):
        tokens = tokenize(tokens)
    return Parser(tokens).parse()
