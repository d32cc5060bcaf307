"""Lexer/tokenizer for calculator expressions.

Converts expression strings into a flat list of tokens for the parser.

Token types:
- Literals: NUMBER
- Operators: PLUS, MINUS, MULTIPLY, DIVIDE, PERCENT, FACTORIAL
- Punctuation: LPAREN, RPAREN
- EOF, always the last token
"""

import math
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from calcforge.engine.errors import EngineError


class TokenType(Enum):
    """Types of tokens in a calculator expression."""

    # Literals
    NUMBER = auto()

    # Arithmetic operators
    PLUS = auto()        # +
    MINUS = auto()       # - or −
    MULTIPLY = auto()    # * or ×
    DIVIDE = auto()      # / or ÷
    PERCENT = auto()     # %
    FACTORIAL = auto()   # !

    # Punctuation
    LPAREN = auto()      # (
    RPAREN = auto()      # )

    # End of input
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A single token from the lexer.

    Attributes:
        type: The token type
        value: The parsed float for NUMBER, the source character for
            operators and punctuation, None for EOF
        position: Character offset of the token in the source string
    """

    type: TokenType
    value: str | float | None
    position: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, pos={self.position})"


class LexErrorKind(Enum):
    INVALID_CHARACTER = "invalid_character"
    MALFORMED_NUMBER = "malformed_number"


class LexError(EngineError):
    """Error during lexical analysis."""

    def __init__(self, kind: LexErrorKind, message: str, position: int, text: str):
        self.kind = kind
        self.text = text
        super().__init__(message, position)


# Token patterns, tried in order
TOKEN_PATTERNS = [
    # Whitespace (skip)
    (r"\s+", None),

    # Operators, including the display glyphs used on calculator keypads
    (r"\+", TokenType.PLUS),
    (r"[-−]", TokenType.MINUS),
    (r"[*×]", TokenType.MULTIPLY),
    (r"[/÷]", TokenType.DIVIDE),
    (r"%", TokenType.PERCENT),
    (r"!", TokenType.FACTORIAL),

    # Punctuation
    (r"\(", TokenType.LPAREN),
    (r"\)", TokenType.RPAREN),

    # Numbers. "1.2.3" matches as one literal and is rejected by _read_number.
    (r"[0-9.]+", TokenType.NUMBER),
]

_COMPILED_PATTERNS = [
    (re.compile(pattern), token_type) for pattern, token_type in TOKEN_PATTERNS
]

# Characters an input field may accept while the user types
VALID_INPUT_CHARACTERS = frozenset("0123456789.+-*/%!() −×÷")


def is_valid_input_char(ch: str) -> bool:
    """Return True if a typed character can appear in a valid expression."""
    return ch in VALID_INPUT_CHARACTERS


class Lexer:
    """Tokenizer for calculator expressions.

    Usage:
        lexer = Lexer("2 + 3 * 4")
        for token in lexer:
            print(token)
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0

    def __iter__(self) -> Iterator[Token]:
        """Iterate over all tokens in the source."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break

    def next_token(self) -> Token:
        """Get the next token from the source."""
        while self.position < len(self.source):
            for pattern, token_type in _COMPILED_PATTERNS:
                match = pattern.match(self.source, self.position)
                if match:
                    break
            else:
                ch = self.source[self.position]
                raise LexError(
                    LexErrorKind.INVALID_CHARACTER,
                    f"Unexpected character '{ch}'",
                    self.position,
                    ch,
                )

            value = match.group()
            start_pos = self.position
            self.position = match.end()

            if token_type is None:
                continue

            if token_type == TokenType.NUMBER:
                return Token(token_type, self._read_number(value, start_pos), start_pos)

            return Token(token_type, value, start_pos)

        return Token(TokenType.EOF, None, len(self.source))

    def _read_number(self, text: str, position: int) -> float:
        """Convert a numeric literal to a finite float."""
        if text.count(".") > 1:
            raise LexError(
                LexErrorKind.MALFORMED_NUMBER,
                f"Number '{text}' has more than one decimal point",
                position,
                text,
            )

        try:
            value = float(text)
        except ValueError:
            raise LexError(
                LexErrorKind.MALFORMED_NUMBER,
                f"Malformed number '{text}'",
                position,
                text,
            ) from None

        if not math.isfinite(value):
            raise LexError(
                LexErrorKind.MALFORMED_NUMBER,
                f"Number '{text}' is too large",
                position,
                text,
            )
        return value

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source and return list of tokens."""
        return list(self)


def tokenize(source: str) -> list[Token]:
    """Convenience function to tokenize an expression string.

    The returned list always ends with exactly one EOF token.
    """
    return Lexer(source).tokenize()
