"""
Haumea Lexer (Tokenizer)
========================

This module implements the lexer for the Haumea language. It converts
source text into a lazy stream of tokens for the parser.

Token Categories
----------------
- Keywords: to, with, do, end, if, then, else, return
- Identifiers: function and parameter names
- Numbers: decimal integer literals (signed 64-bit range)
- Operators: + - * / = != < > <= >= and the words and, or, not, modulo
- Punctuation: ( ) ,

Comments
--------
Block comments are written /* ... */ and may be nested:

    /* outer /* inner */ still a comment */

Example Usage
-------------
>>> from haumea.lang.lexer import Lexer
>>> for token in Lexer("to main do display(1) end", "test.hm").tokenize():
...     print(token)
Token(KEYWORD, 'to', 1:1)
Token(IDENTIFIER, 'main', 1:4)
Token(KEYWORD, 'do', 1:9)
Token(IDENTIFIER, 'display', 1:12)
Token(PUNCTUATION, '(', 1:19)
Token(NUMBER, 1, 1:20)
Token(PUNCTUATION, ')', 1:21)
Token(KEYWORD, 'end', 1:23)
Token(EOF, 1:26)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import logging
import string

from haumea.errors import SourceLocation
from haumea.lang.errors import (
    InvalidCharacterError,
    NumberOutOfRangeError,
    UnterminatedCommentError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token kinds for the Haumea language.

    Keywords are distinguished from identifiers by table lookup after the
    whole word has been scanned. The token value says which keyword,
    operator or punctuation symbol was read.
    """
    KEYWORD = auto()
    IDENTIFIER = auto()
    NUMBER = auto()
    OPERATOR = auto()
    PUNCTUATION = auto()
    EOF = auto()


# Words reserved by control constructs
KEYWORDS = frozenset({
    "to", "with", "do", "end",
    "if", "then", "else",
    "return",
})

# Operators spelled as words
WORD_OPERATORS = frozenset({"and", "or", "not", "modulo"})

# Symbol operators; two-character entries are tried first
OPERATORS = ("!=", "<=", ">=", "+", "-", "*", "/", "=", "<", ">")

PUNCTUATION = frozenset({"(", ")", ","})

INT64_MAX = 2 ** 63 - 1


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from Haumea source code.

    Attributes:
        type: The TokenType classification
        value: Keyword/identifier/operator text, the int for numbers, None for EOF
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    value: str | int | None
    line: int
    column: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        if self.value is not None:
            if isinstance(self.value, int):
                return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_keyword(self, word: str) -> bool:
        return self.type == TokenType.KEYWORD and self.value == word

    def is_operator(self, *symbols: str) -> bool:
        return self.type == TokenType.OPERATOR and self.value in symbols

    def is_punctuation(self, symbol: str) -> bool:
        return self.type == TokenType.PUNCTUATION and self.value == symbol

    def describe(self) -> str:
        """Human-readable description used in parse errors."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.NUMBER:
            return f"number {self.value}"
        if self.type == TokenType.IDENTIFIER:
            return f"identifier '{self.value}'"
        return f"'{self.value}'"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes Haumea source code.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    The token stream is produced lazily and always ends with a single EOF
    token. The first invalid character stops lexing with a LexError.

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

        # Current position in source
        self._pos = 0
        self._line = 1
        self._column = 1

        # Track line start position for error reporting
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects, ending with one EOF token

        Raises:
            LexError: If an invalid character or unterminated comment is found
        """
        count = 0
        while True:
            self._skip_whitespace_and_comments()
            if self._at_end():
                break
            yield self._scan_token()
            count += 1

        logger.debug("%s: scanned %d tokens", self.filename, count)
        yield Token(TokenType.EOF, None, self._line, self._column, self.filename)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Character at current position + offset, or '' past the end."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume the current character, keeping line/column up to date."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        while not self._at_end():
            char = self._peek()

            if char.isspace():
                self._advance()
                continue

            if char == "/" and self._peek(1) == "*":
                self._skip_comment()
                continue

            break

    def _skip_comment(self) -> None:
        """
        Skip a block comment, honouring nested /* ... */ pairs.

        Raises:
            UnterminatedCommentError: If input ends inside the comment
        """
        start = SourceLocation(self.filename, self._line, self._column)
        start_line_text = self._get_current_line()

        self._advance()
        self._advance()
        depth = 1

        while not self._at_end():
            if self._peek() == "/" and self._peek(1) == "*":
                self._advance()
                self._advance()
                depth += 1
            elif self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                depth -= 1
                if depth == 0:
                    return
            else:
                self._advance()

        raise UnterminatedCommentError(start, start_line_text)

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        start_line = self._line
        start_column = self._column
        char = self._peek()

        if char in self.IDENT_START:
            return self._scan_word(start_line, start_column)

        if char in string.digits:
            return self._scan_number(start_line, start_column)

        return self._scan_symbol(start_line, start_column)

    def _make_token(self, token_type: TokenType, value, line: int, column: int) -> Token:
        return Token(token_type, value, line, column, self.filename)

    def _scan_word(self, start_line: int, start_column: int) -> Token:
        """
        Scan an identifier, keyword or word operator.

        The longest run of identifier characters is read first, then
        classified against the keyword and word-operator tables.
        """
        chars = []
        while self._peek() and self._peek() in self.IDENT_CHARS:
            chars.append(self._advance())
        word = "".join(chars)

        if word in KEYWORDS:
            return self._make_token(TokenType.KEYWORD, word, start_line, start_column)
        if word in WORD_OPERATORS:
            return self._make_token(TokenType.OPERATOR, word, start_line, start_column)
        return self._make_token(TokenType.IDENTIFIER, word, start_line, start_column)

    def _scan_number(self, start_line: int, start_column: int) -> Token:
        line_text = self._get_current_line()
        chars = []
        while self._peek() and self._peek() in string.digits:
            chars.append(self._advance())
        text = "".join(chars)

        value = int(text)
        if value > INT64_MAX:
            raise NumberOutOfRangeError(
                text,
                SourceLocation(self.filename, start_line, start_column),
                line_text,
            )
        return self._make_token(TokenType.NUMBER, value, start_line, start_column)

    def _scan_symbol(self, start_line: int, start_column: int) -> Token:
        for symbol in OPERATORS:
            if self.source.startswith(symbol, self._pos):
                for _ in symbol:
                    self._advance()
                return self._make_token(TokenType.OPERATOR, symbol, start_line, start_column)

        char = self._peek()
        if char in PUNCTUATION:
            self._advance()
            return self._make_token(TokenType.PUNCTUATION, char, start_line, start_column)

        raise InvalidCharacterError(
            char,
            SourceLocation(self.filename, start_line, start_column),
            self._get_current_line(),
        )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _get_current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]


def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """Tokenize a whole source string, EOF token included."""
    return list(Lexer(source, filename).tokenize())
