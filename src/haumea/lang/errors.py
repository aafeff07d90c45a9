"""
Haumea Compiler Error Hierarchy
===============================

This module defines the exception hierarchy raised by the three compiler
stages. Every stage fails fast: the first error found is raised and
compilation stops, so a batch build never sees partial C output.

Exception Hierarchy
-------------------
HaumeaCompileError (base for all compiler errors)
├── LexError - tokenizer errors
│   ├── InvalidCharacterError - character that starts no token
│   ├── UnterminatedCommentError - missing closing */
│   └── NumberOutOfRangeError - literal wider than 64 bits
├── ParseError - grammar errors (carry expected vs. found)
│   ├── UnexpectedTokenError - token doesn't fit the grammar rule
│   ├── UnmatchedBlockError - input ended inside a do ... end block
│   ├── InvalidStatementError - bare expression that is not a call
│   └── TrailingInputError - leftover 'end' after the last function
└── CodegenError - valid syntax, invalid program
    ├── MissingMainError - no 'main' function
    ├── InvalidMainError - 'main' declared with parameters
    ├── DuplicateDeclarationError - function or parameter declared twice
    ├── UndeclaredIdentifierError - unknown function or parameter
    ├── ArgumentCountError - call with the wrong number of arguments
    ├── ReservedNameError - name that would clash in the emitted C
    └── UnsupportedFeatureError - node with no C translation

Example:
    fact.hm:3:16: error: undeclared identifier 'm'
        return n * m
                   ^
    hint: did you mean 'n'?
"""

from typing import Optional, List

from haumea.errors import HaumeaError, SourceLocation


# =============================================================================
# Base Compiler Exception
# =============================================================================

class HaumeaCompileError(HaumeaError):
    """
    Base exception for all Haumea compiler errors.

    This class provides common functionality for error messages including
    source location tracking, source line context, and helpful hints.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

            fact.hm:5:12: error: unexpected token 'then'
                if n then do
                     ^
            hint: expected expression
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Lexical Errors
# =============================================================================

class LexError(HaumeaCompileError):
    """
    Error while tokenizing source text.

    Lexing halts at the first error; no resynchronization is attempted.
    """
    pass


class InvalidCharacterError(LexError):
    """
    Character that cannot start any token.

    Attributes:
        char: The offending character
    """

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"invalid character '{char}' (0x{ord(char):02X})",
            location=location,
            source_line=source_line,
        )


class UnterminatedCommentError(LexError):
    """Block comment still open at end of input."""

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "unterminated comment",
            location=location,
            hint="add closing */ to terminate the comment (comments nest)",
            source_line=source_line,
        )


class NumberOutOfRangeError(LexError):
    """Integer literal that does not fit the 64-bit numeric type."""

    def __init__(
        self,
        text: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.text = text
        super().__init__(
            f"integer literal '{text}' is too large",
            location=location,
            hint="numbers are signed 64-bit integers",
            source_line=source_line,
        )


# =============================================================================
# Parse Errors
# =============================================================================

class ParseError(HaumeaCompileError):
    """
    Grammar error found by the parser.

    Attributes:
        expected: Description of what the parser expected (may be None)
        found: Description of the token actually found (may be None)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        expected: Optional[str] = None,
        found: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found
        super().__init__(message, location=location, hint=hint, source_line=source_line)


class UnexpectedTokenError(ParseError):
    """
    Unexpected token during parsing.

    Raised when the parser encounters a token that doesn't match
    the expected grammar rule.
    """

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        message = f"unexpected {found}"
        if expected:
            message = f"expected {expected}, found {found}"
        super().__init__(
            message,
            location=location,
            source_line=source_line,
            expected=expected,
            found=found,
        )


class UnmatchedBlockError(ParseError):
    """
    Input ended while a do ... end block was still open.

    Attributes:
        opened_at: Location of the token that opened the block
    """

    def __init__(
        self,
        found: str,
        location: Optional[SourceLocation] = None,
        opened_at: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.opened_at = opened_at
        hint = None
        if opened_at:
            hint = f"the block opened at {opened_at} is never closed"
        super().__init__(
            f"expected 'end', found {found}",
            location=location,
            hint=hint,
            source_line=source_line,
            expected="'end'",
            found=found,
        )


class InvalidStatementError(ParseError):
    """
    Expression used as a statement that is not a call.

    Only calls have an observable effect, so `1 + 2` on its own line
    is rejected.
    """

    def __init__(
        self,
        found: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            f"expression statement must be a function call, found {found}",
            location=location,
            hint="use 'return' to produce a value or display(...) to print it",
            source_line=source_line,
            expected="function call",
            found=found,
        )


class TrailingInputError(ParseError):
    """Tokens left over after the last complete function, such as a stray 'end'."""

    def __init__(
        self,
        found: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            f"unmatched {found} after the last function",
            location=location,
            hint="remove the extra 'end' or check the do ... end pairs above",
            source_line=source_line,
            expected="'to' or end of input",
            found=found,
        )


# =============================================================================
# Code Generation Errors
# =============================================================================

class CodegenError(HaumeaCompileError):
    """
    Program is syntactically valid but cannot be translated to C.
    """
    pass


class MissingMainError(CodegenError):
    """The program declares no 'main' function."""

    def __init__(self, location: Optional[SourceLocation] = None):
        super().__init__(
            "program has no 'main' function",
            location=location,
            hint="add 'to main do ... end'",
        )


class InvalidMainError(CodegenError):
    """'main' was declared with parameters."""

    def __init__(
        self,
        param_count: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.param_count = param_count
        super().__init__(
            f"'main' must take no parameters, but declares {param_count}",
            location=location,
            hint="remove the 'with (...)' clause from 'main'",
            source_line=source_line,
        )


class DuplicateDeclarationError(CodegenError):
    """
    Function or parameter declared more than once.
    """

    def __init__(
        self,
        identifier: str,
        kind: str = "function",
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.identifier = identifier
        self.kind = kind
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{identifier}' was first declared at {original_location}"

        super().__init__(
            f"redeclaration of {kind} '{identifier}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UndeclaredIdentifierError(CodegenError):
    """
    Reference to an unknown function or parameter.

    The code generator suggests similarly-named identifiers when this
    error occurs, helping to catch typos.
    """

    def __init__(
        self,
        identifier: str,
        kind: str = "identifier",
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_identifiers: Optional[List[str]] = None,
    ):
        self.identifier = identifier
        self.kind = kind
        self.similar_identifiers = similar_identifiers or []

        hint = None
        if self.similar_identifiers:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_identifiers[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undeclared {kind} '{identifier}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class ArgumentCountError(CodegenError):
    """
    Wrong number of arguments in function call.
    """

    def __init__(
        self,
        function_name: str,
        expected: int,
        actual: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.function_name = function_name
        self.expected = expected
        self.actual = actual

        word = "argument" if expected == 1 else "arguments"
        super().__init__(
            f"'{function_name}' expects {expected} {word}, got {actual}",
            location=location,
            source_line=source_line,
        )


class ReservedNameError(CodegenError):
    """
    Name that cannot be used because it would clash in the generated C.
    """

    def __init__(
        self,
        identifier: str,
        reason: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.identifier = identifier
        self.reason = reason
        super().__init__(
            f"'{identifier}' cannot be used as a name: {reason}",
            location=location,
            hint="choose a different name",
            source_line=source_line,
        )


class UnsupportedFeatureError(CodegenError):
    """
    AST node the code generator has no translation for.
    """

    def __init__(
        self,
        feature: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.feature = feature
        super().__init__(
            f"unsupported construct: {feature}",
            location=location,
            source_line=source_line,
        )
