"""
Haumea Error Hierarchy
======================

This module defines the root of the exception hierarchy for the Haumea
toolchain. All exceptions raised by the package inherit from HaumeaError,
allowing callers to catch every toolchain error with a single except
clause if desired.

Exception Hierarchy
-------------------
HaumeaError (base)
└── HaumeaCompileError (see haumea.lang.errors)
    ├── LexError - invalid characters, unterminated comments
    ├── ParseError - unexpected tokens, unmatched blocks
    └── CodegenError - semantically invalid programs

Design Philosophy
-----------------
Each compile error captures source location information (filename, line,
column) when applicable. This allows for detailed error messages that help
users quickly locate and fix issues in their source code.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class HaumeaError(Exception):
    """
    Base exception for all Haumea errors.

    All exceptions in the package inherit from this class, allowing callers
    to catch all toolchain errors with a single except clause:

        try:
            compile_source(text)
        except HaumeaError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Tokens, AST nodes and errors all carry one of these.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"
