"""
Haumea Compiler Main Module
===========================

This module provides the main compiler interface for Haumea. It runs the
complete compilation pipeline:

    Source → Lex → Parse → Generate → C source

Usage
-----
Command line:
    $ haumeac compile factorial.hm -o factorial.c
    $ cc factorial.c -o factorial && ./factorial

Programmatic:
    >>> from haumea.lang import compile_source
    >>> c_source = compile_source('to main do display(42) end')

Error Handling
--------------
Every stage fails fast. The first LexError, ParseError or CodegenError is
raised unchanged to the caller, and no C text is produced.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

from haumea.lang.lexer import Lexer
from haumea.lang.parser import Parser
from haumea.lang.codegen import CodeGenerator
from haumea.lang.ast import ProgramNode

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        indent: Indentation unit used in the generated C
        emit_comments: Include banner and section comments in the C output
    """
    indent: str = "    "
    emit_comments: bool = True


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        filename: Source filename
        success: True if compilation succeeded
        c_source: Generated C translation unit
        ast: Abstract syntax tree
        token_count: Number of tokens lexed, EOF included
    """
    filename: str = ""
    success: bool = False
    c_source: str = ""
    ast: Optional[ProgramNode] = None
    token_count: int = 0


class HaumeaCompiler:
    """
    Haumea to C compiler.

    Each call to compile_source() is independent; the compiler keeps no
    state between compilations.

    Example:
        compiler = HaumeaCompiler()
        result = compiler.compile_file("factorial.hm")
        print(result.c_source)
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Compile Haumea source code to C.

        Args:
            source: Haumea source code string
            filename: Source filename for error messages

        Returns:
            CompilerResult containing the C output

        Raises:
            HaumeaCompileError: If any stage fails
        """
        result = CompilerResult(filename=filename)
        source_lines = source.splitlines()

        # Stages 1 and 2: the parser pulls tokens from the lexer lazily
        tokens = self._count_tokens(Lexer(source, filename).tokenize(), result)
        parser = Parser(tokens, filename, source_lines)
        result.ast = parser.parse()

        # Stage 3: code generation
        generator = CodeGenerator(
            indent=self.options.indent,
            emit_comments=self.options.emit_comments,
            source_lines=source_lines,
        )
        result.c_source = generator.generate(result.ast)
        result.success = True

        logger.debug(
            "%s: compiled %d tokens into %d bytes of C",
            filename,
            result.token_count,
            len(result.c_source),
        )
        return result

    def compile_file(self, filepath: str | Path) -> CompilerResult:
        """
        Compile a Haumea source file to C.

        Raises:
            HaumeaCompileError: If compilation fails
            FileNotFoundError: If source file not found
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.compile_source(source, str(filepath))

    @staticmethod
    def _count_tokens(tokens, result: CompilerResult):
        for token in tokens:
            result.token_count += 1
            yield token


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_source(source: str, filename: str = "<input>") -> str:
    """
    Compile Haumea source code to C.

    This is the primary high-level interface for the compiler.

    Raises:
        HaumeaCompileError: If compilation fails

    Example:
        >>> c_source = compile_source('''
        ... to main do
        ...     display(6 * 7)
        ... end
        ... ''')
    """
    return HaumeaCompiler().compile_source(source, filename).c_source


def compile_file(
    filepath: str | Path,
    output_path: Optional[str | Path] = None,
) -> str:
    """
    Compile a Haumea source file to C, optionally writing the result.

    The output file is only written after compilation fully succeeds.
    """
    result = HaumeaCompiler().compile_file(filepath)

    if output_path:
        Path(output_path).write_text(result.c_source, encoding="utf-8")

    return result.c_source
