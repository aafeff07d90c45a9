"""
Haumea - A Small Language That Compiles to C
============================================

Haumea is a tiny imperative language with a single numeric type. This
package compiles Haumea programs into portable C source, which any system
C compiler turns into a native binary.

Main Components
---------------
- **lang**: the compiler pipeline (lexer, parser, AST, C code generator)
- **cli**: the `haumeac` command-line driver

Quick Start
-----------
    >>> from haumea import compile_source
    >>> c_source = compile_source('''
    ... to factorial with (n) do
    ...     if n = 0 then do
    ...         return 1
    ...     end
    ...     else do
    ...         return n * factorial(n - 1)
    ...     end
    ... end
    ... to main do
    ...     display(factorial(5))
    ... end
    ... ''')

Or use the command-line tool:
    $ haumeac compile factorial.hm -o factorial.c
    $ cc factorial.c -o factorial && ./factorial
    120
"""

__version__ = "1.0.0"

from haumea.errors import HaumeaError, SourceLocation
from haumea.lang import (
    HaumeaCompiler,
    CompilerOptions,
    compile_source,
    compile_file,
    HaumeaCompileError,
    LexError,
    ParseError,
    CodegenError,
)

__all__ = [
    "__version__",
    "HaumeaError",
    "SourceLocation",
    "HaumeaCompiler",
    "CompilerOptions",
    "compile_source",
    "compile_file",
    "HaumeaCompileError",
    "LexError",
    "ParseError",
    "CodegenError",
]
