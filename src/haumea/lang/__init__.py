"""
Haumea Compiler
===============

This package implements the Haumea to C compiler:

- A lexer producing a lazy token stream
- A recursive descent parser producing an AST
- A code generator emitting portable C99

Pipeline
--------
    Haumea source → Lexer → Parser → AST → Code Generator → C source

The generated C is compiled with any system C compiler:

    $ haumeac compile factorial.hm -o factorial.c
    $ cc factorial.c -o factorial

Usage
-----
>>> from haumea.lang import compile_source
>>> source = '''
... to square with (n) do
...     return n * n
... end
... to main do
...     display(square(7))
... end
... '''
>>> c_source = compile_source(source)

Language Summary
----------------
- One numeric type: signed 64-bit integers
- Functions: 'to name with (a, b) do ... end'; 'main' takes no parameters
- Statements: return, if/then/else with do ... end blocks, calls
- Operators: + - * / modulo, = != < > <= >=, and or not, unary -
- Intrinsics: display(n) prints a number, read() reads one
- Comments: /* ... */, nestable
"""

from haumea.lang.compiler import (
    HaumeaCompiler,
    CompilerOptions,
    CompilerResult,
    compile_source,
    compile_file,
)
from haumea.lang.errors import (
    HaumeaCompileError,
    LexError,
    ParseError,
    CodegenError,
    InvalidCharacterError,
    UnterminatedCommentError,
    NumberOutOfRangeError,
    UnexpectedTokenError,
    UnmatchedBlockError,
    InvalidStatementError,
    TrailingInputError,
    MissingMainError,
    InvalidMainError,
    DuplicateDeclarationError,
    UndeclaredIdentifierError,
    ArgumentCountError,
    ReservedNameError,
    UnsupportedFeatureError,
)
from haumea.lang.lexer import Lexer, Token, TokenType, tokenize
from haumea.lang.parser import Parser, parse_source
from haumea.lang.codegen import CodeGenerator, generate_c
from haumea.lang.ast import (
    ASTNode,
    ASTPrinter,
    ASTVisitor,
    ProgramNode,
    FunctionNode,
    ReturnStatement,
    IfStatement,
    ExpressionStatement,
    NumberLiteral,
    IdentifierExpression,
    BinaryExpression,
    UnaryExpression,
    CallExpression,
    BinaryOperator,
    UnaryOperator,
)

__all__ = [
    # Main API
    "HaumeaCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_source",
    "compile_file",
    # Errors
    "HaumeaCompileError",
    "LexError",
    "ParseError",
    "CodegenError",
    "InvalidCharacterError",
    "UnterminatedCommentError",
    "NumberOutOfRangeError",
    "UnexpectedTokenError",
    "UnmatchedBlockError",
    "InvalidStatementError",
    "TrailingInputError",
    "MissingMainError",
    "InvalidMainError",
    "DuplicateDeclarationError",
    "UndeclaredIdentifierError",
    "ArgumentCountError",
    "ReservedNameError",
    "UnsupportedFeatureError",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    # Parser
    "Parser",
    "parse_source",
    # Code Generator
    "CodeGenerator",
    "generate_c",
    # AST
    "ASTNode",
    "ASTPrinter",
    "ASTVisitor",
    "ProgramNode",
    "FunctionNode",
    "ReturnStatement",
    "IfStatement",
    "ExpressionStatement",
    "NumberLiteral",
    "IdentifierExpression",
    "BinaryExpression",
    "UnaryExpression",
    "CallExpression",
    "BinaryOperator",
    "UnaryOperator",
]
