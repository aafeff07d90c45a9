"""
C Code Generator for Haumea
===========================

This module translates a Haumea AST into portable C99 source. The output
is meant to be handed unchanged to an off-the-shelf C compiler.

Translation Strategy
--------------------
| Haumea                          | C                                   |
|---------------------------------|-------------------------------------|
| number                          | int64_t, literals as INT64_C(n)     |
| to f with (a, b) do ... end     | int64_t f(int64_t a, int64_t b)     |
| to main do ... end              | int main(void)                      |
| return e                        | return e;                           |
| if c then do ... end else ...   | if (c) { ... } else { ... }         |
| a = b                           | a == b                              |
| a modulo b, and, or, not        | %, &&, ||, !                        |
| display(e) as a statement       | printf("%" PRId64 "\\n", e);        |
| display(e) inside an expression | haumea_display(e)                   |
| read()                          | haumea_read()                       |

Layout of the generated file:

    banner and #includes
    runtime helpers (static inline, so unused ones cost nothing)
    one prototype per function, in source order
    one definition per function, in source order

Emitting every prototype before any body lets functions call each other
in any order, including mutual recursion.

A function whose body can finish without returning falls through to an
implicit `return 0;`.

Comparisons and the logical operators have type int in C. A display
statement casts such a value to int64_t so it matches the PRId64 format.

Validation
----------
The program is checked while it is translated. All text is collected in
memory and only returned once the whole program has been translated, so a
CodegenError never leaves partial output behind.

Usage
-----
>>> from haumea.lang.parser import parse_source
>>> from haumea.lang.codegen import CodeGenerator
>>> program = parse_source('to main do display(42) end')
>>> c_source = CodeGenerator().generate(program)
"""

from dataclasses import dataclass
from typing import Optional
import difflib
import logging
import re

from haumea.errors import SourceLocation
from haumea.lang.ast import (
    ASTNode,
    ASTVisitor,
    ProgramNode,
    FunctionNode,
    Statement,
    ReturnStatement,
    IfStatement,
    ExpressionStatement,
    Expression,
    BinaryExpression,
    UnaryExpression,
    CallExpression,
    IdentifierExpression,
    NumberLiteral,
    BinaryOperator,
    UnaryOperator,
)
from haumea.lang.errors import (
    ArgumentCountError,
    DuplicateDeclarationError,
    InvalidMainError,
    MissingMainError,
    ReservedNameError,
    UndeclaredIdentifierError,
    UnsupportedFeatureError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Target Tables
# =============================================================================

NUMBER_TYPE = "int64_t"

C_OPERATORS = {
    BinaryOperator.ADD: "+",
    BinaryOperator.SUBTRACT: "-",
    BinaryOperator.MULTIPLY: "*",
    BinaryOperator.DIVIDE: "/",
    BinaryOperator.MODULO: "%",
    BinaryOperator.EQUAL: "==",
    BinaryOperator.NOT_EQUAL: "!=",
    BinaryOperator.LESS: "<",
    BinaryOperator.GREATER: ">",
    BinaryOperator.LESS_EQ: "<=",
    BinaryOperator.GREATER_EQ: ">=",
    BinaryOperator.LOGICAL_AND: "&&",
    BinaryOperator.LOGICAL_OR: "||",
}

C_UNARY_OPERATORS = {
    UnaryOperator.NEGATE: "-",
    UnaryOperator.LOGICAL_NOT: "!",
}

# Intrinsic name -> argument count
INTRINSICS = {
    "display": 1,
    "read": 0,
}

RUNTIME_PREFIX = "haumea_"

# C99 keywords, plus the words C23 compilers treat as keywords by default
C_KEYWORDS = frozenset({
    "auto", "break", "case", "char", "const", "continue", "default", "do",
    "double", "else", "enum", "extern", "float", "for", "goto", "if",
    "inline", "int", "long", "register", "restrict", "return", "short",
    "signed", "sizeof", "static", "struct", "switch", "typedef", "union",
    "unsigned", "void", "volatile", "while",
    # C23
    "alignas", "alignof", "bool", "constexpr", "false", "nullptr",
    "static_assert", "thread_local", "true", "typeof", "typeof_unqual",
})

# Names declared by <stdio.h>, <stdint.h> and <inttypes.h> that a Haumea
# identifier could collide with. Families of names (the PRI/SCN format
# macros, INTn_MAX style limits, *_t types) are matched by _header_family.
HEADER_NAMES = frozenset({
    # stdio.h: C99 functions
    "remove", "rename", "tmpfile", "tmpnam", "fclose", "fflush", "fopen",
    "freopen", "setbuf", "setvbuf", "fprintf", "fscanf", "printf", "scanf",
    "snprintf", "sprintf", "sscanf", "vfprintf", "vfscanf", "vprintf",
    "vscanf", "vsnprintf", "vsprintf", "vsscanf", "fgetc", "fgets", "fputc",
    "fputs", "getc", "getchar", "gets", "putc", "putchar", "puts", "ungetc",
    "fread", "fwrite", "fgetpos", "fseek", "fsetpos", "ftell", "rewind",
    "clearerr", "feof", "ferror", "perror",
    # stdio.h: C99 macros and objects
    "FILE", "NULL", "BUFSIZ", "EOF", "FOPEN_MAX", "FILENAME_MAX",
    "L_tmpnam", "SEEK_CUR", "SEEK_END", "SEEK_SET", "TMP_MAX", "stdin",
    "stdout", "stderr",
    # stdio.h: POSIX and GNU extensions visible in the default C modes
    "fileno", "fdopen", "popen", "pclose", "getline", "getdelim", "dprintf",
    "vdprintf", "fmemopen", "open_memstream", "ctermid", "flockfile",
    "ftrylockfile", "funlockfile", "getc_unlocked", "getchar_unlocked",
    "putc_unlocked", "putchar_unlocked", "fseeko", "ftello", "tempnam",
    "renameat", "asprintf", "vasprintf", "getw", "putw", "setbuffer",
    "setlinebuf", "tmpnam_r", "fgetc_unlocked", "fputc_unlocked",
    "fread_unlocked", "fwrite_unlocked", "fflush_unlocked", "clearerr_unlocked",
    "feof_unlocked", "ferror_unlocked", "fileno_unlocked", "P_tmpdir",
    "L_ctermid",
    # stdint.h: limits without an INT prefix
    "PTRDIFF_MIN", "PTRDIFF_MAX", "SIG_ATOMIC_MIN", "SIG_ATOMIC_MAX",
    "SIZE_MAX", "WCHAR_MIN", "WCHAR_MAX", "WINT_MIN", "WINT_MAX",
    # inttypes.h
    "imaxabs", "imaxdiv", "strtoimax", "strtoumax", "wcstoimax", "wcstoumax",
})


def _header_family(name: str) -> bool:
    """True if the name belongs to a family of names the headers reserve."""
    return bool(
        name.endswith("_t")
        or re.match(r"(PRI|SCN)[a-zA-Z]", name)
        or re.match(r"U?INT\w*_(MAX|MIN|C)$", name)
    )


# Operators whose C result has type int rather than int64_t
INT_RESULT_OPERATORS = frozenset({
    BinaryOperator.EQUAL,
    BinaryOperator.NOT_EQUAL,
    BinaryOperator.LESS,
    BinaryOperator.GREATER,
    BinaryOperator.LESS_EQ,
    BinaryOperator.GREATER_EQ,
    BinaryOperator.LOGICAL_AND,
    BinaryOperator.LOGICAL_OR,
})


def _yields_int(expr: Expression) -> bool:
    """True if the C translation of expr has type int."""
    if isinstance(expr, BinaryExpression):
        return expr.operator in INT_RESULT_OPERATORS
    if isinstance(expr, UnaryExpression):
        return expr.operator == UnaryOperator.LOGICAL_NOT
    return False


def _runtime_preamble(indent: str) -> list[str]:
    """Runtime helpers emitted into every translation unit."""
    return [
        f"static inline {NUMBER_TYPE} {RUNTIME_PREFIX}display({NUMBER_TYPE} value)",
        "{",
        f'{indent}printf("%" PRId64 "\\n", value);',
        f"{indent}return 0;",
        "}",
        "",
        f"static inline {NUMBER_TYPE} {RUNTIME_PREFIX}read(void)",
        "{",
        f"{indent}{NUMBER_TYPE} value = 0;",
        f'{indent}if (scanf("%" SCNd64, &value) != 1) {{',
        f"{indent}{indent}return 0;",
        f"{indent}}}",
        f"{indent}return value;",
        "}",
    ]


# =============================================================================
# Symbol Table for Code Generation
# =============================================================================

@dataclass
class FunctionInfo:
    """
    Information about a declared function.

    Attributes:
        name: Function name
        param_count: Number of parameters
        location: Where the function was declared
    """
    name: str
    param_count: int
    location: Optional[SourceLocation] = None


# =============================================================================
# Code Generator Class
# =============================================================================

class CodeGenerator(ASTVisitor):
    """
    Generates C source from a Haumea AST.

    Statement visitors append lines to the output; expression visitors
    return the C text of the expression. An instance may be reused, since
    generate() resets all state.

    Attributes:
        indent: Indentation unit for generated code
        emit_comments: Include banner and section comments
    """

    def __init__(
        self,
        indent: str = "    ",
        emit_comments: bool = True,
        source_lines: Optional[list[str]] = None,
    ):
        """
        Initialize the code generator.

        Args:
            indent: Indentation unit for generated code
            emit_comments: Include banner and section comments
            source_lines: Original source lines, used for error context only
        """
        self.indent = indent
        self.emit_comments = emit_comments
        self.source_lines = source_lines or []

        self._output: list[str] = []
        self._functions: dict[str, FunctionInfo] = {}
        self._parameters: tuple[str, ...] = ()
        self._depth = 0

    def generate(self, program: ProgramNode) -> str:
        """
        Generate C code from an AST.

        Args:
            program: The root AST node

        Returns:
            Complete C translation unit

        Raises:
            CodegenError: If the program cannot be translated
        """
        self._output = []
        self._functions = {}
        self._parameters = ()
        self._depth = 0

        self._collect_functions(program)

        self._emit_header()
        self._emit_prototypes(program)
        for function in program.functions:
            self._emit("")
            self.visit(function)

        logger.debug(
            "generated %d functions, %d lines of C",
            len(program.functions),
            len(self._output),
        )
        return "\n".join(self._output) + "\n"

    # =========================================================================
    # Output Methods
    # =========================================================================

    def _emit(self, line: str = "") -> None:
        self._output.append(line)

    def _emit_line(self, text: str) -> None:
        """Emit a line at the current nesting depth."""
        self._output.append(f"{self.indent * self._depth}{text}")

    def _emit_comment(self, comment: str) -> None:
        if self.emit_comments:
            self._emit(f"/* {comment} */")

    def _source_line(self, location: Optional[SourceLocation]) -> Optional[str]:
        if location and 0 < location.line <= len(self.source_lines):
            return self.source_lines[location.line - 1]
        return None

    # =========================================================================
    # Declaration Checks
    # =========================================================================

    def _collect_functions(self, program: ProgramNode) -> None:
        """
        Build the function table and validate declarations.

        Checks duplicate functions and parameters, reserved names, and the
        presence and shape of 'main'.
        """
        for function in program.functions:
            self._check_name(function.name, function.location)
            if function.name in INTRINSICS:
                raise ReservedNameError(
                    function.name,
                    "it is a built-in intrinsic",
                    function.location,
                    self._source_line(function.location),
                )

            previous = self._functions.get(function.name)
            if previous is not None:
                raise DuplicateDeclarationError(
                    function.name,
                    kind="function",
                    location=function.location,
                    original_location=previous.location,
                    source_line=self._source_line(function.location),
                )

            self._functions[function.name] = FunctionInfo(
                name=function.name,
                param_count=len(function.parameters),
                location=function.location,
            )

        main = self._functions.get("main")
        if main is None:
            raise MissingMainError(program.location)
        if main.param_count != 0:
            raise InvalidMainError(
                main.param_count,
                main.location,
                self._source_line(main.location),
            )

        for function in program.functions:
            seen = set()
            for param in function.parameters:
                self._check_name(param, function.location)
                if param == "main":
                    raise ReservedNameError(
                        param,
                        "'main' is reserved for the entry point",
                        function.location,
                        self._source_line(function.location),
                    )
                if param in self._functions:
                    raise ReservedNameError(
                        param,
                        f"parameter of '{function.name}' shadows function '{param}'",
                        function.location,
                        self._source_line(function.location),
                    )
                if param in seen:
                    raise DuplicateDeclarationError(
                        param,
                        kind="parameter",
                        location=function.location,
                        original_location=function.location,
                        source_line=self._source_line(function.location),
                    )
                seen.add(param)

    def _check_name(self, name: str, location: Optional[SourceLocation]) -> None:
        """Reject names that would not survive as C identifiers."""
        reason = None
        if name in C_KEYWORDS:
            reason = "it is a C keyword"
        elif name in HEADER_NAMES or _header_family(name):
            reason = "it is declared by the C standard headers"
        elif name.startswith(RUNTIME_PREFIX):
            reason = f"the '{RUNTIME_PREFIX}' prefix is reserved for the runtime"

        if reason:
            raise ReservedNameError(name, reason, location, self._source_line(location))

    # =========================================================================
    # Header and Prototypes
    # =========================================================================

    def _emit_header(self) -> None:
        self._emit_comment("Generated by haumea. Do not edit.")
        self._emit("#include <inttypes.h>")
        self._emit("#include <stdint.h>")
        self._emit("#include <stdio.h>")
        self._emit("")
        self._emit_comment("Runtime support")
        for line in _runtime_preamble(self.indent):
            self._emit(line)

    def _emit_prototypes(self, program: ProgramNode) -> None:
        self._emit("")
        self._emit_comment("Prototypes")
        for function in program.functions:
            self._emit(f"{self._signature(function)};")
        self._emit("")
        self._emit_comment("Functions")

    def _signature(self, function: FunctionNode) -> str:
        if function.name == "main":
            return "int main(void)"
        if function.parameters:
            params = ", ".join(f"{NUMBER_TYPE} {p}" for p in function.parameters)
        else:
            params = "void"
        return f"{NUMBER_TYPE} {function.name}({params})"

    # =========================================================================
    # Functions and Statements
    # =========================================================================

    def generic_visit(self, node: ASTNode) -> None:
        raise UnsupportedFeatureError(
            node.__class__.__name__,
            node.location,
            self._source_line(node.location),
        )

    def visit_FunctionNode(self, node: FunctionNode) -> None:
        self._parameters = node.parameters
        self._emit(self._signature(node))
        self._emit("{")
        self._depth = 1
        self._emit_block(node.body)
        if not _always_returns(node.body):
            self._emit_line("return 0;")
        self._depth = 0
        self._emit("}")

    def _emit_block(self, statements: tuple[Statement, ...]) -> None:
        for stmt in statements:
            self.visit(stmt)

    def visit_ReturnStatement(self, node: ReturnStatement) -> None:
        self._emit_line(f"return {self.visit(node.value)};")

    def visit_IfStatement(self, node: IfStatement, chained: bool = False) -> None:
        """
        Emit an if statement.

        An else branch that holds a single IfStatement is emitted as
        'else if' instead of a nested block.
        """
        condition = self.visit(node.condition)
        keyword = "} else if" if chained else "if"
        self._emit_line(f"{keyword} ({condition}) {{")

        self._depth += 1
        self._emit_block(node.then_branch)
        self._depth -= 1

        else_branch = node.else_branch
        if else_branch is not None:
            if len(else_branch) == 1 and isinstance(else_branch[0], IfStatement):
                self.visit_IfStatement(else_branch[0], chained=True)
                return
            self._emit_line("} else {")
            self._depth += 1
            self._emit_block(else_branch)
            self._depth -= 1

        self._emit_line("}")

    def visit_ExpressionStatement(self, node: ExpressionStatement) -> None:
        call = node.expression
        if call.function == "display":
            self._check_arguments(call, INTRINSICS["display"])
            argument = call.arguments[0]
            value = self.visit(argument)
            if _yields_int(argument):
                value = f"({NUMBER_TYPE})({value})"
            self._emit_line(f'printf("%" PRId64 "\\n", {value});')
            return
        self._emit_line(f"{self.visit(call)};")

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_NumberLiteral(self, node: NumberLiteral) -> str:
        return f"INT64_C({node.value})"

    def visit_IdentifierExpression(self, node: IdentifierExpression) -> str:
        if node.name not in self._parameters:
            raise UndeclaredIdentifierError(
                node.name,
                kind="identifier",
                location=node.location,
                source_line=self._source_line(node.location),
                similar_identifiers=difflib.get_close_matches(node.name, self._parameters),
            )
        return node.name

    def visit_BinaryExpression(self, node: BinaryExpression) -> str:
        left = self._operand(node.left)
        right = self._operand(node.right)
        return f"{left} {C_OPERATORS[node.operator]} {right}"

    def visit_UnaryExpression(self, node: UnaryExpression) -> str:
        return f"{C_UNARY_OPERATORS[node.operator]}{self._operand(node.operand)}"

    def visit_CallExpression(self, node: CallExpression) -> str:
        if node.function in INTRINSICS:
            self._check_arguments(node, INTRINSICS[node.function])
            args = ", ".join(self.visit(arg) for arg in node.arguments)
            return f"{RUNTIME_PREFIX}{node.function}({args})"

        info = self._functions.get(node.function)
        if info is None:
            candidates = list(self._functions) + list(INTRINSICS)
            raise UndeclaredIdentifierError(
                node.function,
                kind="function",
                location=node.location,
                source_line=self._source_line(node.location),
                similar_identifiers=difflib.get_close_matches(node.function, candidates),
            )

        self._check_arguments(node, info.param_count)
        args = ", ".join(self.visit(arg) for arg in node.arguments)
        return f"{node.function}({args})"

    def _operand(self, expr: Expression) -> str:
        """Translate a sub-expression, parenthesizing compound operands."""
        text = self.visit(expr)
        if isinstance(expr, (BinaryExpression, UnaryExpression)):
            return f"({text})"
        return text

    def _check_arguments(self, call: CallExpression, expected: int) -> None:
        if len(call.arguments) != expected:
            raise ArgumentCountError(
                call.function,
                expected,
                len(call.arguments),
                call.location,
                self._source_line(call.location),
            )


# =============================================================================
# Utility Functions
# =============================================================================

def _always_returns(statements: tuple[Statement, ...]) -> bool:
    """True if every path through the statements ends in a return."""
    for stmt in statements:
        if isinstance(stmt, ReturnStatement):
            return True
        if isinstance(stmt, IfStatement) and stmt.else_branch is not None:
            if _always_returns(stmt.then_branch) and _always_returns(stmt.else_branch):
                return True
    return False


def generate_c(program: ProgramNode, **options) -> str:
    """Generate C source for a program with a fresh CodeGenerator."""
    return CodeGenerator(**options).generate(program)
