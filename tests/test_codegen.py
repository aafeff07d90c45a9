"""
Haumea Code Generator Test Suite
================================

Tests for C translation: file layout, statement and expression output,
and the program checks made while translating.
"""

import pytest

from haumea.lang.parser import parse_source
from haumea.lang.codegen import CodeGenerator, generate_c
from haumea.lang.ast import FunctionNode, ProgramNode, Statement
from haumea.lang.errors import (
    CodegenError,
    MissingMainError,
    InvalidMainError,
    DuplicateDeclarationError,
    UndeclaredIdentifierError,
    ArgumentCountError,
    ReservedNameError,
    UnsupportedFeatureError,
)


FACTORIAL = """\
to factorial with (n) do
    if n = 0 then do
        return 1
    end
    else do
        return n * factorial(n - 1)
    end
end

to main do
    display(factorial(5))
end
"""


def generate(source: str, **options) -> str:
    return generate_c(parse_source(source, "test.hm"), **options)


def function_body(c_source: str, signature: str) -> list[str]:
    """Lines of the definition that starts with the given signature."""
    lines = c_source.splitlines()
    start = lines.index(signature)
    end = lines.index("}", start)
    return lines[start:end + 1]


# =============================================================================
# Layout
# =============================================================================

class TestLayout:
    """Tests for the overall shape of the C file."""

    def test_includes(self):
        c_source = generate("to main do end")
        assert "#include <inttypes.h>" in c_source
        assert "#include <stdint.h>" in c_source
        assert "#include <stdio.h>" in c_source

    def test_prototypes_before_bodies(self):
        c_source = generate(FACTORIAL)
        lines = c_source.splitlines()
        proto_fact = lines.index("int64_t factorial(int64_t n);")
        proto_main = lines.index("int main(void);")
        body_fact = lines.index("int64_t factorial(int64_t n)")
        body_main = lines.index("int main(void)")
        assert proto_fact < proto_main < body_fact < body_main

    def test_source_order_kept(self):
        c_source = generate("to main do end to zeta do end to alpha do end")
        lines = c_source.splitlines()
        assert lines.index("int64_t zeta(void)") < lines.index("int64_t alpha(void)")
        assert lines.index("int main(void)") < lines.index("int64_t zeta(void)")

    def test_deterministic(self):
        """The same program always produces identical text."""
        program = parse_source(FACTORIAL)
        generator = CodeGenerator()
        assert generator.generate(program) == generator.generate(program)
        assert generate(FACTORIAL) == generate(FACTORIAL)

    def test_ends_with_newline(self):
        assert generate("to main do end").endswith("}\n")

    def test_comments_optional(self):
        assert "/* Prototypes */" in generate("to main do end")
        c_source = generate("to main do end", emit_comments=False)
        assert "/*" not in c_source

    def test_indent_option(self):
        c_source = generate("to main do display(1) end", indent="\t")
        assert '\tprintf("%" PRId64 "\\n", INT64_C(1));' in c_source.splitlines()

    def test_runtime_helpers(self):
        c_source = generate("to main do end")
        assert "static inline int64_t haumea_display(int64_t value)" in c_source
        assert "static inline int64_t haumea_read(void)" in c_source


# =============================================================================
# Statements
# =============================================================================

class TestStatements:
    """Tests for statement translation."""

    def test_factorial(self):
        c_source = generate(FACTORIAL)
        assert function_body(c_source, "int64_t factorial(int64_t n)") == [
            "int64_t factorial(int64_t n)",
            "{",
            "    if (n == INT64_C(0)) {",
            "        return INT64_C(1);",
            "    } else {",
            "        return n * factorial(n - INT64_C(1));",
            "    }",
            "}",
        ]
        assert function_body(c_source, "int main(void)") == [
            "int main(void)",
            "{",
            '    printf("%" PRId64 "\\n", factorial(INT64_C(5)));',
            "    return 0;",
            "}",
        ]

    def test_empty_body_returns_zero(self):
        c_source = generate("to f do end to main do end")
        assert function_body(c_source, "int64_t f(void)") == [
            "int64_t f(void)",
            "{",
            "    return 0;",
            "}",
        ]

    def test_no_fallthrough_after_return(self):
        c_source = generate("to f do return 1 end to main do end")
        assert function_body(c_source, "int64_t f(void)") == [
            "int64_t f(void)",
            "{",
            "    return INT64_C(1);",
            "}",
        ]

    def test_fallthrough_after_if_without_else(self):
        c_source = generate(
            "to f with (n) do if n then do return 1 end end to main do end"
        )
        body = function_body(c_source, "int64_t f(int64_t n)")
        assert body[-2] == "    return 0;"

    def test_else_if_chain(self):
        c_source = generate("""
            to sign with (n) do
                if n < 0 then do return -1 end
                else if n = 0 then do return 0 end
                else do return 1 end
            end
            to main do display(sign(3)) end
        """)
        lines = c_source.splitlines()
        start = lines.index("int64_t sign(int64_t n)")
        assert lines[start:start + 9] == [
            "int64_t sign(int64_t n)",
            "{",
            "    if (n < INT64_C(0)) {",
            "        return -INT64_C(1);",
            "    } else if (n == INT64_C(0)) {",
            "        return INT64_C(0);",
            "    } else {",
            "        return INT64_C(1);",
            "    }",
        ]

    def test_nested_if_blocks(self):
        c_source = generate("""
            to f with (a, b) do
                if a then do
                    if b then do
                        display(1)
                    end
                end
            end
            to main do end
        """)
        assert function_body(c_source, "int64_t f(int64_t a, int64_t b)")[2:6] == [
            "    if (a) {",
            "        if (b) {",
            '            printf("%" PRId64 "\\n", INT64_C(1));',
            "        }",
        ]

    def test_call_statement(self):
        c_source = generate("to f do end to main do f() end")
        assert "    f();" in c_source.splitlines()

    def test_read_intrinsic(self):
        c_source = generate("to main do display(read() + 1) end")
        assert '    printf("%" PRId64 "\\n", haumea_read() + INT64_C(1));' in c_source

    def test_display_inside_expression(self):
        c_source = generate("to f with (x) do return x end to main do f(display(2)) end")
        assert "    f(haumea_display(INT64_C(2)));" in c_source.splitlines()

    @pytest.mark.parametrize("source_expr, c_expr", [
        ("3 > 2", "INT64_C(3) > INT64_C(2)"),
        ("1 = 1", "INT64_C(1) == INT64_C(1)"),
        ("not 0", "!INT64_C(0)"),
        ("1 and 2", "INT64_C(1) && INT64_C(2)"),
        ("0 or 1", "INT64_C(0) || INT64_C(1)"),
    ])
    def test_display_widens_int_results(self, source_expr, c_expr):
        """Comparisons and logic yield int in C, so they are cast for PRId64."""
        c_source = generate(f"to main do display({source_expr}) end")
        assert f'    printf("%" PRId64 "\\n", (int64_t)({c_expr}));' in c_source.splitlines()

    def test_display_arithmetic_not_cast(self):
        c_source = generate("to main do display(-(1 + 2)) end")
        assert '    printf("%" PRId64 "\\n", -(INT64_C(1) + INT64_C(2)));' in c_source.splitlines()


# =============================================================================
# Expressions
# =============================================================================

class TestExpressions:
    """Tests for expression translation."""

    def expr(self, source_expr: str) -> str:
        c_source = generate(
            f"to f with (a, b, c) do return {source_expr} end to main do end"
        )
        return function_body(c_source, "int64_t f(int64_t a, int64_t b, int64_t c)")[2]

    def test_operators(self):
        assert self.expr("a modulo b") == "    return a % b;"
        assert self.expr("a = b") == "    return a == b;"
        assert self.expr("a != b") == "    return a != b;"
        assert self.expr("a and b") == "    return a && b;"
        assert self.expr("a or b") == "    return a || b;"
        assert self.expr("not a") == "    return !a;"
        assert self.expr("-a") == "    return -a;"

    def test_nested_operands_parenthesized(self):
        """Compound operands are wrapped so C precedence cannot regroup them."""
        assert self.expr("a + b * c") == "    return a + (b * c);"
        assert self.expr("(a + b) * c") == "    return (a + b) * c;"
        assert self.expr("a - (b - c)") == "    return a - (b - c);"
        assert self.expr("a - b - c") == "    return (a - b) - c;"

    def test_negated_operand(self):
        assert self.expr("- -a") == "    return -(-a);"
        assert self.expr("not (a < b)") == "    return !(a < b);"

    def test_call_arguments_unparenthesized(self):
        assert self.expr("f(a + 1, b, c)") == "    return f(a + INT64_C(1), b, c);"

    def test_large_literal(self):
        assert self.expr("9223372036854775807") == "    return INT64_C(9223372036854775807);"


# =============================================================================
# Program Checks
# =============================================================================

class TestProgramChecks:
    """Tests for errors raised during translation."""

    def test_missing_main(self):
        with pytest.raises(MissingMainError):
            generate("to f do end")

    def test_empty_program(self):
        with pytest.raises(MissingMainError):
            generate("")

    def test_main_with_parameters(self):
        with pytest.raises(InvalidMainError) as exc_info:
            generate("to main with (x) do end")
        assert exc_info.value.param_count == 1

    def test_duplicate_main(self):
        with pytest.raises(DuplicateDeclarationError) as exc_info:
            generate("to main do end\nto main do end")
        error = exc_info.value
        assert isinstance(error, CodegenError)
        assert error.identifier == "main"
        assert error.location.line == 2
        assert error.original_location.line == 1

    def test_duplicate_function(self):
        with pytest.raises(DuplicateDeclarationError) as exc_info:
            generate("to f do end to f with (x) do end to main do end")
        assert exc_info.value.kind == "function"

    def test_duplicate_parameter(self):
        with pytest.raises(DuplicateDeclarationError) as exc_info:
            generate("to f with (x, x) do end to main do end")
        assert exc_info.value.kind == "parameter"
        assert exc_info.value.identifier == "x"

    def test_undeclared_identifier(self):
        with pytest.raises(UndeclaredIdentifierError) as exc_info:
            generate("to f with (count) do return cout end to main do end")
        error = exc_info.value
        assert error.kind == "identifier"
        assert error.similar_identifiers == ["count"]
        assert "did you mean 'count'?" in str(error)

    def test_parameters_are_local(self):
        with pytest.raises(UndeclaredIdentifierError):
            generate("to f with (x) do return 1 end to main do display(x) end")

    def test_undeclared_function(self):
        with pytest.raises(UndeclaredIdentifierError) as exc_info:
            generate("to square with (n) do return n * n end to main do display(sqare(2)) end")
        assert exc_info.value.kind == "function"
        assert exc_info.value.similar_identifiers == ["square"]

    def test_argument_count(self):
        with pytest.raises(ArgumentCountError) as exc_info:
            generate("to f with (a, b) do end to main do f(1) end")
        error = exc_info.value
        assert (error.function_name, error.expected, error.actual) == ("f", 2, 1)

    def test_intrinsic_argument_count(self):
        with pytest.raises(ArgumentCountError):
            generate("to main do display(1, 2) end")
        with pytest.raises(ArgumentCountError):
            generate("to main do display(read(1)) end")
        with pytest.raises(ArgumentCountError):
            generate("to main do display() end")

    def test_call_main(self):
        c_source = generate("to f do return main() end to main do end")
        assert "    return main();" in c_source.splitlines()

    @pytest.mark.parametrize("name", ["int", "while", "printf", "stdout", "int64_t"])
    def test_reserved_function_name(self, name):
        with pytest.raises(ReservedNameError) as exc_info:
            generate(f"to {name} do end to main do end")
        assert exc_info.value.identifier == name

    @pytest.mark.parametrize("name", [
        "vsnprintf", "vfprintf", "fgetpos", "getline", "fileno",
        "wcstoimax", "int_fast32_t", "uint_least8_t", "ssize_t", "wchar_t",
        "SEEK_SET", "FILENAME_MAX", "SIZE_MAX",
        "PRIu64", "PRIdMAX", "SCNx32",
        "INT32_MAX", "UINT8_MAX", "INT_LEAST16_MIN", "INTMAX_C", "UINT64_C",
        "true", "bool", "nullptr",
    ])
    def test_header_name_families_reserved(self, name):
        with pytest.raises(ReservedNameError) as exc_info:
            generate(f"to {name} do end to main do end")
        assert exc_info.value.identifier == name
        with pytest.raises(ReservedNameError):
            generate(f"to f with ({name}) do end to main do end")

    @pytest.mark.parametrize("name", ["print", "seek", "PRI", "INT", "total", "max_t1", "integer"])
    def test_near_miss_names_allowed(self, name):
        c_source = generate(f"to {name} with (x) do return x end to main do end")
        assert f"int64_t {name}(int64_t x)" in c_source

    def test_reserved_parameter_name(self):
        with pytest.raises(ReservedNameError):
            generate("to f with (char) do end to main do end")

    def test_runtime_prefix_reserved(self):
        with pytest.raises(ReservedNameError):
            generate("to haumea_display do end to main do end")

    def test_intrinsic_name_reserved(self):
        with pytest.raises(ReservedNameError):
            generate("to display with (x) do end to main do end")

    def test_parameter_named_main(self):
        with pytest.raises(ReservedNameError):
            generate("to f with (main) do end to main do end")

    def test_parameter_shadowing_function(self):
        with pytest.raises(ReservedNameError):
            generate("to f with (g) do end to g do end to main do end")

    def test_unsupported_node(self):
        """Nodes without a C translation are rejected, not skipped."""
        from dataclasses import dataclass

        @dataclass(frozen=True)
        class WhileStatement(Statement):
            pass

        program = ProgramNode(functions=(
            FunctionNode(name="main", parameters=(), body=(WhileStatement(),)),
        ))
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            CodeGenerator().generate(program)
        assert exc_info.value.feature == "WhileStatement"

    def test_error_leaves_generator_reusable(self):
        generator = CodeGenerator()
        with pytest.raises(MissingMainError):
            generator.generate(parse_source("to f do end"))
        assert "int main(void)" in generator.generate(parse_source("to main do end"))
