"""
Haumea Test Configuration
=========================

Shared fixtures for the Haumea test suite:

- compile_and_run: build generated C with the system C compiler and run it
- evaluate: a small reference interpreter over the AST, used to check
  that compiled programs print what the source means
- examples_dir: the directory of sample Haumea programs
"""

import shutil
import subprocess
from pathlib import Path

import pytest

from haumea.lang import compile_source, parse_source
from haumea.lang.ast import (
    BinaryExpression,
    BinaryOperator,
    CallExpression,
    ExpressionStatement,
    IdentifierExpression,
    IfStatement,
    NumberLiteral,
    ReturnStatement,
    UnaryExpression,
    UnaryOperator,
)

ROOT = Path(__file__).resolve().parent.parent

C_COMPILER = shutil.which("cc") or shutil.which("gcc") or shutil.which("clang")


@pytest.fixture
def examples_dir() -> Path:
    return ROOT / "examples"


@pytest.fixture
def compile_and_run(tmp_path):
    """Return a helper that compiles Haumea source to a binary and runs it."""
    if C_COMPILER is None:
        pytest.skip("no C compiler installed")

    def _run(source: str, stdin: str = "", std: str = "c99") -> str:
        c_file = tmp_path / "program.c"
        c_file.write_text(compile_source(source, "program.hm"), encoding="utf-8")
        out_bin = tmp_path / "program"

        # std=None builds in the compiler's default dialect
        flags = [f"-std={std}"] if std else []
        build = subprocess.run(
            [C_COMPILER, *flags, "-Wall", "-Werror=format", "-o", str(out_bin), str(c_file)],
            capture_output=True,
            text=True,
            timeout=60,
        )
        assert build.returncode == 0, f"C compilation failed:\n{build.stderr}"

        result = subprocess.run(
            [str(out_bin)],
            input=stdin,
            capture_output=True,
            text=True,
            timeout=10,
        )
        assert result.returncode == 0
        return result.stdout

    return _run


# =============================================================================
# Reference Evaluator
# =============================================================================

class _Return(Exception):
    def __init__(self, value: int):
        self.value = value


def _c_div(a: int, b: int) -> int:
    """C integer division truncates toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _c_mod(a: int, b: int) -> int:
    return a - b * _c_div(a, b)


class Evaluator:
    """
    Direct interpreter for Haumea ASTs.

    Mirrors the C translation: 64-bit values, truncating division, 1/0
    truth values, short-circuit 'and'/'or', and an implicit return of 0.
    """

    def __init__(self, program, inputs=()):
        self.functions = {f.name: f for f in program.functions}
        self.inputs = list(inputs)
        self.output: list[str] = []

    def run(self) -> str:
        self.call("main", [])
        return "".join(f"{line}\n" for line in self.output)

    def call(self, name: str, args: list[int]) -> int:
        function = self.functions[name]
        env = dict(zip(function.parameters, args))
        try:
            self.block(function.body, env)
        except _Return as ret:
            return ret.value
        return 0

    def block(self, statements, env) -> None:
        for stmt in statements:
            if isinstance(stmt, ReturnStatement):
                raise _Return(self.expr(stmt.value, env))
            if isinstance(stmt, IfStatement):
                if self.expr(stmt.condition, env):
                    self.block(stmt.then_branch, env)
                elif stmt.else_branch is not None:
                    self.block(stmt.else_branch, env)
            elif isinstance(stmt, ExpressionStatement):
                self.expr(stmt.expression, env)

    def expr(self, node, env) -> int:
        if isinstance(node, NumberLiteral):
            return node.value
        if isinstance(node, IdentifierExpression):
            return env[node.name]
        if isinstance(node, UnaryExpression):
            value = self.expr(node.operand, env)
            if node.operator == UnaryOperator.NEGATE:
                return -value
            return int(not value)
        if isinstance(node, BinaryExpression):
            return self.binary(node, env)
        if isinstance(node, CallExpression):
            args = [self.expr(arg, env) for arg in node.arguments]
            if node.function == "display":
                self.output.append(str(args[0]))
                return 0
            if node.function == "read":
                return self.inputs.pop(0) if self.inputs else 0
            return self.call(node.function, args)
        raise TypeError(f"cannot evaluate {node!r}")

    def binary(self, node, env) -> int:
        op = node.operator
        left = self.expr(node.left, env)
        if op == BinaryOperator.LOGICAL_AND:
            return int(bool(left) and bool(self.expr(node.right, env)))
        if op == BinaryOperator.LOGICAL_OR:
            return int(bool(left) or bool(self.expr(node.right, env)))

        right = self.expr(node.right, env)
        table = {
            BinaryOperator.ADD: lambda: left + right,
            BinaryOperator.SUBTRACT: lambda: left - right,
            BinaryOperator.MULTIPLY: lambda: left * right,
            BinaryOperator.DIVIDE: lambda: _c_div(left, right),
            BinaryOperator.MODULO: lambda: _c_mod(left, right),
            BinaryOperator.EQUAL: lambda: int(left == right),
            BinaryOperator.NOT_EQUAL: lambda: int(left != right),
            BinaryOperator.LESS: lambda: int(left < right),
            BinaryOperator.GREATER: lambda: int(left > right),
            BinaryOperator.LESS_EQ: lambda: int(left <= right),
            BinaryOperator.GREATER_EQ: lambda: int(left >= right),
        }
        return table[op]()


@pytest.fixture
def evaluate():
    """Return a helper that runs Haumea source through the reference evaluator."""

    def _evaluate(source: str, inputs=()) -> str:
        return Evaluator(parse_source(source), inputs).run()

    return _evaluate
