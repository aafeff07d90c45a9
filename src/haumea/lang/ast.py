"""
Haumea Abstract Syntax Tree (AST) Definitions
=============================================

This module defines the AST node types produced by the Haumea parser and
consumed by the code generator.

Node Hierarchy
--------------
ASTNode (base)
├── ProgramNode - root node, ordered functions
├── FunctionNode - 'to name with (params) do ... end'
├── Statements
│   ├── ReturnStatement - return expr
│   ├── IfStatement - if cond then do ... end [else do ... end]
│   └── ExpressionStatement - a call made for its side effect
└── Expressions
    ├── NumberLiteral - integer constant
    ├── IdentifierExpression - parameter reference
    ├── BinaryExpression - a op b
    ├── UnaryExpression - -a, not a
    └── CallExpression - f(a, b)

Design Notes
------------
- All nodes are frozen dataclasses; child sequences are tuples
- Each node stores its source location for error reporting. Locations
  are excluded from equality so two trees with the same shape compare
  equal regardless of where they were parsed from
- The tree has no back-references and no sharing
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Optional

from haumea.errors import SourceLocation


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node appears
    """
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Expression(ASTNode):
    """Base class for all expression nodes."""
    pass


@dataclass(frozen=True)
class Statement(ASTNode):
    """Base class for all statement nodes."""
    pass


# =============================================================================
# Operators
# =============================================================================

class BinaryOperator(Enum):
    """Binary operators, valued by their source spelling."""
    # Arithmetic
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "modulo"

    # Comparison
    EQUAL = "="
    NOT_EQUAL = "!="
    LESS = "<"
    GREATER = ">"
    LESS_EQ = "<="
    GREATER_EQ = ">="

    # Logical
    LOGICAL_AND = "and"
    LOGICAL_OR = "or"


class UnaryOperator(Enum):
    """Unary operators, valued by their source spelling."""
    NEGATE = "-"
    LOGICAL_NOT = "not"


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class NumberLiteral(Expression):
    """Integer constant."""
    value: int = 0


@dataclass(frozen=True)
class IdentifierExpression(Expression):
    """Reference to a parameter of the enclosing function."""
    name: str = ""


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Binary operation expression (a op b).

    Attributes:
        operator: The binary operator
        left: Left operand expression
        right: Right operand expression
    """
    operator: BinaryOperator = None
    left: Expression = None
    right: Expression = None


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """
    Prefix operation expression (op x).

    Attributes:
        operator: The unary operator
        operand: The operand expression
    """
    operator: UnaryOperator = None
    operand: Expression = None


@dataclass(frozen=True)
class CallExpression(Expression):
    """
    Function call.

    Attributes:
        function: Name of the called function or intrinsic
        arguments: Argument expressions in call order
    """
    function: str = ""
    arguments: tuple[Expression, ...] = ()


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class ReturnStatement(Statement):
    """Return statement; value is always present."""
    value: Expression = None


@dataclass(frozen=True)
class IfStatement(Statement):
    """
    If statement with optional else branch.

    Attributes:
        condition: The condition expression
        then_branch: Statements run when the condition is non-zero
        else_branch: Statements run otherwise, or None when absent
    """
    condition: Expression = None
    then_branch: tuple[Statement, ...] = ()
    else_branch: Optional[tuple[Statement, ...]] = None


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    """
    Call used as a statement, e.g. display(x).

    Attributes:
        expression: The call expression
    """
    expression: CallExpression = None


# =============================================================================
# Declarations and Program Root
# =============================================================================

@dataclass(frozen=True)
class FunctionNode(ASTNode):
    """
    Function definition.

    Attributes:
        name: Function name
        parameters: Parameter names in declaration order
        body: Statements of the function body
    """
    name: str = ""
    parameters: tuple[str, ...] = ()
    body: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class ProgramNode(ASTNode):
    """
    Root node of the AST representing a complete Haumea program.

    Attributes:
        functions: Function definitions in source order
    """
    functions: tuple[FunctionNode, ...] = ()

    def find_function(self, name: str) -> Optional[FunctionNode]:
        """Return the first function with the given name, or None."""
        for function in self.functions:
            if function.name == name:
                return function
        return None


# =============================================================================
# AST Visitor Base Class
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care
    about. Node types without a handler fall through to generic_visit,
    which visits children.

    Usage:
        class CallCounter(ASTVisitor):
            def __init__(self):
                self.calls = 0

            def visit_CallExpression(self, node):
                self.calls += 1
                self.generic_visit(node)
    """

    def visit(self, node: ASTNode) -> Any:
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit all child nodes in field order."""
        for node_field in fields(node):
            value = getattr(node, node_field.name)
            if isinstance(value, ASTNode):
                self.visit(value)
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(ast))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _block(self, title: str, statements: tuple[Statement, ...]) -> None:
        self._emit(title)
        self.indent_level += 1
        for stmt in statements:
            self.visit(stmt)
        self.indent_level -= 1

    def visit_ProgramNode(self, node: ProgramNode):
        self._emit("Program")
        self.indent_level += 1
        for function in node.functions:
            self.visit(function)
        self.indent_level -= 1

    def visit_FunctionNode(self, node: FunctionNode):
        params = ", ".join(node.parameters)
        self._block(f"Function {node.name}({params})", node.body)

    def visit_ReturnStatement(self, node: ReturnStatement):
        self._emit("Return")
        self.indent_level += 1
        self.visit(node.value)
        self.indent_level -= 1

    def visit_IfStatement(self, node: IfStatement):
        self._emit("If")
        self.indent_level += 1
        self.visit(node.condition)
        self._block("Then", node.then_branch)
        if node.else_branch is not None:
            self._block("Else", node.else_branch)
        self.indent_level -= 1

    def visit_ExpressionStatement(self, node: ExpressionStatement):
        self._emit("ExpressionStatement")
        self.indent_level += 1
        self.visit(node.expression)
        self.indent_level -= 1

    def visit_BinaryExpression(self, node: BinaryExpression):
        self._emit(f"Binary {node.operator.value}")
        self.indent_level += 1
        self.visit(node.left)
        self.visit(node.right)
        self.indent_level -= 1

    def visit_UnaryExpression(self, node: UnaryExpression):
        self._emit(f"Unary {node.operator.value}")
        self.indent_level += 1
        self.visit(node.operand)
        self.indent_level -= 1

    def visit_CallExpression(self, node: CallExpression):
        self._emit(f"Call {node.function}")
        self.indent_level += 1
        for arg in node.arguments:
            self.visit(arg)
        self.indent_level -= 1

    def visit_IdentifierExpression(self, node: IdentifierExpression):
        self._emit(f"Identifier {node.name}")

    def visit_NumberLiteral(self, node: NumberLiteral):
        self._emit(f"Number {node.value}")
