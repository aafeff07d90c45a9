"""
Haumea Recursive Descent Parser
===============================

This module implements a recursive descent parser for the Haumea
language. It pulls tokens from the lexer one at a time, with a single
token of lookahead and no backtracking, and builds an Abstract Syntax
Tree (AST).

Grammar (EBNF)
--------------
program     ::= function* EOF
function    ::= 'to' IDENT ('with' '(' params? ')')? 'do' block 'end'
params      ::= IDENT (',' IDENT)*
block       ::= statement*
statement   ::= return_stmt | if_stmt | call
return_stmt ::= 'return' expr
if_stmt     ::= 'if' expr 'then' 'do' block 'end'
                ('else' (if_stmt | 'do' block 'end'))?

Expression Precedence (lowest to highest)
-----------------------------------------
1. logical_or      or
2. logical_and     and
3. comparison      =  !=  <  >  <=  >=
4. additive        +  -
5. multiplicative  *  /  modulo
6. unary           -  not
7. primary         NUMBER, IDENT, IDENT '(' args ')', '(' expr ')'

All binary levels are left-associative.

Example Usage
-------------
>>> from haumea.lang.parser import parse_source
>>> program = parse_source("to main do display(2 + 3 * 4) end")
>>> program.functions[0].name
'main'
"""

from typing import Callable, Iterable, Optional
import logging

from haumea.errors import SourceLocation
from haumea.lang.lexer import Lexer, Token, TokenType
from haumea.lang.ast import (
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
    UnexpectedTokenError,
    UnmatchedBlockError,
    InvalidStatementError,
    TrailingInputError,
)

logger = logging.getLogger(__name__)


# Keywords that can never appear inside an open block; seeing one there
# means an 'end' is missing.
BLOCK_BREAKERS = ("to", "else")


class Parser:
    """
    Recursive descent parser for Haumea.

    Parsing stops at the first structural error; there is no error
    recovery because the only consumer is a batch compiler.

    Attributes:
        filename: Source filename for error reporting
        source_lines: Original source lines for error context
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: Tokens from the lexer; any iterable, consumed lazily
            filename: Source filename for error messages
            source_lines: Original source lines for error context
        """
        self.filename = filename
        self.source_lines = source_lines or []

        self._tokens = iter(tokens)
        self._current: Optional[Token] = None
        self._advance()

    def parse(self) -> ProgramNode:
        """
        Parse the token stream into an AST.

        Returns:
            ProgramNode containing every function in source order

        Raises:
            LexError: Raised lazily by the token stream
            ParseError: On the first grammar error
        """
        functions = []

        while not self._at_end():
            if self._current.is_keyword("end"):
                raise TrailingInputError(
                    self._current.describe(),
                    self._current.location,
                    self._get_source_line(self._current.line),
                )
            functions.append(self._parse_function())

        logger.debug("%s: parsed %d functions", self.filename, len(functions))
        return ProgramNode(
            location=SourceLocation(self.filename, 1, 1),
            functions=tuple(functions),
        )

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._current.type == TokenType.EOF

    def _advance(self) -> Optional[Token]:
        """Consume the current token and load the next one."""
        previous = self._current
        if previous is None or previous.type != TokenType.EOF:
            self._current = next(self._tokens, None)
            if self._current is None:
                # Stream ended without an EOF token; synthesize one
                line, column = (previous.line, previous.column) if previous else (1, 1)
                self._current = Token(TokenType.EOF, None, line, column, self.filename)
        return previous

    def _expect_keyword(self, word: str) -> Token:
        if self._current.is_keyword(word):
            return self._advance()
        raise self._unexpected(f"'{word}'")

    def _expect_punctuation(self, symbol: str) -> Token:
        if self._current.is_punctuation(symbol):
            return self._advance()
        raise self._unexpected(f"'{symbol}'")

    def _expect_identifier(self, what: str) -> Token:
        if self._current.type == TokenType.IDENTIFIER:
            return self._advance()
        raise self._unexpected(what)

    def _unexpected(self, expected: str) -> UnexpectedTokenError:
        return UnexpectedTokenError(
            self._current.describe(),
            expected=expected,
            location=self._current.location,
            source_line=self._get_source_line(self._current.line),
        )

    def _get_source_line(self, line: int) -> Optional[str]:
        """Get source line for error reporting."""
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    # =========================================================================
    # Functions and Blocks
    # =========================================================================

    def _parse_function(self) -> FunctionNode:
        location = self._current.location
        self._expect_keyword("to")
        name = self._expect_identifier("function name").value

        parameters = []
        if self._current.is_keyword("with"):
            self._advance()
            self._expect_punctuation("(")
            if not self._current.is_punctuation(")"):
                parameters.append(self._expect_identifier("parameter name").value)
                while self._current.is_punctuation(","):
                    self._advance()
                    parameters.append(self._expect_identifier("parameter name").value)
            self._expect_punctuation(")")

        opener = self._expect_keyword("do")
        body = self._parse_block(opener)

        return FunctionNode(
            location=location,
            name=name,
            parameters=tuple(parameters),
            body=body,
        )

    def _parse_block(self, opener: Token) -> tuple[Statement, ...]:
        """
        Parse statements up to and including the 'end' closing a block.

        Args:
            opener: The 'do' token that opened the block
        """
        statements = []

        while not self._current.is_keyword("end"):
            if self._at_end() or any(self._current.is_keyword(w) for w in BLOCK_BREAKERS):
                raise UnmatchedBlockError(
                    self._current.describe(),
                    location=self._current.location,
                    opened_at=opener.location,
                    source_line=self._get_source_line(self._current.line),
                )
            statements.append(self._parse_statement())

        self._advance()
        return tuple(statements)

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_statement(self) -> Statement:
        token = self._current

        if token.is_keyword("return"):
            return self._parse_return_statement()
        if token.is_keyword("if"):
            return self._parse_if_statement()
        if token.type == TokenType.KEYWORD:
            raise self._unexpected("statement")

        expr = self._parse_expression()
        if not isinstance(expr, CallExpression):
            raise InvalidStatementError(
                token.describe(),
                location=token.location,
                source_line=self._get_source_line(token.line),
            )
        return ExpressionStatement(location=token.location, expression=expr)

    def _parse_return_statement(self) -> ReturnStatement:
        location = self._current.location
        self._expect_keyword("return")
        value = self._parse_expression()
        return ReturnStatement(location=location, value=value)

    def _parse_if_statement(self) -> IfStatement:
        """
        Parse if statement.

        Each branch is a do ... end block; 'else if' chains nest a
        new IfStatement as the only statement of the else branch.
        """
        location = self._current.location
        self._expect_keyword("if")
        condition = self._parse_expression()
        self._expect_keyword("then")
        opener = self._expect_keyword("do")
        then_branch = self._parse_block(opener)

        else_branch = None
        if self._current.is_keyword("else"):
            self._advance()
            if self._current.is_keyword("if"):
                else_branch = (self._parse_if_statement(),)
            else:
                opener = self._expect_keyword("do")
                else_branch = self._parse_block(opener)

        return IfStatement(
            location=location,
            condition=condition,
            then_branch=then_branch,
            else_branch=else_branch,
        )

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_expression(self) -> Expression:
        return self._parse_logical_or()

    def _parse_logical_or(self) -> Expression:
        return self._parse_binary(
            self._parse_logical_and,
            {"or": BinaryOperator.LOGICAL_OR},
        )

    def _parse_logical_and(self) -> Expression:
        return self._parse_binary(
            self._parse_comparison,
            {"and": BinaryOperator.LOGICAL_AND},
        )

    def _parse_comparison(self) -> Expression:
        """Parse comparison (= != < > <= >=); binds looser than additive."""
        return self._parse_binary(
            self._parse_additive,
            {
                "=": BinaryOperator.EQUAL,
                "!=": BinaryOperator.NOT_EQUAL,
                "<": BinaryOperator.LESS,
                ">": BinaryOperator.GREATER,
                "<=": BinaryOperator.LESS_EQ,
                ">=": BinaryOperator.GREATER_EQ,
            },
        )

    def _parse_additive(self) -> Expression:
        return self._parse_binary(
            self._parse_multiplicative,
            {
                "+": BinaryOperator.ADD,
                "-": BinaryOperator.SUBTRACT,
            },
        )

    def _parse_multiplicative(self) -> Expression:
        return self._parse_binary(
            self._parse_unary,
            {
                "*": BinaryOperator.MULTIPLY,
                "/": BinaryOperator.DIVIDE,
                "modulo": BinaryOperator.MODULO,
            },
        )

    def _parse_binary(
        self,
        operand_parser: Callable[[], Expression],
        operators: dict[str, BinaryOperator],
    ) -> Expression:
        """
        Generic left-associative binary expression parser.

        Args:
            operand_parser: Function to parse operands
            operators: Map of operator symbols to binary operators
        """
        expr = operand_parser()

        while self._current.type == TokenType.OPERATOR and self._current.value in operators:
            op_token = self._advance()
            right = operand_parser()
            expr = BinaryExpression(
                location=expr.location,
                operator=operators[op_token.value],
                left=expr,
                right=right,
            )

        return expr

    def _parse_unary(self) -> Expression:
        """Parse prefix '-' and 'not' (right-associative)."""
        token = self._current
        if token.is_operator("-", "not"):
            self._advance()
            operand = self._parse_unary()
            return UnaryExpression(
                location=token.location,
                operator=UnaryOperator(token.value),
                operand=operand,
            )
        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        """Parse primary expression (literals, identifiers, calls, parenthesized)."""
        token = self._current

        if token.type == TokenType.NUMBER:
            self._advance()
            return NumberLiteral(location=token.location, value=token.value)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            if self._current.is_punctuation("("):
                return self._parse_call_arguments(token)
            return IdentifierExpression(location=token.location, name=token.value)

        if token.is_punctuation("("):
            self._advance()
            expr = self._parse_expression()
            self._expect_punctuation(")")
            return expr

        raise self._unexpected("expression")

    def _parse_call_arguments(self, name_token: Token) -> CallExpression:
        self._expect_punctuation("(")
        arguments = []
        if not self._current.is_punctuation(")"):
            arguments.append(self._parse_expression())
            while self._current.is_punctuation(","):
                self._advance()
                arguments.append(self._parse_expression())
        self._expect_punctuation(")")

        return CallExpression(
            location=name_token.location,
            function=name_token.value,
            arguments=tuple(arguments),
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str, filename: str = "<input>") -> ProgramNode:
    """
    Parse Haumea source code into an AST.

    This is a convenience function that combines lexing and parsing.

    Raises:
        LexError: If tokenizing fails
        ParseError: If parsing fails
    """
    lexer = Lexer(source, filename)
    parser = Parser(lexer.tokenize(), filename, source.splitlines())
    return parser.parse()
