"""
haumeac - Haumea Compiler Command-Line Interface
================================================

This module implements the command-line interface for the Haumea
compiler. It translates a Haumea program into a single C file that any
C99 compiler can build.

Usage Examples
--------------
Basic compilation:
    $ haumeac compile factorial.hm

With output file:
    $ haumeac compile factorial.hm -o fact.c

From standard input to standard output:
    $ cat factorial.hm | haumeac compile -

Full pipeline to a native binary:
    $ haumeac compile factorial.hm && cc factorial.c -o factorial

Debugging:
    $ haumeac -v compile factorial.hm --ast
"""

from pathlib import Path
from typing import Optional
import logging

import click

from haumea import __version__
from haumea.cli.errors import handle_cli_exception
from haumea.lang import HaumeaCompiler, CompilerOptions, Lexer
from haumea.lang.ast import ASTPrinter

logger = logging.getLogger(__name__)

STDIO = "-"


# =============================================================================
# CLI Context
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores options given to the command group.
    """

    def __init__(self) -> None:
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(name)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


def _read_input(input_file: Path) -> tuple[str, str]:
    """Return (source, filename) for a path or '-' for standard input."""
    if str(input_file) == STDIO:
        return click.get_text_stream("stdin").read(), "<stdin>"

    if not input_file.exists():
        raise FileNotFoundError(f"Source file not found: {input_file}")
    return input_file.read_text(encoding="utf-8"), str(input_file)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output and debug logging",
)
@click.version_option(version=__version__, prog_name="haumeac")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    Compile Haumea programs to C.

    The generated C file includes its own small runtime and can be built
    with any C99 compiler:

    \b
        haumeac compile factorial.hm
        cc factorial.c -o factorial
        ./factorial
    """
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# Compile Command
# =============================================================================

@main.command("compile")
@click.argument(
    "input_file",
    metavar="INPUT",
    type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
    help="Output C file, or '-' for stdout (default: INPUT with .c suffix)",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the AST instead of C (for debugging)",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream instead of C (for debugging)",
)
@pass_context
def compile_command(
    ctx: Context,
    input_file: Path,
    output: Optional[Path],
    ast: bool,
    tokens: bool,
) -> None:
    """
    Compile a Haumea source file to C.

    INPUT is the Haumea source file (.hm), or '-' to read standard input.

    Nothing is written unless the whole program compiles, and the input
    file is never overwritten.

    \b
    Examples:
        haumeac compile fact.hm              # Outputs fact.c
        haumeac compile fact.hm -o out.c     # Specify output file
        haumeac compile fact.hm -o -         # Print C to stdout
        haumeac compile fact.hm --ast        # Show the syntax tree
    """
    try:
        source, filename = _read_input(input_file)

        if tokens:
            token_list = list(Lexer(source, filename).tokenize())
            for token in token_list:
                click.echo(repr(token))
            return

        compiler = HaumeaCompiler(CompilerOptions())
        result = compiler.compile_source(source, filename)

        if ast:
            click.echo(ASTPrinter().print(result.ast))
            return

        if output is None:
            output = Path(STDIO) if filename == "<stdin>" else input_file.with_suffix(".c")

        if str(output) == STDIO:
            click.echo(result.c_source, nl=False)
            return

        if filename != "<stdin>" and output.resolve() == input_file.resolve():
            raise click.BadParameter(
                f"output file {output} is the input file; choose another with -o"
            )

        output.write_text(result.c_source, encoding="utf-8")
        logger.debug("wrote %d bytes to %s", len(result.c_source), output)

        if ctx.verbose:
            click.echo(f"Tokenized: {result.token_count} tokens")
            click.echo(f"Parsed: {len(result.ast.functions)} functions")
        click.echo(f"Compiled {input_file} -> {output}")

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


if __name__ == "__main__":
    main()
