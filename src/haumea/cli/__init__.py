"""
Haumea Command-Line Interface
=============================

This package provides the command-line tool for Haumea:

- **haumeac**: Haumea to C compiler

The tool is a Click-based CLI application with comprehensive help and
error reporting.
"""

__all__ = ["haumeac"]
