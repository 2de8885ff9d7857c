"""
calc-checker Command-Line Interface
===================================

This package provides the command-line tool for the checker:

- **calccheck**: check a calculator program and print its parse trace

The tool is a Click-based CLI application with help text and uniform
exit codes (see calc_checker.cli.errors).
"""

__all__ = ["calccheck"]
