"""
CLI module for pathdoc.

Provides the command-line interface using Click.
"""

from pathdoc.cli.main import cli, main

__all__ = ["main", "cli"]
