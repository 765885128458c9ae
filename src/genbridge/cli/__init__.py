"""
Command-line interface for genbridge.

This package contains CLI implementations using Click.
Uses only the public API: from genbridge import ...
"""

from genbridge.cli.commands import cli, main

__all__ = ["cli", "main"]
