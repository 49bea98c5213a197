"""Command-line interface for hitboxer.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bars for sprite processing
- Verbose/quiet output modes
- Dry-run mode for inspecting a sheet
- Detailed error reporting
"""

from hitboxer.cli.app import cli, main

__all__ = ["cli", "main"]
