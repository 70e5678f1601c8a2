"""
Unified CLI Error Handling
==========================

Provides consistent error handling and exit codes for the gbrom commands.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    DECODE_ERROR = 1     # Malformed header or undecodable machine code
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Unified exception handler for the CLI.

    Formats the error message appropriately, optionally prints traceback
    in verbose mode, and exits with the correct exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        error_type: Optional prefix for the error message (e.g., "Header")

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from gameboy_rom.errors import RomError

    if isinstance(error, RomError):
        # Decoding errors already carry the offset and field
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.DECODE_ERROR)

    elif isinstance(error, click.BadParameter):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        # Unexpected internal error
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
