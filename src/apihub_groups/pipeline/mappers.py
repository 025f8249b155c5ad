"""
Error mapping and CLI utilities.

Provides centralized exception-to-exit-code mapping and a CLI command wrapper
so every Typer command reports failures the same way.
"""
from __future__ import annotations

import typer
from typing import Callable, TypeVar

T = TypeVar('T')

EXIT_CODES = {
    "ValidationError": 2,
    "ValueError": 2,
    "ApihubTransportError": 3,
    "UnexpectedStatusError": 4,
    "MalformedResponseError": 5,
    "ExportFailedError": 6,
    "ExportTimeoutError": 7,
}

FALLBACK_EXIT_CODE = 1


def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to exit code.

    - 2: Invalid input (ValueError, pydantic ValidationError)
    - 3: Network/transport failure
    - 4: Unexpected HTTP status
    - 5: Malformed response payload
    - 6: Export reported an error or returned no data
    - 7: Export timed out
    - 1: Anything else
    """
    return EXIT_CODES.get(type(exc).__name__, FALLBACK_EXIT_CODE)


def run_and_exit(func: Callable[[], T]) -> T:
    """
    Unified error wrapper for CLI commands.

    Runs ``func``; on failure prints the error with its context to stderr and
    raises ``typer.Exit`` with the mapped exit code.

    Raises:
        typer.Exit: With the mapped exit code if ``func`` raises
    """
    try:
        return func()
    except Exception as e:
        from .printers import print_error
        print_error(e)
        raise typer.Exit(code=exit_code_for(e)) from e
