"""
Human-readable output formatting.

Keeps all CLI output in one place so commands stay thin.
"""
from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .facade import PipelineResult

_console = Console(highlight=False, soft_wrap=True)


def print_pipeline_summary(result: PipelineResult, verbose: bool = False) -> None:
    """
    Print the outcome of a pipeline run.

    Args:
        result: Pipeline result to display
        verbose: Also show the filter and package coordinates
    """
    group = result.group
    _console.print(f"[bold]Group:[/] {escape(group.name)}")
    if verbose:
        _console.print(f"[bold]Package:[/] {escape(group.package_id)} {escape(group.version)} ({group.api_type})")
        _console.print(f"[bold]Filter:[/] {escape(result.tag_filter.key)}={escape(result.tag_filter.value)}")

    table = Table(title="Operations")
    table.add_column("Listed", justify="right")
    table.add_column("Matched", justify="right")
    table.add_row(str(result.total_operations), str(result.matched_operations))
    _console.print(table)

    if result.skipped:
        _console.print("No operations matching criteria found, group left unchanged")
        return

    if result.rebuild is not None:
        if result.rebuild.deleted:
            _console.print("Existing group deleted")
        _console.print(f"Group updated with {result.rebuild.operation_count} operations")

    if result.export_path is not None:
        _console.print(f"Export result saved to {escape(str(result.export_path))}")


def print_error(exc: BaseException) -> None:
    """Print a failure on stderr."""
    typer.echo(f"Error: {exc}", err=True)
