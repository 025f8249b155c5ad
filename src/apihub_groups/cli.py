"""
APIHUB groups CLI

Two verbs over the same pipeline:
- export: filter operations by a custom tag given on the command line, rebuild
  the group and export it to ``{group}.{format}``
- sync: filter by the built-in tag, rebuild the group, no export
"""
from __future__ import annotations

import logging
from pathlib import Path

import typer

from .cli_context import CLIContext
from .models import ExportFormat, GroupRef, TagFilter
from .pipeline import HARDCODED_TAG_FILTER, GroupPipeline, PipelineConfig, run_and_exit
from .pipeline.printers import print_pipeline_summary

app = typer.Typer(name="apihub-groups", help="Build and export APIHUB operation groups")

# Shared option declarations. The camel-case aliases keep old invocations working.
_APIHUB_URL = typer.Option(..., "--apihub-url", "--apihubURL", envvar="APIHUB_URL",
                           help="Base URL of the APIHUB instance")
_PACKAGE_ID = typer.Option(..., "--package-id", "--packageId",
                           help="Package unique identifier (full alias)")
_VERSION = typer.Option(..., "--version", help="Package version")
_GROUP = typer.Option(..., "--group", help="Operation group name")
_TOKEN = typer.Option(..., "--token", envvar="APIHUB_TOKEN", help="Personal access token")
_FORCE = typer.Option(False, "--force", help="Recreate group if it exists")
_VERBOSE = typer.Option(False, "--verbose", help="Show detailed output")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _run(apihub_url: str, token: str, package_id: str, version: str, group_name: str,
         tag_filter: TagFilter, config: PipelineConfig, verbose: bool) -> None:
    with CLIContext.from_options(apihub_url=apihub_url, token=token) as context:
        group = GroupRef(
            package_id=package_id,
            version=version,
            name=group_name,
            api_type=context.settings.api_type,
        )
        pipeline = GroupPipeline(config=config, client=context.client, settings=context.settings)
        result = pipeline.run(group, tag_filter)
    print_pipeline_summary(result, verbose=verbose)


@app.command()
def export(
    apihub_url: str = _APIHUB_URL,
    package_id: str = _PACKAGE_ID,
    version: str = _VERSION,
    group: str = _GROUP,
    token: str = _TOKEN,
    x_key: str = typer.Option(..., "--x-key", help="Custom tag key"),
    x_value: str = typer.Option(..., "--x-value", help="Custom tag value"),
    force: bool = _FORCE,
    output_format: ExportFormat = typer.Option(
        ExportFormat.YAML, "--output-format", "--outputFormat", case_sensitive=False,
        help="Export output format",
    ),
    output_dir: Path = typer.Option(
        Path("."), "--output-dir", file_okay=False, help="Directory for the exported file",
    ),
    verbose: bool = _VERBOSE,
) -> None:
    """Rebuild a group from tagged operations and export it."""

    def _export() -> None:
        _setup_logging(verbose)
        _run(
            apihub_url, token,
            package_id, version, group,
            TagFilter(key=x_key, value=x_value),
            PipelineConfig(force=force, export=True, output_format=output_format,
                           output_dir=output_dir),
            verbose,
        )

    run_and_exit(_export)


@app.command()
def sync(
    apihub_url: str = _APIHUB_URL,
    package_id: str = _PACKAGE_ID,
    version: str = _VERSION,
    group: str = _GROUP,
    token: str = _TOKEN,
    force: bool = _FORCE,
    verbose: bool = _VERBOSE,
) -> None:
    """Rebuild a group from operations carrying the built-in tag (no export)."""

    def _sync() -> None:
        _setup_logging(verbose)
        _run(
            apihub_url, token,
            package_id, version, group,
            HARDCODED_TAG_FILTER,
            PipelineConfig(force=force, export=False),
            verbose,
        )

    run_and_exit(_sync)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
