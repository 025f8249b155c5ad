"""
Group pipeline facade - application service layer.

Sits between the CLI and the pipeline stages. Owns the stage order
(list -> filter -> rebuild group -> export) and the configuration policy,
while the CLI stays a thin layer of flag parsing and printing.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from ..client import ApihubClient
from ..export import ExportOrchestrator
from ..filtering import filter_operations
from ..groups import GroupManager, RebuildResult
from ..lister import list_operations
from ..models import ExportFormat, GroupRef, TagFilter
from ..settings import Settings

logger = logging.getLogger(__name__)

# Filter used by the reduced ``sync`` variant
HARDCODED_TAG_FILTER = TagFilter(key="x-api-audience", value="external")


@dataclass(frozen=True)
class PipelineConfig:
    """
    Configuration for one pipeline run.

    Centralizes the policy flags so the facade methods take only the
    what (group, filter) and not the how.
    """
    force: bool = False                             # Recreate group if it exists
    export: bool = True                             # Run the export stage
    output_format: ExportFormat = ExportFormat.YAML
    output_dir: Path = Path(".")


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of a pipeline run, for printing."""
    group: GroupRef
    tag_filter: TagFilter
    total_operations: int
    matched_operations: int
    rebuild: Optional[RebuildResult] = None
    export_path: Optional[Path] = None

    @property
    def skipped(self) -> bool:
        """True when nothing matched and the group was left untouched."""
        return self.matched_operations == 0


class GroupPipeline:
    """
    Application service facade for the group workflow.

    Stateless apart from the injected client, settings and config. Exceptions
    from the stages bubble up unchanged for central mapping to exit codes.
    """

    def __init__(self, config: PipelineConfig, client: ApihubClient, settings: Settings,
                 sleep: Callable[[float], None] = time.sleep):
        self.cfg = config
        self.client = client
        self.settings = settings
        self.groups = GroupManager(client)
        self.exporter = ExportOrchestrator(
            client,
            interval_s=settings.export_poll_interval_s,
            max_attempts=settings.export_poll_attempts,
            sleep=sleep,
        )

    def run(self, group: GroupRef, tag_filter: TagFilter) -> PipelineResult:
        """
        Run list -> filter -> rebuild -> export for ``group``.

        An empty filter result ends the run successfully before any group
        request is made.
        """
        operations = list_operations(
            self.client, group.package_id, group.version, page_size=self.settings.page_size
        )

        matched = filter_operations(operations, tag_filter)
        logger.info(f"Found {len(matched)} operations matching {tag_filter.key}={tag_filter.value}")

        if not matched:
            logger.info("No operations matching criteria found, exiting")
            return PipelineResult(
                group=group,
                tag_filter=tag_filter,
                total_operations=len(operations),
                matched_operations=0,
            )

        rebuild = self.groups.rebuild(group, matched, force=self.cfg.force)

        export_path = None
        if self.cfg.export:
            export_path = self.exporter.export(group, self.cfg.output_format, self.cfg.output_dir)

        return PipelineResult(
            group=group,
            tag_filter=tag_filter,
            total_operations=len(operations),
            matched_operations=len(matched),
            rebuild=rebuild,
            export_path=export_path,
        )
