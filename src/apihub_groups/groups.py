"""
Operation group management.

Wraps the group endpoints and enforces the rebuild order:
delete (forced, existing groups only) -> create -> set membership.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .client import ApihubClient
from .models import GroupRef, Operation, to_refs

__all__ = ["GroupManager", "RebuildResult"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RebuildResult:
    """What ``GroupManager.rebuild`` did to the remote group."""
    group: GroupRef
    deleted: bool
    operation_count: int


class GroupManager:
    """Remote operation group lifecycle for one APIHUB client."""

    def __init__(self, client: ApihubClient):
        self.client = client

    def exists(self, group: GroupRef) -> bool:
        return self.client.group_exists(group)

    def delete(self, group: GroupRef) -> None:
        self.client.delete_group(group)
        logger.info(f"Existing group {group.name!r} deleted")

    def create(self, group: GroupRef) -> None:
        self.client.create_group(group)
        logger.info(f"Group {group.name!r} created")

    def set_membership(self, group: GroupRef, operations: Sequence[Operation]) -> int:
        """
        Replace the group's operations with ``operations``.

        Repeated operation ids are sent once.

        Returns:
            Number of operation references sent
        """
        refs = to_refs(operations)
        self.client.update_group_operations(group, refs)
        logger.info(f"Group {group.name!r} updated with {len(refs)} operations")
        return len(refs)

    def rebuild(self, group: GroupRef, operations: Sequence[Operation], *,
                force: bool = False) -> RebuildResult:
        """
        Create ``group`` and fill it with ``operations``.

        Args:
            group: Target group
            operations: Exact membership of the group
            force: Delete the group first if it already exists. Without it an
                existing group makes the create step fail.

        Returns:
            RebuildResult describing the changes

        Raises:
            ApihubError: From the first failing step; later steps are skipped
        """
        deleted = False
        if force and self.exists(group):
            self.delete(group)
            deleted = True

        self.create(group)
        count = self.set_membership(group, operations)
        return RebuildResult(group=group, deleted=deleted, operation_count=count)
