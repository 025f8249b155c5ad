"""Custom tag filtering of operations."""
from __future__ import annotations

from typing import Iterable, List

from .models import Operation, TagFilter

__all__ = ["filter_operations"]


def filter_operations(operations: Iterable[Operation], tag_filter: TagFilter) -> List[Operation]:
    """
    Keep the operations whose ``tag_filter.key`` values contain ``tag_filter.value``.

    Source order is preserved. Operations without the tag are skipped.
    """
    return [op for op in operations if op.has_tag_value(tag_filter.key, tag_filter.value)]
