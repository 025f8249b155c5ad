"""
Operation listing.

Walks the paginated operations endpoint of a package version and returns the
whole listing.
"""
from __future__ import annotations

import logging
from typing import List

from .client import ApihubClient
from .models import Operation

__all__ = ["list_operations", "DEFAULT_PAGE_SIZE"]

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


def list_operations(client: ApihubClient, package_id: str, version: str,
                    page_size: int = DEFAULT_PAGE_SIZE) -> List[Operation]:
    """
    Fetch every operation of a package version.

    Pages are requested from 0 upwards; the first page holding fewer than
    ``page_size`` operations is the last one.

    Args:
        client: APIHUB client
        package_id: Package identifier (full alias)
        version: Package version
        page_size: Operations per page

    Returns:
        All operations in service order

    Raises:
        ApihubError: On the first failing page, no retry
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")

    operations: List[Operation] = []
    page = 0
    while True:
        batch = client.get_operations_page(package_id, version, page=page, limit=page_size)
        logger.debug(f"Page {page}: {len(batch)} operations")
        operations.extend(batch)
        if len(batch) < page_size:
            break
        page += 1

    logger.info(f"Operations count: {len(operations)}")
    return operations
