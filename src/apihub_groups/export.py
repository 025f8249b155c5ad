"""
Group export orchestration.

Submits an export job for an operation group, polls its status at a constant
interval and writes the finished artifact to disk.

Polling is driven by tenacity: the status call is retried while it returns a
non-terminal status, with ``wait_fixed`` between attempts and
``stop_after_attempt`` as the budget. Errors raised by the status call are not
retried.
"""
from __future__ import annotations

import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Callable, Union

from tenacity import RetryError, Retrying, retry_if_result, stop_after_attempt, wait_fixed

from .client import ApihubClient
from .errors import ExportFailedError, ExportTimeoutError
from .models import ExportFormat, ExportRequest, ExportState, ExportStatus, GroupRef

__all__ = ["ExportOrchestrator", "write_artifact_atomically", "export_filename"]

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_S = 5.0
DEFAULT_POLL_ATTEMPTS = 30


def export_filename(group: GroupRef, fmt: ExportFormat) -> str:
    """File name of an exported group: ``{groupName}.{format}``."""
    return f"{group.name}.{fmt.extension}"


def write_artifact_atomically(target_path: Path, data: bytes) -> None:
    """
    Write ``data`` to ``target_path`` via temp file + rename.

    A failure never leaves a partial file at ``target_path``.
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(prefix=".apihub.tmp.", dir=target_path.parent)
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "wb") as out:
            out.write(data)
            out.flush()
            os.fsync(out.fileno())
        os.replace(temp_path, target_path)
    except Exception:
        try:
            temp_path.unlink()
        except FileNotFoundError:
            pass
        raise


class ExportOrchestrator:
    """
    Drives one export job from submission to saved file.

    State machine: SUBMITTED -> PENDING* -> COMPLETED | ERROR, with a timeout
    once ``max_attempts`` status polls have returned PENDING.
    """

    def __init__(self, client: ApihubClient, *,
                 interval_s: float = DEFAULT_POLL_INTERVAL_S,
                 max_attempts: int = DEFAULT_POLL_ATTEMPTS,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Args:
            client: APIHUB client
            interval_s: Constant delay between status polls
            max_attempts: Maximum number of status polls
            sleep: Sleep function, injectable for tests
        """
        if max_attempts <= 0:
            raise ValueError(f"max_attempts must be positive, got {max_attempts}")
        self.client = client
        self.interval_s = interval_s
        self.max_attempts = max_attempts
        self.sleep = sleep

    def submit(self, group: GroupRef, fmt: ExportFormat) -> str:
        export_id = self.client.start_export(ExportRequest.for_group(group, fmt))
        logger.info(f"Export started, id: {export_id}")
        return export_id

    def wait(self, export_id: str) -> bytes:
        """
        Poll until the export finishes and return the artifact.

        Raises:
            ExportFailedError: Service reported an error, or completed without bytes
            ExportTimeoutError: Still pending after ``max_attempts`` polls
            ApihubError: Any failure of the status call itself
        """
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.interval_s),
            retry=retry_if_result(lambda status: not status.is_terminal),
            before_sleep=lambda state: logger.debug(
                f"Export {export_id} pending (attempt {state.attempt_number}/{self.max_attempts})"
            ),
            sleep=self.sleep,
        )
        try:
            status: ExportStatus = retrying(self.client.get_export_status, export_id)
        except RetryError as e:
            logger.error(f"Export {export_id} timed out after {self.max_attempts} attempts")
            raise ExportTimeoutError(export_id, self.max_attempts) from e

        if status.state is ExportState.ERROR:
            raise ExportFailedError(
                f"export {export_id} failed: {status.message or 'no message'}", export_id
            )
        if not status.artifact:
            raise ExportFailedError(f"export {export_id} data is empty", export_id)
        return status.artifact

    def export(self, group: GroupRef, fmt: ExportFormat,
               output_dir: Union[str, Path] = ".") -> Path:
        """
        Submit, wait and save.

        Returns:
            Path of the written artifact
        """
        export_id = self.submit(group, fmt)
        artifact = self.wait(export_id)

        target = Path(output_dir) / export_filename(group, fmt)
        write_artifact_atomically(target, artifact)
        logger.info(f"Export result saved to {target}")
        return target
