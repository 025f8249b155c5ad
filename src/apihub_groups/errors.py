"""
APIHUB client error classes.

Every failure the pipeline can hit maps onto one of these. All of them are
fatal; the CLI maps them to exit codes by class name.
"""
from __future__ import annotations

from typing import Optional


class ApihubError(Exception):
    """Base class for all APIHUB errors."""
    pass


class ApihubTransportError(ApihubError):
    """
    Network or transport failure.
    
    Raised when the request never produced an HTTP response
    (connection refused, DNS failure, timeout).
    """
    pass


class UnexpectedStatusError(ApihubError):
    """
    The service answered with a status code the calling stage does not accept.
    
    Keeps the stage name, status code and response body so the CLI can
    report them.
    """
    
    def __init__(self, stage: str, status_code: int, body: str = ""):
        message = f"{stage}: unexpected status {status_code}"
        if body:
            message = f"{message}, body: {body}"
        super().__init__(message)
        self.stage = stage
        self.status_code = status_code
        self.body = body


class MalformedResponseError(ApihubError):
    """Response payload could not be decoded or failed validation."""
    pass


class ExportFailedError(ApihubError):
    """
    Export job ended badly.
    
    Raised when the status endpoint reports ``error`` (the service message is
    preserved) or reports completion without any artifact bytes.
    """
    
    def __init__(self, message: str, export_id: Optional[str] = None):
        super().__init__(message)
        self.export_id = export_id


class ExportTimeoutError(ApihubError):
    """Export did not reach a terminal state within the poll budget."""
    
    def __init__(self, export_id: str, attempts: int):
        super().__init__(f"export {export_id} timed out after {attempts} attempts")
        self.export_id = export_id
        self.attempts = attempts


__all__ = [
    "ApihubError",
    "ApihubTransportError",
    "UnexpectedStatusError",
    "MalformedResponseError",
    "ExportFailedError",
    "ExportTimeoutError",
]
