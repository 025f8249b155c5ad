"""
APIHUB HTTP client.

Thin wrapper over ``httpx.Client`` exposing the handful of APIHUB endpoints the
group pipeline needs. Each call checks the exact status code the endpoint
acknowledges with and maps everything else onto the errors in ``errors``.
"""
from __future__ import annotations

import json
import logging
from typing import Iterable, List, Optional, Sequence
from urllib.parse import quote

import httpx

from . import __version__
from .errors import (
    ApihubTransportError,
    MalformedResponseError,
    UnexpectedStatusError,
)
from .models import (
    ExportRequest,
    ExportStatus,
    GroupRef,
    Operation,
    OperationRef,
    OperationsPage,
)
from .settings import TOKEN_HEADER, Settings

logger = logging.getLogger(__name__)

LIST_OPERATIONS_PATH = "/api/v2/packages/{package}/versions/{version}/{api_type}/operations"
GROUP_PATH_V2 = "/api/v2/packages/{package}/versions/{version}/{api_type}/groups/{group}"
GROUPS_PATH_V3 = "/api/v3/packages/{package}/versions/{version}/{api_type}/groups"
GROUP_PATH_V3 = GROUPS_PATH_V3 + "/{group}"
EXPORT_PATH = "/api/v1/export"
EXPORT_STATUS_PATH = "/api/v1/export/{export_id}/status"

JSON_CONTENT_TYPE = "application/json"


class ApihubClient:
    """
    HTTP client for the APIHUB REST API.

    One instance per CLI invocation. Not thread-safe, the pipeline is
    sequential anyway.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize the client.

        Args:
            settings: Connection settings (base URL, token, timeout)
            transport: Optional transport override, used by tests to plug in
                ``httpx.MockTransport``
        """
        self.settings = settings
        self.client = httpx.Client(
            base_url=settings.api_root,
            timeout=httpx.Timeout(settings.http_timeout_s),
            follow_redirects=True,
            headers={
                TOKEN_HEADER: settings.token,
                "User-Agent": f"apihub-groups/{__version__}",
            },
            transport=transport,
        )

    # Operations

    def get_operations_page(self, package_id: str, version: str, page: int,
                            limit: int) -> List[Operation]:
        """
        Fetch one page of operations.

        Raises:
            UnexpectedStatusError: If the service does not answer 200
            MalformedResponseError: If the payload is not a valid operations page
            ApihubTransportError: On network failure
        """
        stage = f"list operations (page {page})"
        path = LIST_OPERATIONS_PATH.format(
            package=_segment(package_id),
            version=_segment(version),
            api_type=self.settings.api_type,
        )
        params = {"skipRefs": "true", "limit": limit, "page": page}
        response = self._request("GET", path, stage=stage, expected=(200,), params=params)

        try:
            return OperationsPage.model_validate(response.json()).operations
        except ValueError as e:  # JSON, UTF-8 and pydantic validation errors
            raise MalformedResponseError(f"{stage}: invalid payload: {e}") from e

    # Groups

    def group_exists(self, group: GroupRef) -> bool:
        response = self._request(
            "GET", self._group_path(GROUP_PATH_V2, group),
            stage=f"check group {group.name!r}", expected=(200, 404),
        )
        return response.status_code == 200

    def delete_group(self, group: GroupRef) -> None:
        self._request(
            "DELETE", self._group_path(GROUP_PATH_V2, group),
            stage=f"delete group {group.name!r}", expected=(204,),
        )

    def create_group(self, group: GroupRef) -> None:
        path = GROUPS_PATH_V3.format(
            package=_segment(group.package_id),
            version=_segment(group.version),
            api_type=group.api_type,
        )
        self._request(
            "POST", path,
            stage=f"create group {group.name!r}", expected=(201,),
            files=_form_fields(groupName=group.name),
        )

    def update_group_operations(self, group: GroupRef, refs: Sequence[OperationRef]) -> None:
        """Replace the operation set of a group with ``refs``."""
        payload = json.dumps([ref.model_dump(by_alias=True) for ref in refs])
        self._request(
            "PATCH", self._group_path(GROUP_PATH_V3, group),
            stage=f"update group {group.name!r}", expected=(204,),
            files=_form_fields(operations=payload),
        )

    # Export

    def start_export(self, request: ExportRequest) -> str:
        """
        Submit an export job.

        Returns:
            Export id assigned by the service
        """
        stage = f"start export of {request.group_name!r}"
        response = self._request(
            "POST", EXPORT_PATH, stage=stage, expected=(202,), json=request.to_wire(),
        )
        try:
            export_id = response.json().get("exportId")
        except (ValueError, AttributeError) as e:
            raise MalformedResponseError(f"{stage}: invalid payload: {e}") from e
        if not export_id or not isinstance(export_id, str):
            raise MalformedResponseError(f"{stage}: response has no exportId: {response.text}")
        return export_id

    def get_export_status(self, export_id: str) -> ExportStatus:
        """
        Query an export job.

        A JSON body is a status object; any other content type is the
        finished artifact.
        """
        stage = f"export {export_id} status"
        response = self._request(
            "GET", EXPORT_STATUS_PATH.format(export_id=_segment(export_id)),
            stage=stage, expected=(200,),
        )

        content_type = response.headers.get("Content-Type", "")
        if JSON_CONTENT_TYPE not in content_type:
            return ExportStatus(status="completed", artifact=response.content)

        try:
            return ExportStatus.model_validate(response.json())
        except ValueError as e:  # JSON, UTF-8 and pydantic validation errors
            raise MalformedResponseError(f"{stage}: invalid payload: {e}") from e

    # Plumbing

    def _request(self, method: str, path: str, *, stage: str,
                 expected: Iterable[int], **kwargs) -> httpx.Response:
        """
        Issue a request and check its status code.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            stage: Human description used in error messages
            expected: Status codes that count as success
            **kwargs: Passed through to ``httpx.Client.request``

        Raises:
            ApihubTransportError: If no response was received
            UnexpectedStatusError: If the status code is not in ``expected``
        """
        logger.debug(f"{method} {path} ({stage})")
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise ApihubTransportError(f"{stage}: {e}") from e

        if response.status_code not in tuple(expected):
            logger.error(f"{stage} failed with status {response.status_code}")
            raise UnexpectedStatusError(stage, response.status_code, response.text)
        return response

    def _group_path(self, template: str, group: GroupRef) -> str:
        return template.format(
            package=_segment(group.package_id),
            version=_segment(group.version),
            api_type=group.api_type,
            group=_segment(group.name),
        )

    def close(self):
        """Close HTTP client."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def _segment(value: str) -> str:
    """Percent-encode a value as a single path segment."""
    return quote(value, safe="")


def _form_fields(**fields: str) -> dict:
    """Plain multipart form fields (no filename) in httpx ``files`` form."""
    return {name: (None, value) for name, value in fields.items()}
