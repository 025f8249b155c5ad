"""
Data models for APIHUB operations, groups and exports.

These Pydantic models validate the service payloads at the boundary so the
pipeline stages only ever see normalized, immutable values.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "Operation",
    "OperationRef",
    "OperationsPage",
    "GroupRef",
    "TagFilter",
    "ExportFormat",
    "ExportState",
    "ExportRequest",
    "ExportStatus",
    "normalize_tag_value",
    "to_refs",
]


def normalize_tag_value(value: Any) -> FrozenSet[str]:
    """
    Resolve an untyped custom-tag value into a set of strings.

    The service returns tag values as a single string, a list of strings or a
    list of mixed JSON values. Only string members count; anything else
    contributes nothing.
    """
    if isinstance(value, str):
        return frozenset((value,))
    if isinstance(value, (list, tuple, set, frozenset)):
        return frozenset(item for item in value if isinstance(item, str))
    return frozenset()


class Operation(BaseModel):
    """A single API operation of a package version."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    operation_id: str = Field(..., alias="operationId", min_length=1)
    custom_tags: Dict[str, FrozenSet[str]] = Field(default_factory=dict, alias="customTags")
    package_ref: Optional[str] = Field(default=None, alias="packageRef")

    @field_validator("custom_tags", mode="before")
    @classmethod
    def normalize_custom_tags(cls, v):
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError(f"customTags must be an object, got {type(v).__name__}")
        return {str(key): normalize_tag_value(value) for key, value in v.items()}

    def tag_values(self, key: str) -> FrozenSet[str]:
        """Return the normalized values of a custom tag (empty when absent)."""
        return self.custom_tags.get(key, frozenset())

    def has_tag_value(self, key: str, value: str) -> bool:
        return value in self.tag_values(key)


class OperationRef(BaseModel):
    """Minimal projection of an operation sent when assigning group membership."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    operation_id: str = Field(..., alias="operationId")


class OperationsPage(BaseModel):
    """One page of the operations listing."""
    model_config = ConfigDict(extra="ignore")

    operations: List[Operation] = Field(default_factory=list)

    @field_validator("operations", mode="before")
    @classmethod
    def null_is_empty(cls, v):
        return [] if v is None else v


def to_refs(operations: Iterable[Operation]) -> List[OperationRef]:
    """
    Project operations to references, dropping repeated ids.

    First occurrence wins so source order is kept.
    """
    seen = set()
    refs = []
    for op in operations:
        if op.operation_id in seen:
            continue
        seen.add(op.operation_id)
        refs.append(OperationRef(operation_id=op.operation_id))
    return refs


@dataclass(frozen=True)
class GroupRef:
    """Identity of an operation group inside a package version."""
    package_id: str
    version: str
    name: str
    api_type: str = "rest"

    def __post_init__(self):
        for field_name in ("package_id", "version", "name"):
            if not getattr(self, field_name):
                raise ValueError(f"{field_name} is required")

    def __str__(self) -> str:
        return f"{self.package_id}@{self.version}/{self.name}"


@dataclass(frozen=True)
class TagFilter:
    """Custom tag key and the value an operation must carry under it."""
    key: str
    value: str

    def __post_init__(self):
        if not self.key:
            raise ValueError("tag key is required")
        if not self.value:
            raise ValueError("tag value is required")


class ExportFormat(str, Enum):
    """Output formats accepted by the export endpoint."""
    YAML = "yaml"
    JSON = "json"

    @property
    def extension(self) -> str:
        return self.value


class ExportState(str, Enum):
    """Export job states. Anything the service reports besides these is pending."""
    PENDING = "pending"
    COMPLETED = "completed"
    ERROR = "error"


class ExportRequest(BaseModel):
    """Body of ``POST /api/v1/export`` for an operations group."""
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    exported_entity: str = Field(default="restOperationsGroup", alias="exportedEntity")
    package_id: str = Field(..., alias="packageId")
    version: str
    group_name: str = Field(..., alias="groupName")
    operations_spec_transformation: str = Field(
        default="reducedSourceSpecifications", alias="operationsSpecTransformation"
    )
    format: ExportFormat = ExportFormat.YAML
    remove_oas_extensions: bool = Field(default=True, alias="removeOasExtensions")

    @classmethod
    def for_group(cls, group: GroupRef, fmt: ExportFormat) -> ExportRequest:
        return cls(
            exported_entity=f"{group.api_type}OperationsGroup",
            package_id=group.package_id,
            version=group.version,
            group_name=group.name,
            format=fmt,
        )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ExportStatus(BaseModel):
    """
    One answer of the export status endpoint.

    The service either returns a JSON status object or, once the job is done,
    the artifact itself. The latter is represented as ``completed`` with
    ``artifact`` set.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    # Missing or null status reads as pending
    status: str = ""
    message: Optional[str] = None
    artifact: Optional[bytes] = None

    @field_validator("status", mode="before")
    @classmethod
    def null_is_empty(cls, v):
        return "" if v is None else v

    @property
    def state(self) -> ExportState:
        try:
            return ExportState(self.status.lower())
        except ValueError:
            return ExportState.PENDING

    @property
    def is_terminal(self) -> bool:
        return self.state is not ExportState.PENDING
