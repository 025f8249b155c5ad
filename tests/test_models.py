"""
Tests for data models.

Covers custom-tag normalization at ingestion, wire (de)serialization of the
request bodies, and export status classification.
"""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from apihub_groups.models import (
    ExportFormat,
    ExportRequest,
    ExportState,
    ExportStatus,
    GroupRef,
    Operation,
    OperationsPage,
    TagFilter,
    normalize_tag_value,
    to_refs,
)


class TestTagNormalization:
    """Test custom-tag values are resolved into string sets."""

    def test_single_string(self):
        assert normalize_tag_value("external") == frozenset({"external"})

    def test_homogeneous_list(self):
        assert normalize_tag_value(["external", "partner"]) == frozenset({"external", "partner"})

    def test_mixed_list_keeps_only_strings(self):
        assert normalize_tag_value(["external", 1, None, {"a": "b"}, True]) == frozenset({"external"})

    @pytest.mark.parametrize("value", [None, 42, 1.5, {"external": True}, True])
    def test_other_shapes_are_empty(self, value):
        assert normalize_tag_value(value) == frozenset()

    def test_operation_normalizes_on_ingestion(self):
        op = Operation.model_validate({
            "operationId": "get-users",
            "customTags": {"x-a": "one", "x-b": ["two", "three"], "x-c": ["four", 5]},
            "packageRef": "pkg@1.0",
        })
        assert op.custom_tags == {
            "x-a": frozenset({"one"}),
            "x-b": frozenset({"two", "three"}),
            "x-c": frozenset({"four"}),
        }
        assert op.package_ref == "pkg@1.0"

    def test_missing_or_null_custom_tags(self):
        assert Operation.model_validate({"operationId": "a"}).custom_tags == {}
        assert Operation.model_validate({"operationId": "a", "customTags": None}).custom_tags == {}

    def test_tag_values_for_absent_key(self):
        op = Operation(operation_id="a", custom_tags={"x-a": "one"})
        assert op.tag_values("x-missing") == frozenset()
        assert op.has_tag_value("x-a", "one")
        assert not op.has_tag_value("x-missing", "one")


class TestOperationValidation:
    """Test malformed operation payloads are rejected."""

    def test_operation_id_required(self):
        with pytest.raises(ValidationError):
            Operation.model_validate({"customTags": {}})

    def test_custom_tags_must_be_object(self):
        with pytest.raises(ValidationError, match="customTags must be an object"):
            Operation.model_validate({"operationId": "a", "customTags": ["x"]})

    def test_operation_is_immutable(self):
        op = Operation(operation_id="a")
        with pytest.raises(ValidationError):
            op.operation_id = "b"

    def test_page_with_null_operations(self):
        assert OperationsPage.model_validate({"operations": None}).operations == []
        assert OperationsPage.model_validate({}).operations == []


class TestRefs:
    """Test projection of operations to references."""

    def test_refs_keep_order_and_drop_duplicates(self):
        ops = [Operation(operation_id=i) for i in ["b", "a", "b", "c", "a"]]
        refs = to_refs(ops)
        assert [r.operation_id for r in refs] == ["b", "a", "c"]

    def test_ref_wire_format(self):
        refs = to_refs([Operation(operation_id="get-users")])
        assert refs[0].model_dump(by_alias=True) == {"operationId": "get-users"}


class TestExportModels:
    """Test export request body and status classification."""

    def test_export_request_wire_body(self):
        group = GroupRef(package_id="pkg", version="1.0", name="public-api")
        body = ExportRequest.for_group(group, ExportFormat.JSON).to_wire()
        assert body == {
            "exportedEntity": "restOperationsGroup",
            "packageId": "pkg",
            "version": "1.0",
            "groupName": "public-api",
            "operationsSpecTransformation": "reducedSourceSpecifications",
            "format": "json",
            "removeOasExtensions": True,
        }

    @pytest.mark.parametrize("status,state,terminal", [
        ("none", ExportState.PENDING, False),
        ("pending", ExportState.PENDING, False),
        ("running", ExportState.PENDING, False),
        ("completed", ExportState.COMPLETED, True),
        ("error", ExportState.ERROR, True),
        ("ERROR", ExportState.ERROR, True),
    ])
    def test_status_classification(self, status, state, terminal):
        export_status = ExportStatus(status=status)
        assert export_status.state is state
        assert export_status.is_terminal is terminal

    @pytest.mark.parametrize("payload", [{}, {"status": None}, {"message": "queued"}])
    def test_missing_status_is_pending(self, payload):
        export_status = ExportStatus.model_validate(payload)
        assert export_status.state is ExportState.PENDING
        assert not export_status.is_terminal

    def test_format_extension(self):
        assert ExportFormat.YAML.extension == "yaml"
        assert ExportFormat("json") is ExportFormat.JSON


class TestValueObjects:
    """Test GroupRef and TagFilter validation."""

    def test_group_ref_requires_fields(self):
        with pytest.raises(ValueError, match="name is required"):
            GroupRef(package_id="pkg", version="1.0", name="")

    def test_group_ref_default_api_type(self):
        assert GroupRef(package_id="pkg", version="1.0", name="g").api_type == "rest"

    def test_tag_filter_requires_key_and_value(self):
        with pytest.raises(ValueError, match="tag key is required"):
            TagFilter(key="", value="v")
        with pytest.raises(ValueError, match="tag value is required"):
            TagFilter(key="k", value="")
