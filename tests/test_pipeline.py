"""
Test GroupPipeline facade wiring.

Runs the whole list -> filter -> group -> export chain against the fake
APIHUB and checks which requests were (not) made.
"""
from __future__ import annotations

from unittest.mock import Mock

import pytest

from apihub_groups.errors import UnexpectedStatusError
from apihub_groups.models import ExportFormat, TagFilter
from apihub_groups.pipeline import HARDCODED_TAG_FILTER, GroupPipeline, PipelineConfig
from tests.fakes import make_operations

TAG = TagFilter(key="x-audience", value="external")


def _pipeline(client, settings, tmp_path, **config):
    config.setdefault("output_dir", tmp_path)
    return GroupPipeline(config=PipelineConfig(**config), client=client, settings=settings,
                         sleep=Mock())


class TestGroupPipeline:

    def test_full_run(self, fake_apihub, client, settings, group, tmp_path):
        fake_apihub.operations = (
            make_operations(120, tag_value=["external", "partner"])
            + make_operations(5, tag_value="internal", prefix="private")
        )
        fake_apihub.export_statuses = [{"status": "none"}, b"{}"]

        result = _pipeline(client, settings, tmp_path, output_format=ExportFormat.JSON).run(group, TAG)

        assert result.total_operations == 125
        assert result.matched_operations == 120
        assert result.rebuild.operation_count == 120
        assert result.export_path == tmp_path / "public-api.json"
        assert result.export_path.read_bytes() == b"{}"
        assert fake_apihub.groups["public-api"] == [f"op-{i}" for i in range(120)]
        assert fake_apihub.actions == ["list", "list", "create", "update", "export", "status", "status"]

    def test_empty_match_short_circuits(self, fake_apihub, client, settings, group, tmp_path):
        fake_apihub.operations = make_operations(3, tag_value="internal")

        result = _pipeline(client, settings, tmp_path, force=True).run(group, TAG)

        assert result.skipped
        assert result.rebuild is None
        assert result.export_path is None
        assert fake_apihub.actions == ["list"]
        assert list(tmp_path.iterdir()) == []

    def test_force_recreates_existing_group(self, fake_apihub, client, settings, group, tmp_path):
        fake_apihub.operations = make_operations(2)
        fake_apihub.groups["public-api"] = ["stale"]

        result = _pipeline(client, settings, tmp_path, force=True, export=False).run(group, TAG)

        assert result.rebuild.deleted
        assert fake_apihub.mutations == ["delete", "create", "update"]
        assert fake_apihub.count("delete") == fake_apihub.count("create") == fake_apihub.count("update") == 1
        assert fake_apihub.groups["public-api"] == ["op-0", "op-1"]

    def test_export_disabled(self, fake_apihub, client, settings, group, tmp_path):
        fake_apihub.operations = make_operations(1)

        result = _pipeline(client, settings, tmp_path, export=False).run(group, TAG)

        assert result.export_path is None
        assert fake_apihub.count("export") == 0

    def test_group_failure_stops_before_export(self, fake_apihub, client, settings, group, tmp_path):
        fake_apihub.operations = make_operations(1)
        fake_apihub.failures["create"] = (500, "nope")

        with pytest.raises(UnexpectedStatusError):
            _pipeline(client, settings, tmp_path).run(group, TAG)

        assert "update" not in fake_apihub.actions
        assert "export" not in fake_apihub.actions

    def test_hardcoded_filter_is_plain_configuration(self, fake_apihub, client, settings, group, tmp_path):
        fake_apihub.operations = make_operations(
            2, tag_key=HARDCODED_TAG_FILTER.key, tag_value=HARDCODED_TAG_FILTER.value
        )

        result = _pipeline(client, settings, tmp_path, export=False).run(group, HARDCODED_TAG_FILTER)

        assert result.matched_operations == 2

    def test_page_size_comes_from_settings(self, fake_apihub, client, group, tmp_path):
        from apihub_groups.settings import Settings
        small = Settings(base_url="http://apihub.test", token="t", page_size=2)
        fake_apihub.operations = make_operations(5, tag_value="internal")

        _pipeline(client, small, tmp_path).run(group, TAG)

        assert fake_apihub.count("list") == 3
