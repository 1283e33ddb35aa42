"""
Unit tests for the process data models.
"""

import dataclasses

import pytest

from proclabel.models import (
    AppConfig,
    IdentifiedProcess,
    ProcessCategory,
    ProcessQuery,
    format_process_display,
)


@pytest.mark.unit
class TestProcessModels:
    """Test cases for queries, labels and display formatting."""

    def test_format_with_port(self):
        identified = IdentifiedProcess("vite:shop", ProcessCategory.WEB)

        assert format_process_display(identified, 5173) == "vite:shop:5173"
        assert format_process_display(identified) == "vite:shop"

    def test_labels_are_immutable(self):
        identified = IdentifiedProcess("npm:dev", ProcessCategory.TOOL)

        with pytest.raises(dataclasses.FrozenInstanceError):
            identified.display_name = "other"

    def test_category_values(self):
        assert ProcessCategory("container") is ProcessCategory.CONTAINER
        assert ProcessCategory.DATABASE == "database"

    def test_query_defaults(self):
        query = ProcessQuery(pid=1, command="launchd")

        assert (query.port, query.cwd, query.ppid) == (None, None, None)

    def test_app_config_sections_are_independent(self):
        first, second = AppConfig(), AppConfig()
        first.identifier.max_entries = 1

        assert second.identifier.max_entries == 1000
