"""Tests for interactive selection."""

from __future__ import annotations

import io
from unittest.mock import Mock, patch

import pytest
from rich.console import Console

from stackwipe.cli.selector import format_timestamp, parse_selection, resource_table, select_resources
from stackwipe.models.resource_kind import ResourceKind
from tests.fixtures.resources import bucket, iam_role, rest_api, utc


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=120)


class TestParseSelection:
    """Test suite for parse_selection."""

    @pytest.mark.parametrize("text", ["", "  ", "none", "n", "NONE"])
    def test_nothing_selected(self, text: str) -> None:
        assert parse_selection(text, 5) == []

    @pytest.mark.parametrize("text", ["all", "a", "*", "ALL"])
    def test_everything_selected(self, text: str) -> None:
        assert parse_selection(text, 3) == [0, 1, 2]

    def test_numbers_and_ranges(self) -> None:
        assert parse_selection("1, 3-5,3", 6) == [0, 2, 3, 4]

    @pytest.mark.parametrize("text", ["0", "7", "2-9", "5-3", "abc", "1-"])
    def test_invalid_input(self, text: str) -> None:
        with pytest.raises(ValueError):
            parse_selection(text, 6)


class TestSelectResources:
    """Test suite for select_resources."""

    @patch("stackwipe.cli.selector.typer.prompt")
    def test_selection_keeps_catalog_order(self, mock_prompt: Mock, console: Console) -> None:
        roles = [iam_role("newest", utc(2024, 3, 1)), iam_role("middle", utc(2024, 2, 1)), iam_role("old", utc(2024, 1, 1))]
        buckets = [bucket("b1")]
        catalog = {ResourceKind.BUCKET: buckets, ResourceKind.IAM_ROLE: roles}
        mock_prompt.side_effect = ["", "3,1"]

        selection = select_resources(catalog, console)

        assert selection == {ResourceKind.IAM_ROLE: [roles[0], roles[2]]}
        assert mock_prompt.call_count == 2

    @patch("stackwipe.cli.selector.typer.prompt")
    def test_empty_kinds_are_not_prompted(self, mock_prompt: Mock, console: Console) -> None:
        mock_prompt.return_value = "all"

        selection = select_resources({ResourceKind.LAMBDA_FUNCTION: [], ResourceKind.BUCKET: [bucket("b")]}, console)

        assert list(selection) == [ResourceKind.BUCKET]
        assert mock_prompt.call_count == 1

    @patch("stackwipe.cli.selector.typer.prompt")
    def test_invalid_answer_prompts_again(self, mock_prompt: Mock, console: Console) -> None:
        mock_prompt.side_effect = ["9", "1"]

        selection = select_resources({ResourceKind.BUCKET: [bucket("b")]}, console)

        assert selection == {ResourceKind.BUCKET: [bucket("b")]}
        assert "out of range" in console.file.getvalue()


class TestResourceTable:
    """Test suite for resource_table rendering."""

    def test_rows_show_name_and_id(self, console: Console) -> None:
        table = resource_table(ResourceKind.API_GATEWAY, [rest_api("abc123", "orders-api", utc(2024, 1, 15, 10))])
        console.print(table)
        output = console.file.getvalue()

        assert "orders-api" in output
        assert "abc123" in output
        assert "2024-01-15 10:00" in output
        assert table.row_count == 1

    def test_missing_timestamp(self) -> None:
        assert format_timestamp(ResourceKind.BUCKET, {"Name": "b"}) == "-"
