"""Tests for property value extraction."""

import pytest

from notion2obsidian.notion.properties import (
    FormulaProperty,
    NumberProperty,
    RollupProperty,
    extract_property_value,
    format_value,
    parse_property,
)


def text(*parts: str) -> list[dict]:
    return [{"type": "text", "plain_text": part} for part in parts]


class TestExtractPropertyValue:
    """Tests for extract_property_value on each property type."""

    def test_rich_text_joins_and_trims(self) -> None:
        prop = {"type": "rich_text", "rich_text": text(" Hello ", "World ")}
        assert extract_property_value(prop) == "Hello World"

    def test_rich_text_empty_is_none(self) -> None:
        assert extract_property_value({"type": "rich_text", "rich_text": []}) is None
        assert extract_property_value({"type": "rich_text", "rich_text": text("   ")}) is None

    def test_title_joins_runs(self) -> None:
        prop = {"type": "title", "title": text("Project ", "Plan")}
        assert extract_property_value(prop) == "Project Plan"

    def test_number_keeps_zero(self) -> None:
        assert extract_property_value({"type": "number", "number": 0}) == 0
        assert extract_property_value({"type": "number", "number": 2.5}) == 2.5

    def test_number_missing_is_none(self) -> None:
        assert extract_property_value({"type": "number", "number": None}) is None
        assert extract_property_value({"type": "number"}) is None

    def test_select(self) -> None:
        assert extract_property_value({"type": "select", "select": {"name": "Done"}}) == "Done"
        assert extract_property_value({"type": "select", "select": None}) is None

    def test_multi_select_preserves_order(self) -> None:
        prop = {
            "type": "multi_select",
            "multi_select": [{"name": "b"}, {"name": "a"}, {"name": "c"}],
        }
        assert extract_property_value(prop) == "b, a, c"

    def test_multi_select_empty_is_none(self) -> None:
        assert extract_property_value({"type": "multi_select", "multi_select": []}) is None

    def test_date_keeps_start_only(self) -> None:
        prop = {
            "type": "date",
            "date": {"start": "2024-01-01", "end": "2024-01-05", "time_zone": "Europe/Paris"},
        }
        assert extract_property_value(prop) == "2024-01-01"
        assert extract_property_value({"type": "date", "date": None}) is None

    def test_checkbox_keeps_false(self) -> None:
        assert extract_property_value({"type": "checkbox", "checkbox": False}) is False
        assert extract_property_value({"type": "checkbox", "checkbox": True}) is True
        assert extract_property_value({"type": "checkbox", "checkbox": None}) is None

    @pytest.mark.parametrize("prop_type", ["url", "email", "phone_number"])
    def test_plain_strings_are_trimmed(self, prop_type: str) -> None:
        assert extract_property_value({"type": prop_type, prop_type: "  value  "}) == "value"
        assert extract_property_value({"type": prop_type, prop_type: ""}) is None
        assert extract_property_value({"type": prop_type, prop_type: None}) is None

    def test_people_fall_back_to_id(self) -> None:
        prop = {
            "type": "people",
            "people": [
                {"object": "user", "id": "u1", "name": "Ann"},
                {"object": "user", "id": "u2"},
            ],
        }
        assert extract_property_value(prop) == "Ann, u2"

    def test_files_fall_back_to_urls(self) -> None:
        prop = {
            "type": "files",
            "files": [
                {"name": "brief.pdf", "type": "file", "file": {"url": "https://s3/brief.pdf"}},
                {"name": "", "type": "file", "file": {"url": "https://s3/raw.png"}},
                {"type": "external", "external": {"url": "https://example.com/a.jpg"}},
            ],
        }
        assert extract_property_value(prop) == "brief.pdf, https://s3/raw.png, https://example.com/a.jpg"

    def test_relation_ids(self) -> None:
        prop = {"type": "relation", "relation": [{"id": "p1"}, {"id": "p2"}], "has_more": False}
        assert extract_property_value(prop) == "p1, p2"
        assert extract_property_value({"type": "relation", "relation": []}) is None


class TestFormulaAndRollup:
    """Tests for the recursive property types."""

    def test_formula_results(self) -> None:
        assert extract_property_value({"type": "formula", "formula": {"type": "number", "number": 3}}) == 3
        assert extract_property_value({"type": "formula", "formula": {"type": "string", "string": "x"}}) == "x"
        assert extract_property_value({"type": "formula", "formula": {"type": "boolean", "boolean": False}}) is False
        assert (
            extract_property_value({"type": "formula", "formula": {"type": "date", "date": {"start": "2024-05-01"}}})
            == "2024-05-01"
        )

    def test_formula_without_result(self) -> None:
        assert extract_property_value({"type": "formula", "formula": None}) is None
        assert extract_property_value({"type": "formula", "formula": {"type": "string", "string": None}}) is None

    def test_rollup_joins_elements(self) -> None:
        prop = {
            "type": "rollup",
            "rollup": {
                "type": "array",
                "function": "show_original",
                "array": [
                    {"type": "number", "number": 1},
                    {"type": "title", "title": text("Task")},
                    {"type": "rich_text", "rich_text": []},
                    {"type": "checkbox", "checkbox": True},
                ],
            },
        }
        assert extract_property_value(prop) == "1, Task, true"

    def test_rollup_without_array_is_none(self) -> None:
        prop = {"type": "rollup", "rollup": {"type": "number", "number": 5, "function": "sum"}}
        assert extract_property_value(prop) is None

    def test_rollup_with_unknown_elements(self) -> None:
        prop = {
            "type": "rollup",
            "rollup": {
                "type": "array",
                "array": [{"type": "status", "status": {"name": "Done"}}, {"type": "number", "number": 4}],
            },
        }
        assert extract_property_value(prop) == "4"

    def test_deeply_nested_chain(self) -> None:
        prop: dict = {"type": "number", "number": 7}
        for depth in range(30):
            if depth % 2:
                prop = {"type": "formula", "formula": prop}
            else:
                prop = {"type": "rollup", "rollup": {"type": "array", "array": [prop]}}

        assert extract_property_value(prop) == "7"

    def test_parsed_models_are_recursive(self) -> None:
        parsed = parse_property(
            {
                "type": "rollup",
                "rollup": {"type": "array", "array": [{"type": "formula", "formula": {"type": "number", "number": 1}}]},
            }
        )
        assert isinstance(parsed, RollupProperty)
        inner = parsed.items()[0]
        assert isinstance(inner, FormulaProperty)
        assert isinstance(inner.result(), NumberProperty)

    def test_very_deep_formula_chain(self) -> None:
        prop: dict = {"type": "number", "number": 7}
        for _ in range(1000):
            prop = {"type": "formula", "formula": prop}

        assert extract_property_value(prop) == 7

    def test_deep_rollup_chain(self) -> None:
        prop: dict = {"type": "string", "string": "x"}
        prop = {"type": "formula", "formula": prop}
        for _ in range(100):
            prop = {"type": "rollup", "rollup": {"type": "array", "array": [prop]}}

        assert extract_property_value(prop) == "x"

    def test_malformed_rollup_element_is_skipped(self) -> None:
        prop = {
            "type": "rollup",
            "rollup": {"type": "array", "array": [{"type": "number", "number": "nope"}, {"type": "number", "number": 2}]},
        }
        assert extract_property_value(prop) == "2"


class TestExtractionNeverRaises:
    """Unknown or malformed payloads degrade to None."""

    @pytest.mark.parametrize(
        "prop",
        [
            {"type": "status", "status": {"name": "In progress"}},
            {"type": "created_time", "created_time": "2024-01-01T00:00:00.000Z"},
            {"type": "number", "number": "not a number"},
            {"type": "multi_select", "multi_select": "oops"},
            {"type": "select", "select": ["a"]},
            {"type": "rollup", "rollup": {"type": "array", "array": [42]}},
            {"no_type": True},
            {},
            None,
            {"type": ["x"]},
            {"type": {"a": 1}},
            {"type": "formula", "formula": {"type": ["number"], "number": 1}},
            {"type": "rollup", "rollup": {"type": "array", "array": [{"type": {"a": 1}}]}},
            "rich_text",
            42,
        ],
    )
    def test_degrades_to_none(self, prop: object) -> None:
        assert extract_property_value(prop) is None

    def test_deterministic(self) -> None:
        prop = {"type": "multi_select", "multi_select": [{"name": "x"}, {"name": "y"}]}
        assert extract_property_value(prop) == extract_property_value(prop)
        assert prop == {"type": "multi_select", "multi_select": [{"name": "x"}, {"name": "y"}]}


class TestFormatValue:
    """Tests for format_value."""

    def test_scalars(self) -> None:
        assert format_value(True) == "true"
        assert format_value(False) == "false"
        assert format_value(0) == "0"
        assert format_value(3.0) == "3"
        assert format_value(2.5) == "2.5"
        assert format_value("text") == "text"
        assert format_value(None) == ""
