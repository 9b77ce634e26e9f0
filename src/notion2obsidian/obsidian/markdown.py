"""Render a Notion page as a Markdown note with frontmatter."""

import re

from notion2obsidian.models import NormalizedValue, PropertySchema, Record, plain_text
from notion2obsidian.notion.properties import extract_property_value, format_value
from notion2obsidian.notion.schema import is_title_property
from notion2obsidian.obsidian.vault import UNTITLED

MAX_UNQUOTED_LENGTH = 100
LINE_BREAK = re.compile(r"\r\n|\r|\n")


def resolve_title(record: Record, schema: PropertySchema) -> str:
    """Text of the page's title property, or "Untitled"."""
    title_property = schema.title_property
    if title_property is None:
        return UNTITLED

    prop = record.properties.get(title_property)
    if not isinstance(prop, dict):
        return UNTITLED
    return plain_text(prop.get("title")) or UNTITLED


def escape_frontmatter_value(value: NormalizedValue) -> str:
    """Format a value for a single ``key: value`` frontmatter line.

    Line breaks (``\\n``, ``\\r\\n`` or a lone ``\\r``) become single spaces
    and double quotes are backslash-escaped. The result is wrapped in double
    quotes when the value contained a colon or a line break or is longer
    than 100 characters.
    """
    raw = format_value(value)
    text = LINE_BREAK.sub(" ", raw).replace('"', '\\"')
    if ":" in text or LINE_BREAK.search(raw) or len(text) > MAX_UNQUOTED_LENGTH:
        return f'"{text}"'
    return text


def render_frontmatter(record: Record, schema: PropertySchema) -> list[str]:
    lines = [
        "---",
        f"notion_id: {record.id}",
        f"created: {record.created_time}",
        f"updated: {record.last_edited_time}",
    ]

    for name, prop in record.properties.items():
        if is_title_property(name, prop, schema):
            continue
        value = extract_property_value(prop)
        if value is None or not format_value(value).strip():
            continue
        lines.append(f"{name}: {escape_frontmatter_value(value)}")

    lines.append("---")
    return lines


def render_document(record: Record, schema: PropertySchema, title: str) -> str:
    """Full note text: frontmatter, a level-1 heading and an empty body."""
    lines = render_frontmatter(record, schema)
    lines += ["", f"# {title}", ""]
    return "\n".join(lines) + "\n"
