"""Obsidian Bases (.base) view file for an imported database.

The file lists only properties that hold data somewhere in the import, so
the table view has no empty columns. See https://help.obsidian.md/bases/syntax
"""

from notion2obsidian.obsidian.vault import sanitize_filename

# Frontmatter keys every imported note carries, with their column titles.
METADATA_COLUMNS = {
    "notion_id": "Notion ID",
    "created": "Created (Notion)",
    "updated": "Updated (Notion)",
}

MAX_ORDERED_PROPERTIES = 8
TABLE_LIMIT = 100
CARD_LIMIT = 50


def _quote(text: str) -> str:
    return '"' + text.replace('"', '\\"') + '"'


def render_base(database_title: str, active_properties: list[str]) -> str:
    """Build the .base file text for a database and its active properties."""
    lines = [
        f"# Obsidian Base file for {database_title}",
        "# Generated from Notion API",
        "",
        "properties:",
    ]

    for name in active_properties:
        lines.append(f"  {name}:")
        lines.append(f"    displayName: {_quote(name)}")
    for key, display_name in METADATA_COLUMNS.items():
        lines.append(f"  {key}:")
        lines.append(f"    displayName: {_quote(display_name)}")
    lines.append("")

    lines += [
        "views:",
        "  - type: table",
        f"    name: {_quote(f'{database_title} Table')}",
        f"    limit: {TABLE_LIMIT}",
        "    filters:",
        "      and:",
        '        - file.ext == "md"',
        "        - notion_id != null",
        "        - file.inFolder(this.file.folder)",
        "    order:",
        "      - file.name",
    ]
    lines += [f"      - {name}" for name in active_properties[:MAX_ORDERED_PROPERTIES]]
    lines += [
        "      - created",
        "      - updated",
        "",
        "  - type: card",
        f"    name: {_quote(f'{database_title} Cards')}",
        f"    limit: {CARD_LIMIT}",
        "",
        "# Instructions:",
        "# 1. This .base file creates native Obsidian database views",
        "# 2. Requires Obsidian 1.9+ with the Bases core plugin enabled",
        "# 3. Open this file in Obsidian to see your database",
        "# 4. You can edit views, filters, and properties as needed",
    ]
    return "\n".join(lines) + "\n"


def base_filename(database_title: str) -> str:
    return f"{sanitize_filename(database_title)}.base"
