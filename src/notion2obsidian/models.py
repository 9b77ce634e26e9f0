"""Data models for notion2obsidian."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

UNTITLED_DATABASE = "Untitled Database"

# Output of the property extractor. None is the only "empty" marker:
# 0, False and "" are all real values.
NormalizedValue = str | int | float | bool | None


def plain_text(runs: list[dict] | None) -> str:
    """Concatenate the plain_text of a list of Notion rich text runs."""
    return "".join(run.get("plain_text") or "" for run in runs or [])


class Database(BaseModel):
    """A Notion database as listed by search."""

    id: str
    title: str = UNTITLED_DATABASE
    properties: list[str] = Field(default_factory=list, description="Declared property names")

    @classmethod
    def from_notion(cls, raw: dict) -> "Database":
        """Parse a database object from /search or /databases/{id}.

        Expected structure:
        {
            "object": "database",
            "id": "...",
            "title": [{"plain_text": "Tasks"}],
            "properties": {"Name": {"type": "title", ...}, ...},
        }
        """
        return cls(
            id=raw["id"],
            title=plain_text(raw.get("title")) or UNTITLED_DATABASE,
            properties=list((raw.get("properties") or {}).keys()),
        )


class PropertySchema(BaseModel):
    """Declared property types of one database."""

    types: dict[str, str] = Field(default_factory=dict, description="Property name -> type tag")

    @classmethod
    def from_notion(cls, raw: dict) -> "PropertySchema":
        """Parse the properties section of a /databases/{id} response."""
        props = raw.get("properties") or {}
        return cls(types={name: (prop or {}).get("type", "") for name, prop in props.items()})

    @property
    def title_property(self) -> str | None:
        """Name of the property typed `title`, if any."""
        for name, prop_type in self.types.items():
            if prop_type == "title":
                return name
        return None

    def is_title(self, name: str) -> bool:
        return self.types.get(name) == "title"


class Record(BaseModel):
    """A Notion page inside a database."""

    id: str
    created_time: str = ""
    last_edited_time: str = ""
    properties: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_notion(cls, raw: dict) -> "Record":
        """Parse a page object from a database query."""
        return cls(
            id=raw["id"],
            created_time=raw.get("created_time") or "",
            last_edited_time=raw.get("last_edited_time") or "",
            properties=raw.get("properties") or {},
        )


class QueryPage(BaseModel):
    """One batch of results from /databases/{id}/query."""

    results: list[Record] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: str | None = None

    @classmethod
    def from_notion(cls, raw: dict) -> "QueryPage":
        return cls(
            results=[Record.from_notion(page) for page in raw.get("results", [])],
            has_more=bool(raw.get("has_more")),
            next_cursor=raw.get("next_cursor"),
        )


class ImportRequest(BaseModel):
    """Everything one import run needs, fixed before it starts."""

    model_config = ConfigDict(frozen=True)

    token: str
    database_id: str
    output_folder: str
    create_base_file: bool = True


class ImportResult(BaseModel):
    """Outcome of an import run."""

    files: list[str] = Field(default_factory=list, description="Notes written, in order")
    failures: list[str] = Field(default_factory=list)
    base_file: str | None = None
    fetched: int = 0
    cancelled: bool = False

    @property
    def count(self) -> int:
        return len(self.files)
