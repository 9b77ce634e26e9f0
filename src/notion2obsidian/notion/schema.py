"""Infer which database properties actually carry data."""

from collections.abc import Iterable

from notion2obsidian.models import NormalizedValue, PropertySchema, Record
from notion2obsidian.notion.properties import extract_property_value


def is_title_property(name: str, prop: object, schema: PropertySchema) -> bool:
    """Whether a page property is the database title, which is handled apart from the rest."""
    if schema.is_title(name):
        return True
    return isinstance(prop, dict) and prop.get("type") == "title"


def is_active_value(value: NormalizedValue) -> bool:
    """Whether a value should make its property show up as a column.

    False is treated like an empty value here even though the extractor
    keeps it, so all-unchecked checkbox columns are left out.
    """
    if value is None or value is False:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


class ActivePropertyTally:
    """Running, ordered set of property names with at least one real value."""

    def __init__(self, schema: PropertySchema):
        self.schema = schema
        self._names: dict[str, None] = {}

    def update(self, record: Record) -> None:
        for name, prop in record.properties.items():
            if name in self._names or is_title_property(name, prop, self.schema):
                continue
            if is_active_value(extract_property_value(prop)):
                self._names[name] = None

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    @property
    def names(self) -> list[str]:
        """Active property names in first-seen order."""
        return list(self._names)


def infer_active_properties(records: Iterable[Record], schema: PropertySchema) -> list[str]:
    """Return the non-title properties that have a value in any record."""
    tally = ActivePropertyTally(schema)
    for record in records:
        tally.update(record)
    return tally.names
