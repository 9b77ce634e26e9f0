"""Notion property values and their conversion to plain scalars.

Every property payload returned by the Notion API carries a ``type`` tag and
a field of the same name holding the value, e.g.::

    {"id": "abc", "type": "number", "number": 42}
    {"id": "def", "type": "formula", "formula": {"type": "string", "string": "x"}}

The payloads are parsed into a closed, recursive union of models (formula
results and rollup arrays contain further property values) and each model
knows how to reduce itself to a ``NormalizedValue``. Nested values are
parsed one level at a time as they are extracted.
"""

import logging
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Tag, TypeAdapter, ValidationError

from notion2obsidian.models import NormalizedValue

logger = logging.getLogger(__name__)

PROPERTY_TYPES = frozenset(
    {
        "title",
        "rich_text",
        "number",
        "select",
        "multi_select",
        "date",
        "checkbox",
        "url",
        "email",
        "phone_number",
        "people",
        "files",
        "relation",
        "formula",
        "rollup",
    }
)

# A formula result is typed like a property, plus two result-only kinds.
FORMULA_RESULT_TYPES = PROPERTY_TYPES | {"string", "boolean"}

UNKNOWN = "unknown"


def _blank_to_none(value: str | None) -> str | None:
    """Strip a string and map the empty result to None."""
    if value is None:
        return None
    return value.strip() or None


def _join(parts: list[str | None]) -> str | None:
    return _blank_to_none(", ".join(part for part in parts if part))


def format_value(value: NormalizedValue) -> str:
    """Render a normalized value as text.

    Booleans are written lowercase and integral floats lose their ``.0`` so
    the output matches what Notion itself displays.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class TextRun(_Payload):
    plain_text: str | None = None


class SelectOption(_Payload):
    name: str | None = None


class DateValue(_Payload):
    start: str | None = None
    end: str | None = None
    time_zone: str | None = None


class User(_Payload):
    id: str | None = None
    name: str | None = None


class FileLink(_Payload):
    url: str | None = None


class FileObject(_Payload):
    name: str | None = None
    file: FileLink | None = None
    external: FileLink | None = None

    @property
    def label(self) -> str | None:
        return (
            self.name
            or (self.file.url if self.file else None)
            or (self.external.url if self.external else None)
        )


class PageReference(_Payload):
    id: str | None = None


class TitleProperty(_Payload):
    type: Literal["title"] = "title"
    title: list[TextRun] | None = None

    def extract(self) -> NormalizedValue:
        return _blank_to_none("".join(run.plain_text or "" for run in self.title or []))


class RichTextProperty(_Payload):
    type: Literal["rich_text"] = "rich_text"
    rich_text: list[TextRun] | None = None

    def extract(self) -> NormalizedValue:
        return _blank_to_none("".join(run.plain_text or "" for run in self.rich_text or []))


class NumberProperty(_Payload):
    type: Literal["number"] = "number"
    number: int | float | None = None

    def extract(self) -> NormalizedValue:
        # 0 is a value, only a missing number is empty
        return self.number


class SelectProperty(_Payload):
    type: Literal["select"] = "select"
    select: SelectOption | None = None

    def extract(self) -> NormalizedValue:
        return (self.select.name or None) if self.select else None


class MultiSelectProperty(_Payload):
    type: Literal["multi_select"] = "multi_select"
    multi_select: list[SelectOption] | None = None

    def extract(self) -> NormalizedValue:
        return _join([option.name for option in self.multi_select or []])


class DateProperty(_Payload):
    type: Literal["date"] = "date"
    date: DateValue | None = None

    def extract(self) -> NormalizedValue:
        return (self.date.start or None) if self.date else None


class CheckboxProperty(_Payload):
    type: Literal["checkbox"] = "checkbox"
    checkbox: bool | None = None

    def extract(self) -> NormalizedValue:
        return self.checkbox


class UrlProperty(_Payload):
    type: Literal["url"] = "url"
    url: str | None = None

    def extract(self) -> NormalizedValue:
        return _blank_to_none(self.url)


class EmailProperty(_Payload):
    type: Literal["email"] = "email"
    email: str | None = None

    def extract(self) -> NormalizedValue:
        return _blank_to_none(self.email)


class PhoneNumberProperty(_Payload):
    type: Literal["phone_number"] = "phone_number"
    phone_number: str | None = None

    def extract(self) -> NormalizedValue:
        return _blank_to_none(self.phone_number)


class PeopleProperty(_Payload):
    type: Literal["people"] = "people"
    people: list[User] | None = None

    def extract(self) -> NormalizedValue:
        return _join([person.name or person.id for person in self.people or []])


class FilesProperty(_Payload):
    type: Literal["files"] = "files"
    files: list[FileObject] | None = None

    def extract(self) -> NormalizedValue:
        return _join([file.label for file in self.files or []])


class RelationProperty(_Payload):
    type: Literal["relation"] = "relation"
    relation: list[PageReference] | None = None

    def extract(self) -> NormalizedValue:
        return _join([ref.id for ref in self.relation or []])


class StringResult(_Payload):
    type: Literal["string"] = "string"
    string: str | None = None

    def extract(self) -> NormalizedValue:
        return _blank_to_none(self.string)


class BooleanResult(_Payload):
    type: Literal["boolean"] = "boolean"
    boolean: bool | None = None

    def extract(self) -> NormalizedValue:
        return self.boolean


class UnknownProperty(_Payload):
    """Any property type this importer does not convert."""

    type: str | None = None

    def extract(self) -> NormalizedValue:
        return None


class FormulaProperty(_Payload):
    type: Literal["formula"] = "formula"
    # The result is parsed only when extracted, one level at a time.
    formula: Any = None

    def result(self) -> BaseModel | None:
        """The parsed formula result, or None."""
        return _parse(self.formula, _formula_adapter)

    def extract(self) -> NormalizedValue:
        return extract_property_value(self)


class RollupValue(_Payload):
    type: str | None = None
    array: list[Any] | None = None


class RollupProperty(_Payload):
    type: Literal["rollup"] = "rollup"
    rollup: RollupValue | None = None

    def items(self) -> list[BaseModel | None]:
        """The parsed elements of an array rollup."""
        if self.rollup is None:
            return []
        return [_parse(item, _property_adapter) for item in self.rollup.array or []]

    def extract(self) -> NormalizedValue:
        if self.rollup is None:
            return None
        values = [extract_property_value(item) for item in self.items() if item is not None]
        return _join([format_value(value) for value in values if value is not None])


def _tagger(known: frozenset[str]):
    """Build a discriminator that sends unrecognised tags to UnknownProperty."""

    def discriminate(value: Any) -> str:
        if isinstance(value, dict):
            tag = value.get("type")
        else:
            tag = getattr(value, "type", None)
        if isinstance(tag, str) and tag in known:
            return tag
        return UNKNOWN

    return discriminate


_PROPERTY_ARMS = (
    Annotated[TitleProperty, Tag("title")],
    Annotated[RichTextProperty, Tag("rich_text")],
    Annotated[NumberProperty, Tag("number")],
    Annotated[SelectProperty, Tag("select")],
    Annotated[MultiSelectProperty, Tag("multi_select")],
    Annotated[DateProperty, Tag("date")],
    Annotated[CheckboxProperty, Tag("checkbox")],
    Annotated[UrlProperty, Tag("url")],
    Annotated[EmailProperty, Tag("email")],
    Annotated[PhoneNumberProperty, Tag("phone_number")],
    Annotated[PeopleProperty, Tag("people")],
    Annotated[FilesProperty, Tag("files")],
    Annotated[RelationProperty, Tag("relation")],
    Annotated[FormulaProperty, Tag("formula")],
    Annotated[RollupProperty, Tag("rollup")],
    Annotated[UnknownProperty, Tag(UNKNOWN)],
)

PropertyValue = Annotated[Union[_PROPERTY_ARMS], Discriminator(_tagger(PROPERTY_TYPES))]

FormulaResult = Annotated[
    Union[
        _PROPERTY_ARMS
        + (
            Annotated[StringResult, Tag("string")],
            Annotated[BooleanResult, Tag("boolean")],
        )
    ],
    Discriminator(_tagger(FORMULA_RESULT_TYPES)),
]

_property_adapter: TypeAdapter = TypeAdapter(PropertyValue)
_formula_adapter: TypeAdapter = TypeAdapter(FormulaResult)


def _parse(raw: Any, adapter: TypeAdapter) -> BaseModel | None:
    if isinstance(raw, BaseModel):
        return raw
    if not isinstance(raw, dict):
        return None
    try:
        return adapter.validate_python(raw)
    except (ValidationError, TypeError, ValueError) as e:
        logger.debug(f"Malformed {raw.get('type')!r} property: {e}")
        return None


def parse_property(raw: Any) -> BaseModel | None:
    """Parse one level of a raw Notion property payload.

    Formula results and rollup elements stay raw until extracted. Returns
    None when the payload is not a mapping or does not match the shape of
    its declared type.
    """
    return _parse(raw, _property_adapter)


def extract_property_value(prop: Any) -> NormalizedValue:
    """Reduce a Notion property (raw dict or parsed model) to a scalar.

    Never raises: unknown types and malformed payloads give None. Formula
    chains are unwrapped in a loop, so their depth is not limited by the
    stack; rollups nested too deep to recurse into give None.
    """
    prop = parse_property(prop)
    while isinstance(prop, FormulaProperty):
        prop = prop.result()
    if prop is None:
        return None

    try:
        return prop.extract()
    except RecursionError:
        logger.warning("Rollup nested too deeply to extract, skipping value")
        return None
