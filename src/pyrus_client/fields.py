"""Form fields and the codec for their polymorphic values.

A form field carries a ``type`` tag and a raw ``value``. The tag alone decides
the shape of the value: a string, a number, a date, a person, a table of
nested fields and so on. Decoding is table driven (see ``_DECODERS``) and
re-entrant: tables, titles and multiple choices contain nested form fields
that go through the same codec.

Rules:
    - ``value`` absent or null leaves ``FormField.value`` as ``None``.
    - A value that does not match its tag raises :class:`FieldDecodeError`.
    - An unknown tag keeps the value as plain JSON data.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    Field,
    FieldSerializationInfo,
    TypeAdapter,
    ValidationError,
    field_serializer,
    model_validator,
)

from pyrus_client.constants import CheckmarkType, FieldType, FlagType, StatusType
from pyrus_client.errors import FieldDecodeError, RequestValidationError
from pyrus_client.models.entities import CatalogItem, File, Person, PyrusModel

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

_RFC3339_RE = re.compile(
    r"(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})"
)


class ChoiceOption(PyrusModel):
    """An option of a ``multiple_choice`` field, as described by the form."""

    choice_id: int
    choice_value: str = ""
    fields: list[FormField] = Field(default_factory=list)
    deleted: bool = False


class FormFieldInfo(PyrusModel):
    """Additional field information returned with form descriptions."""

    # Step number where the field becomes required.
    required_step: int = 0
    # Step number from which the field can no longer be changed.
    immutable_step: int = 0
    options: list[ChoiceOption] | None = None
    catalog_id: int | None = None
    columns: list[FormField] | None = None
    fields: list[FormField] | None = None
    decimal_places: int | None = None


class TableRow(PyrusModel):
    row_id: int = 0
    cells: list[FormField] = Field(default_factory=list)
    delete: bool = False


class Title(PyrusModel):
    """Value of a ``title`` field: a checkmark heading a group of fields."""

    checkmark: CheckmarkType | None = None
    fields: list[FormField] = Field(default_factory=list)


class MultipleChoice(PyrusModel):
    choice_ids: list[int] = Field(default_factory=list)
    choice_names: list[str] = Field(default_factory=list)
    fields: list[FormField] = Field(default_factory=list)
    choice_id: int | None = None


class FormLink(PyrusModel):
    """Value of a ``form_link`` field: tasks linked from another form."""

    task_ids: list[int] = Field(default_factory=list)
    subject: str = ""


Table = list[TableRow]


class FormField(PyrusModel):
    """A node of the form field tree.

    ``value`` is decoded according to ``type``; use :func:`decode_field_value`
    for the mapping. ``parent_id`` is set for fields nested in a title and
    ``row_id`` for fields living in a table row.
    """

    id: int | None = None
    type: FieldType | str | None = Field(default=None, union_mode="left_to_right")
    name: str | None = None
    info: FormFieldInfo | None = None
    value: Any = None
    parent_id: int | None = None
    row_id: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _decode_value(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("value") is None:
            return data
        field_id = data.get("id")
        decoded = decode_field_value(data.get("type"), data["value"], field_id=field_id)
        return {**data, "value": decoded}

    @field_serializer("value")
    def _encode_value(self, value: Any, info: FieldSerializationInfo) -> Any:
        if info.mode_is_json():
            return encode_field_value(value)
        return value

    @property
    def field_type(self) -> FieldType | None:
        """The type tag as an enum member, or ``None`` when the tag is unknown."""

        return self.type if isinstance(self.type, FieldType) else None

    def check(self) -> None:
        """Validate the field as part of a request (addressed by id or name)."""

        if self.id and self.name:
            raise RequestValidationError("field: use id or name, not both")
        if not self.id and not self.name:
            raise RequestValidationError("field: use either id or name")
        if self.value is None:
            raise RequestValidationError("field: value is required")


for _model in (ChoiceOption, FormFieldInfo, TableRow, Title, MultipleChoice):
    _model.model_rebuild()


def _strict(adapter: TypeAdapter[Any]) -> Callable[[Any], Any]:
    def decode(raw: Any) -> Any:
        return adapter.validate_python(raw, strict=True)

    return decode


def _lax(adapter: TypeAdapter[Any]) -> Callable[[Any], Any]:
    def decode(raw: Any) -> Any:
        return adapter.validate_python(raw)

    return decode


_STRING = TypeAdapter(str)


def _parse_date(raw: Any) -> date:
    if isinstance(raw, date) and not isinstance(raw, datetime):
        return raw
    text = _STRING.validate_python(raw, strict=True)
    parsed = datetime.strptime(text, DATE_FORMAT).date()
    if parsed.isoformat() != text:
        raise ValueError(f"date {text!r} does not match YYYY-MM-DD")
    return parsed


def _parse_time(raw: Any) -> time:
    if isinstance(raw, time):
        return raw
    text = _STRING.validate_python(raw, strict=True)
    parsed = datetime.strptime(text, TIME_FORMAT).time()
    if parsed.strftime(TIME_FORMAT) != text:
        raise ValueError(f"time {text!r} does not match HH:MM")
    return parsed


def _parse_timestamp(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return raw
    text = _STRING.validate_python(raw, strict=True)
    match = _RFC3339_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"timestamp {text!r} is not RFC 3339")
    day, clock, fraction, offset = match.groups()
    # datetime keeps microseconds; extra fraction digits are truncated.
    micros = (fraction or "").ljust(6, "0")[:6]
    offset = "+00:00" if offset in ("Z", "z") else offset
    return datetime.fromisoformat(f"{day}T{clock}.{micros}{offset}")


_decode_string = _strict(_STRING)
_decode_float = _strict(TypeAdapter(float))

_DECODERS: dict[FieldType, Callable[[Any], Any]] = {
    FieldType.TEXT: _decode_string,
    FieldType.EMAIL: _decode_string,
    FieldType.PHONE: _decode_string,
    FieldType.NOTE: _decode_string,
    FieldType.MONEY: _decode_float,
    FieldType.NUMBER: _decode_float,
    FieldType.DATE: _parse_date,
    FieldType.DUE_DATE: _parse_date,
    FieldType.CREATION_DATE: _parse_date,
    FieldType.TIME: _parse_time,
    FieldType.DUE_DATE_TIME: _parse_timestamp,
    FieldType.CHECKMARK: _lax(TypeAdapter(CheckmarkType)),
    FieldType.FLAG: _lax(TypeAdapter(FlagType)),
    FieldType.STEP: _strict(TypeAdapter(int)),
    FieldType.STATUS: _lax(TypeAdapter(StatusType)),
    FieldType.CATALOG: _lax(TypeAdapter(CatalogItem)),
    FieldType.FILE: _lax(TypeAdapter(list[File])),
    FieldType.PERSON: _lax(TypeAdapter(Person)),
    FieldType.AUTHOR: _lax(TypeAdapter(Person)),
    FieldType.TABLE: _lax(TypeAdapter(Table)),
    FieldType.MULTIPLE_CHOICE: _lax(TypeAdapter(MultipleChoice)),
    FieldType.TITLE: _lax(TypeAdapter(Title)),
    FieldType.FORM_LINK: _lax(TypeAdapter(FormLink)),
}


def decode_field_value(field_type: Any, raw: Any, *, field_id: int | None = None) -> Any:
    """Decode a raw JSON value according to the field's type tag.

    Args:
        field_type: The ``type`` tag (a :class:`FieldType` or a plain string).
        raw: The raw ``value`` payload, already parsed from JSON.
        field_id: Field id, used in error messages.

    Returns:
        The decoded value, or ``None`` when ``raw`` is ``None``.

    Raises:
        FieldDecodeError: If the value does not match the shape of its tag.
    """

    if raw is None:
        return None

    try:
        tag = FieldType(field_type)
    except ValueError:
        logger.debug(
            "Unknown field type; keeping raw value",
            extra={"field_id": field_id, "field_type": field_type},
        )
        return raw

    decoder = _DECODERS.get(tag)
    if decoder is None:
        return raw

    try:
        return decoder(raw)
    except ValidationError as e:
        reason = "; ".join(err["msg"] for err in e.errors())
        raise FieldDecodeError(field_id, tag.value, reason) from e
    except (ValueError, TypeError) as e:
        raise FieldDecodeError(field_id, tag.value, str(e)) from e


def encode_field_value(value: Any) -> Any:
    """Render a decoded value back into its JSON form.

    Dates are rendered as ``YYYY-MM-DD``, times as ``HH:MM`` and timestamps as
    RFC 3339.
    """

    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat().replace("+00:00", "Z")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.strftime(TIME_FORMAT)
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, list | tuple):
        return [encode_field_value(item) for item in value]
    if isinstance(value, dict):
        return {key: encode_field_value(item) for key, item in value.items()}
    return value
