"""Runtime value helpers: JSON strings, formatted times and struct fields.

A "struct" is a dataclass or a pydantic model, given as an instance or as
the class itself. Field names follow the serialization name: the ``json``
metadata key for dataclasses, the alias for pydantic models.
"""

import base64
import dataclasses
import json
import logging
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from openapi_synth.schema.base import NamedExample

logger = logging.getLogger(__name__)

SKIP_TAG = "-"


class JSONString(str):
    """A string holding a JSON object or array, treated as the decoded value."""

    def to_value(self) -> Any:
        """Decode the JSON text; an undecodable string becomes an error message."""
        try:
            return json.loads(self)
        except json.JSONDecodeError as e:
            return f"invalid JSON: {self} {e}"

    def set_name(self, name: str, registry) -> "JSONString":
        """Register a readable schema name for this JSON object's key set."""
        value = self.to_value()
        if not isinstance(value, dict):
            return self
        registry.set_name(name, list(value))
        return self


@dataclass(frozen=True)
class FormattedTime:
    """A datetime rendered with an explicit strftime layout.

    ``format`` is the OpenAPI format reported in the schema; it defaults to
    the layout itself.
    """

    value: datetime
    layout: str = "%Y-%m-%dT%H:%M:%S%z"
    format: str | None = None

    @property
    def schema_format(self) -> str:
        return self.format or self.layout

    def __str__(self) -> str:
        return self.value.strftime(self.layout)


@dataclass(frozen=True)
class StructField:
    attr: str
    name: str
    description: str | None = None
    format: str | None = None
    hint: Any = None


def is_struct(value: Any) -> bool:
    if isinstance(value, NamedExample) or value is NamedExample:
        return False
    if dataclasses.is_dataclass(value):
        return True
    if isinstance(value, BaseModel):
        return True
    return isinstance(value, type) and issubclass(value, BaseModel)


def struct_type(value: Any) -> type:
    return value if isinstance(value, type) else type(value)


def struct_title(value: Any) -> str:
    """Qualified type name, ``<module leaf>.<qualname>``."""
    cls = struct_type(value)
    module = cls.__module__.rsplit(".", 1)[-1]
    return f"{module}.{cls.__qualname__}"


def struct_fields(value: Any) -> list[StructField]:
    """Exported fields of a struct in declaration order, skipped ones removed."""
    cls = struct_type(value)
    if issubclass(cls, BaseModel):
        return _model_fields(cls)
    return _dataclass_fields(cls)


def _dataclass_fields(cls: type) -> list[StructField]:
    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError):
        hints = {}

    result = []
    for f in dataclasses.fields(cls):
        tag = f.metadata.get("json", "")
        if tag == SKIP_TAG or f.name.startswith("_"):
            continue
        result.append(
            StructField(
                attr=f.name,
                name=tag or f.name,
                description=f.metadata.get("desc"),
                format=f.metadata.get("format"),
                hint=hints.get(f.name),
            )
        )
    return result


def _model_fields(cls: type[BaseModel]) -> list[StructField]:
    result = []
    for attr, info in cls.model_fields.items():
        if info.exclude or attr.startswith("_"):
            continue
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        result.append(
            StructField(
                attr=attr,
                name=info.serialization_alias or info.alias or attr,
                description=info.description,
                format=extra.get("format"),
                hint=info.annotation,
            )
        )
    return result


def field_value(value: Any, field: StructField) -> Any:
    """The field's value on an instance, or None when given the class."""
    if isinstance(value, type):
        return None
    return getattr(value, field.attr, None)


def to_jsonable(value: Any, _seen: frozenset = frozenset()) -> Any:
    """Convert an example value into plain JSON data.

    Structs use their serialization names, so the example matches the
    property names of the synthesized schema. Cycles are cut with None.
    """
    if isinstance(value, Enum):
        return to_jsonable(value.value, _seen)
    if isinstance(value, JSONString):
        return to_jsonable(value.to_value(), _seen)
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, FormattedTime):
        return str(value)
    if isinstance(value, NamedExample):
        return to_jsonable(value.value, _seen)
    if isinstance(value, type):
        return None

    if id(value) in _seen:
        logger.warning("cycle detected while dumping %s, value cut", type(value).__name__)
        return None
    seen = _seen | {id(value)}

    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if is_struct(value):
        return {f.name: to_jsonable(field_value(value, f), seen) for f in struct_fields(value)}
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v, seen) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v, seen) for v in value]
    return str(value)
