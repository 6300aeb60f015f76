"""Classify runtime values into a closed set of shapes.

``classify`` looks at one level of a value and returns a ``Shape``: the kind
plus whatever the synthesizer needs to recurse (struct fields, map entries,
the sequence element). Values are classified by what they hold at runtime.
A type or typing hint given in place of a value stands for an empty value
of that type, which is how empty lists, struct classes and unset fields
with a declared type still produce a typed schema.
"""

import dataclasses
import logging
import types
import typing
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from openapi_synth.schema.base import NamedExample, SchemaKind
from openapi_synth.schema.values import (
    FormattedTime,
    JSONString,
    field_value,
    is_struct,
    struct_fields,
    struct_title,
)

logger = logging.getLogger(__name__)

SEQUENCE_TYPES = (list, tuple, set, frozenset)


class ShapeKind(str, Enum):
    EMPTY = "empty"
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    MAP = "map"
    STRUCT = "struct"
    SEQUENCE = "sequence"
    UNSUPPORTED = "unsupported"


LEAF_KINDS = {
    ShapeKind.STRING: SchemaKind.STRING,
    ShapeKind.INTEGER: SchemaKind.INTEGER,
    ShapeKind.NUMBER: SchemaKind.NUMBER,
    ShapeKind.BOOLEAN: SchemaKind.BOOLEAN,
}


@dataclass(frozen=True)
class Member:
    """A child slot: a struct field, a map entry or a sequence element."""

    name: str
    value: Any
    hint: Any = None
    description: str | None = None
    format: str | None = None


@dataclass(frozen=True)
class Shape:
    kind: ShapeKind
    format: str | None = None
    description: str | None = None
    title: str | None = None
    members: tuple[Member, ...] = field(default_factory=tuple)
    identity: int | None = None  # id() of the container, for cycle detection

    @property
    def is_leaf(self) -> bool:
        return self.kind in LEAF_KINDS

    @property
    def item(self) -> Member:
        return self.members[0]


def classify(value: Any, hint: Any = None, datetime_format: str = "date-time") -> Shape:
    """Classify one level of ``value``; ``hint`` is the declared type of its slot."""
    if value is None:
        return classify_type(hint, datetime_format) if hint is not None else Shape(ShapeKind.EMPTY)
    if _is_type_like(value):
        return classify_type(value, datetime_format)
    if isinstance(value, NamedExample):
        shape = classify(value.value, hint, datetime_format)
        return dataclasses.replace(shape, description=value.description)
    if isinstance(value, JSONString):
        return classify(value.to_value(), None, datetime_format)
    if isinstance(value, Enum):
        return classify(value.value, None, datetime_format)

    leaf = _classify_leaf_type(type(value), datetime_format)
    if leaf is not None:
        return leaf
    if isinstance(value, FormattedTime):
        return Shape(ShapeKind.STRING, format=value.schema_format)

    if is_struct(value):
        return Shape(
            ShapeKind.STRUCT,
            title=struct_title(value),
            members=tuple(
                Member(f.name, field_value(value, f), f.hint, f.description, f.format)
                for f in struct_fields(value)
            ),
            identity=id(value),
        )
    if isinstance(value, Mapping):
        value_hint = _type_arg(hint, 1)
        return Shape(
            ShapeKind.MAP,
            members=tuple(
                Member(str(k), v, value_hint) for k, v in sorted(value.items(), key=lambda kv: str(kv[0]))
            ),
            identity=id(value),
        )
    if isinstance(value, SEQUENCE_TYPES):
        elem_hint = _type_arg(hint, 0)
        if value:
            item = Member("", next(iter(value)), elem_hint)
        else:
            item = Member("", elem_hint)
        return Shape(ShapeKind.SEQUENCE, members=(item,), identity=id(value))

    logger.debug("unsupported value of type %s", type(value).__name__)
    return Shape(ShapeKind.UNSUPPORTED)


def classify_type(hint: Any, datetime_format: str = "date-time") -> Shape:
    """Classify a type or typing hint as if it held an empty value."""
    if hint is type(None) or hint is Any:
        return Shape(ShapeKind.EMPTY)

    origin = typing.get_origin(hint)
    if origin in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return classify_type(args[0], datetime_format)
        return Shape(ShapeKind.EMPTY)
    if origin is typing.Literal:
        args = typing.get_args(hint)
        return classify(args[0], None, datetime_format) if args else Shape(ShapeKind.EMPTY)
    if origin is typing.Annotated:
        return classify_type(typing.get_args(hint)[0], datetime_format)

    cls = origin or hint
    if not isinstance(cls, type):
        logger.debug("unsupported type hint %r", hint)
        return Shape(ShapeKind.UNSUPPORTED)

    if issubclass(cls, Enum):
        members = list(cls)
        return classify(members[0].value, None, datetime_format) if members else Shape(ShapeKind.STRING)
    leaf = _classify_leaf_type(cls, datetime_format)
    if leaf is not None:
        return leaf
    if issubclass(cls, FormattedTime):
        return Shape(ShapeKind.STRING)
    if origin is None and is_struct(cls):
        return Shape(
            ShapeKind.STRUCT,
            title=struct_title(cls),
            members=tuple(Member(f.name, f.hint, f.hint, f.description, f.format) for f in struct_fields(cls)),
            identity=id(cls),
        )
    if issubclass(cls, Mapping):
        return Shape(ShapeKind.MAP, identity=id(hint))
    if issubclass(cls, SEQUENCE_TYPES) or (origin is not None and issubclass(cls, Sequence)):
        elem = _type_arg(hint, 0)
        return Shape(ShapeKind.SEQUENCE, members=(Member("", elem, elem),))

    logger.debug("unsupported type %s", cls.__name__)
    return Shape(ShapeKind.UNSUPPORTED)


def is_primitive(value: Any) -> bool:
    """True when ``value`` classifies to a leaf kind (string, number, ...)."""
    return classify(value).is_leaf


def _classify_leaf_type(cls: type, datetime_format: str) -> Shape | None:
    # bool before int, datetime before date: both are subclasses
    if issubclass(cls, bool):
        return Shape(ShapeKind.BOOLEAN)
    if issubclass(cls, int):
        return Shape(ShapeKind.INTEGER)
    if issubclass(cls, (float, Decimal)):
        return Shape(ShapeKind.NUMBER)
    if issubclass(cls, str):
        return Shape(ShapeKind.STRING)
    if issubclass(cls, (bytes, bytearray)):
        return Shape(ShapeKind.STRING, format="byte")
    if issubclass(cls, UUID):
        return Shape(ShapeKind.STRING, format="uuid")
    if issubclass(cls, datetime):
        return Shape(ShapeKind.STRING, format=datetime_format)
    if issubclass(cls, date):
        return Shape(ShapeKind.STRING, format="date")
    if issubclass(cls, time):
        return Shape(ShapeKind.STRING, format="time")
    return None


def _is_type_like(value: Any) -> bool:
    return isinstance(value, type) or typing.get_origin(value) is not None or value is Any


def _type_arg(hint: Any, index: int) -> Any:
    """The ``index``-th type argument of a generic hint, through Optional."""
    if hint is None:
        return None
    if typing.get_origin(hint) in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) != 1:
            return None
        hint = args[0]
    args = typing.get_args(hint)
    if len(args) > index and args[index] is not Ellipsis:
        return args[index]
    return None
