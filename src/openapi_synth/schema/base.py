"""Schema model shared by the synthesizer, the document and the compiler."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

REF_PREFIX = "#/components/schemas/"


class SchemaKind(str, Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"


class Schema(BaseModel):
    """A JSON-Schema-like type descriptor.

    After compile a schema is either a definition (``properties``/``items``)
    or a reference (``$ref``), never both.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    kind: SchemaKind | None = Field(default=None, alias="type")
    format: str | None = None
    description: str | None = None
    items: "Schema | None" = None
    properties: "dict[str, Schema] | None" = None
    ref: str | None = Field(default=None, alias="$ref")

    @classmethod
    def reference(cls, title: str) -> "Schema":
        return cls(ref=REF_PREFIX + title)

    @property
    def is_reference(self) -> bool:
        return self.ref is not None

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class NamedExample(BaseModel):
    """An example value with optional summary and description.

    Passed as a value to the synthesizer it stands for its ``value`` and
    lends its description to the resulting schema.
    """

    summary: str | None = None
    description: str | None = None
    value: Any = None
