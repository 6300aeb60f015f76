"""Wire models for the OpenAPI 3.0 document.

These mirror the OpenAPI objects closely. Fields that exist only for
bookkeeping (a response's status, a parameter's error) are excluded from
serialization.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from openapi_synth.schema.base import NamedExample, Schema

JSON_MIME = "application/json"
INVALID_JSON = "invalid/json"  # content key holding an example that failed to decode

Location = Literal["path", "query", "header", "cookie"]
StatusCode = int | Literal["default"]


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Media(WireModel):
    """Schema and named examples for one content type.

    The schema comes from the first example added and is not changed by
    later ones.
    """

    schema_: Schema | None = Field(default=None, alias="schema")
    examples: dict[str, NamedExample] = {}


Content = dict[str, Media]


class ParamError(str, Enum):
    """Soft errors recorded on a parameter instead of being raised."""

    NOT_IN_PATH = "err: not found in path"
    INVALID_SLICE_ELEM = "err: invalid param, slice elem must be primitive"
    INVALID_TYPE = "err: invalid type map|struct"

    @classmethod
    def from_description(cls, description: str | None) -> "ParamError | None":
        for err in cls:
            if description == err.value:
                return err
        return None


class Parameter(WireModel):
    name: str
    location: Location = Field(alias="in")
    description: str | None = None
    required: bool = False
    schema_: Schema | None = Field(default=None, alias="schema")
    examples: dict[str, NamedExample] = {}
    error: ParamError | None = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def _sync_error(self) -> "Parameter":
        if self.error is None:
            self.error = ParamError.from_description(self.description)
        else:
            self.description = self.error.value
        if self.location == "path":
            self.required = True
        return self

    @property
    def key(self) -> str:
        return f"{self.location}|{self.name}"

    def set_error(self, error: ParamError | None, description: str | None = None) -> None:
        """Record or clear the soft error; the description mirrors it."""
        self.error = error
        self.description = error.value if error is not None else description


class RequestBody(WireModel):
    description: str | None = None
    content: Content = {}
    required: bool | None = None


class Response(WireModel):
    status: StatusCode = Field(default=200, exclude=True)
    description: str = ""
    content: Content = {}


class ExternalDocs(WireModel):
    url: str
    description: str | None = None


class Contact(WireModel):
    name: str | None = None
    url: str | None = None
    email: str | None = None


class License(WireModel):
    name: str
    url: str | None = None


class Info(WireModel):
    title: str
    version: str
    description: str | None = None
    terms_of_service: str | None = Field(default=None, alias="termsOfService")
    contact: Contact | None = None
    license: License | None = None


class ServerVariable(WireModel):
    default: str
    enum: list[str] | None = None
    description: str | None = None


class Server(WireModel):
    url: str
    description: str | None = None
    variables: dict[str, ServerVariable] | None = None


class Tag(WireModel):
    name: str
    description: str | None = None
    external_docs: ExternalDocs | None = Field(default=None, alias="externalDocs")


class SecurityScheme(WireModel):
    type: str
    description: str | None = None
    name: str | None = None
    location: str | None = Field(default=None, alias="in")
    scheme: str | None = None
    bearer_format: str | None = Field(default=None, alias="bearerFormat")
    flows: dict[str, Any] | None = None
    open_id_connect_url: str | None = Field(default=None, alias="openIdConnectUrl")


class Components(WireModel):
    schemas: dict[str, Schema] = {}
    security_schemes: dict[str, SecurityScheme] = Field(default={}, alias="securitySchemes")
