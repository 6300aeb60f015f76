"""Routes: the (path, method) unit that owns parameters and bodies."""

from typing import Any

from pydantic import Field, PrivateAttr

from openapi_synth.document import params as param_builder
from openapi_synth.document.base import (
    JSON_MIME,
    Location,
    Parameter,
    RequestBody,
    Response,
    StatusCode,
    WireModel,
)
from openapi_synth.document.examples import add_content_example, decode_json, invalid_json_content
from openapi_synth.schema.synthesize import SchemaSynthesizer


class Route(WireModel):
    """A single operation, addressed by ``path`` and lowercase ``method``.

    Builder methods mutate the route in place and return it, so calls can
    be chained.
    """

    path: str = Field(exclude=True)
    method: str = Field(exclude=True)
    tags: list[str] | None = None
    summary: str | None = None
    parameters: dict[str, Parameter] = {}
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[StatusCode, Response] = {}

    _synthesizer: SchemaSynthesizer | None = PrivateAttr(default=None)

    def __eq__(self, other: object) -> bool:
        # the bound synthesizer is not part of a route's identity
        if not isinstance(other, Route):
            return NotImplemented
        return self.__dict__ == other.__dict__

    @property
    def key(self) -> str:
        return route_key(self.path, self.method)

    @property
    def synthesizer(self) -> SchemaSynthesizer:
        if self._synthesizer is None:
            self._synthesizer = SchemaSynthesizer()
        return self._synthesizer

    def bind(self, synthesizer: SchemaSynthesizer) -> "Route":
        self._synthesizer = synthesizer
        return self

    def with_tags(self, *tags: str) -> "Route":
        self.tags = list(tags)
        return self

    def with_details(self, tag: str, summary: str) -> "Route":
        self.tags = [tag]
        self.summary = summary
        return self

    # --- request and responses

    def add_request(
        self, value: Any = None, name: str = "", description: str | None = None, mime: str = JSON_MIME
    ) -> "Route":
        """Add an example request body; the first example sets its schema."""
        if self.request_body is None:
            self.request_body = RequestBody()
        if description is not None:
            self.request_body.description = description
        if value is not None:
            add_content_example(self.request_body.content, name, value, self.synthesizer, mime)
        return self

    def add_request_json(self, text: str, name: str = "", description: str | None = None) -> "Route":
        """Add an example request body given as JSON text.

        Text that does not decode is kept under the invalid JSON content key
        and the decode error becomes the body description.
        """
        value, err = decode_json(text)
        if err is not None:
            self.request_body = RequestBody(description=err, content=invalid_json_content(text))
            return self
        return self.add_request(value, name=name, description=description)

    def add_response(
        self,
        status: StatusCode,
        value: Any = None,
        name: str = "",
        description: str | None = None,
        mime: str = JSON_MIME,
    ) -> "Route":
        """Add an example for the ``status`` response, creating it if needed."""
        resp = self.responses.get(status)
        if resp is None:
            resp = Response(status=status)
            self.responses[status] = resp
        if description is not None:
            resp.description = description
        if value is not None:
            add_content_example(resp.content, name, value, self.synthesizer, mime)
        return self

    def add_response_json(
        self, status: StatusCode, text: str, name: str = "", description: str | None = None
    ) -> "Route":
        value, err = decode_json(text)
        if err is not None:
            self.responses[status] = Response(status=status, description=err, content=invalid_json_content(text))
            return self
        return self.add_response(status, value, name=name, description=description)

    # --- parameters

    def add_param(self, location: Location, name: str, value: Any, description: str = "") -> "Route":
        param_builder.add_param(self, location, name, value, description)
        return self

    def add_params(self, location: Location, value: Any) -> "Route":
        param_builder.add_params(self, location, value)
        return self

    def path_param(self, name: str, value: Any, description: str = "") -> "Route":
        return self.add_param("path", name, value, description)

    def query_param(self, name: str, value: Any, description: str = "") -> "Route":
        return self.add_param("query", name, value, description)

    def header_param(self, name: str, value: Any, description: str = "") -> "Route":
        return self.add_param("header", name, value, description)

    def cookie_param(self, name: str, value: Any, description: str = "") -> "Route":
        return self.add_param("cookie", name, value, description)

    def path_params(self, value: Any) -> "Route":
        return self.add_params("path", value)

    def query_params(self, value: Any) -> "Route":
        return self.add_params("query", value)

    def header_params(self, value: Any) -> "Route":
        return self.add_params("header", value)

    def cookie_params(self, value: Any) -> "Route":
        return self.add_params("cookie", value)

    def param_list(self) -> list[Parameter]:
        """Parameters sorted by location, then name."""
        return sorted(self.parameters.values(), key=lambda p: (p.location, p.name))


def route_key(path: str, method: str) -> str:
    return f"{path}|{method.lower()}"


def new_route(path: str, method: str, synthesizer: SchemaSynthesizer | None = None) -> Route:
    """A fresh route with its path placeholders seeded as parameters."""
    route = Route(path=path, method=method.lower(), parameters=param_builder.seed_path_params(path))
    if synthesizer is not None:
        route.bind(synthesizer)
    return route
