"""The OpenAPI document: metadata, the route table and output."""

import json
import logging
from pathlib import Path

import yaml
from pydantic import Field, PrivateAttr, ValidationError

from openapi_synth.config import SynthesisSettings
from openapi_synth.document.base import Components, ExternalDocs, Info, Server, Tag, WireModel
from openapi_synth.document.compiler import compile_document
from openapi_synth.document.paths import from_nested_form, to_nested_form
from openapi_synth.document.route import Route, new_route, route_key
from openapi_synth.document.security import SecurityMixin
from openapi_synth.errors import CompileError, DocumentLoadError, RouteError
from openapi_synth.schema.naming import SchemaNameRegistry
from openapi_synth.schema.synthesize import SchemaSynthesizer

logger = logging.getLogger(__name__)


class Document(SecurityMixin, WireModel):
    """An OpenAPI 3.0 document under construction.

    Routes are created on first access with ``get_route`` and filled in
    with example values. ``compile`` then moves shared object schemas into
    ``components.schemas`` and reports any defects. Each document has its
    own schema name registry.
    """

    openapi: str = "3.0.3"
    info: Info
    tags: list[Tag] = []
    servers: list[Server] = []
    external_docs: ExternalDocs | None = Field(default=None, alias="externalDocs")
    security: list[dict[str, list[str]]] = []
    components: Components = Field(default_factory=Components)
    routes: dict[str, Route] = Field(default={}, exclude=True)

    _settings: SynthesisSettings = PrivateAttr(default_factory=SynthesisSettings)
    _registry: SchemaNameRegistry = PrivateAttr(default_factory=SchemaNameRegistry)
    _synthesizer: SchemaSynthesizer | None = PrivateAttr(default=None)

    @classmethod
    def new(
        cls, title: str, version: str, description: str | None = None, settings: SynthesisSettings | None = None
    ) -> "Document":
        settings = settings or SynthesisSettings()
        doc = cls(
            openapi=settings.openapi_version,
            info=Info(title=title, version=version, description=description),
        )
        return doc.configure(settings)

    @classmethod
    def from_dict(cls, data: dict, settings: SynthesisSettings | None = None) -> "Document":
        """Load an existing OpenAPI document to extend."""
        if not isinstance(data, dict):
            raise DocumentLoadError("document must be a mapping")
        fields = {k: v for k, v in data.items() if k != "paths"}
        try:
            doc = cls.model_validate(fields)
        except ValidationError as e:
            raise DocumentLoadError(f"invalid document: {e}") from e
        doc.routes = from_nested_form(data.get("paths") or {})
        return doc.configure(settings or SynthesisSettings())

    @classmethod
    def from_json(cls, text: str, settings: SynthesisSettings | None = None) -> "Document":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentLoadError(f"error with unmarshal: {e}") from e
        return cls.from_dict(data, settings)

    @classmethod
    def from_file(cls, file_path: Path, settings: SynthesisSettings | None = None) -> "Document":
        """Load a JSON or YAML document from disk."""
        text = file_path.read_text(encoding="utf-8")
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DocumentLoadError(f"cannot parse {file_path}: {e}") from e
        return cls.from_dict(data, settings)

    def configure(self, settings: SynthesisSettings) -> "Document":
        self._settings = settings
        self._synthesizer = SchemaSynthesizer(self._registry, settings)
        for route in self.routes.values():
            route.bind(self._synthesizer)
        return self

    @property
    def registry(self) -> SchemaNameRegistry:
        return self._registry

    @property
    def synthesizer(self) -> SchemaSynthesizer:
        if self._synthesizer is None:
            self.configure(self._settings)
        return self._synthesizer

    # --- routes

    def get_route(self, path: str, method: str) -> Route:
        """The route for ``path`` and ``method``, created if missing."""
        if not path or not method:
            raise RouteError("path or method cannot be empty")
        key = route_key(path, method)
        route = self.routes.get(key)
        if route is None:
            route = new_route(path, method, self.synthesizer)
            logger.debug("new route %s", key)
            self.routes[key] = route
        return route

    def add_route(self, route: Route) -> Route:
        """Add a route built elsewhere; an existing route is not replaced."""
        if not route.path or not route.method:
            raise RouteError("path or method cannot be empty")
        if route.key in self.routes:
            raise RouteError(f"route {route.method} {route.path} already exists, use get_route to change it")
        self.routes[route.key] = route.bind(self.synthesizer)
        return route

    def set_schema_name(self, name: str, keys) -> None:
        """Name objects with exactly ``keys`` as their properties ``name``."""
        self._registry.set_name(name, keys)

    # --- metadata

    def add_tags(self, *tags: Tag) -> None:
        self.tags.extend(tags)

    def add_tag(self, name: str, description: str | None = None) -> None:
        self.tags.append(Tag(name=name, description=description))

    def add_server(self, url: str, description: str | None = None) -> None:
        self.servers.append(Server(url=url, description=description))

    # --- output

    def compile(self) -> CompileError | None:
        return compile_document(self)

    def to_dict(self) -> dict:
        data = {"openapi": self.openapi, "info": self.info.to_dict()}
        if self.tags:
            data["tags"] = [t.to_dict() for t in self.tags]
        if self.servers:
            data["servers"] = [s.to_dict() for s in self.servers]
        data["paths"] = to_nested_form(self.routes)
        components = self.components.to_dict()
        components = {k: v for k, v in components.items() if v}
        if components:
            data["components"] = components
        if self.security:
            data["security"] = self.security
        if self.external_docs is not None:
            data["externalDocs"] = self.external_docs.to_dict()
        return data

    def to_json(self, indent: int | None = 4) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self.__dict__ == other.__dict__
