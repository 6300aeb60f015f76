"""Document compilation: shared component schemas and defect reporting.

Compile walks every route once. Object schemas on request and response
bodies move into ``components.schemas`` under their title and are replaced
by ``$ref`` pointers, so identical objects used by several routes share one
definition. Soft errors left in the document (undecodable JSON examples,
flagged parameters, schema name collisions) are collected along the way and
returned together. Compile never stops early and running it again changes
nothing.
"""

import logging

from pydantic import BaseModel

from openapi_synth.document.base import INVALID_JSON, Content
from openapi_synth.errors import CompileError
from openapi_synth.schema.base import Schema, SchemaKind

logger = logging.getLogger(__name__)


class Defect(BaseModel):
    """One problem found by compile, attributed to where it was found."""

    message: str
    method: str | None = None
    path: str | None = None
    location: str | None = None

    def __str__(self) -> str:
        if self.method is None:
            return self.message
        return f"{self.method} {self.path}: {self.message}"


def compile_document(document) -> CompileError | None:
    """Consolidate schemas in ``document`` and report its defects.

    Returns None when the document is clean. A returned error means the
    document has quality defects; it can still be serialized.
    """
    schemas = document.components.schemas
    defects = [Defect(message=str(c)) for c in document.registry.collisions]

    for key in sorted(document.routes):
        route = document.routes[key]
        if route.request_body is not None:
            defects += _lift_content(route, "request", route.request_body.content, schemas)
        for code in sorted(route.responses, key=str):
            defects += _lift_content(route, "response", route.responses[code].content, schemas)
        for param in route.param_list():
            if param.error is not None:
                defects.append(
                    Defect(
                        method=route.method,
                        path=route.path,
                        location=param.location,
                        message=f"{param.location} param {param.name}| {param.error.value}",
                    )
                )

    logger.info("compiled %d routes, %d component schemas, %d defects", len(document.routes), len(schemas), len(defects))
    if not defects:
        return None
    return CompileError(defects)


def _lift_content(route, kind: str, content: Content, schemas: dict[str, Schema]) -> list[Defect]:
    defects = []
    for mime, media in content.items():
        if mime == INVALID_JSON:
            raw = media.examples["invalid"].value if "invalid" in media.examples else ""
            defects.append(
                Defect(method=route.method, path=route.path, message=f"invalid json {kind}: {raw!r}")
            )
            continue

        schema = media.schema_
        if schema is None or schema.is_reference or schema.kind is not SchemaKind.OBJECT or not schema.title:
            continue

        existing = schemas.get(schema.title)
        if existing is None:
            schemas[schema.title] = schema
        elif _structure(existing) != _structure(schema):
            defects.append(
                Defect(
                    method=route.method,
                    path=route.path,
                    message=f"schema title collision: {schema.title} {kind} differs from the shared definition",
                )
            )
        media.schema_ = Schema.reference(schema.title)
    return defects


def _structure(schema: Schema) -> Schema:
    """The schema without its root description, which comes from one example."""
    return schema.model_copy(update={"description": None})
