"""Build Schema trees from example values."""

import logging
from typing import Any

from openapi_synth.config import SynthesisSettings
from openapi_synth.schema.base import Schema, SchemaKind
from openapi_synth.schema.classify import LEAF_KINDS, Member, ShapeKind, classify
from openapi_synth.schema.naming import SchemaNameRegistry

logger = logging.getLogger(__name__)


class SchemaSynthesizer:
    """Turns runtime values into ``Schema`` trees.

    Synthesis never raises. Values it cannot describe come out as empty
    schemas, and so does any node that would recurse into itself or go
    deeper than ``settings.max_depth``.

    Only the root gets a title: the qualified type name for a struct, the
    key-set name from the registry for a map.
    """

    def __init__(self, registry: SchemaNameRegistry | None = None, settings: SynthesisSettings | None = None):
        self.registry = registry if registry is not None else SchemaNameRegistry()
        self.settings = settings or SynthesisSettings()

    def synthesize(self, value: Any, hint: Any = None) -> Schema:
        return self._build(value, hint, depth=0, path=frozenset(), root=True)

    def _build(self, value: Any, hint: Any, depth: int, path: frozenset, root: bool = False) -> Schema:
        if depth > self.settings.max_depth:
            logger.warning("schema depth limit %d reached, node left empty", self.settings.max_depth)
            return Schema()

        shape = classify(value, hint, datetime_format=self.settings.datetime_format)
        if shape.identity is not None:
            if shape.identity in path:
                logger.warning("cycle detected at %s, node left empty", type(value).__name__)
                return Schema()
            path = path | {shape.identity}

        if shape.kind in LEAF_KINDS:
            return Schema(kind=LEAF_KINDS[shape.kind], format=shape.format, description=shape.description)

        if shape.kind is ShapeKind.SEQUENCE:
            return Schema(
                kind=SchemaKind.ARRAY,
                description=shape.description,
                items=self._child(shape.item, depth, path),
            )

        if shape.kind in (ShapeKind.MAP, ShapeKind.STRUCT):
            properties = {m.name: self._child(m, depth, path) for m in shape.members}
            title = None
            if root:
                title = shape.title if shape.kind is ShapeKind.STRUCT else self.registry.get_name(properties)
            return Schema(
                kind=SchemaKind.OBJECT,
                title=title,
                description=shape.description,
                properties=properties,
            )

        return Schema(description=shape.description)

    def _child(self, member: Member, depth: int, path: frozenset) -> Schema:
        schema = self._build(member.value, member.hint, depth + 1, path)
        if member.description:
            schema.description = member.description
        if member.format:
            schema.format = member.format
        return schema
