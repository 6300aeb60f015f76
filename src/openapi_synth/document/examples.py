"""Named examples on request and response bodies."""

import json
import logging
from typing import Any

from openapi_synth.document.base import INVALID_JSON, JSON_MIME, Content, Media
from openapi_synth.schema.base import NamedExample
from openapi_synth.schema.synthesize import SchemaSynthesizer
from openapi_synth.schema.values import to_jsonable

logger = logging.getLogger(__name__)


def add_example(media: Media, name: str, value: Any, synthesizer: SchemaSynthesizer) -> str:
    """Add ``value`` as a named example and return the name it was stored under.

    The first example decides the media schema; later examples leave it
    alone even when their shape differs. An empty name falls back to the
    schema title. Existing names are never overwritten: a clashing name gets
    a running count appended.
    """
    schema = synthesizer.synthesize(value)
    if media.schema_ is None:
        media.schema_ = schema
    elif media.schema_ != schema:
        logger.debug("example shape differs from media schema %s, schema kept", media.schema_.title)

    if not name:
        name = schema.title or synthesizer.settings.default_example_name
    name = unique_name(media.examples, name)

    summary = value.summary if isinstance(value, NamedExample) else None
    media.examples[name] = NamedExample(summary=summary, description=schema.description, value=to_jsonable(value))
    return name


def unique_name(existing: dict, name: str) -> str:
    if name not in existing:
        return name
    count = len(existing)
    while f"{name} {count}" in existing:
        count += 1
    return f"{name} {count}"


def add_content_example(
    content: Content, name: str, value: Any, synthesizer: SchemaSynthesizer, mime: str = JSON_MIME
) -> str:
    media = content.setdefault(mime, Media())
    return add_example(media, name, value, synthesizer)


def decode_json(text: str) -> tuple[Any, str | None]:
    """Decode JSON example text; returns (value, error message)."""
    try:
        return json.loads(text), None
    except json.JSONDecodeError as e:
        return None, str(e)


def invalid_json_content(text: str) -> Content:
    """Content that keeps undecodable example text for compile to report."""
    return {INVALID_JSON: Media(examples={"invalid": NamedExample(value=text)})}
