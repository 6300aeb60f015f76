"""Route examples file loader.

Reads a YAML or JSON file describing routes by example and replays it as
builder calls on a ``Document``::

    schema_names:
      Pet: [id, name]
    routes:
      - path: /pets/{id}
        method: get
        params:
          path: {id: [1, 2]}
        responses:
          200: {description: OK, example: {id: 1, name: rex}}
          404: {json: '{"error": "not found"}'}
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from openapi_synth.document.document import Document
from openapi_synth.document.paths import parse_status
from openapi_synth.errors import DocumentLoadError

logger = logging.getLogger(__name__)


class ResponseExample(BaseModel):
    description: str | None = None
    example: Any = None
    json_text: str | None = Field(default=None, alias="json")


class RouteExample(BaseModel):
    path: str
    method: str
    tags: list[str] = []
    summary: str | None = None
    params: dict[str, dict[str, Any]] = {}
    request: Any = None
    request_json: str | None = None
    responses: dict[str, ResponseExample] = {}


class ExamplesFile(BaseModel):
    schema_names: dict[str, list[str]] = {}
    routes: list[RouteExample] = []


def load_examples(file_path: Path) -> ExamplesFile:
    """Parse a route examples file."""
    text = file_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise DocumentLoadError(f"cannot parse {file_path}: {e}") from e
    if isinstance(data, dict) and isinstance(data.get("routes"), list):
        for entry in data["routes"]:
            if isinstance(entry, dict) and isinstance(entry.get("responses"), dict):
                entry["responses"] = {str(k): v or {} for k, v in entry["responses"].items()}
    try:
        return ExamplesFile.model_validate(data)
    except ValidationError as e:
        raise DocumentLoadError(f"invalid examples file {file_path}: {e}") from e


def apply_examples(doc: Document, examples: ExamplesFile) -> Document:
    """Replay every route example onto ``doc``."""
    for name, keys in examples.schema_names.items():
        doc.set_schema_name(name, keys)

    for entry in examples.routes:
        route = doc.get_route(entry.path, entry.method)
        if entry.tags:
            route.with_tags(*entry.tags)
        if entry.summary:
            route.summary = entry.summary

        for location, values in entry.params.items():
            if location not in ("path", "query", "header", "cookie"):
                logger.warning("skip params for unknown location %r on %s %s", location, entry.method, entry.path)
                continue
            route.add_params(location, values)

        if entry.request_json is not None:
            route.add_request_json(entry.request_json)
        elif entry.request is not None:
            route.add_request(entry.request)

        for code, resp in entry.responses.items():
            status = parse_status(code)
            if resp.json_text is not None:
                route.add_response_json(status, resp.json_text, description=resp.description)
            else:
                route.add_response(status, resp.example, description=resp.description)

    logger.info("applied %d route examples", len(examples.routes))
    return doc
