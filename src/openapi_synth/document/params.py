"""Route parameters built from example values.

Values that cannot describe a parameter are not rejected with an
exception. The parameter records a ``ParamError`` instead and compile
reports it with the rest of the document's defects.
"""

import logging
import re
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from openapi_synth.document.base import Location, NamedExample, Parameter, ParamError
from openapi_synth.schema.classify import classify
from openapi_synth.schema.values import is_struct, struct_fields, to_jsonable

logger = logging.getLogger(__name__)

PATH_PARAM_RE = re.compile(r"\{([^{}]+)\}")
COLON_PARAM_RE = re.compile(r":([^/]+)")


def parse_path(path: str) -> list[str]:
    """Names of the ``{name}`` placeholders in a path template, in order."""
    return PATH_PARAM_RE.findall(path)


def clean_path(path: str) -> str:
    """Convert ``:name`` segments into OpenAPI ``{name}`` placeholders."""
    return COLON_PARAM_RE.sub(lambda m: "{" + m.group(1) + "}", path)


def seed_path_params(path: str) -> dict[str, Parameter]:
    """Path parameters for a new route, flagged until a value is supplied."""
    params = {}
    for name in parse_path(path):
        param = Parameter(name=name, location="path", error=ParamError.NOT_IN_PATH)
        params[param.key] = param
    return params


def add_param(route, location: Location, name: str, value: Any, description: str = "") -> Parameter:
    """Add ``value`` as an example of the ``location`` parameter ``name``.

    A list of primitives adds one example per element. A zero primitive
    sets the schema without adding an example. None is skipped.
    """
    key = f"{location}|{name}"
    in_template = location == "path" and name in parse_path(route.path)

    param = route.parameters.get(key)
    if param is None:
        param = Parameter(name=name, location=location, description=description or None)
        if location == "path" and not in_template:
            param.set_error(ParamError.NOT_IN_PATH)
    elif description and param.error is None:
        param.description = description

    if _apply_value(param, value, route.synthesizer) and in_template and param.error is ParamError.NOT_IN_PATH:
        param.set_error(None, description or None)

    route.parameters[key] = param
    return param


def add_params(route, location: Location, value: Any) -> None:
    """Add one parameter per struct field or mapping entry.

    Struct fields are read one level deep, named and described by their
    serialization metadata. Anything else is ignored.
    """
    if is_struct(value):
        for field in struct_fields(value):
            field_val = field.hint if isinstance(value, type) else getattr(value, field.attr, None)
            add_param(route, location, field.name, field_val, field.description or "")
    elif isinstance(value, Mapping):
        for k, v in value.items():
            add_param(route, location, str(k), v)
    else:
        logger.debug("%s params ignored for %s value", location, type(value).__name__)


def _apply_value(param: Parameter, value: Any, synthesizer) -> bool:
    """Attach schema and examples; False when nothing could be attached."""
    if value is None:
        return False

    if isinstance(value, NamedExample):
        name = value.summary or example_name(value.value)
        param.examples[name] = NamedExample(description=value.description, value=to_jsonable(value.value))
        if param.schema_ is None:
            param.schema_ = synthesizer.synthesize(value.value)
        return True

    if isinstance(value, (list, tuple, set, frozenset)):
        return _apply_sequence(param, list(value), synthesizer)

    if isinstance(value, Mapping) or is_struct(value):
        param.set_error(ParamError.INVALID_TYPE)
        return False

    shape = classify(value)
    if not shape.is_leaf:
        param.set_error(ParamError.INVALID_TYPE)
        return False

    if param.schema_ is None:
        param.schema_ = synthesizer.synthesize(value)
    if not isinstance(value, type) and not _is_zero(value):
        param.examples[example_name(value)] = NamedExample(value=to_jsonable(value))
    return True


def _apply_sequence(param: Parameter, items: list, synthesizer) -> bool:
    if not items:
        return False
    values = [i.value if isinstance(i, NamedExample) else i for i in items]
    shapes = [classify(v) for v in values]
    if not all(s.is_leaf for s in shapes) or len({s.kind for s in shapes}) != 1:
        param.set_error(ParamError.INVALID_SLICE_ELEM)
        return False

    for item, value in zip(items, values):
        name = item.summary if isinstance(item, NamedExample) and item.summary else example_name(value)
        description = item.description if isinstance(item, NamedExample) else None
        param.examples[name] = NamedExample(description=description, value=to_jsonable(value))
    if param.schema_ is None:
        param.schema_ = synthesizer.synthesize(values[0])
    return True


def example_name(value: Any) -> str:
    """Text used to name a parameter example after its value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return example_name(value.value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def _is_zero(value: Any) -> bool:
    return isinstance(value, (bool, int, float, str, bytes, Decimal)) and not value
