"""Conversion between the flat route table and the OpenAPI ``paths`` object.

Routes are stored flat, keyed by ``path|method``. The nested
``paths[path][method]`` shape exists only on the wire; these functions are
the only place that knows about it.
"""

from pydantic import ValidationError

from openapi_synth.document.base import Parameter, RequestBody, Response, StatusCode
from openapi_synth.document.route import Route, route_key
from openapi_synth.errors import DocumentLoadError

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


def route_to_dict(route: Route) -> dict:
    """The OpenAPI operation object for one route."""
    data = {}
    if route.tags:
        data["tags"] = list(route.tags)
    if route.summary:
        data["summary"] = route.summary
    if route.parameters:
        data["parameters"] = [p.to_dict() for p in route.param_list()]
    if route.request_body is not None:
        data["requestBody"] = route.request_body.to_dict()
    if route.responses:
        data["responses"] = {
            status_text(code): resp.to_dict() for code, resp in sorted(route.responses.items(), key=_status_order)
        }
    return data


def route_from_dict(path: str, method: str, data: dict) -> Route:
    """Rebuild a route from its OpenAPI operation object."""
    params = {}
    for raw in data.get("parameters") or []:
        param = Parameter.model_validate(raw)
        params[param.key] = param

    body = data.get("requestBody")
    responses = {}
    for code, raw in (data.get("responses") or {}).items():
        status = parse_status(code)
        responses[status] = Response.model_validate({**raw, "status": status})

    return Route(
        path=path,
        method=method.lower(),
        tags=data.get("tags"),
        summary=data.get("summary"),
        parameters=params,
        request_body=RequestBody.model_validate(body) if body is not None else None,
        responses=responses,
    )


def to_nested_form(routes: dict[str, Route]) -> dict[str, dict[str, dict]]:
    """Flat ``path|method`` routes to ``{path: {method: operation}}``."""
    nested: dict[str, dict[str, dict]] = {}
    for key in sorted(routes):
        route = routes[key]
        nested.setdefault(route.path, {})[route.method] = route_to_dict(route)
    return nested


def from_nested_form(paths: dict) -> dict[str, Route]:
    """``{path: {method: operation}}`` to flat ``path|method`` routes.

    Path-level entries that are not HTTP methods (``parameters``,
    ``summary``, ...) are not operations and are skipped.
    """
    routes = {}
    for path, operations in (paths or {}).items():
        if not isinstance(operations, dict):
            raise DocumentLoadError(f"path {path!r} must map methods to operations")
        for method, data in operations.items():
            if method.lower() not in HTTP_METHODS:
                continue
            try:
                route = route_from_dict(path, method, data or {})
            except ValidationError as e:
                raise DocumentLoadError(f"invalid operation {method} {path}: {e}") from e
            routes[route_key(path, method)] = route
    return routes


def status_text(code: StatusCode) -> str:
    return str(code)


def parse_status(code: str | int) -> StatusCode:
    if code == "default":
        return "default"
    try:
        return int(code)
    except ValueError as e:
        raise DocumentLoadError(f"invalid response status {code!r}") from e


def _status_order(item: tuple) -> tuple:
    code = item[0]
    return (1, 0) if code == "default" else (0, code)
