"""OpenAPI / Swagger document adapter.

Converts OpenAPI 3.x and Swagger 2.0 documents into a SourceDescription.
Named schemas stay as references, except that `allOf` base schemas are
flattened into the derived schema's properties. Parameters, request bodies
and responses declared through `$ref` are followed.
"""

import logging
from urllib.parse import urlsplit

from swagger2blocks.errors import ParseFailure
from swagger2blocks.parser.base import (
    OperationDecl,
    ParamDecl,
    PropertyDecl,
    SchemaDecl,
    SourceDescription,
    TypeRef,
)
from swagger2blocks.parser.detect import detect_version

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

MAX_REF_DEPTH = 10


def parse_description(doc: dict, url: str = "", location: str = "") -> SourceDescription:
    """Parse an OpenAPI/Swagger mapping into a SourceDescription.

    `url` is where the document was fetched from; it seeds the site.
    """
    version = detect_version(doc, location)
    try:
        named = _named_schemas(doc, version)
        return SourceDescription(
            site=resolve_site(doc, version, url),
            schemas=[_parse_schema(name, schema, named) for name, schema in named.items()],
            operations=_parse_paths(doc, version),
        )
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise ParseFailure(f"unexpected document shape: {e!r}", location) from e


def resolve_site(doc: dict, version: str, url: str = "") -> str:
    """Pick the base URL that generated requests are sent to."""
    servers = _server_urls(doc, version)
    if not url:
        return servers[0] if servers else ""

    parts = urlsplit(url)
    site = f"{parts.scheme}://{parts.netloc}"
    for server in servers:
        if server.startswith(site):
            return server
    return site


def ref_identifier(ref: str) -> str:
    """'#/components/schemas/Widget' -> 'Widget'."""
    return ref.rsplit("/", 1)[-1].replace("~1", "/").replace("~0", "~")


def _server_urls(doc: dict, version: str) -> list[str]:
    if version == "openapi3":
        return [s["url"] for s in doc.get("servers") or [] if s.get("url")]
    host = doc.get("host")
    if not host:
        return []
    base_path = doc.get("basePath") or ""
    return [f"{scheme}://{host}{base_path}" for scheme in doc.get("schemes") or ["https"]]


def _named_schemas(doc: dict, version: str) -> dict:
    if version == "openapi3":
        return (doc.get("components") or {}).get("schemas") or {}
    return doc.get("definitions") or {}


def _type_ref(schema) -> TypeRef:
    if not isinstance(schema, dict):
        return TypeRef()
    ref = schema.get("$ref")
    kind = schema.get("type")
    if isinstance(kind, list):
        # OpenAPI 3.1 allows ["string", "null"]
        kind = next((k for k in kind if k != "null"), None)
    return TypeRef(ref=ref_identifier(ref) if ref else None, type=kind)


def _parse_schema(name: str, schema: dict, named: dict) -> SchemaDecl:
    properties: dict[str, PropertyDecl] = {}
    for prop_name, prop_schema in _collect_properties(schema, named, {name}):
        properties[prop_name] = PropertyDecl(name=prop_name, type_ref=_type_ref(prop_schema))

    return SchemaDecl(
        identifier=name,
        name=name,
        kind=_type_ref(schema).type or "object",
        properties=list(properties.values()),
    )


def _collect_properties(schema: dict, named: dict, seen: set) -> list[tuple]:
    """Inherited `allOf` properties first, then the schema's own.

    A referenced base schema contributes its properties; `seen` stops cycles.
    """
    collected = []
    for member in schema.get("allOf") or []:
        ref = member.get("$ref")
        if ref:
            base = ref_identifier(ref)
            if base in seen or not isinstance(named.get(base), dict):
                continue
            collected.extend(_collect_properties(named[base], named, seen | {base}))
        else:
            collected.extend(_collect_properties(member, named, seen))
    collected.extend((schema.get("properties") or {}).items())
    return collected


def _deref(doc: dict, obj):
    """Follow local `$ref` pointers such as '#/components/parameters/Limit'."""
    for _ in range(MAX_REF_DEPTH):
        if not isinstance(obj, dict) or "$ref" not in obj:
            return obj
        ref = obj["$ref"]
        if not ref.startswith("#/"):
            raise ValueError(f"external reference not supported: {ref}")
        target = doc
        for segment in ref[2:].split("/"):
            target = target[segment.replace("~1", "/").replace("~0", "~")]
        obj = target
    raise ValueError(f"reference chain too deep: {obj.get('$ref')}")


def _parse_paths(doc: dict, version: str) -> list[OperationDecl]:
    operations = []
    for route, path_item in (doc.get("paths") or {}).items():
        path_item = _deref(doc, path_item)
        if not isinstance(path_item, dict):
            logger.debug("skipping path %s: not a mapping", route)
            continue
        shared = path_item.get("parameters") or []
        for verb, operation in path_item.items():
            if verb.lower() not in HTTP_METHODS:
                continue
            operations.append(_parse_operation(doc, version, route, verb, operation, shared))
    return operations


def _parse_operation(
    doc: dict, version: str, route: str, verb: str, operation: dict, shared: list
) -> OperationDecl:
    parameters = []
    request_body = None
    for p in _merge_parameters(doc, shared, operation.get("parameters") or []):
        location = p.get("in")
        if version == "swagger2" and location == "body":
            request_body = _type_ref(p.get("schema"))
            continue
        parameters.append(
            ParamDecl(name=p["name"], location=location, type_ref=_type_ref(_parameter_schema(p)))
        )

    if version == "openapi3" and operation.get("requestBody"):
        body = _deref(doc, operation["requestBody"])
        content = body.get("content") or {}
        if content:
            request_body = _type_ref(_first_content_schema(content))

    responses = {}
    for status_code, resp in (operation.get("responses") or {}).items():
        responses[str(status_code)] = _response_schema(_deref(doc, resp), version)

    return OperationDecl(
        route=route,
        verb=verb.upper(),
        tags=[str(t) for t in operation.get("tags") or []],
        parameters=parameters,
        request_body=request_body,
        responses=responses,
    )


def _merge_parameters(doc: dict, shared: list, own: list) -> list[dict]:
    """Path-level parameters first; an operation parameter overrides by (name, in)."""
    merged: dict[tuple, dict] = {}
    for p in shared + own:
        p = _deref(doc, p)
        merged[(p["name"], p.get("in"))] = p
    return list(merged.values())


def _parameter_schema(param: dict):
    if "schema" in param:
        return param["schema"]
    if "content" in param:
        return _first_content_schema(param["content"])
    # Swagger 2.0 declares type on the parameter itself
    return param


def _first_content_schema(content: dict):
    for media in content.values():
        return (media or {}).get("schema")
    return None


def _response_schema(resp, version: str) -> TypeRef | None:
    if not isinstance(resp, dict):
        return None
    if version == "swagger2":
        schema = resp.get("schema")
    else:
        schema = _first_content_schema(resp.get("content") or {})
    if schema is None:
        return None
    return _type_ref(schema)
