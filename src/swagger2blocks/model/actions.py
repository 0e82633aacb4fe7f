"""Turns described operations into actions typed against a catalog."""

import logging
import re

from swagger2blocks.errors import ParameterConflict
from swagger2blocks.model.catalog import UNKNOWN_TYPE, TypeCatalog
from swagger2blocks.model.resolver import resolve_ref
from swagger2blocks.model.types import ActionInfo, BindingSource, TypeInfo
from swagger2blocks.parser.base import OperationDecl, TypeRef

logger = logging.getLogger(__name__)

SUCCESS_STATUS = "200"

VERSION_SEGMENT = re.compile(r"^v\d+(\.\d+)*$", re.IGNORECASE)


def site_prefix(site: str) -> str:
    """'http://localhost:5000' -> 'http_localhost_5000'."""
    return re.sub(r"[^0-9A-Za-z]+", "_", site).strip("_")


def controller_name_for(route: str) -> str:
    """Synthesize a grouping name for an untagged route.

    Uses the first literal segment that is not 'api' or a version marker.
    """
    for segment in route.split("/"):
        if not segment or segment.startswith("{"):
            continue
        if segment.lower() == "api" or VERSION_SEGMENT.match(segment):
            continue
        return segment
    return "default"


def select_return_type(catalog: TypeCatalog, responses: dict[str, TypeRef | None]) -> TypeInfo:
    """Primitive of the 200 response (unless plain 'object'), then its reference."""
    schema = responses.get(SUCCESS_STATUS)
    if schema is None:
        return UNKNOWN_TYPE
    if schema.type and schema.type != "object":
        found = catalog.find(schema.type)
        if found is not UNKNOWN_TYPE:
            return found
    if schema.ref:
        return catalog.find(schema.ref)
    return UNKNOWN_TYPE


class ActionExtractor:
    """Builds one ActionInfo per operation of a single source."""

    def __init__(self, catalog: TypeCatalog, site: str = ""):
        self.catalog = catalog
        self.site = site

    def extract(self, operations: list[OperationDecl]) -> list[ActionInfo]:
        return [self.extract_one(op) for op in operations]

    def extract_one(self, operation: OperationDecl) -> ActionInfo:
        if operation.tags:
            controller_name = operation.tags[0]
        else:
            controller_name = controller_name_for(operation.route)

        action = ActionInfo(
            verb=operation.verb.upper(),
            route=operation.route,
            controller_name=controller_name,
            action_name=f"{site_prefix(self.site)}_{operation.route}",
            site=self.site,
            return_type=select_return_type(self.catalog, operation.responses),
            params=self._extract_params(operation),
        )
        logger.debug("extracted %s %s -> %s", action.verb, action.route, action.return_type.name)
        return action

    def _extract_params(self, operation: OperationDecl) -> dict[str, tuple[TypeInfo, BindingSource]]:
        params: dict[str, tuple[TypeInfo, BindingSource]] = {}
        for p in operation.parameters:
            param_type = resolve_ref(self.catalog, p.type_ref)
            self._add(params, operation, p.name, param_type, BindingSource.from_location(p.location))

        body = operation.request_body
        if body is not None and (body.ref or body.type):
            # body parameters are keyed by their type's name
            body_type = resolve_ref(self.catalog, body)
            self._add(params, operation, body_type.name, body_type, BindingSource.BODY)
        return params

    def _add(self, params, operation, key, param_type, binding) -> None:
        if key in params:
            raise ParameterConflict(
                f"{operation.verb.upper()} {operation.route}: parameter '{key}' declared twice"
            )
        params[key] = (param_type, binding)
