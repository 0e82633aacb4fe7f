"""Two-pass construction of a type graph.

Pass 1 declares every named schema; pass 2 attaches property types by
looking up existing handles only, so forward and self references resolve
without recursion.
"""

import logging

from swagger2blocks.model.catalog import UNKNOWN_TYPE, TypeCatalog
from swagger2blocks.model.types import PropertyInfo, TypeInfo
from swagger2blocks.parser.base import SchemaDecl, TypeRef

logger = logging.getLogger(__name__)


def declare_schemas(catalog: TypeCatalog, schemas: list[SchemaDecl]) -> None:
    """Pass 1: one handle per schema, properties left unresolved."""
    seen = set()
    for schema in schemas:
        handle = catalog.declare(schema.identifier, schema.kind, schema.name)
        if handle.is_primitive or handle is UNKNOWN_TYPE:
            logger.debug("schema %s shadows a built-in type, properties ignored", schema.identifier)
            continue
        if schema.identifier in seen:
            # same identifier declared twice: first declaration wins
            continue
        seen.add(schema.identifier)
        handle.properties = [PropertyInfo(name=p.name, type_ref=p.type_ref) for p in schema.properties]


def resolve_properties(catalog: TypeCatalog) -> None:
    """Pass 2: fill in every property type that is still missing."""
    for handle in catalog:
        for prop in handle.properties:
            if prop.property_type is None:
                prop.property_type = resolve_ref(catalog, prop.type_ref)


def resolve_ref(catalog: TypeCatalog, type_ref: TypeRef | None) -> TypeInfo:
    """Schema reference first, then primitive name, then the unknown sentinel."""
    if type_ref is None:
        return catalog.find(None)
    if type_ref.ref:
        return catalog.find(type_ref.ref)
    return catalog.find(type_ref.type)


def build_catalog(schemas: list[SchemaDecl]) -> TypeCatalog:
    catalog = TypeCatalog()
    declare_schemas(catalog, schemas)
    resolve_properties(catalog)
    return catalog
