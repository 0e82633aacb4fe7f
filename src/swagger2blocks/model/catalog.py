"""Deduplicated registry of the types discovered in one source."""

import logging
from collections.abc import Iterator

from swagger2blocks.model.types import TypeInfo

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = ("string", "integer", "number", "boolean", "array", "object", "file")

UNKNOWN_TYPE_ID = "__unknown__"

# Shared by every catalog; renders as an untyped placeholder.
UNKNOWN_TYPE = TypeInfo(identifier=UNKNOWN_TYPE_ID, name="unknown", kind="unknown")


class TypeCatalog:
    """Types keyed by identifier, in declaration order.

    Lookups never fail: anything missing resolves to UNKNOWN_TYPE.
    """

    def __init__(self):
        self._types: dict[str, TypeInfo] = {UNKNOWN_TYPE_ID: UNKNOWN_TYPE}
        for name in PRIMITIVE_TYPES:
            self._types[name] = TypeInfo(identifier=name, name=name, kind=name, is_primitive=True)

    def declare(self, identifier: str, kind: str, name: str) -> TypeInfo:
        """Create the handle for `identifier`, or return the existing one."""
        existing = self._types.get(identifier)
        if existing is not None:
            if existing.kind != kind:
                logger.debug(
                    "type %s redeclared as %s, keeping %s", identifier, kind, existing.kind
                )
            return existing
        handle = TypeInfo(identifier=identifier, name=name, kind=kind)
        self._types[identifier] = handle
        return handle

    def find(self, identifier: str | None) -> TypeInfo:
        if not identifier:
            return UNKNOWN_TYPE
        return self._types.get(identifier, UNKNOWN_TYPE)

    def declared(self) -> list[TypeInfo]:
        """Types declared from schemas, excluding primitives and the sentinel."""
        return [t for t in self if not t.is_primitive and t is not UNKNOWN_TYPE]

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._types

    def __iter__(self) -> Iterator[TypeInfo]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)
