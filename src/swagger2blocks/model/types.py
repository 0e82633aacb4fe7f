"""Handles of the resolved type graph.

Types are compared by identity: a property, parameter or return type
points at the very handle its catalog owns.
"""

from dataclasses import dataclass, field
from enum import Enum

from swagger2blocks.parser.base import TypeRef


class BindingSource(str, Enum):
    """Where an operation reads a parameter from."""

    PATH = "path"
    QUERY = "query"
    BODY = "body"
    NONE = "none"

    @classmethod
    def from_location(cls, location: str | None) -> "BindingSource":
        """Classify a declared parameter location, case-insensitively."""
        value = (location or "").lower()
        if value == "path":
            return cls.PATH
        if value == "query":
            return cls.QUERY
        return cls.NONE


@dataclass(eq=False)
class PropertyInfo:
    name: str
    type_ref: TypeRef
    # filled in by the resolver; may point back at the owning type
    property_type: "TypeInfo | None" = field(default=None, repr=False)


@dataclass(eq=False)
class TypeInfo:
    identifier: str
    name: str
    kind: str
    properties: list[PropertyInfo] = field(default_factory=list)
    is_primitive: bool = False

    def get_property(self, name: str) -> PropertyInfo | None:
        return next((p for p in self.properties if p.name == name), None)


@dataclass(frozen=True, eq=False)
class ActionInfo:
    """One operation, typed against its source's catalog."""

    verb: str
    route: str
    controller_name: str
    action_name: str
    site: str
    return_type: TypeInfo
    params: dict[str, tuple[TypeInfo, BindingSource]]
