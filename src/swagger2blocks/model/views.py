"""Render-agnostic projection of the model.

Type references are flattened to identifiers so the projection can be
serialized even when the type graph is cyclic.
"""

from pydantic import BaseModel

from swagger2blocks.model.types import ActionInfo, BindingSource, TypeInfo


class PropertyView(BaseModel):
    name: str
    type: str


class TypeView(BaseModel):
    source: str
    identifier: str
    name: str
    kind: str
    is_primitive: bool = False
    properties: list[PropertyView] = []

    @classmethod
    def from_type(cls, source: str, handle: TypeInfo) -> "TypeView":
        return cls(
            source=source,
            identifier=handle.identifier,
            name=handle.name,
            kind=handle.kind,
            is_primitive=handle.is_primitive,
            properties=[
                PropertyView(name=p.name, type=p.property_type.identifier)
                for p in handle.properties
                if p.property_type is not None
            ],
        )


class ParamView(BaseModel):
    name: str
    type: str
    binding: BindingSource


class ActionView(BaseModel):
    source: str
    verb: str
    route: str
    controller_name: str
    action_name: str
    site: str
    return_type: str
    params: list[ParamView] = []

    @classmethod
    def from_action(cls, source: str, action: ActionInfo) -> "ActionView":
        return cls(
            source=source,
            verb=action.verb,
            route=action.route,
            controller_name=action.controller_name,
            action_name=action.action_name,
            site=action.site,
            return_type=action.return_type.identifier,
            params=[
                ParamView(name=name, type=param_type.identifier, binding=binding)
                for name, (param_type, binding) in action.params.items()
            ],
        )


class ModelSnapshot(BaseModel):
    keys: list[str] = []
    failed_keys: list[str] = []
    actions: list[ActionView] = []
    types: list[TypeView] = []
