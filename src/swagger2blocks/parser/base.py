"""Normalized view of one API description.

Every producer (a remote OpenAPI document, a Swagger 2.0 document, or a
local enumeration of in-process operations) converts its input into these
models before the type graph is built.
"""

from pydantic import BaseModel


class TypeRef(BaseModel):
    """Either a reference to a named schema, a primitive type name, or both."""

    ref: str | None = None  # identifier of a named schema
    type: str | None = None  # string / integer / number / boolean / array / object


class PropertyDecl(BaseModel):
    name: str
    type_ref: TypeRef = TypeRef()


class SchemaDecl(BaseModel):
    """A named schema, declared before any property is resolved."""

    identifier: str
    name: str
    kind: str = "object"
    properties: list[PropertyDecl] = []


class ParamDecl(BaseModel):
    name: str
    location: str | None = None  # path / query / header / cookie / formData
    type_ref: TypeRef = TypeRef()


class OperationDecl(BaseModel):
    """One route + verb pair."""

    route: str
    verb: str
    tags: list[str] = []
    parameters: list[ParamDecl] = []
    request_body: TypeRef | None = None
    responses: dict[str, TypeRef | None] = {}  # {status_code: schema}


class SourceDescription(BaseModel):
    site: str = ""
    schemas: list[SchemaDecl] = []
    operations: list[OperationDecl] = []
