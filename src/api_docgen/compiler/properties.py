"""Property tree builder: flat field lists to nested property descriptions."""

from __future__ import annotations

import re

from pydantic import BaseModel

from api_docgen.compiler.types import format_type
from api_docgen.schema.base import Endpoint, InlineType, QueryParam, TypeDef, TypeField, TypeRef, lookup_type

MAX_DEPTH = 3

# A bare type name, optionally followed by "[]".
_TYPE_NAME = re.compile(r"^(\w+)(\[\])?$")


class PropertyNode(BaseModel):
    name: str
    type: str
    required: bool = False
    description: str = ""
    children: list[PropertyNode] | None = None


def build_properties(fields: list[TypeField], types: dict[str, TypeDef], depth: int = 0) -> list[PropertyNode]:
    """Convert fields to property nodes, expanding referenced types as children.

    Expansion stops past ``MAX_DEPTH`` levels; self-referencing types repeat
    until then.
    """
    if depth > MAX_DEPTH:
        return []

    nodes = []
    for field in fields:
        children = None
        match = _TYPE_NAME.match(field.type)
        if match:
            referenced = types.get(match.group(1))
            if referenced is not None and referenced.fields:
                children = build_properties(referenced.fields, types, depth + 1)

        nodes.append(
            PropertyNode(
                name=field.wire_name,
                type=format_type(field.type),
                required=not field.optional,
                description=field.description,
                children=children,
            )
        )
    return nodes


def query_param_properties(params: list[QueryParam]) -> list[PropertyNode]:
    return [
        PropertyNode(
            name=p.name,
            type=format_type(p.type),
            required=p.required,
            description=p.description,
        )
        for p in params
    ]


def request_properties(endpoint: Endpoint, types: dict[str, TypeDef]) -> list[PropertyNode]:
    """Properties of the request body; empty when the request type does not resolve."""
    request = endpoint.request
    if isinstance(request, TypeRef):
        type_def = lookup_type(types, request.ref)
        if type_def is None:
            return []
        return build_properties(type_def.fields, types)
    if isinstance(request, InlineType):
        return build_properties(request.fields, types)
    return []
