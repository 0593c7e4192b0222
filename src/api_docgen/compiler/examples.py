"""Example synthesizer — request bodies, wire-level calls and response JSON.

Canonical examples from the schema always win; synthesis only fills the gaps.
"""

import copy
import json
import re
import shlex
from typing import Any, NamedTuple

from api_docgen.compiler.text import slugify
from api_docgen.compiler.types import format_type
from api_docgen.config import SiteConfig
from api_docgen.schema.base import Endpoint, InlineType, TypeDef, TypeField, TypeRef, lookup_type

BODY_METHODS = ("POST", "PUT")

_PATH_PARAM = re.compile(r"\{(\w+)\}")


class FieldRule(NamedTuple):
    """Representative value for request fields of the given types.

    ``match`` is ``"exact"`` (lowercased field name equals ``pattern``) or
    ``"contains"`` (``pattern`` occurs in the lowercased field name).
    """

    types: frozenset[str]
    match: str
    pattern: str
    value: Any

    def applies(self, field: TypeField) -> bool:
        if field.type not in self.types:
            return False
        name = field.name.lower()
        if self.match == "exact":
            return name == self.pattern
        return self.pattern in name


# First matching rule wins.
FIELD_RULES = [
    FieldRule(frozenset({"string"}), "exact", "cmd", "python"),
    FieldRule(frozenset({"string"}), "exact", "comment", "my checkpoint"),
    FieldRule(frozenset({"[]string"}), "exact", "args", ["-m", "http.server", "8000"]),
    FieldRule(frozenset({"int", "*int"}), "contains", "port", 8000),
]

TYPE_FALLBACKS = {
    "[]string": [],
    "int": 0,
    "*int": 0,
}


def example_value(field: TypeField) -> Any:
    """Representative value for one field, or ``None`` when the type is not covered."""
    for rule in FIELD_RULES:
        if rule.applies(field):
            return copy.deepcopy(rule.value)
    if field.type == "string":
        return f"my-{slugify(field.wire_name)}"
    if field.type in TYPE_FALLBACKS:
        return copy.deepcopy(TYPE_FALLBACKS[field.type])
    return None


def synthesize_fields(fields: list[TypeField]) -> dict[str, Any]:
    body: dict[str, Any] = {}
    for field in fields:
        value = example_value(field)
        if value is not None:
            body[field.wire_name] = value
    return body


def synthesize_request_body(endpoint: Endpoint, types: dict[str, TypeDef]) -> Any:
    """Request body example: the type's canonical example, else synthesized fields.

    Returns ``None`` when the endpoint has no request or nothing can be synthesized.
    """
    request = endpoint.request
    if isinstance(request, TypeRef):
        type_def = lookup_type(types, request.ref)
        if type_def is None:
            return None
        if type_def.example is not None:
            return type_def.example
        fields = type_def.fields
    elif isinstance(request, InlineType):
        fields = request.fields
    else:
        return None

    return synthesize_fields(fields) or None


def wire_language(endpoint: Endpoint) -> str:
    return "websocat" if endpoint.is_socket else "curl"


def synthesize_wire_example(endpoint: Endpoint, types: dict[str, TypeDef], site: SiteConfig) -> str:
    """A ``curl`` call, or a ``websocat`` connection for socket endpoints."""
    if endpoint.is_socket:
        return (
            "websocat \\\n"
            f'  "{site.websocket_base_url}{endpoint.path}" \\\n'
            f'  -H "Authorization: Bearer ${site.websocat_token_var}"'
        )

    method = endpoint.method.upper()
    curl = "curl"
    if method != "GET":
        curl += f" -X {method}"
    curl += f' \\\n  -H "Authorization: Bearer ${site.curl_token_var}"'

    if method in BODY_METHODS and endpoint.request is not None:
        curl += ' \\\n  -H "Content-Type: application/json"'
        body = synthesize_request_body(endpoint, types)
        if body:
            data = json.dumps(body, separators=(",", ":"), ensure_ascii=False)
            curl += f" \\\n  -d {shlex.quote(data)}"

    curl += f' \\\n  "{site.api_base_url}{_shell_path(endpoint.path)}"'
    return curl


def _shell_path(path: str) -> str:
    """Replace path placeholders with shell variables.

    The first ``{name}`` is the sprite, a second one is a service.
    """
    path = path.replace("{name}", "$SPRITE_NAME", 1)
    path = path.replace("{name}", "$SERVICE_NAME", 1)
    return _PATH_PARAM.sub(lambda m: f"${m.group(1).upper()}", path)


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def synthesize_response(endpoint: Endpoint, types: dict[str, TypeDef]) -> str:
    """Response JSON for an endpoint, or ``""`` when nothing is available.

    Priority: endpoint example, the first 200 response body's type example,
    the response type's example, then a placeholder object from inline
    response fields. Socket endpoints show only their own example; nothing
    is synthesized for them.
    """
    if endpoint.example is not None:
        return _dump(endpoint.example)
    if endpoint.is_socket:
        return ""

    success = next((r for r in endpoint.responses if r.status == 200 and r.body), None)
    if success is not None:
        type_def = lookup_type(types, success.body.ref)
        if type_def is not None and type_def.example is not None:
            return _dump(type_def.example)

    response = endpoint.response
    if isinstance(response, TypeRef):
        type_def = lookup_type(types, response.ref)
        if type_def is not None and type_def.example is not None:
            return _dump(type_def.example)

    if isinstance(response, InlineType):
        placeholder = {f.wire_name: f"<{format_type(f.type)}>" for f in response.fields}
        return _dump(placeholder)

    return ""
