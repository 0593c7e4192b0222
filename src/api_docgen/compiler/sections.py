"""Per-endpoint section renderers.

Every renderer is total: a piece that is absent or does not resolve in the
schema tables renders as an empty fragment list, never as an error.
"""

import json

from api_docgen.compiler.document import (
    Block,
    CodeBlock,
    CodeExample,
    CodeSnippets,
    EndpointSection,
    Heading,
    MethodHeader,
    Node,
    Paragraph,
    PropertyTree,
    StatusRow,
    StatusTable,
    Table,
)
from api_docgen.compiler.examples import synthesize_response, synthesize_wire_example, wire_language
from api_docgen.compiler.properties import query_param_properties, request_properties
from api_docgen.compiler.text import slugify
from api_docgen.compiler.types import format_type
from api_docgen.config import SiteConfig
from api_docgen.schema.base import (
    ApiResponse,
    Endpoint,
    SdkExample,
    TypeDef,
    TypeField,
    TypeRef,
    WebSocketMessageDef,
    lookup_message,
    lookup_type,
    ref_name,
)

FIELD_HEADERS = ["Field", "Type", "Description"]


def anchor_id(name: str) -> str:
    """Anchor for an endpoint section; sidebar links use the same id."""
    return slugify(name)


def const_note(field: TypeField) -> str:
    return f' (const: `"{field.const}"`)' if field.const else ""


def method_header(endpoint: Endpoint) -> MethodHeader:
    return MethodHeader(
        method=endpoint.method,
        path=endpoint.path,
        title=endpoint.name,
        description=endpoint.description,
    )


def query_section(endpoint: Endpoint) -> list[Node]:
    props = query_param_properties(endpoint.query_params)
    if not props:
        return []
    return [Block("Query Parameters", [PropertyTree(props)])]


def request_section(endpoint: Endpoint, types: dict[str, TypeDef]) -> list[Node]:
    props = request_properties(endpoint, types)
    if not props:
        return []
    return [Block("Request Body", [PropertyTree(props)])]


def status_indicator(status: int) -> str:
    if status < 300:
        return "green"
    if status < 400:
        return "blue"
    if status < 500:
        return "orange"
    return "red"


def response_status_section(responses: list[ApiResponse]) -> list[Node]:
    if not responses:
        return []
    rows = [StatusRow(r.status, r.description, status_indicator(r.status)) for r in responses]
    return [Block("Responses", [StatusTable(rows)])]


def field_table(fields: list[TypeField]) -> Table:
    rows = [
        [f"`{f.wire_name}`", f"`{format_type(f.type)}`", f"{f.description}{const_note(f)}"]
        for f in fields
    ]
    return Table(FIELD_HEADERS, rows)


def _message_nodes(name: str, msg: WebSocketMessageDef) -> list[Node]:
    nodes: list[Node] = [Heading(4, name)]
    if msg.fields:
        nodes.append(field_table(msg.fields))
    if msg.example is not None:
        nodes.append(CodeBlock(json.dumps(msg.example, indent=2, ensure_ascii=False), "json"))
    return nodes


def _direction_nodes(title: str, refs: list[TypeRef], messages: dict[str, WebSocketMessageDef]) -> list[Node]:
    nodes: list[Node] = []
    for ref in refs:
        msg = lookup_message(messages, ref.ref)
        if msg is not None:
            nodes.extend(_message_nodes(ref_name(ref.ref), msg))
    if not nodes:
        return []
    return [Heading(3, title)] + nodes


def socket_message_section(endpoint: Endpoint, messages: dict[str, WebSocketMessageDef]) -> list[Node]:
    """Client-to-server and server-to-client message docs, each direction optional."""
    if endpoint.messages is None:
        return []
    nodes = _direction_nodes("Client → Server Messages", endpoint.messages.client_to_server, messages)
    nodes += _direction_nodes("Server → Client Messages", endpoint.messages.server_to_client, messages)
    if not nodes:
        return []
    return [Block("", nodes)]


def event_type(name: str, type_def: TypeDef) -> str:
    """Tag for a stream event: the ``type`` field's constant, else derived from the name."""
    for field in type_def.fields:
        if field.wire_name == "type" and field.const:
            return field.const
    return name.removesuffix("Event").lower()


def streaming_event_section(endpoint: Endpoint, types: dict[str, TypeDef]) -> list[Node]:
    if not endpoint.stream_response or not endpoint.stream_message_types:
        return []

    nodes: list[Node] = []
    for ref in endpoint.stream_message_types:
        type_def = lookup_type(types, ref.ref)
        if type_def is None:
            continue
        nodes.append(Heading(4, event_type(ref_name(ref.ref), type_def), code=True))
        if type_def.fields:
            nodes.append(field_table(type_def.fields))
        if type_def.example is not None:
            nodes.append(CodeBlock(json.dumps(type_def.example, separators=(",", ":"), ensure_ascii=False), "json"))

    if not nodes:
        return []
    intro = Paragraph("This endpoint returns streaming NDJSON. Each line is one of these event types:")
    return [Block("Streaming Events", [intro] + nodes)]


def example_tabs(
    endpoint: Endpoint,
    types: dict[str, TypeDef],
    sdk_examples: dict[str, SdkExample | None],
    site: SiteConfig,
) -> list[CodeExample]:
    """Code tabs in fixed order: CLI, each SDK with a snippet, then the wire example.

    ``sdk_examples`` maps an SDK key (``go``, ``js``, ...) to that SDK's example
    for this endpoint, or ``None``. The wire example is always present.
    """
    tabs = []
    ordered = [(key, sdk_examples.get(key)) for key in site.sdk_languages]

    cli_command = next(
        (ex.cli_command.strip() for _, ex in ordered if ex is not None and ex.cli_command.strip()),
        None,
    )
    if cli_command:
        tabs.append(CodeExample("cli", cli_command))

    for key, ex in ordered:
        if ex is not None and ex.sdk_code:
            tabs.append(CodeExample(site.sdk_languages[key], ex.sdk_code.strip()))

    tabs.append(CodeExample(wire_language(endpoint), synthesize_wire_example(endpoint, types, site)))
    return tabs


def endpoint_section(
    endpoint: Endpoint,
    types: dict[str, TypeDef],
    messages: dict[str, WebSocketMessageDef],
    sdk_examples: dict[str, SdkExample | None],
    site: SiteConfig,
) -> EndpointSection:
    left: list[Node] = [method_header(endpoint)]
    left += query_section(endpoint)
    left += request_section(endpoint, types)
    left += response_status_section(endpoint.responses)
    left += socket_message_section(endpoint, messages)
    left += streaming_event_section(endpoint, types)

    snippets = CodeSnippets(
        examples=example_tabs(endpoint, types, sdk_examples, site),
        response=synthesize_response(endpoint, types),
    )
    return EndpointSection(anchor=anchor_id(endpoint.name), left=left, right=snippets)
