"""Checks on a compiled version: sidebar anchors and schema references that do not resolve."""

from api_docgen.compiler.document import Document, EndpointSection
from api_docgen.compiler.sidebar import SidebarEntry, SidebarGroup, SidebarLink
from api_docgen.schema.base import Endpoint, SchemaDocument, TypeRef, ref_name


def collect_anchors(document: Document) -> set[str]:
    return {node.anchor for node in document.walk() if isinstance(node, EndpointSection)}


def iter_links(items: list[SidebarEntry]):
    for item in items:
        if isinstance(item, SidebarGroup):
            yield from iter_links(item.items)
        elif isinstance(item, SidebarLink):
            yield item


def validate_sidebar(items: list[SidebarEntry], pages: dict[str, Document]) -> dict[str, str]:
    """Check anchor links against generated category pages.

    ``pages`` maps category to its page. Links into pages not in ``pages``
    (manual pages) are not checked.
    Returns dict of {link: error_message} for links whose anchor is missing.
    """
    errors = {}
    anchors = {category: collect_anchors(page) for category, page in pages.items()}
    for link in iter_links(items):
        if not link.link or "#" not in link.link:
            continue
        page_path, anchor = link.link.split("#", 1)
        category = page_path.rstrip("/").rsplit("/", 1)[-1]
        if category not in anchors:
            continue
        if anchor not in anchors[category]:
            errors[link.link] = f"anchor '{anchor}' not found on page '{category}'"
    return errors


def _endpoint_refs(endpoint: Endpoint):
    """Yield (role, ref, table) for every ``$ref`` an endpoint page resolves."""
    if isinstance(endpoint.request, TypeRef):
        yield "request", endpoint.request.ref, "types"
    if isinstance(endpoint.response, TypeRef):
        yield "response", endpoint.response.ref, "types"
    for ref in endpoint.stream_message_types:
        yield "stream event", ref.ref, "types"
    if endpoint.messages is not None:
        for ref in endpoint.messages.client_to_server + endpoint.messages.server_to_client:
            yield "message", ref.ref, "websocket_messages"


def find_unresolved_refs(endpoints: list[Endpoint], schema: SchemaDocument) -> dict[str, str]:
    """Report references that render as nothing because their target is missing.

    Returns dict of {"endpoint: ref": message}.
    """
    tables = {"types": schema.types, "websocket_messages": schema.websocket_messages}
    errors = {}
    for endpoint in endpoints:
        for role, ref, table in _endpoint_refs(endpoint):
            if ref_name(ref) not in tables[table]:
                errors[f"{endpoint.name}: {ref}"] = f"unresolved {role} reference, no entry in {table}"
    return errors
