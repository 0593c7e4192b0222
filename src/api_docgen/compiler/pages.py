"""Page assemblers: category pages, the overview, the type reference and the redirect."""

import json

from api_docgen.compiler.document import (
    Callout,
    CardGrid,
    CodeBlock,
    Document,
    Frontmatter,
    Heading,
    Import,
    LinkCard,
    Node,
    Paragraph,
    PropertyTree,
    Redirect,
    Rule,
    Table,
    Wrapper,
)
from api_docgen.compiler.properties import PropertyNode
from api_docgen.compiler.sections import const_note, endpoint_section
from api_docgen.compiler.types import format_type
from api_docgen.config import SiteConfig
from api_docgen.schema.base import (
    Endpoint,
    EnumDef,
    SchemaDocument,
    SdkExampleSet,
    TypeDef,
    TypeField,
    WebSocketMessageDef,
)

FULL_WIDTH = "api-full-width"
COMPONENTS = "@/components/react"
DEFAULT_CATEGORY = "other"

SOCKET_CALLOUT = (
    "**WebSocket Endpoints** — Some endpoints in this section use WebSocket for "
    "bidirectional communication. The SDK handles the connection protocol automatically."
)

SDK_CARDS = [
    LinkCard("/sdks/javascript", "JavaScript SDK", "TypeScript/JavaScript client"),
    LinkCard("/sdks/go", "Go SDK", "Native Go client"),
    LinkCard("/sdks/python", "Python SDK", "Python client library"),
    LinkCard("/sdks/elixir", "Elixir SDK", "Elixir client library"),
]


def category_title(category: str, site: SiteConfig) -> str:
    return site.category_titles.get(category) or category[:1].upper() + category[1:]


def category_description(category: str, site: SiteConfig) -> str:
    return site.category_descriptions.get(category) or f"{category_title(category, site)} API endpoints"


def group_by_category(endpoints: list[Endpoint]) -> dict[str, list[Endpoint]]:
    """Group endpoints by category, keys sorted, endpoint order preserved."""
    groups: dict[str, list[Endpoint]] = {}
    for endpoint in endpoints:
        groups.setdefault(endpoint.category or DEFAULT_CATEGORY, []).append(endpoint)
    return {category: groups[category] for category in sorted(groups)}


def version_path(site: SiteConfig, version_id: str, page: str = "") -> str:
    base = f"{site.docs_prefix}/{version_id}"
    return f"{base}/{page}" if page else base


def assemble_category_page(
    category: str,
    endpoints: list[Endpoint],
    types: dict[str, TypeDef],
    messages: dict[str, WebSocketMessageDef],
    example_sets: dict[str, SdkExampleSet],
    site: SiteConfig,
) -> Document:
    """One page per category: every endpoint section in order, each followed by a rule."""
    children: list[Node] = []
    if any(e.is_socket for e in endpoints):
        children.append(Callout("info", SOCKET_CALLOUT))

    for endpoint in endpoints:
        sdk_examples = {
            lang: example_set.find(endpoint.method, endpoint.path)
            for lang, example_set in example_sets.items()
        }
        children.append(endpoint_section(endpoint, types, messages, sdk_examples, site))
        children.append(Rule())

    return Document(
        frontmatter=Frontmatter(
            title=f"{category_title(category, site)} API",
            description=category_description(category, site),
            table_of_contents=False,
        ),
        imports=[
            Import(
                ["MethodPage", "MethodPageLeft", "MethodPageRight", "MethodHeader", "PropertyTree", "Callout"],
                COMPONENTS,
            ),
            Import(["CodeSnippets"], "@/components/CodeSnippets.astro", default=True),
        ],
        body=[Wrapper(FULL_WIDTH, children)],
    )


def assemble_index_page(
    categories: list[str],
    schema: SchemaDocument,
    version_id: str,
    site: SiteConfig,
) -> Document:
    """Overview page linking every manual page and every generated category."""
    cards = [
        LinkCard(version_path(site, version_id, page.category), page.title, page.description)
        for page in site.manual_pages
    ]
    cards += [
        LinkCard(
            version_path(site, version_id, category),
            category_title(category, site),
            category_description(category, site),
        )
        for category in categories
    ]

    auth_example = (
        f'curl -H "Authorization: Bearer ${site.curl_token_var}" \\\n'
        f"  {site.api_base_url}/v1/sprites"
    )
    body: list[Node] = [
        Paragraph(
            "The Sprites API allows you to manage Sprites programmatically via HTTP and WebSocket requests."
        ),
        Heading(2, "Base URL"),
        CodeBlock(site.api_base_url),
        Heading(2, "Authentication"),
        Paragraph("All API requests require authentication via Bearer token:"),
        CodeBlock(auth_example, "bash"),
        Callout(
            "tip",
            "Create a token at [sprites.dev/account](https://sprites.dev/account), "
            "or generate one via the CLI with `sprite org auth`.",
        ),
        Heading(2, "API Categories"),
        CardGrid(cards),
        Heading(2, "SDK Libraries"),
        Paragraph("For a better developer experience, use our official SDKs:"),
        CardGrid(list(SDK_CARDS)),
        Heading(2, "Version"),
        Paragraph(f"API Version: `{schema.version}`"),
    ]
    return Document(
        frontmatter=Frontmatter(
            title="API Reference",
            description="REST and WebSocket API for managing Sprites programmatically",
        ),
        imports=[Import(["LinkCard", "CardGrid", "Callout"], COMPONENTS)],
        body=body,
    )


def flat_properties(fields: list[TypeField]) -> list[PropertyNode]:
    """Top-level properties for the type reference; constants noted in the description."""
    return [
        PropertyNode(
            name=f.wire_name,
            type=format_type(f.type),
            required=not f.optional,
            description=f"{f.description}{const_note(f)}",
        )
        for f in fields
    ]


def _definition_nodes(name: str, fields: list[TypeField], example) -> list[Node]:
    nodes: list[Node] = [Heading(3, name), PropertyTree(flat_properties(fields))]
    if example is not None:
        nodes.append(Paragraph("**Example:**"))
        nodes.append(CodeBlock(json.dumps(example, indent=2, ensure_ascii=False), "json"))
    return nodes


def assemble_types_page(
    types: dict[str, TypeDef],
    enums: dict[str, EnumDef],
    messages: dict[str, WebSocketMessageDef],
) -> Document:
    """Reference for every type, enum and websocket message, in source order."""
    children: list[Node] = [
        Paragraph("This page documents the data types used throughout the Sprites API."),
        Heading(2, "Types"),
    ]
    for name, type_def in types.items():
        children += _definition_nodes(name, type_def.fields, type_def.example)

    children.append(Heading(2, "Enums"))
    for name, enum_def in enums.items():
        children.append(Heading(3, name))
        if enum_def.description:
            children.append(Paragraph(enum_def.description))
        children.append(Table(["Value"], [[f"`{v}`"] for v in enum_def.values]))

    children.append(Heading(2, "WebSocket Messages"))
    children.append(
        Paragraph("These message types are used for WebSocket communication in exec and proxy endpoints.")
    )
    for name, msg in messages.items():
        children += _definition_nodes(name, msg.fields, msg.example)

    return Document(
        frontmatter=Frontmatter(
            title="Type Definitions",
            description="API type, enum, and WebSocket message definitions",
            table_of_contents=False,
        ),
        imports=[Import(["PropertyTree"], COMPONENTS)],
        body=[Wrapper(FULL_WIDTH, children)],
    )


def assemble_redirect_page(site: SiteConfig) -> Document:
    """Root page that sends readers to the default version."""
    target = version_path(site, site.default_version.id) + "/"
    return Document(
        frontmatter=Frontmatter(
            title="API Reference",
            description="REST and WebSocket API for managing Sprites programmatically",
        ),
        imports=[Import(["Callout"], COMPONENTS)],
        body=[
            Redirect(target),
            Callout("info", "Redirecting to the latest API documentation..."),
            Paragraph(f"If you are not redirected automatically, [click here]({target})."),
        ],
    )
