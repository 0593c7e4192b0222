"""Serialize document fragments to MDX."""

import json

import yaml

from api_docgen.compiler.document import (
    Block,
    Callout,
    CardGrid,
    CodeBlock,
    CodeSnippets,
    Document,
    EndpointSection,
    Frontmatter,
    Heading,
    Import,
    MethodHeader,
    Paragraph,
    PropertyTree,
    Redirect,
    Rule,
    StatusTable,
    Table,
    Wrapper,
)
from api_docgen.compiler.properties import PropertyNode
from api_docgen.compiler.text import escape_template

INDICATOR_COLORS = {
    "green": "var(--sl-color-green)",
    "blue": "var(--sl-color-blue)",
    "orange": "var(--sl-color-orange)",
    "red": "var(--sl-color-red)",
}


def emit(document: Document) -> str:
    parts = [_frontmatter(document.frontmatter)]
    if document.imports:
        parts.append("\n".join(_import(i) for i in document.imports))
    parts.extend(emit_node(node) for node in document.body)
    return "\n\n".join(parts) + "\n"


def emit_node(node) -> str:
    try:
        emitter = _EMITTERS[type(node)]
    except KeyError:
        raise TypeError(f"Cannot emit {type(node).__name__}") from None
    return emitter(node)


def _js_string(text: str) -> str:
    """JSX expression holding a JSON string literal."""
    return "{" + json.dumps(text, ensure_ascii=False) + "}"


def _frontmatter(fm: Frontmatter) -> str:
    data = {"title": fm.title}
    if fm.description:
        data["description"] = fm.description
    if fm.table_of_contents is not None:
        data["tableOfContents"] = fm.table_of_contents
    body = yaml.safe_dump(data, sort_keys=False, allow_unicode=True, width=1000)
    return f"---\n{body}---"


def _import(imp: Import) -> str:
    if imp.default:
        return f"import {imp.names[0]} from '{imp.source}';"
    if len(imp.names) <= 3:
        return f"import {{ {', '.join(imp.names)} }} from '{imp.source}';"
    names = "".join(f"  {name},\n" for name in imp.names)
    return f"import {{\n{names}}} from '{imp.source}';"


def _heading(node: Heading) -> str:
    text = f"`{node.text}`" if node.code else node.text
    return f"{'#' * node.level} {text}"


def _paragraph(node: Paragraph) -> str:
    return node.text


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def _table(node: Table) -> str:
    lines = [
        "| " + " | ".join(node.headers) + " |",
        "|" + "|".join("-" * (len(h) + 2) for h in node.headers) + "|",
    ]
    for row in node.rows:
        lines.append("| " + " | ".join(_cell(c) for c in row) + " |")
    return "\n".join(lines)


def _code_block(node: CodeBlock) -> str:
    return f"```{node.language}\n{node.code}\n```"


def _callout(node: Callout) -> str:
    return f'<Callout type="{node.kind}" client:load>\n  {node.text}\n</Callout>'


def property_dict(prop: PropertyNode) -> dict:
    data = {"name": prop.name, "type": prop.type}
    if prop.required:
        data["required"] = True
    if prop.description:
        data["description"] = prop.description
    if prop.children:
        data["children"] = [property_dict(c) for c in prop.children]
    return data


def _property_tree(node: PropertyTree) -> str:
    props = json.dumps([property_dict(p) for p in node.properties], ensure_ascii=False)
    return f"<PropertyTree properties={{{props}}} client:load />"


def _method_header(node: MethodHeader) -> str:
    return (
        "<MethodHeader\n"
        f'  method="{node.method}"\n'
        f'  path="{node.path}"\n'
        f"  title={_js_string(node.title)}\n"
        f"  description={_js_string(node.description)}\n"
        "  client:load\n"
        "/>"
    )


def _status_table(node: StatusTable) -> str:
    lines = ["| Status | Description |", "|--------|-------------|"]
    for row in node.rows:
        color = INDICATOR_COLORS[row.indicator]
        badge = (
            "<span style={{ display: 'inline-flex', alignItems: 'center', gap: '0.5rem' }}>"
            "<span style={{ width: '8px', height: '8px', borderRadius: '50%', "
            f"backgroundColor: '{color}' }}}} />`{row.status}`</span>"
        )
        lines.append(f"| {badge} | {_cell(row.description)} |")
    return "\n".join(lines)


def _code_snippets(node: CodeSnippets) -> str:
    examples = ",\n".join(
        f"    {{ language: '{ex.language}', code: `{escape_template(ex.code)}` }}"
        for ex in node.examples
    )
    text = f"<CodeSnippets\n  examples={{[\n{examples}\n  ]}}"
    if node.response:
        text += f"\n  response={{`{escape_template(node.response)}`}}"
    return text + "\n/>"


def _block(node: Block) -> str:
    parts = [f"### {node.title}"] if node.title else []
    inner = "\n\n".join(parts + [emit_node(c) for c in node.children])
    return f"<div style={{{{ marginTop: '2rem' }}}}>\n\n{inner}\n\n</div>"


def _endpoint_section(node: EndpointSection) -> str:
    left = "\n\n".join(emit_node(n) for n in node.left)
    return (
        f'<div id="{node.anchor}">\n'
        "<MethodPage client:load>\n"
        "<MethodPageLeft client:load>\n\n"
        f"{left}\n\n"
        "</MethodPageLeft>\n"
        "<MethodPageRight client:load>\n"
        f"{_code_snippets(node.right)}\n"
        "</MethodPageRight>\n"
        "</MethodPage>\n"
        "</div>"
    )


def _card_grid(node: CardGrid) -> str:
    cards = "\n".join(
        "  <LinkCard\n"
        f'    href="{card.href}"\n'
        f"    title={_js_string(card.title)}\n"
        f"    description={_js_string(card.description)}\n"
        f'    icon="{card.icon}"\n'
        "    client:load\n"
        "  />"
        for card in node.cards
    )
    return f"<CardGrid client:load>\n{cards}\n</CardGrid>"


def _redirect(node: Redirect) -> str:
    return f'<meta httpEquiv="refresh" content="0; url={node.url}" />'


def _wrapper(node: Wrapper) -> str:
    inner = "\n\n".join(emit_node(c) for c in node.children)
    return f'<div className="{node.class_name}">\n\n{inner}\n\n</div>'


def _rule(node: Rule) -> str:
    return "---"


_EMITTERS = {
    Heading: _heading,
    Paragraph: _paragraph,
    Table: _table,
    CodeBlock: _code_block,
    Callout: _callout,
    PropertyTree: _property_tree,
    MethodHeader: _method_header,
    StatusTable: _status_table,
    CodeSnippets: _code_snippets,
    Block: _block,
    EndpointSection: _endpoint_section,
    CardGrid: _card_grid,
    Redirect: _redirect,
    Wrapper: _wrapper,
    Rule: _rule,
}
