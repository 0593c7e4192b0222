"""Document fragment model.

Renderers and assemblers build trees of these nodes; ``emit`` is the only
stage that turns them into markup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from api_docgen.compiler.properties import PropertyNode


@dataclass
class Frontmatter:
    title: str
    description: str = ""
    table_of_contents: bool | None = None


@dataclass
class Import:
    names: list[str]
    source: str
    default: bool = False  # `import X from '...'` instead of `import { X } from '...'`


@dataclass
class Heading:
    level: int
    text: str
    code: bool = False  # render the heading text as inline code


@dataclass
class Paragraph:
    text: str


@dataclass
class Table:
    headers: list[str]
    rows: list[list[str]] = field(default_factory=list)


@dataclass
class CodeBlock:
    code: str
    language: str = ""


@dataclass
class Callout:
    kind: str  # info / tip / caution
    text: str


@dataclass
class PropertyTree:
    properties: list[PropertyNode]


@dataclass
class MethodHeader:
    method: str
    path: str
    title: str
    description: str = ""


@dataclass
class StatusRow:
    status: int
    description: str
    indicator: str  # green / blue / orange / red


@dataclass
class StatusTable:
    rows: list[StatusRow]


@dataclass
class CodeExample:
    language: str
    code: str


@dataclass
class CodeSnippets:
    examples: list[CodeExample]
    response: str = ""


@dataclass
class Block:
    """A group of nodes inside an endpoint's left pane, optionally titled."""

    title: str
    children: list[Node]


@dataclass
class EndpointSection:
    anchor: str
    left: list[Node]
    right: CodeSnippets


@dataclass
class LinkCard:
    href: str
    title: str
    description: str = ""
    icon: str = "code"


@dataclass
class CardGrid:
    cards: list[LinkCard]


@dataclass
class Redirect:
    url: str


@dataclass
class Wrapper:
    class_name: str
    children: list[Node]


@dataclass
class Rule:
    pass


Node = Union[
    Heading,
    Paragraph,
    Table,
    CodeBlock,
    Callout,
    PropertyTree,
    MethodHeader,
    StatusTable,
    CodeSnippets,
    Block,
    EndpointSection,
    CardGrid,
    Redirect,
    Wrapper,
    Rule,
]


@dataclass
class Document:
    frontmatter: Frontmatter
    imports: list[Import] = field(default_factory=list)
    body: list[Node] = field(default_factory=list)

    def walk(self):
        """Yield every body node depth-first."""
        stack = list(reversed(self.body))
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, (Wrapper, Block)):
                stack.extend(reversed(node.children))
            elif isinstance(node, EndpointSection):
                stack.append(node.right)
                stack.extend(reversed(node.left))
