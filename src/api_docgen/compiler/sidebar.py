"""Navigation synchronizer: sidebar entries derived from the same grouping as the pages."""

from __future__ import annotations

from pydantic import BaseModel

from api_docgen.compiler.pages import category_title
from api_docgen.compiler.sections import anchor_id
from api_docgen.compiler.text import escape_attr
from api_docgen.config import ManualPage, SiteConfig
from api_docgen.schema.base import Endpoint


class SidebarBadge(BaseModel):
    text: str
    variant: str = "default"  # note / tip / caution / danger / success / default
    css_class: str | None = None


class SidebarLink(BaseModel):
    label: str
    slug: str | None = None
    link: str | None = None
    badge: SidebarBadge | None = None
    attrs: dict[str, str] | None = None


class SidebarGroup(BaseModel):
    label: str
    collapsed: bool = True
    items: list[SidebarLink | SidebarGroup] = []


SidebarEntry = SidebarLink | SidebarGroup

BADGE_VARIANTS = {"stable": "success", "dev": "caution", "deprecated": "danger"}


def method_attrs(method: str) -> dict[str, str]:
    return {"data-method": method.lower()}


def version_badge(version_id: str, site: SiteConfig) -> SidebarBadge | None:
    version = next((v for v in site.versions if v.id == version_id), None)
    if version is None or not version.badge:
        return None
    return SidebarBadge(text=version.badge, variant=BADGE_VARIANTS.get(version.badge, "default"))


def _slug(site: SiteConfig, version_id: str, page: str = "") -> str:
    base = f"{site.docs_prefix.strip('/')}/{version_id}"
    return f"{base}/{page}" if page else base


def _anchor_link(site: SiteConfig, version_id: str, category: str, title: str) -> str:
    return f"{site.docs_prefix}/{version_id}/{category}#{anchor_id(title)}"


def _manual_entry(page: ManualPage, version_id: str, site: SiteConfig) -> SidebarEntry:
    if not page.endpoints:
        return SidebarLink(label=page.title, slug=_slug(site, version_id, page.category))
    links = [
        SidebarLink(
            label=ep.title,
            link=_anchor_link(site, version_id, page.category, ep.title),
            attrs=method_attrs(ep.method),
        )
        for ep in page.endpoints
    ]
    return SidebarGroup(label=page.title, items=links)


def _category_entry(category: str, endpoints: list[Endpoint], version_id: str, site: SiteConfig) -> SidebarEntry:
    label = category_title(category, site)
    if not endpoints:
        return SidebarLink(label=label, slug=_slug(site, version_id, category))
    links = [
        SidebarLink(
            label=ep.name,
            link=_anchor_link(site, version_id, category, ep.name),
            attrs=method_attrs(ep.method),
        )
        for ep in endpoints
    ]
    return SidebarGroup(label=label, items=links)


def build_sidebar(
    categories: list[str],
    endpoints_by_category: dict[str, list[Endpoint]],
    version_id: str,
    site: SiteConfig,
) -> list[SidebarEntry]:
    """Overview, manual pages, generated categories (sorted), then type definitions."""
    overview = SidebarLink(label="Overview", slug=_slug(site, version_id), badge=version_badge(version_id, site))
    items: list[SidebarEntry] = [overview]
    for page in site.manual_pages:
        items.append(_manual_entry(page, version_id, site))
    for category in sorted(categories):
        items.append(_category_entry(category, endpoints_by_category.get(category, []), version_id, site))
    items.append(SidebarLink(label="Type Definitions", slug=_slug(site, version_id, "types")))
    return items


def _quote(text: str) -> str:
    return f"'{escape_attr(text)}'"


def serialize_entry(item: SidebarEntry, indent: int) -> str:
    pad = "  " * indent

    if isinstance(item, SidebarGroup):
        nested = ",\n".join(serialize_entry(i, indent + 1) for i in item.items)
        return (
            f"{pad}{{\n"
            f"{pad}  label: {_quote(item.label)},\n"
            f"{pad}  collapsed: {'true' if item.collapsed else 'false'},\n"
            f"{pad}  items: [\n"
            f"{nested}\n"
            f"{pad}  ]\n"
            f"{pad}}}"
        )

    parts = [f"label: {_quote(item.label)}"]
    if item.link:
        parts.append(f"link: {_quote(item.link)}")
    elif item.slug:
        parts.append(f"slug: {_quote(item.slug)}")
    if item.badge:
        badge = f"text: {_quote(item.badge.text)}, variant: {_quote(item.badge.variant)}"
        if item.badge.css_class:
            badge += f", class: {_quote(item.badge.css_class)}"
        parts.append(f"badge: {{ {badge} }}")
    if item.attrs:
        attrs = ", ".join(f"{_quote(k)}: {_quote(v)}" for k, v in item.attrs.items())
        parts.append(f"attrs: {{ {attrs} }}")
    return f"{pad}{{ {', '.join(parts)} }}"


def serialize_sidebar(items: list[SidebarEntry]) -> str:
    """Render the sidebar as a TypeScript snippet for the site's sidebar config."""
    body = ",\n".join(serialize_entry(item, 1) for item in items)
    return (
        "// Auto-generated API sidebar items\n"
        "// Copy this to src/lib/sidebar.ts if you need to update the API section\n"
        "export const apiSidebarItems = [\n"
        f"{body}\n"
        "];\n"
    )
