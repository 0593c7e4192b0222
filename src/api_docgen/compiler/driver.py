"""Per-version documentation pipeline and its file system sink."""

import shutil
from dataclasses import dataclass, field
from pathlib import Path

import click
import httpx

from api_docgen.compiler.document import Document
from api_docgen.compiler.emit import emit
from api_docgen.compiler.pages import (
    assemble_category_page,
    assemble_index_page,
    assemble_redirect_page,
    assemble_types_page,
    group_by_category,
)
from api_docgen.compiler.sidebar import SidebarEntry, build_sidebar, serialize_sidebar
from api_docgen.compiler.validator import find_unresolved_refs, validate_sidebar
from api_docgen.config import ApiVersion, SiteConfig
from api_docgen.schema.base import SchemaDocument, SdkExampleSet
from api_docgen.schema.fetch import SchemaFetchError, fetch_version_data

MANUAL_DIR = "_manual"
SIDEBAR_FILE = "_sidebar-config.ts"


@dataclass
class VersionBuild:
    """Everything generated for one version, keyed by file name relative to the version root."""

    files: dict[str, str]
    sidebar: list[SidebarEntry]
    categories: list[str]
    warnings: dict[str, str] = field(default_factory=dict)
    unresolved: dict[str, str] = field(default_factory=dict)


@dataclass
class VersionResult:
    version: ApiVersion
    success: bool
    files: list[Path] = field(default_factory=list)
    warnings: dict[str, str] = field(default_factory=dict)
    unresolved: dict[str, str] = field(default_factory=dict)
    error: str | None = None

    @property
    def degraded(self) -> list[str]:
        """Every per-item problem recorded for this version, sidebar links first."""
        items = [f"sidebar link {link}: {message}" for link, message in self.warnings.items()]
        items += [f"{key}: {message}" for key, message in self.unresolved.items()]
        return items


def build_version_docs(
    version_id: str,
    schema: SchemaDocument,
    example_sets: dict[str, SdkExampleSet],
    site: SiteConfig,
) -> VersionBuild:
    """Compile one schema version into page documents and the sidebar. No I/O."""
    ext = site.file_extension
    endpoints_by_category = group_by_category(schema.endpoints)
    categories = list(endpoints_by_category)

    pages: dict[str, Document] = {
        category: assemble_category_page(
            category,
            endpoints_by_category[category],
            schema.types,
            schema.websocket_messages,
            example_sets,
            site,
        )
        for category in categories
    }
    sidebar = build_sidebar(categories, endpoints_by_category, version_id, site)

    files = {f"index.{ext}": emit(assemble_index_page(categories, schema, version_id, site))}
    for category, page in pages.items():
        files[f"{category}.{ext}"] = emit(page)
    files[f"types.{ext}"] = emit(
        assemble_types_page(schema.types, schema.enums, schema.websocket_messages)
    )
    files[SIDEBAR_FILE] = serialize_sidebar(sidebar)

    # manual pages replace generated ones of the same name
    manual = {page.category for page in site.manual_pages}
    checked = {category: page for category, page in pages.items() if category not in manual}

    return VersionBuild(
        files=files,
        sidebar=sidebar,
        categories=categories,
        warnings=validate_sidebar(sidebar, checked),
        unresolved=find_unresolved_refs(schema.endpoints, schema),
    )


def clean_output_root(root: Path) -> None:
    """Remove everything under ``root`` except the shared manual pages."""
    root.mkdir(parents=True, exist_ok=True)
    for entry in root.iterdir():
        if entry.name == MANUAL_DIR:
            continue
        if entry.is_dir():
            shutil.rmtree(entry)
        else:
            entry.unlink()


def copy_manual_pages(root: Path, version_id: str, site: SiteConfig) -> list[Path]:
    """Copy ``_manual/{category}.{ext}`` into the version directory for each manual page that exists."""
    copied = []
    for page in site.manual_pages:
        filename = f"{page.category}.{site.file_extension}"
        source = root / MANUAL_DIR / filename
        if not source.exists():
            continue
        dest = root / version_id / filename
        shutil.copyfile(source, dest)
        click.echo(f"  Copied manual page: {filename}")
        copied.append(dest)
    return copied


def write_files(directory: Path, files: dict[str, str]) -> list[Path]:
    directory.mkdir(parents=True, exist_ok=True)
    written = []
    for filename, content in files.items():
        path = directory / filename
        path.write_text(content, encoding="utf-8")
        written.append(path)
    return written


def generate_version_docs(
    version: ApiVersion,
    site: SiteConfig,
    root: Path,
    transport: httpx.AsyncBaseTransport | None = None,
) -> VersionResult:
    click.echo(f"\nGenerating docs for {version.label} ({version.id})...")

    data = fetch_version_data(version.schema_url, list(site.sdk_languages), transport=transport)
    schema = data.schema
    click.echo(f"  Found {len(schema.endpoints)} endpoints")
    click.echo(f"  Found {len(schema.types)} types")
    click.echo(f"  Found {len(schema.enums)} enums")
    click.echo(f"  Found {len(schema.websocket_messages)} WebSocket message types")

    build = build_version_docs(version.id, schema, data.examples, site)
    click.echo(f"  Categories: {', '.join(build.categories)}")

    output_dir = root / version.id
    written = write_files(output_dir, build.files)
    for path in written:
        click.echo(f"  Wrote {version.id}/{path.name}")

    for link, message in build.warnings.items():
        click.echo(f"  Warning: sidebar link {link}: {message}", err=True)
    for key, message in build.unresolved.items():
        click.echo(f"  Warning: {key}: {message}", err=True)

    written += copy_manual_pages(root, version.id, site)
    click.echo(f"  Generated {len(build.files)} files in {output_dir}")
    return VersionResult(
        version=version,
        success=True,
        files=written,
        warnings=build.warnings,
        unresolved=build.unresolved,
    )


def generate_all(
    site: SiteConfig,
    root: Path,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[VersionResult]:
    """Generate every configured version in order, then the root redirect.

    A failed version does not stop the others; the redirect is written only
    when every version succeeded.
    """
    click.echo(f"Versions to generate: {', '.join(v.id for v in site.versions)}")
    click.echo("\nCleaning output directory...")
    clean_output_root(root)

    results = []
    for version in site.versions:
        try:
            results.append(generate_version_docs(version, site, root, transport=transport))
        except (SchemaFetchError, OSError) as e:
            click.echo(f"  Error generating {version.id}: {e}", err=True)
            results.append(VersionResult(version=version, success=False, error=str(e)))

    if all(r.success for r in results):
        click.echo("\nGenerating root redirect page...")
        redirect = emit(assemble_redirect_page(site))
        (root / f"index.{site.file_extension}").write_text(redirect, encoding="utf-8")
        click.echo(f"Default version: {site.default_version.id}")

    return results
