import json
from pathlib import Path

import httpx

from api_docgen.compiler.driver import (
    MANUAL_DIR,
    SIDEBAR_FILE,
    build_version_docs,
    clean_output_root,
    generate_all,
)
from api_docgen.config import ApiVersion, SiteConfig
from api_docgen.schema.base import SchemaDocument

FIXTURES = Path(__file__).parent / "fixtures"


def _schema() -> SchemaDocument:
    return SchemaDocument.model_validate(json.loads((FIXTURES / "api_schema.json").read_text()))


def _site(*version_ids: str) -> SiteConfig:
    versions = [
        ApiVersion(id=v, label=v, schema_url=f"https://example.test/{v}", is_latest=(i == 0))
        for i, v in enumerate(version_ids)
    ]
    return SiteConfig(versions=versions, sdk_languages={"go": "go"})


def _transport(broken: set[str] = frozenset()):
    schema = (FIXTURES / "api_schema.json").read_text()
    examples = (FIXTURES / "go-examples.json").read_text()

    def handler(request: httpx.Request) -> httpx.Response:
        version, filename = request.url.path.strip("/").split("/")
        if version in broken:
            return httpx.Response(503)
        if filename == "api_schema.json":
            return httpx.Response(200, text=schema)
        return httpx.Response(200, text=examples)

    return httpx.MockTransport(handler)


class TestBuildVersionDocs:
    def test_files(self):
        build = build_version_docs("v1", _schema(), {}, _site("v1"))
        assert sorted(build.files) == sorted([
            "index.mdx", "checkpoints.mdx", "exec.mdx", "sprites.mdx", "types.mdx", SIDEBAR_FILE,
        ])
        assert build.categories == ["checkpoints", "exec", "sprites"]
        assert build.warnings == {}
        assert build.unresolved == {
            "Restore Checkpoint: #/types/MissingType": "unresolved request reference, no entry in types",
        }

    def test_deterministic(self):
        site = _site("v1")
        assert build_version_docs("v1", _schema(), {}, site).files == build_version_docs("v1", _schema(), {}, site).files

    def test_file_extension(self):
        site = _site("v1").model_copy(update={"file_extension": "md"})
        build = build_version_docs("v1", _schema(), {}, site)
        assert "types.md" in build.files


class TestCleanOutputRoot:
    def test_keeps_manual_dir(self, tmp_path):
        (tmp_path / MANUAL_DIR).mkdir()
        (tmp_path / MANUAL_DIR / "sprites.mdx").write_text("manual")
        (tmp_path / "old").mkdir()
        (tmp_path / "old" / "page.mdx").write_text("stale")
        (tmp_path / "index.mdx").write_text("stale")

        clean_output_root(tmp_path)

        assert [p.name for p in tmp_path.iterdir()] == [MANUAL_DIR]
        assert (tmp_path / MANUAL_DIR / "sprites.mdx").read_text() == "manual"


class TestGenerateAll:
    def test_all_versions(self, tmp_path):
        results = generate_all(_site("v1", "v2"), tmp_path, transport=_transport())
        assert [r.success for r in results] == [True, True]
        assert (tmp_path / "v1" / "checkpoints.mdx").exists()
        assert (tmp_path / "v2" / SIDEBAR_FILE).exists()
        assert "url=/api/v1/" in (tmp_path / "index.mdx").read_text()

    def test_failed_version_isolated(self, tmp_path):
        results = generate_all(_site("v1", "v2"), tmp_path, transport=_transport(broken={"v1"}))
        assert [r.success for r in results] == [False, True]
        assert "503" in results[0].error
        assert (tmp_path / "v2" / "index.mdx").exists()
        assert not (tmp_path / "v1").exists()
        assert not (tmp_path / "index.mdx").exists()

    def test_manual_pages_copied(self, tmp_path):
        (tmp_path / MANUAL_DIR).mkdir()
        (tmp_path / MANUAL_DIR / "sprites.mdx").write_text("hand written")
        generate_all(_site("v1"), tmp_path, transport=_transport())
        assert (tmp_path / "v1" / "sprites.mdx").read_text() == "hand written"

    def test_output_is_reproducible(self, tmp_path):
        generate_all(_site("v1"), tmp_path, transport=_transport())
        first = (tmp_path / "v1" / "checkpoints.mdx").read_text()
        generate_all(_site("v1"), tmp_path, transport=_transport())
        assert (tmp_path / "v1" / "checkpoints.mdx").read_text() == first

    def test_unresolved_refs_reported(self, tmp_path):
        results = generate_all(_site("v1"), tmp_path, transport=_transport())
        assert results[0].success
        assert results[0].degraded == [
            "Restore Checkpoint: #/types/MissingType: unresolved request reference, no entry in types",
        ]
