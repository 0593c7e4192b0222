import json
from pathlib import Path

from api_docgen.compiler.document import Callout, CodeSnippets, EndpointSection, LinkCard, MethodHeader, Redirect, Rule, StatusTable
from api_docgen.compiler.emit import emit
from api_docgen.compiler.pages import (
    assemble_category_page,
    assemble_index_page,
    assemble_redirect_page,
    assemble_types_page,
    category_description,
    category_title,
    group_by_category,
)
from api_docgen.config import ApiVersion, SiteConfig
from api_docgen.schema.base import Endpoint, SchemaDocument, SdkExampleSet

FIXTURES = Path(__file__).parent / "fixtures"
SITE = SiteConfig()


def _schema() -> SchemaDocument:
    return SchemaDocument.model_validate(json.loads((FIXTURES / "api_schema.json").read_text()))


def _list_sprites_schema() -> SchemaDocument:
    return SchemaDocument.model_validate({
        "endpoints": [{
            "name": "List Sprites",
            "method": "GET",
            "path": "/v1/sprites",
            "category": "sprites",
            "responses": [{"status": 200, "body": {"$ref": "#/types/SpriteList"}}],
        }],
        "types": {
            "SpriteList": {
                "fields": [{"name": "Sprites", "json": "sprites", "type": "[]Sprite"}],
                "example": {"sprites": []},
            },
        },
    })


class TestCategories:
    def test_group_sorted_and_ordered(self):
        schema = _schema()
        groups = group_by_category(schema.endpoints)
        assert list(groups) == ["checkpoints", "exec", "sprites"]
        assert [e.name for e in groups["checkpoints"]] == ["Create Checkpoint", "Restore Checkpoint"]

    def test_missing_category(self):
        groups = group_by_category([Endpoint(name="a", path="/", method="GET")])
        assert list(groups) == ["other"]

    def test_titles(self):
        assert category_title("proxy", SITE) == "HTTP Proxy"
        assert category_title("widgets", SITE) == "Widgets"
        assert category_description("widgets", SITE) == "Widgets API endpoints"


class TestCategoryPage:
    def test_list_sprites_scenario(self):
        schema = _list_sprites_schema()
        doc = assemble_category_page("sprites", schema.endpoints, schema.types, {}, {}, SITE)
        nodes = list(doc.walk())

        header = [n for n in nodes if isinstance(n, MethodHeader)][0]
        assert (header.method, header.path) == ("GET", "/v1/sprites")

        status = [n for n in nodes if isinstance(n, StatusTable)][0]
        assert [r.status for r in status.rows] == [200]

        snippets = [n for n in nodes if isinstance(n, CodeSnippets)][0]
        assert snippets.response == '{\n  "sprites": []\n}'
        assert [e.language for e in snippets.examples] == ["curl"]

        text = emit(doc)
        assert 'method="GET"' in text
        assert 'path="/v1/sprites"' in text
        assert '{\n  "sprites": []\n}' in text

    def test_list_sprites_with_cli(self):
        schema = _list_sprites_schema()
        example_sets = {"go": SdkExampleSet.model_validate(json.loads((FIXTURES / "go-examples.json").read_text()))}
        site = SiteConfig(sdk_languages={"go": "go"})
        doc = assemble_category_page("sprites", schema.endpoints, schema.types, {}, example_sets, site)
        snippets = [n for n in doc.walk() if isinstance(n, CodeSnippets)][0]
        assert [e.language for e in snippets.examples] == ["cli", "go", "curl"]

    def test_rule_after_every_endpoint(self):
        schema = _schema()
        groups = group_by_category(schema.endpoints)
        doc = assemble_category_page("checkpoints", groups["checkpoints"], schema.types, {}, {}, SITE)
        children = doc.body[0].children
        assert [type(c) for c in children] == [EndpointSection, Rule, EndpointSection, Rule]

    def test_socket_callout(self):
        schema = _schema()
        groups = group_by_category(schema.endpoints)
        doc = assemble_category_page("exec", groups["exec"], schema.types, schema.websocket_messages, {}, SITE)
        assert isinstance(doc.body[0].children[0], Callout)

    def test_graceful_ref_miss_keeps_siblings(self):
        schema = _schema()
        groups = group_by_category(schema.endpoints)
        text = emit(assemble_category_page("checkpoints", groups["checkpoints"], schema.types, {}, {}, SITE))
        assert text.count("### Request Body") == 1
        assert '<div id="create-checkpoint">' in text
        assert '<div id="restore-checkpoint">' in text
        assert "### Streaming Events" in text

    def test_null_fields_still_render(self):
        schema = SchemaDocument.model_validate({
            "endpoints": [{
                "name": "List Sprites", "method": "GET", "path": "/v1/sprites", "category": "sprites",
                "description": None, "query_params": None,
                "responses": [{"status": 200, "description": None, "body": {"$ref": "#/types/SpriteList"}}],
            }],
            "types": {"SpriteList": {"fields": [{"name": "Sprites", "json": "sprites", "type": "[]Sprite", "description": None}], "example": None}},
        })
        text = emit(assemble_category_page("sprites", schema.endpoints, schema.types, {}, {}, SITE))
        assert '<div id="list-sprites">' in text
        assert 'path="/v1/sprites"' in text
        assert "### Query Parameters" not in text

    def test_frontmatter(self):
        schema = _list_sprites_schema()
        doc = assemble_category_page("sprites", schema.endpoints, schema.types, {}, {}, SITE)
        assert doc.frontmatter.title == "Sprites API"
        assert doc.frontmatter.table_of_contents is False


class TestIndexPage:
    def test_cards(self):
        schema = _schema()
        doc = assemble_index_page(["checkpoints", "exec"], schema, "v1", SITE)
        cards = [c for n in doc.body if hasattr(n, "cards") for c in n.cards]
        hrefs = [c.href for c in cards]
        assert hrefs[:3] == ["/api/v1/sprites", "/api/v1/checkpoints", "/api/v1/exec"]
        assert all(isinstance(c, LinkCard) for c in cards)
        assert "API Version: `v0.0.1-rc30`" in emit(doc)


class TestTypesPage:
    def test_sections(self):
        schema = _schema()
        text = emit(assemble_types_page(schema.types, schema.enums, schema.websocket_messages))
        assert "## Types" in text
        assert "### SpriteList" in text
        assert "## Enums" in text
        assert "| `running` |" in text
        assert "## WebSocket Messages" in text
        assert "### ResizeMessage" in text
        assert text.index("### SpriteList") < text.index("### Sprite\n")


class TestRedirectPage:
    def test_default_version(self):
        doc = assemble_redirect_page(SITE)
        assert doc.body[0] == Redirect("/api/v0.0.1-rc30/")

    def test_first_version_when_none_latest(self):
        site = SiteConfig(versions=[ApiVersion(id="beta", label="Beta", schema_url="https://example.com/beta")])
        assert assemble_redirect_page(site).body[0] == Redirect("/api/beta/")
