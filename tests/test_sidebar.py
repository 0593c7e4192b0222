import json
from pathlib import Path

from api_docgen.compiler.document import EndpointSection
from api_docgen.compiler.pages import assemble_category_page, group_by_category
from api_docgen.compiler.sidebar import SidebarBadge, SidebarGroup, SidebarLink, build_sidebar, serialize_sidebar
from api_docgen.compiler.validator import collect_anchors, find_unresolved_refs, iter_links, validate_sidebar
from api_docgen.config import SiteConfig
from api_docgen.schema.base import SchemaDocument

FIXTURES = Path(__file__).parent / "fixtures"
SITE = SiteConfig()


def _schema() -> SchemaDocument:
    return SchemaDocument.model_validate(json.loads((FIXTURES / "api_schema.json").read_text()))


def _build(version_id: str = "v0.0.1-rc30"):
    schema = _schema()
    groups = group_by_category(schema.endpoints)
    sidebar = build_sidebar(list(groups), groups, version_id, SITE)
    pages = {
        category: assemble_category_page(category, endpoints, schema.types, schema.websocket_messages, {}, SITE)
        for category, endpoints in groups.items()
    }
    return sidebar, pages


class TestBuildSidebar:
    def test_layout(self):
        sidebar, _ = _build()
        labels = [item.label for item in sidebar]
        assert labels == ["Overview", "Sprites", "Checkpoints", "Exec", "Sprites", "Type Definitions"]
        assert sidebar[0].slug == "api/v0.0.1-rc30"
        assert sidebar[-1].slug == "api/v0.0.1-rc30/types"

    def test_overview_version_badge(self):
        sidebar, _ = _build()
        assert sidebar[0].badge == SidebarBadge(text="stable", variant="success")
        dev = build_sidebar([], {}, "dev-latest", SITE)
        assert dev[0].badge == SidebarBadge(text="dev", variant="caution")
        assert dev[0].slug == "api/dev-latest"
        assert build_sidebar([], {}, "unknown", SITE)[0].badge is None

    def test_manual_page_group(self):
        sidebar, _ = _build()
        manual = sidebar[1]
        assert isinstance(manual, SidebarGroup)
        assert manual.items[0].label == "Create Sprite"
        assert manual.items[0].link == "/api/v0.0.1-rc30/sprites#create-sprite"
        assert manual.items[0].attrs == {"data-method": "post"}

    def test_endpoint_links(self):
        sidebar, _ = _build()
        checkpoints = sidebar[2]
        assert [(i.label, i.link) for i in checkpoints.items] == [
            ("Create Checkpoint", "/api/v0.0.1-rc30/checkpoints#create-checkpoint"),
            ("Restore Checkpoint", "/api/v0.0.1-rc30/checkpoints#restore-checkpoint"),
        ]
        exec_group = sidebar[3]
        assert exec_group.items[0].attrs == {"data-method": "wss"}

    def test_every_endpoint_link_has_a_section(self):
        sidebar, pages = _build()
        anchors = {category: collect_anchors(page) for category, page in pages.items()}
        # skip Overview, the manual group and Type Definitions
        for link in iter_links(sidebar[2:-1]):
            path, anchor = link.link.split("#")
            category = path.rsplit("/", 1)[-1]
            assert anchor in anchors[category]

    def test_validate_clean(self):
        sidebar, pages = _build()
        # the manual "sprites" group points at hand-written anchors
        del pages["sprites"]
        assert validate_sidebar(sidebar, pages) == {}

    def test_validate_reports_missing_anchor(self):
        sidebar, pages = _build()
        sidebar.append(SidebarGroup(label="Broken", items=[
            SidebarLink(label="Gone", link="/api/v0.0.1-rc30/exec#gone"),
        ]))
        errors = validate_sidebar(sidebar, pages)
        assert "/api/v0.0.1-rc30/exec#gone" in errors


class TestSerializeSidebar:
    def test_typescript_snippet(self):
        sidebar, _ = _build()
        text = serialize_sidebar(sidebar)
        assert text.startswith("// Auto-generated API sidebar items\n")
        assert "export const apiSidebarItems = [" in text
        assert "{ label: 'Overview', slug: 'api/v0.0.1-rc30', badge: { text: 'stable', variant: 'success' } }" in text
        assert (
            "{ label: 'List Sprites', link: '/api/v0.0.1-rc30/sprites#list-sprites', "
            "attrs: { 'data-method': 'get' } }"
        ) in text
        assert "collapsed: true" in text
        assert text.rstrip().endswith("];")

    def test_quotes_escaped(self):
        text = serialize_sidebar([SidebarLink(label="Sprite's", slug="x")])
        assert "label: 'Sprite\\'s'" in text

    def test_backslash_escaped(self):
        text = serialize_sidebar([SidebarLink(label="a\\b", slug="x")])
        assert "label: 'a\\\\b'" in text


class TestCollectAnchors:
    def test_anchors_from_sections(self):
        _, pages = _build()
        assert collect_anchors(pages["checkpoints"]) == {"create-checkpoint", "restore-checkpoint"}
        assert all(isinstance(n, EndpointSection) for n in pages["exec"].walk() if hasattr(n, "anchor"))


class TestFindUnresolvedRefs:
    def test_missing_request_type(self):
        schema = SchemaDocument.model_validate({
            "endpoints": [{
                "name": "Create", "path": "/v1/x", "method": "POST",
                "request": {"$ref": "#/types/Nope"},
            }],
        })
        assert find_unresolved_refs(schema.endpoints, schema) == {
            "Create: #/types/Nope": "unresolved request reference, no entry in types",
        }

    def test_messages_checked_against_message_table(self):
        schema = SchemaDocument.model_validate({
            "endpoints": [{
                "name": "Exec", "path": "/v1/exec", "method": "WSS",
                "messages": {
                    "client_to_server": [{"$ref": "#/websocket_messages/Stdin"}],
                    "server_to_client": [{"$ref": "#/websocket_messages/Exit"}],
                },
                "stream_message_types": [{"$ref": "#/types/Exit"}],
            }],
            "types": {"Exit": {"fields": []}},
            "websocket_messages": {"Exit": {"fields": []}},
        })
        assert find_unresolved_refs(schema.endpoints, schema) == {
            "Exec: #/websocket_messages/Stdin": "unresolved message reference, no entry in websocket_messages",
        }

    def test_inline_request_ignored(self):
        schema = SchemaDocument.model_validate({
            "endpoints": [{
                "name": "Create", "path": "/v1/x", "method": "POST",
                "request": {"fields": [{"name": "cmd", "type": "string"}]},
            }],
        })
        assert find_unresolved_refs(schema.endpoints, schema) == {}
