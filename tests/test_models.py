import json
from pathlib import Path

from api_docgen.schema.base import (
    Endpoint,
    InlineType,
    SchemaDocument,
    SdkExampleSet,
    TypeField,
    TypeRef,
    lookup_enum,
    lookup_message,
    lookup_type,
    ref_name,
)

FIXTURES = Path(__file__).parent / "fixtures"


def _load_schema() -> SchemaDocument:
    return SchemaDocument.model_validate(json.loads((FIXTURES / "api_schema.json").read_text()))


class TestTypeField:
    def test_wire_name_prefers_json(self):
        f = TypeField(name="CreatedAt", json="created_at", type="time.Time")
        assert f.wire_name == "created_at"

    def test_wire_name_falls_back_to_name(self):
        f = TypeField(name="comment", type="string")
        assert f.wire_name == "comment"
        assert f.optional is False
        assert f.const is None


class TestEndpoint:
    def test_request_ref(self):
        ep = Endpoint.model_validate({
            "name": "Create", "path": "/v1/x", "method": "POST",
            "request": {"$ref": "#/types/CreateRequest"},
        })
        assert isinstance(ep.request, TypeRef)
        assert ep.request.ref == "#/types/CreateRequest"

    def test_request_inline(self):
        ep = Endpoint.model_validate({
            "name": "Create", "path": "/v1/x", "method": "POST",
            "request": {"fields": [{"name": "cmd", "type": "string"}]},
        })
        assert isinstance(ep.request, InlineType)
        assert ep.request.fields[0].name == "cmd"

    def test_is_socket(self):
        assert Endpoint(name="a", path="/", method="WSS").is_socket
        assert Endpoint(name="a", path="/", method="GET", protocol="websocket").is_socket
        assert not Endpoint(name="a", path="/", method="GET").is_socket

    def test_nulls_fall_back_to_defaults(self):
        ep = Endpoint.model_validate({
            "name": "a", "path": "/", "method": "GET",
            "description": None, "query_params": None, "responses": None,
            "stream_message_types": None, "request": None,
            "messages": {"client_to_server": None, "server_to_client": None},
        })
        assert ep.description == ""
        assert ep.query_params == []
        assert ep.responses == []
        assert ep.stream_message_types == []
        assert ep.request is None
        assert ep.messages.client_to_server == []

    def test_unknown_keys_ignored(self):
        ep = Endpoint.model_validate({"name": "a", "path": "/", "method": "GET", "deprecated": True})
        assert ep.name == "a"


class TestSchemaDocument:
    def test_parse_fixture(self):
        schema = _load_schema()
        assert len(schema.endpoints) == 4
        assert list(schema.types)[:2] == ["SpriteList", "Sprite"]
        assert schema.types["SpriteList"].example == {"sprites": []}
        assert schema.enums["SpriteStatus"].values == ["cold", "warm", "running"]

    def test_lookups_strip_prefix(self):
        schema = _load_schema()
        assert lookup_type(schema.types, "#/types/Sprite") is schema.types["Sprite"]
        assert lookup_type(schema.types, "Sprite") is schema.types["Sprite"]
        assert lookup_enum(schema.enums, "#/enums/SpriteStatus") is schema.enums["SpriteStatus"]
        assert lookup_message(schema.websocket_messages, "#/websocket_messages/ExitMessage") is not None

    def test_lookup_miss_returns_none(self):
        schema = _load_schema()
        assert lookup_type(schema.types, "#/types/MissingType") is None
        assert lookup_message(schema.websocket_messages, "#/websocket_messages/Nope") is None

    def test_ref_name(self):
        assert ref_name("#/types/Sprite") == "Sprite"
        assert ref_name("#/websocket_messages/ExitMessage") == "ExitMessage"
        assert ref_name("Plain") == "Plain"


class TestSdkExampleSet:
    def test_find_checks_endpoints_then_management(self):
        examples = SdkExampleSet.model_validate(json.loads((FIXTURES / "go-examples.json").read_text()))
        assert examples.find("GET", "/v1/sprites").cli_command == "sprite list"
        assert examples.find("POST", "/v1/sprites/{name}/checkpoint").cli_command == "sprite checkpoint create"

    def test_find_is_exact(self):
        examples = SdkExampleSet.model_validate(json.loads((FIXTURES / "go-examples.json").read_text()))
        assert examples.find("get", "/v1/sprites") is None
        assert examples.find("GET", "/v1/sprites/") is None


class TestNullFields:
    def test_type_and_enum_nulls(self):
        schema = SchemaDocument.model_validate({
            "description": None,
            "endpoints": None,
            "types": {"Sprite": {"fields": None, "example": None}, "Other": {"fields": [{"name": "x", "description": None}]}},
            "enums": {"Status": {"description": None, "values": None}},
            "websocket_messages": None,
        })
        assert schema.endpoints == []
        assert schema.types["Sprite"].fields == []
        assert schema.types["Other"].fields[0].description == ""
        assert schema.enums["Status"].values == []
        assert schema.websocket_messages == {}
