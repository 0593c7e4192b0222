"""Data models for a versioned API schema and its SDK example sets.

The schema document is fetched as JSON and validated into these models.
Every compiler stage consumes them read-only; lookups into the named
tables never raise, a miss is simply ``None``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

REF_PREFIXES = ("#/types/", "#/enums/", "#/websocket_messages/")


class SchemaModel(BaseModel):
    """Base for schema models: tolerant of unknown keys, accepts wire aliases."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """Treat explicit nulls as absent so field defaults apply (nil slices and strings)."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class TypeField(SchemaModel):
    """A single field of a type or websocket message."""

    name: str
    json_name: str = Field("", alias="json")
    type: str = "any"
    description: str = ""
    optional: bool = False
    const: str | None = None

    @property
    def wire_name(self) -> str:
        return self.json_name or self.name


class TypeRef(SchemaModel):
    ref: str = Field(alias="$ref")
    is_array: bool = False


class InlineType(SchemaModel):
    fields: list[TypeField]


class QueryParam(SchemaModel):
    name: str
    type: str = "string"
    description: str = ""
    required: bool = False


class ApiResponse(SchemaModel):
    status: int
    description: str = ""
    body: TypeRef | None = None


class WebSocketMessages(SchemaModel):
    client_to_server: list[TypeRef] = []
    server_to_client: list[TypeRef] = []


class Endpoint(SchemaModel):
    """One API operation, either request/response or websocket."""

    name: str
    path: str
    method: str  # GET / POST / PUT / PATCH / DELETE / WSS
    description: str = ""
    protocol: str = "http"  # http / websocket
    category: str = ""
    query_params: list[QueryParam] = []
    request: TypeRef | InlineType | None = None
    response: TypeRef | InlineType | None = None
    responses: list[ApiResponse] = []
    stream_response: bool = False
    stream_message_types: list[TypeRef] = []
    messages: WebSocketMessages | None = None
    example: Any = None

    @property
    def is_socket(self) -> bool:
        return self.protocol == "websocket" or self.method.upper() == "WSS"


class TypeDef(SchemaModel):
    fields: list[TypeField] = []
    example: Any = None


class EnumDef(SchemaModel):
    description: str = ""
    values: list[str] = []


class WebSocketMessageDef(SchemaModel):
    fields: list[TypeField] = []
    example: Any = None


class SchemaDocument(SchemaModel):
    """Root of one API version. Table iteration order follows the source JSON."""

    description: str = ""
    version: str = ""
    generated: str = ""
    endpoints: list[Endpoint] = []
    types: dict[str, TypeDef] = {}
    enums: dict[str, EnumDef] = {}
    websocket_messages: dict[str, WebSocketMessageDef] = {}


class SdkExample(SchemaModel):
    """A runnable snippet for one endpoint in one SDK language."""

    name: str = ""
    description: str = ""
    category: str = ""
    sdk_code: str = ""
    sdk_code_lang: str = ""
    sdk_output: str = ""
    cli_command: str = ""


class SdkExampleSet(SchemaModel):
    endpoints: dict[str, SdkExample] = {}
    management: dict[str, SdkExample] = {}

    def find(self, method: str, path: str) -> SdkExample | None:
        """Exact-match lookup of an endpoint's example, endpoints first."""
        key = endpoint_key(method, path)
        return self.endpoints.get(key) or self.management.get(key)


def endpoint_key(method: str, path: str) -> str:
    return f"{method} {path}"


def ref_name(ref: str) -> str:
    """Strip the table prefix from a ``$ref`` string."""
    for prefix in REF_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix):]
    return ref


def lookup_type(types: dict[str, TypeDef], ref: str) -> TypeDef | None:
    return types.get(ref_name(ref))


def lookup_enum(enums: dict[str, EnumDef], ref: str) -> EnumDef | None:
    return enums.get(ref_name(ref))


def lookup_message(
    messages: dict[str, WebSocketMessageDef], ref: str
) -> WebSocketMessageDef | None:
    return messages.get(ref_name(ref))
