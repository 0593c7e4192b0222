"""Site configuration: API versions, manual pages, category labels.

Defaults describe the Sprites API documentation site. A YAML file may
override any top-level key.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError


class ConfigError(Exception):
    """Raised when the configuration file cannot be loaded."""


class ApiVersion(BaseModel):
    id: str
    label: str
    schema_url: str
    is_latest: bool = False
    badge: str | None = None  # dev / stable / deprecated


class ManualEndpoint(BaseModel):
    method: str
    title: str


class ManualPage(BaseModel):
    """A hand-written page shared across all versions."""

    category: str
    title: str
    description: str = ""
    endpoints: list[ManualEndpoint] = []


DEFAULT_VERSIONS = [
    ApiVersion(
        id="v0.0.1-rc30",
        label="v0.0.1-rc30",
        schema_url="https://sprites-binaries.t3.storage.dev/api/v0.0.1-rc30",
        is_latest=True,
        badge="stable",
    ),
    ApiVersion(
        id="dev-latest",
        label="Development",
        schema_url="https://sprites-binaries.t3.storage.dev/api/dev-latest",
        badge="dev",
    ),
]

DEFAULT_MANUAL_PAGES = [
    ManualPage(
        category="sprites",
        title="Sprites",
        description="Create, list, update, and delete Sprites",
        endpoints=[
            ManualEndpoint(method="POST", title="Create Sprite"),
            ManualEndpoint(method="GET", title="List Sprites"),
            ManualEndpoint(method="GET", title="Get Sprite"),
            ManualEndpoint(method="PUT", title="Update Sprite"),
            ManualEndpoint(method="DELETE", title="Delete Sprite"),
        ],
    ),
]

CATEGORY_TITLES = {
    "sprites": "Sprites",
    "exec": "Exec",
    "checkpoints": "Checkpoints",
    "services": "Services",
    "proxy": "HTTP Proxy",
    "policy": "Policy",
    "organization": "Organization",
    "tokens": "Tokens",
    "files": "Files",
    "filesystem": "Filesystem",
    "attach": "Attach",
}

CATEGORY_DESCRIPTIONS = {
    "sprites": "Create, list, update, and delete Sprites",
    "exec": "Execute commands in Sprites via WebSocket",
    "checkpoints": "Create, list, and restore environment snapshots",
    "services": "Manage background services running in Sprites",
    "proxy": "Forward HTTP requests to services inside Sprites",
    "policy": "Manage access control policies",
    "organization": "Organization settings and information",
    "tokens": "Create and manage API tokens",
    "files": "Upload and download files",
    "filesystem": "Browse and manage the filesystem",
    "attach": "Interactive terminal sessions via WebSocket",
}

# SDK example set key -> code tab language
SDK_LANGUAGES = {
    "go": "go",
    "js": "javascript",
    "python": "python",
    "elixir": "elixir",
}


class SiteConfig(BaseModel):
    api_base_url: str = "https://api.sprites.dev"
    websocket_base_url: str = "wss://api.sprites.dev"
    curl_token_var: str = "SPRITE_TOKEN"
    websocat_token_var: str = "SPRITES_TOKEN"
    docs_prefix: str = "/api"
    file_extension: str = "mdx"
    versions: list[ApiVersion] = DEFAULT_VERSIONS
    manual_pages: list[ManualPage] = DEFAULT_MANUAL_PAGES
    category_titles: dict[str, str] = CATEGORY_TITLES
    category_descriptions: dict[str, str] = CATEGORY_DESCRIPTIONS
    sdk_languages: dict[str, str] = SDK_LANGUAGES

    @property
    def default_version(self) -> ApiVersion:
        for version in self.versions:
            if version.is_latest:
                return version
        return self.versions[0]


def load_config(path: Path | None = None) -> SiteConfig:
    """Load site configuration from a YAML file, or return the defaults."""
    if path is None:
        return SiteConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")

    try:
        config = SiteConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e

    if not config.versions:
        raise ConfigError(f"Config {path} declares no API versions")
    return config
