"""Fetch one API version: the schema plus one example set per SDK language.

All documents for a version are requested concurrently; any single failure
aborts the whole version.
"""

import asyncio
from dataclasses import dataclass, field

import click
import httpx
from pydantic import ValidationError

from .base import SchemaDocument, SdkExampleSet

DEFAULT_TIMEOUT = 30.0


class SchemaFetchError(Exception):
    """Raised when a schema or example document cannot be fetched or parsed."""


@dataclass
class VersionData:
    schema: SchemaDocument
    examples: dict[str, SdkExampleSet] = field(default_factory=dict)


async def _fetch_json(client: httpx.AsyncClient, url: str) -> object:
    click.echo(f"  Fetching {url}...")
    try:
        response = await client.get(url)
    except httpx.HTTPError as e:
        raise SchemaFetchError(f"Failed to fetch {url}: {e}") from e

    if response.is_error:
        raise SchemaFetchError(
            f"Failed to fetch {url}: {response.status_code} {response.reason_phrase}"
        )

    try:
        return response.json()
    except ValueError as e:
        raise SchemaFetchError(f"Malformed JSON from {url}: {e}") from e


async def _fetch_all(
    base_url: str,
    languages: list[str],
    transport: httpx.AsyncBaseTransport | None,
    timeout: float,
) -> VersionData:
    base_url = base_url.rstrip("/")
    urls = [f"{base_url}/api_schema.json"]
    urls += [f"{base_url}/{lang}-examples.json" for lang in languages]

    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        documents = await asyncio.gather(*(_fetch_json(client, url) for url in urls))

    try:
        schema = SchemaDocument.model_validate(documents[0])
        examples = {
            lang: SdkExampleSet.model_validate(doc)
            for lang, doc in zip(languages, documents[1:])
        }
    except ValidationError as e:
        raise SchemaFetchError(f"Unexpected document structure under {base_url}: {e}") from e

    return VersionData(schema=schema, examples=examples)


def fetch_version_data(
    base_url: str,
    languages: list[str],
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> VersionData:
    """Fetch and validate the schema and SDK example sets under ``base_url``."""
    click.echo(f"Fetching API schema and SDK examples from {base_url}...")
    return asyncio.run(_fetch_all(base_url, languages, transport, timeout))
