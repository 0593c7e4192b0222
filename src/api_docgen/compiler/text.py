"""String helpers shared by the compiler stages."""

import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_OPEN_TAG = re.compile(r"<([a-zA-Z][a-zA-Z0-9-]*)>")
_CLOSE_TAG = re.compile(r"</([a-zA-Z][a-zA-Z0-9-]*)>")


def slugify(text: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to ``-``, trim hyphens."""
    return _NON_ALNUM.sub("-", text.lower()).strip("-")


def escape_template(text: str) -> str:
    """Escape text for a JS template literal inside MDX."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("$", "\\$")


def escape_attr(text: str) -> str:
    """Escape text for a quoted JS string literal."""
    return text.replace("\\", "\\\\").replace("'", "\\'").replace('"', '\\"')


def escape_tags(text: str) -> str:
    """Wrap ``<name>`` and ``</name>`` in backticks so MDX does not parse them as JSX."""
    text = _OPEN_TAG.sub(r"`<\1>`", text)
    return _CLOSE_TAG.sub(r"`</\1>`", text)
