"""Type formatter: schema type descriptors to display notation."""

PRIMITIVE_TYPES = {
    "string": "string",
    "bool": "boolean",
    "int": "number",
    "int64": "number",
    "uint16": "number",
    "float64": "number",
    "time.Time": "string (ISO 8601)",
    "time.Duration": "string (duration)",
    "Duration": "string (duration)",
    "error": "string",
    "any": "any",
    "interface{}": "any",
}

OPTIONAL_SHORTHANDS = {
    "int": "number?",
    "int64": "number?",
    "Duration": "duration?",
}


def format_type(descriptor: str) -> str:
    """Format a type descriptor such as ``*int``, ``[]Sprite`` or ``map[string]string``.

    ``*`` marks an optional value and renders as a ``?`` suffix, ``[]`` marks a
    sequence and renders as a ``[]`` suffix; both recurse on the inner
    descriptor first, so ``[]*int`` is ``number?[]`` and ``*[]int`` is
    ``number[]?``. Unknown descriptors are returned unchanged: they name a
    type defined elsewhere in the schema.
    """
    if descriptor.startswith("*"):
        inner = descriptor[1:]
        if inner in OPTIONAL_SHORTHANDS:
            return OPTIONAL_SHORTHANDS[inner]
        return f"{format_type(inner)}?"

    if descriptor.startswith("[]"):
        return f"{format_type(descriptor[2:])}[]"

    if descriptor.startswith("map["):
        if descriptor == "map[string]string":
            return "Record<string, string>"
        return "object"

    return PRIMITIVE_TYPES.get(descriptor, descriptor)
