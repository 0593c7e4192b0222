"""Command registry — loads the CLI commands to document from YAML."""

from pathlib import Path

import yaml

from api_docgen.cliref.models import CommandDefinition

COMMANDS_FILE = Path(__file__).parent / "commands.yaml"

CATEGORY_TITLES = {
    "authentication": "Authentication Commands",
    "sprite-management": "Sprite Management",
    "command-execution": "Command Execution",
    "checkpoints": "Checkpoints",
    "networking": "Networking",
    "utility": "Utility Commands",
}

CATEGORY_ORDER = list(CATEGORY_TITLES)


def load_commands(path: Path | None = None) -> list[CommandDefinition]:
    """Load command definitions, in documentation order."""
    path = path or COMMANDS_FILE
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or []
    return [CommandDefinition(**item) for item in data]


def commands_by_category(commands: list[CommandDefinition]) -> dict[str, list[CommandDefinition]]:
    groups: dict[str, list[CommandDefinition]] = {}
    for cmd in commands:
        groups.setdefault(cmd.category, []).append(cmd)
    return groups


def testable_commands(commands: list[CommandDefinition]) -> list[CommandDefinition]:
    return [cmd for cmd in commands if not cmd.skip_test and cmd.test_case]
