"""CLI command reference document.

Generated content sits between the START and END markers. Everything after
the END marker belongs to hand-written sections and is carried over verbatim
on each regeneration.
"""

from api_docgen.cliref.commands import CATEGORY_ORDER, CATEGORY_TITLES
from api_docgen.cliref.models import CommandDefinition, ParsedHelp, ParsedOption
from api_docgen.compiler.text import escape_tags

AUTO_GEN_START = "{/* AUTO-GENERATED-CONTENT:START - Do not edit this section */}"
AUTO_GEN_END = "{/* AUTO-GENERATED-CONTENT:END */}"

MANUAL_SECTION_HEADERS = [
    "## Exit Codes",
    "## Environment Variables",
    "## Configuration Files",
    "## Examples",
    "## Related Documentation",
]

HEADER = """---
title: CLI Commands Reference
description: Complete reference for all Sprites CLI commands
---

import { Callout, LinkCard, CardGrid } from '@/components/react';

Complete reference for all `sprite` CLI commands."""


def generate_commands_mdx(
    help_outputs: dict[str, ParsedHelp],
    global_options: list[ParsedOption],
    manual_sections: str,
    commands: list[CommandDefinition],
) -> str:
    """Build the full reference document."""
    return (
        f"{HEADER}\n\n"
        f"{AUTO_GEN_START}\n\n"
        f"{global_options_section(global_options)}\n\n"
        f"{command_sections(help_outputs, commands)}\n\n"
        f"{AUTO_GEN_END}\n\n"
        f"{manual_sections}"
    )


def global_options_section(options: list[ParsedOption]) -> str:
    if not options:
        return ""

    lines = [
        "## Global Options",
        "",
        "These options work with any command:",
        "",
        "| Option | Description |",
        "|--------|-------------|",
    ]
    for opt in options:
        lines.append(f"| {format_option_for_table(opt)} | {escape_tags(opt.description)} |")
    return "\n".join(lines)


def format_option_for_table(opt: ParsedOption) -> str:
    """``-o``, ``--org`` <name> style cell."""
    parts = []
    if opt.short:
        parts.append(f"`{opt.short}`")
    if opt.long and opt.long != opt.short:
        parts.append(f"`{opt.long}`")
    if opt.argument and parts:
        parts[-1] += f" {opt.argument}"
    return ", ".join(parts)


def format_option_inline(opt: ParsedOption) -> str:
    """Single code span: ``-d, --dir <path>``."""
    if opt.short and opt.long and opt.short != opt.long:
        flags = f"{opt.short}, {opt.long}"
    else:
        flags = opt.long or opt.short or ""
    if opt.argument:
        flags = f"{flags} {opt.argument}"
    return f"`{flags}`"


def command_sections(help_outputs: dict[str, ParsedHelp], commands: list[CommandDefinition]) -> str:
    sections = []
    for category in CATEGORY_ORDER:
        members = [cmd for cmd in commands if cmd.category == category]
        if not members:
            continue
        sections.append(f"## {CATEGORY_TITLES[category]}")
        sections.append("")
        for cmd in members:
            sections.append(command_section(cmd, help_outputs.get(cmd.name)))
    return "\n".join(sections)


def command_section(cmd: CommandDefinition, help: ParsedHelp | None) -> str:
    lines = [f"### `{cmd.name}`", ""]

    if help and help.description:
        lines += [escape_tags(help.description), ""]

    usage = help.usage if help and help.usage else cmd.name
    lines += ["```bash", usage, "```", ""]

    if cmd.aliases:
        aliases = ", ".join(f"`{a}`" for a in cmd.aliases)
        lines += [f"**Aliases:** {aliases}", ""]

    if help and help.options:
        lines.append("**Options:**")
        for opt in help.options:
            lines.append(f"- {format_option_inline(opt)} - {escape_tags(opt.description)}")
        lines.append("")

    if help and help.notes:
        lines += [f"> {escape_tags(note)}" for note in help.notes]
        lines.append("")

    if help and help.examples:
        lines += ["**Examples:**", "```bash", *help.examples, "```", ""]

    return "\n".join(lines)


def extract_manual_sections(content: str) -> str:
    """Return the hand-written tail of an existing reference document."""
    index = content.find(AUTO_GEN_END)
    if index == -1:
        return extract_known_manual_sections(content)
    return content[index + len(AUTO_GEN_END):].removeprefix("\n\n")


def extract_known_manual_sections(content: str) -> str:
    """Fallback for documents without markers: collect the known manual headings."""
    collected: list[str] = []
    inside = False
    for line in content.split("\n"):
        if line.startswith("## "):
            inside = any(line.startswith(h) for h in MANUAL_SECTION_HEADERS)
            if not inside and collected:
                break
        if inside:
            collected.append(line)
    return "\n".join(collected).strip()


def default_manual_sections() -> str:
    return DEFAULT_MANUAL_SECTIONS


DEFAULT_MANUAL_SECTIONS = """## Exit Codes

| Code | Meaning |
|------|---------|
| 0 | Success |
| 1 | General error |
| 2 | Command not found |
| 126 | Command cannot execute |
| 127 | Command not found (in sprite) |
| 128+ | Command terminated by signal |

## Environment Variables

| Variable | Description |
|----------|-------------|
| `SPRITE_TOKEN` | API token override (legacy; falls back if no stored token) |
| `SPRITE_URL` | Direct sprite URL (for local/dev direct connections) |
| `SPRITES_API_URL` | API URL override (default: `https://api.sprites.dev`) |

## Configuration Files

### Global Config

`~/.sprites/sprites.json` (managed by the CLI; format may evolve):
```json
{
  "version": "1",
  "current_selection": {
    "url": "https://api.sprites.dev",
    "org": "personal"
  },
  "urls": {
    "https://api.sprites.dev": {
      "url": "https://api.sprites.dev",
      "orgs": {
        "personal": {
          "name": "personal",
          "keyring_key": "sprites-cli:<user-id>",
          "use_keyring": true,
          "sprites": {}
        }
      }
    }
  }
}
```

### Local Context

`.sprite` (in project directory):
```json
{
  "organization": "personal",
  "sprite": "my-project-sprite"
}
```

## Related Documentation

<CardGrid client:load>
  <LinkCard
    href="/cli/installation"
    title="Installation"
    description="Install the Sprites CLI on your platform"
    icon="rocket"
    client:load
  />
  <LinkCard
    href="/cli/authentication"
    title="Authentication"
    description="Set up your Fly.io account and manage tokens"
    icon="settings"
    client:load
  />
  <LinkCard
    href="/working-with-sprites"
    title="Working with Sprites"
    description="Beyond the basics guide"
    icon="book-open"
    client:load
  />
  <LinkCard
    href="/concepts/checkpoints"
    title="Checkpoints"
    description="Save and restore sprite state"
    icon="folder"
    client:load
  />
</CardGrid>
"""
