"""Parse free-text ``--help`` output into structured command help.

The parser is a line-oriented state machine. Section headers (``Usage:``,
``Options:``, ``Notes:``, ``Examples:``) switch state; every other line is
handled by the current state.
"""

import re
from enum import Enum

from api_docgen.cliref.models import ParsedHelp, ParsedOption


class HelpSection(Enum):
    PREAMBLE = "preamble"
    USAGE = "usage"
    OPTIONS = "options"
    NOTES = "notes"
    EXAMPLES = "examples"


# Line prefix (after stripping) -> state entered.
SECTION_HEADERS = [
    ("Usage:", HelpSection.USAGE),
    ("Options:", HelpSection.OPTIONS),
    ("Flags:", HelpSection.OPTIONS),
    ("Notes:", HelpSection.NOTES),
    ("Examples:", HelpSection.EXAMPLES),
]

# Flags and description are separated by a tab or a run of spaces.
_DESCRIPTION_SPLIT = re.compile(r"\t|\s{2,}")
_SHORT_LONG = re.compile(r"^(-\w)(?:,\s*|\s+)(--[\w-]+)(?:[\s=](\S+))?$")
_SHORT_ONLY = re.compile(r"^(-\w)(?:\s+(\S+))?$")
_LONG_ONLY = re.compile(r"^(--[\w-]+)(?:[\s=](\S+))?$")
_GO_FLAG = re.compile(r"^-(\w{2,})(?:\s+(\S+))?$")
# Single-space layout: only bracketed or upper-case words count as an argument.
_LOOSE = re.compile(
    r"^(?:(-\w)(?:,\s*|\s+))?(--[\w-]+|-\w)(?:\s+(<[^>]+>|\[[^\]]+\]|[A-Z][A-Z0-9_]*))?\s+(.+)$"
)

_GLOBAL_OPTION = re.compile(r"^(-\w)?,?\s*(--[\w-]+(?:\[=[^\]]+\])?)?\s+(.+)$")
_COMMAND_LINE = re.compile(r"^(\w[\w\s]*?)(?:\s+\([^)]+\))?\s{2,}(.+)$")


def section_for(line: str) -> tuple[HelpSection, str] | None:
    """Return (state, remainder) when the stripped line is a section header."""
    for prefix, section in SECTION_HEADERS:
        if line.startswith(prefix):
            return section, line[len(prefix):].strip()
    return None


def parse_option_line(text: str) -> ParsedOption | None:
    """Parse one stripped option line, or return ``None`` when it is not an option."""
    if not text.startswith("-"):
        return None

    flags, *rest = _DESCRIPTION_SPLIT.split(text, maxsplit=1)
    description = rest[0].strip() if rest else ""

    match = _SHORT_LONG.match(flags)
    if match:
        short, long, argument = match.groups()
        return ParsedOption(short=short, long=long, argument=argument, description=description)

    match = _LONG_ONLY.match(flags)
    if match:
        long, argument = match.groups()
        return ParsedOption(long=long, argument=argument, description=description)

    match = _GO_FLAG.match(flags)
    if match:
        name, flag_type = match.groups()
        argument = _go_argument(flag_type)
        return ParsedOption(long=f"--{name}", argument=argument, description=description)

    match = _SHORT_ONLY.match(flags)
    if match:
        short, argument = match.groups()
        return ParsedOption(short=short, long=short, argument=_go_argument(argument), description=description)

    match = _LOOSE.match(text)
    if match:
        short, long, argument, description = match.groups()
        return ParsedOption(short=short, long=long, argument=argument, description=description.strip())

    return None


def _go_argument(flag_type: str | None) -> str | None:
    if not flag_type:
        return None
    if flag_type.startswith(("<", "[")):
        return flag_type
    return f"<{flag_type}>"


class HelpParser:
    """State machine over the lines of one command's help output."""

    def __init__(self, command: str):
        self.result = ParsedHelp(command=command)
        self.state = HelpSection.PREAMBLE
        self.pending: ParsedOption | None = None

    def parse(self, output: str) -> ParsedHelp:
        for line in output.splitlines():
            self.feed(line)
        self._flush_option()
        return self.result

    def feed(self, line: str) -> None:
        stripped = line.strip()

        header = section_for(stripped)
        if header is not None:
            self._flush_option()
            self.state, remainder = header
            if self.state is HelpSection.USAGE and remainder:
                self.result.usage = remainder
            return

        if not stripped:
            return

        if self.state is HelpSection.PREAMBLE:
            if not self.result.description:
                self.result.description = stripped
        elif self.state is HelpSection.USAGE:
            self.result.usage = f"{self.result.usage} {stripped}".strip()
        elif self.state is HelpSection.OPTIONS:
            self._option_line(line, stripped)
        elif self.state is HelpSection.NOTES:
            self.result.notes.append(stripped)
        elif self.state is HelpSection.EXAMPLES:
            self.result.examples.append(stripped)

    def _option_line(self, line: str, stripped: str) -> None:
        option = parse_option_line(stripped)
        if option is not None:
            self._flush_option()
            self.pending = option
        elif line.startswith(("\t", "    ")) and self.pending is not None:
            # continuation of the pending option's description
            joined = f"{self.pending.description} {stripped}"
            self.pending.description = joined.strip()

    def _flush_option(self) -> None:
        if self.pending is not None:
            self.result.options.append(self.pending)
            self.pending = None


def parse_help_output(command: str, output: str) -> ParsedHelp:
    return HelpParser(command).parse(output)


def parse_main_help(output: str) -> tuple[list[ParsedOption], list[str]]:
    """Extract global options and command names from the top-level help."""
    global_options: list[ParsedOption] = []
    commands: list[str] = []
    section = None

    for line in output.splitlines():
        stripped = line.strip()
        if stripped.startswith("Global Options:"):
            section = "options"
            continue
        if stripped.startswith("Commands:"):
            section = "commands"
            continue
        if not stripped:
            continue
        if not line[0].isspace() and stripped.endswith(":"):
            section = None
            continue

        if section == "options":
            option = parse_option_line(stripped)
            if option is not None:
                global_options.append(option)
                continue
            # optional-value flags such as --debug[=<file>]
            match = _GLOBAL_OPTION.match(stripped)
            if match and (match.group(1) or match.group(2)):
                short, long, description = match.groups()
                global_options.append(ParsedOption(short=short, long=long or short, description=description))
        elif section == "commands":
            match = _COMMAND_LINE.match(stripped)
            if match:
                commands.append(match.group(1).strip())

    return global_options, commands


def clean_parsed_help(parsed: ParsedHelp) -> ParsedHelp:
    return parsed.model_copy(
        update={
            "description": parsed.description.strip(),
            "usage": parsed.usage.strip(),
            "options": [
                opt.model_copy(update={"description": opt.description.strip()}) for opt in parsed.options
            ],
            "notes": [n for n in parsed.notes if n.strip()],
            "examples": [e for e in parsed.examples if e.strip()],
        }
    )
