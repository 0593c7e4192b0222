"""Data models for the CLI command reference generator."""

from pydantic import BaseModel


class TestCase(BaseModel):
    """How to smoke-test a command before documenting it."""

    __test__ = False  # not a pytest class

    args: list[str]
    expect_success: bool = True
    expect_output: str | None = None  # regex matched against stdout
    timeout: float = 30.0


class CommandDefinition(BaseModel):
    name: str  # e.g. "sprite exec"
    aliases: list[str] = []
    category: str
    requires_sprite: bool = False
    requires_auth: bool = False
    test_case: TestCase | None = None
    skip_test: bool = False  # interactive or destructive commands
    help_command: list[str] | None = None  # defaults to "{name} --help"

    @property
    def help_args(self) -> list[str]:
        return self.help_command or [*self.name.split(), "--help"]


class CommandResult(BaseModel):
    success: bool
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    duration: float = 0.0


class ParsedOption(BaseModel):
    long: str
    short: str | None = None
    argument: str | None = None
    description: str = ""


class ParsedHelp(BaseModel):
    command: str
    usage: str = ""
    description: str = ""
    options: list[ParsedOption] = []
    notes: list[str] = []
    examples: list[str] = []


class TestResult(BaseModel):
    __test__ = False

    command: str
    success: bool
    duration: float = 0.0
    error: str | None = None


class GenerationError(BaseModel):
    command: str
    phase: str  # test / help / parse
    message: str


class GenerationReport(BaseModel):
    timestamp: str
    cli_version: str = "unknown"
    tests_run: int = 0
    tests_passed: int = 0
    tests_failed: int = 0
    commands_generated: list[str] = []
    errors: list[GenerationError] = []

    def record_test(self, result: TestResult) -> None:
        self.tests_run += 1
        if result.success:
            self.tests_passed += 1
        else:
            self.tests_failed += 1
            self.errors.append(
                GenerationError(command=result.command, phase="test", message=result.error or "Unknown error")
            )
