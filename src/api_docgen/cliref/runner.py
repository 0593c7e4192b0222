"""Runs the documented CLI as a subprocess and captures its output."""

import re
import subprocess
import time

import click

from api_docgen.cliref.models import CommandDefinition, CommandResult, TestResult

DEFAULT_TIMEOUT = 30.0
TEST_SPRITE_PREFIX = "docs-gen"

_VERSION = re.compile(r"Current version:\s*v?([\d.]+)", re.IGNORECASE)
_CHECKPOINT_ID = re.compile(r"v\d+")
_TEST_SPRITE = re.compile(rf"({TEST_SPRITE_PREFIX}-\d+)")


class CommandRunner:
    """Thin wrapper around the ``sprite`` binary."""

    def __init__(self, binary: str = "sprite", env: dict[str, str] | None = None):
        self.binary = binary
        self.env = env

    def run(self, args: list[str], timeout: float = DEFAULT_TIMEOUT) -> CommandResult:
        """Run a command; failures are reported in the result, never raised."""
        start = time.monotonic()
        try:
            proc = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=self.env,
            )
        except subprocess.TimeoutExpired as e:
            return CommandResult(
                success=False,
                stdout=_text(e.stdout),
                stderr=f"{_text(e.stderr)}\nCommand timed out",
                exit_code=124,
                duration=time.monotonic() - start,
            )
        except OSError as e:
            return CommandResult(success=False, stderr=str(e), exit_code=1, duration=time.monotonic() - start)

        return CommandResult(
            success=proc.returncode == 0,
            stdout=proc.stdout,
            stderr=proc.stderr,
            exit_code=proc.returncode,
            duration=time.monotonic() - start,
        )

    def is_installed(self) -> bool:
        return self.run([self.binary, "--help"]).success

    def version(self) -> str:
        result = self.run([self.binary, "upgrade", "--check"])
        match = _VERSION.search(result.stdout)
        return match.group(1) if match else "unknown"

    def verify_authentication(self) -> bool:
        return self.run([self.binary, "org", "list"]).success

    def create_test_sprite(self) -> str:
        """Create and select an ephemeral sprite. Raises RuntimeError on failure."""
        name = f"{TEST_SPRITE_PREFIX}-{int(time.time() * 1000)}"
        click.echo(f"  Creating test sprite: {name}")

        result = self.run([self.binary, "create", name], timeout=120)
        if not result.success:
            raise RuntimeError(f"Failed to create test sprite: {result.stderr}")

        use = self.run([self.binary, "use", name])
        if not use.success:
            self.run([self.binary, "destroy", "-s", name])
            raise RuntimeError(f"Failed to set test sprite: {use.stderr}")
        return name

    def destroy_test_sprite(self, name: str) -> None:
        click.echo(f"  Destroying test sprite: {name}")
        result = self.run([self.binary, "destroy", "-s", name, "--force"], timeout=60)
        if not result.success:
            click.echo(f"  Warning: Failed to destroy test sprite: {result.stderr}", err=True)

    def cleanup_orphaned_test_sprites(self) -> list[str]:
        """Destroy test sprites left behind by an aborted run."""
        result = self.run([self.binary, "list"])
        if not result.success:
            return []

        orphans = _TEST_SPRITE.findall(result.stdout)
        for name in orphans:
            click.echo(f"  Cleaning up orphaned test sprite: {name}")
            self.run([self.binary, "destroy", "-s", name, "--force"])
        return orphans

    def run_test_case(self, command: CommandDefinition) -> TestResult:
        if command.test_case is None:
            return TestResult(command=command.name, success=True, error="No test case defined")

        case = command.test_case
        click.echo(f"  Testing: {' '.join(case.args)}")
        result = self.run(case.args, timeout=case.timeout)

        success = result.success == case.expect_success
        error = None
        if success and case.expect_output and not re.search(case.expect_output, result.stdout):
            success = False
            error = f"Output did not match expected pattern: {case.expect_output}"
        if not success and error is None:
            error = result.stderr or result.stdout or "Command failed"

        return TestResult(command=command.name, success=success, duration=result.duration, error=error)

    def run_dependent_tests(self) -> list[TestResult]:
        """Checkpoint create -> info -> URL auth toggle -> restore, sharing the checkpoint id."""
        b = self.binary
        results = []

        click.echo("  Testing: sprite checkpoint create (capturing ID)")
        created = self.run([b, "checkpoint", "create"], timeout=60)
        results.append(_test_result("sprite checkpoint create", created, "Failed to create checkpoint"))
        if not created.success:
            return results

        match = _CHECKPOINT_ID.search(created.stdout)
        if match is None:
            click.echo("    Could not parse checkpoint ID, skipping dependent tests")
            return results
        checkpoint = match.group(0)
        click.echo(f"    Captured checkpoint ID: {checkpoint}")

        steps = [
            ("sprite checkpoint info", [b, "checkpoint", "info", checkpoint], DEFAULT_TIMEOUT),
            ("sprite url update --auth public", [b, "url", "update", "--auth", "public"], DEFAULT_TIMEOUT),
            ("sprite url update --auth default", [b, "url", "update", "--auth", "default"], DEFAULT_TIMEOUT),
            ("sprite restore", [b, "restore", checkpoint], 120),
        ]
        for name, args, timeout in steps:
            click.echo(f"  Testing: {' '.join(args)}")
            result = self.run(args, timeout=timeout)
            results.append(_test_result(name, result))
            click.echo(f"    {'PASS' if result.success else 'FAIL'}: {name}")
        return results

    def help_output(self, command: CommandDefinition) -> str:
        """Help text for a command. Raises RuntimeError when the command prints nothing."""
        result = self.run(command.help_args)
        # help may exit non-zero and still print usage
        if result.stdout:
            return result.stdout
        if result.stderr:
            return result.stderr
        raise RuntimeError(f"No help output for {command.name}")

    def main_help(self) -> str:
        result = self.run([self.binary, "--help"])
        return result.stdout or result.stderr


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return value


def _test_result(name: str, result: CommandResult, default_error: str = "Command failed") -> TestResult:
    return TestResult(
        command=name,
        success=result.success,
        duration=result.duration,
        error=None if result.success else (result.stderr or default_error),
    )
