"""CLI reference pipeline: smoke-test commands, gather help, write the reference."""

import json
from datetime import datetime, timezone
from pathlib import Path

import click

from api_docgen.cliref.commands import load_commands, testable_commands
from api_docgen.cliref.help_parser import clean_parsed_help, parse_help_output, parse_main_help
from api_docgen.cliref.models import CommandDefinition, GenerationError, GenerationReport, ParsedHelp
from api_docgen.cliref.reference import default_manual_sections, extract_manual_sections, generate_commands_mdx
from api_docgen.cliref.runner import CommandRunner

INSTALL_HINT = "Install with: curl -fsSL https://sprites.dev/install.sh | sh"


class CliSetupError(Exception):
    """The CLI cannot be driven: not installed, not authenticated, or no test sprite."""


def generate_cli_docs(
    output_path: Path,
    runner: CommandRunner | None = None,
    skip_tests: bool = False,
    verbose: bool = False,
    commands: list[CommandDefinition] | None = None,
    report_path: Path | None = None,
) -> GenerationReport:
    """Regenerate the CLI reference at ``output_path``.

    Per-command test and help failures go into the returned report. Only
    setup failures raise ``CliSetupError``.
    """
    runner = runner or CommandRunner()
    commands = commands if commands is not None else load_commands()
    report = GenerationReport(timestamp=datetime.now(timezone.utc).isoformat())

    click.echo("Checking CLI installation...")
    if not runner.is_installed():
        raise CliSetupError(f"sprite CLI is not installed. {INSTALL_HINT}")
    report.cli_version = runner.version()
    click.echo(f"  CLI version: {report.cli_version}")

    test_sprite = None
    if not skip_tests:
        click.echo("Verifying authentication...")
        if not runner.verify_authentication():
            raise CliSetupError("Authentication failed. Set SPRITES_TEST_TOKEN environment variable")
        click.echo("Cleaning up orphaned test sprites...")
        runner.cleanup_orphaned_test_sprites()
        try:
            test_sprite = runner.create_test_sprite()
        except RuntimeError as e:
            raise CliSetupError(str(e)) from e

    try:
        if skip_tests:
            click.echo("Skipping command tests (SKIP_CLI_TESTS=true)")
        else:
            run_tests(runner, commands, report)

        help_outputs, global_options = gather_help(runner, commands, report, verbose)

        manual = default_manual_sections()
        if output_path.exists():
            extracted = extract_manual_sections(output_path.read_text(encoding="utf-8"))
            if extracted.strip():
                manual = extracted
                click.echo("  Preserved existing manual sections")

        content = generate_commands_mdx(help_outputs, global_options, manual, commands)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        click.echo(f"  Written to: {output_path}")

        echo_report(report, skip_tests)
        if report_path is not None:
            report_path.write_text(json.dumps(report.model_dump(), indent=2), encoding="utf-8")
            click.echo(f"Report written to: {report_path}")
    finally:
        if test_sprite:
            runner.destroy_test_sprite(test_sprite)

    return report


def run_tests(runner: CommandRunner, commands: list[CommandDefinition], report: GenerationReport) -> None:
    click.echo("Running command tests...")
    for cmd in testable_commands(commands):
        result = runner.run_test_case(cmd)
        report.record_test(result)
        if result.success:
            click.echo(f"    PASS: {cmd.name}")
        else:
            click.echo(f"    FAIL: {cmd.name} - {result.error}")

    click.echo("Running dependent tests...")
    for result in runner.run_dependent_tests():
        report.record_test(result)
    click.echo(f"  Tests: {report.tests_passed}/{report.tests_run} passed")


def gather_help(
    runner: CommandRunner,
    commands: list[CommandDefinition],
    report: GenerationReport,
    verbose: bool = False,
):
    click.echo("Gathering help output...")
    global_options, _ = parse_main_help(runner.main_help())
    click.echo(f"  Parsed {len(global_options)} global options")

    help_outputs: dict[str, ParsedHelp] = {}
    for cmd in commands:
        try:
            parsed = clean_parsed_help(parse_help_output(cmd.name, runner.help_output(cmd)))
        except RuntimeError as e:
            click.echo(f"  Warning: Failed to get help for {cmd.name}: {e}", err=True)
            report.errors.append(GenerationError(command=cmd.name, phase="help", message=str(e)))
            continue
        help_outputs[cmd.name] = parsed
        report.commands_generated.append(cmd.name)
        if verbose:
            click.echo(f"    {cmd.name}: {len(parsed.options)} options, {len(parsed.examples)} examples")

    click.echo(f"  Generated help for {len(help_outputs)}/{len(commands)} commands")
    return help_outputs, global_options


def echo_report(report: GenerationReport, skip_tests: bool = False) -> None:
    click.echo("=== Generation Report ===")
    click.echo(f"Timestamp: {report.timestamp}")
    click.echo(f"CLI Version: {report.cli_version}")
    click.echo(f"Commands Generated: {len(report.commands_generated)}")
    if not skip_tests:
        click.echo(f"Tests: {report.tests_passed}/{report.tests_run} passed")
    if report.errors:
        click.echo(f"Errors: {len(report.errors)}")
        for error in report.errors:
            click.echo(f"  - {error.command} ({error.phase}): {error.message}")
    if report.tests_failed:
        click.echo(f"Warning: {report.tests_failed} test(s) failed", err=True)
