"""CLI entry point for api-docgen."""

import os
from pathlib import Path

import click

from api_docgen.cliref.driver import CliSetupError, generate_cli_docs
from api_docgen.cliref.runner import CommandRunner
from api_docgen.compiler.driver import VersionResult, generate_all
from api_docgen.config import ConfigError, load_config


@click.group()
def main():
    """API Docgen — compile API schemas and CLI help into documentation pages."""
    pass


@main.command()
@click.option("-c", "--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="Site config YAML (defaults to the built-in Sprites site).")
@click.option("-o", "--output", default=Path("src/content/docs/api"), type=click.Path(path_type=Path), help="Output root for versioned API pages.")
def api(config_path: Path | None, output: Path):
    """Generate API reference pages for every configured version."""
    try:
        site = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    try:
        results = generate_all(site, output)
    except OSError as e:
        raise click.ClickException(f"Cannot write to {output}: {e}") from e

    echo_summary(results)
    failed = [r.version.id for r in results if not r.success]
    if failed:
        raise click.ClickException(f"Failed to generate: {', '.join(failed)}")
    click.echo("Done!")


def echo_summary(results: list[VersionResult]) -> None:
    click.echo("\n=== Generation Report ===")
    for result in results:
        if not result.success:
            click.echo(f"{result.version.id}: FAILED - {result.error}")
            continue
        degraded = result.degraded
        click.echo(f"{result.version.id}: {len(result.files)} files, {len(degraded)} warning(s)")
        for item in degraded:
            click.echo(f"  - {item}")


@main.command("cli-ref")
@click.option("-o", "--output", default=Path("src/content/docs/cli/commands.mdx"), type=click.Path(path_type=Path), help="CLI reference document to (re)generate.")
@click.option("--report", "report_path", default=Path("cli-test-report.json"), type=click.Path(path_type=Path), help="Where to write the JSON report.")
@click.option("--skip-tests", is_flag=True, envvar="SKIP_CLI_TESTS", help="Skip authentication, test sprite and command tests.")
@click.option("--verbose", is_flag=True, envvar="VERBOSE", help="Log per-command details.")
@click.option("--token", default=None, envvar=["SPRITES_TEST_TOKEN", "SPRITE_TOKEN"], help="API token for the test run.")
def cli_ref(output: Path, report_path: Path, skip_tests: bool, verbose: bool, token: str | None):
    """Generate the CLI command reference from --help output."""
    click.echo("=== Sprites CLI Documentation Generator ===")
    env = dict(os.environ, SPRITE_TOKEN=token) if token else None
    runner = CommandRunner(env=env)

    try:
        report = generate_cli_docs(
            output,
            runner=runner,
            skip_tests=skip_tests,
            verbose=verbose,
            report_path=report_path,
        )
    except CliSetupError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Done! {len(report.commands_generated)} commands documented.")
