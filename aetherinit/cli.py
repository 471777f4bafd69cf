"""CLI commands for aetherinit."""

from __future__ import annotations

import asyncio
import logging
import shutil
import subprocess
import sys
from pathlib import Path

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from aetherinit.errors import BootstrapError, TargetNotFoundError
from aetherinit.git.runner import CommandRunner, describe_failure
from aetherinit.git.tags import RemoteTagChecker, rank_suggestions
from aetherinit.installer import InstallReport, ProjectInstaller
from aetherinit.models.config import BootstrapConfig
from aetherinit.models.selector import Selector
from aetherinit.prompt import ConsolePrompt, ScriptedPrompt

console = Console()


def setup_logging(verbose: bool) -> None:
    handler = RichHandler(console=console, show_time=False, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger("aetherinit")
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def load_config(config_path: str | None) -> BootstrapConfig:
    if config_path:
        return BootstrapConfig.from_yaml(Path(config_path))
    return BootstrapConfig()


def missing_tools(config: BootstrapConfig) -> list[str]:
    tools = ["git"]
    if config.install_dependencies:
        tools.append("npm")
    return [tool for tool in tools if shutil.which(tool) is None]


@click.group()
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False),
              help="YAML file overriding bootstrap settings")
@click.option("--verbose", is_flag=True, help="Show every git command")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """aetherinit - Create Aether CMS projects from the template repository."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config_path)
    except (yaml.YAMLError, ValidationError) as e:
        console.print(f"[red]Invalid configuration file {config_path}[/red]")
        console.print(str(e), markup=False)
        sys.exit(1)


@main.command()
@click.argument("project_name")
@click.option("--version", "-v", "version", default="latest",
              help="Install specific version (e.g., v1.2.0, latest)")
@click.option("--tag", "-t", default=None, help="Install specific git tag")
@click.option("--hash", "--commit", "commit_hash", default=None, help="Install specific commit hash")
@click.option("--skip-install", is_flag=True, help="Don't run npm install")
@click.option("--yes", "-y", is_flag=True, help="Don't ask about connecting your own repository")
@click.pass_context
def create(
    ctx: click.Context,
    project_name: str,
    version: str,
    tag: str | None,
    commit_hash: str | None,
    skip_install: bool,
    yes: bool,
) -> None:
    """Create a new project in PROJECT_NAME.

    Priority order is: hash > tag > version.
    """
    config: BootstrapConfig = ctx.obj["config"]
    if skip_install:
        config = config.model_copy(update={"install_dependencies": False})

    missing = missing_tools(config)
    if missing:
        console.print(f"[red]Required tools not found on PATH: {', '.join(missing)}[/red]")
        sys.exit(1)

    selector = Selector(version=version, tag=tag, hash=commit_hash)
    prompt = ScriptedPrompt() if yes else ConsolePrompt(console)
    installer = ProjectInstaller(config, CommandRunner(), prompt)

    try:
        report = asyncio.run(installer.install(project_name, selector))
    except TargetNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        _print_suggestions(e.suggestions, e.omitted)
        sys.exit(1)
    except BootstrapError as e:
        console.print(f"[red]Failed to create the project: {e}[/red]")
        sys.exit(1)

    _print_success(report)


@main.command()
@click.option("--limit", "-n", default=20, help="Max tags to show")
@click.pass_context
def tags(ctx: click.Context, limit: int) -> None:
    """List versions published on the template repository."""
    config: BootstrapConfig = ctx.obj["config"]
    checker = RemoteTagChecker(CommandRunner(), config.template_repository)

    try:
        with console.status("Fetching tags..."):
            available = asyncio.run(checker.list_tags())
    except (subprocess.CalledProcessError, OSError) as e:
        console.print(f"[red]Could not list tags: {describe_failure(e)}[/red]")
        sys.exit(1)

    shown, omitted = rank_suggestions(available, limit)

    table = Table(title="Available Versions")
    table.add_column("Tag", style="cyan")
    for name in shown:
        table.add_row(name)

    console.print(table)
    if omitted:
        console.print(f"[dim]... and {omitted} more[/dim]")


def _print_suggestions(suggestions: list[str], omitted: int) -> None:
    if not suggestions:
        return
    console.print("\nAvailable versions:")
    for name in suggestions:
        console.print(f"  {name}")
    if omitted:
        console.print(f"  ... and {omitted} more")


def _print_success(report: InstallReport) -> None:
    name = report.project_name
    console.print(f"\n[green]Success! Created {name} at {report.project_dir}[/green]")
    if report.metadata:
        console.print(f"[dim]Installed version: {report.metadata.installed_version}[/dim]")
    for warning in report.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")

    console.print(
        f"""
Get started:
    cd {name}
    npm start

Default credentials:
    Username: admin
    Password: admin

Update commands:
    npm run check-updates    # Check for updates
    npm run update-aether    # Apply updates safely

Documentation: https://aether-cms.pages.dev/
"""
    )


if __name__ == "__main__":
    main()
