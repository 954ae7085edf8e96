#!/usr/bin/env python3
import os
from pathlib import Path
from typing import Optional

import click
from git.exc import CommandError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import DEFAULT_CONFIG_FILENAME, Config
from .core import Chain
from .exceptions import ChainError

console = Console()


def _open_chain(ctx: click.Context) -> Chain:
    return ctx.obj["config"].open_chain(ctx.obj["path"])


def _yes_no(value: bool) -> str:
    return "[yellow]yes[/yellow]" if value else "[green]no[/green]"


@click.group()
@click.option(
    "-p",
    "--path",
    default=".",
    help="Path to git repository (defaults to current directory)",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option("-d", "--debug", is_flag=True, help="Print every git step and its output")
@click.pass_context
def main(ctx: click.Context, path: Path, debug: bool):
    """
    Drive a git working tree through chained git commands.

    Configuration can be set in .gitchain.toml in the repository root.
    Command line options override configuration file settings.
    """
    repo_path = path.absolute()
    config = Config.load(repo_path)
    if debug:
        config.debug = True
    ctx.obj = {"path": repo_path, "config": config}


@main.command()
@click.pass_context
def info(ctx: click.Context):
    """Show branch, HEAD, tags and pending changes."""
    try:
        chain = _open_chain(ctx)
        latest, has_tag = chain.get_latest_tag()

        table = Table(title=str(ctx.obj["path"]).replace(os.sep, "/"))
        table.add_column("Setting", style="bold")
        table.add_column("Value")
        table.add_row("branch", chain.get_current_branch() or "[dim](detached)[/dim]")
        table.add_row("HEAD", chain.get_current_commit_hash())
        table.add_row("commits", str(chain.get_commit_count()))
        table.add_row("latest tag", latest if has_tag else "[dim]none[/dim]")
        table.add_row("staged changes", _yes_no(chain.has_staging_changes()))
        table.add_row("unstaged changes", _yes_no(chain.has_unstaged_changes()))
        console.print(table)
    except (ChainError, CommandError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise click.Abort()


@main.command()
@click.option("-m", "--message", required=True, help="Commit message")
@click.option("--push", "push_after", is_flag=True, help="Push after committing")
@click.pass_context
def submit(ctx: click.Context, message: str, push_after: bool):
    """Stage everything and commit it, if anything was staged."""

    def commit_step(chain: Chain) -> Chain:
        chain = chain.commit(message)
        return chain.push() if push_after else chain

    try:
        chain = (
            _open_chain(ctx)
            .status()
            .add()
            .when_then(lambda c: c.has_staging_changes(), commit_step)
            .must_done()
        )
    except ChainError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise click.Abort()

    output = chain.output().decode("utf-8", errors="replace").strip()
    if output:
        console.print(output, markup=False)
    console.print("[green]✓ Done[/green]")


@main.command()
@click.pass_context
def ignored(ctx: click.Context):
    """List files ignored by .gitignore rules."""
    try:
        paths = _open_chain(ctx).get_ignored_files()
    except (ChainError, CommandError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise click.Abort()

    for path in paths:
        console.print(path, markup=False)


@main.command("latest-tag")
@click.option("--prefix", help="Only consider tags starting with this prefix")
@click.option("--match", "pattern", help="Only consider tags matching this glob")
@click.pass_context
def latest_tag(ctx: click.Context, prefix: Optional[str], pattern: Optional[str]):
    """Print the latest tag."""
    if prefix and pattern:
        raise click.UsageError("--prefix and --match are mutually exclusive")
    try:
        chain = _open_chain(ctx)
        if prefix is not None:
            tag = chain.latest_tag_has_prefix(prefix)
        elif pattern is not None:
            tag = chain.latest_tag_matching(pattern)
        else:
            tag, _ = chain.get_latest_tag()
    except (ChainError, CommandError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise click.Abort()

    if not tag:
        console.print("[yellow]No matching tag[/yellow]")
        ctx.exit(1)
    console.print(tag, markup=False)


@main.command("config-list")
@click.pass_context
def config_list(ctx: click.Context):
    """Display current configuration settings."""
    config = ctx.obj["config"]
    config_path = ctx.obj["path"] / DEFAULT_CONFIG_FILENAME
    source = "config" if config_path.exists() else "default"

    console.print("\n[bold]Current Configuration Settings:[/bold]")
    if config_path.exists():
        console.print(f"[dim]Config file: {str(config_path).replace(os.sep, '/')}[/dim]")
    else:
        console.print("[dim]Using default values (no config file found)[/dim]")

    console.print(f"\n{'Setting':<20} {'Value':<20} {'Source':<10}")
    console.print("-" * 50)
    for name, value in config.model_dump().items():
        console.print(f"{name:<20} {str(value):<20} {source:<10}", markup=False)


if __name__ == "__main__":
    main()
