"""CLI entry point for Update Creator."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from update_creator_core.config import CreatorConfig, load_config
from update_creator_core.config.loader import CONFIG_FILENAME, DEFAULT_CONFIG_TEMPLATE
from update_creator_core.descriptor import (
    DESCRIPTOR_SAMPLE,
    DESCRIPTOR_TEMPLATE,
    DescriptorError,
)
from update_creator_core.distribution import (
    ArchiveReadError,
    ClassificationSets,
    DistributionDiffer,
    DistributionTree,
    is_distribution_archive,
)
from update_creator_core.update import UpdateError, UpdateGenerator, UpdateZipValidator

app = typer.Typer(
    name="update-creator",
    help="Create and validate update zips by diffing two product distributions.",
)

config_app = typer.Typer(help="Manage update-creator configuration.")
app.add_typer(config_app, name="config")

# Errors reported to the user as "Error: ..." with exit code 1
_USER_ERRORS = (UpdateError, DescriptorError, ArchiveReadError, ValueError)

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# Global state
_config: CreatorConfig | None = None


def _get_config() -> CreatorConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to update-creator.yaml")
    ] = None,
    debug: Annotated[bool, typer.Option("--debug", "-d", help="Enable debug logs")] = False,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    level = logging.DEBUG if debug else _LOG_LEVELS[_config.log_level]
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _display_summary(sets: ClassificationSets, title: str) -> None:
    """Show per-category counts as a Rich table."""
    table = Table(title=title)
    table.add_column("Change", style="cyan")
    table.add_column("Count", justify="right", style="green")
    table.add_row("Modified files", str(len(sets.modified)))
    table.add_row("Removed files", str(len(sets.removed_files)))
    table.add_row("Removed directories", str(len(sets.removed_directories)))
    table.add_row("Added files", str(len(sets.added)))
    rprint(table)


def _display_changes(sets: ClassificationSets) -> None:
    """Show every classified path with its change type."""
    table = Table(title="Changed Paths")
    table.add_column("Path", style="cyan")
    table.add_column("Change", justify="center")
    rows = [
        *((p, "[yellow]modified[/yellow]") for p in sets.modified),
        *((p + "/", "[red]removed dir[/red]") for p in sets.removed_directories),
        *((p, "[red]removed[/red]") for p in sets.removed_files),
        *((p, "[green]added[/green]") for p in sets.added),
    ]
    for path, change in sorted(rows):
        table.add_row(escape(path), change)
    rprint(table)


@app.command()
def generate(
    updated: str = typer.Argument(..., help="Path to the updated distribution zip"),
    previous: str = typer.Argument(..., help="Path to the previous distribution zip"),
    update_dir: str = typer.Argument(..., help="Update directory where 'init' was run"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Classify and show changes without writing the zip"),
) -> None:
    """Generate an update zip from the diff between two distributions."""
    cfg = _get_config()
    rprint(f"[bold]Generating[/bold] update from {escape(updated)} against {escape(previous)}...")

    generator = UpdateGenerator(cfg)
    try:
        result = generator.generate(updated, previous, update_dir, dry_run=dry_run)
    except _USER_ERRORS as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    _display_summary(result.classification, title=f"Changes in {escape(result.distribution_name)}")

    if dry_run:
        rprint("[yellow](dry run: update zip not written)[/yellow]\n")
        _display_changes(result.classification)
        return

    rprint(Panel(
        f"[dim]Update:[/dim]   {escape(result.update_name)}\n"
        f"[dim]Zip:[/dim]      {escape(str(result.zip_path))}\n"
        f"[dim]Shipped:[/dim]  {len(result.classification.changed_files)} file(s)",
        title="Update Created",
        border_style="green",
    ))


@app.command()
def diff(
    updated: str = typer.Argument(..., help="Path to the updated distribution zip"),
    previous: str = typer.Argument(..., help="Path to the previous distribution zip"),
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: table or json")
    ] = "table",
) -> None:
    """Show added, removed and modified files between two distributions."""
    cfg = _get_config()
    if format not in ("table", "json"):
        rprint(f"[red]Error:[/red] Invalid format '{escape(format)}'. Choose table or json.")
        raise typer.Exit(1)

    for label, path in (("updated", updated), ("previous", previous)):
        if not is_distribution_archive(path):
            rprint(f"[red]Error:[/red] The {label} distribution '{escape(path)}' is not a zip file.")
            raise typer.Exit(1)

    try:
        previous_tree = DistributionTree.from_archive(previous, algorithm=cfg.diff.algorithm)
        updated_tree = DistributionTree.from_archive(updated, algorithm=cfg.diff.algorithm)
    except ArchiveReadError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    sets = DistributionDiffer(cfg.diff).classify(previous_tree, updated_tree)

    if format == "json":
        typer.echo(json.dumps(sets.to_dict(), indent=2))
        return

    _display_summary(sets, title=f"Changes in {escape(updated_tree.distribution_name)}")
    if sets.has_changes:
        _display_changes(sets)
    else:
        rprint("[green]No differences found.[/green]")


@app.command()
def validate(
    update_zip: str = typer.Argument(..., help="Path to the generated update zip"),
    previous: str = typer.Argument(..., help="Path to the previous distribution zip"),
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: table or json")
    ] = "table",
) -> None:
    """Validate an update zip against the previous distribution."""
    cfg = _get_config()
    rprint(f"[bold]Validating[/bold] {escape(update_zip)}...")

    validator = UpdateZipValidator(cfg)
    try:
        result = validator.validate(update_zip, previous)
    except ArchiveReadError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if format == "json":
        typer.echo(result.model_dump_json(indent=2))
    else:
        status = "[green]PASS[/green]" if result.valid else "[red]FAIL[/red]"
        table = Table(title="Validation Result")
        table.add_column("Update", style="cyan")
        table.add_column("Status", justify="center")
        table.add_column("Errors", justify="right", style="red")
        table.add_column("Warnings", justify="right", style="yellow")
        table.add_row(escape(result.path), status, str(len(result.errors)), str(len(result.warnings)))
        rprint(table)

        for err in result.errors:
            rprint(f"  [red]error:[/red] {escape(err)}")
        for warn in result.warnings:
            rprint(f"  [yellow]warn:[/yellow] {escape(warn)}")

    if not result.valid:
        raise typer.Exit(1)


@app.command()
def init(
    directory: str = typer.Argument(".", help="Update directory to initialize"),
    sample: bool = typer.Option(False, "--sample", "-s", help="Show a sample descriptor"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing descriptor"),
) -> None:
    """Create an update-descriptor.yaml template in the update directory."""
    cfg = _get_config()
    if sample:
        rprint(Syntax(DESCRIPTOR_SAMPLE, "yaml"))
        return

    update_dir = Path(directory)
    target = update_dir / cfg.update.descriptor_file
    if target.exists() and not force:
        rprint(f"[yellow]{escape(str(target))} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)

    update_dir.mkdir(parents=True, exist_ok=True)
    target.write_text(DESCRIPTOR_TEMPLATE, encoding="utf-8")
    rprint(f"[green]Created[/green] {escape(str(target))}")

    rprint("\n[bold]What's next?[/bold]")
    rprint(f"  - fill in {escape(cfg.update.descriptor_file)} and add {escape(cfg.update.license_file)}")
    rprint("  - run 'update-creator generate <updated_dist> <previous_dist> <update_dir>'")
    rprint("  - run 'update-creator init --sample' to view a sample descriptor")


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    import yaml

    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default update-creator.yaml in current directory."""
    target = Path(CONFIG_FILENAME)
    if target.exists() and not force:
        rprint(f"[yellow]{CONFIG_FILENAME} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
