"""helm-updater check - Find newer chart versions for Argo CD manifests."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from helm_updater.cli.options import ConfigOption, OutputOption, StrategyOption
from helm_updater.config.loader import ConfigError, load_config
from helm_updater.core.update_checker import UpdateChecker
from helm_updater.models import UpdateStrategy
from helm_updater.output.formatters import output_groups, output_updates
from helm_updater.utils.manifest_parser import load_references

console = Console()
err_console = Console(stderr=True)


def check(
    paths: Optional[list[Path]] = typer.Argument(None, help="Manifest files or directories (default: .)"),
    output: str = OutputOption,
    config: Path = ConfigOption,
    strategy: Optional[str] = StrategyOption,
    grouped: bool = typer.Option(False, "--grouped", "-g", help="Show updates partitioned by configured groups"),
    exclude: Optional[list[str]] = typer.Option(None, "--exclude", "-e", help="Glob of manifest paths to skip"),
) -> None:
    """Check Argo CD manifests for newer Helm chart versions."""
    try:
        cfg = load_config(config)
    except ConfigError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    if strategy:
        cfg.update_strategy = UpdateStrategy.from_str(strategy, field="--strategy")

    references = load_references(paths or [Path(".")], exclude or [])
    if not references:
        err_console.print("[dim]No Helm chart references found.[/dim]")
        if output == "table":
            return
        if grouped:
            output_groups({}, output)
        else:
            output_updates([], output)
        return

    with err_console.status("[bold cyan]Resolving chart versions…") as status:
        with UpdateChecker(cfg) as checker:

            def on_progress(i: int, total: int, chart: str) -> None:
                status.update(f"[bold cyan]Selecting updates… [dim]({i}/{total})[/dim] {chart}")

            updates = checker.check_updates(references, on_progress=on_progress)
            groups = checker.group_updates(updates) if grouped else None

    if groups is not None:
        output_groups(groups, output)
    else:
        output_updates(updates, output)

    if output == "table":
        if updates:
            console.print(f"\n[yellow]{len(updates)} update(s) available[/yellow]")
        else:
            console.print("\n[green]All charts are up to date[/green]")
