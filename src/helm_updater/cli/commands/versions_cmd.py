"""helm-updater versions <chart> - List versions published by a chart source."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from helm_updater.cli.options import ConfigOption, OutputOption
from helm_updater.config.loader import ConfigError, load_config
from helm_updater.core.auth import AuthResolver
from helm_updater.core.version_source import VersionSourceClient
from helm_updater.output.formatters import output_versions
from helm_updater.utils.version_compare import parse_version

console = Console()


def versions(
    chart: str = typer.Argument(help="Chart name (may contain '/' for OCI paths)"),
    repo: str = typer.Option(..., "--repo", "-r", help="Helm repository URL or oci:// registry"),
    output: str = OutputOption,
    config: Path = ConfigOption,
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum number of versions to show (0 = all)"),
) -> None:
    """List the published versions of a chart, newest first."""
    try:
        cfg = load_config(config)
    except ConfigError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    with VersionSourceClient(auth=AuthResolver(cfg.registry_credentials)) as client:
        found = client.fetch_versions(repo, chart)

    parsed = [(parse_version(v.version), v) for v in found]
    parsed = [pv for pv in parsed if pv[0] is not None]
    parsed.sort(key=lambda pv: pv[0], reverse=True)
    ordered = [v for _, v in parsed]
    if limit > 0:
        ordered = ordered[:limit]

    if not ordered and output == "table":
        console.print(f"[yellow]No versions found for {chart} at {repo}[/yellow]")
        return
    output_versions(chart, ordered, output)
