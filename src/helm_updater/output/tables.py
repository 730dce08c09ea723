"""Rich table builders for each command."""

from __future__ import annotations

from rich.table import Table

from helm_updater.models.chart import CandidateVersion
from helm_updater.models.update import ProposedUpdate
from helm_updater.output.themes import styled_update_type


def _location(update: ProposedUpdate) -> str:
    address = update.reference.address
    return str(address.manifest_path) if address is not None and hasattr(address, "manifest_path") else "-"


def updates_table(updates: list[ProposedUpdate], title: str = "Chart Updates") -> Table:
    table = Table(title=title, expand=True)
    table.add_column("Chart", style="magenta", no_wrap=True)
    table.add_column("Current", style="dim")
    table.add_column("New", style="bold")
    table.add_column("Update Type", no_wrap=True)
    table.add_column("Source", style="cyan", max_width=40)
    table.add_column("Manifest", style="dim", max_width=40)

    for u in updates:
        table.add_row(
            u.chart_name,
            u.current_version,
            u.new_version,
            styled_update_type(u.update_type),
            u.reference.source_location,
            _location(u),
        )
    return table


def versions_table(chart_name: str, versions: list[CandidateVersion]) -> Table:
    table = Table(title=f"Published Versions: {chart_name}", expand=False)
    table.add_column("Version", style="bold")
    table.add_column("App Ver", style="cyan")
    table.add_column("Published", style="dim", no_wrap=True)

    for v in versions:
        published = v.published_at.strftime("%Y-%m-%d %H:%M:%S") if v.published_at else "-"
        table.add_row(v.version, v.app_version or "-", published)
    return table
