"""Shared CLI options."""

from __future__ import annotations

import typer

from helm_updater.config.settings import settings

OutputOption = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml")
ConfigOption = typer.Option(
    settings.config_file, "--config", "-c", help="Path to the updater configuration file",
)
StrategyOption = typer.Option(
    None, "--strategy", "-s", help="Override update strategy: patch, minor, major, all",
)
