"""Root Typer application, mounts sub-commands."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from helm_updater.config.settings import settings

app = typer.Typer(
    name="helm-updater",
    help="Helm Updater - Find newer Helm chart versions referenced by Argo CD manifests.",
    no_args_is_help=True,
)

_LEVELS = {"debug": logging.DEBUG, "info": logging.INFO, "warn": logging.WARNING,
           "warning": logging.WARNING, "error": logging.ERROR}


def configure_logging(level: str) -> None:
    """Send package logs to stderr through rich."""
    handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger("helm_updater")
    root.handlers[:] = [handler]
    root.setLevel(_LEVELS.get(level.lower(), logging.WARNING))


@app.callback()
def main_callback(
    log_level: str = typer.Option(settings.log_level, "--log-level", "-l", help="debug, info, warning, error"),
) -> None:
    configure_logging(log_level)


def _register_commands() -> None:
    from helm_updater.cli.commands.check_cmd import check
    from helm_updater.cli.commands.versions_cmd import versions

    # Plain commands so options may follow positional arguments.
    app.command(name="check", help="Check manifests for chart updates")(check)
    app.command(name="versions", help="List versions published by a chart source")(versions)


_register_commands()


def main() -> None:
    app()
