"""Application configuration and defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from helm_updater import __version__


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    try:
        return max(1, int(raw)) if raw else default
    except ValueError:
        return default


def _default_config_file() -> Path:
    return Path(os.environ.get("HELM_UPDATER_CONFIG", "") or ".argocd-updater.yml")


@dataclass
class Settings:
    request_timeout: float = field(default_factory=lambda: _env_float("HELM_UPDATER_TIMEOUT", 30.0))
    max_workers: int = field(default_factory=lambda: _env_int("HELM_UPDATER_MAX_WORKERS", 8))
    config_file: Path = field(default_factory=_default_config_file)
    log_level: str = field(default_factory=lambda: os.environ.get("HELM_UPDATER_LOG_LEVEL", "") or "warning")
    user_agent: str = f"helm-updater/{__version__}"


# Global singleton
settings = Settings()
