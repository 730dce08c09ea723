"""Shared pytest fixtures for helm_updater tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from helm_updater.models.chart import CandidateVersion, ChartReference

BITNAMI = "https://charts.bitnami.com/bitnami"
BITNAMI_INDEX = f"{BITNAMI}/index.yaml"


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None]:
    """Undo handlers and levels installed by the CLI's logging setup."""
    yield
    logger = logging.getLogger("helm_updater")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear HELM_UPDATER_ environment variables for each test."""
    for key in list(os.environ.keys()):
        if key.startswith("HELM_UPDATER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def make_ref() -> Callable[..., ChartReference]:
    """Build chart references with Bitnami defaults."""

    def _make(chart: str = "nginx", version: str = "15.9.0", location: str = BITNAMI) -> ChartReference:
        return ChartReference(source_location=location, chart_name=chart, current_version=version)

    return _make


@pytest.fixture
def candidates() -> Callable[..., list[CandidateVersion]]:
    """Turn version strings into candidate versions."""

    def _make(*versions: str) -> list[CandidateVersion]:
        return [CandidateVersion(version=v) for v in versions]

    return _make


@pytest.fixture
def index_yaml() -> str:
    """A small classic repository index hosting two charts."""
    return """
apiVersion: v1
entries:
  nginx:
    - version: 17.0.0
      appVersion: "1.27.0"
      created: "2024-05-01T10:00:00Z"
      digest: abc123
    - version: 16.5.0
      appVersion: "1.26.1"
      created: "2024-03-01T10:00:00Z"
    - version: 15.9.0
      appVersion: "1.25.3"
  redis:
    - version: 18.1.0
    - version: 18.0.2
    - version: 17.11.3
generated: "2024-05-01T10:00:00Z"
"""


@pytest.fixture
def manifest_dir(tmp_path: Path) -> Path:
    """Directory with Argo CD manifests referencing Bitnami charts."""
    apps = tmp_path / "apps"
    apps.mkdir()
    (apps / "nginx.yaml").write_text(
        f"""
apiVersion: argoproj.io/v1alpha1
kind: Application
metadata:
  name: nginx
spec:
  source:
    repoURL: {BITNAMI}
    chart: nginx
    targetRevision: 15.9.0
"""
    )
    (apps / "redis.yml").write_text(
        f"""
apiVersion: argoproj.io/v1alpha1
kind: Application
metadata:
  name: redis
spec:
  sources:
    - repoURL: {BITNAMI}
      chart: redis
      targetRevision: 18.0.2
    - repoURL: https://github.com/example/values.git
      targetRevision: main
      ref: values
"""
    )
    return apps
