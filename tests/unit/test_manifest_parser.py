"""Unit tests for Argo CD manifest parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from helm_updater.models.chart import ManifestAddress
from helm_updater.utils.manifest_parser import (
    extract_references,
    find_manifest_files,
    is_oci_location,
    load_references,
)

from tests.conftest import BITNAMI

MULTI_DOC = """
apiVersion: v1
kind: ConfigMap
metadata:
  name: unrelated
---
apiVersion: argoproj.io/v1alpha1
kind: Application
spec:
  source:
    repoURL: ghcr.io/stefanprodan/charts/podinfo
    targetRevision: 6.5.0
---
apiVersion: argoproj.io/v1alpha1
kind: ApplicationSet
spec:
  template:
    spec:
      sources:
        - repoURL: oci://registry-1.docker.io/bitnamicharts
          chart: redis
          targetRevision: 18.0.2
        - repoURL: https://github.com/example/config.git
          path: overlays/prod
          targetRevision: HEAD
"""


class TestExtractReferences:
    """Tests for extract_references."""

    def test_multi_document(self) -> None:
        refs = extract_references(MULTI_DOC, "apps.yaml")
        assert [(r.source_location, r.chart_name, r.current_version) for r in refs] == [
            ("oci://ghcr.io/stefanprodan/charts", "podinfo", "6.5.0"),
            ("oci://registry-1.docker.io/bitnamicharts", "redis", "18.0.2"),
        ]
        assert refs[0].address == ManifestAddress("apps.yaml", 1, ("spec", "source", "targetRevision"))
        assert refs[1].address == ManifestAddress(
            "apps.yaml", 2, ("spec", "template", "spec", "sources", "0", "targetRevision")
        )

    def test_classic_repository(self) -> None:
        text = f"""
apiVersion: argoproj.io/v1alpha1
kind: Application
spec:
  source:
    repoURL: {BITNAMI}
    chart: nginx
    targetRevision: 15.9.0
"""
        (ref,) = extract_references(text, "nginx.yaml")
        assert ref.source_location == BITNAMI
        assert ref.chart_name == "nginx"

    def test_non_argocd_documents_ignored(self) -> None:
        text = """
apiVersion: apps/v1
kind: Deployment
spec:
  source:
    repoURL: https://charts.example.com
    chart: x
    targetRevision: 1.0.0
"""
        assert extract_references(text) == []

    def test_invalid_yaml_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        assert extract_references("kind: [oops", "bad.yaml") == []
        assert "Failed to parse YAML in bad.yaml" in caplog.text

    def test_impossible_date_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        text = (
            "apiVersion: argoproj.io/v1alpha1\nkind: Application\nmetadata:\n  name: nginx\n"
            "  annotations:\n    since: 2024-02-30\n"
            f"spec:\n  source:\n    repoURL: {BITNAMI}\n    chart: nginx\n    targetRevision: 15.9.0\n"
        )
        assert extract_references(text, "app.yaml") == []
        assert "Failed to parse YAML in app.yaml" in caplog.text

    def test_numeric_revision_kept_as_text(self) -> None:
        text = """
apiVersion: argoproj.io/v1alpha1
kind: Application
spec:
  source:
    repoURL: https://charts.example.com
    chart: x
    targetRevision: 1.2
"""
        (ref,) = extract_references(text)
        assert ref.current_version == "1.2"


class TestOciDetection:
    """Tests for is_oci_location."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("oci://example.com/charts", True),
            ("ghcr.io/org/chart", True),
            ("myacr.azurecr.io/helm", True),
            ("https://charts.bitnami.com/bitnami", False),
            ("https://ghcr.io/org", False),
            ("charts.example.com", False),
        ],
    )
    def test_detection(self, url: str, expected: bool) -> None:
        assert is_oci_location(url) is expected


class TestFiles:
    """Tests for manifest discovery."""

    def test_finds_yaml_recursively(self, manifest_dir: Path) -> None:
        (manifest_dir / "nested").mkdir()
        (manifest_dir / "nested" / "extra.yaml").write_text("kind: ConfigMap\n")
        (manifest_dir / "README.md").write_text("# apps\n")
        names = [p.name for p in find_manifest_files([manifest_dir])]
        assert sorted(names) == ["extra.yaml", "nginx.yaml", "redis.yml"]

    def test_exclude_globs(self, manifest_dir: Path) -> None:
        names = [p.name for p in find_manifest_files([manifest_dir], exclude=["redis*"])]
        assert names == ["nginx.yaml"]

    def test_missing_path_warns(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        assert find_manifest_files([tmp_path / "nope"]) == []
        assert "Manifest path does not exist" in caplog.text

    def test_load_references(self, manifest_dir: Path) -> None:
        refs = load_references([manifest_dir])
        assert sorted((r.chart_name, r.current_version) for r in refs) == [("nginx", "15.9.0"), ("redis", "18.0.2")]
