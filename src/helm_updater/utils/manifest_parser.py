"""Parse Argo CD manifests into chart references."""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from helm_updater.models.chart import ChartReference, ManifestAddress

logger = logging.getLogger(__name__)

ARGOCD_GROUP = "argoproj.io"
MANIFEST_SUFFIXES = (".yaml", ".yml")

# Registries that only serve charts over OCI, even without an oci:// prefix.
OCI_REGISTRY_HOSTS: tuple[str, ...] = (
    "registry-1.docker.io",
    "docker.io",
    "ghcr.io",
    "gcr.io",
    "registry.gitlab.com",
    "quay.io",
    "public.ecr.aws",
    "azurecr.io",
    "pkg.dev",
)


def find_manifest_files(paths: Iterable[Path | str], exclude: Iterable[str] = ()) -> list[Path]:
    """Expand files and directories into a sorted list of YAML manifests."""
    exclude = list(exclude)
    found: set[Path] = set()
    for raw in paths:
        path = Path(raw)
        if path.is_file():
            found.add(path)
            continue
        if not path.is_dir():
            logger.warning("Manifest path does not exist: %s", path)
            continue
        for candidate in path.rglob("*"):
            if not candidate.is_file() or candidate.suffix not in MANIFEST_SUFFIXES:
                continue
            rel = candidate.relative_to(path).as_posix()
            if any(fnmatch.fnmatch(rel, pattern) for pattern in exclude):
                continue
            found.add(candidate)
    return sorted(found)


def is_oci_location(repo_url: str) -> bool:
    lowered = repo_url.lower()
    if lowered.startswith("oci://"):
        return True
    if lowered.startswith(("http://", "https://")):
        return False
    return any(host in lowered for host in OCI_REGISTRY_HOSTS)


def _chart_from_oci_url(repo_url: str) -> str:
    tail = repo_url.split("://", 1)[-1].rstrip("/")
    return tail.rsplit("/", 1)[-1].split("?", 1)[0].split("#", 1)[0]


def _parse_source(
    source: Any,
    manifest_path: str,
    document_index: int,
    base_path: tuple[str, ...],
) -> ChartReference | None:
    if not isinstance(source, dict):
        return None
    repo_url = source.get("repoURL")
    target_revision = source.get("targetRevision")
    chart = source.get("chart")
    if not repo_url or target_revision is None:
        return None

    repo_url = str(repo_url)
    oci = is_oci_location(repo_url)
    if chart:
        chart_name = str(chart)
    elif oci:
        # Chart is the last path segment of the registry URL
        chart_name = _chart_from_oci_url(repo_url)
        repo_url = repo_url.rstrip("/")[: -len(chart_name)].rstrip("/")
    else:
        # Plain git source
        return None

    if oci and not repo_url.lower().startswith("oci://"):
        repo_url = f"oci://{repo_url}"

    return ChartReference(
        source_location=repo_url,
        chart_name=chart_name,
        current_version=str(target_revision),
        address=ManifestAddress(manifest_path, document_index, (*base_path, "targetRevision")),
    )


def _sources(spec: Any, base_path: tuple[str, ...]) -> list[tuple[Any, tuple[str, ...]]]:
    if not isinstance(spec, dict):
        return []
    found: list[tuple[Any, tuple[str, ...]]] = []
    if spec.get("source"):
        found.append((spec["source"], (*base_path, "source")))
    sources = spec.get("sources")
    if isinstance(sources, list):
        for i, source in enumerate(sources):
            found.append((source, (*base_path, "sources", str(i))))
    return found


def extract_from_document(doc: dict[str, Any], manifest_path: str, document_index: int) -> list[ChartReference]:
    api_version = str(doc.get("apiVersion", ""))
    if not api_version.startswith(f"{ARGOCD_GROUP}/"):
        return []

    kind = doc.get("kind")
    spec = doc.get("spec") or {}
    if kind == "Application":
        candidates = _sources(spec, ("spec",))
    elif kind == "ApplicationSet":
        template = spec.get("template") if isinstance(spec, dict) else None
        template_spec = template.get("spec") if isinstance(template, dict) else None
        candidates = _sources(template_spec, ("spec", "template", "spec"))
    else:
        return []

    references: list[ChartReference] = []
    for source, path in candidates:
        ref = _parse_source(source, manifest_path, document_index, path)
        if ref is not None:
            references.append(ref)
    return references


def extract_references(manifest: str, manifest_path: str = "") -> list[ChartReference]:
    """Parse a multi-document YAML string into chart references."""
    references: list[ChartReference] = []
    if not manifest:
        return references

    try:
        documents = list(yaml.safe_load_all(manifest))
    except (yaml.YAMLError, ValueError):
        logger.warning("Failed to parse YAML in %s, skipping", manifest_path or "<string>", exc_info=True)
        return references

    for index, doc in enumerate(documents):
        if not doc or not isinstance(doc, dict):
            continue
        references.extend(extract_from_document(doc, manifest_path, index))
    return references


def load_references(paths: Iterable[Path | str], exclude: Iterable[str] = ()) -> list[ChartReference]:
    """Read every manifest under ``paths`` and collect its chart references."""
    references: list[ChartReference] = []
    for path in find_manifest_files(paths, exclude):
        try:
            text = path.read_text(encoding="utf-8")
        except OSError:
            logger.warning("Could not read manifest %s", path, exc_info=True)
            continue
        found = extract_references(text, str(path))
        logger.debug("%s: %d chart reference(s)", path, len(found))
        references.extend(found)
    return references
