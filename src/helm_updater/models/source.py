"""Version source identity."""

from __future__ import annotations

from dataclasses import dataclass

from helm_updater.models import SourceKind

INDEX_FILE = "index.yaml"


@dataclass(frozen=True)
class SourceKey:
    """Normalized identity of a version endpoint.

    For classic repositories ``location`` is the index URL; for OCI registries
    it is ``host[/path-prefix]`` with the scheme removed.
    """

    kind: SourceKind
    location: str
    chart_name: str = ""

    @property
    def host(self) -> str:
        if self.kind is SourceKind.OCI:
            return self.location.split("/", 1)[0]
        return self.location.split("://", 1)[-1].split("/", 1)[0]

    @property
    def endpoint(self) -> str:
        """URL fetched for this key."""
        if self.kind is SourceKind.CLASSIC:
            return self.location
        host, _, prefix = self.location.partition("/")
        path = f"{prefix}/{self.chart_name}" if prefix else self.chart_name
        return f"https://{host}/v2/{path}/tags/list"

    def index_key(self) -> SourceKey:
        """Chart-independent key shared by every chart of a classic repository."""
        return SourceKey(self.kind, self.location)

    def __str__(self) -> str:
        if self.kind is SourceKind.OCI:
            return f"oci://{self.location}/{self.chart_name}"
        base = self.location[: -len(INDEX_FILE) - 1]
        return f"{base}/{self.chart_name}" if self.chart_name else base
