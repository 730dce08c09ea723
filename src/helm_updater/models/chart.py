"""Chart reference and published version models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ManifestAddress:
    """Location of a version field inside a manifest file."""

    manifest_path: str
    document_index: int
    version_path: tuple[str, ...] = ()

    def __str__(self) -> str:
        return f"{self.manifest_path}#{self.document_index}:{'.'.join(self.version_path)}"


@dataclass(frozen=True)
class ChartReference:
    source_location: str
    chart_name: str
    current_version: str
    # Opaque to the engine; only the manifest layer reads it.
    address: Any = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"{self.chart_name}@{self.current_version} ({self.source_location})"


def _parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass(frozen=True)
class CandidateVersion:
    version: str
    app_version: str | None = None
    published_at: datetime | None = None
    digest: str | None = None

    @classmethod
    def from_index_entry(cls, d: dict[str, Any]) -> CandidateVersion:
        app_version = d.get("appVersion")
        digest = d.get("digest")
        return cls(
            version=str(d["version"]),
            app_version=str(app_version) if app_version is not None else None,
            published_at=_parse_timestamp(d.get("created")),
            digest=str(digest) if digest else None,
        )
