"""Data models for Helm Updater."""

from __future__ import annotations

import enum
import logging

logger = logging.getLogger(__name__)


class SourceKind(enum.Enum):
    CLASSIC = "helm"
    OCI = "oci"

    @classmethod
    def from_location(cls, location: str) -> SourceKind:
        if location.strip().lower().startswith("oci://"):
            return cls.OCI
        return cls.CLASSIC


class UpdateStrategy(enum.Enum):
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"
    ALL = "all"

    @classmethod
    def from_str(cls, s: str | UpdateStrategy | None, field: str = "update-strategy") -> UpdateStrategy:
        """Resolve a strategy literal, falling back to ``ALL`` with a warning."""
        if isinstance(s, UpdateStrategy):
            return s
        value = (s or "").strip().lower()
        for member in cls:
            if member.value == value:
                return member
        logger.warning("Invalid %s value %r, falling back to 'all'", field, s)
        return cls.ALL


class UpdateType(enum.Enum):
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @classmethod
    def parse(cls, s: str) -> UpdateType | None:
        value = str(s).strip().lower()
        for member in cls:
            if member.value == value:
                return member
        return None


class AuthType(enum.Enum):
    BASIC = "basic"
    BEARER = "bearer"
