"""Engine configuration models."""

from __future__ import annotations

from dataclasses import dataclass, field

from helm_updater.models import AuthType, UpdateStrategy, UpdateType


@dataclass(frozen=True)
class RegistryCredential:
    registry: str
    password: str = field(repr=False)
    username: str | None = None
    auth_type: AuthType = AuthType.BASIC


@dataclass(frozen=True)
class IgnoreRule:
    target_name: str
    version_patterns: tuple[str, ...] = ()
    update_classes: frozenset[UpdateType] = frozenset()

    @property
    def ignores_everything(self) -> bool:
        return not self.version_patterns and not self.update_classes


@dataclass(frozen=True)
class GroupDefinition:
    name: str
    name_patterns: tuple[str, ...]
    update_classes: frozenset[UpdateType] = frozenset()


@dataclass
class UpdaterConfig:
    update_strategy: UpdateStrategy = UpdateStrategy.ALL
    registry_credentials: list[RegistryCredential] = field(default_factory=list)
    ignore: list[IgnoreRule] = field(default_factory=list)
    # Evaluation order is list order.
    groups: list[GroupDefinition] = field(default_factory=list)
    log_level: str = "info"
