"""Load ``.argocd-updater.yml`` style configuration files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from helm_updater.models import AuthType, UpdateStrategy, UpdateType
from helm_updater.models.config import GroupDefinition, IgnoreRule, RegistryCredential, UpdaterConfig

logger = logging.getLogger(__name__)

LOG_LEVELS = ("debug", "info", "warn", "warning", "error")


class ConfigError(Exception):
    """Raised when a configuration file cannot be read at all."""


def _get(d: dict[str, Any], *keys: str) -> Any:
    """Return the first present key, accepting kebab-case and camelCase spellings."""
    for key in keys:
        if key in d:
            return d[key]
    return None


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _update_types(value: Any, field: str) -> frozenset[UpdateType]:
    result: set[UpdateType] = set()
    for item in _as_list(value):
        parsed = UpdateType.parse(item)
        if parsed is None:
            logger.warning("Invalid %s value %r, ignoring it", field, item)
            continue
        result.add(parsed)
    return frozenset(result)


def parse_credentials(raw: Any) -> list[RegistryCredential]:
    credentials: list[RegistryCredential] = []
    for i, item in enumerate(_as_list(raw)):
        if not isinstance(item, dict):
            logger.warning("Invalid registry-credentials[%d]: expected a mapping, skipping", i)
            continue
        registry = _get(item, "registry", "host")
        password = _get(item, "password", "token")
        if not registry or password is None:
            logger.warning("Invalid registry-credentials[%d]: registry and password are required, skipping", i)
            continue
        auth_raw = _get(item, "auth-type", "authType", "auth_type")
        auth_type = AuthType.BASIC
        if auth_raw is not None:
            try:
                auth_type = AuthType(str(auth_raw).strip().lower())
            except ValueError:
                logger.warning(
                    "Invalid registry-credentials[%d].auth-type value %r, falling back to 'basic'", i, auth_raw
                )
        username = _get(item, "username")
        credentials.append(RegistryCredential(
            registry=str(registry),
            password=str(password),
            username=str(username) if username is not None else None,
            auth_type=auth_type,
        ))
    return credentials


def parse_ignore_rules(raw: Any) -> list[IgnoreRule]:
    rules: list[IgnoreRule] = []
    for i, item in enumerate(_as_list(raw)):
        if not isinstance(item, dict):
            logger.warning("Invalid ignore[%d]: expected a mapping, skipping", i)
            continue
        name = _get(item, "dependency-name", "dependencyName", "name")
        if not name:
            logger.warning("Invalid ignore[%d]: dependency-name is required, skipping", i)
            continue
        rules.append(IgnoreRule(
            target_name=str(name),
            version_patterns=tuple(str(v) for v in _as_list(_get(item, "versions"))),
            update_classes=_update_types(_get(item, "update-types", "updateTypes"), f"ignore[{i}].update-types"),
        ))
    return rules


def parse_groups(raw: Any) -> list[GroupDefinition]:
    if raw is None:
        return []
    if not isinstance(raw, dict):
        logger.warning("Invalid groups: expected a mapping of group name to definition, ignoring")
        return []
    groups: list[GroupDefinition] = []
    for name, item in raw.items():
        if not isinstance(item, dict):
            logger.warning("Invalid groups.%s: expected a mapping, skipping", name)
            continue
        patterns = tuple(str(p) for p in _as_list(_get(item, "patterns")))
        if not patterns:
            logger.warning("Invalid groups.%s: no patterns configured, skipping", name)
            continue
        groups.append(GroupDefinition(
            name=str(name),
            name_patterns=patterns,
            update_classes=_update_types(_get(item, "update-types", "updateTypes"), f"groups.{name}.update-types"),
        ))
    return groups


def config_from_dict(data: dict[str, Any]) -> UpdaterConfig:
    config = UpdaterConfig()

    strategy = _get(data, "update-strategy", "updateStrategy")
    if strategy is not None:
        config.update_strategy = UpdateStrategy.from_str(str(strategy))

    config.registry_credentials = parse_credentials(_get(data, "registry-credentials", "registryCredentials"))
    config.ignore = parse_ignore_rules(_get(data, "ignore"))
    config.groups = parse_groups(_get(data, "groups"))

    log_level = _get(data, "log-level", "logLevel")
    if log_level is not None:
        if str(log_level).lower() in LOG_LEVELS:
            config.log_level = str(log_level).lower()
        else:
            logger.warning("Invalid log-level value %r, falling back to %r", log_level, config.log_level)

    return config


def load_config(path: Path | str | None) -> UpdaterConfig:
    """Load configuration from a YAML file, falling back to defaults."""
    if path is None:
        return UpdaterConfig()
    path = Path(path)
    if not path.exists():
        logger.warning("Configuration file not found: %s, using defaults", path)
        return UpdaterConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError, ValueError) as e:
        raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

    if data is None:
        return UpdaterConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")

    logger.info("Loaded configuration from %s", path)
    return config_from_dict(data)
