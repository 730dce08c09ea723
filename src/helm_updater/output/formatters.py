"""Table / JSON / YAML output dispatch."""

from __future__ import annotations

import json
from typing import Any

import yaml
from rich.console import Console

from helm_updater.models.chart import CandidateVersion
from helm_updater.models.update import ProposedUpdate

console = Console()


def _update_to_dict(u: ProposedUpdate) -> dict[str, Any]:
    data: dict[str, Any] = {
        "chart": u.chart_name,
        "source": u.reference.source_location,
        "current_version": u.current_version,
        "new_version": u.new_version,
        "update_type": u.update_type.value if u.update_type else None,
    }
    address = u.reference.address
    if address is not None and hasattr(address, "manifest_path"):
        data["manifest"] = address.manifest_path
        data["document_index"] = address.document_index
        data["version_path"] = list(address.version_path)
    return data


def _version_to_dict(v: CandidateVersion) -> dict[str, Any]:
    return {
        "version": v.version,
        "app_version": v.app_version,
        "published_at": v.published_at.isoformat() if v.published_at else None,
        "digest": v.digest,
    }


def output_updates(updates: list[ProposedUpdate], fmt: str) -> None:
    if fmt == "json":
        data = [_update_to_dict(u) for u in updates]
        console.print_json(json.dumps(data, indent=2))
    elif fmt == "yaml":
        data = [_update_to_dict(u) for u in updates]
        console.print(yaml.dump(data, default_flow_style=False, sort_keys=False))
    else:
        from helm_updater.output.tables import updates_table
        console.print(updates_table(updates))


def output_groups(groups: dict[str, list[ProposedUpdate]], fmt: str) -> None:
    if fmt == "json":
        data = {name: [_update_to_dict(u) for u in members] for name, members in groups.items()}
        console.print_json(json.dumps(data, indent=2))
    elif fmt == "yaml":
        data = {name: [_update_to_dict(u) for u in members] for name, members in groups.items()}
        console.print(yaml.dump(data, default_flow_style=False, sort_keys=False))
    else:
        from helm_updater.output.tables import updates_table
        for name, members in groups.items():
            console.print(updates_table(members, title=f"Group: {name}"))


def output_versions(chart_name: str, versions: list[CandidateVersion], fmt: str) -> None:
    if fmt == "json":
        console.print_json(json.dumps([_version_to_dict(v) for v in versions], indent=2))
    elif fmt == "yaml":
        console.print(yaml.dump([_version_to_dict(v) for v in versions], default_flow_style=False, sort_keys=False))
    else:
        from helm_updater.output.tables import versions_table
        console.print(versions_table(chart_name, versions))
