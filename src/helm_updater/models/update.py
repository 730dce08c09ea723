"""Proposed update model."""

from __future__ import annotations

from dataclasses import dataclass

from helm_updater.models import UpdateType
from helm_updater.models.chart import ChartReference
from helm_updater.utils.version_compare import classify_update


@dataclass(frozen=True)
class ProposedUpdate:
    reference: ChartReference
    current_version: str
    new_version: str

    @property
    def chart_name(self) -> str:
        return self.reference.chart_name

    @property
    def update_type(self) -> UpdateType | None:
        return classify_update(self.current_version, self.new_version)
