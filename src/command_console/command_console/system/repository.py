from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Protocol, Sequence

from .model import ImportResult, LegacyBatch, SystemStats

# Tables included in a full data export, in dependency order.
EXPORT_TABLES = (
    "projects",
    "hackathons",
    "project_links",
    "tasks",
    "notes",
    "note_links",
    "applications",
    "application_updates",
    "calendar_events",
    "task_events",
    "project_events",
    "hackathon_events",
)


class SystemRepository(Protocol):
    def get_stats(self, *, since: datetime) -> SystemStats:
        raise NotImplementedError

    def export_tables(self) -> Mapping[str, Sequence[Mapping[str, Any]]]:
        raise NotImplementedError

    def import_legacy(self, batch: LegacyBatch) -> ImportResult:
        """Insert rows whose id does not exist yet, in one transaction.

        Tasks whose parent is neither stored nor part of the batch are skipped
        as orphans.
        """

        raise NotImplementedError
