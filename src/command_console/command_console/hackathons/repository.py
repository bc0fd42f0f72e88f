from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..common.audit import AuditEvent, FieldChange
from ..projects.model import Project
from ..tasks.model import NewTask
from .model import Hackathon


class HackathonRepository(Protocol):
    def list_all(self) -> Sequence[Hackathon]:
        raise NotImplementedError

    def get(self, hackathon_id: str) -> Optional[Hackathon]:
        raise NotImplementedError

    def create(self, hackathon: Hackathon) -> str:
        raise NotImplementedError

    def update(self, hackathon_id: str, changes: Mapping[str, Any], events: Sequence[FieldChange]) -> bool:
        raise NotImplementedError

    def register(self, hackathon_id: str, *, new_project: Project, default_tasks: Sequence[NewTask]) -> str:
        """In one transaction: ensure a linked project (creating ``new_project`` if none),
        set status ``registered`` and add ``default_tasks`` when the project has no tasks.
        Returns the linked project id.
        """

        raise NotImplementedError

    def delete(self, hackathon_id: str) -> bool:
        """Delete the hackathon together with its linked project."""

        raise NotImplementedError

    def link_project(self, hackathon_id: str, project_id: str) -> None:
        """Point both sides at each other, detaching any previous partners."""

        raise NotImplementedError

    def unlink_project(self, hackathon_id: str) -> None:
        raise NotImplementedError

    def history(self, hackathon_id: str) -> Sequence[AuditEvent]:
        raise NotImplementedError
