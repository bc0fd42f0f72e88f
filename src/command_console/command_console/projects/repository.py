from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..common.audit import AuditEvent, FieldChange
from .model import BatchResult, PendingLink, PendingNote, Project, ProjectBatch, ProjectLink


class ProjectRepository(Protocol):
    def list_all(self) -> Sequence[Project]:
        raise NotImplementedError

    def get(self, project_id: str) -> Optional[Project]:
        raise NotImplementedError

    def create(self, project: Project) -> str:
        raise NotImplementedError

    def update(self, project_id: str, changes: Mapping[str, Any], events: Sequence[FieldChange]) -> bool:
        """Apply changes, write one audit row per changed field and bump last activity."""

        raise NotImplementedError

    def delete(self, project_id: str) -> bool:
        """Clear any hackathon link, then delete (tasks, links and history cascade)."""

        raise NotImplementedError

    def list_links(self, project_id: str) -> Sequence[ProjectLink]:
        raise NotImplementedError

    def add_link(self, project_id: str, link: PendingLink) -> str:
        raise NotImplementedError

    def add_note(self, project_id: str, note: PendingNote) -> str:
        """Create a note already linked to the project; returns the note id."""

        raise NotImplementedError

    def save_batch(self, batch: ProjectBatch, events: Sequence[FieldChange]) -> BatchResult:
        """Field changes plus new tasks, links and notes, all or nothing."""

        raise NotImplementedError

    def history(self, project_id: str) -> Sequence[AuditEvent]:
        raise NotImplementedError
