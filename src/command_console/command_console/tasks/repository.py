from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..common.audit import AuditEvent, FieldChange
from .model import NewTask, Task


class TaskRepository(Protocol):
    def list_all(self) -> Sequence[Task]:
        raise NotImplementedError

    def list_for_project(self, project_id: str) -> Sequence[Task]:
        raise NotImplementedError

    def list_for_hackathon(self, hackathon_id: str) -> Sequence[Task]:
        raise NotImplementedError

    def get(self, task_id: str) -> Optional[Task]:
        raise NotImplementedError

    def create(self, new: NewTask) -> str:
        """Insert the task and its CREATE audit row in one transaction."""

        raise NotImplementedError

    def update(self, task_id: str, changes: Mapping[str, Any], events: Sequence[FieldChange]) -> bool:
        """Apply column changes and append one audit row per change, atomically."""

        raise NotImplementedError

    def delete(self, task_id: str) -> bool:
        raise NotImplementedError

    def history(self, task_id: str) -> Sequence[AuditEvent]:
        raise NotImplementedError
