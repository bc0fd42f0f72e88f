from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Any, Callable, Optional, Sequence

from ..common.audit import AuditEvent, diff_fields
from ..common.datetime_utils import coerce_date, now_local
from ..common.validators import optional_text, require_enum, require_non_empty
from ..core.enums import TaskPriority, TaskState
from ..core.exceptions import InvariantViolation, NotFoundError, ValidationError
from ..hackathons.repository import HackathonRepository
from ..projects.repository import ProjectRepository
from .model import EDITABLE_FIELDS, NewTask, Task
from .repository import TaskRepository


def _sort_key(task: Task):
    # high priority first, then earliest due date; undated last
    return (-task.priority.rank, task.due_date or date.max, task.title, task.task_id)


def build_new_task(
    title: str,
    *,
    description: Optional[str] = None,
    priority: Any = TaskPriority.MEDIUM,
    state: Any = TaskState.PENDING,
    due_date: Any = None,
    project_id: Optional[str] = None,
    hackathon_id: Optional[str] = None,
) -> NewTask:
    """Validate raw task input; shared by every path that creates tasks."""
    project_id = optional_text(project_id)
    hackathon_id = optional_text(hackathon_id)
    if project_id and hackathon_id:
        raise InvariantViolation("A task can belong to a project or a hackathon, not both")
    return NewTask(
        title=require_non_empty(title, "title"),
        description=optional_text(description),
        priority=require_enum(priority or TaskPriority.MEDIUM, TaskPriority, "priority"),
        state=require_enum(state or TaskState.PENDING, TaskState, "state"),
        due_date=coerce_date(due_date, "due_date"),
        project_id=project_id,
        hackathon_id=hackathon_id,
    )


class TaskService:
    def __init__(
        self,
        tasks: TaskRepository,
        projects: ProjectRepository,
        hackathons: HackathonRepository,
        *,
        clock: Callable[[], Any] = now_local,
    ):
        self._tasks = tasks
        self._projects = projects
        self._hackathons = hackathons
        self._clock = clock

    def list_all(self) -> list[Task]:
        return sorted(self._tasks.list_all(), key=_sort_key)

    def get(self, task_id: str) -> Task:
        task = self._tasks.get(str(task_id or ""))
        if not task:
            raise NotFoundError("Task not found")
        return task

    def create(self, title: str, **fields) -> Task:
        new = build_new_task(title, **fields)
        if new.project_id and not self._projects.get(new.project_id):
            raise NotFoundError("Project not found")
        if new.hackathon_id and not self._hackathons.get(new.hackathon_id):
            raise NotFoundError("Hackathon not found")
        return self.get(self._tasks.create(new))

    def update(self, task_id: str, **fields) -> Task:
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown task field(s): {', '.join(sorted(unknown))}")

        changes: dict[str, Any] = {}
        if "title" in fields:
            changes["title"] = require_non_empty(fields["title"], "title")
        if "description" in fields:
            changes["description"] = optional_text(fields["description"])
        if "priority" in fields:
            changes["priority"] = require_enum(fields["priority"], TaskPriority, "priority")
        if "state" in fields:
            changes["state"] = require_enum(fields["state"], TaskState, "state")
        if "due_date" in fields:
            changes["due_date"] = coerce_date(fields["due_date"], "due_date")

        task = self.get(task_id)
        events = diff_fields(asdict(task), changes, EDITABLE_FIELDS, status_fields=("state",))
        if not events:
            return task

        changed = {e.field: changes[e.field] for e in events}
        if "state" in changed:
            # completed_at follows the state; it is not audited on its own
            changed["completed_at"] = self._clock() if changed["state"] is TaskState.COMPLETED else None
        self._tasks.update(task.task_id, changed, events)
        return self.get(task.task_id)

    def update_state(self, task_id: str, state) -> Task:
        return self.update(task_id, state=state)

    def delete(self, task_id: str) -> None:
        task = self.get(task_id)
        self._tasks.delete(task.task_id)

    def history(self, task_id: str) -> Sequence[AuditEvent]:
        task = self.get(task_id)
        return self._tasks.history(task.task_id)
