"""System maintenance: stats, full export, raw backup and legacy import."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, Callable, Mapping, Optional

from ..common.datetime_utils import coerce_date, now_local
from ..common.validators import optional_text, require_enum, require_non_empty
from ..core.constants import EXPORT_VERSION
from ..core.enums import HackathonMode, HackathonStatus, ProjectDomain, ProjectStage, TaskPriority, TaskState
from ..core.exceptions import DomainError, StorageError, ValidationError
from ..hackathons.model import Hackathon
from ..projects.model import Project
from ..tasks.service import build_new_task
from .model import ImportResult, LegacyBatch, LegacyTask, SystemStats
from .repository import SystemRepository

logger = logging.getLogger(__name__)

# Legacy task status values that differ from TaskState.
LEGACY_TASK_STATES = {"done": TaskState.COMPLETED.value}


def _created_at(raw: Mapping[str, Any]) -> Optional[datetime]:
    value = raw.get("createdAt") or raw.get("created_at")
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        raise ValidationError("createdAt is not a valid timestamp")


def _legacy_project(raw: Mapping[str, Any]) -> Project:
    return Project(
        project_id=require_non_empty(raw.get("id"), "id"),
        name=require_non_empty(raw.get("name"), "name"),
        description=optional_text(raw.get("description")),
        domain=require_enum(raw.get("domain") or ProjectDomain.PERSONAL, ProjectDomain, "domain"),
        stage=require_enum(raw.get("stage") or ProjectStage.PLANNING, ProjectStage, "stage"),
        deadline=coerce_date(raw.get("deadline"), "deadline"),
        created_at=_created_at(raw),
    )


def _legacy_hackathon(raw: Mapping[str, Any]) -> Hackathon:
    return Hackathon(
        hackathon_id=require_non_empty(raw.get("id"), "id"),
        name=require_non_empty(raw.get("name"), "name"),
        mode=require_enum(raw.get("mode") or HackathonMode.ONLINE, HackathonMode, "mode"),
        status=require_enum(raw.get("status") or HackathonStatus.UPCOMING, HackathonStatus, "status"),
        submission_deadline=coerce_date(raw.get("submissionDeadline") or raw.get("submission_deadline")),
        created_at=_created_at(raw),
    )


def _legacy_task(raw: Mapping[str, Any]) -> LegacyTask:
    context_type = raw.get("contextType")
    project_id = raw.get("projectId") or (raw.get("contextId") if context_type == "project" else None)
    hackathon_id = raw.get("hackathonId") or (raw.get("contextId") if context_type == "hackathon" else None)
    status = raw.get("status") or raw.get("state")
    new = build_new_task(
        raw.get("title"),
        description=raw.get("description"),
        priority=raw.get("priority") or TaskPriority.MEDIUM,
        state=LEGACY_TASK_STATES.get(status, status) or TaskState.PENDING,
        due_date=raw.get("dueDate") or raw.get("due_date"),
        project_id=project_id,
        hackathon_id=hackathon_id,
    )
    return LegacyTask(task_id=require_non_empty(raw.get("id"), "id"), task=new)


def _parse_all(items: Any, parse: Callable, label: str) -> tuple[list, int]:
    if items is None:
        return [], 0
    if not isinstance(items, list):
        raise ValidationError(f"{label} must be an array")
    parsed, invalid = [], 0
    for raw in items:
        if not isinstance(raw, Mapping):
            invalid += 1
            logger.warning("Skipping legacy %s entry that is not an object", label)
            continue
        try:
            parsed.append(parse(raw))
        except DomainError as exc:
            # both-context tasks land here too
            invalid += 1
            logger.warning("Skipping legacy %s entry %r: %s", label, raw.get("id"), exc)
    return parsed, invalid


class SystemService:
    def __init__(
        self,
        system: SystemRepository,
        *,
        dump: Optional[Callable[[], bytes]] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._system = system
        self._dump = dump
        self._clock = clock

    def get_stats(self) -> SystemStats:
        return self._system.get_stats(since=self._clock() - timedelta(days=7))

    def export_all_data(self) -> dict[str, Any]:
        return {
            "exported_at": self._clock().isoformat(timespec="seconds"),
            "version": EXPORT_VERSION,
            "data": dict(self._system.export_tables()),
        }

    def backup(self) -> bytes:
        if self._dump is None:
            raise StorageError("Database backup is not configured")
        data = self._dump()
        logger.info("Database backup produced (%d bytes)", len(data))
        return data

    def import_legacy_data(self, payload: Mapping[str, Any]) -> ImportResult:
        """Import legacy projects, hackathons and tasks; existing ids are left untouched."""
        if not isinstance(payload, Mapping):
            raise ValidationError("payload must be an object")

        projects, bad_projects = _parse_all(payload.get("projects"), _legacy_project, "projects")
        hackathons, bad_hackathons = _parse_all(payload.get("hackathons"), _legacy_hackathon, "hackathons")
        tasks, bad_tasks = _parse_all(payload.get("tasks"), _legacy_task, "tasks")
        logger.info(
            "Starting legacy import: %d projects, %d hackathons, %d tasks",
            len(projects),
            len(hackathons),
            len(tasks),
        )

        result = self._system.import_legacy(
            LegacyBatch(projects=tuple(projects), hackathons=tuple(hackathons), tasks=tuple(tasks))
        )
        result = replace(result, skipped_invalid=bad_projects + bad_hackathons + bad_tasks)
        for task_id in result.orphan_task_ids:
            logger.warning("Skipping orphan legacy task %s", task_id)
        logger.info(
            "Legacy import finished: %d projects, %d hackathons, %d tasks imported; %d existing, %d orphans, %d invalid",
            result.projects_imported,
            result.hackathons_imported,
            result.tasks_imported,
            result.skipped_existing,
            result.skipped_orphans,
            result.skipped_invalid,
        )
        return result
