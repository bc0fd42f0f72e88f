from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any, Mapping, Optional

from .applications.mysql_application_repository import MySQLApplicationRepository
from .applications.service import ApplicationService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.risk.base import AttendancePolicy
from .attendance.risk.threshold_calculator import ThresholdRiskCalculator
from .attendance.service import AttendanceService
from .calendar.mysql_calendar_repository import MySQLCalendarRepository
from .calendar.service import CalendarService
from .core.constants import DEFAULT_TIGHT_DAYS, DEFAULT_UPCOMING_LIMIT
from .database.bootstrap import dump_database
from .database.connection import DBConfig, DatabaseConnection
from .hackathons.mysql_hackathon_repository import MySQLHackathonRepository
from .hackathons.service import HackathonService
from .notes.mysql_note_repository import MySQLNoteRepository
from .notes.service import NoteService
from .overview.service import OverviewService
from .projects.mysql_project_repository import MySQLProjectRepository
from .projects.service import ProjectService
from .system.mysql_system_repository import MySQLSystemRepository
from .system.service import SystemService
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.service import TaskService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    attendance_service: AttendanceService
    calendar_service: CalendarService
    hackathon_service: HackathonService
    project_service: ProjectService
    task_service: TaskService
    note_service: NoteService
    application_service: ApplicationService
    system_service: SystemService
    overview_service: OverviewService


def build_container(*, db_config: dict, settings: Optional[Mapping[str, Any]] = None) -> Container:
    """Wire repositories and services around one explicitly owned connection factory."""
    settings = settings or {}
    config = DBConfig.from_dict(db_config, pool_size=int(settings.get("POOL_SIZE", 5)))
    conn = DatabaseConnection(config)

    attendance_repo = MySQLAttendanceRepository(conn)
    calendar_repo = MySQLCalendarRepository(conn)
    hackathons_repo = MySQLHackathonRepository(conn)
    projects_repo = MySQLProjectRepository(conn)
    tasks_repo = MySQLTaskRepository(conn)
    notes_repo = MySQLNoteRepository(conn)
    applications_repo = MySQLApplicationRepository(conn)
    system_repo = MySQLSystemRepository(conn)

    policy = AttendancePolicy.from_settings(settings.get("ATTENDANCE_POLICY"))
    calendar_policy = settings.get("CALENDAR_POLICY") or {}

    attendance_service = AttendanceService(
        attendance_repo,
        policy=policy,
        calculator=ThresholdRiskCalculator(policy),
    )
    calendar_service = CalendarService(
        calendar_repo,
        hackathons_repo,
        projects_repo,
        tasks_repo,
        applications_repo,
        tight_days=int(calendar_policy.get("tight_days", DEFAULT_TIGHT_DAYS)),
        upcoming_limit=int(calendar_policy.get("upcoming_limit", DEFAULT_UPCOMING_LIMIT)),
    )
    hackathon_service = HackathonService(hackathons_repo, projects_repo, tasks_repo)
    project_service = ProjectService(projects_repo, tasks_repo)
    task_service = TaskService(tasks_repo, projects_repo, hackathons_repo)
    note_service = NoteService(notes_repo, projects_repo, hackathons_repo, applications_repo)
    application_service = ApplicationService(applications_repo, notes_repo, calendar_repo)
    system_service = SystemService(system_repo, dump=partial(dump_database, db_config))
    overview_service = OverviewService(attendance_service, calendar_service, tasks_repo)

    return Container(
        conn=conn,
        attendance_service=attendance_service,
        calendar_service=calendar_service,
        hackathon_service=hackathon_service,
        project_service=project_service,
        task_service=task_service,
        note_service=note_service,
        application_service=application_service,
        system_service=system_service,
        overview_service=overview_service,
    )
