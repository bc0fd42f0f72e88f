from __future__ import annotations

from enum import Enum


class SubjectType(str, Enum):
    LECTURE = "LECTURE"
    LAB = "LAB"


class ClassStatus(str, Enum):
    """Attendance mark stored on a class instance (SCHEDULED = not marked yet)."""

    SCHEDULED = "SCHEDULED"
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    EXCUSED = "EXCUSED"
    CANCELLED = "CANCELLED"
    NO_CLASS = "NO_CLASS"


class ReasonCode(str, Enum):
    SICK = "SICK"
    EVENT = "EVENT"
    HACKATHON = "HACKATHON"
    PERSONAL = "PERSONAL"
    UNKNOWN = "UNKNOWN"


class RiskState(str, Enum):
    """Attendance risk derived from percentage vs. safe threshold."""

    SAFE = "SAFE"
    BORDERLINE = "BORDERLINE"
    CRITICAL = "CRITICAL"


class EventType(str, Enum):
    ACADEMIC = "ACADEMIC"
    HACKATHON = "HACKATHON"
    PROJECT = "PROJECT"
    APPLICATION = "APPLICATION"
    PERSONAL = "PERSONAL"


class Priority(str, Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.LOW: 0,
    Priority.NORMAL: 1,
    Priority.HIGH: 2,
    Priority.CRITICAL: 3,
}


class Urgency(str, Enum):
    """Time-to-deadline banding of a calendar item."""

    AT_RISK = "AT_RISK"
    TIGHT = "TIGHT"
    ON_TRACK = "ON_TRACK"


class EventState(str, Enum):
    UPCOMING = "UPCOMING"
    TODAY = "TODAY"
    MISSED = "MISSED"
    COMPLETED = "COMPLETED"


class HackathonStatus(str, Enum):
    DISCOVERED = "discovered"
    APPLIED = "applied"
    UNDER_REVIEW = "under_review"
    SHORTLISTED = "shortlisted"
    TEAM_FORMATION = "team_formation"
    UPCOMING = "upcoming"
    REGISTERED = "registered"
    IN_PROGRESS = "in_progress"
    SUBMISSION = "submission"
    SUBMITTED = "submitted"
    RESULTS_PENDING = "results_pending"
    SELECTED = "selected"
    NOT_SELECTED = "not_selected"
    COMPLETED = "completed"
    MISSED = "missed"
    WITHDRAWN = "withdrawn"


# Statuses that still expect a submission from the user.
PRE_SUBMISSION_STATUSES = frozenset(
    {
        HackathonStatus.DISCOVERED,
        HackathonStatus.APPLIED,
        HackathonStatus.UNDER_REVIEW,
        HackathonStatus.SHORTLISTED,
        HackathonStatus.TEAM_FORMATION,
        HackathonStatus.UPCOMING,
        HackathonStatus.REGISTERED,
        HackathonStatus.IN_PROGRESS,
        HackathonStatus.SUBMISSION,
    }
)

# Statuses that never produce upcoming deadlines.
CLOSED_HACKATHON_STATUSES = frozenset(
    {
        HackathonStatus.COMPLETED,
        HackathonStatus.MISSED,
        HackathonStatus.WITHDRAWN,
        HackathonStatus.NOT_SELECTED,
    }
)


class HackathonMode(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    HYBRID = "hybrid"


class ProjectStage(str, Enum):
    PLANNING = "planning"
    BUILDING = "building"
    TESTING = "testing"
    FINALIZING = "finalizing"
    COMPLETED = "completed"


class ProjectDomain(str, Enum):
    COLLEGE = "college"
    PERSONAL = "personal"
    HACKATHON = "hackathon"


class TaskState(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"low": 0, "medium": 1, "high": 2}[self.value]


class AuditEventType(str, Enum):
    """Row type of the task/project/hackathon audit tables."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    STATUS_CHANGE = "STATUS_CHANGE"
    DELETE = "DELETE"


class ApplicationStatus(str, Enum):
    DISCOVERED = "discovered"
    APPLIED = "applied"
    UNDER_REVIEW = "under_review"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    SELECTED = "selected"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class ApplicationType(str, Enum):
    INTERNSHIP = "INTERNSHIP"
    PLACEMENT = "PLACEMENT"


class ApplicationUpdateType(str, Enum):
    STATUS_CHANGE = "STATUS_CHANGE"
    NOTE = "NOTE"


class DeadlineRisk(str, Enum):
    """Derived risk of a hackathon or project against its deadline."""

    STABLE = "stable"
    AT_RISK = "at_risk"
    CRITICAL = "critical"
    MISSED = "missed"


class EntityKind(str, Enum):
    """Target of a note link or calendar drill-through."""

    PROJECT = "project"
    HACKATHON = "hackathon"
    APPLICATION = "application"
