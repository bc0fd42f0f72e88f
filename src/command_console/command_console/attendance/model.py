from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import ClassStatus, ReasonCode, RiskState, SubjectType


@dataclass(frozen=True)
class Faculty:
    faculty_id: str
    name: str
    title: str = ""
    department: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.title} {self.name}".strip()


@dataclass(frozen=True)
class Subject:
    """Reference data: one course of the semester (lecture or lab)."""

    subject_id: str
    name: str
    code: str
    subject_type: SubjectType
    weight: int = 1
    default_faculty_id: Optional[str] = None


@dataclass(frozen=True)
class TimetableSlot:
    """Weekly template row that class instances are generated from."""

    slot_id: str
    subject_id: str
    day_of_week: str
    start_time: str
    end_time: str
    room: str = ""


@dataclass(frozen=True)
class ClassInstance:
    """One dated occurrence of a subject meeting and its attendance mark."""

    instance_id: str
    subject_id: str
    class_date: date
    start_time: str
    end_time: str
    class_type: SubjectType
    status: ClassStatus = ClassStatus.SCHEDULED
    scheduled_faculty_id: Optional[str] = None
    actual_faculty_id: Optional[str] = None
    actual_subject_id: Optional[str] = None
    reason_code: Optional[ReasonCode] = None
    reason_description: Optional[str] = None
    notes: Optional[str] = None
    rescheduled_from_id: Optional[str] = None

    @property
    def effective_subject_id(self) -> str:
        # Subject exchange: the slot was used by another subject.
        return self.actual_subject_id or self.subject_id


@dataclass(frozen=True)
class NewClassInstance:
    """Insert payload for a class instance (id is assigned by the repository)."""

    subject_id: str
    class_date: date
    start_time: str
    end_time: str
    class_type: SubjectType
    scheduled_faculty_id: Optional[str] = None
    status: ClassStatus = ClassStatus.SCHEDULED
    notes: Optional[str] = None
    rescheduled_from_id: Optional[str] = None


@dataclass(frozen=True)
class SubjectAttendanceStats:
    """Derived per-subject view, recomputed on every query and never stored."""

    subject_id: str
    subject_name: str
    subject_code: str
    subject_type: SubjectType
    weight: int
    faculty_name: str

    total_scheduled: int
    present: int
    absent: int
    excused: int
    cancelled: int

    attended: int
    total_countable: int
    attendance_percentage: int
    risk_state: RiskState
    classes_needed_for_safe: int
    classes_can_miss: int


@dataclass(frozen=True)
class OverallAttendanceStats:
    lectures_conducted: int
    lectures_attended: int
    lecture_percentage: int

    labs_conducted: int
    labs_attended: int
    lab_percentage: int
    lab_weight: int

    combined_percentage: int
    overall_risk_state: RiskState


@dataclass(frozen=True)
class SubjectRecommendation:
    subject_id: str
    subject_name: str
    subject_code: str
    subject_type: SubjectType
    risk_state: RiskState
    attendance_percentage: int
    recommendation: str
