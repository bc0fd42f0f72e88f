from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import ClassStatus, ReasonCode
from .model import ClassInstance, Faculty, NewClassInstance, Subject, TimetableSlot


class AttendanceRepository(Protocol):
    def list_subjects(self) -> Sequence[Subject]:
        raise NotImplementedError

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        raise NotImplementedError

    def list_faculty(self) -> Sequence[Faculty]:
        raise NotImplementedError

    def list_timetable_slots(self, day_of_week: Optional[str] = None) -> Sequence[TimetableSlot]:
        raise NotImplementedError

    def get_instance(self, instance_id: str) -> Optional[ClassInstance]:
        raise NotImplementedError

    def find_instance(self, *, subject_id: str, class_date: date, start_time: str) -> Optional[ClassInstance]:
        """Lookup by natural key (subject, date, start time)."""

        raise NotImplementedError

    def list_instances_for_date(self, class_date: date) -> Sequence[ClassInstance]:
        raise NotImplementedError

    def list_instances(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[ClassInstance]:
        raise NotImplementedError

    def insert_instances_ignore(self, instances: Sequence[NewClassInstance]) -> int:
        """Insert rows whose natural key is not taken yet; return how many were inserted."""

        raise NotImplementedError

    def update_mark(
        self,
        *,
        instance_id: str,
        status: ClassStatus,
        reason_code: Optional[ReasonCode],
        reason_description: Optional[str],
        notes: Optional[str],
        actual_faculty_id: Optional[str],
        actual_subject_id: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def reschedule(self, *, instance_id: str, cancel_note: str, replacement: NewClassInstance) -> str:
        """Cancel the original and insert its replacement in one transaction; return new id."""

        raise NotImplementedError

    def update_faculty_exchange(self, *, instance_id: str, actual_faculty_id: Optional[str], notes: Optional[str]) -> bool:
        raise NotImplementedError
