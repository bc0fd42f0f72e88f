from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import WEEKDAYS, coerce_date, parse_hhmm, weekday_name
from ..common.validators import optional_text, require_enum
from ..core.enums import ClassStatus, ReasonCode, RiskState, SubjectType
from ..core.exceptions import NotFoundError, ValidationError
from .model import (
    ClassInstance,
    Faculty,
    NewClassInstance,
    OverallAttendanceStats,
    Subject,
    SubjectAttendanceStats,
    SubjectRecommendation,
    TimetableSlot,
)
from .repository import AttendanceRepository
from .risk.base import AttendancePolicy, MarkCounts, RiskCalculator
from .risk.threshold_calculator import ThresholdRiskCalculator

logger = logging.getLogger(__name__)

MAX_GENERATION_DAYS = 366

# Marks that may carry an absence reason.
_REASON_STATUSES = frozenset({ClassStatus.ABSENT, ClassStatus.EXCUSED})


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        policy: AttendancePolicy | None = None,
        calculator: RiskCalculator | None = None,
    ):
        self._attendance = attendance
        self._policy = policy or AttendancePolicy()
        self._calculator = calculator or ThresholdRiskCalculator(self._policy)

    @property
    def calculator(self) -> RiskCalculator:
        return self._calculator

    # ---- reference data -------------------------------------------------

    def list_subjects(self) -> Sequence[Subject]:
        return self._attendance.list_subjects()

    def list_faculty(self) -> Sequence[Faculty]:
        return self._attendance.list_faculty()

    def get_timetable(self, day_of_week: Optional[str] = None) -> Sequence[TimetableSlot]:
        if day_of_week:
            day_of_week = day_of_week.strip().lower()
            if day_of_week not in WEEKDAYS:
                raise ValidationError(f"day_of_week must be one of: {', '.join(WEEKDAYS)}")
        return self._attendance.list_timetable_slots(day_of_week or None)

    # ---- class instances ------------------------------------------------

    def get_instances_for_date(self, class_date) -> Sequence[ClassInstance]:
        day = coerce_date(class_date, "date")
        if day is None:
            raise ValidationError("date is required")
        return self._attendance.list_instances_for_date(day)

    def list_instances(self, *, start_date=None, end_date=None) -> Sequence[ClassInstance]:
        return self._attendance.list_instances(
            start_date=coerce_date(start_date, "start_date"),
            end_date=coerce_date(end_date, "end_date"),
        )

    def generate_class_instances(self, class_date) -> int:
        """Expand the weekly timetable into SCHEDULED instances for one date.

        Safe to call repeatedly: rows are keyed by (subject, date, start time)
        and existing ones are left untouched.
        """
        day = coerce_date(class_date, "date")
        if day is None:
            raise ValidationError("date is required")

        slots = self._attendance.list_timetable_slots(weekday_name(day))
        if not slots:
            return 0

        subjects = {s.subject_id: s for s in self._attendance.list_subjects()}
        batch: list[NewClassInstance] = []
        for slot in slots:
            subject = subjects.get(slot.subject_id)
            if subject is None:
                logger.warning("Timetable slot %s references unknown subject %s", slot.slot_id, slot.subject_id)
                continue
            batch.append(
                NewClassInstance(
                    subject_id=subject.subject_id,
                    class_date=day,
                    start_time=slot.start_time,
                    end_time=slot.end_time,
                    class_type=subject.subject_type,
                    scheduled_faculty_id=subject.default_faculty_id,
                )
            )

        created = self._attendance.insert_instances_ignore(batch)
        logger.info("Generated %s class instance(s) for %s", created, day.isoformat())
        return created

    def generate_class_instances_for_range(self, start_date, end_date) -> int:
        start = coerce_date(start_date, "start_date")
        end = coerce_date(end_date, "end_date")
        if start is None or end is None:
            raise ValidationError("start_date and end_date are required")
        if end < start:
            raise ValidationError("end_date must not be before start_date")
        if (end - start).days + 1 > MAX_GENERATION_DAYS:
            raise ValidationError(f"Cannot generate more than {MAX_GENERATION_DAYS} days at once")

        total = 0
        day = start
        while day <= end:
            total += self.generate_class_instances(day)
            day += timedelta(days=1)
        return total

    def _require_instance(self, instance_id: str) -> ClassInstance:
        instance = self._attendance.get_instance(str(instance_id or ""))
        if not instance:
            raise NotFoundError("Class instance not found")
        return instance

    def mark_attendance(
        self,
        instance_id: str,
        status,
        *,
        reason_code=None,
        reason_description: Optional[str] = None,
        notes: Optional[str] = None,
        actual_faculty_id: Optional[str] = None,
        actual_subject_id: Optional[str] = None,
    ) -> ClassInstance:
        status = require_enum(status, ClassStatus, "status")
        code = require_enum(reason_code, ReasonCode, "reason_code") if reason_code else None
        description = optional_text(reason_description)
        actual_subject_id = optional_text(actual_subject_id)

        instance = self._require_instance(instance_id)
        if actual_subject_id and not self._attendance.get_subject(actual_subject_id):
            raise ValidationError("actual_subject_id does not match any subject")

        if status in _REASON_STATUSES:
            if status is ClassStatus.ABSENT and code is None:
                code = ReasonCode.UNKNOWN
        else:
            code, description = None, None

        self._attendance.update_mark(
            instance_id=instance.instance_id,
            status=status,
            reason_code=code,
            reason_description=description,
            notes=optional_text(notes),
            actual_faculty_id=optional_text(actual_faculty_id),
            actual_subject_id=actual_subject_id,
        )
        return self._require_instance(instance.instance_id)

    def reschedule_class(self, instance_id: str, *, new_date, new_start_time: str, new_end_time: str) -> ClassInstance:
        """Cancel a SCHEDULED class and create its replacement on another slot."""
        target_date = coerce_date(new_date, "new_date")
        if target_date is None:
            raise ValidationError("new_date is required")
        start = parse_hhmm(new_start_time, "new_start_time")
        end = parse_hhmm(new_end_time, "new_end_time")
        if end <= start:
            raise ValidationError("new_end_time must be after new_start_time")

        original = self._require_instance(instance_id)
        if original.status is not ClassStatus.SCHEDULED:
            raise ValidationError("Only scheduled classes can be rescheduled")
        if self._attendance.find_instance(subject_id=original.subject_id, class_date=target_date, start_time=start):
            raise ValidationError("A class of this subject already exists in that slot")

        label = f"{target_date.isoformat()} {start}"
        new_id = self._attendance.reschedule(
            instance_id=original.instance_id,
            cancel_note=f"Rescheduled to {label}",
            replacement=NewClassInstance(
                subject_id=original.subject_id,
                class_date=target_date,
                start_time=start,
                end_time=end,
                class_type=original.class_type,
                scheduled_faculty_id=original.scheduled_faculty_id,
                notes=f"Rescheduled from {original.class_date.isoformat()} {original.start_time}",
                rescheduled_from_id=original.instance_id,
            ),
        )
        return self._require_instance(new_id)

    def update_faculty_exchange(self, instance_id: str, actual_faculty_id: Optional[str], *, notes: Optional[str] = None) -> ClassInstance:
        instance = self._require_instance(instance_id)
        self._attendance.update_faculty_exchange(
            instance_id=instance.instance_id,
            actual_faculty_id=optional_text(actual_faculty_id),
            notes=optional_text(notes),
        )
        return self._require_instance(instance.instance_id)

    # ---- derived statistics ---------------------------------------------

    def get_subject_stats(self) -> list[SubjectAttendanceStats]:
        subjects = self._attendance.list_subjects()
        faculty = {f.faculty_id: f for f in self._attendance.list_faculty()}

        statuses: dict[str, list[ClassStatus]] = {s.subject_id: [] for s in subjects}
        for instance in self._attendance.list_instances():
            statuses.setdefault(instance.effective_subject_id, []).append(instance.status)

        result: list[SubjectAttendanceStats] = []
        for subject in subjects:
            counts = MarkCounts.from_statuses(statuses.get(subject.subject_id, []))
            assessment = self._calculator.assess_counts(counts)
            lecturer = faculty.get(subject.default_faculty_id or "")
            result.append(
                SubjectAttendanceStats(
                    subject_id=subject.subject_id,
                    subject_name=subject.name,
                    subject_code=subject.code,
                    subject_type=subject.subject_type,
                    weight=subject.weight,
                    faculty_name=lecturer.display_name if lecturer else "Unknown",
                    total_scheduled=counts.scheduled,
                    present=counts.present,
                    absent=counts.absent,
                    excused=counts.excused,
                    cancelled=counts.cancelled,
                    attended=assessment.attended,
                    total_countable=assessment.total,
                    attendance_percentage=assessment.percentage,
                    risk_state=assessment.risk_state,
                    classes_needed_for_safe=assessment.classes_needed_for_safe,
                    classes_can_miss=assessment.classes_can_miss,
                )
            )
        return result

    def get_overall_stats(self) -> OverallAttendanceStats:
        stats = self.get_subject_stats()
        lab_weight = self._policy.lab_weight

        lectures = [s for s in stats if s.subject_type is SubjectType.LECTURE]
        labs = [s for s in stats if s.subject_type is SubjectType.LAB]

        lec_total = sum(s.total_countable for s in lectures)
        lec_attended = sum(s.attended for s in lectures)
        lab_total = sum(s.total_countable for s in labs)
        lab_attended = sum(s.attended for s in labs)

        # Labs count lab_weight times in the combined figure.
        combined = self._calculator.assess(
            lec_attended + lab_attended * lab_weight,
            lec_total + lab_total * lab_weight,
        )
        return OverallAttendanceStats(
            lectures_conducted=lec_total,
            lectures_attended=lec_attended,
            lecture_percentage=self._calculator.assess(lec_attended, lec_total).percentage,
            labs_conducted=lab_total,
            labs_attended=lab_attended,
            lab_percentage=self._calculator.assess(lab_attended, lab_total).percentage,
            lab_weight=lab_weight,
            combined_percentage=combined.percentage,
            overall_risk_state=combined.risk_state,
        )

    def get_recommendations(self) -> list[SubjectRecommendation]:
        return [
            SubjectRecommendation(
                subject_id=s.subject_id,
                subject_name=s.subject_name,
                subject_code=s.subject_code,
                subject_type=s.subject_type,
                risk_state=s.risk_state,
                attendance_percentage=s.attendance_percentage,
                recommendation=_recommendation_for(s),
            )
            for s in self.get_subject_stats()
        ]

    def get_at_risk_subjects(self) -> list[SubjectAttendanceStats]:
        return [s for s in self.get_subject_stats() if s.risk_state is not RiskState.SAFE]


def _recommendation_for(stats: SubjectAttendanceStats) -> str:
    unit = "lab(s)" if stats.subject_type is SubjectType.LAB else "class(es)"
    if stats.risk_state is RiskState.SAFE:
        if stats.classes_needed_for_safe > 0:
            # rounded up to the threshold, still short of it exactly
            return f"Attend next {stats.classes_needed_for_safe} {unit} to stay safe"
        if stats.classes_can_miss > 0:
            return f"Can miss {stats.classes_can_miss} {unit}"
        return "Maintain current attendance"
    if stats.risk_state is RiskState.BORDERLINE:
        return f"Attend next {stats.classes_needed_for_safe} {unit} to be safe"
    return "CRITICAL: Must attend all upcoming classes"
