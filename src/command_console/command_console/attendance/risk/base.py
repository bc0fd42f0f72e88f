from __future__ import annotations

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from ...core.constants import DEFAULT_BORDERLINE_BAND, DEFAULT_LAB_WEIGHT, DEFAULT_SAFE_THRESHOLD
from ...core.enums import ClassStatus, RiskState
from ...core.exceptions import ValidationError


@dataclass(frozen=True)
class AttendancePolicy:
    """Tunable attendance rules.

    ``excused_counts_as_absence``: when True an EXCUSED mark counts toward the
    denominator but not the numerator; when False it is ignored like a
    cancelled class.
    """

    safe_threshold: int = DEFAULT_SAFE_THRESHOLD
    borderline_band: int = DEFAULT_BORDERLINE_BAND
    lab_weight: int = DEFAULT_LAB_WEIGHT
    excused_counts_as_absence: bool = True

    def __post_init__(self):
        if not 0 < int(self.safe_threshold) < 100:
            raise ValidationError("safe_threshold must be between 1 and 99")
        if int(self.borderline_band) < 0:
            raise ValidationError("borderline_band cannot be negative")
        if int(self.lab_weight) < 1:
            raise ValidationError("lab_weight must be at least 1")

    @classmethod
    def from_settings(cls, values: dict | None) -> "AttendancePolicy":
        values = values or {}
        return cls(
            safe_threshold=int(values.get("safe_threshold", DEFAULT_SAFE_THRESHOLD)),
            borderline_band=int(values.get("borderline_band", DEFAULT_BORDERLINE_BAND)),
            lab_weight=int(values.get("lab_weight", DEFAULT_LAB_WEIGHT)),
            excused_counts_as_absence=bool(values.get("excused_counts_as_absence", True)),
        )


@dataclass(frozen=True)
class MarkCounts:
    present: int = 0
    absent: int = 0
    excused: int = 0
    cancelled: int = 0
    unmarked: int = 0

    @classmethod
    def from_statuses(cls, statuses: Iterable[ClassStatus]) -> "MarkCounts":
        c = Counter(ClassStatus(s) for s in statuses)
        return cls(
            present=c[ClassStatus.PRESENT],
            absent=c[ClassStatus.ABSENT],
            excused=c[ClassStatus.EXCUSED],
            cancelled=c[ClassStatus.CANCELLED] + c[ClassStatus.NO_CLASS],
            unmarked=c[ClassStatus.SCHEDULED],
        )

    @property
    def scheduled(self) -> int:
        return self.present + self.absent + self.excused + self.cancelled + self.unmarked


@dataclass(frozen=True)
class RiskAssessment:
    attended: int
    total: int
    percentage: int
    risk_state: RiskState
    classes_needed_for_safe: int
    classes_can_miss: int


class RiskCalculator(ABC):
    """Calculator interface (Strategy Pattern for attendance risk)."""

    @abstractmethod
    def assess(self, attended: int, total: int) -> RiskAssessment:
        raise NotImplementedError

    @abstractmethod
    def assess_counts(self, counts: MarkCounts) -> RiskAssessment:
        raise NotImplementedError
