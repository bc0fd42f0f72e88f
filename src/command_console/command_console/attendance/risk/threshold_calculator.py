from __future__ import annotations

from ...core.enums import RiskState
from ...core.exceptions import ValidationError
from .base import AttendancePolicy, MarkCounts, RiskAssessment, RiskCalculator


class ThresholdRiskCalculator(RiskCalculator):
    """Standard rule: percentage of countable classes against a safe threshold T.

    - Cancelled, no-class and unmarked instances never count.
    - Excused counts in the denominator only (unless the policy says otherwise).
    - No countable classes -> 100%, SAFE, nothing needed.
    - Risk uses the rounded percentage; "needed" and "can miss" use the exact ratio.
    - "Needed" assumes every future class is attended (optimistic projection).
    """

    def __init__(self, policy: AttendancePolicy | None = None):
        self._policy = policy or AttendancePolicy()

    @property
    def policy(self) -> AttendancePolicy:
        return self._policy

    @staticmethod
    def _validate(attended: int, total: int) -> tuple[int, int]:
        attended, total = int(attended), int(total)
        if attended < 0 or total < 0:
            raise ValidationError("Attendance counts cannot be negative")
        if attended > total:
            raise ValidationError("Attended classes cannot exceed total classes")
        return attended, total

    def countable(self, counts: MarkCounts) -> tuple[int, int]:
        attended = counts.present
        total = counts.present + counts.absent
        if self._policy.excused_counts_as_absence:
            total += counts.excused
        return attended, total

    def percentage(self, attended: int, total: int) -> int:
        attended, total = self._validate(attended, total)
        if total == 0:
            return 100
        # round half up, integer only
        return (200 * attended + total) // (2 * total)

    def classify(self, percentage: int) -> RiskState:
        threshold = self._policy.safe_threshold
        if percentage >= threshold:
            return RiskState.SAFE
        if percentage >= threshold - self._policy.borderline_band:
            return RiskState.BORDERLINE
        return RiskState.CRITICAL

    def classes_needed_for_safe(self, attended: int, total: int) -> int:
        attended, total = self._validate(attended, total)
        threshold = self._policy.safe_threshold
        if 100 * attended >= threshold * total:
            return 0
        numerator = threshold * total - 100 * attended
        needed = -(-numerator // (100 - threshold))
        return max(needed, 0)

    def classes_can_miss(self, attended: int, total: int) -> int:
        attended, total = self._validate(attended, total)
        threshold = self._policy.safe_threshold
        if 100 * attended < threshold * total:
            return 0
        return max((100 * attended - threshold * total) // threshold, 0)

    def assess(self, attended: int, total: int) -> RiskAssessment:
        attended, total = self._validate(attended, total)
        pct = self.percentage(attended, total)
        return RiskAssessment(
            attended=attended,
            total=total,
            percentage=pct,
            risk_state=self.classify(pct),
            classes_needed_for_safe=self.classes_needed_for_safe(attended, total),
            classes_can_miss=self.classes_can_miss(attended, total),
        )

    def assess_counts(self, counts: MarkCounts) -> RiskAssessment:
        attended, total = self.countable(counts)
        return self.assess(attended, total)
