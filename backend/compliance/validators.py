"""Compliance validators for French pharmacy labor law.

Every validator is pure: it reads shift and employee snapshots and returns a
result holding a validity flag and the violations it found. Breaches are
returned, never raised.
"""

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Optional

from utils.dates import days_between, parse_iso_date, week_start
from utils.time import (
    MINUTES_PER_DAY,
    MINUTES_PER_WEEK,
    hours_to_readable,
    interval_contains,
    minutes_to_readable,
    minutes_to_time,
    time_to_minutes,
)
from .types import (
    CoverageResult,
    CoverageSpan,
    DailyLimitResult,
    DayOpeningHours,
    Employee,
    InterDayRestResult,
    LegalLimits,
    Shift,
    Violation,
    ViolationSeverity,
    ViolationType,
    WeeklyDurationResult,
    WeeklyOpeningHours,
    WeeklyRestResult,
)

logger = logging.getLogger(__name__)


class ViolationIds:
    """
    Sequential violation identifiers scoped to a single validation run.

    Each top-level run owns its own instance, so ids restart at 1 and two
    runs over the same snapshot produce the same ids.
    """

    def __init__(self, prefix: str = "viol"):
        self.prefix = prefix
        self.counter = 0

    def next(self) -> str:
        self.counter += 1
        return f"{self.prefix}-{self.counter}"


def work_shifts(shifts: list[Shift]) -> list[Shift]:
    """Shifts that count towards working time (leave excluded)."""
    return [s for s in shifts if not s.is_leave]


def group_by_date(shifts: list[Shift]) -> dict[str, list[Shift]]:
    """Group shifts by date, in chronological order."""
    by_date: dict[str, list[Shift]] = defaultdict(list)
    for shift in sorted(shifts, key=lambda s: (s.date, s.start_minutes)):
        by_date[shift.date].append(shift)
    return dict(by_date)


def _span_label(dates: list[str]) -> str:
    if not dates:
        return ""
    if dates[0] == dates[-1]:
        return dates[0]
    return f"{dates[0]} → {dates[-1]}"


class BaseValidator(ABC):
    """Base class for per-employee validators."""

    @abstractmethod
    def validate(
        self,
        employee: Employee,
        shifts: list[Shift],
        limits: Optional[LegalLimits] = None,
        ids: Optional[ViolationIds] = None,
    ):
        """Validate one employee's shifts and return a result with violations."""
        pass


class WeeklyRestValidator(BaseValidator):
    """Validates the 35h consecutive weekly rest."""

    def validate(
        self,
        employee: Employee,
        shifts: list[Shift],
        limits: Optional[LegalLimits] = None,
        ids: Optional[ViolationIds] = None,
        window_start: Optional[str] = None,
    ) -> WeeklyRestResult:
        """
        Check the longest rest inside a Monday-to-Sunday window.

        Args:
            employee: The employee being checked
            shifts: That employee's shifts for the week
            limits: Legal limits (defaults apply when omitted)
            ids: Violation id sequence of the current run
            window_start: Monday of the week; derived from the shifts when omitted

        Returns:
            WeeklyRestResult with the longest rest found, in hours
        """
        limits = limits or LegalLimits()
        ids = ids or ViolationIds()

        worked = work_shifts(shifts)
        if not worked:
            return WeeklyRestResult()

        by_date = group_by_date(worked)
        dates = list(by_date)
        monday = window_start or week_start(dates[0])

        # (first start, last end) of each worked day, in minutes since Monday 00:00
        boundaries = []
        for day in dates:
            offset = days_between(monday, day) * MINUTES_PER_DAY
            day_shifts = by_date[day]
            boundaries.append((
                offset + min(s.start_minutes for s in day_shifts),
                offset + max(s.end_minutes for s in day_shifts),
            ))

        candidates = [boundaries[0][0]]
        for (_, prev_end), (next_start, _) in zip(boundaries, boundaries[1:]):
            candidates.append(next_start - prev_end)
        candidates.append(MINUTES_PER_WEEK - boundaries[-1][1])

        longest_minutes = max(candidates)
        longest_hours = longest_minutes / 60
        result = WeeklyRestResult(longest_rest_hours=longest_hours)

        if (
            len(dates) >= limits.min_worked_days_for_weekly_rest
            and longest_minutes < limits.weekly_rest_hours * 60
        ):
            result.valid = False
            result.violations.append(Violation(
                id=ids.next(),
                rule_type=ViolationType.REPOS_HEBDOMADAIRE,
                severity=ViolationSeverity.CRITICAL,
                employee_ids=(employee.id,),
                employee_name=employee.full_name,
                shift_ids=tuple(s.id for s in worked),
                date=_span_label(dates),
                message=f"{employee.full_name} has a longest weekly rest of {minutes_to_readable(longest_minutes)} (min {limits.weekly_rest_hours:g}h consecutive)",
                actual_value=round(longest_hours, 2),
                legal_limit=limits.weekly_rest_hours,
            ))

        logger.debug(f"Weekly rest for {employee.id} from {monday}: {longest_hours:.2f}h over {len(dates)} days")
        return result


class DailyLimitValidator(BaseValidator):
    """Validates the daily effective-hours cap, the mandatory break and the optional amplitude cap."""

    def validate(
        self,
        employee: Employee,
        shifts: list[Shift],
        limits: Optional[LegalLimits] = None,
        ids: Optional[ViolationIds] = None,
    ) -> DailyLimitResult:
        """Check each worked day independently."""
        limits = limits or LegalLimits()
        ids = ids or ViolationIds()
        result = DailyLimitResult()

        for day, day_shifts in group_by_date(work_shifts(shifts)).items():
            total_minutes = sum(s.effective_minutes for s in day_shifts)
            result.daily_hours[day] = total_minutes / 60
            shift_ids = tuple(s.id for s in day_shifts)

            if total_minutes > limits.max_daily_hours * 60:
                result.violations.append(Violation(
                    id=ids.next(),
                    rule_type=ViolationType.DUREE_JOURNALIERE,
                    severity=ViolationSeverity.CRITICAL,
                    employee_ids=(employee.id,),
                    employee_name=employee.full_name,
                    shift_ids=shift_ids,
                    date=day,
                    message=f"{employee.full_name} works {minutes_to_readable(total_minutes)} on {day} (max {limits.max_daily_hours:g}h)",
                    actual_value=round(total_minutes / 60, 2),
                    legal_limit=limits.max_daily_hours,
                ))

            if total_minutes > limits.break_threshold_hours * 60 and not self._has_adequate_break(
                day_shifts, limits.min_break_minutes
            ):
                longest_break = max(s.break_duration for s in day_shifts)
                result.violations.append(Violation(
                    id=ids.next(),
                    rule_type=ViolationType.PAUSE_OBLIGATOIRE,
                    severity=ViolationSeverity.WARNING,
                    employee_ids=(employee.id,),
                    employee_name=employee.full_name,
                    shift_ids=shift_ids,
                    date=day,
                    message=f"{employee.full_name} works {minutes_to_readable(total_minutes)} on {day} without a {limits.min_break_minutes} min break (required beyond {limits.break_threshold_hours:g}h)",
                    actual_value=float(longest_break),
                    legal_limit=float(limits.min_break_minutes),
                    unit="min",
                ))

            if limits.max_daily_amplitude_hours is not None:
                amplitude = max(s.end_minutes for s in day_shifts) - min(s.start_minutes for s in day_shifts)
                if amplitude > limits.max_daily_amplitude_hours * 60:
                    result.violations.append(Violation(
                        id=ids.next(),
                        rule_type=ViolationType.AMPLITUDE_JOURNALIERE,
                        severity=ViolationSeverity.CRITICAL,
                        employee_ids=(employee.id,),
                        employee_name=employee.full_name,
                        shift_ids=shift_ids,
                        date=day,
                        message=f"{employee.full_name} has a {minutes_to_readable(amplitude)} working span on {day} (max {limits.max_daily_amplitude_hours:g}h)",
                        actual_value=round(amplitude / 60, 2),
                        legal_limit=limits.max_daily_amplitude_hours,
                    ))

        result.valid = not any(v.severity == ViolationSeverity.CRITICAL for v in result.violations)
        return result

    @staticmethod
    def _has_adequate_break(day_shifts: list[Shift], min_break_minutes: int) -> bool:
        """A recorded break, or a gap between two shifts, of at least the minimum."""
        if any(s.break_duration >= min_break_minutes for s in day_shifts):
            return True

        ordered = sorted(day_shifts, key=lambda s: s.start_minutes)
        for current, following in zip(ordered, ordered[1:]):
            if following.start_minutes - current.end_minutes >= min_break_minutes:
                return True
        return False


class InterDayRestValidator(BaseValidator):
    """Validates the 11h rest between two consecutive working days."""

    def validate(
        self,
        employee: Employee,
        shifts: list[Shift],
        limits: Optional[LegalLimits] = None,
        ids: Optional[ViolationIds] = None,
    ) -> InterDayRestResult:
        """Check every pair of consecutive calendar days worked."""
        limits = limits or LegalLimits()
        ids = ids or ViolationIds()
        result = InterDayRestResult()

        by_date = group_by_date(work_shifts(shifts))
        dates = list(by_date)

        for current_date, next_date in zip(dates, dates[1:]):
            # Gaps of more than one calendar day are treated as compliant
            if days_between(current_date, next_date) != 1:
                continue

            current_shifts = by_date[current_date]
            next_shifts = by_date[next_date]
            last_end = max(s.end_minutes for s in current_shifts)
            first_start = min(s.start_minutes for s in next_shifts)
            rest_minutes = (MINUTES_PER_DAY - last_end) + first_start

            if rest_minutes < limits.min_daily_rest_hours * 60:
                result.valid = False
                result.violations.append(Violation(
                    id=ids.next(),
                    rule_type=ViolationType.REPOS_QUOTIDIEN,
                    severity=ViolationSeverity.CRITICAL,
                    employee_ids=(employee.id,),
                    employee_name=employee.full_name,
                    shift_ids=tuple(s.id for s in current_shifts + next_shifts),
                    date=f"{current_date} → {next_date}",
                    message=f"{employee.full_name} rests {minutes_to_readable(rest_minutes)} between {current_date} and {next_date} (min {limits.min_daily_rest_hours:g}h)",
                    actual_value=round(rest_minutes / 60, 2),
                    legal_limit=limits.min_daily_rest_hours,
                ))

        return result


class WeeklyDurationValidator(BaseValidator):
    """Validates the absolute 48h weekly cap and, optionally, hours above contract."""

    def validate(
        self,
        employee: Employee,
        shifts: list[Shift],
        limits: Optional[LegalLimits] = None,
        ids: Optional[ViolationIds] = None,
    ) -> WeeklyDurationResult:
        """Sum effective minutes over the week's non-leave shifts."""
        limits = limits or LegalLimits()
        ids = ids or ViolationIds()

        worked = work_shifts(shifts)
        total_minutes = sum(s.effective_minutes for s in worked)
        result = WeeklyDurationResult(total_hours=total_minutes / 60)
        if not worked:
            return result

        dates = sorted({s.date for s in worked})
        shift_ids = tuple(s.id for s in worked)

        if total_minutes > limits.max_weekly_hours * 60:
            result.valid = False
            result.violations.append(Violation(
                id=ids.next(),
                rule_type=ViolationType.DUREE_HEBDOMADAIRE,
                severity=ViolationSeverity.CRITICAL,
                employee_ids=(employee.id,),
                employee_name=employee.full_name,
                shift_ids=shift_ids,
                date=_span_label(dates),
                message=f"{employee.full_name} works {minutes_to_readable(total_minutes)} this week (max {limits.max_weekly_hours:g}h)",
                actual_value=round(total_minutes / 60, 2),
                legal_limit=limits.max_weekly_hours,
            ))

        if limits.flag_contract_overtime and total_minutes > employee.contract_hours * 60:
            extra = total_minutes / 60 - employee.contract_hours
            result.violations.append(Violation(
                id=ids.next(),
                rule_type=ViolationType.DEPASSEMENT_CONTRAT,
                severity=ViolationSeverity.INFO,
                employee_ids=(employee.id,),
                employee_name=employee.full_name,
                shift_ids=shift_ids,
                date=_span_label(dates),
                message=f"{employee.full_name} works {hours_to_readable(extra)} above the {employee.contract_hours:g}h contract",
                actual_value=round(total_minutes / 60, 2),
                legal_limit=employee.contract_hours,
            ))

        return result


class PharmacistCoverageValidator:
    """
    Validates that enough pharmacists are present during opening hours.

    Opening intervals are swept in fixed steps; a step is covered when at least
    `limits.min_pharmacists` pharmacist shifts contain its start instant.
    Adjacent steps with the same state merge into one span.
    """

    def validate_day(
        self,
        date: str,
        shifts: list[Shift],
        employees: list[Employee],
        opening_hours: Optional[DayOpeningHours],
        limits: Optional[LegalLimits] = None,
        ids: Optional[ViolationIds] = None,
    ) -> CoverageResult:
        """Check a single date; closed or unconfigured days are always compliant."""
        limits = limits or LegalLimits()
        ids = ids or ViolationIds()

        if opening_hours is None or not opening_hours.is_open or not opening_hours.slots:
            return CoverageResult()

        pharmacist_ids = {e.id for e in employees if e.is_pharmacist and e.is_active}
        present = [
            s for s in shifts
            if s.date == date
            and s.employee_id in pharmacist_ids
            and not s.is_leave
            and not s.is_cancelled
        ]

        result = CoverageResult()
        step = limits.coverage_step_minutes
        open_minutes = 0

        for slot in opening_hours.slots:
            slot_start = time_to_minutes(slot.start)
            slot_end = time_to_minutes(slot.end)
            if slot_end <= slot_start:
                continue
            open_minutes += slot_end - slot_start

            span_start = slot_start
            span_covered: Optional[bool] = None
            t = slot_start
            while t < slot_end:
                covered = self._count_present(present, t) >= limits.min_pharmacists
                if span_covered is None:
                    span_covered = covered
                elif covered != span_covered:
                    self._close_span(result, date, span_start, t, minutes_to_time(t), span_covered)
                    span_start = t
                    span_covered = covered
                t += step
            self._close_span(result, date, span_start, slot_end, slot.end, span_covered)

        covered_minutes = sum(s.duration_minutes for s in result.covered_spans)
        result.coverage_percent = round(covered_minutes / open_minutes * 100) if open_minutes else 100
        result.valid = not result.uncovered_spans

        present_ids = tuple(s.id for s in present)
        for span in result.uncovered_spans:
            result.violations.append(Violation(
                id=ids.next(),
                rule_type=ViolationType.COUVERTURE_PHARMACIEN,
                severity=ViolationSeverity.CRITICAL,
                employee_ids=(),
                shift_ids=present_ids,
                date=date,
                message=f"Fewer than {limits.min_pharmacists} pharmacist(s) present on {date} from {span.start} to {span.end} ({span.duration_minutes} min uncovered)",
                actual_value=float(span.duration_minutes),
                legal_limit=0.0,
                unit="min",
            ))

        return result

    def validate_period(
        self,
        dates: list[str],
        shifts: list[Shift],
        employees: list[Employee],
        opening_hours: Optional[WeeklyOpeningHours],
        limits: Optional[LegalLimits] = None,
        ids: Optional[ViolationIds] = None,
    ) -> CoverageResult:
        """Check every date; the percentage is the mean over open days."""
        limits = limits or LegalLimits()
        ids = ids or ViolationIds()
        result = CoverageResult()
        if not opening_hours:
            return result

        percents = []
        for day in dates:
            day_hours = opening_hours.get(parse_iso_date(day).weekday())
            if day_hours is None or not day_hours.is_open or not day_hours.slots:
                continue
            day_result = self.validate_day(day, shifts, employees, day_hours, limits, ids)
            percents.append(day_result.coverage_percent)
            result.uncovered_spans.extend(day_result.uncovered_spans)
            result.covered_spans.extend(day_result.covered_spans)
            result.violations.extend(day_result.violations)

        result.coverage_percent = round(sum(percents) / len(percents)) if percents else 100
        result.valid = not result.uncovered_spans
        return result

    @staticmethod
    def _count_present(present: list[Shift], instant: int) -> int:
        return sum(
            1 for s in present
            if interval_contains(instant, instant + 1, s.start_minutes, s.end_minutes)
        )

    @staticmethod
    def _close_span(
        result: CoverageResult,
        date: str,
        start: int,
        end: int,
        end_label: str,
        covered: Optional[bool],
    ) -> None:
        if covered is None or end <= start:
            return
        span = CoverageSpan(
            date=date,
            start=minutes_to_time(start),
            end=end_label,
            duration_minutes=end - start,
        )
        if covered:
            result.covered_spans.append(span)
        else:
            result.uncovered_spans.append(span)
