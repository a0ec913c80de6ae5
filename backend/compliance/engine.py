"""Compliance validation engine that orchestrates all validators."""

import logging
from typing import Optional

from utils.dates import date_range, week_start, week_windows
from utils.time import utc_now
from .scoring import compute_score, score_value
from .types import (
    ComplianceReport,
    CoverageResult,
    Employee,
    EmployeeCompliance,
    LegalLimits,
    QuickCheckResult,
    Shift,
    Violation,
    WeeklyOpeningHours,
)
from .validators import (
    DailyLimitValidator,
    InterDayRestValidator,
    PharmacistCoverageValidator,
    ViolationIds,
    WeeklyDurationValidator,
    WeeklyRestValidator,
    work_shifts,
)

logger = logging.getLogger(__name__)


class ComplianceEngine:
    """
    Main engine for running compliance validation.

    Holds no state between calls: every run creates its own violation id
    sequence, so concurrent runs never share a counter. The quick check and
    the full report go through the same evaluation and cannot disagree.
    """

    def __init__(self, limits: Optional[LegalLimits] = None):
        """Initialize with all validators."""
        self.limits = limits or LegalLimits()
        self.weekly_rest = WeeklyRestValidator()
        self.daily_limit = DailyLimitValidator()
        self.inter_day_rest = InterDayRestValidator()
        self.weekly_duration = WeeklyDurationValidator()
        self.coverage = PharmacistCoverageValidator()

    def validate_employee(
        self,
        employee: Employee,
        shifts: list[Shift],
        ids: ViolationIds,
        mondays: Optional[list[str]] = None,
    ) -> EmployeeCompliance:
        """
        Run the per-employee validators over one employee's shifts.

        Args:
            employee: The employee to check
            shifts: That employee's shifts for the period
            ids: Violation id sequence of the current run
            mondays: Weeks to evaluate the weekly rules on; derived from the shifts when omitted

        Returns:
            EmployeeCompliance with the employee's own violations and score
        """
        if mondays is None:
            mondays = sorted({week_start(s.date) for s in shifts})

        weeks = {monday: [] for monday in mondays}
        for shift in shifts:
            weeks.setdefault(week_start(shift.date), []).append(shift)

        violations: list[Violation] = []

        weekly_rest_valid = True
        for monday in mondays:
            rest = self.weekly_rest.validate(employee, weeks[monday], self.limits, ids, window_start=monday)
            weekly_rest_valid = weekly_rest_valid and rest.valid
            violations.extend(rest.violations)

        daily = self.daily_limit.validate(employee, shifts, self.limits, ids)
        violations.extend(daily.violations)

        weekly_duration_valid = True
        for monday in mondays:
            duration = self.weekly_duration.validate(employee, weeks[monday], self.limits, ids)
            weekly_duration_valid = weekly_duration_valid and duration.valid
            violations.extend(duration.violations)

        inter_day = self.inter_day_rest.validate(employee, shifts, self.limits, ids)
        violations.extend(inter_day.violations)

        worked = work_shifts(shifts)
        return EmployeeCompliance(
            employee=employee,
            score=score_value(violations),
            violations=violations,
            weekly_hours=sum(s.effective_minutes for s in worked) / 60,
            days_worked=len({s.date for s in worked}),
            weeks_analyzed=max(1, len(mondays)),
            weekly_rest_valid=weekly_rest_valid,
            daily_limit_valid=daily.valid,
            inter_day_rest_valid=inter_day.valid,
            weekly_duration_valid=weekly_duration_valid,
        )

    def _evaluate(
        self,
        shifts: list[Shift],
        employees: list[Employee],
        period_start: Optional[str],
        period_end: Optional[str],
        opening_hours: Optional[WeeklyOpeningHours],
    ) -> tuple[list[Shift], list[Employee], list[EmployeeCompliance], CoverageResult]:
        if shifts is None or employees is None:
            raise ValueError("shifts and employees are required")

        if period_start and period_end:
            shifts = [s for s in shifts if period_start <= s.date <= period_end]
            mondays = week_windows(period_start, period_end)
            dates = date_range(period_start, period_end)
        else:
            mondays = None
            shift_dates = sorted({s.date for s in shifts})
            dates = date_range(shift_dates[0], shift_dates[-1]) if shift_dates else []

        active = [e for e in employees if e.is_active]
        by_employee: dict[str, list[Shift]] = {e.id: [] for e in active}
        for shift in shifts:
            if shift.employee_id in by_employee:
                by_employee[shift.employee_id].append(shift)

        ids = ViolationIds()
        employee_results = [
            self.validate_employee(e, by_employee[e.id], ids, mondays)
            for e in active
        ]
        coverage = self.coverage.validate_period(dates, shifts, employees, opening_hours, self.limits, ids)
        return shifts, active, employee_results, coverage

    def generate_report(
        self,
        shifts: list[Shift],
        employees: list[Employee],
        period_start: str,
        period_end: str,
        opening_hours: Optional[WeeklyOpeningHours] = None,
        generated_at: Optional[str] = None,
    ) -> ComplianceReport:
        """
        Generate a full compliance report for a period.

        Args:
            shifts: Shifts of the period (already scoped to the organization)
            employees: Employees of the organization; inactive ones are skipped
            period_start: First date of the period (YYYY-MM-DD)
            period_end: Last date of the period (YYYY-MM-DD)
            opening_hours: Weekday -> opening hours; coverage is skipped when omitted
            generated_at: Timestamp to stamp on the report; now when omitted

        Returns:
            ComplianceReport with every violation and a per-employee breakdown,
            worst score first
        """
        shifts, active, employee_results, coverage = self._evaluate(
            shifts, employees, period_start, period_end, opening_hours
        )

        violations = [v for result in employee_results for v in result.violations]
        violations.extend(coverage.violations)
        score = compute_score(violations)

        logger.info(
            f"Compliance report {period_start} -> {period_end}: score {score.score} "
            f"({score.critical_count} critical, {score.warning_count} warning, {score.info_count} info)"
        )

        return ComplianceReport(
            period_start=period_start,
            period_end=period_end,
            score=score,
            violations=violations,
            employee_compliance=sorted(employee_results, key=lambda r: r.score),
            uncovered_spans=coverage.uncovered_spans,
            pharmacist_coverage_percent=coverage.coverage_percent,
            shifts_analyzed=len(shifts),
            employees_analyzed=len(active),
            generated_at=generated_at or utc_now().isoformat(),
        )

    def quick_check(
        self,
        shifts: list[Shift],
        employees: list[Employee],
        opening_hours: Optional[WeeklyOpeningHours] = None,
        period_start: Optional[str] = None,
        period_end: Optional[str] = None,
    ) -> QuickCheckResult:
        """Score and severity counts only, for dashboard widgets."""
        _, _, employee_results, coverage = self._evaluate(
            shifts, employees, period_start, period_end, opening_hours
        )
        violations = [v for result in employee_results for v in result.violations]
        violations.extend(coverage.violations)
        score = compute_score(violations)

        logger.debug(f"Quick compliance check: score {score.score}")

        return QuickCheckResult(
            score=score.score,
            label=score.label,
            critical_count=score.critical_count,
            warning_count=score.warning_count,
            info_count=score.info_count,
        )
