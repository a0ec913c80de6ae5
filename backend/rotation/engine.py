"""Equitable rotation of pharmacy duties (nights, Sundays, public holidays).

Only active licensed pharmacists take duties. The least-loaded pharmacist goes first,
then assignment proceeds round-robin with a cursor that persists across dates.
Rejected attempts are recorded as conflicts and dates nobody can take are
reported, never skipped silently.
"""

import logging
from datetime import date
from typing import Optional

from compliance.types import Employee, Shift
from utils.dates import date_range, day_name, is_sunday
from .holidays import holidays_between
from .types import (
    ConflictCategory,
    DutyDate,
    DutyType,
    PharmacistStats,
    RotationAssignment,
    RotationConfig,
    RotationConflict,
    RotationResult,
)

logger = logging.getLogger(__name__)


def eligible_pharmacists(employees: list[Employee]) -> list[Employee]:
    """Active licensed pharmacists, in input order."""
    return [e for e in employees if e.is_pharmacist and e.is_active]


def generate_duty_dates(config: RotationConfig) -> list[DutyDate]:
    """
    Duty dates of the window, in chronological order.

    A public holiday takes precedence over the Sunday rule so the same day is
    never booked under both. Nights stack on top of either.
    """
    if config.public_holidays is not None:
        holidays = frozenset(config.public_holidays)
    else:
        holidays = holidays_between(config.start_date, config.end_date)

    duties: list[DutyDate] = []
    for day in date_range(config.start_date, config.end_date):
        name = day_name(day)
        if config.include_holidays and day in holidays:
            duties.append(DutyDate(day, name, DutyType.FERIE, config.sunday_start, config.sunday_end))
        elif config.include_sundays and is_sunday(day):
            duties.append(DutyDate(day, name, DutyType.DIMANCHE, config.sunday_start, config.sunday_end))

        if config.include_nights:
            duties.append(DutyDate(day, name, DutyType.NUIT, config.night_start, config.night_end))

    return duties


def check_conflict(
    employee: Employee,
    duty: DutyDate,
    shifts: list[Shift],
    assignments: list[RotationAssignment],
) -> Optional[RotationConflict]:
    """Return why the employee cannot take the duty, or None when they can."""
    name = employee.full_name

    day_shifts = [
        s for s in shifts
        if s.employee_id == employee.id and s.date == duty.date and not s.is_cancelled
    ]
    if day_shifts:
        if all(s.is_leave for s in day_shifts):
            category = ConflictCategory.CONGE
            description = f"{name} is on leave on {duty.date}"
        else:
            category = ConflictCategory.PLANNING
            description = f"{name} already has a shift planned on {duty.date}"
        return RotationConflict(
            date=duty.date,
            category=category,
            description=description,
            employee_id=employee.id,
            employee_name=name,
            duty_type=duty.type,
        )

    if any(a.employee_id == employee.id and a.date == duty.date for a in assignments):
        return RotationConflict(
            date=duty.date,
            category=ConflictCategory.AUTRE_GARDE,
            description=f"{name} is already on duty on {duty.date}",
            employee_id=employee.id,
            employee_name=name,
            duty_type=duty.type,
        )

    return None


def calculate_stats(
    pharmacists: list[Employee],
    assignments: list[RotationAssignment],
    today: Optional[str] = None,
) -> list[PharmacistStats]:
    """
    Duty counters per pharmacist, recomputed from the full assignment set.

    Args:
        pharmacists: Employees to report on, in output order
        assignments: Historical and new assignments
        today: Reference date (YYYY-MM-DD); dates on or before it are past

    Returns:
        One PharmacistStats per pharmacist, including those without duties
    """
    today = today or date.today().isoformat()

    stats = []
    for pharmacist in pharmacists:
        duties = [a for a in assignments if a.employee_id == pharmacist.id]
        past = [a.date for a in duties if a.date <= today]
        future = [a.date for a in duties if a.date > today]
        stats.append(PharmacistStats(
            employee_id=pharmacist.id,
            employee_name=pharmacist.full_name,
            total_duties=len(duties),
            night_duties=sum(1 for a in duties if a.type == DutyType.NUIT),
            sunday_duties=sum(1 for a in duties if a.type == DutyType.DIMANCHE),
            holiday_duties=sum(1 for a in duties if a.type == DutyType.FERIE),
            last_duty_date=max(past) if past else None,
            next_duty_date=min(future) if future else None,
        ))
    return stats


def rotation_order(
    pharmacists: list[Employee],
    history: list[RotationAssignment],
) -> list[Employee]:
    """Least-loaded first; ties keep the input order."""
    totals = {p.id: 0 for p in pharmacists}
    for assignment in history:
        if assignment.employee_id in totals:
            totals[assignment.employee_id] += 1
    return sorted(pharmacists, key=lambda p: totals[p.id])


def generate_rotation(
    config: RotationConfig,
    employees: list[Employee],
    existing_assignments: Optional[list[RotationAssignment]] = None,
    shifts: Optional[list[Shift]] = None,
    today: Optional[str] = None,
) -> RotationResult:
    """
    Generate an equitable duty rotation over the configured window.

    Args:
        config: Window and duty categories
        employees: All employees; only active pharmacists are eligible
        existing_assignments: Duties already held, for balancing and conflicts
        shifts: Ordinary shifts, for conflicts
        today: Reference date for the stats

    Returns:
        RotationResult with assignments, conflicts, stats and unfilled dates

    Raises:
        ValueError: If config or employees is None
    """
    if config is None:
        raise ValueError("Rotation config is required")
    if employees is None:
        raise ValueError("employees is required")

    history = list(existing_assignments or [])
    shifts = list(shifts or [])
    result = RotationResult()

    pharmacists = eligible_pharmacists(employees)
    if not pharmacists:
        logger.info("No eligible pharmacist, rotation skipped")
        return result

    order = rotation_order(pharmacists, history)
    cursor = 0

    for duty in generate_duty_dates(config):
        assigned = False
        for _ in range(len(order)):
            pharmacist = order[cursor % len(order)]
            cursor += 1

            conflict = check_conflict(pharmacist, duty, shifts, history + result.assignments)
            if conflict:
                logger.debug(f"{duty.type.value} {duty.date}: {conflict.description}")
                result.conflicts.append(conflict)
                continue

            result.assignments.append(RotationAssignment(
                date=duty.date,
                day_name=duty.day_name,
                type=duty.type,
                employee_id=pharmacist.id,
                employee_name=pharmacist.full_name,
                start_time=duty.start_time,
                end_time=duty.end_time,
            ))
            assigned = True
            break

        if not assigned:
            logger.warning(f"No pharmacist available for {duty.type.value} duty on {duty.date}")
            result.unfilled.append(duty)
            result.conflicts.append(RotationConflict(
                date=duty.date,
                category=ConflictCategory.AUCUN_DISPONIBLE,
                description=f"No pharmacist available for the {duty.type.value} duty on {duty.date}",
                duty_type=duty.type,
            ))

    result.stats = calculate_stats(pharmacists, history + result.assignments, today)

    logger.info(
        f"Rotation {config.start_date} -> {config.end_date}: {len(result.assignments)} assigned, "
        f"{len(result.unfilled)} unfilled, {len(result.conflicts)} conflicts"
    )
    return result
