import itertools

import pytest

from compliance.types import (
    DayOpeningHours,
    Employee,
    EmployeeCategory,
    LegalLimits,
    Shift,
    ShiftStatus,
    ShiftType,
    TimeSlot,
)

# Monday
WEEK_START = "2026-02-09"


@pytest.fixture
def default_limits():
    return LegalLimits()


@pytest.fixture
def make_employee():
    """Factory for Employee snapshots."""
    def _make(
        id: str = "emp-1",
        first_name: str = "Claire",
        last_name: str = "Martin",
        category: EmployeeCategory = EmployeeCategory.PREPARATEUR,
        contract_hours: float = 35.0,
        is_active: bool = True,
    ) -> Employee:
        return Employee(
            id=id,
            first_name=first_name,
            last_name=last_name,
            category=category,
            contract_hours=contract_hours,
            is_active=is_active,
        )
    return _make


@pytest.fixture
def make_pharmacist(make_employee):
    def _make(id: str = "ph-1", first_name: str = "Paul", **kwargs) -> Employee:
        kwargs.setdefault("category", EmployeeCategory.PHARMACIEN_ADJOINT)
        return make_employee(id=id, first_name=first_name, **kwargs)
    return _make


@pytest.fixture
def make_shift():
    """Factory for Shift snapshots with unique ids."""
    counter = itertools.count(1)

    def _make(
        date: str = WEEK_START,
        start_time: str = "09:00",
        end_time: str = "17:00",
        break_duration: int = 0,
        employee_id: str = "emp-1",
        type: ShiftType = ShiftType.REGULAR,
        status: ShiftStatus = ShiftStatus.PUBLISHED,
        id: str | None = None,
    ) -> Shift:
        return Shift(
            id=id or f"shift-{next(counter)}",
            employee_id=employee_id,
            date=date,
            start_time=start_time,
            end_time=end_time,
            break_duration=break_duration,
            type=type,
            status=status,
        )
    return _make


@pytest.fixture
def weekday_opening_hours():
    """Open 08:00-20:00 Monday to Saturday, closed on Sunday."""
    open_day = DayOpeningHours(is_open=True, slots=(TimeSlot("08:00", "20:00"),))
    hours = {day: open_day for day in range(6)}
    hours[6] = DayOpeningHours(is_open=False)
    return hours
