"""Unit tests for the per-employee compliance validators.

Covers the weekly consecutive rest, the daily cap and mandatory break, the
optional amplitude cap, the rest between working days and the weekly cap.
"""

import pytest

from compliance.types import LegalLimits, ShiftType, ViolationSeverity, ViolationType
from compliance.validators import (
    DailyLimitValidator,
    InterDayRestValidator,
    ViolationIds,
    WeeklyDurationValidator,
    WeeklyRestValidator,
    group_by_date,
)
from utils.dates import add_days

MONDAY = "2026-02-09"


@pytest.fixture
def employee(make_employee):
    return make_employee()


@pytest.fixture
def six_day_week(make_shift):
    """Monday to Saturday 08:30-19:30 with a one-hour break, Sunday off."""
    return [
        make_shift(date=add_days(MONDAY, offset), start_time="08:30", end_time="19:30", break_duration=60)
        for offset in range(6)
    ]


class TestViolationIds:
    def test_sequence_starts_at_one(self):
        ids = ViolationIds()
        assert ids.next() == "viol-1"
        assert ids.next() == "viol-2"

    def test_instances_are_independent(self):
        first, second = ViolationIds(), ViolationIds()
        first.next()
        assert second.next() == "viol-1"


class TestGroupByDate:
    def test_groups_are_chronological(self, make_shift):
        late = make_shift(date="2026-02-10", start_time="14:00", end_time="18:00")
        early = make_shift(date="2026-02-10", start_time="08:00", end_time="12:00")
        before = make_shift(date="2026-02-09")
        grouped = group_by_date([late, early, before])
        assert list(grouped) == ["2026-02-09", "2026-02-10"]
        assert grouped["2026-02-10"] == [early, late]


class TestWeeklyRestValidator:
    def test_six_days_with_short_weekend_rest(self, employee, six_day_week):
        result = WeeklyRestValidator().validate(employee, six_day_week, window_start=MONDAY)

        # Saturday 19:30 to the end of Sunday
        assert result.longest_rest_hours == pytest.approx(28.5)
        assert not result.valid
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.rule_type == ViolationType.REPOS_HEBDOMADAIRE
        assert violation.severity == ViolationSeverity.CRITICAL
        assert violation.actual_value == 28.5
        assert violation.legal_limit == 35.0
        assert violation.employee_ids == ("emp-1",)
        assert len(violation.shift_ids) == 6

    def test_short_saturday_leaves_enough_rest(self, employee, make_shift):
        shifts = [make_shift(date=add_days(MONDAY, offset), start_time="09:00", end_time="18:00") for offset in range(5)]
        shifts.append(make_shift(date=add_days(MONDAY, 5), start_time="08:00", end_time="12:00"))

        result = WeeklyRestValidator().validate(employee, shifts, window_start=MONDAY)

        assert result.longest_rest_hours == pytest.approx(36.0)
        assert result.valid
        assert result.violations == []

    def test_fewer_than_six_days_never_flagged(self, employee, make_shift):
        shifts = [make_shift(date=add_days(MONDAY, offset), start_time="06:00", end_time="23:00") for offset in range(5)]
        limits = LegalLimits(weekly_rest_hours=100)

        result = WeeklyRestValidator().validate(employee, shifts, limits, window_start=MONDAY)

        assert result.valid
        assert result.violations == []

    def test_rest_before_first_worked_day_counts(self, employee, make_shift):
        # Tuesday to Sunday: the Monday before is free
        shifts = [make_shift(date=add_days(MONDAY, offset), start_time="09:00", end_time="19:00") for offset in range(1, 7)]

        result = WeeklyRestValidator().validate(employee, shifts, window_start=MONDAY)

        assert result.longest_rest_hours == pytest.approx(33.0)
        assert not result.valid

    def test_leave_days_are_not_worked_days(self, employee, six_day_week, make_shift):
        shifts = six_day_week[:5] + [make_shift(date=add_days(MONDAY, 5), type=ShiftType.CONGE)]

        result = WeeklyRestValidator().validate(employee, shifts, window_start=MONDAY)

        assert result.valid

    def test_no_shifts(self, employee):
        result = WeeklyRestValidator().validate(employee, [], window_start=MONDAY)
        assert result.valid
        assert result.longest_rest_hours == 168.0


class TestDailyLimitValidator:
    def test_eleven_effective_hours_breach_the_cap(self, employee, make_shift):
        shift = make_shift(start_time="07:30", end_time="19:30", break_duration=60)

        result = DailyLimitValidator().validate(employee, [shift])

        assert not result.valid
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.rule_type == ViolationType.DUREE_JOURNALIERE
        assert violation.severity == ViolationSeverity.CRITICAL
        assert violation.actual_value == 11.0
        assert result.daily_hours[MONDAY] == 11.0

    def test_cap_and_break_fire_together(self, employee, make_shift):
        shift = make_shift(start_time="07:00", end_time="18:00", break_duration=0)

        result = DailyLimitValidator().validate(employee, [shift])

        assert not result.valid
        assert [(v.rule_type, v.severity) for v in result.violations] == [
            (ViolationType.DUREE_JOURNALIERE, ViolationSeverity.CRITICAL),
            (ViolationType.PAUSE_OBLIGATOIRE, ViolationSeverity.WARNING),
        ]
        assert {v.date for v in result.violations} == {MONDAY}

    def test_exactly_ten_hours_is_compliant(self, employee, make_shift):
        shift = make_shift(start_time="08:00", end_time="18:20", break_duration=20)

        result = DailyLimitValidator().validate(employee, [shift])

        assert result.valid
        assert result.violations == []

    def test_cap_sums_every_shift_of_the_day(self, employee, make_shift):
        shifts = [
            make_shift(start_time="07:00", end_time="13:00", break_duration=0),
            make_shift(start_time="14:00", end_time="19:30", break_duration=0),
        ]

        result = DailyLimitValidator().validate(employee, shifts)

        rule_types = [v.rule_type for v in result.violations]
        assert rule_types == [ViolationType.DUREE_JOURNALIERE]

    def test_missing_break_is_a_warning(self, employee, make_shift):
        shifts = [
            make_shift(start_time="08:00", end_time="12:00"),
            make_shift(start_time="12:10", end_time="16:30"),
        ]

        result = DailyLimitValidator().validate(employee, shifts)

        assert result.valid
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.rule_type == ViolationType.PAUSE_OBLIGATOIRE
        assert violation.severity == ViolationSeverity.WARNING
        assert violation.unit == "min"

    def test_gap_between_shifts_counts_as_break(self, employee, make_shift):
        shifts = [
            make_shift(start_time="08:00", end_time="12:00"),
            make_shift(start_time="13:00", end_time="17:00"),
        ]

        result = DailyLimitValidator().validate(employee, shifts)

        assert result.violations == []

    def test_short_day_needs_no_break(self, employee, make_shift):
        result = DailyLimitValidator().validate(employee, [make_shift(start_time="09:00", end_time="15:00")])
        assert result.violations == []

    def test_leave_is_not_working_time(self, employee, make_shift):
        shift = make_shift(start_time="07:00", end_time="20:00", type=ShiftType.MALADIE)
        result = DailyLimitValidator().validate(employee, [shift])
        assert result.violations == []
        assert result.daily_hours == {}

    def test_amplitude_disabled_by_default(self, employee, make_shift):
        shifts = [
            make_shift(start_time="07:00", end_time="11:00"),
            make_shift(start_time="16:00", end_time="20:00"),
        ]
        result = DailyLimitValidator().validate(employee, shifts)
        assert result.violations == []

    def test_amplitude_cap_when_configured(self, employee, make_shift):
        shifts = [
            make_shift(start_time="07:00", end_time="11:00"),
            make_shift(start_time="16:00", end_time="20:00"),
        ]
        limits = LegalLimits(max_daily_amplitude_hours=12)

        result = DailyLimitValidator().validate(employee, shifts, limits)

        assert not result.valid
        assert [v.rule_type for v in result.violations] == [ViolationType.AMPLITUDE_JOURNALIERE]
        assert result.violations[0].actual_value == 13.0


class TestInterDayRestValidator:
    def test_short_rest_between_consecutive_days(self, employee, make_shift):
        shifts = [
            make_shift(date="2026-02-09", start_time="13:00", end_time="22:00"),
            make_shift(date="2026-02-10", start_time="07:00", end_time="15:00"),
        ]

        result = InterDayRestValidator().validate(employee, shifts)

        assert not result.valid
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.rule_type == ViolationType.REPOS_QUOTIDIEN
        assert violation.actual_value == 9.0
        assert violation.date == "2026-02-09 → 2026-02-10"
        assert len(violation.shift_ids) == 2

    def test_enough_rest(self, employee, make_shift):
        shifts = [
            make_shift(date="2026-02-09", start_time="09:00", end_time="19:00"),
            make_shift(date="2026-02-10", start_time="08:00", end_time="17:00"),
        ]
        result = InterDayRestValidator().validate(employee, shifts)
        assert result.valid

    def test_shift_crossing_midnight_shortens_rest(self, employee, make_shift):
        shifts = [
            make_shift(date="2026-02-09", start_time="22:00", end_time="06:00"),
            make_shift(date="2026-02-10", start_time="14:00", end_time="20:00"),
        ]

        result = InterDayRestValidator().validate(employee, shifts)

        assert len(result.violations) == 1
        assert result.violations[0].actual_value == 8.0

    def test_non_consecutive_days_are_skipped(self, employee, make_shift):
        shifts = [
            make_shift(date="2026-02-09", start_time="13:00", end_time="23:00"),
            make_shift(date="2026-02-11", start_time="05:00", end_time="10:00"),
        ]
        result = InterDayRestValidator().validate(employee, shifts)
        assert result.valid
        assert result.violations == []


class TestWeeklyDurationValidator:
    def test_fifty_hours_breach_the_weekly_cap(self, employee, make_shift):
        shifts = [make_shift(date=add_days(MONDAY, offset), start_time="08:00", end_time="18:00") for offset in range(5)]

        result = WeeklyDurationValidator().validate(employee, shifts)

        assert result.total_hours == 50.0
        assert not result.valid
        assert [v.rule_type for v in result.violations] == [ViolationType.DUREE_HEBDOMADAIRE]
        assert result.violations[0].date == "2026-02-09 → 2026-02-13"

    def test_forty_eight_hours_is_compliant(self, employee, make_shift):
        shifts = [make_shift(date=add_days(MONDAY, offset), start_time="08:00", end_time="16:00") for offset in range(6)]
        result = WeeklyDurationValidator().validate(employee, shifts)
        assert result.total_hours == 48.0
        assert result.valid

    def test_contract_overtime_is_info_when_enabled(self, make_employee, make_shift):
        employee = make_employee(contract_hours=35)
        shifts = [make_shift(date=add_days(MONDAY, offset), start_time="09:00", end_time="18:00", break_duration=60) for offset in range(5)]
        limits = LegalLimits(flag_contract_overtime=True)

        result = WeeklyDurationValidator().validate(employee, shifts, limits)

        assert result.valid
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.rule_type == ViolationType.DEPASSEMENT_CONTRAT
        assert violation.severity == ViolationSeverity.INFO
        assert violation.actual_value == 40.0
        assert violation.legal_limit == 35

    def test_contract_overtime_off_by_default(self, employee, make_shift):
        shifts = [make_shift(date=add_days(MONDAY, offset), start_time="09:00", end_time="18:00", break_duration=60) for offset in range(5)]
        result = WeeklyDurationValidator().validate(employee, shifts)
        assert result.violations == []
