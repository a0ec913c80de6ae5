from datetime import date
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from compliance.types import (
    DayOpeningHours,
    Employee,
    EmployeeCategory,
    Shift,
    ShiftStatus,
    ShiftType,
    TimeSlot,
    WeeklyOpeningHours,
)
from rotation.types import DutyType, RotationAssignment, RotationConfig
from utils.dates import day_name


def _check_iso_date(value: str) -> str:
    date.fromisoformat(value)
    return value


TimeStr = Annotated[str, Field(pattern=r"^(([01]\d|2[0-3]):[0-5]\d|24:00)$")]  # "HH:MM"
DateStr = Annotated[str, Field(pattern=r"^\d{4}-\d{2}-\d{2}$"), AfterValidator(_check_iso_date)]


# ---- Requests ----


class EmployeeSchema(BaseModel):
    id: str
    first_name: str
    last_name: str = ""
    category: EmployeeCategory = EmployeeCategory.PREPARATEUR
    contract_hours: float = Field(35.0, ge=0)
    is_active: bool = True

    def to_domain(self) -> Employee:
        return Employee(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            category=self.category,
            contract_hours=self.contract_hours,
            is_active=self.is_active,
        )


class ShiftSchema(BaseModel):
    id: str
    employee_id: str
    date: DateStr
    start_time: TimeStr
    end_time: TimeStr
    break_duration: int = Field(0, ge=0)  # minutes
    type: ShiftType = ShiftType.REGULAR
    status: ShiftStatus = ShiftStatus.PUBLISHED

    def to_domain(self) -> Shift:
        return Shift(
            id=self.id,
            employee_id=self.employee_id,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            break_duration=self.break_duration,
            type=self.type,
            status=self.status,
        )


class TimeSlotSchema(BaseModel):
    start: TimeStr
    end: TimeStr


class DayOpeningHoursSchema(BaseModel):
    is_open: bool = True
    slots: list[TimeSlotSchema] = []

    def to_domain(self) -> DayOpeningHours:
        return DayOpeningHours(
            is_open=self.is_open,
            slots=tuple(TimeSlot(start=s.start, end=s.end) for s in self.slots),
        )


def opening_hours_to_domain(
    opening_hours: dict[int, DayOpeningHoursSchema] | None,
) -> WeeklyOpeningHours | None:
    if opening_hours is None:
        return None
    return {day: hours.to_domain() for day, hours in opening_hours.items()}


class ComplianceReportRequest(BaseModel):
    period_start: DateStr
    period_end: DateStr
    employees: list[EmployeeSchema]
    shifts: list[ShiftSchema]
    opening_hours: dict[Annotated[int, Field(ge=0, le=6)], DayOpeningHoursSchema] | None = None  # 0 = Monday


class QuickCheckRequest(BaseModel):
    employees: list[EmployeeSchema]
    shifts: list[ShiftSchema]
    opening_hours: dict[Annotated[int, Field(ge=0, le=6)], DayOpeningHoursSchema] | None = None
    period_start: DateStr | None = None
    period_end: DateStr | None = None


class RotationConfigSchema(BaseModel):
    start_date: DateStr
    end_date: DateStr
    include_sundays: bool = True
    include_nights: bool = False
    include_holidays: bool = True
    night_start: TimeStr = "20:00"
    night_end: TimeStr = "08:00"
    sunday_start: TimeStr = "09:00"
    sunday_end: TimeStr = "20:00"
    public_holidays: list[DateStr] | None = None

    def to_domain(self) -> RotationConfig:
        return RotationConfig(
            start_date=self.start_date,
            end_date=self.end_date,
            include_sundays=self.include_sundays,
            include_nights=self.include_nights,
            include_holidays=self.include_holidays,
            night_start=self.night_start,
            night_end=self.night_end,
            sunday_start=self.sunday_start,
            sunday_end=self.sunday_end,
            public_holidays=tuple(self.public_holidays) if self.public_holidays is not None else None,
        )


class RotationAssignmentSchema(BaseModel):
    date: DateStr
    day_name: str = ""  # Derived from the date when empty
    type: DutyType
    employee_id: str
    employee_name: str = ""
    start_time: TimeStr
    end_time: TimeStr
    has_conflict: bool = False
    conflict_reason: str | None = None

    def to_domain(self) -> RotationAssignment:
        return RotationAssignment(
            date=self.date,
            day_name=self.day_name or day_name(self.date),
            type=self.type,
            employee_id=self.employee_id,
            employee_name=self.employee_name,
            start_time=self.start_time,
            end_time=self.end_time,
            has_conflict=self.has_conflict,
            conflict_reason=self.conflict_reason,
        )


class RotationRequest(BaseModel):
    config: RotationConfigSchema
    employees: list[EmployeeSchema]
    existing_assignments: list[RotationAssignmentSchema] = []
    shifts: list[ShiftSchema] = []
    today: DateStr | None = None


class RotationStatsRequest(BaseModel):
    employees: list[EmployeeSchema]
    assignments: list[RotationAssignmentSchema] = []
    today: DateStr | None = None


# ---- Responses ----


class HealthResponse(BaseModel):
    status: str


class LegalLimitsResponse(BaseModel):
    weekly_rest_hours: float
    min_worked_days_for_weekly_rest: int
    max_daily_hours: float
    break_threshold_hours: float
    min_break_minutes: int
    min_daily_rest_hours: float
    max_weekly_hours: float
    min_pharmacists: int
    coverage_step_minutes: int
    max_daily_amplitude_hours: float | None = None
    flag_contract_overtime: bool = False


class ViolationResponse(BaseModel):
    id: str
    rule_type: str
    severity: str  # "critical", "warning", "info"
    employee_ids: list[str]
    employee_name: str
    shift_ids: list[str]
    date: str
    message: str
    actual_value: float
    legal_limit: float
    unit: str


class ComplianceScoreResponse(BaseModel):
    score: int
    label: str
    total_violations: int
    by_severity: dict[str, int]
    by_type: dict[str, int]


class EmployeeComplianceResponse(BaseModel):
    employee_id: str
    employee_name: str
    category: str
    score: int
    violations: list[ViolationResponse]
    weekly_hours: float
    contract_hours: float
    hours_difference: float
    days_worked: int
    weeks_analyzed: int
    weekly_rest_valid: bool
    daily_limit_valid: bool
    inter_day_rest_valid: bool
    weekly_duration_valid: bool


class CoverageSpanResponse(BaseModel):
    date: str
    start: str
    end: str
    duration_minutes: int


class PeriodResponse(BaseModel):
    start: str
    end: str


class ComplianceReportResponse(BaseModel):
    period: PeriodResponse
    score: ComplianceScoreResponse
    is_compliant: bool
    violations: list[ViolationResponse]
    employee_compliance: list[EmployeeComplianceResponse]
    uncovered_spans: list[CoverageSpanResponse]
    pharmacist_coverage_percent: int
    shifts_analyzed: int
    employees_analyzed: int
    generated_at: str


class QuickCheckResponse(BaseModel):
    score: int
    label: str
    critical_count: int
    warning_count: int
    info_count: int = 0


class DutyDateResponse(BaseModel):
    date: str
    day_name: str
    type: str
    start_time: str
    end_time: str


class RotationAssignmentResponse(DutyDateResponse):
    employee_id: str
    employee_name: str
    has_conflict: bool = False
    conflict_reason: str | None = None


class RotationConflictResponse(BaseModel):
    date: str
    category: str
    description: str
    employee_id: str | None = None
    employee_name: str | None = None
    duty_type: str | None = None


class PharmacistStatsResponse(BaseModel):
    employee_id: str
    employee_name: str
    total_duties: int
    night_duties: int
    sunday_duties: int
    holiday_duties: int
    last_duty_date: str | None = None
    next_duty_date: str | None = None


class RotationResultResponse(BaseModel):
    assignments: list[RotationAssignmentResponse]
    conflicts: list[RotationConflictResponse]
    stats: list[PharmacistStatsResponse]
    unfilled: list[DutyDateResponse] = []
