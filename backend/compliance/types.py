"""Type definitions for the compliance module."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from utils.time import duration_minutes, effective_minutes, time_to_minutes


class EmployeeCategory(str, Enum):
    """Professional categories of pharmacy staff."""
    PHARMACIEN_TITULAIRE = "pharmacien_titulaire"  # Licensed pharmacist, owner
    PHARMACIEN_ADJOINT = "pharmacien_adjoint"  # Licensed pharmacist, associate
    PREPARATEUR = "preparateur"  # Pharmacy technician
    RAYONNISTE = "rayonniste"  # Stock clerk
    APPRENTI = "apprenti"
    ETUDIANT = "etudiant"

    @property
    def is_pharmacist(self) -> bool:
        return self in (EmployeeCategory.PHARMACIEN_TITULAIRE, EmployeeCategory.PHARMACIEN_ADJOINT)


class ShiftType(str, Enum):
    """Kinds of shift records."""
    REGULAR = "regular"
    MORNING = "morning"
    AFTERNOON = "afternoon"
    SPLIT = "split"
    GARDE = "garde"  # Sunday / holiday guard
    ASTREINTE = "astreinte"  # On-call
    FORMATION = "formation"  # Training
    CONGE = "conge"  # Paid leave
    MALADIE = "maladie"  # Sick leave
    RTT = "rtt"  # Reduced-working-time day off

    @property
    def is_leave(self) -> bool:
        return self in (ShiftType.CONGE, ShiftType.MALADIE, ShiftType.RTT)


class ShiftStatus(str, Enum):
    """Lifecycle status of a shift."""
    DRAFT = "draft"
    PUBLISHED = "published"
    CONFIRMED = "confirmed"
    MODIFIED = "modified"
    CANCELLED = "cancelled"


class ViolationType(str, Enum):
    """Types of compliance violations."""
    REPOS_HEBDOMADAIRE = "repos_hebdomadaire"  # Weekly consecutive rest
    AMPLITUDE_JOURNALIERE = "amplitude_journaliere"  # First start to last end span
    DUREE_JOURNALIERE = "duree_journaliere"  # Daily effective hours cap
    PAUSE_OBLIGATOIRE = "pause_obligatoire"  # Mandatory break
    REPOS_QUOTIDIEN = "repos_quotidien"  # Rest between two working days
    DUREE_HEBDOMADAIRE = "duree_hebdomadaire"  # Absolute weekly cap
    COUVERTURE_PHARMACIEN = "couverture_pharmacien"  # Pharmacist presence
    DEPASSEMENT_CONTRAT = "depassement_contrat"  # Above contracted hours


class ViolationSeverity(str, Enum):
    """Severity levels for violations."""
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class ScoreBand(str, Enum):
    """Label bands for a 0-100 compliance score."""
    EXCELLENT = "Excellent"
    GOOD = "Good"
    NEEDS_ATTENTION = "Needs attention"
    NON_COMPLIANT = "Non-compliant"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class Employee:
    """Read-only employee snapshot supplied by the caller."""
    id: str
    first_name: str
    last_name: str = ""
    category: EmployeeCategory = EmployeeCategory.PREPARATEUR
    contract_hours: float = 35.0
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_pharmacist(self) -> bool:
        return self.category.is_pharmacist


@dataclass(frozen=True)
class Shift:
    """Read-only shift snapshot supplied by the caller."""
    id: str
    employee_id: str
    date: str  # ISO date string
    start_time: str  # HH:MM format
    end_time: str  # HH:MM format
    break_duration: int = 0  # minutes
    type: ShiftType = ShiftType.REGULAR
    status: ShiftStatus = ShiftStatus.PUBLISHED

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        """End as an offset from the shift's own midnight; past 1440 when it crosses midnight."""
        return self.start_minutes + self.duration_minutes

    @property
    def duration_minutes(self) -> int:
        return duration_minutes(self.start_time, self.end_time)

    @property
    def effective_minutes(self) -> int:
        return effective_minutes(self.start_time, self.end_time, self.break_duration)

    @property
    def effective_hours(self) -> float:
        return self.effective_minutes / 60

    @property
    def is_leave(self) -> bool:
        return self.type.is_leave

    @property
    def is_cancelled(self) -> bool:
        return self.status == ShiftStatus.CANCELLED


@dataclass(frozen=True)
class TimeSlot:
    """An opening interval within a day."""
    start: str  # HH:MM format
    end: str  # HH:MM format


@dataclass(frozen=True)
class DayOpeningHours:
    """Opening hours of a single weekday."""
    is_open: bool = True
    slots: tuple[TimeSlot, ...] = ()


# 0 = Monday ... 6 = Sunday
WeeklyOpeningHours = dict[int, DayOpeningHours]


@dataclass(frozen=True)
class LegalLimits:
    """Labor-law limits applied by the validators."""
    weekly_rest_hours: float = 35.0
    min_worked_days_for_weekly_rest: int = 6
    max_daily_hours: float = 10.0
    break_threshold_hours: float = 6.0
    min_break_minutes: int = 20
    min_daily_rest_hours: float = 11.0
    max_weekly_hours: float = 48.0
    min_pharmacists: int = 1
    coverage_step_minutes: int = 15
    max_daily_amplitude_hours: Optional[float] = None  # None disables the check
    flag_contract_overtime: bool = False

    def __post_init__(self):
        if self.coverage_step_minutes <= 0:
            raise ValueError(f"coverage_step_minutes must be positive, got {self.coverage_step_minutes}")

    def with_overrides(self, **overrides) -> "LegalLimits":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> dict:
        return {
            "weekly_rest_hours": self.weekly_rest_hours,
            "min_worked_days_for_weekly_rest": self.min_worked_days_for_weekly_rest,
            "max_daily_hours": self.max_daily_hours,
            "break_threshold_hours": self.break_threshold_hours,
            "min_break_minutes": self.min_break_minutes,
            "min_daily_rest_hours": self.min_daily_rest_hours,
            "max_weekly_hours": self.max_weekly_hours,
            "min_pharmacists": self.min_pharmacists,
            "coverage_step_minutes": self.coverage_step_minutes,
            "max_daily_amplitude_hours": self.max_daily_amplitude_hours,
            "flag_contract_overtime": self.flag_contract_overtime,
        }


@dataclass(frozen=True)
class Violation:
    """A single compliance violation."""
    id: str
    rule_type: ViolationType
    severity: ViolationSeverity
    employee_ids: tuple[str, ...]
    shift_ids: tuple[str, ...]
    date: str  # ISO date, or "start → end" for a span of days
    message: str
    actual_value: float
    legal_limit: float
    unit: str = "h"
    employee_name: str = ""

    @property
    def employee_id(self) -> Optional[str]:
        return self.employee_ids[0] if self.employee_ids else None

    def concerns(self, employee_id: str) -> bool:
        return employee_id in self.employee_ids

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "id": self.id,
            "rule_type": self.rule_type.value,
            "severity": self.severity.value,
            "employee_ids": list(self.employee_ids),
            "employee_name": self.employee_name,
            "shift_ids": list(self.shift_ids),
            "date": self.date,
            "message": self.message,
            "actual_value": self.actual_value,
            "legal_limit": self.legal_limit,
            "unit": self.unit,
        }


@dataclass
class WeeklyRestResult:
    valid: bool = True
    longest_rest_hours: float = 168.0
    violations: list[Violation] = field(default_factory=list)


@dataclass
class DailyLimitResult:
    valid: bool = True
    daily_hours: dict[str, float] = field(default_factory=dict)  # date -> effective hours
    violations: list[Violation] = field(default_factory=list)


@dataclass
class InterDayRestResult:
    valid: bool = True
    violations: list[Violation] = field(default_factory=list)


@dataclass
class WeeklyDurationResult:
    valid: bool = True
    total_hours: float = 0.0
    violations: list[Violation] = field(default_factory=list)


@dataclass(frozen=True)
class CoverageSpan:
    """A contiguous stretch of opening hours, covered or not."""
    date: str
    start: str
    end: str
    duration_minutes: int

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "start": self.start,
            "end": self.end,
            "duration_minutes": self.duration_minutes,
        }


@dataclass
class CoverageResult:
    valid: bool = True
    coverage_percent: int = 100
    uncovered_spans: list[CoverageSpan] = field(default_factory=list)
    covered_spans: list[CoverageSpan] = field(default_factory=list)
    violations: list[Violation] = field(default_factory=list)


@dataclass(frozen=True)
class ComplianceScore:
    """Severity-weighted score derived from a violation set."""
    score: int
    band: ScoreBand
    total_violations: int
    by_severity: dict[str, int]
    by_type: dict[str, int]

    @property
    def label(self) -> str:
        return self.band.value

    @property
    def critical_count(self) -> int:
        return self.by_severity[ViolationSeverity.CRITICAL.value]

    @property
    def warning_count(self) -> int:
        return self.by_severity[ViolationSeverity.WARNING.value]

    @property
    def info_count(self) -> int:
        return self.by_severity[ViolationSeverity.INFO.value]

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "label": self.label,
            "total_violations": self.total_violations,
            "by_severity": dict(self.by_severity),
            "by_type": dict(self.by_type),
        }


@dataclass
class EmployeeCompliance:
    """Compliance summary of one employee over the period."""
    employee: Employee
    score: int
    violations: list[Violation] = field(default_factory=list)
    weekly_hours: float = 0.0  # effective hours over the analyzed weeks
    days_worked: int = 0
    weeks_analyzed: int = 1
    weekly_rest_valid: bool = True
    daily_limit_valid: bool = True
    inter_day_rest_valid: bool = True
    weekly_duration_valid: bool = True

    @property
    def contract_hours(self) -> float:
        return self.employee.contract_hours

    @property
    def hours_difference(self) -> float:
        return self.weekly_hours - self.employee.contract_hours * self.weeks_analyzed

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee.id,
            "employee_name": self.employee.full_name,
            "category": self.employee.category.value,
            "score": self.score,
            "violations": [v.to_dict() for v in self.violations],
            "weekly_hours": round(self.weekly_hours, 2),
            "contract_hours": self.contract_hours,
            "hours_difference": round(self.hours_difference, 2),
            "days_worked": self.days_worked,
            "weeks_analyzed": self.weeks_analyzed,
            "weekly_rest_valid": self.weekly_rest_valid,
            "daily_limit_valid": self.daily_limit_valid,
            "inter_day_rest_valid": self.inter_day_rest_valid,
            "weekly_duration_valid": self.weekly_duration_valid,
        }


@dataclass
class ComplianceReport:
    """Result of a full compliance run."""
    period_start: str
    period_end: str
    score: ComplianceScore
    violations: list[Violation] = field(default_factory=list)
    employee_compliance: list[EmployeeCompliance] = field(default_factory=list)
    uncovered_spans: list[CoverageSpan] = field(default_factory=list)
    pharmacist_coverage_percent: int = 100
    shifts_analyzed: int = 0
    employees_analyzed: int = 0
    generated_at: str = ""

    @property
    def is_compliant(self) -> bool:
        return self.score.critical_count == 0

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "period": {"start": self.period_start, "end": self.period_end},
            "score": self.score.to_dict(),
            "is_compliant": self.is_compliant,
            "violations": [v.to_dict() for v in self.violations],
            "employee_compliance": [e.to_dict() for e in self.employee_compliance],
            "uncovered_spans": [s.to_dict() for s in self.uncovered_spans],
            "pharmacist_coverage_percent": self.pharmacist_coverage_percent,
            "shifts_analyzed": self.shifts_analyzed,
            "employees_analyzed": self.employees_analyzed,
            "generated_at": self.generated_at,
        }


@dataclass(frozen=True)
class QuickCheckResult:
    """Lightweight score for dashboard widgets."""
    score: int
    label: str
    critical_count: int
    warning_count: int
    info_count: int = 0

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "label": self.label,
            "critical_count": self.critical_count,
            "warning_count": self.warning_count,
            "info_count": self.info_count,
        }
