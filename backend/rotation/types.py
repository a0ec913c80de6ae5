"""Type definitions for the duty rotation module."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class DutyType(str, Enum):
    """Kinds of pharmacy duty."""
    NUIT = "nuit"  # Night
    DIMANCHE = "dimanche"  # Sunday
    FERIE = "ferie"  # Public holiday


class ConflictCategory(str, Enum):
    """Why a pharmacist could not take a duty date."""
    PLANNING = "planning"  # Ordinary shift that day
    CONGE = "conge"  # On leave that day
    AUTRE_GARDE = "autre_garde"  # Already on duty that day
    AUCUN_DISPONIBLE = "aucun_disponible"  # Nobody could take the date


@dataclass(frozen=True)
class RotationConfig:
    """Rotation window and the duty categories to cover."""
    start_date: str  # ISO date string
    end_date: str  # ISO date string
    include_sundays: bool = True
    include_nights: bool = False
    include_holidays: bool = True
    night_start: str = "20:00"
    night_end: str = "08:00"
    sunday_start: str = "09:00"  # Also used for holidays
    sunday_end: str = "20:00"
    public_holidays: Optional[tuple[str, ...]] = None  # None uses the French calendar


@dataclass(frozen=True)
class DutyDate:
    """A date and duty window that needs a pharmacist."""
    date: str
    day_name: str
    type: DutyType
    start_time: str
    end_time: str

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "day_name": self.day_name,
            "type": self.type.value,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }


@dataclass(frozen=True)
class RotationAssignment:
    """A pharmacist assigned to a duty date."""
    date: str
    day_name: str
    type: DutyType
    employee_id: str
    employee_name: str
    start_time: str
    end_time: str
    has_conflict: bool = False
    conflict_reason: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "date": self.date,
            "day_name": self.day_name,
            "type": self.type.value,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "has_conflict": self.has_conflict,
            "conflict_reason": self.conflict_reason,
        }


@dataclass(frozen=True)
class RotationConflict:
    """A rejected attempt, or a date nobody could take."""
    date: str
    category: ConflictCategory
    description: str
    employee_id: Optional[str] = None
    employee_name: Optional[str] = None
    duty_type: Optional[DutyType] = None

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "category": self.category.value,
            "description": self.description,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "duty_type": self.duty_type.value if self.duty_type else None,
        }


@dataclass(frozen=True)
class PharmacistStats:
    """Duty counters of one eligible pharmacist."""
    employee_id: str
    employee_name: str
    total_duties: int = 0
    night_duties: int = 0
    sunday_duties: int = 0
    holiday_duties: int = 0
    last_duty_date: Optional[str] = None
    next_duty_date: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "total_duties": self.total_duties,
            "night_duties": self.night_duties,
            "sunday_duties": self.sunday_duties,
            "holiday_duties": self.holiday_duties,
            "last_duty_date": self.last_duty_date,
            "next_duty_date": self.next_duty_date,
        }


@dataclass
class RotationResult:
    """Result of a rotation run; partial results are kept together."""
    assignments: list[RotationAssignment] = field(default_factory=list)
    conflicts: list[RotationConflict] = field(default_factory=list)
    stats: list[PharmacistStats] = field(default_factory=list)
    unfilled: list[DutyDate] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "assignments": [a.to_dict() for a in self.assignments],
            "conflicts": [c.to_dict() for c in self.conflicts],
            "stats": [s.to_dict() for s in self.stats],
            "unfilled": [d.to_dict() for d in self.unfilled],
        }
