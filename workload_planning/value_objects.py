"""
Reference data for workload planning.

Work categories, shift types, skill levels and forecast periods are closed
sets. Each member's coefficients live in an immutable profile table keyed
by the member, so adding a coefficient means editing one table row.
"""

import math
from dataclasses import dataclass
from datetime import time
from enum import Enum
from typing import Any, Dict, FrozenSet

from .exceptions import InvalidInputError


class LookupEnum(str, Enum):
    """String enum with tolerant parsing of external values."""

    @classmethod
    def parse(cls, value: Any) -> 'LookupEnum':
        """
        Parse an external value (member, name or case-insensitive string).

        Raises:
            InvalidInputError: If the value names no member
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise InvalidInputError(
                cls.__name__, value, f"must be one of {[m.value for m in cls]}"
            ) from None

    @property
    def rank(self) -> int:
        """Declaration order of the member."""
        return list(type(self)).index(self)


@dataclass(frozen=True)
class CategoryProfile:
    description: str
    standard_rate: float  # units per hour
    core: bool


@dataclass(frozen=True)
class ShiftProfile:
    description: str
    start_time: time
    end_time: time
    duration_hours: int


@dataclass(frozen=True)
class SkillProfile:
    description: str
    productivity_multiplier: float


@dataclass(frozen=True)
class PeriodProfile:
    description: str
    hours_per_period: int
    periods_ahead: int


class WorkloadCategory(LookupEnum):
    """Type of warehouse work."""

    RECEIVING = "RECEIVING"
    PICKING = "PICKING"
    PACKING = "PACKING"
    REPLENISHMENT = "REPLENISHMENT"
    CYCLE_COUNTING = "CYCLE_COUNTING"
    RETURNS = "RETURNS"
    VALUE_ADDED = "VALUE_ADDED"
    MAINTENANCE = "MAINTENANCE"

    @property
    def description(self) -> str:
        return _CATEGORY_PROFILES[self].description

    @property
    def standard_rate(self) -> float:
        return _CATEGORY_PROFILES[self].standard_rate

    @property
    def is_core_operation(self) -> bool:
        return _CATEGORY_PROFILES[self].core

    def calculate_labor_hours(self, volume: int) -> float:
        """Labor hours needed to process volume at the standard rate (0 when rate is 0)."""
        if self.standard_rate == 0:
            return 0.0
        return volume / self.standard_rate

    def calculate_required_workers(self, volume: int, shift_hours: int) -> int:
        """Workers needed to cover volume with shifts of the given length."""
        return math.ceil(self.calculate_labor_hours(volume) / shift_hours)


class ShiftType(LookupEnum):
    """Warehouse operating shift."""

    DAY_SHIFT = "DAY_SHIFT"
    EVENING_SHIFT = "EVENING_SHIFT"
    NIGHT_SHIFT = "NIGHT_SHIFT"
    MORNING_SHIFT = "MORNING_SHIFT"
    AFTERNOON_SHIFT = "AFTERNOON_SHIFT"
    OVERNIGHT_SHIFT = "OVERNIGHT_SHIFT"
    WEEKEND_DAY = "WEEKEND_DAY"
    WEEKEND_NIGHT = "WEEKEND_NIGHT"

    @property
    def description(self) -> str:
        return _SHIFT_PROFILES[self].description

    @property
    def start_time(self) -> time:
        return _SHIFT_PROFILES[self].start_time

    @property
    def end_time(self) -> time:
        return _SHIFT_PROFILES[self].end_time

    @property
    def duration_hours(self) -> int:
        return _SHIFT_PROFILES[self].duration_hours

    @property
    def is_night_shift(self) -> bool:
        return self in _NIGHT_SHIFTS

    @property
    def is_weekend_shift(self) -> bool:
        return self in _WEEKEND_SHIFTS

    @property
    def premium_multiplier(self) -> float:
        """Labor cost multiplier: night 25%, weekend 50%, else standard."""
        if self.is_night_shift:
            return 1.25
        if self.is_weekend_shift:
            return 1.50
        return 1.0


class SkillLevel(LookupEnum):
    """Worker skill and experience level, lowest rank first."""

    TRAINEE = "TRAINEE"
    JUNIOR = "JUNIOR"
    INTERMEDIATE = "INTERMEDIATE"
    SENIOR = "SENIOR"
    EXPERT = "EXPERT"
    LEAD = "LEAD"

    @property
    def description(self) -> str:
        return _SKILL_PROFILES[self].description

    @property
    def productivity_multiplier(self) -> float:
        return _SKILL_PROFILES[self].productivity_multiplier

    def calculate_effective_rate(self, standard_rate: float) -> float:
        return standard_rate * self.productivity_multiplier

    @property
    def can_train_others(self) -> bool:
        return self in (SkillLevel.SENIOR, SkillLevel.EXPERT, SkillLevel.LEAD)

    @property
    def can_lead_team(self) -> bool:
        return self in (SkillLevel.LEAD, SkillLevel.EXPERT)


class ForecastPeriod(LookupEnum):
    """Time horizon for demand forecasting."""

    HOURLY = "HOURLY"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"

    @property
    def description(self) -> str:
        return _PERIOD_PROFILES[self].description

    @property
    def hours_per_period(self) -> int:
        return _PERIOD_PROFILES[self].hours_per_period

    @property
    def periods_ahead(self) -> int:
        return _PERIOD_PROFILES[self].periods_ahead

    @property
    def total_forecast_hours(self) -> int:
        return self.hours_per_period * self.periods_ahead

    @property
    def refresh_threshold_hours(self) -> int:
        """Age in hours after which a forecast of this period is stale."""
        return self.hours_per_period

    @property
    def is_short_term(self) -> bool:
        return self in (ForecastPeriod.HOURLY, ForecastPeriod.DAILY)

    @property
    def is_long_term(self) -> bool:
        return self in (ForecastPeriod.WEEKLY, ForecastPeriod.MONTHLY)


_CATEGORY_PROFILES: Dict[WorkloadCategory, CategoryProfile] = {
    WorkloadCategory.RECEIVING: CategoryProfile("Receiving and putaway", 15.0, True),
    WorkloadCategory.PICKING: CategoryProfile("Order picking", 25.0, True),
    WorkloadCategory.PACKING: CategoryProfile("Packing and shipping", 20.0, True),
    WorkloadCategory.REPLENISHMENT: CategoryProfile("Stock replenishment", 10.0, True),
    WorkloadCategory.CYCLE_COUNTING: CategoryProfile("Cycle counting", 5.0, False),
    WorkloadCategory.RETURNS: CategoryProfile("Returns processing", 8.0, False),
    WorkloadCategory.VALUE_ADDED: CategoryProfile("Value-added services", 12.0, False),
    WorkloadCategory.MAINTENANCE: CategoryProfile("Equipment maintenance", 5.0, False),
}

_SHIFT_PROFILES: Dict[ShiftType, ShiftProfile] = {
    ShiftType.DAY_SHIFT: ShiftProfile("Day Shift", time(6, 0), time(14, 0), 8),
    ShiftType.EVENING_SHIFT: ShiftProfile("Evening Shift", time(14, 0), time(22, 0), 8),
    ShiftType.NIGHT_SHIFT: ShiftProfile("Night Shift", time(22, 0), time(6, 0), 8),
    ShiftType.MORNING_SHIFT: ShiftProfile("Morning Shift", time(8, 0), time(17, 0), 8),
    ShiftType.AFTERNOON_SHIFT: ShiftProfile("Afternoon Shift", time(12, 0), time(21, 0), 8),
    ShiftType.OVERNIGHT_SHIFT: ShiftProfile("Overnight Shift", time(0, 0), time(8, 0), 8),
    ShiftType.WEEKEND_DAY: ShiftProfile("Weekend Day", time(7, 0), time(15, 0), 8),
    ShiftType.WEEKEND_NIGHT: ShiftProfile("Weekend Night", time(15, 0), time(23, 0), 8),
}

_NIGHT_SHIFTS: FrozenSet[ShiftType] = frozenset(
    {ShiftType.NIGHT_SHIFT, ShiftType.OVERNIGHT_SHIFT, ShiftType.WEEKEND_NIGHT}
)
_WEEKEND_SHIFTS: FrozenSet[ShiftType] = frozenset(
    {ShiftType.WEEKEND_DAY, ShiftType.WEEKEND_NIGHT}
)

_SKILL_PROFILES: Dict[SkillLevel, SkillProfile] = {
    SkillLevel.TRAINEE: SkillProfile("Trainee", 0.6),
    SkillLevel.JUNIOR: SkillProfile("Junior", 0.8),
    SkillLevel.INTERMEDIATE: SkillProfile("Intermediate", 1.0),
    SkillLevel.SENIOR: SkillProfile("Senior", 1.2),
    SkillLevel.EXPERT: SkillProfile("Expert", 1.4),
    SkillLevel.LEAD: SkillProfile("Team Lead", 1.3),
}

_PERIOD_PROFILES: Dict[ForecastPeriod, PeriodProfile] = {
    ForecastPeriod.HOURLY: PeriodProfile("Hourly forecast", 1, 24),
    ForecastPeriod.DAILY: PeriodProfile("Daily forecast", 24, 30),
    ForecastPeriod.WEEKLY: PeriodProfile("Weekly forecast", 168, 12),
    ForecastPeriod.MONTHLY: PeriodProfile("Monthly forecast", 720, 6),
}
