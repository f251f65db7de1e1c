"""
Data models for labor planning: worker capacity and the workload plan.
"""

import math
from typing import List, Dict, Any, Optional
from datetime import date, datetime
from dataclasses import dataclass, field
from enum import Enum
import pandas as pd

from ..config import AVERAGE_HOURLY_RATE, OVERSTAFFED_THRESHOLD, UNDERSTAFFED_THRESHOLD
from ..exceptions import InvalidInputError, InvalidTransitionError
from ..value_objects import ShiftType, SkillLevel, WorkloadCategory


@dataclass
class WorkerCapacity:
    """A worker's skill level, productivity overrides and cost."""

    worker_id: str
    name: str
    skill_level: SkillLevel
    max_hours_per_week: int = 40
    is_full_time: bool = True
    hourly_rate: float = AVERAGE_HOURLY_RATE
    productivity_rates: Dict[WorkloadCategory, float] = field(default_factory=dict)

    def __post_init__(self):
        self.skill_level = SkillLevel.parse(self.skill_level)
        self.productivity_rates = {
            WorkloadCategory.parse(category): float(rate)
            for category, rate in self.productivity_rates.items()
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'WorkerCapacity':
        """Create WorkerCapacity instance from dictionary."""
        return cls(
            worker_id=data['worker_id'],
            name=data['name'],
            skill_level=data['skill_level'],
            max_hours_per_week=data.get('max_hours_per_week', 40),
            is_full_time=data.get('is_full_time', True),
            hourly_rate=data.get('hourly_rate', AVERAGE_HOURLY_RATE),
            productivity_rates=data.get('productivity_rates', {}),
        )

    def set_productivity_rate(self, category: WorkloadCategory, rate: float) -> None:
        self.productivity_rates[WorkloadCategory.parse(category)] = float(rate)

    def get_effective_productivity_rate(self, category: WorkloadCategory) -> float:
        """Override rate (or the category's standard rate) scaled by skill."""
        base_rate = self.productivity_rates.get(category, category.standard_rate)
        return self.skill_level.calculate_effective_rate(base_rate)

    def calculate_output(self, category: WorkloadCategory, hours: float) -> float:
        return self.get_effective_productivity_rate(category) * hours

    def calculate_labor_cost(self, hours: float, shift_premium_multiplier: float = 1.0) -> float:
        return hours * self.hourly_rate * shift_premium_multiplier

    def can_perform(self, category: WorkloadCategory) -> bool:
        """Explicit override, or a core category for anyone above trainee."""
        return (category in self.productivity_rates
                or (category.is_core_operation and self.skill_level != SkillLevel.TRAINEE))

    def to_dict(self) -> Dict:
        """Convert to dictionary representation."""
        return {
            'worker_id': self.worker_id,
            'name': self.name,
            'skill_level': self.skill_level.value,
            'max_hours_per_week': self.max_hours_per_week,
            'is_full_time': self.is_full_time,
            'hourly_rate': self.hourly_rate,
            'productivity_rates': {c.value: r for c, r in self.productivity_rates.items()},
        }


@dataclass(frozen=True)
class ShiftAssignment:
    """One worker's planned hours on a shift for a primary category."""

    worker_id: str
    worker_name: str
    primary_category: WorkloadCategory
    planned_hours: int

    def to_dict(self) -> Dict:
        return {
            'worker_id': self.worker_id,
            'worker_name': self.worker_name,
            'primary_category': self.primary_category.value,
            'planned_hours': self.planned_hours,
        }


class PlanStatus(str, Enum):
    DRAFT = "DRAFT"
    APPROVED = "APPROVED"
    PUBLISHED = "PUBLISHED"
    CANCELLED = "CANCELLED"


class WorkloadPlan:
    """
    Aggregate root tracking planned volume against assigned labor.

    The four capacity metrics (required hours, available hours, utilization
    and estimated cost) are recomputed by every mutator before it returns.

    Utilization is required hours relative to available hours. Below 85%
    the plan counts as understaffed and above 110% as overstaffed, exactly
    as those thresholds are applied to this ratio.
    """

    def __init__(self,
                 plan_id: str,
                 warehouse_id: str,
                 plan_date: date,
                 notes: Optional[str] = None):
        now = datetime.now()
        self.plan_id = plan_id
        self.warehouse_id = warehouse_id
        self.plan_date = plan_date
        self.created_at = now
        self.updated_at = now
        self.status = PlanStatus.DRAFT
        self.notes = notes
        self._planned_volumes: Dict[WorkloadCategory, int] = {}
        self._shift_assignments: Dict[ShiftType, List[ShiftAssignment]] = {}
        self._total_required_labor_hours = 0
        self._total_available_labor_hours = 0
        self._utilization_percentage = 0.0
        self._estimated_labor_cost = 0.0

    @classmethod
    def create(cls,
               plan_id: str,
               warehouse_id: str,
               plan_date: date,
               notes: Optional[str] = None) -> 'WorkloadPlan':
        """Create a DRAFT plan with zeroed metrics."""
        for field_name, value in (('plan_id', plan_id),
                                  ('warehouse_id', warehouse_id),
                                  ('plan_date', plan_date)):
            if value is None or value == '':
                raise InvalidInputError(field_name, value, "is required")
        return cls(plan_id, warehouse_id, plan_date, notes)

    # Derived metrics

    @property
    def total_required_labor_hours(self) -> int:
        return self._total_required_labor_hours

    @property
    def total_available_labor_hours(self) -> int:
        return self._total_available_labor_hours

    @property
    def utilization_percentage(self) -> float:
        return self._utilization_percentage

    @property
    def estimated_labor_cost(self) -> float:
        return self._estimated_labor_cost

    @property
    def planned_volumes(self) -> Dict[WorkloadCategory, int]:
        return dict(self._planned_volumes)

    @property
    def shift_assignments(self) -> Dict[ShiftType, List[ShiftAssignment]]:
        return {shift: list(records) for shift, records in self._shift_assignments.items()}

    # Mutators

    def set_planned_volume(self, category: WorkloadCategory, volume: int) -> None:
        category = WorkloadCategory.parse(category)
        if volume is None or volume < 0:
            raise InvalidInputError('volume', volume, "must be non-negative")
        if volume != int(volume):
            raise InvalidInputError('volume', volume, "must be a whole number")

        self._planned_volumes[category] = int(volume)
        self._touch()

    def assign_worker_to_shift(self,
                               shift: ShiftType,
                               worker_id: str,
                               worker_name: str,
                               primary_category: WorkloadCategory,
                               planned_hours: int) -> ShiftAssignment:
        """
        Append an assignment record to a shift.

        The same worker may be assigned more than once; each call adds a
        separate record and no double-booking check is made.
        """
        shift = ShiftType.parse(shift)
        primary_category = WorkloadCategory.parse(primary_category)
        if not worker_id:
            raise InvalidInputError('worker_id', worker_id, "is required")
        if planned_hours is None or planned_hours <= 0:
            raise InvalidInputError('planned_hours', planned_hours, "must be positive")

        assignment = ShiftAssignment(worker_id, worker_name, primary_category, int(planned_hours))
        self._shift_assignments.setdefault(shift, []).append(assignment)
        self._touch()
        return assignment

    def remove_worker_from_shift(self, shift: ShiftType, worker_id: str) -> int:
        """
        Remove every record for worker_id on shift.

        Returns:
            Number of records removed (0 leaves the plan untouched)
        """
        shift = ShiftType.parse(shift)
        records = self._shift_assignments.get(shift, [])
        kept = [a for a in records if a.worker_id != worker_id]
        removed = len(records) - len(kept)
        if removed:
            self._shift_assignments[shift] = kept
            self._touch()
        return removed

    def approve(self) -> None:
        if self.status != PlanStatus.DRAFT:
            raise InvalidTransitionError(self.status.value, 'approve',
                                         "Only draft plans can be approved")
        self.status = PlanStatus.APPROVED
        self.updated_at = datetime.now()

    def publish(self) -> None:
        if self.status != PlanStatus.APPROVED:
            raise InvalidTransitionError(self.status.value, 'publish',
                                         "Only approved plans can be published")
        self.status = PlanStatus.PUBLISHED
        self.updated_at = datetime.now()

    def cancel(self, reason: Optional[str]) -> None:
        """Cancel from any status; reason replaces existing notes."""
        self.status = PlanStatus.CANCELLED
        self.notes = reason
        self.updated_at = datetime.now()

    # Queries

    def get_shift_assignments(self, shift: ShiftType) -> List[ShiftAssignment]:
        return list(self._shift_assignments.get(shift, []))

    def get_total_workers_assigned(self) -> int:
        """Number of assignment records across all shifts."""
        return sum(len(records) for records in self._shift_assignments.values())

    def get_total_hours_for_shift(self, shift: ShiftType) -> int:
        return sum(a.planned_hours for a in self._shift_assignments.get(shift, []))

    def calculate_required_labor_hours(self) -> int:
        return sum(
            math.ceil(category.calculate_labor_hours(volume))
            for category, volume in self._planned_volumes.items()
        )

    def calculate_labor_cost_by_shift(self) -> Dict[ShiftType, float]:
        """Available hours per shift priced at the average rate with shift premium."""
        return {
            shift: self.get_total_hours_for_shift(shift) * AVERAGE_HOURLY_RATE * shift.premium_multiplier
            for shift in self._shift_assignments
        }

    def is_understaffed(self) -> bool:
        return self._utilization_percentage < UNDERSTAFFED_THRESHOLD

    def is_overstaffed(self) -> bool:
        return self._utilization_percentage > OVERSTAFFED_THRESHOLD

    def is_balanced(self) -> bool:
        return UNDERSTAFFED_THRESHOLD <= self._utilization_percentage <= OVERSTAFFED_THRESHOLD

    def to_dataframe(self) -> pd.DataFrame:
        """Convert shift assignments to pandas DataFrame."""
        rows = [
            dict(shift=shift.value, **assignment.to_dict())
            for shift, records in self._shift_assignments.items()
            for assignment in records
        ]
        return pd.DataFrame(rows, columns=['shift', 'worker_id', 'worker_name',
                                           'primary_category', 'planned_hours'])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'plan_id': self.plan_id,
            'warehouse_id': self.warehouse_id,
            'plan_date': self.plan_date.isoformat(),
            'planned_volumes': {c.value: v for c, v in self._planned_volumes.items()},
            'shift_assignments': {
                shift.value: [a.to_dict() for a in records]
                for shift, records in self._shift_assignments.items()
            },
            'total_required_labor_hours': self._total_required_labor_hours,
            'total_available_labor_hours': self._total_available_labor_hours,
            'utilization_percentage': self._utilization_percentage,
            'estimated_labor_cost': self._estimated_labor_cost,
            'total_workers_assigned': self.get_total_workers_assigned(),
            'status': self.status.value,
            'notes': self.notes,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
        }

    def _touch(self) -> None:
        self._recalculate_metrics()
        self.updated_at = datetime.now()

    def _recalculate_metrics(self) -> None:
        self._total_required_labor_hours = self.calculate_required_labor_hours()
        self._total_available_labor_hours = sum(
            a.planned_hours for records in self._shift_assignments.values() for a in records
        )

        if self._total_available_labor_hours > 0:
            self._utilization_percentage = (
                self._total_required_labor_hours * 100.0 / self._total_available_labor_hours
            )
        else:
            self._utilization_percentage = 0.0

        # Plan-level estimate at the average wage, not per-worker rates
        self._estimated_labor_cost = self._total_available_labor_hours * AVERAGE_HOURLY_RATE

    def __repr__(self) -> str:
        return (f"WorkloadPlan(id={self.plan_id!r}, date={self.plan_date}, "
                f"status={self.status.value}, workers={self.get_total_workers_assigned()}, "
                f"util={self._utilization_percentage:.1f}%)")
