"""
Greedy labor allocation.

Implements the allocation rules:
1. Required workers per category = ceil(labor hours / 8-hour shift)
2. Most senior workers first (skill rank, stable for equal ranks)
3. Each worker goes to the eligible category with the most open positions
4. The chosen shift is the least loaded of day, evening and night

Single pass, no backtracking. Each worker is considered once.
"""

import logging
from typing import List, Dict, Iterable, Optional
from dataclasses import dataclass, field

from ..config import AUTO_ALLOCATION_SHIFTS, STANDARD_SHIFT_HOURS
from ..value_objects import ShiftType, WorkloadCategory
from .models import WorkerCapacity, WorkloadPlan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllocatedWorker:
    """A single placement made by the allocation pass."""

    worker_id: str
    worker_name: str
    shift: ShiftType
    category: WorkloadCategory
    planned_hours: int

    def to_dict(self) -> Dict:
        return {
            'worker_id': self.worker_id,
            'worker_name': self.worker_name,
            'shift': self.shift.value,
            'category': self.category.value,
            'planned_hours': self.planned_hours,
        }


@dataclass
class AllocationResult:
    """Results of one allocation pass over a plan."""

    plan: WorkloadPlan
    required_workers: Dict[WorkloadCategory, int]
    remaining_requirements: Dict[WorkloadCategory, int]
    assignments: List[AllocatedWorker] = field(default_factory=list)
    skipped_workers: List[str] = field(default_factory=list)

    @property
    def unmet_positions(self) -> int:
        return sum(self.remaining_requirements.values())

    @property
    def summary_stats(self) -> Dict:
        considered = len(self.assignments) + len(self.skipped_workers)
        return {
            'workers_considered': considered,
            'workers_assigned': len(self.assignments),
            'workers_skipped': len(self.skipped_workers),
            'positions_required': sum(self.required_workers.values()),
            'unmet_positions': self.unmet_positions,
        }

    def to_dict(self) -> Dict:
        return {
            'plan_id': self.plan.plan_id,
            'required_workers': {c.value: n for c, n in self.required_workers.items()},
            'remaining_requirements': {c.value: n for c, n in self.remaining_requirements.items()},
            'assignments': [a.to_dict() for a in self.assignments],
            'skipped_workers': list(self.skipped_workers),
            'summary_stats': self.summary_stats,
        }


class AllocationEngine:
    """
    Assigns available workers onto a plan's shifts to cover required labor.

    The engine holds no state between calls; it only mutates the plan it is
    given, so concurrent calls on distinct plans are independent.
    """

    def __init__(self,
                 shift_hours: int = STANDARD_SHIFT_HOURS,
                 shifts: Optional[Iterable[ShiftType]] = None):
        self.shift_hours = shift_hours
        self.shifts = tuple(ShiftType.parse(s) for s in (shifts or AUTO_ALLOCATION_SHIFTS))

    def calculate_required_workers(self, plan: WorkloadPlan) -> Dict[WorkloadCategory, int]:
        """Workers needed per planned category, in category declaration order."""
        volumes = plan.planned_volumes
        return {
            category: category.calculate_required_workers(volumes[category], self.shift_hours)
            for category in WorkloadCategory
            if category in volumes
        }

    def allocate(self, plan: WorkloadPlan, workers: Iterable[WorkerCapacity]) -> AllocationResult:
        """
        Assign workers to shifts in a single greedy pass.

        Args:
            plan: Plan with planned volumes; receives the new assignments
            workers: Available workers

        Returns:
            AllocationResult with the mutated plan and remaining requirements
        """
        # Step 1: Open positions per category
        required = self.calculate_required_workers(plan)
        remaining = dict(required)

        # Step 2: Most senior first; sorted() keeps input order for equal ranks
        ordered = sorted(workers, key=lambda w: w.skill_level.rank, reverse=True)

        result = AllocationResult(plan=plan, required_workers=required,
                                  remaining_requirements=remaining)

        for worker in ordered:
            # Step 3: Category with the most open positions this worker can do
            category = self.find_best_category(worker, remaining)
            if category is None:
                logger.debug("No eligible open category for worker %s", worker.worker_id)
                result.skipped_workers.append(worker.worker_id)
                continue

            # Step 4: Least loaded shift
            shift = self.determine_optimal_shift(plan)

            # Step 5: Place for a full shift and close one position
            plan.assign_worker_to_shift(shift, worker.worker_id, worker.name,
                                        category, self.shift_hours)
            remaining[category] = max(0, remaining[category] - 1)
            result.assignments.append(
                AllocatedWorker(worker.worker_id, worker.name, shift, category, self.shift_hours)
            )
            logger.debug("Assigned worker %s to %s/%s", worker.worker_id,
                         shift.value, category.value)

        logger.info("Allocated %d of %d workers for plan %s (%d positions unmet)",
                    len(result.assignments), len(ordered), plan.plan_id,
                    result.unmet_positions)
        return result

    @staticmethod
    def find_best_category(worker: WorkerCapacity,
                           remaining: Dict[WorkloadCategory, int]) -> Optional[WorkloadCategory]:
        """Eligible category with the most open positions; declaration order breaks ties."""
        best = None
        for category in WorkloadCategory:
            open_positions = remaining.get(category, 0)
            if open_positions <= 0 or not worker.can_perform(category):
                continue
            if best is None or open_positions > remaining[best]:
                best = category
        return best

    def determine_optimal_shift(self, plan: WorkloadPlan) -> ShiftType:
        """Shift with the fewest assignment records; earlier shifts win ties."""
        return min(self.shifts, key=lambda shift: len(plan.get_shift_assignments(shift)))
