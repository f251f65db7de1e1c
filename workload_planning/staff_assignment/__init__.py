"""
Staff assignment module: worker capacity, workload plans and allocation.
"""

from .allocation import AllocationEngine, AllocationResult, AllocatedWorker
from .models import PlanStatus, ShiftAssignment, WorkerCapacity, WorkloadPlan

__all__ = [
    "AllocationEngine",
    "AllocationResult",
    "AllocatedWorker",
    "PlanStatus",
    "ShiftAssignment",
    "WorkerCapacity",
    "WorkloadPlan",
]
