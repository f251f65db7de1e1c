"""
Warehouse Workload Planning

Demand forecasting, staffing plans and greedy labor allocation.
"""

from .forecasting import DemandForecast, ForecastingEngine
from .planning import PlanningService
from .staff_assignment import AllocationEngine, WorkerCapacity, WorkloadPlan
from .value_objects import ForecastPeriod, ShiftType, SkillLevel, WorkloadCategory

__version__ = "0.1.0"

__all__ = [
    "AllocationEngine",
    "DemandForecast",
    "ForecastingEngine",
    "ForecastPeriod",
    "PlanningService",
    "ShiftType",
    "SkillLevel",
    "WorkerCapacity",
    "WorkloadCategory",
    "WorkloadPlan",
]
