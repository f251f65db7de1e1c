"""
Store interfaces for forecasts and plans, with in-memory implementations.

The planning service depends only on the abstract interfaces; a database
backed store implements the same methods.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, List, Optional

from ..forecasting.models import DemandForecast
from ..staff_assignment.models import WorkloadPlan


class ForecastRepository(ABC):
    """Contract for demand forecast persistence."""

    @abstractmethod
    def save(self, forecast: DemandForecast) -> DemandForecast:
        """Persist a forecast and return it with all fields populated."""

    @abstractmethod
    def find_by_id(self, forecast_id: str) -> Optional[DemandForecast]:
        """Forecast with the given id, or None."""

    @abstractmethod
    def find_by_warehouse(self, warehouse_id: str) -> List[DemandForecast]:
        """Forecasts for a warehouse, newest forecast date first."""


class PlanRepository(ABC):
    """Contract for workload plan persistence."""

    @abstractmethod
    def save(self, plan: WorkloadPlan) -> WorkloadPlan:
        """Persist a plan and return it with all derived fields populated."""

    @abstractmethod
    def find_by_id(self, plan_id: str) -> Optional[WorkloadPlan]:
        """Plan with the given id, or None."""

    @abstractmethod
    def find_by_warehouse_and_date(self, warehouse_id: str, plan_date: date) -> Optional[WorkloadPlan]:
        """Plan for a warehouse-day, or None."""

    @abstractmethod
    def find_by_warehouse(self, warehouse_id: str) -> List[WorkloadPlan]:
        """Plans for a warehouse, newest plan date first."""


class InMemoryForecastRepository(ForecastRepository):

    def __init__(self):
        self._forecasts: Dict[str, DemandForecast] = {}

    def save(self, forecast: DemandForecast) -> DemandForecast:
        self._forecasts[forecast.forecast_id] = forecast
        return forecast

    def find_by_id(self, forecast_id: str) -> Optional[DemandForecast]:
        return self._forecasts.get(forecast_id)

    def find_by_warehouse(self, warehouse_id: str) -> List[DemandForecast]:
        matches = [f for f in self._forecasts.values() if f.warehouse_id == warehouse_id]
        return sorted(matches, key=lambda f: f.forecast_date, reverse=True)


class InMemoryPlanRepository(PlanRepository):

    def __init__(self):
        self._plans: Dict[str, WorkloadPlan] = {}

    def save(self, plan: WorkloadPlan) -> WorkloadPlan:
        self._plans[plan.plan_id] = plan
        return plan

    def find_by_id(self, plan_id: str) -> Optional[WorkloadPlan]:
        return self._plans.get(plan_id)

    def find_by_warehouse_and_date(self, warehouse_id: str, plan_date: date) -> Optional[WorkloadPlan]:
        # Most recently saved plan wins when a warehouse-day has several
        for plan in reversed(list(self._plans.values())):
            if plan.warehouse_id == warehouse_id and plan.plan_date == plan_date:
                return plan
        return None

    def find_by_warehouse(self, warehouse_id: str) -> List[WorkloadPlan]:
        matches = [p for p in self._plans.values() if p.warehouse_id == warehouse_id]
        return sorted(matches, key=lambda p: p.plan_date, reverse=True)
