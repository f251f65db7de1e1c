"""
Workload planning service.

Orchestrates forecast generation, plan creation, worker assignment, labor
allocation and the plan lifecycle. Aggregates are loaded from and saved to
the injected stores; events go out through the publisher after the domain
change has been applied and saved.
"""

import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from ..config import BASELINE_ACCURACY_METRICS, HIGH_STAFFING_WARNING_WORKERS, STANDARD_SHIFT_HOURS
from ..exceptions import NotFoundError
from ..forecasting.engine import ForecastingEngine
from ..forecasting.models import DemandForecast
from ..staff_assignment.allocation import AllocationEngine, AllocationResult
from ..staff_assignment.models import WorkerCapacity, WorkloadPlan
from ..value_objects import ForecastPeriod, ShiftType, WorkloadCategory
from .events import PlanningEventPublisher
from .repositories import ForecastRepository, PlanRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryRecommendation:
    """Staffing position of one category against the latest forecast."""

    category: WorkloadCategory
    forecasted_volume: int
    required_workers: int
    current_workers: int
    gap: int
    required_labor_hours: float

    def to_dict(self) -> Dict:
        return {
            'category': self.category.value,
            'forecasted_volume': self.forecasted_volume,
            'required_workers': self.required_workers,
            'current_workers': self.current_workers,
            'gap': self.gap,
            'required_labor_hours': self.required_labor_hours,
        }


@dataclass(frozen=True)
class ShiftRecommendation:
    """Forecast-driven headcount for one shift against the plan's roster."""

    shift: ShiftType
    required_workers: int
    current_workers: int
    gap: int
    utilization: float

    def to_dict(self) -> Dict:
        return {
            'shift': self.shift.value,
            'required_workers': self.required_workers,
            'current_workers': self.current_workers,
            'gap': self.gap,
            'utilization': self.utilization,
        }


@dataclass
class WorkloadRecommendations:
    """Point-in-time recommendations for one warehouse-day."""

    warehouse_id: str
    plan_date: date
    recommendations: List[str]
    latest_forecast: Optional[DemandForecast] = None
    current_plan: Optional[WorkloadPlan] = None
    category_recommendations: List[CategoryRecommendation] = field(default_factory=list)
    shift_recommendations: List[ShiftRecommendation] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def balance_status(self) -> str:
        if self.current_plan is None:
            return 'UNKNOWN'
        if self.current_plan.is_understaffed():
            return 'UNDERSTAFFED'
        if self.current_plan.is_overstaffed():
            return 'OVERSTAFFED'
        return 'BALANCED'


class PlanningService:
    """
    Entry point for every forecast and plan operation.

    Operations on an existing aggregate load it by id and raise NotFoundError
    when the id is unknown.
    """

    def __init__(self,
                 forecast_repository: ForecastRepository,
                 plan_repository: PlanRepository,
                 event_publisher: Optional[PlanningEventPublisher] = None,
                 forecasting_engine: Optional[ForecastingEngine] = None,
                 allocation_engine: Optional[AllocationEngine] = None):
        self.forecast_repository = forecast_repository
        self.plan_repository = plan_repository
        self.event_publisher = event_publisher or PlanningEventPublisher()
        self.forecasting_engine = forecasting_engine or ForecastingEngine()
        self.allocation_engine = allocation_engine or AllocationEngine()

    # Forecasts

    def generate_demand_forecast(self,
                                 warehouse_id: str,
                                 period: ForecastPeriod,
                                 forecast_date: datetime,
                                 historical_data: Mapping[WorkloadCategory, Sequence[int]]) -> DemandForecast:
        """
        Generate and store a demand forecast from historical volumes.

        Baseline accuracy metrics are attached until the forecast is
        evaluated against observed volumes.
        """
        period = ForecastPeriod.parse(period)
        logger.info("Generating %s forecast for warehouse %s on %s",
                    period.value, warehouse_id, forecast_date)

        forecast = self.forecasting_engine.generate(
            forecast_id=str(uuid.uuid4()),
            warehouse_id=warehouse_id,
            period=period,
            forecast_date=forecast_date,
            historical_data=historical_data,
        )
        forecast.update_accuracy_metrics(
            BASELINE_ACCURACY_METRICS['accuracy'],
            BASELINE_ACCURACY_METRICS['mae'],
            BASELINE_ACCURACY_METRICS['mse'],
        )
        forecast = self.forecast_repository.save(forecast)

        self.event_publisher.forecast_generated(
            forecast.forecast_id, warehouse_id, period.value,
            forecast.forecasting_model, forecast.accuracy,
        )
        return forecast

    def generate_forecast_from_dataframe(self,
                                         warehouse_id: str,
                                         period: ForecastPeriod,
                                         forecast_date: datetime,
                                         data: pd.DataFrame) -> DemandForecast:
        """Generate a forecast from a historical load table (category, load_units[, date])."""
        history = self.forecasting_engine.load_historical_data(data)
        return self.generate_demand_forecast(warehouse_id, period, forecast_date, history)

    def get_forecast(self, forecast_id: str) -> Optional[DemandForecast]:
        return self.forecast_repository.find_by_id(forecast_id)

    def get_forecasts_by_warehouse(self, warehouse_id: str) -> List[DemandForecast]:
        return self.forecast_repository.find_by_warehouse(warehouse_id)

    def evaluate_forecast(self,
                          forecast_id: str,
                          actuals: Mapping[WorkloadCategory, Sequence[int]]) -> DemandForecast:
        """Replace a forecast's accuracy metrics with an evaluation against actuals."""
        logger.info("Evaluating forecast %s", forecast_id)
        forecast = self._get_forecast_or_raise(forecast_id)

        metrics = self.forecasting_engine.evaluate(forecast, actuals)
        forecast.update_accuracy_metrics(metrics['accuracy'], metrics['mae'], metrics['mse'])
        forecast = self.forecast_repository.save(forecast)

        self.event_publisher.forecast_evaluated(
            forecast_id, forecast.warehouse_id,
            metrics['accuracy'], metrics['mae'], metrics['mse'],
        )
        return forecast

    # Plans

    def create_plan_from_forecast(self,
                                  warehouse_id: str,
                                  plan_date: date,
                                  forecast_id: str) -> WorkloadPlan:
        """
        Create a plan whose volumes are a snapshot of the forecast's totals.

        Categories with no forecasted volume are left out of the plan. Later
        changes to the forecast do not affect the plan.
        """
        forecast = self._get_forecast_or_raise(forecast_id)
        logger.info("Creating workload plan for warehouse %s on %s from forecast %s",
                    warehouse_id, plan_date, forecast_id)

        plan = WorkloadPlan.create(str(uuid.uuid4()), warehouse_id, plan_date)
        for category in WorkloadCategory:
            total_volume = forecast.get_total_forecasted_volume(category)
            if total_volume > 0:
                plan.set_planned_volume(category, total_volume)

        return self._save_new_plan(plan)

    def create_workload_plan(self,
                             warehouse_id: str,
                             plan_date: date,
                             planned_volumes: Mapping[WorkloadCategory, int],
                             description: Optional[str] = None) -> WorkloadPlan:
        """Create a plan with explicit planned volumes."""
        logger.info("Creating workload plan for warehouse %s on %s", warehouse_id, plan_date)

        plan = WorkloadPlan.create(str(uuid.uuid4()), warehouse_id, plan_date, notes=description)
        for category, volume in planned_volumes.items():
            plan.set_planned_volume(category, volume)

        return self._save_new_plan(plan)

    def get_workload_plan(self, plan_id: str) -> Optional[WorkloadPlan]:
        return self.plan_repository.find_by_id(plan_id)

    def get_workload_plans_by_warehouse(self, warehouse_id: str) -> List[WorkloadPlan]:
        return self.plan_repository.find_by_warehouse(warehouse_id)

    def assign_worker_to_shift(self,
                               plan_id: str,
                               shift: ShiftType,
                               worker_id: str,
                               worker_name: str,
                               primary_category: WorkloadCategory,
                               planned_hours: int) -> WorkloadPlan:
        logger.info("Assigning worker %s to %s for plan %s", worker_id, shift, plan_id)

        plan = self._get_plan_or_raise(plan_id)
        assignment = plan.assign_worker_to_shift(shift, worker_id, worker_name,
                                                 primary_category, planned_hours)
        plan = self.plan_repository.save(plan)

        self.event_publisher.worker_assigned(
            plan_id, worker_id, worker_name, ShiftType.parse(shift).value,
            assignment.primary_category.value, assignment.planned_hours,
        )
        return plan

    def remove_worker_from_shift(self, plan_id: str, shift: ShiftType, worker_id: str) -> WorkloadPlan:
        logger.info("Removing worker %s from %s for plan %s", worker_id, shift, plan_id)

        plan = self._get_plan_or_raise(plan_id)
        removed = plan.remove_worker_from_shift(shift, worker_id)
        if not removed:
            return plan

        plan = self.plan_repository.save(plan)
        self.event_publisher.worker_removed(plan_id, worker_id, ShiftType.parse(shift).value, removed)
        return plan

    def optimize_labor_allocation(self,
                                  plan_id: str,
                                  available_workers: Iterable[WorkerCapacity]) -> AllocationResult:
        """Run greedy allocation on a stored plan; existing assignments are kept."""
        logger.info("Optimizing labor allocation for plan %s", plan_id)

        plan = self._get_plan_or_raise(plan_id)
        result = self.allocation_engine.allocate(plan, available_workers)
        result.plan = self.plan_repository.save(plan)

        self.event_publisher.plan_optimized(
            plan_id, plan.warehouse_id, len(result.assignments),
            result.unmet_positions, plan.utilization_percentage,
        )
        return result

    def approve_plan(self, plan_id: str, approved_by: str = 'system') -> WorkloadPlan:
        logger.info("Approving workload plan %s by %s", plan_id, approved_by)

        plan = self._get_plan_or_raise(plan_id)
        plan.approve()
        plan = self.plan_repository.save(plan)

        self.event_publisher.plan_approved(
            plan_id, plan.warehouse_id, approved_by,
            plan.get_total_workers_assigned(), plan.utilization_percentage,
        )
        return plan

    def publish_plan(self, plan_id: str) -> WorkloadPlan:
        logger.info("Publishing workload plan %s", plan_id)

        plan = self._get_plan_or_raise(plan_id)
        plan.publish()
        plan = self.plan_repository.save(plan)

        self.event_publisher.plan_published(
            plan_id, plan.warehouse_id, plan.plan_date.isoformat(),
            plan.get_total_workers_assigned(),
        )
        return plan

    def cancel_plan(self, plan_id: str, reason: str) -> WorkloadPlan:
        logger.info("Cancelling workload plan %s: %s", plan_id, reason)

        plan = self._get_plan_or_raise(plan_id)
        plan.cancel(reason)
        plan = self.plan_repository.save(plan)

        self.event_publisher.plan_cancelled(plan_id, plan.warehouse_id, reason)
        return plan

    # Recommendations

    def get_recommendations(self, warehouse_id: str, plan_date: date) -> WorkloadRecommendations:
        """Combine the latest forecast's accuracy with the plan's staffing classification."""
        forecasts = self.forecast_repository.find_by_warehouse(warehouse_id)
        forecast = forecasts[0] if forecasts else None
        plan = self.plan_repository.find_by_warehouse_and_date(warehouse_id, plan_date)

        recommendations = []
        if plan is not None:
            utilization = plan.utilization_percentage
            if plan.is_understaffed():
                recommendations.append(
                    f"UNDERSTAFFED: Utilization at {utilization:.1f}%. "
                    f"Consider adding {self._additional_workers_needed(plan)} workers."
                )
            if plan.is_overstaffed():
                recommendations.append(
                    f"OVERSTAFFED: Utilization at {utilization:.1f}%. "
                    f"Consider reducing by {self._excess_workers(plan)} workers."
                )
            if plan.is_balanced():
                recommendations.append(
                    f"OPTIMAL: Utilization at {utilization:.1f}%. Plan is well-balanced."
                )

        if forecast is not None and forecast.accuracy is not None and not forecast.is_accurate():
            recommendations.append(
                f"LOW FORECAST ACCURACY: Current accuracy {forecast.accuracy:.1f}%. "
                f"Recommend model refinement."
            )

        category_recs = self._category_recommendations(forecast, plan)
        warnings = [
            f"High staffing requirement for {rec.category.value}: {rec.required_workers} workers"
            for rec in category_recs
            if rec.required_workers > HIGH_STAFFING_WARNING_WORKERS
        ]

        shift_recs = self._shift_recommendations(category_recs, plan)
        suggestions = [self._premium_suggestion(rec.shift) for rec in shift_recs
                       if rec.shift.premium_multiplier > 1.0]

        return WorkloadRecommendations(
            warehouse_id=warehouse_id,
            plan_date=plan_date,
            recommendations=recommendations,
            latest_forecast=forecast,
            current_plan=plan,
            category_recommendations=category_recs,
            shift_recommendations=shift_recs,
            suggestions=suggestions,
            warnings=warnings,
        )

    # Helpers

    def _save_new_plan(self, plan: WorkloadPlan) -> WorkloadPlan:
        plan = self.plan_repository.save(plan)
        self.event_publisher.plan_created(
            plan.plan_id, plan.warehouse_id, plan.plan_date.isoformat(),
            plan.total_required_labor_hours,
        )
        return plan

    @staticmethod
    def _category_recommendations(forecast: Optional[DemandForecast],
                                  plan: Optional[WorkloadPlan]) -> List[CategoryRecommendation]:
        current: Dict[WorkloadCategory, int] = {}
        if plan is not None:
            for records in plan.shift_assignments.values():
                for assignment in records:
                    current[assignment.primary_category] = current.get(assignment.primary_category, 0) + 1

        recs = []
        for category in WorkloadCategory:
            volume = forecast.get_total_forecasted_volume(category) if forecast else 0
            workers = current.get(category, 0)
            if volume == 0 and workers == 0:
                continue
            required = category.calculate_required_workers(volume, STANDARD_SHIFT_HOURS)
            recs.append(CategoryRecommendation(
                category=category,
                forecasted_volume=volume,
                required_workers=required,
                current_workers=workers,
                gap=required - workers,
                required_labor_hours=category.calculate_labor_hours(volume),
            ))
        return recs

    @staticmethod
    def _shift_recommendations(category_recs: Sequence[CategoryRecommendation],
                               plan: Optional[WorkloadPlan]) -> List[ShiftRecommendation]:
        # Total headcount is spread evenly over every shift type
        required = sum(rec.required_workers for rec in category_recs) // len(ShiftType)

        recs = []
        for shift in ShiftType:
            current = len(plan.get_shift_assignments(shift)) if plan is not None else 0
            available_hours = plan.get_total_hours_for_shift(shift) if plan is not None else 0
            utilization = 0.0
            if available_hours > 0:
                utilization = required * STANDARD_SHIFT_HOURS * 100.0 / available_hours
            recs.append(ShiftRecommendation(
                shift=shift,
                required_workers=required,
                current_workers=current,
                gap=required - current,
                utilization=utilization,
            ))
        return recs

    @staticmethod
    def _premium_suggestion(shift: ShiftType) -> str:
        kind = 'night' if shift.is_night_shift else 'weekend'
        return (f"Consider {kind} premium ({(shift.premium_multiplier - 1.0) * 100:.0f}%) "
                f"for {shift.value}")

    @staticmethod
    def _additional_workers_needed(plan: WorkloadPlan) -> int:
        if plan.total_available_labor_hours == 0:
            return 0
        shortage = plan.total_required_labor_hours - plan.total_available_labor_hours
        return max(0, math.ceil(shortage / STANDARD_SHIFT_HOURS))

    @staticmethod
    def _excess_workers(plan: WorkloadPlan) -> int:
        if plan.total_required_labor_hours == 0:
            return 0
        excess = plan.total_available_labor_hours - plan.total_required_labor_hours
        return max(0, math.floor(excess / STANDARD_SHIFT_HOURS))

    def _get_forecast_or_raise(self, forecast_id: str) -> DemandForecast:
        forecast = self.forecast_repository.find_by_id(forecast_id)
        if forecast is None:
            raise NotFoundError("Demand forecast", forecast_id)
        return forecast

    def _get_plan_or_raise(self, plan_id: str) -> WorkloadPlan:
        plan = self.plan_repository.find_by_id(plan_id)
        if plan is None:
            raise NotFoundError("Workload plan", plan_id)
        return plan
