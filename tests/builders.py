"""Test builder utilities to reduce redundancy in test setup."""

from datetime import date, datetime

from workload_planning.forecasting.models import DemandForecast
from workload_planning.staff_assignment.models import WorkerCapacity, WorkloadPlan
from workload_planning.value_objects import ForecastPeriod, SkillLevel, WorkloadCategory

# Test identifiers
TEST_WAREHOUSE_ID = "WH-TEST"
TEST_PLAN_ID = "plan_001"
TEST_FORECAST_ID = "forecast_001"
TEST_PLAN_DATE = date(2024, 6, 1)
TEST_FORECAST_DATE = datetime(2024, 6, 1, 6, 0)


class PlanBuilder:
    """Builder for creating test workload plans with sensible defaults."""

    def __init__(self) -> None:
        self.plan_id = TEST_PLAN_ID
        self.warehouse_id = TEST_WAREHOUSE_ID
        self.plan_date = TEST_PLAN_DATE
        self.volumes: dict = {}

    def with_id(self, plan_id: str) -> "PlanBuilder":
        self.plan_id = plan_id
        return self

    def with_date(self, plan_date: date) -> "PlanBuilder":
        self.plan_date = plan_date
        return self

    def with_volume(self, category: WorkloadCategory, volume: int) -> "PlanBuilder":
        self.volumes[category] = volume
        return self

    def build(self) -> WorkloadPlan:
        plan = WorkloadPlan.create(self.plan_id, self.warehouse_id, self.plan_date)
        for category, volume in self.volumes.items():
            plan.set_planned_volume(category, volume)
        return plan


class WorkerBuilder:
    """Builder for creating test workers with sensible defaults."""

    def __init__(self) -> None:
        self.worker_id = "worker_001"
        self.name = "Test Worker"
        self.skill_level = SkillLevel.INTERMEDIATE
        self.rates: dict = {}
        self.hourly_rate = 25.0

    def with_id(self, worker_id: str) -> "WorkerBuilder":
        self.worker_id = worker_id
        self.name = f"Worker {worker_id}"
        return self

    def with_skill(self, skill_level: SkillLevel) -> "WorkerBuilder":
        self.skill_level = skill_level
        return self

    def with_rate(self, category: WorkloadCategory, rate: float) -> "WorkerBuilder":
        self.rates[category] = rate
        return self

    def with_hourly_rate(self, hourly_rate: float) -> "WorkerBuilder":
        self.hourly_rate = hourly_rate
        return self

    def build(self) -> WorkerCapacity:
        return WorkerCapacity(
            worker_id=self.worker_id,
            name=self.name,
            skill_level=self.skill_level,
            hourly_rate=self.hourly_rate,
            productivity_rates=dict(self.rates),
        )


class ForecastBuilder:
    """Builder for creating test forecasts with sensible defaults."""

    def __init__(self) -> None:
        self.forecast_id = TEST_FORECAST_ID
        self.warehouse_id = TEST_WAREHOUSE_ID
        self.period = ForecastPeriod.DAILY
        self.forecast_date = TEST_FORECAST_DATE
        self.points: list = []

    def with_period(self, period: ForecastPeriod) -> "ForecastBuilder":
        self.period = period
        return self

    def with_point(self, timestamp: datetime, category: WorkloadCategory,
                   volume: int, interval: float = 0.0) -> "ForecastBuilder":
        self.points.append((timestamp, category, volume, interval))
        return self

    def build(self) -> DemandForecast:
        forecast = DemandForecast.create(self.forecast_id, self.warehouse_id,
                                         self.period, self.forecast_date)
        for timestamp, category, volume, interval in self.points:
            forecast.add_data_point(timestamp, category, volume, interval)
        return forecast
