"""Pytest fixtures for workload planning tests."""

import pytest

from workload_planning.planning.events import InMemoryEventSink, PlanningEventPublisher
from workload_planning.planning.repositories import InMemoryForecastRepository, InMemoryPlanRepository
from workload_planning.planning.service import PlanningService
from workload_planning.value_objects import WorkloadCategory

from .builders import PlanBuilder


@pytest.fixture
def event_sink() -> InMemoryEventSink:
    return InMemoryEventSink()


@pytest.fixture
def service(event_sink: InMemoryEventSink) -> PlanningService:
    """Planning service over in-memory stores that records published events."""
    return PlanningService(
        InMemoryForecastRepository(),
        InMemoryPlanRepository(),
        PlanningEventPublisher(event_sink),
    )


@pytest.fixture
def picking_packing_plan():
    """PICKING 200 (8 required hours) and PACKING 100 (5 required hours)."""
    return (
        PlanBuilder()
        .with_volume(WorkloadCategory.PICKING, 200)
        .with_volume(WorkloadCategory.PACKING, 100)
        .build()
    )
