"""
Planning orchestration: stores, events and the planning service.
"""

from .events import (
    EventSink,
    InMemoryEventSink,
    LoggingEventSink,
    PlanningEvent,
    PlanningEventPublisher,
)
from .repositories import (
    ForecastRepository,
    InMemoryForecastRepository,
    InMemoryPlanRepository,
    PlanRepository,
)
from .service import (
    CategoryRecommendation,
    PlanningService,
    ShiftRecommendation,
    WorkloadRecommendations,
)

__all__ = [
    "EventSink",
    "InMemoryEventSink",
    "LoggingEventSink",
    "PlanningEvent",
    "PlanningEventPublisher",
    "ForecastRepository",
    "InMemoryForecastRepository",
    "InMemoryPlanRepository",
    "PlanRepository",
    "CategoryRecommendation",
    "PlanningService",
    "ShiftRecommendation",
    "WorkloadRecommendations",
]
