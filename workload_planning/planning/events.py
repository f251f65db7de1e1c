"""
Planning event publication.

Events are fire-and-forget notifications keyed by aggregate id. Delivery is
best effort: a failing sink is logged and never surfaces to the caller of
the domain operation that produced the event.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

SOURCE = "workload-planning-service"


@dataclass(frozen=True)
class PlanningEvent:
    """Notification about a change to a forecast or plan."""

    event_type: str
    subject: str
    data: Dict[str, str]
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    source: str = SOURCE
    occurred_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.event_id,
            'source': self.source,
            'type': self.event_type,
            'subject': self.subject,
            'time': self.occurred_at.isoformat(),
            'data': dict(self.data),
        }


class EventSink(ABC):
    """Destination for planning events."""

    @abstractmethod
    def publish(self, event: PlanningEvent) -> None:
        """Deliver an event. May raise; callers go through PlanningEventPublisher."""


class LoggingEventSink(EventSink):
    """Writes events to the application log."""

    def publish(self, event: PlanningEvent) -> None:
        logger.info("Event %s subject=%s data=%s", event.event_type, event.subject, event.data)


class InMemoryEventSink(EventSink):
    """Keeps published events in memory."""

    def __init__(self):
        self.events: List[PlanningEvent] = []

    def publish(self, event: PlanningEvent) -> None:
        self.events.append(event)

    def get_event_history(self, event_type: Optional[str] = None) -> List[PlanningEvent]:
        if event_type is None:
            return list(self.events)
        return [e for e in self.events if e.event_type == event_type]


class PlanningEventPublisher:
    """Builds planning events and hands them to a sink, swallowing failures."""

    def __init__(self, sink: Optional[EventSink] = None):
        self._sink = sink or LoggingEventSink()

    def publish(self, event_type: str, subject: str, **fields: Any) -> Optional[PlanningEvent]:
        """
        Publish an event with string-valued fields.

        Returns:
            The event on success, None if the sink failed
        """
        data = {key: '' if value is None else str(value) for key, value in fields.items()}
        event = PlanningEvent(event_type=event_type, subject=subject, data=data)
        try:
            self._sink.publish(event)
        except Exception:
            logger.exception("Failed to publish event: type=%s, subject=%s", event_type, subject)
            return None
        logger.debug("Published event: type=%s, subject=%s", event_type, subject)
        return event

    def forecast_generated(self, forecast_id, warehouse_id, period, forecasting_model, accuracy):
        return self.publish('workload.forecast.generated', forecast_id,
                            forecastId=forecast_id, warehouseId=warehouse_id, period=period,
                            forecastingModel=forecasting_model,
                            accuracy=accuracy if accuracy is not None else 0.0)

    def forecast_evaluated(self, forecast_id, warehouse_id, accuracy, mae, mse):
        return self.publish('workload.forecast.evaluated', forecast_id,
                            forecastId=forecast_id, warehouseId=warehouse_id,
                            accuracy=accuracy, meanAbsoluteError=mae, meanSquaredError=mse)

    def plan_created(self, plan_id, warehouse_id, plan_date, total_required_hours):
        return self.publish('workload.plan.created', plan_id,
                            planId=plan_id, warehouseId=warehouse_id, planDate=plan_date,
                            totalRequiredHours=total_required_hours)

    def worker_assigned(self, plan_id, worker_id, worker_name, shift, category, planned_hours):
        return self.publish('workload.worker.assigned', plan_id,
                            planId=plan_id, workerId=worker_id, workerName=worker_name,
                            shift=shift, category=category, plannedHours=planned_hours)

    def worker_removed(self, plan_id, worker_id, shift, records_removed):
        return self.publish('workload.worker.removed', plan_id,
                            planId=plan_id, workerId=worker_id, shift=shift,
                            recordsRemoved=records_removed)

    def plan_optimized(self, plan_id, warehouse_id, workers_assigned, unmet_positions, utilization):
        return self.publish('workload.plan.optimized', plan_id,
                            planId=plan_id, warehouseId=warehouse_id,
                            workersAssigned=workers_assigned, unmetPositions=unmet_positions,
                            utilization=utilization)

    def plan_approved(self, plan_id, warehouse_id, approved_by, total_workers, utilization):
        return self.publish('workload.plan.approved', plan_id,
                            planId=plan_id, warehouseId=warehouse_id, approvedBy=approved_by,
                            totalWorkers=total_workers, utilization=utilization)

    def plan_published(self, plan_id, warehouse_id, plan_date, total_workers):
        return self.publish('workload.plan.published', plan_id,
                            planId=plan_id, warehouseId=warehouse_id, planDate=plan_date,
                            totalWorkers=total_workers)

    def plan_cancelled(self, plan_id, warehouse_id, reason):
        return self.publish('workload.plan.cancelled', plan_id,
                            planId=plan_id, warehouseId=warehouse_id, reason=reason)
