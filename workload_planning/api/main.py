"""
FastAPI application for workload planning.

Provides REST API endpoints for:
- Generating and evaluating demand forecasts
- Creating workload plans from forecasts or explicit volumes
- Assigning workers and running labor allocation
- Approving, publishing and cancelling plans
- Staffing recommendations
"""

from typing import List, Dict, Any, Optional
from datetime import date, datetime
import io
import pandas as pd
from fastapi import APIRouter, Depends, FastAPI, File, Form, Header, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..config import API_HOST, API_PORT, API_PREFIX, AVERAGE_HOURLY_RATE
from ..exceptions import ErrorType, WorkloadPlanningError
from ..forecasting.models import DemandForecast
from ..planning.events import LoggingEventSink, PlanningEventPublisher
from ..planning.repositories import InMemoryForecastRepository, InMemoryPlanRepository
from ..planning.service import PlanningService, WorkloadRecommendations
from ..staff_assignment.models import WorkerCapacity, WorkloadPlan
from ..value_objects import ForecastPeriod, ShiftType, SkillLevel, WorkloadCategory


# Pydantic models for API
class GenerateForecastRequest(BaseModel):
    warehouse_id: str = Field(..., min_length=1)
    period: ForecastPeriod
    forecast_date: datetime
    historical_data: Dict[WorkloadCategory, List[int]]


class EvaluateForecastRequest(BaseModel):
    actuals: Dict[WorkloadCategory, List[int]]


class CreatePlanRequest(BaseModel):
    warehouse_id: str = Field(..., min_length=1)
    plan_date: date
    planned_volumes: Optional[Dict[WorkloadCategory, int]] = None
    forecast_id: Optional[str] = None
    description: Optional[str] = None


class AssignWorkerRequest(BaseModel):
    shift_type: ShiftType
    worker_id: str = Field(..., min_length=1)
    worker_name: str = Field(..., min_length=1)
    primary_category: WorkloadCategory
    planned_hours: int = Field(..., gt=0)


class WorkerCapacityRequest(BaseModel):
    worker_id: str = Field(..., min_length=1)
    name: str
    skill_level: SkillLevel
    max_hours_per_week: int = 40
    is_full_time: bool = True
    hourly_rate: float = AVERAGE_HOURLY_RATE
    productivity_rates: Dict[WorkloadCategory, float] = {}

    def to_domain(self) -> WorkerCapacity:
        return WorkerCapacity(
            worker_id=self.worker_id,
            name=self.name,
            skill_level=self.skill_level,
            max_hours_per_week=self.max_hours_per_week,
            is_full_time=self.is_full_time,
            hourly_rate=self.hourly_rate,
            productivity_rates=dict(self.productivity_rates),
        )


class ForecastDataPointResponse(BaseModel):
    timestamp: datetime
    category: str
    forecasted_volume: int
    confidence_interval: float


class ForecastResponse(BaseModel):
    forecast_id: str
    warehouse_id: str
    period: str
    forecast_date: datetime
    created_at: Optional[datetime]
    forecasting_model: Optional[str]
    forecasting_parameters: Dict[str, Any]
    accuracy: Optional[float]
    mean_absolute_error: Optional[float]
    mean_squared_error: Optional[float]
    data_points: List[ForecastDataPointResponse]

    @classmethod
    def from_forecast(cls, forecast: DemandForecast) -> 'ForecastResponse':
        return cls(
            forecast_id=forecast.forecast_id,
            warehouse_id=forecast.warehouse_id,
            period=forecast.period.value,
            forecast_date=forecast.forecast_date,
            created_at=forecast.created_at,
            forecasting_model=forecast.forecasting_model,
            forecasting_parameters=forecast.model_parameters,
            accuracy=forecast.accuracy,
            mean_absolute_error=forecast.mean_absolute_error,
            mean_squared_error=forecast.mean_squared_error,
            data_points=[
                ForecastDataPointResponse(
                    timestamp=p.timestamp,
                    category=p.category.value,
                    forecasted_volume=p.forecasted_volume,
                    confidence_interval=p.confidence_interval,
                )
                for p in forecast.data_points
            ],
        )


class ShiftAssignmentResponse(BaseModel):
    worker_id: str
    worker_name: str
    primary_category: str
    planned_hours: int


class WorkloadPlanResponse(BaseModel):
    plan_id: str
    warehouse_id: str
    plan_date: date
    planned_volumes: Dict[str, int]
    shift_assignments: Dict[str, List[ShiftAssignmentResponse]]
    total_required_labor_hours: int
    total_available_labor_hours: int
    utilization_percentage: float
    estimated_labor_cost: float
    total_workers_assigned: int
    status: str
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_plan(cls, plan: WorkloadPlan) -> 'WorkloadPlanResponse':
        return cls(
            plan_id=plan.plan_id,
            warehouse_id=plan.warehouse_id,
            plan_date=plan.plan_date,
            planned_volumes={c.value: v for c, v in plan.planned_volumes.items()},
            shift_assignments={
                shift.value: [ShiftAssignmentResponse(**a.to_dict()) for a in records]
                for shift, records in plan.shift_assignments.items()
            },
            total_required_labor_hours=plan.total_required_labor_hours,
            total_available_labor_hours=plan.total_available_labor_hours,
            utilization_percentage=plan.utilization_percentage,
            estimated_labor_cost=plan.estimated_labor_cost,
            total_workers_assigned=plan.get_total_workers_assigned(),
            status=plan.status.value,
            notes=plan.notes,
            created_at=plan.created_at,
            updated_at=plan.updated_at,
        )


class AllocationResponse(BaseModel):
    plan: WorkloadPlanResponse
    assignments: List[Dict[str, Any]]
    remaining_requirements: Dict[str, int]
    skipped_workers: List[str]
    summary_stats: Dict[str, int]


class RecommendationResponse(BaseModel):
    warehouse_id: str
    plan_date: date
    recommendations: List[str]
    balance_status: str
    latest_forecast_id: Optional[str]
    current_plan_id: Optional[str]
    category_recommendations: List[Dict[str, Any]]
    shift_recommendations: List[Dict[str, Any]]
    suggestions: List[str]
    warnings: List[str]

    @classmethod
    def from_recommendations(cls, result: WorkloadRecommendations) -> 'RecommendationResponse':
        return cls(
            warehouse_id=result.warehouse_id,
            plan_date=result.plan_date,
            recommendations=result.recommendations,
            balance_status=result.balance_status,
            latest_forecast_id=result.latest_forecast.forecast_id if result.latest_forecast else None,
            current_plan_id=result.current_plan.plan_id if result.current_plan else None,
            category_recommendations=[r.to_dict() for r in result.category_recommendations],
            shift_recommendations=[r.to_dict() for r in result.shift_recommendations],
            suggestions=result.suggestions,
            warnings=result.warnings,
        )


class HealthResponse(BaseModel):
    status: str
    version: str


# Initialize FastAPI app
app = FastAPI(
    title="Workload Planning API",
    description="API for demand forecasting and warehouse labor planning",
    version=__version__
)

router = APIRouter(prefix=API_PREFIX, tags=["Workload Planning"])

# In-memory stores; swap the service for one backed by a database in production
planning_service = PlanningService(
    InMemoryForecastRepository(),
    InMemoryPlanRepository(),
    PlanningEventPublisher(LoggingEventSink()),
)


def get_planning_service() -> PlanningService:
    return planning_service


_STATUS_CODES = {
    ErrorType.NOT_FOUND: 404,
    ErrorType.INVALID_TRANSITION: 409,
    ErrorType.INVALID_INPUT: 400,
}


@app.exception_handler(WorkloadPlanningError)
async def planning_error_handler(request: Request, exc: WorkloadPlanningError):
    return JSONResponse(status_code=_STATUS_CODES[exc.error_type], content=exc.to_dict())


@app.get("/", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


@router.post("/forecasts", response_model=ForecastResponse, status_code=201)
def generate_forecast(request: GenerateForecastRequest,
                      service: PlanningService = Depends(get_planning_service)):
    """
    Generate demand forecast from historical volumes.
    """
    forecast = service.generate_demand_forecast(
        request.warehouse_id,
        request.period,
        request.forecast_date,
        request.historical_data,
    )
    return ForecastResponse.from_forecast(forecast)


@router.post("/forecasts/upload", response_model=ForecastResponse, status_code=201)
async def upload_historical_data(warehouse_id: str = Form(...),
                                 period: ForecastPeriod = Form(...),
                                 forecast_date: datetime = Form(...),
                                 file: UploadFile = File(...),
                                 service: PlanningService = Depends(get_planning_service)):
    """
    Generate demand forecast from a CSV of historical load data.

    Expected CSV columns: category, load_units (optional: date)
    """
    if not file.filename.endswith('.csv'):
        raise HTTPException(status_code=400, detail="File must be CSV format")

    content = await file.read()
    try:
        df = pd.read_csv(io.StringIO(content.decode('utf-8')))
    except (UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise HTTPException(status_code=400, detail=f"Error processing file: {str(e)}")

    forecast = service.generate_forecast_from_dataframe(warehouse_id, period, forecast_date, df)
    return ForecastResponse.from_forecast(forecast)


@router.get("/forecasts/{forecast_id}", response_model=ForecastResponse)
def get_forecast(forecast_id: str, service: PlanningService = Depends(get_planning_service)):
    forecast = service.get_forecast(forecast_id)
    if forecast is None:
        raise HTTPException(status_code=404, detail=f"Demand forecast not found: {forecast_id}")
    return ForecastResponse.from_forecast(forecast)


@router.get("/forecasts", response_model=List[ForecastResponse])
def list_forecasts(warehouse_id: str, service: PlanningService = Depends(get_planning_service)):
    return [ForecastResponse.from_forecast(f) for f in service.get_forecasts_by_warehouse(warehouse_id)]


@router.post("/forecasts/{forecast_id}/evaluate", response_model=ForecastResponse)
def evaluate_forecast(forecast_id: str,
                      request: EvaluateForecastRequest,
                      service: PlanningService = Depends(get_planning_service)):
    """
    Replace forecast accuracy metrics with an evaluation against observed volumes.
    """
    forecast = service.evaluate_forecast(forecast_id, request.actuals)
    return ForecastResponse.from_forecast(forecast)


@router.post("/plans", response_model=WorkloadPlanResponse, status_code=201)
def create_plan(request: CreatePlanRequest, service: PlanningService = Depends(get_planning_service)):
    """
    Create workload plan from a forecast snapshot or explicit volumes.
    """
    if request.forecast_id:
        plan = service.create_plan_from_forecast(request.warehouse_id, request.plan_date,
                                                 request.forecast_id)
    elif request.planned_volumes is not None:
        plan = service.create_workload_plan(request.warehouse_id, request.plan_date,
                                            request.planned_volumes, request.description)
    else:
        raise HTTPException(status_code=400, detail="Either forecast_id or planned_volumes is required")
    return WorkloadPlanResponse.from_plan(plan)


@router.get("/plans/{plan_id}", response_model=WorkloadPlanResponse)
def get_plan(plan_id: str, service: PlanningService = Depends(get_planning_service)):
    plan = service.get_workload_plan(plan_id)
    if plan is None:
        raise HTTPException(status_code=404, detail=f"Workload plan not found: {plan_id}")
    return WorkloadPlanResponse.from_plan(plan)


@router.get("/plans", response_model=List[WorkloadPlanResponse])
def list_plans(warehouse_id: str, service: PlanningService = Depends(get_planning_service)):
    return [WorkloadPlanResponse.from_plan(p) for p in service.get_workload_plans_by_warehouse(warehouse_id)]


@router.post("/plans/{plan_id}/workers", response_model=WorkloadPlanResponse)
def assign_worker(plan_id: str,
                  request: AssignWorkerRequest,
                  service: PlanningService = Depends(get_planning_service)):
    plan = service.assign_worker_to_shift(
        plan_id,
        request.shift_type,
        request.worker_id,
        request.worker_name,
        request.primary_category,
        request.planned_hours,
    )
    return WorkloadPlanResponse.from_plan(plan)


@router.delete("/plans/{plan_id}/workers/{worker_id}", response_model=WorkloadPlanResponse)
def remove_worker(plan_id: str,
                  worker_id: str,
                  shift: ShiftType,
                  service: PlanningService = Depends(get_planning_service)):
    plan = service.remove_worker_from_shift(plan_id, shift, worker_id)
    return WorkloadPlanResponse.from_plan(plan)


@router.post("/plans/{plan_id}/optimize", response_model=AllocationResponse)
def optimize_labor_allocation(plan_id: str,
                              workers: List[WorkerCapacityRequest],
                              service: PlanningService = Depends(get_planning_service)):
    """
    Allocate available workers onto the plan's shifts.
    """
    result = service.optimize_labor_allocation(plan_id, [w.to_domain() for w in workers])
    return AllocationResponse(
        plan=WorkloadPlanResponse.from_plan(result.plan),
        assignments=[a.to_dict() for a in result.assignments],
        remaining_requirements={c.value: n for c, n in result.remaining_requirements.items()},
        skipped_workers=result.skipped_workers,
        summary_stats=result.summary_stats,
    )


@router.post("/plans/{plan_id}/approve", response_model=WorkloadPlanResponse)
def approve_plan(plan_id: str,
                 x_user_id: str = Header("system"),
                 service: PlanningService = Depends(get_planning_service)):
    plan = service.approve_plan(plan_id, x_user_id)
    return WorkloadPlanResponse.from_plan(plan)


@router.post("/plans/{plan_id}/publish", response_model=WorkloadPlanResponse)
def publish_plan(plan_id: str, service: PlanningService = Depends(get_planning_service)):
    plan = service.publish_plan(plan_id)
    return WorkloadPlanResponse.from_plan(plan)


@router.post("/plans/{plan_id}/cancel", response_model=WorkloadPlanResponse)
def cancel_plan(plan_id: str, reason: str, service: PlanningService = Depends(get_planning_service)):
    plan = service.cancel_plan(plan_id, reason)
    return WorkloadPlanResponse.from_plan(plan)


@router.get("/recommendations", response_model=RecommendationResponse)
def get_recommendations(warehouse_id: str,
                        plan_date: date,
                        service: PlanningService = Depends(get_planning_service)):
    """
    Get staffing recommendations for a warehouse-day.
    """
    result = service.get_recommendations(warehouse_id, plan_date)
    return RecommendationResponse.from_recommendations(result)


app.include_router(router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=API_HOST, port=API_PORT)
