"""
Demand forecast aggregate.

A forecast holds time-stamped demand data points per work category for one
warehouse, together with the model that produced them and its accuracy.
Data points are append-only once the forecast exists.
"""

from typing import List, Dict, Any, Optional, Tuple
from datetime import datetime, timezone
from dataclasses import dataclass
import pandas as pd

from ..config import ACCURACY_THRESHOLD
from ..exceptions import InvalidInputError
from ..value_objects import ForecastPeriod, WorkloadCategory


@dataclass(frozen=True)
class ForecastDataPoint:
    """Forecasted volume for one category at one point in time."""

    timestamp: datetime
    category: WorkloadCategory
    forecasted_volume: int
    confidence_interval: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp.isoformat(),
            'category': self.category.value,
            'forecasted_volume': self.forecasted_volume,
            'confidence_interval': self.confidence_interval,
        }


class DemandForecast:
    """
    Aggregate root for demand forecasting.

    Duplicate (timestamp, category) points are legal and are summed when
    volumes are aggregated per category.
    """

    def __init__(self,
                 forecast_id: str,
                 warehouse_id: str,
                 period: ForecastPeriod,
                 forecast_date: datetime,
                 created_at: Optional[datetime] = None):
        self.forecast_id = forecast_id
        self.warehouse_id = warehouse_id
        self.period = period
        self.forecast_date = forecast_date
        self.created_at = created_at
        self.forecasting_model: Optional[str] = None
        self._model_parameters: Dict[str, Any] = {}
        self.accuracy: Optional[float] = None
        self.mean_absolute_error: Optional[float] = None
        self.mean_squared_error: Optional[float] = None
        self._data_points: List[ForecastDataPoint] = []

    @classmethod
    def create(cls,
               forecast_id: str,
               warehouse_id: str,
               period: ForecastPeriod,
               forecast_date: datetime) -> 'DemandForecast':
        """
        Create a new forecast with no data points, model or accuracy.

        Args:
            forecast_id: Unique forecast identifier
            warehouse_id: Warehouse the forecast applies to
            period: Forecast horizon granularity
            forecast_date: Start of the forecast horizon

        Raises:
            InvalidInputError: If any argument is missing
        """
        for field_name, value in (('forecast_id', forecast_id),
                                  ('warehouse_id', warehouse_id),
                                  ('period', period),
                                  ('forecast_date', forecast_date)):
            if value is None or value == '':
                raise InvalidInputError(field_name, value, "is required")

        # Stored as naive UTC
        if forecast_date.tzinfo is not None:
            forecast_date = forecast_date.astimezone(timezone.utc).replace(tzinfo=None)

        return cls(
            forecast_id=forecast_id,
            warehouse_id=warehouse_id,
            period=ForecastPeriod.parse(period),
            forecast_date=forecast_date,
            created_at=datetime.now(),
        )

    @property
    def data_points(self) -> Tuple[ForecastDataPoint, ...]:
        return tuple(self._data_points)

    @property
    def model_parameters(self) -> Dict[str, Any]:
        return dict(self._model_parameters)

    def add_data_point(self,
                       timestamp: datetime,
                       category: WorkloadCategory,
                       forecasted_volume: int,
                       confidence_interval: Optional[float] = None) -> ForecastDataPoint:
        """Append a data point. Negative volumes are rejected."""
        category = WorkloadCategory.parse(category)
        if forecasted_volume is None or forecasted_volume < 0:
            raise InvalidInputError('forecasted_volume', forecasted_volume, "must be non-negative")
        if confidence_interval is not None and confidence_interval < 0:
            raise InvalidInputError('confidence_interval', confidence_interval, "must be non-negative")

        point = ForecastDataPoint(
            timestamp=timestamp,
            category=category,
            forecasted_volume=int(forecasted_volume),
            confidence_interval=float(confidence_interval or 0.0),
        )
        self._data_points.append(point)
        return point

    def set_forecasting_model(self, model: str, parameters: Optional[Dict[str, Any]] = None) -> None:
        """Replace model metadata wholesale."""
        self.forecasting_model = model
        self._model_parameters = dict(parameters) if parameters else {}

    def update_accuracy_metrics(self, accuracy: float, mae: float, mse: float) -> None:
        self.accuracy = accuracy
        self.mean_absolute_error = mae
        self.mean_squared_error = mse

    def get_forecasted_volume(self, timestamp: datetime, category: WorkloadCategory) -> int:
        """Volume of the first point matching timestamp exactly, else 0."""
        for point in self._data_points:
            if point.timestamp == timestamp and point.category == category:
                return point.forecasted_volume
        return 0

    def get_total_forecasted_volume(self, category: WorkloadCategory) -> int:
        return sum(p.forecasted_volume for p in self._data_points if p.category == category)

    def get_peak_demand_time(self, category: WorkloadCategory) -> Optional[datetime]:
        """Timestamp of the highest-volume point for category; first one wins ties."""
        peak = None
        for point in self._data_points:
            if point.category != category:
                continue
            if peak is None or point.forecasted_volume > peak.forecasted_volume:
                peak = point
        return peak.timestamp if peak is not None else None

    def get_categories(self) -> List[WorkloadCategory]:
        """Categories present in the forecast, in category declaration order."""
        present = {p.category for p in self._data_points}
        return [c for c in WorkloadCategory if c in present]

    def is_accurate(self) -> bool:
        return self.accuracy is not None and self.accuracy >= ACCURACY_THRESHOLD

    def needs_refresh(self, now: Optional[datetime] = None) -> bool:
        """
        Check whether the forecast is stale for its period.

        Age is counted in whole elapsed hours and compared with the period's
        threshold (HOURLY 1h, DAILY 24h, WEEKLY 168h, MONTHLY 720h).
        """
        if self.created_at is None:
            return True
        now = now or datetime.now()
        hours_old = int((now - self.created_at).total_seconds() // 3600)
        return hours_old >= self.period.refresh_threshold_hours

    def to_dataframe(self) -> pd.DataFrame:
        """Convert data points to a pandas DataFrame."""
        return pd.DataFrame(
            [
                {
                    'timestamp': p.timestamp,
                    'category': p.category.value,
                    'forecasted_volume': p.forecasted_volume,
                    'confidence_interval': p.confidence_interval,
                }
                for p in self._data_points
            ],
            columns=['timestamp', 'category', 'forecasted_volume', 'confidence_interval'],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'forecast_id': self.forecast_id,
            'warehouse_id': self.warehouse_id,
            'period': self.period.value,
            'forecast_date': self.forecast_date.isoformat(),
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'forecasting_model': self.forecasting_model,
            'model_parameters': self.model_parameters,
            'accuracy': self.accuracy,
            'mean_absolute_error': self.mean_absolute_error,
            'mean_squared_error': self.mean_squared_error,
            'data_points': [p.to_dict() for p in self._data_points],
        }

    def __repr__(self) -> str:
        return (f"DemandForecast(id={self.forecast_id!r}, warehouse={self.warehouse_id!r}, "
                f"period={self.period.value}, data_points={len(self._data_points)}, "
                f"accuracy={self.accuracy})")
