"""
Forecast generation and evaluation.

Every period uses the same placeholder statistic: a moving average over the
last observations for the volume and 1.96 population standard deviations
for the confidence interval. The model label recorded on the forecast
depends on the period but does not change the numbers.
"""

import logging
from typing import List, Dict, Any, Mapping, Optional, Sequence
from datetime import datetime, timedelta
import pandas as pd
import numpy as np
from sklearn.metrics import mean_absolute_error, mean_squared_error

from ..config import (
    CONFIDENCE_Z_SCORE,
    DEFAULT_MODEL_PARAMETERS,
    FORECASTING_MODELS,
    MOVING_AVERAGE_WINDOW,
)
from ..exceptions import InvalidInputError
from ..value_objects import ForecastPeriod, WorkloadCategory
from .models import DemandForecast

logger = logging.getLogger(__name__)

HistoricalData = Mapping[WorkloadCategory, Sequence[int]]


class ForecastingEngine:
    """
    Generates demand forecasts from per-category historical volumes.

    Historical series are ordered oldest first. Categories with no history
    still get data points, forecasted at zero.
    """

    def __init__(self,
                 window: int = MOVING_AVERAGE_WINDOW,
                 z_score: float = CONFIDENCE_Z_SCORE):
        """
        Initialize forecasting engine.

        Args:
            window: Number of most recent observations averaged
            z_score: Multiplier applied to the standard deviation
        """
        if window < 1:
            raise InvalidInputError('window', window, "must be at least 1")
        self.window = window
        self.z_score = z_score

    @staticmethod
    def select_model(period: ForecastPeriod) -> str:
        """Model label recorded for forecasts of the given period."""
        return FORECASTING_MODELS[ForecastPeriod.parse(period).value]

    def generate(self,
                 forecast_id: str,
                 warehouse_id: str,
                 period: ForecastPeriod,
                 forecast_date: datetime,
                 historical_data: HistoricalData) -> DemandForecast:
        """
        Build a forecast covering period.periods_ahead future periods.

        Args:
            forecast_id: Identifier for the new forecast
            warehouse_id: Warehouse the forecast applies to
            period: Forecast period; sets spacing and horizon
            forecast_date: Timestamp of the first forecasted period
            historical_data: Mapping of category to observed volumes

        Returns:
            DemandForecast with model metadata and data points attached
        """
        period = ForecastPeriod.parse(period)
        history = self._validate_history(historical_data)

        forecast = DemandForecast.create(forecast_id, warehouse_id, period, forecast_date)
        forecast.set_forecasting_model(self.select_model(period), DEFAULT_MODEL_PARAMETERS)

        for category, observations in history.items():
            # Same values for every future period of a category
            volume = self.moving_average(observations)
            interval = self.confidence_interval(observations)

            for i in range(period.periods_ahead):
                timestamp = forecast.forecast_date + timedelta(hours=i * period.hours_per_period)
                forecast.add_data_point(timestamp, category, volume, interval)

        logger.debug("Generated %d data points for forecast %s",
                     len(forecast.data_points), forecast_id)
        return forecast

    def moving_average(self, observations: Sequence[int]) -> int:
        """Integer mean of the last `window` observations (0 for empty history)."""
        if len(observations) == 0:
            return 0
        recent = pd.Series(list(observations), dtype=float).tail(self.window)
        return int(recent.mean())

    def confidence_interval(self, observations: Sequence[int]) -> float:
        """z-score times the population standard deviation of the full history."""
        if len(observations) < 2:
            return 0.0
        return float(np.std(np.asarray(observations, dtype=float)) * self.z_score)

    def load_historical_data(self, data: pd.DataFrame) -> Dict[WorkloadCategory, List[int]]:
        """
        Convert a historical load table into per-category series.

        Args:
            data: DataFrame with columns ['category', 'load_units'] and an
                optional 'date' column used for ordering

        Returns:
            Mapping of category to volumes, oldest first
        """
        required_columns = ['category', 'load_units']
        missing_cols = [col for col in required_columns if col not in data.columns]
        if missing_cols:
            raise InvalidInputError('columns', missing_cols, f"missing required columns {missing_cols}")

        data = data.copy()
        if data['category'].isna().any():
            raise InvalidInputError('category', None, "blank category in historical data")

        data['load_units'] = pd.to_numeric(data['load_units'], errors='coerce')
        if data['load_units'].isna().any():
            raise InvalidInputError('load_units', None, "values must be present and numeric")

        if 'date' in data.columns:
            if not pd.api.types.is_datetime64_any_dtype(data['date']):
                try:
                    data['date'] = pd.to_datetime(data['date'])
                except (ValueError, TypeError) as e:
                    raise InvalidInputError('date', None, f"unparseable date ({e})") from e
            if data['date'].isna().any():
                raise InvalidInputError('date', None, "blank date in historical data")
            data = data.sort_values('date', kind='stable')

        history: Dict[WorkloadCategory, List[int]] = {}
        for raw_category, group in data.groupby('category', sort=False):
            category = WorkloadCategory.parse(raw_category)
            history.setdefault(category, []).extend(int(v) for v in group['load_units'].tolist())
        return history

    def evaluate(self,
                 forecast: DemandForecast,
                 actuals: HistoricalData) -> Dict[str, float]:
        """
        Evaluate a forecast against observed volumes.

        For each category the forecast's volumes (in data point order) are
        paired with the observed volumes over their common length.

        Returns:
            Dictionary with accuracy (100 - MAPE, floored at 0), mae and mse
        """
        predicted: List[int] = []
        observed: List[int] = []
        for raw_category, values in actuals.items():
            category = WorkloadCategory.parse(raw_category)
            forecast_values = [p.forecasted_volume for p in forecast.data_points
                               if p.category == category]
            n = min(len(forecast_values), len(values))
            predicted.extend(forecast_values[:n])
            observed.extend(int(v) for v in list(values)[:n])

        if not observed:
            raise InvalidInputError('actuals', None, "no observations overlap the forecast")

        mae = float(mean_absolute_error(observed, predicted))
        mse = float(mean_squared_error(observed, predicted))

        actual_arr = np.array(observed, dtype=float)
        predicted_arr = np.array(predicted, dtype=float)
        nonzero = actual_arr != 0
        if nonzero.any():
            mape = float(np.mean(np.abs((actual_arr[nonzero] - predicted_arr[nonzero])
                                        / actual_arr[nonzero])) * 100)
        else:
            mape = 0.0 if mae == 0 else 100.0

        return {
            'accuracy': max(0.0, 100.0 - mape),
            'mae': mae,
            'mse': mse,
        }

    def get_model_info(self) -> Dict[str, Any]:
        """Get information about model labels and current configuration."""
        return {
            'models_by_period': dict(FORECASTING_MODELS),
            'window': self.window,
            'z_score': self.z_score,
            'parameters': dict(DEFAULT_MODEL_PARAMETERS),
        }

    @staticmethod
    def _validate_history(historical_data: Optional[HistoricalData]) -> Dict[WorkloadCategory, List[int]]:
        if historical_data is None:
            raise InvalidInputError('historical_data', None, "is required")

        history: Dict[WorkloadCategory, List[int]] = {}
        for raw_category, values in historical_data.items():
            category = WorkloadCategory.parse(raw_category)
            observations = [int(v) for v in (values or [])]
            if any(v < 0 for v in observations):
                raise InvalidInputError('historical_data', category.value,
                                        "observations must be non-negative")
            history[category] = observations
        return history
