"""
Forecasting module for demand prediction.
"""

from .engine import ForecastingEngine
from .models import DemandForecast, ForecastDataPoint

__all__ = ["ForecastingEngine", "DemandForecast", "ForecastDataPoint"]
