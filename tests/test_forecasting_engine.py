"""Tests for forecast generation and evaluation."""

from datetime import timedelta

import numpy as np
import pandas as pd
import pytest

from workload_planning.config import DEFAULT_MODEL_PARAMETERS
from workload_planning.exceptions import InvalidInputError
from workload_planning.forecasting.engine import ForecastingEngine
from workload_planning.value_objects import ForecastPeriod, WorkloadCategory

from .builders import TEST_FORECAST_DATE, TEST_WAREHOUSE_ID


def generate(period: ForecastPeriod, history: dict):
    return ForecastingEngine().generate("f1", TEST_WAREHOUSE_ID, period, TEST_FORECAST_DATE, history)


class TestGeneration:
    """Test the moving-average generation algorithm."""

    def test_points_per_period(self) -> None:
        """Test one point per future period per category."""
        forecast = generate(ForecastPeriod.DAILY, {
            WorkloadCategory.PICKING: [100, 110, 120],
            WorkloadCategory.PACKING: [50],
        })

        assert len(forecast.data_points) == 2 * ForecastPeriod.DAILY.periods_ahead
        picking = [p for p in forecast.data_points if p.category == WorkloadCategory.PICKING]
        assert all(p.forecasted_volume == 110 for p in picking)
        assert picking[0].confidence_interval == pytest.approx(1.96 * np.std([100, 110, 120]))

    def test_timestamps_spaced_by_period(self) -> None:
        forecast = generate(ForecastPeriod.HOURLY, {WorkloadCategory.PICKING: [10]})

        timestamps = [p.timestamp for p in forecast.data_points]
        assert len(timestamps) == 24
        assert timestamps[0] == TEST_FORECAST_DATE
        assert timestamps[5] == TEST_FORECAST_DATE + timedelta(hours=5)

    def test_weekly_spacing(self) -> None:
        forecast = generate(ForecastPeriod.WEEKLY, {WorkloadCategory.PICKING: [10]})

        assert forecast.data_points[1].timestamp == TEST_FORECAST_DATE + timedelta(hours=168)
        assert len(forecast.data_points) == 12

    def test_window_truncated_to_last_seven(self) -> None:
        """Test only the last seven observations are averaged."""
        engine = ForecastingEngine()

        assert engine.moving_average(list(range(1, 11))) == 7
        assert engine.moving_average([1, 2]) == 1
        assert engine.moving_average([]) == 0

    def test_confidence_interval_uses_full_history(self) -> None:
        engine = ForecastingEngine()
        history = list(range(1, 11))

        assert engine.confidence_interval(history) == pytest.approx(1.96 * np.std(history))
        assert engine.confidence_interval([5]) == 0.0
        assert engine.confidence_interval([]) == 0.0

    def test_empty_history_forecasts_zero(self) -> None:
        forecast = generate(ForecastPeriod.DAILY, {WorkloadCategory.RETURNS: []})

        assert len(forecast.data_points) == 30
        assert forecast.get_total_forecasted_volume(WorkloadCategory.RETURNS) == 0

    @pytest.mark.parametrize("period,model", [
        (ForecastPeriod.HOURLY, "EXPONENTIAL_SMOOTHING"),
        (ForecastPeriod.DAILY, "MOVING_AVERAGE"),
        (ForecastPeriod.WEEKLY, "WEIGHTED_MOVING_AVERAGE"),
        (ForecastPeriod.MONTHLY, "SEASONAL_DECOMPOSITION"),
    ])
    def test_model_label_is_metadata_only(self, period: ForecastPeriod, model: str) -> None:
        """Test the label varies by period while the numbers do not."""
        forecast = generate(period, {WorkloadCategory.PICKING: [100, 200]})

        assert forecast.forecasting_model == model
        assert forecast.model_parameters == DEFAULT_MODEL_PARAMETERS
        assert {p.forecasted_volume for p in forecast.data_points} == {150}

    def test_negative_history_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="non-negative"):
            generate(ForecastPeriod.DAILY, {WorkloadCategory.PICKING: [10, -5]})

    def test_category_names_accepted(self) -> None:
        forecast = generate(ForecastPeriod.DAILY, {"picking": [40]})

        assert forecast.get_total_forecasted_volume(WorkloadCategory.PICKING) == 40 * 30


class TestHistoricalData:
    """Test conversion of historical load tables."""

    def test_sorted_by_date(self) -> None:
        data = pd.DataFrame({
            'date': ['2024-05-03', '2024-05-01', '2024-05-02', '2024-05-01'],
            'category': ['PICKING', 'PICKING', 'PICKING', 'PACKING'],
            'load_units': [30, 10, 20, 7],
        })

        history = ForecastingEngine().load_historical_data(data)

        assert history[WorkloadCategory.PICKING] == [10, 20, 30]
        assert history[WorkloadCategory.PACKING] == [7]

    def test_missing_columns(self) -> None:
        with pytest.raises(InvalidInputError, match="load_units"):
            ForecastingEngine().load_historical_data(pd.DataFrame({'category': ['PICKING']}))

    def test_blank_load_units_rejected(self) -> None:
        """Test a missing volume is an input error rather than a conversion failure."""
        data = pd.DataFrame({
            'date': ['2024-05-01', '2024-05-02'],
            'category': ['PICKING', 'PICKING'],
            'load_units': [100, None],
        })

        with pytest.raises(InvalidInputError, match="load_units"):
            ForecastingEngine().load_historical_data(data)

    def test_non_numeric_load_units_rejected(self) -> None:
        data = pd.DataFrame({'category': ['PICKING'], 'load_units': ['lots']})

        with pytest.raises(InvalidInputError, match="load_units"):
            ForecastingEngine().load_historical_data(data)

    def test_unparseable_date_rejected(self) -> None:
        data = pd.DataFrame({
            'date': ['not-a-date'],
            'category': ['PICKING'],
            'load_units': [100],
        })

        with pytest.raises(InvalidInputError, match="date"):
            ForecastingEngine().load_historical_data(data)

    def test_blank_date_rejected(self) -> None:
        data = pd.DataFrame({
            'date': ['2024-05-01', None],
            'category': ['PICKING', 'PICKING'],
            'load_units': [10, 20],
        })

        with pytest.raises(InvalidInputError, match="date"):
            ForecastingEngine().load_historical_data(data)

    def test_numeric_strings_accepted(self) -> None:
        data = pd.DataFrame({'category': ['PICKING', 'PICKING'], 'load_units': ['10', '20']})

        assert ForecastingEngine().load_historical_data(data) == {WorkloadCategory.PICKING: [10, 20]}


class TestEvaluation:
    """Test accuracy evaluation against observed volumes."""

    def test_metrics(self) -> None:
        forecast = generate(ForecastPeriod.DAILY, {WorkloadCategory.PICKING: [100]})

        metrics = ForecastingEngine().evaluate(forecast, {WorkloadCategory.PICKING: [90, 110]})

        expected_mape = (10 / 90 + 10 / 110) / 2 * 100
        assert metrics['mae'] == pytest.approx(10.0)
        assert metrics['mse'] == pytest.approx(100.0)
        assert metrics['accuracy'] == pytest.approx(100 - expected_mape)

    def test_perfect_forecast(self) -> None:
        forecast = generate(ForecastPeriod.DAILY, {WorkloadCategory.PICKING: [50, 50]})

        metrics = ForecastingEngine().evaluate(forecast, {WorkloadCategory.PICKING: [50, 50, 50]})

        assert metrics == {'accuracy': 100.0, 'mae': 0.0, 'mse': 0.0}

    def test_accuracy_floored_at_zero(self) -> None:
        forecast = generate(ForecastPeriod.DAILY, {WorkloadCategory.PICKING: [500]})

        metrics = ForecastingEngine().evaluate(forecast, {WorkloadCategory.PICKING: [10]})

        assert metrics['accuracy'] == 0.0

    def test_no_overlap(self) -> None:
        forecast = generate(ForecastPeriod.DAILY, {WorkloadCategory.PICKING: [100]})

        with pytest.raises(InvalidInputError, match="actuals"):
            ForecastingEngine().evaluate(forecast, {WorkloadCategory.PACKING: [10]})


class TestModelInfo:

    def test_reports_configuration(self) -> None:
        info = ForecastingEngine(window=5).get_model_info()

        assert info['window'] == 5
        assert info['z_score'] == 1.96
        assert info['models_by_period']['DAILY'] == 'MOVING_AVERAGE'
        assert info['parameters'] == DEFAULT_MODEL_PARAMETERS
