"""Tests for category, shift, skill and period reference data."""

import pytest

from workload_planning.exceptions import InvalidInputError
from workload_planning.value_objects import ForecastPeriod, ShiftType, SkillLevel, WorkloadCategory


class TestWorkloadCategory:
    """Test category rates and labor calculations."""

    def test_standard_rates(self) -> None:
        """Test each category carries its standard productivity rate."""
        assert WorkloadCategory.PICKING.standard_rate == 25.0
        assert WorkloadCategory.PACKING.standard_rate == 20.0
        assert WorkloadCategory.RECEIVING.standard_rate == 15.0
        assert all(c.standard_rate > 0 for c in WorkloadCategory)

    def test_labor_hours(self) -> None:
        """Test labor hours are volume divided by rate."""
        assert WorkloadCategory.PICKING.calculate_labor_hours(200) == pytest.approx(8.0)
        assert WorkloadCategory.PACKING.calculate_labor_hours(100) == pytest.approx(5.0)
        assert WorkloadCategory.PICKING.calculate_labor_hours(0) == 0

    def test_required_workers_rounds_up(self) -> None:
        """Test partial shifts need a whole extra worker."""
        assert WorkloadCategory.PICKING.calculate_required_workers(200, 8) == 1
        assert WorkloadCategory.PICKING.calculate_required_workers(201, 8) == 2
        assert WorkloadCategory.PICKING.calculate_required_workers(0, 8) == 0

    def test_core_operations(self) -> None:
        """Test the core category set."""
        core = {c for c in WorkloadCategory if c.is_core_operation}
        assert core == {
            WorkloadCategory.RECEIVING,
            WorkloadCategory.PICKING,
            WorkloadCategory.PACKING,
            WorkloadCategory.REPLENISHMENT,
        }

    def test_parse(self) -> None:
        """Test parsing names case-insensitively and rejecting unknown values."""
        assert WorkloadCategory.parse("picking") is WorkloadCategory.PICKING
        assert WorkloadCategory.parse(WorkloadCategory.RETURNS) is WorkloadCategory.RETURNS

        with pytest.raises(InvalidInputError, match="WorkloadCategory"):
            WorkloadCategory.parse("SHIPPING")


class TestShiftType:
    """Test shift classification and premiums."""

    def test_premiums(self) -> None:
        """Test night and weekend premiums."""
        assert ShiftType.NIGHT_SHIFT.is_night_shift
        assert ShiftType.NIGHT_SHIFT.premium_multiplier == 1.25
        assert ShiftType.WEEKEND_DAY.is_weekend_shift
        assert ShiftType.WEEKEND_DAY.premium_multiplier == 1.50
        assert not ShiftType.DAY_SHIFT.is_night_shift
        assert not ShiftType.DAY_SHIFT.is_weekend_shift
        assert ShiftType.DAY_SHIFT.premium_multiplier == 1.0

    def test_night_premium_applies_to_weekend_night(self) -> None:
        """Test a shift that is both night and weekend gets the night premium."""
        assert ShiftType.WEEKEND_NIGHT.is_night_shift
        assert ShiftType.WEEKEND_NIGHT.is_weekend_shift
        assert ShiftType.WEEKEND_NIGHT.premium_multiplier == 1.25

    def test_classification_is_by_membership(self) -> None:
        """Test overnight counts as night although it starts at midnight."""
        assert ShiftType.OVERNIGHT_SHIFT.is_night_shift
        assert not ShiftType.EVENING_SHIFT.is_night_shift

    def test_all_shifts_are_eight_hours(self) -> None:
        assert len(ShiftType) == 8
        assert all(s.duration_hours == 8 for s in ShiftType)


class TestSkillLevel:
    """Test skill multipliers and capabilities."""

    def test_effective_rate(self) -> None:
        assert SkillLevel.TRAINEE.calculate_effective_rate(20.0) == pytest.approx(12.0)
        assert SkillLevel.EXPERT.calculate_effective_rate(20.0) == pytest.approx(28.0)

    def test_rank_follows_declaration_order(self) -> None:
        """Test LEAD ranks highest even though EXPERT has the larger multiplier."""
        assert SkillLevel.TRAINEE.rank == 0
        assert SkillLevel.LEAD.rank > SkillLevel.EXPERT.rank
        assert SkillLevel.EXPERT.productivity_multiplier > SkillLevel.LEAD.productivity_multiplier

    def test_capabilities(self) -> None:
        assert SkillLevel.SENIOR.can_train_others
        assert SkillLevel.EXPERT.can_lead_team
        assert not SkillLevel.JUNIOR.can_lead_team


class TestForecastPeriod:
    """Test forecast period constants."""

    def test_durations(self) -> None:
        assert ForecastPeriod.HOURLY.hours_per_period == 1
        assert ForecastPeriod.HOURLY.periods_ahead == 24
        assert ForecastPeriod.DAILY.periods_ahead == 30
        assert ForecastPeriod.MONTHLY.total_forecast_hours == 720 * 6

    def test_refresh_thresholds(self) -> None:
        thresholds = {p: p.refresh_threshold_hours for p in ForecastPeriod}
        assert thresholds == {
            ForecastPeriod.HOURLY: 1,
            ForecastPeriod.DAILY: 24,
            ForecastPeriod.WEEKLY: 168,
            ForecastPeriod.MONTHLY: 720,
        }

    def test_horizon_classification(self) -> None:
        assert ForecastPeriod.HOURLY.is_short_term
        assert ForecastPeriod.MONTHLY.is_long_term
        assert not ForecastPeriod.WEEKLY.is_short_term
