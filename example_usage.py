#!/usr/bin/env python3
"""
Example usage of the Workload Planning system.

This script demonstrates how to use the forecasting, planning and
allocation components together to build and review a daily staffing plan.
"""

import logging
from datetime import date, datetime

from workload_planning import ForecastPeriod, SkillLevel, WorkerCapacity, WorkloadCategory
from workload_planning.planning import (
    InMemoryEventSink,
    InMemoryForecastRepository,
    InMemoryPlanRepository,
    PlanningEventPublisher,
    PlanningService,
)


def build_workers():
    """Sample worker pool with a mix of skill levels."""
    picker = WorkerCapacity("W-001", "Ana Ruiz", SkillLevel.SENIOR)
    packer = WorkerCapacity("W-002", "Ben Okafor", SkillLevel.INTERMEDIATE)
    lead = WorkerCapacity("W-003", "Chen Li", SkillLevel.LEAD)
    returns = WorkerCapacity("W-004", "Dana Smit", SkillLevel.TRAINEE,
                             productivity_rates={WorkloadCategory.RETURNS: 10.0})
    junior = WorkerCapacity("W-005", "Eli Novak", SkillLevel.JUNIOR, is_full_time=False)
    return [picker, packer, lead, returns, junior]


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    print("=== Workload Planning Demo ===\n")

    events = InMemoryEventSink()
    service = PlanningService(
        InMemoryForecastRepository(),
        InMemoryPlanRepository(),
        PlanningEventPublisher(events),
    )

    # 1. Generate a daily forecast from historical volumes
    print("1. Generating demand forecast...")
    history = {
        WorkloadCategory.PICKING: [900, 950, 1010, 980, 1100, 1050, 990, 1020],
        WorkloadCategory.PACKING: [500, 520, 480, 510, 530, 495, 505],
        WorkloadCategory.RETURNS: [40, 35, 50],
    }
    forecast = service.generate_demand_forecast(
        "WH-001", ForecastPeriod.DAILY, datetime(2024, 6, 1, 6, 0), history
    )
    print(f"   Model: {forecast.forecasting_model} ({len(forecast.data_points)} data points)")
    for category in forecast.get_categories():
        print(f"     {category.value}: {forecast.get_total_forecasted_volume(category)} units over horizon")

    # 2. Evaluate against observed volumes
    print("\n2. Evaluating forecast against actuals...")
    forecast = service.evaluate_forecast(forecast.forecast_id, {
        WorkloadCategory.PICKING: [1000, 1040, 990],
        WorkloadCategory.PACKING: [500, 515, 520],
    })
    print(f"   Accuracy: {forecast.accuracy:.1f}%  MAE: {forecast.mean_absolute_error:.2f}")

    # 3. Create a one-day plan with explicit volumes
    print("\n3. Creating workload plan...")
    plan = service.create_workload_plan("WH-001", date(2024, 6, 1), {
        WorkloadCategory.PICKING: 1000,
        WorkloadCategory.PACKING: 500,
        WorkloadCategory.RETURNS: 40,
    }, description="Saturday peak")
    print(f"   Required labor hours: {plan.total_required_labor_hours}")

    # 4. Allocate workers
    print("\n4. Allocating workers...")
    result = service.optimize_labor_allocation(plan.plan_id, build_workers())
    for placed in result.assignments:
        print(f"     {placed.worker_name} -> {placed.shift.value} / {placed.category.value}")
    print(f"   Skipped: {result.skipped_workers}")
    print(f"   Summary: {result.summary_stats}")

    plan = result.plan
    print(f"   Available hours: {plan.total_available_labor_hours}  "
          f"Utilization: {plan.utilization_percentage:.1f}%  "
          f"Cost: ${plan.estimated_labor_cost:,.2f}")

    # 5. Recommendations
    print("\n5. Recommendations:")
    recommendations = service.get_recommendations("WH-001", date(2024, 6, 1))
    for line in recommendations.recommendations:
        print(f"   - {line}")
    for rec in recommendations.category_recommendations:
        print(f"     {rec.category.value}: need {rec.required_workers}, "
              f"have {rec.current_workers} (gap {rec.gap})")
    for rec in recommendations.shift_recommendations:
        print(f"     {rec.shift.value}: need {rec.required_workers}, have {rec.current_workers}")
    for suggestion in recommendations.suggestions:
        print(f"   * {suggestion}")

    # 6. Lifecycle
    print("\n6. Approving and publishing plan...")
    service.approve_plan(plan.plan_id, approved_by="ops-manager")
    plan = service.publish_plan(plan.plan_id)
    print(f"   Status: {plan.status.value}")

    # 7. Export
    print("\n7. Exporting results...")
    forecast.to_dataframe().to_csv('forecast_output.csv', index=False)
    print("   ✓ Forecast saved to forecast_output.csv")
    plan.to_dataframe().to_csv('plan_assignments_output.csv', index=False)
    print("   ✓ Assignments saved to plan_assignments_output.csv")

    print(f"\nEvents published: {[e.event_type for e in events.events]}")
    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    main()
