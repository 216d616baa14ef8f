"""
Plan utilization models — day- and month-level view of plan spend.
"""

from __future__ import annotations

from datetime import date

from pydantic import Field

from practicepilot.models.base import CamelModel


class MonthlySpending(CamelModel):
    """Actual, target and projected spend for one calendar month of a plan."""

    month: str  # "Jan 2025"
    month_start: date
    actual_spending: float = 0.0
    target_spending: float = 0.0
    projected_spending: float | None = None
    cumulative_actual: float = 0.0
    cumulative_target: float = 0.0
    cumulative_projected: float | None = None
    is_projected: bool = False


class PlanUtilization(CamelModel):
    """Utilization of a funding plan between its start and end dates."""

    plan_start: date
    plan_end: date
    total_budget: float = 0.0
    used_budget: float = 0.0
    remaining_budget: float = 0.0
    utilization_percentage: float = 0.0
    total_days: int = 0
    days_elapsed: int = 0
    remaining_days: int = 0
    daily_budget: float = 0.0
    daily_spend_rate: float = 0.0
    projected_end_date: date | None = None
    projected_overspend: float | None = None
    projected_remaining_budget: float = 0.0
    monthly_spending: list[MonthlySpending] = Field(default_factory=list)

    @property
    def is_overspending(self) -> bool:
        return self.projected_overspend is not None
