"""
Client snapshot and report models — the orchestrator's input and output.
"""

from __future__ import annotations

from datetime import date

from pydantic import Field

from practicepilot.models.base import CamelModel
from practicepilot.models.budget import BudgetAnalysis, BudgetItem, SpendingEvent
from practicepilot.models.insight import BubbleNode, InsightGroups
from practicepilot.models.plan import PlanUtilization
from practicepilot.models.progress import GoalProgress, ProgressAnalysis


class ClientSnapshot(CamelModel):
    """Already-fetched records for one client.

    This is what the data layer hands over and the analytics engine consumes.
    """

    client_name: str | None = None
    budget_items: list[BudgetItem] = Field(default_factory=list)
    total_budget: float | None = Field(default=None, description="Plan funds, if not the sum of items")
    total_spent: float | None = Field(default=None, description="Session-derived spend, if items carry none")
    spending_history: list[float] = Field(default_factory=list, description="Monthly totals, oldest first")
    spending_events: list[SpendingEvent] = Field(default_factory=list)
    plan_start: date | None = None
    plan_end: date | None = None
    goals: list[GoalProgress] = Field(default_factory=list)
    sessions_completed: int | None = None
    sessions_cancelled: int | None = None
    session_statuses: list[str] = Field(default_factory=list)

    @property
    def has_budget_data(self) -> bool:
        return bool(self.budget_items) or self.total_budget is not None

    @property
    def has_progress_data(self) -> bool:
        return bool(
            self.goals
            or self.session_statuses
            or self.sessions_completed is not None
            or self.sessions_cancelled is not None
        )


class EfficiencyMetrics(CamelModel):
    """Budget-to-outcome ratios."""

    cost_per_progress_point: float = 0.0
    average_session_cost: float = 0.0


class ClientReport(CamelModel):
    """Everything the dashboard shows for one client."""

    client_name: str
    as_of: date
    budget: BudgetAnalysis | None = None
    progress: ProgressAnalysis | None = None
    plan: PlanUtilization | None = None
    efficiency: EfficiencyMetrics | None = None
    insights: InsightGroups = Field(default_factory=InsightGroups)
    bubble: BubbleNode

    def to_markdown(self, currency_symbol: str = "$") -> str:
        """Export report as Markdown."""
        from practicepilot.exporters.markdown import render_markdown

        return render_markdown(self, currency_symbol=currency_symbol)
