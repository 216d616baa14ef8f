"""
PracticePilot — main orchestrator.

``PracticeAnalytics`` runs every analyzer over one client's snapshot and
assembles the dashboard report: budget analysis, plan timeline, progress
analysis, efficiency ratios, insights and the bubble hierarchy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from practicepilot.analyzers import metrics
from practicepilot.analyzers.bubble import BubbleHierarchyBuilder
from practicepilot.analyzers.budget_analysis import BudgetAnalysisBuilder
from practicepilot.analyzers.insights import InsightGenerator
from practicepilot.analyzers.plan_utilization import PlanUtilizationAnalyzer
from practicepilot.analyzers.progress_analysis import ProgressAnalysisBuilder
from practicepilot.config import PracticePilotConfig
from practicepilot.models.budget import BudgetAnalysis
from practicepilot.models.insight import InsightType
from practicepilot.models.plan import PlanUtilization
from practicepilot.models.progress import ProgressAnalysis
from practicepilot.models.report import ClientReport, ClientSnapshot, EfficiencyMetrics

logger = logging.getLogger("practicepilot")


@dataclass
class PracticeAnalytics:
    """Top-level orchestrator.

    Usage::

        from practicepilot import PracticeAnalytics

        analytics = PracticeAnalytics.from_config("practicepilot.yaml")
        report = analytics.analyze(snapshot, as_of=date(2025, 3, 1))
        print(report.to_markdown())

    The same snapshot and ``as_of`` always produce the same report.
    """

    config: PracticePilotConfig = field(default_factory=PracticePilotConfig)

    @classmethod
    def from_config(cls, config_path: str | None = None, **overrides: Any) -> PracticeAnalytics:
        """Create an instance from a config file or keyword arguments."""
        return cls(config=PracticePilotConfig.load(config_path, **overrides))

    def analyze(self, snapshot: ClientSnapshot, as_of: date) -> ClientReport:
        """Run the full analysis for one client.

        Args:
            snapshot: Already-fetched client records.
            as_of: Reference date ("today") for every forecast.

        Returns:
            ClientReport. Sections without input data are left as None.
        """
        client_name = snapshot.client_name or self.config.default_client_name
        logger.info(f"Analyzing {client_name} as of {as_of.isoformat()}")

        budget = self._budget(snapshot, as_of) if snapshot.has_budget_data else None
        plan = self._plan(snapshot, budget, as_of) if budget is not None else None
        progress = self._progress(snapshot) if snapshot.has_progress_data else None

        efficiency = None
        if budget is not None and progress is not None:
            efficiency = EfficiencyMetrics(
                cost_per_progress_point=metrics.cost_per_progress_point(
                    budget.total_spent, progress.overall_progress
                ),
                average_session_cost=metrics.average_session_cost(
                    budget.total_spent, progress.sessions_completed
                ),
            )

        insights = InsightGenerator(self.config).generate(
            budget,
            progress,
            client_name=client_name,
            as_of=as_of,
        )
        bubble = BubbleHierarchyBuilder(self.config.bubble).from_items(snapshot.budget_items)

        logger.info(
            f"Analysis complete for {client_name}: {len(insights.all())} insights "
            f"({len(insights.by_type(InsightType.DANGER))} danger)"
        )
        return ClientReport(
            client_name=client_name,
            as_of=as_of,
            budget=budget,
            progress=progress,
            plan=plan,
            efficiency=efficiency,
            insights=insights,
            bubble=bubble,
        )

    def _budget(self, snapshot: ClientSnapshot, as_of: date) -> BudgetAnalysis:
        history = snapshot.spending_history or PlanUtilizationAnalyzer.monthly_totals(
            snapshot.spending_events, as_of
        )
        total_spent = snapshot.total_spent
        if total_spent is None and snapshot.spending_events:
            total_spent = sum(e.amount for e in snapshot.spending_events if e.date <= as_of)

        return BudgetAnalysisBuilder(self.config).build(
            snapshot.budget_items,
            as_of=as_of,
            total_budget=snapshot.total_budget,
            total_spent=total_spent,
            spending_history=history,
            plan_start=snapshot.plan_start,
            plan_end=snapshot.plan_end,
        )

    def _plan(
        self,
        snapshot: ClientSnapshot,
        budget: BudgetAnalysis,
        as_of: date,
    ) -> PlanUtilization | None:
        if snapshot.plan_start is None:
            return None
        return PlanUtilizationAnalyzer.analyze(
            total_budget=budget.total_budget,
            used_budget=budget.total_spent,
            plan_start=snapshot.plan_start,
            as_of=as_of,
            plan_end=snapshot.plan_end,
            events=snapshot.spending_events,
        )

    def _progress(self, snapshot: ClientSnapshot) -> ProgressAnalysis:
        builder = ProgressAnalysisBuilder(self.config.progress)
        completed, cancelled = builder.count_sessions(snapshot.session_statuses)
        if snapshot.sessions_completed is not None:
            completed = snapshot.sessions_completed
        if snapshot.sessions_cancelled is not None:
            cancelled = snapshot.sessions_cancelled
        goals = [builder.resolve_goal(goal) for goal in snapshot.goals]
        return builder.build(goals, completed, cancelled)
