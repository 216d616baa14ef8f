"""
Budget Analysis Builder — one BudgetAnalysis from a client's budget items.

Aggregates items into per-category allocation and spend, then combines the
metric primitives, the spending pattern classifier and a depletion forecast.
Category maps keep first-seen order so identical input always yields
identical output.
"""

from __future__ import annotations

import logging
import statistics
from collections.abc import Iterable, Mapping, Sequence
from datetime import date

from practicepilot.analyzers import metrics
from practicepilot.analyzers.spending_patterns import SpendingPatternClassifier
from practicepilot.config import PracticePilotConfig
from practicepilot.models.budget import DEFAULT_CATEGORY, BudgetAnalysis, BudgetItem

logger = logging.getLogger("practicepilot.analyzers.budget_analysis")


def _distribute(total: float, weights: Mapping[str, float]) -> dict[str, float]:
    """Split ``total`` across keys in proportion to ``weights``.

    Keys with no usable weight share the total evenly.
    """
    if not weights:
        return {}
    weight_sum = sum(max(0.0, w) for w in weights.values())
    if weight_sum <= 0:
        share = total / len(weights)
        return {key: share for key in weights}
    return {key: total * max(0.0, w) / weight_sum for key, w in weights.items()}


class BudgetAnalysisBuilder:
    """
    Build a BudgetAnalysis from budget items.

    Example usage:
        builder = BudgetAnalysisBuilder()
        analysis = builder.build(
            items,
            as_of=date(2025, 3, 1),
            spending_history=[900, 1100, 1250],
        )
        print(f"{analysis.utilization_rate:.1f}% used")
    """

    def __init__(self, config: PracticePilotConfig | None = None):
        self.config = config or PracticePilotConfig()
        self.classifier = SpendingPatternClassifier(self.config.patterns)

    def build(
        self,
        items: Iterable[BudgetItem],
        *,
        as_of: date,
        total_budget: float | None = None,
        total_spent: float | None = None,
        spending_history: Sequence[float] = (),
        plan_start: date | None = None,
        plan_end: date | None = None,
    ) -> BudgetAnalysis:
        """
        Build the analysis.

        Args:
            items: Budget items for one client.
            as_of: Reference date for forecasts.
            total_budget: Plan funds; defaults to the sum of item allocations.
            total_spent: Spend to distribute by allocation when no item
                reports its own spend.
            spending_history: Per-period (monthly) spend, oldest first.
            plan_start: Plan start date, used for burn rate and overages.
            plan_end: Plan end date, used for overage projection.

        Returns:
            BudgetAnalysis; all zeros for empty input.
        """
        allocation_by_category: dict[str, float] = {}
        reported_spend: dict[str, float] = {}
        has_reported_spend = False

        for item in items:
            category = item.category
            allocation_by_category[category] = allocation_by_category.get(category, 0.0) + max(0.0, item.allocated)
            reported_spend.setdefault(category, 0.0)
            spent = item.spent
            if spent is not None:
                has_reported_spend = True
                reported_spend[category] += max(0.0, spent)

        if has_reported_spend or total_spent is None:
            spending_by_category = reported_spend
        elif not allocation_by_category:
            # No items to spread it over; keep the spend so totals still add up
            spending_by_category = {DEFAULT_CATEGORY: max(0.0, total_spent)}
        else:
            spending_by_category = _distribute(max(0.0, total_spent), allocation_by_category)

        spent_total = sum(spending_by_category.values())
        total_allocated = sum(allocation_by_category.values())
        budget_total = max(0.0, total_budget) if total_budget is not None else total_allocated

        history = [max(0.0, float(v)) for v in spending_history]
        monthly_burn = self._monthly_burn_rate(history, spent_total, plan_start, as_of)
        periods_elapsed, periods_remaining = self._plan_periods(history, plan_start, plan_end, as_of)

        patterns = self.classifier.classify(
            history,
            spending_by_category,
            allocation_by_category,
            periods_elapsed,
            periods_remaining,
        )
        remaining = metrics.remaining_balance(budget_total, spent_total)

        analysis = BudgetAnalysis(
            as_of=as_of,
            total_budget=budget_total,
            total_allocated=total_allocated,
            total_spent=spent_total,
            remaining=remaining,
            utilization_rate=metrics.utilization_rate(spent_total, budget_total),
            spending_by_category=spending_by_category,
            allocation_by_category=allocation_by_category,
            spending_patterns=patterns,
            spending_velocity=metrics.spending_velocity(history),
            monthly_burn_rate=monthly_burn,
            forecasted_depletion=metrics.forecast_depletion(remaining, monthly_burn, as_of),
        )
        logger.debug(
            f"Budget analysis: ${spent_total:,.2f} of ${budget_total:,.2f} "
            f"({analysis.utilization_rate:.1f}%), trend={patterns.trend.value}"
        )
        return analysis

    @staticmethod
    def _monthly_burn_rate(
        history: Sequence[float],
        spent_total: float,
        plan_start: date | None,
        as_of: date,
    ) -> float:
        """Average spend per month from history, else from plan start."""
        if history:
            return statistics.fmean(history)
        if plan_start is not None and plan_start < as_of:
            months_elapsed = max((as_of - plan_start).days, 1) / metrics.DAYS_PER_MONTH
            return spent_total / months_elapsed
        return 0.0

    @staticmethod
    def _plan_periods(
        history: Sequence[float],
        plan_start: date | None,
        plan_end: date | None,
        as_of: date,
    ) -> tuple[float, float]:
        """Months elapsed and remaining in the plan."""
        if plan_start is None:
            return float(len(history)), 0.0

        elapsed_until = min(as_of, plan_end) if plan_end else as_of
        elapsed = max(0, (elapsed_until - plan_start).days) / metrics.DAYS_PER_MONTH
        if plan_end is None:
            return elapsed, 0.0
        remaining = max(0, (plan_end - max(as_of, plan_start)).days) / metrics.DAYS_PER_MONTH
        return elapsed, remaining
