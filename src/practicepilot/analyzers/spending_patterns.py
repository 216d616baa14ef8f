"""
Spending Pattern Classifier — trend label and per-category usage flags.

Given a time series of per-period spend (oldest first), the classifier
labels the trend as increasing, decreasing, fluctuating or stable. Given
per-category spend and allocation it flags categories in high use and
categories projected to overrun their allocation by the end of the plan.
"""

from __future__ import annotations

import logging
import statistics
from collections.abc import Mapping, Sequence

from practicepilot.analyzers.metrics import coefficient_of_variation
from practicepilot.config import PatternConfig
from practicepilot.models.budget import SpendingPatterns, SpendingTrend

logger = logging.getLogger("practicepilot.analyzers.spending_patterns")


def _is_monotonic(values: Sequence[float]) -> bool:
    pairs = list(zip(values, values[1:]))
    return all(a <= b for a, b in pairs) or all(a >= b for a, b in pairs)


class SpendingPatternClassifier:
    """Classify spending behaviour from period totals and category splits.

    Example usage:
        classifier = SpendingPatternClassifier()
        trend = classifier.classify_trend([1200, 1150, 1300, 1900])
        # SpendingTrend.INCREASING
    """

    def __init__(self, config: PatternConfig | None = None):
        self.config = config or PatternConfig()

    def classify_trend(self, period_totals: Sequence[float]) -> SpendingTrend:
        """Label the most recent period against the ones before it.

        Volatility is checked first so a noisy but flat series is reported
        as fluctuating rather than trending.
        """
        if len(period_totals) < 2:
            return SpendingTrend.STABLE

        window = [float(v) for v in period_totals[-(self.config.trend_window + 1):]]
        latest = window[-1]
        prior = window[:-1]

        cv = coefficient_of_variation(window)
        if cv > self.config.volatility_threshold and not _is_monotonic(window):
            logger.debug(f"Trend fluctuating: cv={cv:.3f} over {len(window)} periods")
            return SpendingTrend.FLUCTUATING

        prior_mean = statistics.fmean(prior)
        if prior_mean <= 0:
            return SpendingTrend.INCREASING if latest > 0 else SpendingTrend.STABLE
        if latest > prior_mean * self.config.increase_factor:
            return SpendingTrend.INCREASING
        if latest < prior_mean * self.config.decrease_factor:
            return SpendingTrend.DECREASING
        return SpendingTrend.STABLE

    def high_usage_categories(
        self,
        category_spend: Mapping[str, float],
        category_allocation: Mapping[str, float],
    ) -> list[str]:
        """Categories whose spend has reached the high-usage share of allocation."""
        flagged = []
        for category, allocation in category_allocation.items():
            if allocation <= 0:
                continue
            spent = max(0.0, category_spend.get(category, 0.0))
            if spent / allocation >= self.config.high_usage_ratio:
                flagged.append(category)
        return flagged

    @staticmethod
    def extrapolate(spent: float, periods_elapsed: float, periods_remaining: float) -> float:
        """Linear end-of-plan spend at the average rate so far."""
        if periods_elapsed <= 0:
            return spent
        rate = spent / periods_elapsed
        return spent + rate * max(0.0, periods_remaining)

    def projected_overages(
        self,
        category_spend: Mapping[str, float],
        category_allocation: Mapping[str, float],
        periods_elapsed: float = 0.0,
        periods_remaining: float = 0.0,
    ) -> list[str]:
        """Categories whose extrapolated end-of-plan spend exceeds allocation."""
        flagged = []
        for category, allocation in category_allocation.items():
            if allocation <= 0:
                continue
            spent = max(0.0, category_spend.get(category, 0.0))
            projected = self.extrapolate(spent, periods_elapsed, periods_remaining)
            if projected > allocation:
                logger.debug(
                    f"Projected overage in {category}: ${projected:,.2f} vs ${allocation:,.2f} allocated"
                )
                flagged.append(category)
        return flagged

    def classify(
        self,
        period_totals: Sequence[float],
        category_spend: Mapping[str, float],
        category_allocation: Mapping[str, float],
        periods_elapsed: float = 0.0,
        periods_remaining: float = 0.0,
    ) -> SpendingPatterns:
        """Run trend classification and both category checks."""
        return SpendingPatterns(
            trend=self.classify_trend(period_totals),
            high_usage_categories=self.high_usage_categories(category_spend, category_allocation),
            projected_overages=self.projected_overages(
                category_spend,
                category_allocation,
                periods_elapsed,
                periods_remaining,
            ),
        )
