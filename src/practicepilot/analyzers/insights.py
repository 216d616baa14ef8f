"""
Combined Insight Generator — threshold rules over budget and progress.

Rules run in a fixed order and only ever append, so the same analyses
always produce the same insights in the same order. Every message embeds
the numbers it is based on: percentages to one decimal, currency to two.

Groups:
- **budget**   — utilization, trend, projected overages, depletion horizon
- **progress** — overall progress, attendance, strongest/weakest goal
- **summary**  — efficiency and a single final-priority verdict when both
  analyses exist, else a headline figure for the one that does
"""

from __future__ import annotations

import logging
from datetime import date

from practicepilot.analyzers import metrics
from practicepilot.config import PracticePilotConfig
from practicepilot.models.budget import BudgetAnalysis, SpendingTrend
from practicepilot.models.insight import Insight, InsightGroups, InsightType
from practicepilot.models.progress import ProgressAnalysis

logger = logging.getLogger("practicepilot.analyzers.insights")


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


class InsightGenerator:
    """
    Generate categorized insights from budget and progress analyses.

    Example usage:
        generator = InsightGenerator()
        insights = generator.generate(budget_analysis, progress_analysis, client_name="Ava")
        for insight in insights.ranked():
            print(insight.type.value, insight.message)
    """

    def __init__(self, config: PracticePilotConfig | None = None):
        self.config = config or PracticePilotConfig()

    def _money(self, amount: float) -> str:
        return f"{self.config.currency_symbol}{amount:,.2f}"

    def generate(
        self,
        budget: BudgetAnalysis | None = None,
        progress: ProgressAnalysis | None = None,
        *,
        client_name: str | None = None,
        as_of: date | None = None,
    ) -> InsightGroups:
        """
        Evaluate every rule against the supplied analyses.

        Args:
            budget: Budget analysis, if available.
            progress: Progress analysis, if available.
            client_name: Name used in messages.
            as_of: Reference date for the depletion horizon; defaults to
                the budget analysis date.

        Returns:
            InsightGroups; empty when neither analysis is given.
        """
        name = client_name or self.config.default_client_name
        insights = InsightGroups()

        if budget is not None:
            insights.budget.extend(self._budget_insights(budget, as_of or budget.as_of))
        if progress is not None:
            insights.progress.extend(self._progress_insights(progress, name))
        if budget is not None and progress is not None:
            insights.summary.extend(self._combined_insights(budget, progress, name))
        else:
            insights.summary.extend(self._partial_summary(budget, progress))

        logger.debug(
            f"Generated {len(insights.summary)} summary, {len(insights.budget)} budget "
            f"and {len(insights.progress)} progress insights"
        )
        return insights

    # ------------------------------------------------------------------ budget

    def _budget_insights(self, budget: BudgetAnalysis, as_of: date) -> list[Insight]:
        thresholds = self.config.budget
        rate = budget.utilization_rate
        remaining = self._money(budget.remaining)
        insights: list[Insight] = []

        if rate > thresholds.high_utilization:
            insights.append(Insight(
                message=f"Budget utilization is high at {rate:.1f}%, with {remaining} remaining.",
                type=InsightType.WARNING,
                recommendation="Review budget allocation and consider additional funding sources.",
            ))
        elif rate < thresholds.low_utilization:
            insights.append(Insight(
                message=f"Budget utilization is low at {rate:.1f}%, with {remaining} remaining.",
                type=InsightType.INFO,
                recommendation="Consider allocating resources to additional therapy interventions.",
            ))
        else:
            insights.append(Insight(
                message=f"Budget utilization is {rate:.1f}%, with {remaining} remaining.",
                type=InsightType.SUCCESS,
            ))

        patterns = budget.spending_patterns
        velocity = budget.spending_velocity * 100
        if patterns.trend == SpendingTrend.INCREASING:
            insights.append(Insight(
                message=(
                    "Spending rate is accelerating compared to previous periods "
                    f"({velocity:+.1f}% in the latest period)."
                ),
                type=InsightType.WARNING,
                recommendation="Monitor budget closely to avoid premature depletion.",
            ))
        elif patterns.trend == SpendingTrend.DECREASING:
            insights.append(Insight(
                message=(
                    "Spending rate is decelerating compared to previous periods "
                    f"({velocity:+.1f}% in the latest period)."
                ),
                type=InsightType.SUCCESS,
                recommendation="Consider if current therapy intensity is sufficient.",
            ))

        overages = patterns.projected_overages
        if overages:
            single = len(overages) == 1
            insights.append(Insight(
                message=(
                    f"{', '.join(overages)} {'is' if single else 'are'} projected to exceed "
                    f"{'its' if single else 'their'} budget allocation "
                    f"(overall utilization {rate:.1f}%)."
                ),
                type=InsightType.DANGER,
                recommendation="Adjust service delivery or increase allocation for these categories.",
            ))

        insights.append(self._depletion_insight(budget, as_of))
        return insights

    def _depletion_insight(self, budget: BudgetAnalysis, as_of: date) -> Insight:
        thresholds = self.config.budget
        depletion = budget.forecasted_depletion
        if depletion is None:
            return Insight(
                message=(
                    f"Budget is not projected to deplete at the current spending rate "
                    f"({self._money(budget.monthly_burn_rate)} per month)."
                ),
                type=InsightType.SUCCESS,
            )

        months = max(0, metrics.round_half_up(metrics.months_until(depletion, as_of)))
        when = depletion.isoformat()
        if months < thresholds.depletion_critical_months:
            return Insight(
                message=f"Budget is projected to be depleted in {_plural(months, 'month')} (by {when}).",
                type=InsightType.DANGER,
                recommendation="Urgent review of budget and funding sources needed.",
            )
        if months < thresholds.depletion_warning_months:
            return Insight(
                message=f"Budget is projected to last approximately {months} more months (until {when}).",
                type=InsightType.WARNING,
                recommendation="Begin planning for budget renewal or additional funding.",
            )
        return Insight(
            message=f"Budget is projected to last approximately {months} more months (until {when}).",
            type=InsightType.SUCCESS,
        )

    # ---------------------------------------------------------------- progress

    def _progress_insights(self, progress: ProgressAnalysis, name: str) -> list[Insight]:
        thresholds = self.config.progress
        overall = progress.overall_progress
        attendance = progress.attendance_rate
        insights: list[Insight] = []

        if overall > thresholds.excellent_progress:
            insights.append(Insight(
                message=f"{name} is making excellent progress ({overall:.1f}%) toward therapy goals.",
                type=InsightType.SUCCESS,
                recommendation="Consider setting more advanced goals based on current progress.",
            ))
        elif overall < thresholds.limited_progress:
            insights.append(Insight(
                message=f"{name} is making limited progress ({overall:.1f}%) toward therapy goals.",
                type=InsightType.WARNING,
                recommendation="Review therapy approach and goals for appropriate level of challenge.",
            ))
        else:
            insights.append(Insight(
                message=f"{name} is making steady progress ({overall:.1f}%) toward therapy goals.",
                type=InsightType.INFO,
            ))

        if attendance < thresholds.low_attendance:
            cancelled = _plural(progress.sessions_cancelled, "cancelled session")
            insights.append(Insight(
                message=f"Attendance rate is low at {attendance:.1f}% ({cancelled}).",
                type=InsightType.DANGER,
                recommendation="Discuss attendance challenges with client/caregivers.",
            ))
        elif attendance > thresholds.excellent_attendance:
            insights.append(Insight(
                message=f"Attendance rate is excellent at {attendance:.1f}%.",
                type=InsightType.SUCCESS,
            ))

        top, bottom = progress.top_goal, progress.bottom_goal
        if top is not None and top.progress > thresholds.strong_goal:
            insights.append(Insight(
                message=f'"{top.goal_title}" is advancing well at {top.progress:.1f}% progress.',
                type=InsightType.SUCCESS,
                recommendation="Consider advancing to more complex skills in this area.",
            ))
        if bottom is not None and len(progress.goal_progress) > 1 and bottom.progress < thresholds.weak_goal:
            insights.append(Insight(
                message=f'"{bottom.goal_title}" shows slower progress at {bottom.progress:.1f}%.',
                type=InsightType.WARNING,
                recommendation="Review approach and consider adjusting strategy or objectives.",
            ))

        return insights

    # ---------------------------------------------------------------- combined

    def _combined_insights(
        self,
        budget: BudgetAnalysis,
        progress: ProgressAnalysis,
        name: str,
    ) -> list[Insight]:
        combined = self.config.combined
        rate = budget.utilization_rate
        overall = progress.overall_progress
        attendance = progress.attendance_rate
        insights: list[Insight] = []

        if overall > combined.efficient_progress and rate < combined.efficient_utilization:
            per_point = metrics.cost_per_progress_point(budget.total_spent, overall)
            insights.append(Insight(
                message=(
                    f"{name} is achieving strong progress ({overall:.1f}%) with efficient budget "
                    f"utilization ({rate:.1f}%, {self._money(per_point)} per progress point)."
                ),
                type=InsightType.SUCCESS,
                recommendation="Current therapy approach appears to be working well.",
            ))
        elif overall < combined.adjustment_progress and rate > combined.adjustment_utilization:
            insights.append(Insight(
                message=(
                    f"High budget utilization ({rate:.1f}%) with limited progress ({overall:.1f}%) "
                    "suggests intervention adjustments may be needed."
                ),
                type=InsightType.WARNING,
                recommendation="Review therapy approach and service mix for effectiveness.",
            ))

        if attendance < self.config.progress.low_attendance and rate > combined.attendance_budget_utilization:
            insights.append(Insight(
                message=(
                    f"Low attendance ({attendance:.1f}%) is affecting therapy outcomes while "
                    f"{rate:.1f}% of the budget has been used."
                ),
                type=InsightType.DANGER,
                recommendation="Address attendance issues to maximize budget effectiveness.",
            ))

        insights.append(self._priority_insight(budget, progress, name))
        return insights

    def _partial_summary(
        self,
        budget: BudgetAnalysis | None,
        progress: ProgressAnalysis | None,
    ) -> list[Insight]:
        """Headline figure when only one of the two analyses is available."""
        combined = self.config.combined
        insights: list[Insight] = []

        if budget is not None:
            rate = budget.utilization_rate
            level = "highly" if rate > combined.summary_high_utilization else "moderately"
            insights.append(Insight(
                message=f"Budget is {level} utilized at {rate:.1f}%.",
                type=InsightType.WARNING if rate > self.config.budget.high_utilization else InsightType.INFO,
            ))

        if progress is not None:
            overall = progress.overall_progress
            if overall > combined.summary_strong_progress:
                insight_type = InsightType.SUCCESS
            elif overall < self.config.progress.limited_progress:
                insight_type = InsightType.WARNING
            else:
                insight_type = InsightType.INFO
            insights.append(Insight(
                message=f"Overall therapy progress is at {overall:.1f}%.",
                type=insight_type,
            ))

        return insights

    def _priority_insight(self, budget: BudgetAnalysis, progress: ProgressAnalysis, name: str) -> Insight:
        """The single verdict; a critical insight supersedes the milder ones."""
        rate = budget.utilization_rate
        overall = progress.overall_progress
        attendance = progress.attendance_rate
        budget_concern = rate > self.config.budget.high_utilization or budget.has_overages
        progress_concern = (
            overall < self.config.progress.limited_progress
            or attendance < self.config.progress.low_attendance
        )

        if budget_concern and progress_concern:
            return Insight(
                message=(
                    f"Critical intervention needed: budget concerns ({rate:.1f}% utilized) combined "
                    f"with progress challenges ({overall:.1f}% progress, {attendance:.1f}% attendance)."
                ),
                type=InsightType.DANGER,
                recommendation="Comprehensive review of therapy plan and budget allocation required.",
            )
        if budget_concern:
            return Insight(
                message=f"Budget management should be prioritized at {rate:.1f}% utilization.",
                type=InsightType.WARNING,
                recommendation="Review budget allocation and service delivery approach.",
            )
        if progress_concern:
            return Insight(
                message=(
                    f"Progress improvement should be the focus of intervention "
                    f"({overall:.1f}% progress, {attendance:.1f}% attendance)."
                ),
                type=InsightType.WARNING,
                recommendation="Review current therapy approach and goals for appropriate challenge level.",
            )
        return Insight(
            message=(
                f"{name}'s therapy plan is on track with {overall:.1f}% progress "
                f"and {rate:.1f}% budget utilization."
            ),
            type=InsightType.SUCCESS,
            recommendation="Continue current approach with regular monitoring.",
        )
