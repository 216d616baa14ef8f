"""
Plan Utilization Timeline — how a funding plan is being used over time.

Produces:
1. **Day-level rates** — daily budget vs. daily spend rate.
2. **Depletion date** — when the plan runs dry, if before the plan ends.
3. **Projected overspend** — end-of-plan overrun at the current rate.
4. **Monthly schedule** — actual, evenly-distributed target and projected
   spend per calendar month, with running totals.

Pure date arithmetic; "today" is always supplied by the caller.
"""

from __future__ import annotations

import calendar
import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from practicepilot.analyzers import metrics
from practicepilot.models.budget import SpendingEvent
from practicepilot.models.plan import MonthlySpending, PlanUtilization

logger = logging.getLogger("practicepilot.analyzers.plan_utilization")


def add_months(d: date, months: int) -> date:
    """Shift ``d`` by whole months, clamping the day to the target month."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _month_key(d: date) -> tuple[int, int]:
    return d.year, d.month


class PlanUtilizationAnalyzer:
    """Analyze spend across the life of a funding plan."""

    DEFAULT_PLAN_MONTHS = 6
    DEFAULT_PLAN_DAYS = 180
    MAX_PROJECTION_DAYS = 365

    @classmethod
    def analyze(
        cls,
        total_budget: float,
        used_budget: float,
        plan_start: date,
        as_of: date,
        plan_end: date | None = None,
        events: Sequence[SpendingEvent] = (),
    ) -> PlanUtilization:
        """Run plan utilization analysis.

        Args:
            total_budget: Plan funds.
            used_budget: Spend so far.
            plan_start: First day of the plan.
            as_of: Reference date ("today").
            plan_end: Last day of the plan; defaults to six months after start.
            events: Dated spend used for the monthly schedule.

        Returns:
            PlanUtilization with rates, projections and monthly schedule.
        """
        end = plan_end or add_months(plan_start, cls.DEFAULT_PLAN_MONTHS)
        used = max(0.0, used_budget)

        total_days = (end - plan_start).days
        days_elapsed = max(0, min((as_of - plan_start).days, total_days))
        remaining_days = max(0, total_days - days_elapsed)

        safe_total_days = total_days if total_days > 0 else cls.DEFAULT_PLAN_DAYS
        daily_budget = total_budget / safe_total_days
        daily_spend_rate = used / days_elapsed if days_elapsed > 0 else 0.0
        remaining_budget = metrics.remaining_balance(total_budget, used)

        projected_end_date = None
        days_left = metrics.days_to_depletion(remaining_budget, daily_spend_rate)
        if days_left is not None and remaining_budget > 0:
            depletion = as_of + timedelta(days=min(days_left, cls.MAX_PROJECTION_DAYS))
            if depletion < end:
                projected_end_date = depletion

        projected_overspend = None
        if daily_spend_rate > daily_budget:
            projected_total = used + daily_spend_rate * remaining_days
            if projected_total > total_budget:
                projected_overspend = projected_total - total_budget

        monthly = cls.monthly_schedule(events, plan_start, end, total_budget, as_of)

        projected_remaining = remaining_budget
        if monthly and monthly[-1].cumulative_projected is not None:
            projected_remaining = max(0.0, total_budget - monthly[-1].cumulative_projected)

        logger.debug(
            f"Plan {plan_start}..{end}: {days_elapsed}/{total_days} days, "
            f"${daily_spend_rate:,.2f}/day vs ${daily_budget:,.2f}/day budgeted"
        )

        return PlanUtilization(
            plan_start=plan_start,
            plan_end=end,
            total_budget=total_budget,
            used_budget=used,
            remaining_budget=remaining_budget,
            utilization_percentage=metrics.utilization_rate(used, total_budget),
            total_days=total_days,
            days_elapsed=days_elapsed,
            remaining_days=remaining_days,
            daily_budget=daily_budget,
            daily_spend_rate=daily_spend_rate,
            projected_end_date=projected_end_date,
            projected_overspend=projected_overspend,
            projected_remaining_budget=projected_remaining,
            monthly_spending=monthly,
        )

    @classmethod
    def monthly_schedule(
        cls,
        events: Iterable[SpendingEvent],
        plan_start: date,
        plan_end: date,
        total_budget: float,
        as_of: date,
    ) -> list[MonthlySpending]:
        """Month-by-month actual, target and projected spend for the plan.

        Events after ``as_of`` are not counted as actual spend.
        """
        months: list[MonthlySpending] = []
        cursor = plan_start.replace(day=1)
        last = plan_end.replace(day=1)
        while cursor <= last:
            months.append(
                MonthlySpending(
                    month=cursor.strftime("%b %Y"),
                    month_start=cursor,
                    is_projected=cursor > as_of,
                )
            )
            cursor = add_months(cursor, 1)

        if not months:
            return []

        actual_by_month: dict[tuple[int, int], float] = defaultdict(float)
        for event in events:
            if event.date > as_of:
                continue
            actual_by_month[_month_key(event.date)] += event.amount

        target = total_budget / len(months)
        cumulative_actual = 0.0
        cumulative_target = 0.0
        for month in months:
            month.actual_spending = actual_by_month.get(_month_key(month.month_start), 0.0)
            month.target_spending = target
            cumulative_actual += month.actual_spending
            cumulative_target += target
            month.cumulative_actual = cumulative_actual
            month.cumulative_target = cumulative_target

        current = next(
            (i for i, m in enumerate(months) if _month_key(m.month_start) == _month_key(as_of)),
            None,
        )
        if current is not None:
            past = months[: current + 1]
            projected_cumulative = sum(m.actual_spending for m in past)
            average = projected_cumulative / len(past)
            for month in months[current + 1:]:
                projected_cumulative += average
                month.projected_spending = average
                month.cumulative_projected = projected_cumulative

        return months

    @staticmethod
    def monthly_totals(events: Iterable[SpendingEvent], as_of: date | None = None) -> list[float]:
        """Contiguous monthly spend series, oldest first, gaps filled with 0.

        Events after ``as_of`` are ignored.
        """
        totals: dict[tuple[int, int], float] = defaultdict(float)
        for event in events:
            if as_of is not None and event.date > as_of:
                continue
            totals[_month_key(event.date)] += event.amount

        if not totals:
            return []

        first_year, first_month = min(totals)
        last_key = max(totals)
        series = []
        cursor = date(first_year, first_month, 1)
        while _month_key(cursor) <= last_key:
            series.append(totals.get(_month_key(cursor), 0.0))
            cursor = add_months(cursor, 1)
        return series
