"""
Metric Primitives — small, total functions the analyses are built from.

Every division has a defined fallback, so empty or zero inputs produce a
plausible number instead of ZeroDivisionError or NaN. None of these read
the system clock; "today" is always passed in.
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Sequence
from datetime import date, timedelta

# Month length used for burn-rate and horizon arithmetic
DAYS_PER_MONTH = 30


def utilization_rate(total_spent: float, total_budget: float) -> float:
    """Percentage of ``total_budget`` already spent.

    Returns 0 when there is no budget. Values above 100 are kept so that
    overspend stays visible.
    """
    if total_budget <= 0:
        return 0.0
    return max(0.0, total_spent) / total_budget * 100


def remaining_balance(total_budget: float, total_spent: float) -> float:
    """Unspent budget, never negative."""
    return max(0.0, total_budget - max(0.0, total_spent))


def attendance_rate(completed: int, cancelled: int) -> float:
    """Completed sessions as a percentage of completed plus cancelled."""
    completed = max(0, completed)
    cancelled = max(0, cancelled)
    scheduled = completed + cancelled
    if scheduled == 0:
        return 0.0
    return completed / scheduled * 100


def cost_per_progress_point(total_spent: float, overall_progress: float) -> float:
    """Spend per percentage point of progress.

    With no progress yet the total spend itself is returned.
    """
    if overall_progress <= 0:
        return total_spent
    return total_spent / overall_progress


def average_session_cost(total_spent: float, sessions_completed: int) -> float:
    if sessions_completed <= 0:
        return total_spent
    return total_spent / sessions_completed


def forecast_depletion(remaining: float, monthly_burn_rate: float, as_of: date) -> date | None:
    """Date on which ``remaining`` reaches zero at ``monthly_burn_rate``.

    Returns None when nothing is being spent (the budget never depletes).
    Horizons beyond the calendar are capped at ``date.max``.
    """
    if monthly_burn_rate <= 0:
        return None
    days = max(0.0, remaining) / monthly_burn_rate * DAYS_PER_MONTH
    max_days = (date.max - as_of).days
    if not math.isfinite(days) or days >= max_days:
        return date.max
    return as_of + timedelta(days=round(days))


def days_to_depletion(remaining: float, daily_spend_rate: float) -> int | None:
    """Whole days until ``remaining`` is used up, or None with no spend."""
    if daily_spend_rate <= 0:
        return None
    days = max(0.0, remaining) / daily_spend_rate
    if not math.isfinite(days):
        return None
    return math.floor(days)


def months_until(target: date, as_of: date) -> float:
    """Signed number of months from ``as_of`` to ``target``."""
    return (target - as_of).days / DAYS_PER_MONTH


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (display rounding)."""
    return math.floor(value + 0.5)


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population standard deviation over mean; 0 for empty or zero-mean series."""
    if len(values) < 2:
        return 0.0
    mean = statistics.fmean(values)
    if mean <= 0:
        return 0.0
    return statistics.pstdev(values) / mean


def spending_velocity(period_totals: Sequence[float]) -> float:
    """Relative change between the two most recent periods.

    Positive means spending is accelerating, negative decelerating.
    """
    if len(period_totals) < 2:
        return 0.0
    previous, latest = period_totals[-2], period_totals[-1]
    if previous <= 0:
        return 0.0
    return (latest - previous) / previous
