"""
Budget data models — budget items, spending events, derived budget analysis.
"""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import ConfigDict, Field, field_validator

from practicepilot.models.base import CamelModel

DEFAULT_CATEGORY = "Other"


class SpendingTrend(str, Enum):
    """Direction of period-over-period spending."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    FLUCTUATING = "fluctuating"
    STABLE = "stable"


class BudgetItem(CamelModel):
    """A single line of a client's funding plan.

    ``amount`` is the allocation; when absent it is ``quantity * unit_price``.
    Spend comes from ``total_spent`` or, failing that, ``used_quantity``.
    """

    model_config = ConfigDict(frozen=True)

    id: int | str | None = None
    category: str = DEFAULT_CATEGORY
    description: str = ""
    name: str | None = None
    quantity: float = 0.0
    unit_price: float = 0.0
    amount: float | None = None
    total_spent: float | None = None
    used_quantity: float | None = None
    percent_used: float | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _default_category(cls, value: object) -> str:
        if value is None or not str(value).strip():
            return DEFAULT_CATEGORY
        return str(value).strip()

    @property
    def allocated(self) -> float:
        """Allocated amount for this item."""
        if self.amount is not None:
            return self.amount
        return self.quantity * self.unit_price

    @property
    def spent(self) -> float | None:
        """Amount spent against this item, or None when not reported."""
        if self.total_spent is not None:
            return self.total_spent
        if self.used_quantity is not None:
            return self.used_quantity * self.unit_price
        return None

    @property
    def label(self) -> str:
        """Display label used by charts."""
        if self.description:
            return self.description
        if self.name:
            return self.name
        return str(self.id) if self.id is not None else DEFAULT_CATEGORY


class SpendingEvent(CamelModel):
    """A dated spend, e.g. one product used in one session."""

    date: date
    amount: float
    category: str | None = None
    description: str = ""


class SpendingPatterns(CamelModel):
    """Trend label plus per-category usage flags."""

    trend: SpendingTrend = SpendingTrend.STABLE
    high_usage_categories: list[str] = Field(default_factory=list)
    projected_overages: list[str] = Field(default_factory=list)


class BudgetAnalysis(CamelModel):
    """Derived budget metrics for one client at one point in time.

    Never persisted; rebuilt from budget items on every call.
    """

    as_of: date
    total_budget: float = 0.0
    total_allocated: float = 0.0
    total_spent: float = 0.0
    remaining: float = 0.0
    utilization_rate: float = 0.0
    spending_by_category: dict[str, float] = Field(default_factory=dict)
    allocation_by_category: dict[str, float] = Field(default_factory=dict)
    spending_patterns: SpendingPatterns = Field(default_factory=SpendingPatterns)
    spending_velocity: float = 0.0
    monthly_burn_rate: float = 0.0
    forecasted_depletion: date | None = None

    @property
    def has_overages(self) -> bool:
        return bool(self.spending_patterns.projected_overages)
