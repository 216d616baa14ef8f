"""
Insight and chart models — what the presentation layer renders.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field

from practicepilot.models.base import CamelModel


class InsightType(str, Enum):
    """Insight categories, mapped to colors/icons by the UI."""

    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"
    INFO = "info"


# Lower sorts first when ranking
SEVERITY_RANK = {
    InsightType.DANGER: 0,
    InsightType.WARNING: 1,
    InsightType.INFO: 2,
    InsightType.SUCCESS: 3,
}


class Insight(CamelModel):
    """A data-driven statement with an optional recommendation."""

    message: str
    type: InsightType
    recommendation: str | None = None


class InsightGroups(CamelModel):
    """Insights grouped by the tab they are shown on."""

    summary: list[Insight] = Field(default_factory=list)
    budget: list[Insight] = Field(default_factory=list)
    progress: list[Insight] = Field(default_factory=list)

    def all(self) -> list[Insight]:
        """Every insight in group order: summary, budget, progress."""
        return [*self.summary, *self.budget, *self.progress]

    def ranked(self) -> list[Insight]:
        """Every insight, most severe first (stable within a severity)."""
        return sorted(self.all(), key=lambda insight: SEVERITY_RANK[insight.type])

    def by_type(self, insight_type: InsightType) -> list[Insight]:
        return [i for i in self.all() if i.type == insight_type]

    @property
    def is_empty(self) -> bool:
        return not (self.summary or self.budget or self.progress)


class BubbleNode(CamelModel):
    """Node of the root -> category -> item bubble-chart hierarchy.

    Leaves carry ``value``; the root and category nodes carry ``children``.
    """

    name: str
    color: str
    value: float | None = None
    percent_used: float | None = None
    children: list[BubbleNode] | None = None

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    def leaves(self) -> list[BubbleNode]:
        """All leaf nodes under this node, depth first."""
        if self.children is None:
            return [self]
        found: list[BubbleNode] = []
        for child in self.children:
            found.extend(child.leaves())
        return found

    def total_value(self) -> float:
        return sum(leaf.value or 0.0 for leaf in self.leaves())

    def to_dict(self) -> dict[str, Any]:
        """Export for the chart library, dropping absent fields."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
