"""Value objects consumed and produced by the analytics engine."""

from practicepilot.models.budget import (
    BudgetAnalysis,
    BudgetItem,
    SpendingEvent,
    SpendingPatterns,
    SpendingTrend,
)
from practicepilot.models.insight import BubbleNode, Insight, InsightGroups, InsightType
from practicepilot.models.plan import MonthlySpending, PlanUtilization
from practicepilot.models.progress import GoalProgress, Milestone, ProgressAnalysis
from practicepilot.models.report import ClientReport, ClientSnapshot, EfficiencyMetrics

__all__ = [
    "BudgetAnalysis",
    "BudgetItem",
    "SpendingEvent",
    "SpendingPatterns",
    "SpendingTrend",
    "BubbleNode",
    "Insight",
    "InsightGroups",
    "InsightType",
    "MonthlySpending",
    "PlanUtilization",
    "GoalProgress",
    "Milestone",
    "ProgressAnalysis",
    "ClientReport",
    "ClientSnapshot",
    "EfficiencyMetrics",
]
