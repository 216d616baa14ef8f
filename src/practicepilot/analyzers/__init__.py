"""
PracticePilot analyzers — pure computation modules.

Deterministic, rule-based engines with no I/O and no clock reads. Each
takes plain records plus an injected reference date and returns
serializable models.
"""

from practicepilot.analyzers import metrics
from practicepilot.analyzers.bubble import BubbleHierarchyBuilder
from practicepilot.analyzers.budget_analysis import BudgetAnalysisBuilder
from practicepilot.analyzers.insights import InsightGenerator
from practicepilot.analyzers.plan_utilization import PlanUtilizationAnalyzer, add_months
from practicepilot.analyzers.progress_analysis import ProgressAnalysisBuilder
from practicepilot.analyzers.spending_patterns import SpendingPatternClassifier

__all__ = [
    "metrics",
    "BubbleHierarchyBuilder",
    "BudgetAnalysisBuilder",
    "InsightGenerator",
    "PlanUtilizationAnalyzer",
    "add_months",
    "ProgressAnalysisBuilder",
    "SpendingPatternClassifier",
]
