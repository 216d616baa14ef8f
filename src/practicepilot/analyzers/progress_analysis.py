"""
Progress Analysis Builder — overall progress, attendance and ranked goals.
"""

from __future__ import annotations

import logging
import statistics
from collections.abc import Iterable, Sequence

from practicepilot.analyzers import metrics
from practicepilot.config import ProgressThresholds
from practicepilot.models.progress import GoalProgress, Milestone, ProgressAnalysis

logger = logging.getLogger("practicepilot.analyzers.progress_analysis")

COMPLETED_STATUSES = frozenset({"completed", "billed"})
CANCELLED_STATUSES = frozenset({"cancelled", "canceled"})


class ProgressAnalysisBuilder:
    """Aggregate goal progress and session counters into a ProgressAnalysis."""

    def __init__(self, config: ProgressThresholds | None = None):
        self.config = config or ProgressThresholds()

    def build(
        self,
        goals: Iterable[GoalProgress],
        sessions_completed: int = 0,
        sessions_cancelled: int = 0,
    ) -> ProgressAnalysis:
        """
        Build the analysis.

        ``overall_progress`` is the unweighted mean of goal progress, 0 when
        there are no goals. Goals are ranked highest progress first; ties
        keep their input order.
        """
        goal_list = list(goals)
        overall = statistics.fmean(g.progress for g in goal_list) if goal_list else 0.0
        completed = max(0, sessions_completed)
        cancelled = max(0, sessions_cancelled)

        analysis = ProgressAnalysis(
            overall_progress=overall,
            attendance_rate=metrics.attendance_rate(completed, cancelled),
            sessions_completed=completed,
            sessions_cancelled=cancelled,
            goal_progress=sorted(goal_list, key=lambda g: g.progress, reverse=True),
        )
        logger.debug(
            f"Progress analysis: {overall:.1f}% across {len(goal_list)} goals, "
            f"attendance {analysis.attendance_rate:.1f}%"
        )
        return analysis

    def is_milestone_complete(self, milestone: Milestone) -> bool:
        """A milestone is complete when flagged or last rated high enough."""
        if milestone.completed:
            return True
        return milestone.last_rating is not None and milestone.last_rating >= self.config.milestone_completion_rating

    def goal_from_milestones(
        self,
        goal_id: int | str | None,
        goal_title: str,
        milestones: Sequence[Milestone],
    ) -> GoalProgress:
        """Derive goal progress as the share of completed milestones."""
        resolved = [m.model_copy(update={"completed": self.is_milestone_complete(m)}) for m in milestones]
        done = sum(1 for m in resolved if m.completed)
        progress = done / len(resolved) * 100 if resolved else 0.0
        return GoalProgress(
            goal_id=goal_id,
            goal_title=goal_title,
            progress=progress,
            milestones=resolved,
        )

    def resolve_goal(self, goal: GoalProgress) -> GoalProgress:
        """Use the goal's own progress if it was given, else derive it from milestones."""
        if "progress" in goal.model_fields_set or not goal.milestones:
            return goal
        return self.goal_from_milestones(goal.goal_id, goal.goal_title, goal.milestones)

    @staticmethod
    def count_sessions(statuses: Iterable[str]) -> tuple[int, int]:
        """Count (completed, cancelled) sessions from raw status strings."""
        completed = 0
        cancelled = 0
        for status in statuses:
            normalized = status.strip().lower()
            if normalized in COMPLETED_STATUSES:
                completed += 1
            elif normalized in CANCELLED_STATUSES:
                cancelled += 1
        return completed, cancelled
