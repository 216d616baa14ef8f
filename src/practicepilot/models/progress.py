"""
Therapy progress models — goals, milestones, derived progress analysis.
"""

from __future__ import annotations

from pydantic import Field, field_validator

from practicepilot.models.base import CamelModel


class Milestone(CamelModel):
    """A sub-goal tracked within a therapy goal."""

    milestone_id: int | str | None = None
    title: str = ""
    completed: bool = False
    last_rating: float | None = None


class GoalProgress(CamelModel):
    """Progress toward one therapy goal (0-100)."""

    goal_id: int | str | None = None
    goal_title: str = ""
    progress: float = 0.0
    milestones: list[Milestone] = Field(default_factory=list)

    @field_validator("progress")
    @classmethod
    def _clamp_progress(cls, value: float) -> float:
        return min(100.0, max(0.0, value))


class ProgressAnalysis(CamelModel):
    """Derived progress metrics for one client.

    ``goal_progress`` is ranked from highest to lowest progress.
    """

    overall_progress: float = 0.0
    attendance_rate: float = 0.0
    sessions_completed: int = 0
    sessions_cancelled: int = 0
    goal_progress: list[GoalProgress] = Field(default_factory=list)

    @property
    def top_goal(self) -> GoalProgress | None:
        return self.goal_progress[0] if self.goal_progress else None

    @property
    def bottom_goal(self) -> GoalProgress | None:
        return self.goal_progress[-1] if self.goal_progress else None
