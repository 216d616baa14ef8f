"""
PracticePilot configuration management.

Every threshold the analyzers apply lives here so product decisions can be
tuned without touching the rules. Supports loading from YAML files,
environment variables, and keyword overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

DEFAULT_PALETTE = [
    "#3498db",
    "#2ecc71",
    "#e74c3c",
    "#f39c12",
    "#9b59b6",
    "#1abc9c",
    "#e67e22",
    "#16a085",
    "#8e44ad",
    "#2980b9",
    "#c0392b",
    "#27ae60",
]

DEFAULT_CATEGORY_COLORS = {
    "Therapy": "#3498db",
    "Assessment": "#2ecc71",
    "Equipment": "#e74c3c",
    "Travel": "#f39c12",
    "Accommodation": "#9b59b6",
    "Consumables": "#1abc9c",
    "Other": "#7f8c8d",
}


class BudgetThresholds(BaseModel):
    """Utilization and depletion thresholds for budget insights."""

    high_utilization: float = Field(default=80.0, ge=0.0, description="Warn above this % used")
    low_utilization: float = Field(default=20.0, ge=0.0, description="Flag under-use below this %")
    depletion_critical_months: int = Field(default=2, ge=0)
    depletion_warning_months: int = Field(default=6, ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> BudgetThresholds:
        if self.low_utilization > self.high_utilization:
            raise ValueError("low_utilization must not exceed high_utilization")
        if self.depletion_critical_months > self.depletion_warning_months:
            raise ValueError("depletion_critical_months must not exceed depletion_warning_months")
        return self


class PatternConfig(BaseModel):
    """Spending pattern classifier settings."""

    trend_window: int = Field(default=3, ge=1, description="Prior periods compared to the latest one")
    increase_factor: float = Field(default=1.1, ge=1.0)
    decrease_factor: float = Field(default=0.9, gt=0.0, le=1.0)
    volatility_threshold: float = Field(default=0.25, ge=0.0, description="Coefficient of variation")
    high_usage_ratio: float = Field(default=0.75, gt=0.0, description="Category spend / allocation")


class ProgressThresholds(BaseModel):
    """Progress and attendance thresholds for progress insights."""

    excellent_progress: float = 75.0
    limited_progress: float = 30.0
    low_attendance: float = 70.0
    excellent_attendance: float = 90.0
    strong_goal: float = 80.0
    weak_goal: float = 40.0
    milestone_completion_rating: float = Field(default=4.0, description="Rating that completes a milestone")


class CombinedThresholds(BaseModel):
    """Thresholds for insights that need both budget and progress data."""

    efficient_progress: float = 60.0
    efficient_utilization: float = 50.0
    adjustment_progress: float = 30.0
    adjustment_utilization: float = 60.0
    attendance_budget_utilization: float = 50.0

    # Summary when only one of budget or progress data is available
    summary_high_utilization: float = Field(default=70.0, description="'Highly utilized' above this %")
    summary_strong_progress: float = Field(default=70.0, description="Progress summary is a success above this %")


class BubbleConfig(BaseModel):
    """Bubble chart hierarchy settings."""

    root_name: str = "Budget"
    palette: list[str] = Field(default_factory=lambda: list(DEFAULT_PALETTE), min_length=1)
    category_colors: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_CATEGORY_COLORS))


class PracticePilotConfig(BaseModel):
    """Root configuration for PracticePilot."""

    budget: BudgetThresholds = Field(default_factory=BudgetThresholds)
    patterns: PatternConfig = Field(default_factory=PatternConfig)
    progress: ProgressThresholds = Field(default_factory=ProgressThresholds)
    combined: CombinedThresholds = Field(default_factory=CombinedThresholds)
    bubble: BubbleConfig = Field(default_factory=BubbleConfig)

    # Output settings
    currency_symbol: str = Field(default="$")
    default_client_name: str = Field(default="this client")

    @classmethod
    def load(cls, config_path: str | None = None, **overrides: Any) -> PracticePilotConfig:
        """Load configuration from file, env vars, and overrides.

        Priority: overrides > env vars > config file > defaults.
        """
        data: dict[str, Any] = {}

        # 1. Load from YAML file if provided
        if config_path:
            path = Path(config_path)
            if path.exists():
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

        # 2. Override from environment variables
        env_currency = os.environ.get("PRACTICEPILOT_CURRENCY_SYMBOL")
        env_window = os.environ.get("PRACTICEPILOT_TREND_WINDOW")
        env_volatility = os.environ.get("PRACTICEPILOT_VOLATILITY_THRESHOLD")

        if env_currency:
            data["currency_symbol"] = env_currency

        if env_window or env_volatility:
            patterns = data.get("patterns") or {}
            if env_window:
                patterns["trend_window"] = env_window
            if env_volatility:
                patterns["volatility_threshold"] = env_volatility
            data["patterns"] = patterns

        # 3. Apply keyword overrides
        data.update(overrides)

        return cls.model_validate(data)
