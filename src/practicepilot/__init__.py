"""
PracticePilot — budget and progress analytics for therapy practices.

Turns a client's funding plan, spending and goal progress into utilization
figures, forecasts and data-driven insights.
"""

__version__ = "0.1.0"
__all__ = ["PracticeAnalytics"]

from practicepilot.engine import PracticeAnalytics  # noqa: E402
