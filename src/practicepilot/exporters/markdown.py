"""
Markdown report exporter.

Renders a ClientReport as Markdown, suitable for case notes, email or any
Markdown viewer.
"""

from __future__ import annotations

from practicepilot.models.insight import Insight, InsightType
from practicepilot.models.report import ClientReport

INSIGHT_EMOJI = {
    InsightType.DANGER: "🔴",
    InsightType.WARNING: "🟡",
    InsightType.INFO: "ℹ️",
    InsightType.SUCCESS: "🟢",
}


def _insight_lines(insights: list[Insight]) -> list[str]:
    lines: list[str] = []
    for insight in insights:
        lines.append(f"- {INSIGHT_EMOJI[insight.type]} **{insight.type.value.title()}:** {insight.message}")
        if insight.recommendation:
            lines.append(f"  - *Recommendation:* {insight.recommendation}")
    lines.append("")
    return lines


def render_markdown(report: ClientReport, currency_symbol: str = "$") -> str:
    """Render a ClientReport as Markdown."""
    lines: list[str] = []

    def money(amount: float) -> str:
        return f"{currency_symbol}{amount:,.2f}"

    # Header
    lines.append(f"# PracticePilot Report — {report.client_name}")
    lines.append("")
    lines.append(f"*As of: {report.as_of.isoformat()}*")
    lines.append("")

    # Summary insights
    if report.insights.summary:
        lines.append("## 📋 Summary")
        lines.append("")
        lines.extend(_insight_lines(report.insights.summary))

    # Budget
    budget = report.budget
    if budget is not None:
        lines.append("## 💰 Budget")
        lines.append("")
        lines.append("| Metric | Value |")
        lines.append("|--------|-------|")
        lines.append(f"| **Total Budget** | {money(budget.total_budget)} |")
        lines.append(f"| **Total Spent** | {money(budget.total_spent)} |")
        lines.append(f"| **Remaining** | {money(budget.remaining)} |")
        lines.append(f"| **Utilization** | {budget.utilization_rate:.1f}% |")
        lines.append(f"| **Monthly Burn Rate** | {money(budget.monthly_burn_rate)} |")
        lines.append(f"| **Spending Trend** | {budget.spending_patterns.trend.value} |")
        depletion = budget.forecasted_depletion.isoformat() if budget.forecasted_depletion else "Not projected"
        lines.append(f"| **Forecasted Depletion** | {depletion} |")
        lines.append("")

        if budget.allocation_by_category:
            lines.append("### By Category")
            lines.append("")
            lines.append("| Category | Allocated | Spent | Flags |")
            lines.append("|----------|-----------|-------|-------|")
            patterns = budget.spending_patterns
            for category, allocated in budget.allocation_by_category.items():
                flags = []
                if category in patterns.high_usage_categories:
                    flags.append("high usage")
                if category in patterns.projected_overages:
                    flags.append("projected overage")
                spent = budget.spending_by_category.get(category, 0.0)
                lines.append(f"| {category} | {money(allocated)} | {money(spent)} | {', '.join(flags) or '-'} |")
            lines.append("")

        if report.insights.budget:
            lines.extend(_insight_lines(report.insights.budget))

    # Plan timeline
    plan = report.plan
    if plan is not None:
        lines.append("## 📅 Plan Timeline")
        lines.append("")
        lines.append(f"*Plan: {plan.plan_start.isoformat()} to {plan.plan_end.isoformat()} "
                     f"({plan.days_elapsed}/{plan.total_days} days elapsed)*")
        lines.append("")
        lines.append(f"- Daily budget: {money(plan.daily_budget)}")
        lines.append(f"- Daily spend rate: {money(plan.daily_spend_rate)}")
        if plan.projected_end_date:
            lines.append(f"- Funds projected to run out on {plan.projected_end_date.isoformat()}")
        if plan.projected_overspend:
            lines.append(f"- Projected overspend at plan end: {money(plan.projected_overspend)}")
        lines.append("")

        if plan.monthly_spending:
            lines.append("| Month | Actual | Target | Projected |")
            lines.append("|-------|--------|--------|-----------|")
            for month in plan.monthly_spending:
                projected = money(month.projected_spending) if month.projected_spending is not None else "-"
                lines.append(
                    f"| {month.month} | {money(month.actual_spending)} | "
                    f"{money(month.target_spending)} | {projected} |"
                )
            lines.append("")

    # Progress
    progress = report.progress
    if progress is not None:
        lines.append("## 🎯 Progress")
        lines.append("")
        lines.append("| Metric | Value |")
        lines.append("|--------|-------|")
        lines.append(f"| **Overall Progress** | {progress.overall_progress:.1f}% |")
        lines.append(f"| **Attendance Rate** | {progress.attendance_rate:.1f}% |")
        lines.append(f"| **Sessions Completed** | {progress.sessions_completed} |")
        lines.append(f"| **Sessions Cancelled** | {progress.sessions_cancelled} |")
        if report.efficiency is not None:
            lines.append(f"| **Cost per Progress Point** | {money(report.efficiency.cost_per_progress_point)} |")
            lines.append(f"| **Average Session Cost** | {money(report.efficiency.average_session_cost)} |")
        lines.append("")

        if progress.goal_progress:
            lines.append("### Goals")
            lines.append("")
            for goal in progress.goal_progress:
                lines.append(f"- **{goal.goal_title}** — {goal.progress:.1f}%")
            lines.append("")

        if report.insights.progress:
            lines.extend(_insight_lines(report.insights.progress))

    if report.insights.is_empty:
        lines.append("*No budget or progress data available.*")
        lines.append("")

    # Footer
    lines.append("---")
    lines.append("*Report generated by PracticePilot*")

    return "\n".join(lines)
