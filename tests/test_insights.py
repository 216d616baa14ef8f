"""Tests for the combined insight generator."""

from datetime import date, timedelta

from practicepilot.analyzers.budget_analysis import BudgetAnalysisBuilder
from practicepilot.analyzers.insights import InsightGenerator
from practicepilot.analyzers.progress_analysis import ProgressAnalysisBuilder
from practicepilot.config import PracticePilotConfig
from practicepilot.models.budget import BudgetAnalysis, BudgetItem, SpendingPatterns, SpendingTrend
from practicepilot.models.insight import InsightType
from practicepilot.models.progress import GoalProgress, ProgressAnalysis

AS_OF = date(2025, 3, 1)


def _budget(
    utilization: float = 50.0,
    trend: SpendingTrend = SpendingTrend.STABLE,
    overages: tuple[str, ...] = (),
    depletion: date | None = None,
) -> BudgetAnalysis:
    return BudgetAnalysis(
        as_of=AS_OF,
        total_budget=1000,
        total_spent=utilization * 10,
        remaining=max(0.0, 1000 - utilization * 10),
        utilization_rate=utilization,
        spending_patterns=SpendingPatterns(trend=trend, projected_overages=list(overages)),
        monthly_burn_rate=100,
        forecasted_depletion=depletion,
    )


def _progress(*goals: float, completed: int = 10, cancelled: int = 0) -> ProgressAnalysis:
    goal_list = [GoalProgress(goal_title=f"Goal {p:g}", progress=p) for p in goals]
    return ProgressAnalysisBuilder().build(goal_list, completed, cancelled)


class TestBudgetInsights:
    def setup_method(self) -> None:
        self.generator = InsightGenerator()

    def test_high_utilization_with_overage(self) -> None:
        insights = self.generator.generate(_budget(95, overages=("Equipment",)))
        dangers = [i for i in insights.budget if i.type == InsightType.DANGER]
        assert len(dangers) == 1
        assert "Equipment" in dangers[0].message
        assert " is " in dangers[0].message
        assert insights.budget[0].type == InsightType.WARNING
        assert "95.0%" in insights.budget[0].message

    def test_overage_plural(self) -> None:
        insights = self.generator.generate(_budget(50, overages=("Equipment", "Travel")))
        danger = insights.by_type(InsightType.DANGER)[0]
        assert "Equipment, Travel are projected" in danger.message

    def test_utilization_boundary(self) -> None:
        assert self.generator.generate(_budget(80)).budget[0].type == InsightType.SUCCESS
        assert self.generator.generate(_budget(80.1)).budget[0].type == InsightType.WARNING

    def test_low_utilization(self) -> None:
        first = self.generator.generate(_budget(19.9)).budget[0]
        assert first.type == InsightType.INFO
        assert first.recommendation is not None

    def test_remaining_embedded_as_currency(self) -> None:
        first = self.generator.generate(_budget(50)).budget[0]
        assert "$500.00" in first.message

    def test_currency_symbol_from_config(self) -> None:
        generator = InsightGenerator(PracticePilotConfig(currency_symbol="€"))
        assert "€500.00" in generator.generate(_budget(50)).budget[0].message

    def test_trend_insights(self) -> None:
        increasing = self.generator.generate(_budget(50, trend=SpendingTrend.INCREASING))
        assert any(i.type == InsightType.WARNING and "accelerating" in i.message for i in increasing.budget)

        decreasing = self.generator.generate(_budget(50, trend=SpendingTrend.DECREASING))
        assert any(i.type == InsightType.SUCCESS and "decelerating" in i.message for i in decreasing.budget)

    def test_stable_trend_adds_nothing(self) -> None:
        insights = self.generator.generate(_budget(50))
        # utilization + depletion
        assert len(insights.budget) == 2

    def test_depletion_horizons(self) -> None:
        def last(days: int) -> InsightType:
            return self.generator.generate(_budget(50, depletion=AS_OF + timedelta(days=days))).budget[-1].type

        assert last(30) == InsightType.DANGER
        assert last(45) == InsightType.WARNING  # 1.5 months rounds up to 2
        assert last(120) == InsightType.WARNING
        assert last(300) == InsightType.SUCCESS

    def test_no_depletion_forecast(self) -> None:
        final = self.generator.generate(_budget(50)).budget[-1]
        assert final.type == InsightType.SUCCESS
        assert "not projected to deplete" in final.message


class TestProgressInsights:
    def setup_method(self) -> None:
        self.generator = InsightGenerator()

    def test_best_and_worst_goal(self) -> None:
        insights = self.generator.generate(progress=_progress(90, 10), client_name="Ava")
        overall = insights.progress[0]
        assert overall.type == InsightType.INFO
        assert "Ava" in overall.message
        assert "50.0%" in overall.message
        assert any(i.type == InsightType.SUCCESS and '"Goal 90"' in i.message for i in insights.progress)
        assert any(i.type == InsightType.WARNING and '"Goal 10"' in i.message for i in insights.progress)

    def test_single_weak_goal_not_singled_out(self) -> None:
        insights = self.generator.generate(progress=_progress(10))
        assert insights.progress[0].type == InsightType.WARNING
        assert not any("slower progress" in i.message for i in insights.progress)

    def test_excellent_progress(self) -> None:
        insights = self.generator.generate(progress=_progress(80))
        assert insights.progress[0].type == InsightType.SUCCESS

    def test_low_attendance(self) -> None:
        insights = self.generator.generate(progress=_progress(50, completed=3, cancelled=7))
        danger = insights.by_type(InsightType.DANGER)
        assert len(danger) == 1
        assert "30.0%" in danger[0].message
        assert "7 cancelled sessions" in danger[0].message

    def test_excellent_attendance(self) -> None:
        insights = self.generator.generate(progress=_progress(50, completed=10, cancelled=0))
        assert any("Attendance rate is excellent at 100.0%" in i.message for i in insights.progress)

    def test_default_client_name(self) -> None:
        insights = self.generator.generate(progress=_progress(50))
        assert "this client" in insights.progress[0].message

    def test_nothing_to_analyze(self) -> None:
        assert self.generator.generate().is_empty


class TestCombinedInsights:
    def setup_method(self) -> None:
        self.generator = InsightGenerator()

    def test_critical_intervention(self) -> None:
        insights = self.generator.generate(
            _budget(95, overages=("Equipment",)),
            _progress(20, completed=3, cancelled=7),
        )
        final = insights.summary[-1]
        assert final.type == InsightType.DANGER
        assert "Critical intervention" in final.message
        assert not any("should be prioritized" in i.message for i in insights.summary)
        assert not any("should be the focus" in i.message for i in insights.summary)

    def test_on_track_and_efficient(self) -> None:
        insights = self.generator.generate(_budget(40), _progress(70), client_name="Ava")
        assert [i.type for i in insights.summary] == [InsightType.SUCCESS, InsightType.SUCCESS]
        assert "efficient budget utilization" in insights.summary[0].message
        assert "on track" in insights.summary[-1].message

    def test_needs_adjustment(self) -> None:
        insights = self.generator.generate(_budget(65), _progress(20))
        assert insights.summary[0].type == InsightType.WARNING
        assert "65.0%" in insights.summary[0].message
        # progress concern only
        assert "should be the focus" in insights.summary[-1].message

    def test_budget_concern_only(self) -> None:
        insights = self.generator.generate(_budget(85), _progress(50))
        assert "should be prioritized" in insights.summary[-1].message
        assert insights.summary[-1].type == InsightType.WARNING

    def test_attendance_with_spend(self) -> None:
        insights = self.generator.generate(_budget(55), _progress(50, completed=3, cancelled=7))
        assert any(
            i.type == InsightType.DANGER and "Low attendance" in i.message for i in insights.summary
        )

    def test_ranked_puts_danger_first(self) -> None:
        insights = self.generator.generate(
            _budget(95, overages=("Equipment",)),
            _progress(20, completed=3, cancelled=7),
        )
        ranked = insights.ranked()
        assert ranked[0].type == InsightType.DANGER
        assert ranked[-1].type in (InsightType.SUCCESS, InsightType.INFO, InsightType.WARNING)
        assert len(ranked) == len(insights.all())

    def test_deterministic(self) -> None:
        first = self.generator.generate(_budget(60, trend=SpendingTrend.INCREASING), _progress(40, 80))
        second = self.generator.generate(_budget(60, trend=SpendingTrend.INCREASING), _progress(40, 80))
        assert first.to_json() == second.to_json()


class TestSingleAnalysisSummary:
    def setup_method(self) -> None:
        self.generator = InsightGenerator()

    def test_budget_only_high(self) -> None:
        summary = self.generator.generate(_budget(85)).summary
        assert len(summary) == 1
        assert summary[0].message == "Budget is highly utilized at 85.0%."
        assert summary[0].type == InsightType.WARNING

    def test_budget_only_moderate(self) -> None:
        summary = self.generator.generate(_budget(50)).summary
        assert summary[0].message == "Budget is moderately utilized at 50.0%."
        assert summary[0].type == InsightType.INFO

    def test_budget_only_highly_but_not_warning(self) -> None:
        summary = self.generator.generate(_budget(75)).summary
        assert "highly utilized at 75.0%" in summary[0].message
        assert summary[0].type == InsightType.INFO

    def test_progress_only(self) -> None:
        def headline(progress: float) -> tuple[str, InsightType]:
            insight = self.generator.generate(progress=_progress(progress)).summary[0]
            return insight.message, insight.type

        assert headline(80) == ("Overall therapy progress is at 80.0%.", InsightType.SUCCESS)
        assert headline(50) == ("Overall therapy progress is at 50.0%.", InsightType.INFO)
        assert headline(20) == ("Overall therapy progress is at 20.0%.", InsightType.WARNING)

    def test_thresholds_from_config(self) -> None:
        generator = InsightGenerator(PracticePilotConfig.load(
            combined={"summary_high_utilization": 40, "summary_strong_progress": 45},
        ))
        assert "highly" in generator.generate(_budget(50)).summary[0].message
        assert generator.generate(progress=_progress(50)).summary[0].type == InsightType.SUCCESS

    def test_both_analyses_use_combined_rules(self) -> None:
        summary = self.generator.generate(_budget(50), _progress(50)).summary
        assert not any("utilized at" in i.message for i in summary)


class TestBuiltBudgetInsights:
    def test_exactly_eighty_percent_is_not_high(self) -> None:
        analysis = BudgetAnalysisBuilder().build(
            [BudgetItem(category="Therapy", amount=5000, total_spent=4000)],
            as_of=AS_OF,
            total_budget=5000,
        )
        assert analysis.utilization_rate == 80.0

        insights = InsightGenerator().generate(analysis)
        assert insights.budget[0].type == InsightType.SUCCESS
        assert "80.0%" in insights.budget[0].message
        assert not any(i.type == InsightType.WARNING for i in insights.budget)
