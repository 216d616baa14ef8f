"""Tests for the PracticeAnalytics orchestrator."""

from datetime import date

import pytest

from practicepilot import PracticeAnalytics
from practicepilot.models.budget import SpendingTrend
from practicepilot.models.insight import InsightType
from practicepilot.models.report import ClientSnapshot

AS_OF = date(2025, 3, 1)


def _snapshot(**overrides) -> ClientSnapshot:
    data = {
        "clientName": "Ava",
        "budgetItems": [
            {"id": 1, "category": "Therapy", "description": "Speech therapy", "amount": 1000, "totalSpent": 400},
            {"id": 2, "category": "Equipment", "description": "Sensory kit", "amount": 500, "totalSpent": 100},
        ],
        "spendingHistory": [150, 150, 200],
        "goals": [
            {"goalId": 1, "goalTitle": "Two-word phrases", "progress": 70},
            {"goalId": 2, "goalTitle": "Turn taking", "progress": 50},
        ],
        "sessionStatuses": ["completed"] * 9 + ["cancelled"],
    }
    data.update(overrides)
    return ClientSnapshot.model_validate(data)


class TestPracticeAnalytics:
    def setup_method(self) -> None:
        self.analytics = PracticeAnalytics()

    def test_full_report(self) -> None:
        report = self.analytics.analyze(_snapshot(), AS_OF)

        assert report.client_name == "Ava"
        assert report.as_of == AS_OF
        assert report.budget.total_spent == 500
        assert report.budget.utilization_rate == pytest.approx(100 / 3)
        assert report.budget.spending_patterns.trend == SpendingTrend.INCREASING
        assert report.progress.overall_progress == 60
        assert report.progress.sessions_completed == 9
        assert report.progress.attendance_rate == pytest.approx(90)
        assert report.efficiency.cost_per_progress_point == pytest.approx(500 / 60)
        assert report.efficiency.average_session_cost == pytest.approx(500 / 9)
        assert report.plan is None
        assert report.insights.summary
        assert len(report.bubble.leaves()) == 2

    def test_explicit_session_counters_win(self) -> None:
        report = self.analytics.analyze(_snapshot(sessionsCompleted=3, sessionsCancelled=7), AS_OF)
        assert report.progress.attendance_rate == pytest.approx(30)
        assert report.insights.by_type(InsightType.DANGER)

    def test_history_from_events(self) -> None:
        snapshot = _snapshot(
            spendingHistory=[],
            budgetItems=[{"category": "Therapy", "amount": 3000}],
            spendingEvents=[
                {"date": "2024-12-10", "amount": 200},
                {"date": "2025-01-10", "amount": 200},
                {"date": "2025-02-10", "amount": 500},
                {"date": "2025-04-10", "amount": 999},
            ],
        )
        report = self.analytics.analyze(snapshot, AS_OF)
        assert report.budget.total_spent == 900
        assert report.budget.spending_patterns.trend == SpendingTrend.INCREASING
        assert report.budget.monthly_burn_rate == pytest.approx(300)

    def test_plan_timeline(self) -> None:
        snapshot = _snapshot(planStart="2025-01-01", planEnd="2025-06-30")
        report = self.analytics.analyze(snapshot, AS_OF)
        assert report.plan is not None
        assert report.plan.total_budget == report.budget.total_budget
        assert report.plan.used_budget == report.budget.total_spent
        assert report.plan.days_elapsed == 59

    def test_budget_only(self) -> None:
        report = self.analytics.analyze(_snapshot(goals=[], sessionStatuses=[]), AS_OF)
        assert report.progress is None
        assert report.efficiency is None
        assert [i.message for i in report.insights.summary] == ["Budget is moderately utilized at 33.3%."]
        assert report.insights.budget

    def test_totals_without_items(self) -> None:
        report = self.analytics.analyze(ClientSnapshot(total_budget=5000, total_spent=4000), AS_OF)
        assert report.budget.total_spent == 4000
        assert report.budget.utilization_rate == pytest.approx(80)
        assert report.budget.remaining == 1000
        assert not any("utilization is low" in i.message for i in report.insights.budget)

    def test_goal_progress_from_milestones(self) -> None:
        snapshot = _snapshot(
            goals=[
                {"goalTitle": "Turn taking", "milestones": [{"completed": True}, {"lastRating": 2}]},
                {"goalTitle": "Two-word phrases", "progress": 70},
            ]
        )
        report = self.analytics.analyze(snapshot, AS_OF)
        by_title = {g.goal_title: g.progress for g in report.progress.goal_progress}
        assert by_title == {"Two-word phrases": 70, "Turn taking": 50}
        assert report.progress.overall_progress == 60

    def test_empty_snapshot(self) -> None:
        report = self.analytics.analyze(ClientSnapshot(), AS_OF)
        assert report.client_name == "this client"
        assert report.budget is None
        assert report.progress is None
        assert report.insights.is_empty
        assert report.bubble.children == []

    def test_deterministic(self) -> None:
        first = self.analytics.analyze(_snapshot(), AS_OF)
        second = self.analytics.analyze(_snapshot(), AS_OF)
        assert first.to_json() == second.to_json()

    def test_from_config_overrides(self) -> None:
        analytics = PracticeAnalytics.from_config(None, currency_symbol="€")
        report = analytics.analyze(_snapshot(), AS_OF)
        assert any("€" in i.message for i in report.insights.budget)
