"""Tests for the spending pattern classifier."""

from practicepilot.analyzers.spending_patterns import SpendingPatternClassifier
from practicepilot.config import PatternConfig
from practicepilot.models.budget import SpendingTrend


class TestTrendClassification:
    def setup_method(self) -> None:
        self.classifier = SpendingPatternClassifier()

    def test_short_series_is_stable(self) -> None:
        assert self.classifier.classify_trend([]) == SpendingTrend.STABLE
        assert self.classifier.classify_trend([100]) == SpendingTrend.STABLE

    def test_increasing(self) -> None:
        assert self.classifier.classify_trend([1000, 1000, 1000, 1300]) == SpendingTrend.INCREASING

    def test_decreasing(self) -> None:
        assert self.classifier.classify_trend([1000, 1000, 1000, 800]) == SpendingTrend.DECREASING

    def test_stable(self) -> None:
        assert self.classifier.classify_trend([1000, 1020, 990, 1010]) == SpendingTrend.STABLE

    def test_fluctuating(self) -> None:
        assert self.classifier.classify_trend([100, 500, 100, 500]) == SpendingTrend.FLUCTUATING

    def test_volatile_but_monotonic_is_a_trend(self) -> None:
        assert self.classifier.classify_trend([100, 200, 400, 800]) == SpendingTrend.INCREASING

    def test_spend_after_zero_periods(self) -> None:
        assert self.classifier.classify_trend([0, 0, 0, 100]) == SpendingTrend.INCREASING

    def test_only_recent_window_counts(self) -> None:
        # Old spike falls outside the 3-period window
        assert self.classifier.classify_trend([5000, 1000, 1000, 1000, 1000]) == SpendingTrend.STABLE

    def test_custom_threshold(self) -> None:
        classifier = SpendingPatternClassifier(PatternConfig(volatility_threshold=5.0))
        assert classifier.classify_trend([100, 500, 100, 500]) != SpendingTrend.FLUCTUATING


class TestCategoryFlags:
    def setup_method(self) -> None:
        self.classifier = SpendingPatternClassifier()

    def test_high_usage(self) -> None:
        flagged = self.classifier.high_usage_categories(
            {"Therapy": 800, "Equipment": 100},
            {"Therapy": 1000, "Equipment": 1000, "Travel": 0},
        )
        assert flagged == ["Therapy"]

    def test_extrapolate(self) -> None:
        assert SpendingPatternClassifier.extrapolate(300, 3, 3) == 600
        assert SpendingPatternClassifier.extrapolate(300, 0, 3) == 300

    def test_projected_overage(self) -> None:
        flagged = self.classifier.projected_overages(
            {"Therapy": 600, "Equipment": 200},
            {"Therapy": 1000, "Equipment": 1000},
            periods_elapsed=3,
            periods_remaining=3,
        )
        assert flagged == ["Therapy"]

    def test_already_overspent_is_flagged(self) -> None:
        assert self.classifier.projected_overages({"Therapy": 1100}, {"Therapy": 1000}) == ["Therapy"]

    def test_classify_combines_everything(self) -> None:
        patterns = self.classifier.classify(
            [1000, 1000, 1000, 1300],
            {"Therapy": 1100},
            {"Therapy": 1000},
        )
        assert patterns.trend == SpendingTrend.INCREASING
        assert patterns.high_usage_categories == ["Therapy"]
        assert patterns.projected_overages == ["Therapy"]
