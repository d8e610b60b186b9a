"""
Test descriptive statistics and grouping.

Covers population standard deviation, even-length medians, the empty
selection precondition and winner-based group counts.
"""

import pytest

from src.functions.deterrence_research.core.contracts import GameSession
from src.functions.deterrence_research.core.processing import (
    SummaryStatisticsEngine,
    count_groups,
    describe,
    determine_winner,
    group_label,
)
from src.functions.deterrence_research.core.processing.inferential import calculate_t_test
from src.functions.deterrence_research.core.processing.summary_statistics import (
    mean,
    median,
    population_std_dev,
)
from tests.deterrence_research.fixtures import make_session, sample_sessions


def sessions_with_nato_totals(values):
    return [make_session(f"S{i}", nato_total=value) for i, value in enumerate(values)]


class TestDescribe:
    """Test the per-variable statistics."""

    def test_population_standard_deviation(self):
        """Test that the standard deviation divides by n."""
        stat = describe("x", [2, 4, 4, 4, 5, 5, 7, 9])

        assert stat.mean == 5
        assert stat.std_dev == pytest.approx(2.0)
        assert stat.to_dict()["std_dev"] == "2.00"

    def test_even_length_median(self):
        assert describe("x", [4, 1, 3, 2]).median == 2.5

    def test_odd_length_median(self):
        assert describe("x", [9, 1, 5]).median == 5

    def test_min_max_range(self):
        stat = describe("x", [3, 10, 7])

        assert (stat.min, stat.max, stat.range) == (3, 10, 7)

    def test_two_decimal_formatting(self):
        data = describe("x", [1, 2, 2]).to_dict()

        assert data["mean"] == "1.67"
        assert data["median"] == "2.00"
        assert data["n"] == 3

    def test_empty_values_raise(self):
        with pytest.raises(ValueError):
            describe("x", [])

    def test_helpers_on_short_inputs(self):
        assert mean([]) == 0.0
        assert population_std_dev([7]) == 0.0
        assert median([10, 1, 3, 2]) == 2.5

    def test_t_test_reports_the_same_standard_deviation(self):
        values = [2, 4, 4, 4, 5, 5, 7, 9]

        result = calculate_t_test(values, [1, 2, 3])

        assert result.mean1 == describe("x", values).mean
        assert result.sd1 == describe("x", values).std_dev

    def test_t_test_means_for_short_groups(self):
        result = calculate_t_test([], [4])

        assert (result.mean1, result.mean2) == (0.0, 4.0)


class TestSummaryStatisticsEngine:
    """Test the summary statistics engine."""

    def test_summarize_known_values(self):
        sessions = sessions_with_nato_totals([2, 4, 4, 4, 5, 5, 7, 9])

        stats = SummaryStatisticsEngine().summarize(sessions, ["nato_total"])

        stat = stats["nato_total"].to_dict()
        assert stat["label"] == "NATO Total Deterrence"
        assert stat["mean"] == "5.00"
        assert stat["std_dev"] == "2.00"
        assert stat["median"] == "4.50"
        assert stat["range"] == "7.00"

    def test_n_equals_session_count_with_missing_fields(self):
        """Test that sessions without data still contribute a zero."""
        sessions = [
            make_session("Full", nato_total=10),
            GameSession.from_dict({"sessionName": "Bare"}),
        ]

        stats = SummaryStatisticsEngine().summarize(sessions, ["nato_total", "russia_cyber"])

        assert stats["nato_total"].n == 2
        assert stats["nato_total"].mean == 5
        assert stats["russia_cyber"].n == 2

    def test_empty_selection_returns_nothing(self):
        engine = SummaryStatisticsEngine()

        assert engine.summarize([], ["nato_total"]) == {}
        assert engine.summarize(sample_sessions(), []) == {}

    def test_keeps_variable_order_and_deduplicates(self):
        stats = SummaryStatisticsEngine().summarize(
            sample_sessions(), ["turn_count", "nato_total", "turn_count"]
        )

        assert list(stats) == ["turn_count", "nato_total"]


class TestGrouping:
    """Test winner determination and group counts."""

    def test_equal_totals_are_a_tie(self):
        session = make_session("Even", nato_total=10, russia_total=10)

        assert determine_winner(session.game_state) == "Tie"

    def test_winner_by_total(self):
        assert determine_winner(make_session("A", nato_total=11, russia_total=10).game_state) == "NATO"
        assert determine_winner(make_session("B", nato_total=1, russia_total=10).game_state) == "Russia"

    def test_tie_counts_as_a_winner_group(self):
        """Test that ties add a distinct group to the winner grouping."""
        assert count_groups(sample_sessions(), "winner") == 3

    def test_group_counts_per_grouping(self):
        sessions = sample_sessions()

        assert count_groups(sessions, "team") == 2
        assert count_groups(sessions, "session") == 3
        assert count_groups(sessions, "") == 1

    def test_group_labels(self):
        nato_win, russia_win, tie = sample_sessions()

        assert group_label(nato_win, "winner") == "NATO"
        assert group_label(russia_win, "winner") == "Russia"
        assert group_label(tie, "winner") is None
        assert group_label(tie, "session") == "Charlie"
        assert group_label(tie, "team") is None
