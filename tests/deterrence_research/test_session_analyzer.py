"""
Test cross-session pattern analysis.

Uses the three sample sessions (a NATO win, a Russia win and a tie) plus
small hand-built selections for the threshold-driven patterns.
"""

import pytest

from src.functions.deterrence_research.core.answering import (
    NO_SESSIONS_HEADLINE,
    SessionPatternAnalyzer,
    analyze_generic_patterns,
    analyze_selected_sessions,
)
from src.functions.deterrence_research.core.answering.session_analyzer import decided_games
from tests.deterrence_research.fixtures import log_entry, make_session, purchase, sample_sessions


def nato_win(name, budget=0, **kwargs):
    return make_session(name, nato_total=150, russia_total=100, nato_budget=budget, **kwargs)


class TestDecidedGames:
    """Test winner detection and the winner's purchases."""

    def test_ties_are_skipped(self):
        games = decided_games(sample_sessions())

        assert [(game.session.session_name, game.winner) for game in games] == [
            ("Alpha", "NATO"),
            ("Bravo", "Russia"),
        ]

    def test_only_winner_purchases_are_kept(self):
        alpha = decided_games(sample_sessions())[0]

        assert [(event.card_id, event.turn) for event in alpha.purchases] == [("J1", 1), ("J1", 2)]
        assert alpha.margin == 30


class TestEmptySelection:
    """Test both modes without sessions."""

    def test_selected_mode(self):
        analysis = analyze_selected_sessions([])

        assert analysis.headline_insight == NO_SESSIONS_HEADLINE
        assert analysis.patterns == []
        assert analysis.visual_suggestions == []
        assert analysis.narrative_commentary.startswith("Select some game sessions")

    def test_generic_mode(self):
        analysis = analyze_generic_patterns([])

        assert analysis.headline_insight == "No sessions selected for analysis"
        assert analysis.patterns == []
        assert "winning strategies and correlations" in analysis.narrative_commentary


class TestGenericPatterns:
    """Test the winning-pattern survey."""

    def test_sample_sessions(self):
        analysis = analyze_generic_patterns(sample_sessions())

        assert analysis.patterns == [
            "Winners average 115 total deterrence vs losers' 85 - a 30 point gap",
            "Winning teams hold an average of 0.0 permanent cards by game end",
            "Joint domain dominance: 1 victories with avg score of 30",
            "Economy domain dominance: 1 victories with avg score of 30",
            "Winners balance spending and reserves (avg 85K remaining at game end)",
            "Mixed card strategies observed - no single card type dominates winning formulas",
            "Early aggression (turns 1-3): 1 wins (50%)",
            "Late-game surge strategy: 1 wins (50%)",
            "Most critical purchase turns: Turn 1 (2 key purchases), Turn 2 (1 key purchases)",
            "NATO winning formula: Prioritize economy (avg 40) across 1 victories",
            "Russia winning formula: Prioritize joint (avg 30) across 1 victories",
        ]
        assert analysis.headline_insight == (
            "Comprehensive analysis of 3 sessions reveals 11 distinct winning "
            "strategies and performance correlations."
        )
        assert "Out of 2 decided games" in analysis.narrative_commentary
        assert len(analysis.visual_suggestions) == 6

    @pytest.mark.parametrize(
        "budgets,expected",
        [
            ([10, 30], "Winners typically exhaust their budgets (avg 20K remaining) - aggressive spending pays off"),
            ([250], "Winners maintain budget reserves (avg 250K remaining) - conservative play succeeds"),
            ([50, 200], "Winners balance spending and reserves (avg 125K remaining at game end)"),
        ],
    )
    def test_budget_pattern(self, budgets, expected):
        sessions = [nato_win(f"S{i}", budget=budget) for i, budget in enumerate(budgets)]

        assert expected in analyze_generic_patterns(sessions).patterns

    def test_permanent_ratio_names_the_session(self):
        session = nato_win(
            "Kestrel",
            nato_permanents=["J1", "E1"],
            strategy_log=[
                purchase("NATO", "J1", turn=1),
                purchase("NATO", "E1", turn=2),
                purchase("NATO", "CY7", turn=6),
            ],
        )

        patterns = analyze_generic_patterns([session]).patterns

        assert 'High permanent card ratio (67%) correlates with victory in session "Kestrel"' in patterns

    def test_without_decided_games(self):
        sessions = [make_session("Tie1", nato_total=50, russia_total=50), make_session("Tie2")]

        analysis = analyze_generic_patterns(sessions)

        assert analysis.patterns[0] == "No completed games to analyze winning strategies"
        assert analysis.headline_insight == "Analyzed 2 sessions - 2 strategic patterns identified"
        assert "decided games" not in analysis.narrative_commentary


class TestSelectedSessions:
    """Test the selected-session briefing."""

    def test_sample_sessions(self):
        analysis = analyze_selected_sessions(sample_sessions())

        assert analysis.patterns == [
            "Permanent card timing shows no clear pattern - victory depends on overall strategy",
            "Comebacks are the norm - 100% of games are close battles to the end",
            "NATO's go-to domains: economy (avg 30), joint (avg 20)",
            "Russia's preferred battlegrounds: joint (avg 23), cognitive (avg 23)",
            "Comeback triggers vary - no single card type dominates turnaround scenarios",
            "joint dominance appears in 50% of victories - the most decisive dimension",
            "economy strength correlates with 50% of wins - a solid secondary path",
            "Balanced offense across all domains wins 100% of the time - consistency beats specialization",
            "Across 3 sessions: NATO 1 wins, Russia 1 wins",
        ]
        assert analysis.headline_insight == (
            "A dead heat - NATO and Russia split 2 decisions evenly, with joint "
            "emerging as the key battleground dimension."
        )
        assert "both sides claiming 1 wins apiece" in analysis.narrative_commentary
        assert "nail-biters" in analysis.narrative_commentary
        assert len(analysis.visual_suggestions) == 5

    def test_winner_headline(self):
        sessions = [
            nato_win("A", nato_deterrence={"cyber": 90}),
            nato_win("B", nato_deterrence={"cyber": 70, "space": 20}),
            make_session("C", nato_total=10, russia_total=40, russia_deterrence={"space": 40}),
        ]

        analysis = analyze_selected_sessions(sessions)

        assert analysis.headline_insight == (
            "NATO dominates with 2 victories across 3 sessions, with cyber "
            "superiority being the most decisive factor."
        )
        assert "cyber dominance appears in 67% of victories - the most decisive dimension" in analysis.patterns
        assert "space strength correlates with 33% of wins - a solid secondary path" in analysis.patterns
        assert "NATO's been running the table lately" in analysis.narrative_commentary

    def test_focused_wide_margin_wins(self):
        session = make_session(
            "Rout",
            nato_total=100,
            russia_total=300,
            russia_deterrence={"space": 80},
        )

        patterns = analyze_selected_sessions([session]).patterns

        assert "Early leads tend to stick - 100% of games show clear dominance from start to finish" in patterns
        assert "Focused domain dominance wins 100% of games - specialists prevail over generalists" in patterns

    def test_early_permanents(self):
        session = nato_win(
            "Early",
            nato_permanents=["J1", "E1"],
            strategy_log=[
                purchase("NATO", "J1", turn=1),
                purchase("NATO", "E1", turn=2),
                purchase("NATO", "CY7", turn=6),
            ],
        )

        analysis = analyze_selected_sessions([session])

        assert analysis.patterns[0] == "Early permanent cards strongly correlate with victory (100% of wins)"
        assert "investing in permanent cards early" in analysis.narrative_commentary

    def test_mid_game_permanent_purchases(self):
        session = nato_win(
            "Surge",
            turn=9,
            max_turns=10,
            strategy_log=[
                log_entry("NATO", f"NATO purchased Permanent Shield ({card_id}) for 50K", turn=turn)
                for turn, card_id in ((5, "P1"), (6, "P2"), (8, "P3"))
            ],
        )

        patterns = analyze_selected_sessions([session]).patterns

        assert "Mid-game permanent card investments often trigger momentum shifts" in patterns

    def test_without_decided_games(self):
        analysis = analyze_selected_sessions([make_session("Tie")])

        assert analysis.headline_insight == "Analyzed 1 sessions - all games still in progress or tied"
        assert not any(pattern.startswith("Across") for pattern in analysis.patterns)


class TestSessionPatternAnalyzer:
    """Test mode dispatch."""

    def test_modes(self):
        analyzer = SessionPatternAnalyzer()
        sessions = sample_sessions()

        assert analyzer.analyze(sessions) == analyze_selected_sessions(sessions)
        assert analyzer.analyze(sessions, mode="generic") == analyze_generic_patterns(sessions)

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown analysis mode"):
            SessionPatternAnalyzer().analyze(sample_sessions(), mode="deep")

    def test_to_dict_keys(self):
        data = analyze_selected_sessions(sample_sessions()).to_dict()

        assert set(data) == {
            "headline_insight",
            "patterns",
            "narrative_commentary",
            "visual_suggestions",
        }
