"""
Cross-session pattern analysis.

Turns a selection of sessions into a short research briefing: a headline,
one line per detected pattern, narrative commentary and chart suggestions.

Two modes are available:
- ``selected``: card timing, momentum, team preferences, comeback triggers,
  dimension dominance, strategy consistency and the overall win split
- ``generic``: winning strategies, domain dominance, budgets, card types,
  purchase timing, critical turns and per-team winning formulas

A session has a winner when its final totals differ; ties are left out of
every winner-based pattern. Purchase turns are read from the winning team's
strategy-log purchases.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple
import logging

import numpy as np

from ..contracts.game_session import DOMAINS, TEAMS, GameSession, TeamState
from ..contracts.research import SessionAnalysis
from ..extraction.purchase_parser import PurchaseEvent, iter_purchases
from ..processing.grouping import TIE, determine_winner
from ..processing.summary_statistics import mean
from ..utils.formatting import percent, round_half_up

logger = logging.getLogger(__name__)

ANALYSIS_MODES = ("selected", "generic")

NO_SESSIONS_HEADLINE = "No sessions selected for analysis"

EARLY_TURN_LIMIT = 3
PERMANENT_TIMING_SPLIT = 4
LATE_TURN_WINDOW = 3
CLOSE_GAME_MARGIN = 100
BALANCED_VARIANCE = 500
MID_GAME_TURNS = (5, 8)
LOW_BUDGET = 50
HIGH_BUDGET = 200

SELECTED_VISUALS = [
    "Timeline chart showing deterrence momentum shifts turn-by-turn",
    "Heatmap of domain strength by team (NATO vs Russia average deterrence per domain)",
    "Bar chart comparing early-game vs late-game card purchase timing",
    "Win rate breakdown by dominant dimension for each team",
    "Comeback frequency tracker showing turn-by-turn lead changes",
]

GENERIC_VISUALS = [
    "Win rate correlation matrix by domain strength combinations",
    "Scatter plot of budget spending vs final deterrence scores",
    "Timeline heatmap showing critical decision points across all games",
    "Domain strength evolution chart comparing winners vs losers",
    "Card purchase frequency histogram by turn and outcome",
    "Team strategy comparison radar chart showing average domain investment",
]


@dataclass(frozen=True)
class DecidedGame:
    """A session that has a winner, with the winner's purchases in log order."""
    session: GameSession
    winner: str
    purchases: Tuple[PurchaseEvent, ...] = ()

    @property
    def loser(self) -> str:
        return "Russia" if self.winner == "NATO" else "NATO"

    @property
    def winner_state(self) -> TeamState:
        return self.session.game_state.team(self.winner)

    @property
    def loser_state(self) -> TeamState:
        return self.session.game_state.team(self.loser)

    @property
    def margin(self) -> float:
        return abs(self.winner_state.total_deterrence - self.loser_state.total_deterrence)

    def purchases_through(self, turn: int) -> int:
        return sum(1 for event in self.purchases if event.turn <= turn)

    def purchases_after(self, turn: int) -> int:
        return sum(1 for event in self.purchases if event.turn > turn)

    def permanent_purchase_turns(self) -> List[int]:
        """Turns on which the winner bought a card it still holds as a permanent."""
        owned = {
            permanent.get("id")
            for permanent in self.winner_state.owned_permanents
            if isinstance(permanent, dict)
        }
        return [event.turn for event in self.purchases if event.card_id in owned]


def decided_games(sessions: Sequence[GameSession]) -> List[DecidedGame]:
    """Every session with a winner, in selection order."""
    games = []
    for session in sessions:
        winner = determine_winner(session.game_state)
        if winner == TIE:
            continue
        purchases = tuple(event for event in iter_purchases(session) if event.team == winner)
        games.append(DecidedGame(session=session, winner=winner, purchases=purchases))
    return games


def _win_counts(games: List[DecidedGame]) -> Tuple[int, int]:
    winners = Counter(game.winner for game in games)
    return winners["NATO"], winners["Russia"]


def _strongest_domain(state: TeamState) -> str:
    """Highest-scoring domain; 'joint' when no domain scores above 0."""
    strongest, best = DOMAINS[0], 0.0
    for domain in DOMAINS:
        score = state.domain_score(domain)
        if score > best:
            strongest, best = domain, score
    return strongest


def _ranked_domains(values: Dict[str, float]) -> List[str]:
    # sorted() is stable, so ties keep the canonical domain order
    return sorted(DOMAINS, key=lambda domain: -values[domain])


def _dominance_counts(games: List[DecidedGame]) -> Dict[str, int]:
    counts = dict.fromkeys(DOMAINS, 0)
    for game in games:
        counts[_strongest_domain(game.winner_state)] += 1
    return counts


# Generic survey


def _winning_strategy_patterns(games: List[DecidedGame]) -> List[str]:
    if not games:
        return ["No completed games to analyze winning strategies"]

    winning = mean([game.winner_state.total_deterrence for game in games])
    losing = mean([game.loser_state.total_deterrence for game in games])
    permanents = mean([len(game.winner_state.owned_permanents) for game in games])
    return [
        f"Winners average {round_half_up(winning)} total deterrence vs losers' "
        f"{round_half_up(losing)} - a {round_half_up(winning - losing)} point gap",
        f"Winning teams hold an average of {permanents:.1f} permanent cards by game end",
    ]


def _domain_dominance_patterns(games: List[DecidedGame]) -> List[str]:
    wins = _dominance_counts(games)
    patterns = []
    for domain in DOMAINS:
        if not wins[domain]:
            continue
        average = mean([game.winner_state.domain_score(domain) for game in games])
        patterns.append(
            f"{domain.capitalize()} domain dominance: {wins[domain]} victories "
            f"with avg score of {round_half_up(average)}"
        )
    return patterns


def _budget_patterns(games: List[DecidedGame]) -> List[str]:
    if not games:
        return []

    remaining = mean([game.winner_state.budget for game in games])
    shown = round_half_up(remaining)
    if remaining < LOW_BUDGET:
        return [
            f"Winners typically exhaust their budgets (avg {shown}K remaining) - "
            f"aggressive spending pays off"
        ]
    if remaining > HIGH_BUDGET:
        return [
            f"Winners maintain budget reserves (avg {shown}K remaining) - "
            f"conservative play succeeds"
        ]
    return [f"Winners balance spending and reserves (avg {shown}K remaining at game end)"]


def _card_type_patterns(games: List[DecidedGame]) -> List[str]:
    patterns = []
    for game in games:
        permanents = len(game.winner_state.owned_permanents)
        bought = len(game.purchases)
        if permanents and permanents >= bought * 0.4:
            patterns.append(
                f"High permanent card ratio ({percent(permanents, max(bought, 1))}%) "
                f"correlates with victory in session \"{game.session.session_name}\""
            )
    return patterns or [
        "Mixed card strategies observed - no single card type dominates winning formulas"
    ]


def _timing_patterns(games: List[DecidedGame]) -> List[str]:
    if not games:
        return []

    early = sum(1 for game in games if game.purchases_through(EARLY_TURN_LIMIT) >= 2)
    late = sum(
        1
        for game in games
        if game.purchases_after(game.session.game_state.max_turns - LATE_TURN_WINDOW) >= 2
    )
    return [
        f"Early aggression (turns 1-3): {early} wins ({percent(early, len(games))}%)",
        f"Late-game surge strategy: {late} wins ({percent(late, len(games))}%)",
    ]


def _critical_turn_patterns(games: List[DecidedGame]) -> List[str]:
    per_turn = Counter(event.turn for game in games for event in game.purchases)
    if not per_turn:
        return []

    busiest = sorted(sorted(per_turn.items()), key=lambda item: -item[1])[:3]
    listing = ", ".join(f"Turn {turn} ({count} key purchases)" for turn, count in busiest)
    return [f"Most critical purchase turns: {listing}"]


def _team_formula_patterns(games: List[DecidedGame]) -> List[str]:
    patterns = []
    for team in TEAMS:
        wins = [game for game in games if game.winner == team]
        if not wins:
            continue
        totals = {
            domain: sum(game.winner_state.domain_score(domain) for game in wins)
            for domain in DOMAINS
        }
        top = _ranked_domains(totals)[0]
        patterns.append(
            f"{team} winning formula: Prioritize {top} "
            f"(avg {round_half_up(totals[top] / len(wins))}) across {len(wins)} victories"
        )
    return patterns


def analyze_generic_patterns(sessions: Sequence[GameSession]) -> SessionAnalysis:
    """
    Survey every measurable winning pattern across the sessions.

    Returns:
        SessionAnalysis; an empty selection yields a prompt to select sessions
    """
    if not sessions:
        return SessionAnalysis(
            headline_insight=NO_SESSIONS_HEADLINE,
            narrative_commentary=(
                "Select some game sessions to discover winning strategies and correlations."
            ),
        )

    games = decided_games(sessions)
    patterns = [
        *_winning_strategy_patterns(games),
        *_domain_dominance_patterns(games),
        *_budget_patterns(games),
        *_card_type_patterns(games),
        *_timing_patterns(games),
        *_critical_turn_patterns(games),
        *_team_formula_patterns(games),
    ]

    count = len(sessions)
    if games:
        headline = (
            f"Comprehensive analysis of {count} sessions reveals {len(patterns)} "
            f"distinct winning strategies and performance correlations."
        )
    else:
        headline = f"Analyzed {count} sessions - {len(patterns)} strategic patterns identified"

    narrative = (
        f"Analyzing {count} complete strategic encounters, we've identified every "
        f"measurable pattern that correlates with victory. "
    )
    if games:
        narrative += (
            f"Out of {len(games)} decided games, the data reveals clear performance gaps "
            f"between winners and losers across all dimensions. "
        )
    narrative += (
        "The winning strategies aren't random - they follow identifiable patterns in "
        "domain investment, timing, and resource allocation. "
        "Some teams dominate through single-domain superiority, building an "
        "insurmountable lead in one area. Others spread their investments across "
        "multiple domains, creating a balanced deterrence profile that's hard to crack. "
        "Budget management separates winners from losers - not just how much you "
        "spend, but when you spend it and what you buy. "
        "Permanent cards provide long-term value, but asset cards deliver immediate "
        "impact. Expert advisors offer specialized advantages at critical moments. "
        "The most successful teams find the right mix for their strategic approach. "
        "Every session tells a story of adaptation, timing, and strategic vision. "
        "The patterns are here - learn from them, adapt them to your style, and "
        "execute with precision."
    )

    return SessionAnalysis(
        headline_insight=headline,
        patterns=patterns,
        narrative_commentary=narrative,
        visual_suggestions=list(GENERIC_VISUALS),
    )


# Selected-session briefing


def _permanent_timing(games: List[DecidedGame]) -> Tuple[int, int]:
    """Wins where permanents were mostly bought early vs mostly late."""
    early_wins = late_wins = 0
    for game in games:
        turns = game.permanent_purchase_turns()
        early = sum(1 for turn in turns if turn <= PERMANENT_TIMING_SPLIT)
        late = len(turns) - early
        if early > late:
            early_wins += 1
        elif late > early:
            late_wins += 1
    return early_wins, late_wins


def _permanent_timing_patterns(games: List[DecidedGame], early_wins: int, late_wins: int) -> List[str]:
    if not games:
        return []
    if early_wins > late_wins:
        return [
            f"Early permanent cards strongly correlate with victory "
            f"({percent(early_wins, len(games))}% of wins)"
        ]
    if late_wins > early_wins:
        return [
            f"Late-game permanent acquisitions can turn the tide "
            f"({percent(late_wins, len(games))}% of wins)"
        ]
    return ["Permanent card timing shows no clear pattern - victory depends on overall strategy"]


def _momentum_patterns(games: List[DecidedGame], close_wins: int) -> List[str]:
    if not games:
        return []
    dominant_wins = len(games) - close_wins
    if close_wins > dominant_wins:
        return [
            f"Comebacks are the norm - {percent(close_wins, len(games))}% of games are "
            f"close battles to the end"
        ]
    return [
        f"Early leads tend to stick - {percent(dominant_wins, len(games))}% of games show "
        f"clear dominance from start to finish"
    ]


def _team_preference_patterns(sessions: Sequence[GameSession]) -> List[str]:
    patterns = []
    for team, phrase in (("NATO", "NATO's go-to domains"), ("Russia", "Russia's preferred battlegrounds")):
        averages = {
            domain: mean([session.game_state.team(team).domain_score(domain) for session in sessions])
            for domain in DOMAINS
        }
        first, second = _ranked_domains(averages)[:2]
        patterns.append(
            f"{phrase}: {first} (avg {round_half_up(averages[first])}), "
            f"{second} (avg {round_half_up(averages[second])})"
        )
    return patterns


def _comeback_trigger_patterns(sessions: Sequence[GameSession]) -> List[str]:
    first_turn, last_turn = MID_GAME_TURNS
    for session in sessions:
        mid_game_permanents = [
            entry
            for entry in session.game_state.strategy_log
            if first_turn <= entry.turn <= last_turn and "permanent" in entry.action.lower()
        ]
        if len(mid_game_permanents) > 2:
            return ["Mid-game permanent card investments often trigger momentum shifts"]
    return ["Comeback triggers vary - no single card type dominates turnaround scenarios"]


def _dimension_patterns(games: List[DecidedGame], wins_by_domain: Dict[str, int]) -> List[str]:
    if not games:
        return []

    first, second = _ranked_domains(wins_by_domain)[:2]
    patterns = [
        f"{first} dominance appears in {percent(wins_by_domain[first], len(games))}% "
        f"of victories - the most decisive dimension"
    ]
    if wins_by_domain[second]:
        patterns.append(
            f"{second} strength correlates with {percent(wins_by_domain[second], len(games))}% "
            f"of wins - a solid secondary path"
        )
    return patterns


def _balanced_wins(games: List[DecidedGame]) -> int:
    """Wins whose domain scores have a population variance below the threshold."""
    return sum(
        1
        for game in games
        if float(np.var([game.winner_state.domain_score(domain) for domain in DOMAINS]))
        < BALANCED_VARIANCE
    )


def _consistency_patterns(games: List[DecidedGame], balanced_wins: int) -> List[str]:
    if not games:
        return []
    focused_wins = len(games) - balanced_wins
    if balanced_wins > focused_wins:
        return [
            f"Balanced offense across all domains wins {percent(balanced_wins, len(games))}% "
            f"of the time - consistency beats specialization"
        ]
    return [
        f"Focused domain dominance wins {percent(focused_wins, len(games))}% of games - "
        f"specialists prevail over generalists"
    ]


def _cross_session_patterns(sessions: Sequence[GameSession], games: List[DecidedGame]) -> List[str]:
    if not games:
        return []

    nato_wins, russia_wins = _win_counts(games)
    patterns = [f"Across {len(sessions)} sessions: NATO {nato_wins} wins, Russia {russia_wins} wins"]
    if len(sessions) >= 3:
        heavy_starters = sum(1 for game in games if game.purchases_through(EARLY_TURN_LIMIT) >= 3)
        if heavy_starters >= len(sessions) / 2:
            patterns.append(
                f"{percent(heavy_starters, len(sessions))}% of winners invested heavily in "
                f"turns 1-3 - early aggression pays off"
            )
    return patterns


def _selected_headline(count: int, nato_wins: int, russia_wins: int, top_domain: str) -> str:
    if nato_wins + russia_wins == 0:
        return f"Analyzed {count} sessions - all games still in progress or tied"
    if nato_wins > russia_wins:
        return (
            f"NATO dominates with {nato_wins} victories across {count} sessions, "
            f"with {top_domain} superiority being the most decisive factor."
        )
    if russia_wins > nato_wins:
        return (
            f"Russia takes control with {russia_wins} wins across {count} matches, "
            f"leveraging {top_domain} strength as their primary weapon."
        )
    return (
        f"A dead heat - NATO and Russia split {nato_wins + russia_wins} decisions evenly, "
        f"with {top_domain} emerging as the key battleground dimension."
    )


def _selected_narrative(
    count: int,
    nato_wins: int,
    russia_wins: int,
    permanent_timing: Tuple[int, int],
    close_wins: int,
    dominant_wins: int,
    balanced_wins: int,
    focused_wins: int,
) -> str:
    commentary = (
        f"Looking at {count} strategic encounters, we're seeing some fascinating "
        f"patterns emerge. "
    )

    if nato_wins > russia_wins:
        commentary += (
            f"NATO's been running the table lately, notching {nato_wins} wins compared "
            f"to Russia's {russia_wins}. "
        )
    elif russia_wins > nato_wins:
        commentary += (
            f"Russia's finding their groove with {russia_wins} victories while NATO "
            f"manages just {nato_wins}. "
        )
    elif nato_wins:
        commentary += (
            f"It's a perfectly balanced rivalry - both sides claiming {nato_wins} wins apiece. "
        )

    early_permanents, late_permanents = permanent_timing
    if early_permanents > late_permanents:
        commentary += (
            "Winners are investing in permanent cards early - it's like building your "
            "infrastructure in the first quarter and reaping dividends all game long. "
        )
    elif late_permanents > early_permanents:
        commentary += (
            "We're seeing late-game permanent purchases paying off - teams that stay "
            "patient and strike in the clutch are finding success. "
        )

    if close_wins > dominant_wins:
        commentary += "These matches are nail-biters - early leads mean nothing when the late game arrives. "
    elif dominant_wins:
        commentary += (
            "Once a team gets ahead, they tend to stay there - early momentum is king "
            "in these matchups. "
        )

    if balanced_wins > focused_wins:
        commentary += (
            "The balanced approach is winning out - teams that spread their investments "
            "across all five dimensions are harder to crack. "
        )
    elif focused_wins:
        commentary += (
            "Specialists are thriving - picking two or three domains and dominating them "
            "proves more effective than spreading thin. "
        )

    commentary += (
        "The data tells a clear story: success requires reading the opponent, timing "
        "your investments, and either building an unassailable lead or staying close "
        "enough to strike when opportunities emerge."
    )
    return commentary


def analyze_selected_sessions(sessions: Sequence[GameSession]) -> SessionAnalysis:
    """
    Brief the researcher on the strategic patterns of the selected sessions.

    Returns:
        SessionAnalysis; an empty selection yields a prompt to select sessions
    """
    if not sessions:
        return SessionAnalysis(
            headline_insight=NO_SESSIONS_HEADLINE,
            narrative_commentary=(
                "Select some game sessions to see strategic patterns and insights."
            ),
        )

    games = decided_games(sessions)
    nato_wins, russia_wins = _win_counts(games)
    early_permanents, late_permanents = _permanent_timing(games)
    close_wins = sum(1 for game in games if game.margin < CLOSE_GAME_MARGIN)
    balanced_wins = _balanced_wins(games)
    wins_by_domain = _dominance_counts(games)

    patterns = [
        *_permanent_timing_patterns(games, early_permanents, late_permanents),
        *_momentum_patterns(games, close_wins),
        *_team_preference_patterns(sessions),
        *_comeback_trigger_patterns(sessions),
        *_dimension_patterns(games, wins_by_domain),
        *_consistency_patterns(games, balanced_wins),
        *_cross_session_patterns(sessions, games),
    ]

    headline = _selected_headline(
        len(sessions), nato_wins, russia_wins, _ranked_domains(wins_by_domain)[0]
    )
    narrative = _selected_narrative(
        len(sessions),
        nato_wins,
        russia_wins,
        (early_permanents, late_permanents),
        close_wins,
        len(games) - close_wins,
        balanced_wins,
        len(games) - balanced_wins,
    )

    return SessionAnalysis(
        headline_insight=headline,
        patterns=patterns,
        narrative_commentary=narrative,
        visual_suggestions=list(SELECTED_VISUALS),
    )


class SessionPatternAnalyzer:
    """
    Runs either pattern analysis over a session selection.

    Example:
        analyzer = SessionPatternAnalyzer()
        analysis = analyzer.analyze(sessions, mode="generic")
        analysis.headline_insight
    """

    def analyze(self, sessions: Sequence[GameSession], mode: str = "selected") -> SessionAnalysis:
        """
        Raises:
            ValueError: If ``mode`` is not one of ANALYSIS_MODES
        """
        if mode not in ANALYSIS_MODES:
            raise ValueError(f"Unknown analysis mode '{mode}', expected one of {ANALYSIS_MODES}")

        logger.debug(f"Running {mode} pattern analysis over {len(sessions)} sessions")
        if mode == "generic":
            return analyze_generic_patterns(sessions)
        return analyze_selected_sessions(sessions)
