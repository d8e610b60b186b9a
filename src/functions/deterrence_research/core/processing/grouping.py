"""Winner determination and group counting for comparative statistics."""

from typing import List, Optional

from ..contracts.game_session import GameSession, GameState

GROUPING_VARIABLES = ("team", "winner", "session")
TIE = "Tie"


def determine_winner(state: GameState) -> str:
    """'NATO', 'Russia' or 'Tie' by final total deterrence (missing totals read as 0)."""
    nato = state.team("NATO").total_deterrence
    russia = state.team("Russia").total_deterrence
    if nato > russia:
        return "NATO"
    if russia > nato:
        return "Russia"
    return TIE


def group_label(session: GameSession, grouping_variable: str) -> Optional[str]:
    """
    Group a session belongs to under ``grouping_variable``.

    Ties carry no label when grouping by outcome, so inferential tests skip
    them. Team grouping splits each session into both teams and has no single
    per-session label either.
    """
    if grouping_variable == "session":
        return session.session_name
    if grouping_variable == "winner":
        winner = determine_winner(session.game_state)
        return None if winner == TIE else winner
    return None


def count_groups(sessions: List[GameSession], grouping_variable: str) -> int:
    """
    Number of groups the grouping variable partitions the selection into.

    ``team`` is always 2; ``winner`` counts distinct outcomes (ties included)
    among the selected sessions; ``session`` is the session count. No
    grouping variable means a single group.
    """
    if grouping_variable == "team":
        return 2
    if grouping_variable == "winner":
        return len({determine_winner(session.game_state) for session in sessions})
    if grouping_variable == "session":
        return len(sessions)
    return 1
