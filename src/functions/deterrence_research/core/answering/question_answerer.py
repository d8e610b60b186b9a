"""
Keyword-routed answers to plain questions about selected sessions.

Answers are computed from the session data only. A game counts as decided
once it reached its final turn with unequal totals; undecided games are
left out of score, domain and comparison answers.
"""

from typing import List, Optional

from ..contracts.game_session import GameSession, GameState, DOMAINS
from ..processing.summary_statistics import mean as _average
from ..utils.formatting import round_half_up as _round

NO_SESSIONS_MESSAGE = (
    "Please select at least one game session to analyze. Once you've selected "
    "sessions, I can answer questions based on the actual data from those games."
)


def decided_winner(state: GameState) -> Optional[str]:
    """'NATO' or 'Russia' for a finished, decided game; otherwise None."""
    if state.turn < state.max_turns:
        return None
    nato = state.team("NATO").total_deterrence
    russia = state.team("Russia").total_deterrence
    if nato > russia:
        return "NATO"
    if russia > nato:
        return "Russia"
    return None


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def _winners(sessions: List[GameSession]) -> str:
    winners = [decided_winner(s.game_state) for s in sessions]
    nato_wins = winners.count("NATO")
    russia_wins = winners.count("Russia")
    undecided = winners.count(None)

    response = f"Based on {_plural(len(sessions), 'selected session')}:\n\n"
    response += f"• NATO victories: {nato_wins}\n"
    response += f"• Russia victories: {russia_wins}\n"
    response += f"• Incomplete/Tied: {undecided}\n\n"

    decided = max(nato_wins + russia_wins, 1)
    if nato_wins or russia_wins:
        response += (
            f"Win rate: NATO {_round(nato_wins / decided * 100)}% "
            f"vs Russia {_round(russia_wins / decided * 100)}%"
        )
    return response


def _scores(completed: List[GameSession]) -> str:
    if not completed:
        return (
            "None of the selected sessions are completed yet. Final scores are "
            "only available for finished games."
        )

    nato = [s.game_state.team("NATO").total_deterrence for s in completed]
    russia = [s.game_state.team("Russia").total_deterrence for s in completed]
    avg_nato, avg_russia = _average(nato), _average(russia)

    return (
        f"Deterrence scores across {_plural(len(completed), 'completed session')}:\n\n"
        f"NATO:\n"
        f"• Average: {_round(avg_nato)}\n"
        f"• Highest: {_number(max(nato))}\n\n"
        f"Russia:\n"
        f"• Average: {_round(avg_russia)}\n"
        f"• Highest: {_number(max(russia))}\n\n"
        f"Average margin: {abs(_round(avg_nato - avg_russia))} points"
    )


def _domains(completed: List[GameSession], domain: Optional[str]) -> str:
    if not completed:
        return (
            "None of the selected sessions are completed yet. Domain analysis "
            "requires finished games."
        )

    header = _plural(len(completed), "completed session")
    if domain:
        avg_nato = _average([s.game_state.team("NATO").domain_score(domain) for s in completed])
        avg_russia = _average([s.game_state.team("Russia").domain_score(domain) for s in completed])
        leader = "NATO" if avg_nato > avg_russia else "Russia"
        return (
            f"{domain.capitalize()} domain performance across {header}:\n\n"
            f"• NATO average: {_round(avg_nato)}\n"
            f"• Russia average: {_round(avg_russia)}\n"
            f"• Advantage: {leader} by {abs(_round(avg_nato - avg_russia))} points"
        )

    response = f"Domain performance across {header}:\n\n"
    for name in DOMAINS:
        avg_nato = _average([s.game_state.team("NATO").domain_score(name) for s in completed])
        avg_russia = _average([s.game_state.team("Russia").domain_score(name) for s in completed])
        response += f"{name.capitalize()}:\n"
        response += f"  NATO: {_round(avg_nato)} | Russia: {_round(avg_russia)}\n"
    return response


def _budget(sessions: List[GameSession]) -> str:
    avg_nato = _average([s.game_state.team("NATO").budget for s in sessions])
    avg_russia = _average([s.game_state.team("Russia").budget for s in sessions])
    return (
        f"Budget status across {_plural(len(sessions), 'session')}:\n\n"
        f"• NATO average remaining: {_round(avg_nato)}K\n"
        f"• Russia average remaining: {_round(avg_russia)}K\n\n"
        f"Note: Lower budgets indicate more aggressive spending strategies."
    )


def _cards(sessions: List[GameSession]) -> str:
    def avg_len(team: str, attr: str) -> float:
        return _average([len(getattr(s.game_state.team(team), attr)) for s in sessions])

    return (
        f"Card purchase patterns across {_plural(len(sessions), 'session')}:\n\n"
        f"NATO:\n"
        f"• Average permanent cards: {avg_len('NATO', 'owned_permanents'):.1f}\n"
        f"• Average total purchases: {avg_len('NATO', 'recent_purchases'):.1f}\n\n"
        f"Russia:\n"
        f"• Average permanent cards: {avg_len('Russia', 'owned_permanents'):.1f}\n"
        f"• Average total purchases: {avg_len('Russia', 'recent_purchases'):.1f}"
    )


def _turns(sessions: List[GameSession]) -> str:
    avg_turn = _average([s.game_state.turn for s in sessions])
    finished = sum(1 for s in sessions if s.game_state.turn >= s.game_state.max_turns)
    return (
        f"Turn progression across {_plural(len(sessions), 'session')}:\n\n"
        f"• Average current turn: {avg_turn:.1f}\n"
        f"• Completed sessions: {finished}\n"
        f"• In progress: {len(sessions) - finished}"
    )


def _comparison(completed: List[GameSession]) -> str:
    if not completed:
        return "Please select completed sessions for team comparison analysis."

    winners = [decided_winner(s.game_state) for s in completed]
    nato_wins, russia_wins = winners.count("NATO"), winners.count("Russia")
    avg_nato = _average([s.game_state.team("NATO").total_deterrence for s in completed])
    avg_russia = _average([s.game_state.team("Russia").total_deterrence for s in completed])
    n = len(completed)

    return (
        f"NATO vs Russia comparison ({n} completed sessions):\n\n"
        f"Victories:\n"
        f"• NATO: {nato_wins} ({_round(nato_wins / n * 100)}%)\n"
        f"• Russia: {russia_wins} ({_round(russia_wins / n * 100)}%)\n\n"
        f"Average Total Deterrence:\n"
        f"• NATO: {_round(avg_nato)}\n"
        f"• Russia: {_round(avg_russia)}\n"
        f"• Difference: {abs(_round(avg_nato - avg_russia))} points"
    )


def _session_list(sessions: List[GameSession]) -> str:
    response = f"You have selected {_plural(len(sessions), 'session')}:\n\n"
    for i, session in enumerate(sessions, 1):
        state = session.game_state
        winner = decided_winner(state)
        response += f"{i}. {session.session_name}\n"
        response += f"   Turn {state.turn}/{state.max_turns}"
        if winner:
            response += f" - Winner: {winner}"
        response += "\n"
    return response


def _help(sessions: List[GameSession]) -> str:
    return (
        f"I can answer questions about the {_plural(len(sessions), 'selected session')} "
        f"based on actual game data. Try asking:\n\n"
        f"• \"Who won the games?\"\n"
        f"• \"What were the final scores?\"\n"
        f"• \"How did teams perform in the economy domain?\"\n"
        f"• \"What's the average budget remaining?\"\n"
        f"• \"How many cards were purchased?\"\n"
        f"• \"Compare NATO vs Russia\"\n"
        f"• \"Show me the session list\"\n\n"
        f"All answers are based on real data from your selected sessions."
    )


def answer_question(question: str, sessions: List[GameSession]) -> str:
    """
    Answer a plain-language question about the selected sessions.

    Routing is by keyword, first match wins: winners, scores, domains,
    budget, cards, turns, team comparison, session list, then a help text.
    """
    if not sessions:
        return NO_SESSIONS_MESSAGE

    q = question.lower()
    completed = [s for s in sessions if decided_winner(s.game_state) is not None]

    if "who won" in q or "winner" in q:
        return _winners(sessions)
    if "score" in q or "deterrence" in q:
        return _scores(completed)

    domain = next((d for d in DOMAINS if d in q), None)
    if domain or "domain" in q:
        return _domains(completed, domain)

    if "budget" in q or "spending" in q:
        return _budget(sessions)
    if "card" in q or "permanent" in q:
        return _cards(sessions)
    if "turn" in q or "how long" in q:
        return _turns(sessions)
    if "compare" in q or "difference" in q or "vs" in q:
        return _comparison(completed)
    if "session" in q and ("list" in q or "show" in q):
        return _session_list(sessions)
    return _help(sessions)
