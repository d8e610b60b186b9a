"""Plain-language answers and pattern briefings about selected sessions."""

from .question_answerer import answer_question, decided_winner, NO_SESSIONS_MESSAGE
from .session_analyzer import (
    ANALYSIS_MODES,
    NO_SESSIONS_HEADLINE,
    SessionPatternAnalyzer,
    analyze_generic_patterns,
    analyze_selected_sessions,
)

__all__ = [
    "answer_question",
    "decided_winner",
    "NO_SESSIONS_MESSAGE",
    "ANALYSIS_MODES",
    "NO_SESSIONS_HEADLINE",
    "SessionPatternAnalyzer",
    "analyze_generic_patterns",
    "analyze_selected_sessions",
]
