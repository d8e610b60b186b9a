"""Data contracts and types for deterrence research analytics."""

from .game_session import (
    GameSession,
    GameState,
    TeamState,
    LogEntry,
    TEAMS,
    DOMAINS,
    validate_game_session,
    parse_sessions,
    SessionValidationError,
)
from .card_catalog import Card, CardCatalog
from .research import (
    VariableDescriptor,
    SummaryStat,
    StatisticalTest,
    TestNarrative,
    CardFrequency,
    CardRanking,
    HypothesisAnalysis,
    SessionAnalysis,
)

__all__ = [
    # Session contracts
    "GameSession",
    "GameState",
    "TeamState",
    "LogEntry",
    "TEAMS",
    "DOMAINS",
    "validate_game_session",
    "parse_sessions",
    "SessionValidationError",
    # Reference data
    "Card",
    "CardCatalog",
    # Result contracts
    "VariableDescriptor",
    "SummaryStat",
    "StatisticalTest",
    "TestNarrative",
    "CardFrequency",
    "CardRanking",
    "HypothesisAnalysis",
    "SessionAnalysis",
]
