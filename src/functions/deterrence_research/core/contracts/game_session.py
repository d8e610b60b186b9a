"""
Game session contracts and parsing.

Defines the read-only view of a stored game session that the research
analytics consume. Session records arrive as camelCase JSON from the session
store. Parsing is lenient: missing or malformed nested fields degrade to
zero/empty values.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
import math

TEAMS = ("NATO", "Russia")
DOMAINS = ("joint", "economy", "cognitive", "space", "cyber")


def as_number(value: Any, default: float = 0.0) -> float:
    """Return ``value`` as a float, or ``default`` when it is not a finite number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if math.isnan(value) or math.isinf(value):
        return default
    return value


@dataclass(frozen=True)
class LogEntry:
    """
    One strategy-log record.

    ``action`` is free text; purchase events are mined from it later.
    """
    turn: int = 0
    team: Optional[str] = None
    action: str = ""
    timestamp: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "turn": self.turn,
            "team": self.team,
            "action": self.action,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class TeamState:
    """Deterrence, budget and holdings for one team."""
    total_deterrence: float = 0.0
    deterrence: Dict[str, float] = field(default_factory=dict)
    budget: float = 0.0
    owned_permanents: List[Dict[str, Any]] = field(default_factory=list)
    recent_purchases: List[Dict[str, Any]] = field(default_factory=list)

    def domain_score(self, domain: str) -> float:
        """Deterrence in a single domain, 0 when absent."""
        return as_number(self.deterrence.get(domain))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "totalDeterrence": self.total_deterrence,
            "deterrence": dict(self.deterrence),
            "budget": self.budget,
            "ownedPermanents": list(self.owned_permanents),
            "recentPurchases": list(self.recent_purchases),
        }


@dataclass(frozen=True)
class GameState:
    """
    Subset of the game state relevant to analytics.

    ``teams`` only contains the teams actually present in the stored record;
    use :meth:`team` for a safe lookup.
    """
    turn: int = 0
    max_turns: int = 0
    teams: Dict[str, TeamState] = field(default_factory=dict)
    strategy_log: List[LogEntry] = field(default_factory=list)

    def team(self, name: str) -> TeamState:
        """Return the named team's state, or an all-zero state."""
        return self.teams.get(name) or TeamState()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "turn": self.turn,
            "maxTurns": self.max_turns,
            "teams": {name: state.to_dict() for name, state in self.teams.items()},
            "strategyLog": [entry.to_dict() for entry in self.strategy_log],
        }


@dataclass(frozen=True)
class GameSession:
    """
    A stored playthrough, keyed by its unique ``session_name``.

    Immutable from the analytics point of view.
    """
    session_name: str
    game_state: GameState = field(default_factory=GameState)
    turn_statistics: Optional[List[Dict[str, Any]]] = None
    session_info: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None

    def __post_init__(self):
        """Validate session after initialization."""
        if not self.session_name:
            raise ValueError("sessionName is required")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "sessionName": self.session_name,
            "gameState": self.game_state.to_dict(),
            "turnStatistics": self.turn_statistics,
            "sessionInfo": self.session_info,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameSession':
        """
        Create GameSession from a session-store record.

        Args:
            data: Dictionary with ``sessionName`` and ``gameState`` keys

        Returns:
            GameSession instance

        Raises:
            ValueError: If ``sessionName`` is missing or empty
        """
        session_name = data.get("sessionName")
        if not isinstance(session_name, str) or not session_name:
            raise ValueError("Missing required field: sessionName")

        turn_statistics = data.get("turnStatistics")
        session_info = data.get("sessionInfo")
        created_at = data.get("createdAt")

        return cls(
            session_name=session_name,
            game_state=_game_state_from_dict(data.get("gameState")),
            turn_statistics=turn_statistics if isinstance(turn_statistics, list) else None,
            session_info=session_info if isinstance(session_info, dict) else None,
            created_at=str(created_at) if created_at is not None else None,
        )


def _game_state_from_dict(data: Any) -> GameState:
    """Parse a gameState object; anything malformed becomes an empty state."""
    if not isinstance(data, dict):
        return GameState()

    raw_teams = data.get("teams")
    teams: Dict[str, TeamState] = {}
    if isinstance(raw_teams, dict):
        for name in TEAMS:
            if isinstance(raw_teams.get(name), dict):
                teams[name] = _team_state_from_dict(raw_teams[name])

    raw_log = data.get("strategyLog")
    strategy_log = []
    if isinstance(raw_log, list):
        strategy_log = [
            _log_entry_from_dict(entry) for entry in raw_log if isinstance(entry, dict)
        ]

    return GameState(
        turn=int(as_number(data.get("turn"))),
        max_turns=int(as_number(data.get("maxTurns"))),
        teams=teams,
        strategy_log=strategy_log,
    )


def _team_state_from_dict(data: Dict[str, Any]) -> TeamState:
    raw_deterrence = data.get("deterrence")
    deterrence = {}
    if isinstance(raw_deterrence, dict):
        deterrence = {
            domain: as_number(raw_deterrence.get(domain))
            for domain in DOMAINS
            if domain in raw_deterrence
        }

    owned_permanents = data.get("ownedPermanents")
    recent_purchases = data.get("recentPurchases")

    return TeamState(
        total_deterrence=as_number(data.get("totalDeterrence")),
        deterrence=deterrence,
        budget=as_number(data.get("budget")),
        owned_permanents=owned_permanents if isinstance(owned_permanents, list) else [],
        recent_purchases=recent_purchases if isinstance(recent_purchases, list) else [],
    )


def _log_entry_from_dict(data: Dict[str, Any]) -> LogEntry:
    action = data.get("action")
    team = data.get("team")
    timestamp = data.get("timestamp")
    return LogEntry(
        turn=int(as_number(data.get("turn"))),
        team=team if isinstance(team, str) else None,
        action=action if isinstance(action, str) else "",
        timestamp=str(timestamp) if timestamp is not None else None,
    )


class SessionValidationError(Exception):
    """Raised when a session record cannot be parsed at all."""
    pass


def validate_game_session(data: Any) -> GameSession:
    """
    Validate and parse a single session record.

    Args:
        data: Raw dictionary data from JSON input

    Returns:
        Parsed GameSession

    Raises:
        SessionValidationError: If the record is not an object or has no name
    """
    if not isinstance(data, dict):
        raise SessionValidationError(
            f"Session record must be a JSON object, got {type(data).__name__}"
        )
    try:
        return GameSession.from_dict(data)
    except ValueError as e:
        raise SessionValidationError(f"Session validation failed: {e}")


def parse_sessions(records: Any) -> List[GameSession]:
    """
    Parse a list of session records.

    Raises:
        SessionValidationError: If ``records`` is not a list or any record is invalid
    """
    if not isinstance(records, list):
        raise SessionValidationError("Sessions payload must be a JSON array")

    sessions = []
    for i, record in enumerate(records):
        try:
            sessions.append(validate_game_session(record))
        except SessionValidationError as e:
            raise SessionValidationError(f"Session at index {i}: {e}")
    return sessions
