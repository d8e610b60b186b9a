"""
Test data fixtures for research analytics.

Builders return raw camelCase session records (as the session store sends
them) or parsed GameSession objects.
"""

from typing import Any, Dict, List, Optional

from src.functions.deterrence_research.core.contracts import CardCatalog, GameSession

SAMPLE_CARDS = [
    {"id": "J1", "name": "Joint Exercise", "domain": "joint", "type": "permanent", "baseCostK": 50},
    {"id": "J2", "name": "Forward Deployment", "domain": "joint", "type": "expert", "baseCostK": 80},
    {"id": "E1", "name": "Sanctions Package", "domain": "economy", "type": "permanent", "baseCostK": 60},
    {"id": "CY7", "name": "Network Hardening", "domain": "cyber", "type": "permanent", "baseCostK": 40},
    {"id": "S3", "name": "Satellite Uplink", "domain": "space", "type": "permanent", "baseCostK": 90},
    {"id": "X0", "name": "Unclassified Card"},
]


def purchase(team: str, card_id: str, name: str = "Card", price: int = 50, turn: int = 1) -> Dict[str, Any]:
    """A strategy-log entry in the purchase format."""
    return {
        "turn": turn,
        "team": team,
        "action": f"{team} purchased {name} ({card_id}) for {price}K",
        "timestamp": "2025-01-01T10:00:00Z",
    }


def log_entry(team: str, action: str, turn: int = 1) -> Dict[str, Any]:
    return {"turn": turn, "team": team, "action": action, "timestamp": "2025-01-01T10:00:00Z"}


def team_state(
    total: float = 0,
    deterrence: Optional[Dict[str, float]] = None,
    budget: float = 0,
    permanents: int = 0,
    purchases: int = 0,
    permanent_ids: Optional[List[str]] = None,
) -> Dict[str, Any]:
    if permanent_ids is None:
        permanent_ids = [f"P{i}" for i in range(permanents)]
    return {
        "totalDeterrence": total,
        "deterrence": deterrence or {},
        "budget": budget,
        "ownedPermanents": [{"id": card_id} for card_id in permanent_ids],
        "recentPurchases": [{"id": f"R{i}"} for i in range(purchases)],
    }


def session_record(
    name: str,
    nato_total: float = 0,
    russia_total: float = 0,
    turn: int = 3,
    max_turns: int = 3,
    nato_deterrence: Optional[Dict[str, float]] = None,
    russia_deterrence: Optional[Dict[str, float]] = None,
    strategy_log: Optional[List[Dict[str, Any]]] = None,
    nato_budget: float = 0,
    russia_budget: float = 0,
    nato_permanents: Optional[List[str]] = None,
    russia_permanents: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """A raw session record as returned by the session store."""
    return {
        "sessionName": name,
        "gameState": {
            "turn": turn,
            "maxTurns": max_turns,
            "teams": {
                "NATO": team_state(
                    nato_total, nato_deterrence, nato_budget, permanent_ids=nato_permanents
                ),
                "Russia": team_state(
                    russia_total, russia_deterrence, russia_budget, permanent_ids=russia_permanents
                ),
            },
            "strategyLog": strategy_log or [],
        },
        "createdAt": "2025-01-01T09:00:00Z",
    }


def make_session(name: str, **kwargs) -> GameSession:
    """Parsed GameSession built from :func:`session_record` arguments."""
    return GameSession.from_dict(session_record(name, **kwargs))


def sample_catalog() -> CardCatalog:
    return CardCatalog.from_records(SAMPLE_CARDS)


def sample_sessions() -> List[GameSession]:
    """Three finished sessions: a NATO win, a Russia win and a tie."""
    return [
        make_session(
            "Alpha",
            nato_total=120,
            russia_total=90,
            nato_deterrence={"joint": 30, "economy": 40, "cognitive": 20, "space": 10, "cyber": 20},
            russia_deterrence={"joint": 20, "economy": 20, "cognitive": 20, "space": 10, "cyber": 20},
            strategy_log=[
                purchase("NATO", "J1", "Joint Exercise"),
                purchase("NATO", "J1", "Joint Exercise", turn=2),
                purchase("Russia", "CY7", "Network Hardening"),
                log_entry("NATO", "NATO committed purchases"),
            ],
            nato_budget=100,
            russia_budget=50,
        ),
        make_session(
            "Bravo",
            nato_total=80,
            russia_total=110,
            nato_deterrence={"joint": 10, "economy": 20, "cognitive": 20, "space": 10, "cyber": 20},
            russia_deterrence={"joint": 30, "economy": 20, "cognitive": 20, "space": 20, "cyber": 20},
            strategy_log=[
                purchase("Russia", "J2", "Forward Deployment"),
                purchase("NATO", "E1", "Sanctions Package"),
            ],
            nato_budget=20,
            russia_budget=70,
        ),
        make_session(
            "Charlie",
            nato_total=100,
            russia_total=100,
            nato_deterrence={"joint": 20, "economy": 30, "cognitive": 20, "space": 10, "cyber": 20},
            russia_deterrence={"joint": 20, "economy": 20, "cognitive": 30, "space": 10, "cyber": 20},
            strategy_log=[],
        ),
    ]
