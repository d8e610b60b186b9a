"""
Per-session numeric variable extraction.

Every catalog variable is a pure function of a session's game state. Missing
teams, domains or counters read as 0; extraction never drops a session.
"""

from typing import Callable, Dict, List, Optional
import logging

from ..contracts.game_session import GameSession, GameState, DOMAINS
from ..contracts.research import VariableDescriptor

logger = logging.getLogger(__name__)

_TEAM_PREFIXES = {"nato": "NATO", "russia": "Russia"}


def _build_catalog() -> List[VariableDescriptor]:
    catalog = [
        VariableDescriptor("nato_total", "NATO Total Deterrence", "Team Totals"),
        VariableDescriptor("russia_total", "Russia Total Deterrence", "Team Totals"),
    ]
    for prefix, team in _TEAM_PREFIXES.items():
        for domain in DOMAINS:
            catalog.append(
                VariableDescriptor(
                    f"{prefix}_{domain}",
                    f"{team} {domain.capitalize()} Deterrence",
                    f"{team} Domains",
                )
            )
    catalog.append(VariableDescriptor("turn_count", "Turn Count", "Game Metrics"))
    catalog.append(VariableDescriptor("card_count", "Cards Purchased", "Game Metrics"))
    return catalog


VARIABLE_CATALOG: List[VariableDescriptor] = _build_catalog()


def _card_count(state: GameState) -> float:
    # Counts every NATO and Russia log entry, purchase or not.
    nato = sum(1 for entry in state.strategy_log if entry.team == "NATO")
    russia = sum(1 for entry in state.strategy_log if entry.team == "Russia")
    return nato + russia


def _build_extractors() -> Dict[str, Callable[[GameState], float]]:
    extractors: Dict[str, Callable[[GameState], float]] = {
        "turn_count": lambda state: state.turn,
        "card_count": _card_count,
    }
    for prefix, team in _TEAM_PREFIXES.items():
        extractors[f"{prefix}_total"] = (
            lambda state, team=team: state.team(team).total_deterrence
        )
        for domain in DOMAINS:
            extractors[f"{prefix}_{domain}"] = (
                lambda state, team=team, domain=domain: state.team(team).domain_score(domain)
            )
    return extractors


class VariableExtractor:
    """
    Resolves catalog variable ids to numeric values for a session.

    Example:
        extractor = VariableExtractor()
        extractor.extract(session, "nato_economy")  # 42.0
        extractor.label_for("turn_count")           # "Turn Count"
    """

    def __init__(self, catalog: Optional[List[VariableDescriptor]] = None):
        """
        Initialize the extractor.

        Args:
            catalog: Variable descriptors to expose. Defaults to the fixed
                     14-entry catalog. Ids without a known extraction rule
                     always extract as 0.
        """
        self.catalog = list(catalog) if catalog is not None else list(VARIABLE_CATALOG)
        self._descriptors = {descriptor.id: descriptor for descriptor in self.catalog}
        self._extractors = _build_extractors()

    def extract(self, session: GameSession, variable_id: str) -> float:
        """Return the variable's value for ``session``; unknown ids yield 0."""
        extractor = self._extractors.get(variable_id)
        if extractor is None:
            logger.debug(f"No extraction rule for variable '{variable_id}', using 0")
            return 0
        return extractor(session.game_state)

    def extract_all(self, sessions: List[GameSession], variable_id: str) -> List[float]:
        """One value per session, in session order."""
        return [self.extract(session, variable_id) for session in sessions]

    def descriptor(self, variable_id: str) -> Optional[VariableDescriptor]:
        return self._descriptors.get(variable_id)

    def label_for(self, variable_id: str) -> str:
        descriptor = self._descriptors.get(variable_id)
        return descriptor.label if descriptor else variable_id

    def is_known(self, variable_id: str) -> bool:
        return variable_id in self._descriptors
