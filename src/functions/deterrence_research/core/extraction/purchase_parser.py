"""
Purchase-event mining from strategy-log text.

Purchase actions are logged as ``"<Team> purchased <Card Name> (<CARD_ID>) for <cost>K"``.
Anything that does not match is another kind of game action and is ignored.
"""

from dataclasses import dataclass
from typing import Iterator, Optional
import re

from ..contracts.game_session import GameSession

PURCHASE_PATTERN = re.compile(r"purchased\s+.+\(([A-Za-z0-9_-]+)\)")


@dataclass(frozen=True)
class PurchaseEvent:
    session_name: str
    team: Optional[str]
    card_id: str
    turn: int


def extract_card_id(action: str) -> Optional[str]:
    """
    Return the card id of a purchase action, or None for any other action.

    Examples:
        >>> extract_card_id("NATO purchased Joint Exercise (J1) for 100K")
        'J1'
        >>> extract_card_id("NATO committed purchases") is None
        True
    """
    if not action:
        return None
    match = PURCHASE_PATTERN.search(action)
    return match.group(1) if match else None


def iter_purchases(session: GameSession) -> Iterator[PurchaseEvent]:
    """Yield every purchase event in a session's strategy log, in log order."""
    for entry in session.game_state.strategy_log:
        card_id = extract_card_id(entry.action)
        if card_id is None:
            continue
        yield PurchaseEvent(
            session_name=session.session_name,
            team=entry.team,
            card_id=card_id,
            turn=entry.turn,
        )
