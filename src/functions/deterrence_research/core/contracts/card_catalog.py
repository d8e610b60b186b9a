"""
Static card catalog.

Cards are reference data loaded once at startup and joined against purchase
events by id. The catalog is read-only; lookups for unknown ids return None.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Dict, Any, Iterator
import json
import logging

from .game_session import DOMAINS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Card:
    """A purchasable card. ``domain`` is None when the record does not carry a valid one."""
    id: str
    name: str
    domain: Optional[str] = None
    type: Optional[str] = None
    base_cost_k: Optional[float] = None
    effects: List[Dict[str, Any]] = field(default_factory=list)
    permanent_mods: Optional[Dict[str, Any]] = None
    expert_info: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Card':
        """
        Create a Card from a catalog record.

        Raises:
            ValueError: If ``id`` is missing
        """
        card_id = data.get("id")
        if not isinstance(card_id, str) or not card_id:
            raise ValueError("Card record is missing 'id'")

        domain = data.get("domain")
        effects = data.get("effects")
        return cls(
            id=card_id,
            name=str(data.get("name") or card_id),
            domain=domain if domain in DOMAINS else None,
            type=data.get("type"),
            base_cost_k=data.get("baseCostK"),
            effects=effects if isinstance(effects, list) else [],
            permanent_mods=data.get("permanentMods"),
            expert_info=data.get("expertInfo"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "domain": self.domain,
            "type": self.type,
            "baseCostK": self.base_cost_k,
            "effects": list(self.effects),
            "permanentMods": self.permanent_mods,
            "expertInfo": self.expert_info,
        }


class CardCatalog:
    """
    Id-keyed, read-only collection of cards.

    Example:
        catalog = CardCatalog.load("cards.json")
        catalog.name_for("J1")   # "Joint Exercise"
        catalog.name_for("ZZ9")  # "ZZ9" (unknown ids fall back to the id)
    """

    def __init__(self, cards: Optional[List[Card]] = None):
        self._cards: Dict[str, Card] = {}
        for card in cards or []:
            self._cards[card.id] = card

    @classmethod
    def from_records(cls, records: List[Dict[str, Any]]) -> 'CardCatalog':
        """Build a catalog from raw records, skipping malformed ones."""
        cards = []
        for i, record in enumerate(records):
            if not isinstance(record, dict):
                logger.warning(f"Skipping card record at index {i}: not an object")
                continue
            try:
                cards.append(Card.from_dict(record))
            except ValueError as e:
                logger.warning(f"Skipping card record at index {i}: {e}")
        return cls(cards)

    @classmethod
    def load(cls, path: str) -> 'CardCatalog':
        """
        Load a catalog from a JSON file containing an array of card records.

        Raises:
            FileNotFoundError: If the file doesn't exist
            json.JSONDecodeError: If the file is not valid JSON
            ValueError: If the top-level value is not an array
        """
        catalog_path = Path(path)
        if not catalog_path.exists():
            raise FileNotFoundError(f"Card catalog not found: {path}")

        with open(catalog_path, "r", encoding="utf-8") as f:
            records = json.load(f)

        if not isinstance(records, list):
            raise ValueError(f"Card catalog {path} must contain a JSON array")

        catalog = cls.from_records(records)
        logger.info(f"Loaded {len(catalog)} cards from {path}")
        return catalog

    def get(self, card_id: str) -> Optional[Card]:
        return self._cards.get(card_id)

    def name_for(self, card_id: str) -> str:
        card = self._cards.get(card_id)
        return card.name if card else card_id

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._cards

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards.values())

    def __len__(self) -> int:
        return len(self._cards)
