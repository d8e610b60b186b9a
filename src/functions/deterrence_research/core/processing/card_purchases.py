"""
Card purchase aggregation.

This module provides the CardPurchaseAggregator class which:
- Tallies purchases of selected cards per team, with session-presence counts
- Ranks every catalogued card per domain and team by purchase count

The two views use different denominators. ``aggregate_frequency`` reports the
share of selected sessions a card appeared in; ``rank_by_dimension`` reports
shares of raw purchase counts.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional, Set
import logging

from ..contracts.card_catalog import CardCatalog
from ..contracts.game_session import GameSession, DOMAINS
from ..contracts.research import CardFrequency, CardRanking
from ..extraction.purchase_parser import iter_purchases

logger = logging.getLogger(__name__)

TEAM_FILTERS = ("both", "NATO", "Russia")
_TEAM_KEYS = {"NATO": "nato", "Russia": "russia"}


def format_percentage(part: float, whole: float) -> str:
    """Percentage to 1 decimal; '0.0' when ``whole`` is 0."""
    if not whole:
        return "0.0"
    return f"{part / whole * 100:.1f}"


class CardPurchaseAggregator:
    """
    Aggregates card purchases mined from strategy logs.

    Example:
        aggregator = CardPurchaseAggregator(catalog)
        rows = aggregator.aggregate_frequency(sessions, ["J1", "CY7"], "both")
        rankings = aggregator.rank_by_dimension(sessions)
        rankings["joint"]["nato"][0].domain_percentage  # "60.0"
    """

    def __init__(self, catalog: Optional[CardCatalog] = None):
        self.catalog = catalog or CardCatalog()

    def aggregate_frequency(
        self,
        sessions: List[GameSession],
        card_ids: List[str],
        team_filter: str = "both",
    ) -> List[CardFrequency]:
        """
        Count purchases of the selected cards across the selected sessions.

        Args:
            sessions: Selected sessions
            card_ids: Selected card ids; every one appears in the output
            team_filter: "both", "NATO" or "Russia"; picks which counters
                         feed ``display_count`` and ``sessions_appeared``

        Returns:
            One CardFrequency per selected card, sorted by ``display_count``
            descending (ties keep selection order)

        Raises:
            ValueError: If ``team_filter`` is not a known filter
        """
        if team_filter not in TEAM_FILTERS:
            raise ValueError(
                f"Unknown team filter '{team_filter}', expected one of {TEAM_FILTERS}"
            )

        selected = list(dict.fromkeys(card_ids))
        if not selected:
            return []

        counts: Dict[str, Dict[str, int]] = {
            card_id: {"NATO": 0, "Russia": 0, "both": 0} for card_id in selected
        }
        touched: Dict[str, Dict[str, Set[str]]] = {
            card_id: {"NATO": set(), "Russia": set(), "both": set()} for card_id in selected
        }

        for session in sessions:
            for event in iter_purchases(session):
                if event.card_id not in counts or event.team not in _TEAM_KEYS:
                    continue
                for key in (event.team, "both"):
                    counts[event.card_id][key] += 1
                    touched[event.card_id][key].add(event.session_name)

        total_sessions = len(sessions)
        rows = []
        for card_id in selected:
            sessions_appeared = len(touched[card_id][team_filter])
            rows.append(
                CardFrequency(
                    card_id=card_id,
                    card_name=self.catalog.name_for(card_id),
                    nato_count=counts[card_id]["NATO"],
                    russia_count=counts[card_id]["Russia"],
                    total_count=counts[card_id]["both"],
                    display_count=counts[card_id][team_filter],
                    percentage=format_percentage(sessions_appeared, total_sessions),
                    sessions_appeared=sessions_appeared,
                )
            )

        rows.sort(key=lambda row: row.display_count, reverse=True)
        return rows

    def rank_by_dimension(
        self,
        sessions: List[GameSession],
    ) -> Dict[str, Dict[str, List[CardRanking]]]:
        """
        Rank every purchased, catalogued card within its domain, per team.

        Purchases of ids missing from the catalog (or catalogued without a
        domain) are excluded from every count, including the totals used as
        denominators.

        Returns:
            ``{domain: {"nato": [...], "russia": [...]}}`` for all five
            domains. A team's list holds only cards that team bought.
        """
        card_counts: Dict[str, Dict[str, int]] = {
            "nato": defaultdict(int),
            "russia": defaultdict(int),
        }
        domain_totals: Dict[str, Dict[str, int]] = {
            "nato": defaultdict(int),
            "russia": defaultdict(int),
        }
        skipped = 0

        for session in sessions:
            for event in iter_purchases(session):
                team_key = _TEAM_KEYS.get(event.team)
                card = self.catalog.get(event.card_id)
                if team_key is None or card is None or card.domain is None:
                    skipped += 1
                    continue
                card_counts[team_key][card.id] += 1
                domain_totals[team_key][card.domain] += 1

        if skipped:
            logger.debug(f"Excluded {skipped} purchase events from dimension rankings")

        grand_totals = {
            team_key: sum(domain_totals[team_key].values()) for team_key in card_counts
        }

        rankings: Dict[str, Dict[str, List[CardRanking]]] = {}
        for domain in DOMAINS:
            rankings[domain] = {}
            for team_key, per_card in card_counts.items():
                domain_cards = [
                    (card_id, count)
                    for card_id, count in per_card.items()
                    if self.catalog.get(card_id).domain == domain
                ]
                domain_cards.sort(key=lambda item: item[1], reverse=True)
                rankings[domain][team_key] = [
                    CardRanking(
                        card_id=card_id,
                        card_name=self.catalog.name_for(card_id),
                        count=count,
                        domain_percentage=format_percentage(
                            count, domain_totals[team_key][domain]
                        ),
                        overall_percentage=format_percentage(
                            count, grand_totals[team_key]
                        ),
                    )
                    for card_id, count in domain_cards
                ]

        return rankings
