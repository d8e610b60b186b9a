"""Map free hypothesis text to catalog variable ids."""

from typing import List, Tuple
import re

from .text_markers import BROAD_COMPARISON, mentioned_domains, mentioned_teams

KEYWORD_VARIABLES: Tuple[Tuple[str, str], ...] = (
    ("nato total", "nato_total"),
    ("nato deterrence", "nato_total"),
    ("russia total", "russia_total"),
    ("russia deterrence", "russia_total"),
    ("turn count", "turn_count"),
    ("number of turns", "turn_count"),
    ("game length", "turn_count"),
    ("card count", "card_count"),
    ("cards purchased", "card_count"),
    ("number of cards", "card_count"),
    ("purchases", "card_count"),
)

_OVERALL_DETERRENCE = re.compile(r"\b(overall|total)\s+deterrence\b")


def recommend_variables(text: str) -> List[str]:
    """
    Recommend variables for a hypothesis.

    Team and domain mentions are crossed (a team with no domain mention maps
    to its total). Keyword phrases add their fixed variable, and "overall
    deterrence" adds the totals of the mentioned teams. Comparison language
    with nothing else matched falls back to both totals.

    Returns:
        Deduplicated variable ids in order of discovery; empty for blank text
    """
    lowered = text.lower()
    if not lowered.strip():
        return []

    found: List[str] = []

    def add(variable_id: str) -> None:
        if variable_id not in found:
            found.append(variable_id)

    teams = mentioned_teams(lowered)
    domains = mentioned_domains(lowered)

    for team in teams:
        for domain in domains:
            add(f"{team}_{domain}")

    for phrase, variable_id in KEYWORD_VARIABLES:
        if phrase in lowered:
            add(variable_id)

    if _OVERALL_DETERRENCE.search(lowered):
        for team in teams or ["nato", "russia"]:
            add(f"{team}_total")

    if not domains:
        for team in teams:
            add(f"{team}_total")

    if not found and BROAD_COMPARISON.search(lowered):
        add("nato_total")
        add("russia_total")

    return found
