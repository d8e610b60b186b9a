"""
Linguistic marker detection for hypothesis and question text.

Both text classifiers work from the same primitives: which teams and domains
a text mentions, and which families of analytic language it uses. Matching is
case-insensitive and purely regex based.
"""

from dataclasses import dataclass, field
from typing import List
import re

from ..contracts.game_session import DOMAINS

TEAM_PATTERNS = (
    ("nato", re.compile(r"\bnato\b", re.IGNORECASE)),
    ("russia", re.compile(r"\brussia\b", re.IGNORECASE)),
)

DOMAIN_PATTERNS = (
    ("joint", re.compile(r"\b(joint|military|forces?)\b", re.IGNORECASE)),
    ("economy", re.compile(r"\beconom", re.IGNORECASE)),
    ("cognitive", re.compile(r"\b(cognitive|information|perceptions?|narratives?)\b", re.IGNORECASE)),
    ("space", re.compile(r"\b(space|satellites?)\b", re.IGNORECASE)),
    ("cyber", re.compile(r"\b(cyber\w*|digital|networks?)\b", re.IGNORECASE)),
)

# Language that makes the variable recommender fall back to both team totals.
BROAD_COMPARISON = re.compile(
    r"compar|versus|between|differ|relationship|correlat|impact|effect|influenc",
    re.IGNORECASE,
)
CORRELATION = re.compile(r"correlat|relationship|associat|relate", re.IGNORECASE)
COMPARISON = re.compile(
    r"compar|versus|\bvs\b|differ|higher than|lower than|outperform",
    re.IGNORECASE,
)
TWO_GROUP = re.compile(r"nato.*russia|russia.*nato|two teams|both teams", re.IGNORECASE)
MULTI_GROUP = re.compile(r"across.*domain|all.*domain|multiple.*group", re.IGNORECASE)
MULTI_VARIABLE = re.compile(
    r"(multiple|several|many) (variables|outcomes|measures|metrics)",
    re.IGNORECASE,
)
PREDICTION = re.compile(r"predict|determin|effect|impact|influenc|cause", re.IGNORECASE)
TIME = re.compile(
    r"over time|\bturns?\b|longitudinal|progress|evolv|trend|\bearly\b|\blate\b|chang",
    re.IGNORECASE,
)
STRATEGY = re.compile(r"strateg|\bcards?\b|purchas|approach|tactic", re.IGNORECASE)
DOMAIN_WORD = re.compile(r"\bdomains?\b", re.IGNORECASE)

# Interrogatives the research-question classifier routes on.
INTERROGATIVES = ("which", "how", "what", "why", "does", "are")


def mentioned_teams(text: str) -> List[str]:
    """Team prefixes ("nato", "russia") mentioned in ``text``, in fixed order."""
    return [team for team, pattern in TEAM_PATTERNS if pattern.search(text)]


def mentioned_domains(text: str) -> List[str]:
    """Domains mentioned in ``text``, in catalog order."""
    return [domain for domain, pattern in DOMAIN_PATTERNS if pattern.search(text)]


@dataclass(frozen=True)
class TextMarkers:
    """Everything the classifiers need to know about one text."""
    teams: List[str] = field(default_factory=list)
    domains: List[str] = field(default_factory=list)
    interrogatives: List[str] = field(default_factory=list)
    correlation: bool = False
    comparison: bool = False
    two_group: bool = False
    multi_group: bool = False
    multi_variable_phrase: bool = False
    prediction: bool = False
    time: bool = False
    strategy: bool = False
    domain_word: bool = False

    @property
    def mentions_domain(self) -> bool:
        return self.domain_word or bool(self.domains)

    def asks(self, *words: str) -> bool:
        """True when the text uses any of the given interrogatives."""
        return any(word in self.interrogatives for word in words)

    def team_phrase(self) -> str:
        """'NATO', 'Russia' or 'NATO and Russia' for use in narratives."""
        names = {"nato": "NATO", "russia": "Russia"}
        teams = self.teams or ["nato", "russia"]
        return " and ".join(names[team] for team in teams)

    def domain_phrase(self) -> str:
        """Readable list of mentioned domains, or a generic phrase."""
        if not self.domains:
            return "the deterrence domains"
        if len(self.domains) == 1:
            return f"the {self.domains[0]} domain"
        return "the " + ", ".join(self.domains[:-1]) + f" and {self.domains[-1]} domains"


def detect_markers(text: str) -> TextMarkers:
    """Scan ``text`` once for every marker family."""
    lowered = text.lower()
    return TextMarkers(
        teams=mentioned_teams(lowered),
        domains=[d for d in mentioned_domains(lowered) if d in DOMAINS],
        interrogatives=[
            word for word in INTERROGATIVES if re.search(rf"\b{word}\b", lowered)
        ],
        correlation=bool(CORRELATION.search(lowered)),
        comparison=bool(COMPARISON.search(lowered)),
        two_group=bool(TWO_GROUP.search(lowered)),
        multi_group=bool(MULTI_GROUP.search(lowered)),
        multi_variable_phrase=bool(MULTI_VARIABLE.search(lowered)),
        prediction=bool(PREDICTION.search(lowered)),
        time=bool(TIME.search(lowered)),
        strategy=bool(STRATEGY.search(lowered)),
        domain_word=bool(DOMAIN_WORD.search(lowered)),
    )
