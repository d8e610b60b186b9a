"""
Result contracts for the research analytics.

These are the value objects handed from the analytics core to the
presentation layer and the report exporter. Numeric fields keep full
precision; ``to_dict`` applies the display formatting.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any


@dataclass(frozen=True)
class VariableDescriptor:
    """Catalog entry for a numeric variable that can be extracted per session."""
    id: str
    label: str
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "category": self.category}


@dataclass(frozen=True)
class SummaryStat:
    """Descriptive statistics for one variable across the selected sessions."""
    label: str
    n: int
    mean: float
    median: float
    std_dev: float
    min: float
    max: float
    range: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary; every field except ``n`` is fixed to 2 decimals."""
        return {
            "label": self.label,
            "n": self.n,
            "mean": f"{self.mean:.2f}",
            "median": f"{self.median:.2f}",
            "std_dev": f"{self.std_dev:.2f}",
            "min": f"{self.min:.2f}",
            "max": f"{self.max:.2f}",
            "range": f"{self.range:.2f}",
        }


@dataclass(frozen=True)
class StatisticalTest:
    """A catalog test together with its per-selection verdict."""
    name: str
    description: str
    requirements: List[str]
    appropriate: bool
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "requirements": list(self.requirements),
            "appropriate": self.appropriate,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class TestNarrative:
    """A recommended test with generated justification and application text."""
    __test__ = False  # not a pytest test class

    name: str
    justification: str
    application: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "justification": self.justification,
            "application": self.application,
        }


@dataclass(frozen=True)
class CardFrequency:
    """Purchase counts for one selected card across the selected sessions."""
    card_id: str
    card_name: str
    nato_count: int = 0
    russia_count: int = 0
    total_count: int = 0
    display_count: int = 0
    percentage: str = "0.0"
    sessions_appeared: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "card_id": self.card_id,
            "card_name": self.card_name,
            "nato_count": self.nato_count,
            "russia_count": self.russia_count,
            "total_count": self.total_count,
            "display_count": self.display_count,
            "percentage": self.percentage,
            "sessions_appeared": self.sessions_appeared,
        }


@dataclass(frozen=True)
class CardRanking:
    """A card's rank entry within one domain for one team."""
    card_id: str
    card_name: str
    count: int
    domain_percentage: str
    overall_percentage: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "card_id": self.card_id,
            "card_name": self.card_name,
            "count": self.count,
            "domain_percentage": self.domain_percentage,
            "overall_percentage": self.overall_percentage,
        }


@dataclass(frozen=True)
class HypothesisAnalysis:
    """Variable and test recommendations derived from one hypothesis text."""
    text: str
    recommended_variables: List[str] = field(default_factory=list)
    recommended_tests: List[TestNarrative] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "recommended_variables": list(self.recommended_variables),
            "recommended_tests": [test.to_dict() for test in self.recommended_tests],
        }


@dataclass(frozen=True)
class SessionAnalysis:
    """Cross-session pattern report: a headline, pattern lines and commentary."""
    headline_insight: str
    patterns: List[str] = field(default_factory=list)
    narrative_commentary: str = ""
    visual_suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headline_insight": self.headline_insight,
            "patterns": list(self.patterns),
            "narrative_commentary": self.narrative_commentary,
            "visual_suggestions": list(self.visual_suggestions),
        }
