"""
Research question analysis.

Unlike hypotheses, a research question gets a single recommended approach.
Questions are routed on their interrogative word crossed with a topic marker.
"""

from typing import Callable, Optional, Tuple
import logging

from ..contracts.research import TestNarrative
from .text_markers import TextMarkers, detect_markers

logger = logging.getLogger(__name__)

EXPLORATORY = "Exploratory Data Analysis + Descriptive Statistics"


def _strategy(markers: TextMarkers) -> TestNarrative:
    return TestNarrative(
        name="Frequency Analysis + Chi-Square Test",
        justification=(
            f"Your question asks which strategies {markers.team_phrase()} used. "
            f"Purchase frequencies describe the choices and a chi-square test "
            f"checks whether they depend on the team or the outcome."
        ),
        application=(
            "Tabulate card purchases per team with the card frequency view, then "
            "test the team by card contingency table."
        ),
    )


def _relationship(markers: TextMarkers) -> TestNarrative:
    return TestNarrative(
        name="Correlation Analysis (Pearson/Spearman)",
        justification=(
            f"Your question asks how variables in {markers.domain_phrase()} relate. "
            f"Correlation quantifies the strength and direction of the relationship."
        ),
        application=(
            "Select two variables, compute Pearson's r and confirm with Spearman's "
            "rho if the scores are skewed."
        ),
    )


def _team_comparison(markers: TextMarkers) -> TestNarrative:
    return TestNarrative(
        name="Independent Samples t-test",
        justification=(
            f"Your question compares NATO and Russia on {markers.domain_phrase()}. "
            f"The t-test checks whether the mean difference is larger than chance."
        ),
        application=(
            "Group sessions by team, compare the means of the chosen variable and "
            "report t, p and Cohen's d."
        ),
    )


def _domain(markers: TextMarkers) -> TestNarrative:
    return TestNarrative(
        name="One-Way ANOVA",
        justification=(
            f"Your question concerns differences across {markers.domain_phrase()}. "
            f"A one-way ANOVA compares the domain means in one test."
        ),
        application=(
            "Treat each domain as a group, test the mean deterrence and follow up "
            "significant results with post-hoc comparisons."
        ),
    )


def _timing(markers: TextMarkers) -> TestNarrative:
    return TestNarrative(
        name="Repeated Measures ANOVA",
        justification=(
            f"Your question is about how {markers.team_phrase()} scores develop over "
            f"turns. Repeated measures ANOVA compares the same sessions over time."
        ),
        application=(
            "Record the variable at each turn and treat turn as a within-subjects factor."
        ),
    )


def _effect(markers: TextMarkers) -> TestNarrative:
    return TestNarrative(
        name="Multiple Regression",
        justification=(
            f"Your question asks what drives {markers.team_phrase()} outcomes. "
            f"Multiple regression estimates the contribution of each predictor."
        ),
        application=(
            "Choose an outcome variable, add candidate predictors and report R "
            "squared and the coefficients."
        ),
    )


QUESTION_BRANCHES: Tuple[Tuple[str, Callable[[TextMarkers], bool], Callable[[TextMarkers], TestNarrative]], ...] = (
    ("strategy", lambda m: m.asks("which", "what") and m.strategy, _strategy),
    ("relationship", lambda m: m.asks("how", "what") and m.correlation, _relationship),
    (
        "team_comparison",
        lambda m: m.asks("are", "does") and m.comparison and (m.two_group or bool(m.teams)),
        _team_comparison,
    ),
    ("domain", lambda m: m.asks("which", "how") and m.mentions_domain, _domain),
    ("timing", lambda m: m.asks("how", "what") and m.time, _timing),
    ("effect", lambda m: m.asks("does", "why", "how") and m.prediction, _effect),
)


def recommend_approach(question: str) -> Optional[TestNarrative]:
    """
    Recommend one analytic approach for a research question.

    Returns:
        A TestNarrative (the exploratory fallback when no branch matches), or
        None when ``question`` is blank
    """
    if not question or not question.strip():
        return None

    markers = detect_markers(question)
    for name, predicate, branch in QUESTION_BRANCHES:
        if predicate(markers):
            logger.debug(f"Research question matched '{name}' branch")
            return branch(markers)

    return TestNarrative(
        name=EXPLORATORY,
        justification=(
            "The question does not point to a specific comparison or relationship. "
            "Start by describing the selected sessions."
        ),
        application=(
            "Review the summary statistics for the selected variables, look for "
            "patterns and refine the question into a testable hypothesis."
        ),
    )


class QuestionAnalyzer:
    """Thin object wrapper so the question classifier can be injected."""

    def analyze(self, question: str) -> Optional[TestNarrative]:
        return recommend_approach(question)
