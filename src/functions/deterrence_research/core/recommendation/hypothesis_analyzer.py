"""
Hypothesis analysis.

Classifies a hypothesis into one of seven analytic designs and recommends a
pair of complementary tests for it: a primary test and its non-parametric or
methodological counterpart. Branches are evaluated in order and the first
match wins.
"""

from typing import Callable, List, Optional, Tuple
import logging

from ..contracts.research import HypothesisAnalysis, TestNarrative
from .text_markers import TextMarkers, detect_markers
from .variable_recommender import recommend_variables

logger = logging.getLogger(__name__)

Branch = Callable[[TextMarkers, int], Tuple[TestNarrative, TestNarrative]]
Predicate = Callable[[TextMarkers, int], bool]


def _is_multi_variable(markers: TextMarkers, variable_count: int) -> bool:
    return variable_count >= 3 or markers.multi_variable_phrase


def _correlation_pair(markers: TextMarkers, variable_count: int):
    subject = f"{markers.team_phrase()} deterrence in {markers.domain_phrase()}"
    return (
        TestNarrative(
            name="Pearson Correlation",
            justification=(
                f"Your hypothesis describes a relationship between two variables "
                f"concerning {subject}. Pearson's r measures the strength and "
                f"direction of a linear association between two continuous measures."
            ),
            application=(
                "Extract both variables for every selected session and compute r "
                "across sessions. Report r, its p-value and the number of sessions."
            ),
        ),
        TestNarrative(
            name="Spearman Rank Correlation",
            justification=(
                "With few sessions, deterrence scores may not be normally "
                "distributed. Spearman's rho tests for a monotonic association "
                "using ranks and is robust to outliers."
            ),
            application=(
                "Rank each variable across sessions and correlate the ranks. "
                "Compare rho with Pearson's r to check whether the relationship is linear."
            ),
        ),
    )


def _two_group_pair(markers: TextMarkers, variable_count: int):
    return (
        TestNarrative(
            name="Independent Samples t-test",
            justification=(
                f"Your hypothesis compares two groups (NATO and Russia) on "
                f"{markers.domain_phrase()}. The independent samples t-test "
                f"checks whether their mean scores differ."
            ),
            application=(
                "Group sessions by team, compare the mean of the chosen variable "
                "and report t, degrees of freedom, p and Cohen's d."
            ),
        ),
        TestNarrative(
            name="Mann-Whitney U Test",
            justification=(
                "If the scores are skewed or the groups are small, the Mann-Whitney "
                "U test compares the two distributions without assuming normality."
            ),
            application=(
                "Rank all scores together and compare the rank sums of NATO and "
                "Russia. Report U and its p-value alongside the medians."
            ),
        ),
    )


def _multi_group_pair(markers: TextMarkers, variable_count: int):
    return (
        TestNarrative(
            name="One-Way ANOVA",
            justification=(
                f"Your hypothesis spans several groups across "
                f"{markers.domain_phrase()}. A one-way ANOVA tests whether the "
                f"group means differ for {markers.team_phrase()}."
            ),
            application=(
                "Treat each domain as a group, compare mean deterrence and follow "
                "a significant F with post-hoc pairwise comparisons."
            ),
        ),
        TestNarrative(
            name="Kruskal-Wallis Test",
            justification=(
                "When group sizes are small or variances differ, Kruskal-Wallis "
                "compares three or more groups on ranks instead of means."
            ),
            application=(
                "Rank all domain scores together, compare mean ranks per domain "
                "and report H with its p-value."
            ),
        ),
    )


def _prediction_pair(markers: TextMarkers, variable_count: int):
    return (
        TestNarrative(
            name="Multiple Regression",
            justification=(
                f"Your hypothesis describes an effect on {markers.team_phrase()} "
                f"outcomes across {variable_count} variables. Multiple regression "
                f"estimates how much each predictor contributes to the outcome."
            ),
            application=(
                "Choose the outcome variable, enter the remaining variables as "
                "predictors and report R squared, coefficients and their p-values. "
                "Aim for at least 5 sessions per variable."
            ),
        ),
        TestNarrative(
            name="Path Analysis",
            justification=(
                "If the predictors influence each other as well as the outcome, "
                "path analysis separates direct from indirect effects."
            ),
            application=(
                "Draw the hypothesised causal chain, estimate each path with a "
                "regression and compare direct and indirect effects."
            ),
        ),
    )


def _multi_variable_pair(markers: TextMarkers, variable_count: int):
    return (
        TestNarrative(
            name="MANOVA",
            justification=(
                f"Your hypothesis compares NATO and Russia on {variable_count} "
                f"outcome variables at once. MANOVA tests the group difference "
                f"across all outcomes jointly."
            ),
            application=(
                "Enter the team as the grouping factor and every selected variable "
                "as a dependent variable. Report Wilks' lambda and follow up per variable."
            ),
        ),
        TestNarrative(
            name="Separate ANOVAs with Bonferroni correction",
            justification=(
                "With few sessions, running one ANOVA per outcome is simpler. The "
                "Bonferroni correction keeps the family-wise error rate at 0.05."
            ),
            application=(
                f"Run one ANOVA per variable and test each at alpha = 0.05 / "
                f"{max(variable_count, 1)}."
            ),
        ),
    )


def _time_pair(markers: TextMarkers, variable_count: int):
    return (
        TestNarrative(
            name="Repeated Measures ANOVA",
            justification=(
                f"Your hypothesis concerns change over turns for "
                f"{markers.team_phrase()}. Repeated measures ANOVA compares the "
                f"same sessions at several points in the game."
            ),
            application=(
                "Record the variable at each turn for every session, treat turn as "
                "the within-subjects factor and check sphericity before reading F."
            ),
        ),
        TestNarrative(
            name="Mixed-Effects Models",
            justification=(
                "Sessions of different lengths leave gaps in the turn data. "
                "Mixed-effects models handle unbalanced repeated measurements."
            ),
            application=(
                "Model the variable with turn as a fixed effect and session as a "
                "random effect, then report the turn slope."
            ),
        ),
    )


def _default_pair(markers: TextMarkers, variable_count: int):
    if variable_count:
        justification = (
            f"Your hypothesis maps to {variable_count} variable(s) without a clear "
            f"comparison or relationship. A t-test is a sensible first check of "
            f"differences between NATO and Russia."
        )
    else:
        justification = (
            "No specific variables were detected in your hypothesis. Name a team "
            "and a domain to get targeted recommendations; until then a t-test on "
            "team totals is a sensible first check."
        )
    return (
        TestNarrative(
            name="Independent Samples t-test",
            justification=justification,
            application=(
                "Compare the mean of the chosen variable between the two teams and "
                "report t, p and Cohen's d."
            ),
        ),
        TestNarrative(
            name="Correlation Analysis",
            justification=(
                "Exploring correlations between the selected variables can reveal "
                "relationships worth turning into a more specific hypothesis."
            ),
            application=(
                "Compute pairwise correlations for the selected variables and "
                "inspect the strongest associations."
            ),
        ),
    )


HYPOTHESIS_BRANCHES: Tuple[Tuple[str, Predicate, Branch], ...] = (
    (
        "correlation",
        lambda m, n: m.correlation and n == 2 and not m.comparison,
        _correlation_pair,
    ),
    (
        "two_group",
        lambda m, n: m.two_group and not _is_multi_variable(m, n) and n <= 2,
        _two_group_pair,
    ),
    (
        "multi_group",
        lambda m, n: m.multi_group and not _is_multi_variable(m, n) and n <= 2,
        _multi_group_pair,
    ),
    ("prediction", lambda m, n: m.prediction and n >= 2, _prediction_pair),
    (
        "multi_variable",
        lambda m, n: _is_multi_variable(m, n) and m.two_group,
        _multi_variable_pair,
    ),
    ("time", lambda m, n: m.time, _time_pair),
)


def _match_branch(markers: TextMarkers, variable_count: int) -> Tuple[str, Branch]:
    """First branch whose predicate holds, falling back to the default pair."""
    for name, predicate, branch in HYPOTHESIS_BRANCHES:
        if predicate(markers, variable_count):
            return name, branch
    return "default", _default_pair


def classify_hypothesis(text: str, recommended_variable_count: int) -> str:
    """Name of the first matching branch, or "default"."""
    name, _ = _match_branch(detect_markers(text), recommended_variable_count)
    return name


def recommend_tests(
    text: str,
    recommended_variable_count: int,
) -> Optional[List[TestNarrative]]:
    """
    Recommend a complementary pair of tests for a hypothesis.

    Returns:
        Two TestNarratives, or None when ``text`` is blank
    """
    if not text or not text.strip():
        return None

    markers = detect_markers(text)
    name, branch = _match_branch(markers, recommended_variable_count)
    logger.debug(f"Hypothesis matched '{name}' branch")
    return list(branch(markers, recommended_variable_count))


class HypothesisAnalyzer:
    """
    Analyzes any number of hypothesis texts with the same rules.

    Example:
        analyzer = HypothesisAnalyzer()
        analysis = analyzer.analyze("NATO's cyber deterrence correlates with turn count")
        analysis.recommended_variables  # ["nato_cyber", "turn_count"]
    """

    def analyze(self, text: str) -> HypothesisAnalysis:
        variables = recommend_variables(text)
        tests = recommend_tests(text, len(variables)) or []
        return HypothesisAnalysis(
            text=text,
            recommended_variables=variables,
            recommended_tests=tests,
        )

    def analyze_many(self, texts: List[str]) -> List[HypothesisAnalysis]:
        return [self.analyze(text) for text in texts]
