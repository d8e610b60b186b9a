"""Statistical test recommendation and research-text analysis."""

from .test_recommender import (
    StatisticalTestRecommender,
    TestDefinition,
    TEST_CATALOG,
    ALL_REQUIREMENTS_MET,
)
from .variable_recommender import recommend_variables
from .hypothesis_analyzer import HypothesisAnalyzer, recommend_tests, classify_hypothesis
from .question_analyzer import QuestionAnalyzer, recommend_approach, EXPLORATORY
from .text_markers import detect_markers, TextMarkers

__all__ = [
    "StatisticalTestRecommender",
    "TestDefinition",
    "TEST_CATALOG",
    "ALL_REQUIREMENTS_MET",
    "recommend_variables",
    "HypothesisAnalyzer",
    "recommend_tests",
    "classify_hypothesis",
    "QuestionAnalyzer",
    "recommend_approach",
    "EXPLORATORY",
    "detect_markers",
    "TextMarkers",
]
