"""
Research Pipeline

Main orchestration for a research dashboard request. Runs every analytics
step over one immutable selection of sessions, variables, texts and cards.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..answering.question_answerer import answer_question
from ..answering.session_analyzer import ANALYSIS_MODES, SessionPatternAnalyzer
from ..contracts.card_catalog import CardCatalog
from ..contracts.game_session import GameSession
from ..contracts.research import (
    CardFrequency,
    CardRanking,
    HypothesisAnalysis,
    SessionAnalysis,
    StatisticalTest,
    SummaryStat,
    TestNarrative,
)
from ..extraction.variable_extractor import VariableExtractor
from ..processing.card_purchases import CardPurchaseAggregator, TEAM_FILTERS
from ..processing.grouping import GROUPING_VARIABLES, count_groups
from ..processing.report_preparer import PreparedReportData, ReportDataPreparer
from ..processing.summary_statistics import SummaryStatisticsEngine
from ..recommendation.hypothesis_analyzer import HypothesisAnalyzer
from ..recommendation.question_analyzer import QuestionAnalyzer
from ..recommendation.test_recommender import StatisticalTestRecommender

logger = logging.getLogger(__name__)

COMPARISON_TYPES = ("between", "within")


class SelectionError(ValueError):
    """Raised when a research selection is malformed."""
    pass


def _string_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise SelectionError(f"'{key}' must be a list of strings")
    return value


def _optional_string(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise SelectionError(f"'{key}' must be a string")
    return value


@dataclass(frozen=True)
class ResearchSelection:
    """
    Everything the researcher selected.

    An empty ``session_names`` means every supplied session is selected.
    """
    session_names: List[str] = field(default_factory=list)
    variables: List[str] = field(default_factory=list)
    grouping_variable: str = ""
    comparison_type: str = "between"
    hypotheses: List[str] = field(default_factory=list)
    research_question: Optional[str] = None
    question: Optional[str] = None
    pattern_analysis: Optional[str] = None
    card_ids: List[str] = field(default_factory=list)
    team_filter: str = "both"
    methodology: Optional[str] = None
    correlation_id: Optional[str] = None

    def __post_init__(self):
        """Validate categorical settings."""
        if self.grouping_variable and self.grouping_variable not in GROUPING_VARIABLES:
            raise SelectionError(
                f"Unknown grouping variable '{self.grouping_variable}', "
                f"expected one of {GROUPING_VARIABLES}"
            )
        if self.comparison_type not in COMPARISON_TYPES:
            raise SelectionError(
                f"Unknown comparison type '{self.comparison_type}', "
                f"expected one of {COMPARISON_TYPES}"
            )
        if self.team_filter not in TEAM_FILTERS:
            raise SelectionError(
                f"Unknown team filter '{self.team_filter}', expected one of {TEAM_FILTERS}"
            )
        if self.pattern_analysis and self.pattern_analysis not in ANALYSIS_MODES:
            raise SelectionError(
                f"Unknown pattern analysis '{self.pattern_analysis}', "
                f"expected one of {ANALYSIS_MODES}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_team_filter: str = "both") -> 'ResearchSelection':
        """
        Create a selection from a request body.

        Raises:
            SelectionError: If a field has the wrong type or an unknown value
        """
        if not isinstance(data, dict):
            raise SelectionError("Selection must be a JSON object")

        return cls(
            session_names=_string_list(data, "session_names"),
            variables=_string_list(data, "variables"),
            grouping_variable=_optional_string(data, "grouping_variable") or "",
            comparison_type=_optional_string(data, "comparison_type") or "between",
            hypotheses=_string_list(data, "hypotheses"),
            research_question=_optional_string(data, "research_question"),
            question=_optional_string(data, "question"),
            pattern_analysis=_optional_string(data, "pattern_analysis"),
            card_ids=_string_list(data, "card_ids"),
            team_filter=_optional_string(data, "team_filter") or default_team_filter,
            methodology=_optional_string(data, "methodology"),
            correlation_id=_optional_string(data, "correlation_id"),
        )


@dataclass
class ResearchResult:
    """Complete result of one pipeline run."""
    status: str  # "success" or "empty"
    correlation_id: str

    session_count: int = 0
    variable_count: int = 0
    group_count: int = 0

    summary_stats: Dict[str, SummaryStat] = field(default_factory=dict)
    test_recommendations: List[StatisticalTest] = field(default_factory=list)
    hypothesis_analyses: List[HypothesisAnalysis] = field(default_factory=list)
    question_analysis: Optional[TestNarrative] = None
    answer: Optional[str] = None
    pattern_analysis: Optional[SessionAnalysis] = None
    card_frequency: List[CardFrequency] = field(default_factory=list)
    dimension_rankings: Dict[str, Dict[str, List[CardRanking]]] = field(default_factory=dict)
    report: Optional[PreparedReportData] = None

    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result = {
            "status": self.status,
            "correlation_id": self.correlation_id,
            "selection": {
                "session_count": self.session_count,
                "variable_count": self.variable_count,
                "group_count": self.group_count,
            },
            "summary_stats": {
                variable_id: stat.to_dict() for variable_id, stat in self.summary_stats.items()
            },
            "test_recommendations": [test.to_dict() for test in self.test_recommendations],
            "hypothesis_analyses": [analysis.to_dict() for analysis in self.hypothesis_analyses],
            "card_frequency": [row.to_dict() for row in self.card_frequency],
            "dimension_rankings": {
                domain: {
                    team: [ranking.to_dict() for ranking in rankings]
                    for team, rankings in teams.items()
                }
                for domain, teams in self.dimension_rankings.items()
            },
        }

        if self.question_analysis:
            result["question_analysis"] = self.question_analysis.to_dict()
        if self.answer is not None:
            result["answer"] = self.answer
        if self.pattern_analysis:
            result["pattern_analysis"] = self.pattern_analysis.to_dict()
        if self.report:
            result["report"] = self.report.to_dict()
        if self.warnings:
            result["warnings"] = self.warnings

        return result


class ResearchPipeline:
    """
    Main orchestration pipeline for research analytics.

    Steps:
    1. Session selection
    2. Summary statistics
    3. Statistical test recommendation
    4. Hypothesis analysis (one per hypothesis text)
    5. Research question analysis, answering and pattern analysis
    6. Card purchase frequency and dimension rankings
    7. Report data preparation (when a methodology is chosen)

    Example:
        pipeline = ResearchPipeline(catalog=CardCatalog.load("cards.json"))
        selection = ResearchSelection(variables=["nato_total"], grouping_variable="winner")
        result = pipeline.process(sessions, selection)
        result.summary_stats["nato_total"].mean
    """

    def __init__(
        self,
        catalog: Optional[CardCatalog] = None,
        extractor: Optional[VariableExtractor] = None,
        recommender: Optional[StatisticalTestRecommender] = None,
    ):
        """Initialize pipeline with its reference data and components."""
        self.extractor = extractor or VariableExtractor()
        self.catalog = catalog or CardCatalog()
        self.summary_engine = SummaryStatisticsEngine(self.extractor)
        self.recommender = recommender or StatisticalTestRecommender()
        self.hypothesis_analyzer = HypothesisAnalyzer()
        self.question_analyzer = QuestionAnalyzer()
        self.pattern_analyzer = SessionPatternAnalyzer()
        self.card_aggregator = CardPurchaseAggregator(self.catalog)
        self.report_preparer = ReportDataPreparer(self.extractor)

    def process(
        self,
        sessions: List[GameSession],
        selection: ResearchSelection,
    ) -> ResearchResult:
        """
        Run every analytics step over the selection.

        Args:
            sessions: All available sessions
            selection: What the researcher selected

        Returns:
            ResearchResult; status is "empty" when no session is selected
        """
        correlation_id = selection.correlation_id or self._generate_correlation_id()
        logger.info(f"Starting research pipeline [{correlation_id}]")

        result = ResearchResult(status="success", correlation_id=correlation_id)

        # Step 1: Select sessions
        logger.info(f"[{correlation_id}] Step 1: Selecting sessions...")
        selected = self._select_sessions(sessions, selection, result)
        result.session_count = len(selected)
        result.variable_count = len(dict.fromkeys(selection.variables))
        result.group_count = count_groups(selected, selection.grouping_variable)
        logger.info(
            f"[{correlation_id}] ✓ Selected {len(selected)} of {len(sessions)} sessions"
        )

        unknown = [v for v in selection.variables if not self.extractor.is_known(v)]
        if unknown:
            result.warnings.append(f"Unknown variables read as 0: {', '.join(unknown)}")

        # Step 2: Summary statistics
        logger.info(f"[{correlation_id}] Step 2: Computing summary statistics...")
        result.summary_stats = self.summary_engine.summarize(selected, selection.variables)
        logger.info(f"[{correlation_id}] ✓ Summarized {len(result.summary_stats)} variables")

        # Step 3: Test recommendations
        logger.info(f"[{correlation_id}] Step 3: Recommending statistical tests...")
        result.test_recommendations = self.recommender.recommend(
            result.session_count,
            result.variable_count,
            result.group_count,
            selection.grouping_variable,
            selection.comparison_type,
        )
        appropriate = sum(1 for test in result.test_recommendations if test.appropriate)
        logger.info(f"[{correlation_id}] ✓ {appropriate} appropriate tests")

        # Step 4: Hypotheses
        texts = [text for text in selection.hypotheses if text.strip()]
        logger.info(f"[{correlation_id}] Step 4: Analyzing {len(texts)} hypotheses...")
        result.hypothesis_analyses = self.hypothesis_analyzer.analyze_many(texts)

        # Step 5: Research question
        if selection.research_question:
            logger.info(f"[{correlation_id}] Step 5: Analyzing research question...")
            result.question_analysis = self.question_analyzer.analyze(selection.research_question)
        if selection.question:
            result.answer = answer_question(selection.question, selected)
        if selection.pattern_analysis:
            logger.info(
                f"[{correlation_id}] Step 5: Running {selection.pattern_analysis} pattern analysis..."
            )
            result.pattern_analysis = self.pattern_analyzer.analyze(
                selected, selection.pattern_analysis
            )
            logger.info(
                f"[{correlation_id}] ✓ {len(result.pattern_analysis.patterns)} patterns found"
            )

        # Step 6: Card purchases
        logger.info(f"[{correlation_id}] Step 6: Aggregating card purchases...")
        if selection.card_ids:
            result.card_frequency = self.card_aggregator.aggregate_frequency(
                selected, selection.card_ids, selection.team_filter
            )
        result.dimension_rankings = self.card_aggregator.rank_by_dimension(selected)
        logger.info(
            f"[{correlation_id}] ✓ {len(result.card_frequency)} card frequency rows"
        )

        # Step 7: Report data
        if selection.methodology:
            logger.info(
                f"[{correlation_id}] Step 7: Preparing report data for "
                f"'{selection.methodology}'..."
            )
            result.report = self.report_preparer.prepare(
                selection.methodology,
                [session.session_name for session in selected],
                selection.variables,
                result.summary_stats,
                selected,
                selection.grouping_variable,
            )
        else:
            logger.info(f"[{correlation_id}] Step 7: Skipping report data (no methodology)")

        if not selected:
            result.status = "empty"

        logger.info(
            f"[{correlation_id}] Pipeline complete: {result.status} "
            f"({len(result.warnings)} warnings)"
        )
        return result

    def _select_sessions(
        self,
        sessions: List[GameSession],
        selection: ResearchSelection,
        result: ResearchResult,
    ) -> List[GameSession]:
        if not selection.session_names:
            return list(sessions)

        by_name = {session.session_name: session for session in sessions}
        selected = []
        for name in dict.fromkeys(selection.session_names):
            if name in by_name:
                selected.append(by_name[name])
            else:
                result.warnings.append(f"Session not found: {name}")
                logger.warning(f"[{result.correlation_id}] Session not found: {name}")
        return selected

    def _generate_correlation_id(self) -> str:
        """Generate a correlation ID from a timestamp and a short UUID."""
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        return f"research-{timestamp}-{str(uuid.uuid4())[:8]}"
