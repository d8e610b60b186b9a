"""
Report data preparation for the Word-document exporter.

Turns the selected methodology and the current research selection into the
payload the exporter renders: descriptive statistics, the inferential result
for the chosen methodology, and chart definitions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import logging

from ..contracts.game_session import GameSession
from ..contracts.research import SummaryStat
from ..extraction.variable_extractor import VariableExtractor
from .grouping import group_label
from .inferential import (
    calculate_t_test,
    calculate_anova,
    calculate_correlation,
    calculate_regression,
)

logger = logging.getLogger(__name__)

T_TEST = "Independent Samples t-test"
ONE_WAY_ANOVA = "One-Way ANOVA"
CORRELATION = "Correlation Analysis (Pearson/Spearman)"
REGRESSION = "Multiple Regression"


@dataclass
class PreparedReportData:
    """Payload POSTed to the report generator."""
    methodology: str
    descriptive_stats: List[Dict[str, Any]]
    inferential_data: Optional[Dict[str, Any]]
    session_count: int
    variable_names: List[str]
    chart_data: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the exporter's camelCase wire format."""
        return {
            "methodology": self.methodology,
            "descriptiveStats": self.descriptive_stats,
            "inferentialData": self.inferential_data,
            "sessionCount": self.session_count,
            "variableNames": self.variable_names,
            "chartData": self.chart_data,
        }


class ReportDataPreparer:
    """
    Builds PreparedReportData from a methodology and a research selection.

    Example:
        preparer = ReportDataPreparer()
        report = preparer.prepare(
            "One-Way ANOVA", ["s1", "s2", "s3"], ["nato_total"],
            summary_stats, all_sessions, "winner",
        )
    """

    def __init__(self, extractor: Optional[VariableExtractor] = None):
        self.extractor = extractor or VariableExtractor()

    def prepare(
        self,
        methodology: str,
        selected_sessions: List[str],
        selected_variables: List[str],
        summary_stats: Dict[str, SummaryStat],
        all_sessions: List[GameSession],
        grouping_variable: str,
    ) -> PreparedReportData:
        """
        Prepare report data.

        Args:
            methodology: Name of the chosen statistical test
            selected_sessions: Names of the selected sessions
            selected_variables: Selected variable ids, in selection order
            summary_stats: Output of the summary statistics engine
            all_sessions: Every known session; filtered by ``selected_sessions``
            grouping_variable: "team", "winner", "session" or ""

        Returns:
            PreparedReportData; ``inferential_data`` is None for methodologies
            without an inferential computation
        """
        selected = set(selected_sessions)
        sessions = [s for s in all_sessions if s.session_name in selected]

        descriptive_stats = []
        for stat in summary_stats.values():
            formatted = stat.to_dict()
            descriptive_stats.append({
                "variable": stat.label,
                "n": stat.n,
                "mean": formatted["mean"],
                "sd": formatted["std_dev"],
                "min": formatted["min"],
                "max": formatted["max"],
                "range": formatted["range"],
            })

        inferential_data: Optional[Dict[str, Any]] = None
        chart_data: List[Dict[str, Any]] = []

        if methodology == T_TEST and selected_variables:
            inferential_data, chart_data = self._t_test(
                sessions, selected_variables[0], grouping_variable
            )
        elif methodology == ONE_WAY_ANOVA and selected_variables:
            inferential_data, chart_data = self._anova(
                sessions, selected_variables[0], grouping_variable
            )
        elif methodology == CORRELATION:
            inferential_data, chart_data = self._correlation(sessions, selected_variables)
        elif methodology == REGRESSION:
            inferential_data, chart_data = self._regression(sessions, selected_variables)
        else:
            logger.debug(f"No inferential computation for methodology '{methodology}'")

        return PreparedReportData(
            methodology=methodology,
            descriptive_stats=descriptive_stats,
            inferential_data=inferential_data,
            session_count=len(selected_sessions),
            variable_names=[stat.label for stat in summary_stats.values()],
            chart_data=chart_data,
        )

    def _groups(
        self,
        sessions: List[GameSession],
        variable_id: str,
        grouping_variable: str,
    ) -> Dict[str, List[float]]:
        # Team grouping compares sessions by which team won.
        label_variable = "winner" if grouping_variable == "team" else grouping_variable
        groups: Dict[str, List[float]] = {}
        for session in sessions:
            label = group_label(session, label_variable)
            if label is None:
                continue
            groups.setdefault(label, []).append(self.extractor.extract(session, variable_id))
        return groups

    def _paired_values(
        self,
        sessions: List[GameSession],
        variable_ids: List[str],
    ) -> Tuple[List[float], List[float]]:
        x = self.extractor.extract_all(sessions, variable_ids[0])
        y = self.extractor.extract_all(sessions, variable_ids[1])
        return x, y

    def _t_test(self, sessions, variable_id, grouping_variable):
        groups = list(self._groups(sessions, variable_id, grouping_variable).items())
        if len(groups) < 2:
            logger.warning("t-test needs two groups; reporting an empty result")
            return calculate_t_test([], []).to_dict(), []

        (name1, values1), (name2, values2) = groups[0], groups[1]
        result = calculate_t_test(values1, values2)
        charts = [{
            "type": "grouped-bar",
            "title": "Group Comparison",
            "data": {
                "labels": [name1, name2],
                "datasets": [{"label": "Mean", "data": [result.mean1, result.mean2]}],
            },
            "yLabel": "Mean Value",
        }]
        return result.to_dict(), charts

    def _anova(self, sessions, variable_id, grouping_variable):
        result = calculate_anova(self._groups(sessions, variable_id, grouping_variable))
        charts = [{
            "type": "grouped-bar",
            "title": "Group Means with Standard Errors",
            "data": {
                "labels": [g.group for g in result.group_means],
                "datasets": [{"label": "Mean", "data": [g.mean for g in result.group_means]}],
            },
            "yLabel": "Mean Value",
        }]
        return result.to_dict(), charts

    def _correlation(self, sessions, variable_ids):
        if len(variable_ids) < 2:
            return None, []
        x, y = self._paired_values(sessions, variable_ids)
        result = calculate_correlation(x, y)
        charts = [{
            "type": "scatter",
            "title": "Scatterplot with Correlation",
            "data": {
                "datasets": [{
                    "label": "Data Points",
                    "data": [{"x": xv, "y": yv} for xv, yv in zip(x, y)],
                }],
            },
            "xLabel": self.extractor.label_for(variable_ids[0]),
            "yLabel": self.extractor.label_for(variable_ids[1]),
        }]
        return result.to_dict(), charts

    def _regression(self, sessions, variable_ids):
        if len(variable_ids) < 2:
            return None, []
        x, y = self._paired_values(sessions, variable_ids)
        result = calculate_regression(x, y)
        charts = [{
            "type": "scatter",
            "title": "Regression Analysis",
            "data": {
                "datasets": [{
                    "label": "Data Points",
                    "data": [{"x": xv, "y": yv} for xv, yv in zip(x, y)],
                }],
            },
            "xLabel": "Predictor Variable",
            "yLabel": "Outcome Variable",
        }]
        return result.to_dict(), charts


def prepare_report_data(
    methodology: str,
    selected_sessions: List[str],
    selected_variables: List[str],
    summary_stats: Dict[str, SummaryStat],
    all_sessions: List[GameSession],
    grouping_variable: str,
    extractor: Optional[VariableExtractor] = None,
) -> PreparedReportData:
    """Functional shortcut for ``ReportDataPreparer(extractor).prepare(...)``."""
    return ReportDataPreparer(extractor).prepare(
        methodology,
        selected_sessions,
        selected_variables,
        summary_stats,
        all_sessions,
        grouping_variable,
    )
