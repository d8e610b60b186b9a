"""
Descriptive statistics over the selected sessions.

This module provides the SummaryStatisticsEngine class which:
- Extracts one value per session for each selected variable
- Computes n, mean, median, population standard deviation, min, max, range
- Keeps full precision internally; formatting happens on serialization
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence
import logging

import numpy as np

from ..contracts.game_session import GameSession
from ..contracts.research import SummaryStat
from ..extraction.variable_extractor import VariableExtractor

logger = logging.getLogger(__name__)


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0 for an empty sequence."""
    return float(np.mean(values)) if len(values) else 0.0


def median(values: Sequence[float]) -> float:
    """Middle value; the average of the two central values for even counts."""
    return float(np.median(values))


def population_std_dev(values: Sequence[float]) -> float:
    """Standard deviation dividing by n, not n - 1; 0 below two values."""
    return float(np.std(values, ddof=0)) if len(values) > 1 else 0.0


def describe(label: str, values: Sequence[float]) -> SummaryStat:
    """
    Compute a SummaryStat for a non-empty sequence of values.

    Raises:
        ValueError: If ``values`` is empty
    """
    if not values:
        raise ValueError(f"Cannot describe '{label}' without values")

    low = min(values)
    high = max(values)
    return SummaryStat(
        label=label,
        n=len(values),
        mean=mean(values),
        median=median(values),
        std_dev=population_std_dev(values),
        min=low,
        max=high,
        range=high - low,
    )


class SummaryStatisticsEngine:
    """
    Computes per-variable descriptive statistics for a session selection.

    Example:
        engine = SummaryStatisticsEngine()
        stats = engine.summarize(sessions, ["nato_total", "turn_count"])
        stats["nato_total"].to_dict()["mean"]  # "512.50"
    """

    def __init__(self, extractor: Optional[VariableExtractor] = None):
        self.extractor = extractor or VariableExtractor()

    def summarize(
        self,
        sessions: List[GameSession],
        variable_ids: List[str],
    ) -> Dict[str, SummaryStat]:
        """
        Summarize every selected variable over every selected session.

        Args:
            sessions: Selected sessions
            variable_ids: Selected variable ids, in display order

        Returns:
            Mapping of variable id to SummaryStat, in ``variable_ids`` order.
            Empty when either selection is empty.
        """
        if not sessions or not variable_ids:
            logger.debug("Nothing to summarize (empty session or variable selection)")
            return {}

        results: Dict[str, SummaryStat] = {}
        for variable_id in variable_ids:
            if variable_id in results:
                continue
            values = self.extractor.extract_all(sessions, variable_id)
            results[variable_id] = describe(self.extractor.label_for(variable_id), values)

        logger.debug(
            f"Summarized {len(results)} variables over {len(sessions)} sessions"
        )
        return results
