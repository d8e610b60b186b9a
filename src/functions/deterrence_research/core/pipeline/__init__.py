"""Pipeline orchestration for research analytics."""

from .research_pipeline import (
    ResearchPipeline,
    ResearchSelection,
    ResearchResult,
    SelectionError,
)

__all__ = [
    "ResearchPipeline",
    "ResearchSelection",
    "ResearchResult",
    "SelectionError",
]
