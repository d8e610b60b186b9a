"""
Aggregation services for summary statistics, card purchases and reports.

This module turns selected sessions into the numbers the research dashboard
shows: descriptive statistics, group counts, purchase frequencies and
rankings, and the inferential payload for the report exporter.
"""

from .summary_statistics import SummaryStatisticsEngine, describe
from .grouping import determine_winner, count_groups, group_label, GROUPING_VARIABLES
from .card_purchases import CardPurchaseAggregator, TEAM_FILTERS
from .report_preparer import ReportDataPreparer, PreparedReportData, prepare_report_data

__all__ = [
    "SummaryStatisticsEngine",
    "describe",
    "determine_winner",
    "count_groups",
    "group_label",
    "GROUPING_VARIABLES",
    "CardPurchaseAggregator",
    "TEAM_FILTERS",
    "ReportDataPreparer",
    "PreparedReportData",
    "prepare_report_data",
]
