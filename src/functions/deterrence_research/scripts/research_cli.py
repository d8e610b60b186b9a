#!/usr/bin/env python3
"""
Research Analytics CLI Tool

Runs the research analytics over stored game sessions: summary statistics,
statistical test recommendations, hypothesis and question analysis, and card
purchase aggregation.

Usage:
    python research_cli.py --sessions sessions.json [options]
    python research_cli.py --api-url http://localhost:5000 [options]

Examples:
    # Summary statistics grouped by winner
    python research_cli.py --sessions sessions.json --variables nato_total russia_total \\
        --grouping winner --pretty

    # Hypothesis analysis for two hypotheses
    python research_cli.py --sessions sessions.json \\
        --hypothesis "NATO cyber deterrence correlates with turn count" \\
        --hypothesis "NATO outperforms Russia in the economy domain"

    # Card frequency for selected cards, NATO only, with a catalog
    python research_cli.py --sessions sessions.json --cards J1 CY7 \\
        --team-filter NATO --card-catalog cards.json

    # Export summary statistics to CSV
    python research_cli.py --sessions sessions.json --variables nato_total --csv summary.csv

    # Winning-pattern briefing across every stored session
    python research_cli.py --api-url http://localhost:5000 --patterns generic --pretty
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

import _bootstrap  # noqa: F401

import pandas as pd
from pydantic import ValidationError

from src.shared.utils.config_validator import ConfigurationError
from src.functions.deterrence_research.core.config import load_settings
from src.functions.deterrence_research.core.contracts import (
    CardCatalog,
    GameSession,
    SessionValidationError,
    parse_sessions,
)
from src.functions.deterrence_research.core.fetching import (
    ReportExportError,
    SessionClient,
    SessionClientError,
)
from src.functions.deterrence_research.core.pipeline import (
    ResearchPipeline,
    ResearchResult,
    ResearchSelection,
    SelectionError,
)
from src.functions.deterrence_research.core.utils import json_dumps_safe

logger = logging.getLogger(__name__)


def load_sessions_file(file_path: str) -> List[GameSession]:
    """
    Load sessions from a JSON array file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file contains invalid JSON
        SessionValidationError: If a record is not a valid session
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Sessions file not found: {file_path}")

    logger.info(f"Loading sessions from {file_path}")
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    sessions = parse_sessions(data)
    logger.info(f"✓ Loaded {len(sessions)} sessions")
    return sessions


def write_summary_csv(result: ResearchResult, file_path: str) -> None:
    """Write the summary statistics table to CSV, one row per variable."""
    rows: List[Dict[str, Any]] = [
        {"variable": variable_id, **stat.to_dict()}
        for variable_id, stat in result.summary_stats.items()
    ]
    frame = pd.DataFrame.from_records(
        rows,
        columns=["variable", "label", "n", "mean", "median", "std_dev", "min", "max", "range"],
    )
    output_path = Path(file_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(output_path, index=False)
    logger.info(f"✓ Summary statistics written to {file_path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run research analytics over game sessions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --sessions sessions.json --variables nato_total --grouping winner --pretty
  %(prog)s --api-url http://localhost:5000 --select "Exercise Alpha" "Exercise Bravo"
  %(prog)s --sessions sessions.json --question "Who won the games?"

Exit codes: 0 ok, 1 file error, 2 validation error, 3 JSON error,
4 session API error, 5 unexpected error
        """
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument('--sessions', type=str, help='Path to a JSON array of session records')
    source.add_argument('--api-url', type=str, help='Session store URL (default: SESSION_API_URL)')

    parser.add_argument('--select', nargs='+', default=[], metavar='NAME',
                        help='Session names to analyze (default: all)')
    parser.add_argument('--variables', nargs='+', default=[], metavar='ID',
                        help='Variable ids, e.g. nato_total russia_cyber turn_count')
    parser.add_argument('--grouping', choices=['team', 'winner', 'session'], default='',
                        help='Grouping variable for comparative tests')
    parser.add_argument('--comparison', choices=['between', 'within'], default='between',
                        help='Comparison design (default: between)')
    parser.add_argument('--hypothesis', action='append', default=[], metavar='TEXT',
                        help='Hypothesis text (repeatable)')
    parser.add_argument('--question', type=str, metavar='TEXT',
                        help='Research question to classify')
    parser.add_argument('--ask', type=str, metavar='TEXT',
                        help='Plain question to answer from the session data')
    parser.add_argument('--patterns', choices=['selected', 'generic'],
                        help='Cross-session pattern analysis to run')
    parser.add_argument('--cards', nargs='+', default=[], metavar='ID',
                        help='Card ids for the purchase frequency table')
    parser.add_argument('--team-filter', choices=['both', 'NATO', 'Russia'],
                        help='Team filter for card frequency (default: DEFAULT_TEAM_FILTER or both)')
    parser.add_argument('--card-catalog', type=str, metavar='FILE',
                        help='JSON array of card records (default: CARD_CATALOG_PATH)')
    parser.add_argument('--methodology', type=str,
                        help='Methodology to prepare report data for, e.g. "One-Way ANOVA"')
    parser.add_argument('--export-docx', type=str, metavar='FILE',
                        help='Generate the Word report through the session API (needs --methodology)')
    parser.add_argument('--csv', type=str, metavar='FILE',
                        help='Write summary statistics to CSV')
    parser.add_argument('--output', type=str, help='Path to save output JSON (default: stdout)')
    parser.add_argument('--pretty', action='store_true', help='Pretty-print JSON output')
    parser.add_argument('--verbose', action='store_true', help='Enable verbose debug logging')
    return parser


def main():
    """Main CLI entry point."""
    args = build_parser().parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug logging enabled")

    try:
        settings = load_settings()
        api_url = args.api_url or settings.session_api_url
        client = SessionClient(api_url, timeout=settings.request_timeout_seconds)

        if args.sessions:
            sessions = load_sessions_file(args.sessions)
        elif args.select:
            logger.info(f"Fetching {len(args.select)} named sessions from {api_url}")
            sessions = client.get_sessions(args.select)
        else:
            logger.info(f"Fetching sessions from {api_url}")
            sessions = client.list_sessions()

        catalog_path = args.card_catalog or settings.card_catalog_path
        catalog = CardCatalog.load(catalog_path) if catalog_path else CardCatalog()

        selection = ResearchSelection(
            session_names=args.select,
            variables=args.variables,
            grouping_variable=args.grouping,
            comparison_type=args.comparison,
            hypotheses=args.hypothesis,
            research_question=args.question,
            question=args.ask,
            pattern_analysis=args.patterns,
            card_ids=args.cards,
            team_filter=args.team_filter or settings.default_team_filter,
            methodology=args.methodology,
        )

        result = ResearchPipeline(catalog=catalog).process(sessions, selection)

        if args.csv:
            write_summary_csv(result, args.csv)

        if args.export_docx:
            if not result.report:
                raise SelectionError("--export-docx requires --methodology")
            document = client.generate_word_report(result.report.to_dict())
            export_path = Path(args.export_docx)
            export_path.parent.mkdir(parents=True, exist_ok=True)
            export_path.write_bytes(document)
            logger.info(f"✓ Word report written to {args.export_docx}")

        output = json_dumps_safe(result.to_dict(), indent=2 if args.pretty else None)

        if args.output:
            output_path = Path(args.output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(output)
            logger.info(f"✓ Results written to {args.output}")
        else:
            print(output)

        logger.info("✓ Analysis complete")
        sys.exit(0)

    except FileNotFoundError as e:
        logger.error(f"✗ File error: {e}")
        sys.exit(1)
    except (SessionValidationError, SelectionError, ConfigurationError, ValidationError) as e:
        logger.error(f"✗ Validation error: {e}")
        sys.exit(2)
    except json.JSONDecodeError as e:
        logger.error(f"✗ JSON parse error: {e}")
        sys.exit(3)
    except (SessionClientError, ReportExportError) as e:
        logger.error(f"✗ Session API error: {e}")
        sys.exit(4)
    except Exception as e:
        logger.error(f"✗ Unexpected error: {e}", exc_info=True)
        sys.exit(5)


if __name__ == '__main__':
    main()
