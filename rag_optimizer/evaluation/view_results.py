"""
Report script for stored RAG test runs.

Reads runs and results from the configured store, ranks configurations,
logs the parameter impact tables and the best configuration, and optionally
saves a JSON report.
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from rag_optimizer.config import build_parser, config_from_args
from rag_optimizer.context import build_context
from rag_optimizer.packages.run_analysis import (
    AnalysisReport,
    EmptyInputError,
    save_report,
)
from rag_optimizer.packages.run_analysis.report import (
    log_best,
    log_parameter_impact,
    log_question_matrix,
    log_ranking,
)

logger = logging.getLogger(__name__)

REPORT_ONLY_ARGS = ["output", "questions"]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = build_parser("Rank stored RAG test runs and analyse parameter impact")
    parser.add_argument(
        "--output",
        help="Write the report as JSON to this path",
    )
    parser.add_argument(
        "--questions",
        action="store_true",
        default=None,
        help="Also log per-question ranks for every configuration",
    )
    return parser.parse_args(argv)


def display_report(report: AnalysisReport, baseline_model: str, large_model: str,
                   show_questions: bool = False) -> None:
    log_ranking(report, large_model)
    log_parameter_impact(report, baseline_model)
    if show_questions:
        log_question_matrix(report)
    log_best(report)


def run(argv: Optional[List[str]] = None) -> Optional[AnalysisReport]:
    """Main coordinator function. Returns None when there are no runs."""
    env_local_path = Path('.env.local')
    if env_local_path.exists():
        load_dotenv(env_local_path)

    args = parse_args(argv)
    try:
        config = config_from_args(args, exclude=REPORT_ONLY_ARGS)
    except Exception as e:
        logger.error(f"Invalid configuration: {e}")
        raise

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    logger.info("Starting report")

    try:
        context = build_context(config)
    except Exception as e:
        logger.error(f"Failed to open result store: {e}")
        raise

    try:
        report = context.analysis_service.build_report()
    except EmptyInputError:
        logger.info("No test runs found. Run the tests first.")
        return None
    except Exception as e:
        logger.error(f"Report failed: {e}")
        raise
    finally:
        context.close()

    display_report(report, config.BASELINE_EMBEDDING_MODEL, config.LARGE_EMBEDDING_MODEL,
                   show_questions=bool(args.questions))

    if args.output:
        save_report(report, args.output)
    else:
        logger.info("Skipping save (use --output to save the report)")

    logger.info("Report complete")
    return report


if __name__ == "__main__":
    run()
