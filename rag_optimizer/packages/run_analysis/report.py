"""
Report rendering for analysed runs: log tables and JSON report files.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from .impact import impact_extremes
from .models import AnalysisReport, RunAnalysis

logger = logging.getLogger(__name__)

LINE_WIDTH = 90


def model_label(analysis: RunAnalysis, large_model: str) -> str:
    """Short label for the run's embedding model."""
    return "LARGE" if analysis.run.embedding_model == large_model else "small"


def log_ranking(report: AnalysisReport, large_model: str) -> None:
    """Log the ranked configuration table."""
    logger.info("=" * LINE_WIDTH)
    logger.info("RAG TEST RESULTS")
    logger.info("=" * LINE_WIDTH)
    logger.info(
        f"{'Rank':<4} {'Config':<32} {'Chunks':>6} {'Words':>6} {'Found':>6} {'AvgRank':>8} {'Model':>10}")
    logger.info("-" * LINE_WIDTH)

    for position, analysis in enumerate(report.ranked, start=1):
        run = analysis.run
        found = f"{analysis.found}/{analysis.total}"
        logger.info(
            f"{position:<4} {run.name:<32} {run.total_chunks_created:>6} "
            f"{int(run.avg_chunk_words + 0.5):>6} {found:>6} {analysis.avg_rank:>8.2f} "
            f"{model_label(analysis, large_model):>10}")

    logger.info("-" * LINE_WIDTH)


def log_parameter_impact(report: AnalysisReport, baseline_model: str) -> None:
    """Log mean found per parameter value, marking the best and worst value."""
    logger.info("=" * LINE_WIDTH)
    logger.info(f"PARAMETER IMPACT ({baseline_model} only)")
    logger.info("=" * LINE_WIDTH)

    for parameter, rows in report.impacts.items():
        logger.info(f"{parameter}:")
        highest, lowest = impact_extremes(rows)
        for row in rows:
            marker = ""
            if highest != lowest and row.sample_size > 0:
                if row.mean_found == highest:
                    marker = " ▲"
                elif row.mean_found == lowest:
                    marker = " ▼"
            logger.info(
                f"  {parameter} = {str(row.value):<15}: avg found = "
                f"{row.mean_found:.1f}/{row.sample_total} (n={row.sample_size}){marker}")


def log_question_matrix(report: AnalysisReport) -> None:
    """Log each run's per-question outcome: rank, ✓ (found, no rank) or ✗."""
    question_ids: List[str] = []
    for analysis in report.ranked:
        for question_id in analysis.question_outcomes:
            if question_id not in question_ids:
                question_ids.append(question_id)

    if not question_ids:
        logger.info("No per-question data recorded")
        return

    logger.info("=" * LINE_WIDTH)
    logger.info("PER-QUESTION RANKS")
    logger.info("=" * LINE_WIDTH)
    logger.info(f"{'Config':<32} " + " ".join(f"{q:>4}" for q in question_ids))
    logger.info("-" * LINE_WIDTH)

    for analysis in report.ranked:
        cells = []
        for question_id in question_ids:
            outcome = analysis.question_outcomes.get(question_id)
            if outcome is None:
                cells.append("-")
            elif not outcome.found:
                cells.append("✗")
            elif outcome.rank is None:
                cells.append("✓")
            else:
                cells.append(str(outcome.rank))
        logger.info(f"{analysis.run.name:<32} " + " ".join(f"{c:>4}" for c in cells))


def log_best(report: AnalysisReport) -> None:
    """Log the recommended configuration."""
    top = report.best
    run = top.run
    logger.info("=" * LINE_WIDTH)
    logger.info(f"🏆 BEST: {run.name}")
    logger.info(f"   Found: {top.found}/{top.total}, Avg Rank: {top.avg_rank:.2f}")
    logger.info(
        f"   Params: {run.chunk_size_words}w chunks, {run.chunk_overlap_words}w overlap, "
        f"{run.chip_count} chips, {run.chip_position}, {run.embedding_model}")
    logger.info("=" * LINE_WIDTH)


def _analysis_to_dict(analysis: RunAnalysis, position: int) -> Dict[str, Any]:
    run = analysis.run
    return {
        "position": position,
        "run_id": run.id,
        "name": run.name,
        "embedding_model": run.embedding_model,
        "chunk_size_words": run.chunk_size_words,
        "chunk_overlap_words": run.chunk_overlap_words,
        "chip_count": run.chip_count,
        "chip_position": run.chip_position,
        "total_chunks_created": run.total_chunks_created,
        "avg_chunk_words": run.avg_chunk_words,
        "created_at": run.created_at.isoformat(),
        "found": analysis.found,
        "total": analysis.total,
        "avg_rank": analysis.avg_rank,
        "questions": {
            question_id: {
                "found": outcome.found,
                "rank": outcome.rank,
                "question": outcome.question,
                "expected_answer": outcome.expected_answer,
                "similarity_at_rank": outcome.similarity_at_rank,
                "top_5_similarities": list(outcome.top_similarities),
            }
            for question_id, outcome in analysis.question_outcomes.items()
        },
    }


def report_to_dict(report: AnalysisReport) -> Dict[str, Any]:
    """Convert a report to JSON-serialisable dicts."""
    ranked = [_analysis_to_dict(analysis, position)
              for position, analysis in enumerate(report.ranked, start=1)]
    return {
        "generated_at": report.generated_at.isoformat(),
        "ranked": ranked,
        "impacts": {
            parameter: [
                {
                    "value": row.value,
                    "mean_found": row.mean_found,
                    "sample_total": row.sample_total,
                    "sample_size": row.sample_size,
                }
                for row in rows
            ]
            for parameter, rows in report.impacts.items()
        },
        "best": ranked[report.ranked.index(report.best)],
    }


def save_report(report: AnalysisReport, path: str) -> Path:
    """Write the report as JSON, creating parent directories."""
    report_path = Path(path)
    report_path.parent.mkdir(parents=True, exist_ok=True)

    with open(report_path, 'w', encoding='utf-8') as f:
        json.dump(report_to_dict(report), f, indent=2)

    logger.info(f"Saved report to {report_path}")
    return report_path


def load_report(path: str) -> Dict[str, Any]:
    """Read a saved report back as plain dicts."""
    report_path = Path(path)
    if not report_path.exists():
        raise FileNotFoundError(f"Report file not found: {path}")

    with open(report_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    logger.info(f"Loaded report from {report_path} with {len(data.get('ranked', []))} runs")
    return data
