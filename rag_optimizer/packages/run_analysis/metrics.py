"""
Per-run metric calculation.
"""

import logging
from typing import Dict, List, Sequence

from .models import QuestionOutcome, RunAnalysis, TestResult, TestRun

logger = logging.getLogger(__name__)


def compute_metrics(run: TestRun, results: Sequence[TestResult]) -> RunAnalysis:
    """Compute found count, total and average rank for one run.

    ``results`` must already belong to ``run``; they are not re-filtered.
    The found flag and rank presence are checked independently: a found
    result without a rank counts toward ``found`` but not toward
    ``avg_rank``. When no result has a rank, ``avg_rank`` is the 0.0 sentinel.
    """
    found = sum(1 for result in results if result.answer_found)
    total = len(results)
    ranks: List[int] = [result.answer_rank for result in results if result.answer_rank is not None]
    avg_rank = _mean(ranks)

    question_outcomes: Dict[str, QuestionOutcome] = {}
    for result in results:
        if result.question_id is not None:
            question_outcomes[result.question_id] = QuestionOutcome(
                found=result.answer_found,
                rank=result.answer_rank,
                question=result.question,
                expected_answer=result.expected_answer,
                similarity_at_rank=result.similarity_at_rank,
                top_similarities=tuple(result.top_5_similarities),
            )

    logger.debug(
        f"Run '{run.name}': found={found}/{total}, ranked={len(ranks)}, avg_rank={avg_rank:.2f}")
    return RunAnalysis(
        run=run,
        found=found,
        total=total,
        avg_rank=avg_rank,
        question_outcomes=question_outcomes,
    )


def _mean(values: Sequence[float]) -> float:
    """Calculate mean of values, 0.0 for no values."""
    if len(values) == 0:
        return 0.0
    return sum(values) / len(values)
