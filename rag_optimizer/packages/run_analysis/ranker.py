"""
Ranking of analysed runs and best-configuration selection.
"""

import logging
from typing import List, Sequence

from .errors import EmptyInputError
from .models import RunAnalysis

logger = logging.getLogger(__name__)


def rank(analyses: Sequence[RunAnalysis]) -> List[RunAnalysis]:
    """Order runs best first: ``found`` descending, then ``avg_rank`` ascending.

    The sort is stable, so runs tied on both keys keep their input order
    (creation order when read from the store). A 0.0 ``avg_rank`` sentinel
    sorts ahead of real averages among runs with the same ``found``.
    """
    ranked = sorted(analyses, key=lambda analysis: (-analysis.found, analysis.avg_rank))
    logger.info(f"Ranked {len(ranked)} runs")
    return ranked


def best(ranked: Sequence[RunAnalysis]) -> RunAnalysis:
    """Return the top run of an already ranked sequence."""
    if len(ranked) == 0:
        raise EmptyInputError("Cannot select the best configuration from zero runs")
    return ranked[0]
