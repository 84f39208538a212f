"""
Service that runs one analysis pass over the stored test runs.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from rag_optimizer.packages.result_store import ResultStore
from rag_optimizer.packages.run_analysis import (
    DEFAULT_PARAMETER_VALUES,
    AnalysisReport,
    EmptyInputError,
    ImpactRow,
    RunAnalysis,
    best,
    compute_metrics,
    impact_of,
    rank,
)

logger = logging.getLogger(__name__)


class RunAnalysisService:
    """Reads runs from a store, scores and ranks them, and analyses parameter impact."""

    def __init__(self, store: ResultStore, baseline_model: str, large_model: str):
        self.store = store
        self.baseline_model = baseline_model
        self.large_model = large_model

    def analyze_runs(self) -> List[RunAnalysis]:
        """Compute metrics for every stored run, in store order."""
        runs = self.store.list_runs()
        logger.info(f"Analysing {len(runs)} runs")

        analyses: List[RunAnalysis] = []
        for idx, run in enumerate(runs, start=1):
            results = self.store.list_results(run.id)
            logger.debug(f"Run {idx}/{len(runs)} '{run.name}': {len(results)} results")
            analyses.append(compute_metrics(run, results))
        return analyses

    def ranked_runs(self) -> List[RunAnalysis]:
        """Analyse and rank all runs, raising EmptyInputError when there are none."""
        analyses = self.analyze_runs()
        if len(analyses) == 0:
            logger.warning("No test runs found")
            raise EmptyInputError("No test runs found")
        return rank(analyses)

    def parameter_impact(
        self,
        parameter: str,
        values: Sequence[Any],
        ranked: Optional[Sequence[RunAnalysis]] = None
    ) -> List[ImpactRow]:
        """Impact of one parameter over the baseline-model runs."""
        if ranked is None:
            ranked = self.ranked_runs()
        return impact_of(ranked, parameter, values, self.baseline_model)

    def build_report(
        self,
        parameters: Optional[Dict[str, List[Any]]] = None
    ) -> AnalysisReport:
        """Run a full analysis pass: rank, per-parameter impact and best run."""
        parameters = parameters if parameters is not None else DEFAULT_PARAMETER_VALUES

        ranked = self.ranked_runs()
        impacts = {
            parameter: self.parameter_impact(parameter, values, ranked)
            for parameter, values in parameters.items()
        }
        top = best(ranked)
        logger.info(f"Best configuration: {top.run.name} ({top.found}/{top.total} found)")

        return AnalysisReport(
            ranked=ranked,
            impacts=impacts,
            best=top,
            generated_at=datetime.now(timezone.utc),
        )
