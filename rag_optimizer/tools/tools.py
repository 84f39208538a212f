"""
MCP tools for ranking RAG configurations and analysing parameter impact.
"""

import logging
from typing import Any, List, Literal, Optional, Union

from mcp.types import ToolAnnotations
from pydantic import BaseModel, Field

from rag_optimizer.packages.run_analysis import (
    DEFAULT_PARAMETER_VALUES,
    EmptyInputError,
    RunAnalysis,
    RunParameter,
    best,
    resolve_parameter,
)
from rag_optimizer.packages.run_analysis_service import RunAnalysisService

logger = logging.getLogger(__name__)

RANK_TOOL_NAME = 'rank_runs'
IMPACT_TOOL_NAME = 'parameter_impact'
BEST_TOOL_NAME = 'best_run'

INT_PARAMETERS = {
    RunParameter.CHUNK_SIZE_WORDS.value,
    RunParameter.CHUNK_OVERLAP_WORDS.value,
    RunParameter.CHIP_COUNT.value,
}

Status = Literal["ok", "no_data"]


class RankedRun(BaseModel):
    """One configuration with its computed metrics."""
    position: int = Field(description="1-based rank, 1 is best")
    run_id: str = Field(description="Test run identifier")
    name: str = Field(description="Configuration name")
    embedding_model: str = Field(description="Embedding model identifier")
    chunk_size_words: int = Field(description="Chunk size in words")
    chunk_overlap_words: int = Field(description="Chunk overlap in words")
    chip_count: int = Field(description="Metadata chips per chunk")
    chip_position: str = Field(description="Chip placement policy")
    found: int = Field(description="Queries whose answer chunk was retrieved")
    total: int = Field(description="Queries evaluated")
    avg_rank: float = Field(description="Mean rank of ranked answers, 0 when no ranks were recorded")

    @classmethod
    def from_analysis(cls, analysis: RunAnalysis, position: int) -> "RankedRun":
        run = analysis.run
        return cls(
            position=position,
            run_id=run.id,
            name=run.name,
            embedding_model=run.embedding_model,
            chunk_size_words=run.chunk_size_words,
            chunk_overlap_words=run.chunk_overlap_words,
            chip_count=run.chip_count,
            chip_position=run.chip_position,
            found=analysis.found,
            total=analysis.total,
            avg_rank=analysis.avg_rank,
        )


class RankedRunsResult(BaseModel):
    """Container for ranked configurations."""
    status: Status = Field(description="'no_data' when no test runs are stored")
    results: List[RankedRun] = Field(description="Configurations, best first")
    total: int = Field(description="Number of ranked configurations")


class ImpactValue(BaseModel):
    """Mean found count for one parameter value."""
    value: Union[int, str] = Field(description="Parameter value")
    mean_found: float = Field(description="Mean found count across matching baseline runs")
    sample_total: int = Field(description="Queries evaluated by the first matching run")
    sample_size: int = Field(description="Number of matching baseline runs")


class ParameterImpactResult(BaseModel):
    """Impact table for one parameter."""
    status: Status = Field(description="'no_data' when no test runs are stored")
    parameter: str = Field(description="Parameter that runs were grouped by")
    baseline_model: str = Field(description="Embedding model of the runs taking part")
    rows: List[ImpactValue] = Field(description="One row per requested value, in request order")


class BestRunResult(BaseModel):
    """Recommended configuration."""
    status: Status = Field(description="'no_data' when no test runs are stored")
    best: Optional[RankedRun] = Field(default=None, description="Best configuration")


class RankRunsTool():
    def __init__(self, analysis_service: RunAnalysisService):
        self.name = RANK_TOOL_NAME
        self.title = 'Rank RAG configurations'
        self.description = ('Rank stored RAG test runs by number of answers found, '
                            'breaking ties by lower average answer rank.')
        self.annotations = ToolAnnotations(title="Rank RAG Configurations", readOnlyHint=True)
        self.structured_output = True
        self.analysis_service = analysis_service

    def execute(self) -> RankedRunsResult:
        """Rank all stored test runs."""
        try:
            ranked = self.analysis_service.ranked_runs()
        except EmptyInputError:
            return RankedRunsResult(status="no_data", results=[], total=0)

        results = [RankedRun.from_analysis(analysis, position)
                   for position, analysis in enumerate(ranked, start=1)]
        return RankedRunsResult(status="ok", results=results, total=len(results))


class ParameterImpactTool():
    def __init__(self, analysis_service: RunAnalysisService):
        self.name = IMPACT_TOOL_NAME
        self.title = 'Analyse parameter impact'
        self.description = ('Mean number of answers found per value of one configuration parameter, '
                            'over baseline embedding model runs only.')
        self.annotations = ToolAnnotations(title="Parameter Impact", readOnlyHint=True)
        self.structured_output = True
        self.analysis_service = analysis_service

    def execute(
        self,
        parameter: str = Field(
            description=f"Parameter to group runs by. Allowed: {[p.value for p in RunParameter]}"),
        values: Optional[List[Union[int, str]]] = Field(
            default=None,
            description="Parameter values to compare, in display order. "
                        "Defaults to the experiment grid for the parameter, e.g. [200, 500] for chunk_size_words.")
    ) -> ParameterImpactResult:
        """Compare mean found counts across values of one parameter."""
        resolve_parameter(parameter)
        candidate_values = self._candidate_values(parameter, values)

        try:
            rows = self.analysis_service.parameter_impact(parameter, candidate_values)
        except EmptyInputError:
            return ParameterImpactResult(
                status="no_data",
                parameter=parameter,
                baseline_model=self.analysis_service.baseline_model,
                rows=[])

        return ParameterImpactResult(
            status="ok",
            parameter=parameter,
            baseline_model=self.analysis_service.baseline_model,
            rows=[ImpactValue(value=row.value, mean_found=row.mean_found,
                              sample_total=row.sample_total, sample_size=row.sample_size)
                  for row in rows],
        )

    def _candidate_values(self, parameter: str, values: Optional[List[Any]]) -> List[Any]:
        """Fall back to the default grid and coerce values to the parameter's type."""
        if values is None:
            if parameter not in DEFAULT_PARAMETER_VALUES:
                raise ValueError(f"No default values for '{parameter}', pass values explicitly")
            return list(DEFAULT_PARAMETER_VALUES[parameter])

        if parameter in INT_PARAMETERS:
            return [int(value) for value in values]
        return [str(value) for value in values]


class BestRunTool():
    def __init__(self, analysis_service: RunAnalysisService):
        self.name = BEST_TOOL_NAME
        self.title = 'Best RAG configuration'
        self.description = 'Return the top ranked RAG configuration.'
        self.annotations = ToolAnnotations(title="Best RAG Configuration", readOnlyHint=True)
        self.structured_output = True
        self.analysis_service = analysis_service

    def execute(self) -> BestRunResult:
        """Return the best configuration across all stored runs."""
        try:
            top = best(self.analysis_service.ranked_runs())
        except EmptyInputError:
            return BestRunResult(status="no_data")
        return BestRunResult(status="ok", best=RankedRun.from_analysis(top, 1))
