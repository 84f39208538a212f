"""
Single-factor parameter impact analysis.

Runs are grouped by the value of one configuration parameter and the mean
found count per group is reported. Only baseline-model runs take part so the
embedding model does not confound the comparison.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from .errors import InvalidParameterError
from .models import ChipPosition, ImpactRow, RunAnalysis, TestRun

logger = logging.getLogger(__name__)


class RunParameter(str, Enum):
    """Run configuration parameters that can be grouped on."""
    CHUNK_SIZE_WORDS = "chunk_size_words"
    CHUNK_OVERLAP_WORDS = "chunk_overlap_words"
    CHIP_COUNT = "chip_count"
    CHIP_POSITION = "chip_position"
    EMBEDDING_MODEL = "embedding_model"


PARAMETER_ACCESSORS: Dict[str, Callable[[TestRun], Any]] = {
    RunParameter.CHUNK_SIZE_WORDS.value: lambda run: run.chunk_size_words,
    RunParameter.CHUNK_OVERLAP_WORDS.value: lambda run: run.chunk_overlap_words,
    RunParameter.CHIP_COUNT.value: lambda run: run.chip_count,
    RunParameter.CHIP_POSITION.value: lambda run: run.chip_position,
    RunParameter.EMBEDDING_MODEL.value: lambda run: run.embedding_model,
}

# Parameter grid the experiments were generated from
DEFAULT_PARAMETER_VALUES: Dict[str, List[Any]] = {
    RunParameter.CHUNK_SIZE_WORDS.value: [200, 500],
    RunParameter.CHUNK_OVERLAP_WORDS.value: [0, 50],
    RunParameter.CHIP_COUNT.value: [2, 5],
    RunParameter.CHIP_POSITION.value: [ChipPosition.PREPEND.value, ChipPosition.PREPEND_APPEND.value],
}


def parameter_name(parameter_key: Union[str, RunParameter]) -> str:
    """Plain string name of a parameter, whether given as a name or a RunParameter."""
    return parameter_key.value if isinstance(parameter_key, RunParameter) else str(parameter_key)


def resolve_parameter(parameter_key: Union[str, RunParameter]) -> Callable[[TestRun], Any]:
    """Return the accessor for a parameter name, or raise InvalidParameterError."""
    key = parameter_name(parameter_key)
    accessor = PARAMETER_ACCESSORS.get(key)
    if accessor is None:
        raise InvalidParameterError(key, list(PARAMETER_ACCESSORS.keys()))
    return accessor


def impact_of(
    analyses: Sequence[RunAnalysis],
    parameter_key: Union[str, RunParameter],
    candidate_values: Sequence[Any],
    baseline_model: str
) -> List[ImpactRow]:
    """Compute the mean found count for each candidate value of one parameter.

    Rows come back in ``candidate_values`` order. A value with no matching
    baseline run gets ``mean_found=0.0`` and ``sample_total=0``.
    ``sample_total`` is the total of the first matching run, not a sum.
    """
    accessor = resolve_parameter(parameter_key)
    key = parameter_name(parameter_key)

    baseline = [analysis for analysis in analyses if analysis.run.embedding_model == baseline_model]
    logger.info(
        f"Analysing impact of '{key}' over {len(baseline)}/{len(analyses)} "
        f"runs using baseline model {baseline_model}")

    rows: List[ImpactRow] = []
    for value in candidate_values:
        matches = [analysis for analysis in baseline if accessor(analysis.run) == value]
        if len(matches) == 0:
            logger.warning(f"No baseline runs with {key} = {value}")
            rows.append(ImpactRow(value=value, mean_found=0.0, sample_total=0, sample_size=0))
            continue

        mean_found = sum(match.found for match in matches) / len(matches)
        rows.append(ImpactRow(
            value=value,
            mean_found=mean_found,
            sample_total=matches[0].total,
            sample_size=len(matches),
        ))

    return rows


def impact_extremes(rows: Sequence[ImpactRow]) -> Tuple[Optional[float], Optional[float]]:
    """Return the highest and lowest mean found among rows with samples."""
    sampled = [row.mean_found for row in rows if row.sample_size > 0]
    if not sampled:
        return None, None
    return max(sampled), min(sampled)
