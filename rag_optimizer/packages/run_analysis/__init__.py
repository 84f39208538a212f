"""
Run Analysis for RAG Configuration Experiments

Scores stored test runs, ranks retrieval configurations, and isolates the
effect of single configuration parameters. Pure in-memory functions over
runs and results already fetched from a store.
"""

from .errors import EmptyInputError, InvalidParameterError, RunAnalysisError
from .impact import (
    DEFAULT_PARAMETER_VALUES,
    PARAMETER_ACCESSORS,
    RunParameter,
    impact_extremes,
    impact_of,
    parameter_name,
    resolve_parameter,
)
from .metrics import compute_metrics
from .models import (
    AnalysisReport,
    ChipPosition,
    ImpactRow,
    QuestionOutcome,
    RunAnalysis,
    TestResult,
    TestRun,
)
from .ranker import best, rank
from .report import load_report, report_to_dict, save_report

__all__ = [
    "TestRun",
    "TestResult",
    "RunAnalysis",
    "QuestionOutcome",
    "ImpactRow",
    "AnalysisReport",
    "ChipPosition",
    "RunParameter",
    "PARAMETER_ACCESSORS",
    "DEFAULT_PARAMETER_VALUES",
    "RunAnalysisError",
    "EmptyInputError",
    "InvalidParameterError",
    "compute_metrics",
    "rank",
    "best",
    "impact_of",
    "impact_extremes",
    "parameter_name",
    "resolve_parameter",
    "report_to_dict",
    "save_report",
    "load_report",
]
