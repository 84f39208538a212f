# tests/conftest.py
"""
Shared pytest fixtures for the run analysis tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from rag_optimizer.packages.result_store import InMemoryResultStore
from rag_optimizer.packages.run_analysis import TestResult, TestRun
from rag_optimizer.packages.run_analysis_service import RunAnalysisService

SMALL_MODEL = "text-embedding-3-small"
LARGE_MODEL = "text-embedding-3-large"
BASE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

CONFIG_ENV_VARS = [
    "MCP_HOST", "MCP_PORT", "TRANSPORT", "LOG_LEVEL", "STORE_BACKEND",
    "MONGODB_URI", "MONGODB_USERNAME", "MONGODB_PASSWORD", "MONGODB_DATABASE_NAME",
    "MONGODB_RUNS_COLLECTION", "MONGODB_RESULTS_COLLECTION", "RUNS_FILE", "RESULTS_FILE",
    "BASELINE_EMBEDDING_MODEL", "LARGE_EMBEDDING_MODEL",
]


@pytest.fixture
def make_run():
    """Factory for TestRun with sensible defaults; creation time follows the index."""
    def _make_run(index: int = 0, **overrides) -> TestRun:
        fields = {
            "id": f"run-{index:02d}",
            "name": f"config-{index:02d}",
            "embedding_model": SMALL_MODEL,
            "chunk_size_words": 200,
            "chunk_overlap_words": 0,
            "chip_count": 2,
            "chip_position": "prepend",
            "total_chunks_created": 100,
            "avg_chunk_words": 198.4,
            "created_at": BASE_TIME + timedelta(minutes=index),
        }
        fields.update(overrides)
        return TestRun(**fields)
    return _make_run


@pytest.fixture
def make_result():
    """Factory for TestResult."""
    def _make_result(run_id: str, found: bool, rank=None, question_id=None) -> TestResult:
        return TestResult(
            test_run_id=run_id,
            answer_found=found,
            answer_rank=rank,
            question_id=question_id,
        )
    return _make_result


@pytest.fixture
def sample_runs(make_run):
    """Three small-model runs and one large-model run."""
    return [
        make_run(1, name="200w/0o/2c/pre", chunk_size_words=200),
        make_run(2, name="500w/0o/2c/pre", chunk_size_words=500),
        make_run(3, name="500w/50o/5c/pre+app", chunk_size_words=500, chunk_overlap_words=50,
                 chip_count=5, chip_position="prepend_append"),
        make_run(4, name="500w/50o/5c/pre+app/LARGE", chunk_size_words=500, chunk_overlap_words=50,
                 chip_count=5, chip_position="prepend_append", embedding_model=LARGE_MODEL),
    ]


@pytest.fixture
def sample_results(sample_runs, make_result):
    """Per-question outcomes: run-01 finds 2/3, run-02 3/3, run-03 3/3 (better ranks), run-04 1/3."""
    r1, r2, r3, r4 = (run.id for run in sample_runs)
    return [
        make_result(r1, True, 2, "Q1"), make_result(r1, True, 4, "Q2"), make_result(r1, False, None, "Q3"),
        make_result(r2, True, 3, "Q1"), make_result(r2, True, 3, "Q2"), make_result(r2, True, None, "Q3"),
        make_result(r3, True, 1, "Q1"), make_result(r3, True, 2, "Q2"), make_result(r3, True, 1, "Q3"),
        make_result(r4, True, 1, "Q1"), make_result(r4, False, None, "Q2"), make_result(r4, False, None, "Q3"),
    ]


@pytest.fixture
def sample_store(sample_runs, sample_results):
    return InMemoryResultStore(sample_runs, sample_results)


@pytest.fixture
def analysis_service(sample_store):
    return RunAnalysisService(sample_store, baseline_model=SMALL_MODEL, large_model=LARGE_MODEL)


@pytest.fixture
def empty_service():
    return RunAnalysisService(InMemoryResultStore([], []), baseline_model=SMALL_MODEL, large_model=LARGE_MODEL)
