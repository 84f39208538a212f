"""
Data models for run analysis.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChipPosition(str, Enum):
    """Known chip placement policies. Stores may contain others."""
    PREPEND = "prepend"
    PREPEND_APPEND = "prepend_append"


class TestRun(BaseModel):
    """One evaluated retrieval configuration."""
    __test__ = False  # not a pytest class
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(alias="_id", description="Unique run identifier")
    name: str = Field(description="Human-readable configuration name, e.g. '500w/50o/5c/pre+app'")
    embedding_model: str = Field(description="Embedding model identifier")
    chunk_size_words: int = Field(description="Target chunk size in words")
    chunk_overlap_words: int = Field(description="Chunk overlap in words")
    chip_count: int = Field(description="Number of metadata chips injected per chunk")
    chip_position: str = Field(description="Chip placement policy, e.g. 'prepend'")
    total_chunks_created: int = Field(default=0, description="Total chunks created by the run")
    avg_chunk_words: float = Field(default=0.0, description="Average chunk length in words")
    created_at: datetime = Field(description="Run creation time")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> str:
        # MongoDB hands back ObjectId
        return str(value)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # MongoDB returns naive UTC datetimes; JSONL may mix both forms
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class TestResult(BaseModel):
    """One query's outcome under one run.

    ``answer_found`` and ``answer_rank`` are independent: a found answer may
    still lack a rank when rank tracking failed.
    """
    __test__ = False  # not a pytest class
    model_config = ConfigDict(frozen=True, extra="ignore")

    test_run_id: str = Field(description="Identifier of the owning run")
    answer_found: bool = Field(description="Whether the answer-bearing chunk was retrieved")
    answer_rank: Optional[int] = Field(
        default=None, ge=1, description="1-based position of the answer-bearing chunk")
    question_id: Optional[str] = Field(default=None, description="Test question identifier, e.g. 'Q1'")
    question: Optional[str] = Field(default=None, description="Test question text")
    expected_answer: Optional[str] = Field(default=None, description="Expected answer text")
    similarity_at_rank: Optional[float] = Field(
        default=None, description="Similarity score of the answer-bearing chunk")
    top_5_similarities: List[float] = Field(
        default_factory=list, description="Similarity scores of the top retrieved chunks")

    @field_validator("test_run_id", mode="before")
    @classmethod
    def stringify_run_id(cls, value: Any) -> str:
        return str(value)


@dataclass(frozen=True)
class QuestionOutcome:
    """Found flag, rank and stored details of one test question within a run."""
    found: bool
    rank: Optional[int] = None
    question: Optional[str] = None
    expected_answer: Optional[str] = None
    similarity_at_rank: Optional[float] = None
    top_similarities: Tuple[float, ...] = ()


@dataclass(frozen=True)
class RunAnalysis:
    """Metrics computed for one run.

    ``avg_rank`` is 0.0 when no result carries a rank. That value is a
    sentinel, not an average, and sorts as the best rank among runs with
    equal ``found``.
    """
    run: TestRun
    found: int
    total: int
    avg_rank: float
    question_outcomes: Dict[str, QuestionOutcome] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class ImpactRow:
    """Mean found count of baseline-model runs sharing one parameter value."""
    value: Any
    mean_found: float
    sample_total: int  # total of the first matching run, display only
    sample_size: int = 0


@dataclass
class AnalysisReport:
    """Result of one full analysis pass."""
    ranked: List[RunAnalysis]
    impacts: Dict[str, List[ImpactRow]]
    best: RunAnalysis
    generated_at: datetime
