"""
Read-only access to stored test runs and their per-query results.

Stores:
- MongoResultStore - runs and results collections in MongoDB
- InMemoryResultStore - materialised lists, also loadable from JSONL files
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Type, TypeVar

from bson import ObjectId
from pydantic import BaseModel, ValidationError
from pymongo import ASCENDING, MongoClient
from pymongo.errors import PyMongoError

from .run_analysis.models import TestResult, TestRun

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ResultStore(ABC):
    """Source of test runs and test results."""

    @abstractmethod
    def list_runs(self) -> List[TestRun]:
        """Return all runs ordered by creation time, oldest first."""
        pass

    @abstractmethod
    def list_results(self, run_id: str) -> List[TestResult]:
        """Return every result recorded for one run."""
        pass


class InMemoryResultStore(ResultStore):
    """Store over already materialised runs and results."""

    def __init__(self, runs: Iterable[TestRun], results: Iterable[TestResult]):
        # sorted() is stable, so equal timestamps keep insertion order
        self._runs: List[TestRun] = sorted(runs, key=lambda run: run.created_at)
        self._results_by_run: Dict[str, List[TestResult]] = {}
        for result in results:
            self._results_by_run.setdefault(result.test_run_id, []).append(result)
        logger.info(
            f"Initialized in-memory store with {len(self._runs)} runs and "
            f"{sum(len(r) for r in self._results_by_run.values())} results")

    @classmethod
    def from_jsonl(cls, runs_path: str, results_path: str) -> "InMemoryResultStore":
        """Load runs and results from two JSONL files, one record per line."""
        runs = _read_jsonl(runs_path, TestRun)
        results = _read_jsonl(results_path, TestResult)
        logger.info(f"Loaded {len(runs)} runs from {runs_path} and {len(results)} results from {results_path}")
        return cls(runs, results)

    def list_runs(self) -> List[TestRun]:
        return list(self._runs)

    def list_results(self, run_id: str) -> List[TestResult]:
        return list(self._results_by_run.get(run_id, []))


class MongoResultStore(ResultStore):
    """Store backed by the runs and results collections in MongoDB."""

    def __init__(
        self,
        mongo_client: MongoClient,
        database_name: str,
        runs_collection_name: str = "rag_test_runs",
        results_collection_name: str = "rag_test_results"
    ):
        self.mongo_client = mongo_client
        self.database_name = database_name
        self.runs_collection_name = runs_collection_name
        self.results_collection_name = results_collection_name

    def list_runs(self) -> List[TestRun]:
        logger.info(f"Fetching runs from {self.database_name}.{self.runs_collection_name}")
        collection = self.mongo_client[self.database_name][self.runs_collection_name]
        try:
            documents = list(collection.find({}).sort("created_at", ASCENDING))
        except PyMongoError as e:
            logger.error(f"Failed to fetch runs: {e}")
            raise

        runs = [TestRun.model_validate(document) for document in documents]
        logger.info(f"Fetched {len(runs)} runs")
        return runs

    def list_results(self, run_id: str) -> List[TestResult]:
        collection = self.mongo_client[self.database_name][self.results_collection_name]
        try:
            documents = list(collection.find(self._run_filter(run_id), {"_id": 0}))
        except PyMongoError as e:
            logger.error(f"Failed to fetch results for run {run_id}: {e}")
            raise

        results = [TestResult.model_validate(document) for document in documents]
        logger.debug(f"Fetched {len(results)} results for run {run_id}")
        return results

    def _run_filter(self, run_id: str) -> Dict[str, Any]:
        """Match results whether the run reference was stored as a string or an ObjectId."""
        if ObjectId.is_valid(run_id):
            return {"test_run_id": {"$in": [run_id, ObjectId(run_id)]}}
        return {"test_run_id": run_id}


def _read_jsonl(path: str, model: Type[ModelT]) -> List[ModelT]:
    """Parse a JSONL file into models, skipping blank lines."""
    path_obj = Path(path)
    if not path_obj.exists():
        raise FileNotFoundError(f"JSONL file not found: {path}")

    records: List[ModelT] = []
    with open(path_obj, 'r', encoding='utf-8') as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(model.model_validate(json.loads(line)))
            except (json.JSONDecodeError, ValidationError) as e:
                raise ValueError(f"Error parsing line {line_num} in {path}: {e}") from e
    return records
