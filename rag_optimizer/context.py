import logging
from dataclasses import dataclass
from typing import Optional

from pymongo import MongoClient

from rag_optimizer.config import Config, StoreBackend
from rag_optimizer.packages.mongodb_client import MongoDBClient
from rag_optimizer.packages.result_store import InMemoryResultStore, MongoResultStore, ResultStore
from rag_optimizer.packages.run_analysis_service import RunAnalysisService

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Application context with typed dependencies."""

    config: Config
    analysis_service: RunAnalysisService
    mongo_client: Optional[MongoClient] = None

    def close(self) -> None:
        if self.mongo_client is not None:
            self.mongo_client.close()
            logger.info("Closed MongoDB client")


def build_context(config: Config) -> AppContext:
    """Wire the configured store into a RunAnalysisService."""
    mongo_client = None
    store: ResultStore
    if config.store_backend == StoreBackend.MONGODB:
        mongo_client = MongoDBClient(
            username=config.MONGODB_USERNAME,
            password=config.MONGODB_PASSWORD,
            uri=config.MONGODB_URI,
        ).get_client()
        store = MongoResultStore(
            mongo_client=mongo_client,
            database_name=config.MONGODB_DATABASE_NAME,
            runs_collection_name=config.MONGODB_RUNS_COLLECTION,
            results_collection_name=config.MONGODB_RESULTS_COLLECTION,
        )
    else:
        store = InMemoryResultStore.from_jsonl(config.RUNS_FILE, config.RESULTS_FILE)
    logger.info(f"Using {config.store_backend.value} store")

    analysis_service = RunAnalysisService(
        store=store,
        baseline_model=config.BASELINE_EMBEDDING_MODEL,
        large_model=config.LARGE_EMBEDDING_MODEL,
    )
    return AppContext(config=config, analysis_service=analysis_service, mongo_client=mongo_client)
