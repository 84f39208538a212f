"""
Configuration management for the run store, model identifiers, MCP server settings and command-line arguments.
"""

import argparse
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Transport(str, Enum):
    STDIO = "stdio"
    SSE = "sse"
    STREAMABLE_HTTP = "streamable-http"


class StoreBackend(str, Enum):
    MONGODB = "mongodb"
    JSONL = "jsonl"


class Config(BaseSettings):
    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    host: str = Field("0.0.0.0", alias="MCP_HOST", description="Host to bind")
    port: int = Field(8000, alias="MCP_PORT", description="Port to listen on")
    transport: Transport = Field(
        Transport.STREAMABLE_HTTP,
        description=f"Transport protocol, allowed: {[t.value for t in Transport]}"
    )
    log_level: str = Field('INFO', description="Logging level",
                           examples=["CRITICAL", "FATAL", "ERROR", "WARNING", "INFO", "DEBUG"])
    store_backend: StoreBackend = Field(
        StoreBackend.MONGODB,
        description=f"Where test runs are read from, allowed: {[b.value for b in StoreBackend]}"
    )
    MONGODB_DATABASE_NAME: str = Field(default="rag-optimizer", description="MongoDB database name")
    MONGODB_RUNS_COLLECTION: str = Field(default="rag_test_runs", description="Collection holding test runs")
    MONGODB_RESULTS_COLLECTION: str = Field(default="rag_test_results",
                                            description="Collection holding per-query test results")
    MONGODB_USERNAME: Optional[str] = Field(default=None, description="Mongodb user")
    MONGODB_PASSWORD: Optional[str] = Field(default=None, description="Mongodb password")
    MONGODB_URI: Optional[str] = Field(
        default=None,
        description="Mongodb uri. Example: mongodb+srv://cluster.mongodb.net/?appName=rag-optimizer")
    RUNS_FILE: Optional[str] = Field(default=None, description="JSONL file of test runs (jsonl backend)")
    RESULTS_FILE: Optional[str] = Field(default=None, description="JSONL file of test results (jsonl backend)")
    BASELINE_EMBEDDING_MODEL: str = Field(
        default="text-embedding-3-small",
        description="Smaller embedding model; only its runs take part in parameter impact analysis")
    LARGE_EMBEDDING_MODEL: str = Field(
        default="text-embedding-3-large", description="Larger comparison embedding model")

    @field_validator("transport")
    def reject_sse(cls, v):
        if v == Transport.SSE:
            raise ValueError("SSE transport not supported")
        return v

    @model_validator(mode="after")
    def check_store_settings(self):
        if self.store_backend == StoreBackend.MONGODB:
            missing = [name for name in ("MONGODB_URI", "MONGODB_USERNAME", "MONGODB_PASSWORD")
                       if not getattr(self, name)]
            if missing:
                raise ValueError(f"mongodb store requires: {', '.join(missing)}")
        elif not self.RUNS_FILE or not self.RESULTS_FILE:
            raise ValueError("jsonl store requires RUNS_FILE and RESULTS_FILE")
        return self


def build_parser(description: str) -> argparse.ArgumentParser:
    """Parser with the options shared by the report CLI and the MCP server."""
    parser = argparse.ArgumentParser(description=description)

    # Store options
    parser.add_argument(
        "--store-backend",
        dest="store_backend",
        choices=[b.value for b in StoreBackend],
        help="Where test runs are read from (env: STORE_BACKEND)",
    )
    parser.add_argument(
        "--runs-file",
        dest="RUNS_FILE",
        help="JSONL file of test runs (env: RUNS_FILE)",
    )
    parser.add_argument(
        "--results-file",
        dest="RESULTS_FILE",
        help="JSONL file of test results (env: RESULTS_FILE)",
    )

    # Model identifiers
    parser.add_argument(
        "--baseline-model",
        dest="BASELINE_EMBEDDING_MODEL",
        help="Baseline embedding model (env: BASELINE_EMBEDDING_MODEL)",
    )
    parser.add_argument(
        "--large-model",
        dest="LARGE_EMBEDDING_MODEL",
        help="Large embedding model (env: LARGE_EMBEDDING_MODEL)",
    )

    parser.add_argument(
        "--log-level",
        dest="log_level",
        help="Logging level",
    )
    return parser


def add_server_arguments(parser: argparse.ArgumentParser) -> None:
    """Add MCP transport options."""
    parser.add_argument(
        "--transport",
        choices=["stdio", "streamable-http"],
        help="Transport protocol to use",
    )
    parser.add_argument(
        "--host",
        help="Host to bind to for HTTP transports (default: 0.0.0.0, env: MCP_HOST)",
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port to listen on for HTTP transports",
    )


def config_from_args(args: argparse.Namespace, exclude: Optional[List[str]] = None) -> Config:
    """Build Config from environment variables plus the CLI values that are actually set."""
    exclude = exclude or []
    cli_overrides = {k: v for k, v in vars(args).items() if v is not None and k not in exclude}
    return Config(**cli_overrides)


def get_config(argv: Optional[List[str]] = None) -> Config:
    parser = build_parser("RAG Optimizer MCP Server")
    add_server_arguments(parser)
    args = parser.parse_args(argv)
    return config_from_args(args)
