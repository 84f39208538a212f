"""
MongoDB client factory for the test run store.
"""

import logging
from urllib.parse import quote_plus

from pymongo import MongoClient

logger = logging.getLogger(__name__)


class MongoDBClient:
    """Builds authenticated MongoDB connections from a credential-free URI."""

    def __init__(self, username: str, password: str, uri: str):
        self.username = username
        self.password = password
        self.uri = uri

    def build_connection_string(self) -> str:
        """
        Inject URL-encoded credentials into the configured URI.
        Expected URI format: mongodb+srv://cluster.mongodb.net/?appName=rag-optimizer
        Any credentials already present in the URI are replaced.
        """
        if "://" not in self.uri:
            raise ValueError(
                f"Invalid MongoDB URI '{self.uri}'. Expected format: mongodb+srv://cluster.mongodb.net/?appName=xxx")

        scheme, host_part = self.uri.split("://", 1)
        if "@" in host_part:
            host_part = host_part.split("@", 1)[1]

        return f"{scheme}://{quote_plus(self.username)}:{quote_plus(self.password)}@{host_part}"

    def get_client(self) -> MongoClient:
        """Create a new MongoDB client. The caller owns and closes it."""
        logger.info("Creating MongoDB client")
        return MongoClient(self.build_connection_string())
