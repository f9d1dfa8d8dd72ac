# ==============================================
# MongoDocumentSource
# ==============================================
#
# PURPOSE:
#   Manages the MongoDB connection and every read the scanner
#   needs: database/collection listing, counts, indexes, stats
#   and document sampling.
#
# CLASS: MongoDocumentSource(DocumentSource)
# ------------------------------------------
#   Stateful — holds the pymongo client.
#
#   Constructor:
#   ------------
#   - __init__(uri, connect_timeout_ms=30000, client=None)
#       A ready client can be injected (tests); otherwise one is
#       created on connect().
#
#   Methods:
#   --------
#   - connect() -> None
#       Create the client and ping the admin database.
#       Raises ConnectivityError if the URI is unusable or the ping fails.
#   - disconnect() / close() -> None
#   - sample_documents(db, coll, size, randomized=True)
#       randomized → aggregate([{"$sample": {"size": size}}])
#       otherwise  → find({}).limit(size)
#
#   Context Manager:
#   ----------------
#   - __enter__ / __exit__ for `with MongoDocumentSource(uri) as source:`
#
# ==============================================

import logging
import re
from typing import List, Mapping, Optional

from pymongo import MongoClient as PyMongoClient
from pymongo.errors import ConfigurationError, ConnectionFailure, OperationFailure, PyMongoError

from ..errors import ConnectivityError, DegradedDataError
from ..log import mask_uri
from .document_source import DocumentSource

logger = logging.getLogger(__name__)

_HOST_PATTERN = re.compile(r"@([^/?]+)")


def extract_cluster_name(uri: str) -> str:
    """
    Take the host part of a URI that carries credentials.

    Examples:
        "mongodb+srv://u:p@cluster0.ab12c.mongodb.net/?retryWrites=true" → "cluster0.ab12c.mongodb.net"
        "mongodb://localhost:27017" → "unknown"
    """
    match = _HOST_PATTERN.search(uri)
    if match:
        return match.group(1)
    return "unknown"


class MongoDocumentSource(DocumentSource):
    def __init__(self, uri: str, connect_timeout_ms: int = 30000, client: Optional[PyMongoClient] = None):
        # Store connection params. Don't connect yet unless a client was given.
        self.uri = uri
        self.connect_timeout_ms = connect_timeout_ms
        self.client = client
        self.cluster_name = extract_cluster_name(uri)

    def connect(self) -> None:
        """
        Establish the connection and verify it with a ping.

        Raises:
            ConnectivityError: The URI cannot be resolved, the server is
                               unreachable or it rejected the credentials
        """
        try:
            if self.client is None:
                self.client = PyMongoClient(
                    self.uri,
                    serverSelectionTimeoutMS=self.connect_timeout_ms,
                    connectTimeoutMS=self.connect_timeout_ms,
                )
            self.client.admin.command("ping")
            logger.info("Connected to MongoDB at %s", mask_uri(self.uri))
        except ConnectionFailure as e:
            raise ConnectivityError(f"Could not connect to MongoDB: {e}") from e
        except OperationFailure as e:
            raise ConnectivityError(f"Authentication failed: {e}") from e
        except ConfigurationError as e:
            # Malformed URI or SRV record that does not resolve
            raise ConnectivityError(f"Invalid MongoDB URI {mask_uri(self.uri)}: {e}") from e

    def disconnect(self) -> None:
        if self.client:
            self.client.close()
            logger.debug("Disconnected from MongoDB.")
            self.client = None

    def close(self) -> None:
        self.disconnect()

    def _require_client(self) -> PyMongoClient:
        if not self.client:
            raise ConnectivityError("Not connected to MongoDB.")
        return self.client

    def list_databases(self) -> List[str]:
        client = self._require_client()
        try:
            return client.list_database_names()
        except PyMongoError as e:
            raise ConnectivityError(f"Failed to list databases: {e}") from e

    def list_collections(self, db: str) -> List[str]:
        return self._require_client()[db].list_collection_names()

    def estimated_count(self, db: str, coll: str) -> int:
        return self._require_client()[db][coll].estimated_document_count()

    def list_index_names(self, db: str, coll: str) -> List[str]:
        collection = self._require_client()[db][coll]
        try:
            return [index["name"] for index in collection.list_indexes() if "name" in index]
        except PyMongoError as e:
            raise DegradedDataError(f"Could not list indexes for {db}.{coll}: {e}") from e

    def sample_documents(self, db: str, coll: str, size: int, randomized: bool = True) -> List[Mapping]:
        collection = self._require_client()[db][coll]
        if randomized:
            cursor = collection.aggregate([{"$sample": {"size": size}}])
        else:
            cursor = collection.find({}).limit(size)
        with cursor:
            return list(cursor)

    def database_size_bytes(self, db: str) -> int:
        try:
            stats = self._require_client()[db].command("dbStats")
        except PyMongoError as e:
            raise DegradedDataError(f"Could not get stats for database {db}: {e}") from e

        # dataSize may come back as int, Int64 or double depending on server version
        size = stats.get("dataSize", 0)
        try:
            return int(size)
        except (TypeError, ValueError) as e:
            raise DegradedDataError(f"Unexpected dataSize for database {db}: {size!r}") from e

    def __enter__(self):
        # For `with MongoDocumentSource(...) as source:` usage.
        self.connect()
        return self
