# ==============================================
# DocumentSource
# ==============================================
#
# PURPOSE:
#   The interface the scanner uses to reach a document database.
#   Any backend can implement it; MongoDocumentSource is the
#   pymongo one, tests use an in-memory fake.
#
# METHODS:
# --------
# - list_databases() -> list[str]
#     Raises ConnectivityError when the cluster is unreachable.
# - list_collections(db) -> list[str]
# - estimated_count(db, coll) -> int
#     Planning hint only, may be approximate.
# - list_index_names(db, coll) -> list[str]
#     Raises DegradedDataError on failure.
# - sample_documents(db, coll, size, randomized=True) -> list[dict]
#     randomized=False returns the first `size` documents.
# - database_size_bytes(db) -> int
#     Raises DegradedDataError on failure.
# - close() -> None
#
# ==============================================

from abc import ABC, abstractmethod
from typing import List, Mapping


class DocumentSource(ABC):
    """Read-only access to databases, collections and documents."""

    cluster_name: str = "unknown"

    @abstractmethod
    def list_databases(self) -> List[str]:
        ...

    @abstractmethod
    def list_collections(self, db: str) -> List[str]:
        ...

    @abstractmethod
    def estimated_count(self, db: str, coll: str) -> int:
        ...

    @abstractmethod
    def list_index_names(self, db: str, coll: str) -> List[str]:
        ...

    @abstractmethod
    def sample_documents(self, db: str, coll: str, size: int, randomized: bool = True) -> List[Mapping]:
        ...

    @abstractmethod
    def database_size_bytes(self, db: str) -> int:
        ...

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
