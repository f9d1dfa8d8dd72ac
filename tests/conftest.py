# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# This file contains shared fixtures for all tests.
#
# - FakeDocumentSource: in-memory DocumentSource with failure and
#   latency injection, plus an in-flight counter for concurrency checks.
# - make_source: builds a FakeDocumentSource from a nested dict
#   {db_name: {collection_name: [documents]}}.
# - scan_options: ScanOptions suited to fast tests.
# - clean_config: resets the config singleton around a test.
# ==============================================

import threading
import time
from typing import Dict, List, Mapping, Optional, Set, Tuple

import pytest

from schema_scanner.config import ScanOptions, reset_config
from schema_scanner.errors import ConnectivityError, DegradedDataError
from schema_scanner.storage import DocumentSource


class FakeDocumentSource(DocumentSource):
    def __init__(self, data: Dict[str, Dict[str, List[Mapping]]], cluster_name: str = "test-cluster"):
        self.data = data
        self.cluster_name = cluster_name
        self.counts: Dict[Tuple[str, str], int] = {}
        self.indexes: Dict[Tuple[str, str], List[str]] = {}
        self.sizes: Dict[str, int] = {}

        self.unreachable = False
        self.failing_databases: Set[str] = set()        # list_collections raises
        self.failing_samples: Set[Tuple[str, str]] = set()  # both sampling modes raise
        self.failing_random: Set[Tuple[str, str]] = set()   # only $sample raises
        self.failing_indexes: Set[Tuple[str, str]] = set()
        self.failing_counts: Set[Tuple[str, str]] = set()
        self.failing_sizes: Set[str] = set()
        self.sample_delay: float = 0.0
        self.delays: Dict[Tuple[str, str], float] = {}

        self.sample_calls: List[Tuple[str, str, int, bool]] = []
        self.closed = False
        self._lock = threading.Lock()
        self.in_flight = 0
        self.max_in_flight = 0

    def list_databases(self) -> List[str]:
        if self.unreachable:
            raise ConnectivityError("cluster unreachable")
        return list(self.data)

    def list_collections(self, db: str) -> List[str]:
        if db in self.failing_databases:
            raise RuntimeError(f"cannot list collections in {db}")
        return list(self.data[db])

    def estimated_count(self, db: str, coll: str) -> int:
        if (db, coll) in self.failing_counts:
            raise DegradedDataError(f"count unavailable for {db}.{coll}")
        return self.counts.get((db, coll), len(self.data[db][coll]))

    def list_index_names(self, db: str, coll: str) -> List[str]:
        if (db, coll) in self.failing_indexes:
            raise DegradedDataError(f"indexes unavailable for {db}.{coll}")
        return self.indexes.get((db, coll), ["_id_"])

    def sample_documents(self, db: str, coll: str, size: int, randomized: bool = True) -> List[Mapping]:
        with self._lock:
            self.sample_calls.append((db, coll, size, randomized))
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get((db, coll), self.sample_delay)
            if delay:
                time.sleep(delay)
            if (db, coll) in self.failing_samples:
                raise TimeoutError(f"sampling {db}.{coll} timed out")
            if randomized and (db, coll) in self.failing_random:
                raise RuntimeError("$sample is not supported")
            return list(self.data[db][coll][:size])
        finally:
            with self._lock:
                self.in_flight -= 1

    def database_size_bytes(self, db: str) -> int:
        if db in self.failing_sizes:
            raise DegradedDataError(f"dbStats failed for {db}")
        return self.sizes.get(db, 4096)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_source():
    """Build a FakeDocumentSource from {db: {collection: [documents]}}."""
    def _make(data: Dict[str, Dict[str, List[Mapping]]], cluster_name: Optional[str] = None) -> FakeDocumentSource:
        if cluster_name is None:
            return FakeDocumentSource(data)
        return FakeDocumentSource(data, cluster_name=cluster_name)
    return _make


@pytest.fixture
def scan_options() -> ScanOptions:
    return ScanOptions(uri="mongodb://fake", timeout_seconds=30, max_docs=1000, concurrency=3)


@pytest.fixture
def user_documents() -> List[dict]:
    """A small users collection with an optional, type-drifting field."""
    return [
        {"_id": 1, "email": "a@example.com", "address": {"city": "Pune", "zip": "411001"}, "tags": ["x"]},
        {"_id": 2, "email": "b@example.com", "address": {"city": "Delhi"}, "tags": []},
        {"_id": 3, "email": "c@example.com", "age": 31},
        {"_id": 4, "email": "d@example.com", "age": "unknown"},
    ]


@pytest.fixture
def clean_config(monkeypatch):
    """Reset the config singleton and clear scanner-related env vars."""
    for name in (
        "MONGO_URI", "MONGO_CONNECT_TIMEOUT_MS", "SCAN_TIMEOUT_SECONDS", "SCAN_MAX_DOCS",
        "SCAN_CONCURRENCY", "SCAN_DB_FILTER", "SCAN_OUTPUT", "LOG_LEVEL", "SCAN_VERBOSE",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()
