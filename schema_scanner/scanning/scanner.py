# ==============================================
# Scanner — Scan Orchestrator
# ==============================================
#
# PURPOSE:
#   Walk a cluster: list databases, fan out one worker per
#   database, and inside each database fan out one worker per
#   collection. Every collection worker samples documents and
#   runs the analyzer on its own private stats.
#
# FLOW:
# -----
#   scan_all()
#     ├── list_databases()               ConnectivityError → abort
#     ├── drop system DBs, apply filter
#     └── per database (bounded)         scan_database()
#           ├── database_size_bytes()    degraded → 0
#           ├── list_collections()       failure → database dropped
#           └── per collection (bounded) scan_collection()
#                 ├── estimated_count()  degraded → cap-sized sample
#                 ├── plan_sample_size()
#                 ├── list_index_names() degraded → []
#                 ├── sample_documents() random, fallback first N
#                 └── analyze_documents()
#
# Failed databases and collections are logged, left out of the
# result and listed in failed_databases / failed_collections.
#
# ==============================================

import logging
import re
from datetime import datetime, timezone
from functools import partial
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple

import bson
from bson.errors import InvalidDocument
from pymongo.errors import PyMongoError

from ..analysis import analyze_documents
from ..analysis.models import Collection, Database, SamplingMethod, ScanResult
from ..config import ScanOptions
from ..errors import DegradedDataError, ScanTimeoutError
from ..storage import DocumentSource, MongoDocumentSource
from .deadline import Deadline
from .fan_out import BoundedFanOut
from .sampling import plan_sample_size

logger = logging.getLogger(__name__)

SYSTEM_DATABASES = frozenset({"admin", "local", "config"})
INTERNAL_COLLECTION_PREFIX = "_"


def encoded_size(document: Mapping) -> int:
    """BSON size of a decoded document, 0 if it cannot be re-encoded."""
    raw = getattr(document, "raw", None)
    if raw is not None:
        return len(raw)
    try:
        return len(bson.encode(document))
    except (InvalidDocument, TypeError, ValueError):
        return 0


def average_document_size(documents: List[Mapping]) -> int:
    if not documents:
        return 0
    return sum(encoded_size(doc) for doc in documents) // len(documents)


class Scanner:
    """
    Scans every reachable database and collection of one cluster.
    """

    def __init__(self, source: DocumentSource, options: ScanOptions):
        self.source = source
        self.options = options
        self._databases = BoundedFanOut(options.concurrency, name="db")
        self._collections = BoundedFanOut(options.concurrency, name="coll")
        self._deadline: Optional[Deadline] = None

    # ======================================
    # Cluster level
    # ======================================
    def scan_all(self) -> ScanResult:
        """
        Scan all accessible databases.

        Returns:
            ScanResult holding the databases that were scanned successfully

        Raises:
            ConnectivityError: The databases could not be listed
        """
        self._deadline = Deadline(self.options.timeout_seconds)
        scan_timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

        with self._deadline.scope("cluster"):
            database_names = self.source.list_databases()

        database_names = self.filter_databases(database_names)
        logger.info("Found %d databases to scan", len(database_names))

        outcome = self._databases.run(
            database_names,
            self.scan_database,
            label=lambda name: f"database {name}",
        )

        result = ScanResult(
            cluster_name=self.source.cluster_name,
            scan_timestamp=scan_timestamp,
            databases=outcome.results,
            failed_databases=outcome.failures,
        )

        logger.info("Scan completed. Processed %d databases", len(result.databases))
        return result

    def filter_databases(self, names: Iterable[str]) -> List[str]:
        """
        Drop system databases, then keep names matching any filter pattern.

        With no patterns configured every non-system database is kept.
        """
        candidates = []
        for name in names:
            if name in SYSTEM_DATABASES:
                logger.debug("Skipping system database: %s", name)
                continue
            candidates.append(name)

        if not self.options.db_filter:
            return candidates

        patterns = self._compile_patterns(self.options.db_filter)

        return [name for name in candidates if any(p.search(name) for p in patterns)]

    @staticmethod
    def _compile_patterns(raw_patterns: Iterable[str]) -> List[re.Pattern]:
        patterns = []
        for raw in raw_patterns:
            try:
                patterns.append(re.compile(raw))
            except re.error as e:
                logger.warning("Invalid regex pattern %s: %s", raw, e)
        return patterns

    # ======================================
    # Database level
    # ======================================
    def scan_database(self, db_name: str) -> Database:
        logger.info("Scanning database: %s", db_name)

        size_bytes = self._best_effort(
            f"stats for database {db_name}",
            self.source.database_size_bytes,
            db_name,
            default=0,
        )

        with self._require_deadline().scope(db_name):
            collection_names = self.source.list_collections(db_name)

        collection_names = [
            name for name in collection_names
            if not name.startswith(INTERNAL_COLLECTION_PREFIX)
        ]
        logger.debug("Found %d collections in %s", len(collection_names), db_name)

        outcome = self._collections.run(
            collection_names,
            partial(self.scan_collection, db_name),
            label=lambda name: f"collection {db_name}.{name}",
        )

        return Database(
            name=db_name,
            size_bytes=size_bytes,
            collections=outcome.results,
            failed_collections=outcome.failures,
        )

    # ======================================
    # Collection level
    # ======================================
    def scan_collection(self, db_name: str, collection_name: str) -> Collection:
        unit = f"{db_name}.{collection_name}"
        logger.debug("Scanning collection: %s", unit)

        document_count = self._best_effort(
            f"document count for {unit}",
            self.source.estimated_count,
            db_name,
            collection_name,
            default=None,
        )
        sample_size = plan_sample_size(document_count, self.options.max_docs)

        indexes = self._best_effort(
            f"indexes for {unit}",
            self.source.list_index_names,
            db_name,
            collection_name,
            default=[],
        )

        documents, method = self._sample(db_name, collection_name, sample_size)
        logger.debug("Sampled %d documents from %s (%s)", len(documents), unit, method.value)

        analysis = analyze_documents(documents)

        return Collection(
            name=collection_name,
            document_count=document_count or 0,
            average_doc_size_bytes=average_document_size(documents),
            indexes=list(indexes),
            fields=analysis.fields,
            sampled_documents=len(documents),
            sampling_method=method,
            schema_confidence=analysis.schema_confidence,
            rare_fields=analysis.rare_fields,
        )

    def _sample(self, db_name: str, collection_name: str, size: int) -> Tuple[List[Mapping], SamplingMethod]:
        """
        Random sample first; on failure the first `size` documents.
        """
        if size <= 0:
            return [], SamplingMethod.RANDOM

        unit = f"{db_name}.{collection_name}"
        deadline = self._require_deadline()

        try:
            with deadline.scope(unit):
                documents = self.source.sample_documents(db_name, collection_name, size)
            return list(documents), SamplingMethod.RANDOM
        except ScanTimeoutError:
            raise
        except PyMongoError as e:
            # The driver only times out when the scan deadline cut the call off
            if e.timeout:
                raise
            logger.warning("$sample failed for %s, falling back to first %d documents: %s", unit, size, e)
        except Exception as e:
            logger.warning("$sample failed for %s, falling back to first %d documents: %s", unit, size, e)

        with deadline.scope(unit):
            documents = self.source.sample_documents(db_name, collection_name, size, randomized=False)
        return list(documents), SamplingMethod.FIRST_N

    # ======================================
    # Helpers
    # ======================================
    def _best_effort(self, what: str, call: Callable[..., Any], *args: Any, default: Any) -> Any:
        """
        Run a non-critical source call. Degraded failures are logged and
        replaced by `default`; an expired deadline still fails the unit.
        """
        try:
            with self._require_deadline().scope(what):
                return call(*args)
        except ScanTimeoutError:
            raise
        except (DegradedDataError, PyMongoError) as e:
            logger.warning("Could not get %s: %s", what, e)
            return default

    def _require_deadline(self) -> Deadline:
        # Units scanned outside scan_all() get their own deadline
        if self._deadline is None:
            self._deadline = Deadline(self.options.timeout_seconds)
        return self._deadline


def connect_timeout_ms(options: ScanOptions) -> int:
    """Connection timeout, never longer than the whole scan may take."""
    scan_budget_ms = max(1, int(options.timeout_seconds * 1000))
    return min(options.connect_timeout_ms, scan_budget_ms)


def scan(options: ScanOptions, source: Optional[DocumentSource] = None) -> ScanResult:
    """
    Scan a cluster and return its inferred schema.

    Args:
        options: Scan options; options.uri is only used when no source is given
        source: Optional ready document source. When omitted a
                MongoDocumentSource is opened from options.uri and
                closed afterwards.

    Returns:
        ScanResult owned by the caller

    Raises:
        ConnectivityError: The cluster could not be reached
    """
    if source is not None:
        return Scanner(source, options).scan_all()

    with MongoDocumentSource(options.uri, connect_timeout_ms=connect_timeout_ms(options)) as mongo_source:
        return Scanner(mongo_source, options).scan_all()
