# ==============================================
# Schema Models (Data Classes)
# ==============================================
#
# PURPOSE:
#   Data classes that represent the OUTPUT of a scan. The analyzer
#   produces Field trees, the scanner wraps them into Collection,
#   Database and ScanResult entities, and the exporter serializes
#   the ScanResult with to_dict().
#
# CLASSES:
# --------
# - TypeFrequency   → One (type tag, frequency percent) pair
# - Field           → One field with its type distribution and children
# - CollectionAnalysis → Field tree + confidence + rare fields (transient)
# - Collection      → One scanned collection
# - Database        → One scanned database
# - ScanResult      → Root aggregate for one scan
#
# SamplingMethod(Enum): RANDOM, FIRST_N
#     How a collection's sample was retrieved.
#
# Nothing here is mutated once handed to its parent.
#
# ==============================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class SamplingMethod(Enum):
    """
    - RANDOM: documents drawn with a $sample stage
    - FIRST_N: fallback, the first N documents in natural order
    """
    RANDOM = "random"
    FIRST_N = "first_n"


@dataclass
class TypeFrequency:
    type: str
    frequency_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "frequency_percent": self.frequency_percent}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TypeFrequency":
        return cls(type=data["type"], frequency_percent=data["frequency_percent"])


@dataclass
class Field:
    """
    A field in the inferred schema.

    path is the trailing segment only once nested: the child "city"
    of "address" has path "city", not "address.city".
    """

    path: str
    types: List[TypeFrequency] = field(default_factory=list)
    inferred_type: str = "unknown"
    presence_percent: float = 0.0
    nested_fields: Optional[List["Field"]] = None  # Only for fields seen as objects

    def count_fields(self) -> int:
        """This field plus all of its descendants."""
        return 1 + sum(child.count_fields() for child in self.nested_fields or [])

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "path": self.path,
            "types": [t.to_dict() for t in self.types],
            "inferred_type": self.inferred_type,
            "presence_percent": self.presence_percent,
        }
        if self.nested_fields is not None:
            data["nested_fields"] = [child.to_dict() for child in self.nested_fields]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Field":
        nested = data.get("nested_fields")
        return cls(
            path=data["path"],
            types=[TypeFrequency.from_dict(t) for t in data.get("types", [])],
            inferred_type=data.get("inferred_type", "unknown"),
            presence_percent=data.get("presence_percent", 0.0),
            nested_fields=[cls.from_dict(child) for child in nested] if nested is not None else None,
        )


@dataclass
class CollectionAnalysis:
    """Schema of one collection's sample, before it is wrapped in a Collection."""
    fields: List[Field] = field(default_factory=list)
    schema_confidence: float = 0.0
    rare_fields: List[str] = field(default_factory=list)


@dataclass
class Collection:
    name: str
    document_count: int = 0
    average_doc_size_bytes: int = 0
    indexes: List[str] = field(default_factory=list)
    fields: List[Field] = field(default_factory=list)
    sampled_documents: int = 0
    sampling_method: SamplingMethod = SamplingMethod.RANDOM
    schema_confidence: float = 0.0
    rare_fields: List[str] = field(default_factory=list)

    def count_fields(self) -> int:
        return sum(f.count_fields() for f in self.fields)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "document_count": self.document_count,
            "average_doc_size_bytes": self.average_doc_size_bytes,
            "indexes": list(self.indexes),
            "fields": [f.to_dict() for f in self.fields],
            "sampled_documents": self.sampled_documents,
            "sampling_method": self.sampling_method.value,  # Convert enum to string
            "schema_confidence": self.schema_confidence,
            "rare_fields": list(self.rare_fields),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Collection":
        return cls(
            name=data["name"],
            document_count=data.get("document_count", 0),
            average_doc_size_bytes=data.get("average_doc_size_bytes", 0),
            indexes=list(data.get("indexes", [])),
            fields=[Field.from_dict(f) for f in data.get("fields", [])],
            sampled_documents=data.get("sampled_documents", 0),
            sampling_method=SamplingMethod(data.get("sampling_method", SamplingMethod.RANDOM.value)),
            schema_confidence=data.get("schema_confidence", 0.0),
            rare_fields=list(data.get("rare_fields", [])),
        )


@dataclass
class Database:
    name: str
    size_bytes: int = 0
    collections: List[Collection] = field(default_factory=list)
    failed_collections: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "size_bytes": self.size_bytes,
            "collections": [c.to_dict() for c in self.collections],
            "failed_collections": list(self.failed_collections),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Database":
        return cls(
            name=data["name"],
            size_bytes=data.get("size_bytes", 0),
            collections=[Collection.from_dict(c) for c in data.get("collections", [])],
            failed_collections=list(data.get("failed_collections", [])),
        )


@dataclass
class ScanResult:
    """
    Root aggregate for one scan.

    The order of databases and collections is completion order, not
    discovery order. Sort downstream if order matters.
    """

    cluster_name: str
    scan_timestamp: str
    databases: List[Database] = field(default_factory=list)
    failed_databases: List[str] = field(default_factory=list)

    def summary(self) -> Dict[str, Any]:
        """
        Counts that make partial results visible.

        Returns:
            {"cluster": ..., "databases": 3, "collections": 12, "fields": 140,
             "failed_databases": 0, "failed_collections": 1,
             "sampling_methods": {"random": 11, "first_n": 1}}
        """
        collections = [c for db in self.databases for c in db.collections]
        sampling_methods = {method.value: 0 for method in SamplingMethod}
        for collection in collections:
            sampling_methods[collection.sampling_method.value] += 1

        return {
            "cluster": self.cluster_name,
            "databases": len(self.databases),
            "collections": len(collections),
            "fields": sum(c.count_fields() for c in collections),
            "failed_databases": len(self.failed_databases),
            "failed_collections": sum(len(db.failed_collections) for db in self.databases),
            "sampling_methods": sampling_methods,
        }

    @property
    def is_complete(self) -> bool:
        """True when no database or collection was dropped."""
        summary = self.summary()
        return summary["failed_databases"] == 0 and summary["failed_collections"] == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cluster_name": self.cluster_name,
            "scan_timestamp": self.scan_timestamp,
            "databases": [db.to_dict() for db in self.databases],
            "failed_databases": list(self.failed_databases),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScanResult":
        return cls(
            cluster_name=data["cluster_name"],
            scan_timestamp=data["scan_timestamp"],
            databases=[Database.from_dict(db) for db in data.get("databases", [])],
            failed_databases=list(data.get("failed_databases", [])),
        )
