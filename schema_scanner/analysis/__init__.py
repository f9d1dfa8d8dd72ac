# ==============================================
# ANALYSIS: SCHEMA INFERENCE
# ==============================================
#
# This package turns a sample of documents into a schema.
#
# Two-step process:
#   Step 1 (Aggregation): Walk documents → build statistics per dotted path
#   Step 2 (Building):    Apply rules on stats → nested Field tree + confidence
#
# Modules:
# --------
# - type_classifier.py  → Map a decoded value to a BSON type tag
# - field_stats.py      → Data class holding statistics for one path
# - field_analyzer.py   → Observe documents, accumulate stats per path
# - schema_builder.py   → Build the Field tree, confidence, rare fields
# - models.py           → Output data classes (Field, Collection, ScanResult...)
#
# ==============================================

from typing import Iterable, Mapping

from .type_classifier import TypeClassifier, classify
from .field_stats import FieldStats
from .field_analyzer import FieldAnalyzer
from .schema_builder import SchemaBuilder, build_schema
from .models import (
    CollectionAnalysis,
    Collection,
    Database,
    Field,
    SamplingMethod,
    ScanResult,
    TypeFrequency,
)


def analyze_documents(documents: Iterable[Mapping]) -> CollectionAnalysis:
    """Aggregate field stats for a sample and build its schema."""
    analyzer = FieldAnalyzer()
    stats = analyzer.analyze_batch(documents)
    return build_schema(stats, analyzer.total_documents)


__all__ = [
    "TypeClassifier",
    "classify",
    "FieldStats",
    "FieldAnalyzer",
    "SchemaBuilder",
    "build_schema",
    "analyze_documents",
    "CollectionAnalysis",
    "Collection",
    "Database",
    "Field",
    "SamplingMethod",
    "ScanResult",
    "TypeFrequency",
]
