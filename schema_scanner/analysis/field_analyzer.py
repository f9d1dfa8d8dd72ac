# ==============================================
# FieldAnalyzer
# ==============================================
#
# PURPOSE:
#   Observe a batch of sampled documents and accumulate per-path
#   statistics (FieldStats). This is the "observation engine" for
#   one collection's analysis.
#
# CLASS: FieldAnalyzer
# --------------------
#   Stateful — accumulates FieldStats across analyze_batch() calls.
#   One instance belongs to one collection worker, so no locking.
#
#   Attributes:
#   -----------
#   - stats: dict[str, FieldStats]  → All accumulated path stats
#   - total_documents: int          → Total documents observed
#
#   Methods:
#   --------
#   - analyze_batch(documents: list[dict]) -> dict[str, FieldStats]
#       Walk every document. For each key:
#         1. Build the dotted path ("address" + "city" → "address.city")
#         2. Classify the value and record it on that path
#         3. Recurse into embedded documents with the path as prefix
#         4. For arrays, record every element on "<path>[]" and recurse
#            into object elements with "<path>[]" as prefix
#
#   - get_stats() -> dict[str, FieldStats]
#   - get_presence_ratio(path: str) -> float
#   - get_field_count() -> int
#   - reset() -> None
#
# ==============================================

from collections.abc import Mapping
from typing import Any, Dict, Iterable, Set

from .field_stats import FieldStats
from .type_classifier import ARRAY, OBJECT, TypeClassifier

ARRAY_MARKER = "[]"


class FieldAnalyzer:
    """
    Observes sampled documents and accumulates field path statistics.
    """

    def __init__(self, classifier: TypeClassifier = None):
        """
        Args:
            classifier: Optional TypeClassifier. If not provided, the
                        default one is used.
        """
        self.classifier = classifier or TypeClassifier()
        self.stats: Dict[str, FieldStats] = {}  # dotted path → FieldStats
        self.total_documents: int = 0

    def analyze_batch(self, documents: Iterable[Mapping]) -> Dict[str, FieldStats]:
        """
        Analyze a batch of documents and accumulate statistics.

        Args:
            documents: Decoded documents (dicts or other mappings)

        Returns:
            The accumulated path → FieldStats mapping
        """
        for document in documents:
            # Paths already counted for this document
            seen: Set[str] = set()
            self._walk_document(document, "", seen)
            self.total_documents += 1

        return self.stats

    def _walk_document(self, document: Mapping, prefix: str, seen: Set[str]) -> None:
        for key, value in document.items():
            path = self._flatten_key(prefix, str(key))
            detected_type = self._observe(path, value, seen)

            if detected_type == OBJECT:
                self._walk_document(value, path, seen)
            elif detected_type == ARRAY:
                self._walk_array(value, path, seen)

    def _walk_array(self, values: Iterable[Any], path: str, seen: Set[str]) -> None:
        """
        Record every element of an array under the derived "<path>[]" path.

        Examples:
            {"tags": [1, "x"]} → "tags[]" gets one int32 and one string
            {"items": [{"sku": "a"}]} → "items[]" (object) and "items[].sku"
        """
        element_path = path + ARRAY_MARKER

        for element in values:
            detected_type = self._observe(element_path, element, seen)

            # Nested arrays are recorded as "array" only
            if detected_type == OBJECT:
                self._walk_document(element, element_path, seen)

    def _observe(self, path: str, value: Any, seen: Set[str]) -> str:
        detected_type = self.classifier.classify(value)

        if path not in self.stats:
            self.stats[path] = FieldStats(name=path)

        stat = self.stats[path]
        stat.record_type(detected_type)

        if path not in seen:
            stat.record_occurrence()
            seen.add(path)

        return detected_type

    @staticmethod
    def _flatten_key(prefix: str, key: str) -> str:
        """
        Examples:
            _flatten_key("", "username") → "username"
            _flatten_key("address", "city") → "address.city"
            _flatten_key("items[]", "sku") → "items[].sku"
        """
        if not prefix:
            return key
        return f"{prefix}.{key}"

    def get_stats(self) -> Dict[str, FieldStats]:
        return self.stats

    def get_presence_ratio(self, path: str) -> float:
        """
        Presence ratio = (documents containing the path) / (documents analyzed).

        Returns:
            A float between 0.0 and 1.0
        """
        if self.total_documents == 0 or path not in self.stats:
            return 0.0
        return self.stats[path].occurrences / self.total_documents

    def get_field_count(self) -> int:
        return len(self.stats)

    def reset(self) -> None:
        """Clear all accumulated statistics and the document count."""
        self.stats = {}
        self.total_documents = 0
