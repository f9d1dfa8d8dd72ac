# ==============================================
# FieldStats
# ==============================================
#
# PURPOSE:
#   Data class that holds all observed statistics for a single
#   dotted field path within one collection's sample. This is the
#   "evidence" the schema builder turns into a Field tree.
#
# CLASS: FieldStats (dataclass)
# -----------------------------
#   Attributes:
#   -----------
#   - name: str                     → Full dotted path ("address.city", "tags[]")
#   - occurrences: int              → How many sampled documents contain the path
#   - type_counts: dict[str, int]   → {"int32": 45, "string": 3, "null": 2}
#   - is_object: bool               → Seen at least once as an embedded document
#   - is_array: bool                → Seen at least once as an array
#
#   Computed Properties:
#   --------------------
#   - observations -> int
#       Sum of all type counts. Equals occurrences for plain fields;
#       larger for array element paths, which count every element.
#
#   - dominant_type -> str | None
#       The most frequently observed type tag.
#
#   Methods:
#   --------
#   - record_type(detected_type: str) -> None
#   - record_occurrence() -> None
#   - to_dict() / from_dict()
#
# ==============================================

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .type_classifier import ARRAY, OBJECT


@dataclass
class FieldStats:
    """
    Holds observed statistics for one field path across a sample.
    """

    name: str
    occurrences: int = 0
    type_counts: Dict[str, int] = field(default_factory=dict)
    is_object: bool = False
    is_array: bool = False

    def record_type(self, detected_type: str) -> None:
        """
        Count one observed value of the given type.

        Args:
            detected_type: The classified tag (e.g. "int32", "object")
        """
        self.type_counts[detected_type] = self.type_counts.get(detected_type, 0) + 1

        if detected_type == OBJECT:
            self.is_object = True
        elif detected_type == ARRAY:
            self.is_array = True

    def record_occurrence(self) -> None:
        """Count one document that contains this path."""
        self.occurrences += 1

    @property
    def observations(self) -> int:
        return sum(self.type_counts.values())

    @property
    def dominant_type(self) -> Optional[str]:
        if not self.type_counts:
            return None
        return max(self.type_counts, key=self.type_counts.get)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "occurrences": self.occurrences,
            "type_counts": dict(self.type_counts),
            "is_object": self.is_object,
            "is_array": self.is_array,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldStats":
        return cls(
            name=data["name"],
            occurrences=data.get("occurrences", 0),
            type_counts=dict(data.get("type_counts", {})),
            is_object=data.get("is_object", False),
            is_array=data.get("is_array", False),
        )
