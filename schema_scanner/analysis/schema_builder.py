# ==============================================
# SchemaBuilder
# ==============================================
#
# PURPOSE:
#   Turn the flat path → FieldStats mapping produced by the
#   FieldAnalyzer into a nested Field tree, and score how
#   consistent the collection's schema is.
#
# RULES:
# ------
#   - Type frequency  = type count / path observations * 100
#   - Presence        = path occurrences / sampled documents * 100
#     Both rounded to 2 decimals, half-up.
#   - Inferred type   = top type if its frequency > 75, else "mixed"
#   - Top-level       = paths without "." ("tags[]" is top-level)
#   - Children        = direct sub-paths, only for fields seen as objects
#   - Ordering        = "_id" first, then alphabetical; children alphabetical
#   - Confidence      = mean(top freq/100 * presence/100) * 100
#   - Rare fields     = top-level presence < 5%
#
# ==============================================

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Mapping

from .field_stats import FieldStats
from .models import CollectionAnalysis, Field, TypeFrequency
from .type_classifier import OBJECT

ID_FIELD = "_id"
MIXED = "mixed"
UNKNOWN = "unknown"

DOMINANT_TYPE_THRESHOLD = 75.0
RARE_FIELD_THRESHOLD = 5.0

_TWO_PLACES = Decimal("0.01")


def round_half_up(value) -> float:
    """
    Round to 2 decimals, half away from zero.

    Examples:
        round_half_up(2.675) → 2.68   (round() gives 2.67)
        round_half_up(Decimal("12.345")) → 12.35
    """
    if not isinstance(value, Decimal):
        value = Decimal(repr(value))
    return float(value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def percent(part: int, whole: int) -> float:
    """part / whole * 100, computed exactly and rounded half-up."""
    if whole <= 0:
        return 0.0
    return round_half_up(Decimal(part) * 100 / Decimal(whole))


class SchemaBuilder:
    """
    Builds the Field tree for one collection's sample.
    """

    def __init__(self, stats: Mapping[str, FieldStats], total_documents: int):
        self.stats = stats
        self.total_documents = total_documents

    def build(self) -> CollectionAnalysis:
        if self.total_documents == 0 or not self.stats:
            return CollectionAnalysis()

        fields = [
            self._build_field(path, path, stat)
            for path, stat in self.stats.items()
            if "." not in path
        ]
        fields.sort(key=lambda f: (f.path != ID_FIELD, f.path))

        rare_fields = [f.path for f in fields if f.presence_percent < RARE_FIELD_THRESHOLD]

        return CollectionAnalysis(
            fields=fields,
            schema_confidence=self.schema_confidence(fields),
            rare_fields=rare_fields,
        )

    def _build_field(self, full_path: str, relative_path: str, stat: FieldStats) -> Field:
        types = self.type_distribution(stat)

        field = Field(
            path=relative_path,
            types=types,
            inferred_type=self.infer_type(types),
            presence_percent=percent(stat.occurrences, self.total_documents),
        )

        if OBJECT in stat.type_counts:
            field.nested_fields = self._build_children(full_path)

        return field

    def _build_children(self, parent_path: str) -> List[Field]:
        prefix = parent_path + "."
        children = []

        for path, stat in self.stats.items():
            if not path.startswith(prefix):
                continue
            remaining = path[len(prefix):]
            # Deeper descendants attach through their own parent
            if "." in remaining:
                continue
            children.append(self._build_field(path, remaining, stat))

        children.sort(key=lambda f: f.path)
        return children

    @staticmethod
    def type_distribution(stat: FieldStats) -> List[TypeFrequency]:
        """
        Frequency of each observed type, most frequent first.

        Ties keep first-seen order.
        """
        observations = stat.observations
        types = [
            TypeFrequency(type=tag, frequency_percent=percent(count, observations))
            for tag, count in stat.type_counts.items()
        ]
        types.sort(key=lambda t: -t.frequency_percent)
        return types

    @staticmethod
    def infer_type(types: List[TypeFrequency]) -> str:
        if not types:
            return UNKNOWN
        if types[0].frequency_percent > DOMINANT_TYPE_THRESHOLD:
            return types[0].type
        return MIXED

    @staticmethod
    def schema_confidence(fields: List[Field]) -> float:
        """
        Mean of (dominant type share * presence share) over top-level fields,
        as a percentage.

        A field present everywhere with one type contributes 1.0; a rare,
        inconsistently typed field contributes close to 0.
        """
        if not fields:
            return 0.0

        total = Decimal(0)
        for field in fields:
            if not field.types:
                continue
            type_share = Decimal(repr(field.types[0].frequency_percent)) / 100
            presence_share = Decimal(repr(field.presence_percent)) / 100
            total += type_share * presence_share

        return round_half_up(total / len(fields) * 100)


def build_schema(stats: Dict[str, FieldStats], total_documents: int) -> CollectionAnalysis:
    """
    Build the Field tree, confidence score and rare-field list.

    Args:
        stats: path → FieldStats from FieldAnalyzer
        total_documents: Number of documents in the sample

    Returns:
        CollectionAnalysis for the sample
    """
    return SchemaBuilder(stats, total_documents).build()
