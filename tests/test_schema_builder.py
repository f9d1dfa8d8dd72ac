# ==============================================
# Tests for SchemaBuilder
# ==============================================

from schema_scanner.analysis import analyze_documents
from schema_scanner.analysis.field_stats import FieldStats
from schema_scanner.analysis.schema_builder import (
    SchemaBuilder,
    build_schema,
    percent,
    round_half_up,
)


def _by_path(fields):
    return {f.path: f for f in fields}


class TestRounding:
    def test_round_half_up(self):
        assert round_half_up(2.675) == 2.68
        assert round_half_up(0.125) == 0.13
        assert round_half_up(33.333333) == 33.33

    def test_percent(self):
        assert percent(1, 3) == 33.33
        assert percent(2, 3) == 66.67
        assert percent(1, 8) == 12.5
        assert percent(5, 0) == 0.0


class TestTypeDistribution:
    def test_nine_ints_one_string(self):
        documents = [{"a": i} for i in range(9)] + [{"a": "ten"}]
        analysis = analyze_documents(documents)
        field = _by_path(analysis.fields)["a"]

        assert [(t.type, t.frequency_percent) for t in field.types] == [("int32", 90.0), ("string", 10.0)]
        assert field.inferred_type == "int32"

    def test_exactly_75_percent_is_mixed(self):
        documents = [{"a": 1}, {"a": 2}, {"a": 3}, {"a": "x"}]
        field = _by_path(analyze_documents(documents).fields)["a"]

        assert field.types[0].frequency_percent == 75.0
        assert field.inferred_type == "mixed"

    def test_frequencies_sum_to_100(self):
        documents = [{"a": 1}, {"a": "x"}, {"a": None}]
        field = _by_path(analyze_documents(documents).fields)["a"]

        total = sum(t.frequency_percent for t in field.types)
        assert abs(total - 100.0) <= 0.02

    def test_ties_keep_first_seen_order(self):
        stat = FieldStats(name="a", occurrences=2, type_counts={"string": 1, "int32": 1})
        types = SchemaBuilder.type_distribution(stat)
        assert [t.type for t in types] == ["string", "int32"]

    def test_no_types_is_unknown(self):
        assert SchemaBuilder.infer_type([]) == "unknown"


class TestPresence:
    def test_presence_matches_occurrence_ratio(self):
        documents = [{"a": 1, "b": 1}, {"a": 1}, {"a": 1}]
        fields = _by_path(analyze_documents(documents).fields)

        assert fields["a"].presence_percent == 100.0
        assert fields["b"].presence_percent == 33.33

    def test_presence_of_array_elements_stays_within_bounds(self):
        documents = [{"tags": [1, 2, 3, 4]}, {"tags": ["x"]}]
        fields = _by_path(analyze_documents(documents).fields)

        assert 0.0 <= fields["tags[]"].presence_percent <= 100.0
        assert fields["tags[]"].presence_percent == 100.0
        assert fields["tags"].types[0].type == "array"


class TestNesting:
    def test_child_attached_to_object_parent(self):
        analysis = analyze_documents([{"a": {"b": 1}}] * 4)

        assert [f.path for f in analysis.fields] == ["a"]
        parent = analysis.fields[0]
        assert parent.inferred_type == "object"
        assert [child.path for child in parent.nested_fields] == ["b"]
        assert parent.nested_fields[0].inferred_type == "int32"

    def test_grandchildren_attach_through_their_parent(self):
        analysis = analyze_documents([{"a": {"b": {"c": 1}, "z": 2}}])
        parent = analysis.fields[0]

        assert [child.path for child in parent.nested_fields] == ["b", "z"]
        middle = parent.nested_fields[0]
        assert [child.path for child in middle.nested_fields] == ["c"]
        assert parent.nested_fields[1].nested_fields is None

    def test_no_children_without_object_type(self):
        stats = {
            "a": FieldStats(name="a", occurrences=1, type_counts={"string": 1}),
            "a.b": FieldStats(name="a.b", occurrences=1, type_counts={"int32": 1}),
        }
        analysis = build_schema(stats, 1)

        assert [f.path for f in analysis.fields] == ["a"]
        assert analysis.fields[0].nested_fields is None

    def test_array_of_objects_children_hang_off_element_path(self):
        documents = [{"items": [{"sku": "a", "qty": 1}]}, {"items": [{"sku": "b"}]}]
        fields = _by_path(analyze_documents(documents).fields)

        assert fields["items"].nested_fields is None
        element = fields["items[]"]
        assert element.inferred_type == "object"
        children = _by_path(element.nested_fields)
        assert children["sku"].presence_percent == 100.0
        assert children["qty"].presence_percent == 50.0

    def test_nested_fields_sorted_alphabetically(self):
        analysis = analyze_documents([{"a": {"_z": 1, "b": 1, "_id": 1}}])
        assert [child.path for child in analysis.fields[0].nested_fields] == ["_id", "_z", "b"]


class TestOrdering:
    def test_id_sorts_first(self):
        analysis = analyze_documents([{"zeta": 1, "_id": 1, "_a": 1, "alpha": 1, "Beta": 1}])
        assert [f.path for f in analysis.fields] == ["_id", "Beta", "_a", "alpha", "zeta"]

    def test_alphabetical_without_id(self):
        analysis = analyze_documents([{"b": 1, "a": 1, "c": 1}])
        assert [f.path for f in analysis.fields] == ["a", "b", "c"]


class TestConfidence:
    def test_consistent_schema_scores_100(self):
        analysis = analyze_documents([{"_id": i, "name": "n"} for i in range(5)])
        assert analysis.schema_confidence == 100.0

    def test_partial_presence_lowers_confidence(self):
        analysis = analyze_documents([{"a": 1, "b": 1}, {"a": 2}])
        # a contributes 1.0, b contributes 0.5
        assert analysis.schema_confidence == 75.0

    def test_mixed_types_lower_confidence(self):
        analysis = analyze_documents([{"a": 1}, {"a": "x"}])
        assert analysis.schema_confidence == 50.0

    def test_empty_sample(self):
        analysis = analyze_documents([])
        assert analysis.fields == []
        assert analysis.schema_confidence == 0.0
        assert analysis.rare_fields == []

    def test_empty_field_list(self):
        assert SchemaBuilder.schema_confidence([]) == 0.0


class TestRareFields:
    def test_fields_under_five_percent_are_flagged(self):
        documents = [{"a": 1} for _ in range(100)]
        documents[0]["rare"] = True
        for doc in documents[:5]:
            doc["edge"] = 1

        analysis = analyze_documents(documents)

        assert analysis.rare_fields == ["rare"]
        # Flagged fields stay in the tree
        assert "rare" in _by_path(analysis.fields)
        assert _by_path(analysis.fields)["edge"].presence_percent == 5.0
