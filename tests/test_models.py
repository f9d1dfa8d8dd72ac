# ==============================================
# Tests for Schema Models
# ==============================================

from schema_scanner.analysis import analyze_documents
from schema_scanner.analysis.models import (
    Collection,
    Database,
    Field,
    SamplingMethod,
    ScanResult,
    TypeFrequency,
)


def _field(path, nested=None):
    return Field(
        path=path,
        types=[TypeFrequency("object" if nested else "string", 100.0)],
        inferred_type="object" if nested else "string",
        presence_percent=100.0,
        nested_fields=nested,
    )


class TestField:
    def test_nested_fields_omitted_when_absent(self):
        assert "nested_fields" not in _field("name").to_dict()

    def test_nested_fields_serialized(self):
        data = _field("address", nested=[_field("city")]).to_dict()
        assert data["nested_fields"][0]["path"] == "city"

    def test_empty_object_keeps_empty_child_list(self):
        empty = _field("meta", nested=[])
        data = empty.to_dict()

        assert data["nested_fields"] == []
        assert Field.from_dict(data).nested_fields == []

    def test_object_only_seen_empty_round_trips(self):
        analysis = analyze_documents([{"meta": {}}])
        meta = analysis.fields[0]

        assert meta.nested_fields == []
        assert Field.from_dict(meta.to_dict()) == meta

    def test_count_fields_includes_descendants(self):
        tree = _field("a", nested=[_field("b", nested=[_field("c")]), _field("d")])
        assert tree.count_fields() == 4


class TestScanResult:
    def test_summary_counts(self):
        users = Collection(name="users", fields=[_field("_id"), _field("address", nested=[_field("city")])])
        logs = Collection(name="logs", fields=[_field("msg")], sampling_method=SamplingMethod.FIRST_N)
        result = ScanResult(
            cluster_name="c0",
            scan_timestamp="2024-01-15T10:30:00Z",
            databases=[Database(name="app", collections=[users, logs], failed_collections=["events"])],
            failed_databases=["broken"],
        )

        summary = result.summary()

        assert summary == {
            "cluster": "c0",
            "databases": 1,
            "collections": 2,
            "fields": 4,
            "failed_databases": 1,
            "failed_collections": 1,
            "sampling_methods": {"random": 1, "first_n": 1},
        }
        assert not result.is_complete

    def test_from_dict_restores_enum_and_tree(self):
        collection = Collection(
            name="users",
            fields=[_field("address", nested=[_field("city")])],
            sampling_method=SamplingMethod.FIRST_N,
        )
        result = ScanResult("c0", "2024-01-15T10:30:00Z", databases=[Database(name="app", collections=[collection])])

        restored = ScanResult.from_dict(result.to_dict())

        assert restored == result
        assert restored.databases[0].collections[0].sampling_method is SamplingMethod.FIRST_N
