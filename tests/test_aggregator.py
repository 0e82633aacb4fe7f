from pathlib import Path

from swagger2blocks.aggregator import ModelAggregator
from swagger2blocks.config import GeneratorConfig
from swagger2blocks.model.catalog import UNKNOWN_TYPE
from swagger2blocks.registry import SourceRegistry, regenerate

FIXTURES = Path(__file__).parent / "fixtures"
WIDGETS = str(FIXTURES / "widgets.yaml")
PETS = str(FIXTURES / "petstore_v2.json")


def _aggregator() -> ModelAggregator:
    registry = SourceRegistry()
    registry.register_location("widgets", WIDGETS)
    registry.register_location("broken", "/does/not/exist.yaml")
    registry.register_location("pets", PETS)
    return ModelAggregator(registry)


class TestActions:
    def test_all_sources_in_order(self):
        actions = _aggregator().actions()
        assert [k for k, _ in actions] == ["widgets"] * 4 + ["pets"] * 3

    def test_single_source(self):
        actions = _aggregator().actions("pets")
        assert [(a.verb, a.route) for _, a in actions] == [
            ("GET", "/pet/{petId}"),
            ("POST", "/pet/{petId}"),
            ("PUT", "/pet"),
        ]

    def test_unknown_key_is_empty(self):
        agg = _aggregator()
        assert agg.actions("broken") == []
        assert agg.types("nope") == []


class TestTypes:
    def test_types_include_referenced_primitives_only(self):
        names = [t.identifier for _, t in _aggregator().types("widgets")]
        assert "Widget" in names and "Assembly" in names
        assert "string" in names and "array" in names and "number" in names
        assert UNKNOWN_TYPE.identifier in names
        assert "boolean" not in names
        assert "file" not in names

    def test_composite_types(self):
        composite = _aggregator().composite_types()
        assert [(k, t.identifier) for k, t in composite] == [
            ("widgets", "Assembly"),
            ("widgets", "Widget"),
            ("pets", "Pet"),
            ("pets", "Category"),
        ]

    def test_sites(self):
        assert _aggregator().sites() == [
            ("widgets", "http://localhost:5000/api"),
            ("pets", "https://petstore.example.com/v2"),
        ]


class TestSnapshot:
    def test_keys_and_failures(self):
        snap = _aggregator().snapshot()
        assert snap.keys == ["widgets", "pets"]
        assert snap.failed_keys == ["broken"]

    def test_cyclic_types_serialize(self):
        snap = _aggregator().snapshot("widgets")
        assembly = [t for t in snap.types if t.identifier == "Assembly"][0]
        assert {p.name: p.type for p in assembly.properties} == {
            "main": "Widget",
            "parent": "Assembly",
            "parts": "array",
            "extra": "__unknown__",
        }
        assert '"parent"' in snap.model_dump_json()

    def test_empty_registry_is_valid(self):
        snap = ModelAggregator(SourceRegistry()).snapshot()
        assert snap.keys == []
        assert snap.actions == []
        assert snap.types == []

    def test_regeneration_is_idempotent(self):
        config = GeneratorConfig(sources={"widgets": WIDGETS, "pets": PETS})
        first = ModelAggregator(regenerate(config)).snapshot()
        second = ModelAggregator(regenerate(config)).snapshot()
        assert first.model_dump() == second.model_dump()
