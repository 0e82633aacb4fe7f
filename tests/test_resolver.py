import logging

from swagger2blocks.model.catalog import UNKNOWN_TYPE, TypeCatalog
from swagger2blocks.model.resolver import build_catalog, declare_schemas, resolve_properties, resolve_ref
from swagger2blocks.parser.base import PropertyDecl, SchemaDecl, TypeRef


def _schema(name, /, **props):
    return SchemaDecl(
        identifier=name,
        name=name,
        properties=[PropertyDecl(name=k, type_ref=v) for k, v in props.items()],
    )


class TestTwoPasses:
    def test_pass_one_leaves_properties_unresolved(self):
        catalog = TypeCatalog()
        declare_schemas(catalog, [_schema("Widget", id=TypeRef(type="string"))])
        assert catalog.find("Widget").properties[0].property_type is None

        resolve_properties(catalog)
        assert catalog.find("Widget").properties[0].property_type is catalog.find("string")

    def test_forward_reference(self):
        catalog = build_catalog([
            _schema("A", b=TypeRef(ref="B")),
            _schema("B", name=TypeRef(type="string")),
        ])
        a, b = catalog.find("A"), catalog.find("B")
        assert a.properties[0].property_type is b

    def test_self_and_mutual_references(self):
        catalog = build_catalog([
            _schema("Node", next=TypeRef(ref="Node"), tree=TypeRef(ref="Tree")),
            _schema("Tree", root=TypeRef(ref="Node")),
        ])
        node, tree = catalog.find("Node"), catalog.find("Tree")
        assert node.get_property("next").property_type is node
        assert node.get_property("tree").property_type is tree
        assert tree.get_property("root").property_type is node

    def test_unresolvable_property_gets_sentinel(self):
        catalog = build_catalog([
            _schema("W", missing=TypeRef(ref="Gone"), odd=TypeRef(type="decimal"), bare=TypeRef()),
        ])
        for prop in catalog.find("W").properties:
            assert prop.property_type is UNKNOWN_TYPE

    def test_reference_beats_primitive(self):
        catalog = build_catalog([_schema("W", w=TypeRef(ref="W", type="object"))])
        assert catalog.find("W").properties[0].property_type is catalog.find("W")

    def test_duplicate_schema_first_wins(self):
        catalog = build_catalog([
            _schema("W", a=TypeRef(type="string")),
            _schema("W", b=TypeRef(type="integer")),
        ])
        assert [p.name for p in catalog.find("W").properties] == ["a"]

    def test_schema_named_like_primitive_is_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="swagger2blocks.model.resolver")
        catalog = build_catalog([_schema("file", name=TypeRef(type="string"))])
        assert catalog.find("file").is_primitive
        assert catalog.find("file").properties == []
        assert "schema file shadows a built-in type" in caplog.text

    def test_schema_named_like_sentinel_does_not_touch_it(self):
        build_catalog([SchemaDecl(identifier="__unknown__", name="x", properties=[PropertyDecl(name="p")])])
        assert UNKNOWN_TYPE.properties == []


class TestResolveRef:
    def test_none_is_sentinel(self):
        assert resolve_ref(TypeCatalog(), None) is UNKNOWN_TYPE

    def test_primitive(self):
        catalog = TypeCatalog()
        assert resolve_ref(catalog, TypeRef(type="integer")) is catalog.find("integer")
