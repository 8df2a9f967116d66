from __future__ import annotations

import pytest
from swift_structure import (
    CLASS,
    CLASS_VAR,
    ENDPOINTS_SWIFT,
    ENUM,
    HANDLER,
    MODELS_SWIFT,
    PROTOCOL,
    STRUCT,
    case_node,
    endpoints_tree,
    models_tree,
    structure,
    type_node,
    var_node,
)

from parse.symbol_tree import SymbolTreeError, read_symbol_tree
from parse.type_metadata import extract_types
from utils import extract_assigned_value


def _extract(source: str, tree: dict[str, object]) -> dict:
    return extract_types(source.encode("utf-8"), read_symbol_tree(tree), path="X.swift")


def test_read_symbol_tree_accepts_json_bytes() -> None:
    tree = read_symbol_tree(
        b'{"key.substructure": [{"key.kind": "source.lang.swift.decl.struct",'
        b' "key.name": "A", "key.inheritedtypes": [{"key.name": "Codable"}]}]}'
    )

    assert len(tree.children) == 1
    assert tree.children[0].name == "A"
    assert tree.children[0].inherited_type_names == ["Codable"]


@pytest.mark.parametrize("raw", [b"not json", b"[]", b'{"key.substructure": 3}'])
def test_read_symbol_tree_rejects_invalid_documents(raw: bytes) -> None:
    with pytest.raises(SymbolTreeError):
        read_symbol_tree(raw)


def test_struct_properties_keep_declaration_order() -> None:
    types = _extract(MODELS_SWIFT, models_tree())

    user = types["User"]
    assert user.kind == "struct"
    assert user.path == "X.swift"
    assert user.inherited_types == ["Content"]
    assert [p.name for p in user.ordered_instance_properties()] == [
        "id",
        "name",
        "email",
        "status",
        "tags",
        "friends",
        "scores",
    ]
    assert user.instance_properties["email"].type == "String?"
    assert user.instance_properties["id"].default_value is None


def test_static_property_default_value_comes_from_source() -> None:
    types = _extract(MODELS_SWIFT, models_tree())

    table = types["User"].static_properties["table"]
    assert table.default_value == '"users"'
    assert table.order == 0
    assert "table" not in types["User"].instance_properties


def test_enum_cases_take_raw_values_or_names() -> None:
    types = _extract(MODELS_SWIFT, models_tree())

    status = types["UserStatus"]
    assert status.kind == "enum"
    assert [(c.name, c.value) for c in status.ordered_cases()] == [
        ("active", "active"),
        ("inactive", "INACTIVE"),
        ("banned", "banned"),
        ("suspended", "SUSPENDED"),
    ]


def test_handler_method_arguments_are_ordered() -> None:
    types = _extract(ENDPOINTS_SWIFT, endpoints_tree())

    get_user = types["GetUser"]
    assert get_user.inherited_types == ["APIRoutingEndpoint"]
    handler = get_user.static_methods[HANDLER]
    assert handler.return_type == "EventLoopFuture<User>"
    assert [(a.name, a.type) for a in handler.ordered_arguments()] == [
        ("context", "AuthenticatedContext"),
        ("parameters", "UserParameters"),
        ("query", "Void"),
        ("body", "Void"),
    ]
    assert get_user.static_properties["method"].default_value == ".get"
    assert get_user.static_properties["path"].default_value == '"/users/:id"'


def test_nested_types_are_registered_by_simple_name() -> None:
    source = """struct Outer {
    var inner: Inner
    struct Inner {
        var flag: Bool
    }
}
"""
    tree = structure(
        type_node(
            STRUCT,
            "Outer",
            [
                var_node(source, "var inner: Inner", "inner", "Inner"),
                type_node(
                    STRUCT,
                    "Inner",
                    [var_node(source, "var flag: Bool", "flag", "Bool")],
                ),
            ],
        )
    )

    types = _extract(source, tree)

    assert list(types) == ["Outer", "Inner"]
    assert list(types["Outer"].instance_properties) == ["inner"]
    assert list(types["Inner"].instance_properties) == ["flag"]


def test_unnamed_and_untyped_members_are_skipped() -> None:
    source = "struct A {\n    var x = 1\n}\n"
    tree = structure(
        type_node(
            STRUCT,
            "A",
            [
                {
                    "key.kind": "source.lang.swift.decl.var.instance",
                    "key.name": "x",
                },
                {"key.kind": "source.lang.swift.expr.call"},
            ],
        ),
        {"key.kind": "source.lang.swift.decl.struct"},
    )

    types = _extract(source, tree)

    assert list(types) == ["A"]
    assert types["A"].instance_properties == {}


def test_redeclared_case_keeps_first_order() -> None:
    source = "enum E {\n    case a\n    case b\n    case a = \"A\"\n}\n"
    tree = structure(
        type_node(
            ENUM,
            "E",
            [
                case_node(source, "case a\n", [("a", "a")]),
                case_node(source, "case b", [("b", "b")]),
                case_node(source, 'case a = "A"', [("a", 'a = "A"')]),
            ],
        )
    )

    cases = _extract(source, tree)["E"].ordered_cases()

    assert [(c.name, c.value, c.order) for c in cases] == [
        ("a", "A", 0),
        ("b", "b", 1),
    ]


def test_associated_value_cases_are_keyed_by_base_name() -> None:
    source = "enum Result {\n    case failed(String)\n}\n"
    tree = structure(
        type_node(
            ENUM,
            "Result",
            [case_node(source, "case failed(String)", [("failed(_:)", "failed")])],
        )
    )

    cases = _extract(source, tree)["Result"].cases

    assert list(cases) == ["failed"]
    assert cases["failed"].value == "failed"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ('static var path: String = "/a"', '"/a"'),
        ("var limit: Int =\n    10", "10"),
        ("var x: Int", None),
        ("var x: Int = ", None),
    ],
)
def test_extract_assigned_value(text: str, expected: str | None) -> None:
    data = text.encode("utf-8")
    assert extract_assigned_value(data, 0, len(data)) == expected


def test_class_members_count_as_static_and_protocols_are_types() -> None:
    source = """protocol Named {
    var name: String { get }
}

final class Cache {
    class var shared: Cache = Cache()
    var size: Int = 0
}
"""
    class_var = var_node(
        source, "class var shared: Cache = Cache()", "shared", "Cache"
    )
    class_var["key.kind"] = CLASS_VAR
    tree = structure(
        type_node(
            PROTOCOL,
            "Named",
            [var_node(source, "var name: String { get }", "name", "String")],
        ),
        type_node(
            CLASS,
            "Cache",
            [class_var, var_node(source, "var size: Int = 0", "size", "Int")],
        ),
    )

    types = _extract(source, tree)

    assert types["Named"].kind == "protocol"
    assert list(types["Named"].instance_properties) == ["name"]
    cache = types["Cache"]
    assert cache.kind == "class"
    assert cache.static_properties["shared"].default_value == "Cache()"
    assert cache.instance_properties["size"].default_value == "0"


def test_multi_element_case_reads_each_element_raw_value() -> None:
    source = 'enum Size: String {\n    case small = "S", large = "L"\n}\n'
    tree = structure(
        type_node(
            ENUM,
            "Size",
            [
                case_node(
                    source,
                    'case small = "S", large = "L"',
                    [("small", 'small = "S"'), ("large", 'large = "L"')],
                )
            ],
            inherits=("String",),
        )
    )

    cases = _extract(source, tree)["Size"].cases

    assert list(cases) == ["small", "large"]
    assert [(c.value, c.order) for c in cases.values()] == [("S", 0), ("L", 1)]
