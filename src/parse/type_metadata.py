"""Type metadata extraction from SourceKitten symbol trees.

Walks a file's symbol tree depth-first and builds a TypeDescription for
every struct, enum, class and protocol declaration, nested ones included.
Default values and enum raw values are not part of the structure document:
they are recovered by slicing the file's source bytes at each node's span.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

from artifacts.models.artifacts.types import (
    ArgumentDescription,
    EnumCase,
    MethodDescription,
    PropertyDescription,
    TypeDescription,
)
from parse.symbol_tree import TYPE_KINDS, SymbolKind, SymbolNode, SymbolTree
from utils import extract_assigned_value, unquote_literal

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

_STATIC_VAR_KINDS = frozenset({SymbolKind.STATIC_VAR.value, SymbolKind.CLASS_VAR.value})
_STATIC_METHOD_KINDS = frozenset(
    {SymbolKind.STATIC_METHOD.value, SymbolKind.CLASS_METHOD.value}
)


_MemberT = TypeVar(
    "_MemberT",
    PropertyDescription,
    MethodDescription,
    ArgumentDescription,
    EnumCase,
)


def _insert_ordered(
    members: dict[str, _MemberT], name: str, build: Callable[[int], _MemberT]
) -> None:
    """Insert or replace ``members[name]`` keeping the first-seen order.

    ``build`` receives the order to use. New names get the next integer
    after the current member count.
    """
    existing = members.get(name)
    order = existing.order if existing is not None else len(members)
    members[name] = build(order)


def _property_description(
    node: SymbolNode, source: bytes, order: int
) -> PropertyDescription:
    default_value: str | None = None
    span = node.span_after_name()
    if span is not None:
        default_value = extract_assigned_value(source, *span)
    return PropertyDescription(
        name=node.name or "",
        type=node.type_signature or "",
        default_value=default_value,
        order=order,
    )


def _method_description(node: SymbolNode, order: int) -> MethodDescription:
    arguments: dict[str, ArgumentDescription] = {}
    for child in node.children:
        if child.kind != SymbolKind.PARAMETER or not child.name:
            continue
        if child.type_signature is None:
            continue
        param_type = child.type_signature
        _insert_ordered(
            arguments,
            child.name,
            lambda o, n=child.name, t=param_type: ArgumentDescription(
                name=n, type=t, order=o
            ),
        )
    return MethodDescription(
        name=node.name or "",
        return_type=node.type_signature,
        arguments=arguments,
        order=order,
    )


def _case_key(element_name: str) -> str:
    # Associated-value cases are named like ``failed(_:)``.
    return element_name.split("(", 1)[0]


def _add_enum_cases(
    case_node: SymbolNode, source: bytes, cases: dict[str, EnumCase]
) -> None:
    elements = [
        child
        for child in case_node.children
        if child.kind == SymbolKind.ENUM_ELEMENT and child.name
    ]
    if not elements:
        return

    for element in elements:
        key = _case_key(element.name or "")
        span = case_node.span() if len(elements) == 1 else element.span()
        value = key
        if span is not None:
            literal = extract_assigned_value(source, *span)
            if literal:
                value = unquote_literal(literal)
        _insert_ordered(
            cases,
            key,
            lambda o, k=key, v=value: EnumCase(name=k, value=v, order=o),
        )


def build_type_description(
    node: SymbolNode, source: bytes, *, path: str | None = None
) -> TypeDescription | None:
    """Build the TypeDescription for one type-like node.

    Returns None when the node is not type-like or has no name.
    """
    kind = TYPE_KINDS.get(node.kind)
    if kind is None or not node.name:
        return None

    description = TypeDescription(
        name=node.name,
        kind=kind,
        path=path,
        inherited_types=list(dict.fromkeys(node.inherited_type_names)),
    )

    for child in node.children:
        if child.kind == SymbolKind.ENUM_CASE:
            _add_enum_cases(child, source, description.cases)
            continue

        if not child.name:
            continue

        if child.kind in _STATIC_VAR_KINDS or child.kind == SymbolKind.INSTANCE_VAR:
            if child.type_signature is None:
                continue
            target = (
                description.static_properties
                if child.kind in _STATIC_VAR_KINDS
                else description.instance_properties
            )
            _insert_ordered(
                target,
                child.name,
                lambda o, c=child: _property_description(c, source, o),
            )
        elif (
            child.kind in _STATIC_METHOD_KINDS
            or child.kind == SymbolKind.INSTANCE_METHOD
        ):
            target_methods = (
                description.static_methods
                if child.kind in _STATIC_METHOD_KINDS
                else description.instance_methods
            )
            _insert_ordered(
                target_methods,
                child.name,
                lambda o, c=child: _method_description(c, o),
            )

    return description


def _visit(
    node: SymbolNode,
    source: bytes,
    path: str | None,
    types: dict[str, TypeDescription],
) -> None:
    if node.is_type_like:
        description = build_type_description(node, source, path=path)
        if description is None:
            logger.warning(
                "Skipping unnamed %s declaration at offset %s in %s",
                TYPE_KINDS[node.kind],
                node.offset,
                path or "<source>",
            )
        else:
            types[description.name] = description

    for child in node.children:
        _visit(child, source, path, types)


def extract_types(
    source: bytes,
    nodes: SymbolTree | Iterable[SymbolNode],
    *,
    path: str | None = None,
) -> dict[str, TypeDescription]:
    """Extract every type-like declaration from a file's symbol tree.

    Args:
        source: Raw UTF-8 bytes of the source file (offsets index into it)
        nodes: The file's SymbolTree, or its top-level nodes
        path: Optional relative path recorded on each TypeDescription

    Returns:
        Mapping of type name to TypeDescription in depth-first declaration
        order.
    """
    top_level = nodes.children if isinstance(nodes, SymbolTree) else list(nodes)

    types: dict[str, TypeDescription] = {}
    for node in top_level:
        _visit(node, source, path, types)

    logger.debug("Extracted %d types from %s", len(types), path or "<source>")
    return types


__all__ = ["build_type_description", "extract_types"]
