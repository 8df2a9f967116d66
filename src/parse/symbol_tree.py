"""SourceKitten symbol tree models.

``sourcekitten structure`` emits one JSON document per Swift file: nested
nodes keyed ``key.*`` with a kind tag, optional name and type signature, and
byte offsets into the file's UTF-8 source.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class SymbolKind(str, Enum):
    """Declaration kinds interpreted by the type metadata builder."""

    INSTANCE_VAR = "source.lang.swift.decl.var.instance"
    STATIC_VAR = "source.lang.swift.decl.var.static"
    CLASS_VAR = "source.lang.swift.decl.var.class"
    LOCAL_VAR = "source.lang.swift.decl.var.local"
    PARAMETER = "source.lang.swift.decl.var.parameter"
    INSTANCE_METHOD = "source.lang.swift.decl.function.method.instance"
    STATIC_METHOD = "source.lang.swift.decl.function.method.static"
    CLASS_METHOD = "source.lang.swift.decl.function.method.class"
    FREE_FUNCTION = "source.lang.swift.decl.function.free"

    STRUCT = "source.lang.swift.decl.struct"
    ENUM = "source.lang.swift.decl.enum"
    CLASS = "source.lang.swift.decl.class"
    PROTOCOL = "source.lang.swift.decl.protocol"
    EXTENSION = "source.lang.swift.decl.extension"
    ENUM_CASE = "source.lang.swift.decl.enumcase"
    ENUM_ELEMENT = "source.lang.swift.decl.enumelement"


TYPE_KINDS: dict[str, str] = {
    SymbolKind.STRUCT.value: "struct",
    SymbolKind.ENUM.value: "enum",
    SymbolKind.CLASS.value: "class",
    SymbolKind.PROTOCOL.value: "protocol",
}


class SymbolTreeError(ValueError):
    """Raised when a structure document cannot be read."""


class InheritedType(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="key.name")


class SymbolNode(BaseModel):
    """One node of a SourceKitten structure document.

    ``kind`` is kept as the raw tag: statement and expression kinds are
    structural context only and are never interpreted.
    """

    model_config = ConfigDict(populate_by_name=True)

    kind: str = Field(alias="key.kind")
    name: str | None = Field(default=None, alias="key.name")
    type_signature: str | None = Field(default=None, alias="key.typename")
    comment: str | None = Field(default=None, alias="key.doc.comment")
    inherited_types: list[InheritedType] = Field(
        default_factory=list, alias="key.inheritedtypes"
    )
    offset: int | None = Field(default=None, alias="key.offset")
    length: int | None = Field(default=None, alias="key.length")
    name_offset: int | None = Field(default=None, alias="key.nameoffset")
    name_length: int | None = Field(default=None, alias="key.namelength")
    children: list[SymbolNode] = Field(default_factory=list, alias="key.substructure")

    @property
    def is_type_like(self) -> bool:
        return self.kind in TYPE_KINDS

    @property
    def inherited_type_names(self) -> list[str]:
        return [inherited.name for inherited in self.inherited_types]

    def span(self) -> tuple[int, int] | None:
        """Byte range ``[offset, offset + length)`` when both are known."""
        if self.offset is None or self.length is None:
            return None
        return self.offset, self.offset + self.length

    def span_after_name(self) -> tuple[int, int] | None:
        """Byte range from the end of the name to the end of the node."""
        if (
            self.offset is None
            or self.length is None
            or self.name_offset is None
            or self.name_length is None
        ):
            return None
        return self.name_offset + self.name_length, self.offset + self.length


class SymbolTree(BaseModel):
    """Top-level structure document for one source file."""

    model_config = ConfigDict(populate_by_name=True)

    offset: int | None = Field(default=None, alias="key.offset")
    length: int | None = Field(default=None, alias="key.length")
    children: list[SymbolNode] = Field(default_factory=list, alias="key.substructure")


def read_symbol_tree(raw: bytes | str | dict[str, Any]) -> SymbolTree:
    """Parse a SourceKitten structure document.

    Args:
        raw: JSON text (bytes or str) or an already decoded mapping

    Returns:
        The validated SymbolTree.

    Raises:
        SymbolTreeError: If the JSON is invalid or does not describe a tree.
    """
    if isinstance(raw, (bytes, str)):
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            msg = f"Invalid structure JSON: {exc}"
            raise SymbolTreeError(msg) from exc
    else:
        data = raw

    if not isinstance(data, dict):
        msg = "Structure document must be a JSON object"
        raise SymbolTreeError(msg)

    try:
        return SymbolTree.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid structure document: {exc}"
        raise SymbolTreeError(msg) from exc


__all__ = [
    "TYPE_KINDS",
    "InheritedType",
    "SymbolKind",
    "SymbolNode",
    "SymbolTree",
    "SymbolTreeError",
    "read_symbol_tree",
]
