"""Type metadata models.

This module contains models describing the type-like declarations
(structs, enums, classes, protocols) extracted from Swift sources, together
with their members. Every member carries an ``order`` assigned when it was
first seen, so declaration order survives a round trip through JSON.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# Schema version constant
SCHEMA_VERSION = 1

TypeKind = Literal["struct", "enum", "class", "protocol"]


class PropertyDescription(BaseModel):
    """A stored or computed property declared on a type."""

    name: str
    type: str = Field(description="Raw type expression, optional marker included")
    default_value: str | None = Field(
        default=None, description="Source text to the right of '=' (trimmed)"
    )
    order: int


class ArgumentDescription(BaseModel):
    name: str
    type: str
    order: int


class MethodDescription(BaseModel):
    name: str
    return_type: str | None = None
    arguments: dict[str, ArgumentDescription] = Field(default_factory=dict)
    order: int

    def ordered_arguments(self) -> list[ArgumentDescription]:
        return sorted(self.arguments.values(), key=lambda a: a.order)


class EnumCase(BaseModel):
    name: str
    value: str
    order: int


class TypeDescription(BaseModel):
    """Metadata for a single type-like declaration."""

    schema_version: int = Field(default=SCHEMA_VERSION)
    name: str
    kind: TypeKind
    path: str | None = Field(
        default=None, description="Source file the type was declared in"
    )
    inherited_types: list[str] = Field(default_factory=list)
    static_properties: dict[str, PropertyDescription] = Field(default_factory=dict)
    static_methods: dict[str, MethodDescription] = Field(default_factory=dict)
    instance_properties: dict[str, PropertyDescription] = Field(default_factory=dict)
    instance_methods: dict[str, MethodDescription] = Field(default_factory=dict)
    cases: dict[str, EnumCase] = Field(default_factory=dict)

    def ordered_instance_properties(self) -> list[PropertyDescription]:
        return sorted(self.instance_properties.values(), key=lambda p: p.order)

    def ordered_cases(self) -> list[EnumCase]:
        return sorted(self.cases.values(), key=lambda c: c.order)


__all__ = [
    "SCHEMA_VERSION",
    "ArgumentDescription",
    "EnumCase",
    "MethodDescription",
    "PropertyDescription",
    "TypeDescription",
    "TypeKind",
]
