"""Model namespace for vapordoc artifact schemas."""

from artifacts.models.artifacts.openapi import (
    Body,
    Components,
    Definition,
    Document,
    Info,
    MediaType,
    Method,
    Parameter,
    SchemaReference,
    Server,
)
from artifacts.models.artifacts.types import (
    ArgumentDescription,
    EnumCase,
    MethodDescription,
    PropertyDescription,
    TypeDescription,
)

__all__ = [
    "ArgumentDescription",
    "Body",
    "Components",
    "Definition",
    "Document",
    "EnumCase",
    "Info",
    "MediaType",
    "Method",
    "MethodDescription",
    "Parameter",
    "PropertyDescription",
    "SchemaReference",
    "Server",
    "TypeDescription",
]
