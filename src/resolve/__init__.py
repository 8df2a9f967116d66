"""Resolution of type metadata into an OpenAPI document."""

from resolve.definitions import DefinitionsTable
from resolve.errors import (
    DocsError,
    DuplicateTypeError,
    FailedToConvertToJSON,
    MissingCriticalEndpointInformation,
)
from resolve.registry import TypeRegistry, select_endpoints
from resolve.resolver import ResolvedOperation, SchemaResolver


def __getattr__(name: str) -> object:
    if name in {"document_to_json", "generate_document"}:
        from resolve.document import document_to_json, generate_document

        return {
            "document_to_json": document_to_json,
            "generate_document": generate_document,
        }[name]

    msg = f"module 'resolve' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "DefinitionsTable",
    "DocsError",
    "DuplicateTypeError",
    "FailedToConvertToJSON",
    "MissingCriticalEndpointInformation",
    "ResolvedOperation",
    "SchemaResolver",
    "TypeRegistry",
    "document_to_json",
    "generate_document",
    "select_endpoints",
]
