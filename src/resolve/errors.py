"""Errors raised while resolving endpoint types into an OpenAPI document."""

from __future__ import annotations


class DocsError(Exception):
    """Base class for documentation generation failures."""


class MissingCriticalEndpointInformation(DocsError):
    """An endpoint cannot be documented because something it needs is missing.

    Raised for missing route facts (``method``/``path``), a missing handler
    method, or a referenced type that is not in the type registry.
    """

    def __init__(self, endpoint: str, missing: str, detail: str) -> None:
        super().__init__(detail)
        self.endpoint = endpoint
        self.missing = missing
        self.detail = detail


class DuplicateTypeError(DocsError):
    """Raised when two source files declare the same type name."""

    def __init__(self, name: str, first: str | None, second: str | None) -> None:
        super().__init__(
            f"Type {name} is declared in both {first or '<unknown>'} "
            f"and {second or '<unknown>'}"
        )
        self.name = name


class FailedToConvertToJSON(DocsError):
    """Raised when the assembled document cannot be serialized."""


__all__ = [
    "DocsError",
    "DuplicateTypeError",
    "FailedToConvertToJSON",
    "MissingCriticalEndpointInformation",
]
