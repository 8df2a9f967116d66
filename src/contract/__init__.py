"""Stable artifact contract surface for vapordoc.

Filenames, formats and the models the generated artifacts validate against.
"""

from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    ARTIFACT_SPECS,
    OPENAPI_JSON,
    TYPES_JSONL,
    ArtifactSpec,
)


def __getattr__(name: str) -> object:
    if name in {"Document", "TypeDescription"}:
        from contract.models import Document, TypeDescription

        return {"Document": Document, "TypeDescription": TypeDescription}[name]

    if name in {"ValidationMessage", "ValidationResult", "validate_artifacts"}:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            validate_artifacts,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "validate_artifacts": validate_artifacts,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "ARTIFACT_SCHEMA_VERSION",
    "ARTIFACT_SPECS",
    "OPENAPI_JSON",
    "TYPES_JSONL",
    "ArtifactSpec",
    "Document",
    "TypeDescription",
    "ValidationMessage",
    "ValidationResult",
    "validate_artifacts",
]
