"""Artifact contract definitions.

Filenames and formats of everything ``vapordoc generate`` writes.
"""

from __future__ import annotations

from dataclasses import dataclass

# Artifact schema version for type metadata records.
ARTIFACT_SCHEMA_VERSION = 1

# Artifact filename constants (stable contract identifiers).
TYPES_JSONL = "types.jsonl"
OPENAPI_JSON = "openapi.json"


@dataclass(frozen=True)
class ArtifactSpec:
    """Filename and format of a generated artifact."""

    filename: str
    format: str
    required_fields_note: str


ARTIFACT_SPECS: dict[str, ArtifactSpec] = {
    "types": ArtifactSpec(
        filename=TYPES_JSONL,
        format="jsonl",
        required_fields_note="One TypeDescription per line, sorted by name.",
    ),
    "openapi": ArtifactSpec(
        filename=OPENAPI_JSON,
        format="openapi",
        required_fields_note="OpenAPI 3.0 document; every $ref must resolve.",
    ),
}
