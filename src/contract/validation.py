"""Validation helpers for generated artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import ValidationError

from artifacts.models.artifacts.openapi import SCHEMA_REF_PREFIX
from contract.artifacts import ARTIFACT_SCHEMA_VERSION, ARTIFACT_SPECS
from contract.models import Document, TypeDescription

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@dataclass(frozen=True)
class ValidationMessage:
    artifact: str
    path: Path
    message: str
    line: int | None = None

    def location(self) -> str:
        if self.line is None:
            return str(self.path)
        return f"{self.path}:{self.line}"

    def to_dict(self) -> dict[str, object]:
        return {
            "artifact": self.artifact,
            "path": str(self.path),
            "line": self.line,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_artifacts(
    artifacts_dir: Path, *, strict_schema_version: bool = False
) -> ValidationResult:
    result = ValidationResult()

    if not artifacts_dir.exists():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts directory does not exist.",
            )
        )
        return result

    if not artifacts_dir.is_dir():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts path is not a directory.",
            )
        )
        return result

    for artifact_name, spec in ARTIFACT_SPECS.items():
        path = artifacts_dir / spec.filename
        if not path.exists():
            result.errors.append(
                ValidationMessage(
                    artifact=artifact_name,
                    path=path,
                    message="Required artifact file is missing.",
                )
            )
            continue

        if spec.format == "jsonl":
            _validate_types_jsonl(
                artifact_name,
                path,
                result,
                strict_schema_version=strict_schema_version,
            )
        elif spec.format == "openapi":
            _validate_openapi(artifact_name, path, result)
        else:
            result.errors.append(
                ValidationMessage(
                    artifact=artifact_name,
                    path=path,
                    message=f"Unsupported artifact format: {spec.format}.",
                )
            )

    return result


def _validate_types_jsonl(
    artifact_name: str,
    path: Path,
    result: ValidationResult,
    *,
    strict_schema_version: bool,
) -> None:
    try:
        lines = path.read_bytes().splitlines()
    except OSError as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=f"Failed to read file: {exc}.",
            )
        )
        return

    names: list[str] = []
    missing_schema_emitted = False
    for line_number, raw_line in enumerate(lines, 1):
        line = raw_line.strip()
        if not line:
            continue
        try:
            data = orjson.loads(line)
        except orjson.JSONDecodeError as exc:
            result.errors.append(
                ValidationMessage(
                    artifact=artifact_name,
                    path=path,
                    line=line_number,
                    message=f"Invalid JSON: {exc}.",
                )
            )
            continue

        try:
            record = TypeDescription.model_validate(data)
        except ValidationError as exc:
            result.errors.append(
                ValidationMessage(
                    artifact=artifact_name,
                    path=path,
                    line=line_number,
                    message=f"Schema validation failed: {exc}.",
                )
            )
            continue

        names.append(record.name)
        schema_present = isinstance(data, dict) and "schema_version" in data
        if schema_present and record.schema_version != ARTIFACT_SCHEMA_VERSION:
            result.errors.append(
                ValidationMessage(
                    artifact=artifact_name,
                    path=path,
                    line=line_number,
                    message=(
                        "Schema version mismatch: "
                        f"expected {ARTIFACT_SCHEMA_VERSION}, "
                        f"got {record.schema_version}."
                    ),
                )
            )
        elif not schema_present and not missing_schema_emitted:
            message = (
                f"Missing schema_version; defaulted to {ARTIFACT_SCHEMA_VERSION}."
            )
            target = result.errors if strict_schema_version else result.warnings
            target.append(
                ValidationMessage(
                    artifact=artifact_name,
                    path=path,
                    line=line_number,
                    message=message,
                )
            )
            missing_schema_emitted = True

        for order_error in _order_errors(record):
            result.errors.append(
                ValidationMessage(
                    artifact=artifact_name,
                    path=path,
                    line=line_number,
                    message=order_error,
                )
            )

    if names != sorted(names) or len(names) != len(set(names)):
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message="Type records must be unique and sorted by name.",
            )
        )


def _order_errors(record: TypeDescription) -> Iterator[str]:
    """Yield an error per member group whose orders are not 0..n-1."""
    groups: dict[str, Any] = {
        "static_properties": record.static_properties,
        "static_methods": record.static_methods,
        "instance_properties": record.instance_properties,
        "instance_methods": record.instance_methods,
        "cases": record.cases,
    }
    for group_name, members in groups.items():
        orders = sorted(member.order for member in members.values())
        if orders != list(range(len(orders))):
            yield f"{record.name}.{group_name} orders are not contiguous: {orders}."


def _iter_refs(node: object) -> Iterator[str]:
    if isinstance(node, dict):
        for key, value in node.items():
            if key == "$ref" and isinstance(value, str):
                yield value
            else:
                yield from _iter_refs(value)
    elif isinstance(node, list):
        for item in node:
            yield from _iter_refs(item)


def _validate_openapi(artifact_name: str, path: Path, result: ValidationResult) -> None:
    try:
        raw = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=f"Invalid JSON: {exc}.",
            )
        )
        return

    try:
        document = Document.model_validate(raw)
    except ValidationError as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=f"Schema validation failed: {exc}.",
            )
        )
        return

    schemas = document.components.schemas
    for ref in sorted(set(_iter_refs(raw))):
        if not ref.startswith(SCHEMA_REF_PREFIX):
            result.warnings.append(
                ValidationMessage(
                    artifact=artifact_name,
                    path=path,
                    message=f"External reference not checked: {ref}.",
                )
            )
            continue
        if ref[len(SCHEMA_REF_PREFIX) :] not in schemas:
            result.errors.append(
                ValidationMessage(
                    artifact=artifact_name,
                    path=path,
                    message=f"Unresolved reference: {ref}.",
                )
            )


__all__ = [
    "ValidationMessage",
    "ValidationResult",
    "validate_artifacts",
]
