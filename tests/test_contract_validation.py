from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    ARTIFACT_SPECS,
    OPENAPI_JSON,
    TYPES_JSONL,
)
from contract.validation import (
    ValidationMessage,
    ValidationResult,
    validate_artifacts,
)


def _type_record(name: str, **overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "schema_version": ARTIFACT_SCHEMA_VERSION,
        "name": name,
        "kind": "struct",
        "path": "Sources/App/Models.swift",
        "inherited_types": ["Content"],
        "static_properties": {},
        "static_methods": {},
        "instance_properties": {
            "id": {"name": "id", "type": "UUID", "default_value": None, "order": 0}
        },
        "instance_methods": {},
        "cases": {},
    }
    record.update(overrides)
    return record


def _document(**schemas: Any) -> dict[str, Any]:
    return {
        "openapi": "3.0.0",
        "info": {"title": "My API", "version": "1.0", "description": "Doc"},
        "servers": [],
        "paths": {
            "/users": {
                "get": {
                    "operationId": "ListUsers",
                    "summary": "ListUsers",
                    "parameters": [],
                    "responses": {
                        "200": {
                            "description": "",
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "array",
                                        "items": {"$ref": "#/components/schemas/User"},
                                    }
                                }
                            },
                        }
                    },
                }
            }
        },
        "components": {"schemas": schemas},
    }


def _write_valid_artifacts(d: Path) -> None:
    """Write a minimal valid artifact set to directory d."""
    d.mkdir(parents=True, exist_ok=True)
    lines = [json.dumps(_type_record(name)) for name in ("Friend", "User")]
    (d / TYPES_JSONL).write_text("\n".join(lines) + "\n", encoding="utf-8")
    document = _document(
        User={
            "type": "object",
            "properties": {"id": {"type": "string", "format": "uuid"}},
            "required": ["id"],
        }
    )
    (d / OPENAPI_JSON).write_text(json.dumps(document, indent=2), encoding="utf-8")


def _messages_contain(messages: list[ValidationMessage], needle: str) -> bool:
    """Return True when any validation message contains the given substring."""
    return any(needle in message.message for message in messages)


# Group 1: Data class tests


def test_validation_message_location_with_line() -> None:
    """ValidationMessage.location returns path:line when line is present."""
    msg = ValidationMessage("types", Path("x.jsonl"), "bad", line=7)
    assert msg.location() == "x.jsonl:7"


def test_validation_message_location_without_line() -> None:
    """ValidationMessage.location returns only path when line is missing."""
    msg = ValidationMessage("types", Path("x.jsonl"), "bad")
    assert msg.location() == "x.jsonl"


def test_validation_message_to_dict() -> None:
    """ValidationMessage.to_dict returns the expected payload."""
    msg = ValidationMessage("types", Path("x.jsonl"), "bad", line=3)
    assert msg.to_dict() == {
        "artifact": "types",
        "path": "x.jsonl",
        "line": 3,
        "message": "bad",
    }


def test_validation_result_ok_reflects_errors() -> None:
    assert ValidationResult().ok is True
    result = ValidationResult(errors=[ValidationMessage("x", Path("a"), "boom")])
    assert result.ok is False


# Group 2: Directory handling


def test_missing_directory(tmp_path: Path) -> None:
    """validate_artifacts reports a missing artifacts directory."""
    result = validate_artifacts(tmp_path / "nonexistent")
    assert result.ok is False
    assert _messages_contain(result.errors, "Artifacts directory does not exist")


def test_not_a_directory(tmp_path: Path) -> None:
    """validate_artifacts reports a path that is not a directory."""
    file_path = tmp_path / "not-a-dir"
    file_path.write_text("x", encoding="utf-8")

    result = validate_artifacts(file_path)

    assert result.ok is False
    assert _messages_contain(result.errors, "Artifacts path is not a directory")


def test_missing_artifact_files(tmp_path: Path) -> None:
    """validate_artifacts reports each required artifact when directory is empty."""
    artifacts_dir = tmp_path / "artifacts"
    artifacts_dir.mkdir()

    result = validate_artifacts(artifacts_dir)

    assert result.ok is False
    assert len(result.errors) == len(ARTIFACT_SPECS)
    assert all("Required artifact file is missing" in m.message for m in result.errors)


# Group 3: Happy path


def test_valid_artifacts_pass(tmp_path: Path) -> None:
    """A complete valid artifact set produces no errors or warnings."""
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)

    result = validate_artifacts(artifacts_dir)

    assert result.errors == []
    assert result.warnings == []
    assert result.ok is True


# Group 4: types.jsonl validation


def test_types_invalid_json(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    (artifacts_dir / TYPES_JSONL).write_text("{not-json}\n", encoding="utf-8")

    result = validate_artifacts(artifacts_dir)

    assert result.ok is False
    assert _messages_contain(result.errors, "Invalid JSON")
    assert result.errors[0].line == 1


def test_types_schema_failure(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    (artifacts_dir / TYPES_JSONL).write_text(
        json.dumps(_type_record("User", kind="typealias")) + "\n", encoding="utf-8"
    )

    result = validate_artifacts(artifacts_dir)

    assert result.ok is False
    assert _messages_contain(result.errors, "Schema validation failed")


@pytest.mark.parametrize(
    ("strict", "expect_ok"),
    [(False, True), (True, False)],
)
def test_types_missing_schema_version(
    tmp_path: Path, strict: bool, expect_ok: bool
) -> None:
    """Missing schema_version warns in lenient mode and fails in strict mode."""
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    record = _type_record("User")
    del record["schema_version"]
    (artifacts_dir / TYPES_JSONL).write_text(
        json.dumps(record) + "\n", encoding="utf-8"
    )

    result = validate_artifacts(artifacts_dir, strict_schema_version=strict)

    assert result.ok is expect_ok
    messages = result.errors if strict else result.warnings
    assert _messages_contain(messages, "Missing schema_version")


def test_types_schema_version_mismatch(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    (artifacts_dir / TYPES_JSONL).write_text(
        json.dumps(_type_record("User", schema_version=99)) + "\n", encoding="utf-8"
    )

    result = validate_artifacts(artifacts_dir)

    assert _messages_contain(result.errors, "Schema version mismatch")


def test_types_member_orders_must_be_contiguous(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    gap = {
        "id": {"name": "id", "type": "UUID", "order": 0},
        "name": {"name": "name", "type": "String", "order": 2},
    }
    (artifacts_dir / TYPES_JSONL).write_text(
        json.dumps(_type_record("User", instance_properties=gap)) + "\n",
        encoding="utf-8",
    )

    result = validate_artifacts(artifacts_dir)

    assert _messages_contain(result.errors, "User.instance_properties orders")


def test_types_must_be_sorted_and_unique(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    lines = [json.dumps(_type_record(name)) for name in ("User", "Friend", "Friend")]
    (artifacts_dir / TYPES_JSONL).write_text("\n".join(lines), encoding="utf-8")

    result = validate_artifacts(artifacts_dir)

    assert _messages_contain(result.errors, "unique and sorted")


# Group 5: openapi.json validation


def test_openapi_invalid_json(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    (artifacts_dir / OPENAPI_JSON).write_text("{", encoding="utf-8")

    result = validate_artifacts(artifacts_dir)

    assert _messages_contain(result.errors, "Invalid JSON")


def test_openapi_unknown_key_fails_schema(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    document = _document()
    document["paths"]["/users"]["get"]["operationID"] = "typo"
    (artifacts_dir / OPENAPI_JSON).write_text(json.dumps(document), encoding="utf-8")

    result = validate_artifacts(artifacts_dir)

    assert _messages_contain(result.errors, "Schema validation failed")


def test_openapi_unresolved_reference(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    (artifacts_dir / OPENAPI_JSON).write_text(
        json.dumps(_document()), encoding="utf-8"
    )

    result = validate_artifacts(artifacts_dir)

    assert result.ok is False
    assert _messages_contain(
        result.errors, "Unresolved reference: #/components/schemas/User"
    )


def test_openapi_external_reference_warns(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    document = _document(
        User={"type": "object", "properties": {"x": {"$ref": "other.json#/X"}}}
    )
    (artifacts_dir / OPENAPI_JSON).write_text(json.dumps(document), encoding="utf-8")

    result = validate_artifacts(artifacts_dir)

    assert result.ok is True
    assert _messages_contain(result.warnings, "External reference not checked")
