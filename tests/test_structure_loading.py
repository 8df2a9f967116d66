from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING, Any

import pytest
from swift_structure import MODELS_SWIFT, models_tree, write_swift_file

from scan.structure import SourceStructureError, load_source_file, sidecar_path

if TYPE_CHECKING:
    from pathlib import Path


def test_sidecar_path_appends_suffix(tmp_path: Path) -> None:
    assert sidecar_path(tmp_path / "User.swift").name == "User.swift.structure.json"


def test_load_source_file_prefers_sidecar(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = write_swift_file(tmp_path, "Models.swift", MODELS_SWIFT, models_tree())

    def _fail(*args: Any, **kwargs: Any) -> None:
        msg = "sourcekitten must not run when a sidecar exists"
        raise AssertionError(msg)

    monkeypatch.setattr("scan.structure.subprocess.run", _fail)

    loaded = load_source_file(path, "Models.swift")

    assert loaded.relative_path == "Models.swift"
    assert loaded.source == MODELS_SWIFT.encode("utf-8")
    assert [node.name for node in loaded.tree.children] == [
        "UserStatus",
        "Friend",
        "User",
    ]


def test_load_source_file_runs_sourcekitten_without_sidecar(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "Empty.swift"
    path.write_text("import Vapor\n", encoding="utf-8")
    calls: list[list[str]] = []

    def _fake_run(command: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        calls.append(command)
        return subprocess.CompletedProcess(
            command, 0, stdout=b'{"key.substructure": []}', stderr=b""
        )

    monkeypatch.setattr("scan.structure.subprocess.run", _fake_run)

    loaded = load_source_file(path, "Empty.swift", sourcekitten="/opt/sk")

    assert calls == [["/opt/sk", "structure", "--file", str(path)]]
    assert loaded.tree.children == []


def test_missing_sourcekitten_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "Empty.swift"
    path.write_text("import Vapor\n", encoding="utf-8")

    with pytest.raises(SourceStructureError, match="is not installed"):
        load_source_file(
            path, "Empty.swift", sourcekitten=str(tmp_path / "no-such-sourcekitten")
        )


def test_failing_sourcekitten_is_reported(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "Broken.swift"
    path.write_text("struct {\n", encoding="utf-8")

    def _fake_run(command: list[str], **kwargs: Any) -> None:
        raise subprocess.CalledProcessError(1, command, stderr=b"parse failure")

    monkeypatch.setattr("scan.structure.subprocess.run", _fake_run)

    with pytest.raises(SourceStructureError, match="parse failure"):
        load_source_file(path, "Broken.swift")


def test_invalid_sidecar_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "Bad.swift"
    path.write_text("struct A {}\n", encoding="utf-8")
    sidecar_path(path).write_text("{not json", encoding="utf-8")

    with pytest.raises(SourceStructureError, match="Invalid structure for Bad.swift"):
        load_source_file(path, "Bad.swift")
