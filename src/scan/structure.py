"""Loading of per-file inputs: source bytes plus symbol tree.

A Swift file's structure is read from a ``<file>.swift.structure.json``
sidecar when one exists (as written by ``sourcekitten structure --file``),
otherwise SourceKitten is run on the file.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

from parse.symbol_tree import SymbolTreeError, read_symbol_tree

if TYPE_CHECKING:
    from pathlib import Path

    from parse.symbol_tree import SymbolTree

logger = logging.getLogger(__name__)

STRUCTURE_SIDECAR_SUFFIX = ".structure.json"


class SourceStructureError(Exception):
    """Raised when a source file's symbol tree cannot be obtained."""


@dataclass(frozen=True)
class SourceFile:
    path: Path
    relative_path: str
    source: bytes
    tree: SymbolTree


def sidecar_path(file_path: Path) -> Path:
    return file_path.with_name(file_path.name + STRUCTURE_SIDECAR_SUFFIX)


def _run_sourcekitten(file_path: Path, executable: str) -> bytes:
    try:
        completed = subprocess.run(
            [executable, "structure", "--file", str(file_path)],
            capture_output=True,
            check=True,
        )
    except FileNotFoundError as exc:
        msg = (
            f"No structure sidecar for {file_path} and '{executable}' "
            "is not installed"
        )
        raise SourceStructureError(msg) from exc
    except subprocess.CalledProcessError as exc:
        stderr = exc.stderr.decode("utf-8", errors="replace").strip()
        msg = f"{executable} failed on {file_path}: {stderr or exc}"
        raise SourceStructureError(msg) from exc
    return completed.stdout


def load_source_file(
    file_path: Path,
    relative_path: str,
    *,
    sourcekitten: str = "sourcekitten",
) -> SourceFile:
    """Read a Swift file and its symbol tree.

    Raises:
        SourceStructureError: If the file cannot be read or its structure
            cannot be obtained or parsed.
    """
    try:
        source = file_path.read_bytes()
    except OSError as exc:
        msg = f"Failed to read {file_path}: {exc}"
        raise SourceStructureError(msg) from exc

    sidecar = sidecar_path(file_path)
    if sidecar.is_file():
        logger.debug("Reading structure sidecar %s", sidecar)
        raw = sidecar.read_bytes()
    else:
        logger.debug("Running %s on %s", sourcekitten, file_path)
        raw = _run_sourcekitten(file_path, sourcekitten)

    try:
        tree = read_symbol_tree(raw)
    except SymbolTreeError as exc:
        msg = f"Invalid structure for {relative_path}: {exc}"
        raise SourceStructureError(msg) from exc

    return SourceFile(
        path=file_path, relative_path=relative_path, source=source, tree=tree
    )


__all__ = [
    "STRUCTURE_SIDECAR_SUFFIX",
    "SourceFile",
    "SourceStructureError",
    "load_source_file",
    "sidecar_path",
]
