"""Determinism verification for generated documentation artifacts."""

from __future__ import annotations

import filecmp
import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.write import generate_all_artifacts

if TYPE_CHECKING:
    from rules.config import DocsConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    mismatches: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)
    extra: tuple[str, ...] = field(default_factory=tuple)


def _relative_files(directory: Path) -> set[Path]:
    return {
        path.relative_to(directory) for path in directory.rglob("*") if path.is_file()
    }


def verify_determinism(
    *,
    root: Path,
    artifacts_dir: Path,
    config: DocsConfig | None = None,
    input_dirs: list[Path] | None = None,
) -> DeterminismResult:
    """Regenerate the artifacts and compare them with an existing directory.

    The fresh artifacts go to a temporary directory and every file is
    compared byte-for-byte, so a document whose definition or path order
    depends on anything but the sources shows up as a mismatch.

    Raises:
        FileNotFoundError: If artifacts_dir does not exist.
        NotADirectoryError: If artifacts_dir is not a directory.
    """
    if not artifacts_dir.exists():
        msg = f"Artifacts directory does not exist: {artifacts_dir}"
        raise FileNotFoundError(msg)
    if not artifacts_dir.is_dir():
        msg = f"Artifacts path is not a directory: {artifacts_dir}"
        raise NotADirectoryError(msg)

    with tempfile.TemporaryDirectory() as temp_dir:
        fresh_dir = Path(temp_dir)
        generate_all_artifacts(
            root=root, out_dir=fresh_dir, config=config, input_dirs=input_dirs
        )

        existing = _relative_files(artifacts_dir)
        regenerated = _relative_files(fresh_dir)

        missing = sorted(str(path) for path in existing - regenerated)
        extra = sorted(str(path) for path in regenerated - existing)
        mismatches = [
            str(path)
            for path in sorted(existing & regenerated)
            if not filecmp.cmp(artifacts_dir / path, fresh_dir / path, shallow=False)
        ]

    for path in mismatches:
        logger.debug("Regenerated %s differs from %s", path, artifacts_dir)

    return DeterminismResult(
        ok=not missing and not extra and not mismatches,
        mismatches=tuple(mismatches),
        missing=tuple(missing),
        extra=tuple(extra),
    )
