"""Artifact generation entry points."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from resolve.errors import MissingCriticalEndpointInformation
    from rules.config import DocsConfig


def generate_all_artifacts(
    *,
    root: Path,
    out_dir: Path | None = None,
    config: DocsConfig | None = None,
    input_dirs: list[Path] | None = None,
    on_error: Callable[[MissingCriticalEndpointInformation], None] | None = None,
) -> dict[str, object]:
    """Generate artifacts via lazy import to avoid package import cycles."""
    from artifacts.write import generate_all_artifacts as _generate_all_artifacts

    return _generate_all_artifacts(
        root=root,
        out_dir=out_dir,
        config=config,
        input_dirs=input_dirs,
        on_error=on_error,
    )


__all__ = ["generate_all_artifacts"]
