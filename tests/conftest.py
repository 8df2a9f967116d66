from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from swift_structure import write_sample_project

from artifacts.write import build_registry
from rules.config import DocsConfig

if TYPE_CHECKING:
    from pathlib import Path

    from resolve.registry import TypeRegistry


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    return write_sample_project(tmp_path / "repo")


@pytest.fixture
def sample_registry(sample_project: Path) -> TypeRegistry:
    return build_registry(sample_project, DocsConfig())
