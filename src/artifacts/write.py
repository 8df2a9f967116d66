from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from artifacts.generators import OpenAPIGenerator, TypesGenerator
from artifacts.utils import _get_output_dir_name
from contract.artifacts import OPENAPI_JSON, TYPES_JSONL
from parse.type_metadata import extract_types
from resolve.registry import TypeRegistry
from rules.config import load_config, resolve_input_dirs, resolve_output_dir
from scan.files import find_swift_files
from scan.structure import load_source_file

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from resolve.errors import MissingCriticalEndpointInformation
    from rules.config import DocsConfig

logger = logging.getLogger(__name__)


def build_registry(
    root: Path,
    config: DocsConfig,
    *,
    input_dirs: list[Path] | None = None,
    out_dir: Path | None = None,
) -> TypeRegistry:
    """Extract and merge the types of every Swift file under the inputs.

    All files are read before anything is resolved, so references across
    files always find their target.
    """
    root = root.resolve()
    if input_dirs is None:
        input_dirs = resolve_input_dirs(root, config.inputs)
    out_dir_name = _get_output_dir_name(out_dir, root) if out_dir else ""

    registry = TypeRegistry(duplicates=config.duplicate_types)
    file_count = 0
    for file_path in find_swift_files(
        root,
        input_dirs,
        output_dir=out_dir_name or config.output_dir,
        include_patterns=config.include,
        exclude_patterns=config.exclude,
        nested_gitignore=config.nested_gitignore,
    ):
        relative_path = file_path.relative_to(root).as_posix()
        source_file = load_source_file(
            file_path, relative_path, sourcekitten=config.sourcekitten
        )
        registry.merge(
            extract_types(source_file.source, source_file.tree, path=relative_path)
        )
        file_count += 1

    logger.info("Collected %d types from %d files", len(registry), file_count)
    return registry


def generate_all_artifacts(
    *,
    root: Path,
    out_dir: Path | None = None,
    config: DocsConfig | None = None,
    input_dirs: list[Path] | None = None,
    on_error: Callable[[MissingCriticalEndpointInformation], None] | None = None,
) -> dict[str, object]:
    """Generate the type metadata and OpenAPI artifacts for a project.

    Args:
        root: Root directory of the Swift project
        out_dir: Optional output directory for generated artifacts
        config: Optional configuration (loaded from the root when omitted)
        input_dirs: Optional source directories overriding ``config.inputs``
        on_error: Optional handler for endpoints that fail to resolve; when
            given, those endpoints are skipped instead of aborting

    Returns:
        Dictionary with counts and list of generated artifact paths.
    """
    if config is None:
        config = load_config(root)

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.output_dir)

    registry = build_registry(root, config, input_dirs=input_dirs, out_dir=out_dir)

    _, types_summary = TypesGenerator().generate(
        root=root, out_dir=out_dir, registry=registry
    )
    _, openapi_summary = OpenAPIGenerator().generate(
        root=root,
        out_dir=out_dir,
        registry=registry,
        config=config,
        on_error=on_error,
    )

    return {
        **types_summary,
        **openapi_summary,
        "artifacts": [str(out_dir / name) for name in (TYPES_JSONL, OPENAPI_JSON)],
    }
