"""Swift source discovery for documentation generation."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator
    from pathlib import Path

SWIFT_SUFFIX = ".swift"

# SwiftPM build and checkout directories never hold project sources.
_SKIPPED_DIRS = frozenset({".build", ".swiftpm", "Packages", "DerivedData"})


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        path.resolve().relative_to(root.resolve())
    except (OSError, ValueError):
        return False
    return True


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    if not nested_gitignore:
        gitignore_path = root / ".gitignore"
        if gitignore_path.is_file():
            return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
        return None

    gitignore_paths = sorted(
        {path for path in root.rglob(".gitignore") if path.is_file()},
        key=lambda p: p.relative_to(root).as_posix(),
    )
    if not gitignore_paths:
        return None

    matchers = [parse_gitignore(path) for path in gitignore_paths]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                # Raised for paths outside the .gitignore's own directory.
                continue
        return False

    return matches


def _matches_filters(
    rel_path: str,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    if include_patterns and not any(fnmatch(rel_path, p) for p in include_patterns):
        return False
    if exclude_patterns and any(fnmatch(rel_path, p) for p in exclude_patterns):
        return False
    return True


def _should_include_file(
    path: Path,
    root: Path,
    output_dir: str,
    gitignore_matches: Callable[[str], bool] | None,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    """Check if a Swift file should be scanned."""
    if not path.is_file() or path.is_symlink():
        return False
    if not _is_within_root(path, root):
        return False

    rel_path = path.relative_to(root)
    if output_dir and rel_path.parts and rel_path.parts[0] == output_dir:
        return False
    if any(part in _SKIPPED_DIRS for part in rel_path.parts[:-1]):
        return False
    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    return _matches_filters(rel_path.as_posix(), include_patterns, exclude_patterns)


def find_swift_files(
    root: Path,
    input_dirs: Iterable[Path] | None = None,
    *,
    output_dir: str = ".vapordoc",
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find the Swift files under the input directories of a project.

    Args:
        root: Project root; filters and .gitignore rules apply to paths
            relative to it
        input_dirs: Directories to scan (default: the root itself).
            Directories that do not exist are skipped.
        output_dir: Top-level directory name to skip (default ".vapordoc")
        include_patterns: Optional fnmatch patterns; files must match one
        exclude_patterns: Optional fnmatch patterns; matching files are
            skipped

    Yields:
        Paths of Swift files, each once, sorted by root-relative path.
    """
    root = root.resolve()
    gitignore_matches = _build_gitignore_matcher(
        root, nested_gitignore=nested_gitignore
    )

    candidates: set[Path] = set()
    for directory in input_dirs if input_dirs is not None else [root]:
        if not directory.is_dir():
            continue
        candidates.update(directory.resolve().rglob(f"*{SWIFT_SUFFIX}"))

    matched = [
        path
        for path in candidates
        if _should_include_file(
            path,
            root,
            output_dir,
            gitignore_matches,
            include_patterns,
            exclude_patterns,
        )
    ]
    matched.sort(key=lambda p: p.relative_to(root).as_posix())

    yield from matched


__all__ = ["SWIFT_SUFFIX", "find_swift_files"]
