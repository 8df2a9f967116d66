"""Source discovery and loading for Swift projects."""

from scan.files import find_swift_files
from scan.structure import SourceFile, SourceStructureError, load_source_file

__all__ = [
    "SourceFile",
    "SourceStructureError",
    "find_swift_files",
    "load_source_file",
]
