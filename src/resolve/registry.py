"""Type registry merged across source files, and endpoint selection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from resolve.errors import DuplicateTypeError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from artifacts.models.artifacts.types import TypeDescription

logger = logging.getLogger(__name__)

DuplicatePolicy = Literal["last", "first", "error"]


class TypeRegistry:
    """Mapping of type name to TypeDescription for a whole source tree.

    Types from every file are merged before any resolution starts, so a
    reference can be resolved no matter which file declared the target.
    """

    def __init__(self, *, duplicates: DuplicatePolicy = "last") -> None:
        self.duplicates = duplicates
        self._types: dict[str, TypeDescription] = {}

    def merge(self, types: Mapping[str, TypeDescription]) -> None:
        """Merge one file's types into the registry."""
        for name, description in types.items():
            existing = self._types.get(name)
            if existing is not None:
                if self.duplicates == "error":
                    raise DuplicateTypeError(name, existing.path, description.path)
                if self.duplicates == "first":
                    logger.warning(
                        "Type %s redeclared in %s; keeping declaration from %s",
                        name,
                        description.path,
                        existing.path,
                    )
                    continue
                logger.warning(
                    "Type %s redeclared in %s; replacing declaration from %s",
                    name,
                    description.path,
                    existing.path,
                )
            self._types[name] = description

    def get(self, name: str) -> TypeDescription | None:
        """Look up a type by name.

        Qualified references (``Outer.Inner``) fall back to their last
        component, since nested types are registered by simple name.
        """
        found = self._types.get(name)
        if found is None and "." in name:
            found = self._types.get(name.rsplit(".", 1)[-1])
        return found

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self) -> Iterator[TypeDescription]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    def as_dict(self) -> dict[str, TypeDescription]:
        return dict(self._types)


def select_endpoints(
    registry: TypeRegistry, marker: str
) -> dict[str, TypeDescription]:
    """Return the types declaring conformance to ``marker``, in registry order."""
    return {
        description.name: description
        for description in registry
        if marker in description.inherited_types
    }


__all__ = ["DuplicatePolicy", "TypeRegistry", "select_endpoints"]
