"""Write-once table of schema definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from artifacts.models.artifacts.openapi import Definition


class DefinitionsTable:
    """Deduplicated store of schema definitions keyed by name.

    A name is reserved before its members are visited, so a type is built
    at most once even when it is reachable through several paths or
    references itself. Entries keep reservation order, which puts a type
    ahead of the types it references.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Definition | None] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def reserve(self, name: str) -> bool:
        """Claim ``name``. Returns False if it was already claimed."""
        if name in self._entries:
            return False
        self._entries[name] = None
        return True

    def fill(self, name: str, definition: Definition) -> None:
        if name not in self._entries:
            msg = f"Definition {name!r} was not reserved"
            raise KeyError(msg)
        if self._entries[name] is not None:
            msg = f"Definition {name!r} is already set"
            raise ValueError(msg)
        self._entries[name] = definition

    def release(self, name: str) -> None:
        """Drop a reservation that was never filled."""
        if name in self._entries and self._entries[name] is None:
            del self._entries[name]

    def checkpoint(self) -> int:
        """Mark the current size for a later ``rollback``."""
        return len(self._entries)

    def rollback(self, checkpoint: int) -> None:
        """Drop every entry reserved after ``checkpoint``, filled or not."""
        for name in list(self._entries)[checkpoint:]:
            del self._entries[name]

    def get(self, name: str) -> Definition | None:
        return self._entries.get(name)

    def as_dict(self) -> dict[str, Definition]:
        pending = [name for name, value in self._entries.items() if value is None]
        if pending:
            msg = f"Definitions still pending: {', '.join(pending)}"
            raise RuntimeError(msg)
        return {
            name: value for name, value in self._entries.items() if value is not None
        }


__all__ = ["DefinitionsTable"]
