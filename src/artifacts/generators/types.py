"""Types artifact generator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from artifacts.utils import _write_jsonl
from contract.artifacts import TYPES_JSONL

if TYPE_CHECKING:
    from pathlib import Path

    from resolve.registry import TypeRegistry


class TypesGenerator:
    """Generates types.jsonl from the merged type registry."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "types"

    def generate(
        self,
        root: Path,
        out_dir: Path,
        **kwargs: Any,
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Generate types artifact."""
        registry: TypeRegistry = kwargs["registry"]

        out_dir.mkdir(parents=True, exist_ok=True)

        types = sorted(registry, key=lambda t: t.name)
        _write_jsonl(out_dir / TYPES_JSONL, types)

        type_dicts = [t.model_dump(mode="json") for t in types]
        kinds: dict[str, int] = {}
        for description in types:
            kinds[description.kind] = kinds.get(description.kind, 0) + 1

        return type_dicts, {"type_count": len(types), "kinds": kinds}
