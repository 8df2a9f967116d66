"""OpenAPI artifact generator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from artifacts.utils import _write_bytes
from contract.artifacts import OPENAPI_JSON
from resolve.document import document_to_json, generate_document

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from resolve.errors import MissingCriticalEndpointInformation
    from resolve.registry import TypeRegistry
    from rules.config import DocsConfig

logger = logging.getLogger(__name__)


class OpenAPIGenerator:
    """Generates openapi.json by resolving every endpoint in the registry."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "openapi"

    def generate(
        self,
        root: Path,
        out_dir: Path,
        **kwargs: Any,
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """Generate the OpenAPI document artifact."""
        registry: TypeRegistry = kwargs["registry"]
        config: DocsConfig | None = kwargs.get("config")
        on_error: Callable[[MissingCriticalEndpointInformation], None] | None = (
            kwargs.get("on_error")
        )

        out_dir.mkdir(parents=True, exist_ok=True)

        document = generate_document(registry, config, on_error=on_error)
        _write_bytes(out_dir / OPENAPI_JSON, document_to_json(document))

        operation_count = sum(len(methods) for methods in document.paths.values())
        logger.debug(
            "Wrote %s with %d operations", out_dir / OPENAPI_JSON, operation_count
        )
        return document.to_wire(), {
            "path_count": len(document.paths),
            "operation_count": operation_count,
            "schema_count": len(document.components.schemas),
        }
