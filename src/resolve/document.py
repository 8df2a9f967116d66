"""Assembly of the OpenAPI document from a type registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import orjson
from pydantic_core import PydanticSerializationError

from artifacts.models.artifacts.openapi import Components, Document, Info, Server
from resolve.definitions import DefinitionsTable
from resolve.errors import FailedToConvertToJSON, MissingCriticalEndpointInformation
from resolve.registry import select_endpoints
from resolve.resolver import SchemaResolver
from rules.config import DocsConfig

if TYPE_CHECKING:
    from collections.abc import Callable

    from artifacts.models.artifacts.openapi import Method
    from resolve.registry import TypeRegistry

logger = logging.getLogger(__name__)


def generate_document(
    registry: TypeRegistry,
    config: DocsConfig | None = None,
    *,
    security_for_context: Callable[[str], str | None] | None = None,
    on_error: Callable[[MissingCriticalEndpointInformation], None] | None = None,
) -> Document:
    """Resolve every endpoint in ``registry`` into one OpenAPI document.

    Args:
        registry: Types merged from every source file
        config: Generation settings (defaults when omitted)
        security_for_context: Maps a handler context type name to a
            security scheme name; defaults to the config's
            ``context_security`` table
        on_error: When given, endpoints that fail to resolve are passed to
            it and skipped. Otherwise the first failure propagates and no
            document is produced.

    Returns:
        The assembled Document.

    Raises:
        MissingCriticalEndpointInformation: If an endpoint cannot be
            resolved and no ``on_error`` handler was given.
    """
    if config is None:
        config = DocsConfig()

    if security_for_context is None and config.context_security:
        security_for_context = config.security_for_context

    definitions = DefinitionsTable()
    resolver = SchemaResolver(
        registry,
        definitions,
        handler_signature=config.handler_signature,
        return_type_prefix=config.return_type_prefix,
        return_type_suffix=config.return_type_suffix,
        ignored_return_types=config.ignored_return_types,
        security_for_context=security_for_context,
    )

    endpoints = select_endpoints(registry, config.endpoint_marker)
    logger.debug(
        "Resolving %d endpoints conforming to %s",
        len(endpoints),
        config.endpoint_marker,
    )

    paths: dict[str, dict[str, Method]] = {}
    for endpoint in endpoints.values():
        try:
            resolved = resolver.resolve(endpoint)
        except MissingCriticalEndpointInformation as exc:
            if on_error is None:
                raise
            on_error(exc)
            continue

        methods = paths.setdefault(resolved.path, {})
        if resolved.method in methods:
            logger.warning(
                "%s %s is declared by both %s and %s; keeping %s",
                resolved.method.upper(),
                resolved.path,
                methods[resolved.method].operation_id,
                endpoint.name,
                endpoint.name,
            )
        methods[resolved.method] = resolved.operation

    return Document(
        info=Info(**config.info.model_dump()),
        servers=[Server(**server.model_dump()) for server in config.servers],
        paths=paths,
        components=Components(
            schemas=definitions.as_dict(),
            security_schemes=dict(config.security_schemes) or None,
        ),
    )


def document_to_json(document: Document) -> bytes:
    """Serialize a document to indented JSON.

    Raises:
        FailedToConvertToJSON: If the document cannot be serialized.
    """
    try:
        payload = document.to_wire()
        return orjson.dumps(payload, option=orjson.OPT_INDENT_2)
    except (orjson.JSONEncodeError, PydanticSerializationError) as exc:
        msg = f"Failed to convert document to JSON: {exc}"
        raise FailedToConvertToJSON(msg) from exc


__all__ = ["document_to_json", "generate_document"]
