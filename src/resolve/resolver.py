"""Resolution of endpoint types into OpenAPI operations and definitions.

An endpoint is a type conforming to the endpoint marker protocol. Its
static ``method`` and ``path`` properties give the route, and its handler
method's arguments (``context``, ``parameters``, ``query``, ``body``) and
return type describe what the route exchanges. Every object or enum type
reached from there is registered once in a shared DefinitionsTable.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from artifacts.models.artifacts.openapi import (
    Body,
    Definition,
    MediaType,
    Method,
    Parameter,
    SchemaReference,
)
from parse.type_expr import (
    ArrayOf,
    DictOf,
    OptionalOf,
    PageOf,
    Primitive,
    TypeExpressionError,
    clean_type_name,
    is_void,
    parse_type,
    render_type,
    unwrap_optional,
)
from resolve.definitions import DefinitionsTable
from resolve.errors import MissingCriticalEndpointInformation
from rules.config import (
    HANDLER_SIGNATURE,
    IGNORED_RETURN_TYPES,
    RETURN_TYPE_PREFIX,
    RETURN_TYPE_SUFFIX,
)
from utils import unquote_literal

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from artifacts.models.artifacts.types import (
        ArgumentDescription,
        PropertyDescription,
        TypeDescription,
    )
    from parse.type_expr import TypeExpr
    from resolve.registry import TypeRegistry

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
PAGE_METADATA_NAME = "VaporPageMetadata"
PAGE_ENVELOPE_PREFIX = "VaporPage"

_NAME_PARTS = re.compile(r"[A-Za-z0-9]+")


@dataclass(frozen=True)
class ResolvedOperation:
    path: str
    method: str
    operation: Method


def clean_path(value: str) -> str:
    return unquote_literal(value.strip())


def replace_placeholder(path: str, name: str) -> str:
    """Rewrite the whole-segment placeholder ``:name`` as ``{name}``."""
    return re.sub(rf":{re.escape(name)}(?=/|$)", f"{{{name}}}", path)


def clean_method(value: str) -> str:
    """Normalize ``.get`` / ``APIRoutingHTTPMethod.get`` to ``get``."""
    return value.strip().rsplit(".", 1)[-1].lower()


def tags_for_path(path: str) -> list[str] | None:
    """Tag an operation with its first path segment, capitalized."""
    for segment in path.split("/"):
        if not segment:
            continue
        if segment.startswith((":", "{")):
            return None
        return [segment.capitalize()]
    return None


def _primitive_schema(primitive: Primitive) -> SchemaReference:
    return SchemaReference(type=primitive.json_type, format=primitive.format)


def _page_metadata_definition() -> Definition:
    integer = SchemaReference(type="integer")
    return Definition(
        properties={"page": integer, "per": integer, "total": integer},
        required=["page", "per", "total"],
    )


class SchemaResolver:
    """Resolve endpoint TypeDescriptions against a TypeRegistry.

    One resolver owns one DefinitionsTable for a whole document, so types
    shared between endpoints are emitted once.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        definitions: DefinitionsTable | None = None,
        *,
        handler_signature: str = HANDLER_SIGNATURE,
        return_type_prefix: str = RETURN_TYPE_PREFIX,
        return_type_suffix: str = RETURN_TYPE_SUFFIX,
        ignored_return_types: Iterable[str] = IGNORED_RETURN_TYPES,
        security_for_context: Callable[[str], str | None] | None = None,
    ) -> None:
        self.registry = registry
        self.definitions = (
            definitions if definitions is not None else DefinitionsTable()
        )
        self.handler_signature = handler_signature
        self.return_type_prefix = return_type_prefix
        self.return_type_suffix = return_type_suffix
        self.ignored_return_types = frozenset(ignored_return_types)
        self.security_for_context = security_for_context

    # -- endpoint level ---------------------------------------------------

    def resolve(self, endpoint: TypeDescription) -> ResolvedOperation:
        """Resolve one endpoint into its path, HTTP method and operation.

        Raises:
            MissingCriticalEndpointInformation: If route facts, the handler
                method or a referenced type cannot be found.
        """
        checkpoint = self.definitions.checkpoint()
        try:
            return self._resolve(endpoint)
        except MissingCriticalEndpointInformation:
            self.definitions.rollback(checkpoint)
            raise

    def _resolve(self, endpoint: TypeDescription) -> ResolvedOperation:
        method_value = self._route_fact(endpoint, "method")
        path_value = self._route_fact(endpoint, "path")

        handler = endpoint.static_methods.get(self.handler_signature)
        if handler is None:
            msg = (
                f"{self.handler_signature} not found in {endpoint.name}. "
                "Expecting a static handler method in the expected format"
            )
            raise MissingCriticalEndpointInformation(
                endpoint.name, self.handler_signature, msg
            )

        path = clean_path(path_value)
        http_method = clean_method(method_value)
        parameters: list[Parameter] = []
        request_body: Body | None = None
        security: list[dict[str, list[str]]] | None = None

        for argument in handler.ordered_arguments():
            if argument.name == "context":
                security = self._security_requirement(argument)
            elif is_void(argument.type):
                continue
            elif argument.name == "body":
                request_body = self._request_body(endpoint, argument)
            elif argument.name == "parameters":
                path = self._add_path_parameters(endpoint, argument, path, parameters)
            elif argument.name == "query":
                parameters.extend(self._query_parameters(endpoint, argument))

        responses: dict[str, Body] = {}
        if handler.return_type:
            response = self._response(endpoint, handler.return_type)
            if response is not None:
                responses["200"] = response
        if "200" not in responses:
            responses["200"] = Body(description="", content={})

        operation = Method(
            operation_id=endpoint.name,
            summary=endpoint.name,
            parameters=parameters,
            responses=responses,
            tags=tags_for_path(path),
            request_body=request_body,
            security=security,
        )
        logger.debug("Resolved %s as %s %s", endpoint.name, http_method, path)
        return ResolvedOperation(path=path, method=http_method, operation=operation)

    def _route_fact(self, endpoint: TypeDescription, field: str) -> str:
        prop = endpoint.static_properties.get(field)
        if prop is None or prop.default_value is None:
            msg = (
                f"{field} issue in {endpoint.name}. "
                "Expecting a static var with default value set"
            )
            raise MissingCriticalEndpointInformation(endpoint.name, field, msg)
        return prop.default_value

    def _security_requirement(
        self, argument: ArgumentDescription
    ) -> list[dict[str, list[str]]] | None:
        if self.security_for_context is None:
            return None
        scheme = self.security_for_context(clean_type_name(argument.type))
        if scheme is None:
            return None
        return [{scheme: []}]

    def _lookup(
        self, type_name: str, endpoint: TypeDescription, usage: str
    ) -> TypeDescription:
        description = self.registry.get(type_name)
        if description is None:
            msg = (
                f"Can't find information about {type_name} "
                f"but it is used in {usage} of {endpoint.name}"
            )
            raise MissingCriticalEndpointInformation(endpoint.name, type_name, msg)
        return description

    def _parse(self, text: str, endpoint: str, usage: str) -> TypeExpr:
        try:
            return parse_type(text)
        except TypeExpressionError as exc:
            msg = f"Can't parse type {text!r} used in {usage} of {endpoint}: {exc}"
            raise MissingCriticalEndpointInformation(endpoint, text, msg) from exc

    def _request_body(
        self, endpoint: TypeDescription, argument: ArgumentDescription
    ) -> Body:
        expr = self._parse(argument.type, endpoint.name, "the body")
        schema = self.schema_for(expr, endpoint=endpoint.name, usage="the body")
        return Body(
            content={JSON_CONTENT_TYPE: MediaType(schema_=schema)},
            required=True,
        )

    def _add_path_parameters(
        self,
        endpoint: TypeDescription,
        argument: ArgumentDescription,
        path: str,
        parameters: list[Parameter],
    ) -> str:
        parameters_type = self._lookup(
            clean_type_name(argument.type), endpoint, "the parameters"
        )
        for prop in parameters_type.ordered_instance_properties():
            path = replace_placeholder(path, prop.name)
            parameters.append(
                Parameter(
                    in_="path",
                    name=prop.name,
                    required=True,
                    schema_=self._path_parameter_schema(prop, endpoint),
                )
            )
        return path

    def _path_parameter_schema(
        self, prop: PropertyDescription, endpoint: TypeDescription
    ) -> SchemaReference:
        expr = unwrap_optional(
            self._parse(prop.type, endpoint.name, f"path parameter {prop.name}")
        )
        if isinstance(expr, Primitive):
            return _primitive_schema(expr)
        return SchemaReference(type="object")

    def _query_parameters(
        self, endpoint: TypeDescription, argument: ArgumentDescription
    ) -> list[Parameter]:
        query_type = self._lookup(clean_type_name(argument.type), endpoint, "the query")
        parameters: list[Parameter] = []
        for prop in query_type.ordered_instance_properties():
            usage = f"query parameter {prop.name}"
            expr = self._parse(prop.type, endpoint.name, usage)
            parameters.append(
                Parameter(
                    in_="query",
                    name=prop.name,
                    required=not isinstance(expr, OptionalOf),
                    schema_=self.schema_for(expr, endpoint=endpoint.name, usage=usage),
                )
            )
        return parameters

    def strip_async_wrapper(self, return_type: str) -> str:
        text = return_type.strip()
        prefix, suffix = self.return_type_prefix, self.return_type_suffix
        if (
            text.startswith(prefix)
            and text.endswith(suffix)
            and len(text) > len(prefix) + len(suffix)
        ):
            return text[len(prefix) : len(text) - len(suffix)].strip()
        return text

    def _response(self, endpoint: TypeDescription, return_type: str) -> Body | None:
        cleaned = self.strip_async_wrapper(return_type)
        if is_void(cleaned):
            return None
        if clean_type_name(cleaned) in self.ignored_return_types:
            return None

        expr = unwrap_optional(self._parse(cleaned, endpoint.name, "the return type"))
        if isinstance(expr, DictOf):
            logger.debug(
                "Dropping dictionary response %s of %s", cleaned, endpoint.name
            )
            return None

        schema = self.schema_for(expr, endpoint=endpoint.name, usage="the return type")
        return Body(
            description="",
            content={JSON_CONTENT_TYPE: MediaType(schema_=schema)},
        )

    # -- schemas and definitions -------------------------------------------

    def schema_for(
        self, expr: TypeExpr, *, endpoint: str, usage: str
    ) -> SchemaReference:
        """Build the inline schema for a type expression.

        Object and enum references are registered as definitions and
        returned as ``$ref`` schemas.
        """
        expr = unwrap_optional(expr)
        if isinstance(expr, Primitive):
            return _primitive_schema(expr)
        if isinstance(expr, ArrayOf):
            return SchemaReference(
                type="array",
                items=self.schema_for(expr.element, endpoint=endpoint, usage=usage),
            )
        if isinstance(expr, DictOf):
            return SchemaReference(
                type="object",
                additional_properties=self.schema_for(
                    expr.value, endpoint=endpoint, usage=usage
                ),
            )
        if isinstance(expr, PageOf):
            name = self.register_page(expr, endpoint=endpoint, usage=usage)
            return SchemaReference.to_definition(name)
        name = self.register(expr.name, endpoint=endpoint, usage=usage)
        return SchemaReference.to_definition(name)

    def _define(self, name: str, build: Callable[[], Definition]) -> str:
        if not self.definitions.reserve(name):
            return name
        try:
            definition = build()
        except Exception:
            self.definitions.release(name)
            raise
        self.definitions.fill(name, definition)
        logger.debug("Registered definition %s", name)
        return name

    def register(
        self,
        type_name: str,
        *,
        endpoint: str | None = None,
        usage: str = "a schema",
    ) -> str:
        """Register the definition for ``type_name`` and its dependencies.

        Idempotent: a name already in the table is returned immediately,
        before any member is visited.

        Returns:
            The definition name (the registry's name for the type).
        """
        description = self.registry.get(clean_type_name(type_name))
        if description is None:
            owner = endpoint or type_name
            msg = (
                f"Can't find information about {type_name} "
                f"but it is used in {usage} of {owner}"
            )
            raise MissingCriticalEndpointInformation(owner, type_name, msg)

        return self._define(
            description.name,
            lambda: self._build_definition(description, endpoint=endpoint),
        )

    def _build_definition(
        self, description: TypeDescription, *, endpoint: str | None
    ) -> Definition:
        if description.kind == "enum":
            return Definition(
                type="string",
                enum=[case.value for case in description.ordered_cases()],
            )

        owner = endpoint or description.name
        properties: dict[str, SchemaReference] = {}
        required: list[str] = []
        for prop in description.ordered_instance_properties():
            usage = f"property {prop.name} of {description.name}"
            expr = self._parse(prop.type, owner, usage)
            properties[prop.name] = self.schema_for(expr, endpoint=owner, usage=usage)
            if not isinstance(expr, OptionalOf):
                required.append(prop.name)

        return Definition(properties=properties, required=required or None)

    def register_page(self, expr: PageOf, *, endpoint: str, usage: str) -> str:
        """Register the paginated envelope for ``Page<T>``.

        The envelope holds ``items`` (array of T) and ``metadata`` (the
        shared page metadata definition); T is registered as well.
        """
        inner = unwrap_optional(expr.element)
        name = PAGE_ENVELOPE_PREFIX + "".join(_NAME_PARTS.findall(render_type(inner)))

        def build() -> Definition:
            items = SchemaReference(
                type="array",
                items=self.schema_for(inner, endpoint=endpoint, usage=usage),
            )
            self._define(PAGE_METADATA_NAME, _page_metadata_definition)
            return Definition(
                properties={
                    "items": items,
                    "metadata": SchemaReference.to_definition(PAGE_METADATA_NAME),
                },
                required=["items", "metadata"],
            )

        return self._define(name, build)


__all__ = [
    "HANDLER_SIGNATURE",
    "IGNORED_RETURN_TYPES",
    "JSON_CONTENT_TYPE",
    "PAGE_ENVELOPE_PREFIX",
    "PAGE_METADATA_NAME",
    "RETURN_TYPE_PREFIX",
    "RETURN_TYPE_SUFFIX",
    "ResolvedOperation",
    "SchemaResolver",
    "clean_method",
    "clean_path",
    "replace_placeholder",
    "tags_for_path",
]
