"""OpenAPI document models.

Field names follow Python conventions; aliases carry the on-the-wire keys
(``$ref``, ``in``, ``operationId`` ...). Dump with ``by_alias=True`` and
``exclude_none=True`` to get the document as published.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

OPENAPI_VERSION = "3.0.0"

ReferenceType = Literal["object", "array", "integer", "boolean", "string", "number"]
ParameterLocation = Literal["header", "query", "path"]

SCHEMA_REF_PREFIX = "#/components/schemas/"


class _OpenAPIModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class SchemaReference(_OpenAPIModel):
    """Inline schema: a primitive, an array, a map or a ``$ref``."""

    type: ReferenceType | None = None
    format: str | None = None
    ref: str | None = Field(default=None, alias="$ref")
    items: SchemaReference | None = None
    additional_properties: SchemaReference | None = Field(
        default=None, alias="additionalProperties"
    )

    @classmethod
    def to_definition(cls, name: str) -> SchemaReference:
        return cls(ref=f"{SCHEMA_REF_PREFIX}{name}")


class MediaType(_OpenAPIModel):
    schema_: SchemaReference = Field(alias="schema")


class Body(_OpenAPIModel):
    description: str | None = None
    content: dict[str, MediaType] = Field(default_factory=dict)
    required: bool | None = None


class Parameter(_OpenAPIModel):
    in_: ParameterLocation = Field(alias="in")
    name: str
    required: bool | None = None
    schema_: SchemaReference | None = Field(default=None, alias="schema")


class Method(_OpenAPIModel):
    operation_id: str = Field(alias="operationId")
    summary: str
    parameters: list[Parameter] = Field(default_factory=list)
    responses: dict[str, Body] = Field(default_factory=dict)
    tags: list[str] | None = None
    request_body: Body | None = Field(default=None, alias="requestBody")
    security: list[dict[str, list[str]]] | None = None


class Definition(_OpenAPIModel):
    type: str = "object"
    description: str | None = None
    enum: list[str] | None = None
    properties: dict[str, SchemaReference] | None = None
    required: list[str] | None = None


class Server(_OpenAPIModel):
    url: str
    description: str | None = None


class Info(_OpenAPIModel):
    title: str = "My API"
    version: str = "1.0"
    description: str = "My API Document"


class Components(_OpenAPIModel):
    schemas: dict[str, Definition] = Field(default_factory=dict)
    security_schemes: dict[str, dict[str, Any]] | None = Field(
        default=None, alias="securitySchemes"
    )


class Document(_OpenAPIModel):
    openapi: str = OPENAPI_VERSION
    info: Info = Field(default_factory=Info)
    servers: list[Server] = Field(default_factory=list)
    paths: dict[str, dict[str, Method]] = Field(default_factory=dict)
    components: Components = Field(default_factory=Components)

    def to_wire(self) -> dict[str, Any]:
        """Return the document as plain JSON-ready data."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "OPENAPI_VERSION",
    "SCHEMA_REF_PREFIX",
    "Body",
    "Components",
    "Definition",
    "Document",
    "Info",
    "MediaType",
    "Method",
    "Parameter",
    "ParameterLocation",
    "ReferenceType",
    "SchemaReference",
    "Server",
]
