"""Artifact generators for type metadata and the OpenAPI document."""

from artifacts.generators.openapi import OpenAPIGenerator
from artifacts.generators.types import TypesGenerator

__all__ = ["OpenAPIGenerator", "TypesGenerator"]
