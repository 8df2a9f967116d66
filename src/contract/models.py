"""Artifact models exposed at the contract boundary."""

from artifacts.models.artifacts.openapi import Document
from artifacts.models.artifacts.types import TypeDescription

__all__ = ["Document", "TypeDescription"]
