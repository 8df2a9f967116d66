"""Parsing of SourceKitten structure and Swift type expressions."""

from parse.symbol_tree import SymbolNode, SymbolTree, SymbolTreeError, read_symbol_tree
from parse.type_expr import TypeExpressionError, clean_type_name, parse_type
from parse.type_metadata import build_type_description, extract_types

__all__ = [
    "SymbolNode",
    "SymbolTree",
    "SymbolTreeError",
    "TypeExpressionError",
    "build_type_description",
    "clean_type_name",
    "extract_types",
    "parse_type",
    "read_symbol_tree",
]
