"""Parsing of Swift type expressions into tagged variants.

Type signatures only reach us as text (``"[User]?"``,
``"Dictionary<String, Int>"``, ``"Page<Item>"``). They are parsed once into
a small tree of frozen dataclasses so callers match on shape instead of
re-running patterns over raw strings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

VOID_NAMES = frozenset({"Void", "()"})

PAGE_WRAPPERS = frozenset({"Page"})


class TypeExpressionError(ValueError):
    """Raised when a type expression cannot be parsed."""


@dataclass(frozen=True)
class Primitive:
    name: str
    json_type: str
    format: str | None = None


@dataclass(frozen=True)
class ObjectRef:
    name: str


@dataclass(frozen=True)
class ArrayOf:
    element: TypeExpr


@dataclass(frozen=True)
class DictOf:
    key: TypeExpr
    value: TypeExpr


@dataclass(frozen=True)
class PageOf:
    element: TypeExpr


@dataclass(frozen=True)
class OptionalOf:
    wrapped: TypeExpr


TypeExpr = Primitive | ObjectRef | ArrayOf | DictOf | PageOf | OptionalOf

# Swift name (or JSON name, so mapping is idempotent) -> (json type, format)
_PRIMITIVES: dict[str, tuple[str, str | None]] = {
    "Bool": ("boolean", None),
    "boolean": ("boolean", None),
    "Int": ("integer", None),
    "Int32": ("integer", "int32"),
    "Int64": ("integer", "int64"),
    "integer": ("integer", None),
    "String": ("string", None),
    "string": ("string", None),
    "UUID": ("string", "uuid"),
    "URL": ("string", "uri"),
    "Date": ("string", "date-time"),
    "Double": ("number", "double"),
    "Float": ("number", "float"),
    "number": ("number", None),
}

_TOKEN = re.compile(r"\s*(?:([A-Za-z_][A-Za-z0-9_.]*)|(\S))")


def primitive_for(name: str) -> Primitive | None:
    """Return the primitive mapping for a bare type name, if any."""
    mapped = _PRIMITIVES.get(name)
    if mapped is None:
        return None
    json_type, fmt = mapped
    return Primitive(name=name, json_type=json_type, format=fmt)


def clean_type_name(text: str) -> str:
    """Strip whitespace and optional markers from a type expression.

    Cleaning is idempotent: ``clean_type_name(clean_type_name(t))`` equals
    ``clean_type_name(t)``.
    """
    return text.strip().strip("?!").strip()


def is_void(text: str) -> bool:
    return clean_type_name(text) in VOID_NAMES


def _tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    pos = 0
    stripped = text.rstrip()
    while pos < len(stripped):
        match = _TOKEN.match(stripped, pos)
        if match is None:
            msg = f"Unexpected character at {pos} in type expression {text!r}"
            raise TypeExpressionError(msg)
        tokens.append(match.group(1) or match.group(2))
        pos = match.end()
    return tokens


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0

    def _error(self, message: str) -> TypeExpressionError:
        return TypeExpressionError(f"{message} in type expression {self.text!r}")

    def _peek(self) -> str | None:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _next(self) -> str:
        token = self._peek()
        if token is None:
            raise self._error("Unexpected end")
        self.pos += 1
        return token

    def _expect(self, expected: str) -> None:
        token = self._next()
        if token != expected:
            raise self._error(f"Expected {expected!r}, got {token!r}")

    def parse(self) -> TypeExpr:
        expr = self._type()
        if self._peek() is not None:
            raise self._error(f"Trailing token {self._peek()!r}")
        return expr

    def _type(self) -> TypeExpr:
        expr = self._primary()
        while self._peek() in ("?", "!"):
            self._next()
            expr = OptionalOf(expr)
        return expr

    def _primary(self) -> TypeExpr:
        token = self._next()
        if token == "[":
            first = self._type()
            if self._peek() == ":":
                self._next()
                value = self._type()
                self._expect("]")
                return DictOf(first, value)
            self._expect("]")
            return ArrayOf(first)
        if token == "(":
            self._expect(")")
            return ObjectRef("Void")
        if not (token[0].isalpha() or token[0] == "_"):
            raise self._error(f"Unexpected token {token!r}")

        args: list[TypeExpr] = []
        if self._peek() == "<":
            self._next()
            args.append(self._type())
            while self._peek() == ",":
                self._next()
                args.append(self._type())
            self._expect(">")
        return _apply_generic(token, args)


def _apply_generic(name: str, args: list[TypeExpr]) -> TypeExpr:
    if not args:
        return primitive_for(name) or ObjectRef(name)
    if name == "Array" and len(args) == 1:
        return ArrayOf(args[0])
    if name == "Set" and len(args) == 1:
        return ArrayOf(args[0])
    if name == "Dictionary" and len(args) == 2:
        return DictOf(args[0], args[1])
    if name == "Optional" and len(args) == 1:
        return OptionalOf(args[0])
    if name in PAGE_WRAPPERS and len(args) == 1:
        return PageOf(args[0])
    rendered = ", ".join(render_type(arg) for arg in args)
    return ObjectRef(f"{name}<{rendered}>")


def parse_type(text: str) -> TypeExpr:
    """Parse a Swift type expression.

    Examples:
        >>> parse_type("[User]?")
        OptionalOf(wrapped=ArrayOf(element=ObjectRef(name='User')))
        >>> isinstance(parse_type("Dictionary<String, Int>"), DictOf)
        True

    Raises:
        TypeExpressionError: If the text is not a supported type expression.
    """
    return _Parser(text).parse()


def unwrap_optional(expr: TypeExpr) -> TypeExpr:
    while isinstance(expr, OptionalOf):
        expr = expr.wrapped
    return expr


def render_type(expr: TypeExpr) -> str:
    """Render a parsed expression back to Swift syntax."""
    if isinstance(expr, (Primitive, ObjectRef)):
        return expr.name
    if isinstance(expr, ArrayOf):
        return f"[{render_type(expr.element)}]"
    if isinstance(expr, DictOf):
        return f"[{render_type(expr.key)}: {render_type(expr.value)}]"
    if isinstance(expr, PageOf):
        return f"Page<{render_type(expr.element)}>"
    return f"{render_type(expr.wrapped)}?"


__all__ = [
    "PAGE_WRAPPERS",
    "VOID_NAMES",
    "ArrayOf",
    "DictOf",
    "ObjectRef",
    "OptionalOf",
    "PageOf",
    "Primitive",
    "TypeExpr",
    "TypeExpressionError",
    "clean_type_name",
    "is_void",
    "parse_type",
    "primitive_for",
    "render_type",
    "unwrap_optional",
]
