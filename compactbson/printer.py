"""Human-readable rendering of values."""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from compactbson.value import BsonType, Value

_INTEGER_TYPES = frozenset(
    {
        BsonType.I8,
        BsonType.I16,
        BsonType.I32,
        BsonType.I64,
        BsonType.U8,
        BsonType.U16,
        BsonType.U32,
        BsonType.U64,
    }
)


def _pad(count: int) -> str:
    return "  " * max(count, 0)


def _format_container(
    opening: str, closing: str, items: list[str], indent: int
) -> str:
    separator = "\n" if indent != -1 else ""
    parts = [opening, "\n"]
    last = len(items) - 1
    for position, item in enumerate(items):
        parts.append(_pad(indent + 1))
        parts.append(item)
        if position < last:
            parts.append(",")
        parts.append(separator)
    parts.append(_pad(indent))
    parts.append(closing)
    return "".join(parts)


def format_value(value: Optional[Value], indent: int = 0) -> str:
    """Render a value as text; an indent of -1 keeps nested items on one line."""
    if value is None:
        return "NULL"

    kind = value.type
    if kind in _INTEGER_TYPES:
        return str(value.data)
    if kind in (BsonType.F32, BsonType.F64):
        return f"{value.data:f}"
    if kind is BsonType.TRUE:
        return "true"
    if kind is BsonType.FALSE:
        return "false"
    if kind is BsonType.STRING:
        return f'"{value.data}"'
    if kind is BsonType.BYTES:
        return "<Buffer " + " ".join(f"{byte:02x}" for byte in value.data) + ">"
    if kind is BsonType.DATE:
        return f"date({value.data})"

    child_indent = indent + 1 if indent >= 0 else -1
    if kind is BsonType.ARRAY:
        items = [format_value(element, child_indent) for element in value.data]
        return _format_container("[", "]", items, indent)
    if kind is BsonType.OBJECT:
        items = [
            f'"{pair.key}": {format_value(pair.value, child_indent)}'
            for pair in value.data
        ]
        return _format_container("{", "}", items, indent)
    return "null"


def print_value(value: Optional[Value], file: Optional[TextIO] = None) -> None:
    """Write the rendered value and a newline to file, or standard output."""
    stream = sys.stdout if file is None else file
    stream.write(format_value(value, 0) + "\n")