"""In-memory values of the compact binary document format."""

from __future__ import annotations

import struct
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Union

MAX_LENGTH = 1 << 24
"""Largest length a string, byte string, key or container may declare."""


class BsonType(IntEnum):
    """Type codes as they appear on the wire. Code 0 is reserved."""

    I8 = 1
    I16 = 2
    I32 = 3
    I64 = 4
    U8 = 5
    U16 = 6
    U32 = 7
    U64 = 8
    F32 = 9
    F64 = 10
    TRUE = 11
    FALSE = 12
    STRING = 13
    BYTES = 14
    DATE = 15
    ARRAY = 16
    OBJECT = 17
    NULL = 18


class BsonError(ValueError):
    """Raised for malformed or unrepresentable data."""


class BsonOverflowError(BsonError):
    """Raised when a number or length does not fit its encoding."""


_INT_RANGES = {
    BsonType.I8: (-(1 << 7), (1 << 7) - 1),
    BsonType.I16: (-(1 << 15), (1 << 15) - 1),
    BsonType.I32: (-(1 << 31), (1 << 31) - 1),
    BsonType.I64: (-(1 << 63), (1 << 63) - 1),
    BsonType.U8: (0, (1 << 8) - 1),
    BsonType.U16: (0, (1 << 16) - 1),
    BsonType.U32: (0, (1 << 32) - 1),
    BsonType.U64: (0, (1 << 64) - 1),
    BsonType.DATE: (0, (1 << 64) - 1),
}

_FIXED_SIZES = {
    BsonType.I8: 1,
    BsonType.U8: 1,
    BsonType.I16: 2,
    BsonType.U16: 2,
    BsonType.I32: 4,
    BsonType.U32: 4,
    BsonType.F32: 4,
    BsonType.I64: 8,
    BsonType.U64: 8,
    BsonType.F64: 8,
    BsonType.DATE: 8,
}


def _encode_text(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")


def _round_f32(number: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", number))[0]
    except OverflowError as exc:
        raise BsonOverflowError(f"{number!r} does not fit in a 32-bit float") from exc


@dataclass(frozen=True)
class Pair:
    """A key and its value inside an object."""

    key: str
    value: Value

    def __post_init__(self) -> None:
        if not isinstance(self.key, str):
            raise TypeError(f"object key must be str, not {type(self.key).__name__}")
        if not isinstance(self.value, Value):
            raise TypeError(f"object value must be a Value, not {type(self.value).__name__}")


@dataclass(frozen=True)
class Value:
    """A typed value: the type code and its Python payload.

    Integers and dates hold an int, floats a float, strings a str, byte
    strings bytes, arrays a tuple of Value, objects a tuple of Pair, and
    true, false and null hold None.
    """

    type: BsonType
    data: Any = None

    def __post_init__(self) -> None:
        kind = BsonType(self.type)
        object.__setattr__(self, "type", kind)
        data = self.data

        if kind in _INT_RANGES:
            if not isinstance(data, int) or isinstance(data, bool):
                raise TypeError(f"{kind.name} needs an int, not {type(data).__name__}")
            low, high = _INT_RANGES[kind]
            if not low <= data <= high:
                raise BsonOverflowError(f"{data} is out of range for {kind.name}")
        elif kind in (BsonType.F32, BsonType.F64):
            if isinstance(data, bool) or not isinstance(data, (int, float)):
                raise TypeError(f"{kind.name} needs a float, not {type(data).__name__}")
            number = float(data)
            if kind is BsonType.F32:
                number = _round_f32(number)
            object.__setattr__(self, "data", number)
        elif kind is BsonType.STRING:
            if not isinstance(data, str):
                raise TypeError(f"STRING needs a str, not {type(data).__name__}")
        elif kind is BsonType.BYTES:
            if not isinstance(data, (bytes, bytearray, memoryview)):
                raise TypeError(f"BYTES needs bytes, not {type(data).__name__}")
            object.__setattr__(self, "data", bytes(data))
        elif kind is BsonType.ARRAY:
            elements = tuple(data)
            for element in elements:
                if not isinstance(element, Value):
                    raise TypeError(f"array element must be a Value, not {type(element).__name__}")
            object.__setattr__(self, "data", elements)
        elif kind is BsonType.OBJECT:
            pairs = tuple(data)
            for pair in pairs:
                if not isinstance(pair, Pair):
                    raise TypeError(f"object entry must be a Pair, not {type(pair).__name__}")
            object.__setattr__(self, "data", pairs)
        elif data is not None:
            raise TypeError(f"{kind.name} carries no data")

    def encoded_size(self) -> int:
        """Number of bytes the payload takes on the wire, type byte excluded."""
        kind = self.type
        if kind in _FIXED_SIZES:
            return _FIXED_SIZES[kind]
        if kind is BsonType.STRING:
            return 4 + len(_encode_text(self.data))
        if kind is BsonType.BYTES:
            return 4 + len(self.data)
        if kind is BsonType.ARRAY:
            return 8 + sum(1 + element.encoded_size() for element in self.data)
        if kind is BsonType.OBJECT:
            return 8 + sum(
                4 + len(_encode_text(pair.key)) + 1 + pair.value.encoded_size()
                for pair in self.data
            )
        return 0


def i8(value: int) -> Value:
    """A signed 8-bit integer."""
    return Value(BsonType.I8, value)


def i16(value: int) -> Value:
    """A signed 16-bit integer."""
    return Value(BsonType.I16, value)


def i32(value: int) -> Value:
    """A signed 32-bit integer."""
    return Value(BsonType.I32, value)


def i64(value: int) -> Value:
    """A signed 64-bit integer."""
    return Value(BsonType.I64, value)


def u8(value: int) -> Value:
    """An unsigned 8-bit integer."""
    return Value(BsonType.U8, value)


def u16(value: int) -> Value:
    """An unsigned 16-bit integer."""
    return Value(BsonType.U16, value)


def u32(value: int) -> Value:
    """An unsigned 32-bit integer."""
    return Value(BsonType.U32, value)


def u64(value: int) -> Value:
    """An unsigned 64-bit integer."""
    return Value(BsonType.U64, value)


def f32(value: float) -> Value:
    """A single-precision float; the value is rounded to 32 bits."""
    return Value(BsonType.F32, value)


def f64(value: float) -> Value:
    """A double-precision float."""
    return Value(BsonType.F64, value)


def date(value: int) -> Value:
    """A date stored as an unsigned 64-bit timestamp."""
    return Value(BsonType.DATE, value)


def string(text: str) -> Value:
    """A text string, stored as UTF-8."""
    return Value(BsonType.STRING, text)


def binary(data: bytes) -> Value:
    """A raw byte string."""
    return Value(BsonType.BYTES, data)


def array(elements: Iterable[Value]) -> Value:
    """An ordered list of values."""
    return Value(BsonType.ARRAY, tuple(elements))


def obj(pairs: Union[Mapping[str, Value], Iterable[Union[Pair, tuple]]]) -> Value:
    """An object from a mapping, Pairs, or (key, value) tuples, in order."""
    items = pairs.items() if isinstance(pairs, Mapping) else pairs
    entries = tuple(
        item if isinstance(item, Pair) else Pair(*item) for item in items
    )
    return Value(BsonType.OBJECT, entries)


def boolean(value: bool) -> Value:
    """True or false, carried by the type code alone."""
    return Value(BsonType.TRUE if value else BsonType.FALSE)


def null() -> Value:
    """The null value."""
    return Value(BsonType.NULL)