"""Encoding and decoding of values to and from their wire form."""

from __future__ import annotations

import struct
from typing import BinaryIO, Union

from compactbson.value import (
    MAX_LENGTH,
    BsonError,
    BsonOverflowError,
    BsonType,
    Pair,
    Value,
)

_SCALAR_FORMATS = {
    BsonType.I8: struct.Struct("<b"),
    BsonType.I16: struct.Struct("<h"),
    BsonType.I32: struct.Struct("<i"),
    BsonType.I64: struct.Struct("<q"),
    BsonType.U8: struct.Struct("<B"),
    BsonType.U16: struct.Struct("<H"),
    BsonType.U32: struct.Struct("<I"),
    BsonType.U64: struct.Struct("<Q"),
    BsonType.DATE: struct.Struct("<Q"),
    BsonType.F32: struct.Struct("<f"),
    BsonType.F64: struct.Struct("<d"),
}

_U32 = struct.Struct("<I")
_U32_MAX = (1 << 32) - 1

Buffer = Union[bytes, bytearray, memoryview]


def _encode_text(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")


def _decode_text(raw: bytes) -> str:
    return raw.decode("utf-8", "surrogateescape")


def _u32(number: int) -> bytes:
    if number > _U32_MAX:
        raise BsonOverflowError(f"length {number} does not fit in 32 bits")
    return _U32.pack(number)


def _encode_payload(value: Value, out: bytearray) -> None:
    kind = value.type
    if kind in _SCALAR_FORMATS:
        out += _SCALAR_FORMATS[kind].pack(value.data)
    elif kind is BsonType.STRING:
        raw = _encode_text(value.data)
        out += _u32(len(raw))
        out += raw
    elif kind is BsonType.BYTES:
        out += _u32(len(value.data))
        out += value.data
    elif kind is BsonType.ARRAY:
        elements = value.data
        body = bytearray(element.type for element in elements)
        for element in elements:
            _encode_payload(element, body)
        out += _u32(len(elements))
        out += _u32(len(body))
        out += body
    elif kind is BsonType.OBJECT:
        pairs = value.data
        body = bytearray(pair.value.type for pair in pairs)
        for pair in pairs:
            key = _encode_text(pair.key)
            body += _u32(len(key))
            body += key
            _encode_payload(pair.value, body)
        out += _u32(len(pairs))
        out += _u32(len(body))
        out += body
    # TRUE, FALSE and NULL carry nothing beyond their type code.


def serialize(value: Value) -> bytes:
    """Encode a value, type byte first, into bytes."""
    out = bytearray([value.type])
    _encode_payload(value, out)
    return bytes(out)


def write(file: BinaryIO, value: Value) -> int:
    """Write the encoded value to a binary file; return the number of bytes."""
    data = serialize(value)
    written = file.write(data)
    if written is not None and written != len(data):
        raise OSError(f"short write: {written} of {len(data)} bytes")
    return len(data)


class _BufferReader:
    def __init__(self, data: Buffer, offset: int) -> None:
        if offset < 0:
            raise BsonError(f"offset must not be negative, got {offset}")
        self._view = memoryview(data).cast("B")
        self.position = offset

    def take(self, count: int) -> bytes:
        end = self.position + count
        if end > len(self._view):
            raise BsonError("unexpected end of data")
        chunk = bytes(self._view[self.position:end])
        self.position = end
        return chunk


class _FileReader:
    def __init__(self, file: BinaryIO) -> None:
        self._file = file

    def take(self, count: int) -> bytes:
        chunk = self._file.read(count) if count else b""
        if chunk is None or len(chunk) != count:
            raise BsonError("unexpected end of file")
        return chunk


_Reader = Union[_BufferReader, _FileReader]


def _check_type(type_code: int) -> BsonType:
    try:
        return BsonType(type_code)
    except ValueError:
        raise BsonError(f"invalid type code {type_code}") from None


def _read_u32(reader: _Reader) -> int:
    return _U32.unpack(reader.take(4))[0]


def _check_length(length: int) -> int:
    if length > MAX_LENGTH:
        raise BsonOverflowError(f"length {length} exceeds the limit of {MAX_LENGTH}")
    return length


def _read_container_header(reader: _Reader) -> int:
    count = _read_u32(reader)
    size = _read_u32(reader)
    _check_length(count)
    _check_length(size)
    return count


def _decode(reader: _Reader, type_code: int) -> Value:
    kind = _check_type(type_code)
    if kind in _SCALAR_FORMATS:
        layout = _SCALAR_FORMATS[kind]
        (number,) = layout.unpack(reader.take(layout.size))
        return Value(kind, number)
    if kind is BsonType.STRING:
        length = _check_length(_read_u32(reader))
        return Value(kind, _decode_text(reader.take(length)))
    if kind is BsonType.BYTES:
        length = _check_length(_read_u32(reader))
        return Value(kind, reader.take(length))
    if kind is BsonType.ARRAY:
        count = _read_container_header(reader)
        codes = reader.take(count)
        return Value(kind, tuple(_decode(reader, code) for code in codes))
    if kind is BsonType.OBJECT:
        count = _read_container_header(reader)
        codes = reader.take(count)
        pairs = []
        for code in codes:
            key_length = _check_length(_read_u32(reader))
            key = _decode_text(reader.take(key_length))
            pairs.append(Pair(key, _decode(reader, code)))
        return Value(kind, tuple(pairs))
    return Value(kind)


def deserialize(data: Buffer, offset: int = 0) -> tuple[Value, int]:
    """Decode one value starting at offset; return it and the offset after it."""
    reader = _BufferReader(data, offset)
    (type_code,) = reader.take(1)
    value = _decode(reader, type_code)
    return value, reader.position


def deserialize_typed(data: Buffer, offset: int, type_code: int) -> tuple[Value, int]:
    """Decode a payload of a known type at offset; return it and the end offset."""
    reader = _BufferReader(data, offset)
    value = _decode(reader, type_code)
    return value, reader.position


def read(file: BinaryIO) -> Value:
    """Read one value, type byte first, from a binary file."""
    reader = _FileReader(file)
    (type_code,) = reader.take(1)
    return _decode(reader, type_code)


def read_typed(file: BinaryIO, type_code: int) -> Value:
    """Read a payload of a known type from a binary file."""
    return _decode(_FileReader(file), type_code)