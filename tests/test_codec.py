import io
import struct

import pytest

from compactbson.codec import (
    deserialize,
    deserialize_typed,
    read,
    read_typed,
    serialize,
    write,
)
from compactbson.value import (
    BsonError,
    BsonOverflowError,
    BsonType,
    array,
    binary,
    boolean,
    date,
    f32,
    f64,
    i8,
    i16,
    i32,
    i64,
    null,
    obj,
    string,
    u8,
    u16,
    u32,
    u64,
)


def _document():
    return obj(
        [
            ("name", string("Alice")),
            ("age", i32(20)),
            ("is_student", boolean(True)),
            ("some_bytes", binary(b"\x00\x01")),
        ]
    )


SAMPLES = [
    i8(-128),
    i8(127),
    i16(-32768),
    i32(-(1 << 31)),
    i64(-(1 << 63)),
    i64((1 << 63) - 1),
    u8(255),
    u16(65535),
    u32((1 << 32) - 1),
    u64((1 << 64) - 1),
    f32(1.5),
    f64(-2.25),
    date(1_700_000_000_000),
    string(""),
    string("héllo wörld"),
    binary(b""),
    binary(bytes(range(256))),
    boolean(True),
    boolean(False),
    null(),
    array([]),
    array([u8(1), string("x"), null(), array([i16(-3)])]),
    obj({}),
    _document(),
    obj([("outer", obj([("inner", array([f64(0.5), boolean(False)]))]))]),
]


@pytest.mark.parametrize("value", SAMPLES)
def test_round_trip(value):
    data = serialize(value)
    decoded, end = deserialize(data)
    assert decoded == value
    assert end == len(data)


@pytest.mark.parametrize("value", SAMPLES)
def test_length_matches_encoded_size(value):
    assert len(serialize(value)) == 1 + value.encoded_size()


@pytest.mark.parametrize("value", SAMPLES)
def test_first_byte_is_type_code(value):
    assert serialize(value)[0] == value.type


def test_i32_wire_bytes():
    assert serialize(i32(20)) == b"\x03\x14\x00\x00\x00"


def test_string_wire_bytes():
    assert serialize(string("ab")) == bytes([BsonType.STRING]) + b"\x02\x00\x00\x00ab"


def test_array_wire_bytes():
    expected = (
        bytes([BsonType.ARRAY])
        + struct.pack("<II", 1, 2)
        + bytes([BsonType.U8])
        + b"\x07"
    )
    assert serialize(array([u8(7)])) == expected


def test_container_header_holds_count_and_body_size():
    data = serialize(_document())
    count, size = struct.unpack_from("<II", data, 1)
    assert count == 4
    assert size == len(data) - 9


def test_object_type_codes_precede_pairs():
    data = serialize(_document())
    assert list(data[9:13]) == [
        BsonType.STRING,
        BsonType.I32,
        BsonType.TRUE,
        BsonType.BYTES,
    ]


def test_little_endian_integers():
    assert serialize(u16(0x0102))[1:] == struct.pack("<H", 0x0102)
    assert serialize(i64(-2))[1:] == struct.pack("<q", -2)


def test_object_keys_preserve_order_and_text():
    value = obj([("zeta", null()), ("ä", u8(1)), ("alpha", null())])
    decoded, _ = deserialize(serialize(value))
    assert [pair.key for pair in decoded.data] == ["zeta", "ä", "alpha"]


def test_deserialize_sequence_with_offsets():
    first, second = string("one"), u64(42)
    data = serialize(first) + serialize(second)
    value, offset = deserialize(data)
    assert value == first
    value, end = deserialize(data, offset)
    assert value == second
    assert end == len(data)


def test_deserialize_typed_skips_type_byte():
    value = _document()
    data = serialize(value)
    decoded, end = deserialize_typed(data, 1, BsonType.OBJECT)
    assert decoded == value
    assert end == len(data)


def test_deserialize_accepts_bytearray_and_memoryview():
    data = serialize(_document())
    assert deserialize(bytearray(data))[0] == _document()
    assert deserialize(memoryview(data))[0] == _document()


@pytest.mark.parametrize("code", [0, 19, 255])
def test_invalid_type_code(code):
    with pytest.raises(BsonError):
        deserialize(bytes([code]) + b"\x00" * 8)


def test_invalid_nested_type_code():
    data = bytes([BsonType.ARRAY]) + struct.pack("<II", 1, 1) + b"\x00"
    with pytest.raises(BsonError):
        deserialize(data)


def test_deserialize_typed_rejects_bad_code():
    with pytest.raises(BsonError):
        deserialize_typed(b"\x00\x00", 0, 0)


def test_string_length_overflow():
    data = bytes([BsonType.STRING]) + struct.pack("<I", (1 << 24) + 1)
    with pytest.raises(BsonOverflowError):
        deserialize(data)


def test_array_count_overflow():
    data = bytes([BsonType.ARRAY]) + struct.pack("<II", (1 << 24) + 1, 0)
    with pytest.raises(BsonOverflowError):
        deserialize(data)


def test_object_size_overflow():
    data = bytes([BsonType.OBJECT]) + struct.pack("<II", 0, (1 << 24) + 1)
    with pytest.raises(BsonOverflowError):
        deserialize(data)


def test_object_key_length_overflow():
    data = (
        bytes([BsonType.OBJECT])
        + struct.pack("<II", 1, 0)
        + bytes([BsonType.NULL])
        + struct.pack("<I", (1 << 24) + 1)
    )
    with pytest.raises(BsonOverflowError):
        deserialize(data)


@pytest.mark.parametrize("value", SAMPLES)
def test_truncated_buffer_raises(value):
    data = serialize(value)
    if len(data) > 1:
        with pytest.raises(BsonError):
            deserialize(data[:-1])
    else:
        with pytest.raises(BsonError):
            deserialize(b"")


def test_negative_offset_rejected():
    with pytest.raises(BsonError):
        deserialize(serialize(null()), -1)


def test_write_and_read_file_object():
    stream = io.BytesIO()
    count = write(stream, _document())
    assert count == len(stream.getvalue())
    stream.seek(0)
    assert read(stream) == _document()


def test_write_and_read_path(tmp_path):
    path = tmp_path / "data.bson"
    with path.open("w+b") as handle:
        write(handle, _document())
        handle.seek(0)
        loaded = read(handle)
    assert loaded == _document()
    assert path.read_bytes() == serialize(_document())


def test_read_typed():
    stream = io.BytesIO(serialize(f64(3.5))[1:])
    assert read_typed(stream, BsonType.F64) == f64(3.5)


def test_read_empty_file_raises():
    with pytest.raises(BsonError):
        read(io.BytesIO(b""))


def test_read_truncated_file_raises():
    data = serialize(_document())
    with pytest.raises(BsonError):
        read(io.BytesIO(data[:-2]))


def test_read_invalid_type_raises():
    with pytest.raises(BsonError):
        read(io.BytesIO(b"\x00"))


def test_read_leaves_following_data():
    stream = io.BytesIO(serialize(u8(9)) + serialize(string("next")))
    assert read(stream) == u8(9)
    assert read(stream) == string("next")


def test_f32_round_trip_keeps_rounded_value():
    value = f32(0.1)
    decoded, _ = deserialize(serialize(value))
    assert decoded.data == value.data
    assert decoded.data == struct.unpack("<f", struct.pack("<f", 0.1))[0]