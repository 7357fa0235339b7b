# compactbson

A small binary document format with explicit value types. It has signed and
unsigned integers of 8, 16, 32 and 64 bits, 32- and 64-bit floats, dates,
booleans, null, UTF-8 strings, raw bytes, arrays and key/value objects.
Every number is stored little-endian. An array or object stores its member
count, the byte size of its body and the type codes of all its members first.
The members themselves follow.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Building values

`compactbson.value` has one constructor per type: `i8`, `i16`, `i32`, `i64`,
`u8`, `u16`, `u32`, `u64`, `f32`, `f64`, `date`, `string`, `binary`, `array`,
`obj`, `boolean` and `null`.

```python
from compactbson.value import obj, string, i32, boolean, binary, array, u8

document = obj([
    ("name", string("Alice")),
    ("age", i32(20)),
    ("is_student", boolean(True)),
    ("some_bytes", binary(b"\x00\x01")),
    ("scores", array([u8(3), u8(7)])),
])

print(document.encoded_size())
```

Each value is a frozen `Value` with a `BsonType` and a Python payload. An
object keeps its entries as `Pair` items, in the order they were given. `obj`
accepts a mapping, `Pair` items or `(key, value)` tuples.

The constructors check their input. An integer outside the range of its type
raises `BsonOverflowError`, a subclass of `BsonError`. For example, `u8(300)`
raises it. A payload of the wrong Python type raises `TypeError`. `f32` rounds
its value to single precision.

`encoded_size()` gives the number of bytes the payload takes when encoded. The
leading type byte is not counted.

## Encoding and decoding

```python
from compactbson.codec import serialize, deserialize, write, read

data = serialize(document)
decoded, end = deserialize(data, 0)
assert decoded == document
assert end == len(data)

with open("data.bson", "w+b") as fh:
    write(fh, document)
    fh.seek(0)
    assert read(fh) == document
```

`serialize` returns the type byte followed by the payload. `write` writes the
same bytes to a binary file and returns how many it wrote.

`deserialize` returns the decoded value and the offset just past it. The offset
defaults to 0. `deserialize_typed(data, offset, type_code)` and
`read_typed(file, type_code)` decode a payload whose type code is already known.

Malformed input raises `BsonError`. This covers truncated input and unknown
type codes. A string, byte string, key or container is read only if its
declared length is at most 16 MiB (`1 << 24`). A larger length raises
`BsonOverflowError`.

## Printing

```python
from compactbson.printer import format_value, print_value

print_value(document)
```

This prints:

```
{
  "name": "Alice",
  "age": 20,
  "is_student": true,
  "some_bytes": <Buffer 00 01>,
  "scores": [
    3,
    7
  ]
}
```

`print_value(value, file)` writes to standard output unless you pass another
text stream. `format_value(value, indent)` returns the text without printing
it.

With an indent of `-1`, members are not indented or separated by line breaks.
A line break still follows the opening bracket.

## Demo command

```
compactbson-demo [path]
```

The demo prints a byte value and then writes a sample document to `path`. The
default path is `data.bson` in the current directory. It prints the document,
reads it back and prints the loaded copy. If opening, writing or reading
fails, it reports the error on standard error and exits with status 1.

## What it does not do

The package is a library and a fixed demo. It has no command that converts or
inspects arbitrary files.