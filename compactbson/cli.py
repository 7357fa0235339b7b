"""Command that writes a sample document, reads it back and prints it."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from compactbson import codec
from compactbson.printer import print_value
from compactbson.value import BsonError, binary, boolean, i32, obj, string

DEFAULT_PATH = "data.bson"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Round-trip a sample document through a file; return the exit status."""
    parser = argparse.ArgumentParser(
        description="Write a sample document to a file, read it back and print it."
    )
    parser.add_argument("path", nargs="?", default=DEFAULT_PATH, help="file to use")
    args = parser.parse_args(argv)

    try:
        file = open(args.path, "w+b")
    except OSError as exc:
        print(f"Failed to open file: {exc}", file=sys.stderr)
        return 1

    with file:
        some_bytes = binary(b"\x00\x01")
        print_value(some_bytes)

        document = obj(
            [
                ("name", string("Alice")),
                ("age", i32(20)),
                ("is_student", boolean(True)),
                ("some_bytes", some_bytes),
            ]
        )

        try:
            codec.write(file, document)
        except (OSError, BsonError) as exc:
            print(f"Failed to write BSON data to file: {exc}", file=sys.stderr)
            return 1

        print_value(document)

        try:
            file.seek(0)
        except OSError as exc:
            print(f"fseek failed: {exc}", file=sys.stderr)
            return 1

        try:
            loaded = codec.read(file)
        except (OSError, BsonError) as exc:
            print(f"Failed to load BSON data from file: {exc}", file=sys.stderr)
            return 1

        print_value(loaded)

    return 0


if __name__ == "__main__":
    sys.exit(main())