"""Nullable-value and length-prefixed sequence encodings.

These are the two building blocks every wallet record uses for optional
and repeated fields:

- Optional: one presence byte (0 = absent, nonzero = present), then the
  value if present
- Vector: a CompactSize element count, then exactly that many elements

CompactSize is the Bitcoin variable-length integer: values below 253 take
one byte, larger values a marker byte (253, 254, 255) followed by a
little-endian u16, u32 or u64. Only the minimal encoding is accepted.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

from zecwallettool.exceptions import EncodingError

from .stream import ByteReader, ByteWriter

T = TypeVar("T")

# Upper bound on element counts; larger counts are treated as corruption
MAX_COMPACT_SIZE = 0x02000000


def read_compact_size(reader: ByteReader, field: str) -> int:
    """Read a CompactSize integer.

    Raises:
        EncodingError: On truncation, a non-minimal encoding, or a value
            above MAX_COMPACT_SIZE
    """
    start = reader.offset
    flag = reader.read_u8(field)
    if flag < 253:
        value = flag
        minimum = 0
    elif flag == 253:
        value = reader.read_u16(field)
        minimum = 253
    elif flag == 254:
        value = reader.read_u32(field)
        minimum = 0x10000
    else:
        value = reader.read_u64(field)
        minimum = 0x100000000

    if value < minimum:
        raise EncodingError(field, start, "non-canonical CompactSize")
    if value > MAX_COMPACT_SIZE:
        raise EncodingError(field, start, f"CompactSize {value} exceeds limit")
    return value


def write_compact_size(writer: ByteWriter, value: int) -> None:
    """Write the minimal CompactSize encoding of value."""
    if value < 0:
        raise ValueError("CompactSize must be non-negative")
    if value < 253:
        writer.write_u8(value)
    elif value <= 0xFFFF:
        writer.write_u8(253)
        writer.write_u16(value)
    elif value <= 0xFFFFFFFF:
        writer.write_u8(254)
        writer.write_u32(value)
    else:
        writer.write_u8(255)
        writer.write_u64(value)


def read_optional(
    reader: ByteReader,
    read_value: Callable[[ByteReader], T],
    field: str,
) -> T | None:
    """Read a presence-flagged value.

    Args:
        reader: Source cursor
        read_value: Decoder for the inner value; its own errors propagate
        field: Field name used in error messages

    Returns:
        The decoded value, or None if the presence byte is zero
    """
    if reader.read_u8(field) == 0:
        return None
    return read_value(reader)


def write_optional(
    writer: ByteWriter,
    value: T | None,
    write_value: Callable[[ByteWriter, T], None],
) -> None:
    """Write a presence byte and, if present, the value."""
    if value is None:
        writer.write_u8(0)
        return
    writer.write_u8(1)
    write_value(writer, value)


def read_vector(
    reader: ByteReader,
    read_item: Callable[[ByteReader], T],
    field: str,
) -> list[T]:
    """Read a CompactSize count followed by that many items, in order."""
    count = read_compact_size(reader, field)
    return [read_item(reader) for _ in range(count)]


def write_vector(
    writer: ByteWriter,
    items: Sequence[T],
    write_item: Callable[[ByteWriter, T], None],
) -> None:
    """Write the item count followed by each item in order."""
    write_compact_size(writer, len(items))
    for item in items:
        write_item(writer, item)


def read_byte_vector(reader: ByteReader, field: str) -> bytes:
    """Read a vector<u8>.

    Equivalent to read_vector with a one-byte item reader, done in a
    single slice.
    """
    count = read_compact_size(reader, field)
    return reader.read_exact(count, field)


def write_byte_vector(writer: ByteWriter, data: bytes) -> None:
    """Write a vector<u8>."""
    write_compact_size(writer, len(data))
    writer.write_bytes(data)
