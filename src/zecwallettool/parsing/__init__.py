"""Wallet binary format parsing and building.

This module handles low-level binary operations:
- Forward-only byte cursor and writer
- Optional / vector / CompactSize primitives
- Shielded key record (zkey) codec

All parsing uses Python's struct module for binary operations.
"""

from .primitives import (
    MAX_COMPACT_SIZE,
    read_byte_vector,
    read_compact_size,
    read_optional,
    read_vector,
    write_byte_vector,
    write_compact_size,
    write_optional,
    write_vector,
)
from .stream import ByteReader, ByteWriter
from .zkey import ZKEY_VERSION, decode_zkey, encode_zkey, read_zkey, write_zkey

__all__ = [
    # Stream
    "ByteReader",
    "ByteWriter",
    # Primitives
    "MAX_COMPACT_SIZE",
    "read_byte_vector",
    "read_compact_size",
    "read_optional",
    "read_vector",
    "write_byte_vector",
    "write_compact_size",
    "write_optional",
    "write_vector",
    # Key records
    "ZKEY_VERSION",
    "decode_zkey",
    "encode_zkey",
    "read_zkey",
    "write_zkey",
]
