"""Forward-only byte cursor and buffer writer.

Wallet layouts are little-endian throughout. Every read names the field it
belongs to so that a truncated stream is reported as an EncodingError with
the field and the offset where the read started.
"""

from __future__ import annotations

import io
import struct

from zecwallettool.exceptions import EncodingError


class ByteReader:
    """Forward-only reader over an in-memory wallet file."""

    def __init__(self, data: bytes) -> None:
        """Initialize reader with file data.

        Args:
            data: Complete wallet file (or record) contents
        """
        self._data = bytes(data)
        self._offset = 0

    @property
    def offset(self) -> int:
        """Current position in the buffer."""
        return self._offset

    @property
    def remaining(self) -> int:
        """Number of unread bytes."""
        return len(self._data) - self._offset

    def read_exact(self, n: int, field: str) -> bytes:
        """Read exactly n bytes.

        Raises:
            EncodingError: If fewer than n bytes remain
        """
        if n < 0 or self._offset + n > len(self._data):
            raise EncodingError(
                field,
                self._offset,
                f"need {n} bytes, {self.remaining} available",
            )
        result = self._data[self._offset : self._offset + n]
        self._offset += n
        return result

    def read_u8(self, field: str) -> int:
        return self.read_exact(1, field)[0]

    def read_u16(self, field: str) -> int:
        return struct.unpack("<H", self.read_exact(2, field))[0]

    def read_u32(self, field: str) -> int:
        return struct.unpack("<I", self.read_exact(4, field))[0]

    def read_u64(self, field: str) -> int:
        return struct.unpack("<Q", self.read_exact(8, field))[0]

    def read_rest(self) -> bytes:
        """Consume and return all remaining bytes."""
        result = self._data[self._offset :]
        self._offset = len(self._data)
        return result

    def expect_end(self, field: str) -> None:
        """Fail if unread bytes remain after a complete structure."""
        if self.remaining:
            raise EncodingError(
                field, self._offset, f"{self.remaining} trailing bytes"
            )


class ByteWriter:
    """Accumulates little-endian fields into a byte string."""

    def __init__(self) -> None:
        self._buf = io.BytesIO()

    def write_bytes(self, data: bytes) -> None:
        self._buf.write(data)

    def write_u8(self, value: int) -> None:
        self._buf.write(struct.pack("<B", value))

    def write_u16(self, value: int) -> None:
        self._buf.write(struct.pack("<H", value))

    def write_u32(self, value: int) -> None:
        self._buf.write(struct.pack("<I", value))

    def write_u64(self, value: int) -> None:
        self._buf.write(struct.pack("<Q", value))

    def getvalue(self) -> bytes:
        return self._buf.getvalue()
