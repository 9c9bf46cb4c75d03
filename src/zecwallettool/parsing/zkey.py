"""Shielded key record (zkey) codec.

A zkey record has no self-describing schema; fields are read in a fixed
order and any misalignment would silently misread key material. Layout
(version 1, little-endian):

    version          u8        must be <= ZKEY_VERSION
    kind             u32       0 = HD, 1 = imported spending, 2 = imported viewing
    locked           u8        nonzero = spending key encrypted at rest
    spending_key     Optional<ExtendedSpendingKey>
    viewing_key      ExtendedFullViewingKey (mandatory)
    hd_index         Optional<u32>
    encrypted_blob   Optional<Vector<u8>>
    nonce            Optional<Vector<u8>>

The payment address is not stored; it is derived from the viewing key.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from zecwallettool.exceptions import UnsupportedVersionError
from zecwallettool.models import KeyKind, ShieldedKeyEntry
from zecwallettool.security import ExtendedFullViewingKey, ExtendedSpendingKey

from .primitives import read_byte_vector, read_optional, write_byte_vector, write_optional
from .stream import ByteReader, ByteWriter

if TYPE_CHECKING:
    from zecwallettool.security import AddressDeriver

logger = logging.getLogger(__name__)

# Highest record version this codec understands
ZKEY_VERSION = 1


def read_zkey(
    reader: ByteReader,
    deriver: AddressDeriver,
    strict: bool = False,
) -> ShieldedKeyEntry:
    """Decode one key record.

    Args:
        reader: Cursor positioned at the record's version byte
        deriver: Viewing key -> default address capability
        strict: Also enforce the optional cross-field invariants
            (see ShieldedKeyEntry.validate)

    Returns:
        The decoded entry

    Raises:
        UnsupportedVersionError: Version byte above ZKEY_VERSION; raised
            before any further byte is consumed
        UnknownKeyKindError: Kind discriminant outside {0, 1, 2}
        EncodingError: Truncated or malformed field
        InconsistentEntryError: Cross-field invariant violated
        MalformedKeyError: Propagated from the deriver
    """
    start = reader.offset
    version = reader.read_u8("zkey.version")
    if version > ZKEY_VERSION:
        raise UnsupportedVersionError(version, "zkey", start)

    kind_offset = reader.offset
    kind = KeyKind.from_wire(reader.read_u32("zkey.kind"), kind_offset)
    locked = reader.read_u8("zkey.locked") > 0
    spending_key = read_optional(reader, ExtendedSpendingKey.read, "zkey.spending_key")
    viewing_key = ExtendedFullViewingKey.read(reader)
    address = deriver.default_address(viewing_key)
    hd_index = read_optional(
        reader, lambda r: r.read_u32("zkey.hd_index"), "zkey.hd_index"
    )
    encrypted_blob = read_optional(
        reader,
        lambda r: read_byte_vector(r, "zkey.encrypted_blob"),
        "zkey.encrypted_blob",
    )
    nonce = read_optional(
        reader, lambda r: read_byte_vector(r, "zkey.nonce"), "zkey.nonce"
    )

    entry = ShieldedKeyEntry(
        kind=kind,
        viewing_key=viewing_key,
        address=address,
        locked=locked,
        spending_key=spending_key,
        hd_index=hd_index,
        encrypted_blob=encrypted_blob,
        nonce=nonce,
    )
    entry.validate(strict=strict)
    logger.debug(
        "Decoded zkey at offset %d: kind=%s locked=%s", start, kind.name, locked
    )
    return entry


def write_zkey(writer: ByteWriter, entry: ShieldedKeyEntry) -> None:
    """Encode one key record in the current record version.

    Exact structural inverse of read_zkey. The address is not written.
    """
    entry.validate()
    writer.write_u8(ZKEY_VERSION)
    writer.write_u32(int(entry.kind))
    writer.write_u8(1 if entry.locked else 0)
    write_optional(writer, entry.spending_key, lambda w, key: key.write(w))
    entry.viewing_key.write(writer)
    write_optional(writer, entry.hd_index, lambda w, index: w.write_u32(index))
    write_optional(writer, entry.encrypted_blob, write_byte_vector)
    write_optional(writer, entry.nonce, write_byte_vector)


def decode_zkey(
    data: bytes,
    deriver: AddressDeriver,
    strict: bool = False,
) -> ShieldedKeyEntry:
    """Decode a standalone record, rejecting trailing bytes."""
    reader = ByteReader(data)
    entry = read_zkey(reader, deriver, strict=strict)
    reader.expect_end("zkey")
    return entry


def encode_zkey(entry: ShieldedKeyEntry) -> bytes:
    """Encode a standalone record."""
    writer = ByteWriter()
    write_zkey(writer, entry)
    return writer.getvalue()
