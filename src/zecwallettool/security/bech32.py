"""Bech32 (BIP-173) encoding for Sapling keys and addresses.

Zcash reuses the Bech32 checksum but not BIP-173's 90-character cap:
an encoded extended spending key is well over 200 characters. The
``bech32`` package enforces that cap in ``bech32_decode``, so decoding
splits the string here and leaves checksum and bit conversion to the
package.
"""

from __future__ import annotations

import bech32


def encode(hrp: str, payload: bytes) -> str:
    """Encode bytes under the given human-readable part."""
    return bech32.bech32_encode(hrp, bech32.convertbits(payload, 8, 5))


def decode(text: str) -> tuple[str, bytes]:
    """Decode a Bech32 string.

    Returns:
        Tuple of (human-readable part, payload bytes)

    Raises:
        ValueError: If the string is malformed or the checksum is wrong
    """
    if text.lower() != text and text.upper() != text:
        raise ValueError("Mixed-case Bech32 string")
    text = text.lower()
    pos = text.rfind("1")
    if pos < 1 or pos + 7 > len(text):
        raise ValueError("Missing Bech32 separator or checksum")
    hrp = text[:pos]
    if any(ord(c) < 33 or ord(c) > 126 for c in hrp):
        raise ValueError("Invalid character in Bech32 prefix")
    data = []
    for c in text[pos + 1 :]:
        value = bech32.CHARSET.find(c)
        if value < 0:
            raise ValueError(f"Invalid Bech32 character: {c!r}")
        data.append(value)
    if not bech32.bech32_verify_checksum(hrp, data):
        raise ValueError("Bech32 checksum mismatch")
    payload = bech32.convertbits(data[:-6], 5, 8, False)
    if payload is None:
        raise ValueError("Invalid padding in Bech32 payload")
    return hrp, bytes(payload)
