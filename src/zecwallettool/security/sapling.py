"""Sapling key material and the address derivation capability.

The ZIP-32 extended keys stored in wallet files have a fixed 169-byte
layout:

    depth            u8
    parent_fvk_tag   [4]
    child_index      u32 (little-endian, bit 31 = hardened)
    chain_code       [32]
    key components   3 x [32]   (ask, nsk, ovk  or  ak, nk, ovk)
    dk               [32]       (diversifier key)

Reading and writing that layout is structural only. Whether ``ak`` is a
valid curve point, and which payment address a viewing key yields, is
decided by an external Sapling implementation exposed through the
AddressDeriver protocol. Third parties can implement the protocol without
importing zecwallettool.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from zecwallettool.exceptions import ConfigurationError

from . import bech32

if TYPE_CHECKING:
    from zecwallettool.parsing.stream import ByteReader, ByteWriter

EXTENDED_KEY_SIZE = 169
DIVERSIFIER_SIZE = 11
PK_D_SIZE = 32
ADDRESS_SIZE = DIVERSIFIER_SIZE + PK_D_SIZE


class Network(Enum):
    """Zcash network, selecting the Bech32 prefixes."""

    MAIN = "main"
    TEST = "test"

    @property
    def address_hrp(self) -> str:
        return "zs" if self is Network.MAIN else "ztestsapling"

    @property
    def viewing_key_hrp(self) -> str:
        return "zxviews" if self is Network.MAIN else "zxviewtestsapling"

    @property
    def spending_key_hrp(self) -> str:
        return (
            "secret-extended-key-main"
            if self is Network.MAIN
            else "secret-extended-key-test"
        )


def _decode_bech32(text: str, hrp: str, size: int) -> bytes:
    found, payload = bech32.decode(text)
    if found != hrp:
        raise ValueError(f"Expected prefix '{hrp}', got '{found}'")
    if len(payload) != size:
        raise ValueError(f"Expected {size} bytes, got {len(payload)}")
    return payload


@dataclass(frozen=True, slots=True)
class ExtendedSpendingKey:
    """ZIP-32 extended spending key.

    Secret components are excluded from repr.
    """

    depth: int
    parent_fvk_tag: bytes
    child_index: int
    chain_code: bytes = field(repr=False)
    ask: bytes = field(repr=False)
    nsk: bytes = field(repr=False)
    ovk: bytes = field(repr=False)
    dk: bytes = field(repr=False)

    @classmethod
    def read(cls, reader: ByteReader) -> ExtendedSpendingKey:
        depth = reader.read_u8("spending_key.depth")
        tag = reader.read_exact(4, "spending_key.parent_fvk_tag")
        child_index = reader.read_u32("spending_key.child_index")
        chain_code = reader.read_exact(32, "spending_key.chain_code")
        ask = reader.read_exact(32, "spending_key.ask")
        nsk = reader.read_exact(32, "spending_key.nsk")
        ovk = reader.read_exact(32, "spending_key.ovk")
        dk = reader.read_exact(32, "spending_key.dk")
        return cls(depth, tag, child_index, chain_code, ask, nsk, ovk, dk)

    def write(self, writer: ByteWriter) -> None:
        writer.write_u8(self.depth)
        writer.write_bytes(self.parent_fvk_tag)
        writer.write_u32(self.child_index)
        writer.write_bytes(self.chain_code)
        writer.write_bytes(self.ask)
        writer.write_bytes(self.nsk)
        writer.write_bytes(self.ovk)
        writer.write_bytes(self.dk)

    @classmethod
    def from_bytes(cls, data: bytes) -> ExtendedSpendingKey:
        from zecwallettool.parsing.stream import ByteReader

        reader = ByteReader(data)
        key = cls.read(reader)
        reader.expect_end("spending_key")
        return key

    def to_bytes(self) -> bytes:
        from zecwallettool.parsing.stream import ByteWriter

        writer = ByteWriter()
        self.write(writer)
        return writer.getvalue()

    def encode(self, network: Network) -> str:
        """Bech32 form used by wallet exports (secret-extended-key-...)."""
        return bech32.encode(network.spending_key_hrp, self.to_bytes())

    @classmethod
    def decode(cls, text: str, network: Network) -> ExtendedSpendingKey:
        """Parse the Bech32 form.

        Raises:
            ValueError: If the prefix, checksum or length is wrong
        """
        return cls.from_bytes(
            _decode_bech32(text, network.spending_key_hrp, EXTENDED_KEY_SIZE)
        )


@dataclass(frozen=True, slots=True)
class ExtendedFullViewingKey:
    """ZIP-32 extended full viewing key."""

    depth: int
    parent_fvk_tag: bytes
    child_index: int
    chain_code: bytes
    ak: bytes
    nk: bytes
    ovk: bytes
    dk: bytes

    @classmethod
    def read(cls, reader: ByteReader) -> ExtendedFullViewingKey:
        depth = reader.read_u8("viewing_key.depth")
        tag = reader.read_exact(4, "viewing_key.parent_fvk_tag")
        child_index = reader.read_u32("viewing_key.child_index")
        chain_code = reader.read_exact(32, "viewing_key.chain_code")
        ak = reader.read_exact(32, "viewing_key.ak")
        nk = reader.read_exact(32, "viewing_key.nk")
        ovk = reader.read_exact(32, "viewing_key.ovk")
        dk = reader.read_exact(32, "viewing_key.dk")
        return cls(depth, tag, child_index, chain_code, ak, nk, ovk, dk)

    def write(self, writer: ByteWriter) -> None:
        writer.write_u8(self.depth)
        writer.write_bytes(self.parent_fvk_tag)
        writer.write_u32(self.child_index)
        writer.write_bytes(self.chain_code)
        writer.write_bytes(self.ak)
        writer.write_bytes(self.nk)
        writer.write_bytes(self.ovk)
        writer.write_bytes(self.dk)

    @classmethod
    def from_bytes(cls, data: bytes) -> ExtendedFullViewingKey:
        from zecwallettool.parsing.stream import ByteReader

        reader = ByteReader(data)
        key = cls.read(reader)
        reader.expect_end("viewing_key")
        return key

    def to_bytes(self) -> bytes:
        from zecwallettool.parsing.stream import ByteWriter

        writer = ByteWriter()
        self.write(writer)
        return writer.getvalue()

    def encode(self, network: Network) -> str:
        """Bech32 form (zxviews...)."""
        return bech32.encode(network.viewing_key_hrp, self.to_bytes())

    @classmethod
    def decode(cls, text: str, network: Network) -> ExtendedFullViewingKey:
        return cls.from_bytes(
            _decode_bech32(text, network.viewing_key_hrp, EXTENDED_KEY_SIZE)
        )


@dataclass(frozen=True, slots=True)
class PaymentAddress:
    """Sapling payment address: diversifier and transmission key."""

    diversifier: bytes
    pk_d: bytes

    def __post_init__(self) -> None:
        if len(self.diversifier) != DIVERSIFIER_SIZE:
            raise ValueError(f"Diversifier must be {DIVERSIFIER_SIZE} bytes")
        if len(self.pk_d) != PK_D_SIZE:
            raise ValueError(f"pk_d must be {PK_D_SIZE} bytes")

    def to_bytes(self) -> bytes:
        return self.diversifier + self.pk_d

    @classmethod
    def from_bytes(cls, data: bytes) -> PaymentAddress:
        if len(data) != ADDRESS_SIZE:
            raise ValueError(f"Address must be {ADDRESS_SIZE} bytes")
        return cls(data[:DIVERSIFIER_SIZE], data[DIVERSIFIER_SIZE:])

    def encode(self, network: Network) -> str:
        """Bech32 form (zs1...)."""
        return bech32.encode(network.address_hrp, self.to_bytes())

    @classmethod
    def decode(cls, text: str, network: Network) -> PaymentAddress:
        return cls.from_bytes(_decode_bech32(text, network.address_hrp, ADDRESS_SIZE))


@runtime_checkable
class AddressDeriver(Protocol):
    """Protocol for viewing key to default address derivation.

    Implementations wrap an external Sapling library. Derivation must be
    pure and deterministic: the same viewing key always yields the same
    address.

    Implementations:
        - MockAddressDeriver: hash-based stand-in for testing
          (in zecwallettool.testing)
    """

    def default_address(self, viewing_key: ExtendedFullViewingKey) -> PaymentAddress:
        """Derive the default payment address of a viewing key.

        Raises:
            MalformedKeyError: If the key material is not valid Sapling
                key material
        """
        ...


def load_deriver(path: str) -> AddressDeriver:
    """Resolve a deriver from a ``module:attribute`` import path.

    Classes are instantiated with no arguments; any other attribute is
    used as-is.

    Raises:
        ConfigurationError: If the path can't be imported or the object
            doesn't implement AddressDeriver
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(f"Deriver path must look like 'module:attr', got {path!r}")
    try:
        module = importlib.import_module(module_name)
        obj = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Cannot load deriver {path!r}: {e}") from e

    deriver = obj() if isinstance(obj, type) else obj
    if not isinstance(deriver, AddressDeriver):
        raise ConfigurationError(f"{path!r} does not provide default_address()")
    return deriver
