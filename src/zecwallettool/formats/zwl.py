"""ZecWallet Lite wallet file format.

The wallet file starts with the key section, all little-endian:

    wallet_version   u64
    keys_version     u64
    encrypted        u8
    enc_seed         [48]        seed ciphertext (zeros when not encrypted)
    seed_nonce       Vector<u8>
    seed             [32]        plaintext seed (zeros when encrypted)
    zkeys            Vector<zkey record>
    ...              transparent keys, blocks, transactions, options

Everything after the shielded keys is kept verbatim as the wallet's
trailer so that a same-format round trip is byte-exact.
"""

from __future__ import annotations

import logging

from zecwallettool.config import ConversionSettings
from zecwallettool.exceptions import ConversionError, UnsupportedVersionError
from zecwallettool.models import CanonicalWallet, EncryptedSeed, WalletMetadata
from zecwallettool.parsing import (
    ByteReader,
    ByteWriter,
    read_byte_vector,
    read_vector,
    read_zkey,
    write_byte_vector,
    write_vector,
    write_zkey,
)

logger = logging.getLogger(__name__)

FORMAT_NAME = "zwl"

# Wallet versions whose key section uses the layout above
ZWL_MIN_WALLET_VERSION = 15
ZWL_WALLET_VERSION = 25

# Key section versions with a Vector<zkey> list (older ones store raw keys)
ZWL_MIN_KEYS_VERSION = 7
ZWL_KEYS_VERSION = 21

ENC_SEED_SIZE = 48
SEED_SIZE = 32

# Empty transparent key vector; ZecWallet Lite rebuilds the rest on rescan
EMPTY_TRAILER = b"\x00"


def _check_version(
    version: int, minimum: int, maximum: int, structure: str, offset: int
) -> None:
    if not minimum <= version <= maximum:
        raise UnsupportedVersionError(version, structure, offset)


class ZecWalletLiteAdapter:
    """Reader/writer for ZecWallet Lite wallet files."""

    name = FORMAT_NAME

    def __init__(self, settings: ConversionSettings | None = None) -> None:
        self.settings = settings or ConversionSettings()

    def parse(self, data: bytes) -> CanonicalWallet:
        """Parse a ZecWallet Lite wallet file.

        Args:
            data: Complete file contents

        Returns:
            CanonicalWallet with all shielded keys

        Raises:
            UnsupportedVersionError: Wallet, key section or record version
                outside the supported range
            UnknownKeyKindError: Corrupt key kind in a record
            EncodingError: Truncated or malformed field
        """
        deriver = self.settings.require_deriver()
        reader = ByteReader(data)

        wallet_version = reader.read_u64("wallet_version")
        _check_version(
            wallet_version, ZWL_MIN_WALLET_VERSION, ZWL_WALLET_VERSION, "wallet", 0
        )
        keys_version = reader.read_u64("keys_version")
        _check_version(
            keys_version, ZWL_MIN_KEYS_VERSION, ZWL_KEYS_VERSION, "keys", 8
        )

        encrypted = reader.read_u8("encrypted") > 0
        enc_seed = reader.read_exact(ENC_SEED_SIZE, "enc_seed")
        seed_nonce = read_byte_vector(reader, "seed_nonce")
        seed = reader.read_exact(SEED_SIZE, "seed")

        entries = read_vector(
            reader,
            lambda r: read_zkey(r, deriver, strict=self.settings.strict),
            "zkeys",
        )
        trailer = reader.read_rest()

        logger.debug(
            "Parsed ZecWallet Lite wallet v%d (keys v%d): %d shielded keys, "
            "%d trailing bytes",
            wallet_version,
            keys_version,
            len(entries),
            len(trailer),
        )

        metadata = WalletMetadata(
            source_format=FORMAT_NAME,
            versions={"wallet": wallet_version, "keys": keys_version},
            network=self.settings.network,
            encrypted_seed=EncryptedSeed(enc_seed, seed_nonce) if encrypted else None,
            trailer=trailer,
        )
        # An all-zero seed field means the seed isn't stored in plaintext
        plain_seed = None if encrypted or seed == bytes(SEED_SIZE) else seed
        return CanonicalWallet(entries=entries, metadata=metadata, seed=plain_seed)

    def write(self, wallet: CanonicalWallet) -> bytes:
        """Serialize a wallet to ZecWallet Lite layout.

        Wallets parsed from this format keep their version markers and
        trailer. Wallets from other formats are written with the current
        versions and an empty transparent key list.
        """
        meta = wallet.metadata
        same_format = meta.source_format == FORMAT_NAME
        if same_format:
            wallet_version = meta.versions.get("wallet", ZWL_WALLET_VERSION)
            keys_version = meta.versions.get("keys", ZWL_KEYS_VERSION)
            trailer = meta.trailer if meta.trailer is not None else EMPTY_TRAILER
        else:
            wallet_version = ZWL_WALLET_VERSION
            keys_version = ZWL_KEYS_VERSION
            trailer = EMPTY_TRAILER
            if meta.account_labels:
                logger.warning(
                    "ZecWallet Lite has no account labels; dropping %d labels",
                    len(meta.account_labels),
                )

        if wallet.seed is not None and len(wallet.seed) != SEED_SIZE:
            raise ConversionError(
                f"ZecWallet Lite stores {SEED_SIZE}-byte seeds, got {len(wallet.seed)}"
            )
        if (
            meta.encrypted_seed is not None
            and len(meta.encrypted_seed.ciphertext) != ENC_SEED_SIZE
        ):
            raise ConversionError(
                f"Encrypted seed must be {ENC_SEED_SIZE} bytes, "
                f"got {len(meta.encrypted_seed.ciphertext)}"
            )

        writer = ByteWriter()
        writer.write_u64(wallet_version)
        writer.write_u64(keys_version)

        if meta.encrypted_seed is not None:
            writer.write_u8(1)
            writer.write_bytes(meta.encrypted_seed.ciphertext)
            write_byte_vector(writer, meta.encrypted_seed.nonce)
            writer.write_bytes(bytes(SEED_SIZE))
        else:
            if wallet.seed is None:
                logger.warning("Wallet has no HD seed; writing an all-zero seed")
            writer.write_u8(0)
            writer.write_bytes(bytes(ENC_SEED_SIZE))
            write_byte_vector(writer, b"")
            writer.write_bytes(wallet.seed if wallet.seed is not None else bytes(SEED_SIZE))

        write_vector(writer, wallet.entries, write_zkey)
        writer.write_bytes(trailer)
        return writer.getvalue()
