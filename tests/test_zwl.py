"""Tests for the ZecWallet Lite wallet format."""

import struct

import pytest

from zecwallettool import (
    ConversionError,
    ConversionSettings,
    EncodingError,
    EncryptedSeed,
    KeyKind,
    UnknownKeyKindError,
    UnsupportedVersionError,
    ZecWalletLiteAdapter,
)
from zecwallettool.exceptions import ConfigurationError
from zecwallettool.formats.zwl import ZWL_KEYS_VERSION, ZWL_WALLET_VERSION
from zecwallettool.parsing import encode_zkey
from zecwallettool.testing import make_entry, make_wallet

SEED = bytes(range(1, 33))
TRAILER = b"\x00" + b"block-and-transaction-data"


def _wallet_file(
    zkeys: list[bytes],
    wallet_version: int = ZWL_WALLET_VERSION,
    keys_version: int = ZWL_KEYS_VERSION,
    trailer: bytes = TRAILER,
) -> bytes:
    """Assemble an unencrypted wallet file from raw zkey records."""
    return (
        struct.pack("<QQ", wallet_version, keys_version)
        + b"\x00"
        + bytes(48)
        + b"\x00"
        + SEED
        + bytes([len(zkeys)])
        + b"".join(zkeys)
        + trailer
    )


@pytest.fixture
def adapter(settings: ConversionSettings) -> ZecWalletLiteAdapter:
    return ZecWalletLiteAdapter(settings)


class TestZwlParse:
    """Tests for parsing ZecWallet Lite files."""

    def test_parse_keys_and_metadata(self, adapter: ZecWalletLiteAdapter) -> None:
        """Test that header fields and key records are decoded in order."""
        entries = [make_entry(0), make_entry(7, kind=KeyKind.IMPORTED_VIEW_KEY)]
        wallet = adapter.parse(_wallet_file([encode_zkey(e) for e in entries]))

        assert wallet.entries == entries
        assert wallet.seed == SEED
        assert wallet.metadata.source_format == "zwl"
        assert wallet.metadata.versions == {
            "wallet": ZWL_WALLET_VERSION,
            "keys": ZWL_KEYS_VERSION,
        }
        assert wallet.metadata.encrypted_seed is None
        assert wallet.metadata.trailer == TRAILER

    def test_parse_encrypted_wallet(self, adapter: ZecWalletLiteAdapter) -> None:
        """Test that an encrypted wallet keeps its seed ciphertext only."""
        entry = make_entry(2, locked=True)
        data = (
            struct.pack("<QQ", ZWL_WALLET_VERSION, ZWL_KEYS_VERSION)
            + b"\x01"
            + b"s" * 48
            + b"\x18"
            + b"n" * 24
            + bytes(32)
            + b"\x01"
            + encode_zkey(entry)
        )

        wallet = adapter.parse(data)

        assert wallet.seed is None
        assert wallet.metadata.encrypted_seed == EncryptedSeed(b"s" * 48, b"n" * 24)
        assert wallet.is_encrypted
        assert wallet.entries[0].locked

    def test_wallet_version_too_new(self, adapter: ZecWalletLiteAdapter) -> None:
        """Test that an unknown future wallet version fails closed."""
        with pytest.raises(UnsupportedVersionError) as exc_info:
            adapter.parse(_wallet_file([], wallet_version=ZWL_WALLET_VERSION + 1))
        assert exc_info.value.structure == "wallet"

    def test_legacy_key_section_rejected(self, adapter: ZecWalletLiteAdapter) -> None:
        """Test that key sections without a zkey list aren't silently skipped."""
        with pytest.raises(UnsupportedVersionError) as exc_info:
            adapter.parse(_wallet_file([], keys_version=6))
        assert exc_info.value.version == 6
        assert exc_info.value.structure == "keys"
        assert exc_info.value.offset == 8

    def test_keys_version_too_new(self, adapter: ZecWalletLiteAdapter) -> None:
        with pytest.raises(UnsupportedVersionError):
            adapter.parse(_wallet_file([], keys_version=ZWL_KEYS_VERSION + 1))

    def test_corrupt_record_aborts_whole_wallet(
        self, adapter: ZecWalletLiteAdapter
    ) -> None:
        """Test that one bad record fails the parse instead of dropping it."""
        bad = bytearray(encode_zkey(make_entry(1)))
        bad[1:5] = struct.pack("<I", 99)
        with pytest.raises(UnknownKeyKindError):
            adapter.parse(_wallet_file([encode_zkey(make_entry(0)), bytes(bad)]))

    def test_record_version_too_new(self, adapter: ZecWalletLiteAdapter) -> None:
        record = bytearray(encode_zkey(make_entry(1)))
        record[0] = 2
        with pytest.raises(UnsupportedVersionError) as exc_info:
            adapter.parse(_wallet_file([bytes(record)]))
        assert exc_info.value.structure == "zkey"
        assert exc_info.value.offset == 16 + 1 + 48 + 1 + 32 + 1

    def test_truncated_header(self, adapter: ZecWalletLiteAdapter) -> None:
        with pytest.raises(EncodingError, match="keys_version"):
            adapter.parse(struct.pack("<Q", ZWL_WALLET_VERSION) + b"\x01\x02")

    def test_missing_records(self, adapter: ZecWalletLiteAdapter) -> None:
        """Test that a key count larger than the records present fails."""
        data = _wallet_file([encode_zkey(make_entry(0))], trailer=b"")
        count_offset = 16 + 1 + 48 + 1 + 32
        patched = data[:count_offset] + b"\x02" + data[count_offset + 1 :]
        with pytest.raises(EncodingError):
            adapter.parse(patched)

    def test_requires_deriver(self) -> None:
        """Test that parsing without a deriver is a configuration error."""
        with pytest.raises(ConfigurationError, match="deriver"):
            ZecWalletLiteAdapter().parse(_wallet_file([]))


class TestZwlWrite:
    """Tests for writing ZecWallet Lite files."""

    def test_same_format_round_trip_is_byte_exact(
        self, adapter: ZecWalletLiteAdapter
    ) -> None:
        """Test that parse then write reproduces the original file."""
        data = _wallet_file(
            [encode_zkey(make_entry(0)), encode_zkey(make_entry(4, locked=True))],
            wallet_version=20,
            keys_version=15,
        )
        assert adapter.write(adapter.parse(data)) == data

    def test_parse_of_write_restores_wallet(self, adapter: ZecWalletLiteAdapter) -> None:
        """Test that parse(write(W)) == W for an encrypted wallet."""
        wallet = make_wallet(
            [make_entry(1, locked=True), make_entry(9, kind=KeyKind.IMPORTED_VIEW_KEY)],
            "zwl",
            versions={"wallet": ZWL_WALLET_VERSION, "keys": ZWL_KEYS_VERSION},
            encrypted_seed=EncryptedSeed(b"e" * 48, b"n" * 24),
            trailer=TRAILER,
        )
        assert adapter.parse(adapter.write(wallet)) == wallet

    def test_foreign_wallet_gets_current_versions(
        self, adapter: ZecWalletLiteAdapter
    ) -> None:
        """Test writing a wallet that came from another format."""
        wallet = make_wallet(
            [make_entry(0)],
            "ywallet",
            seed=SEED,
            versions={"schema": 1},
            account_labels={0: "Main"},
        )

        parsed = adapter.parse(adapter.write(wallet))

        assert parsed.entries == wallet.entries
        assert parsed.seed == SEED
        assert parsed.metadata.versions == {
            "wallet": ZWL_WALLET_VERSION,
            "keys": ZWL_KEYS_VERSION,
        }
        assert parsed.metadata.account_labels == {}
        assert parsed.metadata.trailer == b"\x00"

    def test_missing_seed_written_as_zeros(self, adapter: ZecWalletLiteAdapter) -> None:
        """Test that an absent seed reads back as absent."""
        wallet = make_wallet([make_entry(0)], "ywallet")
        assert adapter.parse(adapter.write(wallet)).seed is None

    def test_seed_of_wrong_length_rejected(self, adapter: ZecWalletLiteAdapter) -> None:
        """Test that 12-word (16-byte) seeds can't be stored."""
        wallet = make_wallet([make_entry(0)], "ywallet", seed=b"x" * 16)
        with pytest.raises(ConversionError, match="32-byte"):
            adapter.write(wallet)
