"""YWallet database format.

YWallet keeps its accounts in an SQLite database. Only the tables holding
key material are read or written:

    schema_version(id INTEGER PRIMARY KEY, version INTEGER)
    accounts(id_account INTEGER PRIMARY KEY, name TEXT, seed TEXT,
             aindex INTEGER, sk TEXT, ivk TEXT UNIQUE, address TEXT)

Keys are stored Bech32-encoded: ``sk`` holds the extended spending key
(NULL for view-only accounts) and ``ivk`` the extended full viewing key.
Accounts derived from a seed carry its BIP-39 phrase in ``seed`` and their
derivation index in ``aindex``.

The database is handled in memory with sqlite3 deserialize/serialize, so
the adapter works on bytes like every other adapter.
"""

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator

from mnemonic import Mnemonic

from zecwallettool.config import ConversionSettings
from zecwallettool.exceptions import (
    ConversionError,
    EncodingError,
    UnsupportedVersionError,
)
from zecwallettool.models import (
    CanonicalWallet,
    KeyKind,
    ShieldedKeyEntry,
    WalletMetadata,
)
from zecwallettool.security import (
    ExtendedFullViewingKey,
    ExtendedSpendingKey,
    PaymentAddress,
)

logger = logging.getLogger(__name__)

FORMAT_NAME = "ywallet"

# Schema version written to new databases. Later YWallet migrations add
# tables and columns but keep the account columns below.
YWALLET_SCHEMA_VERSION = 1

ACCOUNT_COLUMNS = ("id_account", "name", "seed", "aindex", "sk", "ivk", "address")

SQLITE_MAGIC = b"SQLite format 3\x00"

SCHEMA = """
CREATE TABLE schema_version (
    id INTEGER PRIMARY KEY NOT NULL,
    version INTEGER NOT NULL
);
CREATE TABLE accounts (
    id_account INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    seed TEXT,
    aindex INTEGER NOT NULL,
    sk TEXT,
    ivk TEXT NOT NULL UNIQUE,
    address TEXT NOT NULL
);
"""


@contextlib.contextmanager
def _memory_db(data: bytes | None = None) -> Iterator[sqlite3.Connection]:
    conn = sqlite3.connect(":memory:")
    try:
        if data is not None:
            conn.deserialize(data)
        yield conn
    finally:
        conn.close()


class YWalletAdapter:
    """Reader/writer for YWallet SQLite databases."""

    name = FORMAT_NAME

    def __init__(self, settings: ConversionSettings | None = None) -> None:
        self.settings = settings or ConversionSettings()
        self._mnemonic = Mnemonic("english")

    def parse(self, data: bytes) -> CanonicalWallet:
        """Parse a YWallet database.

        Raises:
            UnsupportedVersionError: The accounts table lacks a column this
                adapter reads
            EncodingError: Not an SQLite database, missing tables, or a
                malformed key, address, derivation index or seed phrase
        """
        if not data.startswith(SQLITE_MAGIC):
            raise EncodingError("database", 0, "not an SQLite database")

        try:
            with _memory_db(data) as conn:
                version = self._read_schema_version(conn)
                self._check_accounts_table(conn, version)
                rows = conn.execute(
                    "SELECT id_account, name, seed, aindex, sk, ivk, address "
                    "FROM accounts ORDER BY id_account"
                ).fetchall()
        except sqlite3.Error as e:
            raise EncodingError("database", detail=str(e)) from e

        entries: list[ShieldedKeyEntry] = []
        labels: dict[int, str] = {}
        wallet_seed: bytes | None = None

        for index, (account_id, name, phrase, aindex, sk, ivk, address) in enumerate(rows):
            entry, seed = self._parse_account(account_id, phrase, aindex, sk, ivk, address)
            if seed is not None:
                if wallet_seed is None:
                    wallet_seed = seed
                elif seed != wallet_seed:
                    logger.warning(
                        "Account %d uses a different seed; only the first seed is kept",
                        account_id,
                    )
            if name:
                labels[index] = name
            entries.append(entry)

        logger.debug(
            "Parsed YWallet database (schema v%d): %d accounts", version, len(entries)
        )
        metadata = WalletMetadata(
            source_format=FORMAT_NAME,
            versions={"schema": version},
            network=self.settings.network,
            account_labels=labels,
        )
        return CanonicalWallet(entries=entries, metadata=metadata, seed=wallet_seed)

    def _read_schema_version(self, conn: sqlite3.Connection) -> int:
        row = conn.execute("SELECT version FROM schema_version WHERE id = 1").fetchone()
        if row is None:
            raise EncodingError("schema_version", detail="no version row")
        version = row[0]
        if not isinstance(version, int):
            raise EncodingError("schema_version", detail="version is not an integer")
        return version

    def _check_accounts_table(self, conn: sqlite3.Connection, version: int) -> None:
        columns = {row[1] for row in conn.execute("PRAGMA table_info(accounts)")}
        if not columns:
            raise EncodingError("accounts", detail="table missing")
        missing = [name for name in ACCOUNT_COLUMNS if name not in columns]
        if missing:
            logger.debug("accounts table lacks columns: %s", ", ".join(missing))
            raise UnsupportedVersionError(version, "schema")

    def _parse_account(
        self,
        account_id: int,
        phrase: str | None,
        aindex: object,
        sk: str | None,
        ivk: str,
        address: str,
    ) -> tuple[ShieldedKeyEntry, bytes | None]:
        network = self.settings.network
        field = f"accounts[{account_id}]"

        try:
            viewing_key = ExtendedFullViewingKey.decode(ivk, network)
        except (ValueError, TypeError, AttributeError) as e:
            raise EncodingError(f"{field}.ivk", detail=str(e)) from e

        spending_key = None
        if sk is not None:
            try:
                spending_key = ExtendedSpendingKey.decode(sk, network)
            except (ValueError, TypeError, AttributeError) as e:
                raise EncodingError(f"{field}.sk", detail=str(e)) from e

        seed = None
        if phrase:
            try:
                seed = bytes(self._mnemonic.to_entropy(phrase))
            except (ValueError, LookupError) as e:
                raise EncodingError(f"{field}.seed", detail="invalid seed phrase") from e

        if seed is not None:
            kind = KeyKind.HD_KEY
            if not isinstance(aindex, int):
                raise EncodingError(
                    f"{field}.aindex", detail="derivation index is not an integer"
                )
        elif spending_key is not None:
            kind = KeyKind.IMPORTED_SPENDING_KEY
        else:
            kind = KeyKind.IMPORTED_VIEW_KEY

        derived = self.settings.require_deriver().default_address(viewing_key)
        try:
            stored = PaymentAddress.decode(address, network)
        except (ValueError, TypeError, AttributeError) as e:
            raise EncodingError(f"{field}.address", detail=str(e)) from e
        if stored != derived:
            logger.warning(
                "Account %d: stored address differs from the viewing key's "
                "default address; using the derived one",
                account_id,
            )

        entry = ShieldedKeyEntry(
            kind=kind,
            viewing_key=viewing_key,
            address=derived,
            spending_key=spending_key,
            hd_index=aindex if kind == KeyKind.HD_KEY else None,
        )
        entry.validate(strict=self.settings.strict)
        return entry, seed

    def write(self, wallet: CanonicalWallet) -> bytes:
        """Serialize a wallet to a YWallet database.

        Raises:
            ConversionError: If an entry is locked (YWallet can't store
                encrypted spending keys), the seed length has no BIP-39
                phrase, or two entries share a viewing key
        """
        network = self.settings.network
        phrase = self._seed_phrase(wallet)

        rows = []
        for index, entry in enumerate(wallet.entries):
            if entry.spending_key is None and entry.encrypted_blob is not None:
                raise ConversionError(
                    f"Entry {index} is locked; unlock the wallet before converting to YWallet"
                )
            if entry.locked:
                logger.warning(
                    "Entry %d is locked but YWallet has no lock flag; storing it unlocked",
                    index,
                )
            is_hd = entry.kind == KeyKind.HD_KEY
            if is_hd and phrase is None:
                logger.warning(
                    "Entry %d is an HD key but the wallet seed is unavailable; "
                    "storing it as an imported key",
                    index,
                )
            name = wallet.label_for(index) or f"{self.settings.default_label} {index + 1}"
            rows.append(
                (
                    index + 1,
                    name,
                    phrase if is_hd else None,
                    entry.hd_index if is_hd and entry.hd_index is not None else 0,
                    entry.spending_key.encode(network) if entry.spending_key else None,
                    entry.viewing_key.encode(network),
                    entry.address.encode(network),
                )
            )

        try:
            with _memory_db() as conn:
                conn.executescript(SCHEMA)
                conn.execute(
                    "INSERT INTO schema_version (id, version) VALUES (1, ?)",
                    (YWALLET_SCHEMA_VERSION,),
                )
                conn.executemany(
                    "INSERT INTO accounts "
                    "(id_account, name, seed, aindex, sk, ivk, address) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?)",
                    rows,
                )
                conn.commit()
                return bytes(conn.serialize())
        except sqlite3.IntegrityError as e:
            raise ConversionError(f"Cannot store accounts: {e}") from e

    def _seed_phrase(self, wallet: CanonicalWallet) -> str | None:
        if wallet.seed is None:
            return None
        try:
            return self._mnemonic.to_mnemonic(wallet.seed)
        except ValueError as e:
            raise ConversionError(
                f"A {len(wallet.seed)}-byte seed has no BIP-39 phrase"
            ) from e
