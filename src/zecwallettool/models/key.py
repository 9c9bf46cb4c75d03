"""Shielded key entry model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from zecwallettool.exceptions import InconsistentEntryError, UnknownKeyKindError
from zecwallettool.security import (
    ExtendedFullViewingKey,
    ExtendedSpendingKey,
    Network,
    PaymentAddress,
)


class KeyKind(IntEnum):
    """How a shielded key came into the wallet.

    Stored on disk as a little-endian u32.
    """

    HD_KEY = 0
    IMPORTED_SPENDING_KEY = 1
    IMPORTED_VIEW_KEY = 2

    @property
    def display_name(self) -> str:
        """Human-readable kind name."""
        names = {
            KeyKind.HD_KEY: "HD",
            KeyKind.IMPORTED_SPENDING_KEY: "imported spending key",
            KeyKind.IMPORTED_VIEW_KEY: "imported viewing key",
        }
        return names[self]

    @classmethod
    def from_wire(cls, value: int, offset: int | None = None) -> KeyKind:
        """Validate an on-disk discriminant.

        Args:
            value: The u32 read from the record
            offset: Where the discriminant was read, for error messages

        Raises:
            UnknownKeyKindError: If value isn't 0, 1 or 2
        """
        try:
            return cls(value)
        except ValueError:
            raise UnknownKeyKindError(value, offset) from None


@dataclass
class ShieldedKeyEntry:
    """One shielded key of a wallet.

    Attributes:
        kind: HD-derived, imported spending key or imported viewing key
        locked: Whether the spending key is encrypted at rest
        spending_key: Plaintext spending key, when available
        viewing_key: Full viewing key (always present)
        address: Default address derived from viewing_key
        hd_index: Position in the HD key tree, for derived keys
        encrypted_blob: Encrypted spending key, for locked entries
        nonce: Nonce used to encrypt encrypted_blob
    """

    kind: KeyKind
    viewing_key: ExtendedFullViewingKey
    address: PaymentAddress
    locked: bool = False
    spending_key: ExtendedSpendingKey | None = None
    hd_index: int | None = None
    encrypted_blob: bytes | None = None
    nonce: bytes | None = None

    @property
    def has_spend_authority(self) -> bool:
        """True if the entry can (possibly after unlocking) authorize spends."""
        return self.spending_key is not None or self.encrypted_blob is not None

    @property
    def is_view_only(self) -> bool:
        return not self.has_spend_authority

    def validate(self, strict: bool = False) -> None:
        """Check cross-field invariants.

        Always enforced: viewing-key entries carry no spending key, the
        encrypted blob and nonce come as a pair, locked spending entries
        carry the encrypted blob, and hd_index fits in a u32.

        Enforced only when strict: a spending key and an encrypted blob
        aren't both present, and hd_index is present exactly for HD keys.

        Raises:
            InconsistentEntryError: On the first violated invariant
        """
        if self.kind == KeyKind.IMPORTED_VIEW_KEY and self.spending_key is not None:
            raise InconsistentEntryError("Viewing-key entry carries a spending key")
        if (self.encrypted_blob is None) != (self.nonce is None):
            raise InconsistentEntryError(
                "Encrypted key and nonce must be present together"
            )
        # Viewing keys have nothing to encrypt, so locking them stores no blob
        if (
            self.locked
            and self.kind != KeyKind.IMPORTED_VIEW_KEY
            and self.encrypted_blob is None
        ):
            raise InconsistentEntryError("Locked entry has no encrypted key")
        if self.hd_index is not None and not 0 <= self.hd_index <= 0xFFFFFFFF:
            raise InconsistentEntryError(f"HD index out of range: {self.hd_index}")

        if not strict:
            return
        if self.spending_key is not None and self.encrypted_blob is not None:
            raise InconsistentEntryError(
                "Entry carries both a plaintext and an encrypted spending key"
            )
        if (self.hd_index is not None) != (self.kind == KeyKind.HD_KEY):
            raise InconsistentEntryError(
                f"HD index presence doesn't match key kind {self.kind.name}"
            )

    def encoded_address(self, network: Network = Network.MAIN) -> str:
        return self.address.encode(network)

    def __str__(self) -> str:
        state = "locked" if self.locked else "view-only" if self.is_view_only else "spendable"
        index = f" #{self.hd_index}" if self.hd_index is not None else ""
        return f"{self.kind.display_name}{index} ({state})"
