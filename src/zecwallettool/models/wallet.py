"""Canonical, format-independent wallet model."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from zecwallettool.security import Network

from .key import KeyKind, ShieldedKeyEntry


@dataclass(frozen=True)
class EncryptedSeed:
    """HD seed as stored by a password-protected wallet.

    Attributes:
        ciphertext: Encrypted seed bytes
        nonce: Nonce used for the encryption
    """

    ciphertext: bytes
    nonce: bytes


@dataclass
class WalletMetadata:
    """Source-format details needed to write a wallet back unchanged.

    Attributes:
        source_format: Adapter name the wallet was parsed with
        versions: Version markers by structure (e.g. "wallet", "keys")
        network: Network the wallet's keys belong to
        account_labels: Entry index -> account label
        encrypted_seed: Seed ciphertext, when the wallet is encrypted
        trailer: Bytes following the key section that weren't interpreted
    """

    source_format: str
    versions: dict[str, int] = field(default_factory=dict)
    network: Network = Network.MAIN
    account_labels: dict[int, str] = field(default_factory=dict)
    encrypted_seed: EncryptedSeed | None = None
    trailer: bytes | None = None


@dataclass
class CanonicalWallet:
    """Ordered shielded key entries plus source metadata.

    Created by a format adapter's parse() and consumed by a (possibly
    different) adapter's write(). A wallet is rebuilt rather than edited.

    Attributes:
        entries: Key entries in file order
        metadata: Source-format header details
        seed: Plaintext HD seed, if the source stored one unencrypted
    """

    entries: list[ShieldedKeyEntry]
    metadata: WalletMetadata
    seed: bytes | None = field(default=None, repr=False)

    def __iter__(self) -> Iterator[ShieldedKeyEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def is_encrypted(self) -> bool:
        return self.metadata.encrypted_seed is not None or any(
            entry.locked for entry in self.entries
        )

    def label_for(self, index: int, default: str | None = None) -> str | None:
        """Account label of the entry at index."""
        return self.metadata.account_labels.get(index, default)

    def count_by_kind(self) -> dict[KeyKind, int]:
        counts = {kind: 0 for kind in KeyKind}
        for entry in self.entries:
            counts[entry.kind] += 1
        return counts

    def summary(self) -> str:
        """Human-readable multi-line description (no key material)."""
        meta = self.metadata
        versions = ", ".join(f"{k}={v}" for k, v in sorted(meta.versions.items()))
        lines = [
            f"Format:    {meta.source_format} ({versions or 'no version markers'})",
            f"Network:   {meta.network.value}",
            f"Encrypted: {'yes' if self.is_encrypted else 'no'}",
            f"HD seed:   {'present' if self.seed is not None else 'absent'}",
            f"Keys:      {len(self.entries)}",
        ]
        for index, entry in enumerate(self.entries):
            label = self.label_for(index)
            suffix = f" [{label}]" if label else ""
            lines.append(
                f"  {index}: {entry.encoded_address(meta.network)} {entry}{suffix}"
            )
        return "\n".join(lines)
