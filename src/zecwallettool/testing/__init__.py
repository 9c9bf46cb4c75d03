"""Test utilities for zecwallettool.

WARNING: MockAddressDeriver is for TESTING ONLY. It does not perform
Sapling key derivation; the addresses it returns are BLAKE2b digests
shaped like payment addresses and cannot receive funds.

The helpers here build structurally valid key material from small integer
seeds so tests can construct wallets without a real Sapling library:
- Unit testing the record codec and the format adapters
- CI/CD pipelines
- Running the CLI against sample files
"""

from __future__ import annotations

import hashlib

from zecwallettool.exceptions import MalformedKeyError
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
from zecwallettool.security.sapling import DIVERSIFIER_SIZE, PK_D_SIZE

HARDENED = 0x80000000


class MockAddressDeriver:
    """Deterministic stand-in for Sapling default address derivation.

    The diversifier is a digest of ``dk`` and ``pk_d`` a digest of the
    remaining viewing key components. A viewing key whose ``ak`` is all
    zero bytes is rejected, mimicking an invalid curve point.

    WARNING: This is for TESTING ONLY. See module docstring for details.

    Example:
        >>> deriver = MockAddressDeriver()
        >>> address = deriver.default_address(make_viewing_key(1))
        >>> len(address.to_bytes())
        43
    """

    def default_address(self, viewing_key: ExtendedFullViewingKey) -> PaymentAddress:
        if viewing_key.ak == bytes(32):
            raise MalformedKeyError("ak is not a valid curve point")
        diversifier = hashlib.blake2b(
            viewing_key.dk, digest_size=DIVERSIFIER_SIZE, person=b"zwt-mock-div"
        ).digest()
        pk_d = hashlib.blake2b(
            viewing_key.ak + viewing_key.nk + diversifier,
            digest_size=PK_D_SIZE,
            person=b"zwt-mock-pkd",
        ).digest()
        return PaymentAddress(diversifier, pk_d)

    def __repr__(self) -> str:
        return "MockAddressDeriver()"


def _component(seed: int, label: bytes) -> bytes:
    return hashlib.sha256(label + seed.to_bytes(4, "little")).digest()


def make_spending_key(seed: int, hd_index: int | None = None) -> ExtendedSpendingKey:
    """Build a structurally valid extended spending key from an integer."""
    child_index = HARDENED | hd_index if hd_index is not None else 0
    return ExtendedSpendingKey(
        depth=3 if hd_index is not None else 0,
        parent_fvk_tag=_component(seed, b"tag")[:4],
        child_index=child_index,
        chain_code=_component(seed, b"chain"),
        ask=_component(seed, b"ask"),
        nsk=_component(seed, b"nsk"),
        ovk=_component(seed, b"ovk"),
        dk=_component(seed, b"dk"),
    )


def make_viewing_key(seed: int, hd_index: int | None = None) -> ExtendedFullViewingKey:
    """Build the viewing key matching make_spending_key(seed, hd_index)."""
    spending_key = make_spending_key(seed, hd_index)
    return ExtendedFullViewingKey(
        depth=spending_key.depth,
        parent_fvk_tag=spending_key.parent_fvk_tag,
        child_index=spending_key.child_index,
        chain_code=spending_key.chain_code,
        ak=_component(seed, b"ak"),
        nk=_component(seed, b"nk"),
        ovk=spending_key.ovk,
        dk=spending_key.dk,
    )


def make_entry(
    seed: int,
    kind: KeyKind = KeyKind.HD_KEY,
    locked: bool = False,
    deriver: MockAddressDeriver | None = None,
) -> ShieldedKeyEntry:
    """Build a consistent key entry.

    HD keys get hd_index == seed. Locked spending entries get a fake
    encrypted blob and nonce instead of a plaintext spending key.
    """
    deriver = deriver or MockAddressDeriver()
    hd_index = seed if kind == KeyKind.HD_KEY else None
    viewing_key = make_viewing_key(seed, hd_index)

    spending_key = None
    encrypted_blob = None
    nonce = None
    if kind != KeyKind.IMPORTED_VIEW_KEY:
        if locked:
            encrypted_blob = _component(seed, b"blob") * 3
            nonce = _component(seed, b"nonce")[:24]
        else:
            spending_key = make_spending_key(seed, hd_index)

    return ShieldedKeyEntry(
        kind=kind,
        viewing_key=viewing_key,
        address=deriver.default_address(viewing_key),
        locked=locked,
        spending_key=spending_key,
        hd_index=hd_index,
        encrypted_blob=encrypted_blob,
        nonce=nonce,
    )


def make_wallet(
    entries: list[ShieldedKeyEntry],
    source_format: str,
    seed: bytes | None = None,
    **metadata: object,
) -> CanonicalWallet:
    """Wrap entries in a CanonicalWallet with the given metadata fields."""
    return CanonicalWallet(
        entries=entries,
        metadata=WalletMetadata(source_format=source_format, **metadata),  # type: ignore[arg-type]
        seed=seed,
    )
