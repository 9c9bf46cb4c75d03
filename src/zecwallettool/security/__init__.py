"""Key material and cryptographic boundary for zecwallettool.

This module contains:
- ZIP-32 extended spending / full viewing key structures
- Sapling payment addresses and their Bech32 encodings
- The AddressDeriver protocol for the external Sapling capability

No elliptic-curve arithmetic lives here; derivation is delegated.
"""

from .sapling import (
    ADDRESS_SIZE,
    EXTENDED_KEY_SIZE,
    AddressDeriver,
    ExtendedFullViewingKey,
    ExtendedSpendingKey,
    Network,
    PaymentAddress,
    load_deriver,
)

__all__ = [
    "ADDRESS_SIZE",
    "EXTENDED_KEY_SIZE",
    "AddressDeriver",
    "ExtendedFullViewingKey",
    "ExtendedSpendingKey",
    "Network",
    "PaymentAddress",
    "load_deriver",
]
