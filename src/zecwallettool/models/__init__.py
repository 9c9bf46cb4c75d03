"""Data models for the canonical wallet representation.

This module provides typed Python classes for wallet contents that are
independent of any application's file layout.
"""

from .key import KeyKind, ShieldedKeyEntry
from .wallet import CanonicalWallet, EncryptedSeed, WalletMetadata

__all__ = [
    "CanonicalWallet",
    "EncryptedSeed",
    "KeyKind",
    "ShieldedKeyEntry",
    "WalletMetadata",
]
