"""Wallet application format adapters.

Each adapter maps between the canonical wallet model and one wallet
application's file layout:
- zwl: ZecWallet Lite binary wallet file
- ywallet: YWallet SQLite database
"""

from __future__ import annotations

from zecwallettool.config import ConversionSettings
from zecwallettool.exceptions import UnknownFormatError

from .base import FormatAdapter
from .ywallet import YWalletAdapter
from .zwl import ZecWalletLiteAdapter

ADAPTERS: dict[str, type[ZecWalletLiteAdapter] | type[YWalletAdapter]] = {
    ZecWalletLiteAdapter.name: ZecWalletLiteAdapter,
    YWalletAdapter.name: YWalletAdapter,
}


def available_formats() -> list[str]:
    """Names accepted by get_adapter()."""
    return sorted(ADAPTERS)


def get_adapter(name: str, settings: ConversionSettings | None = None) -> FormatAdapter:
    """Instantiate the adapter registered under name.

    Raises:
        UnknownFormatError: If no adapter has that name
    """
    try:
        adapter_cls = ADAPTERS[name.lower()]
    except KeyError:
        raise UnknownFormatError(name, available_formats()) from None
    return adapter_cls(settings)


__all__ = [
    "ADAPTERS",
    "FormatAdapter",
    "YWalletAdapter",
    "ZecWalletLiteAdapter",
    "available_formats",
    "get_adapter",
]
