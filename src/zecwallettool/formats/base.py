"""Format adapter protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from zecwallettool.config import ConversionSettings
    from zecwallettool.models import CanonicalWallet


@runtime_checkable
class FormatAdapter(Protocol):
    """Maps between the canonical model and one application's file layout.

    Implementations:
        - ZecWalletLiteAdapter: ZecWallet Lite ``zecwallet-light-wallet.dat``
        - YWalletAdapter: YWallet SQLite ``zec.db``

    Cross-format conversion is ``dst.write(src.parse(data))``.
    """

    name: str
    settings: ConversionSettings

    def parse(self, data: bytes) -> CanonicalWallet:
        """Decode a complete wallet file.

        Fails closed: a version marker announcing a structure the adapter
        can't interpret raises UnsupportedVersionError. No partial wallet
        is returned on any error.
        """
        ...

    def write(self, wallet: CanonicalWallet) -> bytes:
        """Encode a wallet in this application's native layout.

        Raises:
            ConversionError: If the wallet holds data this layout can't store
        """
        ...
