"""zecwallettool - Convert shielded Zcash wallets between wallet applications.

Wallet files are parsed into a canonical, application-independent model
and can be written back in another application's layout, carrying over
spending keys, viewing keys and addresses without re-deriving them.

Supported formats:
- zwl: ZecWallet Lite ``zecwallet-light-wallet.dat``
- ywallet: YWallet ``zec.db``

Example:
    from zecwallettool import ConversionSettings, Wallet
    from my_sapling_bindings import Deriver

    settings = ConversionSettings(deriver=Deriver())
    wallet = Wallet.open("zecwallet-light-wallet.dat", "zwl", settings)
    print(wallet.summary())
    wallet.save("zec.db", "ywallet")
"""

__version__ = "0.1.0"

from .config import ConversionSettings
from .exceptions import (
    ConfigurationError,
    ConversionError,
    CryptoError,
    EncodingError,
    FormatError,
    InconsistentEntryError,
    MalformedKeyError,
    UnknownFormatError,
    UnknownKeyKindError,
    UnsupportedVersionError,
    WalletIOError,
    WalletToolError,
)
from .formats import YWalletAdapter, ZecWalletLiteAdapter, available_formats, get_adapter
from .models import CanonicalWallet, EncryptedSeed, KeyKind, ShieldedKeyEntry, WalletMetadata
from .security import (
    AddressDeriver,
    ExtendedFullViewingKey,
    ExtendedSpendingKey,
    Network,
    PaymentAddress,
)
from .wallet import Wallet, convert

__all__ = [
    # Core classes
    "CanonicalWallet",
    "ConversionSettings",
    "EncryptedSeed",
    "KeyKind",
    "ShieldedKeyEntry",
    "Wallet",
    "WalletMetadata",
    "convert",
    # Formats
    "YWalletAdapter",
    "ZecWalletLiteAdapter",
    "available_formats",
    "get_adapter",
    # Key material
    "AddressDeriver",
    "ExtendedFullViewingKey",
    "ExtendedSpendingKey",
    "Network",
    "PaymentAddress",
    # Exceptions
    "WalletToolError",
    "WalletIOError",
    "FormatError",
    "UnsupportedVersionError",
    "UnknownKeyKindError",
    "EncodingError",
    "InconsistentEntryError",
    "ConversionError",
    "CryptoError",
    "MalformedKeyError",
    "ConfigurationError",
    "UnknownFormatError",
]
