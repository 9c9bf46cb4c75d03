"""High-level Wallet API for converting wallet files.

This module provides the main interface:
- Opening a wallet file in any supported format
- Serializing it to the same or another format
- Saving it to disk
- One-call conversion between files
"""

from __future__ import annotations

import logging
from pathlib import Path

from .config import ConversionSettings
from .exceptions import WalletIOError
from .formats import get_adapter
from .models import CanonicalWallet

logger = logging.getLogger(__name__)


class Wallet:
    """A parsed wallet file.

    Example usage:
        # Open a ZecWallet Lite file
        wallet = Wallet.open("zecwallet-light-wallet.dat", "zwl", settings)
        print(wallet.summary())

        # Write it as a YWallet database
        wallet.save("zec.db", "ywallet")
    """

    def __init__(
        self,
        canonical: CanonicalWallet,
        settings: ConversionSettings | None = None,
        filepath: Path | None = None,
    ) -> None:
        """Initialize wallet.

        Usually you should use Wallet.open() or Wallet.open_bytes() instead.

        Args:
            canonical: Parsed canonical wallet
            settings: Settings used for writing
            filepath: File the wallet was read from
        """
        self._canonical = canonical
        self._settings = settings or ConversionSettings()
        self._filepath = filepath

    @property
    def canonical(self) -> CanonicalWallet:
        """The format-independent wallet contents."""
        return self._canonical

    @property
    def settings(self) -> ConversionSettings:
        return self._settings

    @property
    def filepath(self) -> Path | None:
        """Get the file path (if opened from file)."""
        return self._filepath

    @property
    def source_format(self) -> str:
        return self._canonical.metadata.source_format

    # --- Opening wallets ---

    @classmethod
    def open(
        cls,
        filepath: str | Path,
        fmt: str,
        settings: ConversionSettings | None = None,
    ) -> Wallet:
        """Open and parse a wallet file.

        The whole file is read before decoding starts.

        Args:
            filepath: Path to the wallet file
            fmt: Format name (see formats.available_formats())
            settings: Conversion settings

        Raises:
            WalletIOError: If the file can't be read
            UnknownFormatError: If fmt isn't a known format
            FormatError: If the file is corrupt or unsupported
        """
        filepath = Path(filepath)
        try:
            data = filepath.read_bytes()
        except OSError as e:
            raise WalletIOError(filepath, e.strerror or str(e)) from e

        logger.debug("Read %d bytes from %s", len(data), filepath)
        return cls.open_bytes(data, fmt, settings, filepath=filepath)

    @classmethod
    def open_bytes(
        cls,
        data: bytes,
        fmt: str,
        settings: ConversionSettings | None = None,
        filepath: Path | None = None,
    ) -> Wallet:
        """Parse a wallet from bytes.

        Args:
            data: Wallet file contents
            fmt: Format name
            settings: Conversion settings
            filepath: Original file path (for save)
        """
        settings = settings or ConversionSettings()
        canonical = get_adapter(fmt, settings).parse(data)
        return cls(canonical, settings=settings, filepath=filepath)

    # --- Writing wallets ---

    def to_bytes(self, fmt: str | None = None) -> bytes:
        """Serialize the wallet.

        Args:
            fmt: Destination format (defaults to the source format)

        Raises:
            ConversionError: If the destination can't hold the wallet's data
        """
        fmt = fmt or self.source_format
        return get_adapter(fmt, self._settings).write(self._canonical)

    def save(self, filepath: str | Path | None = None, fmt: str | None = None) -> None:
        """Save the wallet to a file.

        Args:
            filepath: Path to save to (uses original path if not specified)
            fmt: Destination format (defaults to the source format)

        Raises:
            ValueError: If no filepath specified and wallet wasn't opened from file
            WalletIOError: If the file can't be written
        """
        if filepath:
            target = Path(filepath)
        elif self._filepath is not None:
            target = self._filepath
        else:
            raise ValueError("No filepath specified and wallet wasn't opened from file")

        data = self.to_bytes(fmt)
        try:
            target.write_bytes(data)
        except OSError as e:
            raise WalletIOError(target, e.strerror or str(e)) from e

        fmt = fmt or self.source_format
        logger.info("Wrote %s wallet (%d bytes) to %s", fmt, len(data), target)
        if fmt == self.source_format:
            self._filepath = target

    def summary(self) -> str:
        """Human-readable description of the wallet contents."""
        return self._canonical.summary()

    def __len__(self) -> int:
        return len(self._canonical)

    def __str__(self) -> str:
        path = f" at {self._filepath}" if self._filepath else ""
        return f"Wallet({self.source_format}{path}, {len(self)} keys)"


def convert(
    source_format: str,
    source_path: str | Path,
    dest_format: str | None = None,
    dest_path: str | Path | None = None,
    settings: ConversionSettings | None = None,
) -> Wallet:
    """Parse a wallet file and optionally write it in another format.

    Args:
        source_format: Format of the input file
        source_path: Input file
        dest_format: Output format; requires dest_path
        dest_path: Output file; requires dest_format

    Returns:
        The parsed wallet

    Raises:
        ValueError: If only one of dest_format / dest_path is given
    """
    if (dest_format is None) != (dest_path is None):
        raise ValueError("dest_format and dest_path must be given together")

    wallet = Wallet.open(source_path, source_format, settings)
    if dest_format is not None and dest_path is not None:
        wallet.save(dest_path, dest_format)
    return wallet
