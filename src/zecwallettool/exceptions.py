"""Custom exception hierarchy for zecwallettool.

All exceptions inherit from WalletToolError, so callers can catch every
library-specific failure with a single except clause.

Exception Hierarchy:
    WalletToolError (base)
    ├── WalletIOError
    ├── FormatError
    │   ├── UnsupportedVersionError
    │   ├── UnknownKeyKindError
    │   ├── EncodingError
    │   ├── InconsistentEntryError
    │   └── ConversionError
    ├── CryptoError
    │   └── MalformedKeyError
    └── ConfigurationError
        └── UnknownFormatError

Security Note:
    Messages name fields and offsets only. Key material is never
    formatted into an exception message.
"""

from __future__ import annotations

from pathlib import Path


class WalletToolError(Exception):
    """Base exception for all zecwallettool errors."""


class WalletIOError(WalletToolError):
    """A wallet file could not be read or written."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot access wallet file {self.path}: {reason}")


# --- Format Errors ---


class FormatError(WalletToolError):
    """Wallet bytes don't conform to the expected layout.

    Every format error aborts the parse of the whole wallet file;
    no partially decoded wallet is ever returned.
    """


class UnsupportedVersionError(FormatError):
    """A version marker is outside the range this library understands.

    Raised for record-level markers (a single key record) as well as
    file-level markers (wallet, key section or database schema version).
    """

    def __init__(
        self, version: int, structure: str = "record", offset: int | None = None
    ) -> None:
        self.version = version
        self.structure = structure
        self.offset = offset
        message = f"Unsupported {structure} version: {version}"
        if offset is not None:
            message += f" at offset {offset}"
        super().__init__(message)


class UnknownKeyKindError(FormatError):
    """Key-kind discriminant outside the known set.

    The rest of a key record cannot be interpreted without its kind,
    so this is never skippable.
    """

    def __init__(self, value: int, offset: int | None = None) -> None:
        self.value = value
        self.offset = offset
        message = f"Unknown key kind: {value}"
        if offset is not None:
            message += f" at offset {offset}"
        super().__init__(message)


class EncodingError(FormatError):
    """A field's byte layout could not be parsed.

    Typically a truncated stream or a malformed inner structure.
    """

    def __init__(
        self, field: str, offset: int | None = None, detail: str | None = None
    ) -> None:
        self.field = field
        self.offset = offset
        self.detail = detail
        message = f"Cannot decode field '{field}'"
        if offset is not None:
            message += f" at offset {offset}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class InconsistentEntryError(FormatError):
    """A decoded key entry violates a cross-field invariant."""


class ConversionError(FormatError):
    """The wallet holds data the destination format cannot represent."""


# --- Crypto Errors ---


class CryptoError(WalletToolError):
    """Error reported by the external key-material capability."""


class MalformedKeyError(CryptoError):
    """Key material is structurally readable but cryptographically invalid.

    Raised by address derivers, e.g. when a viewing key component is not a
    valid curve point.
    """

    def __init__(self, message: str = "Malformed key material") -> None:
        super().__init__(message)


# --- Configuration Errors ---


class ConfigurationError(WalletToolError):
    """Invalid settings, e.g. an unresolvable deriver import path."""


class UnknownFormatError(ConfigurationError):
    """No adapter is registered under the requested format name."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        message = f"Unknown wallet format: {name}"
        if available:
            message += f" (available: {', '.join(available)})"
        super().__init__(message)
