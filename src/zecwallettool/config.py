"""Conversion settings.

Settings come from keyword arguments, or from the environment through
ConversionSettings.from_env():

    ZECWALLETTOOL_NETWORK   main | test
    ZECWALLETTOOL_DERIVER   module:attr of an AddressDeriver
    ZECWALLETTOOL_STRICT    1 / true / yes to enable strict validation
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace

from .exceptions import ConfigurationError
from .security import AddressDeriver, Network, load_deriver

ENV_NETWORK = "ZECWALLETTOOL_NETWORK"
ENV_DERIVER = "ZECWALLETTOOL_DERIVER"
ENV_STRICT = "ZECWALLETTOOL_STRICT"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class ConversionSettings:
    """Settings shared by all format adapters.

    Attributes:
        network: Network used for Bech32 prefixes
        deriver: Viewing key -> address capability
        strict: Enforce optional cross-field invariants on decoded entries
        default_label: Prefix for account names when the source has none
    """

    network: Network = Network.MAIN
    deriver: AddressDeriver | None = None
    strict: bool = False
    default_label: str = "Account"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ConversionSettings:
        """Build settings from environment variables.

        Raises:
            ConfigurationError: On an unknown network name or an
                unloadable deriver path
        """
        env = os.environ if environ is None else environ

        network = Network.MAIN
        if env.get(ENV_NETWORK):
            try:
                network = Network(env[ENV_NETWORK].lower())
            except ValueError:
                raise ConfigurationError(
                    f"Unknown network {env[ENV_NETWORK]!r} in {ENV_NETWORK}"
                ) from None

        deriver = load_deriver(env[ENV_DERIVER]) if env.get(ENV_DERIVER) else None
        strict = env.get(ENV_STRICT, "").lower() in _TRUE_VALUES
        return cls(network=network, deriver=deriver, strict=strict)

    def with_overrides(self, **changes: object) -> ConversionSettings:
        """Copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})  # type: ignore[arg-type]

    def require_deriver(self) -> AddressDeriver:
        """Return the configured deriver.

        Raises:
            ConfigurationError: If no deriver is configured
        """
        if self.deriver is None:
            raise ConfigurationError(
                f"No address deriver configured (set {ENV_DERIVER} or pass deriver=)"
            )
        return self.deriver
