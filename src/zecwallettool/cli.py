"""Command-line entry point.

Usage:
    zecwallettool SRC_FORMAT SRC_PATH [DST_FORMAT DST_PATH] [options]

Parses SRC_PATH, prints a summary of its keys and, when a destination is
given, writes the wallet in DST_FORMAT.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from .config import ConversionSettings
from .exceptions import WalletToolError
from .formats import available_formats
from .security import Network, load_deriver
from .wallet import convert

logger = logging.getLogger("zecwallettool")


def build_parser() -> argparse.ArgumentParser:
    formats = available_formats()
    p = argparse.ArgumentParser(
        prog="zecwallettool",
        description="Convert shielded Zcash wallet files between wallet applications",
    )
    p.add_argument("source_format", choices=formats, help="Format of the input wallet")
    p.add_argument("source_path", help="Input wallet file")
    p.add_argument("dest_format", nargs="?", choices=formats, help="Output format")
    p.add_argument("dest_path", nargs="?", help="Output wallet file")
    p.add_argument(
        "--network",
        choices=[n.value for n in Network],
        default=None,
        help="Network for Bech32 prefixes (default: main)",
    )
    p.add_argument(
        "--deriver",
        default=None,
        metavar="MODULE:ATTR",
        help="Address deriver implementation (default: $ZECWALLETTOOL_DERIVER)",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Reject entries whose HD index doesn't match their key kind",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p


def _settings_from_args(args: argparse.Namespace) -> ConversionSettings:
    settings = ConversionSettings.from_env().with_overrides(
        network=Network(args.network) if args.network else None,
        deriver=load_deriver(args.deriver) if args.deriver else None,
        strict=args.strict,
    )
    if settings.deriver is None:
        from .testing import MockAddressDeriver

        logger.warning(
            "No address deriver configured; addresses shown are placeholders "
            "(use --deriver to plug in a Sapling implementation)"
        )
        settings = settings.with_overrides(deriver=MockAddressDeriver())
    return settings


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.dest_format is None) != (args.dest_path is None):
        parser.error("DST_FORMAT and DST_PATH must be given together")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        settings = _settings_from_args(args)
        wallet = convert(
            args.source_format,
            args.source_path,
            args.dest_format,
            args.dest_path,
            settings=settings,
        )
    except WalletToolError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(wallet.summary())
    if args.dest_path:
        print(f"\nWrote {args.dest_format} wallet to {args.dest_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
