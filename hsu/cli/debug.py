"""Debugging CLI for signed URLs.

When a link that "should" work is rejected, the usual culprit is a
canonical string that differs between the signing and verifying side.
These commands print each stage so the two can be compared.

Usage::

    python -m hsu.cli canonicalize "/reset?user=42&expires=1700000000&signature=..."
    python -m hsu.cli digest --salt SALT "/reset?user=42&expires=1700000000"
    python -m hsu.cli verify --salt SALT --scope reset "/reset?user=42&expires=...&signature=..."

The secret is read from ``HSU_SECRET`` (or ``.env``) unless ``--secret`` is
given.  Salts live in the visitor's session, so ``digest`` and ``verify``
need one copied out of the session store.
"""

from __future__ import annotations

import argparse
import sys

from hsu.config.settings import Settings
from hsu.models.config import HsuConfig
from hsu.models.signing import VerificationResult
from hsu.services.verifier import UrlVerifier
from hsu.utils.digest import compute_digest
from hsu.utils.errors import ConfigurationError
from hsu.utils.url_canonical import SIGNATURE_KEY, canonicalize


def _config_from_args(args: argparse.Namespace) -> HsuConfig:
    app_settings = Settings()
    if args.secret:
        app_settings = app_settings.model_copy(update={"hsu_secret": args.secret})
    if args.preserve_order:
        app_settings = app_settings.model_copy(update={"hsu_sort_query": False})
    return app_settings.to_hsu_config()


def _handle_canonicalize(args: argparse.Namespace) -> int:
    print(canonicalize(args.url, exclude_keys=(SIGNATURE_KEY,), sort=not args.preserve_order))
    return 0


def _handle_digest(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    canonical = canonicalize(args.url, exclude_keys=(SIGNATURE_KEY,), sort=config.sort_query)
    print(f"canonical: {canonical}")
    print(f"digest:    {compute_digest(args.salt, config.secret, canonical)}")
    return 0


def _handle_verify(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    session = {f"{config.session_key_prefix}{args.scope}": args.salt}
    result = UrlVerifier(config).verify(args.scope, session, args.url)
    print(result.value)
    return 0 if result is VerificationResult.VALID else 2


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the debugging CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m hsu.cli",
        description="Inspect canonical strings and digests of signed URLs.",
    )
    subparsers = parser.add_subparsers(dest="command")

    canon_parser = subparsers.add_parser("canonicalize", help="Print the canonical string")
    canon_parser.add_argument("url")
    canon_parser.add_argument("--preserve-order", action="store_true")

    for name, help_text in (
        ("digest", "Print the canonical string and its digest"),
        ("verify", "Verify a signed URL against a known salt"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("url")
        sub.add_argument("--salt", required=True)
        sub.add_argument("--secret", default="", help="Defaults to HSU_SECRET")
        sub.add_argument("--preserve-order", action="store_true")
        if name == "verify":
            sub.add_argument("--scope", required=True)

    return parser


_HANDLERS = {
    "canonicalize": _handle_canonicalize,
    "digest": _handle_digest,
    "verify": _handle_verify,
}


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.  Returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        return _HANDLERS[args.command](args)
    except ConfigurationError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
