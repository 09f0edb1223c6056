"""
linkedaddress CLI — Read-Only Interface for Linkage Checks.

Commands:
    linkedaddress namehash <name>          — Print the NodeId of a name
    linkedaddress reverse-node <address>   — Print the reverse NodeId
    linkedaddress check-label <label>      — Check the auth label convention
    linkedaddress validate ...             — Text-record linkage check
    linkedaddress validate-reverse ...     — Reverse-naming linkage check
    linkedaddress validate-compound ...    — Compound auth name linkage check

Records come from a YAML or JSON snapshot (see resolution.records). The CLI
cannot write records; it only reports what they prove.

Environment:
    LINKEDADDRESS_CONVENTION  key | value   (default: key)
    LINKEDADDRESS_LOG_LEVEL   logging level (default: WARNING)
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from ..domain import DomainName, LinkageFailure
from ..encoding import AddressFormatError, from_hex_string
from ..linkage.validator import (
    LinkageResult,
    RecordConvention,
    validate,
    validate_compound_name,
    validate_reverse_naming,
)
from ..namehash import node_hex, reverse_node
from ..resolution.client import ResolutionQueryError
from ..resolution.records import RecordsFormatError, load_registry
from ..validation import is_valid_auth_label


logger = logging.getLogger(__name__)

CONVENTION_ENV = "LINKEDADDRESS_CONVENTION"
LOG_LEVEL_ENV = "LINKEDADDRESS_LOG_LEVEL"


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_failure(failure: LinkageFailure) -> str:
    """Format a refusal as a single line."""
    return f"[{failure.check.value}] ({failure.kind.value}) {failure.reason}"


def format_result(result: LinkageResult) -> str:
    if result.success:
        return f"VALID ({result.variant.value})"
    return f"REFUSED ({result.variant.value}) {format_failure(result.failure)}"


# =============================================================================
# CLI COMMANDS
# =============================================================================

def cmd_namehash(args: argparse.Namespace) -> int:
    """Print the NodeId of a dotted name."""
    try:
        domain = DomainName.parse(args.name)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1
    print(node_hex(domain.node))
    return 0


def cmd_reverse_node(args: argparse.Namespace) -> int:
    """Print the reverse-lookup NodeId of an address."""
    try:
        raw = from_hex_string(args.address)
    except AddressFormatError as e:
        print(f"ERROR: {e}")
        return 1
    print(node_hex(reverse_node(raw)))
    return 0


def cmd_check_label(args: argparse.Namespace) -> int:
    """Exit 0 if the label follows the auth[0-9]* convention."""
    if is_valid_auth_label(args.label):
        print(f"{args.label}: valid")
        return 0
    print(f"{args.label}: invalid")
    return 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Run the text-record linkage check against a records file."""
    try:
        registry = load_registry(args.records)
        result = validate(
            registry,
            args.main_address,
            DomainName.parse(args.main_name),
            args.auth_key,
            args.auth_address,
            DomainName.parse(args.auth_name),
            convention=RecordConvention(args.convention),
        )
    except (OSError, ValueError, RecordsFormatError, ResolutionQueryError) as e:
        print(f"ERROR: {e}")
        return 1

    print(format_result(result))
    return 0 if result else 1


def cmd_validate_reverse(args: argparse.Namespace) -> int:
    """Run the reverse-naming linkage check against a records file."""
    try:
        registry = load_registry(args.records)
        result = validate_reverse_naming(
            registry,
            args.main_address,
            DomainName.parse(args.main_name),
            args.auth_label,
            args.auth_address,
        )
    except (OSError, ValueError, RecordsFormatError, ResolutionQueryError) as e:
        print(f"ERROR: {e}")
        return 1

    print(format_result(result))
    return 0 if result else 1


def cmd_validate_compound(args: argparse.Namespace) -> int:
    """Run the compound-name linkage check against a records file."""
    try:
        registry = load_registry(args.records)
        result = validate_compound_name(
            registry,
            args.main_address,
            DomainName.parse(args.main_name),
            args.auth_name,
            args.auth_address,
        )
    except (OSError, ValueError, RecordsFormatError, ResolutionQueryError) as e:
        print(f"ERROR: {e}")
        return 1

    print(format_result(result))
    return 0 if result else 1


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="linkedaddress",
        description="Bidirectional ENS address linkage checks",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log resolution queries",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    namehash_parser = subparsers.add_parser(
        "namehash",
        help="Print the NodeId of a name",
    )
    namehash_parser.add_argument("name", help="Dotted name, e.g. wilkins.eth")
    namehash_parser.set_defaults(func=cmd_namehash)

    reverse_parser = subparsers.add_parser(
        "reverse-node",
        help="Print the reverse-lookup NodeId of an address",
    )
    reverse_parser.add_argument("address", help="20-byte hex address")
    reverse_parser.set_defaults(func=cmd_reverse_node)

    label_parser = subparsers.add_parser(
        "check-label",
        help="Check a label against the auth[0-9]* convention",
    )
    label_parser.add_argument("label")
    label_parser.set_defaults(func=cmd_check_label)

    validate_parser = subparsers.add_parser(
        "validate",
        help="Text-record linkage check",
    )
    _add_records_argument(validate_parser)
    validate_parser.add_argument("--main-address", required=True)
    validate_parser.add_argument("--main-name", required=True)
    validate_parser.add_argument("--auth-key", required=True)
    validate_parser.add_argument("--auth-address", required=True)
    validate_parser.add_argument("--auth-name", required=True)
    validate_parser.add_argument(
        "--convention",
        choices=[c.value for c in RecordConvention],
        default=os.environ.get(CONVENTION_ENV, RecordConvention.KEY_NAMESPACED.value),
        help="Where the eip5131 namespace token goes (key or value)",
    )
    validate_parser.set_defaults(func=cmd_validate)

    reverse_naming_parser = subparsers.add_parser(
        "validate-reverse",
        help="Reverse-naming linkage check",
    )
    _add_records_argument(reverse_naming_parser)
    reverse_naming_parser.add_argument("--main-address", required=True)
    reverse_naming_parser.add_argument("--main-name", required=True)
    reverse_naming_parser.add_argument("--auth-label", required=True)
    reverse_naming_parser.add_argument("--auth-address", required=True)
    reverse_naming_parser.set_defaults(func=cmd_validate_reverse)

    compound_parser = subparsers.add_parser(
        "validate-compound",
        help="Compound auth name linkage check",
    )
    _add_records_argument(compound_parser)
    compound_parser.add_argument("--main-address", required=True)
    compound_parser.add_argument("--main-name", required=True)
    compound_parser.add_argument("--auth-name", required=True)
    compound_parser.add_argument("--auth-address", required=True)
    compound_parser.set_defaults(func=cmd_validate_compound)

    return parser


def _add_records_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--records",
        required=True,
        help="YAML or JSON records file",
    )


def configure_logging(verbose: bool) -> None:
    requested = "DEBUG" if verbose else os.environ.get(LOG_LEVEL_ENV, "WARNING")
    level = logging.getLevelName(requested.upper())
    known = isinstance(level, int)
    logging.basicConfig(
        level=level if known else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not known:
        logger.warning(f"Unknown {LOG_LEVEL_ENV} {requested!r}, using WARNING")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
