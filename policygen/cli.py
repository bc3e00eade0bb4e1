#!/usr/bin/env python3
"""
Compile the stdlib surface document into the allow-list policy document.

Usage:
    policygen [SOURCE] [DESTINATION] [--strict] [--check]

    SOURCE:      surface document (default: ontology/stdlib_surface.v1_0.ontology.json)
    DESTINATION: policy document  (default: spec/v1_0/anka_policy_allowed_stdlib.v1.json)
    --strict:    ANKA policy: require and emit exactly the ANKA module list
    --check:     verify DESTINATION matches the generator output (exit 1 if drift)

Exit codes:
    0: written / up to date
    1: surface rejected, or committed policy has drifted
    2: ERROR (unreadable or unparsable input, unwritable destination, bad settings)
"""

import argparse
import sys

from .config import SettingsError, load_settings
from .contracts.errors import (
    PolicyCompileError,
    PolicyDriftError,
    PolicyWriteError,
    SurfaceDecodeError,
    SurfaceReadError,
)
from .observability import RunContext, configure_logging, get_logger
from .pipeline import VARIANTS, compile_policy_file, get_variant
from .verify import enforce_policy_file_strict

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="policygen",
        description="Compile the stdlib surface document into the allow-list policy document",
    )
    parser.add_argument("source", nargs="?", help="Surface document path")
    parser.add_argument("destination", nargs="?", help="Policy document path")

    variant = parser.add_mutually_exclusive_group()
    variant.add_argument(
        "--variant",
        choices=sorted(VARIANTS),
        help="Pipeline variant (default: permissive)",
    )
    variant.add_argument(
        "--strict",
        action="store_const",
        const="strict",
        dest="variant",
        help="Shorthand for --variant strict",
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Check that DESTINATION is up to date instead of writing it",
    )
    parser.add_argument("--config", help="YAML settings file")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: WARNING)",
    )
    parser.add_argument(
        "--log-format",
        choices=["auto", "human", "json"],
        help="Log format (default: auto)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except SettingsError as e:
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_ERROR

    source = args.source if args.source is not None else settings.source
    destination = args.destination if args.destination is not None else settings.destination
    variant = get_variant(args.variant or settings.variant)
    log_level = args.log_level or settings.log_level
    log_format = args.log_format or settings.log_format

    configure_logging(log_level, None if log_format == "auto" else log_format == "json")

    with RunContext():
        try:
            if args.check:
                enforce_policy_file_strict(source, destination, variant)
                print(f"✅ {destination} is up to date.")
                return EXIT_OK

            document = compile_policy_file(source, destination, variant)
        except PolicyDriftError as e:
            logger.error("Policy drift detected", extra={"destination": destination})
            print(f"❌ {e}", file=sys.stderr)
            rerun = f"policygen {source} {destination}"
            if variant.is_strict:
                rerun += " --strict"
            print(f"   Run: {rerun}", file=sys.stderr)
            return EXIT_INVALID
        except (SurfaceReadError, SurfaceDecodeError, PolicyWriteError) as e:
            logger.error("Policy I/O failed", extra={"source": source, "destination": destination})
            print(f"❌ {e}", file=sys.stderr)
            return EXIT_ERROR
        except PolicyCompileError as e:
            logger.error(
                "Surface rejected",
                extra={"source": source, "error_kind": type(e).__name__},
            )
            print(f"❌ {type(e).__name__}: {e}", file=sys.stderr)
            return EXIT_INVALID

    print(f"✅ Wrote {destination} ({document.module_count} modules)")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
