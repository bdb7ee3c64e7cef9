#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
better_casts/__main__.py
========================

Command line front end for probing cast classification and validation.

Usage
-----
    python -m better_casts <command> [options]

Commands
--------
    classify    Print the cast category for a TO / FROM type pair
    cast        Convert a value and print the result (or the violation)
    info        Print version and the effective build-wide settings

Types are written as C spellings: ``"unsigned char"``, ``int8_t``,
``"const void*"``.
"""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
import textwrap
from typing import Any, Optional, Sequence

from better_casts import __version__
from better_casts.config import describe
from better_casts.engine import make_caster
from better_casts.errors import CastDefinitionError, CastError
from better_casts.predicates import castable_categories, classify
from better_casts.rounding import RoundingMode
from better_casts.spelling import TypeSpellingError, parse_type
from better_casts.type_model import CType

_log = logging.getLogger("better_casts")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_VIOLATION: int = 1
EXIT_USAGE: int = 2

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``better_casts`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("better_casts")
    root.setLevel(level)
    root.addHandler(handler)


def _parse_value(text: str, source: CType) -> Any:
    """Interpret *text* as a value of *source*."""
    if source.is_floating:
        return float(text)
    if source.is_bool:
        word = text.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise ValueError(f"{text!r} is not a bool (use true/false or 1/0)")
    if source.is_integer:
        return int(text, 0)
    if source.is_pointer or source.is_nullptr:
        return int(text, 0)
    raise ValueError(f"values of type {source} cannot be given on the command line")


def _format_value(value: Any) -> str:
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    return str(value)


# ===========================================================================
# Commands
# ===========================================================================

def cmd_classify(args: argparse.Namespace) -> int:
    to, from_ = parse_type(args.to), parse_type(args.from_)
    category = classify(to, from_)
    if args.json:
        print(json.dumps({
            "to": str(to),
            "from": str(from_),
            "category": category.value,
            "needs_validation": category.needs_validation,
            "matches": [c.value for c in castable_categories(to, from_)],
        }))
    else:
        print(f"{from_} -> {to}: {category.value}")
    return EXIT_OK


def cmd_cast(args: argparse.Namespace) -> int:
    to, from_ = parse_type(args.to), parse_type(args.from_)
    checked: Optional[bool] = None
    if args.checked:
        checked = True
    elif args.unchecked:
        checked = False
    rounding = RoundingMode.parse(args.rounding) if args.rounding else None

    caster = make_caster(to, from_, checked=checked, rounding=rounding)
    _log.info("using %s", caster)
    value = _parse_value(args.value, from_)
    try:
        result = caster(value)
    except CastError as exc:
        sys.stderr.write(f"{exc.violation.describe()}\n")
        return EXIT_VIOLATION
    print(_format_value(result))
    return EXIT_OK


def cmd_info(args: argparse.Namespace) -> int:
    info = {"version": __version__, **describe()}
    if args.json:
        print(json.dumps(info))
    else:
        for key, value in info.items():
            print(f"{key}: {value}")
    return EXIT_OK


# ===========================================================================
# Argument parser
# ===========================================================================

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the better-casts CLI."""

    parser = argparse.ArgumentParser(
        prog="better-casts",
        description="Classify and validate C primitive type conversions.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              %(prog)s classify int8_t int
              %(prog)s cast int8_t int 300
              %(prog)s cast --rounding ceiling int double 3.7
              %(prog)s cast --unchecked "unsigned int" int -1
              %(prog)s info --json
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="increase log verbosity (-v info, -vv debug)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    # ── classify ─────────────────────────────────────────────────────────

    p_classify = subparsers.add_parser(
        "classify",
        help="Print the cast category for a type pair",
    )
    p_classify.add_argument("to", help="destination type spelling")
    p_classify.add_argument("from_", metavar="from", help="source type spelling")
    p_classify.add_argument("--json", action="store_true", help="emit JSON")
    p_classify.set_defaults(func=cmd_classify)

    # ── cast ─────────────────────────────────────────────────────────────

    p_cast = subparsers.add_parser(
        "cast",
        help="Convert a value between two types",
    )
    p_cast.add_argument("to", help="destination type spelling")
    p_cast.add_argument("from_", metavar="from", help="source type spelling")
    p_cast.add_argument("value", help="source value (integers accept 0x / 0o / 0b)")
    mode = p_cast.add_mutually_exclusive_group()
    mode.add_argument("--checked", action="store_true", help="force the checked variant")
    mode.add_argument("--unchecked", action="store_true", help="force the unchecked variant")
    p_cast.add_argument(
        "--rounding",
        choices=[m.name.lower() for m in RoundingMode],
        help="rounding mode for float -> integer casts",
    )
    p_cast.set_defaults(func=cmd_cast)

    # ── info ─────────────────────────────────────────────────────────────

    p_info = subparsers.add_parser("info", help="Show version and settings")
    p_info.add_argument("--json", action="store_true", help="emit JSON")
    p_info.set_defaults(func=cmd_info)

    return parser


# ===========================================================================
# MAIN
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the better-casts CLI.

    Returns
    -------
    int
        Exit code: 0 success, 1 cast violation, 2 usage error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    try:
        return args.func(args)
    except (TypeSpellingError, CastDefinitionError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_USAGE
    except ValueError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_USAGE
    except BrokenPipeError:
        return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
