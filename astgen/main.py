#!/usr/bin/env python3
"""astgen/main.py — CLI entry-point for the visitor generator.

Usage examples
--------------
    # Generate the recursive visitor header from an S-expression schema
    python -m astgen header ast.sexp -o recursive_ast_visitor.h

    # Same, reading node classes straight out of the C++ AST header
    python -m astgen header include/cxx/ast.h -o recursive_ast_visitor.h

    # Generate the matching definitions
    python -m astgen source ast.sexp -o recursive_ast_visitor.cc

    # Inspect the analysis passes
    python -m astgen bases ast.sexp
    python -m astgen groups ast.sexp --format json

Exit codes
----------
    0   Success.
    1   Generation error (malformed grouping, base type naming).
    2   Infrastructure failure (missing file, unreadable schema, I/O).

The module doubles as ``python -m astgen`` via the companion
``astgen/__main__.py`` which simply calls :func:`main`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from pathlib import Path
from typing import Optional, Sequence

from astgen import __version__
from astgen.codegen import (
    GeneratorConfig,
    generate_recursive_visitor,
    generate_recursive_visitor_source,
)
from astgen.collect import collect_base_types
from astgen.errors import AstgenError, NamingError, SchemaError, ShapeError, WriteError
from astgen.grouping import group_nodes_by_base
from astgen.loader import SCHEMA_FORMATS, load_schema_file
from astgen.schema import Schema
from astgen.writer import render_header, render_source, write_artifact

_log = logging.getLogger("astgen")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the root ``astgen`` logger.

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
    root = logging.getLogger("astgen")
    root.setLevel(level)
    root.handlers[:] = [handler]


def _resolve_path(raw: str, label: str = "file") -> Path:
    """Resolve *raw* to an absolute ``Path``, raising on missing files."""
    p = Path(raw).expanduser().resolve()
    if not p.exists():
        _log.error("%s not found: %s", label, p)
        raise SystemExit(EXIT_INFRA)
    return p


def _config_from_args(args: argparse.Namespace) -> GeneratorConfig:
    config = GeneratorConfig()
    for name in ("class_name", "namespace", "dispatch_prefix", "base_suffix"):
        value = getattr(args, name, None)
        if value is not None:
            setattr(config, name, value)
    if getattr(args, "no_strict_suffix", False):
        config.strict_suffix = False
    banner = getattr(args, "banner", None)
    if banner:
        config.banner = _resolve_path(banner, "banner file").read_text(encoding="utf-8")
    for warning in config.validate():
        _log.warning("config: %s", warning)
    return config


def _load(args: argparse.Namespace, config: GeneratorConfig) -> Schema:
    path = _resolve_path(args.schema, "schema")
    return load_schema_file(path, args.schema_format, suffix=config.base_suffix)


# ===========================================================================
# Sub-command handlers
# ===========================================================================

def _cmd_header(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    schema = _load(args, config)
    generated = generate_recursive_visitor(schema, config)
    _log.info(
        "%s: %d dispatch method(s), %d override group(s)",
        generated.class_name,
        len(generated.base_types),
        len(generated.groups),
    )
    write_artifact(render_header(generated.lines, config), args.output)
    return EXIT_OK


def _cmd_source(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    schema = _load(args, config)
    lines = generate_recursive_visitor_source(schema, config)
    write_artifact(render_source(lines, config), args.output)
    return EXIT_OK


def _cmd_bases(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    schema = _load(args, config)
    base_types = collect_base_types(schema)
    if args.format == "json":
        payload = [{"base": b, "method": config.dispatch_name(b)} for b in base_types]
        print(json.dumps(payload, indent=2))
    else:
        for base in base_types:
            print(f"{base}\t{config.dispatch_name(base)}")
    return EXIT_OK


def _cmd_groups(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    schema = _load(args, config)
    grouping = group_nodes_by_base(schema)
    if args.format == "json":
        print(json.dumps(grouping.as_dict(), indent=2))
    else:
        for group in grouping.unwrap():
            print(f"{group.base}:")
            for name in group.names():
                print(f"  {name}")
    return EXIT_OK


# ===========================================================================
# Argument parser
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    """Construct the full CLI argument parser with subcommands."""

    parser = argparse.ArgumentParser(
        prog="astgen",
        description="Generate a recursive AST visitor from an AST schema.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              astgen header ast.sexp -o recursive_ast_visitor.h
              astgen source include/cxx/ast.h -o recursive_ast_visitor.cc
              astgen groups ast.sexp --format json
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
        help="Increase verbosity (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    def _add_schema_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("schema", help="Schema file (.sexp or C++ AST header).")
        p.add_argument(
            "--schema-format",
            choices=SCHEMA_FORMATS,
            default=None,
            help="Schema format (default: by file extension).",
        )
        p.add_argument(
            "--prefix",
            dest="dispatch_prefix",
            default=None,
            help="Dispatch method prefix word (default: accept).",
        )
        p.add_argument(
            "--suffix",
            dest="base_suffix",
            default=None,
            help="Base type name suffix to strip (default: AST).",
        )
        p.add_argument(
            "--no-strict-suffix",
            action="store_true",
            help="Keep base type names that lack the suffix instead of failing.",
        )

    def _add_output_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "-o", "--output",
            default=None,
            metavar="FILE",
            help='Output file ("-" or omit for stdout).',
        )
        p.add_argument("--class-name", default=None, help="Visitor class name.")
        p.add_argument("--namespace", default=None, help="Enclosing C++ namespace.")
        p.add_argument("--banner", default=None, metavar="FILE", help="License banner file.")

    p_header = subparsers.add_parser("header", help="Generate the visitor declaration header.")
    _add_schema_args(p_header)
    _add_output_args(p_header)
    p_header.set_defaults(func=_cmd_header)

    p_source = subparsers.add_parser("source", help="Generate the visitor definitions.")
    _add_schema_args(p_source)
    _add_output_args(p_source)
    p_source.set_defaults(func=_cmd_source)

    p_bases = subparsers.add_parser("bases", help="List base types and dispatch names.")
    _add_schema_args(p_bases)
    p_bases.add_argument("-f", "--format", choices=["text", "json"], default="text")
    p_bases.set_defaults(func=_cmd_bases)

    p_groups = subparsers.add_parser("groups", help="Show node types grouped by base.")
    _add_schema_args(p_groups)
    p_groups.add_argument("-f", "--format", choices=["text", "json"], default="text")
    p_groups.set_defaults(func=_cmd_groups)

    return parser


# ===========================================================================
# Main
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the astgen CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except (ShapeError, NamingError) as exc:
        _log.error("%s", exc)
        return EXIT_ERROR
    except (SchemaError, WriteError) as exc:
        _log.error("%s", exc)
        return EXIT_INFRA
    except AstgenError as exc:
        _log.error("%s", exc)
        return EXIT_ERROR
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_INFRA


if __name__ == "__main__":
    raise SystemExit(main())
