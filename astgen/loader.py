"""astgen/loader.py – S-expression schema loader.

Parses a schema written as S-expressions (read with ``sexpdata``) into a
:class:`~astgen.schema.Schema`, and dispatches to the C++ header loader
in :mod:`astgen.header_grammar` by file extension.

Surface syntax
--------------
::

    ;; comments run to end of line
    (schema
      (node ExpressionAST)
      (node BinaryExpressionAST :base ExpressionAST
        (node leftExpression ExpressionAST)
        (token opLoc)
        (node rightExpression ExpressionAST)
        (attribute op TokenKind))
      (node CallExpressionAST :base ExpressionAST
        (node baseExpression ExpressionAST)
        (node-list expressionList ExpressionAST)))

Member forms are ``(<kind> <name> <type>)``; ``<kind>`` is one of
``node``, ``node-list``, ``token`` or ``attribute``. Tokens may omit the
type, which then defaults to ``SourceLocation``. Attribute types may be
quoted strings, e.g. ``(attribute identifier "const Identifier*")``.

The loader checks shapes only; it does not check that names are unique
or that referenced types exist.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional, Union

import sexpdata
from sexpdata import Symbol

from astgen.errors import (
    AstgenErrorCodes,
    SchemaError,
    SchemaSyntaxError,
    SourceSpan,
)
from astgen.header_grammar import load_schema_header
from astgen.naming import DEFAULT_SUFFIX
from astgen.schema import Member, MemberKind, NodeType, Schema

logger = logging.getLogger(__name__)

__all__ = ["load_schema", "load_schema_file", "read_sexp", "SCHEMA_FORMATS"]

SCHEMA_FORMATS = ("sexp", "header")

_HEADER_SUFFIXES = {".h", ".hh", ".hpp", ".hxx"}


# ═══════════════════════════════════════════════════════════════════════
#  S-expression reader
# ═══════════════════════════════════════════════════════════════════════

def read_sexp(text: str, source: str = "<schema>") -> Any:
    """Parse one S-expression into nested lists of ``Symbol`` / ``str``.

    ``nil``, ``t`` and friends are not auto-mapped, so every bare word
    stays a :class:`sexpdata.Symbol`.
    """
    try:
        return sexpdata.loads(text, nil=None, true=None, false=None)
    except Exception as e:
        raise SchemaSyntaxError(
            f"S-expression syntax error: {e}",
            span=SourceSpan(file=source),
            cause=e,
        ) from e


# Raw reader output
Sexp = Any


# ═══════════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════════

def _sym_name(s: Sexp, what: str = "symbol") -> str:
    """Extract the name of a ``sexpdata.Symbol``, or raise."""
    if isinstance(s, Symbol):
        return str(s)
    raise SchemaError(f"expected {what}, got {type(s).__name__}: {s!r}")


def _type_name(s: Sexp, kind: MemberKind) -> str:
    # Attribute types may be quoted to carry spaces and qualifiers.
    if kind is MemberKind.ATTRIBUTE and isinstance(s, str):
        return s
    return _sym_name(s, "member type")


def _expect_list(s: Sexp, *, min_len: int = 0, tag: Optional[str] = None) -> list:
    """Assert that *s* is a list, optionally with a minimum length and head tag."""
    if not isinstance(s, list):
        raise SchemaError(
            f"expected list{f' ({tag} ...)' if tag else ''}, "
            f"got {type(s).__name__}: {s!r}"
        )
    if len(s) < min_len:
        raise SchemaError(
            f"list too short: expected at least {min_len} elements, got {len(s)}: {s!r}"
        )
    if tag is not None and _sym_name(s[0]) != tag:
        raise SchemaError(f"expected ({tag} ...), got ({_sym_name(s[0])} ...)")
    return s


# ═══════════════════════════════════════════════════════════════════════
#  Forms
# ═══════════════════════════════════════════════════════════════════════

def _parse_member(s: Sexp, owner: str) -> Member:
    form = _expect_list(s, min_len=2)
    tag = _sym_name(form[0], "member kind")
    try:
        kind = MemberKind.from_tag(tag)
    except ValueError:
        raise SchemaError(
            f"{owner}: unknown member kind {tag!r}",
            code=AstgenErrorCodes.UNKNOWN_MEMBER_KIND,
            hint="use one of: " + ", ".join(k.value for k in MemberKind),
        ) from None

    name = _sym_name(form[1], "member name")
    if len(form) > 3:
        raise SchemaError(f"{owner}.{name}: member form takes a name and a type")
    if len(form) == 3:
        member_type = _type_name(form[2], kind)
    elif kind is MemberKind.TOKEN:
        member_type = "SourceLocation"
    else:
        raise SchemaError(f"{owner}.{name}: {tag} member needs a type")
    return Member(kind=kind, type=member_type, name=name)


def _parse_node(s: Sexp) -> NodeType:
    form = _expect_list(s, min_len=2, tag="node")
    name = _sym_name(form[1], "node name")
    base: Optional[str] = None
    members: List[Member] = []

    rest = form[2:]
    i = 0
    while i < len(rest):
        item = rest[i]
        if isinstance(item, Symbol) and item == ":base":
            if i + 1 >= len(rest):
                raise SchemaError(f"{name}: ':base' needs a type name")
            base = _sym_name(rest[i + 1], "base type")
            i += 2
            continue
        members.append(_parse_member(item, name))
        i += 1
    return NodeType(name=name, base=base, members=tuple(members))


# ═══════════════════════════════════════════════════════════════════════
#  Public API
# ═══════════════════════════════════════════════════════════════════════

def load_schema(text: str, source: str = "<schema>") -> Schema:
    """Parse an S-expression schema.

    >>> load_schema('(schema (node NameAST))').names()
    ('NameAST',)
    """
    form = _expect_list(read_sexp(text, source), min_len=1, tag="schema")
    nodes = [_parse_node(item) for item in form[1:]]
    logger.debug("%s: loaded %d node(s)", source, len(nodes))
    return Schema.of(nodes, source=source)


def load_schema_file(
    path: Union[str, Path],
    schema_format: Optional[str] = None,
    *,
    suffix: str = DEFAULT_SUFFIX,
) -> Schema:
    """Read and parse a schema file.

    *schema_format* is ``"sexp"`` or ``"header"``; when omitted, C/C++
    header extensions select ``"header"`` and anything else ``"sexp"``.
    """
    p = Path(path)
    if schema_format is None:
        schema_format = "header" if p.suffix.lower() in _HEADER_SUFFIXES else "sexp"
    if schema_format not in SCHEMA_FORMATS:
        raise SchemaError(f"unknown schema format {schema_format!r}")

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaError(f"cannot read schema: {e}", span=SourceSpan(file=str(p)), cause=e) from e

    logger.info("Loading %s schema: %s", schema_format, p)
    if schema_format == "header":
        return load_schema_header(text, source=str(p), suffix=suffix)
    return load_schema(text, source=str(p))
