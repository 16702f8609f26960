"""astgen/header_grammar.py – Read node definitions out of a C++ AST header.

The header is scanned with a tolerant Parsimonious PEG grammar that only
understands what it needs: ``class`` / ``struct`` definitions, their
``final`` marker, their first base class, and data-member declarations
of the form ``Type name [= init];`` or ``Type name{init};``. Everything
else (methods, constructors, enums, templates, preprocessor lines,
namespaces) is skipped token by token.
skipped token by token.

Only ``final`` classes are concrete node types; non-final classes such as
``ExpressionAST`` are abstract categories and do not produce a node.

Members are classified by their declared type:

========================  ===========
``FooAST*``               node
``List<FooAST*>*``        node-list
``SourceLocation``        token
anything else             attribute
========================  ===========
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterator, List, Optional

from parsimonious.exceptions import ParseError, VisitationError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from astgen.errors import SchemaError, SchemaSyntaxError, SourceSpan
from astgen.naming import DEFAULT_SUFFIX
from astgen.schema import Member, MemberKind, NodeType, Schema

logger = logging.getLogger(__name__)

__all__ = ["HEADER_GRAMMAR", "HeaderSchemaBuilder", "load_schema_header"]


# ═══════════════════════════════════════════════════════════════════
#  GRAMMAR
# ═══════════════════════════════════════════════════════════════════

HEADER_GRAMMAR = Grammar(r'''
    header          = item* _

    item            = _ (template_decl / enum_decl / class_def / class_fwd / any_token)

    # ─────────────────────────────────────────────────────────────
    # Classes
    # ─────────────────────────────────────────────────────────────

    class_def       = class_key _ identifier _ final_kw? _ base_clause? _ "{" class_body "}" _ ";"
    class_fwd       = class_key _ identifier _ ";"
    class_key       = ~r"(class|struct)\b"
    final_kw        = ~r"final\b"

    base_clause     = ":" _ base_spec (_ "," _ base_spec)*
    base_spec       = (access_kw _)? qualified_name _ template_args?

    class_body      = body_item* _
    body_item       = _ (access_label / field / member_skip)
    access_label    = access_kw _ ":"
    access_kw       = ~r"(public|protected|private)\b"

    # ─────────────────────────────────────────────────────────────
    # Data members
    # ─────────────────────────────────────────────────────────────

    field           = !non_field_kw decl_type _ identifier _ initializer? _ ";"
    initializer     = ("=" ~r"[^;]+") / brace_block
    non_field_kw    = ~r"(class|struct|union|enum|using|typedef|friend|return)\b"
    decl_type       = const_kw? qualified_name _ template_args? _ pointer*
    template_args   = "<" _ decl_type (_ "," _ decl_type)* _ ">"
    pointer         = "*" _
    const_kw        = ~r"const\b" _

    # ─────────────────────────────────────────────────────────────
    # Skipped constructs
    # ─────────────────────────────────────────────────────────────

    template_decl   = ~r"template\b" _ angle_block _ (class_def / class_fwd / member_skip)
    enum_decl       = ~r"enum\b" ~r"[^;{}]*" brace_block? _ ";"
    member_skip     = ~r"[^;{}]*" (brace_block (_ ";")? / ";")
    brace_block     = "{" (brace_block / ~r"[^{}]+")* "}"
    angle_block     = "<" (angle_block / ~r"[^<>]+")* ">"
    any_token       = ~r"[A-Za-z_]\w*" / ~r"\S"

    # ─────────────────────────────────────────────────────────────
    # Lexical
    # ─────────────────────────────────────────────────────────────

    qualified_name  = ~r"[A-Za-z_]\w*(?:::[A-Za-z_]\w*)*"
    identifier      = ~r"[A-Za-z_]\w*"
    _               = (~r"\s+" / ~r"//[^\n]*" / ~r"/\*.*?\*/"s / ~r"#[^\n]*")*
''')


# ═══════════════════════════════════════════════════════════════════
#  TREE → SCHEMA
# ═══════════════════════════════════════════════════════════════════

_TYPE_PUNCT = re.compile(r"\s*([<>*,])\s*")


def _flatten(items: Any) -> Iterator[Any]:
    if isinstance(items, list):
        for item in items:
            yield from _flatten(item)
    else:
        yield items


def _first(node: Node, name: str) -> Optional[Node]:
    """Depth-first search for the first descendant rule called *name*."""
    for child in node.children:
        if child.expr_name == name:
            return child
        found = _first(child, name)
        if found is not None:
            return found
    return None


class HeaderSchemaBuilder(NodeVisitor):
    """Transforms the Parsimonious parse tree into ``NodeType`` records."""

    grammar = HEADER_GRAMMAR
    unwrapped_exceptions = (SchemaError,)

    def __init__(self, suffix: str = DEFAULT_SUFFIX) -> None:
        self.suffix = suffix
        self.abstract: List[str] = []

    def generic_visit(self, node, visited_children):
        return visited_children or node

    def visit_header(self, node, visited_children) -> List[NodeType]:
        return [item for item in _flatten(visited_children) if isinstance(item, NodeType)]

    def visit_template_decl(self, node, visited_children):
        return None

    def visit_class_def(self, node, visited_children) -> Optional[NodeType]:
        name = node.children[2].text
        if not node.children[4].text.strip():
            self.abstract.append(name)
            return None

        base = None
        if node.children[6].text.strip():
            qualified = _first(node.children[6], "qualified_name")
            base = qualified.text if qualified is not None else None

        members = tuple(
            item for item in _flatten(visited_children[9]) if isinstance(item, Member)
        )
        return NodeType(name=name, base=base, members=members)

    def visit_field(self, node, visited_children) -> Member:
        type_text = _TYPE_PUNCT.sub(r"\1", " ".join(node.children[1].text.split()))
        return Member(self.classify(type_text), self._target(type_text), node.children[3].text)

    def classify(self, type_text: str) -> MemberKind:
        """Member kind for a normalised C++ type spelling."""
        if type_text == "SourceLocation":
            return MemberKind.TOKEN
        match = re.fullmatch(r"List<(\w+)\*>\*", type_text)
        if match and self._is_node_type(match.group(1)):
            return MemberKind.NODE_LIST
        match = re.fullmatch(r"(\w+)\*", type_text)
        if match and self._is_node_type(match.group(1)):
            return MemberKind.NODE
        return MemberKind.ATTRIBUTE

    def _is_node_type(self, name: str) -> bool:
        return name.endswith(self.suffix) and len(name) > len(self.suffix)

    def _target(self, type_text: str) -> str:
        match = re.fullmatch(r"List<(\w+)\*>\*|(\w+)\*", type_text)
        if match and self._is_node_type(match.group(1) or match.group(2)):
            return match.group(1) or match.group(2)
        return type_text


def load_schema_header(
    text: str,
    source: str = "<header>",
    *,
    suffix: str = DEFAULT_SUFFIX,
) -> Schema:
    """Build a :class:`Schema` from the ``final`` classes of a C++ header."""
    try:
        tree = HEADER_GRAMMAR.parse(text)
    except ParseError as e:
        raise SchemaSyntaxError(
            f"cannot parse C++ header: {e}",
            span=SourceSpan.from_offset(text, e.pos, file=source),
            cause=e,
        ) from e

    builder = HeaderSchemaBuilder(suffix=suffix)
    try:
        nodes = builder.visit(tree)
    except VisitationError as e:
        raise SchemaError(f"cannot build schema from {source}: {e}", cause=e) from e

    logger.debug(
        "%s: %d node class(es), %d abstract class(es) skipped",
        source,
        len(nodes),
        len(builder.abstract),
    )
    return Schema.of(nodes, source=source)
