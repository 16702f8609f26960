#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
astgen/codegen.py
=================

Code generator for the recursive AST visitor.

This module turns a :class:`~astgen.schema.Schema` into the C++ text of a
``RecursiveASTVisitor``. The declaration body is produced in three passes:

1. **Base-type dispatch** — one ``virtual void accept<Base>(<Base>* ast);``
   per distinct base type, in first-seen order
2. **Hooks** — the fixed ``preVisit`` / ``postVisit`` pair
3. **Overrides** — one ``visit(<Node>* ast) override`` per concrete node,
   grouped by declared base, each group preceded by a blank line

The matching definitions (``.cc``) are produced by :func:`emit_definitions`:
the ``accept(AST*)`` driver, one forwarding body per dispatch method, and
one ``visit`` body per grouped node that recurses into its node and
node-list members.

Emitters return plain line lists; wrapping them with a banner, includes
and the class declaration is the job of :mod:`astgen.writer`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from astgen.collect import collect_base_types
from astgen.errors import SchemaError
from astgen.grouping import GroupingResult, NodeGroup, check_grouping, group_nodes_by_base
from astgen.naming import DEFAULT_PREFIX, DEFAULT_SUFFIX, dispatch_method_name
from astgen.schema import MemberKind, NodeType, Schema

logger = logging.getLogger(__name__)

__all__ = [
    "CodeEmitter",
    "GeneratorConfig",
    "GeneratedVisitor",
    "emit_declarations",
    "emit_definitions",
    "generate_recursive_visitor",
    "generate_recursive_visitor_source",
]


# ═══════════════════════════════════════════════════════════════════════════
# CODE EMITTER
# ═══════════════════════════════════════════════════════════════════════════

class CodeEmitter:
    """Line-oriented C++ emission with indentation management."""

    def __init__(self, indent_str: str = "  ") -> None:
        self._lines: List[str] = []
        self._indent_str = indent_str
        self._indent_level = 0

    def emit(self, code: str = "") -> None:
        """Emit a line at the current indentation; blank lines stay empty."""
        if code.strip():
            self._lines.append(self._indent_str * self._indent_level + code)
        else:
            self._lines.append("")

    def emit_blank(self, count: int = 1) -> None:
        for _ in range(count):
            self._lines.append("")

    def indent(self) -> None:
        self._indent_level += 1

    def dedent(self) -> None:
        self._indent_level = max(0, self._indent_level - 1)

    def block(self, header: str, closer: str = "}") -> "CodeEmitter._BlockContext":
        """Context manager for a brace-delimited block."""
        return self._BlockContext(self, header, closer)

    class _BlockContext:
        """Context manager for code blocks."""

        def __init__(self, emitter: "CodeEmitter", header: str, closer: str) -> None:
            self._emitter = emitter
            self._header = header
            self._closer = closer

        def __enter__(self) -> "CodeEmitter":
            self._emitter.emit(self._header)
            self._emitter.indent()
            return self._emitter

        def __exit__(self, *args: Any) -> None:
            self._emitter.dedent()
            self._emitter.emit(self._closer)

    def get_lines(self) -> List[str]:
        return list(self._lines)

    def get_code(self) -> str:
        return "\n".join(self._lines)


# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class GeneratorConfig:
    """Naming and layout knobs for the generated visitor."""

    class_name: str = "RecursiveASTVisitor"
    base_visitor: str = "ASTVisitor"
    namespace: str = "cxx"
    include: str = "cxx/ast_visitor.h"
    header_include: str = "cxx/recursive_ast_visitor.h"
    ast_include: str = "cxx/ast.h"
    node_type: str = "AST"
    dispatch_prefix: str = DEFAULT_PREFIX
    base_suffix: str = DEFAULT_SUFFIX
    strict_suffix: bool = True
    banner: str = ""

    def dispatch_name(self, base: str) -> str:
        return dispatch_method_name(
            base,
            self.dispatch_prefix,
            self.base_suffix,
            strict=self.strict_suffix,
        )

    def validate(self) -> List[str]:
        """Return a list of validation warnings (empty if valid)."""
        warnings: List[str] = []
        for name in ("class_name", "base_visitor", "node_type", "dispatch_prefix"):
            value = getattr(self, name)
            if not value or not value.replace("_", "a").isalnum():
                warnings.append(f"{name} must be a C++ identifier, got {value!r}")
        if not self.base_suffix:
            warnings.append("base_suffix is empty; dispatch names keep the full type name")
        if self.namespace and not all(
            part.replace("_", "a").isalnum() for part in self.namespace.split("::")
        ):
            warnings.append(f"namespace {self.namespace!r} is not a valid C++ namespace")
        return warnings


# ═══════════════════════════════════════════════════════════════════════════
# GENERATED VISITOR CONTAINER
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class GeneratedVisitor:
    """Body lines plus the intermediate results they were built from."""

    lines: List[str]
    base_types: Tuple[str, ...]
    groups: Tuple[NodeGroup, ...]
    config: GeneratorConfig = field(default_factory=GeneratorConfig)
    source: str = "<memory>"

    @property
    def class_name(self) -> str:
        return self.config.class_name

    @property
    def dispatch_names(self) -> List[str]:
        return [self.config.dispatch_name(base) for base in self.base_types]

    def get_code(self) -> str:
        return "\n".join(self.lines)


# ═══════════════════════════════════════════════════════════════════════════
# DECLARATIONS
# ═══════════════════════════════════════════════════════════════════════════

GroupingInput = Union[GroupingResult, Sequence[NodeGroup]]


def _checked_groups(grouping: GroupingInput) -> Tuple[NodeGroup, ...]:
    if isinstance(grouping, GroupingResult):
        return grouping.unwrap()
    error = check_grouping(grouping)
    if error is not None:
        raise error
    return grouping  # type: ignore[return-value]


def _dispatch_names(base_types: Sequence[str], config: GeneratorConfig) -> List[str]:
    """Derive one dispatch name per base type, warning when two collide."""
    names: List[str] = []
    owners: Dict[str, str] = {}
    for base in base_types:
        name = config.dispatch_name(base)
        if name in owners:
            logger.warning(
                "dispatch name %s derived from both %s and %s; the overloads share one name",
                name,
                owners[name],
                base,
            )
        else:
            owners[name] = base
        names.append(name)
    return names


def emit_declarations(
    base_types: Sequence[str],
    grouping: GroupingInput,
    config: Optional[GeneratorConfig] = None,
) -> List[str]:
    """Emit the declaration body of the recursive visitor class.

    *grouping* is either the :class:`GroupingResult` from
    :func:`~astgen.grouping.group_nodes_by_base` or a tuple of groups; in
    both cases a malformed grouping raises :class:`ShapeError` before any
    line is produced.
    """
    config = config or GeneratorConfig()
    groups = _checked_groups(grouping)
    generic = config.node_type

    emitter = CodeEmitter()
    for base, name in zip(base_types, _dispatch_names(base_types, config)):
        emitter.emit(f"virtual void {name}({base}* ast);")

    emitter.emit(f"virtual auto preVisit({generic}*) -> bool {{ return true; }}")
    emitter.emit(f"virtual void postVisit({generic}*) {{}}")

    for group in groups:
        emitter.emit_blank()
        emitter.indent()
        for node in group:
            emitter.emit(f"void visit({node.name}* ast) override;")
        emitter.dedent()

    return emitter.get_lines()


# ═══════════════════════════════════════════════════════════════════════════
# DEFINITIONS
# ═══════════════════════════════════════════════════════════════════════════

def _emit_visit_body(emitter: CodeEmitter, node: NodeType, config: GeneratorConfig) -> None:
    for member in node.reference_members():
        if not member.name:
            raise SchemaError(
                f"{node.name}: {member.kind.value} member of type {member.type!r} has no name"
            )
        accept = config.dispatch_name(member.type)
        if member.kind is MemberKind.NODE:
            emitter.emit(f"{accept}(ast->{member.name});")
        else:
            with emitter.block(f"for (auto it = ast->{member.name}; it; it = it->next) {{"):
                emitter.emit(f"{accept}(it->value);")


def emit_definitions(
    base_types: Sequence[str],
    grouping: GroupingInput,
    config: Optional[GeneratorConfig] = None,
) -> List[str]:
    """Emit the out-of-line definitions matching :func:`emit_declarations`."""
    config = config or GeneratorConfig()
    groups = _checked_groups(grouping)
    cls = config.class_name
    generic = config.node_type

    emitter = CodeEmitter()
    with emitter.block(f"void {cls}::accept({generic}* ast) {{"):
        emitter.emit("if (!ast) return;")
        emitter.emit("if (preVisit(ast)) ast->accept(this);")
        emitter.emit("postVisit(ast);")

    for base, name in zip(base_types, _dispatch_names(base_types, config)):
        emitter.emit_blank()
        emitter.emit(f"void {cls}::{name}({base}* ast) {{ accept(ast); }}")

    for group in groups:
        for node in group:
            emitter.emit_blank()
            if next(node.reference_members(), None) is None:
                emitter.emit(f"void {cls}::visit({node.name}* ast) {{}}")
                continue
            with emitter.block(f"void {cls}::visit({node.name}* ast) {{"):
                _emit_visit_body(emitter, node, config)

    return emitter.get_lines()


# ═══════════════════════════════════════════════════════════════════════════
# PUBLIC API
# ═══════════════════════════════════════════════════════════════════════════

def generate_recursive_visitor(
    schema: Union[Schema, Sequence[NodeType]],
    config: Optional[GeneratorConfig] = None,
) -> GeneratedVisitor:
    """Run base-type discovery, grouping and declaration emission.

    Raises :class:`ShapeError` when the grouping is malformed and
    :class:`~astgen.errors.NamingError` when a base type breaks the
    suffix rule under ``strict_suffix``.
    """
    config = config or GeneratorConfig()
    nodes = tuple(schema)
    source = schema.source if isinstance(schema, Schema) else "<memory>"

    base_types = collect_base_types(nodes)
    grouping = group_nodes_by_base(nodes)
    lines = emit_declarations(base_types, grouping, config)

    logger.debug(
        "generated %s: %d dispatch method(s), %d group(s), %d line(s)",
        config.class_name,
        len(base_types),
        len(grouping.groups),
        len(lines),
    )
    return GeneratedVisitor(
        lines=lines,
        base_types=base_types,
        groups=grouping.groups,
        config=config,
        source=source,
    )


def generate_recursive_visitor_source(
    schema: Union[Schema, Sequence[NodeType]],
    config: Optional[GeneratorConfig] = None,
) -> List[str]:
    """Definition lines for the visitor declared by :func:`generate_recursive_visitor`."""
    config = config or GeneratorConfig()
    nodes = tuple(schema)
    return emit_definitions(collect_base_types(nodes), group_nodes_by_base(nodes), config)
