"""astgen — recursive AST visitor generator.

This package turns a declarative AST schema (node types, their declared
base type and their typed members) into the C++ declarations of a
``RecursiveASTVisitor``: one virtual dispatch method per abstract base
type that appears as a child-reference target, a pair of pre/post visit
hooks, and one ``visit`` override per concrete node type grouped by base.

Submodules
----------
schema
    Frozen dataclasses for ``Schema``, ``NodeType`` and ``Member``.

loader / header_grammar
    Build a ``Schema`` from an S-expression schema file (``sexpdata``)
    or from a C++ AST header (``parsimonious`` PEG grammar).

collect / grouping / naming
    The three analysis passes: base-type discovery, grouping of nodes
    by declared base, and dispatch-method name derivation.

codegen
    Declaration and definition emitters plus the
    ``generate_recursive_visitor`` façade.

writer
    Wraps emitted lines with the license banner, preamble and class
    declaration, and persists the artifact.

main
    CLI entry-point with subcommands ``header``, ``source``, ``bases``
    and ``groups``.

Usage
-----
Command-line::

    python -m astgen header ast.sexp -o recursive_ast_visitor.h
    python -m astgen header ast.h --schema-format header
    python -m astgen groups ast.sexp --format json

Programmatic::

    from astgen.loader import load_schema
    from astgen.codegen import generate_recursive_visitor

    schema = load_schema(text)
    generated = generate_recursive_visitor(schema)
    print("\\n".join(generated.lines))
"""

from __future__ import annotations

__version__: str = "0.1.0"
__all__: list[str] = [
    "__version__",
    "schema",
    "loader",
    "collect",
    "grouping",
    "naming",
    "codegen",
    "writer",
]
