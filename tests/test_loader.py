# tests/test_loader.py
"""
Tests for the S-expression schema loader and file dispatch.
"""

from pathlib import Path

import pytest
from sexpdata import Symbol

from astgen.errors import SchemaError, SchemaSyntaxError
from astgen.loader import load_schema, load_schema_file, read_sexp
from astgen.schema import Member, MemberKind, NodeType
from tests.conftest import BINARY_NODES, BINARY_SEXP, MIXED_SEXP, AST_HEADER


class TestLoadSchema:

    def test_binary_scenario(self):
        schema = load_schema(BINARY_SEXP)
        assert schema.nodes == BINARY_NODES

    def test_empty_schema(self):
        assert len(load_schema("(schema)")) == 0

    def test_base_is_optional(self):
        schema = load_schema("(schema (node ExpressionAST))")
        assert schema.nodes == (NodeType("ExpressionAST"),)

    def test_member_kinds(self):
        schema = load_schema(MIXED_SEXP)
        binary = schema.get("BinaryExpressionAST")
        assert [m.kind for m in binary.members] == [
            MemberKind.NODE, MemberKind.TOKEN, MemberKind.NODE, MemberKind.ATTRIBUTE,
        ]
        assert binary.members[1] == Member(MemberKind.TOKEN, "SourceLocation", "opLoc")
        assert binary.members[3].type == "TokenKind"

    def test_node_list(self):
        call = load_schema(MIXED_SEXP).get("CallExpressionAST")
        assert call.members[1] == Member(MemberKind.NODE_LIST, "ExpressionAST", "expressionList")

    def test_schema_order_preserved(self):
        assert load_schema(MIXED_SEXP).names() == (
            "TranslationUnitAST", "BinaryExpressionAST", "CallExpressionAST",
        )

    def test_source_recorded(self):
        assert load_schema(BINARY_SEXP, source="ast.sexp").source == "ast.sexp"

    def test_base_may_follow_members(self):
        schema = load_schema("(schema (node XAST (node y YAST) :base BaseAST))")
        assert schema.nodes[0].base == "BaseAST"


class TestReadSexp:

    def test_symbols_and_lists(self):
        assert read_sexp("(a (b c) ())") == ["a", ["b", "c"], []]

    def test_symbol_type(self):
        assert isinstance(read_sexp("node-list"), Symbol)

    def test_strings_are_not_symbols(self):
        value = read_sexp('"const Identifier*"')
        assert value == "const Identifier*"
        assert not isinstance(value, Symbol)

    def test_comments_skipped(self):
        assert read_sexp(";; head\n(a ; trailing\n b)") == ["a", "b"]

    def test_trailing_garbage(self):
        with pytest.raises(SchemaSyntaxError):
            read_sexp("(a) (b)")

    def test_error_span(self):
        with pytest.raises(SchemaSyntaxError) as info:
            read_sexp("(a\n  b", source="x.sexp")
        assert info.value.span.file == "x.sexp"


class TestLoadSchemaErrors:

    def test_unbalanced(self):
        with pytest.raises(SchemaSyntaxError):
            load_schema("(schema (node XAST)")

    def test_wrong_head(self):
        with pytest.raises(SchemaError, match="schema"):
            load_schema("(nodes (node XAST))")

    def test_unknown_member_kind(self):
        with pytest.raises(SchemaError) as info:
            load_schema("(schema (node XAST (child y YAST)))")
        assert info.value.code == "AGEN-1002"

    def test_reference_needs_type(self):
        with pytest.raises(SchemaError, match="needs a type"):
            load_schema("(schema (node XAST (node y)))")

    def test_dangling_base(self):
        with pytest.raises(SchemaError, match=":base"):
            load_schema("(schema (node XAST :base))")

    def test_string_name_rejected(self):
        with pytest.raises(SchemaError):
            load_schema('(schema (node "XAST"))')


class TestLoadSchemaFile:

    def test_sexp_by_extension(self, tmp_path):
        path = tmp_path / "ast.sexp"
        path.write_text(BINARY_SEXP, encoding="utf-8")
        schema = load_schema_file(path)
        assert schema.nodes == BINARY_NODES
        assert schema.source == str(path)

    def test_header_by_extension(self, tmp_path):
        path = tmp_path / "ast.h"
        path.write_text(AST_HEADER, encoding="utf-8")
        assert load_schema_file(path).names() == ("BinaryExpressionAST", "CallExpressionAST")

    def test_explicit_format(self, tmp_path):
        path = tmp_path / "ast.txt"
        path.write_text(AST_HEADER, encoding="utf-8")
        assert len(load_schema_file(path, "header")) == 2

    def test_unknown_format(self, tmp_path):
        with pytest.raises(SchemaError):
            load_schema_file(tmp_path / "ast.sexp", "json")

    def test_missing_file(self, tmp_path):
        with pytest.raises(SchemaError, match="cannot read"):
            load_schema_file(tmp_path / "missing.sexp")


class TestExampleSchema:

    def test_quoted_attribute_type(self):
        schema = load_schema('(schema (node NameIdAST (attribute identifier "const Identifier*")))')
        assert schema.nodes[0].members[0].type == "const Identifier*"

    def test_quoted_reference_type_rejected(self):
        with pytest.raises(SchemaError):
            load_schema('(schema (node XAST (node y "YAST")))')

    def test_bundled_example_loads(self):
        path = Path(__file__).resolve().parent.parent / "examples" / "cxx_ast.sexp"
        schema = load_schema_file(path)
        assert "CallExpressionAST" in schema.names()
        assert schema.get("NameIdAST").base == "UnqualifiedIdAST"
