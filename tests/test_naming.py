# tests/test_naming.py
"""
Tests for dispatch method name derivation.
"""

import pytest

from astgen.errors import NamingError
from astgen.naming import dispatch_method_name, strip_suffix


class TestDispatchMethodName:

    @pytest.mark.parametrize("identifier, expected", [
        ("ExpressionAST", "acceptExpression"),
        ("StatementAST", "acceptStatement"),
        ("UnqualifiedIdAST", "acceptUnqualifiedId"),
        ("nestedNameSpecifierAST", "acceptNestedNameSpecifier"),
        ("XAST", "acceptX"),
    ])
    def test_default_rule(self, identifier, expected):
        assert dispatch_method_name(identifier) == expected

    def test_custom_prefix(self):
        assert dispatch_method_name("ExpressionAST", prefix="traverse") == "traverseExpression"

    def test_custom_suffix(self):
        assert dispatch_method_name("ExpressionNode", suffix="Node") == "acceptExpression"

    def test_empty_suffix_keeps_identifier(self):
        assert dispatch_method_name("Expression", suffix="") == "acceptExpression"


class TestSuffixPrecondition:

    def test_missing_suffix_strict(self):
        with pytest.raises(NamingError) as info:
            dispatch_method_name("Expression")
        assert info.value.identifier == "Expression"
        assert info.value.code == "AGEN-3000"

    def test_suffix_only_strict(self):
        with pytest.raises(NamingError):
            dispatch_method_name("AST")

    def test_missing_suffix_lenient_keeps_identifier(self):
        # never silently truncates the last three characters
        assert dispatch_method_name("Expression", strict=False) == "acceptExpression"

    def test_empty_identifier(self):
        with pytest.raises(NamingError):
            dispatch_method_name("", strict=False)

    def test_strip_suffix(self):
        assert strip_suffix("StatementAST") == "Statement"
        assert strip_suffix("Statement", strict=False) == "Statement"
