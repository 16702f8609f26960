# tests/conftest.py
"""
Shared schemas and fixtures for the astgen test-suite.
"""

import pytest

from astgen.schema import Member, MemberKind, NodeType, Schema


def node(name, base=None, *members):
    return NodeType(name=name, base=base, members=tuple(members))


def ref(name, type_):
    return Member(MemberKind.NODE, type_, name)


def refs(name, type_):
    return Member(MemberKind.NODE_LIST, type_, name)


def tok(name):
    return Member(MemberKind.TOKEN, "SourceLocation", name)


def attr(name, type_):
    return Member(MemberKind.ATTRIBUTE, type_, name)


# ═══════════════════════════════════════════════════════════════════
#  In-memory schemas
# ═══════════════════════════════════════════════════════════════════

#: The two-node scenario: one abstract base, one concrete node.
BINARY_NODES = (
    node("ExpressionAST"),
    node("BinaryExpressionAST", "ExpressionAST", ref("leftExpression", "ExpressionAST")),
)

#: A larger schema with interleaved bases, lists, tokens and attributes.
MIXED_NODES = (
    node(
        "TranslationUnitAST", "UnitAST",
        refs("declarationList", "DeclarationAST"),
    ),
    node(
        "SimpleDeclarationAST", "DeclarationAST",
        refs("attributeList", "AttributeSpecifierAST"),
        refs("declSpecifierList", "SpecifierAST"),
        tok("semicolonLoc"),
    ),
    node(
        "BinaryExpressionAST", "ExpressionAST",
        ref("leftExpression", "ExpressionAST"),
        tok("opLoc"),
        ref("rightExpression", "ExpressionAST"),
        attr("op", "TokenKind"),
    ),
    node(
        "ReturnStatementAST", "StatementAST",
        tok("returnLoc"),
        ref("expression", "ExpressionAST"),
    ),
    node(
        "CallExpressionAST", "ExpressionAST",
        ref("baseExpression", "ExpressionAST"),
        refs("expressionList", "ExpressionAST"),
    ),
    node("NamedTypeSpecifierAST", "SpecifierAST", ref("unqualifiedId", "UnqualifiedIdAST")),
    node("NameIdAST", "UnqualifiedIdAST", attr("identifier", "const Identifier*")),
    node("IdExpressionAST", "ExpressionAST", ref("unqualifiedId", "UnqualifiedIdAST")),
)

#: Base types of MIXED_NODES in first-seen order.
MIXED_BASE_TYPES = (
    "DeclarationAST",
    "AttributeSpecifierAST",
    "SpecifierAST",
    "ExpressionAST",
    "UnqualifiedIdAST",
)

#: Groups of MIXED_NODES in first-appearance order.
MIXED_GROUPS = {
    "UnitAST": ["TranslationUnitAST"],
    "DeclarationAST": ["SimpleDeclarationAST"],
    "ExpressionAST": ["BinaryExpressionAST", "CallExpressionAST", "IdExpressionAST"],
    "StatementAST": ["ReturnStatementAST"],
    "SpecifierAST": ["NamedTypeSpecifierAST"],
    "UnqualifiedIdAST": ["NameIdAST"],
}


# ═══════════════════════════════════════════════════════════════════
#  Schema sources
# ═══════════════════════════════════════════════════════════════════

BINARY_SEXP = '''
(schema
  (node ExpressionAST)
  (node BinaryExpressionAST :base ExpressionAST
    (node leftExpression ExpressionAST)))
'''

MIXED_SEXP = '''
;; a slice of a C++ AST
(schema
  (node TranslationUnitAST :base UnitAST
    (node-list declarationList DeclarationAST))
  (node BinaryExpressionAST :base ExpressionAST
    (node leftExpression ExpressionAST)
    (token opLoc)
    (node rightExpression ExpressionAST)
    (attribute op TokenKind))
  (node CallExpressionAST :base ExpressionAST
    (node baseExpression ExpressionAST)
    (node-list expressionList ExpressionAST)))
'''

AST_HEADER = '''\
// Copyright (c) 2023
#pragma once

#include <cxx/ast_fwd.h>
#include <cxx/source_location.h>

namespace cxx {

template <typename T>
class List final : public Managed {
 public:
  T value;
  List* next;

  explicit List(const T& value, List* next = nullptr)
      : value(value), next(next) {}
};

enum class ASTKind {
  BinaryExpression,
  CallExpression,
};

class AST : public Managed {
 public:
  explicit AST(ASTKind kind) : kind_(kind) {}
  virtual ~AST();

  virtual void accept(ASTVisitor* visitor) = 0;

 private:
  ASTKind kind_;
};

class ExpressionAST : public AST {
 public:
  using AST::AST;
};

class AttributeSpecifierAST;

/* binary expressions */
class BinaryExpressionAST final : public ExpressionAST {
 public:
  static constexpr ASTKind Kind = ASTKind::BinaryExpression;

  BinaryExpressionAST() : ExpressionAST(Kind) {}

  ExpressionAST* leftExpression = nullptr;
  SourceLocation opLoc;
  ExpressionAST* rightExpression = nullptr;
  TokenKind op = TokenKind::T_EOF_SYMBOL;

  void accept(ASTVisitor* visitor) override { visitor->visit(this); }

  auto firstSourceLocation() -> SourceLocation override;
  auto lastSourceLocation() -> SourceLocation override;
};

class CallExpressionAST final : public ExpressionAST {
 public:
  static constexpr ASTKind Kind = ASTKind::CallExpression;

  CallExpressionAST() : ExpressionAST(Kind) {}

  ExpressionAST* baseExpression = nullptr;
  SourceLocation lparenLoc;
  List<ExpressionAST*>* expressionList = nullptr;
  List<AttributeSpecifierAST*>* attributeList = nullptr;
  const Identifier* identifier = nullptr;
  bool isPack = false;

  void accept(ASTVisitor* visitor) override { visitor->visit(this); }
};

}  // namespace cxx
'''


@pytest.fixture
def binary_schema():
    return Schema.of(BINARY_NODES)


@pytest.fixture
def mixed_schema():
    return Schema.of(MIXED_NODES)


@pytest.fixture
def empty_schema():
    return Schema.of(())
