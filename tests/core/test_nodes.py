"""
Tests for the Node Model.
"""

import pytest

from espy.core.nodes import (
  BinaryExpression,
  CallExpression,
  Identifier,
  Literal,
  MemberExpression,
  NodeKind,
  node_class,
  registered_kinds,
)


def test_every_kind_is_registered():
  assert set(registered_kinds()) == set(NodeKind)


@pytest.mark.parametrize("kind", list(NodeKind))
def test_registered_class_reports_its_kind(kind):
  assert node_class(kind).kind is kind


def test_children_follow_slot_order():
  call = CallExpression(
    callee=Identifier("f"),
    arguments=[Literal(1, "1"), Identifier("x")],
  )
  kinds = [c.kind for c in call.children()]
  assert kinds == [NodeKind.IDENTIFIER, NodeKind.LITERAL, NodeKind.IDENTIFIER]


def test_children_skip_empty_slots():
  from espy.core.nodes import ArrayExpression

  arr = ArrayExpression(elements=[Identifier("a"), None, Identifier("b")])
  assert [c.name for c in arr.children()] == ["a", "b"]


def test_text_is_ignored_by_equality():
  a = Identifier("x", text="x")
  b = Identifier("x")
  assert a == b


def test_literal_matches_on_value_only():
  assert Literal.match_keys() == ("value",)
  assert BinaryExpression.match_keys() == ("operator",)
  assert MemberExpression.match_keys() == ("computed",)
