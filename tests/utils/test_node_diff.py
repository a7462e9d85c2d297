"""
Tests for Node Diff Utility.
"""

from espy.core.nodes import BinaryExpression, Identifier, Literal
from espy.core.parser import parse
from espy.utils.node_diff import describe_node, diff_nodes


def test_describe_binary():
  node = BinaryExpression("+", Identifier("a"), Literal(1, "1"))
  assert describe_node(node) == "(BinaryExpression '+' (Identifier 'a') (Literal 1 '1'))"


def test_describe_lists_and_none():
  call = parse("f(a, b)").body[0].expression
  assert describe_node(call) == "(CallExpression (Identifier 'f') [(Identifier 'a') (Identifier 'b')])"
  assert describe_node(None) == "null"


def test_diff_nodes_detection():
  before, after, changed = diff_nodes(Identifier("foo"), Identifier("bar"))
  assert changed is True
  assert before == "(Identifier 'foo')"
  assert after == "(Identifier 'bar')"


def test_diff_nodes_no_change():
  _, _, changed = diff_nodes(Identifier("foo"), Identifier("foo"))
  assert changed is False
