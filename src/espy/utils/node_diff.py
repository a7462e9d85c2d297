"""
Node Serialization for Trace Diffs.

Rewrite passes run before any text exists, so trace events describe nodes as
compact S-expressions instead of target source, e.g.
``(BinaryExpression '+' (Identifier 'a') (Identifier 'b'))``.
"""

from typing import Optional, Tuple

from espy.core.nodes import Node


def describe_node(node: Optional[Node]) -> str:
  """
  Renders a node and its subtree as an S-expression.

  Args:
      node: The node to serialise (None renders as ``null``).

  Returns:
      str: The description.
  """
  if node is None:
    return "null"

  parts = [node.kind.value]
  for key in node.SCALARS:
    value = getattr(node, key)
    if value is not None and value is not False:
      parts.append(repr(value))
  for name in node.CHILDREN:
    value = getattr(node, name)
    if isinstance(value, list):
      parts.append("[" + " ".join(describe_node(item) for item in value) + "]")
    elif value is not None:
      parts.append(describe_node(value))
  return "(" + " ".join(parts) + ")"


def diff_nodes(original: Node, modified: Node) -> Tuple[str, str, bool]:
  """
  Compares two nodes and returns their descriptions.

  Args:
      original: The node before transformation.
      modified: The node after transformation.

  Returns:
      tuple: (before, after, has_changed)
  """
  before = describe_node(original)
  after = describe_node(modified)
  return before, after, before != after
