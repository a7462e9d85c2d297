"""
Traversal Engine.

Walks a tree depth-first in each node's ``CHILDREN`` order and drives a
`Visitor`'s per-kind hooks:

1.  ``enter_<Kind>(node)`` runs before the node's children are visited.
2.  Every child slot is visited in order.
3.  ``leave_<Kind>(node)`` runs after all children are finalised. A non-None
    return value replaces the node in its parent's slot. The replacement is
    not traversed again.

Replacement is copy-on-write: when a child slot changes, the parent is rebuilt
with `dataclasses.replace` before its own ``leave`` hook runs, so the tree handed
to a rewrite pass is never mutated by it.
"""

import dataclasses
from typing import ClassVar, Dict, Optional, Tuple

from espy.core.nodes import Node, NodeKind

_HOOK_PREFIXES = ("enter_", "leave_")


def _collect_hooks(cls: type) -> Tuple[Dict[NodeKind, str], Dict[NodeKind, str]]:
  enter: Dict[NodeKind, str] = {}
  leave: Dict[NodeKind, str] = {}
  for attr in dir(cls):
    for prefix, table in zip(_HOOK_PREFIXES, (enter, leave)):
      if not attr.startswith(prefix):
        continue
      suffix = attr[len(prefix) :]
      try:
        kind = NodeKind(suffix)
      except ValueError:
        raise TypeError(f"{cls.__name__}.{attr} does not name a node kind") from None
      table[kind] = attr
  return enter, leave


class Visitor:
  """
  Base class for traversal clients.

  Subclasses define any subset of ``enter_<Kind>`` / ``leave_<Kind>`` methods,
  where ``<Kind>`` is a `NodeKind` value (e.g. ``leave_CallExpression``). Hook
  names are checked when the subclass is created; a misspelt kind raises
  ``TypeError`` instead of silently never firing.

  A pass either annotates (``leave`` hooks set ``node.text`` and return None)
  or rewrites (``leave`` hooks return replacement nodes), never both.
  """

  _enter_hooks: ClassVar[Dict[NodeKind, str]] = {}
  _leave_hooks: ClassVar[Dict[NodeKind, str]] = {}

  def __init_subclass__(cls, **kwargs) -> None:
    super().__init_subclass__(**kwargs)
    cls._enter_hooks, cls._leave_hooks = _collect_hooks(cls)

  def enter(self, node: Node) -> None:
    hook = self._enter_hooks.get(node.kind)
    if hook is not None:
      getattr(self, hook)(node)

  def leave(self, node: Node) -> Optional[Node]:
    hook = self._leave_hooks.get(node.kind)
    if hook is None:
      return None
    return getattr(self, hook)(node)


def traverse(root: Node, visitor: Visitor) -> Node:
  """
  Runs one full pass of ``visitor`` over ``root``.

  Args:
      root: The tree to walk.
      visitor: The hook provider.

  Returns:
      Node: The root after the pass; a different object if the root itself,
      or anything beneath it, was replaced.
  """
  return _visit(root, visitor)


def _visit(node: Node, visitor: Visitor) -> Node:
  visitor.enter(node)

  changes = {}
  for name in node.CHILDREN:
    value = getattr(node, name)
    if isinstance(value, list):
      visited = [None if item is None else _visit(item, visitor) for item in value]
      if any(new is not old for new, old in zip(visited, value)):
        changes[name] = visited
    elif value is not None:
      visited_child = _visit(value, visitor)
      if visited_child is not value:
        changes[name] = visited_child

  if changes:
    node = dataclasses.replace(node, **changes)

  replacement = visitor.leave(node)
  if replacement is None:
    return node
  if not isinstance(replacement, Node):
    raise TypeError(f"leave hook for {node.kind.value} returned {type(replacement).__name__}, expected a Node")
  return replacement
