"""
Structural Pattern Engine.

Rewrite rules are written as ordinary source dialect snippets in which
identifiers spelled ``_<n>`` (``_1``, ``_2``, ...) stand for "any subtree".
Templates are parsed once with the regular parser, after which those
identifiers are replaced by typed `Wildcard` nodes; matching and instantiation
never look at identifier spellings again.

Operations:

- `compile_pattern`: text -> `Pattern`.
- `match`: structural comparison of a pattern against a concrete subtree,
  producing a capture map (``Dict[int, Node]``) or None.
- `apply`: builds a fresh tree from a template pattern and a capture map.

Example:

.. code-block:: python

    rule_from = compile_pattern("_1.plus(_2)")
    rule_to = compile_pattern("_1 + _2")
    captures = match(rule_from, call_node)
    if captures is not None:
        replacement = apply(rule_to, captures)
"""

import copy
import dataclasses
import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional

from espy.core.errors import MalformedPattern, ParseError, UnboundWildcard
from espy.core.nodes import WILDCARD_PREFIX, ExpressionStatement, Identifier, Node, NodeKind, Wildcard
from espy.core.parser import parse

CaptureMap = Dict[int, Node]

_WILDCARD_NAME = re.compile(rf"^{WILDCARD_PREFIX}(\d+)$")


@dataclass(frozen=True)
class Pattern:
  """
  A compiled template.

  Attributes:
      source: The template text it was compiled from.
      root: Tree containing `Wildcard` leaves.
      captures: Capture names appearing in the tree.
  """

  source: str
  root: Node
  captures: FrozenSet[int]

  @classmethod
  def compile(cls, text: str) -> "Pattern":
    return compile_pattern(text)

  @property
  def kind(self) -> Optional[NodeKind]:
    """Root kind the pattern can match, or None for a bare wildcard."""
    if isinstance(self.root, Wildcard):
      return None
    return self.root.kind

  def match(self, candidate: Node) -> Optional[CaptureMap]:
    return match(self, candidate)

  def apply(self, captures: CaptureMap) -> Node:
    return apply(self, captures)


def compile_pattern(text: str) -> Pattern:
  """
  Parses template text into a `Pattern`.

  The template must contain exactly one statement. An expression statement
  contributes its expression, so ``"_1 + _2"`` compiles to a binary pattern.

  Args:
      text: Template source.

  Returns:
      Pattern: The compiled pattern.

  Raises:
      MalformedPattern: If the text does not parse to a single statement.
  """
  try:
    program = parse(text)
  except ParseError as e:
    raise MalformedPattern(f"Cannot compile pattern {text!r}: {e.message}", e.line, e.column) from e

  if len(program.body) != 1:
    raise MalformedPattern(f"Pattern {text!r} must contain exactly one statement, found {len(program.body)}")

  statement = program.body[0]
  root = statement.expression if isinstance(statement, ExpressionStatement) else statement

  names: List[int] = []
  root = _mark_wildcards(root, names)
  return Pattern(source=text, root=root, captures=frozenset(names))


def _mark_wildcards(node: Node, names: List[int]) -> Node:
  if isinstance(node, Identifier):
    found = _WILDCARD_NAME.match(node.name)
    if found:
      capture = int(found.group(1))
      names.append(capture)
      return Wildcard(capture=capture)
    return node

  changes = {}
  for name in node.CHILDREN:
    value = getattr(node, name)
    if isinstance(value, list):
      changes[name] = [None if item is None else _mark_wildcards(item, names) for item in value]
    elif value is not None:
      changes[name] = _mark_wildcards(value, names)
  return dataclasses.replace(node, **changes) if changes else node


def match(pattern: Pattern, candidate: Node) -> Optional[CaptureMap]:
  """
  Matches ``pattern`` against ``candidate``.

  Two non-wildcard nodes match when their kinds and match keys are equal and
  every child slot matches pairwise (lists must have equal length). A wildcard
  matches any subtree; if its capture name was already bound, the new subtree
  must be structurally equal to the bound one.

  Args:
      pattern: The compiled pattern.
      candidate: The subtree under inspection.

  Returns:
      Optional[CaptureMap]: Captures on success, None otherwise.
  """
  captures: CaptureMap = {}
  if _match_node(pattern.root, candidate, captures):
    return captures
  return None


def structurally_equal(left: Optional[Node], right: Optional[Node]) -> bool:
  """Compares two concrete subtrees, ignoring ``text`` annotations and literal spelling."""
  return _match_node(left, right, {})


def _match_node(pattern: Optional[Node], candidate: Optional[Node], captures: CaptureMap) -> bool:
  if isinstance(pattern, Wildcard):
    if candidate is None:
      return False
    bound = captures.get(pattern.capture)
    if bound is None:
      captures[pattern.capture] = candidate
      return True
    return _match_node(bound, candidate, {})

  if pattern is None or candidate is None:
    return pattern is candidate

  if pattern.kind is not candidate.kind:
    return False

  for key in pattern.match_keys():
    expected = getattr(pattern, key)
    actual = getattr(candidate, key)
    # bool is an int subclass; `true` must not match `1`
    if isinstance(expected, bool) is not isinstance(actual, bool) or expected != actual:
      return False

  for name in pattern.CHILDREN:
    expected = getattr(pattern, name)
    actual = getattr(candidate, name)
    if isinstance(expected, list):
      if not isinstance(actual, list) or len(expected) != len(actual):
        return False
      if not all(_match_node(e, a, captures) for e, a in zip(expected, actual)):
        return False
    elif not _match_node(expected, actual, captures):
      return False

  return True


def apply(pattern: Pattern, captures: CaptureMap) -> Node:
  """
  Instantiates ``pattern`` with ``captures``.

  The result is a fresh tree: template nodes are rebuilt and each captured
  subtree is deep-copied, so the capture's original position stays valid.

  Args:
      pattern: Replacement template.
      captures: Bindings produced by `match`.

  Returns:
      Node: The instantiated tree.

  Raises:
      UnboundWildcard: If the template uses a capture absent from ``captures``.
  """
  return _instantiate(pattern.root, captures)


def _instantiate(node: Node, captures: CaptureMap) -> Node:
  if isinstance(node, Wildcard):
    if node.capture not in captures:
      raise UnboundWildcard(node.capture)
    return copy.deepcopy(captures[node.capture])

  changes = {}
  for name in node.CHILDREN:
    value = getattr(node, name)
    if isinstance(value, list):
      changes[name] = [None if item is None else _instantiate(item, captures) for item in value]
    elif value is not None:
      changes[name] = _instantiate(value, captures)
  return dataclasses.replace(node, text=None, **changes)
