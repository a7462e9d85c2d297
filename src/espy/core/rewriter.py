"""
Rule-Driven Rewrite Pass.

`RuleRewriter` is a traversal client that replaces subtrees matching a rule
table. Rules are compiled once at construction. On ``leave`` of each node the
rules whose source pattern can match that node kind are tried in table order;
the first hit wins and its instantiated target becomes the replacement.
"""

import logging
from typing import List, Optional, Sequence, Tuple, Union

from espy.core.nodes import Node
from espy.core.pattern import Pattern, apply, compile_pattern, match
from espy.core.tracer import TraceLogger, get_tracer
from espy.core.traversal import Visitor
from espy.rules.schema import RuleSet
from espy.utils.node_diff import diff_nodes

logger = logging.getLogger(__name__)

CompiledRule = Tuple[Pattern, Pattern]


class RuleRewriter(Visitor):
  """
  Rewrites a tree according to an ordered rule table.

  Attributes:
      name: Label used in traces and logs.
      rules: Compiled ``(from, to)`` pattern pairs in priority order.
      replacements: Number of replacements made by the most recent pass.
      tracer: Trace log for matches; the process-wide log when unset.
  """

  def __init__(self, rules: Union[RuleSet, Sequence[Tuple[str, str]]], name: Optional[str] = None):
    """
    Compiles the rule table.

    Args:
        rules: A validated `RuleSet` or plain ``(from, to)`` template pairs.
        name: Label for traces; defaults to the rule set name.

    Raises:
        MalformedPattern: If any template fails to compile.
    """
    if isinstance(rules, RuleSet):
      pairs = rules.pairs()
      self.name = name or rules.name
    else:
      pairs = list(rules)
      self.name = name or "rules"

    self.rules: List[CompiledRule] = [(compile_pattern(src), compile_pattern(dst)) for src, dst in pairs]
    self.replacements = 0
    self.tracer: Optional[TraceLogger] = None

  def leave(self, node: Node) -> Optional[Node]:
    for source, target in self.rules:
      if source.kind is not None and source.kind is not node.kind:
        continue
      captures = match(source, node)
      if captures is None:
        continue

      replacement = apply(target, captures)
      self.replacements += 1

      tracer = self.tracer or get_tracer()
      tracer.log_match(self.name, source.source, target.source)
      before, after, _ = diff_nodes(node, replacement)
      tracer.log_mutation(node.kind.value, before, after)
      logger.debug("%s: %s -> %s", self.name, source.source, target.source)
      return replacement
    return None
