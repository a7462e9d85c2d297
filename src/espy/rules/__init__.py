"""
Rewrite Rule Tables.

Ordered ``from``/``to`` template pairs consumed by
`espy.core.rewriter.RuleRewriter`. Built-in tables:

- ``bignumber``: Fluent arbitrary-precision API (``a.plus(b)``) to operators.
- ``builtins``: Common runtime idioms (``console.log``, ``.length``, ``true``).
"""

from espy.rules.loader import available_rule_sets, is_known_rule_set, load_rule_set, resolve_rules_dir
from espy.rules.schema import RewriteRule, RuleSet

__all__ = [
  "RewriteRule",
  "RuleSet",
  "available_rule_sets",
  "is_known_rule_set",
  "load_rule_set",
  "resolve_rules_dir",
]
