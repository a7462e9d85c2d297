"""
Rule Table Schema.

Pydantic models validating rewrite rule tables loaded from JSON. A table is an
ordered list of ``from``/``to`` template pairs; order is significant because
the first matching rule wins.
"""

from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field


class RewriteRule(BaseModel):
  """
  One template pair.

  Example:
      {"from": "_1.plus(_2)", "to": "_1 + _2"}
  """

  model_config = ConfigDict(populate_by_name=True)

  source: str = Field(..., alias="from", description="Pattern matched against the tree.")
  target: str = Field(..., alias="to", description="Template instantiated with the captures.")
  description: Optional[str] = Field(None, description="Human-readable note on the rule.")


class RuleSet(BaseModel):
  """
  A named, ordered rule table.
  """

  name: str = Field(..., description="Identifier used in `rewrite_passes` (e.g. 'bignumber').")
  description: str = Field("", description="What the table rewrites.")
  rules: List[RewriteRule] = Field(default_factory=list, description="Rules in priority order.")

  @classmethod
  def from_pairs(cls, name: str, pairs: Sequence[Tuple[str, str]], description: str = "") -> "RuleSet":
    """
    Builds a table from plain ``(from, to)`` tuples.

    Args:
        name: Table name.
        pairs: Template pairs in priority order.
        description: Optional summary.

    Returns:
        RuleSet: The validated table.
    """
    rules = [RewriteRule(source=src, target=dst) for src, dst in pairs]
    return cls(name=name, description=description, rules=rules)

  def pairs(self) -> List[Tuple[str, str]]:
    return [(rule.source, rule.target) for rule in self.rules]
