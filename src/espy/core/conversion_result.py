"""
Outcome of `espy.core.engine.ASTEngine.run`.

A conversion can succeed, succeed partially (sentinels in the code, listed in
``untranslatable``) or fail (``errors`` populated, ``success`` False). Strict
mode promotes partial results to failures.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class ConversionResult(BaseModel):
  """
  Generated code plus diagnostics for one conversion.
  """

  code: str = Field(default="", description="Generated Python source; empty when parsing failed.")
  errors: List[str] = Field(default_factory=list, description="Fatal problems, one message each.")
  success: bool = Field(default=True, description="False when any error was reported.")
  untranslatable: List[str] = Field(
    default_factory=list, description="Reasons for every sentinel embedded in the generated code."
  )
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Exported trace log.")

  @property
  def has_errors(self) -> bool:
    return bool(self.errors)

  @property
  def is_partial(self) -> bool:
    """True if the output contains untranslatable sentinels."""
    return bool(self.untranslatable)
