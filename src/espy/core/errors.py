"""
Error Types.

Fatal conditions raised by the transpiler core. Untranslatable constructs are
not errors: the code generator emits a sentinel and records a reason instead.
"""

from typing import Optional


class EspyError(Exception):
  """Base class for all transpiler errors."""


class ParseError(EspyError):
  """
  Raised when source text cannot be parsed.

  Attributes:
      line: 1-based line of the failure, when known.
      column: 1-based column of the failure, when known.
  """

  def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
    self.line = line
    self.column = column
    location = f" (line {line}, column {column})" if line is not None else ""
    super().__init__(f"{message}{location}")
    self.message = message


class MalformedPattern(ParseError):
  """Raised when a rewrite template does not parse to a single statement."""


class UnboundWildcard(EspyError):
  """Raised when a replacement template references a capture that was never bound."""

  def __init__(self, capture: int):
    self.capture = capture
    super().__init__(f"Wildcard _{capture} has no bound capture")
