"""
Orchestration Engine.

`ASTEngine` drives one conversion from source dialect text to Python text:

1.  **Parsing**: esprima -> ESTree -> `espy.core.nodes` tree. A parse failure
    aborts the conversion; nothing is emitted.
2.  **Rewriting**: Each configured `RuleRewriter` runs one full traversal, in
    configuration order.
3.  **Generation**: A single `PythonCodeGenerator` traversal annotates every
    node with text; the root's text is the result.
4.  **Verification** (optional): The generated code is parsed with LibCST.

`convert` raises on fatal errors. `run` wraps the same pipeline and reports
errors, untranslatable constructs and trace events in a `ConversionResult`.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import libcst as cst

from espy.config import RuntimeConfig
from espy.core.codegen import PythonCodeGenerator
from espy.core.conversion_result import ConversionResult
from espy.core.errors import EspyError, ParseError
from espy.core.nodes import Node, Program
from espy.core.parser import parse
from espy.core.rewriter import RuleRewriter
from espy.core.tracer import TraceLogger
from espy.core.traversal import traverse
from espy.rules import load_rule_set
from espy.utils.console import log_error, log_warning

logger = logging.getLogger(__name__)


class ASTEngine:
  """
  The main conversion unit.

  Rule tables are compiled once per engine; an engine can convert any number of
  sources sequentially. Each conversion records into a fresh `TraceLogger` held
  in ``tracer``, so engines share no mutable state.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None, rewriters: Optional[Sequence[RuleRewriter]] = None):
    """
    Initializes the Engine.

    Args:
        config: The runtime configuration. Defaults to `RuntimeConfig()`.
        rewriters: Explicit rewrite passes. When omitted they are built from
            ``config.rewrite_passes``.
    """
    self.config = config or RuntimeConfig()
    if rewriters is None:
      rewriters = [RuleRewriter(load_rule_set(name)) for name in self.config.rewrite_passes]
    self.rewriters: List[RuleRewriter] = list(rewriters)
    self.tracer = TraceLogger()

  def parse(self, code: str) -> Program:
    """
    Parses source text.

    Raises:
        ParseError: If the input is malformed.
    """
    return parse(code, source_type=self.config.source_type, allow_global_return=self.config.allow_global_return)

  def rewrite(self, tree: Node) -> Node:
    """
    Applies every rewrite pass in order, one traversal each.

    Args:
        tree: The parsed tree.

    Returns:
        Node: The rewritten tree.
    """
    for rewriter in self.rewriters:
      rewriter.tracer = self.tracer
      with self.tracer.phase(f"Rewrite: {rewriter.name}", f"{len(rewriter.rules)} rules"):
        rewriter.replacements = 0
        tree = traverse(tree, rewriter)
      logger.debug("Pass %s made %d replacements", rewriter.name, rewriter.replacements)
    return tree

  def generate(self, tree: Node) -> Tuple[str, List[str]]:
    """
    Runs the code generation pass.

    Args:
        tree: The tree to render.

    Returns:
        Tuple[str, List[str]]: The generated code and the untranslatable reasons.
    """
    tracer = self.tracer
    with tracer.phase("Generation", "Tree -> Python text"):
      generator = PythonCodeGenerator(indent_unit=self.config.indent_unit)
      tree = traverse(tree, generator)
      for reason in generator.untranslatable:
        tracer.log_untranslatable(reason)
    return tree.text, generator.untranslatable

  def convert(self, code: str) -> str:
    """
    Converts source text to Python text.

    Args:
        code: Source dialect program.

    Returns:
        str: The generated Python code (may contain sentinels).

    Raises:
        ParseError: If the source is malformed.
        UnboundWildcard: If a rule template references an unbound capture.
    """
    self.tracer = TraceLogger()
    text, _ = self._convert(code)
    return text

  def _convert(self, code: str) -> Tuple[str, List[str]]:
    with self.tracer.phase("Parse", "Source -> Tree"):
      tree = self.parse(code)
    return self.generate(self.rewrite(tree))

  def verify(self, code: str) -> Optional[str]:
    """
    Checks that generated code is syntactically valid Python.

    Returns:
        Optional[str]: An error message, or None if the code parses.
    """
    try:
      cst.parse_module(code)
    except cst.ParserSyntaxError as e:
      return f"Generated code is not valid Python: {e.message} (line {e.raw_line}, column {e.raw_column})"
    return None

  def run(self, code: str) -> ConversionResult:
    """
    Executes the full pipeline, reporting instead of raising.

    Args:
        code (str): The input source string.

    Returns:
        ConversionResult: Generated code, errors and trace events.
    """
    self.tracer = tracer = TraceLogger()
    with tracer.phase("Conversion Pipeline", ", ".join(r.name for r in self.rewriters)):
      result = self._run(code)

    for (rule_set, pattern), count in tracer.rule_hits().items():
      logger.debug("%s: %s matched %d time(s)", rule_set, pattern, count)
    result.trace_events = tracer.export()
    return result

  def _run(self, code: str) -> ConversionResult:
    try:
      text, untranslatable = self._convert(code)
    except ParseError as e:
      log_error(f"Parse error: {e}")
      return ConversionResult(errors=[f"Parse Error: {e}"], success=False)
    except EspyError as e:
      log_error(f"Rewrite error: {e}")
      return ConversionResult(errors=[f"Rewrite Error: {e}"], success=False)

    errors: List[str] = []
    if untranslatable:
      log_warning(f"{len(untranslatable)} untranslatable construct(s): {', '.join(dict.fromkeys(untranslatable))}")
      if self.config.strict_mode:
        errors.extend(f"Untranslatable: {reason}" for reason in untranslatable)

    if self.config.verify_output:
      problem = self.verify(text)
      if problem:
        errors.append(problem)

    return ConversionResult(code=text, errors=errors, success=not errors, untranslatable=untranslatable)
