"""
Tests for the AST Engine orchestration.

Verifies:
1. The parse -> rewrite -> generate pipeline with configured passes.
2. `run` reporting: parse errors, rule errors, strict mode, verification.
3. Phase tracing.
"""

import pytest

from espy.config import RuntimeConfig
from espy.core.conversion_result import ConversionResult
from espy.core.engine import ASTEngine
from espy.core.errors import ParseError, UnboundWildcard
from espy.core.rewriter import RuleRewriter
from espy.core.tracer import TraceEventType, get_tracer


def test_default_engine_applies_bignumber():
  engine = ASTEngine()
  assert [r.name for r in engine.rewriters] == ["bignumber"]
  assert engine.convert("var y = new BigN(x).plus(1);") == "y = x + 1"


def test_if_else_without_rewrites():
  engine = ASTEngine(rewriters=[])
  code = "if (a === 1) { return a; } else { return 0; }"
  assert engine.convert(code) == "if a == 1:\n  return a\nelse:\n  return 0"


def test_passes_run_in_order():
  first = RuleRewriter([("f(_1)", "g(_1)")], name="first")
  second = RuleRewriter([("g(_1)", "h(_1)")], name="second")
  assert ASTEngine(rewriters=[first, second]).convert("f(x)") == "h(x)"
  assert ASTEngine(rewriters=[second, first]).convert("f(x)") == "g(x)"


def test_configured_indent_unit():
  engine = ASTEngine(config=RuntimeConfig(indent_unit="    "), rewriters=[])
  assert engine.convert("while (a) { b(); }") == "while a:\n    b()"


def test_convert_raises_parse_error():
  with pytest.raises(ParseError):
    ASTEngine().convert("var = ;")


def test_convert_raises_unbound_wildcard():
  engine = ASTEngine(rewriters=[RuleRewriter([("f(_1)", "g(_2)")])])
  with pytest.raises(UnboundWildcard):
    engine.convert("f(x)")


def test_run_success():
  result = ASTEngine().run("total.plus(delta)")
  assert isinstance(result, ConversionResult)
  assert result.success
  assert result.code == "total + delta"
  assert not result.has_errors
  assert not result.is_partial


def test_run_reports_parse_error(captured_console):
  result = ASTEngine().run("function (")
  assert not result.success
  assert result.code == ""
  assert result.errors[0].startswith("Parse Error:")
  assert "Parse error" in captured_console.getvalue()


def test_run_reports_rule_error():
  engine = ASTEngine(rewriters=[RuleRewriter([("f(_1)", "g(_2)")])])
  result = engine.run("f(x)")
  assert not result.success
  assert "_2" in result.errors[0]


def test_run_partial_output_is_not_an_error(captured_console):
  result = ASTEngine().run("var t = typeof x;")
  assert result.success
  assert result.is_partial
  assert result.code == "t = ??x"
  assert result.untranslatable == ["unary operator 'typeof'"]
  assert "untranslatable" in captured_console.getvalue()


def test_strict_mode_fails_on_sentinels():
  engine = ASTEngine(config=RuntimeConfig(strict_mode=True))
  result = engine.run("var t = typeof x;")
  assert not result.success
  assert result.code == "t = ??x"
  assert result.errors == ["Untranslatable: unary operator 'typeof'"]


def test_verify_output_accepts_valid_python():
  engine = ASTEngine(config=RuntimeConfig(verify_output=True))
  result = engine.run("function f(a) { if (a) { return 1; } return 2; }")
  assert result.success


def test_verify_output_rejects_sentinels():
  engine = ASTEngine(config=RuntimeConfig(verify_output=True))
  result = engine.run("var t = typeof x;")
  assert not result.success
  assert "not valid Python" in result.errors[0]


def test_run_traces_phases():
  result = ASTEngine().run("a.plus(b)")
  starts = [e["description"] for e in result.trace_events if e["type"] == TraceEventType.PHASE_START]
  assert starts == ["Conversion Pipeline", "Parse", "Rewrite: bignumber", "Generation"]
  assert any(e["type"] == TraceEventType.RULE_MATCH for e in result.trace_events)


def test_run_traces_untranslatable():
  result = ASTEngine().run("x >>> 1")
  events = [e for e in result.trace_events if e["type"] == TraceEventType.UNTRANSLATABLE]
  assert [e["description"] for e in events] == ["binary operator '>>>'"]


def test_engine_is_reusable():
  engine = ASTEngine()
  assert engine.convert("a.plus(b)") == "a + b"
  assert engine.convert("a.minus(b)") == "a - b"


def test_repeated_convert_keeps_trace_bounded():
  engine = ASTEngine()
  engine.convert("a.plus(b)")
  first = len(engine.tracer.export())
  for _ in range(50):
    engine.convert("a.plus(b)")
  assert len(engine.tracer.export()) == first
  assert get_tracer().export() == []


def test_engines_keep_separate_traces():
  one, two = ASTEngine(), ASTEngine()
  one.run("a.plus(b)")
  two.convert("x")
  assert one.tracer is not two.tracer
  assert not any(e["type"] == TraceEventType.RULE_MATCH for e in two.tracer.export())
