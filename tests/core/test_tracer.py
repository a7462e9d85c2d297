"""
Tests for the Tracing System.
"""

import pytest

from espy.core.tracer import TraceEventType, TraceLogger, get_tracer, reset_tracer


def test_phase_nesting():
  logger = TraceLogger()

  p1 = logger.start_phase("Parent")
  logger.start_phase("Child")
  logger.end_phase()  # End Child
  logger.end_phase()  # End Parent

  events = logger.export()

  # 4 events: Start P, Start C, End C, End P
  assert len(events) == 4
  assert events[0]["type"] == TraceEventType.PHASE_START
  assert events[1]["parent_id"] == p1
  assert events[2]["type"] == TraceEventType.PHASE_END
  assert events[3]["parent_id"] == p1


def test_end_phase_without_start_is_ignored():
  logger = TraceLogger()
  logger.end_phase()
  assert logger.export() == []


def test_log_match_metadata():
  logger = TraceLogger()
  phase = logger.start_phase("Rewrite: bignumber")
  logger.log_match("bignumber", "_1.plus(_2)", "_1 + _2")

  event = logger.export()[-1]
  assert event["type"] == TraceEventType.RULE_MATCH
  assert event["parent_id"] == phase
  assert event["metadata"]["from"] == "_1.plus(_2)"
  assert event["metadata"]["rule_set"] == "bignumber"


def test_log_mutation_and_untranslatable():
  logger = TraceLogger()
  logger.log_mutation("CallExpression", "(CallExpression ...)", "(BinaryExpression ...)")
  logger.log_untranslatable("unary operator 'typeof'")

  mutation, missing = logger.export()
  assert mutation["metadata"] == {"before": "(CallExpression ...)", "after": "(BinaryExpression ...)"}
  assert missing["type"] == TraceEventType.UNTRANSLATABLE
  assert missing["description"] == "unary operator 'typeof'"


def test_reset_replaces_global_tracer():
  tracer = get_tracer()
  tracer.log_untranslatable("x")
  reset_tracer()
  assert get_tracer() is not tracer
  assert get_tracer().export() == []


def test_phase_context_closes_on_error():
  logger = TraceLogger()
  with pytest.raises(ValueError):
    with logger.phase("Parse") as phase_id:
      raise ValueError("boom")

  assert logger.current_phase is None
  assert logger.export()[-1]["parent_id"] == phase_id


def test_rule_hits_summary():
  logger = TraceLogger()
  logger.log_match("bignumber", "_1.plus(_2)", "_1 + _2")
  logger.log_match("bignumber", "_1.plus(_2)", "_1 + _2")
  logger.log_match("builtins", "true", "True")
  assert logger.rule_hits() == {("bignumber", "_1.plus(_2)"): 2, ("builtins", "true"): 1}
