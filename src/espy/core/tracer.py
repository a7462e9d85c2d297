"""
Conversion Trace Log.

A flat, append-only list of events describing one conversion:

- ``phase_start`` / ``phase_end``: pipeline stages (parse, each rewrite pass,
  generation). Phases nest; every event records the enclosing phase as
  ``parent_id``.
- ``rule_match``: a rewrite rule fired.
- ``ast_mutation``: a subtree was replaced (S-expression before and after).
- ``untranslatable``: the generator emitted a sentinel.

`export` returns plain dictionaries, ready for JSON.
"""

import time
import uuid
from collections import Counter
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  RULE_MATCH = "rule_match"
  AST_MUTATION = "ast_mutation"
  UNTRANSLATABLE = "untranslatable"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  timestamp: float
  description: str
  parent_id: Optional[str] = None
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Collects events for a single conversion.

  The engine opens phases around each stage; rewrite passes and the generator
  log into whichever phase is current.
  """

  def __init__(self):
    self._events: List[TraceEvent] = []
    self._open: List[str] = []

  @property
  def current_phase(self) -> Optional[str]:
    return self._open[-1] if self._open else None

  def _record(self, kind: TraceEventType, description: str, parent: Optional[str], **metadata: Any) -> str:
    event_id = uuid.uuid4().hex
    self._events.append(TraceEvent(event_id, kind, time.time(), description, parent, metadata))
    return event_id

  def start_phase(self, name: str, description: str = "") -> str:
    """
    Opens a phase nested in the current one.

    Returns:
        str: The phase id, used as ``parent_id`` by events inside it.
    """
    phase_id = self._record(TraceEventType.PHASE_START, name, self.current_phase, detail=description)
    self._open.append(phase_id)
    return phase_id

  def end_phase(self) -> None:
    """Closes the innermost phase. A no-op when none is open."""
    if self._open:
      self._record(TraceEventType.PHASE_END, "End Phase", self._open.pop())

  @contextmanager
  def phase(self, name: str, description: str = "") -> Iterator[str]:
    """Context manager form of `start_phase`/`end_phase`; closes on error too."""
    phase_id = self.start_phase(name, description)
    try:
      yield phase_id
    finally:
      self.end_phase()

  def log_match(self, rule_set: str, source_pattern: str, target_pattern: str) -> None:
    self._record(
      TraceEventType.RULE_MATCH,
      f"Rule {source_pattern} -> {target_pattern}",
      self.current_phase,
      rule_set=rule_set,
      **{"from": source_pattern, "to": target_pattern},
    )

  def log_mutation(self, node_kind: str, before: str, after: str) -> None:
    self._record(TraceEventType.AST_MUTATION, f"Replaced {node_kind}", self.current_phase, before=before, after=after)

  def log_untranslatable(self, reason: str) -> None:
    self._record(TraceEventType.UNTRANSLATABLE, reason, self.current_phase, level="warning")

  def rule_hits(self) -> Dict[Tuple[str, str], int]:
    """
    Counts rule matches.

    Returns:
        Dict[Tuple[str, str], int]: ``(rule_set, from_pattern)`` -> number of hits.
    """
    hits: Counter = Counter()
    for event in self._events:
      if event.type is TraceEventType.RULE_MATCH:
        hits[(event.metadata["rule_set"], event.metadata["from"])] += 1
    return dict(hits)

  def export(self) -> List[Dict[str, Any]]:
    return [asdict(e) for e in self._events]


_GLOBAL_TRACER = TraceLogger()


def get_tracer() -> TraceLogger:
  return _GLOBAL_TRACER


def reset_tracer() -> None:
  global _GLOBAL_TRACER
  _GLOBAL_TRACER = TraceLogger()
