"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Tracer isolation between tests.
- An in-memory rich console for asserting on log output.
"""

import io
import sys
from pathlib import Path

import pytest
from rich.console import Console

# Add src to path so we can import 'espy' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from espy.core.tracer import reset_tracer
from espy.utils.console import reset_console, set_console


@pytest.fixture(autouse=True)
def fresh_tracer():
  """Each test starts with an empty trace log."""
  reset_tracer()
  yield
  reset_tracer()


@pytest.fixture
def captured_console():
  """
  Redirects logging output to a string buffer.

  Yields:
      io.StringIO: The buffer receiving rendered log lines.
  """
  buf = io.StringIO()
  set_console(Console(file=buf, width=200, force_terminal=False))
  yield buf
  reset_console()
