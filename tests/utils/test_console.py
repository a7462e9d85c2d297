"""
Tests for Console and logging redirection.
"""

import io
import logging

from rich.console import Console
from rich.logging import RichHandler

from espy.utils.console import LOGGER_NAME, console, get_console, log_error, log_warning, reset_console, set_console


def test_set_console_redirects_logging():
  buf = io.StringIO()
  custom = Console(file=buf, width=120)
  set_console(custom)
  try:
    assert get_console() is custom
    log_warning("careful")
    log_error("broken [x]")
    logging.getLogger("espy.core.engine").info("plain info")
    output = buf.getvalue()
    assert "careful" in output
    assert "broken [x]" in output
    assert "plain info" in output
  finally:
    reset_console()


def test_debug_is_hidden_by_default(captured_console):
  logging.getLogger("espy.core.rewriter").debug("noisy detail")
  assert "noisy detail" not in captured_console.getvalue()


def test_proxy_forwards_print(captured_console):
  console.print("hello proxy")
  assert "hello proxy" in captured_console.getvalue()


def test_single_handler_after_swaps():
  set_console(Console(file=io.StringIO()))
  set_console(Console(file=io.StringIO()))
  reset_console()
  logger = logging.getLogger(LOGGER_NAME)
  handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
  assert handlers == [console.handler]


def test_root_logger_is_untouched():
  root_rich = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
  assert root_rich == []
