"""
Logging and Console Output.

All diagnostics go through the ``espy`` logger hierarchy (modules call
``logging.getLogger(__name__)``). A single `rich.logging.RichHandler` is bound
to that logger and renders onto a swappable console:

.. code-block:: python

    buf = io.StringIO()
    set_console(Console(file=buf))   # embedders, tests
    ...
    reset_console()                  # back to stdout

Modules that print directly import the stable `console` proxy, which always
forwards to the currently installed backend.
"""

import logging
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

LOGGER_NAME = "espy"

_THEME = Theme(
  {
    "logging.level.warning": "yellow",
    "logging.level.error": "bold red",
    "sentinel": "bold magenta",
  }
)


def _new_backend() -> Console:
  return Console(theme=_THEME, stderr=True)


def _bind_handler(backend: Console) -> RichHandler:
  """
  Replaces the package logger's rich handler with one writing to ``backend``.

  Args:
      backend: Destination console.

  Returns:
      RichHandler: The installed handler.
  """
  logger = logging.getLogger(LOGGER_NAME)
  for handler in [h for h in logger.handlers if isinstance(h, RichHandler)]:
    logger.removeHandler(handler)

  handler = RichHandler(console=backend, show_time=False, show_path=False, markup=False)
  logger.addHandler(handler)
  logger.setLevel(logging.INFO)
  logger.propagate = False
  return handler


class _ConsoleProxy:
  """
  Stable stand-in for the active `rich.console.Console`.

  Attribute access is forwarded to the backend, so ``console.print(...)`` and
  ``console.rule(...)`` follow `set_console`.
  """

  def __init__(self, backend: Optional[Console] = None) -> None:
    self._backend = backend or _new_backend()
    self._handler = _bind_handler(self._backend)

  @property
  def backend(self) -> Console:
    return self._backend

  @property
  def handler(self) -> RichHandler:
    return self._handler

  def swap(self, backend: Optional[Console]) -> None:
    self._backend = backend or _new_backend()
    self._handler = _bind_handler(self._backend)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Redirects console printing and package logging to ``new_console``.

  Args:
      new_console (Console): The rich console to use.
  """
  console.swap(new_console)


def reset_console() -> None:
  """Restores the default stderr console."""
  console.swap(None)


def get_console() -> Console:
  return console.backend


def log_warning(msg: str) -> None:
  """
  Logs a warning on the package logger.

  Args:
      msg (str): The message content.
  """
  logging.getLogger(LOGGER_NAME).warning(msg)


def log_error(msg: str) -> None:
  logging.getLogger(LOGGER_NAME).error(msg)
