"""
Operator output for errmigrate.

Progress, per-file results and diagnostics are plain ``logging`` records on
the root logger, rendered by a single ``RichHandler``. The handler writes to
whatever console currently backs :data:`console`; tests swap it for a
recording console with :func:`set_console`.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

# Styles referenced from log markup: [path]...[/path], [code]...[/code]
_THEME = Theme(
  {
    "logging.level.success": "green",
    "path": "bold blue",
    "code": "bold magenta",
  }
)


class _ConsoleProxy:
  """
  Stable handle on the active rich ``Console``.

  Modules import ``console`` once; rebinding the backend here also moves the
  root logger's handler, so printed tables and log lines stay together.
  """

  def __init__(self) -> None:
    self._backend = self._attach(Console(theme=_THEME))

  def set_backend(self, new_console: Console) -> None:
    new_console.push_theme(_THEME)
    self._backend = self._attach(new_console)

  def reset(self) -> None:
    self._backend = self._attach(Console(theme=_THEME))

  @property
  def backend(self) -> Console:
    return self._backend

  @staticmethod
  def _attach(target: Console) -> Console:
    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, RichHandler)]:
      root.removeHandler(handler)
    root.addHandler(
      RichHandler(
        console=target,
        show_time=False,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
      )
    )
    root.setLevel(logging.INFO)
    return target

  def print(self, *args: Any, **kwargs: Any) -> None:
    self._backend.print(*args, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Routes printing and logging to ``new_console``.

  Args:
      new_console: Console to use from now on. The errmigrate theme is pushed
          onto it.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  """Goes back to a fresh stdout console."""
  console.reset()


def get_console() -> Console:
  return console.backend


def _emit(level: int, prefix: str, msg: str) -> None:
  logging.log(level, f"{prefix}{msg}", extra={"markup": True})


def log_info(msg: str) -> None:
  """
  Args:
      msg: Message text; rich markup allowed.
  """
  _emit(logging.INFO, "ℹ️  ", msg)


def log_success(msg: str) -> None:
  _emit(SUCCESS_LEVEL_NUM, "✅ ", msg)


def log_warning(msg: str) -> None:
  _emit(logging.WARNING, "⚠️  ", msg)


def log_error(msg: str) -> None:
  _emit(logging.ERROR, "❌ ", msg)
