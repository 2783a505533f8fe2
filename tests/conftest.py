"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Helpers for building small package trees on disk.
- Console isolation so log capture in one test does not leak into the next.
"""

import sys
import textwrap
from pathlib import Path
from typing import Callable, Dict

import pytest

# Add src to path so we can import 'errmigrate' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from errmigrate.utils.console import reset_console  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_console():
  """
  Ensures a console injected by a test does not outlive it.
  """
  yield
  reset_console()


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
  """
  Writes a mapping of relative paths to (dedented) file contents under
  ``tmp_path`` and returns the root.
  """

  def _make(files: Dict[str, str]) -> Path:
    for rel, content in files.items():
      target = tmp_path / rel
      target.parent.mkdir(parents=True, exist_ok=True)
      target.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
    return tmp_path

  return _make
