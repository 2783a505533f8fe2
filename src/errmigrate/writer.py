"""
Writer.

Serialises a syntax tree and overwrites the source file in place. LibCST
round-trips untouched code byte for byte, so only the rewritten call sites
and import statements differ from the original file.
"""

from pathlib import Path

import libcst as cst

from errmigrate.errors import WriteError


def write_module(path: Path, module: cst.Module) -> None:
  """
  Overwrites ``path`` with the rendered module.

  The module's detected encoding is used (``Module.bytes``). The write is
  not atomic: a failure midway can leave a truncated file.

  Args:
      path: Destination file.
      module: The tree to render.

  Raises:
      WriteError: If the file cannot be opened, truncated or written.
  """
  try:
    with open(path, "wb") as f:
      f.write(module.bytes)
  except OSError as e:
    raise WriteError(path, e) from e
