"""
Exception types raised by the migration pipeline.

Load failures are collected as :class:`Diagnostic` records so that every
problem in the input set can be reported before the run aborts. Write
failures are raised per file and handled by the caller.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


class Diagnostic(BaseModel):
  """
  A single problem found while resolving or parsing the input packages.
  """

  message: str = Field(..., description="Human readable description of the problem.")
  path: Optional[Path] = Field(None, description="File or pattern the problem refers to.")
  line: Optional[int] = Field(None, description="1-based line number, if known.")
  column: Optional[int] = Field(None, description="0-based column, if known.")

  def __str__(self) -> str:
    if self.path is None:
      return self.message
    location = str(self.path)
    if self.line is not None:
      location += f":{self.line}"
      if self.column is not None:
        location += f":{self.column}"
    return f"{location}: {self.message}"


class MigrationError(Exception):
  """Base class for all errmigrate failures."""


class LoadError(MigrationError):
  """
  Raised when package loading fails or reports diagnostics.

  Attributes:
      diagnostics (List[Diagnostic]): Every problem found during loading.
  """

  def __init__(self, diagnostics: List[Diagnostic]):
    self.diagnostics = list(diagnostics)
    summary = f"{len(self.diagnostics)} error(s) while loading packages"
    super().__init__(summary)


class WriteError(MigrationError):
  """
  Raised when a rewritten file cannot be written back to disk.

  Attributes:
      path (Path): Destination that failed.
      cause (OSError): Underlying I/O error.
  """

  def __init__(self, path: Path, cause: OSError):
    self.path = path
    self.cause = cause
    super().__init__(f"Failed to write {path}: {cause}")
