"""
Migration Runner.

Drives a whole run: load every package, then for each file in turn walk,
fix imports and write back before moving to the next file.

Failure policy:

* Load/parse problems abort the run before any file is rewritten
  (:class:`~errmigrate.errors.LoadError` propagates).
* A write failure is recorded on that file's report and the run continues
  with the remaining files. Files already written stay rewritten; there is
  no rollback.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field
from rich.markup import escape
from rich.progress import track

from errmigrate.config import RunConfig
from errmigrate.core.engine import MigrationEngine
from errmigrate.core.result import MigrationResult
from errmigrate.errors import WriteError
from errmigrate.loader import SourceFile, SourceLoader
from errmigrate.utils.console import log_error, log_success, log_warning
from errmigrate.writer import write_module


class FileReport(BaseModel):
  """
  Outcome for one file.
  """

  path: Path = Field(..., description="The source file.")
  result: MigrationResult = Field(default_factory=MigrationResult, description="Rewrite summary.")
  written: bool = Field(default=False, description="True if the file was overwritten.")
  error: Optional[str] = Field(default=None, description="Write failure, if any.")


class RunReport(BaseModel):
  """
  Outcome of a whole run.
  """

  files: List[FileReport] = Field(default_factory=list)

  @property
  def modified(self) -> List[FileReport]:
    """Files with at least one rewritten call site."""
    return [f for f in self.files if f.result.modified]

  @property
  def failed(self) -> List[FileReport]:
    """Files that were rewritten in memory but could not be written."""
    return [f for f in self.files if f.error is not None]

  @property
  def total_rewrites(self) -> int:
    """Number of call sites rewritten across all files."""
    return sum(f.result.total_rewrites for f in self.files)


class MigrationRunner:
  """
  Applies one migration rule to a set of packages.

  Attributes:
      config (RunConfig): Root directory, patterns and rule.
      loader (SourceLoader): Resolves and parses the packages.
      engine (MigrationEngine): Rewrites one module at a time.
  """

  def __init__(self, config: RunConfig):
    """
    Args:
        config: The run configuration.
    """
    self.config = config
    self.loader = SourceLoader(config.root_dir)
    self.engine = MigrationEngine(config.rule)

  def run(self, verbose: bool = False) -> RunReport:
    """
    Executes the migration.

    Args:
        verbose: Show a progress bar while rewriting.

    Returns:
        RunReport: Per-file outcomes.

    Raises:
        LoadError: If loading reports any diagnostic. Nothing is written then.
    """
    packages = self.loader.load(self.config.patterns)
    sources = [source for pkg in packages for source in pkg.files]

    iterator = sources
    if verbose:
      iterator = track(sources, description="Migrating...")

    report = RunReport()
    for source in iterator:
      report.files.append(self.migrate_file(source))
    return report

  def migrate_file(self, source: SourceFile) -> FileReport:
    """
    Rewrites one file and writes it back if it changed.

    Args:
        source: The parsed file.

    Returns:
        FileReport: The outcome. Write failures are captured, not raised.
    """
    tree, result = self.engine.migrate_module(source.wrapper)
    report = FileReport(path=source.path, result=result)

    for note in result.notes:
      log_warning(escape(note.format(self._display_path(source.path))))

    if not result.modified:
      return report

    try:
      write_module(source.path, tree)
    except WriteError as e:
      report.error = str(e.cause)
      log_error(f"Failed to write [path]{escape(str(self._display_path(source.path)))}[/path]: {escape(str(e.cause))}")
      return report

    report.written = True
    log_success(
      f"Rewrote {result.total_rewrites} call(s) in [path]{escape(str(self._display_path(source.path)))}[/path]"
    )
    return report

  def _display_path(self, path: Path) -> Path:
    try:
      return path.relative_to(self.loader.root_dir)
    except ValueError:
      return path
