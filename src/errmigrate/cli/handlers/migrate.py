"""
Migrate Command Handler.

This module implements the default ``errmigrate`` action. It orchestrates:
1. Configuration loading (``[tool.errmigrate]`` plus CLI overrides).
2. Package loading, aborting on any diagnostic.
3. Per-file rewriting and writing via :class:`MigrationRunner`.
4. The end-of-run summary.
"""

from pathlib import Path
from typing import Iterable, List, Optional

from rich.markup import escape
from rich.table import Table

from errmigrate.config import RunConfig
from errmigrate.errors import Diagnostic, LoadError
from errmigrate.runner import MigrationRunner, RunReport
from errmigrate.utils.console import console, log_error, log_info, log_success, log_warning


def handle_migrate(root_dir: Optional[Path], patterns: List[str]) -> int:
  """
  Handles a migration run.

  Args:
      root_dir: Directory package patterns are resolved against
          (default: current directory).
      patterns: Package patterns.

  Returns:
      int: Exit code. 1 if configuration or package loading fails, otherwise 0,
      including when some files could not be written (those are reported).
  """
  try:
    config = RunConfig.load(root_dir=root_dir, patterns=patterns)
  except ValueError as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 1

  log_info(
    f"Migrating [code]{config.rule.legacy_package}.{config.rule.legacy_function}[/code] -> "
    f"[code]{config.rule.replacement_package}[/code] under [path]{escape(str(config.root_dir))}[/path]"
  )

  runner = MigrationRunner(config)
  try:
    report = runner.run()
  except LoadError as e:
    print_diagnostics(e.diagnostics)
    log_error("Package loading failed; no files were rewritten.")
    return 1

  _print_run_summary(report)
  return 0


def print_diagnostics(diagnostics: Iterable[Diagnostic]) -> int:
  """
  Logs every load diagnostic.

  Args:
      diagnostics: Problems reported by the loader.

  Returns:
      int: Number of diagnostics printed.
  """
  count = 0
  for diag in diagnostics:
    log_error(escape(str(diag)))
    count += 1
  return count


def _print_run_summary(report: RunReport) -> None:
  """
  Renders a summary of the run to the console.

  Args:
      report: Per-file outcomes.
  """
  total = len(report.files)
  modified = len(report.modified)
  failed = report.failed

  if not failed:
    log_success(f"Run complete: {report.total_rewrites} call(s) rewritten in {modified}/{total} files.")
    return

  table = Table(title="Write Failures")
  table.add_column("File", style="cyan")
  table.add_column("Error", style="red")
  for entry in failed:
    table.add_row(str(entry.path), entry.error or "")

  console.print(table)
  log_warning(
    f"{len(failed)} of {modified} rewritten file(s) could not be written. "
    "The tree now mixes migrated and original files; fix the errors and run again."
  )
