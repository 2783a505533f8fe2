"""
CLI Command Handlers Facade.

Re-exports the handlers from `errmigrate.cli.handlers` so the entry point
and tests have a single module to dispatch through and patch.
"""

from errmigrate.cli.handlers.migrate import (
  handle_migrate,
  print_diagnostics,
  _print_run_summary,
)
