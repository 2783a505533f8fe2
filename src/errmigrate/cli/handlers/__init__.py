from .migrate import handle_migrate, print_diagnostics, _print_run_summary

__all__ = [
  "_print_run_summary",
  "handle_migrate",
  "print_diagnostics",
]
