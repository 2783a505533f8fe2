"""
Main Entry Point for the errmigrate CLI.

This module handles argument parsing and dispatches to the migrate handler.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from errmigrate import __version__
from errmigrate.cli import commands

_EPILOG = """\
Files are rewritten in place with no backup. Each file is written as soon as
it is migrated, so a failure partway through leaves a mix of migrated and
original files. Run on a clean version-controlled checkout.
"""


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(
    prog="errmigrate",
    description="Rewrite legacy error constructor calls to the replacement error library.",
    epilog=_EPILOG,
    formatter_class=argparse.RawDescriptionHelpFormatter,
  )
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument(
    "--dir",
    type=Path,
    default=None,
    help="Directory to use as root for resolving packages (default: current directory).",
  )
  parser.add_argument(
    "patterns",
    nargs="*",
    help="Package patterns: DIR, DIR/..., FILE.py, a glob, or a dotted package path.",
  )

  args = parser.parse_args(argv)
  return commands.handle_migrate(args.dir, args.patterns)


if __name__ == "__main__":
  sys.exit(main())
