"""
Entry point for module execution (``python -m errmigrate``).

This module delegates execution to the CLI handler in ``errmigrate.cli.__main__``.
"""

import sys
from errmigrate.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
