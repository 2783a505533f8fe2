"""
errmigrate Package.

A deterministic LibCST codemod that rewrites calls to a legacy error
constructor (``common.NewBasicError(msg, err, *ctx)``) into the matching
call of a replacement error library (``serrors.New``, ``WithCtx``,
``WrapStr`` or ``Wrap``) and fixes the imports of every rewritten file.

Usage
-----

Simple String Migration
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import errmigrate
    code = 'err = common.NewBasicError("boom", None)'
    print(errmigrate.migrate(code))
    # from scion.lib import serrors
    # err = serrors.New("boom")

Whole Packages
^^^^^^^^^^^^^^

.. code-block:: python

    from pathlib import Path
    from errmigrate import MigrationRunner, RunConfig

    config = RunConfig(root_dir=Path("src"), patterns=["..."])
    report = MigrationRunner(config).run()
    print(report.total_rewrites)
"""

from typing import Optional

__version__ = "0.0.1"

from errmigrate.config import MigrationRule, RunConfig
from errmigrate.core.engine import MigrationEngine
from errmigrate.core.result import MigrationResult
from errmigrate.runner import MigrationRunner, RunReport


def migrate(code: str, rule: Optional[MigrationRule] = None) -> str:
  """
  Migrates a string of Python code.

  Convenience wrapper around :class:`MigrationEngine` for single snippets.

  Args:
      code (str): The source code to migrate.
      rule (MigrationRule, optional): The migration to apply. Defaults to
          ``common.NewBasicError`` -> ``serrors``.

  Returns:
      str: The migrated source code. Unchanged if nothing matched.

  Raises:
      libcst.ParserSyntaxError: If ``code`` is not valid Python.
  """
  return MigrationEngine(rule).run(code).code


__all__ = [
  "MigrationEngine",
  "MigrationResult",
  "MigrationRule",
  "MigrationRunner",
  "RunConfig",
  "RunReport",
  "migrate",
  "__version__",
]
