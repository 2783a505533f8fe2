"""
Orchestration Engine for the constructor migration.

This module provides the `MigrationEngine`, which runs the per-module
pipeline:

1.  **Call Rewriting**: The :class:`CallRewriter` walks the tree and replaces
    every legacy constructor call (positions resolved through a
    ``MetadataWrapper``).
2.  **Import Fixing**: If the walker modified the module, the
    :class:`ImportFixer` injects the replacement import and prunes the legacy
    one. Unmodified modules are returned untouched.

The engine does no I/O; loading and writing belong to
:mod:`errmigrate.loader` and :mod:`errmigrate.writer`.
"""

import logging
from typing import Optional, Tuple, Union

import libcst as cst
from libcst.metadata import MetadataWrapper

from errmigrate.config import MigrationRule
from errmigrate.core.import_fixer import ImportFixer
from errmigrate.core.result import MigrationResult
from errmigrate.core.walker import CallRewriter

logger = logging.getLogger(__name__)


class MigrationEngine:
  """
  The main migration unit.

  Stateless between modules: each call to :meth:`migrate_module` creates a
  fresh walker and import fixer, so no tree state is shared across files.
  """

  def __init__(self, rule: Optional[MigrationRule] = None):
    """
    Initializes the Engine.

    Args:
        rule (MigrationRule, optional): The migration to apply. Defaults to
            ``common.NewBasicError`` -> ``serrors``.
    """
    self.rule = rule or MigrationRule()

  def parse(self, code: str) -> cst.Module:
    """
    Parses source string into a LibCST Module.

    Args:
        code (str): Python source code.

    Returns:
        cst.Module: The parsed syntax tree.

    Raises:
        libcst.ParserSyntaxError: If the input code is invalid Python.
    """
    return cst.parse_module(code)

  def migrate_module(self, module: Union[cst.Module, MetadataWrapper]) -> Tuple[cst.Module, MigrationResult]:
    """
    Rewrites one module.

    Args:
        module: The parsed module, optionally already wrapped for metadata.

    Returns:
        Tuple[cst.Module, MigrationResult]: The resulting tree and a summary.
        When nothing matched, the tree is the wrapped module unchanged.
    """
    wrapper = module if isinstance(module, MetadataWrapper) else MetadataWrapper(module)

    rewriter = CallRewriter(self.rule)
    tree = wrapper.visit(rewriter)

    result = MigrationResult(
      modified=rewriter.modified,
      rewrites={action.value: count for action, count in rewriter.rewrites.items()},
      notes=list(rewriter.notes),
    )

    if rewriter.modified:
      fixer = ImportFixer(self.rule, needs_import=rewriter.needs_import)
      tree = tree.visit(fixer)
      result.import_added = fixer.added_import
      result.import_removed = fixer.removed_import
      logger.debug(
        "Rewrote %d call(s); import added=%s removed=%s",
        result.total_rewrites,
        fixer.added_import,
        fixer.removed_import,
      )

    result.code = tree.code
    return tree, result

  def run(self, code: str) -> MigrationResult:
    """
    Migrates a source string.

    Args:
        code (str): The input source.

    Returns:
        MigrationResult: The transformed code and rewrite summary.

    Raises:
        libcst.ParserSyntaxError: If the input code is invalid Python.
    """
    _, result = self.migrate_module(self.parse(code))
    return result
