"""
Base Import Fixer Logic.

Defines the base class for the ImportFixer: configuration and the per-module
state the mixins share.
"""

from typing import Optional

import libcst as cst

from errmigrate.config import MigrationRule
from errmigrate.core.import_fixer.utils import BindingScanner
from errmigrate.core.scanners import is_name_used


class BaseImportFixer(cst.CSTTransformer):
  """
  Base class for import manipulation.

  The fixer is meant to run once over a module the walker has modified.
  Usage of both identifiers is measured on that module up front in
  ``visit_Module``, before any import statement is touched.

  Attributes:
      rule (MigrationRule): The migration being applied.
      needs_import (bool): Whether the walker introduced references to the
          replacement module.
      added_import (bool): Set if the replacement import was injected.
      removed_import (bool): Set if a legacy or duplicate import alias was pruned.
  """

  def __init__(self, rule: MigrationRule, needs_import: bool) -> None:
    """
    Initializes the fixer state.

    Args:
        rule: The migration rule naming both modules.
        needs_import: Walker flag; when False no import is injected.
    """
    super().__init__()
    self.rule = rule
    self.needs_import = needs_import

    self.added_import = False
    self.removed_import = False

    self._legacy_in_use = True
    self._replacement_in_use = False
    self._replacement_found = False
    self._replacement_present = False
    self._scope_depth = 0
    self._block_depth = 0

    self._head: Optional[cst.BaseStatement] = None
    self._head_dropped = False

  def visit_Module(self, node: cst.Module) -> bool:
    """
    Measures identifier usage on the rewritten module.

    Args:
        node: The module as produced by the walker.

    Returns:
        bool: Always True, to continue into statements.
    """
    self._legacy_in_use = is_name_used(node, self.rule.legacy_package)
    self._replacement_in_use = is_name_used(node, self.rule.replacement_package)

    binding = BindingScanner(self.rule.replacement_import, self.rule.replacement_package)
    node.visit(binding)
    self._replacement_present = binding.found
    self._head = node.body[0] if node.body else None
    return True

  def _should_inject(self) -> bool:
    """
    Returns:
        bool: True while the replacement import is needed, used and absent.
    """
    return (
      self.needs_import and self._replacement_in_use and not self._replacement_present and not self.added_import
    )
