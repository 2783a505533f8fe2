"""
Import Logic Mixin.

Handles visiting and cleaning ``Import`` and ``ImportFrom`` nodes:

* aliases binding the legacy module are pruned once nothing references the
  legacy identifier any more;
* module-level aliases binding the replacement module are recorded, and
  repeats of them dropped, so the module ends up with exactly one;
* when a module-level legacy import statement disappears entirely and the
  replacement import is still missing, the replacement takes over its slot,
  keeping the surrounding blank lines and comments.
"""

from typing import List, Tuple, Union

import libcst as cst

from errmigrate.core.import_fixer.utils import alias_binds, build_import


class ImportMixin(cst.CSTTransformer):
  """
  Mixin for processing Import statements.
  """

  def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:
    self._scope_depth += 1
    return True

  def leave_FunctionDef(self, original_node: cst.FunctionDef, updated_node: cst.FunctionDef) -> cst.FunctionDef:
    self._scope_depth -= 1
    return updated_node

  def visit_ClassDef(self, node: cst.ClassDef) -> bool:
    self._scope_depth += 1
    return True

  def leave_ClassDef(self, original_node: cst.ClassDef, updated_node: cst.ClassDef) -> cst.ClassDef:
    self._scope_depth -= 1
    return updated_node

  def visit_IndentedBlock(self, node: cst.IndentedBlock) -> bool:
    self._block_depth += 1
    return True

  def leave_IndentedBlock(self, original_node: cst.IndentedBlock, updated_node: cst.IndentedBlock) -> cst.IndentedBlock:
    self._block_depth -= 1
    return updated_node

  def visit_SimpleStatementSuite(self, node: cst.SimpleStatementSuite) -> bool:
    self._block_depth += 1
    return True

  def leave_SimpleStatementSuite(
    self, original_node: cst.SimpleStatementSuite, updated_node: cst.SimpleStatementSuite
  ) -> cst.SimpleStatementSuite:
    self._block_depth -= 1
    return updated_node

  def leave_SimpleStatementLine(
    self, original_node: cst.SimpleStatementLine, updated_node: cst.SimpleStatementLine
  ) -> cst.SimpleStatementLine:
    # An emptied line is dropped by its parent
    if original_node is self._head and not updated_node.body:
      self._head_dropped = True
    return updated_node

  def leave_Import(
    self, original_node: cst.Import, updated_node: cst.Import
  ) -> Union[cst.Import, cst.ImportFrom, cst.RemovalSentinel]:
    """
    Inspects ``import ...`` statements.
    """
    kept, removed_legacy = self._filter_aliases(updated_node, list(updated_node.names))
    return self._rebuild(updated_node, kept, removed_legacy)

  def leave_ImportFrom(
    self, original_node: cst.ImportFrom, updated_node: cst.ImportFrom
  ) -> Union[cst.Import, cst.ImportFrom, cst.RemovalSentinel]:
    """
    Inspects ``from ... import ...`` statements. Star imports are left alone.
    """
    if isinstance(updated_node.names, cst.ImportStar):
      return updated_node
    kept, removed_legacy = self._filter_aliases(updated_node, list(updated_node.names))
    return self._rebuild(updated_node, kept, removed_legacy)

  def _filter_aliases(
    self, node: Union[cst.Import, cst.ImportFrom], aliases: List[cst.ImportAlias]
  ) -> Tuple[List[cst.ImportAlias], bool]:
    kept = []
    removed_legacy = False
    rule = self.rule
    for alias in aliases:
      if not self._legacy_in_use and alias_binds(node, alias, rule.legacy_import, rule.legacy_package):
        self.removed_import = True
        removed_legacy = True
        continue

      if self._scope_depth == 0 and alias_binds(node, alias, rule.replacement_import, rule.replacement_package):
        if self._replacement_found:
          self.removed_import = True
          continue
        self._replacement_found = True

      kept.append(alias)
    return kept, removed_legacy

  def _rebuild(
    self,
    node: Union[cst.Import, cst.ImportFrom],
    kept: List[cst.ImportAlias],
    removed_legacy: bool,
  ) -> Union[cst.Import, cst.ImportFrom, cst.RemovalSentinel]:
    if not kept:
      if removed_legacy and self._block_depth == 0 and self._should_inject():
        self.added_import = True
        self._replacement_found = True
        return build_import(self.rule.replacement_import).body[0]
      return cst.RemoveFromParent()
    if len(kept) == len(node.names):
      return node
    original_last = node.names[-1]
    if kept[-1] is not original_last:
      # The new last alias takes over the layout of the removed one
      kept[-1] = kept[-1].with_changes(comma=original_last.comma)
    return node.with_changes(names=kept)
