"""
Import Injection Mixin.

Post-processes the Module to add the replacement import when the walker
introduced references to it and no module-level binding exists yet.
"""

import libcst as cst

from errmigrate.core.import_fixer.utils import build_import, find_insertion_index


class InjectionMixin(cst.CSTTransformer):
  """
  Mixin for injecting the replacement import at the Module level.
  """

  def leave_Module(self, original_node: cst.Module, updated_node: cst.Module) -> cst.Module:
    """
    Closes the gap left by a removed first statement, then injects the
    replacement import after the leading import block.

    Args:
        original_node: Module before import processing.
        updated_node: Module after pruning and deduplication.

    Returns:
        cst.Module: The module with its final import set.
    """
    body = list(updated_node.body)
    if self._head_dropped and body:
      # The next statement moves up to the top of the file
      body[0] = body[0].with_changes(leading_lines=self._head.leading_lines)
      updated_node = updated_node.with_changes(body=body)

    if not self._should_inject():
      return updated_node

    insert_idx = find_insertion_index(body)
    body.insert(insert_idx, build_import(self.rule.replacement_import))

    self.added_import = True
    return updated_node.with_changes(body=body)
