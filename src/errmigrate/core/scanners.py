"""
AST Scanners for Symbol Usage Detection.

LibCST visitors deciding whether a module still references a given
identifier. The import fixer relies on them:

1.  Before pruning the legacy import, it checks whether any usage of the
    legacy identifier survives the rewrite.
2.  Before injecting the replacement import, it confirms the replacement
    identifier is actually referenced.
"""

from typing import Union

import libcst as cst


def get_full_name(node: Union[cst.Name, cst.Attribute]) -> str:
  """
  Recursively resolves a CST Name or Attribute chain to a dot-separated string.

  Args:
    node: The CST node representing the identifier.

  Returns:
    str: The dotted representation (e.g., "scion.lib.common").
    Returns an empty string if the node is not a Name/Attribute chain.

  Example:
    >>> get_full_name(cst.Attribute(value=cst.Name("common"), attr=cst.Name("NewBasicError")))
    'common.NewBasicError'
  """
  if isinstance(node, cst.Name):
    return node.value
  elif isinstance(node, cst.Attribute):
    base = get_full_name(node.value)
    if not base:
      return ""
    return f"{base}.{node.attr.value}"
  return ""


class SimpleNameScanner(cst.CSTVisitor):
  """
  Scans for the usage of a specific identifier in the code body.

  Names inside import statements are definitions, not usages, and are
  ignored. So are attribute names (the ``x`` in ``a.x``), which never refer
  to a module-level binding. Anything else counts, including parameters and
  keywords that merely share the name.

  Attributes:
    target_name (str): The identifier to search for (e.g., "serrors").
    found (bool): Set to True as soon as a usage is seen.
  """

  def __init__(self, target_name: str) -> None:
    """
    Initializes the scanner.

    Args:
      target_name: The identifier to search for.
    """
    self.target_name = target_name
    self.found = False

  def visit_Import(self, node: cst.Import) -> bool:
    return False

  def visit_ImportFrom(self, node: cst.ImportFrom) -> bool:
    return False

  def visit_Attribute(self, node: cst.Attribute) -> bool:
    # Only the receiver can be a usage
    node.value.visit(self)
    return False

  def visit_Name(self, node: cst.Name) -> None:
    if node.value == self.target_name:
      self.found = True

  def on_visit(self, node: cst.CSTNode) -> bool:
    """
    Stops descending once a usage has been found.

    Returns:
      bool: False when the scan is already decided.
    """
    if self.found:
      return False
    return super().on_visit(node)


def is_name_used(tree: cst.CSTNode, name: str) -> bool:
  """
  Checks whether ``name`` is referenced outside of import statements.

  Args:
    tree: Module (or any subtree) to scan.
    name: Identifier to look for.

  Returns:
    bool: True if at least one usage exists.
  """
  scanner = SimpleNameScanner(name)
  tree.visit(scanner)
  return scanner.found
