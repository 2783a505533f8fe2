"""
Utilities for the Import Fixer.

Static helpers for deciding which name an import alias binds, building import
statements from dotted paths, and locating the canonical insertion point.
"""

from typing import Optional, Sequence, Union

import libcst as cst

from errmigrate.core.scanners import get_full_name


def create_dotted_name(name_str: str) -> Union[cst.Name, cst.Attribute]:
  """
  Creates a CST node structure for a dotted path string.

  Args:
      name_str (str): Dot-separated path (e.g. "scion.lib").

  Returns:
      Union[cst.Name, cst.Attribute]: The constructed node.
  """
  parts = name_str.split(".")
  node: Union[cst.Name, cst.Attribute] = cst.Name(parts[0])
  for part in parts[1:]:
    node = cst.Attribute(value=node, attr=cst.Name(part))
  return node


def bound_name(alias: cst.ImportAlias, is_from: bool) -> Optional[str]:
  """
  Resolves the local name an import alias introduces.

  ``import a.b.c`` binds ``a``; ``import a.b.c as x`` and
  ``from a.b import c as x`` bind ``x``; ``from a.b import c`` binds ``c``.

  Args:
      alias: The alias node.
      is_from: True if the alias belongs to a ``from ... import`` statement.

  Returns:
      Optional[str]: The bound name, or None if it cannot be determined.
  """
  if alias.asname:
    target = alias.asname.name
    return target.value if isinstance(target, cst.Name) else None
  full = get_full_name(alias.name)
  if not full:
    return None
  return full if is_from else full.split(".")[0]


def alias_binds(
  node: Union[cst.Import, cst.ImportFrom],
  alias: cst.ImportAlias,
  import_path: str,
  identifier: str,
) -> bool:
  """
  Checks whether one alias of an import statement binds ``identifier`` to
  the module at ``import_path``.

  Relative imports never match, since their absolute path is unknown here.

  Args:
      node: The enclosing import statement.
      alias: One of its aliases.
      import_path: Absolute dotted path of the module.
      identifier: The expected local name.

  Returns:
      bool: True on an exact binding.
  """
  if isinstance(node, cst.Import):
    return get_full_name(alias.name) == import_path and bound_name(alias, is_from=False) == identifier

  if node.relative or node.module is None:
    return False
  full = f"{get_full_name(node.module)}.{get_full_name(alias.name)}"
  return full == import_path and bound_name(alias, is_from=True) == identifier


def build_import(import_path: str) -> cst.SimpleStatementLine:
  """
  Builds the statement binding the last segment of ``import_path``.

  Args:
      import_path: Dotted module path (e.g. "scion.lib.serrors").

  Returns:
      cst.SimpleStatementLine: ``from scion.lib import serrors``, or
      ``import serrors`` for a top-level module.
  """
  parent, _, leaf = import_path.rpartition(".")
  if not parent:
    return cst.SimpleStatementLine(body=[cst.Import(names=[cst.ImportAlias(name=cst.Name(leaf))])])
  return cst.SimpleStatementLine(
    body=[cst.ImportFrom(module=create_dotted_name(parent), names=[cst.ImportAlias(name=cst.Name(leaf))])]
  )


def is_docstring(node: cst.CSTNode, idx: int) -> bool:
  """
  Determines if a statement node represents a module docstring.

  Args:
      node: The statement node from the module body.
      idx: The index of this statement in the body list.

  Returns:
      bool: True if it is a string expression at index 0.
  """
  if idx != 0:
    return False
  if isinstance(node, cst.SimpleStatementLine):
    if len(node.body) == 1 and isinstance(node.body[0], cst.Expr):
      expr = node.body[0].value
      if isinstance(expr, (cst.SimpleString, cst.ConcatenatedString)):
        return True
  return False


def is_import_line(node: cst.CSTNode) -> bool:
  """
  Args:
      node: A module-level statement.

  Returns:
      bool: True if every small statement on the line is an import.
  """
  if not isinstance(node, cst.SimpleStatementLine) or not node.body:
    return False
  return all(isinstance(small, (cst.Import, cst.ImportFrom)) for small in node.body)


def find_insertion_index(body: Sequence[cst.CSTNode]) -> int:
  """
  Locates where a new import should go: right after the leading block of
  import statements, or after the docstring if the module has no imports.

  Args:
      body: Module-level statements.

  Returns:
      int: Index to insert at.
  """
  insert_idx = 0
  for i, stmt in enumerate(body):
    if is_docstring(stmt, i) or is_import_line(stmt):
      insert_idx = i + 1
      continue
    break
  return insert_idx


class BindingScanner(cst.CSTVisitor):
  """
  Detects whether a module binds ``identifier`` to ``import_path`` outside of
  function and class bodies.

  Attributes:
      found (bool): True once a binding import has been seen.
  """

  def __init__(self, import_path: str, identifier: str) -> None:
    self.import_path = import_path
    self.identifier = identifier
    self.found = False

  def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:
    return False

  def visit_ClassDef(self, node: cst.ClassDef) -> bool:
    return False

  def visit_Import(self, node: cst.Import) -> bool:
    self._check(node)
    return False

  def visit_ImportFrom(self, node: cst.ImportFrom) -> bool:
    if not isinstance(node.names, cst.ImportStar):
      self._check(node)
    return False

  def _check(self, node: Union[cst.Import, cst.ImportFrom]) -> None:
    for alias in node.names:
      if alias_binds(node, alias, self.import_path, self.identifier):
        self.found = True
