"""
AST Node Serialization.

Renders detached LibCST nodes to source text. Used to quote call sites in
review notes and to detect messages that span several lines.
"""

import libcst as cst

# A dummy module used as a context to render detached nodes.
_RENDER_CTX = cst.parse_module("")


def capture_node_source(node: cst.CSTNode) -> str:
  """
  Renders a LibCST node into its Python source code string representation.

  Args:
      node: The CST node to serialise.

  Returns:
      str: The Python code string.
  """
  return _RENDER_CTX.code_for_node(node)


def normalized_source(node: cst.CSTNode) -> str:
  """
  Renders a node with all whitespace runs collapsed to a single space.

  Args:
      node: The CST node to serialise.

  Returns:
      str: Single-line normalised source.
  """
  return " ".join(capture_node_source(node).split())
