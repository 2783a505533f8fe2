"""
Tree Walker.

Provides :class:`CallRewriter`, the LibCST transformer that visits every node
of one module, asks the classifier about each call expression and swaps in
the replacement node.

Replacement happens in ``leave_Call``: by then the call's arguments have
already been visited (and possibly rewritten themselves), and the returned
node is never visited again. This guarantees that a freshly built call is
not matched a second time against arguments that were already consumed.
"""

from collections import Counter
from pathlib import Path
from typing import List, Optional

import libcst as cst
from libcst.metadata import CodeRange, PositionProvider
from pydantic import BaseModel, Field

from errmigrate.config import MigrationRule
from errmigrate.core.classifier import build_replacement, classify
from errmigrate.utils.node_source import normalized_source


class MigrationNote(BaseModel):
  """
  Informational diagnostic attached to a rewritten call site.
  """

  message: str = Field(..., description="What should be reviewed.")
  line: Optional[int] = Field(None, description="1-based line of the original call.")
  column: Optional[int] = Field(None, description="0-based column of the original call.")
  snippet: str = Field("", description="Source of the original call, whitespace-normalised.")

  def format(self, path: Optional[Path] = None) -> str:
    """
    Renders the note as ``path:line:col: message (snippet)``.

    Args:
        path: File the note belongs to, if known.

    Returns:
        str: The formatted note.
    """
    location = str(path) if path else "<string>"
    if self.line is not None:
      location += f":{self.line}:{self.column}"
    return f"{location}: {self.message} ({self.snippet})"


class CallRewriter(cst.CSTTransformer):
  """
  Rewrites legacy constructor calls within a single module.

  Must be run through a :class:`libcst.metadata.MetadataWrapper` so call
  positions are available for notes.

  Attributes:
      rule (MigrationRule): The migration being applied.
      modified (bool): True once any call has been replaced.
      needs_import (bool): True once a replacement references the new library.
      rewrites (Counter): Number of replacements per :class:`~errmigrate.enums.RewriteAction`.
      notes (List[MigrationNote]): Diagnostics for manual review.
  """

  METADATA_DEPENDENCIES = (PositionProvider,)

  def __init__(self, rule: MigrationRule) -> None:
    """
    Initializes per-module state.

    Args:
        rule: The migration rule to apply.
    """
    super().__init__()
    self.rule = rule
    self.modified = False
    self.needs_import = False
    self.rewrites: Counter = Counter()
    self.notes: List[MigrationNote] = []

  def leave_Call(self, original_node: cst.Call, updated_node: cst.Call) -> cst.BaseExpression:
    """
    Classifies the call and returns its replacement.

    Args:
        original_node: The call as parsed (carries position metadata).
        updated_node: The call with rewritten children.

    Returns:
        cst.BaseExpression: The replacement, or ``updated_node`` when the call
        does not match.
    """
    decision = classify(updated_node, self.rule)
    if not decision.action.is_rewrite:
      return updated_node

    self.modified = True
    self.needs_import = self.needs_import or decision.requires_import
    self.rewrites[decision.action] += 1

    if decision.note:
      self.notes.append(self._make_note(original_node, decision.note))

    return build_replacement(updated_node, decision, self.rule)

  def _make_note(self, node: cst.Call, message: str) -> MigrationNote:
    pos: Optional[CodeRange] = self.get_metadata(PositionProvider, node, None)
    return MigrationNote(
      message=message,
      line=pos.start.line if pos else None,
      column=pos.start.column if pos else None,
      snippet=normalized_source(node),
    )
