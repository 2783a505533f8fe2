"""
Data structures representing the output of migrating one module.

This module defines the `MigrationResult` Pydantic model, which encapsulates
the generated code, the per-action rewrite counts and the review notes.
"""

from typing import Dict, List

from pydantic import BaseModel, Field

from errmigrate.core.walker import MigrationNote


class MigrationResult(BaseModel):
  """
  Container for the results of migrating a single module.
  """

  code: str = Field(default="", description="The generated source code.")
  modified: bool = Field(default=False, description="True if any call site was rewritten.")
  rewrites: Dict[str, int] = Field(default_factory=dict, description="Number of rewrites per action.")
  notes: List[MigrationNote] = Field(default_factory=list, description="Call sites flagged for manual review.")
  import_added: bool = Field(default=False, description="True if the replacement import was injected.")
  import_removed: bool = Field(default=False, description="True if an import alias was pruned.")

  @property
  def total_rewrites(self) -> int:
    """
    Returns:
        int: Number of call sites rewritten.
    """
    return sum(self.rewrites.values())
