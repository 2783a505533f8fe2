"""
Enumerations for errmigrate.

This module defines the rewrite actions the call classifier can select for a
legacy error-constructor call site.
"""

from enum import Enum


class RewriteAction(str, Enum):
  """
  Outcome of classifying a call expression.

  The four constructor actions map onto the configured replacement functions
  (see :class:`errmigrate.config.MigrationRule`). ``UNWRAP`` replaces the call
  with its message argument, ``NO_MATCH`` leaves the call untouched.
  """

  NEW = "new"
  WITH_CTX = "with_ctx"
  WRAP_STR = "wrap_str"
  WRAP = "wrap"
  UNWRAP = "unwrap"
  NO_MATCH = "no_match"

  @property
  def is_rewrite(self) -> bool:
    """True for every action that changes the tree."""
    return self is not RewriteAction.NO_MATCH

  @property
  def emits_call(self) -> bool:
    """True if the action produces a call into the replacement library."""
    return self not in (RewriteAction.UNWRAP, RewriteAction.NO_MATCH)
