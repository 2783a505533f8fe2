"""
Core migration logic: classifier, tree walker, import fixer and engine.
"""

from errmigrate.core.classifier import RewriteDecision, build_replacement, classify, is_legacy_call
from errmigrate.core.engine import MigrationEngine
from errmigrate.core.result import MigrationResult
from errmigrate.core.walker import CallRewriter, MigrationNote

__all__ = [
  "CallRewriter",
  "MigrationEngine",
  "MigrationNote",
  "MigrationResult",
  "RewriteDecision",
  "build_replacement",
  "classify",
  "is_legacy_call",
]
