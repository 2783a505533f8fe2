"""
Import Fixer Package.

This package provides the ``ImportFixer`` class, a LibCST transformer run once
per rewritten module:

1.  **Pruning**: Removing the legacy import once nothing references it.
2.  **Deduplication**: Keeping a single module-level replacement import.
3.  **Injection**: Adding the replacement import when rewritten calls need it.

It is composed of mixins handling specific node types.
"""

from errmigrate.core.import_fixer.base import BaseImportFixer
from errmigrate.core.import_fixer.imports_mixin import ImportMixin
from errmigrate.core.import_fixer.injection_mixin import InjectionMixin


class ImportFixer(ImportMixin, InjectionMixin, BaseImportFixer):
  """
  Composite Transformer for managing the imports of a migrated module.

  Inherits functionality from:
  - :class:`ImportMixin`: pruning and deduplicating import statements.
  - :class:`InjectionMixin`: injecting the missing replacement import.
  - :class:`BaseImportFixer`: State management and configuration.
  """


__all__ = ["ImportFixer"]
