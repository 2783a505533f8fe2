"""
Runtime Configuration Store.

Holds the migration rule (which legacy constructor to match and which
replacement functions to emit) and the run settings (root directory and
package patterns). Values are read from ``[tool.errmigrate]`` in the nearest
``pyproject.toml`` and overridden by CLI arguments.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from errmigrate.enums import RewriteAction

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib


def _check_identifier(value: str) -> str:
  value = value.strip()
  if not value.isidentifier():
    raise ValueError(f"'{value}' is not a valid Python identifier")
  return value


def _check_dotted(value: str) -> str:
  value = value.strip()
  if not value or not all(part.isidentifier() for part in value.split(".")):
    raise ValueError(f"'{value}' is not a valid dotted import path")
  return value


class MigrationRule(BaseModel):
  """
  Describes one constructor migration.

  The defaults migrate ``common.NewBasicError`` to the ``serrors`` family.
  """

  legacy_package: str = Field("common", description="Identifier the legacy module is bound to.")
  legacy_function: str = Field("NewBasicError", description="Legacy constructor name.")
  legacy_import: str = Field("scion.lib.common", description="Import path of the legacy module.")

  replacement_package: str = Field("serrors", description="Identifier the replacement module is bound to.")
  replacement_import: str = Field("scion.lib.serrors", description="Import path of the replacement module.")

  new_function: str = Field("New", description="Emitted for literal messages without a wrapped error.")
  with_ctx_function: str = Field("WithCtx", description="Emitted for computed messages with context.")
  wrap_str_function: str = Field("WrapStr", description="Emitted for literal messages wrapping an error.")
  wrap_function: str = Field("Wrap", description="Emitted for computed messages wrapping an error.")

  @field_validator(
    "legacy_package",
    "legacy_function",
    "replacement_package",
    "new_function",
    "with_ctx_function",
    "wrap_str_function",
    "wrap_function",
  )
  @classmethod
  def validate_identifier(cls, v: str) -> str:
    """
    Ensures symbol names can appear in generated code.

    Args:
        v (str): The configured name.

    Returns:
        str: The stripped name.

    Raises:
        ValueError: If the name is not a Python identifier.
    """
    return _check_identifier(v)

  @field_validator("legacy_import", "replacement_import")
  @classmethod
  def validate_import_path(cls, v: str) -> str:
    """
    Ensures import paths are dotted identifiers.

    Args:
        v (str): The configured import path.

    Returns:
        str: The stripped path.

    Raises:
        ValueError: If any segment is not an identifier.
    """
    return _check_dotted(v)

  @model_validator(mode="after")
  def validate_bindings(self) -> "MigrationRule":
    """
    The generated import must bind the identifier the rewritten calls use.

    Raises:
        ValueError: If the last segment of ``replacement_import`` differs from
            ``replacement_package``.
    """
    if self.replacement_import.split(".")[-1] != self.replacement_package:
      raise ValueError(
        f"replacement_import '{self.replacement_import}' does not bind '{self.replacement_package}'"
      )
    return self

  def function_for(self, action: RewriteAction) -> Optional[str]:
    """
    Resolves the replacement function name for a rewrite action.

    Args:
        action (RewriteAction): The classified action.

    Returns:
        Optional[str]: The function name, or None for actions that emit no call.
    """
    mapping = {
      RewriteAction.NEW: self.new_function,
      RewriteAction.WITH_CTX: self.with_ctx_function,
      RewriteAction.WRAP_STR: self.wrap_str_function,
      RewriteAction.WRAP: self.wrap_function,
    }
    return mapping.get(action)


class RunConfig(BaseModel):
  """
  Configuration for one invocation of the migration.
  """

  root_dir: Path = Field(default_factory=Path.cwd, description="Directory package patterns are resolved against.")
  patterns: List[str] = Field(default_factory=list, description="Package patterns to migrate.")
  rule: MigrationRule = Field(default_factory=MigrationRule, description="The constructor migration to apply.")

  @classmethod
  def load(
    cls,
    root_dir: Optional[Path] = None,
    patterns: Optional[List[str]] = None,
    rule_overrides: Optional[Dict[str, Any]] = None,
    search_path: Optional[Path] = None,
  ) -> "RunConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        root_dir (Optional[Path]): Override for the package root.
        patterns (Optional[List[str]]): Package patterns from the command line.
        rule_overrides (Optional[Dict]): Rule fields taking precedence over TOML.
        search_path (Optional[Path]): Directory to start searching for TOML config.
            Defaults to ``root_dir`` or the current directory.

    Returns:
        RunConfig: The fully resolved configuration object.
    """
    final_root = (root_dir or Path.cwd()).resolve()
    toml_config, _ = _load_toml_settings(search_path or final_root)

    toml_rule = toml_config.get("rule", {})
    final_rule = MigrationRule(**{**toml_rule, **(rule_overrides or {})})

    final_patterns = list(patterns) if patterns else list(toml_config.get("patterns", []))

    return cls(root_dir=final_root, patterns=final_patterns, rule=final_rule)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches the directory and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.

  Raises:
      ValueError: If the nearest pyproject.toml is not valid TOML.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid configuration in {toml_path}: {e}") from e

      tool_section = data.get("tool", {})
      if "errmigrate" in tool_section:
        return tool_section["errmigrate"], parent

  return {}, None
