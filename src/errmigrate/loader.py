"""
Source Loader.

Resolves package patterns against a root directory and parses every matched
file into a LibCST module wrapped for metadata resolution.

Pattern forms:

* ``path/to/dir``: the package in that directory (its ``*.py`` files).
* ``path/to/dir/...`` (or ``...``): every package below the directory.
* ``path/to/file.py``: a single file.
* ``pkg/**/*.py``: a glob relative to the root.
* ``pkg.sub``: a dotted module or package path under the root.

Every problem is collected as a :class:`Diagnostic`; :meth:`SourceLoader.load`
raises a single :class:`LoadError` carrying all of them, so nothing is
rewritten unless the whole input set loads cleanly.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import libcst as cst
from libcst.metadata import MetadataWrapper

from errmigrate.errors import Diagnostic, LoadError

logger = logging.getLogger(__name__)

RECURSIVE_SUFFIX = "..."
GLOB_CHARS = set("*?[")


@dataclass
class SourceFile:
  """
  A parsed source file.

  Attributes:
      path: Absolute path of the file on disk.
      wrapper: The parsed module, wrapped so metadata providers can resolve it.
  """

  path: Path
  wrapper: MetadataWrapper

  @property
  def module(self) -> cst.Module:
    """The parsed syntax tree."""
    return self.wrapper.module


@dataclass
class LoadedPackage:
  """
  The files of one package (one directory).

  Attributes:
      name: Dotted name relative to the root ("." for the root itself).
      path: Directory of the package.
      files: Parsed files, sorted by path.
  """

  name: str
  path: Path
  files: List[SourceFile] = field(default_factory=list)


def _is_skipped_dir(path: Path) -> bool:
  return path.name.startswith(".") or path.name == "__pycache__"


def _package_files(directory: Path) -> List[Path]:
  return sorted(p for p in directory.glob("*.py") if p.is_file())


def _tree_files(directory: Path) -> List[Path]:
  found = []
  for path in sorted(directory.rglob("*.py")):
    rel_parts = path.relative_to(directory).parts[:-1]
    if any(_is_skipped_dir(Path(part)) for part in rel_parts):
      continue
    if path.is_file():
      found.append(path)
  return found


def _is_dotted(pattern: str) -> bool:
  return all(part.isidentifier() for part in pattern.split("."))


class SourceLoader:
  """
  Loads packages for migration.

  Attributes:
      root_dir (Path): Directory patterns are resolved against.
  """

  def __init__(self, root_dir: Path):
    """
    Args:
        root_dir: Directory patterns are resolved against.
    """
    self.root_dir = root_dir.resolve()

  def resolve(self, patterns: Iterable[str]) -> Tuple[List[Path], List[Diagnostic]]:
    """
    Expands patterns into a sorted, de-duplicated list of files.

    Args:
        patterns: Package patterns.

    Returns:
        Tuple[List[Path], List[Diagnostic]]: Matched files and resolution problems.
    """
    diagnostics: List[Diagnostic] = []
    files: Dict[Path, None] = {}

    if not self.root_dir.is_dir():
      diagnostics.append(Diagnostic(message="root directory does not exist", path=self.root_dir))
      return [], diagnostics

    patterns = list(patterns)
    if not patterns:
      diagnostics.append(Diagnostic(message="no package patterns given"))
      return [], diagnostics

    for pattern in patterns:
      matched = self._expand(pattern)
      if not matched:
        diagnostics.append(Diagnostic(message=f"pattern '{pattern}' matched no Python files"))
        continue
      logger.debug("Pattern %r matched %d file(s)", pattern, len(matched))
      for path in matched:
        files[path.resolve()] = None

    return sorted(files), diagnostics

  def _expand(self, pattern: str) -> List[Path]:
    if pattern.endswith(RECURSIVE_SUFFIX):
      base = pattern[: -len(RECURSIVE_SUFFIX)].rstrip("/") or "."
      directory = self.root_dir / base
      return _tree_files(directory) if directory.is_dir() else []

    if GLOB_CHARS & set(pattern):
      return sorted(p for p in self.root_dir.glob(pattern) if p.is_file() and p.suffix == ".py")

    candidate = self.root_dir / pattern
    if candidate.is_dir():
      return _package_files(candidate)
    if candidate.is_file():
      return [candidate] if candidate.suffix == ".py" else []

    if _is_dotted(pattern):
      as_path = self.root_dir.joinpath(*pattern.split("."))
      if as_path.is_dir():
        return _package_files(as_path)
      module_file = as_path.with_suffix(".py")
      if module_file.is_file():
        return [module_file]

    return []

  def parse_file(self, path: Path) -> SourceFile:
    """
    Parses a single file.

    The raw bytes are handed to LibCST so the file's encoding and newline
    style are detected and preserved on output.

    Args:
        path: File to parse.

    Returns:
        SourceFile: The parsed file.

    Raises:
        OSError: If the file cannot be read.
        libcst.ParserSyntaxError: If the file is not valid Python.
    """
    source = path.read_bytes()
    module = cst.parse_module(source)
    return SourceFile(path=path, wrapper=MetadataWrapper(module, unsafe_skip_copy=True))

  def load(self, patterns: Iterable[str]) -> List[LoadedPackage]:
    """
    Resolves and parses all packages.

    Args:
        patterns: Package patterns.

    Returns:
        List[LoadedPackage]: Packages sorted by directory.

    Raises:
        LoadError: If any pattern fails to resolve or any file fails to parse.
    """
    paths, diagnostics = self.resolve(patterns)

    parsed: List[SourceFile] = []
    for path in paths:
      try:
        parsed.append(self.parse_file(path))
      except cst.ParserSyntaxError as e:
        diagnostics.append(Diagnostic(message=e.message, path=path, line=e.raw_line, column=e.raw_column))
      except (OSError, UnicodeDecodeError, LookupError, SyntaxError) as e:
        diagnostics.append(Diagnostic(message=str(e), path=path))

    if diagnostics:
      raise LoadError(diagnostics)

    return self._group(parsed)

  def _group(self, files: List[SourceFile]) -> List[LoadedPackage]:
    packages: Dict[Path, LoadedPackage] = {}
    for source in files:
      directory = source.path.parent
      pkg = packages.get(directory)
      if pkg is None:
        pkg = LoadedPackage(name=self._package_name(directory), path=directory)
        packages[directory] = pkg
      pkg.files.append(source)
    return [packages[d] for d in sorted(packages)]

  def _package_name(self, directory: Path) -> str:
    try:
      rel = directory.relative_to(self.root_dir)
    except ValueError:
      return str(directory)
    return ".".join(rel.parts) or "."
