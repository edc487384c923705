"""
Orchestration Engine for checking and fixing source code.

This module provides the `CheckEngine`, the driver used by the CLI and by
embedding hosts. It owns the parse step and turns library exceptions into
result objects:

1.  **Parsing**: source text becomes a `libcst.Module`. Syntax errors are
    recorded on the result; the unit is skipped.
2.  **Detection**: `detect` produces diagnostics in document order.
3.  **Fixing**: `apply_fix_all` rewrites every diagnosed await in one pass.
    On `ConfigureAwaitError` the original code is kept and the error is
    reported, never silently dropped.

Batch runs process one file at a time. A `threading.Event` passed as
``cancel_event`` is checked before each file; once set, the run stops and
the result is flagged as cancelled. A file that has started is always
finished.
"""

import codecs
import fnmatch
import logging
import threading
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import libcst as cst

from configure_await.analysis.detector import detect
from configure_await.config import RuntimeConfig
from configure_await.core.fixer import apply_fix_all
from configure_await.core.results import AnalysisResult, BatchResult, FixResult
from configure_await.errors import ConfigureAwaitError, OverlappingEditsError

logger = logging.getLogger(__name__)


def read_source(path: Path) -> Tuple[str, bytes]:
  """
  Reads a UTF-8 source file without newline translation.

  Args:
      path: The file to read.

  Returns:
      Tuple[str, bytes]: The code with its original line endings, and the
      byte order mark it started with (empty if none).

  Raises:
      OSError: If the file cannot be read.
      UnicodeDecodeError: If the file is not valid UTF-8.
  """
  raw = path.read_bytes()
  bom = codecs.BOM_UTF8 if raw.startswith(codecs.BOM_UTF8) else b""
  return raw[len(bom) :].decode("utf-8"), bom


def write_source(path: Path, code: str, bom: bytes = b"") -> None:
  """
  Writes code back byte for byte, restoring the byte order mark.

  Args:
      path: The file to write.
      code: Source text, line endings included.
      bom: Prefix returned by `read_source`.
  """
  path.write_bytes(bom + code.encode("utf-8"))


def iter_source_files(path: Path, exclude: Iterable[str] = ()) -> List[Path]:
  """
  Expands a file or directory into the Python files to process.

  Args:
      path: A ``.py`` file or a directory searched recursively.
      exclude: Glob patterns matched against the path relative to ``path``
          (for directories) and against the file name.

  Returns:
      List[Path]: Sorted list of files.
  """
  patterns = list(exclude)
  if path.is_file():
    candidates = [path]
    root = path.parent
  else:
    candidates = sorted(path.rglob("*.py"))
    root = path

  def is_excluded(f: Path) -> bool:
    rel = f.relative_to(root).as_posix()
    return any(fnmatch.fnmatch(rel, p) or fnmatch.fnmatch(f.name, p) for p in patterns)

  return [f for f in candidates if not is_excluded(f)]


class CheckEngine:
  """
  Checks and fixes source units according to a `RuntimeConfig`.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None):
    """
    Initializes the Engine.

    Args:
        config (RuntimeConfig, optional): Runtime settings. Defaults are used if None.
    """
    self.config = config or RuntimeConfig()

  def parse(self, code: str) -> cst.Module:
    """
    Parses source string into a LibCST Module.

    Args:
        code (str): Python source code.

    Returns:
        cst.Module: The parsed tree.

    Raises:
        libcst.ParserSyntaxError: If the input code is invalid Python.
    """
    return cst.parse_module(code)

  def to_source(self, tree: cst.Module) -> str:
    return tree.code

  def check(self, code: str, path: Optional[str] = None) -> AnalysisResult:
    """
    Reports every non-conforming await of ``code``.

    Args:
        code (str): The input source string.
        path (str, optional): Origin of the code, copied onto the result.

    Returns:
        AnalysisResult: Diagnostics in document order, or the parse error.
    """
    try:
      tree = self.parse(code)
    except cst.ParserSyntaxError as e:
      return AnalysisResult(path=path, errors=[f"Parse Error: {e}"], success=False)

    return AnalysisResult(path=path, diagnostics=list(detect(tree, self.config)))

  def fix(self, code: str, path: Optional[str] = None) -> FixResult:
    """
    Rewrites every non-conforming await of ``code``.

    Args:
        code (str): The input source string.
        path (str, optional): Origin of the code, copied onto the result.

    Returns:
        FixResult: The fixed code and the diagnostics it resolved. On failure
        the input code is returned unchanged with ``success=False``.
    """
    try:
      tree = self.parse(code)
    except cst.ParserSyntaxError as e:
      return FixResult(path=path, code=code, errors=[f"Parse Error: {e}"], success=False)

    diagnostics = list(detect(tree, self.config))
    if not diagnostics:
      return FixResult(path=path, code=code)

    try:
      new_tree = apply_fix_all(tree, diagnostics, self.config)
    except ConfigureAwaitError as e:
      message = f"Fix Error: {e}"
      if isinstance(e, OverlappingEditsError):
        message += (
          " (nested awaits cannot be fixed in one pass; fix the inner await by hand,"
          " or rerun after fixing the rest of the file)"
        )
      return FixResult(
        path=path,
        code=code,
        diagnostics=diagnostics,
        errors=[message],
        success=False,
      )

    new_code = self.to_source(new_tree)
    return FixResult(path=path, code=new_code, diagnostics=diagnostics, changed=new_code != code)

  def check_files(self, paths: Iterable[Path], cancel_event: Optional[threading.Event] = None) -> BatchResult:
    """
    Checks files one after another.

    Args:
        paths: Files to analyse.
        cancel_event: Checked before each file; stops the run when set.

    Returns:
        BatchResult: One result per processed file.
    """
    batch = BatchResult()
    for path in paths:
      if cancel_event is not None and cancel_event.is_set():
        logger.info("Check cancelled before %s", path)
        batch.cancelled = True
        break

      try:
        code, _ = read_source(path)
      except (OSError, UnicodeDecodeError) as e:
        batch.results.append(AnalysisResult(path=str(path), errors=[f"Read Error: {e}"], success=False))
        continue

      batch.results.append(self.check(code, path=str(path)))
    return batch

  def fix_files(
    self,
    paths: Iterable[Path],
    write: bool = True,
    cancel_event: Optional[threading.Event] = None,
  ) -> BatchResult:
    """
    Fixes files one after another.

    Args:
        paths: Files to rewrite.
        write: If True, changed files are written back in place.
        cancel_event: Checked before each file; stops the run when set.

    Returns:
        BatchResult: One `FixResult` per processed file.
    """
    batch = BatchResult()
    for path in paths:
      if cancel_event is not None and cancel_event.is_set():
        logger.info("Fix cancelled before %s", path)
        batch.cancelled = True
        break

      try:
        code, bom = read_source(path)
      except (OSError, UnicodeDecodeError) as e:
        batch.results.append(FixResult(path=str(path), errors=[f"Read Error: {e}"], success=False))
        continue

      result = self.fix(code, path=str(path))
      if write and result.success and result.changed:
        write_source(path, result.code, bom)
      batch.results.append(result)
    return batch
