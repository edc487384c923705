"""
Fix Command Handler.

Rewrites non-conforming await expressions in place, or previews the edits.
"""

from pathlib import Path

import libcst as cst
from rich.markup import escape

from configure_await.analysis.detector import detect
from configure_await.config import RuntimeConfig
from configure_await.core.engine import CheckEngine, iter_source_files, read_source
from configure_await.core.fixer import compute_edits
from configure_await.errors import ConfigureAwaitError
from configure_await.utils.console import console, log_error, log_info, log_success, log_warning


def _print_preview(engine: CheckEngine, path: Path) -> None:
  """
  Prints the edits the fix pass will make to ``path``.

  Unparseable or unfixable files print nothing here; the fix pass reports them.
  """
  try:
    code, _ = read_source(path)
    tree = engine.parse(code)
    edits = compute_edits(tree, detect(tree, engine.config), engine.config)
  except (OSError, UnicodeDecodeError, cst.ParserSyntaxError, ConfigureAwaitError):
    return

  for edit in edits:
    before, after = edit.preview()
    console.print(f"[path]{path}[/path]:{edit.target.start_line} {escape(edit.title)}")
    console.print(f"  [red]- {escape(before)}[/red]", highlight=False)
    console.print(f"  [green]+ {escape(after)}[/green]", highlight=False)


def handle_fix(path: Path, config: RuntimeConfig, dry_run: bool = False, show_diff: bool = False) -> int:
  """
  Fixes every diagnosed await in a file or directory.

  Args:
      path: Input source file or directory.
      config: Resolved runtime configuration.
      dry_run: If True, files are not written.
      show_diff: If True, print each edit as a before/after pair.

  Returns:
      int: Exit code (0 on success, 1 if any file could not be fixed).
  """
  if not path.exists():
    log_error(f"Path not found: {path}")
    return 1

  files = iter_source_files(path, config.exclude)
  if not files:
    log_warning(f"No .py files found in {path}")
    return 0

  log_info(f"Processing {len(files)} files from {path}...")

  engine = CheckEngine(config)

  # Previews are computed from the files as they are before the fix pass writes.
  if show_diff:
    for f in files:
      _print_preview(engine, f)

  batch = engine.fix_files(files, write=not dry_run)

  fixed_total = 0
  verb = "Would fix" if dry_run else "Fixed"
  for result in batch.results:
    if not result.success:
      log_error(f"Failed to fix [path]{result.path}[/path]: {'; '.join(result.errors)}")
      continue
    if result.diagnostics:
      fixed_total += len(result.diagnostics)
      log_success(f"{verb} {len(result.diagnostics)} awaits in [path]{result.path}[/path]")

  console.print(f"[bold]{fixed_total} awaits fixed[/bold] across {len(batch.results)} files")
  return 1 if batch.failed else 0
