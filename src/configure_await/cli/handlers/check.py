"""
Check Command Handler.

Reports non-conforming await expressions without modifying any file.
"""

import json
from pathlib import Path
from typing import List

from rich.table import Table

from configure_await.config import RuntimeConfig
from configure_await.core.engine import CheckEngine, iter_source_files
from configure_await.core.results import AnalysisResult
from configure_await.utils.console import console, log_error, log_info, log_success


def _render_table(results: List[AnalysisResult]) -> Table:
  table = Table(title="Await Diagnostics")
  table.add_column("Location", style="cyan")
  table.add_column("Rule", style="bold")
  table.add_column("Tag", style="magenta")
  table.add_column("Message", style="yellow")

  for result in results:
    for d in result.diagnostics:
      table.add_row(
        f"{result.path}:{d.location.start_line}:{d.location.start_column}",
        d.id,
        d.tag.value,
        d.message,
      )
  return table


def handle_check(path: Path, config: RuntimeConfig, json_mode: bool = False) -> int:
  """
  Scans a file or directory for await diagnostics.

  Args:
      path: Input source file or directory.
      config: Resolved runtime configuration.
      json_mode: If True, print a JSON document to stdout instead of a table.

  Returns:
      int: Exit code (0 if clean, 1 if diagnostics or unreadable files were found).
  """
  if not path.exists():
    log_error(f"Path not found: {path}")
    return 1

  files = iter_source_files(path, config.exclude)
  if not json_mode:
    log_info(f"Checking {len(files)} files...")

  engine = CheckEngine(config)
  batch = engine.check_files(files)

  for failed in batch.failed:
    log_error(f"Failed to analyse [path]{failed.path}[/path]: {'; '.join(failed.errors)}")

  diagnostics = batch.diagnostics

  if json_mode:
    output = []
    for result in batch.results:
      for d in result.diagnostics:
        item = d.model_dump(mode="json")
        item["path"] = result.path
        output.append(item)
    print(json.dumps(output, indent=2))
    return 1 if diagnostics or batch.failed else 0

  if diagnostics:
    console.print(_render_table(batch.results))
  else:
    log_success("No await diagnostics found.")

  console.print(f"[bold]Checked {len(batch.results)} files[/bold], {len(diagnostics)} diagnostics")
  return 1 if diagnostics or batch.failed else 0
