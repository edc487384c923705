"""
Main Entry Point for the configure-await CLI.

This module handles argument parsing and dispatches to the command handlers
defined in `configure_await.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from configure_await.config import RuntimeConfig
from configure_await.cli import commands
from configure_await import __version__


def _add_common_options(cmd: argparse.ArgumentParser) -> None:
  cmd.add_argument("path", type=Path, help="Input source file or directory")
  cmd.add_argument("--diagnostic-id", default=None, help="Rule identifier (default: from toml, else CAA0001)")
  cmd.add_argument(
    "--method",
    default=None,
    help="Configuration method name (default: from toml, else ConfigureAwait)",
  )
  cmd.add_argument("--exclude", nargs="*", default=None, help="Glob patterns of files to skip")


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="configure-await: enforce ConfigureAwait(False) on every await")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CHECK ---
  cmd_check = subparsers.add_parser("check", help="Report awaits that do not disable context capture")
  _add_common_options(cmd_check)
  cmd_check.add_argument("--json", action="store_true", help="Print diagnostics as JSON")

  # --- Command: FIX ---
  cmd_fix = subparsers.add_parser("fix", help="Rewrite awaits to use ConfigureAwait(False)")
  _add_common_options(cmd_fix)
  cmd_fix.add_argument("--dry-run", action="store_true", help="Report fixes without writing files")
  cmd_fix.add_argument("--diff", action="store_true", help="Print every edit as a before/after pair")

  args = parser.parse_args(argv)

  search_path = args.path if args.path.is_dir() else args.path.parent
  try:
    config = RuntimeConfig.load(
      diagnostic_id=args.diagnostic_id,
      configure_method=args.method,
      exclude=args.exclude,
      search_path=search_path,
    )
  except ValueError as e:
    parser.error(str(e))

  if args.command == "check":
    return commands.handle_check(args.path, config, args.json)

  elif args.command == "fix":
    return commands.handle_fix(args.path, config, args.dry_run, args.diff)

  return 0


if __name__ == "__main__":
  sys.exit(main())
