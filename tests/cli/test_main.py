"""
Tests for the CLI entry point.

Verifies that:
1.  `check` exits 1 when diagnostics exist and 0 on clean code.
2.  `check --json` prints machine-readable diagnostics.
3.  `fix` rewrites files unless `--dry-run` is given.
4.  Arguments are dispatched to the command handlers with a resolved config.
"""

import json
from unittest.mock import patch

import pytest

from configure_await.cli.__main__ import main

DIRTY = "async def main():\n    await DoWorkAsync()\n"
CLEAN = "async def main():\n    await DoWorkAsync().ConfigureAwait(False)\n"


def test_check_dirty_file(write_source):
  target = write_source("a.py", DIRTY)
  assert main(["check", str(target)]) == 1


def test_check_clean_file(write_source):
  target = write_source("a.py", CLEAN)
  assert main(["check", str(target)]) == 0


def test_check_missing_path(tmp_path):
  assert main(["check", str(tmp_path / "nope.py")]) == 1


def test_check_json(write_source, capsys):
  target = write_source("a.py", DIRTY)
  assert main(["check", str(target), "--json", "--diagnostic-id", "ASYNC7"]) == 1

  payload = json.loads(capsys.readouterr().out)
  assert payload == [
    {
      "id": "ASYNC7",
      "tag": "missing",
      "location": {"start_line": 2, "start_column": 4, "end_line": 2, "end_column": 23},
      "message": "Await expression is missing 'ConfigureAwait(False)'",
      "severity": "warning",
      "path": str(target),
    }
  ]


def test_fix_in_place(write_source):
  target = write_source("a.py", DIRTY)
  assert main(["fix", str(target)]) == 0
  assert target.read_text(encoding="utf-8") == CLEAN


def test_fix_dry_run_with_diff(write_source, capsys):
  target = write_source("a.py", DIRTY)
  assert main(["fix", str(target), "--dry-run", "--diff"]) == 0
  assert target.read_text(encoding="utf-8") == DIRTY
  out = capsys.readouterr().out
  assert "await DoWorkAsync().ConfigureAwait(False)" in out


def test_fix_reports_unfixable_file(write_source):
  target = write_source("a.py", "async def main():\n    await outer(await inner())\n")
  assert main(["fix", str(target)]) == 1
  assert "await outer(await inner())" in target.read_text(encoding="utf-8")


def test_fix_directory_respects_exclude(write_source, tmp_path):
  kept = write_source("src/a.py", DIRTY)
  skipped = write_source("gen/b.py", DIRTY)
  assert main(["fix", str(tmp_path), "--exclude", "gen/*"]) == 0
  assert kept.read_text(encoding="utf-8") == CLEAN
  assert skipped.read_text(encoding="utf-8") == DIRTY


@patch("configure_await.cli.commands.handle_check")
def test_check_dispatch(mock_handle, tmp_path):
  mock_handle.return_value = 0
  main(["check", str(tmp_path), "--method", "configure_await"])

  mock_handle.assert_called_once()
  path, config, json_mode = mock_handle.call_args[0]
  assert path == tmp_path
  assert config.configure_method == "configure_await"
  assert json_mode is False


def test_invalid_method_is_usage_error(tmp_path):
  with pytest.raises(SystemExit) as exc:
    main(["check", str(tmp_path), "--method", "not.valid"])
  assert exc.value.code == 2


def test_check_json_stays_parseable_with_broken_file(write_source, tmp_path, capsys):
  write_source("a.py", DIRTY)
  write_source("b.py", "def broken(:\n")
  assert main(["check", str(tmp_path), "--json"]) == 1

  captured = capsys.readouterr()
  payload = json.loads(captured.out)
  assert [item["tag"] for item in payload] == ["missing"]
  assert "Failed to analyse" in " ".join(captured.err.split())


def test_fix_diff_labels_edits(write_source, capsys):
  target = write_source("a.py", DIRTY)
  assert main(["fix", str(target), "--dry-run", "--diff"]) == 0
  out = " ".join(capsys.readouterr().out.split())
  assert "Add 'ConfigureAwait(false)'" in out
