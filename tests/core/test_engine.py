"""
Tests for the CheckEngine.

Verifies:
1.  String-level check/fix including parse failures.
2.  Fix failures are surfaced on the result with the input code preserved.
3.  File batches honour exclusion globs, in-place writing and cancellation.
"""

import codecs
import threading
from unittest.mock import MagicMock

from configure_await.config import RuntimeConfig
from configure_await.core.engine import CheckEngine, iter_source_files, read_source, write_source
from configure_await.core.results import FixResult
from configure_await.enums import FixKind

CODE = "async def main():\n    await a()\n    await b().ConfigureAwait(True)\n    await c().ConfigureAwait(False)\n"
FIXED = (
  "async def main():\n"
  "    await a().ConfigureAwait(False)\n"
  "    await b().ConfigureAwait(False)\n"
  "    await c().ConfigureAwait(False)\n"
)


def test_check_reports_in_order():
  result = CheckEngine().check(CODE)
  assert result.success
  assert [d.tag for d in result.diagnostics] == [FixKind.MISSING, FixKind.CONFIGURED_TRUE]


def test_check_parse_error():
  result = CheckEngine().check("async def main(:\n")
  assert not result.success
  assert result.has_errors
  assert result.errors[0].startswith("Parse Error")


def test_fix_rewrites_code():
  result = CheckEngine().fix(CODE)
  assert result.success
  assert result.changed
  assert result.code == FIXED
  assert len(result.diagnostics) == 2


def test_fix_clean_code_is_unchanged():
  result = CheckEngine().fix(FIXED)
  assert result.success
  assert not result.changed
  assert result.code == FIXED
  assert result.diagnostics == []


def test_fix_failure_keeps_input():
  code = "async def main():\n    await outer(await inner())\n"
  result = CheckEngine().fix(code)
  assert not result.success
  assert result.code == code
  assert "Fix Error" in result.errors[0]


def test_engine_uses_config():
  engine = CheckEngine(RuntimeConfig(configure_method="configure_await", diagnostic_id="X1"))
  result = engine.fix("async def main():\n    await a()\n")
  assert result.code == "async def main():\n    await a().configure_await(False)\n"
  assert result.diagnostics[0].id == "X1"


def test_iter_source_files_excludes(write_source, tmp_path):
  write_source("pkg/a.py", "")
  write_source("pkg/b.py", "")
  write_source("tests/test_a.py", "")
  write_source("notes.txt", "")

  files = iter_source_files(tmp_path, ["tests/*", "b.py"])
  assert [f.relative_to(tmp_path).as_posix() for f in files] == ["pkg/a.py"]


def test_iter_source_files_single_file(write_source):
  target = write_source("one.py", "")
  assert iter_source_files(target) == [target]


def test_check_files_concatenates_per_file(write_source, tmp_path):
  write_source("a.py", CODE)
  write_source("b.py", FIXED)
  write_source("c.py", "def broken(:\n")

  batch = CheckEngine().check_files(iter_source_files(tmp_path))
  assert not batch.cancelled
  assert [r.path.endswith(name) for r, name in zip(batch.results, ["a.py", "b.py", "c.py"])] == [True] * 3
  assert len(batch.diagnostics) == 2
  assert len(batch.failed) == 1


def test_fix_files_writes_in_place(write_source):
  target = write_source("a.py", CODE)
  batch = CheckEngine().fix_files([target])
  assert isinstance(batch.results[0], FixResult)
  assert target.read_text(encoding="utf-8") == FIXED


def test_fix_files_dry_run(write_source):
  target = write_source("a.py", CODE)
  batch = CheckEngine().fix_files([target], write=False)
  assert batch.results[0].code == FIXED
  assert target.read_text(encoding="utf-8") == CODE


def test_cancel_before_first_file(write_source):
  target = write_source("a.py", CODE)
  event = threading.Event()
  event.set()
  batch = CheckEngine().check_files([target], cancel_event=event)
  assert batch.cancelled
  assert batch.results == []


def test_cancel_between_files(write_source):
  first = write_source("a.py", CODE)
  second = write_source("b.py", CODE)
  event = MagicMock()
  event.is_set.side_effect = [False, True]

  batch = CheckEngine().fix_files([first, second], cancel_event=event)
  assert batch.cancelled
  assert len(batch.results) == 1
  assert first.read_text(encoding="utf-8") == FIXED
  assert second.read_text(encoding="utf-8") == CODE


def test_fix_files_keeps_crlf_line_endings(tmp_path):
  target = tmp_path / "a.py"
  target.write_bytes(b"async def main():\r\n    await a()\r\n    x = 1\r\n")

  CheckEngine().fix_files([target])
  assert target.read_bytes() == b"async def main():\r\n    await a().ConfigureAwait(False)\r\n    x = 1\r\n"


def test_fix_files_keeps_byte_order_mark(tmp_path):
  target = tmp_path / "a.py"
  target.write_bytes(codecs.BOM_UTF8 + b"async def main():\n    await a()\n")

  CheckEngine().fix_files([target])
  assert target.read_bytes() == codecs.BOM_UTF8 + b"async def main():\n    await a().ConfigureAwait(False)\n"


def test_read_source_round_trip(tmp_path):
  target = tmp_path / "a.py"
  raw = codecs.BOM_UTF8 + b"x = 1\r\ny = 2\n"
  target.write_bytes(raw)

  code, bom = read_source(target)
  assert code == "x = 1\r\ny = 2\n"
  assert bom == codecs.BOM_UTF8
  write_source(target, code, bom)
  assert target.read_bytes() == raw


def test_nested_await_error_explains_skip():
  result = CheckEngine().fix("async def main():\n    await outer(await inner())\n")
  assert "nested awaits cannot be fixed in one pass" in result.errors[0]
