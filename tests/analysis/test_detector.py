"""
Tests for the Await Detector.

Verifies:
1.  Unconfigured awaits are tagged 'missing'; literal True awaits are tagged 'true'.
2.  Awaits configured with False or a non-literal argument are not reported.
3.  Diagnostics are emitted in document order with exact spans.
4.  The rule id and method name follow the runtime configuration.
"""

import types

import libcst as cst

from configure_await.analysis.detector import detect, scan_awaits
from configure_await.config import RuntimeConfig
from configure_await.core.diagnostics import Span
from configure_await.enums import FixKind, Severity


def wrap(body: str) -> str:
  return f"async def main():\n    {body}\n"


def run(code: str, config: RuntimeConfig = None):
  return list(detect(cst.parse_module(code), config))


def test_missing_configuration_is_reported():
  diagnostics = run(wrap("await DoWorkAsync()"))
  assert len(diagnostics) == 1
  d = diagnostics[0]
  assert d.tag is FixKind.MISSING
  assert d.id == "CAA0001"
  assert d.location == Span(start_line=2, start_column=4, end_line=2, end_column=23)


def test_configured_true_is_reported():
  diagnostics = run(wrap("await DoWorkAsync().ConfigureAwait(True)"))
  assert [d.tag for d in diagnostics] == [FixKind.CONFIGURED_TRUE]
  assert "ConfigureAwait(True)" in diagnostics[0].message


def test_configured_false_is_silent():
  assert run(wrap("await DoWorkAsync().ConfigureAwait(False)")) == []


def test_non_literal_argument_is_silent():
  assert run(wrap("await DoWorkAsync().ConfigureAwait(flag)")) == []


def test_document_order():
  code = """
async def first():
    await a()
    await b().ConfigureAwait(True)

async def second():
    x = [await c(), await d().ConfigureAwait(False), await e()]
"""
  diagnostics = run(code)
  assert [d.tag for d in diagnostics] == [FixKind.MISSING, FixKind.CONFIGURED_TRUE, FixKind.MISSING, FixKind.MISSING]
  starts = [d.location.start for d in diagnostics]
  assert starts == sorted(starts)
  assert [d.location.start_line for d in diagnostics] == [3, 4, 7, 7]


def test_nested_awaits_are_each_reported():
  diagnostics = run(wrap("await outer(await inner())"))
  assert len(diagnostics) == 2
  outer, inner = diagnostics
  assert outer.location.start_column < inner.location.start_column
  assert inner.location.end_column < outer.location.end_column


def test_configure_call_without_await_is_ignored():
  assert run("task = DoWorkAsync().ConfigureAwait(True)\n") == []


def test_config_drives_id_method_and_severity():
  config = RuntimeConfig(diagnostic_id="ASYNC42", configure_method="configure_await", severity="error")
  code = wrap("await job().configure_await(True)") + "    await other().ConfigureAwait(False)\n"
  diagnostics = run(code, config)
  assert [(d.id, d.tag) for d in diagnostics] == [("ASYNC42", FixKind.CONFIGURED_TRUE), ("ASYNC42", FixKind.MISSING)]
  assert all(d.severity is Severity.ERROR for d in diagnostics)
  assert "configure_await(False)" in diagnostics[1].message


def test_detect_is_lazy_and_restartable():
  tree = cst.parse_module(wrap("await DoWorkAsync()"))
  gen = detect(tree)
  assert isinstance(gen, types.GeneratorType)
  assert list(gen) == list(detect(tree))


def test_scan_awaits_returns_tree_nodes():
  tree = cst.parse_module(wrap("await DoWorkAsync()"))
  [(node, span)] = scan_awaits(tree)
  body_stmt = tree.body[0].body.body[0]
  assert node is body_stmt.body[0].value
  assert span.start == (2, 4)
