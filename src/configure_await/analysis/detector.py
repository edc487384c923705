"""
Await Detector.

Walks a LibCST module, classifies every ``await`` expression and emits a
`Diagnostic` for each one that does not disable context capture.

Diagnostics are produced in document order. Each call to `detect` is an
independent pass over the tree; nothing is cached between calls.
"""

from typing import Iterator, List, Optional, Tuple

import libcst as cst
from libcst.metadata import MetadataWrapper, PositionProvider

from configure_await.analysis.classifier import classify
from configure_await.config import RuntimeConfig
from configure_await.core.diagnostics import Diagnostic, Span
from configure_await.enums import ConfigurationState, FixKind

_REPORTED_STATES = {
  ConfigurationState.UNCONFIGURED: FixKind.MISSING,
  ConfigurationState.CONFIGURED_TRUE: FixKind.CONFIGURED_TRUE,
}


class AwaitScanner(cst.CSTVisitor):
  """
  Collects every ``await`` node of a module together with its source span.

  Must be run through a `MetadataWrapper` so that positions are available.

  Attributes:
      awaits (List[Tuple[cst.Await, Span]]): Await nodes in pre-order
          (document) order.
  """

  METADATA_DEPENDENCIES = (PositionProvider,)

  def __init__(self) -> None:
    self.awaits: List[Tuple[cst.Await, Span]] = []

  def visit_Await(self, node: cst.Await) -> Optional[bool]:
    """
    Records the await node and keeps descending, since the operand may
    itself contain awaits.
    """
    code_range = self.get_metadata(PositionProvider, node)
    self.awaits.append((node, Span.from_code_range(code_range)))
    return True


def scan_awaits(tree: cst.Module) -> List[Tuple[cst.Await, Span]]:
  """
  Lists the await nodes of ``tree`` with their spans.

  The wrapper is built with ``unsafe_skip_copy`` so the returned nodes are
  the very objects held by ``tree`` and can be used as replacement targets.

  Args:
      tree: The module to scan.

  Returns:
      List[Tuple[cst.Await, Span]]: Await nodes in document order.
  """
  wrapper = MetadataWrapper(tree, unsafe_skip_copy=True)
  scanner = AwaitScanner()
  wrapper.visit(scanner)
  return scanner.awaits


def detect(tree: cst.Module, config: Optional[RuntimeConfig] = None) -> Iterator[Diagnostic]:
  """
  Yields a diagnostic for every await whose operand is unconfigured or
  configured with a literal ``True``.

  Awaits configured with ``False`` or with a non-literal argument produce
  nothing.

  Args:
      tree: The parsed module.
      config: Runtime settings (rule id, method name, severity).

  Yields:
      Diagnostic: Violations in document order.
  """
  config = config or RuntimeConfig()

  for node, span in scan_awaits(tree):
    state = classify(node.expression, config.configure_method)
    tag = _REPORTED_STATES.get(state)
    if tag is None:
      continue
    yield Diagnostic.create(
      config.diagnostic_id,
      tag,
      span,
      config.configure_method,
      severity=config.severity,
    )
