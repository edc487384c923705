"""
Fix Coordinator.

Maps diagnostics to rewrites and applies them to a module:

1.  **Resolution**: the ``await`` node is found again by its exact span.
2.  **Dispatch**: the diagnostic tag selects a `FixProvider` from the
    explicit `FIX_PROVIDERS` table.
3.  **Application**: `apply_fix` replaces one node; `apply_fix_all` computes
    every edit against the input tree, rejects the batch if any two spans
    overlap, and applies the rest in a single transformer pass.

The input module is never mutated. Either every edit of a batch lands in the
returned module or an exception is raised and nothing is returned.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

import libcst as cst

from configure_await.analysis.detector import scan_awaits
from configure_await.config import RuntimeConfig
from configure_await.core.diagnostics import Diagnostic, Span
from configure_await.core.rewriter import fix_missing, fix_true
from configure_await.enums import FixKind
from configure_await.errors import DiagnosticMismatchError, OverlappingEditsError
from configure_await.utils.node_diff import diff_nodes


@dataclass(frozen=True)
class FixProvider:
  """
  A registered code fix.

  Attributes:
      title: Label shown to users when offering the fix.
      rewrite: The Rewriter operation.
  """

  title: str
  rewrite: Callable[[cst.Await, str], cst.Await]


FIX_PROVIDERS: Dict[FixKind, FixProvider] = {
  FixKind.MISSING: FixProvider(
    title="Add 'ConfigureAwait(false)'",
    rewrite=fix_missing,
  ),
  FixKind.CONFIGURED_TRUE: FixProvider(
    title="Set 'ConfigureAwait' to false",
    rewrite=fix_true,
  ),
}


@dataclass(frozen=True)
class Edit:
  """
  Replacement of one await node.

  Attributes:
      kind: The diagnostic tag the edit fixes.
      target: Span of the replaced node in the input tree.
      original: The node as found in the input tree.
      replacement: The rewritten node.
  """

  kind: FixKind
  target: Span
  original: cst.Await
  replacement: cst.Await

  def preview(self) -> tuple[str, str]:
    """
    Renders the edit as (before, after) source snippets.

    Returns:
        tuple[str, str]: Source of the original and the replacement node.
    """
    before, after, _ = diff_nodes(self.original, self.replacement)
    return before, after

  @property
  def title(self) -> str:
    """Label of the registered fix that produced this edit."""
    return FIX_PROVIDERS[self.kind].title


def get_fix_provider(tag: FixKind) -> FixProvider:
  """
  Looks up the fix registered for a diagnostic tag.

  Args:
      tag: The diagnostic tag.

  Returns:
      FixProvider: The registered fix.

  Raises:
      DiagnosticMismatchError: If no fix is registered for ``tag``.
  """
  try:
    return FIX_PROVIDERS[FixKind(tag)]
  except (KeyError, ValueError):
    raise DiagnosticMismatchError(f"No fix registered for tag '{tag}'") from None


def _resolve(index: Dict[Span, cst.Await], diagnostic: Diagnostic) -> cst.Await:
  node = index.get(diagnostic.location)
  if node is None:
    raise DiagnosticMismatchError(f"No await expression at {diagnostic.location}")
  return node


def _build_edit(node: cst.Await, diagnostic: Diagnostic, method_name: str) -> Edit:
  provider = get_fix_provider(diagnostic.tag)
  replacement = provider.rewrite(node, method_name)
  return Edit(kind=FixKind(diagnostic.tag), target=diagnostic.location, original=node, replacement=replacement)


def compute_edit(tree: cst.Module, diagnostic: Diagnostic, config: Optional[RuntimeConfig] = None) -> Edit:
  """
  Computes the edit that fixes one diagnostic.

  Args:
      tree: The module the diagnostic was reported on.
      diagnostic: The diagnostic to fix.
      config: Runtime settings (configuration method name).

  Returns:
      Edit: The replacement for the diagnosed await.

  Raises:
      DiagnosticMismatchError: If the location or the tag does not match the tree.
  """
  config = config or RuntimeConfig()
  index = {span: node for node, span in scan_awaits(tree)}
  return _build_edit(_resolve(index, diagnostic), diagnostic, config.configure_method)


def compute_edits(
  tree: cst.Module, diagnostics: Iterable[Diagnostic], config: Optional[RuntimeConfig] = None
) -> List[Edit]:
  """
  Computes one edit per diagnostic, each against the unmodified tree.

  Args:
      tree: The module the diagnostics were reported on.
      diagnostics: Diagnostics to fix.
      config: Runtime settings.

  Returns:
      List[Edit]: Edits in document order.

  Raises:
      DiagnosticMismatchError: If any diagnostic does not match the tree.
      OverlappingEditsError: If two edits touch overlapping spans.
  """
  config = config or RuntimeConfig()
  index = {span: node for node, span in scan_awaits(tree)}

  edits = [_build_edit(_resolve(index, d), d, config.configure_method) for d in diagnostics]
  edits.sort(key=lambda e: (e.target.start, e.target.end))

  # Sorted by start, so any overlap shows up between neighbours.
  for previous, current in zip(edits, edits[1:]):
    if previous.target.overlaps(current.target):
      raise OverlappingEditsError(previous.target, current.target)

  return edits


class _EditApplier(cst.CSTTransformer):
  """
  Swaps await nodes for their replacements, matching by node identity.
  """

  def __init__(self, edits: List[Edit]) -> None:
    self._replacements = {id(edit.original): edit.replacement for edit in edits}
    self.applied = 0

  def leave_Await(self, original_node: cst.Await, updated_node: cst.Await) -> cst.BaseExpression:
    replacement = self._replacements.get(id(original_node))
    if replacement is None:
      return updated_node
    self.applied += 1
    return replacement


def apply_edits(tree: cst.Module, edits: List[Edit]) -> cst.Module:
  """
  Applies pre-validated, span-disjoint edits in a single pass.

  Args:
      tree: The module the edits were computed against.
      edits: Edits returned by `compute_edit` / `compute_edits`.

  Returns:
      cst.Module: A new module with every edit applied.

  Raises:
      DiagnosticMismatchError: If an edit's target is not part of ``tree``.
  """
  if not edits:
    return tree

  applier = _EditApplier(edits)
  new_tree = tree.visit(applier)
  if applier.applied != len(edits):
    raise DiagnosticMismatchError(f"Applied {applier.applied} of {len(edits)} edits; tree does not match the edits")
  return new_tree


def apply_fix(tree: cst.Module, diagnostic: Diagnostic, config: Optional[RuntimeConfig] = None) -> cst.Module:
  """
  Fixes a single diagnostic.

  Args:
      tree: The module the diagnostic was reported on.
      diagnostic: The diagnostic to fix.
      config: Runtime settings.

  Returns:
      cst.Module: A new module with the diagnosed await replaced.

  Raises:
      DiagnosticMismatchError: If the diagnostic does not match the tree.
  """
  return apply_edits(tree, [compute_edit(tree, diagnostic, config)])


def apply_fix_all(
  tree: cst.Module, diagnostics: Iterable[Diagnostic], config: Optional[RuntimeConfig] = None
) -> cst.Module:
  """
  Fixes a batch of diagnostics atomically.

  Args:
      tree: The module the diagnostics were reported on.
      diagnostics: Diagnostics to fix, in any order.
      config: Runtime settings.

  Returns:
      cst.Module: A new module with every diagnosed await replaced.

  Raises:
      DiagnosticMismatchError: If any diagnostic does not match the tree.
      OverlappingEditsError: If two diagnostics resolve to overlapping spans.
  """
  return apply_edits(tree, compute_edits(tree, diagnostics, config))
