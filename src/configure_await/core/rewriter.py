"""
Await Rewriter.

Pure, shape-preserving edits of a single ``await`` node. Both operations
return a new node; the input node and the tree holding it are untouched.

- `fix_missing`: ``await E``  ->  ``await E.ConfigureAwait(False)``
- `fix_true`: ``await E.ConfigureAwait(True)``  ->  ``await E.ConfigureAwait(False)``

Each operation verifies its precondition and postcondition with the
classifier and raises `DiagnosticMismatchError` rather than returning an
unchanged or half-edited node.
"""

import libcst as cst

from configure_await.analysis.classifier import classify, find_configuration_call
from configure_await.config import DEFAULT_CONFIGURE_METHOD
from configure_await.enums import ConfigurationState
from configure_await.errors import DiagnosticMismatchError


def _false_literal() -> cst.Name:
  return cst.Name("False")


def _check_state(node: cst.Await, method_name: str, expected: ConfigurationState, phase: str) -> None:
  actual = classify(node.expression, method_name)
  if actual is not expected:
    raise DiagnosticMismatchError(f"{phase}: expected operand state '{expected.value}', found '{actual.value}'")


def _as_receiver(operand: cst.BaseExpression) -> cst.BaseExpression:
  # `1.ConfigureAwait` does not tokenize; integers need parentheses to take an attribute.
  if isinstance(operand, cst.Integer) and not operand.lpar:
    return operand.with_changes(lpar=[cst.LeftParen()], rpar=[cst.RightParen()])
  return operand


def fix_missing(node: cst.Await, method_name: str = DEFAULT_CONFIGURE_METHOD) -> cst.Await:
  """
  Appends ``.<method_name>(False)`` to the awaited operand.

  The operand is reused verbatim as the receiver of the new call, including
  any parentheses and comments it carries.

  Args:
      node: An await whose operand is unconfigured.
      method_name: Name of the configuration method.

  Returns:
      cst.Await: The rewritten await.

  Raises:
      DiagnosticMismatchError: If the operand already has a configuration call.
  """
  _check_state(node, method_name, ConfigurationState.UNCONFIGURED, "fix_missing")

  configured = cst.Call(
    func=cst.Attribute(value=_as_receiver(node.expression), attr=cst.Name(method_name)),
    args=[cst.Arg(value=_false_literal())],
  )
  new_node = node.with_changes(expression=configured)

  _check_state(new_node, method_name, ConfigurationState.CONFIGURED_FALSE, "fix_missing")
  return new_node


def fix_true(node: cst.Await, method_name: str = DEFAULT_CONFIGURE_METHOD) -> cst.Await:
  """
  Replaces the ``True`` literal of the configuration call with ``False``.

  Only the literal itself changes. Receiver, method name, argument keyword,
  whitespace, trailing commas and any further arguments are kept.

  Args:
      node: An await configured with a literal ``True``.
      method_name: Name of the configuration method.

  Returns:
      cst.Await: The rewritten await.

  Raises:
      DiagnosticMismatchError: If the operand is not configured with ``True``.
  """
  _check_state(node, method_name, ConfigurationState.CONFIGURED_TRUE, "fix_true")

  call = find_configuration_call(node.expression, method_name)
  first = call.args[0]
  literal = first.value.with_changes(value="False")
  new_call = call.with_changes(args=[first.with_changes(value=literal), *call.args[1:]])
  new_node = node.with_changes(expression=new_call)

  _check_state(new_node, method_name, ConfigurationState.CONFIGURED_FALSE, "fix_true")
  return new_node
