"""
Configuration Classifier.

Determines the context-capture state of an awaited operand purely from its
syntax. Only the outermost call of the operand is inspected:

    await op()                          -> UNCONFIGURED
    await op().ConfigureAwait(True)     -> CONFIGURED_TRUE
    await op().ConfigureAwait(False)    -> CONFIGURED_FALSE
    await op().ConfigureAwait(flag)     -> UNKNOWN

Non-literal arguments are never evaluated, so ``flag`` above stays UNKNOWN
even when it is provably ``False``.
"""

from typing import Optional

import libcst as cst

from configure_await.config import DEFAULT_CONFIGURE_METHOD
from configure_await.enums import ConfigurationState

_LITERAL_STATES = {
  "True": ConfigurationState.CONFIGURED_TRUE,
  "False": ConfigurationState.CONFIGURED_FALSE,
}


def find_configuration_call(
  operand: cst.BaseExpression, method_name: str = DEFAULT_CONFIGURE_METHOD
) -> Optional[cst.Call]:
  """
  Returns the operand itself if it is a ``<receiver>.<method_name>(...)`` call.

  Args:
      operand: The expression following ``await``.
      method_name: Name of the configuration method.

  Returns:
      Optional[cst.Call]: The configuration call, or None.
  """
  if not isinstance(operand, cst.Call):
    return None
  func = operand.func
  if isinstance(func, cst.Attribute) and func.attr.value == method_name:
    return operand
  return None


def literal_argument(call: cst.Call) -> Optional[str]:
  """
  Extracts the boolean literal passed as the first argument of ``call``.

  Args:
      call: A configuration call.

  Returns:
      Optional[str]: ``"True"`` or ``"False"``, or None when the first argument
      is missing, unpacked, or anything other than a bare boolean literal.
  """
  if not call.args:
    return None
  first = call.args[0]
  if first.star:
    return None
  value = first.value
  if isinstance(value, cst.Name) and value.value in _LITERAL_STATES:
    return value.value
  return None


def classify(operand: cst.BaseExpression, method_name: str = DEFAULT_CONFIGURE_METHOD) -> ConfigurationState:
  """
  Classifies an awaited operand.

  Args:
      operand: The expression following ``await``.
      method_name: Name of the configuration method.

  Returns:
      ConfigurationState: The configuration state derived from the operand's shape.
  """
  call = find_configuration_call(operand, method_name)
  if call is None:
    return ConfigurationState.UNCONFIGURED

  literal = literal_argument(call)
  if literal is None:
    return ConfigurationState.UNKNOWN
  return _LITERAL_STATES[literal]
