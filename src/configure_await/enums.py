"""
Enumerations for configure-await.

This module defines the classification states computed for each ``await``
expression and the diagnostic tags that select a fix strategy.
"""

from enum import Enum


class ConfigurationState(str, Enum):
  """
  Context-capture configuration of an awaited operand.

  Derived from the operand's syntax on every inspection; never stored.
  """

  UNCONFIGURED = "unconfigured"  # no configuration call
  CONFIGURED_TRUE = "configured_true"  # .ConfigureAwait(True)
  CONFIGURED_FALSE = "configured_false"  # .ConfigureAwait(False)
  UNKNOWN = "unknown"  # .ConfigureAwait(<non-literal>)


class FixKind(str, Enum):
  """
  Diagnostic tag identifying which rewrite applies.

  The values are the tags stamped on emitted diagnostics.
  """

  MISSING = "missing"
  CONFIGURED_TRUE = "true"


class Severity(str, Enum):
  """Reporting level attached to diagnostics."""

  WARNING = "warning"
  ERROR = "error"
