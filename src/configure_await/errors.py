"""
Exception hierarchy for fix application.

Classification and detection never raise on a well-formed tree. Rewrites do,
whenever the tree does not have the shape a diagnostic promised.
"""


class ConfigureAwaitError(Exception):
  """Base class for all errors raised by the fix pipeline."""


class DiagnosticMismatchError(ConfigureAwaitError):
  """
  Raised when a fix is requested for a location or tag that does not match
  a correctly shaped ``await`` expression in the tree.
  """


class OverlappingEditsError(ConfigureAwaitError):
  """
  Raised when two edits of a batch touch overlapping spans.

  The batch is aborted and no tree is produced.
  """

  def __init__(self, first, second):
    self.first = first
    self.second = second
    super().__init__(f"Edits overlap: {first} and {second}")
