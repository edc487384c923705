"""
Diagnostic data structures.

A `Diagnostic` reports one non-conforming ``await`` expression. Its ``tag``
selects the rewrite that fixes it, and its ``location`` is the exact span
LibCST's `PositionProvider` assigns to the ``await`` node, which is how the
fix pipeline finds the node again.
"""

from libcst.metadata import CodeRange
from pydantic import BaseModel, ConfigDict, Field

from configure_await.enums import FixKind, Severity


class Span(BaseModel):
  """
  Source range of a node.

  Lines are 1-based and columns 0-based, matching `libcst.metadata.CodeRange`.
  The end position is exclusive.
  """

  model_config = ConfigDict(frozen=True)

  start_line: int
  start_column: int
  end_line: int
  end_column: int

  @classmethod
  def from_code_range(cls, code_range: CodeRange) -> "Span":
    """
    Builds a Span from LibCST position metadata.

    Args:
        code_range (CodeRange): Range resolved by `PositionProvider`.

    Returns:
        Span: The equivalent span.
    """
    return cls(
      start_line=code_range.start.line,
      start_column=code_range.start.column,
      end_line=code_range.end.line,
      end_column=code_range.end.column,
    )

  @property
  def start(self) -> tuple[int, int]:
    return (self.start_line, self.start_column)

  @property
  def end(self) -> tuple[int, int]:
    return (self.end_line, self.end_column)

  def overlaps(self, other: "Span") -> bool:
    """
    Checks whether two spans share at least one character.

    Args:
        other (Span): The span to compare with.

    Returns:
        bool: True if the half-open ranges intersect.
    """
    return self.start < other.end and other.start < self.end

  def __str__(self) -> str:
    return f"{self.start_line}:{self.start_column}-{self.end_line}:{self.end_column}"


_MESSAGES = {
  FixKind.MISSING: "Await expression is missing '{method}(False)'",
  FixKind.CONFIGURED_TRUE: "Await expression uses '{method}(True)'; it should be '{method}(False)'",
}


class Diagnostic(BaseModel):
  """
  A single rule violation.
  """

  model_config = ConfigDict(frozen=True)

  id: str = Field(description="Stable identifier of the reported rule (e.g. 'CAA0001').")
  tag: FixKind = Field(description="Classification selecting the fix strategy.")
  location: Span = Field(description="Span of the offending await expression.")
  message: str = Field(default="", description="Human readable description.")
  severity: Severity = Field(default=Severity.WARNING, description="Reporting level.")

  @classmethod
  def create(
    cls,
    rule_id: str,
    tag: FixKind,
    location: Span,
    method_name: str,
    severity: Severity = Severity.WARNING,
  ) -> "Diagnostic":
    """
    Builds a diagnostic with the standard message for its tag.

    Args:
        rule_id (str): Identifier to stamp on the diagnostic.
        tag (FixKind): Violation kind.
        location (Span): Span of the await expression.
        method_name (str): Configuration method name used in the message.
        severity (Severity): Reporting level.

    Returns:
        Diagnostic: The populated diagnostic.
    """
    return cls(
      id=rule_id,
      tag=tag,
      location=location,
      message=_MESSAGES[tag].format(method=method_name),
      severity=severity,
    )

  def __str__(self) -> str:
    return f"{self.location.start_line}:{self.location.start_column}: {self.id} {self.message}"
