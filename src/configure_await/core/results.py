"""
Data structures representing the output of the check and fix pipelines.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from configure_await.core.diagnostics import Diagnostic


class AnalysisResult(BaseModel):
  """
  Outcome of checking one source unit.
  """

  path: Optional[str] = Field(default=None, description="Source file, if the unit came from disk.")
  diagnostics: List[Diagnostic] = Field(default_factory=list, description="Violations in document order.")
  errors: List[str] = Field(default_factory=list, description="Error messages encountered.")
  success: bool = Field(default=True, description="False if the unit could not be analysed.")

  @property
  def has_errors(self) -> bool:
    return len(self.errors) > 0


class FixResult(AnalysisResult):
  """
  Outcome of fixing one source unit.

  ``diagnostics`` holds the violations that were fixed. On failure ``code``
  is the unchanged input.
  """

  code: str = Field(default="", description="The resulting source code.")
  changed: bool = Field(default=False, description="True if the code differs from the input.")


class BatchResult(BaseModel):
  """
  Per-file results of a multi-file run.
  """

  results: List[AnalysisResult] = Field(default_factory=list, description="Results in processing order.")
  cancelled: bool = Field(default=False, description="True if the run stopped before the last file.")

  @property
  def diagnostics(self) -> List[Diagnostic]:
    """All diagnostics, concatenated file by file."""
    return [d for r in self.results for d in r.diagnostics]

  @property
  def failed(self) -> List[AnalysisResult]:
    """Results of files that could not be processed."""
    return [r for r in self.results if not r.success]
