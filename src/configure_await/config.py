"""
Runtime Configuration Store.

Settings are read from the ``[tool.configure_await]`` table of the nearest
``pyproject.toml`` and overridden by command line arguments.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator

from configure_await.enums import Severity

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

DEFAULT_DIAGNOSTIC_ID = "CAA0001"
DEFAULT_CONFIGURE_METHOD = "ConfigureAwait"


class RuntimeConfig(BaseModel):
  """
  Global configuration container for detection and rewriting.
  """

  diagnostic_id: str = Field(DEFAULT_DIAGNOSTIC_ID, description="Rule identifier stamped on every diagnostic.")
  configure_method: str = Field(
    DEFAULT_CONFIGURE_METHOD,
    description="Name of the method that controls context capture (e.g. 'ConfigureAwait').",
  )
  exclude: List[str] = Field(default_factory=list, description="Glob patterns of files to skip.")
  severity: Severity = Field(Severity.WARNING, description="Reporting level for emitted diagnostics.")

  @field_validator("diagnostic_id")
  @classmethod
  def validate_diagnostic_id(cls, v: str) -> str:
    """
    Rejects blank rule identifiers.

    Args:
        v (str): The raw identifier.

    Returns:
        str: The stripped identifier.

    Raises:
        ValueError: If the identifier is empty.
    """
    v_clean = v.strip()
    if not v_clean:
      raise ValueError("diagnostic_id must not be empty")
    return v_clean

  @field_validator("configure_method")
  @classmethod
  def validate_configure_method(cls, v: str) -> str:
    """
    Ensures the configuration method is a plain attribute name.

    Args:
        v (str): The method name to validate.

    Returns:
        str: The method name.

    Raises:
        ValueError: If the value is not a valid Python identifier.
    """
    v_clean = v.strip()
    if not v_clean.isidentifier():
      raise ValueError(f"configure_method must be an identifier, got '{v}'")
    return v_clean

  @classmethod
  def load(
    cls,
    diagnostic_id: Optional[str] = None,
    configure_method: Optional[str] = None,
    exclude: Optional[List[str]] = None,
    severity: Optional[str] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        diagnostic_id (Optional[str]): Override for the rule identifier.
        configure_method (Optional[str]): Override for the configuration method name.
        exclude (Optional[List[str]]): Extra exclusion globs, appended to the TOML ones.
        severity (Optional[str]): Override for the reporting level.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    final_exclude = [*toml_config.get("exclude", []), *(exclude or [])]

    return cls(
      diagnostic_id=diagnostic_id or toml_config.get("diagnostic_id", DEFAULT_DIAGNOSTIC_ID),
      configure_method=configure_method or toml_config.get("configure_method", DEFAULT_CONFIGURE_METHOD),
      exclude=final_exclude,
      severity=severity or toml_config.get("severity", Severity.WARNING),
    )


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory definition was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except tomllib.TOMLDecodeError:
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get("configure_await", {}), parent

  return {}, None
