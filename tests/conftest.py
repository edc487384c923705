"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Console isolation so rich output from one test never leaks into another.
- A helper fixture for writing source files into a temporary project.
"""

import sys
import pytest
from pathlib import Path
from typing import Callable

# Add src to path so we can import 'configure_await' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from configure_await.utils.console import reset_console  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_console():
  """Re-binds the console to the (captured) stdout of the running test."""
  reset_console()
  yield
  reset_console()


@pytest.fixture
def write_source(tmp_path: Path) -> Callable[[str, str], Path]:
  """
  Writes a source file below ``tmp_path`` and returns its path.
  """

  def _write(rel_path: str, code: str) -> Path:
    target = tmp_path / rel_path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(code, encoding="utf-8")
    return target

  return _write
