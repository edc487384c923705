"""
configure-await Package.

Detects ``await`` expressions that do not disable context capture and
rewrites them to ``await <operand>.ConfigureAwait(False)``.

Usage
-----

.. code-block:: python

    import libcst as cst
    from configure_await import detect, apply_fix_all

    tree = cst.parse_module(code)
    diagnostics = list(detect(tree))
    fixed = apply_fix_all(tree, diagnostics)
    print(fixed.code)

For plain strings, `fix` wraps the same steps:

.. code-block:: python

    import configure_await as ca
    ca.fix("async def f():\\n    await g()\\n")
    # 'async def f():\\n    await g().ConfigureAwait(False)\\n'
"""

from typing import Optional

__version__ = "0.1.0"

from configure_await.analysis.classifier import classify
from configure_await.analysis.detector import detect
from configure_await.config import RuntimeConfig
from configure_await.core.diagnostics import Diagnostic, Span
from configure_await.core.engine import CheckEngine
from configure_await.core.fixer import apply_fix, apply_fix_all
from configure_await.enums import ConfigurationState, FixKind
from configure_await.errors import ConfigureAwaitError, DiagnosticMismatchError, OverlappingEditsError


def fix(code: str, config: Optional[RuntimeConfig] = None) -> str:
  """
  Rewrites every non-conforming await in a source string.

  Args:
      code (str): Python source code.
      config (RuntimeConfig, optional): Runtime settings.

  Returns:
      str: The fixed source code.

  Raises:
      ValueError: If the code cannot be parsed or fixed.
  """
  result = CheckEngine(config).fix(code)
  if not result.success:
    raise ValueError("\n".join(result.errors))
  return result.code


__all__ = [
  "CheckEngine",
  "ConfigurationState",
  "ConfigureAwaitError",
  "Diagnostic",
  "DiagnosticMismatchError",
  "FixKind",
  "OverlappingEditsError",
  "RuntimeConfig",
  "Span",
  "__version__",
  "apply_fix",
  "apply_fix_all",
  "classify",
  "detect",
  "fix",
]
