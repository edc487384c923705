"""
CLI Command Handlers Facade.
"""

from configure_await.cli.handlers.check import handle_check
from configure_await.cli.handlers.fix import handle_fix

__all__ = [
  "handle_check",
  "handle_fix",
]
