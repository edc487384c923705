"""
Entry point for module execution (``python -m configure_await``).
"""

import sys
from configure_await.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
