#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Entry point for ``python -m mymd``."""

import sys

from mymd.cli import main

if __name__ == "__main__":
    sys.exit(main())
