#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Entry point for ``python -m ltxtree``."""

import sys

from ltxtree.cli import main

if __name__ == "__main__":
    sys.exit(main())
