#!/usr/bin/env python3
"""Entry point for running tabifyer as a module.

This allows the package to be executed as:
    python -m tabifyer --pdfs-dir ./pdfs --output-dir ./tsv
"""

import sys

from tabifyer.cli import main

if __name__ == "__main__":
    sys.exit(main())
