#!/usr/bin/env python3
"""
tree-saw - command-line entry point for ``python -m treesaw``.
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
