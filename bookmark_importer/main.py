#!/usr/bin/env python3
"""
Main entry point for the Bookmark Importer console script.
"""

import sys
from bookmark_importer.cli import main


if __name__ == "__main__":
    sys.exit(main())
