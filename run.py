#!/usr/bin/env python3
"""
Script to run the Backlog to Markdown converter from the project root.
Installed copies can use the ``backlog2md`` command instead.
"""

import sys

from backlog2md.main import main

if __name__ == "__main__":
    sys.exit(main())
