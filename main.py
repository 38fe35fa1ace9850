#!/usr/bin/env python3
# Proposal test consolidation script
#
# Main flow:
#   1. Parse command line arguments
#   2. Load config.toml and the lock file
#   3. For each repository (parents first): sync, merge parent, build tests,
#      detect changed tests, copy the selected files into tests/
#   4. Write tests/proposals and, when everything succeeded, the lock file
#
# Usage:
#   python main.py [-c config.toml] [-l config.lock] [-u] [-k]

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parent / "src"
if SRC.is_dir() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from proposal_sync.cli import main  # noqa: E402


if __name__ == '__main__':
    sys.exit(main())
