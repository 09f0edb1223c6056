"""
linkedaddress CLI entry point.

Usage:
    python -m linkedaddress.cli namehash wilkins.eth
    python -m linkedaddress.cli validate --records records.yaml ...
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
