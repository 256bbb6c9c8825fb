"""
Allow running gym sync as a module.

Usage:
    python -m gymsync test
    python -m gymsync sync
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
