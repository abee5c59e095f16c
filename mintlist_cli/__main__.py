"""
Module execution entry point.

Allows running with: python -m mintlist_cli
"""

import sys
from mintlist_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
