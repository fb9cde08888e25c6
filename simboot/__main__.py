"""
Allow running simboot as a module: python -m simboot
"""

import sys

from simboot.cli import main

if __name__ == "__main__":
    sys.exit(main())
