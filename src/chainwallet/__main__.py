"""
Allow running the wallet as a module: python -m chainwallet
"""

import sys

from chainwallet.cli.cli import main

if __name__ == "__main__":
    sys.exit(main())
