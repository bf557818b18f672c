# main.py
import sys

from chainwallet.cli.cli import main

if __name__ == "__main__":
    sys.exit(main())
