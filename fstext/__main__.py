"""Allow ``python -m fstext``."""

import sys

from fstext.cli import main

if __name__ == "__main__":
    sys.exit(main())
