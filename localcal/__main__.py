"""Entry point for `python -m localcal`."""

import sys

from localcal.cli import main

if __name__ == "__main__":
    sys.exit(main())
