"""Allow ``python -m rmtracer``."""

import sys

from rmtracer.cli import main

if __name__ == "__main__":
    sys.exit(main())
