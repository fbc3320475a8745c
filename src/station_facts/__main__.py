"""Allow ``python -m station_facts``."""

import sys

from station_facts.cli import main

if __name__ == "__main__":
    sys.exit(main())
