"""Allow `python -m party_engine`."""

import sys

from .interface.cli import main

sys.exit(main())
