"""Allow running as ``python -m metapull``."""

import sys

from .cli import main

sys.exit(main())
