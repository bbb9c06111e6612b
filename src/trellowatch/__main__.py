"""Allow ``python -m trellowatch``."""

import sys

from trellowatch.cli import main

sys.exit(main())
