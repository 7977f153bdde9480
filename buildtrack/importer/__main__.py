"""Allow running as: python -m buildtrack.importer"""

import sys

from .cli import main

sys.exit(main())
