"""Allow ``python -m strategyconditions``."""

import sys

from .cli import main

sys.exit(main())
