"""Allow ``python -m hsu.cli`` execution."""

import sys

from hsu.cli.debug import main

sys.exit(main())
