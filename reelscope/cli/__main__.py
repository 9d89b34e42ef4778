"""Allow ``python -m reelscope.cli`` execution (delegates to analyze)."""

import sys

from reelscope.cli.analyze import main

sys.exit(main())
