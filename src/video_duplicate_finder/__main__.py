"""Allow running with python -m video_duplicate_finder."""

import sys

from .cli.main import main

sys.exit(main())
