#!/usr/bin/env python3
"""wrapview - A terminal text viewer.

Usage:
    python main.py PATH

Controls:
    Arrow keys: Move the cursor
    Ctrl-S: Save file
    Ctrl-C: Quit
"""

import sys
from wrapview.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
