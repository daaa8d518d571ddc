"""
Play the game in command line.

Same as the `play2048` command, without installing the package.
"""

import os.path
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

from play2048.cli import main

if __name__ == "__main__":
    sys.exit(main())
