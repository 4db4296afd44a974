"""
Main entry point for command-line execution of the git engine.
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
