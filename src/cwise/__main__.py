"""
Main entry point for the routine compiler when run as a module.
"""

import sys
from cwise.cwise_cli import main

if __name__ == '__main__':
    sys.exit(main())
