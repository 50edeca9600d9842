"""
Main entry point when running the swerve_control module with python -m.
"""

import logging
import sys

from .runner import main

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logging.info("\nExiting...")
        sys.exit(0)
