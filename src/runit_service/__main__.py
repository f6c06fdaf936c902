"""
Package entry point for python -m execution.

USAGE:
    python -m runit_service install mydaemon --description "My daemon"
    python -m runit_service status mydaemon
    python -m runit_service render mydaemon --executable /usr/bin/mydaemon
"""

import sys

from runit_service.cli import main

if __name__ == "__main__":
    sys.exit(main())
