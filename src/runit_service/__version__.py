"""Version information for runit-service."""

__version__ = "0.3.1"
__version_date__ = "2026-10-17"

__title__ = "runit_service"
__description__ = "Install, remove, start, stop and query a service under the runit supervisor"

__author__ = "Mark Grandau"

__license__ = "MIT"
__copyright__ = "Copyright 2026 Mark Grandau"

__all__ = [
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__author__",
    "__license__",
    "__copyright__",
]
