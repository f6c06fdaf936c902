"""
runit service management.

PURPOSE: Install, remove, start, stop and query a service supervised by runit.
AI CONTEXT: ServiceManager is the entry point; everything else is a collaborator.

PACKAGE STRUCTURE:
- service.py: Service, ServiceManager, ActionResult (lifecycle logic)
- supervisor.py: `sv` adapter and status parsing
- templates.py: Run script rendering
- filesystem.py: Injectable filesystem
- system.py: Default privilege check and executable lookup
- errors.py: ServiceError hierarchy
- config.py: Paths, modes and the message table
- cli.py: runit-service command

QUICK START:
    from runit_service import Service, ServiceManager

    manager = ServiceManager(Service("mydaemon", "My daemon"))
    message, error = manager.install()
    print(manager.status().message)
"""

from runit_service.__version__ import (
    __author__,
    __copyright__,
    __description__,
    __license__,
    __title__,
    __version__,
    __version_date__,
)
from runit_service.service import ActionResult, Service, ServiceManager

__all__ = [
    "ActionResult",
    "Service",
    "ServiceManager",
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__author__",
    "__license__",
    "__copyright__",
]
