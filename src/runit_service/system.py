"""
Default collaborators for the service manager.

PURPOSE: Privilege check and executable lookup used when the caller injects none.
AI CONTEXT: Both are plain callables so tests pass lambdas instead.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import ExecutableNotFoundError

if TYPE_CHECKING:
    from .filesystem import FileSystem

__all__ = ["check_privileges", "resolve_executable_path"]

logger = logging.getLogger(__name__)


def check_privileges() -> bool:
    """
    Report whether the caller may change system service state.

    Business context: The service root and /var/log are owned by root on
    every runit distribution, and `sv` refuses to signal services owned by
    other users. Anything short of root fails halfway through, so the
    lifecycle operations refuse up front.

    Returns:
        True if running with effective uid 0.
    """
    return os.geteuid() == 0


def resolve_executable_path(name: str, filesystem: FileSystem | None = None) -> str:
    """
    Find the absolute path of the program a service should exec.

    Lookup order:
    1. `name` on PATH (shutil.which)
    2. `name` next to the running interpreter, where pip installs console
       scripts for a virtualenv that is not on PATH

    Args:
        name: Service name, which doubles as the executable name.
        filesystem: FileSystem used for the interpreter-directory check.
            Defaults to RealFileSystem.

    Returns:
        Absolute path of the executable.

    Raises:
        ExecutableNotFoundError: If neither location has the executable.

    Example:
        >>> resolve_executable_path('sshd')
        '/usr/sbin/sshd'
    """
    from .filesystem import RealFileSystem

    fs = filesystem or RealFileSystem()

    found = shutil.which(name)
    if found:
        return os.path.abspath(found)

    candidate = str(Path(sys.executable).parent / name)
    if fs.exists(candidate):
        return candidate

    logger.debug(f"No executable named {name!r} on PATH or in {Path(candidate).parent}")
    raise ExecutableNotFoundError(f"Cannot find executable for service {name!r}")
