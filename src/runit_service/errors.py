"""
Error taxonomy for runit service management.

PURPOSE: Typed failures returned from every lifecycle operation.
AI CONTEXT: ServiceManager never raises these past its boundary; they come
back as the `error` half of an ActionResult so the CLI can map exit codes.

HIERARCHY:
    ServiceError
    ├── ServicePermissionError   (also a builtin PermissionError)
    ├── AlreadyInstalledError
    ├── NotInstalledError
    ├── AlreadyRunningError
    ├── AlreadyStoppedError
    ├── IndeterminateStateError
    ├── FilesystemError
    ├── ExecutableNotFoundError
    ├── TemplateError
    └── SupervisorCommandError
        ├── StartError
        └── StopError

Wrapping errors keep the original exception as __cause__ (raise ... from e).
"""

from __future__ import annotations

__all__ = [
    "AlreadyInstalledError",
    "AlreadyRunningError",
    "AlreadyStoppedError",
    "ExecutableNotFoundError",
    "FilesystemError",
    "IndeterminateStateError",
    "NotInstalledError",
    "ServiceError",
    "ServicePermissionError",
    "StartError",
    "StopError",
    "SupervisorCommandError",
    "TemplateError",
]


class ServiceError(Exception):
    """Base class for all service lifecycle failures."""


class ServicePermissionError(ServiceError, PermissionError):
    """Caller lacks the privileges required to change service state."""


class AlreadyInstalledError(ServiceError):
    """Install requested but the run script already exists."""


class NotInstalledError(ServiceError):
    """Operation requires an installed service but no run script exists."""


class AlreadyRunningError(ServiceError):
    """Start requested while the supervisor reports the service running."""


class AlreadyStoppedError(ServiceError):
    """Stop requested while the supervisor reports the service stopped."""


class IndeterminateStateError(ServiceError):
    """
    Installed state could not be read.

    Raised when checking for the run script fails with something other
    than "not found", e.g. EACCES on the control directory. Treating that
    as "not installed" would let install clobber a service it cannot see.
    """

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"Cannot determine whether {path} exists: {cause}")
        self.path = path


class FilesystemError(ServiceError):
    """Directory or file creation, chmod, or deletion failed."""

    def __init__(self, operation: str, path: str, cause: OSError) -> None:
        super().__init__(f"Failed to {operation} {path}: {cause}")
        self.operation = operation
        self.path = path


class ExecutableNotFoundError(ServiceError):
    """No executable could be resolved for the service name."""


class TemplateError(ServiceError):
    """Run script template references unknown fields or is malformed."""


class SupervisorCommandError(ServiceError):
    """
    Supervisor command exited non-zero or could not be executed.

    Attributes:
        command: Argument vector that was run.
        returncode: Exit status, or None if the process never started.
        output: Combined stdout/stderr captured from the command.
    """

    def __init__(
        self,
        command: list[str],
        returncode: int | None = None,
        output: str = "",
    ) -> None:
        if returncode is None:
            message = f"Could not run {' '.join(command)}"
        else:
            message = f"{' '.join(command)} exited with status {returncode}"
        if output:
            message = f"{message}: {output.strip()}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.output = output


class StartError(SupervisorCommandError):
    """`sv start` failed."""


class StopError(SupervisorCommandError):
    """`sv stop` failed."""
