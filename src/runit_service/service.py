"""
Service lifecycle management under runit.

PURPOSE: Install, remove, start, stop and report on one supervised service.
AI CONTEXT: The decision logic lives here; I/O goes through injected
collaborators (FileSystem, ProcessSupervisor, privilege check, path resolver).

LIFECYCLE:
    not installed --install--> installed/stopped --start--> installed/running
          ^                        |    ^                         |
          +--------remove----------+    +----------stop-----------+

Durable state is only the run script on disk plus the supervisor's own
runtime state. A ServiceManager holds no state between calls.

RESULT CONVENTION:
Every operation returns ActionResult(message, error). The message starts
with an action label such as "Install My daemon:" followed by
Config.SUCCESS or Config.FAILED. error is None on success, otherwise a
ServiceError subclass. Nothing is raised to the caller and nothing is
retried; partial work (a created directory) is left in place.

USAGE:
    manager = ServiceManager(Service("mydaemon", "My daemon"))
    message, error = manager.install()
    if error:
        print(error, file=sys.stderr)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from .config import Config
from .errors import (
    AlreadyInstalledError,
    AlreadyRunningError,
    AlreadyStoppedError,
    ExecutableNotFoundError,
    FilesystemError,
    IndeterminateStateError,
    NotInstalledError,
    ServiceError,
    ServicePermissionError,
    SupervisorCommandError,
)
from .supervisor import SupervisorStatus, parse_status
from .templates import render_run_script

if TYPE_CHECKING:
    from .filesystem import FileSystem
    from .supervisor import ProcessSupervisor

__all__ = [
    "ActionResult",
    "Service",
    "ServiceManager",
]

logger = logging.getLogger(__name__)

# Precondition failures; the operation was refused before touching anything.
_REFUSALS = (
    ServicePermissionError,
    AlreadyInstalledError,
    NotInstalledError,
    AlreadyRunningError,
    AlreadyStoppedError,
)


@dataclass(frozen=True)
class Service:
    """
    A named unit managed by the supervisor.

    Attributes:
        name: Unique identifier. Also the control directory name under the
            service root and the log file name.
        description: Human-readable label used in messages and as the
            comment line of the run script.
    """

    name: str
    description: str

    def __post_init__(self) -> None:
        """
        Reject names that would escape the service root.

        Raises:
            ValueError: If name is empty, contains a path separator,
                or is '.' or '..'.
        """
        if not self.name or self.name in (".", "..") or "/" in self.name or "\0" in self.name:
            raise ValueError(f"Invalid service name: {self.name!r}")


class ActionResult(NamedTuple):
    """
    Outcome of a lifecycle operation.

    Unpacks as (message, error) for callers that only want the pair.
    """

    message: str
    error: ServiceError | None = None

    @property
    def ok(self) -> bool:
        """True when the operation succeeded."""
        return self.error is None


class ServiceManager:
    """
    Lifecycle driver for one runit service.

    Each public operation checks its preconditions in a fixed order
    (privileges, installed state, running state), performs at most one
    supervisor command plus the filesystem work, and reports the outcome.

    Business context: Services are usually installed by a package's own
    CLI ("mydaemon install"), run once as root. The checks make repeated
    or out-of-order invocations fail loudly instead of overwriting a
    running service's run script or stopping something already stopped.
    """

    def __init__(
        self,
        service: Service,
        *,
        filesystem: FileSystem | None = None,
        supervisor: ProcessSupervisor | None = None,
        privilege_checker: Callable[[], bool] | None = None,
        path_resolver: Callable[[str], str] | None = None,
        log_dir: str | None = None,
    ) -> None:
        """
        Initialize the manager with optional collaborators.

        Args:
            service: The service to manage.
            filesystem: FileSystem for file operations. Defaults to
                RealFileSystem for production use.
            supervisor: Supervisor adapter. Defaults to RunitSupervisor
                over Config.get_service_root().
            privilege_checker: Returns True if the caller may mutate
                service state. Defaults to system.check_privileges.
            path_resolver: Maps the service name to the executable path.
                Defaults to system.resolve_executable_path.
            log_dir: Directory for the service log. Defaults to
                Config.get_log_dir().
        """
        from .filesystem import RealFileSystem
        from .supervisor import RunitSupervisor
        from .system import check_privileges, resolve_executable_path

        self.service = service
        self._fs: FileSystem = filesystem or RealFileSystem()
        self._supervisor: ProcessSupervisor = supervisor or RunitSupervisor()
        self._has_privileges = privilege_checker or check_privileges
        self._resolve_path = path_resolver or (
            lambda name: resolve_executable_path(name, self._fs)
        )
        self._log_dir = log_dir

    # =========================================================================
    # PATHS
    # =========================================================================

    @property
    def service_path(self) -> str:
        """Control directory of the service."""
        return self._supervisor.service_dir(self.service.name)

    @property
    def run_script_path(self) -> str:
        """Path of the run script inside the control directory."""
        return os.path.join(self.service_path, Config.RUN_SCRIPT_NAME)

    # =========================================================================
    # STATE CHECKS
    # =========================================================================

    def is_installed(self) -> bool:
        """
        Check whether the run script exists.

        Returns:
            True if the run script can be stat'ed, False if it (or a parent
            directory) does not exist.

        Raises:
            IndeterminateStateError: If the stat fails for any other reason,
                e.g. permission denied on the control directory.
        """
        path = self.run_script_path
        try:
            self._fs.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return False
        except OSError as e:
            raise IndeterminateStateError(path, e) from e
        return True

    def check_running(self) -> SupervisorStatus:
        """
        Ask the supervisor whether the service is running.

        A failing status command (non-zero exit, missing `sv` binary) reads
        as "not running". The failure is logged, not returned.

        Returns:
            SupervisorStatus with the running flag and pid if reported.
        """
        try:
            output = self._supervisor.status(self.service.name)
        except SupervisorCommandError as e:
            logger.debug(f"Status query for {self.service.name} failed, assuming stopped: {e}")
            return SupervisorStatus(running=False)
        return parse_status(output)

    @staticmethod
    def status_text(state: SupervisorStatus) -> str:
        """
        Human-readable form of a SupervisorStatus.

        Example:
            >>> ServiceManager.status_text(SupervisorStatus(True, 1234))
            'Service (pid  1234) is running...'
        """
        if not state.running:
            return Config.STATUS_STOPPED
        if state.pid is not None:
            return Config.STATUS_RUNNING_PID.format(pid=state.pid)
        return Config.STATUS_RUNNING

    def _require_privileges(self) -> None:
        if not self._has_privileges():
            raise ServicePermissionError(Config.ROOT_PRIVILEGES)

    def _require_installed(self) -> None:
        if not self.is_installed():
            raise NotInstalledError(
                Config.NOT_INSTALLED.format(description=self.service.description)
            )

    def _resolve_executable(self) -> str:
        try:
            return self._resolve_path(self.service.name)
        except ServiceError:
            raise
        except (OSError, LookupError, ValueError) as e:
            raise ExecutableNotFoundError(
                f"Cannot find executable for service {self.service.name!r}: {e}"
            ) from e

    def _fail(self, action: str, error: ServiceError) -> ActionResult:
        if isinstance(error, _REFUSALS):
            logger.warning(f"{action} {error}")
        else:
            logger.error(f"{action} {error}")
        return ActionResult(Config.failed(action), error)

    # =========================================================================
    # LIFECYCLE OPERATIONS
    # =========================================================================

    def install(self) -> ActionResult:
        """
        Install the service by writing its run script.

        Steps: create the control directory (mode 0755, parents included),
        resolve the executable, render and write the run script, make it
        executable. No supervisor command is issued; runsvdir notices the
        new directory on its next scan.

        Business context: Installation must never overwrite an existing
        run script. A second install is an operator error and is reported
        as AlreadyInstalledError with the existing script untouched.

        Returns:
            ActionResult. Errors: ServicePermissionError,
            AlreadyInstalledError, IndeterminateStateError, FilesystemError,
            ExecutableNotFoundError, TemplateError.

        Example:
            >>> manager.install().ok
            True
        """
        action = Config.INSTALL_ACTION.format(description=self.service.description)
        try:
            self._require_privileges()
            if self.is_installed():
                raise AlreadyInstalledError(
                    Config.ALREADY_INSTALLED.format(description=self.service.description)
                )

            service_path = self.service_path
            try:
                self._fs.makedirs(service_path, mode=Config.DIR_MODE, exist_ok=True)
            except OSError as e:
                raise FilesystemError("create directory", service_path, e) from e

            executable = self._resolve_executable()
            content = render_run_script(
                self.service.name,
                self.service.description,
                executable,
                self._log_dir,
            )

            run_script = self.run_script_path
            try:
                self._fs.write_text(run_script, content)
            except OSError as e:
                raise FilesystemError("write", run_script, e) from e
            logger.info(f"Created run script: {run_script}")

            try:
                self._fs.chmod(run_script, Config.SCRIPT_MODE)
            except OSError as e:
                raise FilesystemError("chmod", run_script, e) from e
        except ServiceError as e:
            return self._fail(action, e)

        return ActionResult(Config.succeeded(action))

    def remove(self) -> ActionResult:
        """
        Stop the service and delete its control directory.

        The stop command is always issued, even if the service is already
        down. If it fails the directory is left in place and StopError is
        returned.

        Returns:
            ActionResult. Errors: ServicePermissionError, NotInstalledError,
            IndeterminateStateError, StopError, FilesystemError.
        """
        action = Config.REMOVE_ACTION.format(description=self.service.description)
        try:
            self._require_privileges()
            self._require_installed()

            self._supervisor.stop(self.service.name)

            service_path = self.service_path
            try:
                self._fs.rmtree(service_path)
            except OSError as e:
                raise FilesystemError("remove", service_path, e) from e
            logger.info(f"Removed service directory: {service_path}")
        except ServiceError as e:
            return self._fail(action, e)

        return ActionResult(Config.succeeded(action))

    def start(self) -> ActionResult:
        """
        Start the service through the supervisor.

        Returns:
            ActionResult. Errors: ServicePermissionError, NotInstalledError,
            IndeterminateStateError, AlreadyRunningError, StartError.
        """
        action = Config.START_ACTION.format(description=self.service.description)
        try:
            self._require_privileges()
            self._require_installed()
            if self.check_running().running:
                raise AlreadyRunningError(Config.ALREADY_RUNNING)

            self._supervisor.start(self.service.name)
            logger.info(f"Started service: {self.service.name}")
        except ServiceError as e:
            return self._fail(action, e)

        return ActionResult(Config.succeeded(action))

    def stop(self) -> ActionResult:
        """
        Stop the service through the supervisor.

        Returns:
            ActionResult. Errors: ServicePermissionError, NotInstalledError,
            IndeterminateStateError, AlreadyStoppedError, StopError.
        """
        action = Config.STOP_ACTION.format(description=self.service.description)
        try:
            self._require_privileges()
            self._require_installed()
            if not self.check_running().running:
                raise AlreadyStoppedError(Config.ALREADY_STOPPED)

            self._supervisor.stop(self.service.name)
            logger.info(f"Stopped service: {self.service.name}")
        except ServiceError as e:
            return self._fail(action, e)

        return ActionResult(Config.succeeded(action))

    def status(self) -> ActionResult:
        """
        Report whether the service is running.

        Unlike the other operations the message carries no action label:
        it is the status text itself, or empty when privileges are missing,
        or "Status could not be determined" when the service is not
        installed or its installed state is unreadable.

        Returns:
            ActionResult with one of:
            - 'Service (pid  <N>) is running...'
            - 'Service is running...'
            - 'Service is stoped'
        """
        try:
            self._require_privileges()
        except ServicePermissionError as e:
            return ActionResult("", e)

        try:
            self._require_installed()
        except ServiceError as e:
            return ActionResult(Config.STATUS_UNKNOWN, e)

        return ActionResult(self.status_text(self.check_running()))
