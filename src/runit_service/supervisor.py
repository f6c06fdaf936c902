"""
Supervisor adapter for runit.

PURPOSE: Issue `sv` commands and interpret their output.
AI CONTEXT: The only module that shells out. ServiceManager depends on the
ProcessSupervisor protocol so tests substitute an in-memory fake.

SV OUTPUT EXAMPLES:
    run: foo: (pid 1234) 10s           -> running, pid 1234
    run: foo: 10s                      -> running, pid unknown
    down: foo: 3s, normally up         -> stopped
    fail: foo: unable to change to ... -> stopped (non-zero exit)

USAGE:
    supervisor = RunitSupervisor()
    output = supervisor.status("foo")
    state = parse_status(output)
"""

from __future__ import annotations

import logging
import os
import re
import subprocess  # nosec B404
from dataclasses import dataclass
from typing import Protocol

from .config import Config
from .errors import StartError, StopError, SupervisorCommandError

__all__ = [
    "ProcessSupervisor",
    "RunitSupervisor",
    "SupervisorStatus",
    "parse_status",
]

logger = logging.getLogger(__name__)

_RUNNING_PATTERN = re.compile(r"run: ")
_PID_PATTERN = re.compile(r"pid ([0-9]+)")


@dataclass(frozen=True)
class SupervisorStatus:
    """Running state parsed from `sv status` output."""

    running: bool
    pid: int | None = None


def parse_status(output: str) -> SupervisorStatus:
    """
    Interpret `sv status` output.

    The service counts as running when the output contains "run: ". The
    pid is taken from the first "pid <digits>" token, and only looked for
    when the service is running.

    Args:
        output: Raw stdout of `sv status <name>`.

    Returns:
        SupervisorStatus with running flag and optional pid.

    Example:
        >>> parse_status("run: foo: (pid 1234) 10s")
        SupervisorStatus(running=True, pid=1234)
        >>> parse_status("down: foo: 3s")
        SupervisorStatus(running=False, pid=None)
    """
    if not _RUNNING_PATTERN.search(output):
        return SupervisorStatus(running=False)
    match = _PID_PATTERN.search(output)
    return SupervisorStatus(running=True, pid=int(match.group(1)) if match else None)


class ProcessSupervisor(Protocol):
    """
    Protocol for the external process supervisor.

    Business context: The supervisor owns actual process start/stop and
    monitoring. This component only asks it to act and reads back its
    view of the world, so the lifecycle logic is written against this
    narrow capability instead of subprocess calls.
    """

    def service_dir(self, name: str) -> str:
        """
        Control directory for a service.

        Args:
            name: Service name.

        Returns:
            Absolute path of the directory holding the run script.
        """
        ...

    def status(self, name: str) -> str:
        """
        Query the supervisor for a service.

        Args:
            name: Service name.

        Returns:
            Raw status output.

        Raises:
            SupervisorCommandError: If the command fails to run or exits
                non-zero.
        """
        ...

    def start(self, name: str) -> None:
        """
        Ask the supervisor to bring the service up.

        Raises:
            StartError: If the command fails to run or exits non-zero.
        """
        ...

    def stop(self, name: str) -> None:
        """
        Ask the supervisor to take the service down.

        Raises:
            StopError: If the command fails to run or exits non-zero.
        """
        ...


class RunitSupervisor:
    """
    ProcessSupervisor backed by runit's `sv` command.

    Runs `sv <subcommand> <name>` with SVDIR pointing at the configured
    service root, so `sv` resolves the same control directory this
    component writes the run script into.
    """

    def __init__(self, service_root: str | None = None, command: str | None = None) -> None:
        """
        Initialize the adapter.

        Args:
            service_root: Directory containing service control directories.
                Defaults to Config.get_service_root().
            command: Supervisor executable. Defaults to
                Config.SUPERVISOR_COMMAND ("sv").
        """
        self._service_root = service_root or Config.get_service_root()
        self._command = command or Config.SUPERVISOR_COMMAND

    @property
    def service_root(self) -> str:
        """Directory holding one control directory per service."""
        return self._service_root

    def service_dir(self, name: str) -> str:
        """Return <service root>/<name>."""
        return os.path.join(self._service_root, name)

    def _run(
        self,
        subcommand: str,
        name: str,
        error_cls: type[SupervisorCommandError] = SupervisorCommandError,
    ) -> str:
        """
        Run one `sv` subcommand and return its stdout.

        Output is decoded leniently; undecodable bytes become U+FFFD.

        Args:
            subcommand: status, start or stop.
            name: Service name.
            error_cls: Exception type raised on failure.

        Returns:
            Captured stdout.

        Raises:
            error_cls: On non-zero exit or if the command cannot be executed.
        """
        args = [self._command, subcommand, name]
        env = {**os.environ, "SVDIR": self._service_root}
        logger.debug(f"Running {' '.join(args)} (SVDIR={self._service_root})")
        try:
            result = subprocess.run(  # nosec B603
                args,
                check=True,
                capture_output=True,
                text=True,
                errors="replace",
                env=env,
            )
        except subprocess.CalledProcessError as e:
            output = (e.stdout or "") + (e.stderr or "")
            raise error_cls(args, e.returncode, output) from e
        except (OSError, UnicodeError) as e:
            raise error_cls(args, None, str(e)) from e
        return result.stdout

    def status(self, name: str) -> str:
        """Run `sv status <name>`."""
        return self._run("status", name)

    def start(self, name: str) -> None:
        """Run `sv start <name>`."""
        self._run("start", name, StartError)

    def stop(self, name: str) -> None:
        """Run `sv stop <name>`."""
        self._run("stop", name, StopError)
