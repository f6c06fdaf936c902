"""
Configuration for runit service management.

PURPOSE: Centralized configuration constants and runtime settings.
AI CONTEXT: All fixed strings and paths live here - modify this file to change behavior.

CONFIGURATION CATEGORIES:
- Supervisor layout: service root, run script name, command name
- Run script: template, log directory, file modes
- Messages: success/failed tokens, action labels, status texts, error texts

ENVIRONMENT VARIABLES:
- SVDIR: runit service directory (default: /etc/service). The same variable
  is honored by `sv` itself, so both sides agree on the layout.
- RUNIT_SERVICE_LOG_DIR: Directory the run script appends logs to
  (default: /var/log)

USAGE:
    from runit_service.config import Config
    root = Config.get_service_root()
    label = Config.INSTALL_ACTION.format(description="My daemon")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration container for runit service management.

    DESIGN: Frozen dataclass ensures configuration immutability at runtime.
    All values are class-level constants - no instance creation needed.

    SERVICE LAYOUT:
        /etc/service/
        └── <name>/
            └── run        # executable run script, mode 0755
    """

    # =========================================================================
    # SUPERVISOR LAYOUT
    # =========================================================================
    DEFAULT_SERVICE_ROOT: ClassVar[str] = "/etc/service"
    RUN_SCRIPT_NAME: ClassVar[str] = "run"
    SUPERVISOR_COMMAND: ClassVar[str] = "sv"

    # =========================================================================
    # RUN SCRIPT
    # =========================================================================
    DEFAULT_LOG_DIR: ClassVar[str] = "/var/log"
    DIR_MODE: ClassVar[int] = 0o755
    SCRIPT_MODE: ClassVar[int] = 0o755

    RUN_SCRIPT_TEMPLATE: ClassVar[str] = (
        "#!/bin/bash\n"
        "#{description}\n"
        "\n"
        "exec {path} >>{log_dir}/{name}.log 2>&1\n"
    )
    """
    Run script body. Fields: name, description, path, log_dir.
    The supervisor execs this script; stdout/stderr append to the log file.
    """

    # =========================================================================
    # MESSAGE TABLE
    # =========================================================================
    SUCCESS: ClassVar[str] = "\t\t\t\t\t[  \033[32mOK\033[0m  ]"
    FAILED: ClassVar[str] = "\t\t\t\t\t[\033[31mFAILED\033[0m]"

    INSTALL_ACTION: ClassVar[str] = "Install {description}:"
    REMOVE_ACTION: ClassVar[str] = "Removing {description}:"
    START_ACTION: ClassVar[str] = "Starting {description}:"
    STOP_ACTION: ClassVar[str] = "Stopping {description}:"

    STATUS_RUNNING_PID: ClassVar[str] = "Service (pid  {pid}) is running..."
    STATUS_RUNNING: ClassVar[str] = "Service is running..."
    STATUS_STOPPED: ClassVar[str] = "Service is stoped"
    STATUS_UNKNOWN: ClassVar[str] = "Status could not be determined"

    ROOT_PRIVILEGES: ClassVar[str] = (
        "You must have root user privileges. Possibly using 'sudo' command should help"
    )
    ALREADY_INSTALLED: ClassVar[str] = "{description} already installed"
    NOT_INSTALLED: ClassVar[str] = "{description} is not installed"
    ALREADY_RUNNING: ClassVar[str] = "service already running"
    ALREADY_STOPPED: ClassVar[str] = "service already stopped"

    # =========================================================================
    # ENVIRONMENT-BASED SETTINGS (runtime configurable)
    # =========================================================================
    _service_root_override: ClassVar[str | None] = None
    _log_dir_override: ClassVar[str | None] = None

    @classmethod
    def get_service_root(cls) -> str:
        """
        Get the directory holding one control directory per service.

        Uses a priority system: test overrides first, then the SVDIR
        environment variable, then DEFAULT_SERVICE_ROOT.

        Business context: Distributions disagree on where runit looks for
        services (/etc/service, /service, /var/service). SVDIR is what `sv`
        reads, so honoring it keeps the run script and the supervisor
        pointed at the same tree.

        Returns:
            Absolute path of the service root.

        Example:
            >>> # With env var: SVDIR=/var/service
            >>> Config.get_service_root()
            '/var/service'
        """
        if cls._service_root_override is not None:
            return cls._service_root_override
        return os.environ.get("SVDIR") or cls.DEFAULT_SERVICE_ROOT

    @classmethod
    def get_log_dir(cls) -> str:
        """
        Get the directory run scripts redirect service output into.

        Test overrides first, then RUNIT_SERVICE_LOG_DIR, then
        DEFAULT_LOG_DIR.

        Returns:
            Absolute log directory path without trailing slash.
        """
        if cls._log_dir_override is not None:
            return cls._log_dir_override
        return os.environ.get("RUNIT_SERVICE_LOG_DIR") or cls.DEFAULT_LOG_DIR

    @classmethod
    def set_test_overrides(
        cls,
        service_root: str | None = None,
        log_dir: str | None = None,
    ) -> None:
        """
        Set test overrides for environment-based settings.

        Must call reset_test_overrides() in test teardown to avoid
        affecting other tests.

        Args:
            service_root: Override for the service root. None to clear.
            log_dir: Override for the log directory. None to clear.

        Example:
            >>> Config.set_test_overrides(service_root='/tmp/service')
            >>> Config.get_service_root()
            '/tmp/service'
            >>> Config.reset_test_overrides()  # Clean up
        """
        cls._service_root_override = service_root
        cls._log_dir_override = log_dir

    @classmethod
    def reset_test_overrides(cls) -> None:
        """Reset all test overrides to use environment variables."""
        cls._service_root_override = None
        cls._log_dir_override = None

    # =========================================================================
    # MESSAGE FORMATTING
    # =========================================================================
    @classmethod
    def succeeded(cls, action: str) -> str:
        """
        Append the success token to an action label.

        Args:
            action: Action label, e.g. 'Install My daemon:'.

        Returns:
            Label followed by SUCCESS.
        """
        return action + cls.SUCCESS

    @classmethod
    def failed(cls, action: str) -> str:
        """Append the failure token to an action label."""
        return action + cls.FAILED
