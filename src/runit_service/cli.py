"""
CLI entry point for runit service management.

PURPOSE: Command-line interface over ServiceManager.
AI CONTEXT: Maps ActionResult to stdout/stderr and exit codes; no lifecycle logic here.

USAGE:
    # Via python -m
    python -m runit_service status mydaemon

    # Or via CLI command (after install)
    runit-service install mydaemon --description "My daemon"
    runit-service start mydaemon
    runit-service stop mydaemon
    runit-service remove mydaemon
    runit-service render mydaemon --executable /usr/local/bin/mydaemon
"""

from __future__ import annotations

import argparse
import logging
import sys
from functools import lru_cache

from .config import Config
from .errors import ServiceError
from .service import ActionResult, Service, ServiceManager
from .supervisor import RunitSupervisor
from .system import resolve_executable_path
from .templates import render_run_script

# Constants
PROG_NAME = "runit-service"
LIFECYCLE_COMMANDS = ("install", "remove", "start", "stop", "status")
EXIT_OK = 0
EXIT_ERROR = 1

_logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _get_logger(verbose: bool = False) -> logging.Logger:
    """Get module logger, configuring the root handler on first use."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return logging.getLogger(__name__)


def build_manager(
    name: str,
    description: str | None = None,
    executable: str | None = None,
    service_root: str | None = None,
) -> ServiceManager:
    """
    Construct a ServiceManager from command-line values.

    Args:
        name: Service name.
        description: Label for messages. Defaults to the name.
        executable: Fixed executable path. When omitted the path is
            resolved from the name at install time.
        service_root: Override for the runit service directory.

    Returns:
        ServiceManager wired to RunitSupervisor and the real filesystem.

    Raises:
        ValueError: If name is not a valid service name.
    """
    service = Service(name=name, description=description or name)
    supervisor = RunitSupervisor(service_root=service_root)
    path_resolver = (lambda _name: executable) if executable else None
    return ServiceManager(service, supervisor=supervisor, path_resolver=path_resolver)


def report(result: ActionResult) -> int:
    """
    Print an ActionResult and map it to an exit code.

    The message goes to stdout; the error, if any, to stderr.

    Args:
        result: Outcome of a lifecycle operation.

    Returns:
        EXIT_OK on success, EXIT_ERROR otherwise.
    """
    if result.message:
        print(result.message)
    if result.error is not None:
        print(f"Error: {result.error}", file=sys.stderr)
        return EXIT_ERROR
    return EXIT_OK


def run_action(command: str, manager: ServiceManager) -> int:
    """
    Run one lifecycle command and report its outcome.

    Args:
        command: One of LIFECYCLE_COMMANDS.
        manager: Manager for the target service.

    Returns:
        Process exit code.

    Raises:
        ValueError: If command is not a lifecycle command.
    """
    if command not in LIFECYCLE_COMMANDS:
        raise ValueError(f"Unknown command: {command}")
    _logger.debug(f"{command} {manager.service.name}")
    return report(getattr(manager, command)())


def run_render(
    name: str,
    description: str | None = None,
    executable: str | None = None,
    log_dir: str | None = None,
) -> int:
    """
    Print the run script install would write, without writing it.

    Needs no privileges and touches nothing on disk.

    Args:
        name: Service name.
        description: Comment line. Defaults to the name.
        executable: Executable path. Resolved from the name when omitted.
        log_dir: Log directory. Defaults to Config.get_log_dir().

    Returns:
        Process exit code.
    """
    try:
        path = executable or resolve_executable_path(name)
        script = render_run_script(name, description or name, path, log_dir)
    except ServiceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    # Note: print() so the script can be redirected to a file
    print(script, end="")
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    from .__version__ import __version__

    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description="Manage a service supervised by runit",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log supervisor commands and lifecycle steps",
    )
    parser.add_argument(
        "--service-root",
        default=None,
        help=f"runit service directory (default: $SVDIR or {Config.DEFAULT_SERVICE_ROOT})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    helps = {
        "install": "Write the run script into the service directory",
        "remove": "Stop the service and delete its directory",
        "start": "Start the service",
        "stop": "Stop the service",
        "status": "Show whether the service is running",
        "render": "Print the run script without installing it",
    }
    for command, help_text in helps.items():
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument("name", help="Service name")
        sub.add_argument(
            "--description",
            default=None,
            help="Human-readable label (default: the name)",
        )
        if command in ("install", "render"):
            sub.add_argument(
                "--executable",
                default=None,
                help="Program to exec (default: look up NAME on PATH)",
            )
        if command == "render":
            sub.add_argument(
                "--log-dir",
                default=None,
                help=f"Log directory (default: {Config.DEFAULT_LOG_DIR})",
            )

    return parser


def main() -> int:
    """
    Main CLI entry point for runit service management.

    Parses command-line arguments and dispatches to run_action or
    run_render.

    Subcommands:
    - install NAME [--description TEXT] [--executable PATH]
    - remove | start | stop | status NAME [--description TEXT]
    - render NAME [--description TEXT] [--executable PATH] [--log-dir DIR]

    Returns:
        0 on success, 1 if the operation failed or was refused.

    Raises:
        SystemExit: On --help, --version or argument parsing errors.

    Example:
        >>> # From command line:
        >>> # sudo runit-service install mydaemon --description "My daemon"
        >>> sys.exit(main())  # Typical usage pattern
    """
    parser = _build_parser()
    args = parser.parse_args()
    _get_logger(args.verbose)

    if args.command == "render":
        return run_render(
            args.name,
            description=args.description,
            executable=args.executable,
            log_dir=args.log_dir,
        )

    try:
        manager = build_manager(
            args.name,
            description=args.description,
            executable=getattr(args, "executable", None),
            service_root=args.service_root,
        )
    except ValueError as e:
        parser.error(str(e))

    return run_action(args.command, manager)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
