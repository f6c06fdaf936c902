"""
Pytest configuration and shared fixtures for runit service tests.

This module contains:
- MockFileSystem: In-memory filesystem for testing without actual I/O
- MockSupervisor: In-memory stand-in for the `sv` command
- fake_sv: Executable `sv` stand-in for real subprocess tests
- Shared fixtures available to all test modules
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from runit_service.config import Config
from runit_service.errors import StartError, StopError, SupervisorCommandError


class MockFileSystem:
    """
    In-memory file system for testing.

    Simulates a file system using dictionaries:
    - _files: dict mapping path -> content (str)
    - _dirs: set of directory paths
    - _modes: dict mapping path -> permission mode (int)
    - _failures: dict mapping (operation, path) -> exception to raise
    - _links: dict mapping symlink path -> target directory

    FEATURES:
    - No actual I/O operations
    - Parent directories must exist before writing, as on disk
    - Failure injection per operation and path
    """

    def __init__(self) -> None:
        """
        Initialize empty mock file system.

        Business context: Mock filesystem enables testing install and
        remove without root privileges or touching /etc/service.

        Example:
            >>> fs = MockFileSystem()
            >>> fs.list_files()
            []
        """
        self._files: dict[str, str] = {}
        self._dirs: set[str] = set()
        self._modes: dict[str, int] = {}
        self._failures: dict[tuple[str, str], OSError] = {}
        self._links: dict[str, str] = {}

    def _check_failure(self, operation: str, path: str) -> None:
        error = self._failures.get((operation, path))
        if error is not None:
            raise error

    def _resolve(self, path: str) -> str:
        for link, target in self._links.items():
            if path == link or path.startswith(link + "/"):
                return target + path[len(link) :]
        return path

    @staticmethod
    def _parent(path: str) -> str:
        return "/".join(path.rstrip("/").split("/")[:-1])

    def exists(self, path: str) -> bool:
        """Check if path is a mock file or directory."""
        path = self._resolve(path)
        return path in self._files or path in self._dirs

    def stat(self, path: str) -> os.stat_result:
        """
        Return a synthetic stat result for a mock path.

        Args:
            path: Absolute path to inspect.

        Returns:
            os.stat_result with st_mode and st_size filled in.

        Raises:
            Injected error for ("stat", path), if any.
            FileNotFoundError: If path is neither a file nor a directory.

        Example:
            >>> fs = MockFileSystem()
            >>> fs.set_file('/etc/service/foo/run', 'x')
            >>> fs.stat('/etc/service/foo/run').st_size
            1
        """
        self._check_failure("stat", path)
        path = self._resolve(path)
        if path in self._files:
            mode = 0o100000 | self._modes.get(path, 0o644)
            size = len(self._files[path])
        elif path in self._dirs:
            mode = 0o040000 | self._modes.get(path, 0o755)
            size = 4096
        else:
            raise FileNotFoundError(f"No such file or directory: {path}")
        return os.stat_result((mode, 0, 0, 1, 0, 0, size, 0, 0, 0))

    def makedirs(self, path: str, mode: int = 0o777, exist_ok: bool = False) -> None:
        """
        Create mock directory and parent directories.

        Newly created directories record `mode`; existing ones keep theirs.

        Raises:
            Injected error for ("makedirs", path), if any.
            OSError: If directory exists and exist_ok is False,
                or if path is an existing file.
        """
        self._check_failure("makedirs", path)
        if path in self._dirs:
            if not exist_ok:
                raise FileExistsError(f"Directory exists: {path}")
            return

        if path in self._files:
            raise FileExistsError(f"Path is a file, not directory: {path}")

        parts = path.rstrip("/").split("/")
        for i in range(1, len(parts) + 1):
            parent = "/".join(parts[:i])
            if parent and parent not in self._dirs:
                self._dirs.add(parent)
                self._modes[parent] = mode

    def write_text(self, path: str, content: str, _encoding: str = "utf-8") -> None:
        """
        Write text to mock file.

        Raises:
            Injected error for ("write_text", path), if any.
            FileNotFoundError: If the parent directory doesn't exist.
            PermissionError: If the file has no write bit.
        """
        self._check_failure("write_text", path)
        parent = self._parent(path)
        if parent and parent not in self._dirs:
            raise FileNotFoundError(f"No such directory: {parent}")
        if path in self._files and self._modes.get(path, 0o644) & 0o200 == 0:
            raise PermissionError(f"Permission denied: {path}")
        self._files[path] = content

    def chmod(self, path: str, mode: int) -> None:
        """
        Change mock file permissions.

        Raises:
            Injected error for ("chmod", path), if any.
            FileNotFoundError: If path not in _files or _dirs.
        """
        self._check_failure("chmod", path)
        if path not in self._files and path not in self._dirs:
            raise FileNotFoundError(f"No such file or directory: {path}")
        self._modes[path] = mode

    def rmtree(self, path: str) -> None:
        """
        Remove a mock directory and everything below it.

        A symlink is removed on its own; its target is kept.

        Raises:
            Injected error for ("rmtree", path), if any.
            FileNotFoundError: If path is not a directory.
        """
        self._check_failure("rmtree", path)
        if path in self._links:
            del self._links[path]
            return
        if path not in self._dirs:
            raise FileNotFoundError(f"No such directory: {path}")
        prefix = path.rstrip("/") + "/"
        for file_path in [p for p in self._files if p.startswith(prefix)]:
            del self._files[file_path]
            self._modes.pop(file_path, None)
        for dir_path in [d for d in self._dirs if d == path or d.startswith(prefix)]:
            self._dirs.discard(dir_path)
            self._modes.pop(dir_path, None)

    # =========================================================================
    # TEST HELPERS
    # =========================================================================

    def fail(self, operation: str, path: str, error: OSError) -> None:
        """
        Make the next and all later calls of `operation` on `path` raise.

        Example:
            >>> fs.fail('stat', '/etc/service/foo/run', PermissionError(13, 'denied'))
        """
        self._failures[(operation, path)] = error

    def get_file(self, path: str) -> str | None:
        """Get file content or None if not exists."""
        return self._files.get(path)

    def get_mode(self, path: str) -> int | None:
        """Get recorded permission mode or None if never set."""
        return self._modes.get(path)

    def set_file(self, path: str, content: str, mode: int = 0o644) -> None:
        """
        Create a file directly, including its parent directories.

        Test helper for setting up initial state such as an already
        installed run script.
        """
        parent = self._parent(path)
        if parent:
            self.makedirs(parent, mode=0o755, exist_ok=True)
        self._files[path] = content
        self._modes[path] = mode

    def set_link(self, path: str, target: str) -> None:
        """
        Create a symlink to a directory, like /etc/service/foo -> /etc/sv/foo.

        Paths below the link resolve into the target for exists() and stat().
        """
        parent = self._parent(path)
        if parent:
            self.makedirs(parent, mode=0o755, exist_ok=True)
        self._links[path] = target

    def list_links(self) -> list[str]:
        """List all symlink paths in mock filesystem."""
        return sorted(self._links)

    def list_files(self) -> list[str]:
        """List all file paths in mock filesystem."""
        return sorted(self._files.keys())

    def list_dirs(self) -> list[str]:
        """List all directory paths in mock filesystem."""
        return sorted(self._dirs)


class MockSupervisor:
    """
    In-memory ProcessSupervisor.

    Tracks per-service `sv status` output and records every command, so
    tests can assert which supervisor calls a lifecycle operation made.

    Attributes:
        calls: List of (subcommand, name) tuples in call order.
        outputs: Map of service name -> status output.
        status_error / start_error / stop_error: When set, the matching
            command raises instead of succeeding.
    """

    def __init__(self, service_root: str = "/etc/service") -> None:
        self.service_root = service_root
        self.calls: list[tuple[str, str]] = []
        self.outputs: dict[str, str] = {}
        self.status_error: SupervisorCommandError | None = None
        self.start_error: StartError | None = None
        self.stop_error: StopError | None = None

    def service_dir(self, name: str) -> str:
        return f"{self.service_root}/{name}"

    def set_running(self, name: str, pid: int | None = 1234) -> None:
        """Make `sv status` report the service as up."""
        if pid is None:
            self.outputs[name] = f"run: {name}: 10s\n"
        else:
            self.outputs[name] = f"run: {name}: (pid {pid}) 10s\n"

    def set_stopped(self, name: str) -> None:
        """Make `sv status` report the service as down."""
        self.outputs[name] = f"down: {name}: 5s, normally up\n"

    def status(self, name: str) -> str:
        self.calls.append(("status", name))
        if self.status_error is not None:
            raise self.status_error
        return self.outputs.get(name, f"down: {name}: 0s\n")

    def start(self, name: str) -> None:
        self.calls.append(("start", name))
        if self.start_error is not None:
            raise self.start_error
        self.set_running(name)

    def stop(self, name: str) -> None:
        self.calls.append(("stop", name))
        if self.stop_error is not None:
            raise self.stop_error
        self.set_stopped(name)

    def commands(self) -> list[str]:
        """Subcommands issued so far, in order."""
        return [command for command, _ in self.calls]


@pytest.fixture
def mock_fs() -> MockFileSystem:
    """
    Create a MockFileSystem for testing.

    Provides a fresh in-memory filesystem instance for each test,
    ensuring test isolation without actual disk I/O.
    """
    return MockFileSystem()


@pytest.fixture
def mock_supervisor() -> MockSupervisor:
    """Create a MockSupervisor rooted at /etc/service."""
    return MockSupervisor()


@pytest.fixture(autouse=True)
def reset_config() -> Iterator[None]:
    """Clear Config test overrides after every test."""
    yield
    Config.reset_test_overrides()


@pytest.fixture
def fake_sv(tmp_path: Path) -> str:
    """
    Write an executable `sv` stand-in whose status output is not valid UTF-8.

    Prints 'run: <name>: (pid 12) ' followed by bytes 0xff 0xfe.
    """
    script = tmp_path / "sv"
    script.write_text("#!/bin/sh\nprintf 'run: %s: (pid 12) \\377\\376 10s\\n' \"$2\"\n")
    script.chmod(0o755)
    return str(script)
