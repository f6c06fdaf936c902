"""
FileSystem abstraction for runit service management.

PURPOSE: Injectable file system interface for testability.
AI CONTEXT: Allows mocking file operations in unit tests without root or temp directories.

DESIGN:
- Protocol defines the interface
- RealFileSystem uses actual os/shutil operations
- MockFileSystem in tests/conftest.py stores data in memory for tests

USAGE:
    # Production
    fs = RealFileSystem()
    manager = ServiceManager(service, filesystem=fs)

    # Tests (MockFileSystem from conftest.py)
    manager = ServiceManager(service, filesystem=mock_fs)  # pytest fixture
"""

from __future__ import annotations

import os
import shutil
from typing import Protocol

__all__ = ["FileSystem", "RealFileSystem"]


class FileSystem(Protocol):
    """
    Protocol for file system operations.

    Defines the operations the service manager performs on the supervisor's
    service tree. All paths are strings (absolute paths expected).

    Business context: Every durable piece of service state is a file under
    the service root. Routing all access through this protocol lets tests
    exercise install/remove without root privileges or a real /etc/service.
    """

    def exists(self, path: str) -> bool:
        """
        Check if path exists (file or directory).

        Args:
            path: Absolute path to check for existence.

        Returns:
            True if the path exists as either a file or directory,
            False otherwise. Never raises.
        """
        ...

    def stat(self, path: str) -> os.stat_result:
        """
        Return status information for a path.

        Business context: The installed check needs to tell "run script
        missing" apart from "run script unreadable". exists() folds both
        into False, so the service manager stats the path instead.

        Args:
            path: Absolute path to inspect.

        Returns:
            os.stat_result for the path.

        Raises:
            FileNotFoundError: If the path doesn't exist.
            PermissionError: If a parent directory cannot be searched.
            OSError: For any other failure.

        Example:
            >>> fs.stat('/etc/service/foo/run').st_mode & 0o777
            493
        """
        ...

    def makedirs(self, path: str, mode: int = 0o777, exist_ok: bool = False) -> None:
        """
        Create directory and all parent directories.

        Equivalent to shell `mkdir -p` command.

        Args:
            path: Absolute path of directory to create.
            mode: Permission bits for newly created directories.
            exist_ok: If True, don't raise if directory exists.
                If False, raise OSError when directory exists.

        Raises:
            OSError: If directory exists and exist_ok is False, or if
                creation fails.

        Example:
            >>> fs.makedirs('/etc/service/foo', mode=0o755, exist_ok=True)
        """
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """
        Write text to file.

        Overwrites existing content.

        Args:
            path: Absolute path to file to write.
            content: String content to write to file.
            encoding: Text encoding (default utf-8).

        Raises:
            PermissionError: If file is read-only.
            OSError: If parent directory doesn't exist.

        Example:
            >>> fs.write_text('/etc/service/foo/run', '#!/bin/bash\\n')
        """
        ...

    def chmod(self, path: str, mode: int) -> None:
        """
        Change file permissions.

        Business context: runit only executes run scripts that carry the
        execute bit.

        Args:
            path: Absolute path to file or directory.
            mode: Permission mode as octal integer (e.g., 0o755).

        Raises:
            FileNotFoundError: If path doesn't exist.
        """
        ...

    def rmtree(self, path: str) -> None:
        """
        Remove a directory and everything below it.

        Business context: A service's control directory holds the run
        script plus supervisor-owned state (supervise/, log/). Removal
        deletes the whole tree, like `rm -rf`. A control directory that is
        a symlink (the usual /etc/sv/<name> layout) is unlinked; its
        target is left alone.

        Args:
            path: Absolute path of directory or symlink to remove.

        Raises:
            OSError: If any entry cannot be removed.

        Example:
            >>> fs.rmtree('/etc/service/foo')
        """
        ...


class RealFileSystem:
    """
    Real file system implementation using os and shutil.

    This is the production implementation that performs actual I/O.
    Each method delegates directly to the corresponding os or shutil
    function.
    """

    def exists(self, path: str) -> bool:  # pragma: no cover
        """Delegate to os.path.exists()."""
        return os.path.exists(path)

    def stat(self, path: str) -> os.stat_result:  # pragma: no cover
        """
        Stat a path on the real filesystem.

        Delegates to os.stat(), which follows symlinks. A dangling run
        script symlink therefore reads as missing.

        Args:
            path: Absolute path to inspect.

        Returns:
            os.stat_result for the path.

        Raises:
            FileNotFoundError: If path doesn't exist.
            OSError: For permission or I/O failures.
        """
        return os.stat(path)

    def makedirs(
        self, path: str, mode: int = 0o777, exist_ok: bool = False
    ) -> None:  # pragma: no cover
        """
        Create directory and parent directories on disk.

        Delegates to os.makedirs(). Note the process umask still applies
        to the requested mode.

        Args:
            path: Absolute path of directory to create.
            mode: Permission bits for new directories.
            exist_ok: If True, don't raise if directory exists.

        Raises:
            OSError: If directory exists and exist_ok is False.
        """
        os.makedirs(path, mode=mode, exist_ok=exist_ok)

    def write_text(
        self, path: str, content: str, encoding: str = "utf-8"
    ) -> None:  # pragma: no cover
        """
        Write text content to file on disk.

        Opens file in write mode with specified encoding and writes
        the complete content. Overwrites existing file content.

        Args:
            path: Absolute path to file to write.
            content: String content to write.
            encoding: Text encoding (default utf-8).

        Raises:
            PermissionError: If file is read-only.
            OSError: If parent directory doesn't exist.
        """
        with open(path, "w", encoding=encoding) as f:
            f.write(content)

    def chmod(self, path: str, mode: int) -> None:  # pragma: no cover
        """Delegate to os.chmod()."""
        os.chmod(path, mode)

    def rmtree(self, path: str) -> None:  # pragma: no cover
        """
        Remove a directory tree from disk.

        Unlinks a symlink, otherwise delegates to shutil.rmtree(), which
        refuses symlinks. Errors propagate; nothing is ignored.

        Args:
            path: Absolute path of directory or symlink to remove.

        Raises:
            FileNotFoundError: If path doesn't exist.
            OSError: If an entry cannot be removed.
        """
        if os.path.islink(path):
            os.unlink(path)
            return
        shutil.rmtree(path)
