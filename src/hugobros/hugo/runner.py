"""
Hugo executable wrapper.

Runs one-off hugo commands and tracks background ``hugo server`` processes.
Server processes live in a ServerRegistry that callers pass in, so several
runners can share one registry and tests can use a fresh one.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from hugobros.core.errors import ConflictError, ContentIOError, NotFoundError

logger = logging.getLogger(__name__)

HUGO_EXECUTABLE = "hugo"
STOP_TIMEOUT = 5


@dataclass
class CommandOutput:
    """Result of a finished hugo command."""

    success: bool
    stdout: str
    stderr: str
    exit_code: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
        }


class ServerRegistry:
    """Running server processes keyed by project path."""

    def __init__(self) -> None:
        self._servers: dict[str, subprocess.Popen] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._servers

    def __len__(self) -> int:
        return len(self._servers)

    def add(self, key: str, process: subprocess.Popen) -> None:
        """Track a process.

        Raises:
            ConflictError: If a process is already tracked for key
        """
        if key in self._servers:
            raise ConflictError(f"Server is already running for {key}")
        self._servers[key] = process

    def remove(self, key: str) -> subprocess.Popen:
        """Stop tracking a process and return it.

        Raises:
            NotFoundError: If nothing is tracked for key
        """
        try:
            return self._servers.pop(key)
        except KeyError:
            raise NotFoundError(f"Server not found: {key}") from None

    def get(self, key: str) -> subprocess.Popen:
        """Return the tracked process.

        Raises:
            NotFoundError: If nothing is tracked for key
        """
        try:
            return self._servers[key]
        except KeyError:
            raise NotFoundError(f"Server not found: {key}") from None

    def keys(self) -> list[str]:
        return list(self._servers)


class HugoRunner:
    """Runs hugo inside one site root."""

    def __init__(
        self,
        site_root: Path,
        registry: ServerRegistry | None = None,
        executable: str = HUGO_EXECUTABLE,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ):
        """Initialize runner.

        Args:
            site_root: Hugo site root, used as the working directory
            registry: Shared server registry (a private one if omitted)
            executable: Name or path of the hugo binary
            popen: Process factory for background servers
        """
        self.site_root = Path(site_root)
        self.registry = registry if registry is not None else ServerRegistry()
        self.executable = executable
        self._popen = popen

    @property
    def server_id(self) -> str:
        return str(self.site_root)

    def run(self, args: Sequence[str], timeout: float | None = None) -> CommandOutput:
        """Run ``hugo <args>`` to completion and capture its output.

        Raises:
            ContentIOError: If the hugo executable can't be started
        """
        cmd = [self.executable, *args]
        logger.debug("Running %s in %s", cmd, self.site_root)
        try:
            result = subprocess.run(
                cmd,
                cwd=self.site_root,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise ContentIOError(f"Failed to execute {self.executable}: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise ContentIOError(f"{self.executable} timed out after {timeout}s") from e

        return CommandOutput(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            exit_code=result.returncode,
        )

    def start_server(
        self,
        args: Sequence[str] = (),
        stdout: Any = subprocess.DEVNULL,
        stderr: Any = subprocess.DEVNULL,
    ) -> str:
        """Start ``hugo server`` in the background.

        Output is discarded unless the caller passes streams. ``None`` lets
        the server write to the caller's terminal.

        Returns:
            Server id (the site root path)

        Raises:
            ConflictError: If a server is already running for this site
            ContentIOError: If the process can't be started
        """
        if self.server_id in self.registry:
            raise ConflictError("Server is already running", path=self.site_root)

        try:
            process = self._popen(
                [self.executable, "server", *args],
                cwd=self.site_root,
                stdin=subprocess.DEVNULL,
                stdout=stdout,
                stderr=stderr,
            )
        except OSError as e:
            raise ContentIOError(f"Failed to start hugo server: {e}") from e

        self.registry.add(self.server_id, process)
        logger.info("Started hugo server for %s (pid %s)", self.site_root, process.pid)
        return self.server_id

    def stop_server(self, server_id: str | None = None) -> None:
        """Terminate a tracked server.

        Raises:
            NotFoundError: If no server is tracked under server_id
            ContentIOError: If the process can't be signalled
        """
        key = server_id or self.server_id
        process = self.registry.remove(key)
        try:
            process.terminate()
            try:
                process.wait(timeout=STOP_TIMEOUT)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
        except OSError as e:
            raise ContentIOError(f"Failed to kill server process: {e}") from e
        logger.info("Stopped hugo server for %s", key)

    def is_running(self) -> bool:
        return self.server_id in self.registry
