"""External command execution for tools such as the Docker CLI."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass

log = logging.getLogger(__name__)

# Exit codes reported for failures that never reached the tool.
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124

_DOCKER_FALLBACK_PATHS = ("/usr/local/bin/docker", "/opt/homebrew/bin/docker")


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a tool invocation.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


class ToolRunner:
    """Runs one command-line tool with fixed argument lists.

    Missing binaries, timeouts and OS errors come back as failed
    CommandResults; nothing is raised.
    """

    def __init__(
        self,
        name: str = "docker",
        fallback_paths: tuple[str, ...] = _DOCKER_FALLBACK_PATHS,
        timeout: float = 300.0,
    ) -> None:
        self.name = name
        self._fallback_paths = fallback_paths
        self._timeout = timeout

    def executable(self) -> str | None:
        """Locate the tool on PATH or at a well-known install location."""
        found = shutil.which(self.name)
        if found:
            return found
        for candidate in self._fallback_paths:
            if os.access(candidate, os.X_OK):
                return candidate
        return None

    def available(self) -> bool:
        return self.executable() is not None

    def run(self, args: list[str]) -> CommandResult:
        """Run the tool with *args* and capture its output."""
        exe = self.executable()
        if exe is None:
            return CommandResult(stdout="", stderr=f"{self.name} not found", returncode=EXIT_NOT_FOUND)

        log.debug("Running: %s %s", exe, " ".join(args))
        try:
            proc = subprocess.run(
                [exe, *args],
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            log.warning("%s %s timed out after %.0fs", self.name, " ".join(args), self._timeout)
            return CommandResult(stdout="", stderr="command timed out", returncode=EXIT_TIMEOUT)
        except OSError as e:
            log.warning("Could not run %s: %s", self.name, e)
            return CommandResult(stdout="", stderr=str(e), returncode=EXIT_NOT_FOUND)

        return CommandResult(stdout=proc.stdout, stderr=proc.stderr, returncode=proc.returncode)
