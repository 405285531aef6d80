# promote_tool/core/git_runner.py
"""Asynchronous git command execution"""

import asyncio
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from ..api.exceptions import (
    GitAuthenticationError,
    GitAuthorizationError,
    GitCommandError,
    GitNetworkError,
    RemoteRejectedError,
    ToolMissingError,
)
from ..constants import (
    AUTH_ERROR_MARKERS,
    AUTHORIZATION_ERROR_MARKERS,
    DEFAULT_GIT_EXECUTABLE,
    DEFAULT_GIT_TIMEOUT,
    FATAL_MARKERS,
    GIT_VERSION_MARKER,
    NETWORK_ERROR_MARKERS,
    NOTHING_TO_COMMIT_MARKERS,
    REJECTED_MARKERS,
)

logger = logging.getLogger(__name__)

CREDENTIAL_PATTERN = re.compile(r"(https?://)[^/@\s]+@")


def redact(text: str) -> str:
    """Hide credentials embedded in remote URLs"""
    return CREDENTIAL_PATTERN.sub(r"\1***@", text)


@dataclass
class GitOutput:
    """Captured output of one git invocation"""
    stdout: str
    stderr: str
    returncode: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def nothing_to_commit(self) -> bool:
        combined = f"{self.stdout}\n{self.stderr}".lower()
        return any(marker in combined for marker in NOTHING_TO_COMMIT_MARKERS)


def is_fatal(stderr: str) -> bool:
    """Check if stderr signals a real failure rather than a benign non-zero exit"""
    return any(marker in stderr for marker in FATAL_MARKERS)


def classify_failure(command: str, stderr: str, returncode: int) -> GitCommandError:
    """
    Build the exception matching a fatal git failure

    Args:
        command: Redacted command line
        stderr: Captured standard error
        returncode: Exit status

    Returns:
        GitCommandError subclass
    """
    lowered = stderr.lower()

    if any(marker in lowered for marker in REJECTED_MARKERS):
        return RemoteRejectedError(command, stderr, returncode)
    if any(marker in lowered for marker in AUTHORIZATION_ERROR_MARKERS):
        return GitAuthorizationError(command, stderr, returncode)
    if any(marker in lowered for marker in AUTH_ERROR_MARKERS):
        return GitAuthenticationError(command, stderr, returncode)
    if any(marker in lowered for marker in NETWORK_ERROR_MARKERS):
        return GitNetworkError(command, stderr, returncode)
    return GitCommandError(command, stderr, returncode)


class GitRunner:
    """Run git commands as subprocesses

    A non-zero exit only raises when stderr carries a fatal marker; other
    non-zero exits are returned so the caller can inspect the output.
    """

    def __init__(self, executable: str = DEFAULT_GIT_EXECUTABLE,
                 timeout: float = DEFAULT_GIT_TIMEOUT):
        self.executable = executable or DEFAULT_GIT_EXECUTABLE
        self.timeout = timeout

    def with_executable(self, executable: str) -> 'GitRunner':
        """Runner bound to another executable"""
        return GitRunner(executable, self.timeout)

    async def run(self, args: Sequence[str],
                  cwd: Optional[Union[str, Path]] = None) -> GitOutput:
        """
        Run a git command

        Args:
            args: Arguments after the executable
            cwd: Working directory

        Returns:
            GitOutput

        Raises:
            ToolMissingError: If the executable cannot be started
            GitCommandError: If the command failed fatally
        """
        command = redact(" ".join(["git"] + list(args)))
        logger.debug(f"Running: {command} (cwd={cwd})")

        try:
            process = await asyncio.create_subprocess_exec(
                self.executable,
                *args,
                cwd=str(cwd) if cwd else None,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise ToolMissingError(self.executable) from e
        except PermissionError as e:
            raise ToolMissingError(
                self.executable, f"Git executable is not runnable: {self.executable}"
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise GitCommandError(command, f"fatal: timed out after {self.timeout} seconds")

        output = GitOutput(
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            returncode=process.returncode,
        )

        if output.returncode != 0:
            if is_fatal(output.stderr):
                logger.debug(f"Command failed ({output.returncode}): {redact(output.stderr.strip())}")
                raise classify_failure(command, redact(output.stderr), output.returncode)
            logger.debug(f"Command exited with {output.returncode}, treated as non-fatal")

        return output

    async def probe(self, executable: Optional[str] = None) -> Optional[str]:
        """
        Check that an executable is a working git

        Args:
            executable: Executable to probe, defaults to this runner's

        Returns:
            Version string, or None if the executable is unusable
        """
        runner = self if executable is None else self.with_executable(executable)
        try:
            output = await runner.run(["--version"])
        except (ToolMissingError, GitCommandError) as e:
            logger.debug(f"Probe of {runner.executable} failed: {e}")
            return None

        version = output.stdout.strip()
        if GIT_VERSION_MARKER in version:
            return version
        return None
