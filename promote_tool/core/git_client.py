# promote_tool/core/git_client.py
"""Typed git operations bound to one working directory"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..api.exceptions import GitCommandError
from ..constants import DEFAULT_REMOTE_NAME
from ..models.config import GitIdentity
from .git_runner import GitOutput, GitRunner

logger = logging.getLogger(__name__)


class GitClient:
    """Git operations for a single repository directory"""

    def __init__(self, runner: GitRunner, cwd: Union[str, Path], remote: str = DEFAULT_REMOTE_NAME):
        self.runner = runner
        self.cwd = Path(cwd)
        self.remote = remote

    async def run(self, *args: str) -> GitOutput:
        return await self.runner.run(list(args), cwd=self.cwd)

    # Inspection

    async def is_repository(self) -> bool:
        """Check if the directory is inside a git work tree"""
        try:
            output = await self.run("rev-parse", "--is-inside-work-tree")
        except GitCommandError:
            return False
        return output.ok and output.stdout.strip() == "true"

    async def current_branch(self) -> Optional[str]:
        """Current branch name, or None when detached or unavailable"""
        try:
            output = await self.run("branch", "--show-current")
        except GitCommandError:
            return None
        return output.stdout.strip() or None

    async def status_short(self) -> List[str]:
        """Lines of ``git status --short``"""
        output = await self.run("status", "--short")
        return [line for line in output.stdout.splitlines() if line.strip()]

    async def last_commit(self) -> Optional[str]:
        """One-line description of HEAD, or None for an empty repository"""
        try:
            output = await self.run("log", "-1", "--format=%h %s (%cr)")
        except GitCommandError:
            return None
        return output.stdout.strip() or None

    async def remote_url(self) -> Optional[str]:
        try:
            output = await self.run("remote", "get-url", self.remote)
        except GitCommandError:
            return None
        return output.stdout.strip() or None

    # Working tree

    async def stage_all(self) -> GitOutput:
        return await self.run("add", "-A")

    async def commit(self, message: str, identity: Optional[GitIdentity] = None) -> bool:
        """
        Commit staged changes

        Args:
            message: Commit message
            identity: Author identity passed per command, if set

        Returns:
            True if a commit was created, False when there was nothing to commit

        Raises:
            GitCommandError: If the commit failed for any other reason
        """
        args = []
        if identity is not None and identity.is_complete:
            args += ["-c", f"user.name={identity.name}", "-c", f"user.email={identity.email}"]
        args += ["commit", "-m", message]

        output = await self.runner.run(args, cwd=self.cwd)
        if output.nothing_to_commit:
            logger.info(f"Nothing to commit in {self.cwd}")
            return False
        if not output.ok:
            raise GitCommandError("git commit", output.stderr or output.stdout, output.returncode)
        return True

    async def checkout(self, branch: str) -> GitOutput:
        return await self.run("checkout", branch)

    async def checkout_reset(self, branch: str, start_point: Optional[str] = None) -> GitOutput:
        """Create or reset ``branch`` and check it out"""
        args = ["checkout", "-B", branch]
        if start_point:
            args.append(start_point)
        return await self.run(*args)

    async def reset_hard(self, ref: str) -> GitOutput:
        return await self.run("reset", "--hard", ref)

    async def init(self) -> GitOutput:
        return await self.run("init")

    # Remote

    async def set_remote(self, url: str) -> None:
        """Add the remote, or update its URL when it already exists"""
        if await self.remote_url() is None:
            await self.run("remote", "add", self.remote, url)
        else:
            await self.run("remote", "set-url", self.remote, url)

    async def fetch(self, branch: str) -> GitOutput:
        return await self.run("fetch", self.remote, branch)

    async def push(self, refspec: str, force: bool = False, force_with_lease: bool = False,
                   set_upstream: bool = False) -> GitOutput:
        """
        Push a branch or refspec to the remote

        Args:
            refspec: Branch name or ``src:dst``
            force: Unconditional forced update
            force_with_lease: Forced update that fails if the remote moved
            set_upstream: Record the upstream branch
        """
        args = ["push"]
        if set_upstream:
            args.append("-u")
        args += [self.remote, refspec]
        if force:
            args.append("--force")
        elif force_with_lease:
            args.append("--force-with-lease")
        return await self.run(*args)

    async def diff(self, base: str, head: str) -> str:
        """Diff between two refs with rename detection"""
        output = await self.run(
            "-c", "core.quotepath=false",
            "diff", "--find-renames", "--no-color", base, head
        )
        return output.stdout

    # Configuration

    async def get_config(self, key: str, scope: str = "--global") -> str:
        """Config value, empty when unset"""
        try:
            output = await self.run("config", scope, key)
        except GitCommandError:
            return ""
        return output.stdout.strip()

    async def set_config(self, key: str, value: str, scope: str = "--local") -> GitOutput:
        return await self.run("config", scope, key, value)
