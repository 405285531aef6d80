"""Repository setup service"""

import logging
from pathlib import Path
from typing import Optional

import aiofiles

from ..api.exceptions import (
    FilesystemError,
    GitCommandError,
    IdentityMissingError,
    PromoteToolError,
    RequirementsNotMetError,
)
from ..constants import (
    DEFAULT_REMOTE_NAME,
    GIT_IGNORE_TEMPLATE,
    PRODUCTION_INITIAL_COMMIT,
    WORKING_INITIAL_COMMIT,
)
from ..core.discovery import GitDiscovery
from ..core.git_client import GitClient
from ..core.git_runner import GitRunner, redact
from ..core.requirement_validator import RequirementValidator, ValidationContext
from ..models.config import GitIdentity, PromoteConfig
from ..models.requirement import RequirementCheck, RequirementStatus, find_result
from ..models.result import OperationStatus, SetupResult
from ..utils.file_utils import classify_os_error
from .config_service import ConfigService
from .promotion_service import CHECK_ERROR_KINDS, IdentityProvider

logger = logging.getLogger(__name__)

GITIGNORE_FILE = ".gitignore"


class SetupService:
    """Bind both trees to the remote repository

    The working tree is committed to the working branch and force-published.
    The production branch is created from the remote working branch, or from
    the current production content when that branch cannot be fetched.
    """

    def __init__(self,
                 config: PromoteConfig,
                 runner: Optional[GitRunner] = None,
                 config_service: Optional[ConfigService] = None,
                 validator: Optional[RequirementValidator] = None,
                 discovery: Optional[GitDiscovery] = None):
        self.config = config
        self.runner = runner or GitRunner(config.git_executable)
        self.config_service = config_service
        self.validator = validator or RequirementValidator()
        self.discovery = discovery or GitDiscovery()

    async def setup(self, identity_provider: Optional[IdentityProvider] = None) -> SetupResult:
        """
        Initialize both repositories

        Args:
            identity_provider: Asked for a commit identity when none is configured

        Returns:
            SetupResult listing the completed steps
        """
        result = SetupResult(status=OperationStatus.IN_PROGRESS)

        try:
            identity = await self._check_environment(result, identity_provider)
            remote_url = self.config.remote.clone_url()
            branches = self.config.branches

            working = GitClient(self.runner, self.config.working_root, DEFAULT_REMOTE_NAME)
            await self._init_repository(working, remote_url, result)
            await self._write_ignore_file(self.config.working_root, result)

            await working.checkout_reset(branches.working)
            await self._set_local_identity(working, identity)
            await working.stage_all()
            await working.commit(WORKING_INITIAL_COMMIT, identity)
            result.step(f"Committed working tree to branch {branches.working}")

            await working.push(branches.working, force=True, set_upstream=True)
            result.step(f"Published branch {branches.working}")

            production = GitClient(self.runner, self.config.production_root, DEFAULT_REMOTE_NAME)
            await self._init_repository(production, remote_url, result)

            try:
                await production.fetch(branches.working)
                await production.checkout_reset(
                    branches.production, f"{DEFAULT_REMOTE_NAME}/{branches.working}"
                )
                result.step(f"Created branch {branches.production} from {branches.working}")
            except GitCommandError as e:
                logger.warning(f"Cannot branch from {branches.working}, committing production content: {e.message}")
                await production.checkout_reset(branches.production)
                await self._write_ignore_file(self.config.production_root, result)
                await self._set_local_identity(production, identity)
                await production.stage_all()
                await production.commit(PRODUCTION_INITIAL_COMMIT, identity)
                result.step(f"Committed production tree to branch {branches.production}")

            await production.push(branches.production, force=True, set_upstream=True)
            result.step(f"Published branch {branches.production}")

        except PromoteToolError as e:
            result.add_error(e.error_code or "", e.message, kind=e.kind.value)
            result.message = e.message
            logger.error(f"Setup failed: {e.message}")
            result.complete(OperationStatus.FAILED)
            return result

        result.message = "Both trees are connected to the remote repository"
        result.complete(OperationStatus.SUCCESS)
        return result

    async def _check_environment(self, result: SetupResult,
                                 identity_provider: Optional[IdentityProvider]) -> GitIdentity:
        context = ValidationContext(self.config, self.runner, self.discovery)
        results = await self.validator.validate(context)

        tool = find_result(results, RequirementCheck.TOOL)
        if tool is not None and tool.status == RequirementStatus.WARNING and tool.detail:
            self.runner = self.runner.with_executable(tool.detail)
            self.config.git.path = tool.detail
            if self.config_service is not None:
                self.config_service.save_config(self.config)
            result.add_warning(f"Using Git at {tool.detail}")

        blocking = [
            r for r in results
            if r.failed and not (identity_provider and r.check == RequirementCheck.IDENTITY)
        ]
        if blocking:
            raise RequirementsNotMetError(blocking, CHECK_ERROR_KINDS[blocking[0].check])

        lookup = await self.validator.lookup_identity(self.config, self.runner)
        if lookup.found:
            return lookup.identity

        identity = await identity_provider(lookup.identity.name, lookup.identity.email)
        if identity is None or not identity.is_complete:
            raise IdentityMissingError("Git identity was not provided")

        self.config.git.user_name = identity.name
        self.config.git.user_email = identity.email
        if self.config_service is not None:
            self.config_service.save_config(self.config)
        result.step("Saved Git identity to application settings")
        return identity

    async def _init_repository(self, client: GitClient, remote_url: str, result: SetupResult) -> None:
        if not await client.is_repository():
            await client.init()
            result.step(f"Initialized repository in {client.cwd}")
        await client.set_remote(remote_url)
        result.step(f"Set remote {client.remote} to {redact(remote_url)} in {client.cwd}")

    async def _write_ignore_file(self, root: Path, result: SetupResult) -> None:
        path = root / GITIGNORE_FILE
        if path.exists():
            return

        content = GIT_IGNORE_TEMPLATE.format(
            app_config_dir=self.config.app_config_dir,
            report_dir=self.config.report_dir,
        )
        try:
            async with aiofiles.open(path, "w", encoding="utf-8") as f:
                await f.write(content)
        except OSError as e:
            raise FilesystemError(
                f"Cannot write {path}: {e.strerror or e}", classify_os_error(e), str(path)
            ) from e
        result.step(f"Created {path}")

    async def _set_local_identity(self, client: GitClient, identity: GitIdentity) -> None:
        try:
            await client.set_config("user.name", identity.name)
            await client.set_config("user.email", identity.email)
        except GitCommandError as e:
            logger.warning(f"Could not set local identity in {client.cwd}: {e.message}")
