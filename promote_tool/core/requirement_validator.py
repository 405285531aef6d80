# promote_tool/core/requirement_validator.py
"""Environment requirement checks"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from ..api.exceptions import PromoteToolError
from ..models.config import GitIdentity, PromoteConfig
from ..models.requirement import RequirementCheck, RequirementResult, RequirementStatus
from .discovery import GitDiscovery
from .git_runner import GitRunner

logger = logging.getLogger(__name__)

SOURCE_GLOBAL = "Git global config"
SOURCE_APP = "application settings"


@dataclass
class ValidationContext:
    """Inputs for one validation run"""
    config: PromoteConfig
    runner: GitRunner
    discovery: GitDiscovery = field(default_factory=GitDiscovery)


@dataclass
class IdentityLookup:
    """Resolved identity and the source that supplied it

    When no source is complete, ``identity`` only holds partial values
    suitable as prompt defaults.
    """
    identity: GitIdentity
    source: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.source is not None


class RequirementValidator:
    """Check preconditions for a promotion

    Every check runs regardless of the others; the caller aggregates.
    """

    async def validate(self, context: ValidationContext) -> List[RequirementResult]:
        """
        Run all checks

        Args:
            context: Configuration and collaborators

        Returns:
            One RequirementResult per checked item, in check order
        """
        tool_result, runner = await self.check_tool(context)
        results = [
            tool_result,
            await self.check_identity(context.config, runner),
            self.check_path(RequirementCheck.WORKING_PATH, "Working tree", context.config.working_path),
            self.check_path(RequirementCheck.PRODUCTION_PATH, "Production tree", context.config.production_path),
            self.check_credential(context.config),
            self.check_repository(context.config),
        ]

        for result in results:
            logger.debug(str(result))
        return results

    async def check_tool(self, context: ValidationContext) -> Tuple[RequirementResult, GitRunner]:
        """Check git, falling back to discovered installations

        Returns:
            The result and the runner to use for follow-up checks
        """
        runner = context.runner
        version = await runner.probe()
        if version:
            return RequirementResult(
                RequirementCheck.TOOL, "Git installation", RequirementStatus.PASS, version
            ), runner

        found = await self.find_executable(runner, context.discovery)
        if found:
            path, version = found
            return RequirementResult(
                RequirementCheck.TOOL,
                "Git installation",
                RequirementStatus.WARNING,
                f"{version} found at {path} (not on the configured path)",
                detail=path,
            ), runner.with_executable(path)

        return RequirementResult(
            RequirementCheck.TOOL,
            "Git installation",
            RequirementStatus.FAIL,
            f"Git not found ({runner.executable}); install Git or set git.path",
        ), runner

    @staticmethod
    async def find_executable(runner: GitRunner,
                              discovery: GitDiscovery) -> Optional[Tuple[str, str]]:
        """Probe discovered candidates and return the first working one"""
        for candidate in discovery.discover():
            if candidate == runner.executable:
                continue
            version = await runner.probe(candidate)
            if version:
                return candidate, version
        return None

    async def lookup_identity(self, config: PromoteConfig, runner: GitRunner) -> IdentityLookup:
        """Take the first complete identity: global git config, then application settings"""
        global_identity = GitIdentity(
            await self._global_config(runner, "user.name"),
            await self._global_config(runner, "user.email"),
        )
        if global_identity.is_complete:
            return IdentityLookup(global_identity, SOURCE_GLOBAL)

        app = config.git.identity
        if app.is_complete:
            return IdentityLookup(app, SOURCE_APP)

        return IdentityLookup(GitIdentity(
            global_identity.name or app.name,
            global_identity.email or app.email,
        ))

    async def check_identity(self, config: PromoteConfig, runner: GitRunner) -> RequirementResult:
        lookup = await self.lookup_identity(config, runner)
        if lookup.found:
            return RequirementResult(
                RequirementCheck.IDENTITY,
                "Git identity",
                RequirementStatus.PASS,
                f"{lookup.identity} (from {lookup.source})",
            )
        return RequirementResult(
            RequirementCheck.IDENTITY,
            "Git identity",
            RequirementStatus.FAIL,
            "Git user name or email not configured",
        )

    @staticmethod
    def check_path(check: RequirementCheck, name: str, path: str) -> RequirementResult:
        if not path:
            return RequirementResult(check, name, RequirementStatus.FAIL, "Path is not configured")
        if not Path(path).expanduser().is_dir():
            return RequirementResult(check, name, RequirementStatus.FAIL, f"Directory not found: {path}")
        return RequirementResult(check, name, RequirementStatus.PASS, path)

    @staticmethod
    def check_credential(config: PromoteConfig) -> RequirementResult:
        if config.remote.token:
            return RequirementResult(
                RequirementCheck.CREDENTIAL, "Access token", RequirementStatus.PASS, "Token configured"
            )
        return RequirementResult(
            RequirementCheck.CREDENTIAL, "Access token", RequirementStatus.FAIL, "Access token is not configured"
        )

    @staticmethod
    def check_repository(config: PromoteConfig) -> RequirementResult:
        remote = config.remote
        if remote.has_repository:
            return RequirementResult(
                RequirementCheck.REPOSITORY, "Remote repository", RequirementStatus.PASS, remote.slug
            )
        if remote.remote_url:
            return RequirementResult(
                RequirementCheck.REPOSITORY, "Remote repository", RequirementStatus.PASS, "Explicit remote URL"
            )
        return RequirementResult(
            RequirementCheck.REPOSITORY,
            "Remote repository",
            RequirementStatus.FAIL,
            "Repository owner and name are not configured",
        )

    @staticmethod
    async def _global_config(runner: GitRunner, key: str) -> str:
        try:
            output = await runner.run(["config", "--global", key])
        except PromoteToolError as e:
            logger.debug(f"Could not read global {key}: {e}")
            return ""
        return output.stdout.strip() if output.ok else ""
