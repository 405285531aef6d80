"""Promoter API for promotion operations"""

from pathlib import Path
from typing import Callable, List, Optional, Union

from ..core.discovery import GitDiscovery
from ..core.git_runner import GitRunner
from ..core.requirement_validator import RequirementValidator, ValidationContext
from ..hosting.github import GitHubHost
from ..models.change import ChangeSet
from ..models.config import GitIdentity, PromoteConfig
from ..models.requirement import RequirementResult
from ..models.result import ConfirmationDecision, MirrorResult, PromotionOutcome, SetupResult
from ..services.config_service import ConfigService
from ..services.promotion_service import PromotionOrchestrator
from ..services.setup_service import SetupService
from ..services.status_service import StatusService, TreeStatus
from ..utils.async_utils import run_async

ConfirmFunc = Callable[[ChangeSet], bool]
IdentityFunc = Callable[[str, str], Optional[GitIdentity]]


class Promoter:
    """Synchronous entry point for all promotion operations"""

    def __init__(self,
                 config: Optional[PromoteConfig] = None,
                 config_path: Optional[Union[str, Path]] = None):
        """
        Initialize promoter

        Args:
            config: Configuration to use; loaded from ``config_path`` if omitted
            config_path: Configuration file (defaults to the project file)
        """
        self.config_service = ConfigService(config_path)
        self.config = config if config is not None else self.config_service.config
        self.discovery = GitDiscovery()

    def _orchestrator(self) -> PromotionOrchestrator:
        return PromotionOrchestrator(
            self.config,
            runner=GitRunner(self.config.git_executable),
            discovery=self.discovery,
            config_service=self.config_service if self.config_service.exists else None,
        )

    def promote(self,
                confirm: Optional[ConfirmFunc] = None,
                identity: Optional[IdentityFunc] = None,
                resume_from: Optional[PromotionOutcome] = None) -> PromotionOutcome:
        """
        Promote working tree changes to production

        Args:
            confirm: Approves the change set; approves everything when omitted
            identity: Supplies a commit identity when none is configured
            resume_from: Failed outcome to resume

        Returns:
            PromotionOutcome
        """
        async def confirm_async(change_set: ChangeSet) -> ConfirmationDecision:
            if confirm is None or confirm(change_set):
                return ConfirmationDecision.APPROVE
            return ConfirmationDecision.CANCEL

        identity_async = None
        if identity is not None:
            async def identity_async(name: str, email: str) -> Optional[GitIdentity]:
                return identity(name, email)

        return run_async(self._orchestrator().promote(confirm_async, identity_async, resume_from))

    def generate_report(self) -> PromotionOutcome:
        """Write a change report without promoting"""
        return run_async(self._orchestrator().generate_report())

    def compare(self) -> PromotionOutcome:
        """Classify the difference between working and production"""
        return run_async(self._orchestrator().compare())

    def mirror(self) -> MirrorResult:
        """Copy the working tree onto the production tree and stage it"""
        return run_async(self._orchestrator().mirror())

    def setup(self, identity: Optional[IdentityFunc] = None) -> SetupResult:
        """Initialize both repositories against the remote"""
        identity_async = None
        if identity is not None:
            async def identity_async(name: str, email: str) -> Optional[GitIdentity]:
                return identity(name, email)

        service = SetupService(
            self.config,
            config_service=self.config_service if self.config_service.exists else None,
            discovery=self.discovery,
        )
        return run_async(service.setup(identity_async))

    def status(self) -> List[TreeStatus]:
        """Branch and content status of both trees"""
        return run_async(StatusService(self.config).collect())

    def check_requirements(self) -> List[RequirementResult]:
        """Run every environment check"""
        context = ValidationContext(self.config, GitRunner(self.config.git_executable), self.discovery)
        return run_async(RequirementValidator().validate(context))

    def validate_token(self) -> str:
        """Check the access token against the hosting API

        Returns:
            Login name of the token owner
        """
        async def _validate() -> str:
            async with GitHubHost(self.config.remote) as host:
                return await host.validate_credentials()

        return run_async(_validate())


def promote(config_path: Optional[Union[str, Path]] = None,
            confirm: Optional[ConfirmFunc] = None) -> PromotionOutcome:
    """
    Convenience function to run a promotion

    Args:
        config_path: Configuration file
        confirm: Approval callback; approves everything when omitted

    Returns:
        PromotionOutcome
    """
    return Promoter(config_path=config_path).promote(confirm=confirm)
