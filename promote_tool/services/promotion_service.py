"""Promotion service: working tree to production tree through the remote"""

import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

from ..api.exceptions import (
    ErrorKind,
    IdentityMissingError,
    PathNotFoundError,
    PromoteToolError,
    RemoteRejectedError,
    RequirementsNotMetError,
    ToolMissingError,
    ValidationConflictError,
)
from ..constants import (
    AUTO_COMMIT_MESSAGE,
    COMPARE_COMMIT_MESSAGE,
    DEFAULT_REMOTE_NAME,
    MergeStrategy,
    REPORT_COMMIT_MESSAGE,
    REPORT_TIMESTAMP_FORMAT,
)
from ..core.diff_classifier import DiffClassifier
from ..core.directory_sync import DirectorySynchronizer
from ..core.discovery import GitDiscovery
from ..core.folder_tree import FolderTreeBuilder
from ..core.git_client import GitClient
from ..core.git_runner import GitRunner
from ..core.report_generator import ReportGenerator, ReportMetadata
from ..core.requirement_validator import RequirementValidator, ValidationContext
from ..hosting.base import RemoteHost
from ..hosting.github import GitHubHost
from ..models.change import ChangeSet
from ..models.config import GitIdentity, PromoteConfig
from ..models.requirement import RequirementCheck, RequirementResult, RequirementStatus, find_result
from ..models.result import (
    ConfirmationDecision,
    MirrorResult,
    OperationStatus,
    PromotionOutcome,
    PromotionPhase,
)
from ..storage.base import ReportStorage
from ..storage.filesystem import FilesystemReportStorage
from .config_service import ConfigService

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[ChangeSet], Awaitable[ConfirmationDecision]]
IdentityProvider = Callable[[str, str], Awaitable[Optional[GitIdentity]]]

# Error kind reported when a requirement check blocks the run
CHECK_ERROR_KINDS = {
    RequirementCheck.TOOL: ErrorKind.TOOL_MISSING,
    RequirementCheck.IDENTITY: ErrorKind.IDENTITY_MISSING,
    RequirementCheck.WORKING_PATH: ErrorKind.PATH_NOT_FOUND,
    RequirementCheck.PRODUCTION_PATH: ErrorKind.PATH_NOT_FOUND,
    RequirementCheck.CREDENTIAL: ErrorKind.AUTHENTICATION_FAILED,
    RequirementCheck.REPOSITORY: ErrorKind.CONFIGURATION,
}


class PromotionOrchestrator:
    """Sequence one promotion from validation to report emission

    Phases run strictly in order::

        validate -> repair -> configure_identity -> sync_working_branch
        -> compute_diff -> await_confirmation -> merge_to_production
        -> resync_local_production -> emit_report

    Any ``PromoteToolError`` stops the run and is returned as a failed
    outcome carrying the phase, so the caller can resume from there.
    Only the working-branch publish is ever retried, once.
    """

    def __init__(self,
                 config: PromoteConfig,
                 runner: Optional[GitRunner] = None,
                 host: Optional[RemoteHost] = None,
                 storage: Optional[ReportStorage] = None,
                 discovery: Optional[GitDiscovery] = None,
                 config_service: Optional[ConfigService] = None,
                 validator: Optional[RequirementValidator] = None,
                 classifier: Optional[DiffClassifier] = None,
                 tree_builder: Optional[FolderTreeBuilder] = None,
                 report_generator: Optional[ReportGenerator] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.config = config
        self.runner = runner or GitRunner(config.git_executable)
        self.host = host or GitHubHost(config.remote)
        self._owns_host = host is None
        self.storage = storage or FilesystemReportStorage(config.production_root / config.report_dir)
        self.discovery = discovery or GitDiscovery()
        self.config_service = config_service
        self.validator = validator or RequirementValidator()
        self.classifier = classifier or DiffClassifier(config.protected_names)
        self.tree_builder = tree_builder or FolderTreeBuilder()
        self.report_generator = report_generator or ReportGenerator()
        self.clock = clock
        self.identity: Optional[GitIdentity] = None

    @property
    def working(self) -> GitClient:
        return GitClient(self.runner, self.config.working_root, DEFAULT_REMOTE_NAME)

    @property
    def production(self) -> GitClient:
        return GitClient(self.runner, self.config.production_root, DEFAULT_REMOTE_NAME)

    async def close(self) -> None:
        if self._owns_host:
            await self.host.close()

    # Public operations

    async def promote(self,
                      confirm: ConfirmCallback,
                      identity_provider: Optional[IdentityProvider] = None,
                      resume_from: Optional[PromotionOutcome] = None) -> PromotionOutcome:
        """
        Run a full promotion

        Args:
            confirm: Called with the change set; returns approve or cancel
            identity_provider: Called with the partial identity when none is
                configured; returns the identity to use, or None to abort
            resume_from: Failed outcome of an earlier run; validation is
                repeated and execution continues at the failed phase

        Returns:
            PromotionOutcome
        """
        outcome = PromotionOutcome(status=OperationStatus.IN_PROGRESS)
        now = self.clock()
        start_at = PromotionPhase.SYNC_WORKING_BRANCH
        change_set = None
        diff_text = None

        if resume_from is not None and resume_from.is_resumable:
            start_at = resume_from.phase
            diff_text = resume_from.diff_text
            logger.info(f"Resuming promotion at phase {start_at.value}")
            if start_at.index > PromotionPhase.COMPUTE_DIFF.index and diff_text is None:
                start_at = PromotionPhase.COMPUTE_DIFF

        def should_run(phase: PromotionPhase) -> bool:
            return phase.index >= start_at.index

        try:
            await self._prepare(outcome, identity_provider)

            if should_run(PromotionPhase.SYNC_WORKING_BRANCH):
                self._enter(outcome, PromotionPhase.SYNC_WORKING_BRANCH)
                await self._sync_working_branch(AUTO_COMMIT_MESSAGE, now)
                outcome.mark_phase(PromotionPhase.SYNC_WORKING_BRANCH)

            if should_run(PromotionPhase.COMPUTE_DIFF):
                self._enter(outcome, PromotionPhase.COMPUTE_DIFF)
                diff_text = await self._fetch_diff()
                outcome.mark_phase(PromotionPhase.COMPUTE_DIFF)

            change_set = self.classifier.classify(diff_text)
            outcome.diff_text = diff_text
            outcome.change_set = change_set

            if change_set.is_empty:
                outcome.message = "Nothing to promote"
                logger.info(outcome.message)
                outcome.complete(OperationStatus.NOTHING_TO_PROMOTE)
                return outcome

            if should_run(PromotionPhase.AWAIT_CONFIRMATION):
                self._enter(outcome, PromotionPhase.AWAIT_CONFIRMATION)
                decision = await confirm(change_set)
                if decision != ConfirmationDecision.APPROVE:
                    outcome.message = "Promotion cancelled"
                    logger.info(outcome.message)
                    outcome.complete(OperationStatus.CANCELLED)
                    return outcome
                outcome.mark_phase(PromotionPhase.AWAIT_CONFIRMATION)

            if should_run(PromotionPhase.MERGE_TO_PRODUCTION):
                self._enter(outcome, PromotionPhase.MERGE_TO_PRODUCTION)
                outcome.merge_request_url = await self._merge_to_production(now)
                outcome.mark_phase(PromotionPhase.MERGE_TO_PRODUCTION)

            if should_run(PromotionPhase.RESYNC_LOCAL_PRODUCTION):
                self._enter(outcome, PromotionPhase.RESYNC_LOCAL_PRODUCTION)
                await self._resync_local_production()
                outcome.mark_phase(PromotionPhase.RESYNC_LOCAL_PRODUCTION)

            self._enter(outcome, PromotionPhase.EMIT_REPORT)
            metadata = ReportMetadata(
                repository_url=self.host.repository_url,
                history_url=self.host.history_url(self.config.branches.production),
                merge_request_url=outcome.merge_request_url,
            )
            outcome.report_id = await self._emit_report(change_set, metadata, now)
            outcome.mark_phase(PromotionPhase.EMIT_REPORT)

        except PromoteToolError as e:
            self._fail(outcome, e)
            return outcome
        finally:
            await self.close()

        outcome.phase = PromotionPhase.DONE
        outcome.message = f"Promoted {change_set.total} change(s)"
        logger.info(outcome.message)
        outcome.complete(OperationStatus.SUCCESS)
        return outcome

    async def generate_report(self) -> PromotionOutcome:
        """Publish the working branch and write a report without promoting

        The report links to the comparison between the production and
        working branches.
        """
        outcome = PromotionOutcome(status=OperationStatus.IN_PROGRESS)
        now = self.clock()

        try:
            await self._prepare(outcome, None)

            self._enter(outcome, PromotionPhase.SYNC_WORKING_BRANCH)
            await self._sync_working_branch(REPORT_COMMIT_MESSAGE, now)
            outcome.mark_phase(PromotionPhase.SYNC_WORKING_BRANCH)

            self._enter(outcome, PromotionPhase.COMPUTE_DIFF)
            outcome.diff_text = await self._fetch_diff()
            outcome.change_set = self.classifier.classify(outcome.diff_text)
            outcome.mark_phase(PromotionPhase.COMPUTE_DIFF)

            self._enter(outcome, PromotionPhase.EMIT_REPORT)
            branches = self.config.branches
            metadata = ReportMetadata(
                repository_url=self.host.repository_url,
                history_url=self.host.compare_url(branches.production, branches.working),
            )
            outcome.report_id = await self._emit_report(outcome.change_set, metadata, now)
            outcome.mark_phase(PromotionPhase.EMIT_REPORT)
        except PromoteToolError as e:
            self._fail(outcome, e)
            return outcome
        finally:
            await self.close()

        outcome.phase = PromotionPhase.DONE
        outcome.message = f"Report generated for {outcome.change_set.total} change(s)"
        outcome.complete(OperationStatus.SUCCESS)
        return outcome

    async def compare(self) -> PromotionOutcome:
        """Publish the working branch and classify its difference to production"""
        outcome = PromotionOutcome(status=OperationStatus.IN_PROGRESS)
        now = self.clock()

        try:
            await self._prepare(outcome, None)

            self._enter(outcome, PromotionPhase.SYNC_WORKING_BRANCH)
            await self._sync_working_branch(COMPARE_COMMIT_MESSAGE, now)
            outcome.mark_phase(PromotionPhase.SYNC_WORKING_BRANCH)

            self._enter(outcome, PromotionPhase.COMPUTE_DIFF)
            outcome.diff_text = await self._fetch_diff()
            outcome.change_set = self.classifier.classify(outcome.diff_text)
            outcome.mark_phase(PromotionPhase.COMPUTE_DIFF)
        except PromoteToolError as e:
            self._fail(outcome, e)
            return outcome
        finally:
            await self.close()

        outcome.phase = PromotionPhase.DONE
        if outcome.change_set.is_empty:
            outcome.message = "No differences found"
            outcome.complete(OperationStatus.NOTHING_TO_PROMOTE)
        else:
            outcome.message = f"Found {outcome.change_set.total} change(s)"
            outcome.complete(OperationStatus.SUCCESS)
        return outcome

    async def mirror(self) -> MirrorResult:
        """Copy the working tree onto the production tree and stage the result"""
        result = MirrorResult(status=OperationStatus.IN_PROGRESS)
        synchronizer = DirectorySynchronizer(self.config.protected_names)

        try:
            result.sync = synchronizer.sync(self.config.working_root, self.config.production_root)
            await self.production.stage_all()
        except PromoteToolError as e:
            result.add_error(e.error_code or "", e.message, kind=e.kind.value)
            result.message = e.message
            result.complete(OperationStatus.FAILED)
            return result

        result.message = (
            f"Copied {len(result.sync.copied)} file(s), removed {len(result.sync.deleted)} entr(ies)"
        )
        result.complete(OperationStatus.SUCCESS)
        return result

    # Phases

    def _enter(self, outcome: PromotionOutcome, phase: PromotionPhase) -> None:
        outcome.phase = phase
        logger.info(f"Phase: {phase.value}")

    def _fail(self, outcome: PromotionOutcome, error: PromoteToolError) -> None:
        if error.phase is None:
            error.with_phase(outcome.phase)
        outcome.error_kind = error.kind
        outcome.message = error.message
        outcome.add_error(error.error_code or "", error.message, phase=outcome.phase.value)
        logger.error(f"{outcome.phase.value} failed: {error.message}")
        outcome.complete(OperationStatus.FAILED)

    async def _prepare(self, outcome: PromotionOutcome,
                       identity_provider: Optional[IdentityProvider]) -> None:
        """Validate, repair and configure identity"""
        self._enter(outcome, PromotionPhase.VALIDATE)
        results = await self._validate()

        tool = find_result(results, RequirementCheck.TOOL)
        if tool is not None and tool.status != RequirementStatus.PASS:
            self._enter(outcome, PromotionPhase.REPAIR)
            await self._repair(tool)
            outcome.mark_phase(PromotionPhase.REPAIR)
            outcome.add_warning(f"Using Git at {self.runner.executable}")
            self._enter(outcome, PromotionPhase.VALIDATE)
            results = await self._validate()

        outcome.requirements = results
        self._check_requirements(results, allow_identity=identity_provider is not None)
        await self._check_repositories()
        outcome.mark_phase(PromotionPhase.VALIDATE)

        identity = find_result(results, RequirementCheck.IDENTITY)
        if identity is not None and identity.failed:
            self._enter(outcome, PromotionPhase.CONFIGURE_IDENTITY)
            await self._configure_identity(identity_provider, outcome)
            outcome.mark_phase(PromotionPhase.CONFIGURE_IDENTITY)
        else:
            lookup = await self.validator.lookup_identity(self.config, self.runner)
            self.identity = lookup.identity

    async def _validate(self) -> List[RequirementResult]:
        context = ValidationContext(self.config, self.runner, self.discovery)
        return await self.validator.validate(context)

    def _check_requirements(self, results: List[RequirementResult], allow_identity: bool) -> None:
        blocking = [
            r for r in results
            if r.failed and not (allow_identity and r.check == RequirementCheck.IDENTITY)
        ]
        if blocking:
            raise RequirementsNotMetError(blocking, CHECK_ERROR_KINDS[blocking[0].check])

    async def _check_repositories(self) -> None:
        for label, client in (("Working", self.working), ("Production", self.production)):
            if not await client.is_repository():
                raise PathNotFoundError(
                    str(client.cwd),
                    f"{label} tree is not a Git repository: {client.cwd}. Run setup first."
                )

    async def _repair(self, tool: RequirementResult) -> None:
        """Adopt a working git executable and remember it"""
        path = tool.detail
        if tool.failed:
            found = await self.validator.find_executable(self.runner, self.discovery)
            if found is None:
                raise ToolMissingError(self.runner.executable, tool.message)
            path = found[0]

        logger.warning(f"Using discovered Git executable: {path}")
        self.runner = self.runner.with_executable(path)
        self.config.git.path = path
        if self.config_service is not None:
            self.config_service.save_config(self.config)

    async def _configure_identity(self, identity_provider: Optional[IdentityProvider],
                                  outcome: PromotionOutcome) -> None:
        lookup = await self.validator.lookup_identity(self.config, self.runner)
        if identity_provider is None:
            raise IdentityMissingError()

        identity = await identity_provider(lookup.identity.name, lookup.identity.email)
        if identity is None or not identity.is_complete:
            raise IdentityMissingError("Git identity was not provided")

        self.config.git.user_name = identity.name
        self.config.git.user_email = identity.email
        if self.config_service is not None:
            self.config_service.save_config(self.config)

        for client in (self.working, self.production):
            try:
                await client.set_config("user.name", identity.name)
                await client.set_config("user.email", identity.email)
            except PromoteToolError as e:
                logger.warning(f"Could not set local identity in {client.cwd}: {e.message}")
                outcome.add_warning(f"Local identity not set in {client.cwd}")

        self.identity = identity

    async def _sync_working_branch(self, message: str, now: datetime) -> None:
        working = self.working
        branch = self.config.branches.working

        await working.stage_all()
        timestamp = now.strftime(REPORT_TIMESTAMP_FORMAT)
        await working.commit(message.format(timestamp=timestamp), self.identity)

        try:
            await working.push(branch)
        except RemoteRejectedError as e:
            logger.warning(f"Push of {branch} rejected, retrying with lease: {e.stderr.strip()}")
            await working.push(branch, force_with_lease=True)

    async def _fetch_diff(self) -> str:
        working = self.working
        branches = self.config.branches

        await working.fetch(branches.production)
        await working.fetch(branches.working)
        return await working.diff(
            f"{DEFAULT_REMOTE_NAME}/{branches.production}",
            f"{DEFAULT_REMOTE_NAME}/{branches.working}",
        )

    async def _merge_to_production(self, now: datetime) -> Optional[str]:
        branches = self.config.branches

        if self.config.merge_strategy == MergeStrategy.PULL_REQUEST:
            return await self._merge_with_request(now)

        # Production always converges to the working branch
        await self.working.push(f"{branches.working}:{branches.production}", force=True)
        return None

    async def _merge_with_request(self, now: datetime) -> str:
        branches = self.config.branches
        title = f"Promote {branches.working} to {branches.production} - {now.strftime(REPORT_TIMESTAMP_FORMAT)}"

        try:
            request = await self.host.create_merge_request(branches.working, branches.production, title)
        except ValidationConflictError:
            existing = await self.host.list_open_merge_requests(branches.working, branches.production)
            if not existing:
                raise
            request = existing[0]
            logger.info(f"Reusing open pull request #{request.number}")

        await self.host.merge(request.number, title)
        return request.url

    async def _resync_local_production(self) -> None:
        production = self.production
        branch = self.config.branches.production

        await production.fetch(branch)
        await production.checkout(branch)
        await production.reset_hard(f"{DEFAULT_REMOTE_NAME}/{branch}")

    async def _emit_report(self, change_set: ChangeSet, metadata: ReportMetadata,
                           now: datetime) -> str:
        tree = self.tree_builder.build(change_set)
        text = self.report_generator.generate(change_set, tree, metadata, now)
        return await self.storage.save(text, now)

