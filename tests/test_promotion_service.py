"""Tests for the promotion orchestrator"""

import pytest
import yaml

from promote_tool.api.exceptions import (
    ErrorKind,
    GitAuthenticationError,
    GitNetworkError,
    RemoteRejectedError,
    ValidationConflictError,
)
from promote_tool.constants import MergeStrategy
from promote_tool.core.git_runner import GitOutput
from promote_tool.hosting.base import MergeRequestInfo
from promote_tool.models import ConfirmationDecision, OperationStatus, PromotionPhase
from promote_tool.models.config import GitIdentity
from promote_tool.services.config_service import ConfigService
from promote_tool.services.promotion_service import PromotionOrchestrator

from .conftest import ADDED_DIFF, FIXED_NOW, StaticDiscovery

REPORT_NAME = "2024-05-17-09-30-15-change-report.md"


def rejected():
    return RemoteRejectedError(
        "git push origin working",
        "! [rejected] working -> working (fetch first)\nerror: failed to push some refs",
    )


def make_orchestrator(config, runner, host, **kwargs):
    kwargs.setdefault("discovery", StaticDiscovery())
    return PromotionOrchestrator(config, runner=runner, host=host, clock=lambda: FIXED_NOW, **kwargs)


class Confirmer:
    def __init__(self, decision=ConfirmationDecision.APPROVE):
        self.decision = decision
        self.seen = []

    async def __call__(self, change_set):
        self.seen.append(change_set)
        return self.decision


@pytest.mark.asyncio
async def test_successful_promotion_runs_every_phase(config, git_runner, fake_host):
    git_runner.diff_text = ADDED_DIFF
    confirm = Confirmer()

    outcome = await make_orchestrator(config, git_runner, fake_host).promote(confirm)

    assert outcome.status == OperationStatus.SUCCESS
    assert outcome.phase == PromotionPhase.DONE
    assert outcome.change_set.counts()["added"] == 1
    assert outcome.report_id == REPORT_NAME
    assert len(confirm.seen) == 1

    commands = git_runner.commands
    assert "push origin working" in commands
    assert "push origin working:main --force" in commands
    assert commands[-3:] == ["fetch origin main", "checkout main", "reset --hard origin/main"]
    assert any(c.endswith("commit -m Auto-commit before promotion - 2024-05-17 09:30:15") for c in commands)

    report = (config.production_root / "Update Logs" / REPORT_NAME).read_text(encoding="utf-8")
    assert "**History:** https://github.com/acme/notes/commits/main" in report
    assert "Merge Request" not in report
    assert not fake_host.closed


@pytest.mark.asyncio
async def test_rejected_push_is_retried_once_with_lease(config, git_runner, fake_host):
    git_runner.diff_text = ADDED_DIFF
    git_runner.on("push", "origin", "working", response=[rejected()])

    outcome = await make_orchestrator(config, git_runner, fake_host).promote(Confirmer())

    assert outcome.is_success
    pushes = [c for c in git_runner.commands if c.startswith("push origin working") and ":" not in c]
    assert pushes == ["push origin working", "push origin working --force-with-lease"]


@pytest.mark.asyncio
async def test_second_rejection_fails_the_phase(config, git_runner, fake_host):
    git_runner.on("push", "origin", "working", response=[rejected(), rejected()])

    outcome = await make_orchestrator(config, git_runner, fake_host).promote(Confirmer())

    assert outcome.status == OperationStatus.FAILED
    assert outcome.phase == PromotionPhase.SYNC_WORKING_BRANCH
    assert outcome.error_kind == ErrorKind.REMOTE_REJECTED
    assert outcome.is_resumable


@pytest.mark.asyncio
async def test_authentication_failure_is_not_retried(config, git_runner, fake_host):
    git_runner.on("push", "origin", "working",
                  response=[GitAuthenticationError("git push", "fatal: Authentication failed")])

    outcome = await make_orchestrator(config, git_runner, fake_host).promote(Confirmer())

    assert outcome.error_kind == ErrorKind.AUTHENTICATION_FAILED
    assert [c for c in git_runner.commands if c.startswith("push")] == ["push origin working"]


@pytest.mark.asyncio
async def test_nothing_to_promote_skips_confirmation(config, git_runner, fake_host):
    confirm = Confirmer()

    outcome = await make_orchestrator(config, git_runner, fake_host).promote(confirm)

    assert outcome.status == OperationStatus.NOTHING_TO_PROMOTE
    assert outcome.is_neutral
    assert confirm.seen == []
    assert not (config.production_root / "Update Logs").exists()


@pytest.mark.asyncio
async def test_cancel_stops_before_merge(config, git_runner, fake_host):
    git_runner.diff_text = ADDED_DIFF

    outcome = await make_orchestrator(config, git_runner, fake_host).promote(
        Confirmer(ConfirmationDecision.CANCEL)
    )

    assert outcome.status == OperationStatus.CANCELLED
    assert "push origin working:main --force" not in git_runner.commands
    assert not (config.production_root / "Update Logs").exists()


@pytest.mark.asyncio
async def test_resume_continues_at_failed_phase(config, git_runner, fake_host):
    git_runner.diff_text = ADDED_DIFF
    git_runner.on("push", "origin", "working:main",
                  response=[GitNetworkError("git push", "fatal: unable to access 'https://github.com/'")])
    confirm = Confirmer()

    failed = await make_orchestrator(config, git_runner, fake_host).promote(confirm)

    assert failed.phase == PromotionPhase.MERGE_TO_PRODUCTION
    assert failed.error_kind == ErrorKind.NETWORK_UNAVAILABLE
    assert failed.diff_text == ADDED_DIFF

    git_runner.calls.clear()
    resumed = await make_orchestrator(config, git_runner, fake_host).promote(confirm, resume_from=failed)

    assert resumed.is_success
    assert len(confirm.seen) == 1
    commands = git_runner.commands
    assert "push origin working" not in commands
    assert not any("diff" in c for c in commands)
    assert "push origin working:main --force" in commands


@pytest.mark.asyncio
async def test_failed_requirement_blocks_before_any_mutation(config, git_runner, fake_host):
    config.remote.token = ""

    outcome = await make_orchestrator(config, git_runner, fake_host).promote(Confirmer())

    assert outcome.phase == PromotionPhase.VALIDATE
    assert outcome.error_kind == ErrorKind.AUTHENTICATION_FAILED
    assert not outcome.is_resumable
    assert not any(c.startswith(("add", "push", "commit")) for c in git_runner.commands)


@pytest.mark.asyncio
async def test_tree_without_repository_fails_validation(config, git_runner, fake_host):
    git_runner.on("rev-parse", "--is-inside-work-tree", response=GitOutput("", "", 128))

    outcome = await make_orchestrator(config, git_runner, fake_host).promote(Confirmer())

    assert outcome.error_kind == ErrorKind.PATH_NOT_FOUND
    assert "Run setup first" in outcome.message


@pytest.mark.asyncio
async def test_discovered_tool_is_adopted_and_saved(config, git_runner, fake_host, tmp_path):
    git_runner.available = {"/opt/git/bin/git"}
    git_runner.diff_text = ADDED_DIFF
    service = ConfigService(tmp_path / "config.yaml")
    service.init_config(config)

    orchestrator = make_orchestrator(
        config, git_runner, fake_host,
        discovery=StaticDiscovery(["/opt/git/bin/git"]),
        config_service=service,
    )
    outcome = await orchestrator.promote(Confirmer())

    assert outcome.is_success
    assert PromotionPhase.REPAIR in outcome.completed_phases
    assert config.git.path == "/opt/git/bin/git"
    saved = yaml.safe_load((tmp_path / "config.yaml").read_text(encoding="utf-8"))
    assert saved["git"]["path"] == "/opt/git/bin/git"


@pytest.mark.asyncio
async def test_missing_identity_is_requested_and_applied(config, git_runner, fake_host):
    git_runner.global_config = {}
    git_runner.diff_text = ADDED_DIFF
    asked = []

    async def provide(name, email):
        asked.append((name, email))
        return GitIdentity("Ann", "ann@example.com")

    outcome = await make_orchestrator(config, git_runner, fake_host).promote(Confirmer(), provide)

    assert outcome.is_success
    assert asked == [("", "")]
    assert config.git.user_name == "Ann"
    assert git_runner.commands.count("config --local user.email ann@example.com") == 2
    assert any("user.name=Ann" in c and "commit" in c for c in git_runner.commands)


@pytest.mark.asyncio
async def test_missing_identity_without_provider_fails(config, git_runner, fake_host):
    git_runner.global_config = {}

    outcome = await make_orchestrator(config, git_runner, fake_host).promote(Confirmer())

    assert outcome.error_kind == ErrorKind.IDENTITY_MISSING


@pytest.mark.asyncio
async def test_pull_request_strategy(config, git_runner, fake_host):
    config.merge_strategy = MergeStrategy.PULL_REQUEST
    git_runner.diff_text = ADDED_DIFF

    outcome = await make_orchestrator(config, git_runner, fake_host).promote(Confirmer())

    assert outcome.is_success
    assert fake_host.created[0][:2] == ("working", "main")
    assert fake_host.merged == [1]
    assert outcome.merge_request_url == "https://github.com/acme/notes/pull/1"
    assert "push origin working:main --force" not in git_runner.commands
    report = (config.production_root / "Update Logs" / REPORT_NAME).read_text(encoding="utf-8")
    assert "**Merge Request:** https://github.com/acme/notes/pull/1" in report


@pytest.mark.asyncio
async def test_pull_request_conflict_reuses_open_request(config, git_runner, fake_host):
    config.merge_strategy = MergeStrategy.PULL_REQUEST
    git_runner.diff_text = ADDED_DIFF
    fake_host.create_error = ValidationConflictError("A pull request already exists")
    fake_host.open_requests = [MergeRequestInfo("https://github.com/acme/notes/pull/7", 7, "t", "working")]

    outcome = await make_orchestrator(config, git_runner, fake_host).promote(Confirmer())

    assert outcome.is_success
    assert fake_host.merged == [7]


@pytest.mark.asyncio
async def test_generate_report_links_to_comparison(config, git_runner, fake_host):
    outcome = await make_orchestrator(config, git_runner, fake_host).generate_report()

    assert outcome.is_success
    report = (config.production_root / "Update Logs" / outcome.report_id).read_text(encoding="utf-8")
    assert "**History:** https://github.com/acme/notes/compare/main...working" in report
    assert "**Total Changes:** 0 files" in report
    assert "push origin working:main --force" not in git_runner.commands


@pytest.mark.asyncio
async def test_compare_returns_change_set(config, git_runner, fake_host):
    git_runner.diff_text = ADDED_DIFF

    outcome = await make_orchestrator(config, git_runner, fake_host).compare()

    assert outcome.is_success
    assert [f.path for f in outcome.change_set.files] == ["new.md"]
    assert any("Auto-commit for comparison" in c for c in git_runner.commands)


@pytest.mark.asyncio
async def test_mirror_copies_and_stages(config, git_runner, fake_host):
    (config.working_root / "page.md").write_text("content", encoding="utf-8")
    (config.production_root / "old.md").write_text("old", encoding="utf-8")

    result = await make_orchestrator(config, git_runner, fake_host).mirror()

    assert result.is_success
    assert (config.production_root / "page.md").exists()
    assert not (config.production_root / "old.md").exists()
    assert git_runner.calls[-1] == (["add", "-A"], config.production_root)
