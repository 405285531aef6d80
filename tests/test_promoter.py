"""Tests for the synchronous Promoter facade"""

from promote_tool.api.promoter import Promoter
from promote_tool.models import GitIdentity, OperationStatus
from promote_tool.services.promotion_service import PromotionOrchestrator

from .conftest import ADDED_DIFF, FIXED_NOW, StaticDiscovery


def make_promoter(config, git_runner, fake_host, tmp_path, monkeypatch):
    promoter = Promoter(config=config, config_path=tmp_path / "unused.yaml")
    monkeypatch.setattr(promoter, "_orchestrator", lambda: PromotionOrchestrator(
        config, runner=git_runner, host=fake_host, discovery=StaticDiscovery(), clock=lambda: FIXED_NOW
    ))
    return promoter


def test_promote_adapts_plain_callbacks(config, git_runner, fake_host, tmp_path, monkeypatch):
    git_runner.diff_text = ADDED_DIFF
    git_runner.global_config = {}
    seen = []
    promoter = make_promoter(config, git_runner, fake_host, tmp_path, monkeypatch)

    outcome = promoter.promote(
        confirm=lambda change_set: seen.append(change_set.total) or True,
        identity=lambda name, email: GitIdentity("Ann", "ann@example.com"),
    )

    assert outcome.status == OperationStatus.SUCCESS
    assert seen == [1]
    assert config.git.user_email == "ann@example.com"


def test_declined_confirmation_cancels(config, git_runner, fake_host, tmp_path, monkeypatch):
    git_runner.diff_text = ADDED_DIFF
    promoter = make_promoter(config, git_runner, fake_host, tmp_path, monkeypatch)

    outcome = promoter.promote(confirm=lambda change_set: False)

    assert outcome.status == OperationStatus.CANCELLED


def test_compare_without_changes(config, git_runner, fake_host, tmp_path, monkeypatch):
    promoter = make_promoter(config, git_runner, fake_host, tmp_path, monkeypatch)

    outcome = promoter.compare()

    assert outcome.status == OperationStatus.NOTHING_TO_PROMOTE
    assert outcome.is_neutral
