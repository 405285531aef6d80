"""Tests for the command line interface"""

import pytest
import yaml
from click.testing import CliRunner

from promote_tool import __version__
from promote_tool.api.promoter import Promoter
from promote_tool.cli.main import cli
from promote_tool.models import (
    ChangeSet,
    FileChange,
    FileStatus,
    OperationStatus,
    PromotionOutcome,
    PromotionPhase,
    RequirementCheck,
    RequirementResult,
    RequirementStatus,
)
from promote_tool.api.exceptions import ErrorKind


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    (tmp_path / "working").mkdir()
    (tmp_path / "production").mkdir()
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({
        "paths": {"working": str(tmp_path / "working"), "production": str(tmp_path / "production")},
        "remote": {"token": "ghp_secret", "owner": "acme", "repo": "notes"},
    }), encoding="utf-8")
    return path


def change_set():
    return ChangeSet([FileChange("new.md", FileStatus.ADDED, "+x")])


def outcome(status, **kwargs):
    result = PromotionOutcome(status=status, **kwargs)
    result.complete()
    return result


def passing_requirements():
    return [
        RequirementResult(check, check.value, RequirementStatus.PASS, "ok")
        for check in RequirementCheck
    ]


def test_version_option(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert f"promote-tool, version {__version__}" in result.output


def test_promote_without_config_exits_with_hint(runner, tmp_path):
    result = runner.invoke(cli, ["--config", str(tmp_path / "none.yaml"), "promote", "--yes"])

    assert result.exit_code == 1
    assert "config init" in result.output


def test_promote_yes_approves_everything(runner, config_file, monkeypatch):
    decisions = []

    def fake_promote(self, confirm=None, identity=None, resume_from=None):
        decisions.append(confirm(change_set()))
        assert identity is None
        return outcome(OperationStatus.SUCCESS, message="Promoted 1 change(s)",
                       change_set=change_set(), report_id="r.md", phase=PromotionPhase.DONE)

    monkeypatch.setattr(Promoter, "promote", fake_promote)

    result = runner.invoke(cli, ["--config", str(config_file), "promote", "--yes"])

    assert result.exit_code == 0, result.output
    assert decisions == [True]
    assert "Promoted 1 change(s)" in result.output


def test_promote_asks_for_confirmation(runner, config_file, monkeypatch):
    decisions = []

    def fake_promote(self, confirm=None, identity=None, resume_from=None):
        approved = confirm(change_set())
        decisions.append(approved)
        if approved:
            return outcome(OperationStatus.SUCCESS, message="done")
        return outcome(OperationStatus.CANCELLED, message="Promotion cancelled")

    monkeypatch.setattr(Promoter, "promote", fake_promote)

    result = runner.invoke(cli, ["--config", str(config_file), "promote"], input="n\n")

    assert result.exit_code == 0, result.output
    assert decisions == [False]
    assert "new.md" in result.output
    assert "Promotion cancelled" in result.output


def test_failed_promotion_exits_with_error(runner, config_file, monkeypatch):
    def fake_promote(self, confirm=None, identity=None, resume_from=None):
        return outcome(OperationStatus.FAILED, message="Push rejected",
                       phase=PromotionPhase.SYNC_WORKING_BRANCH, error_kind=ErrorKind.REMOTE_REJECTED)

    monkeypatch.setattr(Promoter, "promote", fake_promote)

    result = runner.invoke(cli, ["--config", str(config_file), "promote", "--yes"])

    assert result.exit_code == 1
    assert "Push rejected" in result.output
    assert "sync_working_branch" in result.output


def test_failed_promotion_can_be_resumed(runner, config_file, monkeypatch):
    calls = []

    def fake_promote(self, confirm=None, identity=None, resume_from=None):
        calls.append(resume_from)
        if resume_from is None:
            return outcome(OperationStatus.FAILED, message="Network down",
                           phase=PromotionPhase.MERGE_TO_PRODUCTION,
                           error_kind=ErrorKind.NETWORK_UNAVAILABLE)
        return outcome(OperationStatus.SUCCESS, message="Promoted after resume")

    monkeypatch.setattr(Promoter, "promote", fake_promote)

    result = runner.invoke(cli, ["--config", str(config_file), "promote"], input="y\n")

    assert result.exit_code == 0, result.output
    assert calls[0] is None
    assert calls[1].phase == PromotionPhase.MERGE_TO_PRODUCTION
    assert "Promoted after resume" in result.output


def test_compare_lists_differences(runner, config_file, monkeypatch):
    monkeypatch.setattr(Promoter, "compare", lambda self: outcome(
        OperationStatus.SUCCESS, change_set=change_set()))

    result = runner.invoke(cli, ["--config", str(config_file), "compare"])

    assert result.exit_code == 0
    assert "new.md" in result.output


def test_doctor_reports_failures(runner, config_file, monkeypatch):
    results = passing_requirements()
    results[4] = RequirementResult(RequirementCheck.CREDENTIAL, "Access token",
                                   RequirementStatus.FAIL, "Access token is not configured")
    monkeypatch.setattr(Promoter, "check_requirements", lambda self: results)

    result = runner.invoke(cli, ["--config", str(config_file), "doctor"])

    assert result.exit_code == 1
    assert "1 check(s) failed" in result.output
    assert "GITHUB_TOKEN" in result.output


def test_doctor_fix_persists_discovered_git(runner, config_file, monkeypatch):
    warning = passing_requirements()
    warning[0] = RequirementResult(RequirementCheck.TOOL, "Git installation", RequirementStatus.WARNING,
                                   "found elsewhere", detail="/opt/git/bin/git")
    responses = [warning, passing_requirements()]
    monkeypatch.setattr(Promoter, "check_requirements", lambda self: responses.pop(0))

    result = runner.invoke(cli, ["--config", str(config_file), "doctor", "--fix"])

    assert result.exit_code == 0, result.output
    saved = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    assert saved["git"]["path"] == "/opt/git/bin/git"
    assert "All checks passed" in result.output


def test_doctor_validates_token(runner, config_file, monkeypatch):
    monkeypatch.setattr(Promoter, "check_requirements", lambda self: passing_requirements())
    monkeypatch.setattr(Promoter, "validate_token", lambda self: "octocat")

    result = runner.invoke(cli, ["--config", str(config_file), "doctor", "--validate-token"])

    assert result.exit_code == 0
    assert "octocat" in result.output


def test_config_init_show_and_set(runner, tmp_path, monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    path = tmp_path / "new.yaml"
    base = ["--config", str(path), "config"]

    result = runner.invoke(cli, base + [
        "init", "--no-input", "--working", "/w", "--production", "/p",
        "--owner", "acme", "--repo", "notes", "--token", "ghp_secret",
    ])
    assert result.exit_code == 0, result.output
    assert path.exists()

    result = runner.invoke(cli, base + ["init", "--no-input"])
    assert result.exit_code == 1
    assert "already exists" in result.output

    result = runner.invoke(cli, base + ["show"])
    assert result.exit_code == 0
    assert "acme" in result.output
    assert "ghp_secret" not in result.output

    result = runner.invoke(cli, base + ["set", "branches.production", "live"])
    assert result.exit_code == 0
    assert yaml.safe_load(path.read_text(encoding="utf-8"))["branches"]["production"] == "live"

    result = runner.invoke(cli, base + ["set", "unknown.key", "x"])
    assert result.exit_code == 1
