"""Shared fixtures for promote-tool tests"""

import copy
from datetime import datetime
from typing import List, Optional

import pytest

from promote_tool.api.exceptions import ToolMissingError
from promote_tool.core.discovery import GitDiscovery
from promote_tool.core.git_runner import GitOutput, GitRunner
from promote_tool.hosting.base import MergeRequestInfo, RemoteHost
from promote_tool.models import BranchConfig, PromoteConfig, RemoteConfig

FIXED_NOW = datetime(2024, 5, 17, 9, 30, 15)

ADDED_DIFF = """diff --git a/new.md b/new.md
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/new.md
@@ -0,0 +1 @@
+hello
"""


class FakeGitRunner(GitRunner):
    """Scripted git runner recording every invocation

    Responses registered with ``on`` match by argument prefix. A list
    response is consumed one item per call; exceptions are raised.
    """

    def __init__(self, executable: str = "git"):
        super().__init__(executable)
        self.calls: List[tuple] = []
        self.handlers: List[tuple] = []
        self.available: Optional[set] = None
        self.version = "git version 2.43.0"
        self.global_config = {"user.name": "Test User", "user.email": "test@example.com"}
        self.diff_text = ""

    def with_executable(self, executable: str) -> 'FakeGitRunner':
        clone = copy.copy(self)
        clone.executable = executable
        return clone

    def on(self, *prefix, response) -> None:
        self.handlers.append((list(prefix), response))

    @property
    def commands(self) -> List[str]:
        return [" ".join(args) for args, _ in self.calls]

    async def run(self, args, cwd=None) -> GitOutput:
        args = list(args)
        if self.available is not None and self.executable not in self.available:
            raise ToolMissingError(self.executable)

        self.calls.append((args, cwd))

        for prefix, response in self.handlers:
            if args[:len(prefix)] != prefix:
                continue
            if isinstance(response, list):
                if not response:
                    continue
                response = response.pop(0)
            if isinstance(response, Exception):
                raise response
            if callable(response):
                return response(args, cwd)
            return response

        if args == ["--version"]:
            return GitOutput(self.version + "\n", "")
        if args[:2] == ["rev-parse", "--is-inside-work-tree"]:
            return GitOutput("true\n", "")
        if args[:2] == ["config", "--global"] and len(args) == 3:
            value = self.global_config.get(args[2])
            if value:
                return GitOutput(value + "\n", "")
            return GitOutput("", "", 1)
        if "diff" in args:
            return GitOutput(self.diff_text, "")
        return GitOutput("", "")


class StaticDiscovery(GitDiscovery):
    """Discovery returning a fixed candidate list"""

    def __init__(self, paths=()):
        super().__init__(platform="linux", environ={})
        self.paths = list(paths)

    def discover(self):
        return list(self.paths)


class FakeHost(RemoteHost):
    """In-memory hosting API"""

    def __init__(self, web_url: str = "https://github.com/acme/notes"):
        self.web_url = web_url
        self.created: List[tuple] = []
        self.merged: List[int] = []
        self.open_requests: List[MergeRequestInfo] = []
        self.create_error: Optional[Exception] = None
        self.closed = False

    async def validate_credentials(self) -> str:
        return "octocat"

    async def create_merge_request(self, head, base, title, body=""):
        if self.create_error is not None:
            raise self.create_error
        info = MergeRequestInfo(f"{self.web_url}/pull/{len(self.created) + 1}",
                                len(self.created) + 1, title, head)
        self.created.append((head, base, title))
        return info

    async def merge(self, number, message=""):
        self.merged.append(number)
        return "abc123"

    async def list_open_merge_requests(self, head, base):
        return list(self.open_requests)

    async def close_merge_request(self, number):
        self.open_requests = [r for r in self.open_requests if r.number != number]

    @property
    def repository_url(self) -> str:
        return self.web_url

    def history_url(self, branch):
        return f"{self.web_url}/commits/{branch}"

    def compare_url(self, base, head):
        return f"{self.web_url}/compare/{base}...{head}"

    async def close(self):
        self.closed = True


@pytest.fixture
def git_runner():
    return FakeGitRunner()


@pytest.fixture
def fake_host():
    return FakeHost()


@pytest.fixture
def make_config(tmp_path):
    """Factory for a configuration with existing working and production trees"""

    def _make(**overrides) -> PromoteConfig:
        working = tmp_path / "working"
        production = tmp_path / "production"
        working.mkdir(exist_ok=True)
        production.mkdir(exist_ok=True)

        config = PromoteConfig(
            working_path=str(working),
            production_path=str(production),
            remote=RemoteConfig(token="ghp_secret", owner="acme", repo="notes"),
            branches=BranchConfig(),
        )
        for key, value in overrides.items():
            setattr(config, key, value)
        return config

    return _make


@pytest.fixture
def config(make_config):
    return make_config()
