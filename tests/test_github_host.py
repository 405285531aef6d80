"""Tests for the GitHub hosting client"""

import json

import httpx
import pytest

from promote_tool.api.exceptions import (
    AuthenticationFailedError,
    AuthorizationDeniedError,
    NetworkUnavailableError,
    RemoteHostError,
    RemoteNotFoundError,
    ValidationConflictError,
)
from promote_tool.hosting.github import GitHubHost
from promote_tool.models import RemoteConfig

API = "https://api.github.com"


def make_host(handler) -> GitHubHost:
    remote = RemoteConfig(token="ghp_secret", owner="acme", repo="notes")
    client = httpx.AsyncClient(base_url=API, transport=httpx.MockTransport(handler))
    return GitHubHost(remote, client=client)


def pull_payload(number=5):
    return {
        "number": number,
        "html_url": f"https://github.com/acme/notes/pull/{number}",
        "title": "Promote",
        "head": {"ref": "working"},
        "created_at": "2024-05-17T09:30:15Z",
    }


@pytest.mark.asyncio
async def test_validate_credentials_sends_token():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        seen["path"] = request.url.path
        return httpx.Response(200, json={"login": "octocat"})

    async with make_host(handler) as host:
        assert await host.validate_credentials() == "octocat"

    assert seen == {"auth": "Bearer ghp_secret", "path": "/user"}


@pytest.mark.asyncio
async def test_create_and_merge_pull_request():
    requests = []

    def handler(request):
        requests.append((request.method, request.url.path, json.loads(request.content or b"{}")))
        if request.method == "POST":
            return httpx.Response(201, json=pull_payload())
        return httpx.Response(200, json={"sha": "abc123", "merged": True})

    host = make_host(handler)
    info = await host.create_merge_request("working", "main", "Promote", "body")
    sha = await host.merge(info.number, "Promote")

    assert info.number == 5
    assert info.url == "https://github.com/acme/notes/pull/5"
    assert info.branch == "working"
    assert sha == "abc123"
    assert requests[0] == ("POST", "/repos/acme/notes/pulls",
                           {"title": "Promote", "head": "working", "base": "main", "body": "body"})
    assert requests[1] == ("PUT", "/repos/acme/notes/pulls/5/merge",
                           {"merge_method": "merge", "commit_title": "Promote"})


@pytest.mark.asyncio
async def test_list_and_close_pull_requests():
    seen = []

    def handler(request):
        seen.append((request.method, str(request.url.params)))
        if request.method == "GET":
            return httpx.Response(200, json=[pull_payload(7)])
        return httpx.Response(200, json={})

    host = make_host(handler)
    open_requests = await host.list_open_merge_requests("working", "main")
    await host.close_merge_request(7)

    assert [r.number for r in open_requests] == [7]
    assert "head=acme%3Aworking" in seen[0][1]
    assert seen[1][0] == "PATCH"


@pytest.mark.parametrize("status, error", [
    (401, AuthenticationFailedError),
    (403, AuthorizationDeniedError),
    (404, RemoteNotFoundError),
    (422, ValidationConflictError),
    (500, RemoteHostError),
])
@pytest.mark.asyncio
async def test_status_mapping(status, error):
    def handler(request):
        return httpx.Response(status, json={"message": "Nope", "errors": [{"message": "detail"}]})

    with pytest.raises(error) as exc_info:
        await make_host(handler).validate_credentials()

    assert exc_info.value.status_code == status
    assert exc_info.value.message == "Nope: detail"


@pytest.mark.asyncio
async def test_transport_error_is_network_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkUnavailableError):
        await make_host(handler).validate_credentials()


def test_browser_urls():
    host = GitHubHost(RemoteConfig(owner="acme", repo="notes"))

    assert host.repository_url == "https://github.com/acme/notes"
    assert host.history_url("main") == "https://github.com/acme/notes/commits/main"
    assert host.compare_url("main", "working") == "https://github.com/acme/notes/compare/main...working"
