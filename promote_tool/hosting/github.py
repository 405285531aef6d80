# promote_tool/hosting/github.py
"""GitHub REST API client"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .base import MergeRequestInfo, RemoteHost
from ..api.exceptions import (
    AuthenticationFailedError,
    AuthorizationDeniedError,
    NetworkUnavailableError,
    RemoteHostError,
    RemoteNotFoundError,
    ValidationConflictError,
)
from ..constants import DEFAULT_HTTP_TIMEOUT
from ..models.config import RemoteConfig

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"


class GitHubHost(RemoteHost):
    """GitHub implementation of the hosting API

    One ``httpx.AsyncClient`` is created lazily and reused for all requests.
    """

    def __init__(self, remote: RemoteConfig, client: Optional[httpx.AsyncClient] = None,
                 timeout: float = DEFAULT_HTTP_TIMEOUT):
        self.remote = remote
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.remote.api_url,
                timeout=self.timeout,
                headers=self._headers(),
            )
            logger.debug(f"Initialized GitHub client with base URL: {self.remote.api_url}")
        return self._client

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }
        if self.remote.token:
            headers["Authorization"] = f"Bearer {self.remote.token}"
        return headers

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        client = self._ensure_client()
        try:
            response = await client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.TransportError as e:
            raise NetworkUnavailableError(f"Cannot reach {self.remote.api_url}: {e}") from e

        if response.status_code >= 400:
            raise self._error(response)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _error(response: httpx.Response) -> RemoteHostError:
        try:
            payload = response.json()
        except ValueError:
            payload = {}

        message = payload.get("message") if isinstance(payload, dict) else None
        message = message or response.reason_phrase or "Request failed"
        errors = payload.get("errors") if isinstance(payload, dict) else None
        if errors:
            details = "; ".join(
                e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errors
            )
            message = f"{message}: {details}"

        status = response.status_code
        if status == 401:
            return AuthenticationFailedError(message, status)
        if status == 403:
            return AuthorizationDeniedError(message, status)
        if status == 404:
            return RemoteNotFoundError(message, status)
        if status in (405, 409, 422):
            return ValidationConflictError(message, status)
        return RemoteHostError(message, status)

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self.remote.owner}/{self.remote.repo}"

    @staticmethod
    def _to_info(data: Dict[str, Any]) -> MergeRequestInfo:
        return MergeRequestInfo(
            url=data.get("html_url", ""),
            number=data["number"],
            title=data.get("title", ""),
            branch=(data.get("head") or {}).get("ref", ""),
            created_at=data.get("created_at"),
        )

    async def validate_credentials(self) -> str:
        data = await self._request("GET", "/user")
        login = data.get("login", "") if data else ""
        logger.info(f"Token authenticated as {login}")
        return login

    async def create_merge_request(self, head: str, base: str, title: str,
                                   body: str = "") -> MergeRequestInfo:
        data = await self._request(
            "POST",
            f"{self._repo_path}/pulls",
            json={"title": title, "head": head, "base": base, "body": body},
        )
        info = self._to_info(data)
        logger.info(f"Created pull request #{info.number}: {info.url}")
        return info

    async def merge(self, number: int, message: str = "") -> str:
        payload = {"merge_method": "merge"}
        if message:
            payload["commit_title"] = message
        data = await self._request("PUT", f"{self._repo_path}/pulls/{number}/merge", json=payload)
        logger.info(f"Merged pull request #{number}")
        return (data or {}).get("sha", "")

    async def list_open_merge_requests(self, head: str, base: str) -> List[MergeRequestInfo]:
        data = await self._request(
            "GET",
            f"{self._repo_path}/pulls",
            params={"state": "open", "head": f"{self.remote.owner}:{head}", "base": base},
        )
        return [self._to_info(item) for item in data or []]

    async def close_merge_request(self, number: int) -> None:
        await self._request("PATCH", f"{self._repo_path}/pulls/{number}", json={"state": "closed"})
        logger.info(f"Closed pull request #{number}")

    @property
    def repository_url(self) -> str:
        return self.remote.repository_url

    def history_url(self, branch: str) -> str:
        return f"{self.repository_url}/commits/{branch}"

    def compare_url(self, base: str, head: str) -> str:
        return f"{self.repository_url}/compare/{base}...{head}"
