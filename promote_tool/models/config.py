"""Configuration data models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional
from urllib.parse import quote

from ..constants import (
    CONFIG_VERSION,
    DEFAULT_API_URL,
    DEFAULT_APP_CONFIG_DIR,
    DEFAULT_PRODUCTION_BRANCH,
    DEFAULT_REPORT_DIR,
    DEFAULT_WEB_URL,
    DEFAULT_WORKING_BRANCH,
    GIT_METADATA_DIR,
    MergeStrategy,
)


@dataclass(frozen=True)
class GitIdentity:
    """Commit author identity"""
    name: str
    email: str

    @property
    def is_complete(self) -> bool:
        return bool(self.name and self.email)

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass
class RemoteConfig:
    """Remote repository and hosting API settings"""

    token: str = ""
    owner: str = ""
    repo: str = ""
    use_token_in_url: bool = True
    remote_url: str = ""
    api_url: str = DEFAULT_API_URL
    web_url: str = DEFAULT_WEB_URL

    @property
    def has_repository(self) -> bool:
        return bool(self.owner and self.repo)

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def repository_url(self) -> str:
        """Browser URL of the repository"""
        return f"{self.web_url.rstrip('/')}/{self.slug}"

    def clone_url(self, with_token: Optional[bool] = None) -> str:
        """URL used as the git remote

        An explicit ``remote_url`` always wins. Otherwise the hosting URL is
        derived from owner/repo, embedding the token when enabled.
        """
        if self.remote_url:
            return self.remote_url

        if with_token is None:
            with_token = self.use_token_in_url

        host = self.web_url.split("://", 1)[-1].rstrip("/")
        scheme = self.web_url.split("://", 1)[0] if "://" in self.web_url else "https"
        if with_token and self.token:
            return f"{scheme}://{quote(self.token, safe='')}@{host}/{self.slug}.git"
        return f"{scheme}://{host}/{self.slug}.git"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "token": self.token,
            "owner": self.owner,
            "repo": self.repo,
            "use_token_in_url": self.use_token_in_url,
        }
        if self.remote_url:
            data["remote_url"] = self.remote_url
        if self.api_url != DEFAULT_API_URL:
            data["api_url"] = self.api_url
        if self.web_url != DEFAULT_WEB_URL:
            data["web_url"] = self.web_url
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RemoteConfig':
        """Create from dictionary"""
        return cls(
            token=data.get("token") or "",
            owner=data.get("owner") or "",
            repo=data.get("repo") or "",
            use_token_in_url=data.get("use_token_in_url", True),
            remote_url=data.get("remote_url") or "",
            api_url=data.get("api_url") or DEFAULT_API_URL,
            web_url=data.get("web_url") or DEFAULT_WEB_URL,
        )


@dataclass
class GitSettings:
    """Git executable and application-level identity"""

    path: str = ""
    user_name: str = ""
    user_email: str = ""

    @property
    def identity(self) -> GitIdentity:
        return GitIdentity(self.user_name.strip(), self.user_email.strip())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "path": self.path,
            "user_name": self.user_name,
            "user_email": self.user_email,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GitSettings':
        """Create from dictionary"""
        return cls(
            path=data.get("path") or "",
            user_name=data.get("user_name") or "",
            user_email=data.get("user_email") or "",
        )


@dataclass
class BranchConfig:
    """Remote branch names"""

    working: str = DEFAULT_WORKING_BRANCH
    production: str = DEFAULT_PRODUCTION_BRANCH

    def to_dict(self) -> Dict[str, Any]:
        return {"working": self.working, "production": self.production}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BranchConfig':
        return cls(
            working=data.get("working") or DEFAULT_WORKING_BRANCH,
            production=data.get("production") or DEFAULT_PRODUCTION_BRANCH,
        )


@dataclass
class PromoteConfig:
    """Complete configuration"""

    version: str = CONFIG_VERSION
    working_path: str = ""
    production_path: str = ""
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    git: GitSettings = field(default_factory=GitSettings)
    branches: BranchConfig = field(default_factory=BranchConfig)
    report_dir: str = DEFAULT_REPORT_DIR
    app_config_dir: str = DEFAULT_APP_CONFIG_DIR
    merge_strategy: MergeStrategy = MergeStrategy.PUSH

    @property
    def working_root(self) -> Path:
        return Path(self.working_path).expanduser()

    @property
    def production_root(self) -> Path:
        return Path(self.production_path).expanduser()

    @property
    def protected_names(self) -> FrozenSet[str]:
        """Names never diffed, never pruned, never overwritten"""
        return frozenset({GIT_METADATA_DIR, self.app_config_dir, self.report_dir})

    @property
    def git_executable(self) -> str:
        return self.git.path or "git"

    def validate(self) -> list:
        """Return a list of configuration problems"""
        issues = []
        if not self.working_path:
            issues.append("Working tree path is not configured")
        if not self.production_path:
            issues.append("Production tree path is not configured")
        if self.working_path and self.production_path and \
                self.working_root.resolve() == self.production_root.resolve():
            issues.append("Working and production trees must be different directories")
        if self.branches.working == self.branches.production:
            issues.append("Working and production branches must differ")
        return issues

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "version": self.version,
            "paths": {
                "working": self.working_path,
                "production": self.production_path,
            },
            "remote": self.remote.to_dict(),
            "git": self.git.to_dict(),
            "branches": self.branches.to_dict(),
            "report_dir": self.report_dir,
            "app_config_dir": self.app_config_dir,
            "merge_strategy": self.merge_strategy.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PromoteConfig':
        """Create from dictionary"""
        data = data or {}
        paths = data.get("paths") or {}
        return cls(
            version=str(data.get("version", CONFIG_VERSION)),
            working_path=paths.get("working") or "",
            production_path=paths.get("production") or "",
            remote=RemoteConfig.from_dict(data.get("remote") or {}),
            git=GitSettings.from_dict(data.get("git") or {}),
            branches=BranchConfig.from_dict(data.get("branches") or {}),
            report_dir=data.get("report_dir") or DEFAULT_REPORT_DIR,
            app_config_dir=data.get("app_config_dir") or DEFAULT_APP_CONFIG_DIR,
            merge_strategy=MergeStrategy(data.get("merge_strategy") or MergeStrategy.PUSH.value),
        )
