"""Configuration management service"""

import logging
import os
import shutil
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ..api.exceptions import ConfigError
from ..constants import ENV_CONFIG_PATH, ENV_GITHUB_TOKEN, PROJECT_CONFIG_FILE
from ..models.config import PromoteConfig

logger = logging.getLogger(__name__)

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


def resolve_config_path(config_path: Optional[Union[str, Path]] = None) -> Path:
    """Explicit path, then the environment variable, then the current directory"""
    if config_path:
        return Path(config_path).expanduser()
    env_path = os.environ.get(ENV_CONFIG_PATH)
    if env_path:
        return Path(env_path).expanduser()
    return Path.cwd() / PROJECT_CONFIG_FILE


class ConfigService:
    """Service for loading and persisting the configuration file"""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize config service

        Args:
            config_path: Configuration file, resolved from the environment if omitted
        """
        self.config_path = resolve_config_path(config_path)
        self._config: Optional[PromoteConfig] = None
        self._token_from_env = False
        self._token_placeholder: Optional[str] = None
        self._expanded_token: Optional[str] = None

    @property
    def config(self) -> PromoteConfig:
        """Get current configuration (lazy load)"""
        if self._config is None:
            self.load_config()
        return self._config

    @property
    def exists(self) -> bool:
        return self.config_path.is_file()

    def load_config(self) -> PromoteConfig:
        """Load configuration from file

        Returns:
            Loaded configuration

        Raises:
            ConfigError: If the file is missing or malformed
        """
        if not self.config_path.exists():
            raise ConfigError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            raw_content = f.read()

        # Simple environment variable expansion
        content = os.path.expandvars(raw_content)

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a mapping: {self.config_path}")

        try:
            config = PromoteConfig.from_dict(data)
        except ValueError as e:
            raise ConfigError(f"Invalid configuration in {self.config_path}: {e}") from e

        self._token_placeholder = self._read_token_placeholder(raw_content)
        self._expanded_token = config.remote.token
        self._token_from_env = False
        env_token = os.environ.get(ENV_GITHUB_TOKEN)
        if not config.remote.token and env_token:
            config.remote.token = env_token
            self._token_from_env = True
            logger.debug(f"Using access token from {ENV_GITHUB_TOKEN}")

        self._config = config
        logger.debug(f"Loaded configuration from {self.config_path}")
        return config

    def save_config(self, config: Optional[PromoteConfig] = None) -> None:
        """Save configuration to file

        Args:
            config: Configuration to save (uses current if not provided)
        """
        if config:
            self._config = config

        if not self._config:
            raise ConfigError("No configuration to save")

        # Create backup
        if self.config_path.exists():
            backup_path = self.config_path.with_suffix(self.config_path.suffix + '.bak')
            shutil.copy2(self.config_path, backup_path)

        data = self._file_data(self._config)

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

        logger.info(f"Configuration saved to {self.config_path}")

    def init_config(self, config: PromoteConfig, force: bool = False) -> None:
        """Write a new configuration file

        Raises:
            ConfigError: If the file exists and ``force`` is not set
        """
        if self.exists and not force:
            raise ConfigError(f"Configuration file already exists: {self.config_path}")
        self._token_from_env = False
        self._token_placeholder = None
        self.save_config(config)

    def set_value(self, key: str, value: str) -> PromoteConfig:
        """Set a dotted key such as ``remote.owner`` and save

        Args:
            key: Dotted key in the file layout
            value: New value as text, converted to the current value's type

        Returns:
            Updated configuration
        """
        data = self._file_data(self.config)

        parts = key.split(".")
        node = data
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                raise ConfigError(f"Unknown configuration key: {key}")
            node = child

        leaf = parts[-1]
        if leaf not in node and not self._is_optional_key(parts):
            raise ConfigError(f"Unknown configuration key: {key}")

        node[leaf] = self._convert(node.get(leaf), value, key)

        try:
            updated = PromoteConfig.from_dict(data)
        except ValueError as e:
            raise ConfigError(f"Invalid value for {key}: {value}") from e

        if key == "remote.token":
            self._token_from_env = False
            self._token_placeholder = None
        else:
            # Keep the resolved token in memory; the file keeps its own form
            updated.remote.token = self._config.remote.token
        self.save_config(updated)
        return updated

    def _file_data(self, config: PromoteConfig) -> dict:
        """Dictionary to write, with the token in the form the file had"""
        data = config.to_dict()
        if self._token_from_env:
            data["remote"]["token"] = ""
        elif self._token_placeholder and config.remote.token == self._expanded_token:
            data["remote"]["token"] = self._token_placeholder
        return data

    @staticmethod
    def _read_token_placeholder(raw_content: str) -> Optional[str]:
        """Unexpanded token value when it references environment variables"""
        try:
            data = yaml.safe_load(raw_content)
        except yaml.YAMLError:
            return None
        remote = data.get("remote") if isinstance(data, dict) else None
        token = remote.get("token") if isinstance(remote, dict) else None
        if isinstance(token, str) and "$" in token:
            return token
        return None

    @staticmethod
    def _is_optional_key(parts) -> bool:
        # Keys omitted from the file when left at their defaults
        return parts[0] == "remote" and parts[-1] in ("remote_url", "api_url", "web_url")

    @staticmethod
    def _convert(current: Any, value: str, key: str) -> Any:
        if isinstance(current, bool):
            lowered = value.lower()
            if lowered in TRUE_VALUES:
                return True
            if lowered in FALSE_VALUES:
                return False
            raise ConfigError(f"Expected a boolean for {key}, got: {value}")
        return value
