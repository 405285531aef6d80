"""Global constants for promote-tool"""

from enum import Enum

APP_NAME = "promote-tool"
LOG_FORMAT = "%(message)s"

# Configuration
CONFIG_VERSION = "1.0"
PROJECT_CONFIG_FILE = ".promote-tool.yaml"

# Version control defaults
DEFAULT_GIT_EXECUTABLE = "git"
DEFAULT_REMOTE_NAME = "origin"
DEFAULT_WORKING_BRANCH = "working"
DEFAULT_PRODUCTION_BRANCH = "main"
DEFAULT_GIT_TIMEOUT = 300  # seconds
GIT_METADATA_DIR = ".git"
GIT_NULL_PATH = "/dev/null"
GIT_VERSION_MARKER = "git version"

# Host application layout
DEFAULT_APP_CONFIG_DIR = ".obsidian"
DEFAULT_REPORT_DIR = "Update Logs"
ROOT_FOLDER_LABEL = "(root)"

GIT_IGNORE_TEMPLATE = """{app_config_dir}/
.trash/
.DS_Store
{report_dir}/
"""

# Remote hosting
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_WEB_URL = "https://github.com"
DEFAULT_HTTP_TIMEOUT = 30.0  # seconds


class MergeStrategy(Enum):
    PUSH = "push"
    PULL_REQUEST = "pull_request"


# Report layout
REPORT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
REPORT_FILENAME_FORMAT = "%Y-%m-%d-%H-%M-%S-change-report.md"

# Commit messages
AUTO_COMMIT_MESSAGE = "Auto-commit before promotion - {timestamp}"
REPORT_COMMIT_MESSAGE = "Auto-commit for report - {timestamp}"
COMPARE_COMMIT_MESSAGE = "Auto-commit for comparison - {timestamp}"
WORKING_INITIAL_COMMIT = "Initial commit - Working tree content"
PRODUCTION_INITIAL_COMMIT = "Initial commit - Production tree"

# Git output markers
NOTHING_TO_COMMIT_MARKERS = (
    "nothing to commit",
    "nothing added to commit",
)
FATAL_MARKERS = ("fatal:", "error:")
AUTH_ERROR_MARKERS = (
    "authentication failed",
    "could not read username",
    "could not read password",
    "bad credentials",
    "invalid username or password",
    "permission denied",
    "returned error: 401",
)
AUTHORIZATION_ERROR_MARKERS = (
    "returned error: 403",
    "permission to ",
)
NETWORK_ERROR_MARKERS = (
    "could not resolve host",
    "unable to access",
    "connection timed out",
    "connection refused",
    "network is unreachable",
)
REJECTED_MARKERS = (
    "[rejected]",
    "non-fast-forward",
    "fetch first",
    "stale info",
    "updates were rejected",
)


# Error codes
class ErrorCode:
    CONFIG_ERROR = "PT001"
    TOOL_MISSING = "PT002"
    TOOL_FATAL_ERROR = "PT003"
    IDENTITY_MISSING = "PT004"
    PATH_NOT_FOUND = "PT005"
    AUTHENTICATION_FAILED = "PT006"
    AUTHORIZATION_DENIED = "PT007"
    NETWORK_UNAVAILABLE = "PT008"
    REMOTE_REJECTED = "PT009"
    FILESYSTEM_ERROR = "PT010"
    VALIDATION_CONFLICT = "PT011"
    REMOTE_NOT_FOUND = "PT012"
    REPORT_EXISTS = "PT013"
    REQUIREMENTS_NOT_MET = "PT014"


# Environment variables
ENV_CONFIG_PATH = "PROMOTE_TOOL_CONFIG"
ENV_LOG_LEVEL = "PROMOTE_TOOL_LOG_LEVEL"
ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
ENV_LOCALAPPDATA = "LOCALAPPDATA"

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_INFO = "ℹ"
EMOJI_ARROW = "→"
EMOJI_FOLDER = "📁"
EMOJI_FILE = "📄"
EMOJI_MOVED_FROM = "📤"
EMOJI_ROCKET = "🚀"

# Status markers used by reports and tree rendering
STATUS_MARKERS = {
    "added": "🟢",
    "modified": "🔵",
    "deleted": "🔴",
    "moved": "🟡",
}

# Callout types used per file section in reports
STATUS_CALLOUTS = {
    "added": "abstract",
    "modified": "note",
    "deleted": "failure",
    "moved": "info",
}

# Interactive prompts
PROMPT_CONFIRM_PROMOTION = "Promote {total} change(s) to {branch}?"
PROMPT_IDENTITY_NAME = "Git user name"
PROMPT_IDENTITY_EMAIL = "Git user email"
