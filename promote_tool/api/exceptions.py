"""Exception definitions for promote-tool API"""

from enum import Enum

from ..constants import ErrorCode


class ErrorKind(Enum):
    """Error kinds surfaced to callers"""
    TOOL_MISSING = "tool_missing"
    TOOL_FATAL_ERROR = "tool_fatal_error"
    IDENTITY_MISSING = "identity_missing"
    PATH_NOT_FOUND = "path_not_found"
    AUTHENTICATION_FAILED = "authentication_failed"
    AUTHORIZATION_DENIED = "authorization_denied"
    NETWORK_UNAVAILABLE = "network_unavailable"
    REMOTE_REJECTED = "remote_rejected"
    FILESYSTEM_ERROR = "filesystem_error"
    VALIDATION_CONFLICT = "validation_conflict"
    REMOTE_NOT_FOUND = "remote_not_found"
    CONFIGURATION = "configuration"


class FilesystemErrorKind(Enum):
    """Sub-classification of filesystem failures"""
    PERMISSION = "permission"
    NO_SPACE = "no_space"
    NOT_FOUND = "not_found"
    OTHER = "other"


class PromoteToolError(Exception):
    """Base exception for promote-tool"""

    kind: ErrorKind = ErrorKind.TOOL_FATAL_ERROR

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.phase = None

    def with_phase(self, phase) -> 'PromoteToolError':
        """Attach the phase or operation in which the error occurred"""
        self.phase = phase
        return self


class ConfigError(PromoteToolError):
    """Configuration error"""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_ERROR)


class ToolMissingError(PromoteToolError):
    """Version-control executable could not be found or run"""

    kind = ErrorKind.TOOL_MISSING

    def __init__(self, executable: str, message: str = None):
        if message is None:
            message = f"Git executable not found: {executable}"
        super().__init__(message, ErrorCode.TOOL_MISSING)
        self.executable = executable


class GitCommandError(PromoteToolError):
    """Git command failed with a fatal classification"""

    kind = ErrorKind.TOOL_FATAL_ERROR

    def __init__(self, command: str, stderr: str, returncode: int = 1,
                 error_code: str = ErrorCode.TOOL_FATAL_ERROR):
        message = f"Git command failed: {command}: {stderr.strip()}"
        super().__init__(message, error_code)
        self.command = command
        self.stderr = stderr
        self.returncode = returncode


class GitAuthenticationError(GitCommandError):
    """Remote refused the credentials used by git"""

    kind = ErrorKind.AUTHENTICATION_FAILED

    def __init__(self, command: str, stderr: str, returncode: int = 1):
        super().__init__(command, stderr, returncode, ErrorCode.AUTHENTICATION_FAILED)


class GitAuthorizationError(GitCommandError):
    """Credentials were accepted but lack access to the repository"""

    kind = ErrorKind.AUTHORIZATION_DENIED

    def __init__(self, command: str, stderr: str, returncode: int = 1):
        super().__init__(command, stderr, returncode, ErrorCode.AUTHORIZATION_DENIED)


class GitNetworkError(GitCommandError):
    """Remote could not be reached"""

    kind = ErrorKind.NETWORK_UNAVAILABLE

    def __init__(self, command: str, stderr: str, returncode: int = 1):
        super().__init__(command, stderr, returncode, ErrorCode.NETWORK_UNAVAILABLE)


class RemoteRejectedError(GitCommandError):
    """Push rejected because the remote history diverged"""

    kind = ErrorKind.REMOTE_REJECTED

    def __init__(self, command: str, stderr: str, returncode: int = 1):
        super().__init__(command, stderr, returncode, ErrorCode.REMOTE_REJECTED)


class IdentityMissingError(PromoteToolError):
    """Git user name or email not configured"""

    kind = ErrorKind.IDENTITY_MISSING

    def __init__(self, message: str = "Git user name or email not configured"):
        super().__init__(message, ErrorCode.IDENTITY_MISSING)


class PathNotFoundError(PromoteToolError):
    """Configured path does not exist"""

    kind = ErrorKind.PATH_NOT_FOUND

    def __init__(self, path: str, message: str = None):
        super().__init__(message or f"Path does not exist: {path}", ErrorCode.PATH_NOT_FOUND)
        self.path = path


class RequirementsNotMetError(PromoteToolError):
    """One or more environment requirements failed"""

    def __init__(self, failed, kind: ErrorKind):
        names = ", ".join(r.name for r in failed)
        super().__init__(f"Requirements not met: {names}", ErrorCode.REQUIREMENTS_NOT_MET)
        self.failed = list(failed)
        self.kind = kind


class RemoteHostError(PromoteToolError):
    """Remote hosting API error"""

    def __init__(self, message: str, status_code: int = None, error_code: str = None):
        super().__init__(message, error_code)
        self.status_code = status_code


class AuthenticationFailedError(RemoteHostError):
    """Token rejected by the hosting API"""

    kind = ErrorKind.AUTHENTICATION_FAILED

    def __init__(self, message: str = "Invalid or expired token", status_code: int = 401):
        super().__init__(message, status_code, ErrorCode.AUTHENTICATION_FAILED)


class AuthorizationDeniedError(RemoteHostError):
    """Token lacks the permissions required for the operation"""

    kind = ErrorKind.AUTHORIZATION_DENIED

    def __init__(self, message: str = "Token lacks required permissions", status_code: int = 403):
        super().__init__(message, status_code, ErrorCode.AUTHORIZATION_DENIED)


class RemoteNotFoundError(RemoteHostError):
    """Repository or merge request not found"""

    kind = ErrorKind.REMOTE_NOT_FOUND

    def __init__(self, message: str, status_code: int = 404):
        super().__init__(message, status_code, ErrorCode.REMOTE_NOT_FOUND)


class ValidationConflictError(RemoteHostError):
    """Hosting API rejected the operation for domain reasons"""

    kind = ErrorKind.VALIDATION_CONFLICT

    def __init__(self, message: str, status_code: int = 422):
        super().__init__(message, status_code, ErrorCode.VALIDATION_CONFLICT)


class NetworkUnavailableError(RemoteHostError):
    """Hosting API could not be reached"""

    kind = ErrorKind.NETWORK_UNAVAILABLE

    def __init__(self, message: str):
        super().__init__(message, None, ErrorCode.NETWORK_UNAVAILABLE)


class FilesystemError(PromoteToolError):
    """Classified filesystem error"""

    kind = ErrorKind.FILESYSTEM_ERROR

    def __init__(self, message: str, fs_kind: FilesystemErrorKind = FilesystemErrorKind.OTHER,
                 path: str = None, error_code: str = ErrorCode.FILESYSTEM_ERROR):
        super().__init__(message, error_code)
        self.fs_kind = fs_kind
        self.path = path


class SyncError(FilesystemError):
    """Directory synchronization failed"""

    def __init__(self, message: str, fs_kind: FilesystemErrorKind = FilesystemErrorKind.OTHER,
                 path: str = None, operation: str = None):
        super().__init__(message, fs_kind, path)
        self.operation = operation


class ReportStorageError(FilesystemError):
    """Report could not be persisted"""
    pass


class ReportExistsError(ReportStorageError):
    """Report file already exists"""

    def __init__(self, path: str):
        super().__init__(
            f"Report file already exists: {path}",
            FilesystemErrorKind.OTHER,
            path,
            ErrorCode.REPORT_EXISTS
        )
