"""Exception definitions for sfdeploy-tool"""

from typing import Optional

from ..constants import ErrorCode, Phase


class SfDeployError(Exception):
    """Base exception for sfdeploy-tool"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class RegistryError(SfDeployError):
    """Metadata type registry could not be loaded"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.REGISTRY_LOAD_FAILED)


class ConfigError(SfDeployError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class MissingParameterError(ConfigError):
    """Required environment value is missing"""

    def __init__(self, name: str):
        super().__init__(f"Missing required parameter: {name}")
        self.error_code = ErrorCode.MISSING_REQUIRED_PARAMETER
        self.name = name


class VcsError(SfDeployError):
    """Git command failed"""

    def __init__(self, message: str, command: Optional[str] = None):
        super().__init__(message, ErrorCode.VCS_FAILED)
        self.command = command


class ManifestWriteError(SfDeployError):
    """Manifest could not be serialized or written"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, ErrorCode.MANIFEST_WRITE_FAILED)
        self.path = path


class ReplicationError(SfDeployError):
    """Copying members into a staging directory failed"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, ErrorCode.REPLICATION_FAILED)
        self.path = path


class ArchiveError(SfDeployError):
    """Archive creation failed"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, ErrorCode.ARCHIVE_FAILED)
        self.path = path


class PhaseError(SfDeployError):
    """A failure raised while running one orchestration phase"""

    def __init__(self, phase: Phase, cause: BaseException, path: Optional[str] = None):
        message = f"{phase.value} failed: {cause}"
        super().__init__(message, getattr(cause, 'error_code', None) or ErrorCode.PHASE_FAILED)
        self.phase = phase
        self.cause = cause
        self.path = path if path is not None else getattr(cause, 'path', None)
