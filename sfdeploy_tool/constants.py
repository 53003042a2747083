"""Global constants for sfdeploy-tool"""

from enum import Enum

APP_NAME = "sfdeploy"
LOG_FORMAT = "%(message)s"

# Manifest format
METADATA_NAMESPACE = "http://soap.sforce.com/2006/04/metadata"
MANIFEST_ENCODING = "UTF-8"
MANIFEST_INDENT = "    "
PACKAGE_MANIFEST_FILE = "package.xml"
DESTRUCTIVE_MANIFEST_FILE = "destructiveChanges.xml"
WILDCARD_MEMBER = "*"

# Classification
COMPANION_MARKER = "-meta"
XML_TYPE = "XML"
INVALID_TYPE = "Invalid"
EMPTY_CONTAINER = "empty"
SENTINEL_TYPES = (XML_TYPE, INVALID_TYPE)

# Type registry document
REGISTRY_RESOURCE = "salesforce_metadata.xml"
REGISTRY_EXTENSION_TAG = "extension"
REGISTRY_VERSION_ATTRIBUTE = "API"

# Project identification
PROJECT_CONFIG_FILE = ".sfdeploy.yaml"

# Directory structure
DEFAULT_SOURCE_DIR = "src"
DEFAULT_STAGE_DIR = "sfdeploy"
DEFAULT_ARTIFACTS_DIR = ".sfdeploy/builds"
ROLLBACK_DIR = "rollback"
OUTPUTS_FILE = "sfdeploy.properties"

# Archive
ROLLBACK_ARCHIVE_FORMAT = "zip"

# Registry update
PACKAGE_UPDATE_COMMIT_MESSAGE = "Update package.xml with all declared metadata types"

# Outputs published for downstream jobs
OUTPUT_DEPLOY_STAGE = "SFDEPLOY_DEPLOY"
OUTPUT_ROLLBACK_ARCHIVE = "SFDEPLOY_ROLLBACK"

# Job runner environment (Jenkins git plugin names)
ENV_COMMIT = "GIT_COMMIT"
ENV_PREVIOUS_COMMIT = "GIT_PREVIOUS_SUCCESSFUL_COMMIT"
ENV_COMMITTER_NAME = "GIT_COMMITTER_NAME"
ENV_COMMITTER_EMAIL = "GIT_COMMITTER_EMAIL"
ENV_WORKSPACE = "WORKSPACE"
ENV_JOB_NAME = "JOB_NAME"
ENV_BUILD_TAG = "BUILD_TAG"
ENV_BUILD_NUMBER = "BUILD_NUMBER"

# Tool environment variables
ENV_CONFIG_PATH = "SFDEPLOY_CONFIG"
ENV_LOG_LEVEL = "SFDEPLOY_LOG_LEVEL"
ENV_FORCE_INITIAL_BUILD = "SFDEPLOY_FORCE_INITIAL_BUILD"
ENV_ROLLBACK_ENABLED = "SFDEPLOY_ROLLBACK_ENABLED"
ENV_UPDATE_PACKAGE_ENABLED = "SFDEPLOY_UPDATE_PACKAGE_ENABLED"

DEFAULT_JOB_NAME = "local"
DEFAULT_BUILD_NUMBER = "0"


class Phase(Enum):
    """Orchestration phases, in execution order"""
    RESOLVE_ENVIRONMENT = "resolve_environment"
    CHANGE_BASIS = "change_basis"
    CHANGE_SET = "change_set"
    MANIFEST = "manifest"
    REPLICATE = "replicate"
    ROLLBACK = "rollback"
    REGISTRY_UPDATE = "registry_update"
    PUBLISH = "publish"


# Error codes
class ErrorCode:
    REGISTRY_LOAD_FAILED = "SD001"
    CONFIG_FORMAT_ERROR = "SD002"
    MISSING_REQUIRED_PARAMETER = "SD003"
    VCS_FAILED = "SD004"
    REPLICATION_FAILED = "SD005"
    ARCHIVE_FAILED = "SD006"
    MANIFEST_WRITE_FAILED = "SD007"
    PHASE_FAILED = "SD008"


# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_PACKAGE = "📦"
EMOJI_ARROW = "→"
