# sfdeploy_tool/services/__init__.py
"""Business logic services for sfdeploy-tool"""

from .config_service import ConfigService
from .deploy_service import DeployService, FileReplicator

__all__ = [
    "ConfigService",
    "DeployService",
    "FileReplicator",
]
