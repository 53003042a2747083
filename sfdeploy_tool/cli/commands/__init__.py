# sfdeploy_tool/cli/commands/__init__.py
"""CLI commands"""

from . import build
from . import manifest
from . import classify
from . import registry

__all__ = [
    "build",
    "manifest",
    "classify",
    "registry",
]
