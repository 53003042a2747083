"""Core functionality for sfdeploy-tool"""

from .type_registry import TypeRegistry
from .classifier import Classifier
from .manifest_engine import ManifestEngine
from .path_resolver import PathResolver

__all__ = [
    "TypeRegistry",
    "Classifier",
    "ManifestEngine",
    "PathResolver",
]
