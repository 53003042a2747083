"""Configuration management service"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..api.exceptions import ConfigError
from ..constants import (
    ENV_CONFIG_PATH,
    ENV_FORCE_INITIAL_BUILD,
    ENV_ROLLBACK_ENABLED,
    ENV_UPDATE_PACKAGE_ENABLED,
    PROJECT_CONFIG_FILE,
)
from ..models.config import BuildOptions

logger = logging.getLogger(__name__)

# Environment switches and the options they set
ENV_SWITCHES = {
    ENV_FORCE_INITIAL_BUILD: 'force_initial_build',
    ENV_ROLLBACK_ENABLED: 'rollback_enabled',
    ENV_UPDATE_PACKAGE_ENABLED: 'update_package_enabled',
}

TRUE_VALUES = ('1', 'true', 'yes', 'on')
FALSE_VALUES = ('0', 'false', 'no', 'off', '')


def parse_switch(name: str, value: str) -> bool:
    """Parse a boolean environment value

    Raises:
        ConfigError: If the value is not a recognised boolean
    """
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean value for {name}: {value!r}")


class ConfigService:
    """Service for resolving build options

    Precedence, highest first: explicit overrides (CLI flags), environment
    switches, the project YAML file, built-in defaults.
    """

    def __init__(self,
                 workspace: Path,
                 config_path: Optional[Path] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """Initialize config service

        Args:
            workspace: Job workspace directory
            config_path: Explicit configuration file (optional)
            environ: Environment mapping (os.environ if None)
        """
        self.workspace = Path(workspace)
        self.environ = os.environ if environ is None else environ

        if config_path is None and self.environ.get(ENV_CONFIG_PATH):
            config_path = Path(self.environ[ENV_CONFIG_PATH])

        self.explicit = config_path is not None
        self.config_path = Path(config_path) if config_path else self.workspace / PROJECT_CONFIG_FILE

    def load_config(self) -> Dict[str, Any]:
        """Load configuration file

        Returns:
            Parsed options (empty if there is no default config file)

        Raises:
            ConfigError: If the file is unreadable or malformed, or an
                explicitly requested file does not exist
        """
        if not self.config_path.exists():
            if self.explicit:
                raise ConfigError(f"Configuration file not found: {self.config_path}")
            return {}

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file {self.config_path}: {e}") from e

        # Simple environment variable expansion
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file {self.config_path} must contain a mapping")

        logger.debug(f"Loaded configuration from {self.config_path}")
        return data

    def env_overrides(self) -> Dict[str, bool]:
        """Read option switches from the environment"""
        overrides = {}
        for name, option in ENV_SWITCHES.items():
            if name in self.environ:
                overrides[option] = parse_switch(name, self.environ[name])
        return overrides

    def resolve_options(self, overrides: Optional[Dict[str, Any]] = None) -> BuildOptions:
        """Resolve build options

        Args:
            overrides: Explicit values; None values are ignored

        Returns:
            Resolved BuildOptions

        Raises:
            ConfigError: If any source holds an invalid option
        """
        try:
            options = BuildOptions.from_dict(self.load_config())
            options = options.merged(self.env_overrides())
            options = options.merged(overrides or {})
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        return options
