"""JXML configuration.

Settings come from ``jxml.toml`` and its overrides, merged into a validated
:class:`Config`.

Example:
    >>> from jxml.config import Config
    >>> config = Config.load()
    >>> config.build.template_suffix
    '.jxml'
"""

from jxml.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._config import Config
from ._layers import (
    PROJECT_CONFIG_NAME,
    ConfigLayer,
    LayerName,
    collect_layers,
    config_files,
    environment_layer,
    find_project_root,
    merge,
    read_toml,
    user_config_path,
)
from ._load import safe_load_config
from ._sections import (
    BuildConfig,
    ExpansionConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
)
from ._validation import (
    ValidationIssue,
    check_config_file,
    raise_for_issues,
    validate_config,
)

__all__ = [
    "PROJECT_CONFIG_NAME",
    "BuildConfig",
    "Config",
    "ConfigError",
    "ConfigLayer",
    "ConfigLoadError",
    "ConfigValidationError",
    "ExpansionConfig",
    "LayerName",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ValidationIssue",
    "check_config_file",
    "collect_layers",
    "config_files",
    "environment_layer",
    "find_project_root",
    "merge",
    "raise_for_issues",
    "read_toml",
    "safe_load_config",
    "user_config_path",
    "validate_config",
]
