"""
canvas-compiler config package public API.

File: src/canvas_compiler/config/__init__.py

Purpose
- Export compile settings, config loading/validation entrypoints and error types.
"""

from canvas_compiler.config.loader import (
    DEFAULT_CONFIG_FILE,
    ENV_PREFIX,
    ConfigLoadError,
    dump_effective_config,
    load_config,
)
from canvas_compiler.config.schema import (
    DEFAULT_CONFIG,
    CompilerConfig,
    ConfigSchemaVersion,
    ConfigValidationError,
    ConfigValidationIssue,
    ConfigValidationResult,
    assert_valid_config,
    compile_settings_from_config,
    default_config,
    merge_config,
    migration_guidance,
    validate_config,
)
from canvas_compiler.config.settings import (
    SETTING_NAMES,
    CompileSettings,
    SettingsError,
    coerce_settings,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "SETTING_NAMES",
    "CompileSettings",
    "CompilerConfig",
    "ConfigLoadError",
    "ConfigSchemaVersion",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "SettingsError",
    "assert_valid_config",
    "coerce_settings",
    "compile_settings_from_config",
    "default_config",
    "dump_effective_config",
    "load_config",
    "merge_config",
    "migration_guidance",
    "validate_config",
]
