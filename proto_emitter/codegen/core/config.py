"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files and protoc-style
parameter strings, providing defaults and validation for generator settings.
"""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)

# Optional-field support advertised to the host compiler.
FEATURE_PROTO3_OPTIONAL = 1

PATHS_IMPORT = "import"
PATHS_SOURCE_RELATIVE = "source_relative"


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Settings for one generation run."""

    # Banner and version markers
    plugin_name: str = "protoc-gen-emit"
    plugin_version: Optional[str] = None
    generate_version_markers: bool = True
    gen_version: int = 20

    # Reported upstream only
    supported_features: int = FEATURE_PROTO3_OPTIONAL

    # Output naming
    paths: str = PATHS_SOURCE_RELATIVE
    file_suffix: str = ".generated"

    # Body emission
    emit_declarations: bool = True

    # M<file>=<go import path> mappings
    import_path_overrides: Dict[str, str] = field(default_factory=dict)

    # Custom settings (unrecognized keys from config files)
    custom: Dict[str, Any] = field(default_factory=dict)


_BOOL_VALUES = {
    "true": True,
    "1": True,
    "yes": True,
    "false": False,
    "0": False,
    "no": False,
}


def parse_parameter(parameter: Optional[str]) -> Dict[str, Any]:
    """
    Parse a protoc plugin parameter string.

    ``"paths=import,generate_version_markers=false,Ma.proto=example.com/a"``
    becomes a dict of typed settings; ``M`` prefixed keys are collected
    into ``import_path_overrides``.

    Raises:
        ConfigError: On unknown keys or malformed values
    """
    settings: Dict[str, Any] = {}
    if not parameter:
        return settings

    known = {f.name: f for f in fields(GeneratorConfig)}
    overrides: Dict[str, str] = {}

    for item in parameter.split(","):
        item = item.strip()
        if not item:
            continue
        key, sep, value = item.partition("=")
        if key.startswith("M"):
            if not sep or not value:
                raise ConfigError(f"Invalid import path mapping: {item!r}")
            overrides[key[1:]] = value
            continue
        if key not in known or key in ("custom", "import_path_overrides"):
            raise ConfigError(f"Unknown parameter {key!r}")
        settings[key] = _coerce(key, value if sep else "true", known[key].type)

    if overrides:
        settings["import_path_overrides"] = overrides
    return settings


def _coerce(key: str, value: str, annotation: Any) -> Any:
    """Convert a parameter string to the type of the config field."""
    if annotation in (bool, "bool"):
        try:
            return _BOOL_VALUES[value.lower()]
        except KeyError:
            raise ConfigError(f"Invalid boolean for {key}: {value!r}") from None
    if annotation in (int, "int"):
        try:
            return int(value, 0)
        except ValueError:
            raise ConfigError(f"Invalid integer for {key}: {value!r}") from None
    return value


class ConfigManager:
    """Manages configuration loading and merging."""

    def get_config(
        self,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
        parameter: Optional[str] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration.

        Later sources win: defaults, then the JSON file, then the plugin
        parameter string, then explicit overrides.

        Args:
            custom_config: Explicit configuration overrides
            config_file: Path to JSON configuration file
            parameter: protoc-style parameter string

        Returns:
            Merged and validated configuration
        """
        base_config: Dict[str, Any] = {}

        if config_file:
            _merge(base_config, self._load_config_file(config_file))

        if parameter:
            _merge(base_config, parse_parameter(parameter))

        if custom_config:
            _merge(base_config, custom_config)

        config = self._dict_to_config(base_config)
        self.validate_config(config)
        return config

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded configuration from %s", path)
        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            logger.debug("Unrecognized configuration keys kept as custom: %s", sorted(custom_args))
            existing_custom = dict(config_args.get("custom", {}))
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def validate_config(self, config: GeneratorConfig) -> None:
        """
        Validate configuration.

        Raises:
            ConfigError: If a setting is out of range
        """
        if config.paths not in (PATHS_IMPORT, PATHS_SOURCE_RELATIVE):
            raise ConfigError(
                f"Invalid paths option {config.paths!r}: "
                f"expected {PATHS_IMPORT!r} or {PATHS_SOURCE_RELATIVE!r}"
            )

        if not isinstance(config.generate_version_markers, bool):
            raise ConfigError("generate_version_markers must be a boolean")

        if not isinstance(config.supported_features, int) or config.supported_features < 0:
            raise ConfigError("supported_features must be a non-negative integer")

        if not isinstance(config.gen_version, int) or config.gen_version < 0:
            raise ConfigError("gen_version must be a non-negative integer")

        if not config.plugin_name:
            raise ConfigError("plugin_name cannot be empty")


def _merge(target: Dict[str, Any], source: Dict[str, Any]) -> None:
    """Merge settings, combining import path mappings instead of replacing them."""
    for key, value in source.items():
        if key == "import_path_overrides" and key in target:
            merged = dict(target[key])
            merged.update(value)
            target[key] = merged
        else:
            target[key] = value


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
    parameter: Optional[str] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Explicit configuration overrides
        config_file: Path to JSON configuration file
        parameter: protoc-style parameter string

    Returns:
        Merged configuration
    """
    manager = get_config_manager()
    return manager.get_config(custom_config, config_file, parameter)
