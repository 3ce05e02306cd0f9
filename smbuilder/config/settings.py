"""Configuration for the state machine builder.

Configuration can be loaded from a YAML file and is validated at startup.
Command-line flags take precedence over values from the file.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from smbuilder.generator.templates import HEADER_TEMPLATE_FILE, SOURCE_TEMPLATE_FILE
from smbuilder.utils.logging import LEVEL_MAP, LOG_FORMATS
from smbuilder.utils.result import ConfigError, Err, Ok, Result

DEFAULT_CONFIG_FILE = "smbuilder.yaml"


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "warn"
    format: str = "text"


@dataclass
class BuilderConfig:
    """
    Complete builder configuration.

    Attributes:
        logging: Log level and format
        output_root: Directory under which the default output directory
            (named after the input file) is created
        templates_dir: Optional directory with header.h.tmpl and
            source.c.tmpl replacing the embedded templates
    """

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output_root: Path = field(default_factory=lambda: Path("."))
    templates_dir: Optional[Path] = None

    @classmethod
    def from_yaml(cls, path: Path) -> Result["BuilderConfig", ConfigError]:
        """
        Load configuration from a YAML file.

        Relative paths in the file are resolved against the file's directory.

        Args:
            path: Path to YAML configuration file

        Returns:
            Result with loaded config or error
        """
        path = Path(path)

        if not path.exists():
            return Err(ConfigError(
                field="path",
                message=f"Configuration file not found: {path}",
            ))

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            return Err(ConfigError(
                field="yaml",
                message=f"Failed to parse YAML: {e}",
            ))
        except OSError as e:
            return Err(ConfigError(
                field="file",
                message=f"Failed to read config file: {e}",
            ))

        return cls.from_dict(data, base_dir=path.parent)

    @classmethod
    def from_dict(
        cls,
        data: Any,
        base_dir: Optional[Path] = None,
    ) -> Result["BuilderConfig", ConfigError]:
        """
        Create configuration from a dictionary.

        Args:
            data: Configuration dictionary
            base_dir: Directory relative paths are resolved against

        Returns:
            Result with loaded config or error
        """
        if not isinstance(data, dict):
            return Err(ConfigError(
                field="root",
                message=f"Expected a mapping, got {type(data).__name__}",
            ))

        logging_data = data.get("logging") or {}
        if not isinstance(logging_data, dict):
            return Err(ConfigError(field="logging", message="Expected a mapping"))

        logging_config = LoggingConfig(
            level=str(logging_data.get("level", "warn")),
            format=str(logging_data.get("format", "text")),
        )

        def resolve(value: Any) -> Path:
            value = Path(str(value))
            if base_dir is not None and not value.is_absolute():
                return Path(base_dir) / value
            return value

        templates_dir = data.get("templates_dir")

        config = cls(
            logging=logging_config,
            output_root=resolve(data.get("output_root", ".")),
            templates_dir=resolve(templates_dir) if templates_dir else None,
        )

        return Ok(config)

    def validate(self) -> Result[None, ConfigError]:
        """
        Validate configuration values.

        Returns:
            Result indicating success or validation error
        """
        if self.logging.level.lower() not in LEVEL_MAP:
            return Err(ConfigError(
                field="logging.level",
                message=f"Must be one of {', '.join(LEVEL_MAP)}, got {self.logging.level}",
            ))

        if self.logging.format not in LOG_FORMATS:
            return Err(ConfigError(
                field="logging.format",
                message=f"Must be one of {', '.join(LOG_FORMATS)}, got {self.logging.format}",
            ))

        if self.templates_dir is not None:
            if not self.templates_dir.is_dir():
                return Err(ConfigError(
                    field="templates_dir",
                    message=f"Templates directory not found: {self.templates_dir}",
                ))

            for file_name in (HEADER_TEMPLATE_FILE, SOURCE_TEMPLATE_FILE):
                if not (self.templates_dir / file_name).is_file():
                    return Err(ConfigError(
                        field="templates_dir",
                        message=f"Required template not found: {self.templates_dir / file_name}",
                    ))

        return Ok(None)

    def with_logging(
        self,
        level: Optional[str] = None,
        format_type: Optional[str] = None,
    ) -> "BuilderConfig":
        """
        Return a new config with logging values overridden.

        Args:
            level: Log level, kept from this config if None
            format_type: Log format, kept from this config if None

        Returns:
            New BuilderConfig
        """
        return replace(
            self,
            logging=LoggingConfig(
                level=level or self.logging.level,
                format=format_type or self.logging.format,
            ),
        )


def load_config(path: Optional[Path] = None) -> Result[BuilderConfig, ConfigError]:
    """
    Load configuration from a file or the standard location.

    An explicit path must exist. Without one, ./smbuilder.yaml is used when
    present and the defaults otherwise.

    Args:
        path: Configuration file

    Returns:
        Result with validated config or error
    """
    if path is None:
        default_path = Path(DEFAULT_CONFIG_FILE)
        if default_path.exists():
            result = BuilderConfig.from_yaml(default_path)
        else:
            result = Ok(BuilderConfig())
    else:
        result = BuilderConfig.from_yaml(path)

    if result.is_err():
        return result

    config = result.unwrap()

    validation_result = config.validate()
    if validation_result.is_err():
        return Err(validation_result.unwrap_err())

    return Ok(config)
