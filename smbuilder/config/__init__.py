"""Configuration module for smbuilder."""

from smbuilder.config.settings import BuilderConfig, LoggingConfig, load_config

__all__ = ["BuilderConfig", "LoggingConfig", "load_config"]
