"""Configuration helpers."""

from .settings import FixtureConfig, get_config

__all__ = ["FixtureConfig", "get_config"]
