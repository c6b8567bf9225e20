"""Configuration module: exports Settings and load_settings."""

from hsu.config.loader import load_settings
from hsu.config.settings import Settings

__all__ = ["Settings", "load_settings"]
