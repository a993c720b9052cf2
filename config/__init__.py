"""Configuration management for Rewind."""

from .loader import SettingsLoader, load_settings
from .schema import RewindSettings

__all__ = ["RewindSettings", "SettingsLoader", "load_settings"]
