"""Configuration package."""

from .settings import Settings, get_settings
from .emoji_system import load_emoji_config

__all__ = ["Settings", "get_settings", "load_emoji_config"]
