"""Centralized configuration for the QB Securiegnty backend."""

from qbs_config.settings import Settings, clear_settings_cache, get_settings

__all__ = ["Settings", "clear_settings_cache", "get_settings"]
