"""Configuration package."""

from aosha.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
