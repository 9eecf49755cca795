"""Core configuration and errors."""

from .config import LoaderSettings, get_settings

__all__ = ["LoaderSettings", "get_settings"]
